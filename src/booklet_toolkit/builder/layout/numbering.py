"""
Module: builder.layout.numbering

Purpose:
    Format question labels for the selected numbering style.

Key Functions:
    - format_label(): "3." (numeric) or "c)" (alphabetic)
    - alphabetic_index(): 1 -> a, 26 -> z, 27 -> aa, 28 -> ab, ...

Used By:
    - builder.layout.paginator: Label for each placed question
"""

from __future__ import annotations

from string import ascii_lowercase

from booklet_toolkit.core.models.template import NumberingStyle


def alphabetic_index(number: int) -> str:
    """
    Spreadsheet-style letters for a 1-based number.

    Continues past z as aa, ab, ... az, ba, ... zz, aaa.

    Example:
        >>> [alphabetic_index(n) for n in (1, 26, 27, 52, 53, 702, 703)]
        ['a', 'z', 'aa', 'az', 'ba', 'zz', 'aaa']
    """
    if number < 1:
        raise ValueError(f"Label number must be >= 1: {number}")
    letters = []
    while number > 0:
        number, remainder = divmod(number - 1, 26)
        letters.append(ascii_lowercase[remainder])
    return "".join(reversed(letters))


def format_label(number: int, style: NumberingStyle) -> str:
    """
    Label text for the number-th placed question.

    Example:
        >>> format_label(3, NumberingStyle.NUMERIC)
        '3.'
        >>> format_label(3, NumberingStyle.ALPHABETIC)
        'c)'
    """
    if number < 1:
        raise ValueError(f"Label number must be >= 1: {number}")
    if style is NumberingStyle.ALPHABETIC:
        return f"{alphabetic_index(number)})"
    return f"{number}."
