"""
Module: builder.output.filename

Purpose:
    Derive the output PDF filename from the booklet title and date.
"""

from __future__ import annotations

import datetime
from typing import Optional

DEFAULT_STEM = "booklet"


def build_filename(title: str, on: Optional[datetime.date] = None) -> str:
    """
    Build "<title>_YYYY-MM-DD.pdf".

    Characters other than letters, digits and whitespace are dropped
    (any script), the result is trimmed, and a blank title falls back to
    "booklet".

    Args:
        title: Booklet title
        on: Date stamp (default today)

    Example:
        >>> build_filename("Math Quiz #1!", datetime.date(2024, 3, 9))
        'Math Quiz 1_2024-03-09.pdf'
        >>> build_filename("Türkçe Sınavı", datetime.date(2024, 3, 9))
        'Türkçe Sınavı_2024-03-09.pdf'
    """
    on = on or datetime.date.today()
    stem = "".join(ch for ch in title if ch.isalnum() or ch.isspace()).strip()
    return f"{stem or DEFAULT_STEM}_{on.isoformat()}.pdf"
