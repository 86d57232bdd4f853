"""
Module: template

Purpose:
    Provides the Template dataclass - booklet metadata printed in the
    first-page header plus the numbering style used for question labels.

Key Classes:
    - NumberingStyle: numeric ("1.") or alphabetic ("a)")
    - BookletKind: written / practice / screening (informational)
    - Template: Immutable template configuration

Dependencies:
    - dataclasses (std)
    - datetime (std)
    - enum (std)

Used By:
    - builder.layout.header: Header content
    - builder.layout.numbering: Label formatting
    - builder.controller: Required field validation, filename
"""

from __future__ import annotations

import datetime
from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Optional


class NumberingStyle(str, Enum):
    """Question label scheme."""

    NUMERIC = "numeric"
    ALPHABETIC = "alphabetic"


class BookletKind(str, Enum):
    """What the booklet is used for. Recorded in build metadata only."""

    WRITTEN = "written"
    PRACTICE = "practice"
    SCREENING = "screening"


@dataclass(frozen=True)
class Template:
    """
    Booklet template (immutable).

    Every text field may be empty and date/duration are optional; the
    layout engine renders placeholders or omits the corresponding line.

    Attributes:
        title: Booklet title
        institution_name: School or institution printed above the title
        group_label: Class/section label (e.g. "9-A")
        instructor_name: Instructor printed on the date line
        date: Exam date
        duration_minutes: Exam duration in minutes (positive)
        numbering_style: Label scheme for questions
        kind: Booklet kind

    Example:
        >>> template = Template(title="Algebra Quiz", numbering_style=NumberingStyle.ALPHABETIC)
        >>> template.has_date_line
        False
    """

    title: str = ""
    institution_name: str = ""
    group_label: str = ""
    instructor_name: str = ""
    date: Optional[datetime.date] = None
    duration_minutes: Optional[int] = None
    numbering_style: NumberingStyle = NumberingStyle.NUMERIC
    kind: BookletKind = BookletKind.WRITTEN

    def __post_init__(self) -> None:
        """Validate template on construction."""
        if self.duration_minutes is not None:
            if isinstance(self.duration_minutes, bool) or not isinstance(self.duration_minutes, int):
                raise ValueError(f"duration_minutes must be an integer: {self.duration_minutes!r}")
            if self.duration_minutes <= 0:
                raise ValueError(f"duration_minutes must be positive: {self.duration_minutes}")
        if not isinstance(self.numbering_style, NumberingStyle):
            raise ValueError(f"Unknown numbering style: {self.numbering_style!r}")
        if not isinstance(self.kind, BookletKind):
            raise ValueError(f"Unknown booklet kind: {self.kind!r}")

    @property
    def has_date_line(self) -> bool:
        """True if any of date, duration or instructor is set."""
        return bool(self.date or self.duration_minutes or self.instructor_name.strip())

    def missing_fields(self, required: tuple[str, ...]) -> list[str]:
        """
        Return the names in required that are blank on this template.

        Raises:
            ValueError: If a name is not a template field
        """
        known = {f.name for f in fields(self)}
        missing = []
        for name in required:
            if name not in known:
                raise ValueError(f"Unknown template field: {name}")
            value = getattr(self, name)
            if value is None or (isinstance(value, str) and not value.strip()):
                missing.append(name)
        return missing

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "institution_name": self.institution_name,
            "group_label": self.group_label,
            "instructor_name": self.instructor_name,
            "date": self.date.isoformat() if self.date else None,
            "duration_minutes": self.duration_minutes,
            "numbering_style": self.numbering_style.value,
            "kind": self.kind.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Template":
        """
        Deserialize a template.

        Raises:
            ValueError: If a value cannot be parsed
        """
        raw_date = data.get("date")
        duration = data.get("duration_minutes")
        return cls(
            title=data.get("title") or "",
            institution_name=data.get("institution_name") or "",
            group_label=data.get("group_label") or "",
            instructor_name=data.get("instructor_name") or "",
            date=datetime.date.fromisoformat(raw_date) if raw_date else None,
            duration_minutes=int(duration) if duration not in (None, "") else None,
            numbering_style=NumberingStyle(data.get("numbering_style", NumberingStyle.NUMERIC.value)),
            kind=BookletKind(data.get("kind", BookletKind.WRITTEN.value)),
        )
