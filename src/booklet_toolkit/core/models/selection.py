"""
Module: selection

Purpose:
    Provides the SelectionRect dataclass - the rectangle a user drew over a
    source page, expressed in source pixel space. Its aspect ratio drives
    image scaling in the layout engine.

Key Functions:
    - SelectionRect.aspect_ratio: height / width, validated
    - SelectionRect.from_drag(): Normalize a pointer drag into a rectangle
    - SelectionRect.scaled(factor): Convert between display and source space
    - SelectionRect.to_dict() / SelectionRect.from_dict(): Serialization

Dependencies:
    - dataclasses (std)
    - math (std)

Used By:
    - core.models.questions.CapturedQuestion
    - builder.images.capture
    - builder.layout.sizing
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any


class PlacementError(Exception):
    """
    A single question cannot be placed.

    Recovered per item by the layout engine: the question is recorded as
    skipped and layout continues.
    """

    reason = "placement_failed"


class InvalidGeometryError(PlacementError):
    """Selection has zero, negative or non-finite dimensions or ratio."""

    reason = "invalid_geometry"


@dataclass(frozen=True, slots=True)
class SelectionRect:
    """
    Selected region in source pixel space.

    Construction never fails on degenerate sizes: callers may hand the
    engine a zero-width selection, which is then skipped at placement time.

    Attributes:
        x: Left edge in pixels
        y: Top edge in pixels
        width: Width in pixels
        height: Height in pixels

    Example:
        >>> rect = SelectionRect(10, 20, 200, 100)
        >>> rect.aspect_ratio
        0.5
    """

    x: float
    y: float
    width: float
    height: float

    @property
    def is_degenerate(self) -> bool:
        """True if the rectangle cannot define an aspect ratio."""
        if not (
            math.isfinite(self.width)
            and math.isfinite(self.height)
            and self.width > 0
            and self.height > 0
        ):
            return True
        # Finite sides can still give a ratio that underflows or overflows
        ratio = self.height / self.width
        return not (math.isfinite(ratio) and ratio > 0)

    @property
    def aspect_ratio(self) -> float:
        """
        Height divided by width.

        Raises:
            InvalidGeometryError: If either side is not strictly positive
                or not finite, or the ratio itself is 0 or infinite.
        """
        if self.is_degenerate:
            raise InvalidGeometryError(
                f"Selection has invalid geometry: {self.width}x{self.height}"
            )
        return self.height / self.width

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def scaled(self, factor: float) -> "SelectionRect":
        """Return a copy with every coordinate multiplied by factor."""
        if not factor > 0:
            raise ValueError(f"Scale factor must be positive: {factor}")
        return SelectionRect(
            x=self.x * factor,
            y=self.y * factor,
            width=self.width * factor,
            height=self.height * factor,
        )

    @classmethod
    def from_drag(cls, x0: float, y0: float, x1: float, y1: float) -> "SelectionRect":
        """
        Build a rectangle from two drag corners in any direction.

        Example:
            >>> SelectionRect.from_drag(50, 80, 10, 20)
            SelectionRect(x=10, y=20, width=40, height=60)
        """
        return cls(
            x=min(x0, x1),
            y=min(y0, y1),
            width=abs(x1 - x0),
            height=abs(y1 - y0),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SelectionRect":
        return cls(
            x=data.get("x", 0),
            y=data.get("y", 0),
            width=data["width"],
            height=data["height"],
        )
