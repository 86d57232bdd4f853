"""
Module: builder.layout.models

Purpose:
    Data models for booklet layout.
    Immutable dataclasses representing placed images, headers, footers,
    pages and the final document.

Key Classes:
    - PlacedImage: Question image positioned on a page
    - HeaderText / HeaderRule / PageHeader: Header drawing instructions
    - PageFooter: "{page}/{count}" stamp
    - Page: Complete page layout
    - SkippedQuestion: Question that failed to place
    - Document: Final layout output

Dependencies:
    - PIL: Image type
    - dataclasses (std)

Used By:
    - builder.layout.paginator: Creates Pages
    - builder.output.renderer: Draws Documents
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional

from PIL import Image


COLUMN_NAMES = ("left", "right")


def column_name(index: int) -> str:
    """Human-readable column name for logs and metadata."""
    return COLUMN_NAMES[index] if index < len(COLUMN_NAMES) else f"column {index + 1}"


@dataclass(frozen=True)
class PlacedImage:
    """
    A question image positioned on a page.

    Attributes:
        question_id: Source question id
        order: Source question order
        image: Decoded PIL image
        page_index: 1-based page number
        column: Column index (0 = left)
        x: Image left edge (mm)
        y: Image top edge (mm)
        width: Placed width (mm)
        height: Placed height (mm)
        number: Sequential question number (1-based, placed questions only)
        number_label: Formatted label ("3." or "c)")
        label_x: Label left edge (mm)
        label_y: Label baseline (mm)
        slot_top: Column cursor before placement (mm)

    Example:
        >>> placed.bottom
        71.0  # y + height
    """

    question_id: str
    order: int
    image: Image.Image = field(compare=False, repr=False)
    page_index: int
    column: int
    x: float
    y: float
    width: float
    height: float
    number: int
    number_label: str
    label_x: float
    label_y: float
    slot_top: float

    @property
    def bottom(self) -> float:
        """Bottom Y coordinate (y + height)."""
        return self.y + self.height

    @property
    def aspect_ratio(self) -> float:
        return self.height / self.width

    @property
    def geometry(self) -> tuple[int, int, float, float, float, float]:
        """(page, column, x, y, width, height) for determinism checks."""
        return (self.page_index, self.column, self.x, self.y, self.width, self.height)


class TextAlign(str, Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


@dataclass(frozen=True)
class HeaderText:
    """Text drawn at a baseline position."""

    text: str
    x: float
    y: float
    font_size: float
    bold: bool = False
    align: TextAlign = TextAlign.LEFT


@dataclass(frozen=True)
class HeaderRule:
    """Straight line from (x1, y1) to (x2, y2)."""

    x1: float
    y1: float
    x2: float
    y2: float
    line_width: float


class HeaderKind(str, Enum):
    FULL = "full"
    MINIMAL = "minimal"


@dataclass(frozen=True)
class PageHeader:
    """
    Header drawing instructions for one page.

    Attributes:
        kind: FULL on page 1, MINIMAL afterwards
        content_top: Column cursor start below the header
        texts: Text items
        rules: Lines (underlines, separators)
    """

    kind: HeaderKind
    content_top: float
    texts: tuple[HeaderText, ...] = ()
    rules: tuple[HeaderRule, ...] = ()


@dataclass(frozen=True)
class PageFooter:
    """Page number stamp, centred at (x, y)."""

    page_index: int
    page_count: int
    x: float
    y: float

    @property
    def text(self) -> str:
        return f"{self.page_index}/{self.page_count}"


@dataclass(frozen=True)
class Page:
    """
    Complete layout for a single page.

    Attributes:
        index: Page number (1-based)
        header: Header drawing instructions
        placements: Placed images in placement (reading) order
        column_count: Number of columns on the page
        footer: Page number stamp, set by the final pass

    Example:
        >>> page.column(0)  # left column, top to bottom
        (PlacedImage(...), PlacedImage(...))
    """

    index: int
    header: PageHeader
    placements: tuple[PlacedImage, ...]
    column_count: int
    footer: Optional[PageFooter] = None

    def column(self, index: int) -> tuple[PlacedImage, ...]:
        """Placements of one column, top to bottom."""
        return tuple(p for p in self.placements if p.column == index)

    @property
    def columns(self) -> tuple[tuple[PlacedImage, ...], ...]:
        return tuple(self.column(i) for i in range(self.column_count))

    @property
    def placement_count(self) -> int:
        """Number of images on this page."""
        return len(self.placements)

    @property
    def is_empty(self) -> bool:
        """Check if page has no placements."""
        return len(self.placements) == 0


@dataclass(frozen=True)
class SkippedQuestion:
    """
    A question that could not be placed.

    Attributes:
        question_id: Source question id
        order: Source question order
        reason: Machine-readable reason ("invalid_geometry", "decode_failed", ...)
        detail: Human-readable message
        page_index: Page whose cursor absorbed the fallback height
        column: Column whose cursor absorbed the fallback height
    """

    question_id: str
    order: int
    reason: str
    detail: str
    page_index: int
    column: int


@dataclass(frozen=True)
class Document:
    """
    Final layout output with diagnostics.

    Attributes:
        pages: Tuple of Pages
        skipped: Questions that failed to place, in input order
        page_width: Page width (mm)
        page_height: Page height (mm)
        policy_name: Layout policy that produced the document
        warnings: Warning messages

    Example:
        >>> document.page_count
        2
        >>> [p.number_label for p in document.placements]
        ['a)', 'b)', 'c)']
    """

    pages: tuple[Page, ...]
    skipped: tuple[SkippedQuestion, ...] = ()
    page_width: float = 210.0
    page_height: float = 297.0
    policy_name: str = ""
    warnings: tuple[str, ...] = ()

    @property
    def page_count(self) -> int:
        """Number of pages in layout."""
        return len(self.pages)

    @property
    def placements(self) -> Iterator[PlacedImage]:
        """All placed images in document order."""
        for page in self.pages:
            yield from page.placements

    @property
    def placed_count(self) -> int:
        """Total number of placed images across all pages."""
        return sum(p.placement_count for p in self.pages)

    @property
    def question_page_map(self) -> dict[str, int]:
        """Mapping of question id to page number."""
        return {p.question_id: p.page_index for p in self.placements}
