"""
Module: builder.layout.config

Purpose:
    Configuration for the booklet layout engine.
    Defines page dimensions, margins, header heights and spacing.
    All lengths are millimetres measured from the page's top-left corner.

Key Classes:
    - LayoutConfig: Immutable layout configuration
    - HeaderLabels: Printed captions and placeholders for the first-page header

Dependencies:
    - dataclasses (std)

Used By:
    - builder.layout.header: Header geometry
    - builder.layout.paginator: Column placement
    - builder.output.renderer: Page size
"""

from __future__ import annotations

from dataclasses import dataclass, field


# Standard A4 page dimensions in millimetres
A4_WIDTH_MM = 210.0
A4_HEIGHT_MM = 297.0


@dataclass(frozen=True)
class HeaderLabels:
    """
    Captions printed in the first-page header.

    Placeholders are used when the matching template field is blank.
    """

    institution_placeholder: str = "INSTITUTION NAME"
    title_placeholder: str = "EXAM TITLE"
    name: str = "NAME:"
    number: str = "NUMBER:"
    group: str = "CLASS:"
    score: str = "SCORE:"
    date: str = "Date"
    duration: str = "Duration"
    duration_unit: str = "min"
    instructor: str = "Instructor"
    date_format: str = "%d.%m.%Y"


@dataclass(frozen=True)
class LayoutConfig:
    """
    Configuration for booklet layout (immutable).

    Attributes:
        page_width: Page width (mm)
        page_height: Page height (mm)
        margin: Left and right margin (mm)
        margin_bottom: Distance from page bottom to the usable bottom edge (mm)
        column_gap: Horizontal gap between columns (mm)
        first_header_bottom: Y of the full-width rule closing the page-1 header
        first_header_gap: Space between that rule and the first question
        header_bottom: Top anchor of the column separator on later pages
        header_gap: Space between that anchor and the first question
        question_spacing: Vertical spacing added below every question
        fallback_height: Cursor advance for a question that failed to place
        label_gutter: Horizontal space reserved left of each image for its label
        image_top_offset: Image top relative to the column cursor
        label_baseline_offset: Label baseline relative to the column cursor
        separator_bottom_inset: Column separator stops this far above page bottom
        footer_offset: Page-number baseline distance from page bottom
        labels: Header captions

    Example:
        >>> config = LayoutConfig()
        >>> config.column_width(2)
        90.0
        >>> config.usable_bottom
        279.0
    """

    # Page dimensions
    page_width: float = A4_WIDTH_MM
    page_height: float = A4_HEIGHT_MM

    # Margins
    margin: float = 12.0
    margin_bottom: float = 18.0
    column_gap: float = 6.0

    # Header heights
    first_header_bottom: float = 58.0
    first_header_gap: float = 6.0
    header_bottom: float = 25.0
    header_gap: float = 5.0

    # Spacing
    question_spacing: float = 12.0
    fallback_height: float = 40.0

    # Label/image placement inside a column slot
    label_gutter: float = 10.0
    image_top_offset: float = 1.0
    label_baseline_offset: float = 6.0

    # Rules and footer
    separator_bottom_inset: float = 12.0
    footer_offset: float = 10.0

    labels: HeaderLabels = field(default_factory=HeaderLabels)

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.page_width <= 0:
            raise ValueError(f"page_width must be positive: {self.page_width}")
        if self.page_height <= 0:
            raise ValueError(f"page_height must be positive: {self.page_height}")
        if self.available_width <= 0:
            raise ValueError("Margins exceed page width")
        if self.column_gap < 0:
            raise ValueError(f"column_gap must be non-negative: {self.column_gap}")
        if self.question_spacing < 0:
            raise ValueError(f"question_spacing must be non-negative: {self.question_spacing}")
        if self.fallback_height < 0:
            raise ValueError(f"fallback_height must be non-negative: {self.fallback_height}")
        if self.first_content_top >= self.usable_bottom:
            raise ValueError("First-page header leaves no room for questions")
        if self.content_top >= self.usable_bottom:
            raise ValueError("Page header leaves no room for questions")

    @property
    def available_width(self) -> float:
        """Width available for content (excluding margins)."""
        return self.page_width - 2 * self.margin

    @property
    def usable_bottom(self) -> float:
        """Lowest Y a question slot may reach."""
        return self.page_height - self.margin_bottom

    @property
    def first_content_top(self) -> float:
        """Column cursor start on page 1."""
        return self.first_header_bottom + self.first_header_gap

    @property
    def content_top(self) -> float:
        """Column cursor start on pages after the first."""
        return self.header_bottom + self.header_gap

    def column_width(self, column_count: int) -> float:
        """Width of one column when the content area is split column_count ways."""
        if column_count < 1:
            raise ValueError(f"column_count must be >= 1: {column_count}")
        return (self.available_width - self.column_gap * (column_count - 1)) / column_count

    def column_x(self, index: int, column_count: int) -> float:
        """Left edge of column index (0 = left)."""
        if not 0 <= index < column_count:
            raise ValueError(f"Column {index} out of range for {column_count} columns")
        return self.margin + index * (self.column_width(column_count) + self.column_gap)

    def separator_xs(self, column_count: int) -> list[float]:
        """X positions of the vertical rules between columns."""
        return [
            self.column_x(i, column_count) - self.column_gap / 2
            for i in range(1, column_count)
        ]
