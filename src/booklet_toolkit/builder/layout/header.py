"""
Module: builder.layout.header

Purpose:
    Build page header and footer drawing instructions.

    Page 1 carries the full header: institution, title, blank student
    fields with underline rules, a date/duration/instructor line, a
    full-width separator and the vertical column separator. Later pages
    carry only the column separator, anchored near the top.

Key Functions:
    - build_first_page_header(): Full header for page 1
    - build_continuation_header(): Minimal header for pages >= 2
    - build_footer(): "{page}/{count}" stamp

Dependencies:
    - core.models.template: Template
    - builder.layout.config: LayoutConfig

Used By:
    - builder.layout.paginator
"""

from __future__ import annotations

from booklet_toolkit.core.models.template import Template

from .config import LayoutConfig
from .models import (
    HeaderKind,
    HeaderRule,
    HeaderText,
    PageFooter,
    PageHeader,
    TextAlign,
)

# Baselines (mm from page top)
INSTITUTION_Y = 18.0
TITLE_Y = 26.0
INFO_Y = 38.0
INFO_ROW_GAP = 8.0
DATE_LINE_Y = 52.0

# Font sizes (pt)
INSTITUTION_FONT_SIZE = 16
TITLE_FONT_SIZE = 12
INFO_FONT_SIZE = 10
DATE_LINE_FONT_SIZE = 8

# Student field geometry (mm)
FIELD_LINE_OFFSET = 1.0          # underline sits this far below the baseline
NAME_LINE_START = 30.0           # from left margin
RIGHT_FIELD_LABEL_X = 35.0       # from right margin
RIGHT_FIELD_LINE_START = 25.0    # from right margin
CENTER_CLEARANCE = 5.0           # left underlines stop short of the page centre

# Rule widths (mm)
THIN_RULE = 0.3
THICK_RULE = 0.8


def build_first_page_header(
    template: Template,
    config: LayoutConfig,
    column_count: int,
) -> PageHeader:
    """
    Build the full page-1 header.

    Blank institution/title fall back to placeholders; blank date,
    duration and instructor are omitted.

    Args:
        template: Booklet template
        config: Layout configuration
        column_count: Columns on the page (one separator between each pair)

    Returns:
        PageHeader with content_top = config.first_content_top
    """
    labels = config.labels
    center_x = config.page_width / 2
    left_x = config.margin
    right_x = config.page_width - config.margin

    texts = [
        HeaderText(
            template.institution_name.strip() or labels.institution_placeholder,
            center_x, INSTITUTION_Y, INSTITUTION_FONT_SIZE, bold=True, align=TextAlign.CENTER,
        ),
        HeaderText(
            template.title.strip() or labels.title_placeholder,
            center_x, TITLE_Y, TITLE_FONT_SIZE, bold=True, align=TextAlign.CENTER,
        ),
    ]
    rules = []

    # Student fields: name/number on the left, class/score on the right
    second_row_y = INFO_Y + INFO_ROW_GAP
    right_label_x = right_x - RIGHT_FIELD_LABEL_X
    right_line_x = right_x - RIGHT_FIELD_LINE_START
    for row_y, left_label, right_label in (
        (INFO_Y, labels.name, labels.group),
        (second_row_y, labels.number, labels.score),
    ):
        texts.append(HeaderText(left_label, left_x, row_y, INFO_FONT_SIZE))
        texts.append(HeaderText(right_label, right_label_x, row_y, INFO_FONT_SIZE))
        line_y = row_y + FIELD_LINE_OFFSET
        rules.append(HeaderRule(left_x + NAME_LINE_START, line_y, center_x - CENTER_CLEARANCE, line_y, THIN_RULE))
        rules.append(HeaderRule(right_line_x, line_y, right_x, line_y, THIN_RULE))

    if template.group_label.strip():
        texts.append(HeaderText(template.group_label.strip(), right_line_x, INFO_Y, INFO_FONT_SIZE))

    texts.extend(_date_line(template, config))

    header_bottom = config.first_header_bottom
    rules.append(HeaderRule(left_x, header_bottom, right_x, header_bottom, THICK_RULE))
    rules.extend(_column_separators(config, column_count, header_bottom))

    return PageHeader(
        kind=HeaderKind.FULL,
        content_top=config.first_content_top,
        texts=tuple(texts),
        rules=tuple(rules),
    )


def build_continuation_header(config: LayoutConfig, column_count: int) -> PageHeader:
    """Build the minimal header used on pages after the first."""
    return PageHeader(
        kind=HeaderKind.MINIMAL,
        content_top=config.content_top,
        rules=tuple(_column_separators(config, column_count, config.header_bottom)),
    )


def build_footer(page_index: int, page_count: int, config: LayoutConfig) -> PageFooter:
    """
    Build the page-number stamp.

    Raises:
        ValueError: If page_index is outside 1..page_count
    """
    if not 1 <= page_index <= page_count:
        raise ValueError(f"Page {page_index} outside 1..{page_count}")
    return PageFooter(
        page_index=page_index,
        page_count=page_count,
        x=config.page_width / 2,
        y=config.page_height - config.footer_offset,
    )


def format_date_line(template: Template, config: LayoutConfig) -> tuple[str, str, str]:
    """
    Return (date, instructor, duration) strings; blank when the field is empty.

    Example:
        >>> format_date_line(Template(duration_minutes=40), LayoutConfig())
        ('', '', 'Duration: 40 min')
    """
    labels = config.labels
    date_text = f"{labels.date}: {template.date.strftime(labels.date_format)}" if template.date else ""
    instructor = template.instructor_name.strip()
    instructor_text = f"{labels.instructor}: {instructor}" if instructor else ""
    duration_text = (
        f"{labels.duration}: {template.duration_minutes} {labels.duration_unit}"
        if template.duration_minutes
        else ""
    )
    return date_text, instructor_text, duration_text


def _date_line(template: Template, config: LayoutConfig) -> list[HeaderText]:
    date_text, instructor_text, duration_text = format_date_line(template, config)
    items = []
    if date_text:
        items.append(HeaderText(date_text, config.margin, DATE_LINE_Y, DATE_LINE_FONT_SIZE))
    if instructor_text:
        items.append(HeaderText(
            instructor_text, config.page_width / 2, DATE_LINE_Y, DATE_LINE_FONT_SIZE,
            align=TextAlign.CENTER,
        ))
    if duration_text:
        items.append(HeaderText(
            duration_text, config.page_width - config.margin, DATE_LINE_Y, DATE_LINE_FONT_SIZE,
            align=TextAlign.RIGHT,
        ))
    return items


def _column_separators(config: LayoutConfig, column_count: int, top: float) -> list[HeaderRule]:
    bottom = config.page_height - config.separator_bottom_inset
    return [
        HeaderRule(x, top, x, bottom, THIN_RULE)
        for x in config.separator_xs(column_count)
    ]
