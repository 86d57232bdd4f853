"""
Module: builder.layout.paginator

Purpose:
    Place question images into columns and pages.
    Placement is a pure reducer: every step takes the previous
    PlacementState and returns a new one.

Key Functions:
    - initial_state(): Page 1, left column, cursors below the full header
    - place_question(): One reducer step
    - paginate(): Fold the question list and assemble pages
    - stamp_footers(): Final pass, page numbers with the known total

Algorithm:
    For each question, in order:
    1. Resolve the placed height h; the slot needs h + spacing
    2. If the slot overflows the current column:
       - from the left column, switch right when the right column has room
       - otherwise start a new page (minimal header, cursors reset, left)
       - never open a new page while the current one is still empty;
         an oversize question is placed on the empty page
    3. Place label and image at the column cursor
    4. Advance that column's cursor by h + spacing
    5. Toggle the column for the next question

    Columns alternate strictly instead of filling the shortest column
    first, so questions read left to right, top to bottom.

    A question whose image or geometry is unusable is recorded as
    skipped; its column cursor advances by the fallback height and the
    column still toggles.

Dependencies:
    - builder.layout.header: Headers and footers
    - builder.layout.policy: Column count and sizing
    - builder.layout.numbering: Labels

Used By:
    - builder.layout.engine: layout()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from functools import reduce
from typing import Callable, Sequence

from PIL import Image

from booklet_toolkit.core.models.images import QuestionImage
from booklet_toolkit.core.models.questions import CapturedQuestion
from booklet_toolkit.core.models.selection import PlacementError
from booklet_toolkit.core.models.template import Template

from .config import LayoutConfig
from .errors import LayoutInvariantError
from .header import build_continuation_header, build_first_page_header, build_footer
from .models import (
    Document,
    Page,
    PageHeader,
    PlacedImage,
    SkippedQuestion,
    column_name,
)
from .numbering import format_label
from .policy import LayoutPolicy

logger = logging.getLogger(__name__)

ImageDecoder = Callable[[QuestionImage], Image.Image]


@dataclass(frozen=True)
class LayoutContext:
    """Everything a reducer step reads but never changes."""

    template: Template
    config: LayoutConfig
    policy: LayoutPolicy
    decoder: ImageDecoder


@dataclass(frozen=True)
class PlacementState:
    """
    Accumulator threaded through place_question().

    Attributes:
        page_index: Current page (1-based)
        column: Current column (0 = left)
        cursors: Next free Y per column on the current page
        number: Number the next placed question receives
        page_used: Whether anything (image or fallback) landed on the current page
        headers: Header of every page opened so far
        placed: Placed images so far
        skipped: Skipped questions so far
        warnings: Warning messages so far
    """

    page_index: int
    column: int
    cursors: tuple[float, ...]
    number: int = 1
    page_used: bool = False
    headers: tuple[PageHeader, ...] = ()
    placed: tuple[PlacedImage, ...] = ()
    skipped: tuple[SkippedQuestion, ...] = ()
    warnings: tuple[str, ...] = ()

    @property
    def cursor(self) -> float:
        """Cursor of the current column."""
        return self.cursors[self.column]


def initial_state(context: LayoutContext) -> PlacementState:
    """Page 1, left column, both cursors at the bottom of the full header."""
    column_count = context.policy.column_count
    header = build_first_page_header(context.template, context.config, column_count)
    return PlacementState(
        page_index=1,
        column=0,
        cursors=(header.content_top,) * column_count,
        headers=(header,),
    )


def place_question(
    state: PlacementState,
    question: CapturedQuestion,
    context: LayoutContext,
) -> PlacementState:
    """
    Reducer step: place one question.

    Args:
        state: State before this question
        question: Question to place
        context: Template, config, policy and decoder

    Returns:
        State after this question (placed or skipped)

    Raises:
        LayoutInvariantError: If computed geometry is inconsistent
    """
    config = context.config
    try:
        size = context.policy.resolve_size(question.selection, config)
        image = context.decoder(question.image)
    except PlacementError as e:
        return _skip(state, question, e, context)

    slot_height = size.height + config.question_spacing
    state = _ensure_room(state, question, slot_height, context)

    column = state.column
    slot_top = state.cursor
    column_x = config.column_x(column, context.policy.column_count)
    label = format_label(state.number, context.template.numbering_style)

    placed = PlacedImage(
        question_id=question.id,
        order=question.order,
        image=image,
        page_index=state.page_index,
        column=column,
        x=column_x + config.label_gutter,
        y=slot_top + config.image_top_offset,
        width=size.width,
        height=size.height,
        number=state.number,
        number_label=label,
        label_x=column_x,
        label_y=slot_top + config.label_baseline_offset,
        slot_top=slot_top,
    )
    logger.debug(
        f"Placed {question.id} as {label} on page {state.page_index} "
        f"{column_name(column)} at y={slot_top:.1f} ({size.width:.1f}x{size.height:.1f}mm)"
    )

    return replace(
        state,
        column=_next_column(column, context),
        cursors=_advance(state.cursors, column, slot_height),
        number=state.number + 1,
        page_used=True,
        placed=state.placed + (placed,),
    )


def paginate(
    questions: Sequence[CapturedQuestion],
    context: LayoutContext,
) -> Document:
    """
    Lay out questions in order and assemble pages (footers not yet stamped).

    Args:
        questions: Questions in booklet order
        context: Template, config, policy and decoder

    Returns:
        Document without footers
    """
    state = reduce(
        lambda acc, question: place_question(acc, question, context),
        questions,
        initial_state(context),
    )

    pages = []
    for page_index, header in enumerate(state.headers, start=1):
        pages.append(Page(
            index=page_index,
            header=header,
            placements=tuple(p for p in state.placed if p.page_index == page_index),
            column_count=context.policy.column_count,
        ))

    logger.info(
        f"Paginated {len(questions)} questions onto {len(pages)} pages "
        f"({len(state.placed)} placed, {len(state.skipped)} skipped)"
    )

    return Document(
        pages=tuple(pages),
        skipped=state.skipped,
        page_width=context.config.page_width,
        page_height=context.config.page_height,
        policy_name=context.policy.name,
        warnings=state.warnings,
    )


def stamp_footers(document: Document, config: LayoutConfig) -> Document:
    """
    Final pass: give every page its "{page}/{count}" footer.

    Runs after all pages exist so page_count is the real total.
    """
    page_count = document.page_count
    pages = tuple(
        replace(page, footer=build_footer(page.index, page_count, config))
        for page in document.pages
    )
    return replace(document, pages=pages)


def _ensure_room(
    state: PlacementState,
    question: CapturedQuestion,
    slot_height: float,
    context: LayoutContext,
) -> PlacementState:
    """Move to the next column or page if the slot overflows the current column."""
    bottom = context.config.usable_bottom
    if state.cursor + slot_height <= bottom:
        return state

    next_column = state.column + 1
    if next_column < context.policy.column_count and state.cursors[next_column] + slot_height <= bottom:
        logger.debug(f"{question.id} overflows {column_name(state.column)} column, using {column_name(next_column)}")
        return replace(state, column=next_column)

    if not state.page_used:
        message = (
            f"Question {question.id} needs {slot_height:.1f}mm but page {state.page_index} "
            f"only has {bottom - state.cursor:.1f}mm; placing it anyway"
        )
        logger.warning(message)
        return replace(state, warnings=state.warnings + (message,))

    # A fresh page is unused, so this recursion ends at the warning above
    return _ensure_room(_open_page(state, context), question, slot_height, context)


def _open_page(state: PlacementState, context: LayoutContext) -> PlacementState:
    column_count = context.policy.column_count
    header = build_continuation_header(context.config, column_count)
    logger.debug(f"Starting page {state.page_index + 1}")
    return replace(
        state,
        page_index=state.page_index + 1,
        column=0,
        cursors=(header.content_top,) * column_count,
        page_used=False,
        headers=state.headers + (header,),
    )


def _skip(
    state: PlacementState,
    question: CapturedQuestion,
    error: PlacementError,
    context: LayoutContext,
) -> PlacementState:
    """Record a failed question and reserve the fallback height."""
    column = state.column
    logger.warning(f"Skipping question {question.id} (order {question.order}): {error}")
    skipped = SkippedQuestion(
        question_id=question.id,
        order=question.order,
        reason=error.reason,
        detail=str(error),
        page_index=state.page_index,
        column=column,
    )
    return replace(
        state,
        column=_next_column(column, context),
        cursors=_advance(state.cursors, column, context.config.fallback_height),
        page_used=True,
        skipped=state.skipped + (skipped,),
    )


def _next_column(column: int, context: LayoutContext) -> int:
    return (column + 1) % context.policy.column_count


def _advance(cursors: tuple[float, ...], column: int, amount: float) -> tuple[float, ...]:
    if amount < 0:
        raise LayoutInvariantError(f"Negative cursor advance: {amount}")
    return cursors[:column] + (cursors[column] + amount,) + cursors[column + 1:]
