"""
Module: builder.layout.engine

Purpose:
    Entry point of the layout engine. Validates the question list,
    runs the placement reducer, stamps footers and checks the finished
    document. Performs no I/O.

Key Functions:
    - layout(): Questions + template -> Document
    - validate_questions(): Input checks, returns questions sorted by order

Dependencies:
    - builder.layout.paginator: Placement reducer
    - builder.images.provider: Default image decoder

Used By:
    - builder.controller: build_booklet(), preview_booklet()
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from booklet_toolkit.builder.images.provider import decode_image
from booklet_toolkit.core.models.questions import CapturedQuestion
from booklet_toolkit.core.models.template import Template

from .config import LayoutConfig
from .errors import InputError, LayoutInvariantError
from .models import Document
from .paginator import ImageDecoder, LayoutContext, paginate, stamp_footers
from .policy import DEFAULT_POLICY, LayoutPolicy

logger = logging.getLogger(__name__)

# Float tolerance when comparing stacked coordinates (mm)
_EPSILON = 1e-6


def layout(
    questions: Sequence[CapturedQuestion],
    template: Template,
    *,
    config: Optional[LayoutConfig] = None,
    policy: Optional[LayoutPolicy] = None,
    decoder: ImageDecoder = decode_image,
) -> Document:
    """
    Lay out captured questions into a paginated document.

    Deterministic: the same questions, template, config and policy always
    give the same geometry.

    Args:
        questions: Captured questions (any order; sorted by `order`)
        template: Booklet template
        config: Page geometry (default A4)
        policy: Layout policy (default two columns)
        decoder: Payload decoder

    Returns:
        Document with footers stamped and skipped questions listed

    Raises:
        InputError: If the question list is empty or inconsistent
        LayoutInvariantError: If the result violates a layout invariant

    Example:
        >>> document = layout(questions, Template(title="Quiz"))
        >>> document.page_count
        2
    """
    config = config or LayoutConfig()
    policy = policy or DEFAULT_POLICY

    ordered = validate_questions(questions)
    logger.info(f"Laying out {len(ordered)} questions with {policy.name} policy")

    context = LayoutContext(template=template, config=config, policy=policy, decoder=decoder)
    document = stamp_footers(paginate(ordered, context), config)

    _check_document(document, ordered)

    if document.skipped:
        logger.warning(f"{len(document.skipped)} question(s) skipped")
    logger.info(f"Layout complete: {document.page_count} pages, {document.placed_count} questions placed")
    return document


def validate_questions(questions: Sequence[CapturedQuestion]) -> list[CapturedQuestion]:
    """
    Check the question list and return it sorted by order.

    Raises:
        InputError: If the list is empty, ids repeat, or orders are not 1..n
    """
    if not questions:
        raise InputError("No questions to lay out")

    seen_ids = set()
    for question in questions:
        if question.id in seen_ids:
            raise InputError(f"Duplicate question id: {question.id}")
        seen_ids.add(question.id)

    ordered = sorted(questions, key=lambda q: q.order)
    orders = [q.order for q in ordered]
    if orders != list(range(1, len(ordered) + 1)):
        raise InputError(f"Question order must be contiguous from 1: {orders}")
    return ordered


def _check_document(document: Document, ordered: Sequence[CapturedQuestion]) -> None:
    """Verify footers, order preservation and column stacking."""
    page_count = document.page_count
    for page in document.pages:
        footer = page.footer
        if footer is None or footer.page_index != page.index or footer.page_count != page_count:
            raise LayoutInvariantError(f"Page {page.index} footer is missing or wrong")

        for column in page.columns:
            for above, below in zip(column, column[1:]):
                if below.y + _EPSILON < above.bottom:
                    raise LayoutInvariantError(
                        f"{below.question_id} overlaps {above.question_id} on page {page.index}"
                    )

    skipped_ids = {s.question_id for s in document.skipped}
    expected = [q.id for q in ordered if q.id not in skipped_ids]
    placed = [p.question_id for p in document.placements]
    if placed != expected:
        raise LayoutInvariantError("Placed questions are out of order")
