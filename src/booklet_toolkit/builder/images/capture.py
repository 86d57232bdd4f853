"""
Module: builder.images.capture

Purpose:
    Turn a selection drawn over a rendered source page into a
    CapturedQuestion. The selection arrives in display coordinates
    together with the display scale; it is converted back to source
    pixels before cropping.

Key Functions:
    - capture_question(): Crop one selection into a CapturedQuestion
    - crop_selection(): Bounds-checked crop in source pixels

Key Classes:
    - CaptureError: Selection too small, out of bounds or unreadable source

Dependencies:
    - PIL: Cropping
    - booklet_toolkit.core.models: SelectionRect, QuestionImage, CapturedQuestion

Used By:
    - builder.controller: capture_from_manifest()
"""

from __future__ import annotations

import logging
import uuid
from typing import Optional

from PIL import Image

from booklet_toolkit.core.models import CapturedQuestion, QuestionImage, SelectionRect

logger = logging.getLogger(__name__)

# Selections narrower or shorter than this (display pixels) are treated as stray clicks
MIN_SELECTION_PX = 20


class CaptureError(Exception):
    """A selection cannot be turned into a question."""
    pass


def crop_selection(page_image: Image.Image, selection: SelectionRect) -> Image.Image:
    """
    Crop a selection out of a page image.

    Args:
        page_image: Rendered source page
        selection: Region in source pixels

    Returns:
        Cropped image (new copy, not a view)

    Raises:
        CaptureError: If the selection is degenerate or outside the image
    """
    if selection.is_degenerate:
        raise CaptureError(f"Selection has no area: {selection.width}x{selection.height}")

    box = (
        round(selection.x),
        round(selection.y),
        round(selection.right),
        round(selection.bottom),
    )
    if box[0] < 0 or box[1] < 0:
        raise CaptureError(f"Selection starts outside the page: ({box[0]}, {box[1]})")
    if box[2] > page_image.width or box[3] > page_image.height:
        raise CaptureError(
            f"Selection {box} exceeds page size {page_image.width}x{page_image.height}"
        )
    if box[2] <= box[0] or box[3] <= box[1]:
        raise CaptureError(f"Selection rounds to an empty crop: {box}")

    return page_image.crop(box)


def capture_question(
    page_image: Image.Image,
    selection: SelectionRect,
    *,
    order: int,
    source_page: int,
    source_document_ref: str,
    source_document_name: str = "",
    display_scale: float = 1.0,
    question_id: Optional[str] = None,
) -> CapturedQuestion:
    """
    Capture one question from a rendered page.

    Args:
        page_image: Rendered source page (source pixels)
        selection: Region in display coordinates
        order: Position in the booklet (1-based)
        source_page: Page number in the source document (1-based)
        source_document_ref: Opaque source reference
        source_document_name: Display name of the source
        display_scale: Display pixels per source pixel
        question_id: Identifier; a random one is generated when omitted

    Returns:
        CapturedQuestion whose selection is in source pixels

    Raises:
        CaptureError: If the selection is too small or outside the page

    Example:
        >>> q = capture_question(page, SelectionRect(0, 0, 300, 150),
        ...                      order=1, source_page=1, source_document_ref="doc")
        >>> q.selection.aspect_ratio
        0.5
    """
    if not display_scale > 0:
        raise CaptureError(f"Display scale must be positive: {display_scale}")
    if selection.width < MIN_SELECTION_PX or selection.height < MIN_SELECTION_PX:
        raise CaptureError(
            f"Selection too small: {selection.width}x{selection.height} "
            f"(minimum {MIN_SELECTION_PX}px)"
        )

    source_rect = selection.scaled(1 / display_scale)
    cropped = crop_selection(page_image, source_rect)

    question = CapturedQuestion(
        id=question_id or f"question_{uuid.uuid4().hex}",
        image=QuestionImage.from_pil(cropped),
        source_page=source_page,
        source_document_ref=source_document_ref,
        selection=source_rect,
        order=order,
        source_document_name=source_document_name,
    )
    logger.debug(
        f"Captured {question.id} from {source_document_name or source_document_ref} "
        f"page {source_page}: {cropped.width}x{cropped.height}px"
    )
    return question
