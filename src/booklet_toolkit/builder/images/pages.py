"""
Module: builder.images.pages

Purpose:
    Render source pages to raster images for capture. Source documents
    are PDFs (rendered with PyMuPDF) or plain images (opened with Pillow).

Key Functions:
    - render_pdf_page(): Render one PDF page to an RGB image
    - pdf_page_count(): Number of pages in a PDF
    - load_source_image(): Dispatch on file type

Dependencies:
    - fitz (PyMuPDF): PDF rendering
    - PIL.Image: Image handling

Used By:
    - builder.controller: capture_from_manifest()
"""

from __future__ import annotations

import logging
from pathlib import Path

import fitz
from PIL import Image

from .capture import CaptureError

logger = logging.getLogger(__name__)

# Matches the on-screen zoom the selections are usually drawn at
DEFAULT_RENDER_SCALE = 1.2

PDF_SUFFIXES = {".pdf"}


def render_pdf_page(pdf_path: Path, page_number: int, *, scale: float = DEFAULT_RENDER_SCALE) -> Image.Image:
    """
    Render a PDF page to an image.

    Args:
        pdf_path: Source PDF
        page_number: 1-based page number
        scale: Pixels per PDF point

    Returns:
        RGB image of the page

    Raises:
        CaptureError: If the file cannot be opened or the page does not exist

    Example:
        >>> img = render_pdf_page(Path("paper.pdf"), 1, scale=2.0)
        >>> img.mode
        'RGB'
    """
    if not scale > 0:
        raise CaptureError(f"Render scale must be positive: {scale}")
    try:
        with fitz.open(pdf_path) as doc:
            if not 1 <= page_number <= doc.page_count:
                raise CaptureError(
                    f"{pdf_path.name} has {doc.page_count} pages, requested page {page_number}"
                )
            page = doc[page_number - 1]
            pix = page.get_pixmap(matrix=fitz.Matrix(scale, scale), alpha=False)
            image = Image.frombytes("RGB", (pix.width, pix.height), pix.samples)
    except (OSError, RuntimeError, ValueError) as e:
        raise CaptureError(f"Cannot render {pdf_path} page {page_number}: {e}") from e

    logger.debug(f"Rendered {pdf_path.name} page {page_number} at {scale}x: {image.width}x{image.height}px")
    return image


def pdf_page_count(pdf_path: Path) -> int:
    """
    Number of pages in a PDF.

    Raises:
        CaptureError: If the file cannot be opened
    """
    try:
        with fitz.open(pdf_path) as doc:
            return doc.page_count
    except (OSError, RuntimeError, ValueError) as e:
        raise CaptureError(f"Cannot open {pdf_path}: {e}") from e


def load_source_image(path: Path, page: int = 1, *, scale: float = DEFAULT_RENDER_SCALE) -> Image.Image:
    """
    Load a source page as an image.

    PDFs are rendered at the given scale. Other files are opened as images;
    for those, page must be 1 and scale is ignored.

    Raises:
        CaptureError: If the source is missing or unreadable
    """
    if not path.exists():
        raise CaptureError(f"Source not found: {path}")

    if path.suffix.lower() in PDF_SUFFIXES:
        return render_pdf_page(path, page, scale=scale)

    if page != 1:
        raise CaptureError(f"{path.name} is a single image; requested page {page}")
    try:
        with Image.open(path) as img:
            return img.convert("RGB")
    except (OSError, Image.DecompressionBombError) as e:
        raise CaptureError(f"Cannot read image {path}: {e}") from e
