"""
Module: builder.output.renderer

Purpose:
    Render a laid-out Document to PDF using ReportLab.
    Each Page becomes one PDF page: header text and rules, question
    labels and images, then the page-number footer.

Key Functions:
    - render_to_pdf(): Write the PDF to a file
    - render_to_bytes(): Render the PDF in memory (preview)

Dependencies:
    - reportlab: PDF generation
    - PIL: Image handling
    - builder.layout.models: Document, Page

Used By:
    - builder.controller: build_booklet(), preview_booklet()
"""

from __future__ import annotations

import io
import logging
from functools import lru_cache
from pathlib import Path
from typing import BinaryIO, Union

from PIL import Image
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFError, TTFont
from reportlab.pdfgen import canvas

from booklet_toolkit.builder.layout.models import (
    Document,
    HeaderText,
    Page,
    PageFooter,
    PlacedImage,
    TextAlign,
)

logger = logging.getLogger(__name__)

# Label and footer styling
LABEL_FONT_SIZE = 10
FOOTER_FONT_SIZE = 10

# Unicode TrueType fonts (Turkish, accented names); Helvetica covers Latin-1 only
_UNICODE_FONT_CANDIDATES = (
    (
        "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
        "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
    ),
    (
        "/usr/share/fonts/dejavu/DejaVuSans.ttf",
        "/usr/share/fonts/dejavu/DejaVuSans-Bold.ttf",
    ),
    (
        "/Library/Fonts/Arial Unicode.ttf",
        "/Library/Fonts/Arial Unicode.ttf",
    ),
    (
        r"C:\Windows\Fonts\arial.ttf",
        r"C:\Windows\Fonts\arialbd.ttf",
    ),
)
_FALLBACK_FONTS = ("Helvetica", "Helvetica-Bold")


@lru_cache(maxsize=1)
def _register_fonts() -> tuple[str, str]:
    """
    Register a Unicode font pair once per process.

    Returns:
        (regular, bold) font names; Helvetica when no TrueType font is found
    """
    for regular_path, bold_path in _UNICODE_FONT_CANDIDATES:
        if not (Path(regular_path).is_file() and Path(bold_path).is_file()):
            continue
        try:
            pdfmetrics.registerFont(TTFont("BookletSans", regular_path))
            pdfmetrics.registerFont(TTFont("BookletSans-Bold", bold_path))
        except (TTFError, OSError) as e:
            logger.warning(f"Failed to register TrueType font {regular_path}: {e}")
            continue
        logger.debug(f"Registered TrueType font {regular_path}")
        return "BookletSans", "BookletSans-Bold"

    logger.warning("No Unicode TrueType font found, falling back to Helvetica")
    return _FALLBACK_FONTS


def render_to_pdf(
    document: Document,
    output_path: Path,
    *,
    show_footer: bool = True,
    title: str = "",
) -> None:
    """
    Render a document to a PDF file.

    Args:
        document: Laid-out document
        output_path: Path to write PDF
        show_footer: Draw the "{page}/{count}" footer
        title: PDF metadata title

    Raises:
        OSError: If PDF cannot be written

    Example:
        >>> render_to_pdf(document, Path("output/Quiz_2024-03-09.pdf"))
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)
    _render(document, str(output_path), show_footer=show_footer, title=title)
    logger.info(f"Rendered {document.page_count} pages to {output_path}")


def render_to_bytes(
    document: Document,
    *,
    show_footer: bool = True,
    title: str = "",
) -> bytes:
    """
    Render a document to PDF bytes in memory.

    Example:
        >>> render_to_bytes(document)[:5]
        b'%PDF-'
    """
    buf = io.BytesIO()
    _render(document, buf, show_footer=show_footer, title=title)
    logger.debug(f"Rendered {document.page_count} pages in memory ({buf.tell()} bytes)")
    return buf.getvalue()


def _render(
    document: Document,
    target: Union[str, BinaryIO],
    *,
    show_footer: bool,
    title: str,
) -> None:
    if document.page_count == 0:
        logger.warning("Empty document, creating empty PDF")

    regular, bold = _register_fonts()
    page_height_pt = document.page_height * mm

    c = canvas.Canvas(target, pagesize=(document.page_width * mm, page_height_pt))
    if title:
        c.setTitle(title)

    for page in document.pages:
        _render_page(c, page, page_height_pt, regular, bold, show_footer)
        c.showPage()

    c.save()


def _render_page(
    c: canvas.Canvas,
    page: Page,
    page_height_pt: float,
    regular: str,
    bold: str,
    show_footer: bool,
) -> None:
    """Draw header, placements and footer of one page."""
    header = page.header

    c.saveState()
    for rule in header.rules:
        c.setLineWidth(rule.line_width * mm)
        c.line(
            rule.x1 * mm, _transform_y(page_height_pt, rule.y1),
            rule.x2 * mm, _transform_y(page_height_pt, rule.y2),
        )
    c.restoreState()

    for text in header.texts:
        _draw_text(c, text, page_height_pt, bold if text.bold else regular)

    for placement in page.placements:
        _draw_placement(c, placement, page_height_pt, bold)

    if show_footer and page.footer is not None:
        _draw_footer(c, page.footer, page_height_pt, regular)


def _draw_text(c: canvas.Canvas, item: HeaderText, page_height_pt: float, font: str) -> None:
    c.setFont(font, item.font_size)
    x_pt = item.x * mm
    y_pt = _transform_y(page_height_pt, item.y)
    if item.align is TextAlign.CENTER:
        c.drawCentredString(x_pt, y_pt, item.text)
    elif item.align is TextAlign.RIGHT:
        c.drawRightString(x_pt, y_pt, item.text)
    else:
        c.drawString(x_pt, y_pt, item.text)


def _draw_placement(c: canvas.Canvas, placement: PlacedImage, page_height_pt: float, bold: str) -> None:
    """Draw the question label and its image."""
    c.setFont(bold, LABEL_FONT_SIZE)
    c.drawString(
        placement.label_x * mm,
        _transform_y(page_height_pt, placement.label_y),
        placement.number_label,
    )

    # Geometry already preserves the aspect ratio
    c.drawImage(
        _pil_to_reader(placement.image),
        placement.x * mm,
        _transform_y(page_height_pt, placement.y, placement.height),
        width=placement.width * mm,
        height=placement.height * mm,
    )


def _draw_footer(c: canvas.Canvas, footer: PageFooter, page_height_pt: float, font: str) -> None:
    c.setFont(font, FOOTER_FONT_SIZE)
    c.drawCentredString(footer.x * mm, _transform_y(page_height_pt, footer.y), footer.text)


def _pil_to_reader(img: Image.Image) -> ImageReader:
    """
    Convert PIL image to ReportLab ImageReader.

    Args:
        img: PIL Image object

    Returns:
        ImageReader for use with ReportLab
    """
    if img.mode not in ("RGB", "L", "RGBA"):
        img = img.convert("RGB")
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    buf.seek(0)
    return ImageReader(buf)


def _transform_y(page_height_pt: float, y_mm_top: float, height_mm: float = 0.0) -> float:
    """
    Convert a top-down millimetre Y coordinate to bottom-up PDF points.

    Args:
        page_height_pt: Page height in points
        y_mm_top: Y position from page top (mm)
        height_mm: Height of element (mm); 0 for baselines and lines

    Returns:
        Y position from bottom in points
    """
    return page_height_pt - (y_mm_top + height_mm) * mm
