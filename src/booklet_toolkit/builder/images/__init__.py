"""
Images Package

Capture of question regions from source pages and decoding of question
payloads for layout.
"""

from .provider import ImageDecodeError, decode_image
from .capture import CaptureError, MIN_SELECTION_PX, capture_question, crop_selection
from .pages import DEFAULT_RENDER_SCALE, load_source_image, pdf_page_count, render_pdf_page

__all__ = [
    "ImageDecodeError",
    "decode_image",
    "CaptureError",
    "MIN_SELECTION_PX",
    "capture_question",
    "crop_selection",
    "DEFAULT_RENDER_SCALE",
    "load_source_image",
    "pdf_page_count",
    "render_pdf_page",
]
