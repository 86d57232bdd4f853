"""
Module: builder.output

Purpose:
    PDF rendering and output naming.
    Converts laid-out Documents to PDF files or bytes using ReportLab.

Key Functions:
    - render_to_pdf(): Render a document to a file
    - render_to_bytes(): Render a document in memory
    - build_filename(): Output filename from title and date

Dependencies:
    - reportlab: PDF generation
    - PIL: Image handling
    - builder.layout.models: Document

Used By:
    - builder.controller: Pipeline orchestration
"""

from .renderer import render_to_bytes, render_to_pdf
from .filename import build_filename

__all__ = [
    "render_to_pdf",
    "render_to_bytes",
    "build_filename",
]
