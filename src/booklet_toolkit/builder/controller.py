"""
Module: builder.controller

Purpose:
    Orchestrate the complete booklet building pipeline.
    Validate → Layout → Render → Metadata

Key Functions:
    - build_booklet(): Main entry point, writes the PDF
    - preview_booklet(): Same pipeline, PDF bytes in memory
    - capture_from_manifest(): Turn manifest capture requests into questions
    - metadata_path_for(): "<pdf stem>_metadata.json" next to a PDF

Key Classes:
    - BuildResult: Complete build result
    - BuildError: Exception for build failures

Dependencies:
    - builder.images: Capture from source pages
    - builder.layout: Layout and pagination
    - builder.output: PDF rendering and filename

Used By:
    - booklet_toolkit.cli
"""

from __future__ import annotations

import datetime
import json
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Sequence

from booklet_toolkit.core.models import CapturedQuestion, Template
from booklet_toolkit.core.utils.serialization import Manifest

from .config import BuilderConfig
from .images import capture_question, load_source_image
from .layout import Document, InputError, SkippedQuestion, column_name, layout
from .output import build_filename, render_to_bytes, render_to_pdf

logger = logging.getLogger(__name__)

# Metadata sits next to its PDF: "<pdf stem>_metadata.json"
METADATA_SUFFIX = "_metadata.json"


class BuildError(Exception):
    """Error during build pipeline."""
    pass


@dataclass(frozen=True)
class BuildResult:
    """
    Complete build result (immutable).

    Attributes:
        pdf_path: Path to generated PDF
        document: Laid-out document
        page_count: Number of pages generated
        placed_count: Number of questions placed
        skipped: Questions that could not be placed
        metadata: Build metadata dictionary
        metadata_path: Metadata JSON written next to the PDF (None if disabled)
        warnings: Any warnings during build

    Example:
        >>> result = build_booklet(questions, template, config)
        >>> print(f"Generated {result.page_count} pages with {result.placed_count} questions")
    """

    pdf_path: Path
    document: Document
    page_count: int
    placed_count: int
    skipped: tuple[SkippedQuestion, ...]
    metadata: dict
    metadata_path: Optional[Path]
    warnings: tuple[str, ...]


def build_booklet(
    questions: Sequence[CapturedQuestion],
    template: Template,
    config: BuilderConfig,
) -> BuildResult:
    """
    Build a booklet from start to finish.

    Pipeline:
    1. Check required template fields
    2. Lay out questions
    3. Render PDF into the output directory
    4. (Optional) Write build metadata

    Args:
        questions: Captured questions
        template: Booklet template
        config: Build configuration

    Returns:
        BuildResult with path and metadata

    Raises:
        InputError: If required fields are blank or questions are inconsistent
        LayoutInvariantError: If layout produced an inconsistent document
        BuildError: If the PDF or metadata cannot be written

    Example:
        >>> result = build_booklet(questions, Template(title="Quiz", instructor_name="A. Teacher"),
        ...                        BuilderConfig(output_dir=Path("output")))
        >>> result.pdf_path.name
        'Quiz_2024-03-09.pdf'
    """
    start_time = time.perf_counter()
    logger.info(f"Starting build of {template.title or 'untitled booklet'} ({len(questions)} questions)")

    document = _layout(questions, template, config)

    # Render
    output_dir = Path(config.output_dir)
    build_date = config.build_date or datetime.date.today()
    pdf_path = _unique_path(output_dir / build_filename(template.title, build_date))
    try:
        render_to_pdf(document, pdf_path, show_footer=config.show_footer, title=template.title)
    except OSError as e:
        raise BuildError(f"Failed to write PDF {pdf_path}: {e}") from e
    logger.info(f"Rendered booklet PDF: {pdf_path}")

    metadata = _build_metadata(template, config, document, pdf_path)
    metadata_path = None
    if config.write_metadata:
        metadata_path = metadata_path_for(pdf_path)
        _write_metadata(metadata_path, metadata)
        logger.info(f"Wrote build metadata to {metadata_path}")

    elapsed = time.perf_counter() - start_time
    logger.info(f"Booklet generation completed in {elapsed:.2f}s")

    return BuildResult(
        pdf_path=pdf_path,
        document=document,
        page_count=document.page_count,
        placed_count=document.placed_count,
        skipped=document.skipped,
        metadata=metadata,
        metadata_path=metadata_path,
        warnings=document.warnings,
    )


def preview_booklet(
    questions: Sequence[CapturedQuestion],
    template: Template,
    config: BuilderConfig,
) -> bytes:
    """
    Lay out and render a booklet without touching the disk.

    Returns:
        PDF bytes

    Raises:
        InputError: If required fields are blank or questions are inconsistent
    """
    document = _layout(questions, template, config)
    return render_to_bytes(document, show_footer=config.show_footer, title=template.title)


def capture_from_manifest(manifest: Manifest) -> list[CapturedQuestion]:
    """
    Capture every manifest entry from its source page.

    Each source page is rendered once at the default render scale, even
    when several selections come from it. Entry scales are display zoom
    factors relative to that raster. Question order follows manifest order.

    Raises:
        CaptureError: If a source is unreadable or a selection is invalid
    """
    pages = {}
    questions = []
    for order, entry in enumerate(manifest.entries, start=1):
        key = (entry.source, entry.page)
        if key not in pages:
            pages[key] = load_source_image(entry.source, entry.page)

        questions.append(capture_question(
            pages[key],
            entry.selection,
            order=order,
            source_page=entry.page,
            source_document_ref=str(entry.source),
            source_document_name=entry.source.name,
            display_scale=entry.scale,
            question_id=entry.id,
        ))

    logger.info(f"Captured {len(questions)} questions from {len({k[0] for k in pages})} source(s)")
    return questions


def _layout(
    questions: Sequence[CapturedQuestion],
    template: Template,
    config: BuilderConfig,
) -> Document:
    missing = template.missing_fields(config.required_template_fields)
    if missing:
        raise InputError(f"Required template fields are blank: {', '.join(missing)}")
    return layout(questions, template, config=config.layout, policy=config.layout_policy())


def _unique_path(path: Path) -> Path:
    """Append " (n)" to the stem until the path is free."""
    if not path.exists():
        return path
    counter = 1
    while path.with_name(f"{path.stem} ({counter}){path.suffix}").exists():
        counter += 1
    return path.with_name(f"{path.stem} ({counter}){path.suffix}")


def _build_metadata(
    template: Template,
    config: BuilderConfig,
    document: Document,
    pdf_path: Path,
) -> dict[str, Any]:
    """
    Build metadata dictionary for a generated booklet.

    Contains:
    - Template
    - Layout statistics
    - Per-question placement (page, column, label)
    - Skipped questions
    - Timestamp

    Returns:
        Metadata dictionary ready for JSON serialization

    Example:
        >>> metadata = _build_metadata(template, config, document, pdf_path)
        >>> metadata["page_count"]
        2
    """
    manifest = [
        {
            "question_id": p.question_id,
            "order": p.order,
            "label": p.number_label,
            "page": p.page_index,
            "column": column_name(p.column),
            "width_mm": round(p.width, 2),
            "height_mm": round(p.height, 2),
        }
        for p in document.placements
    ]
    skipped = [
        {
            "question_id": s.question_id,
            "order": s.order,
            "reason": s.reason,
            "detail": s.detail,
        }
        for s in document.skipped
    ]

    return {
        "generated_at": datetime.datetime.now().isoformat(timespec="seconds"),
        "pdf": pdf_path.name,
        "template": template.to_dict(),
        "policy": document.policy_name,
        "page_count": document.page_count,
        "placed_count": document.placed_count,
        "skipped_count": len(document.skipped),
        "show_footer": config.show_footer,
        "warnings": list(document.warnings),
        "manifest": manifest,
        "skipped": skipped,
    }


def metadata_path_for(pdf_path: Path) -> Path:
    """
    Metadata file belonging to a booklet PDF.

    Example:
        >>> metadata_path_for(Path("output/Quiz_2024-03-09 (1).pdf")).name
        'Quiz_2024-03-09 (1)_metadata.json'
    """
    return pdf_path.with_name(f"{pdf_path.stem}{METADATA_SUFFIX}")


def _write_metadata(metadata_path: Path, metadata: dict) -> None:
    """
    Write metadata JSON file next to its PDF.

    Raises:
        BuildError: If writing fails
    """
    try:
        with open(metadata_path, "w", encoding="utf-8") as f:
            json.dump(metadata, f, indent=2, ensure_ascii=False)
        logger.debug(f"Wrote metadata to {metadata_path}")
    except OSError as e:
        raise BuildError(f"Failed to write metadata: {e}") from e
