"""
Module: booklet_toolkit.cli

Purpose:
    Command line entry point. Builds booklets from a JSON manifest that
    names the template and the regions to capture.

Commands:
    - build: Manifest -> PDF (+ <pdf stem>_metadata.json), or --preview to a single file
    - capture: Manifest -> saved question set (images inlined)

Example:
    $ booklet-builder build exam.json -o output
    $ booklet-builder capture exam.json -o questions.json
    $ booklet-builder build exam.json --questions questions.json
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from booklet_toolkit import __version__
from booklet_toolkit.builder import BuildError, BuilderConfig, build_booklet, capture_from_manifest, preview_booklet
from booklet_toolkit.builder.config import DEFAULT_REQUIRED_FIELDS
from booklet_toolkit.builder.images import CaptureError
from booklet_toolkit.builder.layout import POLICY_NAMES, LayoutError
from booklet_toolkit.core.schemas import ValidationError
from booklet_toolkit.core.utils.serialization import load_manifest, load_questions, save_questions

logger = logging.getLogger("booklet_toolkit")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="booklet-builder",
        description="Lay captured questions out into a two-column exam booklet",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show per-question layout decisions")
    sub = parser.add_subparsers(dest="command", required=True)

    build = sub.add_parser("build", help="Build a booklet PDF from a manifest")
    build.add_argument("manifest", type=Path, help="Manifest JSON file")
    build.add_argument("--output", "-o", type=Path, default=Path("output"), help="Output directory")
    build.add_argument("--questions", type=Path, help="Use a saved question set instead of capturing")
    build.add_argument("--policy", choices=POLICY_NAMES, default="two-column", help="Layout policy")
    build.add_argument("--preview", type=Path, help="Write the PDF to this file only (no metadata)")
    build.add_argument("--no-footer", action="store_true", help="Omit page numbers")
    build.add_argument("--no-metadata", action="store_true", help="Skip the metadata JSON")
    build.add_argument(
        "--allow-missing-fields",
        action="store_true",
        help="Build even if title or instructor are blank",
    )

    capture = sub.add_parser("capture", help="Capture manifest regions into a question set")
    capture.add_argument("manifest", type=Path, help="Manifest JSON file")
    capture.add_argument("--output", "-o", type=Path, required=True, help="Question set JSON to write")

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the CLI; returns the process exit code."""
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s",
    )

    try:
        if args.command == "capture":
            return _capture(args)
        return _build(args)
    except (ValidationError, CaptureError, LayoutError, BuildError, OSError) as e:
        logger.error(f"Error: {e}")
        return 1


def _capture(args: argparse.Namespace) -> int:
    manifest = load_manifest(args.manifest)
    questions = capture_from_manifest(manifest)
    save_questions(questions, args.output)
    logger.info(f"Saved {len(questions)} questions to {args.output}")
    return 0


def _build(args: argparse.Namespace) -> int:
    manifest = load_manifest(args.manifest)
    if args.questions:
        questions = list(load_questions(args.questions))
    else:
        questions = capture_from_manifest(manifest)

    config = BuilderConfig(
        output_dir=args.output,
        policy=args.policy,
        required_template_fields=() if args.allow_missing_fields else DEFAULT_REQUIRED_FIELDS,
        show_footer=not args.no_footer,
        write_metadata=not args.no_metadata,
    )

    if args.preview:
        pdf_bytes = preview_booklet(questions, manifest.template, config)
        try:
            args.preview.parent.mkdir(parents=True, exist_ok=True)
            args.preview.write_bytes(pdf_bytes)
        except OSError as e:
            raise BuildError(f"Failed to write preview {args.preview}: {e}") from e
        logger.info(f"Wrote preview to {args.preview}")
        return 0

    result = build_booklet(questions, manifest.template, config)
    for skipped in result.skipped:
        logger.warning(f"Skipped {skipped.question_id} ({skipped.reason}): {skipped.detail}")
    logger.info(f"Generated {result.page_count} pages with {result.placed_count} questions: {result.pdf_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
