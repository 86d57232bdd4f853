"""
Booklet Builder Package

Lays captured questions out into a two-column, multi-page booklet and
renders it to PDF.

Pipeline: Validate → Layout → Render → Metadata

Example:
    >>> from booklet_toolkit.builder import build_booklet, BuilderConfig
    >>> config = BuilderConfig(output_dir=Path("output"))
    >>> result = build_booklet(questions, template, config)
"""

from .config import BuilderConfig
from .controller import BuildError, BuildResult, build_booklet, capture_from_manifest, preview_booklet

__all__ = [
    "BuilderConfig",
    "BuildError",
    "BuildResult",
    "build_booklet",
    "preview_booklet",
    "capture_from_manifest",
]
