"""
Module: builder.config

Purpose:
    Configuration dataclass for the booklet build pipeline. Immutable
    configuration with validation on construction.

Key Classes:
    - BuilderConfig: Main configuration for building booklets

Dependencies:
    - dataclasses (std)
    - pathlib (std)
    - builder.layout: LayoutConfig, policy names

Used By:
    - builder.controller: Main build controller
    - booklet_toolkit.cli
"""

from __future__ import annotations

import datetime
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from booklet_toolkit.core.models.template import Template

from .layout.config import LayoutConfig
from .layout.policy import POLICY_NAMES, LayoutPolicy, get_policy

# The export refuses to run without a title and an instructor
DEFAULT_REQUIRED_FIELDS = ("title", "instructor_name")


@dataclass(frozen=True)
class BuilderConfig:
    """
    Configuration for building booklets (immutable).

    Attributes:
        output_dir: Directory the PDF and metadata are written to
        policy: Layout policy name ("two-column" or "single-column")
        required_template_fields: Template fields that must be non-blank
        show_footer: Draw "{page}/{count}" on each page
        write_metadata: Write "<pdf stem>_metadata.json" next to the PDF
        layout: Page geometry
        build_date: Date used in the filename (default today)

    Example:
        >>> config = BuilderConfig(output_dir=Path("output"))
        >>> config.layout_policy().column_count
        2
    """

    output_dir: Path
    policy: str = "two-column"
    required_template_fields: tuple[str, ...] = DEFAULT_REQUIRED_FIELDS

    # Output
    show_footer: bool = True
    write_metadata: bool = True

    # Layout
    layout: LayoutConfig = field(default_factory=LayoutConfig)
    build_date: Optional[datetime.date] = None

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.policy not in POLICY_NAMES:
            raise ValueError(f"policy must be one of {POLICY_NAMES}: {self.policy!r}")
        # Raises ValueError on unknown field names
        Template().missing_fields(tuple(self.required_template_fields))
        if not isinstance(self.layout, LayoutConfig):
            raise ValueError(f"layout must be a LayoutConfig: {type(self.layout).__name__}")

    def layout_policy(self) -> LayoutPolicy:
        """Build the configured layout policy."""
        return get_policy(self.policy)
