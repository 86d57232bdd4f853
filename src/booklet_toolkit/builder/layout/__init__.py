"""
Module: builder.layout

Purpose:
    Layout and pagination engine.
    Converts an ordered list of captured questions into positioned
    page layouts with headers, numbering and footers.

Key Functions:
    - layout(): Main entry point
    - place_question(): Single placement step
    - resolve_image_size(): Image scaling

Key Classes:
    - LayoutConfig: Page geometry
    - LayoutPolicy: Column count and sizing strategy
    - Document / Page / PlacedImage: Layout result

Dependencies:
    - PIL: Decoded images carried on placements
    - booklet_toolkit.core.models: CapturedQuestion, Template

Used By:
    - builder.controller: Main build controller
    - builder.output.renderer: Draws Documents
"""

from .config import A4_HEIGHT_MM, A4_WIDTH_MM, HeaderLabels, LayoutConfig
from .errors import InputError, LayoutError, LayoutInvariantError
from .models import (
    Document,
    HeaderKind,
    HeaderRule,
    HeaderText,
    Page,
    PageFooter,
    PageHeader,
    PlacedImage,
    SkippedQuestion,
    TextAlign,
    column_name,
)
from .sizing import ImageSize, SizePolicy, resolve_image_size
from .policy import (
    DEFAULT_POLICY,
    POLICY_NAMES,
    LayoutPolicy,
    SingleColumnPolicy,
    TwoColumnPolicy,
    get_policy,
)
from .numbering import alphabetic_index, format_label
from .paginator import LayoutContext, PlacementState, initial_state, paginate, place_question, stamp_footers
from .engine import layout, validate_questions

__all__ = [
    # Config
    "A4_WIDTH_MM",
    "A4_HEIGHT_MM",
    "HeaderLabels",
    "LayoutConfig",
    # Errors
    "LayoutError",
    "InputError",
    "LayoutInvariantError",
    # Models
    "Document",
    "Page",
    "PageHeader",
    "PageFooter",
    "HeaderKind",
    "HeaderText",
    "HeaderRule",
    "TextAlign",
    "PlacedImage",
    "SkippedQuestion",
    "column_name",
    # Sizing and policy
    "SizePolicy",
    "ImageSize",
    "resolve_image_size",
    "LayoutPolicy",
    "TwoColumnPolicy",
    "SingleColumnPolicy",
    "DEFAULT_POLICY",
    "POLICY_NAMES",
    "get_policy",
    # Numbering
    "alphabetic_index",
    "format_label",
    # Placement
    "LayoutContext",
    "PlacementState",
    "initial_state",
    "place_question",
    "paginate",
    "stamp_footers",
    "layout",
    "validate_questions",
]
