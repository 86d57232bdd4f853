"""
Module: builder.layout.errors

Purpose:
    Whole-run failures of the layout engine. Per-question failures are
    PlacementError subclasses (see core.models.selection and
    builder.images.provider) and never abort a run.

Key Classes:
    - LayoutError: Base class
    - InputError: Rejected before layout begins
    - LayoutInvariantError: Internal consistency failure, fatal
"""

from __future__ import annotations


class LayoutError(Exception):
    """Layout run failed as a whole."""
    pass


class InputError(LayoutError):
    """Question list or template rejected before layout begins."""
    pass


class LayoutInvariantError(LayoutError):
    """Computed geometry is inconsistent. No document is produced."""
    pass
