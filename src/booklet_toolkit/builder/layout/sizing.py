"""
Module: builder.layout.sizing

Purpose:
    Resolve the placed size of a question image from its selection aspect
    ratio and the column width. Aspect ratio is never distorted.

Key Functions:
    - resolve_image_size(): Apply the size policy to one selection

Key Classes:
    - SizePolicy: Sizing constants (preferred width, caps, floor)
    - ImageSize: Resolved width/height

Algorithm:
    1. width = min(column_width - inner_padding, preferred_width)
    2. height = ratio * width
    3. Cap height (larger cap for tall clips, ratio > threshold) and
       recompute width from the capped height
    4. Enforce the minimum width; height follows the ratio even if it
       then exceeds the page

Dependencies:
    - core.models.selection: SelectionRect, InvalidGeometryError

Used By:
    - builder.layout.policy: LayoutPolicy.resolve_size()
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from booklet_toolkit.core.models.selection import InvalidGeometryError, SelectionRect

from .errors import LayoutInvariantError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SizePolicy:
    """
    Image sizing constants in millimetres (immutable).

    Attributes:
        preferred_width: Width used when the column allows it
        max_height: Height cap for regular clips
        tall_max_height: Height cap for tall clips
        tall_aspect_threshold: Ratio (height / width) above which a clip is tall
        min_width: Readability floor
        inner_padding: Column width not available to the image
    """

    preferred_width: float = 85.0
    max_height: float = 70.0
    tall_max_height: float = 90.0
    tall_aspect_threshold: float = 2.0
    min_width: float = 45.0
    inner_padding: float = 12.0

    def __post_init__(self) -> None:
        """Validate policy on construction."""
        for name in ("preferred_width", "max_height", "tall_max_height", "tall_aspect_threshold", "min_width"):
            value = getattr(self, name)
            if not value > 0:
                raise ValueError(f"{name} must be positive: {value}")
        if self.inner_padding < 0:
            raise ValueError(f"inner_padding must be non-negative: {self.inner_padding}")
        if self.min_width > self.preferred_width:
            raise ValueError("min_width exceeds preferred_width")


@dataclass(frozen=True)
class ImageSize:
    width: float
    height: float

    @property
    def aspect_ratio(self) -> float:
        return self.height / self.width


def resolve_image_size(
    selection: SelectionRect,
    column_width: float,
    policy: SizePolicy,
) -> ImageSize:
    """
    Resolve the placed size of a selection.

    Args:
        selection: Selected rectangle (source pixels)
        column_width: Width of the target column (mm)
        policy: Sizing constants

    Returns:
        ImageSize with height / width equal to the selection's ratio

    Raises:
        InvalidGeometryError: If the selection has no usable aspect ratio,
            or one so extreme the placed height overflows
        LayoutInvariantError: If the resolved size is not positive and finite

    Example:
        >>> resolve_image_size(SelectionRect(0, 0, 100, 100), 90.0, SizePolicy())
        ImageSize(width=70.0, height=70.0)
    """
    ratio = selection.aspect_ratio

    width = min(column_width - policy.inner_padding, policy.preferred_width)
    height = ratio * width

    cap = policy.tall_max_height if ratio > policy.tall_aspect_threshold else policy.max_height
    if height > cap:
        height = cap
        width = height / ratio

    if width < policy.min_width:
        width = policy.min_width
        height = ratio * width

    # Ratio is finite but too large for the width floor
    if math.isinf(height):
        raise InvalidGeometryError(f"Aspect ratio {ratio} is out of range")

    if not (math.isfinite(width) and math.isfinite(height)) or width <= 0 or height <= 0:
        raise LayoutInvariantError(
            f"Resolved image size is invalid: {width}x{height} (ratio {ratio})"
        )

    logger.debug(f"Resolved {selection.width}x{selection.height} -> {width:.2f}x{height:.2f}mm")
    return ImageSize(width=width, height=height)
