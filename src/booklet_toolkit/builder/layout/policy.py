"""
Module: builder.layout.policy

Purpose:
    Injectable layout policies: how many columns a page has and which
    size policy applies. The paginator runs one code path for every
    policy.

Key Classes:
    - LayoutPolicy: Abstract interface
    - TwoColumnPolicy: Default booklet layout (balanced sizes)
    - SingleColumnPolicy: Full-width layout with larger images

Key Functions:
    - get_policy(): Look up a built-in policy by name

Used By:
    - builder.layout.engine: layout()
    - builder.config: BuilderConfig.policy
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from booklet_toolkit.core.models.selection import SelectionRect

from .config import LayoutConfig
from .sizing import ImageSize, SizePolicy, resolve_image_size


BALANCED_SIZE_POLICY = SizePolicy()
FULL_WIDTH_SIZE_POLICY = SizePolicy(
    preferred_width=150.0,
    max_height=120.0,
    tall_max_height=180.0,
    min_width=60.0,
)


class LayoutPolicy(ABC):
    """
    Column count plus sizing strategy.

    Columns are filled in strict alternation whatever the count; see
    builder.layout.paginator.
    """

    name: str = ""

    @property
    @abstractmethod
    def column_count(self) -> int:
        """Number of columns per page."""

    @property
    @abstractmethod
    def size_policy(self) -> SizePolicy:
        """Sizing constants."""

    def resolve_size(self, selection: SelectionRect, config: LayoutConfig) -> ImageSize:
        """Resolve the placed size of a selection in this policy's columns."""
        return resolve_image_size(
            selection,
            config.column_width(self.column_count),
            self.size_policy,
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(size_policy={self.size_policy!r})"


class TwoColumnPolicy(LayoutPolicy):
    """Two columns, balanced image sizes (default)."""

    name = "two-column"

    def __init__(self, size_policy: Optional[SizePolicy] = None) -> None:
        self._size_policy = size_policy or BALANCED_SIZE_POLICY

    @property
    def column_count(self) -> int:
        return 2

    @property
    def size_policy(self) -> SizePolicy:
        return self._size_policy


class SingleColumnPolicy(LayoutPolicy):
    """One full-width column, larger images."""

    name = "single-column"

    def __init__(self, size_policy: Optional[SizePolicy] = None) -> None:
        self._size_policy = size_policy or FULL_WIDTH_SIZE_POLICY

    @property
    def column_count(self) -> int:
        return 1

    @property
    def size_policy(self) -> SizePolicy:
        return self._size_policy


DEFAULT_POLICY: LayoutPolicy = TwoColumnPolicy()

_POLICIES = {
    TwoColumnPolicy.name: TwoColumnPolicy,
    SingleColumnPolicy.name: SingleColumnPolicy,
}

POLICY_NAMES = tuple(_POLICIES)


def get_policy(name: str) -> LayoutPolicy:
    """
    Build a built-in policy by name.

    Raises:
        ValueError: If name is unknown

    Example:
        >>> get_policy("single-column").column_count
        1
    """
    try:
        return _POLICIES[name]()
    except KeyError:
        raise ValueError(f"Unknown layout policy: {name!r} (expected one of {POLICY_NAMES})") from None
