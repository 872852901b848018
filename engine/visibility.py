# /engine/visibility.py

"""Lazily recomputed set of point ids inside the current viewport."""

from __future__ import annotations

from typing import FrozenSet

from .spatial_index import Index, query_within
from .viewport import ViewportState


class VisibilityCache:
    def __init__(self) -> None:
        self._ids: FrozenSet[int] = frozenset()
        self._dirty = True
        self.recomputes = 0  # number of spatial queries actually run

    @property
    def dirty(self) -> bool:
        return self._dirty

    @property
    def ids(self) -> FrozenSet[int]:
        """Last computed set (may be stale while dirty)."""
        return self._ids

    def invalidate(self) -> None:
        self._dirty = True

    def recompute_if_dirty(self, index: Index, viewport: ViewportState) -> FrozenSet[int]:
        if not self._dirty:
            return self._ids
        center = viewport.center
        if center is None:
            self._ids = frozenset()
        else:
            self._ids = frozenset(query_within(index, center, viewport.visibility_radius))
        self._dirty = False
        self.recomputes += 1
        return self._ids

    def __len__(self) -> int:
        return len(self._ids)
