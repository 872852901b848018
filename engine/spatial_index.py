# /engine/spatial_index.py

"""
Spatial Index

Immutable 2-D k-d tree over (point id, plane coordinate) pairs.
• Built once per dataset load (balanced median split, O(n log n))
• Inclusive radius queries with pruned descent
• Nearest-point lookup for click hit-testing
• Empty datasets produce EMPTY_INDEX instead of a tree, so callers can skip work
"""

from __future__ import annotations

import time
from typing import Iterable, Optional, Set, Tuple, Union

import numpy as np
from scipy.spatial import cKDTree

from controller.log_config import get_map_logger
from .models import Plane

logger = get_map_logger('spatial_index')

# Relative slack handed to the tree so boundary points are never lost to
# rounding; results are re-filtered exactly afterwards.
_RADIUS_SLACK = 1e-9


class EmptyIndex:
    """Sentinel for a dataset with no points. Every query returns nothing."""

    size = 0

    def __repr__(self) -> str:
        return "EmptyIndex()"


EMPTY_INDEX = EmptyIndex()


class SpatialIndex:
    def __init__(self, ids: np.ndarray, coords: np.ndarray) -> None:
        self._ids = ids
        self._coords = coords
        self._tree = cKDTree(coords, balanced_tree=True, compact_nodes=True)

    @property
    def size(self) -> int:
        return int(self._ids.shape[0])

    def _candidates(self, center: Plane, radius: float) -> np.ndarray:
        reach = radius + max(abs(radius), 1.0) * _RADIUS_SLACK
        hits = self._tree.query_ball_point(center, r=reach)
        idx = np.asarray(hits, dtype=np.intp)
        if idx.size == 0:
            return idx
        delta = self._coords[idx] - np.asarray(center, dtype=float)
        d2 = np.einsum("ij,ij->i", delta, delta)
        return idx[d2 <= radius * radius]

    def within(self, center: Plane, radius: float) -> Set[int]:
        if radius < 0:
            return set()
        return set(self._ids[self._candidates(center, radius)].tolist())

    def nearest(self, point: Plane, max_distance: float) -> Optional[int]:
        if max_distance < 0:
            return None
        idx = self._candidates(point, max_distance)
        if idx.size == 0:
            return None
        delta = self._coords[idx] - np.asarray(point, dtype=float)
        d2 = np.einsum("ij,ij->i", delta, delta)
        # lexsort: last key is primary -> distance first, then lower id
        order = np.lexsort((self._ids[idx], d2))
        return int(self._ids[idx[order[0]]])

    def __repr__(self) -> str:
        return f"SpatialIndex(size={self.size})"


Index = Union[SpatialIndex, EmptyIndex]


def build(points: Iterable[Tuple[int, Plane]]) -> Index:
    """Build an index from (id, (x, y)) pairs. An empty input yields EMPTY_INDEX."""
    pairs = list(points)
    if not pairs:
        logger.debug("build: no points, returning empty index")
        return EMPTY_INDEX

    t0 = time.perf_counter()
    ids = np.fromiter((pid for pid, _ in pairs), dtype=np.int64, count=len(pairs))
    coords = np.array([plane for _, plane in pairs], dtype=float).reshape(len(pairs), 2)
    index = SpatialIndex(ids, coords)
    logger.debug(f"build: {index.size} points indexed in {(time.perf_counter() - t0) * 1000.0:.1f} ms")
    return index


def query_within(index: Index, center: Plane, radius: float) -> Set[int]:
    """Ids of every point whose distance to `center` is <= `radius`."""
    if isinstance(index, EmptyIndex):
        return set()
    return index.within(center, radius)


def nearest(index: Index, point: Plane, max_distance: float) -> Optional[int]:
    """Id of the closest point within `max_distance`, lower id on ties, or None."""
    if isinstance(index, EmptyIndex):
        return None
    return index.nearest(point, max_distance)
