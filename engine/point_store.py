# /engine/point_store.py

"""
Point Store

Owns the points and edges of the dataset currently shown by one map pane,
together with the Bounds and SpatialIndex derived from them.

A load never mutates the live data: a complete StoreSnapshot (points, resolved
edges, bounds, index) is built first and then swapped in with a single
assignment, so anything still holding the previous snapshot keeps a
consistent, queryable view.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from controller.log_config import get_map_logger
from . import spatial_index
from .models import Bounds, Edge, EdgeEnd, EdgeId, Plane, Point, ResolvedEdge, plane_of

logger = get_map_logger('point_store')


@dataclass(frozen=True)
class StoreSnapshot:
    points: Mapping[int, Point] = field(default_factory=dict)
    edges: Tuple[ResolvedEdge, ...] = ()
    bounds: Optional[Bounds] = None
    index: spatial_index.Index = spatial_index.EMPTY_INDEX
    raw_edges: Tuple[Edge, ...] = ()
    dropped_edges: int = 0


EMPTY_SNAPSHOT = StoreSnapshot()


def _dedupe_points(points: Iterable[Point]) -> Dict[int, Point]:
    out: Dict[int, Point] = {}
    for p in points:
        if p.id in out:
            logger.warning(f"duplicate point id {p.id} ({p.name!r}); keeping first")
            continue
        try:
            plane_of(p.coords)
        except ValueError as e:
            logger.warning(f"dropping point {p.id}: {e}")
            continue
        out[p.id] = p
    return out


def _resolve_end(end: EdgeEnd, points: Mapping[int, Point]) -> Tuple[Optional[Plane], Optional[int]]:
    if isinstance(end, int) and not isinstance(end, bool):
        p = points.get(end)
        return (p.plane if p is not None else None, end)
    try:
        return (plane_of(end), None)
    except (TypeError, ValueError):
        return (None, None)


def resolve_edges(edges: Iterable[Edge], points: Mapping[int, Point]) -> Tuple[List[ResolvedEdge], int]:
    """Resolve edge ends against `points`; returns (kept, dropped_count)."""
    kept: List[ResolvedEdge] = []
    seen: set = set()
    dropped = 0
    for e in edges:
        if e.id in seen:
            dropped += 1
            continue
        start, a_id = _resolve_end(e.a, points)
        end, b_id = _resolve_end(e.b, points)
        if start is None or end is None:
            dropped += 1
            continue
        seen.add(e.id)
        kept.append(ResolvedEdge(e.id, start, end, a_id, b_id))
    return kept, dropped


def _attach_edge_ids(points: Dict[int, Point], edges: Iterable[ResolvedEdge]) -> Dict[int, Point]:
    by_point: Dict[int, List[EdgeId]] = {}
    for e in edges:
        for pid in (e.a_id, e.b_id):
            if pid is not None:
                by_point.setdefault(pid, []).append(e.id)
    return {
        pid: (p if tuple(by_point.get(pid, ())) == p.edges
              else dataclasses.replace(p, edges=tuple(by_point.get(pid, ()))))
        for pid, p in points.items()
    }


def build_snapshot(points: Iterable[Point], edges: Iterable[Edge]) -> StoreSnapshot:
    """Build a complete, self-consistent snapshot. Never raises on bad data."""
    by_id = _dedupe_points(points)
    raw_edges = tuple(edges)
    resolved, dropped = resolve_edges(raw_edges, by_id)
    if dropped:
        logger.info(f"dropped {dropped} edge(s) with unresolved endpoints")
    by_id = _attach_edge_ids(by_id, resolved)
    bounds = Bounds.from_planes(p.plane for p in by_id.values())
    index = spatial_index.build((pid, p.plane) for pid, p in by_id.items())
    return StoreSnapshot(
        points=by_id,
        edges=tuple(resolved),
        bounds=bounds,
        index=index,
        raw_edges=raw_edges,
        dropped_edges=dropped,
    )


class PointStore:
    def __init__(self) -> None:
        self._snapshot: StoreSnapshot = EMPTY_SNAPSHOT
        self.generation = 0  # bumped on every swap

    # ---------- Loading ----------
    def load(self, new_points: Iterable[Point], new_edges: Iterable[Edge] = ()) -> StoreSnapshot:
        snapshot = build_snapshot(new_points, new_edges)
        self._snapshot = snapshot
        self.generation += 1
        logger.debug(f"load #{self.generation}: {len(snapshot.points)} points, "
                     f"{len(snapshot.edges)} edges, bounds={snapshot.bounds}")
        return snapshot

    def replace_points(self, new_points: Iterable[Point]) -> StoreSnapshot:
        """Swap the point set, re-validating the current edges against it."""
        return self.load(new_points, self._snapshot.raw_edges)

    def replace_edges(self, new_edges: Iterable[Edge]) -> StoreSnapshot:
        """Swap the edge set against the current points."""
        return self.load(self._snapshot.points.values(), new_edges)

    # ---------- Access ----------
    @property
    def snapshot(self) -> StoreSnapshot:
        return self._snapshot

    @property
    def points(self) -> Mapping[int, Point]:
        return self._snapshot.points

    @property
    def edges(self) -> Tuple[ResolvedEdge, ...]:
        return self._snapshot.edges

    @property
    def bounds(self) -> Optional[Bounds]:
        return self._snapshot.bounds

    @property
    def index(self) -> spatial_index.Index:
        return self._snapshot.index

    def get(self, point_id: int) -> Optional[Point]:
        return self._snapshot.points.get(point_id)

    def __contains__(self, point_id: object) -> bool:
        return point_id in self._snapshot.points

    def __len__(self) -> int:
        return len(self._snapshot.points)
