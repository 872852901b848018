# /engine/map_engine.py

"""
Map Engine

One MapEngine backs one map pane. It is a plain owned object that lives as
long as the pane does and composes:
- PointStore (points, edges, bounds, spatial index)
- ViewportState (centre, zoom, surface size)
- VisibilityCache (ids inside the viewport, recomputed only when dirty)
- NotificationTracker (pulse highlights)
- tracked markers (entity id -> anchored point id)
- static labels

The host calls begin_frame() once per redraw. It applies any freshly loaded
dataset first, then queued viewport commands, then resolves visibility and
animation state into an immutable Frame the render pass can draw without
touching the engine again.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable, Dict, FrozenSet, Iterable, Mapping, Optional, Protocol, Tuple

import numpy as np

from controller.log_config import get_map_logger
from . import spatial_index
from .commands import CenterOn, MarkerMoved, Notify, Select, Subscription, Target, ViewportCommand
from .models import Bounds, Dataset, Edge, Label, Plane, Point, ResolvedEdge
from .notifications import NotificationTracker
from .point_store import PointStore, StoreSnapshot
from .viewport import ViewportState, to_screen, to_world
from .visibility import VisibilityCache

logger = get_map_logger('engine')


class DatasetSource(Protocol):
    """Anything that hands finished datasets to the render thread."""

    def poll(self) -> Optional[Dataset]: ...

    @property
    def pending(self) -> bool: ...


@dataclass(frozen=True)
class PulseState:
    point_id: int
    plane: Plane
    alpha: float
    elapsed: float


@dataclass(frozen=True)
class Frame:
    visible_ids: FrozenSet[int] = frozenset()
    points: Tuple[Point, ...] = ()
    edges: Tuple[ResolvedEdge, ...] = ()
    labels: Tuple[Label, ...] = ()
    pulses: Tuple[PulseState, ...] = ()
    markers: Mapping[int, Tuple[int, Plane]] = field(default_factory=dict)
    selected: Optional[Tuple[int, Plane]] = None
    keep_animating: bool = False
    recomputed: bool = False
    loaded: bool = False


def _segments_near(starts: np.ndarray, ends: np.ndarray, center: Plane, radius: float) -> np.ndarray:
    """Mask of segments whose closest point to `center` lies within `radius`."""
    c = np.asarray(center, dtype=float)
    d = ends - starts
    seg_len2 = np.einsum("ij,ij->i", d, d)
    t = np.einsum("ij,ij->i", c - starts, d)
    with np.errstate(divide="ignore", invalid="ignore"):
        t = np.where(seg_len2 > 0.0, t / seg_len2, 0.0)
    t = np.clip(t, 0.0, 1.0)
    closest = starts + d * t[:, None]
    off = closest - c
    return np.einsum("ij,ij->i", off, off) <= radius * radius


class MapEngine:
    def __init__(
        self,
        width: float = 0.0,
        height: float = 0.0,
        name: str = "",
        commands: Optional[Subscription] = None,
        datasets: Optional[DatasetSource] = None,
        clock: Callable[[], float] = time.monotonic,
        pulse_duration: Optional[float] = None,
    ) -> None:
        self.name = name
        self.region_id: Optional[int] = None
        self.clock = clock

        self.store = PointStore()
        self.cache = VisibilityCache()
        self.viewport = ViewportState(width, height, on_change=self.cache.invalidate)
        self.pulses = (NotificationTracker(pulse_duration) if pulse_duration is not None
                       else NotificationTracker())
        self.labels: Tuple[Label, ...] = ()
        self.markers: Dict[int, int] = {}
        self.selected: Optional[int] = None

        self._commands = commands
        self._datasets = datasets

        # Per-snapshot edge arrays and per-recompute visible edges
        self._edge_snapshot: Optional[StoreSnapshot] = None
        self._edge_starts = np.empty((0, 2))
        self._edge_ends = np.empty((0, 2))
        self._visible_edges: Tuple[ResolvedEdge, ...] = ()
        self._visible_points: Tuple[Point, ...] = ()

    # ---------- Wiring ----------
    def attach_commands(self, commands: Optional[Subscription]) -> None:
        self._commands = commands

    def attach_datasets(self, datasets: Optional[DatasetSource]) -> None:
        self._datasets = datasets

    @property
    def commands(self) -> Optional[Subscription]:
        return self._commands

    @property
    def loading(self) -> bool:
        return bool(self._datasets is not None and self._datasets.pending)

    # ---------- Dataset replacement ----------
    def load(self, dataset: Dataset) -> StoreSnapshot:
        """Atomically replace points, edges and labels."""
        snapshot = self.store.load(dataset.points, dataset.edges)
        self.labels = tuple(dataset.labels)
        self.region_id = dataset.region_id
        if dataset.name:
            self.name = dataset.name
        self._after_store_change()
        logger.info(f"[{self.name or 'map'}] loaded {len(snapshot.points)} points, "
                    f"{len(snapshot.edges)} edges, {len(self.labels)} labels")
        return snapshot

    def add_points(self, points: Iterable[Point]) -> StoreSnapshot:
        snapshot = self.store.replace_points(points)
        self._after_store_change()
        return snapshot

    def add_edges(self, edges: Iterable[Edge]) -> StoreSnapshot:
        snapshot = self.store.replace_edges(edges)
        self._after_store_change()
        return snapshot

    def add_labels(self, labels: Iterable[Label]) -> None:
        self.labels = tuple(labels)

    def _after_store_change(self) -> None:
        self.viewport.set_bounds(self.store.bounds)
        self.cache.invalidate()

    # ---------- Viewport ----------
    @property
    def bounds(self) -> Optional[Bounds]:
        return self.store.bounds

    def resize(self, width: float, height: float) -> bool:
        return self.viewport.resize(width, height)

    def pan(self, delta: Plane) -> bool:
        return self.viewport.pan(delta)

    def set_zoom(self, factor: float) -> float:
        return self.viewport.set_zoom(factor)

    def zoom_by(self, step: float, anchor: Optional[Plane] = None) -> float:
        return self.viewport.zoom_by(step, anchor)

    def set_center(self, world_point: Plane) -> bool:
        return self.viewport.set_center(world_point)

    def set_center_by_point_id(self, point_id: int) -> bool:
        point = self.store.get(point_id)
        if point is None:
            return False
        return self.viewport.set_center(point.plane)

    def set_center_by_label_id(self, label_id: int) -> bool:
        for label in self.labels:
            if label.label_id == label_id:
                return self.viewport.set_center(label.plane)
        # A regional pane is itself the region: centre on its data
        if self.region_id is not None and self.region_id == label_id and self.bounds is not None:
            return self.viewport.set_center(self.bounds.midpoint)
        return False

    def locates(self, command: CenterOn) -> bool:
        """Whether applying `command` would move this pane."""
        if command.target is Target.REGION:
            return (any(label.label_id == command.target_id for label in self.labels)
                    or (self.region_id == command.target_id and self.bounds is not None))
        return command.target_id in self.store

    def screen_to_world(self, screen_point: Plane) -> Plane:
        return to_world(screen_point, self.viewport)

    def world_to_screen(self, world_point: Plane) -> Plane:
        return to_screen(world_point, self.viewport)

    def point_at(self, screen_point: Plane, tolerance_px: float) -> Optional[int]:
        """Id of the system drawn under a screen position, if any."""
        world = self.screen_to_world(screen_point)
        return spatial_index.nearest(self.store.index, world, tolerance_px / self.viewport.zoom)

    # ---------- Pulses & markers ----------
    def notify(self, point_id: int, time: Optional[float] = None) -> bool:
        if point_id not in self.store:
            return False
        self.pulses.notify(point_id, self.clock() if time is None else time)
        return True

    def select(self, point_id: Optional[int]) -> bool:
        """Remember the highlighted system; True if this pane can draw it."""
        self.selected = None if point_id is None else int(point_id)
        return self.selected is not None and self.selected in self.store

    def update_marker(self, entity_id: int, point_id: int) -> None:
        self.markers[int(entity_id)] = int(point_id)

    def remove_marker(self, entity_id: int) -> None:
        self.markers.pop(int(entity_id), None)

    # ---------- Commands ----------
    def apply(self, command: ViewportCommand) -> bool:
        """Apply one broadcast command. Unknown targets are ignored."""
        if isinstance(command, CenterOn):
            if command.target is Target.REGION:
                return self.set_center_by_label_id(command.target_id)
            return self.set_center_by_point_id(command.target_id)
        if isinstance(command, Notify):
            return self.notify(command.point_id, command.time)
        if isinstance(command, MarkerMoved):
            self.update_marker(command.entity_id, command.point_id)
            return True
        if isinstance(command, Select):
            return self.select(command.point_id)
        logger.warning(f"[{self.name or 'map'}] ignoring unknown command {command!r}")
        return False

    # ---------- Frame ----------
    def begin_frame(self, now: Optional[float] = None) -> Frame:
        now = self.clock() if now is None else now

        loaded = False
        if self._datasets is not None:
            dataset = self._datasets.poll()
            if dataset is not None:
                self.load(dataset)
                loaded = True

        if self._commands is not None:
            for command in self._commands.drain():
                self.apply(command)

        recomputed = self.cache.dirty
        visible = self.cache.recompute_if_dirty(self.store.index, self.viewport)
        if recomputed:
            self._refresh_visible(visible)

        pulses = []
        for pid, alpha in self.pulses.tick(now).items():
            point = self.store.get(pid)
            if point is not None:
                pulses.append(PulseState(pid, point.plane, alpha, self.pulses.elapsed(pid, now)))

        markers = {}
        for entity_id, pid in self.markers.items():
            point = self.store.get(pid)
            if point is not None:
                markers[entity_id] = (pid, point.plane)

        selected = None
        if self.selected is not None:
            point = self.store.get(self.selected)
            if point is not None:
                selected = (point.id, point.plane)

        return Frame(
            visible_ids=visible,
            points=self._visible_points,
            edges=self._visible_edges,
            labels=self.labels,
            pulses=tuple(pulses),
            markers=markers,
            selected=selected,
            keep_animating=self.pulses.active or self.loading,
            recomputed=recomputed,
            loaded=loaded,
        )

    def _refresh_visible(self, visible: FrozenSet[int]) -> None:
        snapshot = self.store.snapshot
        self._visible_points = tuple(snapshot.points[pid] for pid in sorted(visible))

        if self._edge_snapshot is not snapshot:
            self._edge_snapshot = snapshot
            n = len(snapshot.edges)
            self._edge_starts = np.array([e.start for e in snapshot.edges], dtype=float).reshape(n, 2)
            self._edge_ends = np.array([e.end for e in snapshot.edges], dtype=float).reshape(n, 2)

        center = self.viewport.center
        if center is None or not snapshot.edges:
            self._visible_edges = ()
            return
        mask = _segments_near(self._edge_starts, self._edge_ends, center, self.viewport.visibility_radius)
        self._visible_edges = tuple(e for e, keep in zip(snapshot.edges, mask) if keep)

    def __repr__(self) -> str:
        return f"MapEngine(name={self.name!r}, points={len(self.store)}, viewport={self.viewport!r})"
