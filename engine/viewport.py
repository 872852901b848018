# /engine/viewport.py

"""
Viewport State & Projector

ViewportState keeps the pan centre, zoom factor and rendering-surface size of
one map pane and derives the visibility radius from them. Every request is
clamped rather than rejected:
• the centre always stays inside the loaded Bounds
• the zoom always stays inside [zoom_min, zoom_max]

to_screen / to_world are the pure world <-> screen transforms used for
drawing and click hit-testing.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Callable, Optional

from settings import system_config as cfg
from .models import Bounds, Plane


class ViewportPhase(Enum):
    UNINITIALIZED = "uninitialized"
    CENTERED = "centered"
    PANNED = "panned"
    ZOOMED = "zoomed"


class ViewportState:
    def __init__(
        self,
        width: float = 0.0,
        height: float = 0.0,
        zoom_min: float = cfg.MAP_ZOOM_MIN,
        zoom_max: float = cfg.MAP_ZOOM_MAX,
        default_zoom: float = cfg.MAP_ZOOM_DEFAULT,
        on_change: Optional[Callable[[], None]] = None,
    ) -> None:
        if zoom_min <= 0 or zoom_max < zoom_min:
            raise ValueError(f"invalid zoom range [{zoom_min}, {zoom_max}]")
        self.zoom_min = float(zoom_min)
        self.zoom_max = float(zoom_max)
        self._default_zoom = self._clamp_zoom(default_zoom)

        self._center: Optional[Plane] = None
        self._zoom: float = self._default_zoom
        self._width = max(0.0, float(width))
        self._height = max(0.0, float(height))
        self._bounds: Optional[Bounds] = None
        self.phase = ViewportPhase.UNINITIALIZED

        # Called whenever the centre or the visibility radius changes
        self._on_change = on_change

    # ---------- Read-only state ----------
    @property
    def center(self) -> Optional[Plane]:
        return self._center

    @property
    def zoom(self) -> float:
        return self._zoom

    @property
    def bounds(self) -> Optional[Bounds]:
        return self._bounds

    @property
    def size(self) -> Plane:
        return (self._width, self._height)

    @property
    def surface_origin(self) -> Plane:
        """Screen point the centre is drawn at (middle of the surface)."""
        return (self._width / 2.0, self._height / 2.0)

    @property
    def visibility_radius(self) -> float:
        return math.hypot(self._width, self._height) / 2.0 / self._zoom

    @property
    def initialized(self) -> bool:
        return self._center is not None

    # ---------- Mutations ----------
    def set_bounds(self, bounds: Optional[Bounds]) -> None:
        """Adopt the Bounds of a freshly loaded dataset.

        The first non-empty dataset centres the view on the bounds midpoint at
        the default zoom. Later datasets keep the zoom and re-clamp the centre.
        """
        self._bounds = bounds
        if bounds is None:
            self._notify()
            return
        if self._center is None:
            self._center = bounds.midpoint
            self._zoom = self._default_zoom
            self.phase = ViewportPhase.CENTERED
        else:
            self._center = bounds.clamp(self._center)
        self._notify()

    def pan(self, delta: Plane) -> bool:
        """Move the centre by `delta / zoom`. Returns True if the centre moved."""
        if self._center is None:
            return False
        cx, cy = self._center
        target = (cx + delta[0] / self._zoom, cy + delta[1] / self._zoom)
        moved = self._move_to(target)
        if moved:
            self.phase = ViewportPhase.PANNED
        return moved

    def set_zoom(self, factor: float) -> float:
        """Clamp and apply a zoom factor; returns the zoom actually applied."""
        self._zoom = self._clamp_zoom(factor)
        if self._center is not None:
            self.phase = ViewportPhase.ZOOMED
        self._notify()
        return self._zoom

    def zoom_by(self, step: float, anchor: Optional[Plane] = None) -> float:
        """Multiply the zoom by `step`, keeping the world point under the
        screen position `anchor` fixed (wheel zoom)."""
        if not step > 0 or not math.isfinite(step):
            return self._zoom
        zoom = self._clamp_zoom(self._zoom * step)
        target = self._center
        if anchor is not None and self._center is not None and _finite(anchor):
            world_anchor = to_world(anchor, self)
            ox, oy = self.surface_origin
            target = (
                world_anchor[0] - (anchor[0] - ox) / zoom,
                world_anchor[1] - (anchor[1] - oy) / zoom,
            )
            if self._bounds is not None:
                target = self._bounds.clamp(target)
        # Pinned at a zoom limit with nothing to move: no re-query
        if zoom == self._zoom and target == self._center:
            return self._zoom
        self._zoom = zoom
        self._center = target
        if target is not None:
            self.phase = ViewportPhase.ZOOMED
        self._notify()
        return self._zoom

    def set_center(self, world_point: Plane) -> bool:
        """Centre on a world point, clamped into Bounds. No-op before the first load."""
        if self._bounds is None or not _finite(world_point):
            return False
        self._center = self._bounds.clamp((float(world_point[0]), float(world_point[1])))
        self.phase = ViewportPhase.CENTERED
        self._notify()
        return True

    def resize(self, width: float, height: float) -> bool:
        """Record a new surface size. Returns True if the visibility radius changed."""
        width = max(0.0, float(width))
        height = max(0.0, float(height))
        if width == self._width and height == self._height:
            return False
        before = self.visibility_radius
        self._width, self._height = width, height
        if self.visibility_radius != before:
            self._notify()
            return True
        return False

    # ---------- Internals ----------
    def _clamp_zoom(self, factor: float) -> float:
        try:
            f = float(factor)
        except (TypeError, ValueError):
            return self.zoom_min
        if math.isnan(f):
            return self.zoom_min
        return min(max(f, self.zoom_min), self.zoom_max)

    def _move_to(self, target: Plane) -> bool:
        if not _finite(target):
            return False
        if self._bounds is not None:
            target = self._bounds.clamp(target)
        if target == self._center:
            return False
        self._center = target
        self._notify()
        return True

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change()

    def __repr__(self) -> str:
        return (f"ViewportState(center={self._center}, zoom={self._zoom:.3f}, "
                f"size={self._width:.0f}x{self._height:.0f}, phase={self.phase.value})")


def _finite(p: Plane) -> bool:
    return math.isfinite(p[0]) and math.isfinite(p[1])


# ---------------------------------------------------------------------------
# Projector
# ---------------------------------------------------------------------------

def to_screen(world: Plane, viewport: ViewportState, surface_origin: Optional[Plane] = None) -> Plane:
    """(world - centre) * zoom + surface_origin"""
    ox, oy = surface_origin if surface_origin is not None else viewport.surface_origin
    cx, cy = viewport.center or (0.0, 0.0)
    z = viewport.zoom
    return ((world[0] - cx) * z + ox, (world[1] - cy) * z + oy)


def to_world(screen: Plane, viewport: ViewportState, surface_origin: Optional[Plane] = None) -> Plane:
    """Exact inverse of to_screen."""
    ox, oy = surface_origin if surface_origin is not None else viewport.surface_origin
    cx, cy = viewport.center or (0.0, 0.0)
    z = viewport.zoom
    return ((screen[0] - ox) / z + cx, (screen[1] - oy) / z + cy)
