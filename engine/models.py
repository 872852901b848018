# /engine/models.py

"""
Map Data Model

Immutable value types shared by the map engine, the static-data layer and the
UI panes:
- Point / Edge / Label as handed over by the data layer (already corrected)
- ResolvedEdge: an edge after load, carrying both plane endpoints
- Bounds: min/max of the loaded plane coordinates
- Dataset: one loadable bundle of points, edges and labels
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Tuple, Union

Coordinate = Tuple[float, ...]
Plane = Tuple[float, float]
EdgeId = Union[int, str]
EdgeEnd = Union[int, Coordinate]


def plane_of(coords: Sequence[float]) -> Plane:
    """Project a 2- or 3-component world coordinate onto the map plane.

    2-D coordinates are used as (x, y). 3-D coordinates drop the vertical
    axis and map to (x, z), the plane the game's star charts are drawn on.
    """
    n = len(coords)
    if n == 2:
        return (float(coords[0]), float(coords[1]))
    if n == 3:
        return (float(coords[0]), float(coords[2]))
    raise ValueError(f"expected 2 or 3 coordinate components, got {n}")


@dataclass(frozen=True)
class Point:
    id: int
    coords: Coordinate
    name: str = ""
    edges: Tuple[EdgeId, ...] = ()

    @property
    def plane(self) -> Plane:
        return plane_of(self.coords)


@dataclass(frozen=True)
class Edge:
    """A connection between two systems.

    Each end is either a point id (full-precision view) or a literal world
    coordinate (schematic/regional views, where ends may not map 1:1 onto a
    loaded point).
    """
    id: EdgeId
    a: EdgeEnd
    b: EdgeEnd


@dataclass(frozen=True)
class ResolvedEdge:
    id: EdgeId
    start: Plane
    end: Plane
    a_id: Optional[int] = None
    b_id: Optional[int] = None


@dataclass(frozen=True)
class Label:
    """Static overlay text (e.g. a region name) anchored in world space."""
    name: str
    anchor: Coordinate
    label_id: Optional[int] = None

    @property
    def plane(self) -> Plane:
        return plane_of(self.anchor)


@dataclass(frozen=True)
class Bounds:
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @classmethod
    def from_planes(cls, planes: Iterable[Plane]) -> Optional["Bounds"]:
        """Bounding box of the given plane points, or None when there are none."""
        it = iter(planes)
        try:
            x, y = next(it)
        except StopIteration:
            return None
        min_x = max_x = x
        min_y = max_y = y
        for x, y in it:
            if x < min_x:
                min_x = x
            elif x > max_x:
                max_x = x
            if y < min_y:
                min_y = y
            elif y > max_y:
                max_y = y
        return cls(min_x, min_y, max_x, max_y)

    @property
    def midpoint(self) -> Plane:
        return ((self.min_x + self.max_x) / 2.0, (self.min_y + self.max_y) / 2.0)

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def diagonal(self) -> float:
        return math.hypot(self.width, self.height)

    def contains(self, p: Plane) -> bool:
        return self.min_x <= p[0] <= self.max_x and self.min_y <= p[1] <= self.max_y

    def clamp(self, p: Plane) -> Plane:
        x = min(max(p[0], self.min_x), self.max_x)
        y = min(max(p[1], self.min_y), self.max_y)
        return (x, y)


@dataclass(frozen=True)
class Dataset:
    """Everything one map pane needs for a single load."""
    points: Tuple[Point, ...] = ()
    edges: Tuple[Edge, ...] = ()
    labels: Tuple[Label, ...] = ()
    name: str = ""
    region_id: Optional[int] = None
