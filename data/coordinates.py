# /data/coordinates.py

"""
Coordinate correction applied once, at ingestion.

The static data stores positions in metres; the map wants something that fits
comfortably on screen and matches the in-game orientation. A correction is:
1. a scale factor f: f > 1 divides, f < -1 multiplies by |f|, anything else
   leaves the value unchanged;
2. then an optional sign inversion per axis.

The same correction is applied to points, edge endpoints and label anchors so
all three line up. Nothing downstream ever re-inverts.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple

Coordinate = Tuple[float, ...]


@dataclass(frozen=True)
class CoordinateCorrection:
    factor: int = 1
    invert_axes: Tuple[bool, ...] = (False, False, False)

    def scale(self, value: float) -> float:
        if self.factor > 1:
            return value / self.factor
        if self.factor < -1:
            return value * abs(self.factor)
        return value

    def apply(self, coords: Sequence[float]) -> Coordinate:
        out = []
        for axis, value in enumerate(coords):
            v = self.scale(float(value))
            if axis < len(self.invert_axes) and self.invert_axes[axis]:
                v = -v
            out.append(v)
        return tuple(out)

    def apply_box(self, lo: Sequence[float], hi: Sequence[float]) -> Tuple[Coordinate, Coordinate]:
        """Correct both corners, then re-derive min/max per axis (inversion swaps them)."""
        a = self.apply(lo)
        b = self.apply(hi)
        return (tuple(min(p, q) for p, q in zip(a, b)),
                tuple(max(p, q) for p, q in zip(a, b)))

    @property
    def identity(self) -> bool:
        return -1 <= self.factor <= 1 and not any(self.invert_axes)


IDENTITY = CoordinateCorrection()
