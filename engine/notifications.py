# /engine/notifications.py

"""
Notification Tracker

Time-bounded "pulse" highlights on individual systems. Each pulse fades
linearly from alpha 1.0 to 0.0 over a fixed duration and is dropped once it
reaches zero. Re-notifying a pulsing system restarts its animation.

Times are plain float seconds from any monotonic clock (time.monotonic()).
"""

from __future__ import annotations

from typing import Dict

from settings import system_config as cfg

_END_EPSILON = 1e-9

class NotificationTracker:
    def __init__(self, duration: float = cfg.PULSE_DURATION_SEC) -> None:
        if duration <= 0:
            raise ValueError("pulse duration must be positive")
        self.duration = float(duration)
        self._started: Dict[int, float] = {}

    def notify(self, point_id: int, start_time: float) -> None:
        """Start (or restart) the pulse for point_id."""
        self._started[int(point_id)] = float(start_time)

    def alpha(self, point_id: int, now: float) -> float:
        start = self._started.get(point_id)
        if start is None:
            return 0.0
        return self._alpha_for(start, now)

    def tick(self, now: float) -> Dict[int, float]:
        """Alpha per active pulse; expired pulses are removed."""
        out: Dict[int, float] = {}
        expired = []
        for pid, start in self._started.items():
            a = self._alpha_for(start, now)
            if a <= 0.0:
                expired.append(pid)
            else:
                out[pid] = a
        for pid in expired:
            del self._started[pid]
        return out

    def elapsed(self, point_id: int, now: float) -> float:
        start = self._started.get(point_id)
        return max(0.0, now - start) if start is not None else 0.0

    @property
    def active(self) -> bool:
        """True while any pulse remains; the host keeps its frame clock running."""
        return bool(self._started)

    def clear(self) -> None:
        self._started.clear()

    def _alpha_for(self, start: float, now: float) -> float:
        elapsed = now - start
        # start + duration may round below the true end; treat that as expired
        if elapsed >= self.duration - _END_EPSILON:
            return 0.0
        a = 1.0 - elapsed / self.duration
        return min(max(a, 0.0), 1.0)

    def __len__(self) -> int:
        return len(self._started)


def pulse_width(elapsed: float,
                base: float = cfg.PULSE_BASE_WIDTH_PX,
                growth: float = cfg.PULSE_GROWTH_PX_PER_SEC) -> float:
    """Stroke width of the pulse ring after `elapsed` seconds."""
    return base + growth * max(0.0, elapsed)
