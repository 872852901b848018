# /engine/commands.py

"""
Viewport commands and the broadcast bus that keeps map panes in sync.

The publisher (search box, location watcher) never touches a pane directly:
it publishes an immutable command, every subscribed pane receives its own copy
in a private queue and applies it at the start of its next frame.
"""

from __future__ import annotations

import queue
import threading
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Union

from controller.log_config import get_map_logger

logger = get_map_logger('commands')


class Target(Enum):
    SYSTEM = "system"
    REGION = "region"


@dataclass(frozen=True)
class CenterOn:
    target_id: int
    target: Target = Target.SYSTEM


@dataclass(frozen=True)
class Notify:
    point_id: int
    time: float


@dataclass(frozen=True)
class MarkerMoved:
    entity_id: int
    point_id: int


@dataclass(frozen=True)
class Select:
    """Highlight one system on every pane; None clears the selection."""
    point_id: Optional[int]


ViewportCommand = Union[CenterOn, Notify, MarkerMoved, Select]


class Subscription:
    """One pane's end of the bus."""

    def __init__(self, bus: "CommandBus") -> None:
        self._bus = bus
        self._queue: "queue.SimpleQueue[ViewportCommand]" = queue.SimpleQueue()
        self.closed = False

    def put(self, command: ViewportCommand) -> None:
        self._queue.put(command)

    def drain(self) -> List[ViewportCommand]:
        """Everything published since the last drain, in publish order."""
        out: List[ViewportCommand] = []
        while True:
            try:
                out.append(self._queue.get_nowait())
            except queue.Empty:
                return out

    def pending(self) -> bool:
        return not self._queue.empty()

    def close(self) -> None:
        if not self.closed:
            self.closed = True
            self._bus.unsubscribe(self)


class CommandBus:
    """Tiny broadcast channel for viewport commands."""

    def __init__(self) -> None:
        self._subscribers: List[Subscription] = []
        self._lock = threading.Lock()

    def subscribe(self) -> Subscription:
        sub = Subscription(self)
        with self._lock:
            self._subscribers.append(sub)
        return sub

    def unsubscribe(self, sub: Subscription) -> None:
        with self._lock:
            self._subscribers = [s for s in self._subscribers if s is not sub]

    def publish(self, command: ViewportCommand) -> int:
        """Deliver to every subscriber; returns how many received it."""
        with self._lock:
            targets = list(self._subscribers)
        for sub in targets:
            sub.put(command)
        logger.debug(f"publish {command} -> {len(targets)} subscriber(s)")
        return len(targets)

    def __len__(self) -> int:
        with self._lock:
            return len(self._subscribers)
