# /ui/maps/tabs.py

"""
ui/maps/tabs.py
This module owns the map panes.

MapTabs:
- A QTabWidget with:
    • "Universe" -> MapView over every system
    • one MapView per open region (startup list or View > Regions)
- Every pane subscribes to one CommandBus; publish() reaches all of them.
- Each pane has its own DatasetLoader so slow region reads never block the
  universe pane (or each other).
"""

from __future__ import annotations

import functools
from typing import Callable, Dict, List, Optional, Sequence

from PySide6.QtCore import Signal
from PySide6.QtWidgets import QTabWidget, QVBoxLayout, QWidget

from controller.dataset_loader import DatasetLoader
from controller.log_config import get_ui_logger
from data import datasets
from data.coordinates import CoordinateCorrection
from engine.commands import CenterOn, CommandBus, ViewportCommand
from engine.map_engine import MapEngine
from engine.models import Dataset
from ui.maps.map_view import MapView

logger = get_ui_logger('tabs')


class MapTabs(QWidget):
    """Contains only the map tabs. No search, no status."""
    pointClicked = Signal(int)

    def __init__(
        self,
        bus: Optional[CommandBus] = None,
        universe_correction: Optional[CoordinateCorrection] = None,
        region_correction: Optional[CoordinateCorrection] = None,
        debug_overlay: bool = False,
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self.bus = bus or CommandBus()
        self._universe_correction = universe_correction
        self._region_correction = region_correction
        self._debug_overlay = debug_overlay

        self.views: List[MapView] = []
        self.loaders: Dict[MapView, DatasetLoader] = {}
        self.region_views: Dict[int, MapView] = {}

        lay = QVBoxLayout(self)
        lay.setContentsMargins(0, 0, 0, 0)
        lay.setSpacing(0)

        self.tabs = QTabWidget(self)
        self.tabs.setTabPosition(QTabWidget.TabPosition.North)
        lay.addWidget(self.tabs, 1)

        self.universe = self._add_pane("Universe")

    # ---- Pane management ----
    def _add_pane(self, title: str) -> MapView:
        loader = DatasetLoader(title)
        engine = MapEngine(name=title, commands=self.bus.subscribe(), datasets=loader)
        view = MapView(engine, self.tabs, debug_overlay=self._debug_overlay)
        view.pointClicked.connect(self.pointClicked)
        view.datasetLoaded.connect(functools.partial(self._on_dataset_loaded, view))
        self.tabs.addTab(view, title)
        self.views.append(view)
        self.loaders[view] = loader
        return view

    def _on_dataset_loaded(self, view: MapView, name: str) -> None:
        idx = self.tabs.indexOf(view)
        if idx >= 0 and name:
            self.tabs.setTabText(idx, name)

    def add_region_pane(self, region_id: int, title: Optional[str] = None) -> MapView:
        region_id = int(region_id)
        view = self.region_views.get(region_id)
        if view is not None:
            return view
        view = self._add_pane(title or str(region_id))
        self.region_views[region_id] = view
        return view

    def remove_region_pane(self, region_id: int) -> bool:
        """Close a region pane: drop its tab, stop its loader, leave the bus."""
        view = self.region_views.pop(int(region_id), None)
        if view is None:
            return False
        self.tabs.removeTab(self.tabs.indexOf(view))
        self.views.remove(view)
        self.loaders.pop(view).stop()
        sub = view.engine.commands
        if sub is not None:
            sub.close()
        view.deleteLater()
        logger.info(f"region pane {region_id} closed")
        return True

    def load_view(self, view: MapView, fetch: Callable[[], Dataset]) -> int:
        """Kick off a background load for one pane; returns its generation."""
        gen = self.loaders[view].request(fetch)
        view.request_frame()
        return gen

    def load_universe(self) -> int:
        return self.load_view(
            self.universe,
            functools.partial(datasets.build_universe_dataset, self._universe_correction),
        )

    def load_region(self, region_id: int, title: Optional[str] = None) -> int:
        view = self.add_region_pane(region_id, title)
        return self.load_view(
            view,
            functools.partial(datasets.build_region_dataset, (int(region_id),), self._region_correction),
        )

    def load_all(self, regions: Sequence[int] = ()) -> None:
        self.load_universe()
        for rid in regions:
            self.load_region(rid)

    # ---- Broadcast ----
    def publish(self, command: ViewportCommand) -> int:
        """Send a command to every pane and wake them up to apply it."""
        n = self.bus.publish(command)
        for view in self.views:
            view.request_frame()
        return n

    def locates(self, command: CenterOn) -> bool:
        """True if at least one pane holds the command's target."""
        return any(view.engine.locates(command) for view in self.views)

    # ---- Simple helpers the main window can call ----
    def setCurrentIndex(self, idx: int) -> None:
        idx = max(0, min(self.tabs.count() - 1, int(idx)))
        self.tabs.setCurrentIndex(idx)

    def show_universe(self) -> None:
        self.setCurrentIndex(self.tabs.indexOf(self.universe))

    def current_view(self) -> Optional[MapView]:
        w = self.tabs.currentWidget()
        return w if isinstance(w, MapView) else None

    def shutdown(self) -> None:
        for view, loader in self.loaders.items():
            loader.stop()
            sub = view.engine.commands
            if sub is not None:
                sub.close()
        logger.info("map panes shut down")
