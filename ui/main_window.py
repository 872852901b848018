# /ui/main_window.py

from __future__ import annotations

import functools
import time
from typing import Dict, Iterable, Optional

from PySide6.QtCore import Qt
from PySide6.QtGui import QAction
from PySide6.QtWidgets import QDockWidget, QLabel, QMainWindow, QStatusBar, QWidget

from controller.config import Config
from controller.log_config import get_ui_logger
from data import db
from data.coordinates import CoordinateCorrection
from engine.commands import CenterOn, CommandBus, MarkerMoved, Notify, Select, Target
from settings import system_config as cfg
from ui.error_handler import log_warning
from ui.error_utils import catch_and_log, warn_on_exception

from .maps.tabs import MapTabs
from .widgets.system_search import SystemSearch

# Set up UI logger
logger = get_ui_logger('main_window')

# Marker entity used for the location picked by hand from the search list
LOCAL_ENTITY_ID = 0

_STATUS_MESSAGE_MS = 5000


class MainWindow(QMainWindow):
    WIN_ID = "MainWindow"

    def __init__(self, config: Optional[Config] = None, bus: Optional[CommandBus] = None,
                 parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.config = config or Config()
        self.setWindowTitle("Telescope")
        self.resize(1200, 800)

        self.bus = bus or CommandBus()
        self.maps = MapTabs(
            self.bus,
            universe_correction=CoordinateCorrection(self.config.factor, self.config.invert_axes),
            region_correction=CoordinateCorrection(self.config.region_factor, cfg.REGION_INVERT_AXES),
            debug_overlay=self.config.debug_overlay,
            parent=self,
        )
        self.setCentralWidget(self.maps)

        # ---- Search dock ----
        self.search = SystemSearch(self)
        self.search_dock = QDockWidget("Search", self)
        self.search_dock.setObjectName("dock_search")
        self.search_dock.setWidget(self.search)
        self.addDockWidget(Qt.DockWidgetArea.LeftDockWidgetArea, self.search_dock)

        # ---- Status bar ----
        sb = QStatusBar(self)
        self.setStatusBar(sb)
        self.lbl_selected = QLabel("Selected: —")
        self.lbl_systems = QLabel("Systems: —")
        for w in (self.lbl_selected, self.lbl_systems):
            sb.addPermanentWidget(w)

        self.region_actions: Dict[int, QAction] = {}
        self._install_view_menu()

        self.search.systemChosen.connect(self.on_system_chosen)
        self.search.regionChosen.connect(self.on_region_chosen)
        self.search.locationMarked.connect(self.on_location_marked)
        self.maps.pointClicked.connect(self.on_point_clicked)

        self._names: Dict[int, str] = {}

    # ---------- menus ----------
    def _install_view_menu(self) -> None:
        menu = self.menuBar().addMenu("&View")
        menu.addAction(self.search_dock.toggleViewAction())

        self.regions_menu = menu.addMenu("Regions")

        self.act_notify_on_search = QAction("Notify on search", self)
        self.act_notify_on_search.setCheckable(True)
        self.act_notify_on_search.setChecked(self.config.notify_on_search)
        menu.addAction(self.act_notify_on_search)

        self.act_debug_overlay = QAction("Debug overlay", self)
        self.act_debug_overlay.setCheckable(True)
        self.act_debug_overlay.setChecked(self.config.debug_overlay)
        self.act_debug_overlay.toggled.connect(self._set_debug_overlay)
        menu.addAction(self.act_debug_overlay)

        act_reload = QAction("Reload maps", self)
        act_reload.triggered.connect(self.reload_maps)
        menu.addAction(act_reload)

    def _set_debug_overlay(self, enabled: bool) -> None:
        for view in self.maps.views:
            view.debug_overlay = bool(enabled)
            view.update()

    @warn_on_exception("Listing regions")
    def populate_regions_menu(self) -> None:
        """One checkable entry per region; checked entries have an open pane."""
        self.regions_menu.clear()
        self.region_actions.clear()
        for r in db.get_regions():
            rid = int(r["region_id"])
            act = QAction(str(r["region_name"]), self)
            act.setCheckable(True)
            act.setChecked(rid in self.maps.region_views)
            act.toggled.connect(functools.partial(self.set_region_shown, rid, str(r["region_name"])))
            self.regions_menu.addAction(act)
            self.region_actions[rid] = act

    def set_region_shown(self, region_id: int, title: str, shown: bool) -> None:
        if shown:
            if region_id not in self.maps.region_views:
                self.maps.load_region(region_id, title)
            self.maps.setCurrentIndex(self.maps.tabs.indexOf(self.maps.region_views[region_id]))
        else:
            self.maps.remove_region_pane(region_id)
        logger.info(f"region {region_id} {'shown' if shown else 'hidden'}")

    # ---------- lifecycle ----------
    @catch_and_log("Loading maps")
    def start_loading(self) -> None:
        """Queue background loads for the universe and every startup region."""
        self._load(self.config.startup_regions)

    @catch_and_log("Reloading maps")
    def reload_maps(self) -> None:
        """Reload the universe and every region pane currently open."""
        self._load(tuple(self.maps.region_views))

    def _load(self, regions: Iterable[int]) -> None:
        self.maps.load_all(tuple(regions))
        self.populate_regions_menu()
        self.refresh_status_counts()

    @warn_on_exception("Refreshing status counts")
    def refresh_status_counts(self) -> None:
        counts = db.get_counts()
        self.lbl_systems.setText(f"Systems: {counts['systems']}")

    def closeEvent(self, e) -> None:
        self.maps.shutdown()
        super().closeEvent(e)

    # ---------- broadcast handlers ----------
    def on_system_chosen(self, system_id: int) -> None:
        system_id = int(system_id)
        self._center_on(CenterOn(system_id, Target.SYSTEM), "System")
        self.maps.publish(Select(system_id))
        if self.act_notify_on_search.isChecked():
            self.maps.publish(Notify(system_id, time.monotonic()))
        self._show_selected(system_id)

    def on_region_chosen(self, region_id: int) -> None:
        self._center_on(CenterOn(int(region_id), Target.REGION), "Region")

    def _center_on(self, command: CenterOn, kind: str) -> bool:
        """Broadcast a CenterOn; warn when no open pane holds its target."""
        self.maps.publish(command)
        if self.maps.locates(command):
            return True
        msg = f"{kind} with Id {command.target_id} could not be located"
        log_warning(msg, "Center on map")
        self.statusBar().showMessage(msg, _STATUS_MESSAGE_MS)
        return False

    def on_location_marked(self, system_id: int) -> None:
        self.set_tracked_location(LOCAL_ENTITY_ID, system_id)

    def set_tracked_location(self, entity_id: int, system_id: int) -> None:
        """Move an entity's marker on every pane."""
        self.maps.publish(MarkerMoved(int(entity_id), int(system_id)))
        logger.info(f"entity {entity_id} now at system {system_id}")

    def on_point_clicked(self, system_id: int) -> None:
        self.maps.publish(Select(int(system_id)))
        self._show_selected(system_id)

    def _show_selected(self, system_id: int) -> None:
        name = self._names.get(system_id)
        if name is None:
            for view in self.maps.views:
                point = view.engine.store.get(system_id)
                if point is not None and point.name:
                    name = point.name
                    break
        if name is None:
            for r in self.search.results:
                if int(r["system_id"]) == int(system_id):
                    name = r.get("name")
                    break
        if name:
            self._names[system_id] = name
        self.lbl_selected.setText(f"Selected: {name or system_id}")
