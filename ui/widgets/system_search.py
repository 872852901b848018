# /ui/widgets/system_search.py
"""
System Search Widget

A search box over static-data system names with a two-column result list
(system, region). Choosing a result emits systemChosen; the context menu can
also centre on the result's region or mark it as the tracked location.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from PySide6.QtCore import QPoint, Qt, QTimer, Signal
from PySide6.QtWidgets import (
    QHeaderView,
    QLineEdit,
    QMenu,
    QTreeWidget,
    QTreeWidgetItem,
    QVBoxLayout,
    QWidget,
)

from controller.log_config import get_ui_logger
from data import db
from settings import system_config as cfg
from ui.error_utils import ErrorContext

logger = get_ui_logger('system_search')

_DEBOUNCE_MS = 200
_MIN_CHARS = 2


class SystemSearch(QWidget):
    systemChosen = Signal(int)   # system id
    locationMarked = Signal(int) # system id
    regionChosen = Signal(int)   # region id

    def __init__(self, parent: Optional[QWidget] = None, limit: int = cfg.SEARCH_LIMIT) -> None:
        super().__init__(parent)
        self.limit = int(limit)
        self.results: List[Dict] = []

        lay = QVBoxLayout(self)
        lay.setContentsMargins(4, 4, 4, 4)
        lay.setSpacing(4)

        self.search = QLineEdit(self)
        self.search.setPlaceholderText("Search systems...")
        self.search.setClearButtonEnabled(True)
        lay.addWidget(self.search)

        self.tree = QTreeWidget(self)
        self.tree.setColumnCount(2)
        self.tree.setHeaderLabels(["System", "Region"])
        self.tree.setRootIsDecorated(False)
        self.tree.setUniformRowHeights(True)
        self.tree.header().setSectionResizeMode(0, QHeaderView.ResizeMode.Stretch)
        self.tree.header().setSectionResizeMode(1, QHeaderView.ResizeMode.ResizeToContents)
        self.tree.setContextMenuPolicy(Qt.ContextMenuPolicy.CustomContextMenu)
        lay.addWidget(self.tree, 1)

        # Debounce typing so each keystroke doesn't hit SQLite
        self._debounce = QTimer(self)
        self._debounce.setSingleShot(True)
        self._debounce.setInterval(_DEBOUNCE_MS)
        self._debounce.timeout.connect(self.refresh)

        self.search.textChanged.connect(lambda _t: self._debounce.start())
        self.search.returnPressed.connect(self._on_return)
        self.tree.itemActivated.connect(self._on_item_activated)
        self.tree.itemClicked.connect(self._on_item_activated)
        self.tree.customContextMenuRequested.connect(self._show_context_menu)

    # ---- Data ----
    def refresh(self) -> None:
        text = self.search.text().strip()
        rows: List[Dict] = []
        if len(text) >= _MIN_CHARS:
            with ErrorContext("Searching systems", show_dialog=False):
                rows = db.search_systems(text, self.limit)
        self.populate(rows)

    def populate(self, rows: List[Dict]) -> None:
        self.results = list(rows)
        self.tree.clear()
        for r in self.results:
            it = QTreeWidgetItem([str(r.get("name") or ""), str(r.get("region_name") or "")])
            it.setData(0, Qt.ItemDataRole.UserRole, int(r["system_id"]))
            it.setData(1, Qt.ItemDataRole.UserRole, r.get("region_id"))
            self.tree.addTopLevelItem(it)
        logger.debug(f"search {self.search.text()!r}: {len(self.results)} result(s)")

    # ---- Interaction ----
    def _on_return(self) -> None:
        self._debounce.stop()
        self.refresh()
        if self.tree.topLevelItemCount():
            self._on_item_activated(self.tree.topLevelItem(0), 0)

    def _on_item_activated(self, item: Optional[QTreeWidgetItem], _col: int = 0) -> None:
        if item is None:
            return
        sid = item.data(0, Qt.ItemDataRole.UserRole)
        if sid is not None:
            self.systemChosen.emit(int(sid))

    def _show_context_menu(self, pos: QPoint) -> None:
        item = self.tree.itemAt(pos)
        if item is None:
            return
        sid = item.data(0, Qt.ItemDataRole.UserRole)
        if sid is None:
            return
        rid = item.data(1, Qt.ItemDataRole.UserRole)
        menu = QMenu(self)
        act_center = menu.addAction("Center on map")
        act_region = menu.addAction("Center on region")
        act_region.setEnabled(rid is not None)
        act_mark = menu.addAction("Mark as my location")
        chosen = menu.exec(self.tree.viewport().mapToGlobal(pos))
        if chosen is act_center:
            self.systemChosen.emit(int(sid))
        elif chosen is act_region and rid is not None:
            self.regionChosen.emit(int(rid))
        elif chosen is act_mark:
            self.locationMarked.emit(int(sid))
