# /ui/maps/map_view.py

"""
MapView
- One QWidget per map pane, backed by its own MapEngine
- paintEvent is the render pass: edges, systems, labels, pulses, marker LED
- Left-drag pans, wheel zooms around the cursor, click selects a system
- A frame timer only runs while something animates (pulses, marker blink,
  a pending dataset load); otherwise the pane repaints on input alone
"""

from __future__ import annotations

from typing import Optional

from PySide6.QtCore import QPointF, QRectF, QTimer, Qt, Signal
from PySide6.QtGui import QBrush, QColor, QFont, QPainter, QPen
from PySide6.QtWidgets import QSizePolicy, QWidget

from controller.log_config import get_ui_logger
from engine.map_engine import Frame, MapEngine
from settings import system_config as cfg
from ui.error_utils import catch_and_log_silent
from ui.maps.symbols import draw_marker, draw_pulse, draw_selection

logger = get_ui_logger('map_view')

_CLICK_SLOP_PX = 4


class MapView(QWidget):
    pointClicked = Signal(int)
    datasetLoaded = Signal(str)

    def __init__(self, engine: MapEngine, parent: Optional[QWidget] = None,
                 debug_overlay: bool = False) -> None:
        super().__init__(parent)
        self.engine = engine
        self.debug_overlay = bool(debug_overlay)
        self.last_frame: Frame = Frame()
        self.frames_drawn = 0

        self.setMouseTracking(False)
        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)
        self.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding)
        self.setAttribute(Qt.WidgetAttribute.WA_OpaquePaintEvent, True)

        self._press_pos: Optional[QPointF] = None
        self._last_drag_pos: Optional[QPointF] = None
        self._dragged = False

        self._label_font = QFont()
        self._label_font.setPointSize(cfg.LABEL_FONT_PT)

        self._frame_timer = QTimer(self)
        self._frame_timer.setInterval(cfg.MAP_FRAME_INTERVAL_MS)
        self._frame_timer.timeout.connect(self.update)

    # ---------------- Public API ----------------
    @property
    def animating(self) -> bool:
        return self._frame_timer.isActive()

    def request_frame(self) -> None:
        """Repaint soon; a shown pane keeps its frame clock alive until things settle.

        Hidden panes only queue the update and catch up in showEvent.
        """
        if self.isVisible() and not self._frame_timer.isActive():
            self._frame_timer.start()
        self.update()

    def center_on_point(self, point_id: int) -> bool:
        ok = self.engine.set_center_by_point_id(point_id)
        if ok:
            self.update()
        return ok

    # ---------------- Qt events ----------------
    def resizeEvent(self, ev) -> None:
        self.engine.resize(self.width(), self.height())
        super().resizeEvent(ev)

    def showEvent(self, ev) -> None:
        super().showEvent(ev)
        self.request_frame()

    def hideEvent(self, ev) -> None:
        self._frame_timer.stop()
        super().hideEvent(ev)

    def paintEvent(self, _ev) -> None:
        p = QPainter(self)
        try:
            p.fillRect(self.rect(), QColor(cfg.COLOR_BACKGROUND))
            frame = self._paint(p)
        finally:
            p.end()
        if frame is not None:
            self.last_frame = frame
            self.frames_drawn += 1
            if frame.loaded:
                self.datasetLoaded.emit(self.engine.name)
            self._schedule(frame)

    def mousePressEvent(self, ev) -> None:
        if ev.button() == Qt.MouseButton.LeftButton:
            self._press_pos = ev.position()
            self._last_drag_pos = ev.position()
            self._dragged = False
            ev.accept()
            return
        super().mousePressEvent(ev)

    def mouseMoveEvent(self, ev) -> None:
        if self._last_drag_pos is None or not (ev.buttons() & Qt.MouseButton.LeftButton):
            super().mouseMoveEvent(ev)
            return
        pos = ev.position()
        if not self._dragged and self._press_pos is not None:
            moved = pos - self._press_pos
            if abs(moved.x()) + abs(moved.y()) < _CLICK_SLOP_PX:
                return
            self._dragged = True
        d = pos - self._last_drag_pos
        self._last_drag_pos = pos
        # Dragging moves the map with the cursor, so the centre goes the other way
        if self.engine.pan((-d.x(), -d.y())):
            self.update()
        ev.accept()

    def mouseReleaseEvent(self, ev) -> None:
        if ev.button() != Qt.MouseButton.LeftButton or self._press_pos is None:
            super().mouseReleaseEvent(ev)
            return
        pos = ev.position()
        was_drag = self._dragged
        self._press_pos = None
        self._last_drag_pos = None
        self._dragged = False
        if not was_drag:
            pid = self.engine.point_at((pos.x(), pos.y()), cfg.HIT_TOLERANCE_PX)
            if pid is not None:
                logger.debug(f"[{self.engine.name}] clicked system {pid}")
                self.pointClicked.emit(int(pid))
        ev.accept()

    def wheelEvent(self, ev) -> None:
        notches = ev.angleDelta().y() / 120.0
        if not notches:
            super().wheelEvent(ev)
            return
        pos = ev.position()
        self.engine.zoom_by(cfg.MAP_WHEEL_ZOOM_STEP ** notches, (pos.x(), pos.y()))
        self.update()
        ev.accept()

    # ---------------- Render pass ----------------
    @catch_and_log_silent("MapView render pass")
    def _paint(self, p: QPainter) -> Frame:
        frame = self.engine.begin_frame()
        engine = self.engine
        p.setRenderHint(QPainter.RenderHint.Antialiasing, True)

        def screen(plane) -> QPointF:
            x, y = engine.world_to_screen(plane)
            return QPointF(x, y)

        # Edges
        edge_pen = QPen(QColor(cfg.COLOR_EDGE))
        edge_pen.setWidthF(1.5)
        p.setPen(edge_pen)
        for e in frame.edges:
            p.drawLine(screen(e.start), screen(e.end))

        # Systems
        system_color = QColor(cfg.COLOR_SYSTEM)
        p.setPen(Qt.PenStyle.NoPen)
        p.setBrush(QBrush(system_color))
        r = cfg.POINT_RADIUS_PX
        centres = [(pt, screen(pt.plane)) for pt in frame.points]
        for _pt, c in centres:
            p.drawEllipse(c, r, r)

        # System names once zoomed in enough
        if engine.viewport.zoom >= cfg.NAME_MIN_ZOOM:
            p.setPen(QPen(system_color))
            for pt, c in centres:
                if pt.name:
                    p.drawText(QPointF(c.x() + r + 2, c.y() - r - 2), pt.name)

        # Region labels
        if frame.labels:
            p.setFont(self._label_font)
            p.setPen(QPen(QColor(cfg.COLOR_LABEL)))
            metrics = p.fontMetrics()
            for label in frame.labels:
                c = screen(label.plane)
                w = metrics.horizontalAdvance(label.name)
                p.drawText(QPointF(c.x() - w / 2.0, c.y()), label.name)

        # Selection ring
        if frame.selected is not None:
            draw_selection(p, screen(frame.selected[1]))

        # Pulses
        for pulse in frame.pulses:
            draw_pulse(p, screen(pulse.plane), pulse.alpha, pulse.elapsed)

        # Marker LEDs
        now_ms = int(engine.clock() * 1000)
        for _entity, (_pid, plane) in frame.markers.items():
            draw_marker(p, screen(plane), now_ms)

        if self.debug_overlay:
            self._paint_debug(p, frame)
        return frame

    def _paint_debug(self, p: QPainter, frame: Frame) -> None:
        vp = self.engine.viewport
        bounds = self.engine.bounds
        lines = []
        if bounds is not None:
            lines.append(f"MIN:{bounds.min_x:.1f},{bounds.min_y:.1f}")
            lines.append(f"MAX:{bounds.max_x:.1f},{bounds.max_y:.1f}")
        if vp.center is not None:
            lines.append(f"CNT:{vp.center[0]:.1f},{vp.center[1]:.1f}")
        lines.append(f"DST:{vp.visibility_radius:.1f}")
        lines.append(f"VIS:{len(frame.visible_ids)}")
        lines.append(f"ZOOM:{vp.zoom:.3f}")

        p.setPen(QPen(QColor(cfg.COLOR_DEBUG)))
        p.setBrush(Qt.BrushStyle.NoBrush)
        metrics = p.fontMetrics()
        y = 6 + metrics.ascent()
        for line in lines:
            p.drawText(QPointF(6, y), line)
            y += metrics.height()

        # Visibility circle
        ox, oy = vp.surface_origin
        radius_px = vp.visibility_radius * vp.zoom
        p.drawEllipse(QRectF(ox - radius_px, oy - radius_px, 2 * radius_px, 2 * radius_px))

    def _schedule(self, frame: Frame) -> None:
        wants = self.isVisible() and (frame.keep_animating or bool(frame.markers))
        if wants and not self._frame_timer.isActive():
            self._frame_timer.start()
        elif not wants and self._frame_timer.isActive():
            self._frame_timer.stop()
