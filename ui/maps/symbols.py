# /ui/maps/symbols.py
"""
Shape helpers for map rendering.
"""

from __future__ import annotations

from PySide6.QtCore import QPointF, QRectF, Qt
from PySide6.QtGui import QBrush, QColor, QPainter, QPainterPath, QPen

from engine.notifications import pulse_width
from settings import system_config as cfg


def led_alpha(now_ms: int, period_ms: int = cfg.MARKER_BLINK_PERIOD_MS) -> int:
    """Triangle wave 0 -> 255 -> 0 over one blink period."""
    half = period_ms / 2.0
    phase = now_ms % period_ms
    a = phase if phase <= half else period_ms - phase
    return int(round(255.0 * a / half)) if half > 0 else 255


def make_pulse_path(cx: float, cy: float, radius: float) -> QPainterPath:
    """Rounded box around a system, sized like a name tag."""
    path = QPainterPath()
    w = radius * 3.6
    h = radius * 1.4
    path.addRoundedRect(QRectF(cx - w / 2.0, cy - h / 2.0, w, h), radius * 0.4, radius * 0.4)
    return path


def draw_pulse(p: QPainter, center: QPointF, alpha: float, elapsed: float) -> None:
    color = QColor(cfg.COLOR_PULSE)
    color.setAlpha(int(round(255.0 * max(0.0, min(1.0, alpha)))))
    pen = QPen(color)
    pen.setWidthF(pulse_width(elapsed))
    p.setPen(pen)
    p.setBrush(Qt.BrushStyle.NoBrush)
    p.drawPath(make_pulse_path(center.x(), center.y(), cfg.PULSE_RING_RADIUS_PX))


def draw_marker(p: QPainter, anchor: QPointF, now_ms: int) -> None:
    """Blinking LED next to the tracked system."""
    ox, oy = cfg.MARKER_OFFSET_PX
    led = QPointF(anchor.x() + ox, anchor.y() + oy)
    r = cfg.MARKER_RADIUS_PX

    border = QPen(QColor(cfg.COLOR_MARKER_BORDER))
    border.setWidthF(2.0)
    p.setPen(border)
    p.setBrush(QBrush(QColor(cfg.COLOR_BACKGROUND)))
    p.drawEllipse(led, r, r)

    fill = QColor(cfg.COLOR_MARKER)
    fill.setAlpha(led_alpha(now_ms))
    p.setPen(Qt.PenStyle.NoPen)
    p.setBrush(QBrush(fill))
    p.drawEllipse(led, r, r)


def draw_selection(p: QPainter, center: QPointF) -> None:
    """Ring with four ticks around the selected system."""
    r = cfg.SELECTION_RADIUS_PX
    pen = QPen(QColor(cfg.COLOR_SELECTION))
    pen.setWidthF(1.5)
    p.setPen(pen)
    p.setBrush(Qt.BrushStyle.NoBrush)
    p.drawEllipse(center, r, r)
    tick = r * 0.5
    for dx, dy in ((1, 0), (-1, 0), (0, 1), (0, -1)):
        p.drawLine(QPointF(center.x() + dx * r, center.y() + dy * r),
                   QPointF(center.x() + dx * (r + tick), center.y() + dy * (r + tick)))
