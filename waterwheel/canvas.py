"""
Waterwheel canvas widget — animated display with QTimer-driven rendering.

Each tick reads the monotonic clock, hands the elapsed time to the engine,
and redraws the wheel.  Dragging along the rim nudges the wheel that way.
"""

from __future__ import annotations

import logging
import time
from typing import Optional

from PyQt5.QtCore import QPointF, QTimer, Qt, pyqtSignal
from PyQt5.QtGui import QColor, QImage, QPainter, QPixmap
from PyQt5.QtWidgets import QWidget

from .engine import WaterwheelEngine
from .palettes import ColorScheme
from .renderer import render_frame

logger = logging.getLogger(__name__)


class WheelCanvas(QWidget):
    """Animated waterwheel display.

    Signals:
        fps_changed(float):       current rendering FPS
        velocity_changed(float):  wheel angular velocity (rad/s), once a second
    """

    fps_changed = pyqtSignal(float)
    velocity_changed = pyqtSignal(float)

    def __init__(
        self,
        engine: WaterwheelEngine,
        scheme: ColorScheme,
        render_scale: float = 1.0,
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self.engine = engine
        self.scheme = scheme
        self.render_scale = render_scale
        self._pixmap: Optional[QPixmap] = None
        self._paused = False

        # Timing
        self._last_time = time.perf_counter()
        self._frame_count = 0
        self._fps_accum = 0.0

        # Mouse interaction
        self._dragging = False
        self._last_mouse: Optional[QPointF] = None

        self.setMinimumSize(320, 320)

        # Animation timer (~60 fps)
        self._timer = QTimer(self)
        self._timer.setInterval(16)
        self._timer.timeout.connect(self._tick)
        self._timer.start()

    # ── properties ────────────────────────────────────────────────────────

    @property
    def paused(self) -> bool:
        return self._paused

    @paused.setter
    def paused(self, val: bool) -> None:
        self._paused = val
        if not val:
            self._last_time = time.perf_counter()

    def set_scheme(self, scheme: ColorScheme) -> None:
        self.scheme = scheme

    def set_render_scale(self, scale: float) -> None:
        self.render_scale = max(0.25, min(1.0, scale))

    # ── animation loop ────────────────────────────────────────────────────

    def _tick(self) -> None:
        now = time.perf_counter()
        dt = now - self._last_time
        self._last_time = now

        # Physics
        if not self._paused:
            self.engine.step(dt)

        # Render
        w, h = max(4, self.width()), max(4, self.height())
        img = render_frame(self.engine.state, self.scheme, w, h, self.render_scale)

        # Convert to QPixmap
        ih, iw, ch = img.shape
        qimg = QImage(img.data, iw, ih, ch * iw, QImage.Format_RGBA8888).copy()
        self._pixmap = QPixmap.fromImage(qimg).scaled(
            w, h,
            Qt.IgnoreAspectRatio,
            Qt.SmoothTransformation,
        )
        self.update()

        # FPS tracking
        self._frame_count += 1
        self._fps_accum += dt
        if self._fps_accum >= 1.0:
            fps = self._frame_count / self._fps_accum
            self.fps_changed.emit(fps)
            self.velocity_changed.emit(self.engine.angular_velocity)
            self._frame_count = 0
            self._fps_accum = 0.0

    # ── painting ──────────────────────────────────────────────────────────

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.SmoothPixmapTransform)

        bg = self.scheme.background
        painter.fillRect(self.rect(), QColor(bg[0], bg[1], bg[2]))

        if self._pixmap:
            painter.drawPixmap(0, 0, self._pixmap)

        if self._paused:
            fg = self.scheme.outline
            painter.setPen(QColor(fg[0], fg[1], fg[2], 180))
            painter.drawText(self.rect(), Qt.AlignCenter, "⏸ PAUSED")

        painter.end()

    # ── mouse interaction (nudging) ───────────────────────────────────────

    def mousePressEvent(self, event):
        if event.button() == Qt.LeftButton:
            self._dragging = True
            self._last_mouse = QPointF(event.pos())

    def mouseMoveEvent(self, event):
        if not self._dragging or self._last_mouse is None:
            return
        pos = QPointF(event.pos())
        dx = pos.x() - self._last_mouse.x()
        dy = pos.y() - self._last_mouse.y()
        dist = (dx * dx + dy * dy) ** 0.5
        if dist > 3:
            # drag tangent to the rim about the wheel centre; y points down
            rx = pos.x() - self.width() / 2
            ry = pos.y() - self.height() / 2
            self.engine.nudge(min(1.0, dist * 0.01), direction=rx * dy - ry * dx)
        self._last_mouse = pos

    def mouseReleaseEvent(self, event):
        if event.button() == Qt.LeftButton:
            self._dragging = False
            self._last_mouse = None

    # ── save ──────────────────────────────────────────────────────────────

    def get_image(self) -> Optional[QImage]:
        if self._pixmap:
            return self._pixmap.toImage()
        return None
