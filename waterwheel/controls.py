"""
Control panel — user-adjustable parameters for the waterwheel.

Organised into groups:
  - Colour scheme
  - Physics (damping, spigot, drain, gravity, inertia)
  - Wheel (bucket count, time scale, render quality)
  - Actions (nudge, pause, reset, save)
"""

from __future__ import annotations

import logging
from typing import Optional

from PyQt5.QtCore import Qt, pyqtSignal
from PyQt5.QtWidgets import (
    QComboBox,
    QFrame,
    QGridLayout,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QScrollArea,
    QSlider,
    QVBoxLayout,
    QWidget,
)

from .app import MAX_BUCKETS, MIN_BUCKETS
from .canvas import WheelCanvas
from .engine import WaterwheelEngine
from .palettes import SCHEMES, ColorScheme, get_scheme, list_schemes

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Labelled slider helper
# ---------------------------------------------------------------------------

class LSlider(QWidget):
    """Horizontal slider with label and readout.

    The slider works in integer steps; *divisor* converts a step into the
    displayed (and emitted) value.
    """

    valueChanged = pyqtSignal(float)

    def __init__(self, label, lo, hi, val, divisor=1, suffix="", parent=None):
        super().__init__(parent)
        lay = QHBoxLayout(self)
        lay.setContentsMargins(0, 1, 0, 1)

        self._lbl = QLabel(label)
        self._lbl.setFixedWidth(110)
        lay.addWidget(self._lbl)

        self._divisor = divisor
        self._slider = QSlider(Qt.Horizontal)
        self._slider.setRange(lo, hi)
        self._slider.setValue(val)
        lay.addWidget(self._slider, stretch=1)

        self._suffix = suffix
        self._ro = QLabel(self._fmt(val))
        self._ro.setFixedWidth(52)
        self._ro.setAlignment(Qt.AlignRight | Qt.AlignVCenter)
        lay.addWidget(self._ro)

        self._slider.valueChanged.connect(self._changed)

    def _fmt(self, v: int) -> str:
        if self._divisor == 1:
            return f"{v}{self._suffix}"
        return f"{v / self._divisor:g}{self._suffix}"

    def _changed(self, v):
        self._ro.setText(self._fmt(v))
        self.valueChanged.emit(v / self._divisor)

    def value(self) -> float:
        return self._slider.value() / self._divisor

    def setValue(self, v: float) -> None:
        self._slider.setValue(int(round(v * self._divisor)))


# ---------------------------------------------------------------------------
# Control panel
# ---------------------------------------------------------------------------

class ControlPanel(QWidget):
    """Side panel with all wheel controls."""

    save_requested = pyqtSignal()

    def __init__(
        self,
        canvas: WheelCanvas,
        engine: WaterwheelEngine,
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self.canvas = canvas
        self.engine = engine
        self.setFixedWidth(320)
        p = engine.params

        # ── Scroll wrapper ────────────────────────────────────────────────
        outer = QVBoxLayout(self)
        outer.setContentsMargins(0, 0, 0, 0)
        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setFrameShape(QFrame.NoFrame)
        outer.addWidget(scroll)

        inner = QWidget()
        scroll.setWidget(inner)
        layout = QVBoxLayout(inner)
        layout.setSpacing(8)

        # ══════════════════════════════════════════════════════════════════
        # COLOUR SCHEME
        # ══════════════════════════════════════════════════════════════════
        color_group = QGroupBox("Colour Scheme")
        cg = QVBoxLayout(color_group)

        self._scheme_combo = QComboBox()
        for key in list_schemes():
            self._scheme_combo.addItem(SCHEMES[key].name, key)
        idx = self._scheme_combo.findText(canvas.scheme.name)
        if idx >= 0:
            self._scheme_combo.setCurrentIndex(idx)
        self._scheme_combo.currentIndexChanged.connect(self._on_scheme_changed)
        cg.addWidget(self._scheme_combo)

        self._swatch_layout = QHBoxLayout()
        cg.addLayout(self._swatch_layout)

        layout.addWidget(color_group)

        # ══════════════════════════════════════════════════════════════════
        # PHYSICS
        # ══════════════════════════════════════════════════════════════════
        phys_group = QGroupBox("Physics")
        pg = QVBoxLayout(phys_group)

        self._damping_slider = LSlider("Damping", 0, 100, round(p.damping * 10), 10)
        self._damping_slider.valueChanged.connect(
            lambda v: self.engine.set_params(damping=v)
        )
        pg.addWidget(self._damping_slider)

        self._fill_slider = LSlider("Fill Rate", 0, 100, round(p.fill_rate * 100), 100)
        self._fill_slider.valueChanged.connect(
            lambda v: self.engine.set_params(fill_rate=v)
        )
        pg.addWidget(self._fill_slider)

        self._drain_slider = LSlider("Drain Rate", 1, 100, round(p.drain_rate * 100), 100)
        self._drain_slider.valueChanged.connect(
            lambda v: self.engine.set_params(drain_rate=v)
        )
        pg.addWidget(self._drain_slider)

        self._gravity_slider = LSlider("Gravity", 10, 600, round(p.gravity * 10), 10)
        self._gravity_slider.valueChanged.connect(
            lambda v: self.engine.set_params(gravity=v)
        )
        pg.addWidget(self._gravity_slider)

        self._inertia_slider = LSlider("Wheel Inertia", 1, 100, round(p.base_inertia * 100), 100)
        self._inertia_slider.valueChanged.connect(
            lambda v: self.engine.set_params(base_inertia=v)
        )
        pg.addWidget(self._inertia_slider)

        layout.addWidget(phys_group)

        # ══════════════════════════════════════════════════════════════════
        # WHEEL
        # ══════════════════════════════════════════════════════════════════
        wheel_group = QGroupBox("Wheel")
        wg = QVBoxLayout(wheel_group)

        self._count_slider = LSlider("Buckets", MIN_BUCKETS, MAX_BUCKETS, engine.bucket_count)
        self._count_slider.valueChanged.connect(self._on_bucket_count)
        wg.addWidget(self._count_slider)

        self._speed_slider = LSlider("Time Scale", 10, 200, round(engine.time_scale * 100), 1, "%")
        self._speed_slider.valueChanged.connect(
            lambda v: setattr(self.engine, "time_scale", v / 100)
        )
        wg.addWidget(self._speed_slider)

        self._quality_slider = LSlider("Quality", 25, 100, round(canvas.render_scale * 100), 1, "%")
        self._quality_slider.valueChanged.connect(
            lambda v: self.canvas.set_render_scale(v / 100)
        )
        wg.addWidget(self._quality_slider)

        layout.addWidget(wheel_group)

        # ══════════════════════════════════════════════════════════════════
        # ACTIONS
        # ══════════════════════════════════════════════════════════════════
        action_group = QGroupBox("Actions")
        ag = QGridLayout(action_group)

        nudge_btn = QPushButton("↺  Nudge")
        nudge_btn.clicked.connect(lambda: self.engine.nudge(0.5))
        ag.addWidget(nudge_btn, 0, 0)

        self._pause_btn = QPushButton("⏸  Pause")
        self._pause_btn.setCheckable(True)
        self._pause_btn.toggled.connect(self._on_pause)
        ag.addWidget(self._pause_btn, 0, 1)

        reset_btn = QPushButton("↻  Reset")
        reset_btn.clicked.connect(self._on_reset)
        ag.addWidget(reset_btn, 1, 0)

        save_btn = QPushButton("↓  Save PNG")
        save_btn.clicked.connect(self.save_requested.emit)
        ag.addWidget(save_btn, 1, 1)

        layout.addWidget(action_group)

        # ── Status ────────────────────────────────────────────────────────
        self._status = QLabel("Ready — drag across the wheel to nudge it")
        self._status.setWordWrap(True)
        self._status.setStyleSheet("color: #888; font-size: 11px; font-style: italic;")
        layout.addWidget(self._status)

        # ── Help ──────────────────────────────────────────────────────────
        help_lbl = QLabel(
            "<b>How it works:</b><br>"
            "A spigot at the top fills whichever bucket passes beneath it, "
            "and every bucket leaks in proportion to its load. Gravity on "
            "the uneven load turns the wheel, which can settle, spin "
            "steadily, or reverse direction chaotically.<br><br>"
            "<i>Integration: fixed-step 4th-order Runge-Kutta.</i>"
        )
        help_lbl.setWordWrap(True)
        help_lbl.setStyleSheet("color: #777; font-size: 11px; padding: 8px;")
        layout.addWidget(help_lbl)

        layout.addStretch()

        # ── wire signals ──────────────────────────────────────────────────
        canvas.fps_changed.connect(self._on_fps)

        self._update_swatches()

    # ── colour slots ──────────────────────────────────────────────────────

    def _on_scheme_changed(self, idx: int) -> None:
        key = self._scheme_combo.currentData()
        try:
            self.canvas.set_scheme(get_scheme(key))
            self._update_swatches()
        except KeyError as e:
            logger.error("Scheme error: %s", e)

    def _update_swatches(self) -> None:
        while self._swatch_layout.count():
            item = self._swatch_layout.takeAt(0)
            if item.widget():
                item.widget().deleteLater()

        for c in self.canvas.scheme.swatches():
            sw = QWidget()
            sw.setFixedSize(20, 20)
            sw.setStyleSheet(
                f"background: rgb({c[0]},{c[1]},{c[2]}); "
                "border-radius: 10px; border: 1px solid #555;"
            )
            self._swatch_layout.addWidget(sw)
        self._swatch_layout.addStretch()

    # ── wheel slots ───────────────────────────────────────────────────────

    def _on_bucket_count(self, count: float) -> None:
        self.engine.reset(int(count))

    # ── action slots ──────────────────────────────────────────────────────

    def _on_pause(self, checked: bool) -> None:
        self.canvas.paused = checked
        self._pause_btn.setText("▶  Play" if checked else "⏸  Pause")

    def _on_reset(self) -> None:
        self.engine.reset()

    def _on_fps(self, fps: float) -> None:
        e = self.engine
        self._status.setText(
            f"{e.bucket_count} buckets  •  {fps:.0f} fps<br>"
            f"ω = {e.angular_velocity:+.2f} rad/s  •  "
            f"water {e.total_mass:.2f}  •  t = {e.sim_time:.0f} s"
        )

    def current_scheme(self) -> ColorScheme:
        return self.canvas.scheme
