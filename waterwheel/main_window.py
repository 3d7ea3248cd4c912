"""
Main window — assembles the wheel canvas, control panel, and menu bar.
"""

from __future__ import annotations

import logging

from PyQt5.QtGui import QKeySequence
from PyQt5.QtWidgets import (
    QAction,
    QFileDialog,
    QHBoxLayout,
    QMainWindow,
    QMessageBox,
    QSizePolicy,
    QWidget,
)

from . import __version__
from .canvas import WheelCanvas
from .controls import ControlPanel
from .engine import WaterwheelEngine
from .palettes import ColorScheme

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    """Top-level window for the Waterwheel Simulator."""

    def __init__(
        self,
        engine: WaterwheelEngine,
        scheme: ColorScheme,
        render_scale: float = 1.0,
    ) -> None:
        super().__init__()
        self.setWindowTitle(f"Waterwheel Simulator  v{__version__}")
        self.setMinimumSize(720, 480)

        self.engine = engine
        self.canvas = WheelCanvas(engine, scheme, render_scale)
        self.controls = ControlPanel(self.canvas, engine)

        # Layout
        central = QWidget()
        self.setCentralWidget(central)
        h_layout = QHBoxLayout(central)
        h_layout.setContentsMargins(8, 8, 8, 8)
        h_layout.setSpacing(12)

        self.canvas.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)
        h_layout.addWidget(self.canvas, stretch=1)
        h_layout.addWidget(self.controls)

        # Menu
        self._build_menu()

        # Status bar
        self.statusBar().showMessage("Spigot open — filling…")

        # Signals
        self.controls.save_requested.connect(self._save)
        self.canvas.velocity_changed.connect(self._on_velocity)

    def _build_menu(self) -> None:
        menu = self.menuBar()

        file_menu = menu.addMenu("&File")
        save_act = QAction("&Save Image…", self)
        save_act.setShortcut(QKeySequence.Save)
        save_act.triggered.connect(self._save)
        file_menu.addAction(save_act)
        file_menu.addSeparator()
        quit_act = QAction("&Quit", self)
        quit_act.setShortcut(QKeySequence.Quit)
        quit_act.triggered.connect(self.close)
        file_menu.addAction(quit_act)

        edit_menu = menu.addMenu("&Edit")
        pause_act = QAction("&Pause / Resume", self)
        pause_act.setShortcut(QKeySequence("Space"))
        pause_act.triggered.connect(self._toggle_pause)
        edit_menu.addAction(pause_act)
        reset_act = QAction("&Reset Wheel", self)
        reset_act.setShortcut(QKeySequence("Ctrl+R"))
        reset_act.triggered.connect(self._reset)
        edit_menu.addAction(reset_act)

        wheel_menu = menu.addMenu("&Wheel")
        nudge_act = QAction("&Nudge", self)
        nudge_act.setShortcut(QKeySequence("N"))
        nudge_act.triggered.connect(lambda: self.engine.nudge(0.5))
        wheel_menu.addAction(nudge_act)
        kick_act = QAction("&Kick", self)
        kick_act.setShortcut(QKeySequence("K"))
        kick_act.triggered.connect(lambda: self.engine.nudge(3.0))
        wheel_menu.addAction(kick_act)

        help_menu = menu.addMenu("&Help")
        about_act = QAction("&About", self)
        about_act.triggered.connect(self._about)
        help_menu.addAction(about_act)

    def _save(self) -> None:
        img = self.canvas.get_image()
        if img is None:
            QMessageBox.warning(self, "Save Error", "No image to save yet.")
            return
        path, _ = QFileDialog.getSaveFileName(
            self, "Save Waterwheel Image", "waterwheel.png",
            "PNG (*.png);;JPEG (*.jpg);;All (*)",
        )
        if path:
            if img.save(path):
                self.statusBar().showMessage(f"Saved to {path}")
            else:
                QMessageBox.critical(self, "Save Error", f"Failed to save:\n{path}")

    def _toggle_pause(self) -> None:
        self.controls._pause_btn.setChecked(not self.canvas.paused)

    def _reset(self) -> None:
        self.controls._on_reset()

    def _on_velocity(self, omega: float) -> None:
        direction = "clockwise" if omega >= 0 else "counter-clockwise"
        self.statusBar().showMessage(
            f"Turning {direction} at {abs(omega):.2f} rad/s  •  "
            f"{self.engine.revolutions:+.1f} turns"
        )

    def _about(self) -> None:
        QMessageBox.about(
            self,
            "About Waterwheel Simulator",
            f"<h3>Waterwheel Simulator v{__version__}</h3>"
            "<p>A leaky-bucket waterwheel: the classic mechanical analogue "
            "of the Lorenz equations.</p>"
            "<p><b>Physics model:</b></p>"
            "<ul>"
            "<li>Gravity torque from every bucket, viscous damping</li>"
            "<li>Moment of inertia grows with the water carried</li>"
            "<li>Each bucket drains in proportion to its load</li>"
            "<li>Smooth spigot profile over the top bucket slot</li>"
            "</ul>"
            "<p><b>Integration:</b> fixed-step 4th-order Runge-Kutta, "
            "driven by the frame clock.</p>",
        )
