"""
Application entry point — CLI parsing, dependency checks, Qt launch.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from . import __version__

MIN_BUCKETS = 1
MAX_BUCKETS = 64


def _check_deps() -> list:
    missing = []
    try:
        import numpy  # noqa: F401
    except ImportError:
        missing.append("numpy")
    try:
        import PyQt5  # noqa: F401
    except ImportError:
        missing.append("PyQt5")
    return missing


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="waterwheel",
        description="Waterwheel Simulator — chaotic leaky-bucket wheel (RK4).",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "examples:\n"
            "  %(prog)s                          # default 17 buckets, classic paper\n"
            "  %(prog)s --buckets 8 --scheme night\n"
            "  %(prog)s --seed 42 --damping 1.5  # reproducible start, looser wheel\n"
            "  %(prog)s --list-schemes           # show available colour schemes\n"
            "  %(prog)s -v                       # verbose logging\n"
        ),
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument("--buckets", type=int, default=17, help="Number of buckets (1–64, default 17)")
    p.add_argument("--scheme", type=str, default="classic", help="Colour scheme")
    p.add_argument("--seed", type=int, default=None, help="Seed for the initial spin")
    p.add_argument("--time-scale", type=float, default=0.5,
                   help="Simulated seconds per real second (default 0.5)")
    p.add_argument("--max-dt", type=float, default=0.03,
                   help="Largest single integration step in seconds (default 0.03)")
    p.add_argument("--quality", type=int, default=100, help="Render quality %% (25–100, default 100)")

    phys = p.add_argument_group("physics")
    phys.add_argument("--damping", type=float, default=None, help="Damping coefficient (2.5)")
    phys.add_argument("--inertia", type=float, default=None, help="Empty wheel inertia (0.1)")
    phys.add_argument("--drain-rate", type=float, default=None, help="Drain rate per bucket (0.3)")
    phys.add_argument("--fill-rate", type=float, default=None, help="Spigot fill rate (0.33)")
    phys.add_argument("--gravity", type=float, default=None, help="Gravity (32.2)")
    phys.add_argument("--radius", type=float, default=None, help="Wheel radius (1.0)")

    p.add_argument("--list-schemes", action="store_true", help="List colour schemes and exit")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return p.parse_args(argv)


def _physics_overrides(args: argparse.Namespace) -> dict:
    names = {
        "damping": "damping",
        "inertia": "base_inertia",
        "drain_rate": "drain_rate",
        "fill_rate": "fill_rate",
        "gravity": "gravity",
        "radius": "radius",
    }
    return {
        field: getattr(args, arg)
        for arg, field in names.items()
        if getattr(args, arg) is not None
    }


def _validate(args: argparse.Namespace) -> Optional[str]:
    """Return an error message for unusable arguments, or None."""
    from .palettes import SCHEMES, list_schemes
    from .wheel import InvalidConfiguration, WheelParams

    if not (MIN_BUCKETS <= args.buckets <= MAX_BUCKETS):
        return f"--buckets must be {MIN_BUCKETS}–{MAX_BUCKETS}."
    if args.time_scale <= 0:
        return "--time-scale must be positive."
    if args.max_dt <= 0:
        return "--max-dt must be positive."
    if not (25 <= args.quality <= 100):
        return "--quality must be 25–100."
    try:
        WheelParams(**_physics_overrides(args))
    except InvalidConfiguration as e:
        return str(e)
    if args.scheme not in SCHEMES:
        avail = ", ".join(list_schemes())
        return f"Unknown scheme '{args.scheme}'. Available: {avail}"
    return None


def main(argv: Optional[List[str]] = None) -> None:
    args = _parse_args(argv)

    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    logger = logging.getLogger("waterwheel")

    # List schemes
    if args.list_schemes:
        from .palettes import SCHEMES, list_schemes
        print("Available colour schemes:")
        for key in list_schemes():
            s = SCHEMES[key]
            print(f"  {key:10s}  {s.name:16s}  water=rgb{s.water}  background=rgb{s.background}")
        sys.exit(0)

    # Validate
    error = _validate(args)
    if error:
        print(f"ERROR: {error}", file=sys.stderr)
        sys.exit(1)

    # Dependency check
    missing = _check_deps()
    if missing:
        print(f"ERROR: Missing packages: {', '.join(missing)}\n"
              f"Install: pip install {' '.join(missing)}", file=sys.stderr)
        sys.exit(1)

    # Launch
    logger.info("Starting Waterwheel Simulator v%s", __version__)
    logger.info("Buckets: %d, Scheme: %s, Seed: %s", args.buckets, args.scheme, args.seed)

    from PyQt5.QtWidgets import QApplication
    from .engine import WaterwheelEngine
    from .main_window import MainWindow
    from .palettes import get_scheme
    from .wheel import WheelParams

    app = QApplication(sys.argv[:1])
    app.setStyle("Fusion")
    app.setApplicationName("Waterwheel Simulator")
    app.setApplicationVersion(__version__)

    app.setStyleSheet("""
        QMainWindow, QWidget {
            background: #1c1f24;
            color: #c0c8d0;
        }
        QGroupBox {
            font-weight: bold;
            font-size: 12px;
            color: #8fb8e0;
            border: 1px solid #2e343c;
            border-radius: 6px;
            margin-top: 8px;
            padding-top: 14px;
        }
        QGroupBox::title {
            subcontrol-origin: margin;
            subcontrol-position: top left;
            padding: 2px 8px;
        }
        QPushButton {
            background: #262b32;
            border: 1px solid #3c444e;
            border-radius: 5px;
            padding: 5px 12px;
            color: #c0c8d0;
            font-size: 12px;
        }
        QPushButton:hover {
            background: #2e343c;
            border-color: #5a6878;
        }
        QPushButton:checked {
            background: #34506e;
            color: #e8f0f8;
        }
        QComboBox {
            background: #262b32;
            border: 1px solid #3c444e;
            border-radius: 4px;
            padding: 4px 8px;
            color: #c0c8d0;
        }
        QSlider::groove:horizontal {
            height: 4px;
            background: #2e343c;
            border-radius: 2px;
        }
        QSlider::handle:horizontal {
            background: #2288ee;
            width: 14px;
            height: 14px;
            margin: -5px 0;
            border-radius: 7px;
        }
        QLabel {
            color: #a8b0b8;
            font-size: 12px;
        }
        QStatusBar {
            color: #7a8490;
            font-size: 11px;
        }
    """)

    params = WheelParams(**_physics_overrides(args))
    engine = WaterwheelEngine(
        bucket_count=args.buckets,
        params=params,
        seed=args.seed,
        time_scale=args.time_scale,
        max_dt=args.max_dt,
    )
    scheme = get_scheme(args.scheme)

    window = MainWindow(engine, scheme, render_scale=args.quality / 100)
    window.resize(960, 640)
    window.show()

    sys.exit(app.exec_())
