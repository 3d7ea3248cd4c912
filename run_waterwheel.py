#!/usr/bin/env python3
"""
Waterwheel Simulator — quick launcher.

Usage:
    python run_waterwheel.py [options]

Run ``python run_waterwheel.py --help`` for full options.
"""

from waterwheel.app import main

if __name__ == "__main__":
    main()
