"""
Colour schemes for the waterwheel display.

Each scheme defines:
  - background: Canvas colour behind the wheel
  - rim:        Wheel rim stroke
  - bucket:     Empty bucket interior
  - water:      Water fill
  - outline:    Bucket outline
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Tuple

RGB = Tuple[int, int, int]


@dataclass(frozen=True)
class ColorScheme:
    """Immutable colour scheme for the wheel."""
    name: str
    background: RGB
    rim: RGB
    bucket: RGB
    water: RGB
    outline: RGB

    def swatches(self) -> List[RGB]:
        return [self.background, self.rim, self.bucket, self.water, self.outline]


# ── Built-in schemes ─────────────────────────────────────────────────────

SCHEMES: Dict[str, ColorScheme] = {
    "classic": ColorScheme(
        name="Classic Paper",
        background=(255, 255, 221), rim=(85, 85, 85),
        bucket=(255, 255, 255), water=(34, 136, 238), outline=(0, 0, 0),
    ),
    "night": ColorScheme(
        name="Night Mill",
        background=(18, 20, 30), rim=(120, 110, 95),
        bucket=(40, 44, 58), water=(70, 170, 255), outline=(200, 200, 210),
    ),
    "slate": ColorScheme(
        name="Slate & Moss",
        background=(60, 66, 72), rim=(30, 32, 34),
        bucket=(215, 215, 205), water=(90, 160, 90), outline=(20, 20, 20),
    ),
}

DEFAULT_SCHEME = "classic"


# ── Accessors ─────────────────────────────────────────────────────────────

def get_scheme(name: str) -> ColorScheme:
    if name not in SCHEMES:
        available = ", ".join(sorted(SCHEMES.keys()))
        raise KeyError(f"Unknown scheme '{name}'. Available: {available}")
    return SCHEMES[name]


def list_schemes() -> List[str]:
    return sorted(SCHEMES.keys())
