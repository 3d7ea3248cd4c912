"""
Wheel renderer — numpy rasterisation of the wheel state.

Draws the rim and every bucket (with its water level) into an
(H, W, 4) RGBA uint8 array suitable for display in a QImage.
Bucket 0 at rotation 0 sits at the top; positive rotation turns the
wheel clockwise on screen.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from .palettes import ColorScheme
    from .wheel import WheelState

logger = logging.getLogger(__name__)

WHEEL_SCALE = 0.8       # rim radius as a fraction of the half-extent
BUCKET_SCALE = 3.0      # bucket side = BUCKET_SCALE * half-extent / n
FULL_BUCKET = 0.4       # mass drawn as a completely full bucket
RIM_WIDTH = 10.0        # px at render_scale 1
OUTLINE_WIDTH = 2.0     # px at render_scale 1


@dataclass
class BucketLayout:
    """Screen geometry of the wheel for one frame."""
    cx: float
    cy: float
    rim_radius: float
    x: np.ndarray       # bucket centres
    y: np.ndarray
    size: float         # bucket side length
    fill: np.ndarray    # water height inside each bucket


def bucket_layout(state: "WheelState", width: int, height: int) -> BucketLayout:
    """Place each bucket on a *width* × *height* canvas."""
    z = min(width, height) / 2
    cx, cy = width / 2, height / 2
    rim_r = WHEEL_SCALE * z
    theta = state.bucket_angles
    size = z * BUCKET_SCALE / state.bucket_count
    level = np.clip(state.bucket_mass, 0.0, FULL_BUCKET) / FULL_BUCKET
    return BucketLayout(
        cx=cx,
        cy=cy,
        rim_radius=rim_r,
        x=cx + np.sin(theta) * rim_r,
        y=cy - np.cos(theta) * rim_r,
        size=size,
        fill=level * size,
    )


def render_frame(
    state: "WheelState",
    scheme: "ColorScheme",
    width: int = 600,
    height: int = 600,
    render_scale: float = 1.0,
) -> np.ndarray:
    """Render one frame → (height, width, 4) uint8 RGBA array.

    Parameters:
        state:        Wheel to draw.
        scheme:       Colour scheme.
        width:        Output width in pixels.
        height:       Output height in pixels.
        render_scale: Fraction to render at (e.g. 0.5 = 50%).
    """
    rw = max(4, int(width * render_scale))
    rh = max(4, int(height * render_scale))
    scale = rw / width

    img = np.empty((rh, rw, 4), dtype=np.uint8)
    img[..., :3] = scheme.background
    img[..., 3] = 255

    layout = bucket_layout(state, rw, rh)

    # ── Rim ────────────────────────────────────────────────────────────
    py, px = np.mgrid[0:rh, 0:rw] + 0.5
    dist = np.hypot(px - layout.cx, py - layout.cy)
    rim_half = max(1.0, RIM_WIDTH * scale) / 2
    img[np.abs(dist - layout.rim_radius) <= rim_half, :3] = scheme.rim

    # ── Buckets ────────────────────────────────────────────────────────
    s = layout.size
    lw = max(1.0, OUTLINE_WIDTH * scale) / 2
    for x, y, fill in zip(layout.x, layout.y, layout.fill):
        x0, y0 = x - s / 2, y - s / 2
        r0 = max(0, int(math.floor(y0 - lw)))
        r1 = min(rh, int(math.ceil(y0 + s + lw)))
        c0 = max(0, int(math.floor(x0 - lw)))
        c1 = min(rw, int(math.ceil(x0 + s + lw)))
        if r0 >= r1 or c0 >= c1:
            continue
        sy = py[r0:r1, c0:c1]
        sx = px[r0:r1, c0:c1]
        region = img[r0:r1, c0:c1]

        inside = (sx >= x0) & (sx < x0 + s) & (sy >= y0) & (sy < y0 + s)
        region[inside, :3] = scheme.bucket

        water = inside & (sy >= y0 + s - fill)
        region[water, :3] = scheme.water

        outer = (sx >= x0 - lw) & (sx < x0 + s + lw) & (sy >= y0 - lw) & (sy < y0 + s + lw)
        inner = (sx >= x0 + lw) & (sx < x0 + s - lw) & (sy >= y0 + lw) & (sy < y0 + s - lw)
        region[outer & ~inner, :3] = scheme.outline

    return img
