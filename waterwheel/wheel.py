"""
Waterwheel state — physical coefficients and the mutable wheel state.

Buckets are held in a float64 numpy array so the physics can be
vectorised over the whole rim.  Bucket *i* sits at angle
``rotation + i * 2π / bucket_count``, with 0 at the top of the wheel.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Optional, Union

import numpy as np

logger = logging.getLogger(__name__)

SeedLike = Union[None, int, np.random.Generator]


class InvalidConfiguration(ValueError):
    """Raised when a wheel or engine is built with unusable settings."""


# ---------------------------------------------------------------------------
# Physical coefficients
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class WheelParams:
    """Physical constants of a wheel (imperial units, as in the classic model).

    Frozen: a state's coefficients never change underneath it.  Use
    ``dataclasses.replace`` to derive a modified set.
    """
    damping: float = 2.5        # ft·lbf per rad/s
    base_inertia: float = 0.1   # empty wheel, slug·ft²
    drain_rate: float = 0.3     # slug/s per slug held
    fill_rate: float = 0.33     # slug/s at the centre of the spigot
    gravity: float = 32.2       # ft/s²
    radius: float = 1.0         # ft

    def __post_init__(self):
        # an empty wheel's inertia is base_inertia alone
        for name in ("base_inertia", "radius"):
            value = getattr(self, name)
            if not value > 0:
                raise InvalidConfiguration(f"{name} must be > 0, got {value}")
        for name in ("damping", "drain_rate", "fill_rate"):
            value = getattr(self, name)
            if not value >= 0:
                raise InvalidConfiguration(f"{name} must be >= 0, got {value}")


# ---------------------------------------------------------------------------
# State
# ---------------------------------------------------------------------------

@dataclass
class WheelState:
    """Rotation, angular velocity and per-bucket water mass of one wheel."""
    params: WheelParams = field(default_factory=WheelParams)
    rotation: float = 0.0           # rad, position of bucket 0 (unbounded)
    angular_velocity: float = 0.0   # rad/s
    bucket_mass: np.ndarray = field(default_factory=lambda: np.zeros(1))

    def __post_init__(self):
        masses = np.array(self.bucket_mass, dtype=np.float64)
        if masses.ndim != 1 or masses.size < 1:
            raise InvalidConfiguration(
                f"bucket_mass must be a non-empty 1-D sequence, got shape {masses.shape}"
            )
        self.bucket_mass = masses
        self.rotation = float(self.rotation)
        self.angular_velocity = float(self.angular_velocity)

    @property
    def bucket_count(self) -> int:
        return self.bucket_mass.size

    @property
    def bucket_angles(self) -> np.ndarray:
        """Angular position of every bucket (rad, 0 = top)."""
        n = self.bucket_count
        return self.rotation + np.arange(n) * 2 * np.pi / n

    @property
    def total_mass(self) -> float:
        return float(self.bucket_mass.sum())

    def copy(self) -> "WheelState":
        """Independent copy; the bucket array is duplicated, params are shared."""
        return WheelState(
            params=self.params,
            rotation=self.rotation,
            angular_velocity=self.angular_velocity,
            bucket_mass=self.bucket_mass.copy(),
        )


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------

def create_wheel(
    bucket_count: int,
    params: Optional[WheelParams] = None,
    rng: SeedLike = None,
) -> WheelState:
    """Build a fresh wheel with empty buckets and a random initial spin.

    Parameters:
        bucket_count: Number of evenly spaced buckets (>= 1).
        params:       Physical coefficients (or defaults).
        rng:          Seed or ``numpy.random.Generator`` for the initial
                      rotation and velocity (None = fresh entropy).
    """
    if isinstance(bucket_count, bool) or not isinstance(bucket_count, (int, np.integer)):
        raise InvalidConfiguration(f"bucket_count must be an integer, got {bucket_count!r}")
    if bucket_count < 1:
        raise InvalidConfiguration(f"bucket_count must be >= 1, got {bucket_count}")
    if bucket_count < 3:
        logger.warning(
            "%d bucket(s): no bucket can ever pass under the spigot, the wheel will not fill",
            bucket_count,
        )

    gen = np.random.default_rng(rng)
    rotation = gen.uniform(0.0, 2 * math.pi)
    velocity = gen.uniform(-0.5, 0.5)

    state = WheelState(
        params=params or WheelParams(),
        rotation=rotation,
        angular_velocity=velocity,
        bucket_mass=np.zeros(int(bucket_count)),
    )
    logger.debug(
        "Created wheel: %d buckets, rotation=%.3f rad, velocity=%.3f rad/s",
        bucket_count, rotation, velocity,
    )
    return state
