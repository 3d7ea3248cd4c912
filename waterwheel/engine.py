"""
Waterwheel engine — the frame driver around the physics core.

Converts wall-clock frame time into simulation time, bounds the step so a
stalled frame cannot blow up the integrator, and owns the random source
used for new wheels and nudges.
"""

from __future__ import annotations

import dataclasses
import logging
import math
from typing import Optional

import numpy as np

from .physics import integrate
from .wheel import InvalidConfiguration, WheelParams, WheelState, create_wheel

logger = logging.getLogger(__name__)

DEFAULT_BUCKETS = 17
DEFAULT_TIME_SCALE = 0.5   # simulated seconds per wall-clock second
DEFAULT_MAX_DT = 0.03      # seconds


class WaterwheelEngine:
    """Manages wheel creation, frame stepping, and live parameter changes.

    Parameters:
        bucket_count: Number of buckets on the rim.
        params:       Physical coefficients (or defaults).
        seed:         RNG seed for reproducibility (None = random).
        time_scale:   Simulated seconds per real second.
        max_dt:       Upper bound on a single integration step (seconds).
    """

    def __init__(
        self,
        bucket_count: int = DEFAULT_BUCKETS,
        params: Optional[WheelParams] = None,
        seed: Optional[int] = None,
        time_scale: float = DEFAULT_TIME_SCALE,
        max_dt: float = DEFAULT_MAX_DT,
    ) -> None:
        self.rng = np.random.default_rng(seed)
        self._params = params or WheelParams()
        self.time_scale = time_scale
        self.max_dt = max_dt
        self.sim_time: float = 0.0
        self.state: WheelState = create_wheel(bucket_count, self._params, self.rng)
        logger.info("Engine ready: %d buckets", bucket_count)

    # ── configuration ─────────────────────────────────────────────────────

    @property
    def params(self) -> WheelParams:
        return self.state.params

    @property
    def time_scale(self) -> float:
        return self._time_scale

    @time_scale.setter
    def time_scale(self, value: float) -> None:
        if not value > 0:
            raise InvalidConfiguration(f"time_scale must be > 0, got {value}")
        self._time_scale = float(value)

    @property
    def max_dt(self) -> float:
        return self._max_dt

    @max_dt.setter
    def max_dt(self, value: float) -> None:
        if not value > 0:
            raise InvalidConfiguration(f"max_dt must be > 0, got {value}")
        self._max_dt = float(value)

    def set_params(self, **changes: float) -> WheelParams:
        """Swap in new physical coefficients, keeping the wheel's motion."""
        new_params = dataclasses.replace(self.state.params, **changes)
        s = self.state
        self.state = WheelState(
            params=new_params,
            rotation=s.rotation,
            angular_velocity=s.angular_velocity,
            bucket_mass=s.bucket_mass.copy(),
        )
        self._params = new_params
        logger.info("Physics params changed: %s", changes)
        return new_params

    # ── wheel management ──────────────────────────────────────────────────

    def reset(self, bucket_count: Optional[int] = None) -> None:
        """Replace the wheel with a fresh, empty one."""
        count = self.bucket_count if bucket_count is None else bucket_count
        self.state = create_wheel(count, self._params, self.rng)
        self.sim_time = 0.0
        logger.info("Engine reset: %d buckets", count)

    @property
    def bucket_count(self) -> int:
        return self.state.bucket_count

    # ── physics step ──────────────────────────────────────────────────────

    def step(self, real_dt: float) -> float:
        """Advance by *real_dt* wall-clock seconds.  Returns the sim dt used."""
        if not real_dt > 0:
            real_dt = 0.0  # also catches NaN from a bad clock
        dt = min(real_dt * self._time_scale, self._max_dt)
        integrate(self.state, dt)
        self.sim_time += dt
        return dt

    # ── interaction ───────────────────────────────────────────────────────

    def nudge(self, strength: float = 0.5, direction: float = 0.0) -> None:
        """Random angular-velocity kick of up to *strength* rad/s.

        A positive *direction* kicks clockwise (positive rotation), a
        negative one counter-clockwise; zero picks the sign at random.
        """
        if direction == 0:
            kick = self.rng.uniform(-strength, strength)
        else:
            kick = math.copysign(self.rng.uniform(0.0, strength), direction)
        self.state.angular_velocity += kick

    # ── readouts ──────────────────────────────────────────────────────────

    @property
    def angular_velocity(self) -> float:
        return self.state.angular_velocity

    @property
    def total_mass(self) -> float:
        return self.state.total_mass

    @property
    def revolutions(self) -> float:
        """Rotation of bucket 0 in turns (signed, unbounded)."""
        return self.state.rotation / (2 * math.pi)
