"""
Waterwheel physics — time derivatives and the RK4 step.

The wheel obeys

    I(t)  = base_inertia + radius² · Σ mᵢ
    τ(t)  = -damping · ω + radius · gravity · Σ mᵢ sin θᵢ
    dω/dt = τ / I
    dθ/dt = ω
    dmᵢ/dt = -drain_rate · mᵢ + spigot(θᵢ)

where the spigot feeds only the bucket currently under the top of the
wheel, through a smooth bump that vanishes at the edge of the fill arc.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .wheel import WheelState


@dataclass
class Derivatives:
    """Instantaneous rates of change of a ``WheelState``."""
    d_rotation: float
    d_angular_velocity: float
    d_bucket_mass: np.ndarray

    def __add__(self, other: "Derivatives") -> "Derivatives":
        if not isinstance(other, Derivatives):
            return NotImplemented
        if other.d_bucket_mass.shape != self.d_bucket_mass.shape:
            raise ValueError(
                f"bucket count mismatch: {self.d_bucket_mass.size} vs {other.d_bucket_mass.size}"
            )
        return Derivatives(
            d_rotation=self.d_rotation + other.d_rotation,
            d_angular_velocity=self.d_angular_velocity + other.d_angular_velocity,
            d_bucket_mass=self.d_bucket_mass + other.d_bucket_mass,
        )

    def __mul__(self, k: float) -> "Derivatives":
        return Derivatives(
            d_rotation=self.d_rotation * k,
            d_angular_velocity=self.d_angular_velocity * k,
            d_bucket_mass=self.d_bucket_mass * k,
        )

    __rmul__ = __mul__


# ---------------------------------------------------------------------------
# Derivative
# ---------------------------------------------------------------------------

def effective_inertia(state: WheelState) -> float:
    """Moment of inertia including the water carried at the rim."""
    p = state.params
    return float(state.bucket_mass.sum()) * p.radius * p.radius + p.base_inertia


def net_torque(state: WheelState) -> float:
    """Damping torque plus the gravitational torque of every bucket."""
    p = state.params
    rg = p.radius * p.gravity
    gravity_torque = rg * np.sum(state.bucket_mass * np.sin(state.bucket_angles))
    return -p.damping * state.angular_velocity + float(gravity_torque)


def spigot_inflow(state: WheelState) -> np.ndarray:
    """Fill rate delivered to each bucket by the overhead spigot.

    A bucket is under the spigot while cos θ > |cos(2π/n)|, i.e. while it
    is closer to the top than its neighbour's slot.  Inside that arc the
    inflow is a raised-cosine bump peaking at ``fill_rate`` at θ = 0.
    """
    n = state.bucket_count
    theta = state.bucket_angles
    under = np.cos(theta) > abs(np.cos(2 * np.pi / n))
    x = np.arctan2(np.tan(theta), 1.0)
    bump = state.params.fill_rate / 2 * (np.cos(n * x / 2) + 1)
    return np.where(under, bump, 0.0)


def derive(state: WheelState) -> Derivatives:
    """Time derivatives of *state*.  Does not modify it."""
    return Derivatives(
        d_rotation=state.angular_velocity,
        d_angular_velocity=net_torque(state) / effective_inertia(state),
        d_bucket_mass=-state.params.drain_rate * state.bucket_mass + spigot_inflow(state),
    )


# ---------------------------------------------------------------------------
# Stepping
# ---------------------------------------------------------------------------

def advance(state: WheelState, rates: Derivatives, dt: float) -> WheelState:
    """Move *state* along *rates* for *dt* seconds (in place, returns *state*)."""
    if rates.d_bucket_mass.shape != state.bucket_mass.shape:
        raise ValueError(
            f"bucket count mismatch: state has {state.bucket_count}, "
            f"derivative has {rates.d_bucket_mass.size}"
        )
    state.rotation += rates.d_rotation * dt
    state.angular_velocity += rates.d_angular_velocity * dt
    state.bucket_mass += rates.d_bucket_mass * dt
    return state


def integrate(state: WheelState, dt: float) -> WheelState:
    """Advance *state* by *dt* seconds with classical 4th-order Runge-Kutta.

    Intermediate stages work on copies, so *state* is only written once,
    by the final update.  Bucket masses are not clamped at zero.
    Returns the same (mutated) state object.
    """
    k1 = derive(state)
    k2 = derive(advance(state.copy(), k1, dt / 2))
    k3 = derive(advance(state.copy(), k2, dt / 2))
    k4 = derive(advance(state.copy(), k3, dt))

    combined = k1 + 2 * k2 + 2 * k3 + k4
    return advance(state, combined, dt / 6)
