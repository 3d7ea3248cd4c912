import math

import numpy as np
import pytest

from waterwheel.physics import (
    Derivatives,
    advance,
    derive,
    effective_inertia,
    integrate,
    net_torque,
    spigot_inflow,
)
from waterwheel.wheel import WheelParams, WheelState


def make_state(n: int = 4, rotation: float = 0.0, velocity: float = 0.0, masses=None, **params) -> WheelState:
    if masses is None:
        masses = np.zeros(n)
    return WheelState(
        params=WheelParams(**params),
        rotation=rotation,
        angular_velocity=velocity,
        bucket_mass=masses,
    )


def loaded_state(n: int = 7, seed: int = 3) -> WheelState:
    rng = np.random.default_rng(seed)
    return make_state(n, rotation=0.37, velocity=-0.8, masses=rng.uniform(0.0, 0.4, n))


def test_zero_step_leaves_state_unchanged():
    state = loaded_state()
    before = state.copy()

    integrate(state, 0.0)

    assert state.rotation == before.rotation
    assert state.angular_velocity == before.angular_velocity
    assert np.array_equal(state.bucket_mass, before.bucket_mass)


def test_empty_wheel_derivative_is_pure_damping():
    state = make_state(5, rotation=1.2, velocity=0.75)
    p = state.params

    rates = derive(state)

    assert rates.d_rotation == 0.75
    assert rates.d_angular_velocity == pytest.approx(-p.damping * 0.75 / p.base_inertia)


def test_bucket_away_from_spigot_only_drains():
    state = make_state(4, rotation=math.pi, masses=[0.5, 0.0, 0.0, 0.0])

    rates = derive(state)

    assert rates.d_bucket_mass[0] == pytest.approx(-state.params.drain_rate * 0.5)


def test_derive_does_not_modify_state():
    state = loaded_state()
    before = state.copy()

    derive(state)

    assert state.rotation == before.rotation
    assert state.angular_velocity == before.angular_velocity
    assert np.array_equal(state.bucket_mass, before.bucket_mass)


def test_rotating_by_one_bucket_spacing_preserves_torque_and_inertia():
    n = 7
    a = loaded_state(n)
    b = make_state(
        n,
        rotation=a.rotation + 2 * math.pi / n,
        velocity=a.angular_velocity,
        masses=np.roll(a.bucket_mass, -1),
    )

    assert effective_inertia(b) == pytest.approx(effective_inertia(a), rel=1e-12)
    assert net_torque(b) == pytest.approx(net_torque(a), rel=1e-9, abs=1e-12)


def test_effective_inertia_counts_water_at_the_rim():
    state = make_state(3, masses=[0.1, 0.2, 0.3], radius=2.0, base_inertia=0.5)
    assert effective_inertia(state) == pytest.approx(0.6 * 4.0 + 0.5)


def test_heavy_bucket_on_the_right_turns_wheel_clockwise():
    # bucket 0 at θ = π/2 (three o'clock) pulls rotation positive
    state = make_state(4, rotation=math.pi / 2, masses=[1.0, 0.0, 0.0, 0.0])
    p = state.params

    assert net_torque(state) == pytest.approx(p.radius * p.gravity)
    assert derive(state).d_angular_velocity > 0


def test_integration_is_deterministic():
    a = loaded_state()
    b = a.copy()

    integrate(a, 1 / 30)
    integrate(b, 1 / 30)

    assert a.rotation == b.rotation
    assert a.angular_velocity == b.angular_velocity
    assert np.array_equal(a.bucket_mass, b.bucket_mass)


def test_at_rest_wheel_fills_only_the_top_bucket():
    state = make_state(4)
    p = state.params
    dt = 1 / 30

    integrate(state, dt)

    assert state.rotation == pytest.approx(0.0, abs=1e-12)
    assert state.angular_velocity == pytest.approx(0.0, abs=1e-12)
    # dm/dt = fill - drain·m, started empty
    expected = p.fill_rate / p.drain_rate * (1 - math.exp(-p.drain_rate * dt))
    assert state.bucket_mass[0] == pytest.approx(expected, rel=1e-8)
    assert state.bucket_mass[0] == pytest.approx(p.fill_rate * dt, rel=1e-2)
    assert np.all(state.bucket_mass[1:] == 0.0)


def test_integrate_returns_the_same_state_object():
    state = loaded_state()
    assert integrate(state, 0.01) is state


def test_rk4_tracks_exponential_spin_down():
    omega0 = 2.0
    state = make_state(4, rotation=0.3, velocity=omega0, fill_rate=0.0)
    p = state.params
    decay = p.damping / p.base_inertia
    dt, t_end = 0.001, 0.1

    for _ in range(int(round(t_end / dt))):
        integrate(state, dt)

    assert state.angular_velocity == pytest.approx(omega0 * math.exp(-decay * t_end), rel=1e-6)
    assert state.rotation == pytest.approx(0.3 + omega0 / decay * (1 - math.exp(-decay * t_end)), rel=1e-6)
    assert np.all(state.bucket_mass == 0.0)


def test_spigot_profile_peaks_at_top_and_halves_midway():
    p = WheelParams()

    top = spigot_inflow(make_state(4, rotation=0.0))
    assert top[0] == pytest.approx(p.fill_rate)
    assert np.all(top[1:] == 0.0)

    for rotation in (math.pi / 4, -math.pi / 4):
        mid = spigot_inflow(make_state(4, rotation=rotation))
        assert mid[0] == pytest.approx(p.fill_rate / 2)


def test_spigot_profile_vanishes_at_arc_edge():
    edge = math.pi / 2 - 1e-4
    inflow = spigot_inflow(make_state(4, rotation=edge))
    assert inflow[0] == pytest.approx(0.0, abs=1e-6)


@pytest.mark.parametrize("n", [1, 2])
def test_too_few_buckets_never_fill(n):
    inflow = spigot_inflow(make_state(n, rotation=0.0))
    assert np.all(inflow == 0.0)


def test_derivatives_combine_linearly():
    a = Derivatives(1.0, 2.0, np.array([1.0, 2.0]))
    b = Derivatives(0.5, -1.0, np.array([3.0, 0.0]))

    c = a + 2 * b

    assert c.d_rotation == 2.0
    assert c.d_angular_velocity == 0.0
    assert np.array_equal(c.d_bucket_mass, [7.0, 2.0])


def test_mismatched_bucket_counts_are_rejected():
    a = Derivatives(0.0, 0.0, np.zeros(3))
    b = Derivatives(0.0, 0.0, np.zeros(4))

    with pytest.raises(ValueError):
        a + b
    with pytest.raises(ValueError):
        advance(make_state(4), a, 0.1)


def test_large_step_does_not_clamp_or_fail():
    state = loaded_state()
    integrate(state, 0.5)
    assert np.all(np.isfinite(state.bucket_mass))
    assert math.isfinite(state.angular_velocity)
