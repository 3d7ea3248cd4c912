import math

import numpy as np
import pytest

from waterwheel.engine import WaterwheelEngine
from waterwheel.physics import integrate
from waterwheel.wheel import InvalidConfiguration, WheelParams, create_wheel


def make_engine(**kwargs) -> WaterwheelEngine:
    defaults = dict(bucket_count=17, seed=7)
    defaults.update(kwargs)
    return WaterwheelEngine(**defaults)


def test_step_runs_at_half_wall_clock_speed():
    engine = make_engine()
    assert engine.step(0.01) == pytest.approx(0.005)


def test_step_is_clamped_after_a_stall():
    engine = make_engine()
    assert engine.step(10.0) == pytest.approx(0.03)
    assert engine.sim_time == pytest.approx(0.03)


def test_negative_frame_time_is_treated_as_zero():
    engine = make_engine()
    before = engine.state.copy()

    assert engine.step(-1.0) == 0.0
    assert engine.state.rotation == before.rotation
    assert np.array_equal(engine.state.bucket_mass, before.bucket_mass)


def test_engine_matches_direct_integration():
    engine = make_engine(time_scale=1.0)
    reference = create_wheel(17, rng=np.random.default_rng(7))

    for _ in range(50):
        engine.step(1 / 60)
        integrate(reference, 1 / 60)

    assert engine.state.rotation == reference.rotation
    assert engine.state.angular_velocity == reference.angular_velocity
    assert np.array_equal(engine.state.bucket_mass, reference.bucket_mass)
    assert engine.sim_time == pytest.approx(50 / 60)


def test_long_run_stays_finite_and_non_negative():
    engine = make_engine()
    for _ in range(2000):
        engine.step(1 / 60)

    state = engine.state
    assert math.isfinite(state.rotation)
    assert math.isfinite(state.angular_velocity)
    assert np.all(state.bucket_mass >= -1e-12)
    assert engine.total_mass > 0


def test_reset_builds_fresh_wheel():
    engine = make_engine()
    for _ in range(100):
        engine.step(1 / 30)

    engine.reset(9)

    assert engine.bucket_count == 9
    assert engine.sim_time == 0.0
    assert engine.total_mass == 0.0


def test_reset_keeps_bucket_count_by_default():
    engine = make_engine(bucket_count=5)
    engine.reset()
    assert engine.bucket_count == 5


def test_reset_rejects_bad_count():
    engine = make_engine()
    with pytest.raises(InvalidConfiguration):
        engine.reset(0)


def test_set_params_keeps_motion():
    engine = make_engine()
    for _ in range(30):
        engine.step(1 / 30)
    before = engine.state

    params = engine.set_params(damping=1.0, fill_rate=0.5)

    assert params.damping == 1.0 and params.fill_rate == 0.5
    assert params.gravity == WheelParams().gravity
    assert engine.params is params
    assert engine.state is not before
    assert before.params.damping == 2.5
    assert engine.state.rotation == before.rotation
    assert engine.state.angular_velocity == before.angular_velocity
    assert np.array_equal(engine.state.bucket_mass, before.bucket_mass)


def test_set_params_survives_reset():
    engine = make_engine()
    engine.set_params(gravity=9.8)
    engine.reset()
    assert engine.params.gravity == 9.8


def test_set_params_rejects_unknown_names():
    engine = make_engine()
    with pytest.raises(TypeError):
        engine.set_params(viscosity=1.0)


@pytest.mark.parametrize("kwargs", [{"time_scale": 0.0}, {"time_scale": -1.0}, {"max_dt": 0.0}])
def test_bad_timing_settings_are_rejected(kwargs):
    with pytest.raises(InvalidConfiguration):
        make_engine(**kwargs)


def test_nudge_kicks_angular_velocity():
    engine = make_engine()
    before = engine.angular_velocity

    engine.nudge(0.5)

    delta = engine.angular_velocity - before
    assert delta != 0.0
    assert abs(delta) <= 0.5


def test_revolutions_follow_rotation():
    engine = make_engine()
    engine.state.rotation = 3 * math.pi
    assert engine.revolutions == pytest.approx(1.5)


def test_same_seed_same_trajectory():
    a = make_engine(seed=11)
    b = make_engine(seed=11)
    for _ in range(20):
        a.step(1 / 60)
        b.step(1 / 60)
    assert a.state.rotation == b.state.rotation
    assert np.array_equal(a.state.bucket_mass, b.state.bucket_mass)


def test_set_params_rejects_zero_inertia_and_keeps_wheel():
    engine = make_engine()
    before = engine.state

    with pytest.raises(InvalidConfiguration):
        engine.set_params(base_inertia=0.0)

    assert engine.state is before
    assert engine.params.base_inertia == WheelParams().base_inertia
    engine.step(1 / 60)
    assert math.isfinite(engine.angular_velocity)


def test_engine_rejects_unusable_params():
    with pytest.raises(InvalidConfiguration):
        make_engine(params=WheelParams(radius=-1.0))


def test_nan_frame_time_is_treated_as_zero():
    engine = make_engine()
    before = engine.state.copy()

    assert engine.step(float("nan")) == 0.0

    assert engine.state.rotation == before.rotation
    assert engine.state.angular_velocity == before.angular_velocity
    assert engine.sim_time == 0.0


@pytest.mark.parametrize("count", [1, 2, 64])
def test_reset_keeps_count_at_cli_limits(count):
    from waterwheel.app import MAX_BUCKETS, MIN_BUCKETS

    assert MIN_BUCKETS <= count <= MAX_BUCKETS
    engine = make_engine(bucket_count=count)
    engine.reset()
    assert engine.bucket_count == count


@pytest.mark.parametrize("direction, sign", [(1.0, 1.0), (-25.0, -1.0)])
def test_directed_nudge_follows_direction(direction, sign):
    engine = make_engine()
    for _ in range(20):
        before = engine.angular_velocity
        engine.nudge(0.5, direction=direction)
        delta = engine.angular_velocity - before
        assert math.copysign(1.0, delta) == sign
        assert abs(delta) <= 0.5
