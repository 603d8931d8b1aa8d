"""Tests for the jerk-limited profile solver."""
from __future__ import annotations

import math

import numpy as np
import pytest
from scipy.integrate import quad

from harness_sim.phases import G0, phase_state, sample_profile, solve_phases
from harness_sim.profile import PhysicsInput, normalize_input, solve


def _arrays(result):
    t = np.array([s.t for s in result.samples])
    a_g = np.array([s.a_g for s in result.samples])
    v = np.array([s.v for s in result.samples])
    x = np.array([s.x for s in result.samples])
    return t, a_g, v, x


def test_en_drop_with_42g_cap_is_triangular():
    result = solve(PhysicsInput(v0=6.0, jerk_g=1300.0, max_g=42.0))

    assert result.ok
    assert result.reason is None
    assert result.profile_type == "triangular"
    assert not result.g_limit_reached
    assert result.t2 == 0.0
    assert result.peak_a == pytest.approx(math.sqrt(1300.0 * G0 * 6.0))
    assert result.peak_g == pytest.approx(28.2, abs=0.05)


def test_en_drop_with_20g_cap_is_trapezoidal():
    result = solve(PhysicsInput(v0=6.0, jerk_g=1300.0, max_g=20.0))

    assert result.ok
    assert result.profile_type == "trapezoidal"
    assert result.g_limit_reached
    assert result.peak_g == pytest.approx(20.0, abs=1e-9)
    assert result.t2 > 0.0

    jerk = 1300.0 * G0
    peak_a = 20.0 * G0
    assert result.t1 == pytest.approx(peak_a / jerk)
    assert result.t2 == pytest.approx((6.0 - peak_a**2 / jerk) / peak_a)


@pytest.mark.parametrize("max_g", [20.0, 42.0])
def test_total_time_is_two_ramps_plus_plateau(max_g):
    result = solve(PhysicsInput(v0=6.0, jerk_g=1300.0, max_g=max_g))
    assert result.total_time == pytest.approx(2.0 * result.t1 + result.t2, rel=1e-12)


def test_cap_exactly_at_triangular_peak_stays_triangular():
    jerk = 1300.0 * G0
    max_g = math.sqrt(jerk * 6.0) / G0
    result = solve(PhysicsInput(v0=6.0, jerk_g=1300.0, max_g=max_g))
    assert result.profile_type == "triangular"
    assert result.t2 == 0.0


def test_triangular_stop_distance_is_v0_times_ramp_time():
    result = solve(PhysicsInput(v0=4.0, jerk_g=800.0, max_g=60.0))
    assert result.profile_type == "triangular"
    assert result.stop_distance == pytest.approx(4.0 * result.t1)


@pytest.mark.parametrize("max_g", [15.0, 20.0, 42.0])
def test_stop_distance_matches_integral_of_velocity(max_g):
    phases = solve_phases(6.0, 1300.0, max_g)

    def velocity(t: float) -> float:
        return phase_state(phases, t)[1]

    breaks = sorted({phases.t1, phases.t1 + phases.t2})
    integral, _err = quad(velocity, 0.0, phases.total_time, points=breaks, limit=200)
    assert integral == pytest.approx(phases.stop_distance, rel=1e-8)


def test_phase_values_continuous_at_boundaries():
    phases = solve_phases(6.0, 1300.0, 20.0)
    for boundary in (phases.t1, phases.t1 + phases.t2):
        before = phase_state(phases, boundary - 1e-9)
        after = phase_state(phases, boundary + 1e-9)
        assert before == pytest.approx(after, abs=1e-4)


@pytest.mark.parametrize("max_g, profile_type", [(20.0, "trapezoidal"), (42.0, "triangular")])
def test_samples_cover_profile_and_end_at_rest(max_g, profile_type):
    result = solve(PhysicsInput(v0=6.0, jerk_g=1300.0, max_g=max_g))
    assert result.profile_type == profile_type
    t, a_g, v, x = _arrays(result)

    assert len(result.samples) == 300
    assert t[0] == 0.0
    assert t[-1] == pytest.approx(result.total_time)
    assert v[0] == pytest.approx(6.0)
    assert a_g[0] == 0.0
    assert v[-1] == 0.0
    assert a_g[-1] == 0.0
    assert x[-1] == pytest.approx(result.stop_distance, rel=1e-9)

    assert np.all(np.diff(t) > 0.0)
    assert np.all(np.diff(v) <= 1e-12)
    assert np.all(np.diff(x) >= -1e-12)
    assert a_g.max() <= result.peak_g + 1e-6
    if profile_type == "trapezoidal":
        assert a_g.max() == pytest.approx(max_g, abs=1e-9)


def test_sample_count_is_configurable():
    result = solve(PhysicsInput(v0=6.0, jerk_g=1300.0, max_g=42.0), sample_count=50)
    assert len(result.samples) == 50
    assert result.samples[-1].t == pytest.approx(result.total_time)


def test_sample_count_below_two_is_rejected():
    with pytest.raises(ValueError):
        solve(PhysicsInput(v0=6.0, jerk_g=1300.0, max_g=42.0), sample_count=1)
    with pytest.raises(ValueError):
        sample_profile(solve_phases(6.0, 1300.0, 42.0), sample_count=0)


def test_zero_speed_fails_with_zeroed_result():
    result = solve(PhysicsInput(v0=0.0, jerk_g=1300.0, max_g=42.0))

    assert not result.ok
    assert result.reason == "Impact speed must be > 0 m/s"
    assert result.profile_type == "none"
    assert result.samples == ()
    for name in ("jerk", "peak_a", "peak_g", "t1", "t2", "total_time", "stop_distance", "time_at_or_above_limit"):
        assert getattr(result, name) == 0.0
    assert not result.g_limit_reached
    assert result.time_over == {38.0: 0.0, 20.0: 0.0}


@pytest.mark.parametrize(
    "inp, reason",
    [
        (PhysicsInput(v0=6.0, jerk_g=0.0, max_g=42.0), "Max jerk must be > 0 G/s"),
        (PhysicsInput(v0=6.0, jerk_g=1300.0, max_g=-3.0), "Max G must be > 0 G"),
        (PhysicsInput(v0=-1.0, jerk_g=-1.0, max_g=-1.0), "Impact speed must be > 0 m/s"),
    ],
)
def test_invalid_inputs_report_reason(inp, reason):
    result = solve(inp)
    assert not result.ok
    assert result.reason == reason
    assert result.samples == ()


def test_negative_inputs_are_clamped_not_rejected():
    inp = normalize_input(PhysicsInput(v0=-2.0, jerk_g=1300.0, max_g=-5.0, max_g_time_ms=-1.0))
    assert inp == PhysicsInput(v0=0.0, jerk_g=1300.0, max_g=0.0, max_g_time_ms=0.0)

    result = solve(PhysicsInput(v0=-2.0, jerk_g=1300.0, max_g=42.0))
    assert result.v0 == 0.0


def test_solve_is_deterministic():
    inp = PhysicsInput(v0=5.7, jerk_g=1300.0, max_g=30.0)
    assert solve(inp) == solve(inp)


def test_result_time_over_is_read_only():
    result = solve(PhysicsInput(v0=6.0, jerk_g=1300.0, max_g=20.0))
    before = result.time_over_g(20.0)

    with pytest.raises(TypeError):
        result.time_over[20.0] = 99.0
    assert result.time_over_g(20.0) == before


def test_result_is_hashable_for_memoization():
    inp = PhysicsInput(v0=6.0, jerk_g=1300.0, max_g=20.0)
    first = solve(inp)
    second = solve(inp)
    assert hash(first) == hash(second)
    assert {first: "cached"}[second] == "cached"


def test_stop_distance_increases_with_speed():
    speeds = np.linspace(0.5, 12.0, 40)
    dists = [solve(PhysicsInput(v0=v, jerk_g=1300.0, max_g=20.0)).stop_distance for v in speeds]
    assert np.all(np.diff(dists) > 0.0)


def test_time_at_max_g_budget():
    inp = PhysicsInput(v0=6.0, jerk_g=1300.0, max_g=20.0)
    t2 = solve(inp).t2

    tight = solve(PhysicsInput(v0=6.0, jerk_g=1300.0, max_g=20.0, max_g_time_ms=t2 * 1000.0 / 2.0))
    assert tight.time_at_or_above_limit == pytest.approx(t2)
    assert not tight.g_time_ok

    loose = solve(PhysicsInput(v0=6.0, jerk_g=1300.0, max_g=20.0, max_g_time_ms=t2 * 1000.0 * 2.0))
    assert loose.g_time_ok

    unchecked = solve(inp)
    assert unchecked.g_time_ok

    triangular = solve(PhysicsInput(v0=6.0, jerk_g=1300.0, max_g=42.0, max_g_time_ms=1.0))
    assert triangular.time_at_or_above_limit == 0.0
    assert triangular.g_time_ok
