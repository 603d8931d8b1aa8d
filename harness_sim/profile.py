"""Jerk- and G-limited deceleration profile solver."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from harness_sim.phases import (
    DEFAULT_SAMPLE_COUNT,
    EPSILON,
    PhaseSolution,
    ProfileType,
    SamplePoint,
    sample_profile,
    solve_phases,
)
from harness_sim.thresholds import DEFAULT_THRESHOLDS_G, times_over_thresholds


@dataclass(frozen=True)
class PhysicsInput:
    v0: float  # impact speed (m/s)
    jerk_g: float  # jerk limit (G/s)
    max_g: float  # max allowed G
    # Dwell budget at max G (ms). 0 means unchecked (g_time_ok stays True),
    # not a zero-length budget that any plateau would fail.
    max_g_time_ms: float = 0.0


@dataclass(frozen=True)
class PhysicsResult:
    ok: bool
    reason: str | None

    # Normalized inputs
    v0: float
    jerk_g: float
    max_g: float
    max_g_time_ms: float

    profile_type: ProfileType = "none"
    jerk: float = 0.0  # m/s^3
    peak_a: float = 0.0  # m/s^2
    peak_g: float = 0.0
    t1: float = 0.0  # ramp time, each side (s)
    t2: float = 0.0  # plateau time (s)
    total_time: float = 0.0  # s
    stop_distance: float = 0.0  # m

    g_limit_reached: bool = False
    # threshold G -> s, read-only; left out of the hash (mappings are unhashable)
    time_over: Mapping[float, float] = field(
        default_factory=lambda: MappingProxyType({}), hash=False
    )
    time_at_or_above_limit: float = 0.0  # s
    g_time_ok: bool = True

    samples: tuple[SamplePoint, ...] = ()

    def time_over_g(self, threshold_g: float) -> float:
        return self.time_over[float(threshold_g)]


def normalize_input(raw: PhysicsInput) -> PhysicsInput:
    """Clamp inputs to non-negative values."""
    return PhysicsInput(
        v0=max(float(raw.v0), 0.0),
        jerk_g=max(float(raw.jerk_g), 0.0),
        max_g=max(float(raw.max_g), 0.0),
        max_g_time_ms=max(float(raw.max_g_time_ms), 0.0),
    )


def validate_input(inp: PhysicsInput) -> str | None:
    if inp.v0 <= 0.0:
        return "Impact speed must be > 0 m/s"
    if inp.jerk_g <= 0.0:
        return "Max jerk must be > 0 G/s"
    if inp.max_g <= 0.0:
        return "Max G must be > 0 G"
    return None


def _failed(inp: PhysicsInput, reason: str, thresholds_g: Iterable[float]) -> PhysicsResult:
    return PhysicsResult(
        ok=False,
        reason=reason,
        v0=inp.v0,
        jerk_g=inp.jerk_g,
        max_g=inp.max_g,
        max_g_time_ms=inp.max_g_time_ms,
        time_over=MappingProxyType({float(thr): 0.0 for thr in thresholds_g}),
    )


def dwell_at_limit(phases: PhaseSolution, max_g_time_ms: float) -> tuple[float, bool]:
    """Time spent at the G cap (the plateau) and whether it fits the budget."""
    time_at_limit = phases.t2 if phases.g_limit_reached else 0.0
    if max_g_time_ms <= 0.0:
        return time_at_limit, True
    return time_at_limit, time_at_limit <= max_g_time_ms / 1000.0 + EPSILON


def solve(
    raw: PhysicsInput,
    *,
    thresholds_g: Iterable[float] = DEFAULT_THRESHOLDS_G,
    sample_count: int = DEFAULT_SAMPLE_COUNT,
) -> PhysicsResult:
    """
    Compute a 3-phase, jerk-limited deceleration profile.

    Invalid inputs (non-positive speed, jerk or G cap) give ok=False with a
    reason and zeroed outputs; they never raise.
    """
    if sample_count < 2:
        raise ValueError(f"sample_count must be >= 2, got {sample_count}.")

    thresholds_g = tuple(thresholds_g)
    inp = normalize_input(raw)

    reason = validate_input(inp)
    if reason is not None:
        return _failed(inp, reason, thresholds_g)

    phases = solve_phases(inp.v0, inp.jerk_g, inp.max_g)
    time_at_limit, g_time_ok = dwell_at_limit(phases, inp.max_g_time_ms)

    return PhysicsResult(
        ok=True,
        reason=None,
        v0=inp.v0,
        jerk_g=inp.jerk_g,
        max_g=inp.max_g,
        max_g_time_ms=inp.max_g_time_ms,
        profile_type=phases.profile_type,
        jerk=phases.jerk,
        peak_a=phases.peak_a,
        peak_g=phases.peak_g,
        t1=phases.t1,
        t2=phases.t2,
        total_time=phases.total_time,
        stop_distance=phases.stop_distance,
        g_limit_reached=phases.g_limit_reached,
        time_over=MappingProxyType(times_over_thresholds(phases, thresholds_g)),
        time_at_or_above_limit=time_at_limit,
        g_time_ok=g_time_ok,
        samples=sample_profile(phases, sample_count),
    )
