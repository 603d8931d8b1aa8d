"""Closed-form phases of a jerk-limited deceleration pulse.

The pulse has up to three phases:
  1. ramp up with +jerk (0 -> peak)
  2. optional plateau at the peak (only when the G cap binds)
  3. ramp down with -jerk (peak -> 0)
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Literal

import numpy as np


G0 = 9.81

# Slack for floating-point comparisons at phase boundaries.
EPSILON = 1e-12

# Display resolution of the sampled pulse (not a physical constant).
DEFAULT_SAMPLE_COUNT = 300

ProfileType = Literal["triangular", "trapezoidal", "none"]


@dataclass(frozen=True)
class PhaseSolution:
    profile_type: ProfileType
    v0: float  # m/s
    jerk: float  # m/s^3
    peak_a: float  # m/s^2
    t1: float  # ramp time, each side (s)
    t2: float  # plateau duration (s)

    # Phase end states
    v1: float  # speed at end of ramp up
    v2: float  # speed at end of plateau
    s1: float  # ramp-up distance
    s2: float  # plateau distance
    s3: float  # ramp-down distance

    @property
    def total_time(self) -> float:
        return 2.0 * self.t1 + self.t2

    @property
    def peak_g(self) -> float:
        return self.peak_a / G0

    @property
    def stop_distance(self) -> float:
        return self.s1 + self.s2 + self.s3

    @property
    def g_limit_reached(self) -> bool:
        return self.profile_type == "trapezoidal"


@dataclass(frozen=True)
class SamplePoint:
    t: float  # s
    a_g: float  # deceleration in G
    v: float  # residual speed, m/s
    x: float  # displacement, m


def solve_phases(v0: float, jerk_g: float, max_g: float) -> PhaseSolution:
    """
    Classify and solve the pulse for validated (strictly positive) inputs.

    The cap-free triangular pulse removing v0 under constant jerk peaks at
    sqrt(jerk * v0). If that stays below the cap the pulse is triangular,
    otherwise it saturates at the cap and the plateau length follows from
    v0 = A^2 / j + A * t2.
    """
    jerk = jerk_g * G0
    a_limit = max_g * G0
    a_tri = math.sqrt(jerk * v0)

    if a_tri <= a_limit + EPSILON:
        profile_type: ProfileType = "triangular"
        peak_a = a_tri
        t1 = peak_a / jerk
        t2 = 0.0
    else:
        profile_type = "trapezoidal"
        peak_a = a_limit
        t1 = peak_a / jerk
        t2 = max((v0 - peak_a * peak_a / jerk) / peak_a, 0.0)

    v1 = v0 - 0.5 * jerk * t1 * t1
    v2 = v1 - peak_a * t2
    s1 = v0 * t1 - jerk * t1**3 / 6.0
    s2 = v1 * t2 - 0.5 * peak_a * t2 * t2
    # Ramp down mirrors ramp up in distance.
    s3 = jerk * t1**3 / 6.0

    return PhaseSolution(
        profile_type=profile_type,
        v0=v0,
        jerk=jerk,
        peak_a=peak_a,
        t1=t1,
        t2=t2,
        v1=v1,
        v2=v2,
        s1=s1,
        s2=s2,
        s3=s3,
    )


def evaluate_phases(
    phases: PhaseSolution, t: np.ndarray
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Return (a [m/s^2], v [m/s], x [m]) at each time in t."""
    p = phases
    t = np.asarray(t, dtype=float)

    in_ramp_up = t <= p.t1 + EPSILON
    in_plateau = ~in_ramp_up & (t <= p.t1 + p.t2 + EPSILON)

    tau = t - p.t1
    sigma = t - p.t1 - p.t2
    conds = [in_ramp_up, in_plateau]

    a = np.select(
        conds,
        [p.jerk * t, np.full_like(t, p.peak_a)],
        default=np.maximum(p.peak_a - p.jerk * sigma, 0.0),
    )
    v = np.select(
        conds,
        [p.v0 - 0.5 * p.jerk * t**2, p.v1 - p.peak_a * tau],
        default=p.v2 - p.peak_a * sigma + 0.5 * p.jerk * sigma**2,
    )
    x = np.select(
        conds,
        [
            p.v0 * t - p.jerk * t**3 / 6.0,
            p.s1 + p.v1 * tau - 0.5 * p.peak_a * tau**2,
        ],
        default=(
            p.s1 + p.s2
            + p.v2 * sigma
            - 0.5 * p.peak_a * sigma**2
            + p.jerk * sigma**3 / 6.0
        ),
    )
    return a, v, x


def phase_state(phases: PhaseSolution, t: float) -> tuple[float, float, float]:
    a, v, x = evaluate_phases(phases, np.array([t], dtype=float))
    return float(a[0]), float(v[0]), float(x[0])


def sample_profile(
    phases: PhaseSolution, sample_count: int = DEFAULT_SAMPLE_COUNT
) -> tuple[SamplePoint, ...]:
    """Evenly spaced samples over [0, total_time], last point snapped to rest."""
    if sample_count < 2:
        raise ValueError(f"sample_count must be >= 2, got {sample_count}.")

    total = phases.total_time
    if total <= 0.0:
        return ()

    t = np.linspace(0.0, total, int(sample_count))
    a, v, x = evaluate_phases(phases, t)

    # Clamp the very last point to avoid residue from floating-point drift.
    a[-1] = 0.0
    v[-1] = 0.0

    a_g = a / G0
    return tuple(
        SamplePoint(t=float(t[i]), a_g=float(a_g[i]), v=float(v[i]), x=float(x[i]))
        for i in range(t.size)
    )
