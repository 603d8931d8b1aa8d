from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from harness_sim.phases import EPSILON, G0, PhaseSolution


@dataclass(frozen=True)
class ThresholdLimit:
    threshold_g: float
    max_duration_ms: float


@dataclass(frozen=True)
class LimitCheck:
    threshold_g: float
    max_duration_s: float
    duration_s: float
    exceeded: bool


# Proposed EN harness limits: 38 G for >= 7 ms or 20 G for >= 25 ms.
EN_LIMITS = (
    ThresholdLimit(threshold_g=38.0, max_duration_ms=7.0),
    ThresholdLimit(threshold_g=20.0, max_duration_ms=25.0),
)
DEFAULT_THRESHOLDS_G = tuple(limit.threshold_g for limit in EN_LIMITS)


def time_over_threshold(phases: PhaseSolution, threshold_g: float) -> float:
    """
    Exact time spent at or above threshold_g, from the phase equations.

    Phase 1: a(t) = j*t = A_thr            -> t_enter = A_thr / j
    Phase 3: a(s) = A_peak - j*s = A_thr   -> s_exit = (A_peak - A_thr) / j
    The plateau (if any) sits at A_peak, so [t_enter, t_exit] spans it.
    Thresholds <= 0 are met by the whole pulse, so the result never exceeds
    total_time.
    """
    if phases.peak_g <= threshold_g + EPSILON:
        return 0.0

    threshold_a = threshold_g * G0
    t_enter = max(threshold_a / phases.jerk, 0.0)
    sigma_exit = min((phases.peak_a - threshold_a) / phases.jerk, phases.t1)
    t_exit = phases.t1 + phases.t2 + sigma_exit
    return t_exit - t_enter


def times_over_thresholds(
    phases: PhaseSolution, thresholds_g: Iterable[float]
) -> dict[float, float]:
    return {float(thr): time_over_threshold(phases, float(thr)) for thr in thresholds_g}


def check_limits(
    time_over: Mapping[float, float],
    limits: Iterable[ThresholdLimit] = EN_LIMITS,
) -> list[LimitCheck]:
    checks: list[LimitCheck] = []
    for limit in limits:
        key = float(limit.threshold_g)
        if key not in time_over:
            raise KeyError(f"No time-over value for {key:g} G; add it to the solve thresholds.")
        duration_s = float(time_over[key])
        max_duration_s = limit.max_duration_ms / 1000.0
        checks.append(
            LimitCheck(
                threshold_g=key,
                max_duration_s=max_duration_s,
                duration_s=duration_s,
                exceeded=duration_s >= max_duration_s,
            )
        )
    return checks


def foam_thickness(distance: float, compression_percent: float) -> float:
    """Required uncompressed foam thickness to provide `distance` of compression.

    compression_percent is how far the foam can compress, as a share of its
    own thickness. E.g. 10 cm of travel with foam compressing 70%
    needs 10 / 0.70 = 14.29 cm, which compresses down to 4.29 cm.

    Returns the same unit as distance.
    """
    if compression_percent <= 0.0:
        return 0.0
    return distance / (compression_percent / 100.0)
