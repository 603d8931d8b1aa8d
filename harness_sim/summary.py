"""Human-readable and JSON-ready summaries of a solved profile."""

from __future__ import annotations

from collections.abc import Iterable

from harness_sim.profile import PhysicsResult
from harness_sim.thresholds import EN_LIMITS, LimitCheck, ThresholdLimit, check_limits, foam_thickness


PROFILE_SHAPES = {
    "triangular": "linear up, linear down (no constant phase)",
    "trapezoidal": "linear up, constant, linear down",
    "none": "",
}

PROFILE_LABELS = {
    "triangular": "Triangular (no constant phase)",
    "trapezoidal": "Trapezoidal (with constant phase)",
    "none": "-",
}


def describe_profile(profile_type: str) -> str:
    return PROFILE_SHAPES.get(profile_type, "")


def _ms(seconds: float) -> str:
    return f"{seconds * 1000.0:.2f} ms"


def _limits_text(limits: Iterable[ThresholdLimit]) -> str:
    parts = [f"{lim.threshold_g:g} G for >={lim.max_duration_ms:g} ms" for lim in limits]
    return " or ".join(parts)


def solved_limits(result: PhysicsResult, limits: Iterable[ThresholdLimit]) -> list[ThresholdLimit]:
    """Limits whose threshold was solved for this result; the rest are skipped."""
    return [lim for lim in limits if float(lim.threshold_g) in result.time_over]


def foam_thickness_cm(result: PhysicsResult, compression_percent: float) -> float:
    """Foam thickness for the result's stop distance, in cm (0 if unsolved)."""
    if not result.stop_distance:
        return 0.0
    return foam_thickness(result.stop_distance * 100.0, compression_percent)


def format_summary(
    result: PhysicsResult,
    *,
    compression_percent: float,
    limits: Iterable[ThresholdLimit] = EN_LIMITS,
) -> str:
    if not result.ok:
        return f"Error: {result.reason}"

    limits = solved_limits(result, limits)
    checks = check_limits(result.time_over, limits)

    lines: list[str] = []
    lines.append(f"Inputs: v0={result.v0:g} m/s, jerk={result.jerk_g:g} G/s, max G={result.max_g:g}")
    lines.append(f"  Profile type: {PROFILE_LABELS[result.profile_type]}")
    lines.append(f"  Shape: {describe_profile(result.profile_type)}")
    lines.append(f"  Peak G used: {result.peak_g:.2f} G")
    lines.append(f"  Max G limit reached? {'Yes' if result.g_limit_reached else 'No'}")
    lines.append(f"  Time to peak G (each side): {_ms(result.t1)}")
    lines.append(f"  Constant-G phase: {_ms(result.t2)}")
    lines.append(f"  Total stop time: {_ms(result.total_time)}")

    for thr, dur in result.time_over.items():
        lines.append(f"  Time over {thr:g} G: {_ms(dur)}")

    if result.max_g_time_ms > 0.0:
        status = "OK" if result.g_time_ok else "OVER BUDGET"
        lines.append(
            f"  Time at max G: {_ms(result.time_at_or_above_limit)} "
            f"(budget {result.max_g_time_ms:g} ms, {status})"
        )

    lines.append(f"  Min theoretical protector thickness: {result.stop_distance * 100.0:.2f} cm")
    lines.append(
        f"  Min foam protector thickness ({compression_percent:g}% compression): "
        f"{foam_thickness_cm(result, compression_percent):.2f} cm"
    )

    if any(c.exceeded for c in checks):
        lines.append(f"  WARNING: over proposed EN limits ({_limits_text(limits)})")

    return "\n".join(lines)


def _check_dict(check: LimitCheck) -> dict:
    return {
        "threshold_g": check.threshold_g,
        "max_duration_ms": check.max_duration_s * 1000.0,
        "duration_ms": check.duration_s * 1000.0,
        "exceeded": check.exceeded,
    }


def summary_dict(
    result: PhysicsResult,
    *,
    compression_percent: float,
    limits: Iterable[ThresholdLimit] = EN_LIMITS,
) -> dict:
    """Scalar fields of the result plus derived metrics, JSON-serializable."""
    checks = check_limits(result.time_over, solved_limits(result, limits)) if result.ok else []
    return {
        "ok": result.ok,
        "reason": result.reason,
        "inputs": {
            "v0_mps": result.v0,
            "jerk_g_per_s": result.jerk_g,
            "max_g": result.max_g,
            "max_g_time_ms": result.max_g_time_ms,
        },
        "profile_type": result.profile_type,
        "jerk_mps3": result.jerk,
        "peak_a_mps2": result.peak_a,
        "peak_g": result.peak_g,
        "t1_ms": result.t1 * 1000.0,
        "t2_ms": result.t2 * 1000.0,
        "total_time_ms": result.total_time * 1000.0,
        "stop_distance_cm": result.stop_distance * 100.0,
        "g_limit_reached": result.g_limit_reached,
        "time_over_ms": {f"{thr:g}": dur * 1000.0 for thr, dur in result.time_over.items()},
        "time_at_or_above_limit_ms": result.time_at_or_above_limit * 1000.0,
        "g_time_ok": result.g_time_ok,
        "limits": [_check_dict(c) for c in checks],
        "foam": {
            "compression_percent": compression_percent,
            "thickness_cm": foam_thickness_cm(result, compression_percent),
        },
    }
