"""Solve the profile across a range of one input parameter."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, replace

import numpy as np

from harness_sim.phases import DEFAULT_SAMPLE_COUNT
from harness_sim.profile import PhysicsInput, PhysicsResult, solve
from harness_sim.thresholds import DEFAULT_THRESHOLDS_G


SWEEP_PARAMETERS = ("v0", "jerk_g", "max_g")

SWEEP_UNITS = {"v0": "m/s", "jerk_g": "G/s", "max_g": "G"}


@dataclass(frozen=True)
class SweepRow:
    value: float
    result: PhysicsResult


def sweep_values(start: float, stop: float, step: float) -> np.ndarray:
    """Inclusive range start..stop in increments of step."""
    if step <= 0.0:
        raise ValueError(f"Sweep step must be > 0, got {step}.")
    if stop < start:
        raise ValueError(f"Sweep stop ({stop}) must be >= start ({start}).")
    n = int(np.floor((stop - start) / step + 1e-9)) + 1
    return start + np.arange(n) * step


def run_sweep(
    base: PhysicsInput,
    parameter: str,
    values: Iterable[float],
    *,
    thresholds_g: Iterable[float] = DEFAULT_THRESHOLDS_G,
    sample_count: int = DEFAULT_SAMPLE_COUNT,
) -> list[SweepRow]:
    if parameter not in SWEEP_PARAMETERS:
        raise ValueError(f"Unknown sweep parameter '{parameter}'. Use: {list(SWEEP_PARAMETERS)}")

    thresholds_g = tuple(thresholds_g)
    rows: list[SweepRow] = []
    for value in values:
        inp = replace(base, **{parameter: float(value)})
        rows.append(SweepRow(
            value=float(value),
            result=solve(inp, thresholds_g=thresholds_g, sample_count=sample_count),
        ))
    return rows


def format_sweep_table(rows: list[SweepRow], parameter: str) -> str:
    thresholds: list[float] = []
    for row in rows:
        thresholds = list(row.result.time_over)
        if thresholds:
            break

    header = [f"{parameter} ({SWEEP_UNITS[parameter]})", "profile", "peak G", "stop (ms)", "dist (cm)"]
    header += [f">{thr:g}G (ms)" for thr in thresholds]

    lines = ["  ".join(f"{h:>12}" for h in header)]
    for row in rows:
        r = row.result
        if not r.ok:
            lines.append(f"{row.value:>12.3f}  {r.reason}")
            continue
        cells = [
            f"{row.value:>12.3f}",
            f"{r.profile_type:>12}",
            f"{r.peak_g:>12.2f}",
            f"{r.total_time * 1000.0:>12.2f}",
            f"{r.stop_distance * 100.0:>12.2f}",
        ]
        cells += [f"{r.time_over[thr] * 1000.0:>12.2f}" for thr in thresholds]
        lines.append("  ".join(cells))
    return "\n".join(lines)
