"""Output utilities for solved profiles."""

from __future__ import annotations

import csv
import json
from pathlib import Path

import numpy as np

from harness_sim.phases import SamplePoint


CSV_HEADERS = ["time_ms", "accel_g", "velocity_mps", "displacement_mm"]


def samples_to_arrays(samples: tuple[SamplePoint, ...]) -> dict[str, np.ndarray]:
    return {
        "t": np.array([s.t for s in samples], dtype=float),
        "a_g": np.array([s.a_g for s in samples], dtype=float),
        "v": np.array([s.v for s in samples], dtype=float),
        "x": np.array([s.x for s in samples], dtype=float),
    }


def write_samples_csv(path: Path, samples: tuple[SamplePoint, ...]) -> None:
    """Write the sampled profile as time (ms), accel (G), speed (m/s), displacement (mm)."""
    with path.open("w", newline="", encoding="utf-8") as f:
        w = csv.writer(f)
        w.writerow(CSV_HEADERS)
        for s in samples:
            w.writerow([
                f"{s.t * 1000.0:.6f}",
                f"{s.a_g:.6f}",
                f"{s.v:.6f}",
                f"{s.x * 1000.0:.6f}",
            ])


def write_summary_json(path: Path, summary: dict) -> None:
    path.write_text(json.dumps(summary, indent=2) + "\n", encoding="utf-8")
