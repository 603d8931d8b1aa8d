from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

import matplotlib.pyplot as plt

from harness_sim.output import samples_to_arrays
from harness_sim.profile import PhysicsResult
from harness_sim.summary import describe_profile


DEFAULT_DPI = 160


def plot_profile(
    result: PhysicsResult,
    out_path: Path,
    *,
    thresholds_g: Iterable[float] = (),
    dpi: int = DEFAULT_DPI,
) -> None:
    """Plot acceleration (G) with threshold lines, and speed/displacement below."""
    if not result.samples:
        raise ValueError(f"Nothing to plot: {result.reason or 'empty profile'}")

    arr = samples_to_arrays(result.samples)
    time_ms = arr["t"] * 1000.0

    fig, (ax1, ax2) = plt.subplots(
        2, 1, figsize=(12, 8), sharex=True, gridspec_kw={"height_ratios": [3, 2]}
    )

    ax1.plot(time_ms, arr["a_g"], color="tab:red", linewidth=1.8, label="Deceleration")
    ax1.fill_between(time_ms, 0.0, arr["a_g"], color="tab:red", alpha=0.12, linewidth=0.0)
    ax1.axhline(y=result.max_g, color="black", linewidth=1.0, linestyle="--", label=f"Max G ({result.max_g:g} G)")

    colors = plt.cm.viridis([0.2, 0.5, 0.8])
    for i, thr in enumerate(thresholds_g):
        dur_ms = result.time_over.get(float(thr), 0.0) * 1000.0
        ax1.axhline(
            y=thr,
            color=colors[i % len(colors)],
            linewidth=1.0,
            linestyle=":",
            label=f"{thr:g} G ({dur_ms:.2f} ms over)",
        )

    ax1.set_ylabel("Deceleration (G)")
    ax1.set_title(f"Acceleration profile: {describe_profile(result.profile_type)}")
    ax1.set_ylim(0.0, max(result.peak_g, result.max_g) * 1.1)
    ax1.grid(True, alpha=0.3)
    ax1.legend(loc="upper right", fontsize=8)

    ax2.plot(time_ms, arr["v"], color="tab:blue", linewidth=1.2, label="Speed")
    ax2.set_xlabel("Time (ms)")
    ax2.set_ylabel("Speed (m/s)", color="tab:blue")
    ax2.grid(True, alpha=0.3)

    ax3 = ax2.twinx()
    ax3.plot(time_ms, arr["x"] * 100.0, color="tab:green", linewidth=1.2, label="Displacement")
    ax3.set_ylabel("Displacement (cm)", color="tab:green")

    ax1.set_xlim(0.0, float(time_ms[-1]))

    plt.tight_layout()
    plt.savefig(out_path, dpi=dpi, bbox_inches="tight")
    plt.close(fig)
