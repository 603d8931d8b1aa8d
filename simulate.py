#!/usr/bin/env -S uv run

from __future__ import annotations

import argparse
from pathlib import Path

from harness_sim.profile import PhysicsInput, solve
from harness_sim.output import write_samples_csv, write_summary_json
from harness_sim.plotting import plot_profile
from harness_sim.settings import (
    DEFAULT_CONFIG_PATH,
    read_config,
    req_float,
    req_float_list,
    req_int,
    req_limits,
    req_str,
    resolve_path,
)
from harness_sim.summary import format_summary, summary_dict
from harness_sim.sweep import SWEEP_PARAMETERS, format_sweep_table, run_sweep, sweep_values
from harness_sim.thresholds import ThresholdLimit


PROFILE_CSV = "profile.csv"
SUMMARY_JSON = "summary.json"
PROFILE_PNG = "profile.png"


def _read_config(path: Path) -> dict:
    try:
        return read_config(path)
    except FileNotFoundError as e:
        raise SystemExit(f"Config file not found: {path}") from e
    except (KeyError, ValueError) as e:
        raise SystemExit(f"Invalid config {path}: {e}") from e


def _get_input(config: dict, args: argparse.Namespace) -> PhysicsInput:
    def pick(override: float | None, keys: list[str]) -> float:
        return override if override is not None else req_float(config, keys)

    return PhysicsInput(
        v0=pick(args.v0, ["impact", "v0_mps"]),
        jerk_g=pick(args.jerk_g, ["impact", "jerk_g_per_s"]),
        max_g=pick(args.max_g, ["impact", "max_g"]),
        max_g_time_ms=pick(args.max_g_time_ms, ["impact", "max_g_time_ms"]),
    )


def _get_limits(config: dict) -> list[ThresholdLimit]:
    return [
        ThresholdLimit(threshold_g=thr, max_duration_ms=ms)
        for thr, ms in req_limits(config, ["thresholds", "limits"])
    ]


def _get_thresholds(config: dict, limits: list[ThresholdLimit]) -> tuple[float, ...]:
    # Every limit needs its threshold solved; keep configured order first.
    thresholds = req_float_list(config, ["thresholds", "time_over_g"])
    for lim in limits:
        if lim.threshold_g not in thresholds:
            thresholds.append(lim.threshold_g)
    return tuple(thresholds)


def _run_sweep(args: argparse.Namespace, base: PhysicsInput, thresholds: tuple[float, ...], sample_count: int) -> None:
    if args.start is None or args.stop is None or args.step is None:
        raise SystemExit("--sweep requires --start, --stop and --step.")
    try:
        values = sweep_values(args.start, args.stop, args.step)
    except ValueError as e:
        raise SystemExit(str(e)) from e

    rows = run_sweep(base, args.sweep, values, thresholds_g=thresholds, sample_count=sample_count)
    print(f"Sweep over {args.sweep}: {len(rows)} runs")
    print(format_sweep_table(rows, args.sweep))


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Jerk- and G-limited harness back protector profile.")
    parser.add_argument("--config", type=Path, default=DEFAULT_CONFIG_PATH, help="Path to config.json.")
    parser.add_argument("--v0", type=float, default=None, help="Impact speed (m/s). Overrides impact.v0_mps.")
    parser.add_argument("--jerk-g", type=float, default=None, help="Max jerk (G/s). Overrides impact.jerk_g_per_s.")
    parser.add_argument("--max-g", type=float, default=None, help="Max allowed G. Overrides impact.max_g.")
    parser.add_argument("--max-g-time-ms", type=float, default=None, help="Allowed time at max G (ms), 0 = unchecked.")
    parser.add_argument("--compression", type=float, default=None, help="Max foam compression (%%). Overrides foam.compression_percent.")
    parser.add_argument("--out-dir", type=Path, default=None, help="Output directory. Overrides output_dir.")
    parser.add_argument("--no-plot", action="store_true", help="Skip writing the PNG chart.")
    parser.add_argument("--sweep", choices=SWEEP_PARAMETERS, default=None, help="Print a table over one input instead of a single run.")
    parser.add_argument("--start", type=float, default=None, help="Sweep start value.")
    parser.add_argument("--stop", type=float, default=None, help="Sweep stop value (inclusive).")
    parser.add_argument("--step", type=float, default=None, help="Sweep step.")
    args = parser.parse_args(argv)

    config = _read_config(args.config)

    base = _get_input(config, args)
    limits = _get_limits(config)
    thresholds = _get_thresholds(config, limits)
    sample_count = req_int(config, ["solver", "sample_count"])

    if args.sweep:
        _run_sweep(args, base, thresholds, sample_count)
        return

    compression = args.compression if args.compression is not None else req_float(config, ["foam", "compression_percent"])

    result = solve(base, thresholds_g=thresholds, sample_count=sample_count)
    print(format_summary(result, compression_percent=compression, limits=limits))
    if not result.ok:
        raise SystemExit(1)

    out_dir = args.out_dir if args.out_dir is not None else resolve_path(req_str(config, ["output_dir"]))
    out_dir.mkdir(parents=True, exist_ok=True)

    write_samples_csv(out_dir / PROFILE_CSV, result.samples)
    write_summary_json(
        out_dir / SUMMARY_JSON,
        summary_dict(result, compression_percent=compression, limits=limits),
    )
    if not args.no_plot:
        plot_profile(
            result,
            out_dir / PROFILE_PNG,
            thresholds_g=thresholds,
            dpi=req_int(config, ["plotting", "dpi"]),
        )

    print(f"\nResults written to {out_dir}/")


if __name__ == "__main__":
    main()
