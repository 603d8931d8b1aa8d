"""Single source of truth for config + repo paths (no env overrides).

Policy:
- No fallback/default config values in code.
- If required config keys are missing, terminate with a clear error.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any


REPO_ROOT = Path(__file__).parent.parent
DEFAULT_CONFIG_PATH = REPO_ROOT / 'config.json'


def resolve_path(p: str) -> Path:
    path = Path(p)
    return path if path.is_absolute() else (REPO_ROOT / path)


def load_json(path: Path) -> dict:
    return json.loads(path.read_text(encoding='utf-8'))


def _require_path(cfg: dict, keys: list[str]) -> Any:
    cur: Any = cfg
    prefix: list[str] = []
    for k in keys:
        prefix.append(k)
        if not isinstance(cur, dict) or k not in cur:
            raise KeyError(f'Missing required config key: {".".join(prefix)}')
        cur = cur[k]
    return cur


def req_str(cfg: dict, keys: list[str]) -> str:
    v = _require_path(cfg, keys)
    if not isinstance(v, str) or not v.strip():
        raise ValueError(f'Config key {".".join(keys)} must be a non-empty string.')
    return v


def req_float(cfg: dict, keys: list[str]) -> float:
    v = _require_path(cfg, keys)
    if isinstance(v, bool):
        raise ValueError(f'Config key {".".join(keys)} must be a float-like value.')
    try:
        return float(v)
    except Exception as e:
        raise ValueError(f'Config key {".".join(keys)} must be a float-like value.') from e


def req_int(cfg: dict, keys: list[str]) -> int:
    v = _require_path(cfg, keys)
    if isinstance(v, bool):
        raise ValueError(f'Config key {".".join(keys)} must be an int-like value.')
    try:
        return int(v)
    except Exception as e:
        raise ValueError(f'Config key {".".join(keys)} must be an int-like value.') from e


def req_float_list(cfg: dict, keys: list[str]) -> list[float]:
    v = _require_path(cfg, keys)
    if not isinstance(v, list):
        raise ValueError(f'Config key {".".join(keys)} must be a list of numbers.')
    try:
        return [float(x) for x in v]
    except Exception as e:
        raise ValueError(f'Config key {".".join(keys)} must be a list of numbers.') from e


def req_limits(cfg: dict, keys: list[str]) -> list[tuple[float, float]]:
    """List of {threshold_g, max_duration_ms} objects -> [(threshold_g, max_duration_ms)]."""
    v = _require_path(cfg, keys)
    if not isinstance(v, list):
        raise ValueError(f'Config key {".".join(keys)} must be a list of limit objects.')
    out: list[tuple[float, float]] = []
    for i, item in enumerate(v):
        prefix = [*keys, str(i)]
        if not isinstance(item, dict):
            raise ValueError(f'Config key {".".join(prefix)} must be an object.')
        out.append((
            req_float(item, ['threshold_g']),
            req_float(item, ['max_duration_ms']),
        ))
    return out


def read_config(path: Path | None = None) -> dict:
    cfg = load_json(path or DEFAULT_CONFIG_PATH)
    validate_config(cfg)
    return cfg


def validate_config(cfg: dict) -> None:
    # Existence/type checks (no defaults).
    req_float(cfg, ['impact', 'v0_mps'])
    req_float(cfg, ['impact', 'jerk_g_per_s'])
    req_float(cfg, ['impact', 'max_g'])
    req_float(cfg, ['impact', 'max_g_time_ms'])

    if req_int(cfg, ['solver', 'sample_count']) < 2:
        raise ValueError('Config key solver.sample_count must be >= 2.')

    req_float_list(cfg, ['thresholds', 'time_over_g'])
    req_limits(cfg, ['thresholds', 'limits'])

    req_float(cfg, ['foam', 'compression_percent'])

    req_str(cfg, ['output_dir'])
    req_int(cfg, ['plotting', 'dpi'])
