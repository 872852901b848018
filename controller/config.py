# /controller/config.py

# Centralized runtime configuration for Telescope. Values are environment-driven,
# with safe defaults taken from settings/system_config.py. Import and use
# wherever needed.
#
# Example env:
#   TELESCOPE_SDE_DB=/abs/path/to/sde.sqlite
#   TELESCOPE_FACTOR=10000000000000
#   TELESCOPE_REGION_FACTOR=1
#   TELESCOPE_INVERT_AXES=1,1,1
#   TELESCOPE_STARTUP_REGIONS=10000002,10000043
#   TELESCOPE_NOTIFY_ON_SEARCH=1
#   TELESCOPE_DEBUG_OVERLAY=0
#   TELESCOPE_LOG_LEVEL=INFO
#   TELESCOPE_LOG_DIR=/abs/path/to/logs
#   TELESCOPE_LOG_CONSOLE=0

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from settings import system_config as cfg


__all__ = ["Config", "load"]

ROOT = Path(__file__).resolve().parents[1]


def _parse_bool(val: str | None, default: bool = False) -> bool:
    if val is None:
        return default
    v = val.strip().lower()
    return v in ("1", "true", "yes", "on")


def _parse_int(env: str, default: int) -> int:
    try:
        return int(os.getenv(env, str(default)))
    except ValueError:
        return default


def _parse_int_list(val: str | None) -> Tuple[int, ...]:
    if not val:
        return ()
    out = []
    for part in val.split(","):
        part = part.strip()
        if part.isdigit():
            out.append(int(part))
    return tuple(out)


def _parse_axes(val: str | None, default: Tuple[bool, ...]) -> Tuple[bool, ...]:
    """Parse '1,0,1' style per-axis flags; missing axes fall back to False."""
    if val is None or not val.strip():
        return default
    flags = [_parse_bool(p) for p in val.split(",")]
    while len(flags) < 3:
        flags.append(False)
    return tuple(flags[:3])


@dataclass(frozen=True)
class Config:
    # Static data
    sde_db: Optional[Path] = None

    # Coordinate correction
    factor: int = cfg.UNIVERSE_FACTOR
    region_factor: int = cfg.REGION_FACTOR
    invert_axes: Tuple[bool, ...] = cfg.UNIVERSE_INVERT_AXES

    # Panes
    startup_regions: Tuple[int, ...] = ()
    notify_on_search: bool = True
    debug_overlay: bool = False

    # Logging
    log_level: str = "INFO"
    log_dir: Path = ROOT / "logs"
    log_console: bool = False

    @property
    def log_level_value(self) -> int:
        return getattr(logging, self.log_level, logging.INFO)


def load() -> Config:
    sde_str = os.getenv("TELESCOPE_SDE_DB", "").strip()
    log_dir_str = os.getenv("TELESCOPE_LOG_DIR", "").strip()

    return Config(
        sde_db=Path(sde_str) if sde_str else None,
        factor=_parse_int("TELESCOPE_FACTOR", cfg.UNIVERSE_FACTOR),
        region_factor=_parse_int("TELESCOPE_REGION_FACTOR", cfg.REGION_FACTOR),
        invert_axes=_parse_axes(os.getenv("TELESCOPE_INVERT_AXES"), cfg.UNIVERSE_INVERT_AXES),
        startup_regions=_parse_int_list(os.getenv("TELESCOPE_STARTUP_REGIONS")),
        notify_on_search=_parse_bool(os.getenv("TELESCOPE_NOTIFY_ON_SEARCH"), True),
        debug_overlay=_parse_bool(os.getenv("TELESCOPE_DEBUG_OVERLAY"), False),
        log_level=os.getenv("TELESCOPE_LOG_LEVEL", "INFO").strip().upper(),
        log_dir=Path(log_dir_str) if log_dir_str else ROOT / "logs",
        log_console=_parse_bool(os.getenv("TELESCOPE_LOG_CONSOLE"), False),
    )
