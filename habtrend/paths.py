"""Path resolution for the habitat dataset files.

Defaults live under ``<DATA_ROOT>/data``:
 - habitat.csv       long-format habitat observations (or habitat.sqlite)
 - trend_prep.csv    per-site series used by the trend engine
 - streams.geojson   stream lines drawn behind the maps

Environment variable overrides:
  DATA_ROOT, HABTREND_HABITAT_PATH, HABTREND_TREND_PREP_PATH,
  HABTREND_STREAMS_PATH
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional


def project_root() -> Path:
    # Assume this file is at <root>/habtrend/paths.py
    return Path(__file__).resolve().parent.parent


def data_root() -> Path:
    env = os.environ.get("DATA_ROOT")
    if env:
        return Path(env).expanduser()
    return project_root()


_DEFAULT_FILES = {
    "habitat": "habitat.csv",
    "trend_prep": "trend_prep.csv",
    "streams": "streams.geojson",
}

_ENV_MAP = {
    "habitat": "HABTREND_HABITAT_PATH",
    "trend_prep": "HABTREND_TREND_PREP_PATH",
    "streams": "HABTREND_STREAMS_PATH",
}


def env_override(asset: str) -> Optional[str]:
    env = _ENV_MAP.get(asset)
    if not env:
        return None
    return os.environ.get(env)


def asset_path(asset: str) -> Path:
    """Return the configured path for ``asset`` (habitat, trend_prep, streams)."""
    if asset not in _DEFAULT_FILES:
        raise KeyError(f"Unknown data asset: {asset}")
    override = env_override(asset)
    if override:
        return Path(override).expanduser()
    base = data_root() / "data"
    default = base / _DEFAULT_FILES[asset]
    if asset == "habitat" and not default.exists():
        sqlite_path = base / "habitat.sqlite"
        if sqlite_path.exists():
            return sqlite_path
    return default


__all__ = [
    "project_root",
    "data_root",
    "env_override",
    "asset_path",
]
