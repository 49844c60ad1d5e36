"""Dataset store: habitat observations, stream geometry and the per-site
trend-preparation relation.

All loaders return empty containers instead of raising when a file is
missing or unreadable; the UI decides how to present that.
"""

from __future__ import annotations

import json
import logging
import os
import sqlite3
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Mapping

import numpy as np
import pandas as pd

from habtrend.variables import variable_keys

OBS_COLUMNS = ["SiteID", "Year", "HabType", "Watershed", "habvar", "habval", "Longitude", "Latitude"]
PREP_COLUMNS = ["SiteID", "habvar", "HabType", "Longitude", "Latitude", "Year", "habval"]


@dataclass(frozen=True)
class TrendSeries:
    """One site's yearly values of one variable within one habitat type."""
    site_id: str
    habvar: str
    hab_type: str
    lon: float
    lat: float
    observations: tuple[tuple[int, float], ...]

    @property
    def years(self) -> tuple[int, ...]:
        return tuple(y for y, _ in self.observations)

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(list(self.observations), columns=["Year", "habval"])


# (SiteID, habvar) -> one TrendSeries per habitat type measured at the site
TrendPrep = Mapping[tuple[str, str], tuple[TrendSeries, ...]]


@dataclass(frozen=True)
class DatasetStore:
    habitat: pd.DataFrame
    streams: list[tuple[list[float], list[float]]] = field(default_factory=list)
    trend_prep: TrendPrep = field(default_factory=dict)


def _read_csv_safe(path: str | Path) -> pd.DataFrame:
    p = Path(path)
    if not p.exists():
        return pd.DataFrame()
    try:
        return pd.read_csv(p)
    except Exception as exc:
        logging.getLogger(__name__).warning("Could not read %s: %s", p, exc)
        return pd.DataFrame()


def _read_sqlite_table(path: str | Path, table: str) -> pd.DataFrame:
    if not os.path.exists(path):
        return pd.DataFrame()
    try:
        with sqlite3.connect(str(path)) as conn:
            existing = {r[0] for r in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")}
            if table not in existing:
                logging.getLogger(__name__).warning("Table %s missing from %s", table, path)
                return pd.DataFrame()
            return pd.read_sql_query(f"SELECT * FROM {table}", conn)
    except (sqlite3.Error, pd.errors.DatabaseError) as exc:
        # unreadable or corrupt database file
        logging.getLogger(__name__).warning("Could not read table %s from %s: %s", table, path, exc)
        return pd.DataFrame()


def normalize_habitat(df: pd.DataFrame) -> pd.DataFrame:
    """Coerce a raw habitat table to the long observation schema.

    Accepts either the long layout (``habvar``/``habval`` columns) or a wide
    layout with one column per catalogued variable key, which is melted.
    """
    if df is None or df.empty:
        return pd.DataFrame(columns=OBS_COLUMNS)
    d = df.copy()
    if "habvar" not in d.columns:
        value_cols = [c for c in variable_keys() if c in d.columns]
        id_cols = [c for c in OBS_COLUMNS if c in d.columns and c not in ("habvar", "habval")]
        d = d.melt(id_vars=id_cols, value_vars=value_cols, var_name="habvar", value_name="habval")
    for col in OBS_COLUMNS:
        if col not in d.columns:
            d[col] = np.nan
    d = d[OBS_COLUMNS].dropna(subset=["SiteID", "Year", "HabType"]).copy()
    d["SiteID"] = d["SiteID"].astype(str)
    d["Year"] = pd.to_numeric(d["Year"], errors="coerce")
    d = d.dropna(subset=["Year"]).copy()
    d["Year"] = d["Year"].astype(int)
    d["HabType"] = d["HabType"].astype(str).str.strip().str.lower()
    d["Watershed"] = d["Watershed"].fillna("").astype(str)
    d["habvar"] = d["habvar"].astype(str)
    for col in ("habval", "Longitude", "Latitude"):
        d[col] = pd.to_numeric(d[col], errors="coerce").astype(float)
    return d.sort_values(["SiteID", "habvar", "HabType", "Year"]).reset_index(drop=True)


def load_habitat(path: str | Path) -> pd.DataFrame:
    """Load the habitat observation table from CSV or SQLite (table ``habitat``)."""
    p = Path(path)
    if p.suffix.lower() in (".sqlite", ".db"):
        raw = _read_sqlite_table(p, "habitat")
    else:
        raw = _read_csv_safe(p)
    out = normalize_habitat(raw)
    logging.getLogger(__name__).info("Loaded %d habitat observations from %s", len(out), p)
    return out


def load_streams(path: str | Path) -> list[tuple[list[float], list[float]]]:
    """Return stream polylines as ``(lons, lats)`` pairs from a GeoJSON file."""
    p = Path(path)
    if not p.exists():
        return []
    try:
        with open(p, "r", encoding="utf-8") as fh:
            gj = json.load(fh)
    except (OSError, ValueError) as exc:
        logging.getLogger(__name__).warning("Skipping streams file %s: %s", p, exc)
        return []
    lines: list[tuple[list[float], list[float]]] = []
    for feat in gj.get("features", []):
        geom = feat.get("geometry") or {}
        gtype = geom.get("type")
        coords = geom.get("coordinates") or []
        if gtype == "LineString":
            parts = [coords]
        elif gtype == "MultiLineString":
            parts = coords
        else:
            continue
        for part in parts:
            if len(part) < 2:
                continue
            lines.append(([float(c[0]) for c in part], [float(c[1]) for c in part]))
    return lines


def trend_prep_from_frame(df: pd.DataFrame) -> dict[tuple[str, str], tuple[TrendSeries, ...]]:
    """Nest a long table (PREP_COLUMNS, or habitat observations) per site+variable."""
    if df is None or df.empty:
        return {}
    d = df.dropna(subset=["SiteID", "habvar", "HabType"]).copy()
    d["Year"] = pd.to_numeric(d["Year"], errors="coerce")
    d = d.dropna(subset=["Year"]).copy()
    if d.empty:
        return {}
    d["SiteID"] = d["SiteID"].astype(str)
    d["HabType"] = d["HabType"].astype(str).str.strip().str.lower()
    d["Year"] = d["Year"].astype(int)
    d["habval"] = pd.to_numeric(d["habval"], errors="coerce").astype(float)
    out: dict[tuple[str, str], list[TrendSeries]] = {}
    for (site, var, hab), g in d.groupby(["SiteID", "habvar", "HabType"], sort=True):
        yearly = g.groupby("Year")["habval"].mean().sort_index()
        lon = g["Longitude"].dropna()
        lat = g["Latitude"].dropna()
        series = TrendSeries(
            site_id=str(site),
            habvar=str(var),
            hab_type=str(hab),
            lon=float(lon.iloc[0]) if not lon.empty else float("nan"),
            lat=float(lat.iloc[0]) if not lat.empty else float("nan"),
            observations=tuple((int(y), float(v)) for y, v in yearly.items()),
        )
        out.setdefault((str(site), str(var)), []).append(series)
    return {k: tuple(v) for k, v in out.items()}


build_trend_prep = trend_prep_from_frame


def trend_prep_to_frame(prep: TrendPrep) -> pd.DataFrame:
    rows = []
    for series_group in prep.values():
        for s in series_group:
            for year, value in s.observations:
                rows.append((s.site_id, s.habvar, s.hab_type, s.lon, s.lat, year, value))
    return pd.DataFrame(rows, columns=PREP_COLUMNS)


def load_trend_prep(path: str | Path, habitat_df: pd.DataFrame | None = None) -> dict[tuple[str, str], tuple[TrendSeries, ...]]:
    """Load the trend-prep table, building it from ``habitat_df`` when the file is absent."""
    p = Path(path)
    if p.suffix.lower() in (".sqlite", ".db"):
        df = _read_sqlite_table(p, "trend_prep")
    else:
        df = _read_csv_safe(p)
    missing = [c for c in PREP_COLUMNS if c not in df.columns]
    if df.empty or missing:
        if habitat_df is None or habitat_df.empty:
            return {}
        logging.getLogger(__name__).info("Trend-prep table %s unavailable, building from habitat table", path)
        return trend_prep_from_frame(habitat_df)
    prep = trend_prep_from_frame(df)
    if not prep and habitat_df is not None and not habitat_df.empty:
        logging.getLogger(__name__).warning("Trend-prep table %s has no usable rows, building from habitat table", path)
        return trend_prep_from_frame(habitat_df)
    return prep


def iter_series(prep: TrendPrep) -> Iterable[TrendSeries]:
    for group in prep.values():
        yield from group


def load_store(habitat_path: str | Path, trend_prep_path: str | Path, streams_path: str | Path) -> DatasetStore:
    habitat = load_habitat(habitat_path)
    return DatasetStore(
        habitat=habitat,
        streams=load_streams(streams_path),
        trend_prep=load_trend_prep(trend_prep_path, habitat),
    )


__all__ = [
    "OBS_COLUMNS",
    "PREP_COLUMNS",
    "TrendSeries",
    "TrendPrep",
    "DatasetStore",
    "normalize_habitat",
    "load_habitat",
    "load_streams",
    "trend_prep_from_frame",
    "build_trend_prep",
    "trend_prep_to_frame",
    "load_trend_prep",
    "iter_series",
    "load_store",
]
