"""Watershed-level yearly summaries of habitat observations.

``aggregate_habitat`` groups non-missing values by (Year, HabType, Watershed)
and gap-fills every year between the first and last year of the filtered
input, so charts keep a continuous year axis with visible holes.
"""

from __future__ import annotations

from typing import Iterable, Optional, Tuple

import numpy as np
import pandas as pd
from scipy.stats import linregress

from habtrend.filters import filter_observations

AGG_COLUMNS = ["Year", "HabType", "Watershed", "n", "avehab"]
FIT_COLUMNS = ["HabType", "Watershed", "slope", "intercept", "pval", "mean", "n_years"]
FACET_KEYS = ["HabType", "Watershed"]


def _empty_cells() -> pd.DataFrame:
    return pd.DataFrame({
        "Year": pd.Series(dtype=int),
        "HabType": pd.Series(dtype=object),
        "Watershed": pd.Series(dtype=object),
        "n": pd.Series(dtype=int),
        "avehab": pd.Series(dtype=float),
    })


def aggregate_habitat(
    df: pd.DataFrame,
    variable: str,
    hab_types: Iterable[str] | str | None = None,
    year_range: Optional[Tuple[int, int]] = None,
) -> pd.DataFrame:
    """Return one AggregateCell row per (Year, HabType, Watershed) for ``variable``.

    Cells without any non-missing value carry ``n == 0`` and ``avehab = NaN``.
    """
    if not variable:
        return _empty_cells()
    d = filter_observations(df, hab_types=hab_types, variable=variable, year_range=year_range)
    if d.empty:
        return _empty_cells()
    years = pd.DataFrame({"Year": np.arange(int(d["Year"].min()), int(d["Year"].max()) + 1)})
    facets = d[FACET_KEYS].drop_duplicates()
    full = facets.merge(years, how="cross")
    valid = d.dropna(subset=["habval"])
    grouped = (
        valid.groupby(["Year", "HabType", "Watershed"])["habval"]
        .agg(n="size", avehab="mean")
        .reset_index()
    )
    out = full.merge(grouped, on=["Year", "HabType", "Watershed"], how="left")
    out["n"] = out["n"].fillna(0).astype(int)
    out["avehab"] = out["avehab"].astype(float)
    out = out[AGG_COLUMNS].sort_values(["HabType", "Watershed", "Year"]).reset_index(drop=True)
    return out


def fit_facet_trends(cells: pd.DataFrame) -> pd.DataFrame:
    """Least-squares line of ``avehab ~ Year`` per (HabType, Watershed) facet.

    Facets with fewer than two populated years get NaN slope/intercept.
    """
    if cells is None or cells.empty:
        return pd.DataFrame(columns=FIT_COLUMNS)
    rows = []
    for (hab, ws), g in cells.groupby(FACET_KEYS, sort=True):
        ok = g[(g["n"] > 0) & g["avehab"].notna()]
        slope = intercept = pval = float("nan")
        if ok["Year"].nunique() >= 2:
            res = linregress(ok["Year"].to_numpy(dtype=float), ok["avehab"].to_numpy(dtype=float))
            slope, intercept, pval = float(res.slope), float(res.intercept), float(res.pvalue)
        rows.append({
            "HabType": hab,
            "Watershed": ws,
            "slope": slope,
            "intercept": intercept,
            "pval": pval,
            "mean": float(ok["avehab"].mean()) if not ok.empty else float("nan"),
            "n_years": int(len(ok)),
        })
    return pd.DataFrame(rows, columns=FIT_COLUMNS)


def facet_trend_lines(cells: pd.DataFrame, fits: pd.DataFrame) -> pd.DataFrame:
    """Evaluate each facet's fitted line over its populated year span."""
    cols = ["Year", "HabType", "Watershed", "fitted"]
    if cells is None or cells.empty or fits is None or fits.empty:
        return pd.DataFrame(columns=cols)
    frames = []
    for fit in fits.itertuples(index=False):
        if np.isnan(fit.slope):
            continue
        g = cells[(cells["HabType"] == fit.HabType) & (cells["Watershed"] == fit.Watershed) & (cells["n"] > 0)]
        yrs = np.arange(int(g["Year"].min()), int(g["Year"].max()) + 1)
        frames.append(pd.DataFrame({
            "Year": yrs,
            "HabType": fit.HabType,
            "Watershed": fit.Watershed,
            "fitted": fit.intercept + fit.slope * yrs,
        }))
    if not frames:
        return pd.DataFrame(columns=cols)
    return pd.concat(frames, ignore_index=True)


__all__ = [
    "AGG_COLUMNS",
    "aggregate_habitat",
    "fit_facet_trends",
    "facet_trend_lines",
]
