from __future__ import annotations

from typing import Iterable, Optional, Tuple

import pandas as pd

from habtrend.data import TrendPrep, TrendSeries


def _as_set(values: Iterable[str] | str | None) -> Optional[set[str]]:
    if values is None:
        return None
    if isinstance(values, str):
        return {values}
    return {str(v) for v in values}


def _ordered_range(year_range: Tuple[int, int]) -> Tuple[int, int]:
    y0, y1 = int(year_range[0]), int(year_range[1])
    return (y0, y1) if y0 <= y1 else (y1, y0)


def filter_observations(
    df: pd.DataFrame,
    hab_types: Iterable[str] | str | None = None,
    variable: Optional[str] = None,
    year_range: Optional[Tuple[int, int]] = None,
    sites: Iterable[str] | str | None = None,
    watersheds: Iterable[str] | str | None = None,
) -> pd.DataFrame:
    """Subset habitat observations; ``None`` leaves a predicate unrestricted.

    An empty selection returns an empty frame with the original columns.
    """
    if df is None:
        return pd.DataFrame()
    if df.empty:
        return df.iloc[0:0].copy()
    mask = pd.Series(True, index=df.index)
    habs = _as_set(hab_types)
    if habs is not None:
        mask &= df["HabType"].isin(habs)
    if variable is not None:
        mask &= df["habvar"] == variable
    if year_range is not None:
        y0, y1 = _ordered_range(year_range)
        mask &= df["Year"].between(y0, y1)
    site_set = _as_set(sites)
    if site_set is not None:
        mask &= df["SiteID"].astype(str).isin(site_set)
    ws = _as_set(watersheds)
    if ws is not None:
        mask &= df["Watershed"].isin(ws)
    return df.loc[mask].reset_index(drop=True)


def filter_trend_series(
    prep: TrendPrep,
    variable: str,
    sites: Iterable[str] | str | None = None,
    hab_types: Iterable[str] | str | None = None,
) -> list[TrendSeries]:
    """Select per-site series by variable, site and habitat type, ordered by site."""
    site_set = _as_set(sites)
    habs = _as_set(hab_types)
    out: list[TrendSeries] = []
    for (site, var), group in sorted(prep.items()):
        if var != variable:
            continue
        if site_set is not None and site not in site_set:
            continue
        for series in group:
            if habs is None or series.hab_type in habs:
                out.append(series)
    return out


def year_bounds(df: pd.DataFrame) -> Optional[Tuple[int, int]]:
    if df is None or df.empty or "Year" not in df.columns:
        return None
    years = df["Year"].dropna()
    if years.empty:
        return None
    return int(years.min()), int(years.max())


def site_choices(df: pd.DataFrame, variable: Optional[str] = None) -> list[str]:
    if df is None or df.empty:
        return []
    d = df if variable is None else df[df["habvar"] == variable]
    return sorted(d["SiteID"].astype(str).unique().tolist())


__all__ = [
    "filter_observations",
    "filter_trend_series",
    "year_bounds",
    "site_choices",
]
