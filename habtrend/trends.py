"""Per-site Kendall trend test, Theil-Sen slope and deviation-from-mean helpers.

Each site is tested on its own yearly values (``habval ~ Year``). A site that
cannot be tested (too few points, constant series, numerical failure) yields
``None`` and is left out of batch results.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Iterable, Optional, Sequence, Tuple

import numpy as np
import pandas as pd
from scipy.stats import kendalltau, theilslopes

from habtrend.data import TrendPrep, TrendSeries
from habtrend.filters import filter_trend_series
from habtrend.variables import HAB_TYPES

MIN_POINTS = 3

# R symnum convention: (upper bound, symbol), checked in order
SIGNIF_CUTS: Tuple[Tuple[float, str], ...] = (
    (0.001, "***"),
    (0.01, "**"),
    (0.05, "*"),
    (0.1, "."),
)

TREND_INC = "inc"
TREND_DEC = "dec"
TREND_FLAT = "flat"

DETAIL_COLUMNS = ["SiteID", "HabType", "Year", "habval", "deviation"]
RESULT_COLUMNS = [
    "SiteID", "HabType", "habvar", "tau", "slope", "pval", "signif",
    "yrs", "trend", "n", "Longitude", "Latitude", "size",
]


@dataclass(frozen=True)
class TrendResult:
    site_id: str
    hab_type: str
    habvar: str
    tau: float
    slope: float
    pval: float
    signif: str
    yrs: str
    trend: str
    n: int
    lon: float = float("nan")
    lat: float = float("nan")


def significance_stars(p: float, cuts: Sequence[Tuple[float, str]] = SIGNIF_CUTS) -> str:
    if p is None or not np.isfinite(p):
        return ""
    for bound, symbol in cuts:
        if p < bound:
            return symbol
    return ""


def classify_trend(tau: float) -> str:
    if tau > 0:
        return TREND_INC
    if tau < 0:
        return TREND_DEC
    return TREND_FLAT


def _window(series: TrendSeries, year_range: Optional[Tuple[int, int]]) -> pd.DataFrame:
    d = series.to_frame()
    if year_range is not None:
        y0, y1 = sorted((int(year_range[0]), int(year_range[1])))
        d = d[d["Year"].between(y0, y1)]
    return d.dropna(subset=["habval"]).sort_values("Year").reset_index(drop=True)


def detrend(series: TrendSeries, year_range: Optional[Tuple[int, int]] = None) -> pd.DataFrame:
    """Values within the window with ``deviation = value - mean(window)``."""
    d = _window(series, year_range)
    if d.empty:
        return pd.DataFrame(columns=DETAIL_COLUMNS)
    d["deviation"] = d["habval"] - d["habval"].mean()
    d.insert(0, "HabType", series.hab_type)
    d.insert(0, "SiteID", series.site_id)
    return d[DETAIL_COLUMNS]


def kendall_trend(years: np.ndarray, values: np.ndarray) -> Tuple[float, float]:
    tau, p = kendalltau(years, values)
    return float(tau), float(p)


def theilsen_slope(years: np.ndarray, values: np.ndarray) -> float:
    res = theilslopes(values, years)
    return float(res[0])


def site_trend(series: TrendSeries, year_range: Optional[Tuple[int, int]] = None) -> Optional[TrendResult]:
    """Kendall tau + Theil-Sen slope of one site's series, or ``None`` if untestable."""
    d = _window(series, year_range)
    log = logging.getLogger(__name__)
    if len(d) < MIN_POINTS or d["Year"].nunique() < 2:
        log.debug("Site %s/%s: %d points, skipped", series.site_id, series.hab_type, len(d))
        return None
    years = d["Year"].to_numpy(dtype=float)
    values = d["habval"].to_numpy(dtype=float)
    try:
        tau, p = kendall_trend(years, values)
        slope = theilsen_slope(years, values)
    except Exception as exc:
        log.debug("Site %s/%s: trend test failed: %s", series.site_id, series.hab_type, exc)
        return None
    if not (math.isfinite(tau) and math.isfinite(p)):
        log.debug("Site %s/%s: degenerate series", series.site_id, series.hab_type)
        return None
    return TrendResult(
        site_id=series.site_id,
        hab_type=series.hab_type,
        habvar=series.habvar,
        tau=tau,
        slope=slope,
        pval=p,
        signif=significance_stars(p),
        yrs=", ".join(str(int(y)) for y in sorted(d["Year"].unique())),
        trend=classify_trend(tau),
        n=int(len(d)),
        lon=series.lon,
        lat=series.lat,
    )


def batch_trends(
    prep: TrendPrep,
    variable: str,
    hab_types: Iterable[str] | str | None = None,
    year_range: Optional[Tuple[int, int]] = None,
    sites: Iterable[str] | str | None = None,
) -> list[TrendResult]:
    """Run ``site_trend`` for every matching site; untestable sites are dropped."""
    candidates = filter_trend_series(prep, variable, sites=sites, hab_types=hab_types)
    results = [site_trend(s, year_range) for s in candidates]
    kept = [r for r in results if r is not None]
    logging.getLogger(__name__).info(
        "Trend batch %s: %d of %d series testable", variable, len(kept), len(candidates)
    )
    return kept


def rescale(values: Sequence[float], to: Tuple[float, float] = (2.0, 15.0)) -> np.ndarray:
    """Linear rescale into ``to``; a constant input maps to the midpoint."""
    arr = np.asarray(values, dtype=float)
    if arr.size == 0:
        return arr
    lo, hi = np.nanmin(arr), np.nanmax(arr)
    if not np.isfinite(lo) or hi - lo == 0:
        return np.full(arr.shape, (to[0] + to[1]) / 2.0)
    return to[0] + (arr - lo) / (hi - lo) * (to[1] - to[0])


def results_frame(results: Sequence[TrendResult], size_range: Tuple[float, float] = (2.0, 15.0)) -> pd.DataFrame:
    """Tabulate results for display: 2 dp statistics and a marker size from |tau|."""
    if not results:
        return pd.DataFrame(columns=RESULT_COLUMNS)
    df = pd.DataFrame([{
        "SiteID": r.site_id,
        "HabType": r.hab_type,
        "habvar": r.habvar,
        "tau": r.tau,
        "slope": r.slope,
        "pval": r.pval,
        "signif": r.signif,
        "yrs": r.yrs,
        "trend": r.trend,
        "n": r.n,
        "Longitude": r.lon,
        "Latitude": r.lat,
    } for r in results])
    df["size"] = rescale(df["tau"].abs().to_numpy(), to=size_range)
    df[["tau", "slope", "pval"]] = df[["tau", "slope", "pval"]].round(2)
    return df[RESULT_COLUMNS]


@dataclass(frozen=True)
class SiteDetail:
    site_id: str
    habvar: str
    series: pd.DataFrame
    trends: dict = field(default_factory=dict)

    @property
    def hab_types(self) -> list[str]:
        present = set(self.series["HabType"]) if not self.series.empty else set()
        return [h for h in HAB_TYPES if h in present] + sorted(present - set(HAB_TYPES))

    def facet_title(self, hab_type: str) -> str:
        """Habitat type annotated with its own trend significance, e.g. ``"riffle **"``."""
        res = self.trends.get(hab_type)
        if res is None:
            return hab_type
        return f"{hab_type} {res.signif}".strip()


def site_detail(
    prep: TrendPrep,
    site: Optional[str],
    variable: str,
    year_range: Optional[Tuple[int, int]] = None,
    hab_types: Iterable[str] | str | None = None,
) -> Optional[SiteDetail]:
    """Detrended series and per-habitat trend for one site; ``None`` until a site is chosen."""
    if not site:
        return None
    chosen = filter_trend_series(prep, variable, sites=[site], hab_types=hab_types)
    frames = [detrend(s, year_range) for s in chosen]
    frames = [f for f in frames if not f.empty]
    series = pd.concat(frames, ignore_index=True) if frames else pd.DataFrame(columns=DETAIL_COLUMNS)
    trends = {s.hab_type: site_trend(s, year_range) for s in chosen}
    return SiteDetail(site_id=str(site), habvar=variable, series=series, trends=trends)


__all__ = [
    "MIN_POINTS",
    "SIGNIF_CUTS",
    "TREND_INC",
    "TREND_DEC",
    "TREND_FLAT",
    "TrendResult",
    "SiteDetail",
    "significance_stars",
    "classify_trend",
    "detrend",
    "kendall_trend",
    "theilsen_slope",
    "site_trend",
    "batch_trends",
    "rescale",
    "results_frame",
    "site_detail",
]
