from __future__ import annotations
from pathlib import Path
from typing import Optional, Tuple
import pandas as pd
import streamlit as st
from .state import LoadedData
from habtrend.aggregate import aggregate_habitat, facet_trend_lines, fit_facet_trends
from habtrend.data import TrendPrep, load_store
from habtrend.filters import filter_trend_series, site_choices, year_bounds
from habtrend.paths import asset_path
from habtrend.trends import SiteDetail, batch_trends, results_frame, site_detail


@st.cache_resource(show_spinner=False)
def load_all(habitat_path: Optional[str] = None, trend_prep_path: Optional[str] = None,
             streams_path: Optional[str] = None) -> LoadedData:
    """Load the dataset store once per server process."""
    store = load_store(
        Path(habitat_path) if habitat_path else asset_path("habitat"),
        Path(trend_prep_path) if trend_prep_path else asset_path("trend_prep"),
        Path(streams_path) if streams_path else asset_path("streams"),
    )
    bounds = year_bounds(store.habitat)
    return LoadedData(
        habitat=store.habitat,
        streams=store.streams,
        trend_prep=store.trend_prep,
        year_min=bounds[0] if bounds else None,
        year_max=bounds[1] if bounds else None,
        sites=site_choices(store.habitat),
    )


# The store is read-only after load, so cached results are keyed by the
# filter parameters alone; leading-underscore arguments are not hashed.

@st.cache_data(show_spinner=False)
def watershed_summary(_habitat: pd.DataFrame, variable: str, hab_types: Tuple[str, ...],
                      year_range: Tuple[int, int]) -> Tuple[pd.DataFrame, pd.DataFrame, pd.DataFrame]:
    cells = aggregate_habitat(_habitat, variable=variable, hab_types=hab_types, year_range=year_range)
    fits = fit_facet_trends(cells)
    return cells, fits, facet_trend_lines(cells, fits)


@st.cache_data(show_spinner=False)
def trend_table(_prep: TrendPrep, variable: str, hab_types: Tuple[str, ...],
                year_range: Tuple[int, int]) -> Tuple[pd.DataFrame, int]:
    """Batch trend results plus the number of candidate series that were tested."""
    n_candidates = len(filter_trend_series(_prep, variable, hab_types=hab_types))
    results = batch_trends(_prep, variable, hab_types=hab_types, year_range=year_range)
    return results_frame(results), n_candidates


@st.cache_data(show_spinner=False)
def site_summary(_prep: TrendPrep, site: Optional[str], variable: str,
                 year_range: Tuple[int, int]) -> Optional[SiteDetail]:
    return site_detail(_prep, site, variable, year_range=year_range)


__all__ = ["load_all", "watershed_summary", "trend_table", "site_summary"]
