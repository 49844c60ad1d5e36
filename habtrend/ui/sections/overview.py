from __future__ import annotations
from typing import Callable, Optional
import streamlit as st
from habtrend.filters import filter_observations
from habtrend.plots import overview_map_figure
from habtrend.ui.state import Controls, LoadedData
from habtrend.variables import variable_label

__all__ = ["render_overview_map"]


def render_overview_map(ld: LoadedData, ctr: Controls, tr: Optional[Callable[..., str]] = None):
    tr = tr or (lambda k, **_: k)
    points = filter_observations(
        ld.habitat,
        hab_types=ctr.hab_types,
        variable=ctr.variable,
        year_range=(ctr.map_year, ctr.map_year),
    ).dropna(subset=["habval"])
    if points.empty:
        st.info(tr("no_data"))
        return
    label = variable_label(ctr.variable)
    fig = overview_map_figure(points, ld.streams, title=tr("overview_title", variable=label, year=ctr.map_year),
                              value_label=label, tr=tr)
    st.plotly_chart(fig, use_container_width=True, config={"displaylogo": False})
