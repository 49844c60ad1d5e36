from __future__ import annotations
from typing import Callable, Optional
import streamlit as st
from habtrend.filters import filter_observations
from habtrend.plots import watershed_trend_figure
from habtrend.ui.data import watershed_summary
from habtrend.ui.state import Controls, LoadedData
from habtrend.variables import variable_label

__all__ = ["render_watershed_trends"]


def render_watershed_trends(ld: LoadedData, ctr: Controls, tr: Optional[Callable[..., str]] = None):
    tr = tr or (lambda k, **_: k)
    cells, fits, lines = watershed_summary(ld.habitat, ctr.variable, ctr.hab_types, ctr.year_range)
    if cells.empty or (cells["n"] == 0).all():
        st.info(tr("no_data"))
        return
    obs = None
    if ctr.show_observations:
        obs = filter_observations(ld.habitat, hab_types=ctr.hab_types, variable=ctr.variable,
                                  year_range=ctr.year_range).dropna(subset=["habval"])
    label = variable_label(ctr.variable)
    fig = watershed_trend_figure(cells, fits, lines, observations=obs,
                                 title=tr("watershed_title", variable=label), y_label=label, tr=tr)
    st.plotly_chart(fig, use_container_width=True, config={"displaylogo": False})
    with st.expander(tr("trend_table"), expanded=False):
        st.dataframe(fits.round(3), use_container_width=True, hide_index=True)
