from __future__ import annotations
from typing import Callable, Optional
import streamlit as st
from habtrend.plots import trend_map_figure
from habtrend.ui.data import trend_table
from habtrend.ui.state import Controls, LoadedData
from habtrend.variables import variable_label

__all__ = ["render_trend_map"]


def render_trend_map(ld: LoadedData, ctr: Controls, tr: Optional[Callable[..., str]] = None):
    tr = tr or (lambda k, **_: k)
    table, n_candidates = trend_table(ld.trend_prep, ctr.variable, ctr.hab_types, ctr.year_range)
    if table.empty:
        st.info(tr("no_data"))
        return
    y0, y1 = ctr.year_range
    title = tr("trend_map_title", variable=variable_label(ctr.variable), hab=ctr.trend_hab_type or "", y0=y0, y1=y1)
    st.plotly_chart(trend_map_figure(table, ld.streams, title=title, tr=tr, hab_type=ctr.trend_hab_type),
                    use_container_width=True, config={"displaylogo": False})
    st.caption(tr("sites_tested", n=n_candidates, m=n_candidates - len(table)))
    with st.expander(tr("trend_table"), expanded=False):
        st.dataframe(table.drop(columns=["size"]), use_container_width=True, hide_index=True)
        csv_bytes = table.drop(columns=["size"]).to_csv(index=False).encode("utf-8")
        st.download_button(tr("download_csv"), csv_bytes,
                           file_name=f"trends_{ctr.variable}_{y0}_{y1}.csv", mime="text/csv")
