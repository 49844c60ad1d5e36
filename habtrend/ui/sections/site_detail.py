from __future__ import annotations
from typing import Callable, Optional
import streamlit as st
from habtrend.plots import site_detail_figure
from habtrend.ui.data import site_summary
from habtrend.ui.state import Controls, LoadedData
from habtrend.variables import variable_label

__all__ = ["render_site_detail"]


def render_site_detail(ld: LoadedData, ctr: Controls, tr: Optional[Callable[..., str]] = None):
    tr = tr or (lambda k, **_: k)
    if not ctr.site:
        st.info(tr("no_site"))
        return
    detail = site_summary(ld.trend_prep, ctr.site, ctr.variable, ctr.year_range)
    if detail is None or detail.series.empty:
        st.info(tr("no_data"))
        return
    label = variable_label(ctr.variable)
    y0, y1 = ctr.year_range
    fig = site_detail_figure(detail, y_mode=ctr.y_mode,
                             title=tr("site_title", variable=label, site=ctr.site, y0=y0, y1=y1),
                             y_label=label, tr=tr)
    st.plotly_chart(fig, use_container_width=True, config={"displaylogo": False})
    cols = st.columns(max(1, len(detail.hab_types)))
    for col, hab in zip(cols, detail.hab_types):
        res = detail.trends.get(hab)
        with col:
            if res is None:
                st.metric(hab, "n/a")
            else:
                st.metric(hab, f"tau {res.tau:.2f} {res.signif}".strip(), f"{res.slope:+.2f}/yr")
                st.caption(f"p={res.pval:.2f} | {res.yrs}")
