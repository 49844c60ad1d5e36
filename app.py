"""Streamlit orchestrator app.

Responsibilities are delegated to modules under `habtrend.ui`:

  habtrend.ui.data.load_all           -> habitat table, stream lines, trend-prep relation
  habtrend.ui.controls.build_controls -> sidebar filters (variable, habitat types, years, site)
  habtrend.ui.sections.*              -> one tab per view (overview map, watershed
                                         trends, site trend map, site detail)

This file only sequences loading, controls and layout; the analysis lives in
`habtrend` where it can be tested without Streamlit.

Run: streamlit run app.py
"""
from __future__ import annotations

import logging
import os

import streamlit as st

from habtrend.i18n import Translator, TRANSLATIONS, DEFAULT_LANG
from habtrend.ui.controls import build_controls
from habtrend.ui.data import load_all
from habtrend.ui.sections import (
    render_overview_map,
    render_site_detail,
    render_trend_map,
    render_watershed_trends,
)
from habtrend.ui.state import Controls, LoadedData

logging.basicConfig(level=os.environ.get("HABTREND_LOG_LEVEL", "INFO").upper())

st.set_page_config(page_title="Stream Habitat Trends", layout="wide")

# ?lang=.. query parameter, falls back to the default catalogue
qp = st.query_params
lang = qp.get("lang", DEFAULT_LANG)
if lang not in TRANSLATIONS:
    lang = DEFAULT_LANG
tr = Translator(lang)

st.title(tr("app_title"))
st.caption(tr("tagline"))

with st.spinner(tr("loading_data")):
    ld: LoadedData = load_all()

if ld.empty:
    st.error(tr("habitat_missing"))
    st.stop()

controls: Controls = build_controls(ld, lang=lang)

tab_overview, tab_watershed, tab_trend_map, tab_site = st.tabs(
    [tr("tab_overview"), tr("tab_watershed"), tr("tab_trend_map"), tr("tab_site")]
)
with tab_overview:
    render_overview_map(ld, controls, tr)
with tab_watershed:
    render_watershed_trends(ld, controls, tr)
with tab_trend_map:
    render_trend_map(ld, controls, tr)
with tab_site:
    render_site_detail(ld, controls, tr)

st.caption(tr("footer_caption"))
