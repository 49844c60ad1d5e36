from __future__ import annotations
import streamlit as st
from .state import Controls, LoadedData
from habtrend.filters import site_choices
from habtrend.i18n import Translator, DEFAULT_LANG
from habtrend.variables import HAB_TYPES, variable_keys, variable_label

__all__ = ["build_controls"]


def build_controls(ld: LoadedData, lang: str = DEFAULT_LANG) -> Controls:
    tr = Translator(lang)
    st.sidebar.header(tr("filters"))
    keys = variable_keys()
    variable = st.sidebar.selectbox(tr("variable"), keys, index=keys.index("StnFines"), format_func=variable_label)
    hab_types = st.sidebar.multiselect(tr("habitat_types"), list(HAB_TYPES), default=list(HAB_TYPES))
    # trend map shows one habitat type at a time
    trend_hab_type = st.sidebar.selectbox(tr("trend_map_habitat"), list(hab_types)) if hab_types else None

    y_lo = ld.year_min if ld.year_min is not None else 0
    y_hi = ld.year_max if ld.year_max is not None else y_lo
    if y_hi > y_lo:
        year_range = st.sidebar.slider(tr("year_range"), y_lo, y_hi, (y_lo, y_hi), 1)
    else:
        # st.slider rejects min == max
        year_range = (y_lo, y_hi)
    years = list(range(y_lo, y_hi + 1))
    map_year = st.sidebar.selectbox(tr("map_year"), years, index=len(years) - 1)

    sites = site_choices(ld.habitat, variable)
    site = st.sidebar.selectbox(tr("site"), [None] + sites, index=0,
                                format_func=lambda s: "-" if s is None else s)
    show_observations = st.sidebar.checkbox(tr("show_observations"), value=False)
    y_mode_label = st.sidebar.radio(tr("y_axis_mode"), [tr("y_actual"), tr("y_deviation")], index=0)

    return Controls(
        variable=variable,
        hab_types=tuple(hab_types),
        year_range=(int(year_range[0]), int(year_range[1])),
        map_year=int(map_year),
        site=site,
        show_observations=bool(show_observations),
        y_mode="deviation" if y_mode_label == tr("y_deviation") else "actual",
        trend_hab_type=trend_hab_type,
    )
