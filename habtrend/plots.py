from __future__ import annotations

from typing import Callable, Optional, Sequence

import numpy as np
import pandas as pd
import plotly.graph_objects as go
from plotly.subplots import make_subplots

from habtrend.trends import SiteDetail, TREND_DEC, TREND_FLAT, TREND_INC, rescale
from habtrend.variables import HAB_TYPES

TREND_COLORS = {
    TREND_INC: "#2166ac",
    TREND_DEC: "#b2182b",
    TREND_FLAT: "#7f7f7f",
}
HAB_COLORS = {
    "run": "#1f77b4",
    "riffle": "#2ca02c",
    "pool": "#9467bd",
}
STREAM_COLOR = "#6baed6"
MAP_STYLE = "open-street-map"

Lines = Sequence[tuple[Sequence[float], Sequence[float]]]


def _tr(tr: Optional[Callable[..., str]]) -> Callable[..., str]:
    return tr or (lambda k, **_: k)


def _ordered_habs(values) -> list[str]:
    present = set(values)
    return [h for h in HAB_TYPES if h in present] + sorted(present - set(HAB_TYPES))


def _add_streams(fig: go.Figure, streams: Lines | None) -> None:
    """Draw all stream polylines as a single NaN-separated trace."""
    if not streams:
        return
    lons: list[float | None] = []
    lats: list[float | None] = []
    for xs, ys in streams:
        lons.extend(xs)
        lats.extend(ys)
        lons.append(None)
        lats.append(None)
    fig.add_trace(go.Scattermap(
        lon=lons, lat=lats, mode="lines",
        line=dict(color=STREAM_COLOR, width=1.5),
        hoverinfo="skip", showlegend=False, name="streams",
    ))


def _map_layout(fig: go.Figure, lon: pd.Series, lat: pd.Series, title: str) -> None:
    lon = lon.dropna()
    lat = lat.dropna()
    center = dict(lon=float(lon.mean()), lat=float(lat.mean())) if not lon.empty and not lat.empty else dict(lon=0.0, lat=0.0)
    fig.update_layout(
        title=title,
        map=dict(style=MAP_STYLE, center=center, zoom=8 if not lon.empty else 1),
        margin=dict(l=0, r=0, t=40, b=0),
        legend=dict(orientation="h", yanchor="bottom", y=0.01, xanchor="left", x=0.01),
    )


def overview_map_figure(points: pd.DataFrame, streams: Lines | None = None, title: str = "",
                        value_label: str = "value", tr: Optional[Callable[..., str]] = None) -> go.Figure:
    """Raw values at each site for one year; marker size proportional to value."""
    tr = _tr(tr)
    fig = go.Figure()
    _add_streams(fig, streams)
    d = points.dropna(subset=["habval"]) if points is not None and not points.empty else pd.DataFrame(columns=["HabType", "habval", "Longitude", "Latitude", "SiteID"])
    if not d.empty:
        sizes = rescale(d["habval"].to_numpy(), to=(5.0, 22.0))
        d = d.assign(_size=sizes)
    for hab in _ordered_habs(d["HabType"]):
        g = d[d["HabType"] == hab]
        fig.add_trace(go.Scattermap(
            lon=g["Longitude"], lat=g["Latitude"], mode="markers",
            marker=dict(size=g["_size"], color=HAB_COLORS.get(hab, "#333333"), opacity=0.8),
            text=[f"{s} ({hab})<br>{value_label}: {v:.2f}" for s, v in zip(g["SiteID"], g["habval"])],
            hoverinfo="text", name=hab,
        ))
    _map_layout(fig, d["Longitude"], d["Latitude"], title)
    return fig


def trend_map_figure(trend_df: pd.DataFrame, streams: Lines | None = None, title: str = "",
                     tr: Optional[Callable[..., str]] = None, hab_type: Optional[str] = None) -> go.Figure:
    """Sites colored by trend direction, sized by |tau| (the ``size`` column).

    Series of one site share its coordinates, so ``hab_type`` keeps a single
    habitat type on the map.
    """
    tr = _tr(tr)
    fig = go.Figure()
    _add_streams(fig, streams)
    d = trend_df if trend_df is not None else pd.DataFrame(columns=["trend", "HabType", "Longitude", "Latitude"])
    if hab_type is not None:
        d = d[d["HabType"] == hab_type]
    names = {TREND_INC: tr("increase"), TREND_DEC: tr("decrease"), TREND_FLAT: tr("flat")}
    for direction in (TREND_INC, TREND_DEC, TREND_FLAT):
        g = d[d["trend"] == direction]
        if g.empty:
            continue
        fig.add_trace(go.Scattermap(
            lon=g["Longitude"], lat=g["Latitude"], mode="markers",
            marker=dict(size=g["size"], color=TREND_COLORS[direction], opacity=0.85),
            text=[
                f"{r.SiteID} ({r.HabType})<br>tau={r.tau:.2f} {r.signif}<br>slope={r.slope:.2f}/yr<br>years: {r.yrs}"
                for r in g.itertuples(index=False)
            ],
            hoverinfo="text", name=names[direction],
        ))
    _map_layout(fig, d["Longitude"], d["Latitude"], title)
    return fig


def watershed_trend_figure(cells: pd.DataFrame, fits: pd.DataFrame, lines: pd.DataFrame,
                           observations: Optional[pd.DataFrame] = None, title: str = "",
                           y_label: str = "", tr: Optional[Callable[..., str]] = None) -> go.Figure:
    """Yearly means faceted by watershed (rows) and habitat type (columns).

    Years with ``n == 0`` break the mean line; the fitted linear trend is
    dashed and the facet title carries the labeled mean.
    """
    tr = _tr(tr)
    if cells is None or cells.empty:
        fig = go.Figure()
        fig.update_layout(title=title, template="plotly_white")
        return fig
    habs = _ordered_habs(cells["HabType"])
    sheds = sorted(cells["Watershed"].unique())
    means = {(f.HabType, f.Watershed): f.mean for f in fits.itertuples(index=False)} if fits is not None else {}
    titles = []
    for ws in sheds:
        for hab in habs:
            m = means.get((hab, ws), float("nan"))
            label = f"{ws} | {hab}"
            if np.isfinite(m):
                label += " | " + tr("mean_label", mean=m)
            titles.append(label)
    fig = make_subplots(rows=len(sheds), cols=len(habs), shared_xaxes=True,
                        subplot_titles=titles, vertical_spacing=min(0.08, 0.5 / max(1, len(sheds))))
    first = True
    for i, ws in enumerate(sheds, start=1):
        for j, hab in enumerate(habs, start=1):
            c = cells[(cells["Watershed"] == ws) & (cells["HabType"] == hab)].sort_values("Year")
            if c.empty:
                continue
            if observations is not None and not observations.empty:
                o = observations[(observations["Watershed"] == ws) & (observations["HabType"] == hab)]
                fig.add_trace(go.Scatter(
                    x=o["Year"], y=o["habval"], mode="markers", name=tr("obs_name"),
                    marker=dict(color="#bbbbbb", size=5), text=o["SiteID"],
                    legendgroup="obs", showlegend=first,
                ), row=i, col=j)
            fig.add_trace(go.Scatter(
                x=c["Year"], y=c["avehab"], mode="lines+markers", connectgaps=False,
                name=tr("mean_name"), line=dict(color=HAB_COLORS.get(hab, "#333333"), width=2),
                customdata=c["n"], hovertemplate="%{x}: %{y:.2f} (n=%{customdata})<extra></extra>",
                legendgroup="mean", showlegend=first,
            ), row=i, col=j)
            if lines is not None and not lines.empty:
                ln = lines[(lines["Watershed"] == ws) & (lines["HabType"] == hab)]
                if not ln.empty:
                    fig.add_trace(go.Scatter(
                        x=ln["Year"], y=ln["fitted"], mode="lines", name=tr("trend_name"),
                        line=dict(color="#444444", dash="dash", width=1.5),
                        legendgroup="trend", showlegend=first,
                    ), row=i, col=j)
            first = False
    fig.update_layout(title=title, template="plotly_white", height=max(350, 260 * len(sheds)))
    fig.update_xaxes(title_text=tr("year_axis"), row=len(sheds))
    fig.update_yaxes(title_text=y_label, col=1)
    return fig


def site_detail_figure(detail: Optional[SiteDetail], y_mode: str = "actual", title: str = "",
                       y_label: str = "", tr: Optional[Callable[..., str]] = None) -> go.Figure:
    """Per-year bars for one site, one facet per habitat type."""
    tr = _tr(tr)
    if detail is None or detail.series.empty:
        fig = go.Figure()
        fig.update_layout(title=title, template="plotly_white")
        return fig
    habs = detail.hab_types
    col = "deviation" if y_mode == "deviation" else "habval"
    fig = make_subplots(rows=1, cols=len(habs), shared_yaxes=True,
                        subplot_titles=[detail.facet_title(h) for h in habs])
    for j, hab in enumerate(habs, start=1):
        g = detail.series[detail.series["HabType"] == hab]
        fig.add_trace(go.Bar(
            x=g["Year"], y=g[col], name=hab,
            marker_color=HAB_COLORS.get(hab, "#333333"),
            hovertemplate="%{x}: %{y:.2f}<extra></extra>",
        ), row=1, col=j)
    fig.update_layout(title=title, template="plotly_white", showlegend=False)
    fig.update_xaxes(title_text=tr("year_axis"))
    fig.update_yaxes(title_text=tr("deviation_axis") if col == "deviation" else y_label, col=1)
    return fig


__all__ = [
    "TREND_COLORS",
    "HAB_COLORS",
    "overview_map_figure",
    "trend_map_figure",
    "watershed_trend_figure",
    "site_detail_figure",
]
