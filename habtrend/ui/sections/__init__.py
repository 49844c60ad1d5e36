from .overview import render_overview_map
from .watershed import render_watershed_trends
from .trend_map import render_trend_map
from .site_detail import render_site_detail

__all__ = [
    "render_overview_map",
    "render_watershed_trends",
    "render_trend_map",
    "render_site_detail",
]
