"""Stream habitat trend reporting (habtrend) package.

Modules:
  paths: data file locations and environment overrides
  variables: habitat variable catalogue and habitat types
  data: loading habitat observations, stream lines, trend-prep relation
  prep: builds the trend-prep table (CLI)
  filters: observation and per-site series filters
  aggregate: watershed yearly means with gap filling, facet linear trends
  trends: Kendall tau / Theil-Sen per-site trends and detrending
  plots: interactive Plotly charts and maps
"""

from . import paths, variables, data, filters, aggregate, trends, plots  # noqa: F401

__version__ = "0.1.0"

__all__ = [
	"paths",
	"variables",
	"data",
	"filters",
	"aggregate",
	"trends",
	"plots",
]
