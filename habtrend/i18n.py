"""UI label catalogue.

``Translator(lang)(key, **fmt)`` returns the label for ``key`` formatted with
``fmt``; unknown keys fall back to English, then to the key itself.
"""

from __future__ import annotations

DEFAULT_LANG = "en"

TRANSLATIONS: dict[str, dict[str, str]] = {
    "en": {
        "app_title": "Stream Habitat Trends",
        "tagline": "Habitat survey summaries by watershed and Kendall trend tests by site",
        "loading_data": "Loading habitat data...",
        "habitat_missing": "No habitat observations found. Set DATA_ROOT or HABTREND_HABITAT_PATH.",
        "filters": "Filters",
        "variable": "Habitat variable",
        "habitat_types": "Habitat types",
        "year_range": "Year range",
        "map_year": "Survey year (overview map)",
        "site": "Site",
        "show_observations": "Show individual observations",
        "y_axis_mode": "Y axis",
        "y_actual": "Actual value",
        "y_deviation": "Deviation from mean",
        "tab_overview": "Overview map",
        "tab_watershed": "Watershed trends",
        "tab_trend_map": "Site trend map",
        "tab_site": "Site detail",
        "no_data": "No data for this selection.",
        "no_site": "Choose a site to see its trend detail.",
        "overview_title": "{variable}, {year}",
        "watershed_title": "{variable}: yearly watershed means",
        "trend_map_title": "{variable} ({hab}): Kendall trend by site, {y0}-{y1}",
        "trend_map_habitat": "Habitat type (trend map)",
        "site_title": "{variable} at {site}, {y0}-{y1}",
        "year_axis": "Year",
        "mean_label": "mean {mean:.2f}",
        "mean_name": "Yearly mean",
        "trend_name": "Linear trend",
        "obs_name": "Observations",
        "increase": "Increasing",
        "decrease": "Decreasing",
        "flat": "No direction",
        "deviation_axis": "Deviation from mean",
        "sites_tested": "{n} site series tested, {m} without enough data",
        "trend_table": "Trend results",
        "download_csv": "Download trend table (CSV)",
        "footer_caption": "Trend test: Kendall tau of value vs year; significance . p<0.1, * p<0.05, ** p<0.01, *** p<0.001.",
    },
    "fr": {
        "app_title": "Tendances de l'habitat des cours d'eau",
        "tagline": "Moyennes annuelles par bassin versant et tests de tendance de Kendall par station",
        "loading_data": "Chargement des données d'habitat...",
        "habitat_missing": "Aucune observation d'habitat. Définir DATA_ROOT ou HABTREND_HABITAT_PATH.",
        "filters": "Filtres",
        "variable": "Variable d'habitat",
        "habitat_types": "Types d'habitat",
        "year_range": "Période",
        "map_year": "Année de relevé (carte)",
        "trend_map_habitat": "Type d'habitat (carte des tendances)",
        "site": "Station",
        "show_observations": "Afficher les observations",
        "y_axis_mode": "Axe Y",
        "y_actual": "Valeur mesurée",
        "y_deviation": "Écart à la moyenne",
        "tab_overview": "Carte générale",
        "tab_watershed": "Tendances par bassin",
        "tab_trend_map": "Carte des tendances",
        "tab_site": "Détail station",
        "no_data": "Aucune donnée pour cette sélection.",
        "no_site": "Choisir une station pour afficher le détail.",
        "overview_title": "{variable}, {year}",
        "watershed_title": "{variable} : moyennes annuelles par bassin",
        "trend_map_title": "{variable} ({hab}) : tendance de Kendall par station, {y0}-{y1}",
        "site_title": "{variable} à {site}, {y0}-{y1}",
        "year_axis": "Année",
        "mean_label": "moyenne {mean:.2f}",
        "mean_name": "Moyenne annuelle",
        "trend_name": "Tendance linéaire",
        "obs_name": "Observations",
        "increase": "Hausse",
        "decrease": "Baisse",
        "flat": "Sans direction",
        "deviation_axis": "Écart à la moyenne",
        "sites_tested": "{n} séries testées, {m} sans données suffisantes",
        "trend_table": "Résultats des tendances",
        "download_csv": "Télécharger le tableau (CSV)",
    },
}


class Translator:
    def __init__(self, lang: str = DEFAULT_LANG):
        self.lang = lang if lang in TRANSLATIONS else DEFAULT_LANG

    def __call__(self, key: str, **fmt) -> str:
        text = TRANSLATIONS[self.lang].get(key) or TRANSLATIONS[DEFAULT_LANG].get(key) or key
        return text.format(**fmt) if fmt else text


__all__ = ["DEFAULT_LANG", "TRANSLATIONS", "Translator"]
