from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional, Tuple
import pandas as pd

from habtrend.data import TrendPrep

__all__ = [
    "LoadedData",
    "Controls",
]

@dataclass
class LoadedData:
    habitat: pd.DataFrame
    streams: list
    trend_prep: TrendPrep
    year_min: Optional[int] = None
    year_max: Optional[int] = None
    sites: list[str] = field(default_factory=list)

    @property
    def empty(self) -> bool:
        return self.habitat is None or self.habitat.empty

@dataclass
class Controls:
    variable: str
    hab_types: Tuple[str, ...]
    year_range: Tuple[int, int]
    map_year: int
    site: Optional[str]
    show_observations: bool
    y_mode: str  # "actual" | "deviation"
    trend_hab_type: Optional[str] = None
