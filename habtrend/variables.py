from __future__ import annotations

from dataclasses import dataclass

HAB_TYPES: tuple[str, ...] = ("run", "riffle", "pool")


@dataclass(frozen=True)
class HabitatVariable:
    key: str
    label: str
    unit: str = ""


VARIABLES: tuple[HabitatVariable, ...] = (
    HabitatVariable("CanopyCover", "Canopy cover", "%"),
    HabitatVariable("DecidCanopy", "Deciduous canopy", "%"),
    HabitatVariable("AvgDepth", "Average depth", "ft"),
    HabitatVariable("MaxDepth", "Max depth", "ft"),
    HabitatVariable("Embeddedness", "Embeddedness", "%"),
    HabitatVariable("EscapeCover", "Escape cover ratio"),
    HabitatVariable("StnFines", "Fines", "%"),
    HabitatVariable("StnLength", "Station length", "ft"),
    HabitatVariable("StnWidth", "Station width", "ft"),
)

_BY_KEY = {v.key: v for v in VARIABLES}


def variable_keys() -> list[str]:
    return [v.key for v in VARIABLES]


def get_variable(key: str) -> HabitatVariable:
    try:
        return _BY_KEY[key]
    except KeyError:
        raise KeyError(f"Unknown habitat variable: {key}") from None


def variable_label(key: str) -> str:
    """Axis label such as ``"Fines (%)"``; unknown keys are returned unchanged."""
    v = _BY_KEY.get(key)
    if v is None:
        return key
    return f"{v.label} ({v.unit})" if v.unit else v.label


__all__ = [
    "HAB_TYPES",
    "HabitatVariable",
    "VARIABLES",
    "variable_keys",
    "get_variable",
    "variable_label",
]
