"""
Data Model — value types shared by every sub-model of the engine.

    - WeatherObservation: one historical / forecast / current weather sample
    - MorphologyConfig:   caller's (possibly partial) description of a water body
    - ResolvedMorphology: canonical parameter set produced by morphology_resolver
    - BioContext:         unified state handed to the species scorers

All types are plain dataclasses. Nothing here performs I/O or keeps state
between engine calls.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, asdict, replace
from datetime import datetime
from enum import Enum
from typing import Any, Mapping, Optional

import pandas as pd


class WaterBodyType(str, Enum):
    RIVER = "river"
    POND = "pond"
    MEDIUM_CHANNEL = "medium_channel"
    DEEP_LAKE = "deep_lake"


class BasinClass(str, Enum):
    URBAN = "urban"
    AGRICULTURAL = "agricultural"
    PASTURE = "pasture"
    FORESTED = "forested"


class DepthClass(str, Enum):
    SHALLOW = "shallow"   # < 3 m
    MEDIUM = "medium"     # 3 - 15 m
    DEEP = "deep"         # > 15 m


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse an ISO-8601 string / datetime / pandas Timestamp into a naive datetime.

    Timezone-aware values keep their wall-clock time: the light model works on
    the local clock of the water body, not on UTC.
    """
    if value is None or value == "":
        return None
    try:
        ts = pd.Timestamp(value)
    except (TypeError, ValueError):
        return None
    if pd.isna(ts):
        return None
    if ts.tzinfo is not None:
        ts = ts.tz_localize(None)
    return ts.to_pydatetime()


def _first(d: Mapping, keys: tuple, default=None):
    for k in keys:
        if k in d and d[k] is not None:
            return d[k]
    return default


def _as_float(value, default: Optional[float]) -> Optional[float]:
    if value is None:
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


@dataclass(frozen=True)
class WeatherObservation:
    timestamp: Optional[datetime] = None
    air_temperature: Optional[float] = None   # °C
    precipitation: float = 0.0                # mm over the sample period
    wind_speed: float = 0.0                   # km/h
    cloud_cover_percent: float = 0.0          # 0-100
    atmospheric_pressure: Optional[float] = None   # hPa, None when not reported

    @classmethod
    def from_dict(cls, d: Mapping) -> "WeatherObservation":
        """Build from a provider-style dict (snake_case or Open-Meteo-like keys)."""
        if isinstance(d, WeatherObservation):
            # Same timestamp normalization as for parsed strings.
            return replace(d, timestamp=parse_timestamp(d.timestamp))
        return cls(
            timestamp=parse_timestamp(_first(d, ("timestamp", "date", "time"))),
            air_temperature=_as_float(_first(d, ("air_temperature", "temperature", "temperature_2m")), None),
            precipitation=_as_float(_first(d, ("precipitation", "precip")), 0.0),
            wind_speed=_as_float(_first(d, ("wind_speed", "windSpeed", "wind")), 0.0),
            cloud_cover_percent=_as_float(
                _first(d, ("cloud_cover_percent", "cloud_cover", "cloudCover", "clouds")), 0.0
            ),
            atmospheric_pressure=_as_float(
                _first(d, ("atmospheric_pressure", "pressure", "surface_pressure")), None
            ),
        )


@dataclass(frozen=True)
class MorphologyConfig:
    type_id: Any = None
    basin_class: Any = None
    depth_class: Any = None
    mean_depth: Optional[float] = None      # m, overrides depth_class
    surface_area: Optional[float] = None    # m²
    shape_factor: Optional[float] = None    # fetch elongation ratio

    @classmethod
    def from_dict(cls, d: Optional[Mapping]) -> "MorphologyConfig":
        if isinstance(d, MorphologyConfig):
            return d
        d = d or {}
        return cls(
            type_id=_first(d, ("type_id", "typeId", "type")),
            basin_class=_first(d, ("basin_class", "basin", "bassin")),
            depth_class=_first(d, ("depth_class", "depthId", "depth_id")),
            mean_depth=_as_float(_first(d, ("mean_depth", "meanDepth")), None),
            surface_area=_as_float(_first(d, ("surface_area", "surfaceArea")), None),
            shape_factor=_as_float(_first(d, ("shape_factor", "shapeFactor")), None),
        )


@dataclass(frozen=True)
class ResolvedMorphology:
    water_body_type: WaterBodyType
    basin_class: BasinClass
    depth_class: DepthClass
    effective_depth_m: float
    basin_offset_c: float
    basin_turbidity_baseline_ntu: float
    surface_area_m2: float
    shape_factor: float
    fallbacks: tuple = ()

    def as_dict(self) -> dict:
        return {
            "water_body_type": self.water_body_type.value,
            "basin_class": self.basin_class.value,
            "depth_class": self.depth_class.value,
            "effective_depth_m": self.effective_depth_m,
            "basin_offset_c": self.basin_offset_c,
            "basin_turbidity_baseline_ntu": self.basin_turbidity_baseline_ntu,
            "surface_area_m2": self.surface_area_m2,
            "shape_factor": self.shape_factor,
        }


@dataclass(frozen=True)
class BioContext:
    water_temperature: float      # °C
    cloud_cover_percent: float
    wind_speed: float             # km/h
    pressure_trend_3h: float      # hPa, positive = rising
    turbidity_ntu: float
    dissolved_oxygen: float       # mg/L
    wave_height_cm: float
    observation_time: datetime
    illuminance: float = 0.01
    crepuscular_factor: float = 1.0
    oxygen_factor: float = 1.0

    def as_dict(self) -> dict:
        return asdict(self)

    def non_finite_fields(self) -> list[str]:
        bad = []
        for name, value in asdict(self).items():
            if isinstance(value, float) and not math.isfinite(value):
                bad.append(name)
        return bad
