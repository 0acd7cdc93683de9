"""
Feature Pipeline — turns a parsed request into the BioContext consumed by the
species scorers.

Delegates to:
    - morphology_resolver.py: canonical water-body parameters
    - models/temperature_model.py, turbidity_model.py: path-dependent recurrences
    - models/oxygen_model.py, wave_model.py, light_model.py: instantaneous models
"""

import math
from datetime import datetime, timedelta

import numpy as np
import pandas as pd

from data_model import BioContext, WeatherObservation
from morphology_resolver import resolve
from models.light_model import compute_light
from models.oxygen_model import compute_dissolved_oxygen
from models.temperature_model import compute_water_temperature
from models.turbidity_model import compute_turbidity
from models.wave_model import compute_wave_height

PRESSURE_TREND_WINDOW = timedelta(hours=3)
PRESSURE_TREND_TOLERANCE = timedelta(minutes=90)

DAILY_COLUMNS = ["air_temperature", "precipitation"]


def build_daily_history(
    history: list[WeatherObservation],
    observation_time: datetime,
) -> pd.DataFrame:
    """
    Collapse hourly or daily observations into one row per calendar day.

    Air temperature is averaged and precipitation is summed. Samples after
    `observation_time` are dropped. When any sample lacks a timestamp the
    samples are taken as consecutive days ending on the observation date, in
    the order supplied.
    """
    if not history:
        return pd.DataFrame(columns=DAILY_COLUMNS, index=pd.DatetimeIndex([], name="day"), dtype=float)

    if any(obs.timestamp is None for obs in history):
        end = pd.Timestamp(observation_time).normalize()
        index = pd.date_range(end=end, periods=len(history), freq="D", name="day")
        rows = [_row(obs) for obs in history]
        return pd.DataFrame(rows, index=index, columns=DAILY_COLUMNS)

    df = pd.DataFrame(
        [_row(obs) for obs in history],
        index=pd.DatetimeIndex([obs.timestamp for obs in history], name="timestamp"),
        columns=DAILY_COLUMNS,
    )
    df = df[df.index <= pd.Timestamp(observation_time)]
    if df.empty:
        return pd.DataFrame(columns=DAILY_COLUMNS, index=pd.DatetimeIndex([], name="day"), dtype=float)

    # Stable sort keeps same-timestamp samples in caller order.
    df = df.sort_index(kind="mergesort")
    daily = df.groupby(df.index.normalize()).agg({
        "air_temperature": "mean",
        "precipitation": "sum",
    })
    daily.index.name = "day"
    return daily


def _row(obs: WeatherObservation) -> dict:
    return {
        "air_temperature": np.nan if obs.air_temperature is None else obs.air_temperature,
        "precipitation": obs.precipitation,
    }


def compute_pressure_trend(
    current: WeatherObservation,
    history: list[WeatherObservation],
    observation_time: datetime,
) -> float | None:
    """
    Pressure change over the last 3 hours (hPa, positive = rising).

    Uses the history sample closest to observation_time - 3h, accepted within
    ±90 minutes. Samples without a reported pressure are ignored. Returns None
    when the current pressure is missing or no such sample exists.
    """
    if not _has_pressure(current):
        return None

    target = observation_time - PRESSURE_TREND_WINDOW
    best = None
    best_gap = None
    for obs in history:
        if obs.timestamp is None or not _has_pressure(obs):
            continue
        gap = abs(obs.timestamp - target)
        if gap > PRESSURE_TREND_TOLERANCE:
            continue
        # Ties resolve to the later sample in the supplied order.
        if best_gap is None or gap <= best_gap:
            best, best_gap = obs, gap
    if best is None:
        return None
    return current.atmospheric_pressure - best.atmospheric_pressure


def _has_pressure(obs: WeatherObservation) -> bool:
    p = obs.atmospheric_pressure
    return p is not None and math.isfinite(p)


def build_bio_context(
    current: WeatherObservation,
    history: list[WeatherObservation],
    morphology_config,
    observation_time: datetime,
    initial_water_temp: float | None = None,
    pressure_trend_override: float | None = None,
    wind_reaeration: bool = False,
) -> dict:
    """
    Run the five upstream models in dependency order.

    Returns a dict with keys:
        context, morphology, daily, thermal, turbidity, oxygen, wave, light,
        pressure, data_quality
    """
    fallbacks: list[str] = []

    morphology = resolve(morphology_config)
    fallbacks.extend(morphology.fallbacks)

    daily = build_daily_history(history, observation_time)

    # ── Thermal + turbidity (sequential folds over the daily table) ──────
    thermal = compute_water_temperature(daily, morphology, observation_time, initial_water_temp)
    if thermal["seed_source"] == "monthly_baseline":
        fallbacks.append(f"no usable air temperature history; seeded from monthly baseline ({thermal['seed']} °C)")
    if thermal["skipped_days"]:
        fallbacks.append(f"{thermal['skipped_days']} day(s) without air temperature skipped")

    turbidity = compute_turbidity(daily, morphology)

    # ── Instantaneous models ─────────────────────────────────────────────
    oxygen = compute_dissolved_oxygen(
        thermal["water_temp"],
        current.atmospheric_pressure,
        current.wind_speed,
        wind_reaeration=wind_reaeration,
    )
    if oxygen["pressure_assumed"]:
        fallbacks.append(f"current pressure missing; oxygen computed at {oxygen['pressure_hpa']} hPa")
    wave = compute_wave_height(current.wind_speed, morphology)
    light = compute_light(observation_time, current.cloud_cover_percent)

    # ── Pressure trend ───────────────────────────────────────────────────
    if pressure_trend_override is not None:
        trend, trend_source = float(pressure_trend_override), "caller"
    else:
        trend = compute_pressure_trend(current, history, observation_time)
        trend_source = "history"
        if trend is None:
            trend, trend_source = 0.0, "unavailable"
            fallbacks.append("no pressure reading 3h before observation; trend set to 0")

    context = BioContext(
        water_temperature=thermal["water_temp"],
        cloud_cover_percent=current.cloud_cover_percent,
        wind_speed=current.wind_speed,
        pressure_trend_3h=trend,
        turbidity_ntu=turbidity["turbidity_ntu"],
        dissolved_oxygen=oxygen["dissolved_oxygen"],
        wave_height_cm=wave["wave_height_cm"],
        observation_time=observation_time,
        illuminance=light["illuminance"],
        crepuscular_factor=light["crepuscular_factor"],
        oxygen_factor=oxygen["oxygen_factor"],
    )

    return {
        "context": context,
        "morphology": morphology,
        "daily": daily,
        "thermal": thermal,
        "turbidity": turbidity,
        "oxygen": oxygen,
        "wave": wave,
        "light": light,
        "pressure": {"trend_3h": trend, "source": trend_source},
        "data_quality": _data_quality(history, daily, thermal, fallbacks),
    }


def _data_quality(history, daily, thermal, fallbacks) -> dict:
    n_days = len(daily)
    if n_days >= 14 and len(fallbacks) <= 1:
        confidence = "HIGH"
    elif n_days >= 3:
        confidence = "MEDIUM"
    else:
        confidence = "LOW"
    return {
        "history_samples": len(history),
        "history_days": n_days,
        "skipped_days": thermal["skipped_days"],
        "fallbacks": list(fallbacks),
        "confidence": confidence,
    }
