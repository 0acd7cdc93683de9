"""
Temperature Model — current water temperature from the weather history.

Delegates to: temperature_features.py
"""

import pandas as pd

from data_model import WaterBodyType
from temperature_features import clamp_water_temp, integrate_water_temp, monthly_baseline


def compute_water_temperature(
    daily: pd.DataFrame,
    morphology,
    observation_time,
    initial_temp: float | None = None,
) -> dict:
    """
    Args:
        daily: one row per day (DatetimeIndex), column 'air_temperature'
        morphology: ResolvedMorphology
        observation_time: datetime of the query (used for the empty-history seed)
        initial_temp: optional warm-start water temperature

    Returns:
        dict with 'water_temp' (°C, clamped) and detail fields.
    """
    is_river = morphology.water_body_type == WaterBodyType.RIVER
    days = list(daily.index) if len(daily) else []
    air = daily["air_temperature"].tolist() if len(daily) else []

    res = integrate_water_temp(
        days,
        air,
        depth_m=morphology.effective_depth_m,
        basin_offset_c=morphology.basin_offset_c,
        is_river=is_river,
        initial_temp=initial_temp,
    )

    if res["water_temp"] is None:
        seed = monthly_baseline(observation_time)
        raw = seed
        seed_source = "monthly_baseline"
    else:
        raw = res["water_temp"]
        seed = res["seed"]
        seed_source = "warm_start" if initial_temp is not None else "history"

    return {
        "water_temp": clamp_water_temp(raw),
        "raw_water_temp": raw,
        "seed": seed,
        "seed_source": seed_source,
        "days_integrated": res["steps"],
        "skipped_days": res["skipped_days"],
        "delta": res["delta"],
        "mu": res["mu"],
    }
