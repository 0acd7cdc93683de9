"""
Temperature Features — Air2Water-family thermal inertia model.

Water temperature is path-dependent, so it is integrated once per day over the
whole weather history rather than estimated from the current air temperature:

    delta     = 14                          (rivers: fast mixing)
              = 0.207 * D^1.35              (standing water, D = depth in m)
    mu        = 0.5 + 1 / D
    solar(d)  = mu * sin(2π (d - 172) / 365)        d = day of year
    Tw[t+1]   = Tw[t] + (1/delta) * ((Ta + basin_offset) - Tw[t]) + solar(d)

The recurrence is a sequential fold over the chronologically ordered days.
"""

import math
from datetime import date, datetime
from typing import Iterable, Optional

import numpy as np

RIVER_THERMAL_INERTIA = 14.0
INERTIA_COEFF = 0.207
INERTIA_EXPONENT = 1.35
SOLAR_MU_BASE = 0.5
SOLSTICE_DAY_OF_YEAR = 172
DAYS_PER_YEAR = 365.0

# 1/delta above 1 would overshoot the equilibrium every day.
MIN_THERMAL_INERTIA = 1.0

WATER_TEMP_MIN_C = 3.0
WATER_TEMP_MAX_C = 29.5

# Seasonal mean water temperature per month (index 0 = January), used as the
# seed when no history is available.
MONTHLY_WATER_BASELINE_C = {
    0: 5.5, 1: 6.0, 2: 9.0, 3: 12.0, 4: 16.0, 5: 19.5,
    6: 21.0, 7: 21.5, 8: 19.0, 9: 14.5, 10: 10.5, 11: 7.5,
}


def thermal_inertia(depth_m: float, is_river: bool) -> float:
    """Thermal inertia coefficient delta (days)."""
    if is_river:
        return RIVER_THERMAL_INERTIA
    delta = INERTIA_COEFF * depth_m ** INERTIA_EXPONENT
    return max(MIN_THERMAL_INERTIA, delta)


def solar_amplitude(depth_m: float) -> float:
    """Seasonal forcing amplitude mu; shallow water feels the sun more."""
    return SOLAR_MU_BASE + 1.0 / depth_m


def solar_forcing(day_of_year: int, mu: float) -> float:
    return mu * math.sin(2 * math.pi * (day_of_year - SOLSTICE_DAY_OF_YEAR) / DAYS_PER_YEAR)


def monthly_baseline(when) -> float:
    """Climatological water temperature for the month of `when`."""
    if isinstance(when, (datetime, date)):
        return MONTHLY_WATER_BASELINE_C.get(when.month - 1, 12.0)
    return 12.0


def integrate_water_temp(
    days: Iterable,
    air_temps: Iterable,
    depth_m: float,
    basin_offset_c: float,
    is_river: bool,
    initial_temp: Optional[float] = None,
) -> dict:
    """
    Fold the daily air temperatures into a water temperature.

    Args:
        days: dates (or day-of-year ints) in chronological order
        air_temps: daily mean air temperature (°C), NaN for missing days
        depth_m: effective depth (m)
        basin_offset_c: basin thermal bias (°C)
        is_river: rivers use the fixed inertia coefficient
        initial_temp: warm-start value; when given, every day is integrated

    Returns:
        dict with water_temp (unclamped), seed, steps, skipped_days.
    """
    days = list(days)
    air = [float(v) if v is not None else float("nan") for v in air_temps]

    delta = thermal_inertia(depth_m, is_river)
    mu = solar_amplitude(depth_m)
    gain = 1.0 / delta

    start = 0
    if initial_temp is not None:
        water = float(initial_temp)
    else:
        # Seed from the first day that actually has an air temperature.
        water = None
        for i, t in enumerate(air):
            if math.isfinite(t):
                water = t
                start = i + 1
                break
        if water is None:
            return {"water_temp": None, "seed": None, "steps": 0,
                    "skipped_days": len(air), "delta": delta, "mu": mu}

    seed = water
    steps = 0
    skipped = 0
    for day, t in zip(days[start:], air[start:]):
        if not math.isfinite(t):
            skipped += 1
            continue
        doy = _day_of_year(day)
        water += gain * ((t + basin_offset_c) - water) + solar_forcing(doy, mu)
        steps += 1

    return {
        "water_temp": water,
        "seed": seed,
        "steps": steps,
        "skipped_days": skipped,
        "delta": delta,
        "mu": mu,
    }


def clamp_water_temp(water_temp: float) -> float:
    return float(np.clip(water_temp, WATER_TEMP_MIN_C, WATER_TEMP_MAX_C))


def _day_of_year(day) -> int:
    if isinstance(day, (datetime, date)):
        return day.timetuple().tm_yday
    if hasattr(day, "dayofyear"):
        return int(day.dayofyear)
    return int(day)


if __name__ == "__main__":
    # Quick demo: 45 days oscillating between 4 and 20 °C ending 9 January
    import pandas as pd

    dates = pd.date_range(end="2026-01-09", periods=45, freq="D")
    temps = 12 + 8 * np.sin(np.arange(45) / 3.0)
    for label, depth, river in (("river 6 m", 6.0, True), ("pond 2 m", 2.0, False), ("lake 15 m", 15.0, False)):
        res = integrate_water_temp(dates, temps, depth, 0.5, river)
        print(f"  {label}: {clamp_water_temp(res['water_temp']):.1f} °C "
              f"(delta={res['delta']:.2f}, seed={res['seed']:.1f})")
