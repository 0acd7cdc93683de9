"""
Oxygen Model — dissolved oxygen and the derived activity factor.

Delegates to: oxygen_features.py
"""

from oxygen_features import (
    SEA_LEVEL_PRESSURE_HPA,
    dissolved_oxygen,
    oxygen_activity_factor,
    saturation_concentration,
    wind_reaeration_bonus,
)


def compute_dissolved_oxygen(
    water_temp: float,
    pressure_hpa: float | None,
    wind_kmh: float = 0.0,
    wind_reaeration: bool = False,
) -> dict:
    """
    Args:
        water_temp: water temperature (°C) from the temperature model
        pressure_hpa: current atmospheric pressure, None when not reported
                      (sea-level standard pressure is assumed)
        wind_kmh: current wind speed, only used with wind_reaeration
        wind_reaeration: add the Banks-Herrera surface renewal bonus

    Returns:
        dict with 'dissolved_oxygen' (mg/L), 'oxygen_factor' and detail fields.
    """
    pressure_assumed = pressure_hpa is None
    if pressure_assumed:
        pressure_hpa = SEA_LEVEL_PRESSURE_HPA

    do = dissolved_oxygen(water_temp, pressure_hpa)
    bonus = wind_reaeration_bonus(water_temp, wind_kmh) if wind_reaeration else 0.0
    do += bonus

    return {
        "dissolved_oxygen": do,
        "oxygen_factor": oxygen_activity_factor(do),
        "saturation_sea_level": saturation_concentration(water_temp),
        "reaeration_bonus": bonus,
        "pressure_hpa": pressure_hpa,
        "pressure_assumed": pressure_assumed,
    }
