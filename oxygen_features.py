"""
Oxygen Features — dissolved oxygen from gas solubility.

    Cs(T) = 14.652 - 0.41022 T + 0.007991 T² - 0.000077774 T³     (mg/L, sea level)
    DO    = Cs(T) * P / 1013.25

Optional wind re-aeration (Banks & Herrera 1977) for warm, windy conditions:
    kL = 0.728 √U - 0.317 U + 0.0372 U²        U = wind in m/s

The oxygen activity factor maps DO onto fish activity:
    DO >= 6.5 mg/L  -> 1.0
    DO <= 3.5 mg/L  -> 0.05 (near-hypoxic floor, not zero)
    linear in between
"""

import math

import numpy as np

SEA_LEVEL_PRESSURE_HPA = 1013.25

REAERATION_MIN_TEMP_C = 18.0
REAERATION_MIN_WIND_MS = 2.0
REAERATION_WEIGHT = 0.5

OXYGEN_FULL_ACTIVITY_MG_L = 6.5
OXYGEN_HYPOXIC_MG_L = 3.5
OXYGEN_FACTOR_FLOOR = 0.05


def saturation_concentration(water_temp_c: float) -> float:
    """Oxygen saturation (mg/L) at sea-level pressure."""
    t = water_temp_c
    return 14.652 - 0.41022 * t + 0.007991 * t ** 2 - 0.000077774 * t ** 3


def dissolved_oxygen(water_temp_c: float, pressure_hpa: float) -> float:
    """Saturation concentration corrected for barometric pressure, never negative."""
    cs = saturation_concentration(water_temp_c) * (pressure_hpa / SEA_LEVEL_PRESSURE_HPA)
    return float(np.clip(cs, 0.0, None))


def wind_reaeration_bonus(water_temp_c: float, wind_kmh: float) -> float:
    """Extra mg/L from wind-driven surface renewal (0 outside warm + windy)."""
    u = wind_kmh / 3.6
    if water_temp_c <= REAERATION_MIN_TEMP_C or u <= REAERATION_MIN_WIND_MS:
        return 0.0
    k_l = 0.728 * math.sqrt(u) - 0.317 * u + 0.0372 * u ** 2
    return max(0.0, k_l * REAERATION_WEIGHT)


def oxygen_activity_factor(do_mg_l: float) -> float:
    """Piecewise-linear activity factor in [0.05, 1.0]."""
    if do_mg_l >= OXYGEN_FULL_ACTIVITY_MG_L:
        return 1.0
    if do_mg_l <= OXYGEN_HYPOXIC_MG_L:
        return OXYGEN_FACTOR_FLOOR
    span = OXYGEN_FULL_ACTIVITY_MG_L - OXYGEN_HYPOXIC_MG_L
    frac = (do_mg_l - OXYGEN_HYPOXIC_MG_L) / span
    return float(np.clip(OXYGEN_FACTOR_FLOOR + frac * (1.0 - OXYGEN_FACTOR_FLOOR),
                         OXYGEN_FACTOR_FLOOR, 1.0))


if __name__ == "__main__":
    for t in (4, 12, 20, 28):
        do = dissolved_oxygen(t, 1013.0)
        print(f"  {t:>2} °C: DO={do:.2f} mg/L, factor={oxygen_activity_factor(do):.2f}")
