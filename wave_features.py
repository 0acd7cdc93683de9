"""
Wave Features — wind chop from a fetch-limited SMB-style relation.

    fetch = sqrt(surface_area) * shape_factor                  (m)
    Hs    = 0.0016 * U * sqrt(fetch / g) * 100 * 0.8          (cm, U in m/s)

Below 10 km/h of wind there is no meaningful chop.
"""

import math

WIND_THRESHOLD_KMH = 10.0
SMB_COEFF = 0.0016
GRAVITY = 9.81
MECHANICAL_TRANSFER = 0.8


def fetch_length(surface_area_m2: float, shape_factor: float) -> float:
    return math.sqrt(max(0.0, surface_area_m2)) * max(0.0, shape_factor)


def wave_height_cm(wind_kmh: float, surface_area_m2: float, shape_factor: float) -> float:
    """Significant wave height (cm); exactly 0 under the wind threshold."""
    if wind_kmh < WIND_THRESHOLD_KMH:
        return 0.0
    u = wind_kmh / 3.6
    fetch = fetch_length(surface_area_m2, shape_factor)
    return SMB_COEFF * u * math.sqrt(fetch / GRAVITY) * 100 * MECHANICAL_TRANSFER


if __name__ == "__main__":
    for wind in (5, 15, 30, 50):
        print(f"  wind {wind:>2} km/h, 10 ha lake: {wave_height_cm(wind, 100_000, 1.2):.1f} cm")
