"""
Light Features — underwater light and twilight activity.

Inputs:
    - Local clock time of the observation
    - Month (seasonal sunrise / sunset table)
    - Cloud cover

Compute:
    - Cloud suppression (cubic: only heavy overcast really dims)
    - Illuminance index (0.01-1.0): half-sine over the daylight window
    - Crepuscular multiplier (1.0-1.4): dawn / dusk feeding peaks
"""

import numpy as np

# Approximate [sunrise, sunset] local decimal hours per month (mid-latitude Europe).
DAYLIGHT_SCHEDULE = {
    1: (8.5, 17.0), 2: (8.0, 18.0), 3: (7.0, 19.0), 4: (6.0, 20.5),
    5: (5.5, 21.5), 6: (5.5, 22.0), 7: (6.0, 21.5), 8: (6.5, 20.5),
    9: (7.5, 19.5), 10: (8.0, 18.5), 11: (8.0, 17.0), 12: (8.5, 16.5),
}
DEFAULT_DAYLIGHT = (7.0, 19.0)

TWILIGHT_MARGIN_H = 0.5
ILLUMINANCE_FLOOR = 0.01

DAWN_PEAK_H = 7.5
DUSK_PEAK_H = 19.5
CREPUSCULAR_SIGMA_H = 1.5
CREPUSCULAR_GAIN = 0.4


def decimal_hour(when) -> float:
    return when.hour + when.minute / 60 + when.second / 3600


def daylight_window(month: int) -> tuple:
    """(sunrise, sunset) decimal hours for a month, widened by the twilight margin."""
    rise, set_ = DAYLIGHT_SCHEDULE.get(month, DEFAULT_DAYLIGHT)
    return rise - TWILIGHT_MARGIN_H, set_ + TWILIGHT_MARGIN_H


def cloud_suppression(cloud_cover_pct):
    """
    Fraction of clear-sky light reaching the water, 1 - (cover/100)^3.
    Cloud cover input: percentage [0-100].
    """
    cc_frac = np.clip(cloud_cover_pct / 100, 0, 1)
    return 1 - cc_frac ** 3


def illuminance_index(when, cloud_cover: float) -> float:
    """
    Normalized light level at `when` (local time).

    Night (outside the daylight window) returns the 0.01 floor, never zero.
    """
    hour = decimal_hour(when)
    start, end = daylight_window(when.month)
    if hour <= start or hour >= end:
        return ILLUMINANCE_FLOOR

    elevation = np.sin(np.pi * (hour - start) / (end - start))
    lux = elevation * cloud_suppression(cloud_cover)
    return float(np.clip(lux, ILLUMINANCE_FLOOR, 1.0))


def _bump(hour: float, center: float) -> float:
    return float(np.exp(-0.5 * ((hour - center) / CREPUSCULAR_SIGMA_H) ** 2))


def crepuscular_multiplier(when) -> float:
    """1.0 + 0.4 * max(dawn bump, dusk bump)."""
    hour = decimal_hour(when)
    peak = max(_bump(hour, DAWN_PEAK_H), _bump(hour, DUSK_PEAK_H))
    return 1.0 + CREPUSCULAR_GAIN * peak


if __name__ == "__main__":
    from datetime import datetime

    for h in (3, 7, 10, 14, 19, 22):
        t = datetime(2026, 6, 15, h, 30)
        print(f"  {t:%H:%M}  lux={illuminance_index(t, 20):.2f}  "
              f"overcast={illuminance_index(t, 100):.2f}  crep={crepuscular_multiplier(t):.2f}")
