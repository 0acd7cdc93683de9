"""
Turbidity Features — suspended sediment as a decaying baseline with rain impulses.

Per day, in chronological order:
    NTU = baseline + (NTU - baseline) * (1 - decay)       settling / dilution
    NTU += rain * alpha        if rain > trace threshold  first-flush runoff

No upper clamp: flood events legitimately push turbidity very high.
"""

import math
from typing import Iterable

DAILY_DECAY_RATE = 0.06
RAIN_SEDIMENT_COEFF = 1.8     # NTU per mm
TRACE_RAIN_MM = 0.1


def settle(ntu: float, baseline: float, decay: float = DAILY_DECAY_RATE) -> float:
    """One day of exponential relaxation toward the basin baseline."""
    return baseline + (ntu - baseline) * (1 - decay)


def rain_impulse(rain_mm: float) -> float:
    if rain_mm > TRACE_RAIN_MM:
        return rain_mm * RAIN_SEDIMENT_COEFF
    return 0.0


def solve_turbidity(daily_rain_mm: Iterable, baseline_ntu: float) -> float:
    """
    Fold daily rainfall totals into the current turbidity (NTU).

    Args:
        daily_rain_mm: daily precipitation sums, chronological; NaN counts as dry
        baseline_ntu: resting sediment level of the basin

    Returns:
        float: turbidity >= 0
    """
    ntu = baseline_ntu
    for rain in daily_rain_mm:
        rain = float(rain) if rain is not None else 0.0
        if not math.isfinite(rain):
            rain = 0.0
        ntu = settle(ntu, baseline_ntu)
        ntu += rain_impulse(rain)
        ntu = max(0.0, ntu)
    return ntu


if __name__ == "__main__":
    dry = [0.0] * 30
    storm = [0.0] * 28 + [80.0, 0.0]
    print(f"Dry month (urban):   {solve_turbidity(dry, 12.0):.1f} NTU")
    print(f"80 mm storm at D-1:  {solve_turbidity(storm, 12.0):.1f} NTU")
