"""
Turbidity Model — current suspended-sediment index (NTU) from rainfall history.

Delegates to: turbidity_features.py
"""

import pandas as pd

from turbidity_features import TRACE_RAIN_MM, solve_turbidity


def compute_turbidity(daily: pd.DataFrame, morphology) -> dict:
    """
    Args:
        daily: one row per day, column 'precipitation' (mm/day)
        morphology: ResolvedMorphology

    Returns:
        dict with 'turbidity_ntu' and detail fields.
    """
    baseline = morphology.basin_turbidity_baseline_ntu
    rain = daily["precipitation"].fillna(0.0).tolist() if len(daily) else []

    ntu = solve_turbidity(rain, baseline)

    rainy_days = sum(1 for r in rain if r > TRACE_RAIN_MM)
    return {
        "turbidity_ntu": ntu,
        "baseline_ntu": baseline,
        "excess_ntu": ntu - baseline,
        "rainy_days": rainy_days,
        "rain_total_mm": float(sum(rain)),
    }
