"""
Wave Model — wind-driven wave height for the current observation.

Delegates to: wave_features.py
"""

from wave_features import WIND_THRESHOLD_KMH, fetch_length, wave_height_cm


def compute_wave_height(wind_kmh: float, morphology) -> dict:
    """
    Args:
        wind_kmh: current wind speed
        morphology: ResolvedMorphology (surface area + shape factor)

    Returns:
        dict with 'wave_height_cm' and detail fields.
    """
    area = morphology.surface_area_m2
    shape = morphology.shape_factor
    return {
        "wave_height_cm": wave_height_cm(wind_kmh, area, shape),
        "fetch_m": fetch_length(area, shape),
        "below_threshold": wind_kmh < WIND_THRESHOLD_KMH,
    }
