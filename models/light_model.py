"""
Light Model — illuminance index and crepuscular multiplier for one instant.

Delegates to: light_features.py
"""

from light_features import (
    cloud_suppression,
    crepuscular_multiplier,
    daylight_window,
    illuminance_index,
)


def compute_light(observation_time, cloud_cover: float) -> dict:
    """
    Args:
        observation_time: local datetime of the query
        cloud_cover: percent (0-100)

    Returns:
        dict with 'illuminance', 'crepuscular_factor' and detail fields.
    """
    start, end = daylight_window(observation_time.month)
    return {
        "illuminance": illuminance_index(observation_time, cloud_cover),
        "crepuscular_factor": crepuscular_multiplier(observation_time),
        "cloud_factor": round(float(cloud_suppression(cloud_cover)), 3),
        "daylight_start_h": start,
        "daylight_end_h": end,
    }
