"""
Demo water bodies for the BioHalieutic engine.
Each entry has a name, a description and a morphology block in the request format.
"""

import math

import pandas as pd

DEMO_WATER_BODIES = {
    "urban_river": {
        "name": "Urban River (Seine at Nanterre)",
        "description": "Large lowland river through a dense urban basin. Fast mixing, warm bias from the heat island.",
        "morphology": {
            "type_id": "river",
            "basin_class": "urban",
            "depth_class": "medium",
            "mean_depth": 6.0,
            "surface_area": 100_000,
            "shape_factor": 1.2,
        },
    },
    "deep_lake": {
        "name": "Deep Lake (Reservoir)",
        "description": "Deep standing water in an agricultural basin. Strong thermal inertia.",
        "morphology": {
            "type_id": "deep_lake",
            "basin_class": "agricultural",
            "depth_class": "deep",
            "mean_depth": 18.0,
            "surface_area": 800_000,
            "shape_factor": 1.5,
        },
    },
    "shallow_pond": {
        "name": "Shallow Pond (Farm Pond)",
        "description": "Small shallow pond; tracks the air temperature within a day or two.",
        "morphology": {
            "type_id": "pond",
            "basin_class": "agricultural",
            "depth_class": "shallow",
            "mean_depth": 2.0,
            "surface_area": 5_000,
            "shape_factor": 1.1,
        },
    },
    "medium_channel": {
        "name": "Medium Channel (Canal)",
        "description": "Navigation canal with slow flow through pasture land.",
        "morphology": {
            "type_id": "medium_channel",
            "basin_class": "pasture",
            "depth_class": "medium",
            "mean_depth": 4.0,
            "surface_area": 50_000,
            "shape_factor": 1.3,
        },
    },
}


def synthetic_history(
    end: str,
    days: int = 45,
    base_temp: float = 12.0,
    amplitude: float = 8.0,
    pressure: float = 1013.0,
    wind_speed: float = 10.0,
    cloud_cover: float = 30.0,
) -> list[dict]:
    """
    Hourly demo history ending at `end`: air temperature oscillates between
    base - amplitude and base + amplitude with a ~6 day period, no rain.
    """
    times = pd.date_range(end=pd.Timestamp(end), periods=days * 24, freq="h")
    return [
        {
            "timestamp": t.isoformat(),
            "air_temperature": base_temp + math.sin(i / 24) * amplitude,
            "precipitation": 0.0,
            "wind_speed": wind_speed,
            "cloud_cover_percent": cloud_cover,
            "atmospheric_pressure": pressure,
        }
        for i, t in enumerate(times)
    ]
