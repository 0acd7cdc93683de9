"""
Global constants for the BioHalieutic engine.
"""

# Identifies every snapshot as a model-derived estimate (not sensor telemetry).
CALCULATION_MODE = "model_simulated"

SPECIES_IDS = ("walleye", "pike", "perch", "bass")

SPECIES_DISPLAY_NAMES = {
    "walleye": "Walleye / Zander",
    "pike":    "Northern Pike",
    "perch":   "Perch",
    "bass":    "Black Bass",
}

# Decimal places used when a value is written into the snapshot.
PRESENTATION_PRECISION = {
    "air_temperature":    1,
    "water_temperature":  1,
    "turbidity_ntu":      1,
    "dissolved_oxygen":   2,
    "oxygen_factor":      2,
    "wave_height_cm":     1,
    "illuminance":        2,
    "crepuscular_factor": 2,
    "pressure_trend_3h":  1,
}

ACTIVITY_LEVELS = {
    "DORMANT": {"min": 0,  "max": 25,  "label": "Dormant"},
    "LOW":     {"min": 25, "max": 50,  "label": "Low Activity"},
    "ACTIVE":  {"min": 50, "max": 75,  "label": "Active"},
    "FEEDING": {"min": 75, "max": 100, "label": "Feeding Window"},
}


def classify_activity(score: float) -> str:
    """Map a 0-100 bioscore onto an ACTIVITY_LEVELS key (bands are [min, max))."""
    for level, band in ACTIVITY_LEVELS.items():
        if band["min"] <= score < band["max"]:
            return level
    return "FEEDING" if score >= 100 else "DORMANT"
