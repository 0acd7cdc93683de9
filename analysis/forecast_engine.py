"""
Forecast Engine — hour-by-hour activity timeline.

Scores each forecast observation in order. Step k sees the request history plus
forecast steps 0..k-1 as its history, so water temperature, turbidity and the
pressure trend evolve along the timeline.
"""

from collections.abc import Mapping

from config.constants import SPECIES_IDS, classify_activity
from data_model import WeatherObservation
from simulation_engine import EngineRequestError, compute_environmental_snapshot


def build_activity_timeline(request: Mapping, forecast: list) -> dict:
    """
    Args:
        request: engine request (its current_weather is ignored, each forecast
                 step becomes the current weather of its own call)
        forecast: chronological list of timestamped observations

    Returns:
        dict with keys: timestamps, water_temperature, turbidity_ntu,
        scores {species: [...]}, best_scores, best_species, activity_levels.
    """
    if not isinstance(request, Mapping):
        raise EngineRequestError("Request must be a mapping")
    if not isinstance(forecast, (list, tuple)):
        raise EngineRequestError("forecast must be a list of observations")
    if not isinstance(request.get("weather_history"), (list, tuple)):
        raise EngineRequestError("weather_history must be a list of observations")

    history = list(request["weather_history"])
    steps = [WeatherObservation.from_dict(f) for f in forecast]
    if any(s.timestamp is None for s in steps):
        raise EngineRequestError("every forecast observation needs a timestamp")

    timeline = {
        "timestamps": [],
        "water_temperature": [],
        "turbidity_ntu": [],
        "scores": {sp: [] for sp in SPECIES_IDS},
        "best_scores": [],
        "best_species": [],
        "activity_levels": [],
    }

    for step in steps:
        sub_request = dict(request)
        sub_request["current_weather"] = step
        sub_request["weather_history"] = list(history)
        sub_request["observation_date"] = step.timestamp.isoformat()
        snap = compute_environmental_snapshot(sub_request)

        best = snap["metadata"]["best_species"]
        timeline["timestamps"].append(step.timestamp.isoformat())
        timeline["water_temperature"].append(snap["hydro"]["water_temperature"])
        timeline["turbidity_ntu"].append(snap["hydro"]["turbidity_ntu"])
        for sp in SPECIES_IDS:
            timeline["scores"][sp].append(snap["scores"][sp])
        timeline["best_scores"].append(snap["scores"][best])
        timeline["best_species"].append(best)
        timeline["activity_levels"].append(classify_activity(snap["scores"][best]))

        history.append(step)

    return timeline


def peak_window(timeline: dict, species: str | None = None) -> dict:
    """Return the timestamp and score of the highest point of the timeline."""
    series = timeline["best_scores"] if species is None else timeline["scores"][species]
    if not series:
        return {"timestamp": None, "score": None}
    i = max(range(len(series)), key=lambda k: series[k])
    return {"timestamp": timeline["timestamps"][i], "score": series[i]}
