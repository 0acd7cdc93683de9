"""
Simulation Engine — single entry point of the BioHalieutic engine.

    request ──► validate ──► build_bio_context ──► species scores ──► snapshot

Pure and synchronous: no I/O, no shared state between calls. Callers own data
acquisition, caching and persistence; concurrent calls need no coordination.
"""

import math
from collections.abc import Mapping
from datetime import datetime, timezone

from config.constants import CALCULATION_MODE, PRESENTATION_PRECISION
from data_model import WeatherObservation, parse_timestamp
from features.feature_pipeline import build_bio_context
from models.species_model import compute_species_scores


class EngineRequestError(ValueError):
    """Malformed request: rejected immediately, never defaulted."""


class EngineComputationError(ArithmeticError):
    """A non-finite value reached the snapshot boundary."""


def parse_request(request) -> dict:
    """
    Validate and normalize a raw request mapping.

    Raises:
        EngineRequestError: missing current_weather / location, a
        weather_history that is not a list, an unparsable observation_date
        or a non-finite numeric option.
    """
    if not isinstance(request, Mapping):
        raise EngineRequestError("Request must be a mapping")

    current_raw = request.get("current_weather")
    if current_raw is None:
        raise EngineRequestError("current_weather is required")
    if not isinstance(current_raw, (Mapping, WeatherObservation)):
        raise EngineRequestError("current_weather must be a mapping")

    location = request.get("location")
    if location is None:
        raise EngineRequestError("location is required")
    if not isinstance(location, Mapping):
        raise EngineRequestError("location must be a mapping")

    history_raw = request.get("weather_history")
    if not isinstance(history_raw, (list, tuple)):
        raise EngineRequestError("weather_history must be a list of observations")

    current = WeatherObservation.from_dict(current_raw)
    history = []
    for i, item in enumerate(history_raw):
        if not isinstance(item, (Mapping, WeatherObservation)):
            raise EngineRequestError(f"weather_history[{i}] must be a mapping")
        history.append(WeatherObservation.from_dict(item))

    raw_date = request.get("observation_date")
    if raw_date is not None:
        observation_time = parse_timestamp(raw_date)
        if observation_time is None:
            raise EngineRequestError(f"observation_date {raw_date!r} is not a valid timestamp")
    else:
        observation_time = current.timestamp
    if observation_time is None:
        raise EngineRequestError("observation_date is required when current_weather has no timestamp")

    options = request.get("options") or {}
    if not isinstance(options, Mapping):
        raise EngineRequestError("options must be a mapping")
    hydro = location.get("hydro") or {}
    if not isinstance(hydro, Mapping):
        raise EngineRequestError("location.hydro must be a mapping")

    return {
        "current": current,
        "history": history,
        "morphology": location.get("morphology"),
        "hydro_passthrough": hydro,
        "observation_time": observation_time,
        "initial_water_temp": _optional_float(request.get("initial_water_temperature")),
        "pressure_trend_override": _optional_float(request.get("pressure_trend_3h")),
        "calculation_time": request.get("calculation_time"),
        "wind_reaeration": bool(options.get("wind_reaeration", False)),
    }


def _optional_float(value):
    if value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        raise EngineRequestError(f"Expected a number, got {value!r}") from e
    if not math.isfinite(number):
        raise EngineRequestError(f"Expected a finite number, got {value!r}")
    return number


def compute_environmental_snapshot(request) -> dict:
    """
    Compute the EnvironmentalSnapshot for one water body at one instant.

    Returns:
        dict with 'weather', 'hydro', 'scores', 'metadata'.

    Raises:
        EngineRequestError: malformed request
        EngineComputationError: NaN / Infinity produced by a sub-model
    """
    req = parse_request(request)

    bio = build_bio_context(
        req["current"],
        req["history"],
        req["morphology"],
        req["observation_time"],
        initial_water_temp=req["initial_water_temp"],
        pressure_trend_override=req["pressure_trend_override"],
        wind_reaeration=req["wind_reaeration"],
    )
    ctx = bio["context"]

    bad = ctx.non_finite_fields()
    if bad:
        raise EngineComputationError(f"Non-finite value(s) in bio context: {', '.join(bad)}")

    try:
        species = compute_species_scores(ctx)
    except ValueError as e:
        raise EngineComputationError(str(e)) from e

    return assemble_snapshot(req, bio, species)


def assemble_snapshot(req: dict, bio: dict, species: dict) -> dict:
    """Round every field to its presentation precision and package the snapshot."""
    ctx = bio["context"]
    current = req["current"]
    hydro_in = req["hydro_passthrough"]

    weather = {
        "timestamp": current.timestamp.isoformat() if current.timestamp else None,
        "air_temperature": _fmt("air_temperature", current.air_temperature),
        "precipitation": current.precipitation,
        "wind_speed": current.wind_speed,
        "cloud_cover": current.cloud_cover_percent,
        "pressure": current.atmospheric_pressure,
        "pressure_trend_3h": _fmt("pressure_trend_3h", ctx.pressure_trend_3h),
    }
    hydro = {
        "water_temperature": _fmt("water_temperature", ctx.water_temperature),
        "turbidity_ntu": _fmt("turbidity_ntu", ctx.turbidity_ntu),
        "dissolved_oxygen": _fmt("dissolved_oxygen", ctx.dissolved_oxygen),
        "oxygen_factor": _fmt("oxygen_factor", ctx.oxygen_factor),
        "wave_height_cm": _fmt("wave_height_cm", ctx.wave_height_cm),
        "illuminance": _fmt("illuminance", ctx.illuminance),
        "crepuscular_factor": _fmt("crepuscular_factor", ctx.crepuscular_factor),
        # Measured flow fields are passed through untouched.
        "flow_raw": hydro_in.get("flow_raw"),
        "flow_lagged": hydro_in.get("flow_lagged"),
        "level": hydro_in.get("level"),
    }

    for section, values in (("weather", weather), ("hydro", hydro)):
        for key, value in values.items():
            if isinstance(value, float) and not math.isfinite(value):
                raise EngineComputationError(f"Non-finite {section}.{key}")

    calc_time = req["calculation_time"]
    if calc_time is None:
        calc_time = datetime.now(timezone.utc).isoformat()
    elif isinstance(calc_time, datetime):
        calc_time = calc_time.isoformat()

    return {
        "weather": weather,
        "hydro": hydro,
        "scores": dict(species["scores"]),
        "metadata": {
            "calculation_timestamp": calc_time,
            "calculation_mode": CALCULATION_MODE,
            "observation_time": req["observation_time"].isoformat(),
            "best_species": species["best_species"],
            "activity_level": species["activity_level"],
            "morphology": bio["morphology"].as_dict(),
            "water_temperature_seed": bio["thermal"]["seed_source"],
            "pressure_trend_source": bio["pressure"]["source"],
            "data_quality": bio["data_quality"],
        },
    }


def _fmt(field: str, value):
    if value is None:
        return None
    return round(float(value), PRESENTATION_PRECISION[field])


if __name__ == "__main__":
    import json

    from config.demo_sites import DEMO_WATER_BODIES, synthetic_history

    history = synthetic_history(end="2026-01-09T13:00", days=45)
    for key, site in DEMO_WATER_BODIES.items():
        snap = compute_environmental_snapshot({
            "current_weather": {"timestamp": "2026-01-09T14:00", "temperature": 12.0,
                                "pressure": 1013.0, "wind_speed": 15.0, "cloud_cover": 20.0},
            "weather_history": history,
            "location": {"morphology": site["morphology"]},
            "observation_date": "2026-01-09T14:00",
        })
        print(f"{site['name']}:")
        print(json.dumps({"hydro": snap["hydro"], "scores": snap["scores"]}, indent=2))
