"""End-to-end tests for the BioHalieutic engine."""

import copy
from datetime import datetime, timezone

import pytest

from analysis.forecast_engine import build_activity_timeline, peak_window
from analysis.multi_site_comparison import build_multi_site_comparison
from config.constants import CALCULATION_MODE, SPECIES_DISPLAY_NAMES, SPECIES_IDS
from config.demo_sites import DEMO_WATER_BODIES, synthetic_history
from data_model import WeatherObservation
from features.feature_pipeline import DAILY_COLUMNS, build_daily_history
from simulation_engine import (
    EngineComputationError,
    EngineRequestError,
    compute_environmental_snapshot,
)

URBAN_RIVER = {
    "type_id": "river",
    "basin_class": "urban",
    "depth_class": "medium",
    "mean_depth": 6.0,
}


def make_request(**overrides) -> dict:
    request = {
        "current_weather": {
            "timestamp": "2026-01-09T14:00:00",
            "temperature": 12.0,
            "pressure": 1013.0,
            "wind_speed": 15.0,
            "cloud_cover": 20.0,
        },
        "weather_history": synthetic_history(end="2026-01-09T13:00", days=45),
        "location": {"morphology": dict(URBAN_RIVER)},
        "observation_date": "2026-01-09T14:00:00",
        "calculation_time": "2026-01-09T14:00:05+00:00",
    }
    request.update(overrides)
    return request


def test_pipeline():
    print("=" * 60)
    print("BioHalieutic — Full Pipeline Test (demo water bodies)")
    print("=" * 60)

    history = synthetic_history(end="2026-01-09T13:00", days=45)
    for key, site in DEMO_WATER_BODIES.items():
        snap = compute_environmental_snapshot(make_request(
            weather_history=history,
            location={"morphology": site["morphology"]},
        ))
        hydro = snap["hydro"]
        print(f"\n[{key}] {site['name']}")
        print(f"    Water: {hydro['water_temperature']}°C, Turbidity: {hydro['turbidity_ntu']} NTU")
        print(f"    DO: {hydro['dissolved_oxygen']} mg/L, Waves: {hydro['wave_height_cm']} cm")
        print(f"    Scores: {snap['scores']}")
        print(f"    Best: {snap['metadata']['best_species']} ({snap['metadata']['activity_level']})")

        assert set(snap["scores"]) == set(SPECIES_IDS)
        assert snap["metadata"]["data_quality"]["history_days"] >= 45

    print("\n" + "=" * 60)
    print("ALL TESTS PASSED")
    print("=" * 60)


def test_urban_river_winter_scenario():
    snap = compute_environmental_snapshot(make_request())
    hydro = snap["hydro"]

    assert 4.0 <= hydro["water_temperature"] <= 20.0
    # No rain in the history: turbidity rests on the urban baseline.
    assert hydro["turbidity_ntu"] == pytest.approx(12.0, abs=0.05)
    assert hydro["wave_height_cm"] > 0
    assert 0.01 <= hydro["illuminance"] <= 1.0
    assert 1.0 <= hydro["crepuscular_factor"] <= 1.4
    assert 0.05 <= hydro["oxygen_factor"] <= 1.0

    for sp, score in snap["scores"].items():
        assert isinstance(score, int)
        assert 0 <= score <= 100
    assert snap["scores"]["pike"] > 0

    meta = snap["metadata"]
    assert meta["calculation_mode"] == CALCULATION_MODE
    assert meta["water_temperature_seed"] == "history"
    assert meta["morphology"]["effective_depth_m"] == 6.0
    assert meta["data_quality"]["confidence"] in ("HIGH", "MEDIUM")


def test_light_wind_means_flat_water():
    req = make_request()
    req["current_weather"]["wind_speed"] = 5.0
    snap = compute_environmental_snapshot(req)
    assert snap["hydro"]["wave_height_cm"] == 0.0


def test_rain_spike_raises_turbidity():
    history = synthetic_history(end="2026-01-09T13:00", days=45)
    history.append({
        "timestamp": "2026-01-08T12:30:00",
        "air_temperature": 12.0,
        "precipitation": 80.0,
        "wind_speed": 10.0,
        "cloud_cover_percent": 100.0,
        "atmospheric_pressure": 1013.0,
    })
    dry = compute_environmental_snapshot(make_request())
    wet = compute_environmental_snapshot(make_request(weather_history=history))
    assert wet["hydro"]["turbidity_ntu"] > dry["hydro"]["turbidity_ntu"]
    assert wet["hydro"]["turbidity_ntu"] == pytest.approx(147.4, abs=0.1)


def test_identical_requests_give_identical_snapshots():
    req = make_request()
    a = compute_environmental_snapshot(copy.deepcopy(req))
    b = compute_environmental_snapshot(copy.deepcopy(req))
    assert a == b

    # Without a pinned calculation time only the timestamp may differ.
    req.pop("calculation_time")
    c = compute_environmental_snapshot(req)
    c["metadata"].pop("calculation_timestamp")
    a["metadata"].pop("calculation_timestamp")
    assert a == c


def test_pressure_trend_from_history():
    history = synthetic_history(end="2026-01-09T13:00", days=45)
    history[-3]["atmospheric_pressure"] = 1008.0   # 11:00, three hours before
    snap = compute_environmental_snapshot(make_request(weather_history=history))
    assert snap["weather"]["pressure_trend_3h"] == 5.0
    assert snap["metadata"]["pressure_trend_source"] == "history"


def test_pressure_trend_override():
    snap = compute_environmental_snapshot(make_request(pressure_trend_3h=-2.5))
    assert snap["weather"]["pressure_trend_3h"] == -2.5
    assert snap["metadata"]["pressure_trend_source"] == "caller"


def test_history_without_pressure_gives_no_trend():
    history = [
        {"timestamp": f"2026-01-09T{h:02d}:00:00", "temperature": 8.0 + h * 0.3}
        for h in range(14)
    ]
    req = make_request(weather_history=history)
    req["current_weather"]["pressure"] = 1000.0
    snap = compute_environmental_snapshot(req)

    assert snap["weather"]["pressure_trend_3h"] == 0.0
    assert snap["metadata"]["pressure_trend_source"] == "unavailable"
    assert any("pressure" in note for note in snap["metadata"]["data_quality"]["fallbacks"])
    # Stable pressure: no lockjaw penalty for bass, no falling-pressure bonus for pike.
    flat = compute_environmental_snapshot(make_request(weather_history=history, pressure_trend_3h=0.0))
    assert snap["scores"] == flat["scores"]


def test_missing_current_pressure_assumes_standard_for_oxygen():
    req = make_request()
    req["current_weather"].pop("pressure")
    snap = compute_environmental_snapshot(req)

    assert snap["weather"]["pressure"] is None
    assert snap["metadata"]["pressure_trend_source"] == "unavailable"
    notes = snap["metadata"]["data_quality"]["fallbacks"]
    assert any("oxygen computed at 1013.25 hPa" in note for note in notes)

    standard = make_request()
    standard["current_weather"]["pressure"] = 1013.25
    expected = compute_environmental_snapshot(standard)
    assert snap["hydro"]["dissolved_oxygen"] == expected["hydro"]["dissolved_oxygen"]


def test_timezone_aware_observations_use_wall_clock():
    history = [
        WeatherObservation(timestamp=datetime(2026, 1, 8, 12, tzinfo=timezone.utc), air_temperature=10.0),
        WeatherObservation(timestamp=datetime(2026, 1, 9, 11, tzinfo=timezone.utc),
                           air_temperature=12.0, atmospheric_pressure=1010.0),
    ]
    snap = compute_environmental_snapshot(make_request(weather_history=history))

    assert snap["metadata"]["data_quality"]["history_days"] == 2
    assert snap["weather"]["pressure_trend_3h"] == 3.0
    assert snap["metadata"]["pressure_trend_source"] == "history"


def test_daily_history_keeps_only_modelled_columns():
    history = [WeatherObservation.from_dict(o) for o in synthetic_history(end="2026-01-09T13:00", days=3)]
    daily = build_daily_history(history, datetime(2026, 1, 9, 14))
    assert list(daily.columns) == DAILY_COLUMNS == ["air_temperature", "precipitation"]
    assert daily.index.is_monotonic_increasing


def test_empty_history_uses_seasonal_seed():
    snap = compute_environmental_snapshot(make_request(weather_history=[]))
    assert snap["hydro"]["water_temperature"] == 5.5
    assert snap["hydro"]["turbidity_ntu"] == 12.0
    meta = snap["metadata"]
    assert meta["water_temperature_seed"] == "monthly_baseline"
    assert meta["pressure_trend_source"] == "unavailable"
    assert meta["data_quality"]["confidence"] == "LOW"
    assert meta["data_quality"]["fallbacks"]


def test_single_sample_history_returns_seed():
    history = [{"timestamp": "2026-01-09T10:00:00", "temperature": 9.0}]
    snap = compute_environmental_snapshot(make_request(weather_history=history))
    assert snap["hydro"]["water_temperature"] == 9.0


def test_history_without_timestamps():
    history = [{"temperature": 8.0 + i * 0.2, "precipitation": 0.0} for i in range(10)]
    snap = compute_environmental_snapshot(make_request(weather_history=history))
    assert snap["metadata"]["data_quality"]["history_days"] == 10
    assert 3.0 <= snap["hydro"]["water_temperature"] <= 29.5


def test_warm_start():
    snap = compute_environmental_snapshot(make_request(initial_water_temperature=14.0))
    assert snap["metadata"]["water_temperature_seed"] == "warm_start"


def test_flow_fields_pass_through():
    req = make_request(location={
        "morphology": dict(URBAN_RIVER),
        "hydro": {"flow_raw": 250.0, "flow_lagged": 231.5},
    })
    hydro = compute_environmental_snapshot(req)["hydro"]
    assert hydro["flow_raw"] == 250.0
    assert hydro["flow_lagged"] == 231.5
    assert hydro["level"] is None


def test_missing_morphology_uses_defaults():
    snap = compute_environmental_snapshot(make_request(location={}))
    morph = snap["metadata"]["morphology"]
    assert morph["water_body_type"] == "river"
    assert morph["basin_class"] == "urban"
    assert morph["effective_depth_m"] == 6.0


@pytest.mark.parametrize("mutate", [
    lambda r: r.pop("current_weather"),
    lambda r: r.pop("location"),
    lambda r: r.pop("weather_history"),
    lambda r: r.update(weather_history="not a list"),
    lambda r: r.update(weather_history=[{"temperature": 5.0}, 42]),
    lambda r: r.update(location="Seine"),
    lambda r: r.update(initial_water_temperature="warm"),
    lambda r: r.update(initial_water_temperature=float("inf")),
    lambda r: r.update(pressure_trend_3h=float("nan")),
    lambda r: r.update(observation_date="yesterday-ish"),
    lambda r: r.update(options="wind_reaeration"),
    lambda r: r.update(location={"morphology": {}, "hydro": [250.0]}),
])
def test_malformed_requests_are_rejected(mutate):
    req = make_request()
    mutate(req)
    with pytest.raises(EngineRequestError):
        compute_environmental_snapshot(req)


def test_request_must_be_a_mapping():
    with pytest.raises(EngineRequestError):
        compute_environmental_snapshot(None)


def test_observation_time_required():
    req = make_request()
    req.pop("observation_date")
    req["current_weather"].pop("timestamp")
    with pytest.raises(EngineRequestError):
        compute_environmental_snapshot(req)


def test_non_finite_input_is_a_computation_error():
    req = make_request()
    req["current_weather"]["wind_speed"] = float("nan")
    with pytest.raises(EngineComputationError):
        compute_environmental_snapshot(req)


def test_request_errors_are_value_errors():
    assert issubclass(EngineRequestError, ValueError)
    assert not issubclass(EngineComputationError, ValueError)


# ── Timeline and multi-site comparison ──────────────────────────────────────

FORECAST = [
    {"timestamp": f"2026-01-09T{h:02d}:00:00", "temperature": 11.0 + h * 0.1,
     "pressure": 1013.0, "wind_speed": 12.0, "cloud_cover": 40.0}
    for h in (14, 15, 16, 17)
]


def test_activity_timeline():
    timeline = build_activity_timeline(make_request(), FORECAST)
    n = len(FORECAST)
    assert len(timeline["timestamps"]) == n
    assert len(timeline["best_scores"]) == n
    assert len(timeline["activity_levels"]) == n
    for sp in SPECIES_IDS:
        assert len(timeline["scores"][sp]) == n
        assert all(0 <= s <= 100 for s in timeline["scores"][sp])

    peak = peak_window(timeline)
    assert peak["timestamp"] in timeline["timestamps"]
    assert peak["score"] == max(timeline["best_scores"])


def test_timeline_requires_timestamps():
    with pytest.raises(EngineRequestError):
        build_activity_timeline(make_request(), [{"temperature": 10.0}])


def test_peak_window_of_empty_timeline():
    timeline = build_activity_timeline(make_request(), [])
    assert peak_window(timeline) == {"timestamp": None, "score": None}


def test_multi_site_ranking():
    locations = {key: {"morphology": site["morphology"]} for key, site in DEMO_WATER_BODIES.items()}
    result = build_multi_site_comparison(make_request(), locations)

    assert result["available"] is True
    assert len(result["sites"]) == len(DEMO_WATER_BODIES)
    ranked = [r["best_score"] for r in result["ranking"]]
    assert ranked == sorted(ranked, reverse=True)
    assert [r["rank"] for r in result["ranking"]] == list(range(1, len(locations) + 1))
    for site in result["sites"]:
        assert site["best_species_name"] == SPECIES_DISPLAY_NAMES[site["best_species"]]
        assert site["activity_label"]


def test_multi_site_without_locations():
    assert build_multi_site_comparison(make_request(), {})["available"] is False
