"""
Multi-Site Comparison — score several water bodies under the same weather.
"""

from collections.abc import Mapping

from config.constants import ACTIVITY_LEVELS, SPECIES_DISPLAY_NAMES, classify_activity
from simulation_engine import EngineRequestError, compute_environmental_snapshot


def build_multi_site_comparison(request: Mapping, locations: Mapping) -> dict:
    """
    Compare water bodies sharing one weather history.

    Args:
        request: engine request; its 'location' is replaced per site
        locations: dict of {site_key: location dict (with 'morphology')}

    Returns:
        dict with available, sites, ranking
    """
    if not isinstance(request, Mapping):
        raise EngineRequestError("Request must be a mapping")
    if not locations:
        return {"available": False, "sites": [], "ranking": []}

    sites = []
    for key, location in locations.items():
        snap = compute_environmental_snapshot({**request, "location": location})
        scores = snap["scores"]
        best = snap["metadata"]["best_species"]
        level = classify_activity(scores[best])

        sites.append({
            "key": key,
            "best_species": best,
            "best_species_name": SPECIES_DISPLAY_NAMES[best],
            "best_score": scores[best],
            "activity_level": level,
            "activity_label": ACTIVITY_LEVELS[level]["label"],
            "scores": scores,
            "water_temperature": snap["hydro"]["water_temperature"],
            "turbidity_ntu": snap["hydro"]["turbidity_ntu"],
            "wave_height_cm": snap["hydro"]["wave_height_cm"],
            "confidence": snap["metadata"]["data_quality"]["confidence"],
        })

    # Rank by best species score (descending); ties keep input order.
    ranking = sorted(sites, key=lambda s: s["best_score"], reverse=True)

    return {
        "available": True,
        "sites": sites,
        "ranking": [
            {"rank": i + 1, "key": s["key"], "best_score": s["best_score"], "best_species": s["best_species"]}
            for i, s in enumerate(ranking)
        ],
    }
