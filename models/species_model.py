"""
Species Model — 0-100 activity score (bioscore) per target species.

One generic scorer parameterized by a per-species record:

    score = 100 × f(T)^wT × f(vis)^wV × f(light)^wL × f(baro)^wB
                × f(O2)^wO × crepuscular^wC × chop_bonus

    f(T)     Gaussian thermal preference around temp_opt_c
    f(vis)   reaction distance / rd_max, with
             rd = rd_max × I / (k_light + I) × exp(-k_turbidity × NTU)
    f(light) Gaussian preference for an illuminance band (optional)
    f(baro)  barometric-trend response (stability / rising-linear / exponential)
    f(O2)    oxygen activity factor from the oxygen model

Species differ only by their SpeciesParams. A thermal ceiling (pike) forces
the score to exactly 0.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import numpy as np

from config.constants import classify_activity


class Species(str, Enum):
    WALLEYE = "walleye"
    PIKE = "pike"
    PERCH = "perch"
    BASS = "bass"


class BaroResponse(str, Enum):
    STABILITY = "stability"          # any pressure change hurts, floored
    RISING_LINEAR = "rising_linear"  # rising pressure hurts, falling pressure helps
    EXPONENTIAL = "exponential"      # sharp decay with |ΔP|


@dataclass(frozen=True)
class SpeciesParams:
    # thermal preference
    temp_opt_c: float
    temp_sigma_c: float
    temp_weight: float
    # reaction distance / visibility
    rd_max_m: float
    k_light: float
    k_turbidity: float
    visibility_weight: float
    # barometric trend
    baro_response: BaroResponse
    baro_scale: float
    baro_weight: float
    baro_floor: float = 0.0
    baro_cap: float = 1.0
    # preferred illuminance band (None = no preference)
    light_opt: Optional[float] = None
    light_sigma: float = 0.3
    light_weight: float = 0.0
    # hard thermal cutoff
    temp_ceiling_c: Optional[float] = None
    # post-front "lockjaw": rising pressure under bright light
    lockjaw_trend_hpa: Optional[float] = None
    lockjaw_illuminance: float = 0.8
    lockjaw_factor: float = 0.3
    oxygen_weight: float = 1.0
    crepuscular_weight: float = 0.5
    # wind chop bonus
    chop_threshold_cm: Optional[float] = None
    chop_bonus: float = 1.0


SPECIES_PARAMS = {
    # Cool water, low light, tolerant of stained water, wants stable pressure.
    Species.WALLEYE: SpeciesParams(
        temp_opt_c=17.0, temp_sigma_c=8.0, temp_weight=0.2,
        rd_max_m=2.0, k_light=0.05, k_turbidity=0.01, visibility_weight=0.2,
        baro_response=BaroResponse.STABILITY, baro_scale=16.6, baro_weight=0.4, baro_floor=0.4,
        light_opt=0.1, light_sigma=0.35, light_weight=0.4,
        oxygen_weight=0.5, crepuscular_weight=1.0,
        chop_threshold_cm=15.0, chop_bonus=1.2,
    ),
    # Cooler optimum, sight hunter, shuts down above 24 °C.
    Species.PIKE: SpeciesParams(
        temp_opt_c=16.0, temp_sigma_c=8.0, temp_weight=0.5,
        rd_max_m=3.0, k_light=0.3, k_turbidity=0.05, visibility_weight=0.3,
        baro_response=BaroResponse.RISING_LINEAR, baro_scale=15.0, baro_weight=0.2,
        baro_floor=0.0, baro_cap=1.2,
        temp_ceiling_c=24.0,
        oxygen_weight=1.0, crepuscular_weight=0.5,
    ),
    # Broad thermal tolerance, likes a mid illuminance band.
    Species.PERCH: SpeciesParams(
        temp_opt_c=20.0, temp_sigma_c=8.0, temp_weight=0.5,
        rd_max_m=1.5, k_light=0.15, k_turbidity=0.02, visibility_weight=0.3,
        baro_response=BaroResponse.STABILITY, baro_scale=16.6, baro_weight=0.5, baro_floor=0.4,
        light_opt=0.5, light_sigma=0.25, light_weight=0.4,
        oxygen_weight=0.8, crepuscular_weight=0.5,
    ),
    # Warm optimum, post-front lockjaw.
    Species.BASS: SpeciesParams(
        temp_opt_c=27.0, temp_sigma_c=10.0, temp_weight=0.6,
        rd_max_m=2.0, k_light=0.2, k_turbidity=0.03, visibility_weight=0.2,
        baro_response=BaroResponse.EXPONENTIAL, baro_scale=1.5, baro_weight=0.4,
        light_opt=0.6, light_sigma=0.4, light_weight=0.2,
        lockjaw_trend_hpa=3.0, lockjaw_illuminance=0.8, lockjaw_factor=0.3,
        oxygen_weight=1.0, crepuscular_weight=0.3,
    ),
}


def round_score(raw: float) -> int:
    """Nearest integer, halves rounded up, clipped to 0-100."""
    return int(np.clip(math.floor(raw + 0.5), 0, 100))


def _gauss(x: float, mu: float, sigma: float) -> float:
    sigma = max(float(sigma), 1e-6)
    return float(np.exp(-0.5 * ((x - mu) / sigma) ** 2))


def temperature_suitability(water_temp: float, params: SpeciesParams) -> float:
    return _gauss(water_temp, params.temp_opt_c, params.temp_sigma_c)


def reaction_distance(illuminance: float, turbidity_ntu: float, params: SpeciesParams) -> float:
    """Distance (m) at which the fish detects prey: saturating light × optical attenuation."""
    light = illuminance / (params.k_light + illuminance)
    return params.rd_max_m * light * float(np.exp(-params.k_turbidity * max(turbidity_ntu, 0.0)))


def visibility_factor(illuminance: float, turbidity_ntu: float, params: SpeciesParams) -> float:
    """Reaction distance normalized by the species maximum, in [0, 1]."""
    return reaction_distance(illuminance, turbidity_ntu, params) / params.rd_max_m


def light_preference(illuminance: float, params: SpeciesParams) -> float:
    if params.light_opt is None:
        return 1.0
    return _gauss(illuminance, params.light_opt, params.light_sigma)


def barometric_factor(pressure_trend: float, illuminance: float, params: SpeciesParams) -> float:
    dp = pressure_trend
    if params.baro_response == BaroResponse.STABILITY:
        f = max(params.baro_floor, 1 - abs(dp) / params.baro_scale)
    elif params.baro_response == BaroResponse.RISING_LINEAR:
        f = float(np.clip(1 - dp / params.baro_scale, params.baro_floor, params.baro_cap))
    elif params.baro_response == BaroResponse.EXPONENTIAL:
        f = float(np.exp(-params.baro_scale * abs(dp)))
    else:
        raise ValueError(f"Unhandled barometric response {params.baro_response!r}")

    if (
        params.lockjaw_trend_hpa is not None
        and dp > params.lockjaw_trend_hpa
        and illuminance > params.lockjaw_illuminance
    ):
        f *= params.lockjaw_factor
    return f


def score_species(
    species: Species,
    context,
    illuminance: float,
    oxygen_factor: float,
    crepuscular_factor: float,
) -> dict:
    """
    Args:
        species: Species member
        context: BioContext
        illuminance: light index (0.01-1)
        oxygen_factor: oxygen activity factor (0.05-1)
        crepuscular_factor: twilight multiplier (1.0-1.4)

    Returns:
        dict with 'score' (int 0-100), 'raw_score' and sub-factors.
    """
    p = SPECIES_PARAMS[Species(species)]
    tw = context.water_temperature

    if p.temp_ceiling_c is not None and tw > p.temp_ceiling_c:
        return {
            "score": 0,
            "raw_score": 0.0,
            "thermal_cutoff": True,
            "reaction_distance_m": reaction_distance(illuminance, context.turbidity_ntu, p),
            "factors": {},
        }

    factors = {
        "temperature": temperature_suitability(tw, p),
        "visibility": visibility_factor(illuminance, context.turbidity_ntu, p),
        "light": light_preference(illuminance, p),
        "barometric": barometric_factor(context.pressure_trend_3h, illuminance, p),
        "oxygen": oxygen_factor,
        "crepuscular": crepuscular_factor,
    }
    chop = 1.0
    if p.chop_threshold_cm is not None and context.wave_height_cm > p.chop_threshold_cm:
        chop = p.chop_bonus

    raw = (
        100.0
        * factors["temperature"] ** p.temp_weight
        * factors["visibility"] ** p.visibility_weight
        * factors["light"] ** p.light_weight
        * factors["barometric"] ** p.baro_weight
        * factors["oxygen"] ** p.oxygen_weight
        * factors["crepuscular"] ** p.crepuscular_weight
        * chop
    )
    if not math.isfinite(raw):
        raise ValueError(f"Non-finite {Species(species).value} score from context {context.as_dict()}")

    return {
        "score": round_score(raw),
        "raw_score": raw,
        "thermal_cutoff": False,
        "reaction_distance_m": reaction_distance(illuminance, context.turbidity_ntu, p),
        "chop_bonus": chop,
        "factors": {k: round(float(v), 3) for k, v in factors.items()},
    }


def compute_species_scores(context) -> dict:
    """
    Score every supported species from a BioContext.

    Returns:
        dict with 'scores' {species_id: int}, 'details', 'best_species',
        'best_score', 'activity_level'.
    """
    details = {}
    for species in Species:
        details[species.value] = score_species(
            species,
            context,
            context.illuminance,
            context.oxygen_factor,
            context.crepuscular_factor,
        )

    scores = {k: d["score"] for k, d in details.items()}
    best = max(scores, key=scores.get)
    return {
        "scores": scores,
        "details": details,
        "best_species": best,
        "best_score": scores[best],
        "activity_level": classify_activity(scores[best]),
    }
