"""
Morphology Resolver — normalizes a water-body description into the canonical
parameter set consumed by the thermal, turbidity and wave models.

Input:  MorphologyConfig (or dict), any field may be missing
Output: ResolvedMorphology
    - effective depth (explicit mean depth, else depth-class lookup)
    - basin thermal offset (heat island / canopy shading)
    - basin turbidity baseline (resting sediment level)
    - surface area + shape factor (wave fetch)

Never fails: unknown values fall back to River / Urban / Medium with a warning,
missing values fall back silently. Every substitution is recorded in
ResolvedMorphology.fallbacks.
"""

import math
import warnings

from data_model import (
    BasinClass,
    DepthClass,
    MorphologyConfig,
    ResolvedMorphology,
    WaterBodyType,
)

DEPTH_BY_CLASS_M = {
    DepthClass.SHALLOW: 2.0,
    DepthClass.MEDIUM: 6.0,
    DepthClass.DEEP: 15.0,
}

BASIN_OFFSET_C = {
    BasinClass.URBAN: 1.2,
    BasinClass.AGRICULTURAL: 0.5,
    BasinClass.PASTURE: 0.3,
    BasinClass.FORESTED: 0.0,
}

BASIN_TURBIDITY_BASELINE_NTU = {
    BasinClass.URBAN: 12.0,
    BasinClass.AGRICULTURAL: 8.5,
    BasinClass.PASTURE: 6.0,
    BasinClass.FORESTED: 4.5,
}

# Shallower explicit depths make the solar forcing term blow up.
MIN_DEPTH_M = 0.5

DEFAULT_SURFACE_AREA_M2 = 100_000.0
DEFAULT_SHAPE_FACTOR = 1.2

# Flowing water: fetch is bounded by the channel, no elongation bonus.
FLOWING_TYPES = (WaterBodyType.RIVER, WaterBodyType.MEDIUM_CHANNEL)

# Ids used by the fishing-log application's stored locations.
_LEGACY_ALIASES = {
    "z_river": WaterBodyType.RIVER,
    "z_pond": WaterBodyType.POND,
    "z_med": WaterBodyType.MEDIUM_CHANNEL,
    "z_deep": WaterBodyType.DEEP_LAKE,
    "urbain": BasinClass.URBAN,
    "agricole": BasinClass.AGRICULTURAL,
    "prairie": BasinClass.PASTURE,
    "forestier": BasinClass.FORESTED,
    "z_less_3": DepthClass.SHALLOW,
    "z_3_15": DepthClass.MEDIUM,
    "z_more_15": DepthClass.DEEP,
}


def _coerce_enum(value, enum_cls, default, field: str, fallbacks: list):
    if value is None or value == "":
        fallbacks.append(f"{field} missing; using {default.value}")
        return default
    if isinstance(value, enum_cls):
        return value

    key = str(value).strip().lower()
    alias = _LEGACY_ALIASES.get(key)
    if isinstance(alias, enum_cls):
        return alias
    for member in enum_cls:
        if key in (member.value, member.name.lower()):
            return member

    warnings.warn(f"Unknown {field} {value!r}; falling back to {default.value}.")
    fallbacks.append(f"{field} {value!r} unknown; using {default.value}")
    return default


def _positive(value) -> bool:
    return value is not None and math.isfinite(value) and value > 0


def resolve(config) -> ResolvedMorphology:
    """
    Resolve a (possibly partial) water-body description.

    Args:
        config: MorphologyConfig, dict of morphology fields, or None

    Returns:
        ResolvedMorphology with every field populated.
    """
    cfg = MorphologyConfig.from_dict(config)
    fallbacks: list[str] = []

    wb_type = _coerce_enum(cfg.type_id, WaterBodyType, WaterBodyType.RIVER, "type_id", fallbacks)
    basin = _coerce_enum(cfg.basin_class, BasinClass, BasinClass.URBAN, "basin_class", fallbacks)

    # Explicit mean depth wins over the class lookup.
    if _positive(cfg.mean_depth):
        depth_class = _class_for_depth(cfg.mean_depth)
        depth = max(MIN_DEPTH_M, float(cfg.mean_depth))
    else:
        if cfg.mean_depth is not None:
            warnings.warn(f"Ignoring non-positive mean depth {cfg.mean_depth!r}.")
            fallbacks.append(f"mean_depth {cfg.mean_depth!r} invalid; using depth class")
        depth_class = _coerce_enum(cfg.depth_class, DepthClass, DepthClass.MEDIUM, "depth_class", fallbacks)
        depth = DEPTH_BY_CLASS_M[depth_class]

    if _positive(cfg.surface_area):
        area = float(cfg.surface_area)
    else:
        fallbacks.append(f"surface_area missing; using {DEFAULT_SURFACE_AREA_M2:.0f} m2")
        area = DEFAULT_SURFACE_AREA_M2

    if wb_type in FLOWING_TYPES:
        shape = 1.0
    elif _positive(cfg.shape_factor):
        shape = float(cfg.shape_factor)
    else:
        fallbacks.append(f"shape_factor missing; using {DEFAULT_SHAPE_FACTOR}")
        shape = DEFAULT_SHAPE_FACTOR

    return ResolvedMorphology(
        water_body_type=wb_type,
        basin_class=basin,
        depth_class=depth_class,
        effective_depth_m=depth,
        basin_offset_c=BASIN_OFFSET_C[basin],
        basin_turbidity_baseline_ntu=BASIN_TURBIDITY_BASELINE_NTU[basin],
        surface_area_m2=area,
        shape_factor=shape,
        fallbacks=tuple(fallbacks),
    )


def _class_for_depth(depth_m: float) -> DepthClass:
    if depth_m < 3.0:
        return DepthClass.SHALLOW
    elif depth_m <= 15.0:
        return DepthClass.MEDIUM
    else:
        return DepthClass.DEEP


if __name__ == "__main__":
    from config.demo_sites import DEMO_WATER_BODIES

    for key, site in DEMO_WATER_BODIES.items():
        r = resolve(site["morphology"])
        print(f"  {key}: depth={r.effective_depth_m} m, offset=+{r.basin_offset_c} °C, "
              f"baseline={r.basin_turbidity_baseline_ntu} NTU, fetch shape={r.shape_factor}")
