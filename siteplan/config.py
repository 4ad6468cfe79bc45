"""
Configuration settings for the Site Layout Planner
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass(frozen=True)
class HouseType:
    """Footprint preset (width = frontage along the road, depth = front to back)"""
    name: str
    width_m: float
    depth_m: float


HOUSE_TYPES: Dict[str, HouseType] = {
    "small": HouseType("Small House", 8.0, 12.0),
    "medium": HouseType("Medium House", 10.0, 15.0),
    "large": HouseType("Large House", 12.0, 18.0),
    "t1": HouseType("Type 1 (5x5)", 5.0, 5.0),
    "t2": HouseType("Type 2 (5x8)", 5.0, 8.0),
    "t3": HouseType("Type 3 (10x8)", 10.0, 8.0),
    "standard": HouseType("Standard Home", 6.5, 10.0),
}

ROAD_STRATEGIES = ("junction", "dual")
PLACEMENT_STRATEGIES = ("spine", "grid")
ALIGNMENT_MODES = ("nearest", "longest", "manual")
SPINE_ORIENTATIONS = ("perpendicular", "aligned")


@dataclass
class RoadConfig:
    """Access and spine road settings"""
    access_width_m: float = 8.0
    spine_width_m: float = 6.0

    # Length of the probe line projected through the junction before clipping
    probe_length_m: float = 2000.0

    # Trimmed off both spine ends; None means half the spine width
    end_clearance_m: Optional[float] = None

    # Access is lengthened by max(access, spine) * factor under the spine
    overlap_factor: float = 0.6

    # "perpendicular" runs the spine across the nearest edge, "aligned" along it
    spine_orientation: str = "perpendicular"


@dataclass
class DualSpineConfig:
    """Ray-cast dual spine settings"""
    ray_step_m: float = 5.0
    max_ray_length_m: float = 200.0
    inset_distance_m: float = 10.0
    second_spine_edge_fraction: float = 0.8
    second_spine_max_m: float = 100.0


@dataclass
class HousingConfig:
    """Footprint and setback defaults"""
    house_type: str = "standard"
    front_setback_m: float = 3.0
    side_gap_m: float = 2.0
    front_gap_m: float = 5.0
    edge_margin_m: float = 0.6
    height_m: float = 4.0

    # Tangent sampling window along a spine (fraction of length, clamped)
    tangent_window_fraction: float = 0.01
    tangent_window_min_m: float = 0.5
    tangent_window_max_m: float = 2.0

    # Upper bound on grid cells visited in one placement pass
    max_grid_cells: int = 25000


@dataclass
class PlannerConfig:
    """Planner configuration"""
    road_strategy: str = "junction"
    placement_strategy: str = "spine"

    # Grid alignment: nearest edge to the access junction, longest edge, or manual
    alignment_mode: str = "nearest"
    manual_bearing: Optional[float] = None

    # "local" for planar metres, otherwise a CRS understood by pyproj
    input_crs: str = "local"

    # Guards homes/ha when the site is degenerate
    density_epsilon_ha: float = 1e-6

    output_dir: str = "output"

    road: RoadConfig = field(default_factory=RoadConfig)
    dual_spine: DualSpineConfig = field(default_factory=DualSpineConfig)
    housing: HousingConfig = field(default_factory=HousingConfig)


# Global config instance
config = PlannerConfig()


def get_config() -> PlannerConfig:
    """Get global configuration"""
    return config


def validate_config(config: PlannerConfig) -> None:
    """
    Validate that all required configuration values are set.
    Raises ValueError if any required value is missing or invalid.
    """
    errors: List[str] = []

    if config.road_strategy not in ROAD_STRATEGIES:
        errors.append(f"road_strategy must be one of {ROAD_STRATEGIES}, got {config.road_strategy!r}")
    if config.placement_strategy not in PLACEMENT_STRATEGIES:
        errors.append(f"placement_strategy must be one of {PLACEMENT_STRATEGIES}, got {config.placement_strategy!r}")
    if config.alignment_mode not in ALIGNMENT_MODES:
        errors.append(f"alignment_mode must be one of {ALIGNMENT_MODES}, got {config.alignment_mode!r}")
    elif config.alignment_mode == "manual" and config.manual_bearing is None:
        errors.append("manual_bearing is required when alignment_mode is 'manual'")

    if config.density_epsilon_ha <= 0:
        errors.append(f"density_epsilon_ha must be positive, got {config.density_epsilon_ha}")

    road = config.road
    if road is None:
        errors.append("road configuration is required but not set")
    else:
        if road.access_width_m <= 0:
            errors.append(f"road.access_width_m must be positive, got {road.access_width_m}")
        if road.spine_width_m <= 0:
            errors.append(f"road.spine_width_m must be positive, got {road.spine_width_m}")
        if road.probe_length_m <= 0:
            errors.append(f"road.probe_length_m must be positive, got {road.probe_length_m}")
        if road.end_clearance_m is not None and road.end_clearance_m < 0:
            errors.append(f"road.end_clearance_m must not be negative, got {road.end_clearance_m}")
        if road.spine_orientation not in SPINE_ORIENTATIONS:
            errors.append(f"road.spine_orientation must be one of {SPINE_ORIENTATIONS}, got {road.spine_orientation!r}")

    dual = config.dual_spine
    if dual is None:
        errors.append("dual_spine configuration is required but not set")
    else:
        if dual.ray_step_m <= 0:
            errors.append(f"dual_spine.ray_step_m must be positive, got {dual.ray_step_m}")
        if dual.max_ray_length_m < dual.ray_step_m:
            errors.append("dual_spine.max_ray_length_m must be at least one ray step")
        if not 0 < dual.second_spine_edge_fraction <= 1:
            errors.append(f"dual_spine.second_spine_edge_fraction must be in (0, 1], got {dual.second_spine_edge_fraction}")

    housing = config.housing
    if housing is None:
        errors.append("housing configuration is required but not set")
    else:
        if housing.house_type not in HOUSE_TYPES:
            errors.append(f"housing.house_type must be one of {sorted(HOUSE_TYPES)}, got {housing.house_type!r}")
        for name in ("front_setback_m", "side_gap_m", "front_gap_m", "edge_margin_m"):
            if getattr(housing, name) < 0:
                errors.append(f"housing.{name} must not be negative, got {getattr(housing, name)}")
        if housing.tangent_window_min_m > housing.tangent_window_max_m:
            errors.append("housing.tangent_window_min_m must not exceed tangent_window_max_m")
        if housing.max_grid_cells <= 0:
            errors.append(f"housing.max_grid_cells must be positive, got {housing.max_grid_cells}")

    if errors:
        error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        raise ValueError(error_msg)
