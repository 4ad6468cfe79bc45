"""
Planning modules for the Site Layout Planner
"""

from .models import (
    Alignment,
    AlignmentMode,
    BuildableArea,
    CorridorKind,
    Footprint,
    FootprintSpec,
    LayoutResult,
    LayoutStats,
    RoadCorridor,
    RoadNetwork,
    RoadWidths,
)
from .roads import RoadNetworkPlanner, plan_road_network
from .spines import DualSpinePlanner, plan_dual_spine_network, validate_access
from .buildable import BuildableAreaAccountant, compute_buildable_area, compute_statistics
from .housing import HousingPlacer, resolve_alignment, place_housing_grid, place_housing_along_spine
from .picking import Idle, CollectingPoints, handle_click, cancel

__all__ = [
    "Alignment",
    "AlignmentMode",
    "BuildableArea",
    "CorridorKind",
    "Footprint",
    "FootprintSpec",
    "LayoutResult",
    "LayoutStats",
    "RoadCorridor",
    "RoadNetwork",
    "RoadWidths",
    "RoadNetworkPlanner",
    "plan_road_network",
    "DualSpinePlanner",
    "plan_dual_spine_network",
    "validate_access",
    "BuildableAreaAccountant",
    "compute_buildable_area",
    "compute_statistics",
    "HousingPlacer",
    "resolve_alignment",
    "place_housing_grid",
    "place_housing_along_spine",
    "Idle",
    "CollectingPoints",
    "handle_click",
    "cancel",
]
