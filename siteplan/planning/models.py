"""
Planning data models

Data classes for road corridors, buildable areas, footprints and layout
results. Everything here is produced fresh by a planning pass and is
never patched in place.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from loguru import logger
from shapely.geometry import LineString, Polygon
from shapely.geometry.base import BaseGeometry

from ..config import HOUSE_TYPES, HousingConfig
from ..geometry import kernel
from ..geometry.rectangle import oriented_rectangle
from ..geometry.utils import Coord, Edge


class CorridorKind(Enum):
    """Road corridor types"""
    ACCESS = "access"
    SPINE = "spine"


class AlignmentMode(Enum):
    NEAREST = "nearest"
    LONGEST = "longest"
    MANUAL = "manual"


@dataclass(frozen=True)
class RoadWidths:
    """Full carriageway widths in metres"""
    access_m: float = 8.0
    spine_m: float = 6.0


@dataclass
class RoadCorridor:
    """A buffered road centerline clipped to the site"""
    kind: CorridorKind
    centerline: LineString
    width_m: float
    polygon: BaseGeometry
    index: int = 0

    @property
    def length_m(self) -> float:
        return self.centerline.length


@dataclass
class RoadNetwork:
    """
    Road corridors produced by one planning pass

    merged is the union of every corridor polygon, or None when there are
    no corridors or the union failed (pieces then holds the unmerged set).
    """
    corridors: List[RoadCorridor] = field(default_factory=list)
    merged: Optional[BaseGeometry] = None
    junction: Optional[Coord] = None
    strategy: str = "junction"

    @classmethod
    def compose(
        cls,
        corridors: List[RoadCorridor],
        junction: Optional[Coord] = None,
        strategy: str = "junction"
    ) -> "RoadNetwork":
        merged = None
        if corridors:
            result = kernel.union(c.polygon for c in corridors)
            if result.ok:
                merged = result.geometry
            else:
                logger.warning(f"Road union failed ({result.error}); keeping {len(corridors)} unmerged corridors")
        return cls(corridors=corridors, merged=merged, junction=junction, strategy=strategy)

    @property
    def pieces(self) -> List[BaseGeometry]:
        return [c.polygon for c in self.corridors]

    @property
    def polygons(self) -> List[BaseGeometry]:
        """Merged network if available, otherwise the individual corridors"""
        if self.merged is not None and not self.merged.is_empty:
            return [self.merged]
        return self.pieces

    @property
    def access(self) -> Optional[RoadCorridor]:
        for c in self.corridors:
            if c.kind == CorridorKind.ACCESS:
                return c
        return None

    @property
    def spines(self) -> List[RoadCorridor]:
        return [c for c in self.corridors if c.kind == CorridorKind.SPINE]

    @property
    def is_empty(self) -> bool:
        return not self.corridors


@dataclass(frozen=True)
class FootprintSpec:
    """Building size and spacing rules"""
    width_m: float = 6.5
    depth_m: float = 10.0
    front_setback_m: float = 3.0
    side_gap_m: float = 2.0
    front_gap_m: float = 5.0
    edge_margin_m: float = 0.6
    height_m: float = 4.0
    house_type: str = "standard"

    @classmethod
    def from_config(cls, housing: HousingConfig) -> "FootprintSpec":
        preset = HOUSE_TYPES[housing.house_type]
        return cls(
            width_m=preset.width_m,
            depth_m=preset.depth_m,
            front_setback_m=housing.front_setback_m,
            side_gap_m=housing.side_gap_m,
            front_gap_m=housing.front_gap_m,
            edge_margin_m=housing.edge_margin_m,
            height_m=housing.height_m,
            house_type=housing.house_type,
        )

    @property
    def lot_pitch_m(self) -> float:
        return self.width_m + self.side_gap_m

    @property
    def row_pitch_m(self) -> float:
        return self.depth_m + self.front_gap_m

    @property
    def area_m2(self) -> float:
        return self.width_m * self.depth_m


@dataclass(frozen=True)
class Footprint:
    """One building outline: width along bearing, depth across it"""
    center: Coord
    width_m: float
    depth_m: float
    bearing: float
    house_type: str = "standard"
    side: str = "grid"
    height_m: float = 4.0
    polygon: Polygon = field(default=None, compare=False, repr=False)

    def __post_init__(self):
        if self.polygon is None:
            object.__setattr__(
                self, "polygon",
                oriented_rectangle(self.center, self.width_m, self.depth_m, self.bearing)
            )

    @property
    def area_m2(self) -> float:
        return self.width_m * self.depth_m


@dataclass
class BuildableArea:
    """
    Site land left for housing

    geometry is None when nothing remains. no_build_parts always lists the
    road and exclusion polygons (unmerged) for overlap checks and display.
    """
    geometry: Optional[BaseGeometry]
    no_build: Optional[BaseGeometry] = None
    no_build_parts: List[BaseGeometry] = field(default_factory=list)
    degraded: bool = False

    @property
    def is_empty(self) -> bool:
        return self.geometry is None or self.geometry.is_empty

    @property
    def area_m2(self) -> float:
        return 0.0 if self.is_empty else self.geometry.area

    @property
    def no_build_pieces(self) -> List[BaseGeometry]:
        """Merged no-build area when available, otherwise the separate pieces"""
        if self.no_build is not None:
            return [self.no_build]
        return list(self.no_build_parts)

    def overlaps_no_build(self, geometry: BaseGeometry) -> bool:
        return any(kernel.intersects(geometry, part) for part in self.no_build_pieces)


@dataclass(frozen=True)
class Alignment:
    """Grid orientation and the edge rows are measured from"""
    mode: AlignmentMode
    bearing: float
    reference_edge: Optional[Edge] = None


@dataclass
class LayoutStats:
    """Derived statistics for one layout"""
    site_area_m2: float = 0.0
    site_area_ha: float = 0.0
    perimeter_m: float = 0.0
    buildable_area_m2: float = 0.0
    buildable_area_ha: float = 0.0
    home_count: int = 0
    density_per_ha: float = 0.0
    net_density_per_ha: float = 0.0
    homes_per_acre: float = 0.0
    homes_by_type: Dict[str, int] = field(default_factory=dict)
    average_home_area_m2: float = 0.0
    road_length_m: float = 0.0
    road_area_m2: float = 0.0
    road_coverage_pct: float = 0.0
    development_efficiency_pct: float = 0.0


@dataclass
class LayoutResult:
    """Footprints, roads, buildable land and statistics for one planning pass"""
    boundary: BaseGeometry
    road_network: RoadNetwork
    buildable: BuildableArea
    footprints: List[Footprint]
    stats: LayoutStats
    alignment: Optional[Alignment] = None
    placement_strategy: str = "spine"
    access_path: Optional[LineString] = None
    exclusions: List[BaseGeometry] = field(default_factory=list)

    # Transform back to the input CRS for serialisation
    frame: Optional[object] = field(default=None, repr=False)
