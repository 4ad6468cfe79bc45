"""
Buildable area accounting

Removes roads and exclusion areas (parks etc.) from the site and derives
area and density statistics for a layout.
"""

from typing import Iterable, List, Optional

from loguru import logger
from shapely.geometry.base import BaseGeometry

from ..config import PlannerConfig, get_config
from ..geometry import kernel
from .models import BuildableArea, Footprint, LayoutStats, RoadNetwork

SQM_PER_HECTARE = 10000.0
ACRES_PER_HECTARE = 2.471


class BuildableAreaAccountant:
    """Computes buildable land and layout statistics"""

    def __init__(self, config: Optional[PlannerConfig] = None):
        self.config = config or get_config()

    def compute(
        self,
        boundary: BaseGeometry,
        road_network: Optional[RoadNetwork] = None,
        exclusions: Optional[Iterable[BaseGeometry]] = None
    ) -> BuildableArea:
        """
        Site minus the union of roads and exclusions

        Args:
            boundary: Site polygon
            road_network: Planned roads (may be empty)
            exclusions: Parks and other no-build polygons

        Returns:
            BuildableArea. When a union or difference fails the unmerged
            pieces are kept for display and the whole site is buildable.
        """
        road_parts = list(road_network.pieces) if road_network is not None else []
        exclusion_parts = [g for g in (exclusions or []) if g is not None and not g.is_empty]
        parts = road_parts + exclusion_parts

        if not parts:
            return BuildableArea(geometry=boundary, no_build=None, no_build_parts=[])

        roads_union = kernel.union(road_parts)
        exclusions_union = kernel.union(exclusion_parts)
        if not roads_union.ok or not exclusions_union.ok:
            failed = roads_union.error or exclusions_union.error
            return self._degraded(boundary, parts, f"no-build union failed ({failed})")

        no_build = kernel.union([roads_union.geometry, exclusions_union.geometry])
        if not no_build.ok:
            return self._degraded(boundary, parts, f"no-build union failed ({no_build.error})")

        remaining = kernel.difference(boundary, no_build.geometry)
        if not remaining.ok:
            return self._degraded(boundary, parts, f"site difference failed ({remaining.error})")

        if remaining.is_empty:
            logger.info("No buildable land remains after removing roads and exclusions")
            geometry = None
        else:
            geometry = remaining.geometry
            logger.info(f"Buildable area: {geometry.area:.0f} m²")

        return BuildableArea(geometry=geometry, no_build=no_build.geometry, no_build_parts=parts)

    def _degraded(self, boundary: BaseGeometry, parts: List[BaseGeometry], reason: str) -> BuildableArea:
        logger.warning(f"{reason}; using the whole site as buildable")
        return BuildableArea(geometry=boundary, no_build=None, no_build_parts=parts, degraded=True)

    def statistics(
        self,
        boundary: BaseGeometry,
        buildable: BuildableArea,
        footprints: List[Footprint],
        road_network: Optional[RoadNetwork] = None
    ) -> LayoutStats:
        """Area, density and efficiency figures for a layout"""
        eps = self.config.density_epsilon_ha

        site_area = kernel.area(boundary)
        site_ha = site_area / SQM_PER_HECTARE
        buildable_area = buildable.area_m2
        buildable_ha = buildable_area / SQM_PER_HECTARE
        count = len(footprints)

        homes_by_type = {}
        for fp in footprints:
            homes_by_type[fp.house_type] = homes_by_type.get(fp.house_type, 0) + 1
        homes_area = sum(fp.area_m2 for fp in footprints)

        road_length = 0.0
        road_area = 0.0
        if road_network is not None and not road_network.is_empty:
            road_length = sum(c.length_m for c in road_network.corridors)
            road_area = sum(kernel.area(p) for p in road_network.polygons)

        density = count / max(site_ha, eps)
        return LayoutStats(
            site_area_m2=round(site_area, 1),
            site_area_ha=round(site_ha, 4),
            perimeter_m=round(boundary.exterior.length if hasattr(boundary, "exterior") else boundary.length, 1),
            buildable_area_m2=round(buildable_area, 1),
            buildable_area_ha=round(buildable_ha, 4),
            home_count=count,
            density_per_ha=round(density, 2),
            net_density_per_ha=round(count / max(buildable_ha, eps), 2) if count else 0.0,
            homes_per_acre=round(density / ACRES_PER_HECTARE, 2),
            homes_by_type=homes_by_type,
            average_home_area_m2=round(homes_area / count, 2) if count else 0.0,
            road_length_m=round(road_length, 1),
            road_area_m2=round(road_area, 1),
            road_coverage_pct=round(road_area / site_area * 100, 2) if site_area > 0 else 0.0,
            development_efficiency_pct=round(homes_area / site_area * 100, 2) if site_area > 0 else 0.0,
        )


def compute_buildable_area(
    boundary: BaseGeometry,
    road_network: Optional[RoadNetwork] = None,
    exclusions: Optional[Iterable[BaseGeometry]] = None,
    config: Optional[PlannerConfig] = None
) -> BuildableArea:
    """Site minus roads and exclusions"""
    return BuildableAreaAccountant(config).compute(boundary, road_network, exclusions)


def compute_statistics(
    boundary: BaseGeometry,
    buildable: BuildableArea,
    footprints: List[Footprint],
    road_network: Optional[RoadNetwork] = None,
    config: Optional[PlannerConfig] = None
) -> LayoutStats:
    return BuildableAreaAccountant(config).statistics(boundary, buildable, footprints, road_network)
