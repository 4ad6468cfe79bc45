"""
Dual spine planner (ray-cast)

An alternative to the junction-aligned planner. The first spine runs
perpendicular to the boundary edge nearest the access terminus and is
sized by marching outward until the site is left. The second spine runs
parallel to the edge most opposite the first spine, inset from it.

The first spine spans the measured extents: it starts where the backward
march leaves the site and ends where the forward march does, so the
terminus need not sit at its midpoint.
"""

from dataclasses import dataclass
from typing import Optional

from loguru import logger
from shapely.geometry import LineString, Point
from shapely.geometry.base import BaseGeometry

from ..analysis.alignment import nearest_edge, opposite_edge
from ..config import PlannerConfig, get_config
from ..geometry.utils import Coord, GeometryUtils
from .models import CorridorKind, RoadNetwork, RoadWidths
from .roads import build_corridor, clip_access


@dataclass(frozen=True)
class SpineLine:
    """Spine centerline and its unit direction"""
    centerline: LineString
    direction: Coord


class DualSpinePlanner:
    """Plans an access corridor plus up to two independently placed spines"""

    def __init__(self, config: Optional[PlannerConfig] = None):
        self.config = config or get_config()
        self.road = self.config.road
        self.settings = self.config.dual_spine

    def plan(
        self,
        boundary: BaseGeometry,
        access_path: LineString,
        widths: Optional[RoadWidths] = None
    ) -> RoadNetwork:
        widths = widths or RoadWidths(self.road.access_width_m, self.road.spine_width_m)

        terminus = access_path.coords[-1]
        terminus = (terminus[0], terminus[1])
        if not validate_access(boundary, access_path):
            logger.warning("Access path does not end inside the site")

        corridors = []
        clipped, inside = clip_access(access_path, boundary)
        if inside:
            access = build_corridor(CorridorKind.ACCESS, clipped, widths.access_m, boundary)
            if access is not None:
                corridors.append(access)

        first = self.first_spine(boundary, terminus)
        if first is not None:
            corridor = build_corridor(CorridorKind.SPINE, first.centerline, widths.spine_m, boundary, index=0)
            if corridor is not None:
                corridors.append(corridor)
                logger.info("First spine generated")

            second = self.second_spine(boundary, first.direction)
            if second is not None:
                corridor = build_corridor(CorridorKind.SPINE, second.centerline, widths.spine_m, boundary, index=1)
                if corridor is not None:
                    corridors.append(corridor)
                    logger.info("Second spine generated")

        return RoadNetwork.compose(corridors, junction=terminus, strategy="dual")

    def first_spine(self, boundary: BaseGeometry, terminus: Coord) -> Optional[SpineLine]:
        """Spine through the terminus, perpendicular to the nearest boundary edge"""
        edge = nearest_edge(boundary, terminus)
        if edge is None:
            logger.warning("Could not find closest boundary edge")
            return None

        direction = GeometryUtils.perpendicular(edge.direction)
        back = self.ray_extent(boundary, terminus, (-direction[0], -direction[1]))
        forward = self.ray_extent(boundary, terminus, direction)
        if back + forward <= 0:
            logger.warning("First spine has zero length; terminus is not inside the site")
            return None

        start = GeometryUtils.move_point(terminus, direction, -back)
        end = GeometryUtils.move_point(terminus, direction, forward)
        logger.debug(f"First spine spans {back:.0f}m back and {forward:.0f}m forward of the terminus")
        return SpineLine(LineString([start, end]), direction)

    def ray_extent(self, boundary: BaseGeometry, start: Coord, direction: Coord) -> float:
        """Distance marched from start along direction before leaving the site"""
        step = self.settings.ray_step_m
        max_length = self.settings.max_ray_length_m

        extent = 0.0
        distance = step
        while distance <= max_length:
            probe = GeometryUtils.move_point(start, direction, distance)
            if not boundary.contains(Point(probe)):
                break
            extent = distance
            distance += step
        return extent

    def second_spine(self, boundary: BaseGeometry, first_direction: Coord) -> Optional[SpineLine]:
        """Spine parallel to the edge most opposite the first spine, inset into the site"""
        edge = opposite_edge(boundary, first_direction)
        if edge is None:
            logger.warning("Could not find opposite edge")
            return None

        inset = self.settings.inset_distance_m
        center = edge.midpoint
        inward = GeometryUtils.perpendicular(edge.direction)
        if not boundary.contains(Point(GeometryUtils.move_point(center, inward, inset))):
            inward = (-inward[0], -inward[1])
        spine_center = GeometryUtils.move_point(center, inward, inset)

        spine_length = min(
            edge.length_m * self.settings.second_spine_edge_fraction,
            self.settings.second_spine_max_m,
        )
        left = GeometryUtils.move_point(spine_center, edge.direction, -spine_length / 2)
        right = GeometryUtils.move_point(spine_center, edge.direction, spine_length / 2)

        if not boundary.contains(Point(left)):
            left = spine_center
        if not boundary.contains(Point(right)):
            right = spine_center
        if left == right:
            logger.warning(f"Second spine along {edge.cardinal} edge collapsed to a point")
            return None

        return SpineLine(LineString([left, right]), edge.direction)


def validate_access(boundary: BaseGeometry, access_path: LineString) -> bool:
    """True when the final vertex of the access path lies inside the site"""
    end = access_path.coords[-1]
    return boundary.contains(Point(end[0], end[1]))


def plan_dual_spine_network(
    boundary: BaseGeometry,
    access_path: LineString,
    widths: Optional[RoadWidths] = None,
    config: Optional[PlannerConfig] = None
) -> RoadNetwork:
    """Ray-cast dual spine network for a site"""
    return DualSpinePlanner(config).plan(boundary, access_path, widths)
