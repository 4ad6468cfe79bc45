"""
Road network planner (junction-aligned spine)

Turns an access path and a site boundary into an access corridor and a
single spine corridor:

  1. Clip the access to the site interior
  2. Take the clipped end closest to the site centroid as the junction
  3. Derive the spine bearing from the boundary edge nearest the junction
  4. Probe a long line through the junction, clip it, trim the ends
  5. Extend the access so its cap hides under the spine
  6. Buffer both centerlines and clip them to the site
  7. Union the corridors into one network

An access path with no piece inside the site yields no access corridor.
Any step that fails on degenerate geometry drops that corridor and the
pass carries on; callers always get a RoadNetwork back.
"""

from typing import Optional, Tuple

from loguru import logger
from shapely.geometry import LineString, Point
from shapely.geometry.base import BaseGeometry

from ..analysis.alignment import nearest_edge
from ..config import PlannerConfig, get_config
from ..geometry import kernel
from ..geometry.utils import Coord, GeometryUtils
from .models import CorridorKind, RoadCorridor, RoadNetwork, RoadWidths


def clip_access(access_path: LineString, boundary: BaseGeometry) -> Tuple[LineString, bool]:
    """
    Longest interior piece of the access path

    Returns (line, inside). When no piece lies inside the site the raw path
    comes back with inside=False; it still locates the junction but must
    not become a corridor.
    """
    result = kernel.longest_interior_segment(access_path, boundary)
    if result.ok:
        return result.geometry, True
    logger.warning(f"Access path has no interior segment ({result.error}); no access corridor")
    return access_path, False


def build_corridor(
    kind: CorridorKind,
    centerline: LineString,
    width_m: float,
    boundary: BaseGeometry,
    index: int = 0
) -> Optional[RoadCorridor]:
    """Buffer a centerline by half its width and keep the part inside the site"""
    buffered = kernel.buffer_line(centerline, width_m / 2.0)
    if not buffered.ok:
        logger.warning(f"Dropping {kind.value} corridor: {buffered.error}")
        return None

    clipped = kernel.intersect(buffered.geometry, boundary)
    if not clipped.ok:
        logger.warning(f"Dropping {kind.value} corridor: {clipped.error}")
        return None
    if clipped.is_empty:
        logger.warning(f"Dropping {kind.value} corridor: lies outside the site")
        return None

    return RoadCorridor(
        kind=kind,
        centerline=centerline,
        width_m=width_m,
        polygon=clipped.geometry,
        index=index,
    )


class RoadNetworkPlanner:
    """Plans one access corridor plus one spine anchored at the access junction"""

    def __init__(self, config: Optional[PlannerConfig] = None):
        self.config = config or get_config()
        self.road = self.config.road

    def plan(
        self,
        boundary: BaseGeometry,
        access_path: LineString,
        widths: Optional[RoadWidths] = None
    ) -> RoadNetwork:
        """
        Plan the road network for a site

        Args:
            boundary: Site polygon (planar metres)
            access_path: Access centerline, may start outside the site
            widths: Carriageway widths (defaults from config)

        Returns:
            RoadNetwork with zero, one or two corridors
        """
        widths = widths or RoadWidths(self.road.access_width_m, self.road.spine_width_m)

        clipped, inside = clip_access(access_path, boundary)
        junction = self.pick_junction(clipped, boundary)
        logger.info(f"Access junction at ({junction[0]:.1f}, {junction[1]:.1f})")

        spine = None
        if boundary.covers(Point(junction)):
            bearing = self.spine_bearing(boundary, junction)
            if bearing is not None:
                spine = self.build_spine_centerline(boundary, junction, bearing, widths.spine_m)
        else:
            logger.warning("Access junction lies outside the site; no spine planned")

        access_centerline = clipped
        if spine is not None:
            overlap = max(widths.access_m, widths.spine_m) * self.road.overlap_factor
            access_centerline = self.extend_access(clipped, junction, overlap)

        corridors = []
        if inside:
            access = build_corridor(CorridorKind.ACCESS, access_centerline, widths.access_m, boundary)
            if access is not None:
                corridors.append(access)
        if spine is not None:
            spine_corridor = build_corridor(CorridorKind.SPINE, spine, widths.spine_m, boundary)
            if spine_corridor is not None:
                corridors.append(spine_corridor)

        network = RoadNetwork.compose(corridors, junction=junction, strategy="junction")
        logger.info(f"Road network: {len(network.corridors)} corridors")
        return network

    def pick_junction(self, clipped: LineString, boundary: BaseGeometry) -> Coord:
        """Endpoint of the clipped access closer to the boundary centroid"""
        center = kernel.centroid(boundary)
        start = clipped.coords[0]
        end = clipped.coords[-1]
        d_start = GeometryUtils.distance((start[0], start[1]), (center.x, center.y))
        d_end = GeometryUtils.distance((end[0], end[1]), (center.x, center.y))
        if d_end < d_start:
            return (end[0], end[1])
        return (start[0], start[1])

    def spine_bearing(self, boundary: BaseGeometry, junction: Coord) -> Optional[float]:
        edge = nearest_edge(boundary, junction)
        if edge is None:
            logger.warning("No boundary edge near the junction; no spine planned")
            return None
        if self.road.spine_orientation == "aligned":
            bearing = edge.bearing
        else:
            bearing = GeometryUtils.normalize_bearing(edge.bearing + 90.0)
        logger.debug(f"Nearest edge faces {edge.cardinal} ({edge.bearing:.1f}); spine bearing {bearing:.1f}")
        return bearing

    def build_spine_centerline(
        self,
        boundary: BaseGeometry,
        junction: Coord,
        bearing: float,
        spine_width_m: float
    ) -> Optional[LineString]:
        """Probe through the junction, keep the longest interior piece, trim both ends"""
        half = self.road.probe_length_m / 2.0
        probe = LineString([
            GeometryUtils.destination(junction, half, bearing + 180.0),
            GeometryUtils.destination(junction, half, bearing),
        ])

        clipped = kernel.longest_interior_segment(probe, boundary)
        if not clipped.ok:
            logger.warning(f"Spine probe found no interior segment ({clipped.error})")
            return None

        clearance = self.road.end_clearance_m
        if clearance is None:
            clearance = spine_width_m / 2.0
        trimmed = GeometryUtils.trim_line(clipped.geometry, clearance)
        if trimmed is None:
            logger.warning(
                f"Spine of {clipped.geometry.length:.1f}m is too short for {clearance:.1f}m end clearance"
            )
        return trimmed

    def extend_access(self, clipped: LineString, junction: Coord, distance: float) -> LineString:
        """Lengthen the junction end of the access by distance"""
        start = clipped.coords[0]
        end = clipped.coords[-1]
        d_start = GeometryUtils.distance((start[0], start[1]), junction)
        d_end = GeometryUtils.distance((end[0], end[1]), junction)
        return GeometryUtils.extend_line_end(clipped, at_start=d_start < d_end, distance=distance)


def plan_road_network(
    boundary: BaseGeometry,
    access_path: LineString,
    widths: Optional[RoadWidths] = None,
    config: Optional[PlannerConfig] = None
) -> RoadNetwork:
    """Junction-aligned road network for a site"""
    return RoadNetworkPlanner(config).plan(boundary, access_path, widths)
