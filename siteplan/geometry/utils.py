"""
Geometry utilities for bearings, edges and line manipulation

All coordinates are planar metres. Bearings are degrees clockwise from
north (+Y): 0 = north, 90 = east.
"""

import math
from dataclasses import dataclass
from typing import List, Tuple, Optional

from shapely.geometry import LineString, MultiPolygon, Point, Polygon
from shapely.geometry.base import BaseGeometry
from shapely.ops import substring

Coord = Tuple[float, float]

# Segments shorter than this have no meaningful bearing
MIN_EDGE_LENGTH_M = 1e-9


@dataclass(frozen=True)
class Edge:
    """One segment of a boundary ring"""
    ring_index: int
    index: int
    start: Coord
    end: Coord
    length_m: float
    bearing: float

    @property
    def midpoint(self) -> Coord:
        return ((self.start[0] + self.end[0]) / 2, (self.start[1] + self.end[1]) / 2)

    @property
    def direction(self) -> Coord:
        """Unit vector from start to end"""
        return (
            (self.end[0] - self.start[0]) / self.length_m,
            (self.end[1] - self.start[1]) / self.length_m,
        )

    @property
    def cardinal(self) -> str:
        return GeometryUtils._angle_to_direction(self.bearing)


class GeometryUtils:
    """Utility functions for geometric operations"""

    @staticmethod
    def bearing(p1: Coord, p2: Coord) -> float:
        """Bearing from p1 to p2 in degrees [0, 360)"""
        dx = p2[0] - p1[0]
        dy = p2[1] - p1[1]
        angle = math.degrees(math.atan2(dx, dy))
        return angle % 360.0

    @staticmethod
    def normalize_bearing(bearing: float) -> float:
        return bearing % 360.0

    @staticmethod
    def vector_from_bearing(bearing: float) -> Coord:
        rad = math.radians(bearing)
        return (math.sin(rad), math.cos(rad))

    @staticmethod
    def destination(origin: Coord, distance: float, bearing: float) -> Coord:
        """Point reached by travelling distance metres from origin along bearing"""
        vx, vy = GeometryUtils.vector_from_bearing(bearing)
        return (origin[0] + vx * distance, origin[1] + vy * distance)

    @staticmethod
    def move_point(point: Coord, direction: Coord, distance: float) -> Coord:
        """Move a point by distance along a (not necessarily unit) direction vector"""
        mag = math.hypot(direction[0], direction[1])
        if mag == 0:
            return point
        return (
            point[0] + direction[0] / mag * distance,
            point[1] + direction[1] / mag * distance,
        )

    @staticmethod
    def perpendicular(vector: Coord) -> Coord:
        """Vector rotated 90 degrees counter-clockwise"""
        return (-vector[1], vector[0])

    @staticmethod
    def dot(v1: Coord, v2: Coord) -> float:
        return v1[0] * v2[0] + v1[1] * v2[1]

    @staticmethod
    def distance(p1: Coord, p2: Coord) -> float:
        return math.hypot(p2[0] - p1[0], p2[1] - p1[1])

    @staticmethod
    def outer_rings(geometry: BaseGeometry) -> List[List[Coord]]:
        """Exterior ring coordinates of every polygon part"""
        if isinstance(geometry, Polygon):
            parts = [geometry]
        elif isinstance(geometry, MultiPolygon):
            parts = list(geometry.geoms)
        else:
            return []
        return [[(c[0], c[1]) for c in part.exterior.coords] for part in parts if not part.is_empty]

    @staticmethod
    def get_polygon_edges(geometry: BaseGeometry) -> List[Edge]:
        """
        Get edges of every outer ring, in ring order

        Zero-length segments are skipped so they can never be selected
        by a nearest/longest scan.
        """
        edges = []
        for ring_index, coords in enumerate(GeometryUtils.outer_rings(geometry)):
            for i in range(len(coords) - 1):
                start = coords[i]
                end = coords[i + 1]
                length = GeometryUtils.distance(start, end)
                if length <= MIN_EDGE_LENGTH_M:
                    continue
                edges.append(Edge(
                    ring_index=ring_index,
                    index=i,
                    start=start,
                    end=end,
                    length_m=length,
                    bearing=GeometryUtils.bearing(start, end),
                ))
        return edges

    @staticmethod
    def _angle_to_direction(angle: float) -> str:
        """Convert bearing angle to cardinal direction"""
        if angle < 22.5 or angle >= 337.5:
            return "north"
        elif angle < 67.5:
            return "northeast"
        elif angle < 112.5:
            return "east"
        elif angle < 157.5:
            return "southeast"
        elif angle < 202.5:
            return "south"
        elif angle < 247.5:
            return "southwest"
        elif angle < 292.5:
            return "west"
        else:
            return "northwest"

    @staticmethod
    def distance_point_to_line(
        point: Coord,
        line_start: Coord,
        line_end: Coord
    ) -> float:
        """Calculate perpendicular distance from point to line segment"""
        px, py = point
        x1, y1 = line_start
        x2, y2 = line_end

        dx = x2 - x1
        dy = y2 - y1

        if dx == 0 and dy == 0:
            return math.hypot(px - x1, py - y1)

        t = max(0.0, min(1.0, ((px - x1) * dx + (py - y1) * dy) / (dx * dx + dy * dy)))

        closest_x = x1 + t * dx
        closest_y = y1 + t * dy

        return math.hypot(px - closest_x, py - closest_y)

    @staticmethod
    def point_at_distance(line: LineString, distance: float) -> Coord:
        """Point at arc length distance along the line (clamped to its ends)"""
        p = line.interpolate(max(0.0, min(distance, line.length)))
        return (p.x, p.y)

    @staticmethod
    def nearest_point_on_line(line: LineString, point: Coord) -> Tuple[Coord, float]:
        """Nearest point on the line and its distance along the line"""
        along = line.project(Point(point))
        return GeometryUtils.point_at_distance(line, along), along

    @staticmethod
    def extend_line_end(line: LineString, at_start: bool, distance: float) -> LineString:
        """Lengthen one end of a line along its terminal segment direction"""
        coords = [(c[0], c[1]) for c in line.coords]
        if at_start:
            tip, prev = coords[0], coords[1]
        else:
            tip, prev = coords[-1], coords[-2]
        new_tip = GeometryUtils.move_point(tip, (tip[0] - prev[0], tip[1] - prev[1]), distance)
        if at_start:
            return LineString([new_tip] + coords[1:])
        return LineString(coords[:-1] + [new_tip])

    @staticmethod
    def trim_line(line: LineString, distance: float) -> Optional[LineString]:
        """Cut distance metres off both ends; None when nothing would remain"""
        if line.length <= 2 * distance:
            return None
        trimmed = substring(line, distance, line.length - distance)
        if not isinstance(trimmed, LineString) or trimmed.length == 0:
            return None
        return trimmed
