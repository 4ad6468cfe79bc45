"""
Edge and alignment analysis

Finds the boundary edge that a spine or housing grid should follow and
which side of that edge faces into the site. Every scan walks edges in
ring order and only replaces the current best on a strict improvement,
so ties always go to the first edge encountered.
"""

from dataclasses import dataclass
from typing import Optional

from loguru import logger
from shapely.geometry import Point
from shapely.geometry.base import BaseGeometry

from ..geometry import kernel
from ..geometry.utils import Coord, Edge, GeometryUtils


@dataclass(frozen=True)
class EdgeInfo:
    """Longest-edge summary"""
    edge_index: int
    bearing: float
    length: float
    edge: Edge


def nearest_edge(boundary: BaseGeometry, point: Coord) -> Optional[Edge]:
    """Boundary edge with the smallest perpendicular distance to point"""
    best = None
    best_distance = float("inf")
    for edge in GeometryUtils.get_polygon_edges(boundary):
        d = GeometryUtils.distance_point_to_line(point, edge.start, edge.end)
        if d < best_distance:
            best_distance = d
            best = edge
    return best


def nearest_edge_bearing(boundary: BaseGeometry, point: Coord) -> Optional[float]:
    """Bearing of the boundary edge closest to point (None for an edgeless boundary)"""
    edge = nearest_edge(boundary, point)
    if edge is None:
        logger.warning("Boundary has no usable edges; no bearing available")
        return None
    return edge.bearing


def longest_edge_info(boundary: BaseGeometry) -> Optional[EdgeInfo]:
    """Longest outer-ring edge, first encountered on ties"""
    best = None
    for edge in GeometryUtils.get_polygon_edges(boundary):
        if best is None or edge.length_m > best.length_m:
            best = edge
    if best is None:
        logger.warning("Boundary has no usable edges; no longest edge")
        return None
    return EdgeInfo(edge_index=best.index, bearing=best.bearing, length=best.length_m, edge=best)


def inward_sign(
    boundary: BaseGeometry,
    edge_midpoint: Coord,
    reference_centroid: Coord,
    alignment_angle: float
) -> int:
    """
    +1 or -1: the side of the alignment edge that faces the centroid

    Works in the frame where the alignment bearing is the +X axis, so
    the sign is the direction of increasing rotated Y toward the site.
    """
    pivot = kernel.centroid(boundary)
    angle = alignment_angle - 90.0
    mid = kernel.rotate(Point(edge_midpoint), angle, pivot)
    ref = kernel.rotate(Point(reference_centroid), angle, pivot)
    return 1 if ref.y >= mid.y else -1


def opposite_edge(boundary: BaseGeometry, direction: Coord) -> Optional[Edge]:
    """Edge whose direction is most opposite to direction (most negative dot product)"""
    best = None
    min_dot = 1.0
    for edge in GeometryUtils.get_polygon_edges(boundary):
        d = GeometryUtils.dot(direction, edge.direction)
        if d < min_dot:
            min_dot = d
            best = edge
    return best
