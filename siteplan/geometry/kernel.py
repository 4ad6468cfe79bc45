"""
Planar geometry kernel

Thin adapter over shapely. Boolean and buffering operations never raise
on degenerate input; they return a GeometryResult so every call site can
choose its own fallback.
"""

from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Union

from loguru import logger
from shapely import affinity
from shapely.errors import GEOSException
from shapely.geometry import (
    GeometryCollection, LineString, MultiPolygon, Point, Polygon
)
from shapely.geometry.base import BaseGeometry
from shapely.ops import split, unary_union

from ..errors import GeometryError

Pivot = Union[Point, tuple, str]


@dataclass(frozen=True)
class GeometryResult:
    """Outcome of a kernel operation: a geometry or the error that prevented it"""
    geometry: Optional[BaseGeometry] = None
    error: Optional[GeometryError] = None

    @classmethod
    def success(cls, geometry: BaseGeometry) -> "GeometryResult":
        return cls(geometry=geometry)

    @classmethod
    def failure(cls, operation: str, message: str) -> "GeometryResult":
        return cls(error=GeometryError(operation, message))

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def is_empty(self) -> bool:
        return self.geometry is None or self.geometry.is_empty

    def unwrap_or(self, fallback):
        """The geometry if the operation succeeded, otherwise fallback"""
        return self.geometry if self.ok else fallback


def _run(operation: str, fn: Callable[[], BaseGeometry]) -> GeometryResult:
    try:
        return GeometryResult.success(fn())
    except (GEOSException, ValueError) as e:
        logger.debug(f"{operation} failed: {e}")
        return GeometryResult.failure(operation, str(e))


def polygonal_parts(geometry: Optional[BaseGeometry]) -> List[Polygon]:
    """Non-empty polygons contained in a geometry (collections are flattened)"""
    if geometry is None or geometry.is_empty:
        return []
    if isinstance(geometry, Polygon):
        return [geometry]
    if isinstance(geometry, (MultiPolygon, GeometryCollection)):
        parts = []
        for g in geometry.geoms:
            parts.extend(polygonal_parts(g))
        return parts
    return []


def _polygonal(geometry: BaseGeometry) -> BaseGeometry:
    parts = polygonal_parts(geometry)
    if not parts:
        return Polygon()
    if len(parts) == 1:
        return parts[0]
    return MultiPolygon(parts)


def union(geometries: Iterable[Optional[BaseGeometry]]) -> GeometryResult:
    """Union of all non-empty geometries (empty polygon when there are none)"""
    items = [g for g in geometries if g is not None and not g.is_empty]
    if not items:
        return GeometryResult.success(Polygon())
    return _run("union", lambda: _polygonal(unary_union(items)))


def difference(a: BaseGeometry, b: Optional[BaseGeometry]) -> GeometryResult:
    if b is None or b.is_empty:
        return GeometryResult.success(a)
    return _run("difference", lambda: _polygonal(a.difference(b)))


def intersect(a: BaseGeometry, b: BaseGeometry) -> GeometryResult:
    return _run("intersect", lambda: _polygonal(a.intersection(b)))


def buffer_line(line: LineString, half_width: float) -> GeometryResult:
    """Corridor polygon around a centerline, with rounded caps"""
    if line is None or line.is_empty or line.length == 0:
        return GeometryResult.failure("buffer_line", "zero-length line")
    if half_width <= 0:
        return GeometryResult.failure("buffer_line", f"non-positive half width {half_width}")
    return _run("buffer_line", lambda: line.buffer(half_width, cap_style="round", join_style="round"))


def buffer_polygon(polygon: BaseGeometry, distance: float) -> GeometryResult:
    """
    Offset a polygon outward (positive) or inward (negative)

    An inset that collapses the polygon is reported as a failure, since
    the caller asked for an area and got none.
    """
    if polygon is None or polygon.is_empty:
        return GeometryResult.failure("buffer_polygon", "empty input")

    def _buffer():
        buffered = polygon.buffer(distance, join_style="mitre")
        result = _polygonal(buffered)
        if result.is_empty:
            raise ValueError(f"buffer by {distance} collapsed the polygon")
        return result

    return _run("buffer_polygon", _buffer)


def split_line_by_polygon(line: LineString, polygon: BaseGeometry) -> GeometryResult:
    """Split a line wherever it crosses the polygon outline"""
    if line is None or line.is_empty or line.length == 0:
        return GeometryResult.failure("split", "zero-length line")
    return _run("split", lambda: split(line, polygon.boundary))


def longest_interior_segment(line: LineString, polygon: BaseGeometry) -> GeometryResult:
    """
    Split a line by a polygon and keep the longest piece whose midpoint
    lies inside the polygon (first found on ties)
    """
    pieces = split_line_by_polygon(line, polygon)
    if not pieces.ok:
        return pieces

    best = None
    for piece in getattr(pieces.geometry, "geoms", [pieces.geometry]):
        if not isinstance(piece, LineString) or piece.length == 0:
            continue
        midpoint = piece.interpolate(0.5, normalized=True)
        if not polygon.contains(midpoint):
            continue
        if best is None or piece.length > best.length:
            best = piece

    if best is None:
        return GeometryResult.failure("clip", "no interior segment")
    return GeometryResult.success(best)


def rotate(geometry: BaseGeometry, angle: float, pivot: Pivot) -> BaseGeometry:
    """Rotate counter-clockwise by angle degrees about pivot"""
    return affinity.rotate(geometry, angle, origin=pivot)


def within(a: BaseGeometry, b: Optional[BaseGeometry]) -> bool:
    """a lies entirely inside b; False on any failure"""
    if b is None or b.is_empty:
        return False
    try:
        return a.within(b)
    except GEOSException as e:
        logger.warning(f"within test failed, treating as outside: {e}")
        return False


def intersects(a: BaseGeometry, b: Optional[BaseGeometry]) -> bool:
    """a and b share interior area; True on any failure"""
    if b is None or b.is_empty:
        return False
    try:
        return a.intersects(b) and not a.touches(b)
    except GEOSException as e:
        logger.warning(f"intersects test failed, treating as overlapping: {e}")
        return True


def area(geometry: Optional[BaseGeometry]) -> float:
    return 0.0 if geometry is None else geometry.area


def centroid(geometry: BaseGeometry) -> Point:
    return geometry.centroid
