"""
Oriented rectangle construction
"""

from shapely.geometry import Polygon

from .utils import Coord, GeometryUtils


def oriented_rectangle(center: Coord, width: float, depth: float, bearing: float) -> Polygon:
    """
    Rectangle centred on center, width metres along bearing and depth
    metres across it (bearing + 90)
    """
    ux, uy = GeometryUtils.vector_from_bearing(bearing)
    vx, vy = GeometryUtils.vector_from_bearing(bearing + 90.0)
    hw = width / 2.0
    hd = depth / 2.0
    cx, cy = center

    corners = [
        (cx - ux * hw - vx * hd, cy - uy * hw - vy * hd),
        (cx + ux * hw - vx * hd, cy + uy * hw - vy * hd),
        (cx + ux * hw + vx * hd, cy + uy * hw + vy * hd),
        (cx - ux * hw + vx * hd, cy - uy * hw + vy * hd),
    ]
    return Polygon(corners)
