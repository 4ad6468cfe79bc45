"""
Local metric frame for geographic inputs

Boundaries drawn on a map arrive as [lon, lat]. The planner works in
metres, so inputs are projected into an azimuthal equidistant frame
centred on the site and outputs are projected back.
"""

from typing import List, Sequence, Tuple

from loguru import logger
from pyproj import CRS, Transformer
import shapely
from shapely.geometry.base import BaseGeometry

LOCAL_CRS = "local"


class LocalFrame:
    """Bidirectional transform between a source CRS and site-local metres"""

    def __init__(self, source_crs: str, ref_lon: float, ref_lat: float):
        self.source_crs = source_crs
        self.ref_lon = ref_lon
        self.ref_lat = ref_lat

        local = CRS.from_proj4(
            f"+proj=aeqd +lat_0={ref_lat} +lon_0={ref_lon} +x_0=0 +y_0=0 +ellps=WGS84 +units=m +no_defs"
        )
        self._to_local = Transformer.from_crs(source_crs, local, always_xy=True)
        self._to_source = Transformer.from_crs(local, source_crs, always_xy=True)

    @classmethod
    def for_coordinates(cls, source_crs: str, coords: Sequence[Sequence[float]]) -> "LocalFrame":
        """Frame centred on the vertex mean of a coordinate list (closing vertex ignored)"""
        points = list(coords)
        if len(points) > 1 and list(points[0]) == list(points[-1]):
            points = points[:-1]
        ref_lon = sum(p[0] for p in points) / len(points)
        ref_lat = sum(p[1] for p in points) / len(points)
        logger.debug(f"Local frame centred on ({ref_lon:.6f}, {ref_lat:.6f})")
        return cls(source_crs, ref_lon, ref_lat)

    def to_local(self, geometry: BaseGeometry) -> BaseGeometry:
        return shapely.transform(geometry, self._to_local.transform, interleaved=False)

    def to_source(self, geometry: BaseGeometry) -> BaseGeometry:
        return shapely.transform(geometry, self._to_source.transform, interleaved=False)

    def coords_to_local(self, coords: Sequence[Sequence[float]]) -> List[Tuple[float, float]]:
        return [self._to_local.transform(c[0], c[1]) for c in coords]

    def coords_to_source(self, coords: Sequence[Sequence[float]]) -> List[Tuple[float, float]]:
        return [self._to_source.transform(c[0], c[1]) for c in coords]


class IdentityFrame:
    """Stand-in frame for inputs already in planar metres"""

    source_crs = LOCAL_CRS

    def to_local(self, geometry: BaseGeometry) -> BaseGeometry:
        return geometry

    def to_source(self, geometry: BaseGeometry) -> BaseGeometry:
        return geometry

    def coords_to_local(self, coords):
        return [(c[0], c[1]) for c in coords]

    def coords_to_source(self, coords):
        return [(c[0], c[1]) for c in coords]


def make_frame(source_crs: str, boundary_coords: Sequence[Sequence[float]]):
    """LocalFrame for geographic/projected input, IdentityFrame for local metres"""
    if source_crs == LOCAL_CRS:
        return IdentityFrame()
    return LocalFrame.for_coordinates(source_crs, boundary_coords)
