"""
Housing placement

Fills buildable land with oriented footprints, either in rows along a
spine centerline or in a grid aligned to a boundary edge. Both
strategies are deterministic and only emit footprints that lie wholly
inside the allowed area and clear of every road and exclusion.
"""

import math
from typing import List, Optional, Sequence, Union

import numpy as np
from loguru import logger
from shapely.geometry import LineString, Point
from shapely.geometry.base import BaseGeometry
from shapely.prepared import prep

from ..analysis.alignment import inward_sign, longest_edge_info, nearest_edge
from ..config import PlannerConfig, get_config
from ..geometry import kernel
from ..geometry.rectangle import oriented_rectangle
from ..geometry.utils import Coord, GeometryUtils
from .models import Alignment, AlignmentMode, BuildableArea, Footprint, FootprintSpec


def resolve_alignment(
    boundary: BaseGeometry,
    junction: Optional[Coord] = None,
    mode: str = "nearest",
    manual_bearing: Optional[float] = None
) -> Alignment:
    """
    Pick the grid bearing and the reference edge rows are measured from

    nearest: edge closest to the access junction (longest when there is
    no junction). longest: longest outer edge. manual: the given bearing
    with no reference edge.
    """
    mode = AlignmentMode(mode)

    if mode == AlignmentMode.MANUAL:
        if manual_bearing is None:
            raise ValueError("manual alignment requires a bearing")
        return Alignment(mode=mode, bearing=GeometryUtils.normalize_bearing(manual_bearing))

    if mode == AlignmentMode.NEAREST:
        if junction is not None:
            edge = nearest_edge(boundary, junction)
            if edge is not None:
                return Alignment(mode=mode, bearing=edge.bearing, reference_edge=edge)
        logger.info("No access junction for nearest-edge alignment; using the longest edge")
        mode = AlignmentMode.LONGEST

    info = longest_edge_info(boundary)
    if info is None:
        logger.warning("Boundary has no usable edges; aligning the grid due east")
        return Alignment(mode=AlignmentMode.MANUAL, bearing=90.0)
    return Alignment(mode=mode, bearing=info.bearing, reference_edge=info.edge)


class HousingPlacer:
    """Places footprints along spines or on an edge-aligned grid"""

    def __init__(self, config: Optional[PlannerConfig] = None):
        self.config = config or get_config()
        self.housing = self.config.housing

    def place_along_spine(
        self,
        centerline: LineString,
        boundary: BaseGeometry,
        no_build: Union[None, BaseGeometry, Sequence[BaseGeometry]],
        spec: FootprintSpec,
        road_width_m: float = 0.0,
        placed: Optional[List[Footprint]] = None
    ) -> List[Footprint]:
        """
        One footprint each side of the spine at every station

        Stations run from half a lot pitch to length minus half a lot
        pitch. Footprints face the spine, set back from the road edge.

        Args:
            centerline: Spine centerline
            boundary: Site polygon every footprint must lie within
            no_build: Roads and exclusions footprints must not overlap, merged
                or as separate pieces
            spec: Footprint size and spacing
            road_width_m: Spine carriageway width (0 offsets from the centerline)
            placed: Footprints already accepted in this pass

        Returns:
            Accepted footprints, left side before right at each station
        """
        placed = list(placed or [])
        if no_build is None:
            no_build = []
        elif isinstance(no_build, BaseGeometry):
            no_build = [no_build]
        length = centerline.length
        pitch = spec.lot_pitch_m
        if length < pitch:
            logger.info(f"Spine of {length:.1f}m is shorter than one lot pitch ({pitch:.1f}m)")
            return []

        offset = road_width_m / 2.0 + spec.front_setback_m + spec.depth_m / 2.0
        window = min(
            max(length * self.housing.tangent_window_fraction, self.housing.tangent_window_min_m),
            self.housing.tangent_window_max_m,
        )
        stations = np.arange(0.5 * pitch, length - 0.5 * pitch + 1e-9, max(1.0, pitch))

        footprints = []
        rejected = 0
        for station in stations:
            station = float(station)
            ahead = GeometryUtils.point_at_distance(centerline, station + window / 2)
            behind = GeometryUtils.point_at_distance(centerline, station - window / 2)
            if ahead == behind:
                continue
            tangent = GeometryUtils.bearing(behind, ahead)
            anchor = GeometryUtils.point_at_distance(centerline, station)

            for side, turn in (("left", -90.0), ("right", 90.0)):
                center = GeometryUtils.destination(anchor, offset, tangent + turn)
                footprint = Footprint(
                    center=center,
                    width_m=spec.width_m,
                    depth_m=spec.depth_m,
                    bearing=tangent,
                    house_type=spec.house_type,
                    side=side,
                    height_m=spec.height_m,
                )
                if self._accept_spine_footprint(footprint, boundary, no_build, placed):
                    footprints.append(footprint)
                    placed.append(footprint)
                else:
                    rejected += 1

        logger.info(f"Placed {len(footprints)} homes along a {length:.0f}m spine ({rejected} rejected)")
        return footprints

    def _accept_spine_footprint(
        self,
        footprint: Footprint,
        boundary: BaseGeometry,
        no_build: Sequence[BaseGeometry],
        placed: List[Footprint]
    ) -> bool:
        if not kernel.within(footprint.polygon, boundary):
            logger.debug(f"{footprint.side} home at {footprint.center} rejected: outside site")
            return False
        if any(kernel.intersects(footprint.polygon, part) for part in no_build):
            logger.debug(f"{footprint.side} home at {footprint.center} rejected: overlaps road or exclusion")
            return False
        for other in placed:
            if kernel.intersects(footprint.polygon, other.polygon):
                logger.debug(f"{footprint.side} home at {footprint.center} rejected: overlaps another home")
                return False
        return True

    def place_grid(
        self,
        buildable: BuildableArea,
        alignment: Alignment,
        spec: FootprintSpec,
        boundary: Optional[BaseGeometry] = None
    ) -> List[Footprint]:
        """
        Rows of footprints aligned to a boundary edge

        The buildable area is inset so whole rectangles fit, rotated so
        the alignment bearing is the +X axis, and swept row by row from
        the reference edge inward. Kept cells are rotated back.

        Args:
            buildable: Land left after roads and exclusions
            alignment: Grid bearing and optional reference edge
            spec: Footprint size and spacing
            boundary: Site polygon used for the inward side (defaults to buildable)

        Returns:
            Footprints in row-major order from the reference edge
        """
        if buildable.is_empty:
            logger.info("No buildable area; no homes placed")
            return []

        area = buildable.geometry
        boundary = boundary if boundary is not None else area

        inset_distance = max(spec.width_m, spec.depth_m) / 2.0 + spec.edge_margin_m
        inset = kernel.buffer_polygon(area, -inset_distance)
        if inset.ok:
            placement = inset.geometry
        else:
            logger.warning(f"Inset of buildable area failed ({inset.error}); placing within it directly")
            placement = area

        pivot = kernel.centroid(placement)
        to_frame = alignment.bearing - 90.0
        rotated = kernel.rotate(placement, to_frame, pivot)
        min_x, min_y, max_x, max_y = rotated.bounds
        region = prep(rotated)

        ys = self._row_centers(alignment, boundary, pivot, to_frame, spec, min_y, max_y)
        col_step = spec.lot_pitch_m
        n_cols = int(math.floor((max_x - min_x) / col_step)) + 1

        cells = n_cols * len(ys)
        if cells > self.housing.max_grid_cells:
            scale = math.sqrt(cells / self.housing.max_grid_cells)
            logger.warning(f"Grid of {cells} cells exceeds {self.housing.max_grid_cells}; coarsening by {scale:.2f}")
            col_step *= scale
            n_cols = int(math.floor((max_x - min_x) / col_step)) + 1
            ys = ys[::int(math.ceil(scale))]
        xs = min_x + col_step / 2.0 + np.arange(n_cols) * col_step

        footprints = []
        for cy in ys:
            for cx in xs:
                cx, cy = float(cx), float(cy)
                cell = oriented_rectangle((cx, cy), spec.width_m, spec.depth_m, 90.0)
                if not region.contains(cell):
                    continue
                back = kernel.rotate(Point(cx, cy), -to_frame, pivot)
                footprint = Footprint(
                    center=(back.x, back.y),
                    width_m=spec.width_m,
                    depth_m=spec.depth_m,
                    bearing=alignment.bearing,
                    house_type=spec.house_type,
                    side="grid",
                    height_m=spec.height_m,
                )
                if not kernel.within(footprint.polygon, area) or buildable.overlaps_no_build(footprint.polygon):
                    logger.debug(f"Grid cell at ({cx:.1f}, {cy:.1f}) rejected after rotating back")
                    continue
                footprints.append(footprint)

        logger.info(
            f"Placed {len(footprints)} homes on a {alignment.bearing:.1f}° grid "
            f"({len(ys)} rows x {n_cols} columns)"
        )
        return footprints

    def _row_centers(
        self,
        alignment: Alignment,
        boundary: BaseGeometry,
        pivot: Point,
        to_frame: float,
        spec: FootprintSpec,
        min_y: float,
        max_y: float
    ) -> List[float]:
        """Row centre Y values in the rotated frame, nearest the reference edge first"""
        pitch = spec.row_pitch_m
        edge = alignment.reference_edge
        if edge is None:
            start = min_y + pitch / 2.0
            count = int(math.floor((max_y - start + spec.depth_m / 2.0) / pitch)) + 1
            return [start + i * pitch for i in range(max(count, 0))]

        site_center = kernel.centroid(boundary)
        sign = inward_sign(boundary, edge.midpoint, (site_center.x, site_center.y), alignment.bearing)
        mid = kernel.rotate(Point(edge.midpoint), to_frame, pivot)
        start = mid.y + sign * (spec.depth_m / 2.0 + spec.edge_margin_m)

        far = max_y if sign > 0 else min_y
        span = (far - start) * sign + spec.depth_m / 2.0
        if span < 0:
            return []
        count = int(math.floor(span / pitch)) + 1
        return [start + sign * i * pitch for i in range(count)]


def place_housing_grid(
    buildable: BuildableArea,
    alignment: Alignment,
    spec: FootprintSpec,
    boundary: Optional[BaseGeometry] = None,
    config: Optional[PlannerConfig] = None
) -> List[Footprint]:
    """Edge-aligned grid of footprints over the buildable area"""
    return HousingPlacer(config).place_grid(buildable, alignment, spec, boundary)


def place_housing_along_spine(
    centerline: LineString,
    boundary: BaseGeometry,
    no_build: Union[None, BaseGeometry, Sequence[BaseGeometry]],
    spec: FootprintSpec,
    road_width_m: float = 0.0,
    placed: Optional[List[Footprint]] = None,
    config: Optional[PlannerConfig] = None
) -> List[Footprint]:
    """Footprints both sides of a spine centerline"""
    return HousingPlacer(config).place_along_spine(centerline, boundary, no_build, spec, road_width_m, placed)
