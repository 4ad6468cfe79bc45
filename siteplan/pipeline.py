"""
Main Pipeline Orchestrator for Site Layout Generation

One planning pass runs to completion with no shared state:

  1. Input: site boundary, access path, optional exclusions
  2. Project geographic input into a local metric frame
  3. Plan the road network (junction-aligned or dual spine)
  4. Subtract roads and exclusions to get buildable land
  5. Place homes along the spines or on an edge-aligned grid
  6. Compute area and density statistics
  7. Assemble layout.json (projected back to the input CRS)

Re-running with new inputs discards everything from the previous pass.
"""

import json
import os
from typing import Any, Dict, List, Optional

from loguru import logger
from shapely.geometry import LineString, MultiPolygon, Polygon, shape
from shapely.geometry.base import BaseGeometry
from shapely.validation import make_valid

from .config import PlannerConfig, get_config, validate_config
from .errors import InputMissingError, SitePlanError
from .geometry import kernel
from .geometry.projection import IdentityFrame, make_frame
from .geometry.utils import GeometryUtils
from .models import (
    BuildableLand, GeoJSONLineString, GeoJSONPoint, GeoJSONPolygon, HomeFeature,
    LayoutReport, LayoutStatistics, RoadFeature
)
from .planning.buildable import compute_buildable_area, compute_statistics
from .planning.housing import HousingPlacer, resolve_alignment
from .planning.models import FootprintSpec, LayoutResult, RoadNetwork, RoadWidths
from .planning.roads import plan_road_network
from .planning.spines import plan_dual_spine_network, validate_access

# Input feature roles recognised in properties.role
BOUNDARY_ROLE = "boundary"
ACCESS_ROLE = "access"
EXCLUSION_ROLE = "exclusion"


class SitePlanPipeline:
    """
    Main pipeline to generate a site layout from a boundary and access path

    Usage:
        pipeline = SitePlanPipeline()
        result = pipeline.run(boundary, access_path)
        pipeline.save(pipeline.to_report(result), "output/layout.json")
    """

    def __init__(self, config: Optional[PlannerConfig] = None):
        self.config = config or get_config()

    def run(
        self,
        boundary: Optional[BaseGeometry],
        access_path: Optional[LineString] = None,
        exclusions: Optional[List[BaseGeometry]] = None
    ) -> LayoutResult:
        """
        Run one planning pass

        Args:
            boundary: Site polygon in the configured input CRS
            access_path: Access centerline, first point typically outside the site
            exclusions: Parks and other no-build polygons

        Returns:
            LayoutResult in local metres (result.frame maps back to the input CRS)

        Raises:
            InputMissingError: boundary or access path not provided
            ValueError: invalid configuration
        """
        validate_config(self.config)
        boundary, access_path, exclusions = self._check_inputs(boundary, access_path, exclusions)

        coords = [c for ring in GeometryUtils.outer_rings(boundary) for c in ring]
        frame = make_frame(self.config.input_crs, coords)
        boundary = frame.to_local(boundary)
        access_path = frame.to_local(access_path)
        exclusions = [frame.to_local(g) for g in exclusions]

        logger.info(f"Starting site layout for {boundary.area / 10000:.2f} ha site")

        # ============================================================
        # STAGE 1: Road network
        # ============================================================
        logger.info(f"Stage 1: Planning road network ({self.config.road_strategy})...")
        network = self._plan_roads(boundary, access_path)

        # ============================================================
        # STAGE 2: Buildable area
        # ============================================================
        logger.info("Stage 2: Computing buildable area...")
        buildable = compute_buildable_area(boundary, network, exclusions, config=self.config)

        # ============================================================
        # STAGE 3: Housing
        # ============================================================
        logger.info(f"Stage 3: Placing homes ({self.config.placement_strategy})...")
        spec = FootprintSpec.from_config(self.config.housing)
        placer = HousingPlacer(self.config)

        alignment = None
        placement = self.config.placement_strategy
        footprints = []
        if placement == "spine" and network.spines:
            for corridor in network.spines:
                footprints.extend(placer.place_along_spine(
                    corridor.centerline, boundary, buildable.no_build_pieces, spec,
                    road_width_m=corridor.width_m, placed=footprints,
                ))
        else:
            if placement == "spine":
                logger.info("No spine road to build along; falling back to grid placement")
                placement = "grid"
            alignment = resolve_alignment(
                boundary, network.junction, self.config.alignment_mode, self.config.manual_bearing
            )
            footprints = placer.place_grid(buildable, alignment, spec, boundary)

        # ============================================================
        # STAGE 4: Statistics
        # ============================================================
        stats = compute_statistics(boundary, buildable, footprints, network, config=self.config)
        logger.info(
            f"Layout complete: {stats.home_count} homes, "
            f"{stats.density_per_ha:.1f} homes/ha ({stats.net_density_per_ha:.1f} net)"
        )

        return LayoutResult(
            boundary=boundary,
            road_network=network,
            buildable=buildable,
            footprints=footprints,
            stats=stats,
            alignment=alignment,
            placement_strategy=placement,
            access_path=access_path,
            exclusions=exclusions,
            frame=frame,
        )

    def _check_inputs(self, boundary, access_path, exclusions):
        if boundary is None or boundary.is_empty:
            raise InputMissingError("No site boundary provided")
        if not isinstance(boundary, (Polygon, MultiPolygon)):
            raise InputMissingError(f"Site boundary must be a polygon, got {boundary.geom_type}")
        if not boundary.is_valid:
            logger.warning("Site boundary is not valid; repairing it")
            parts = kernel.polygonal_parts(make_valid(boundary))
            if not parts:
                raise InputMissingError("Site boundary has no area after repair")
            boundary = parts[0] if len(parts) == 1 else MultiPolygon(parts)

        if access_path is None or access_path.is_empty:
            raise InputMissingError("No access path provided")
        if not isinstance(access_path, LineString) or len(access_path.coords) < 2:
            raise InputMissingError("Access path must be a line with at least two points")

        kept = []
        for g in exclusions or []:
            if g is None or g.is_empty:
                continue
            if not isinstance(g, (Polygon, MultiPolygon)):
                logger.warning(f"Ignoring {g.geom_type} exclusion; only polygons are supported")
                continue
            kept.append(g)
        return boundary, access_path, kept

    def _plan_roads(self, boundary: BaseGeometry, access_path: LineString) -> RoadNetwork:
        road = self.config.road
        widths = RoadWidths(access_m=road.access_width_m, spine_m=road.spine_width_m)
        if self.config.road_strategy == "dual":
            return plan_dual_spine_network(boundary, access_path, widths, config=self.config)

        if not validate_access(boundary, access_path):
            logger.warning("Access path does not end inside the site")
        return plan_road_network(boundary, access_path, widths, config=self.config)

    # ============================================================
    # Output
    # ============================================================

    def to_report(self, result: LayoutResult, plan_id: Optional[str] = None) -> LayoutReport:
        """Build the output document, projecting geometry back to the input CRS"""
        frame = result.frame or IdentityFrame()
        out = frame.to_source

        boundary = out(result.boundary)
        center = boundary.centroid

        roads = []
        for i, corridor in enumerate(result.road_network.corridors):
            roads.append(RoadFeature(
                id=f"{corridor.kind.value}-{i}",
                kind=corridor.kind.value,
                width_m=corridor.width_m,
                length_m=round(corridor.length_m, 2),
                centerline=_line_to_geojson(out(corridor.centerline)),
                polygons=_polygons_to_geojson(out(corridor.polygon)),
            ))

        homes = []
        for i, fp in enumerate(result.footprints):
            c = out(fp.polygon.centroid)
            homes.append(HomeFeature(
                id=f"home-{i:04d}",
                house_type=fp.house_type,
                side=fp.side,
                width_m=fp.width_m,
                depth_m=fp.depth_m,
                height_m=fp.height_m,
                area_sqm=round(fp.area_m2, 2),
                bearing_deg=round(fp.bearing, 2),
                center=GeoJSONPoint(coordinates=[c.x, c.y]),
                footprint=_polygons_to_geojson(out(fp.polygon))[0],
            ))

        buildable = result.buildable
        stats = result.stats
        alignment = result.alignment

        extra = {"plan_id": plan_id} if plan_id else {}
        return LayoutReport(
            **extra,
            crs=getattr(frame, "source_crs", self.config.input_crs),
            road_strategy=result.road_network.strategy,
            placement_strategy=result.placement_strategy,
            alignment_mode=alignment.mode.value if alignment else None,
            alignment_bearing_deg=round(alignment.bearing, 2) if alignment else None,
            centroid=GeoJSONPoint(coordinates=[center.x, center.y]),
            boundary=_polygons_to_geojson(boundary),
            access_path=_line_to_geojson(out(result.access_path)) if result.access_path is not None else None,
            exclusions=[p for g in result.exclusions for p in _polygons_to_geojson(out(g))],
            roads=roads,
            buildable=BuildableLand(
                area_sqm=round(buildable.area_m2, 1),
                degraded=buildable.degraded,
                polygons=[] if buildable.is_empty else _polygons_to_geojson(out(buildable.geometry)),
            ),
            homes=homes,
            statistics=LayoutStatistics(
                site_area_sqm=stats.site_area_m2,
                site_area_ha=stats.site_area_ha,
                perimeter_m=stats.perimeter_m,
                buildable_area_sqm=stats.buildable_area_m2,
                buildable_area_ha=stats.buildable_area_ha,
                home_count=stats.home_count,
                density_per_ha=stats.density_per_ha,
                net_density_per_ha=stats.net_density_per_ha,
                homes_per_acre=stats.homes_per_acre,
                homes_by_type=dict(stats.homes_by_type),
                average_home_area_sqm=stats.average_home_area_m2,
                road_length_m=stats.road_length_m,
                road_area_sqm=stats.road_area_m2,
                road_coverage_percent=stats.road_coverage_pct,
                development_efficiency_percent=stats.development_efficiency_pct,
            ),
        )

    def save(self, report: LayoutReport, output_path: str) -> str:
        """Save layout report to JSON file"""
        os.makedirs(os.path.dirname(output_path) or ".", exist_ok=True)

        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(report.model_dump(), f, indent=2, ensure_ascii=False)

        logger.info(f"Saved site layout to {output_path}")
        return output_path


def _line_to_geojson(line: LineString) -> GeoJSONLineString:
    return GeoJSONLineString(coordinates=[[c[0], c[1]] for c in line.coords])


def _polygons_to_geojson(geometry: BaseGeometry) -> List[GeoJSONPolygon]:
    """One GeoJSON polygon per polygonal part (exterior then holes)"""
    out = []
    for part in kernel.polygonal_parts(geometry):
        rings = [part.exterior] + list(part.interiors)
        out.append(GeoJSONPolygon(coordinates=[[[c[0], c[1]] for c in ring.coords] for ring in rings]))
    return out


def load_geojson_inputs(path: str) -> Dict[str, Any]:
    """
    Read planner inputs from a GeoJSON FeatureCollection

    Features are matched by properties.role ("boundary", "access",
    "exclusion"). Without roles, the first polygon is the boundary, the
    first line is the access path and any further polygons are
    exclusions. A top-level "crs" string sets the input CRS.

    Returns:
        Dict with boundary, access_path, exclusions and crs (None when absent)
    """
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    if data.get("type") == "FeatureCollection":
        features = data.get("features", [])
    elif data.get("type") == "Feature":
        features = [data]
    else:
        raise SitePlanError(f"{path} is not a GeoJSON Feature or FeatureCollection")

    boundary = None
    access_path = None
    exclusions = []
    for feature in features:
        if not feature.get("geometry"):
            continue
        geom = shape(feature["geometry"])
        role = (feature.get("properties") or {}).get("role")

        if role == BOUNDARY_ROLE or (role is None and boundary is None and isinstance(geom, (Polygon, MultiPolygon))):
            boundary = geom
        elif role == ACCESS_ROLE or (role is None and access_path is None and isinstance(geom, LineString)):
            access_path = geom
        elif role == EXCLUSION_ROLE or (role is None and isinstance(geom, (Polygon, MultiPolygon))):
            exclusions.append(geom)
        else:
            logger.debug(f"Ignoring {geom.geom_type} feature with role {role!r}")

    logger.info(
        f"Loaded inputs from {path}: boundary={'yes' if boundary is not None else 'no'}, "
        f"access={'yes' if access_path is not None else 'no'}, {len(exclusions)} exclusions"
    )
    return {
        "boundary": boundary,
        "access_path": access_path,
        "exclusions": exclusions,
        "crs": data.get("crs") if isinstance(data.get("crs"), str) else None,
    }
