"""
Pydantic models for the site layout output document
"""

from datetime import datetime, timezone
from typing import Dict, List, Literal, Optional
import uuid

from pydantic import BaseModel, Field


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


# ============================================================
# GeoJSON Types
# ============================================================

class GeoJSONPoint(BaseModel):
    type: Literal["Point"] = "Point"
    coordinates: List[float]  # [x, y] or [lon, lat]


class GeoJSONPolygon(BaseModel):
    type: Literal["Polygon"] = "Polygon"
    coordinates: List[List[List[float]]]


class GeoJSONLineString(BaseModel):
    type: Literal["LineString"] = "LineString"
    coordinates: List[List[float]]


# ============================================================
# Layout Features
# ============================================================

class RoadFeature(BaseModel):
    id: str
    kind: Literal["access", "spine"]
    width_m: float
    length_m: float
    centerline: GeoJSONLineString
    polygons: List[GeoJSONPolygon] = Field(default_factory=list)


class HomeFeature(BaseModel):
    id: str
    house_type: str
    side: str  # left / right of a spine, or grid
    width_m: float
    depth_m: float
    height_m: float
    area_sqm: float
    bearing_deg: float
    center: GeoJSONPoint
    footprint: GeoJSONPolygon


class BuildableLand(BaseModel):
    area_sqm: float
    degraded: bool = False
    polygons: List[GeoJSONPolygon] = Field(default_factory=list)


class LayoutStatistics(BaseModel):
    site_area_sqm: float
    site_area_ha: float
    perimeter_m: float
    buildable_area_sqm: float
    buildable_area_ha: float
    home_count: int
    density_per_ha: float
    net_density_per_ha: float
    homes_per_acre: float
    homes_by_type: Dict[str, int] = Field(default_factory=dict)
    average_home_area_sqm: float
    road_length_m: float
    road_area_sqm: float
    road_coverage_percent: float
    development_efficiency_percent: float


# ============================================================
# Main Layout Model
# ============================================================

class LayoutReport(BaseModel):
    """Complete layout document: site, roads, buildable land, homes and statistics"""

    plan_id: str = Field(default_factory=lambda: f"SITE-{datetime.now().strftime('%Y%m%d%H%M%S')}-{str(uuid.uuid4())[:4]}")
    created_at: str = Field(default_factory=_utc_now)
    data_version: str = "1.0"

    crs: str = "local"
    road_strategy: str
    placement_strategy: str
    alignment_mode: Optional[str] = None
    alignment_bearing_deg: Optional[float] = None

    centroid: GeoJSONPoint
    boundary: List[GeoJSONPolygon]
    access_path: Optional[GeoJSONLineString] = None
    exclusions: List[GeoJSONPolygon] = Field(default_factory=list)

    roads: List[RoadFeature] = Field(default_factory=list)
    buildable: BuildableLand
    homes: List[HomeFeature] = Field(default_factory=list)

    statistics: LayoutStatistics
