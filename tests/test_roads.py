"""
Tests for the junction-aligned road network planner
"""

import pytest
from shapely.geometry import LineString

from siteplan.config import PlannerConfig, RoadConfig
from siteplan.geometry import GeometryResult, kernel
from siteplan.planning import (
    CorridorKind,
    FootprintSpec,
    RoadNetworkPlanner,
    RoadWidths,
    compute_buildable_area,
    place_housing_grid,
    plan_dual_spine_network,
    plan_road_network,
    resolve_alignment,
)
from siteplan.planning.roads import build_corridor, clip_access


def test_clip_access_keeps_interior_piece(square_site, south_access):
    clipped, inside = clip_access(south_access, square_site)
    assert inside
    ys = sorted(c[1] for c in clipped.coords)
    assert ys == pytest.approx([0.0, 10.0])


def test_clip_access_falls_back_to_raw_path(square_site, outside_access):
    line, inside = clip_access(outside_access, square_site)
    assert line is outside_access
    assert not inside


def test_scenario_access_and_spine(square_site, south_access):
    network = plan_road_network(square_site, south_access, RoadWidths(access_m=8, spine_m=6))

    assert network.strategy == "junction"
    assert network.junction == pytest.approx((50.0, 10.0))
    assert len(network.corridors) == 2
    assert network.merged is not None

    access = network.access
    assert access.kind == CorridorKind.ACCESS
    assert access.width_m == 8
    minx, miny, maxx, maxy = access.polygon.bounds
    assert (minx, maxx) == pytest.approx((46.0, 54.0))
    assert miny == pytest.approx(0.0)
    # Extended 4.8m past the junction, plus the 4m round cap
    assert maxy == pytest.approx(18.8, abs=0.01)

    [spine] = network.spines
    assert spine.width_m == 6
    xs = {round(c[0], 6) for c in spine.centerline.coords}
    ys = sorted(c[1] for c in spine.centerline.coords)
    # Perpendicular to the southern edge, through the junction, 3m clear of each end
    assert xs == {50.0}
    assert ys == pytest.approx([3.0, 97.0])
    assert spine.polygon.bounds == pytest.approx((47.0, 0.0, 53.0, 100.0), abs=0.01)


def test_access_outside_site_gives_no_corridors(square_site, outside_access):
    network = plan_road_network(square_site, outside_access)
    assert network.is_empty
    assert network.corridors == []
    assert network.merged is None
    assert network.polygons == []


def test_aligned_spine_runs_along_nearest_edge(square_site, south_access):
    config = PlannerConfig(road=RoadConfig(spine_orientation="aligned"))
    network = RoadNetworkPlanner(config).plan(square_site, south_access)
    [spine] = network.spines
    ys = {round(c[1], 6) for c in spine.centerline.coords}
    xs = sorted(c[0] for c in spine.centerline.coords)
    assert ys == {10.0}
    assert xs == pytest.approx([3.0, 97.0])


def test_end_clearance_override(square_site, south_access):
    config = PlannerConfig(road=RoadConfig(end_clearance_m=10.0))
    network = RoadNetworkPlanner(config).plan(square_site, south_access)
    [spine] = network.spines
    assert spine.length_m == pytest.approx(80.0)


def test_spine_too_short_for_clearance_is_dropped(small_square):
    access = LineString([(5, -5), (5, 2)])
    config = PlannerConfig(road=RoadConfig(end_clearance_m=6.0))
    network = RoadNetworkPlanner(config).plan(small_square, access)
    assert network.spines == []
    assert network.access is not None


def test_pick_junction_prefers_end_nearer_centroid(square_site):
    planner = RoadNetworkPlanner()
    assert planner.pick_junction(LineString([(50, 0), (50, 10)]), square_site) == (50.0, 10.0)
    assert planner.pick_junction(LineString([(50, 10), (50, 0)]), square_site) == (50.0, 10.0)


def test_build_corridor_drops_zero_length_line(square_site):
    corridor = build_corridor(CorridorKind.SPINE, LineString([(5, 5), (5, 5)]), 6.0, square_site)
    assert corridor is None


def test_plan_is_repeatable(square_site, south_access):
    first = plan_road_network(square_site, south_access)
    second = plan_road_network(square_site, south_access)
    assert first.merged.equals(second.merged)
    assert [c.centerline.coords[:] for c in first.corridors] == [c.centerline.coords[:] for c in second.corridors]


def test_access_running_just_outside_frontage_gives_no_corridors(square_site):
    # 2m south of the site, closer than half an access width
    frontage = LineString([(-10, -2), (110, -2)])
    assert not kernel.longest_interior_segment(frontage, square_site).ok

    network = plan_road_network(square_site, frontage)
    assert network.corridors == []
    assert network.merged is None

    dual = plan_dual_spine_network(square_site, frontage)
    assert dual.corridors == []

    buildable = compute_buildable_area(square_site, network)
    assert buildable.area_m2 == pytest.approx(10000.0)


def test_union_failure_keeps_unmerged_corridors(square_site, south_access, monkeypatch):
    monkeypatch.setattr(kernel, "union", lambda geometries: GeometryResult.failure("union", "boom"))

    network = plan_road_network(square_site, south_access)
    assert network.merged is None
    assert len(network.corridors) == 2
    assert len(network.polygons) == len(network.corridors)

    buildable = compute_buildable_area(square_site, network)
    assert buildable.degraded
    assert len(buildable.no_build_parts) == 2

    alignment = resolve_alignment(square_site, network.junction, "nearest")
    footprints = place_housing_grid(buildable, alignment, FootprintSpec(), square_site)
    assert footprints
    for fp in footprints:
        assert not any(kernel.intersects(fp.polygon, piece) for piece in network.polygons)
