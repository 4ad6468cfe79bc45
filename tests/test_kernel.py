"""
Tests for the planar geometry kernel, rectangle constructor and utilities
"""

import math

import pytest
from shapely.geometry import LineString, Point, Polygon, box

from siteplan.geometry import GeometryResult, GeometryUtils, kernel, oriented_rectangle


def test_union_of_nothing_is_empty():
    result = kernel.union([])
    assert result.ok
    assert result.is_empty


def test_union_overlapping_boxes():
    result = kernel.union([box(0, 0, 10, 10), None, box(5, 0, 15, 10)])
    assert result.ok
    assert result.geometry.area == pytest.approx(150.0)


def test_difference_with_nothing_returns_input():
    a = box(0, 0, 10, 10)
    assert kernel.difference(a, None).geometry is a
    assert kernel.difference(a, Polygon()).geometry is a


def test_difference_removing_everything_is_empty():
    result = kernel.difference(box(0, 0, 10, 10), box(-1, -1, 11, 11))
    assert result.ok
    assert result.is_empty


def test_buffer_line_has_rounded_caps():
    result = kernel.buffer_line(LineString([(0, 0), (10, 0)]), 1.0)
    assert result.ok
    assert result.geometry.area == pytest.approx(20 + math.pi, rel=0.01)


def test_buffer_zero_length_line_fails():
    result = kernel.buffer_line(LineString([(5, 5), (5, 5)]), 1.0)
    assert not result.ok
    assert result.error.operation == "buffer_line"
    assert result.unwrap_or("fallback") == "fallback"


def test_buffer_polygon_inset():
    result = kernel.buffer_polygon(box(0, 0, 10, 10), -2.0)
    assert result.ok
    assert result.geometry.area == pytest.approx(36.0)


def test_buffer_polygon_collapse_is_failure():
    result = kernel.buffer_polygon(box(0, 0, 10, 10), -6.0)
    assert not result.ok
    assert result.error.operation == "buffer_polygon"


def test_longest_interior_segment():
    line = LineString([(-10, 5), (20, 5)])
    result = kernel.longest_interior_segment(line, box(0, 0, 10, 10))
    assert result.ok
    assert result.geometry.length == pytest.approx(10.0)


def test_longest_interior_segment_of_outside_line_fails():
    line = LineString([(20, 20), (30, 30)])
    result = kernel.longest_interior_segment(line, box(0, 0, 10, 10))
    assert not result.ok
    assert "no interior segment" in str(result.error)


def test_longest_interior_segment_picks_longest_piece():
    # U-shaped site: the line crosses both arms (4m each) or the base (20m)
    site = Polygon([(0, 0), (20, 0), (20, 20), (16, 20), (16, 4), (4, 4), (4, 20), (0, 20), (0, 0)])
    arms = kernel.longest_interior_segment(LineString([(-5, 10), (25, 10)]), site)
    base = kernel.longest_interior_segment(LineString([(-5, 2), (25, 2)]), site)
    assert arms.geometry.length == pytest.approx(4.0)
    assert base.geometry.length == pytest.approx(20.0)


def test_touching_boxes_do_not_intersect():
    assert not kernel.intersects(box(0, 0, 10, 10), box(10, 0, 20, 10))
    assert kernel.intersects(box(0, 0, 10, 10), box(9, 0, 20, 10))
    assert not kernel.intersects(box(0, 0, 10, 10), None)


def test_within_requires_a_target():
    assert kernel.within(box(1, 1, 2, 2), box(0, 0, 10, 10))
    assert not kernel.within(box(1, 1, 2, 2), None)
    assert not kernel.within(box(1, 1, 2, 2), Polygon())


def test_rotate_is_counter_clockwise():
    p = kernel.rotate(Point(1, 0), 90, Point(0, 0))
    assert p.x == pytest.approx(0.0, abs=1e-12)
    assert p.y == pytest.approx(1.0)


def test_geometry_result_success():
    result = GeometryResult.success(box(0, 0, 1, 1))
    assert result.ok
    assert result.error is None


def test_oriented_rectangle_east():
    rect = oriented_rectangle((0, 0), 4, 2, 90.0)
    assert rect.bounds == pytest.approx((-2.0, -1.0, 2.0, 1.0))
    assert rect.area == pytest.approx(8.0)


def test_oriented_rectangle_north():
    rect = oriented_rectangle((10, 10), 4, 2, 0.0)
    assert rect.bounds == pytest.approx((9.0, 8.0, 11.0, 12.0))


def test_bearing_and_destination():
    assert GeometryUtils.bearing((0, 0), (0, 10)) == 0.0
    assert GeometryUtils.bearing((0, 0), (-10, 0)) == 270.0
    x, y = GeometryUtils.destination((0, 0), 10, 90.0)
    assert (x, y) == pytest.approx((10.0, 0.0))


def test_nearest_point_on_line():
    line = LineString([(0, 0), (10, 0)])
    point, along = GeometryUtils.nearest_point_on_line(line, (4, 3))
    assert point == pytest.approx((4.0, 0.0))
    assert along == pytest.approx(4.0)


def test_trim_and_extend_line():
    line = LineString([(0, 0), (10, 0)])
    trimmed = GeometryUtils.trim_line(line, 2.0)
    assert trimmed.coords[0] == pytest.approx((2.0, 0.0))
    assert trimmed.coords[-1] == pytest.approx((8.0, 0.0))
    assert GeometryUtils.trim_line(line, 5.0) is None

    extended = GeometryUtils.extend_line_end(line, at_start=False, distance=3.0)
    assert extended.coords[-1] == pytest.approx((13.0, 0.0))
