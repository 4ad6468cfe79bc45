"""
Tests for the local metric frame
"""

import warnings

import pytest
from shapely.geometry import Point, box

from siteplan.geometry import IdentityFrame, LocalFrame, make_frame


def test_frame_centre_maps_to_origin():
    frame = LocalFrame("EPSG:4326", -0.1276, 51.5074)
    p = frame.to_local(Point(-0.1276, 51.5074))
    assert p.x == pytest.approx(0.0, abs=1e-6)
    assert p.y == pytest.approx(0.0, abs=1e-6)


def test_distances_are_metres():
    frame = LocalFrame("EPSG:4326", 0.0, 0.0)
    p = frame.to_local(Point(0.001, 0.0))
    assert p.x == pytest.approx(111.32, rel=1e-3)
    assert p.y == pytest.approx(0.0, abs=1e-6)


def test_round_trip():
    site = box(-0.1280, 51.5070, -0.1270, 51.5078)
    frame = LocalFrame.for_coordinates("EPSG:4326", site.exterior.coords)
    back = frame.to_source(frame.to_local(site))
    for a, b in zip(site.exterior.coords, back.exterior.coords):
        assert a == pytest.approx(b, abs=1e-9)


def test_transforms_emit_no_deprecation_warnings():
    frame = LocalFrame("EPSG:4326", 0.0, 51.5)
    with warnings.catch_warnings():
        warnings.simplefilter("error", DeprecationWarning)
        local = frame.to_local(box(0.0, 51.5, 0.001, 51.501))
        frame.to_source(local)
    assert local.area == pytest.approx(69.4 * 111.3, rel=0.02)


def test_for_coordinates_ignores_closing_vertex():
    coords = [(0.0, 0.0), (2.0, 0.0), (2.0, 2.0), (0.0, 2.0), (0.0, 0.0)]
    frame = LocalFrame.for_coordinates("EPSG:4326", coords)
    assert (frame.ref_lon, frame.ref_lat) == (1.0, 1.0)


def test_coordinate_lists():
    frame = LocalFrame("EPSG:4326", 10.0, 45.0)
    local = frame.coords_to_local([(10.0, 45.0), (10.001, 45.0)])
    source = frame.coords_to_source(local)
    assert source[1] == pytest.approx((10.001, 45.0), abs=1e-9)


def test_local_input_uses_identity_frame():
    frame = make_frame("local", [(0, 0), (1, 1)])
    assert isinstance(frame, IdentityFrame)
    geom = box(0, 0, 1, 1)
    assert frame.to_local(geom) is geom
    assert frame.coords_to_source([(1, 2, 3)]) == [(1, 2)]


def test_geographic_input_uses_local_frame():
    frame = make_frame("EPSG:4326", [(0.0, 0.0), (0.001, 0.001)])
    assert isinstance(frame, LocalFrame)
    assert frame.source_crs == "EPSG:4326"
