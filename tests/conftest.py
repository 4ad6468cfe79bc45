"""
Shared fixtures: a 100m square site entered from the south
"""

import pytest
from shapely.geometry import LineString, Polygon, box

from siteplan.config import PlannerConfig


@pytest.fixture
def square_site():
    # Ring order matters for tie-breaks: south, east, north, west
    return Polygon([(0, 0), (100, 0), (100, 100), (0, 100), (0, 0)])


@pytest.fixture
def small_square():
    return Polygon([(0, 0), (10, 0), (10, 10), (0, 10), (0, 0)])


@pytest.fixture
def south_access():
    return LineString([(50, -20), (50, 10)])


@pytest.fixture
def outside_access():
    return LineString([(200, 200), (260, 240)])


@pytest.fixture
def park():
    return box(70, 70, 90, 90)


@pytest.fixture
def planner_config():
    return PlannerConfig()
