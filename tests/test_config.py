"""
Tests for configuration validation
"""

import pytest

from siteplan.config import (
    HOUSE_TYPES,
    DualSpineConfig,
    HousingConfig,
    PlannerConfig,
    RoadConfig,
    get_config,
    validate_config,
)


def test_defaults_are_valid():
    config = PlannerConfig()
    validate_config(config)
    assert config.road.access_width_m == 8.0
    assert config.road.spine_width_m == 6.0
    assert config.road_strategy == "junction"
    assert config.placement_strategy == "spine"


def test_global_config():
    assert isinstance(get_config(), PlannerConfig)
    validate_config(get_config())


def test_house_presets():
    assert (HOUSE_TYPES["standard"].width_m, HOUSE_TYPES["standard"].depth_m) == (6.5, 10.0)
    assert (HOUSE_TYPES["large"].width_m, HOUSE_TYPES["large"].depth_m) == (12.0, 18.0)


def test_errors_are_collected():
    config = PlannerConfig(
        placement_strategy="scatter",
        road=RoadConfig(access_width_m=0),
        housing=HousingConfig(house_type="castle", side_gap_m=-1),
    )
    with pytest.raises(ValueError) as exc:
        validate_config(config)
    message = str(exc.value)
    assert message.startswith("Configuration validation failed:")
    assert "placement_strategy" in message
    assert "road.access_width_m" in message
    assert "housing.house_type" in message
    assert "housing.side_gap_m" in message


def test_manual_alignment_needs_bearing():
    with pytest.raises(ValueError, match="manual_bearing"):
        validate_config(PlannerConfig(alignment_mode="manual"))
    validate_config(PlannerConfig(alignment_mode="manual", manual_bearing=30.0))


def test_dual_spine_settings_checked():
    with pytest.raises(ValueError, match="ray_step_m"):
        validate_config(PlannerConfig(dual_spine=DualSpineConfig(ray_step_m=0)))
    with pytest.raises(ValueError, match="second_spine_edge_fraction"):
        validate_config(PlannerConfig(dual_spine=DualSpineConfig(second_spine_edge_fraction=1.5)))


def test_spine_orientation_checked():
    with pytest.raises(ValueError, match="spine_orientation"):
        validate_config(PlannerConfig(road=RoadConfig(spine_orientation="diagonal")))
