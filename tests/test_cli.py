"""
Tests for the command-line interface
"""

import json

import pytest
from loguru import logger

import cli


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    logger.remove()


@pytest.fixture
def site_file(tmp_path):
    doc = {
        "type": "FeatureCollection",
        "features": [
            {"type": "Feature", "properties": {"role": "boundary"},
             "geometry": {"type": "Polygon", "coordinates": [[[0, 0], [100, 0], [100, 100], [0, 100], [0, 0]]]}},
            {"type": "Feature", "properties": {"role": "access"},
             "geometry": {"type": "LineString", "coordinates": [[50, -20], [50, 10]]}},
        ],
    }
    path = tmp_path / "site.geojson"
    path.write_text(json.dumps(doc), encoding="utf-8")
    return path


def test_generate_and_summary(tmp_path, site_file, capsys):
    out = tmp_path / "layout.json"
    assert cli.main(["generate", "-i", str(site_file), "-o", str(out), "--plan-id", "SITE-CLI"]) == 0
    assert out.exists()

    data = json.loads(out.read_text(encoding="utf-8"))
    assert data["plan_id"] == "SITE-CLI"
    assert data["statistics"]["home_count"] == 22

    capsys.readouterr()
    assert cli.main(["summary", "-i", str(out)]) == 0
    summary = json.loads(capsys.readouterr().out)
    assert summary["homes"] == 22
    assert summary["roads"] == 2
    assert summary["road_strategy"] == "junction"


def test_generate_defaults_to_output_dir(tmp_path, site_file, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert cli.main(["generate", "-i", str(site_file)]) == 0
    written = list((tmp_path / "output").glob("layout_*.json"))
    assert len(written) == 1


def test_generate_with_options(tmp_path, site_file, capsys):
    out = tmp_path / "grid.json"
    code = cli.main([
        "generate", "-i", str(site_file), "-o", str(out),
        "--road-strategy", "dual", "--placement", "grid", "--house-type", "t1", "--summary",
    ])
    assert code == 0
    summary = json.loads(capsys.readouterr().out)
    assert summary["road_strategy"] == "dual"
    assert summary["placement_strategy"] == "grid"
    assert set(summary["homes_by_type"]) == {"t1"}


def test_manual_bearing_switches_alignment(site_file):
    class Args:
        road_strategy = "junction"
        placement = "grid"
        alignment = "nearest"
        bearing = 30.0
        crs = None
        access_width = 8.0
        spine_width = 6.0
        house_type = "standard"

    config = cli.build_config(Args, input_crs="EPSG:4326")
    assert config.alignment_mode == "manual"
    assert config.manual_bearing == 30.0
    assert config.input_crs == "EPSG:4326"


def test_generate_missing_access(tmp_path):
    doc = {"type": "FeatureCollection", "features": [
        {"type": "Feature", "properties": {},
         "geometry": {"type": "Polygon", "coordinates": [[[0, 0], [10, 0], [10, 10], [0, 10], [0, 0]]]}},
    ]}
    path = tmp_path / "no_access.geojson"
    path.write_text(json.dumps(doc), encoding="utf-8")
    assert cli.main(["generate", "-i", str(path), "-o", str(tmp_path / "x.json")]) == 1
    assert not (tmp_path / "x.json").exists()


def test_missing_files(tmp_path):
    assert cli.main(["generate", "-i", str(tmp_path / "nope.geojson")]) == 1
    assert cli.main(["summary", "-i", str(tmp_path / "nope.json")]) == 1


def test_summary_rejects_other_json(tmp_path):
    path = tmp_path / "other.json"
    path.write_text(json.dumps({"hello": "world"}), encoding="utf-8")
    assert cli.main(["summary", "-i", str(path)]) == 1


def test_no_command_prints_help(capsys):
    assert cli.main([]) == 1
