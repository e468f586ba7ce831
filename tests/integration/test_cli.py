"""
Integration tests for the rabcalc command line.
"""

import json
import logging

import pytest

from rabcalc.bootstrap.entrypoints import cli_main


@pytest.fixture(autouse=True)
def isolated(tmp_path, monkeypatch):
    """Run from an empty directory and restore root logging afterwards."""
    monkeypatch.chdir(tmp_path)
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def write_request(tmp_path, data):
    path = tmp_path / "request.json"
    path.write_text(json.dumps(data))
    return str(path)


def output(capsys):
    return json.loads(capsys.readouterr().out)


class TestEstimateCommands:
    """volume and footplate commands."""

    def test_footplate(self, tmp_path, capsys):
        path = write_request(tmp_path, {
            "name": "F1", "length_m": 2, "width_m": 2, "thickness_mm": 300,
        })
        assert cli_main(["footplate", path]) == 0
        data = output(capsys)
        assert data["name"] == "F1"
        assert [s["name"] for s in data["sub_works"]] == ["Beton", "Bekisting", "Besi"]

    def test_volume(self, tmp_path, capsys):
        path = write_request(tmp_path, {
            "shape": {"kind": "cylinder", "radius": "", "height": 3},
            "productivity": 2,
        })
        assert cli_main(["volume", path]) == 0
        assert output(capsys)["base_quantity"] == 0.0

    def test_beam(self, tmp_path, capsys):
        path = write_request(tmp_path, {
            "name": "B1", "length_m": 4, "width_m": 0.25, "height_m": 0.4,
        })
        assert cli_main(["beam", path, "--final"]) == 0
        data = output(capsys)
        assert [s["name"] for s in data["sub_works"]] == ["Beton", "Bekisting", "Besi"]
        assert data["details"]["reinforcement"]["stirrups"]["count"] == 28

    def test_wall(self, tmp_path, capsys):
        path = write_request(tmp_path, {"area_m2": 10, "preset": "batako"})
        assert cli_main(["wall", path]) == 0
        data = output(capsys)
        assert data["name"] == "Pasangan Bata"
        assert data["materials"][0]["name"] == "Batako"

    def test_plaster(self, tmp_path, capsys):
        path = write_request(tmp_path, {"area_m2": 30, "productivity": 10})
        assert cli_main(["plaster", path]) == 0
        data = output(capsys)
        assert data["duration_mode"] == "sequential"
        assert len(data["sub_works"]) == 3

    def test_wall_final_rejected(self, tmp_path, capsys):
        path = write_request(tmp_path, {"preset": "bata_emas"})
        assert cli_main(["wall", path, "--final"]) == 2
        fields = [e["field"] for e in output(capsys)["errors"]]
        assert fields == ["area_m2", "preset"]

    def test_final_rejected(self, tmp_path, capsys):
        path = write_request(tmp_path, {"name": "F2"})
        assert cli_main(["footplate", path, "--final"]) == 2
        data = output(capsys)
        assert data["code"] == 9001
        assert "length_m" in [e["field"] for e in data["errors"]]

    def test_invalid_json_shape(self, tmp_path, capsys):
        path = write_request(tmp_path, {"shape": {"kind": "torus"}})
        assert cli_main(["volume", path]) == 2
        assert "errors" in output(capsys)

    def test_calculation_error(self, tmp_path, capsys):
        path = write_request(tmp_path, {
            "length_m": 2, "width_m": 2, "thickness_mm": 300, "concrete_grade": "K-999",
        })
        assert cli_main(["footplate", path]) == 1
        assert output(capsys)["error"]["field"] == "concrete_grade"

    def test_missing_file(self, tmp_path):
        assert cli_main(["volume", str(tmp_path / "missing.json")]) == 2


class TestCoverageCommands:
    """brick-coverage, tile-coverage and presets."""

    def test_brick_coverage(self, capsys):
        code = cli_main([
            "brick-coverage", "--pieces", "6000", "--length", "230", "--width", "110",
            "--height", "50", "--waste-percent", "5",
        ])
        assert code == 0
        assert output(capsys)["areas"]["total_area_with_waste"] == 90.72

    def test_brick_coverage_preset(self, capsys):
        assert cli_main(["brick-coverage", "--pieces", "6000", "--preset", "bata_merah"]) == 0
        assert output(capsys)["areas"]["total_area_base"] == 86.4

    def test_brick_coverage_invalid(self, capsys):
        assert cli_main(["brick-coverage", "--pieces", "0", "--length", "230", "--height", "50"]) == 1
        assert output(capsys)["error"]["field"] == "pieces_per_package"

    def test_tile_coverage(self, capsys):
        assert cli_main(["tile-coverage", "--pieces", "4", "--width", "60", "--height", "60"]) == 0
        assert output(capsys)["coverage_per_box_m2"] == 1.44

    def test_presets(self, capsys):
        assert cli_main(["presets"]) == 0
        data = output(capsys)
        assert "bata_merah" in [p["key"] for p in data["brick_presets"]]
        assert "K-225" in data["concrete_grades"]


class TestLogging:
    """Logging set up from the loaded configuration."""

    def test_configured_format(self, monkeypatch, capsys):
        monkeypatch.setenv("RABCALC_LOG_FORMAT", "rab %(levelname)s %(message)s")
        assert cli_main(["presets"]) == 0
        formatter = logging.getLogger().handlers[-1].formatter
        assert formatter._fmt == "rab %(levelname)s %(message)s"
