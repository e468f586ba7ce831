"""
Integration tests for the brick wall and plaster workflows.

Wall: 10 m2 of bata merah (230 x 50 mm + 10 mm joints, 69.44 per m2),
1:4 mortar, one tukang and one pekerja at 8 m2/day -> 2 days, 570 000.

Plaster: 30 m2, 10 m2/day, one tukang and one pekerja -> 3 days,
855 000 labor; layer materials 339 166.67 + 402 333.33 + 293 000.
"""

import pytest

from rabcalc.core.constants import CEMENT_SAK_VOLUME_M3, INSTANT_MORTAR_KG_PER_M3
from rabcalc.core.inputs import BrickCourse, MaterialLineInput, PlasterRequest, WallRequest
from rabcalc.cost import DurationMode
from rabcalc.errors import CommitRejected, UnknownGrade


@pytest.fixture
def wall_10m2():
    return WallRequest(name="W1", area_m2=10, waste_percent=0)


@pytest.fixture
def plaster_30m2():
    return PlasterRequest(name="P1", area_m2=30, productivity=10, waste_percent=0)


def line(result, name):
    return next(m for m in result.materials if m.name == name)


class TestWallScenario:
    """Bricks and mortar priced over the wall area."""

    def test_material_lines(self, wall_estimator, wall_10m2):
        result = wall_estimator.estimate(wall_10m2)
        assert [m.name for m in result.materials] == ["Bata Merah", "Semen", "Pasir"]
        assert result.base_quantity == 10
        assert result.unit == "m2"

    def test_bricks(self, wall_estimator, wall_10m2):
        result = wall_estimator.estimate(wall_10m2)
        assert abs(result.details["coefficients"]["bricks_per_m2"] - 69.4444) < 1e-4
        bata = line(result, "Bata Merah")
        assert abs(bata.quantity_with_waste - 694.4444) < 1e-3
        assert abs(bata.cost - 694.4444 * 800) < 1

    def test_mortar_split_by_ratio(self, wall_estimator, wall_10m2):
        result = wall_estimator.estimate(wall_10m2)
        mortar = result.details["coefficients"]["mortar"]
        assert mortar["ratio"] == "1:4"
        semen = line(result, "Semen").quantity_with_waste
        pasir = line(result, "Pasir").quantity_with_waste
        # one part cement to four parts sand by volume
        assert abs(pasir / (semen * CEMENT_SAK_VOLUME_M3) - 4.0) < 1e-9

    def test_richer_mix_uses_more_cement(self, wall_estimator, wall_10m2):
        lean = wall_estimator.estimate(wall_10m2)
        rich = wall_estimator.estimate(wall_10m2.model_copy(update={"mortar_ratio": "1:2"}))
        assert line(rich, "Semen").cost > line(lean, "Semen").cost
        assert line(rich, "Pasir").cost < line(lean, "Pasir").cost

    def test_labor(self, wall_estimator, wall_10m2):
        result = wall_estimator.estimate(wall_10m2)
        assert result.rounded_duration_days == 2
        assert abs(result.labor_cost - 570000) < 1e-6

    def test_totals(self, wall_estimator, wall_10m2):
        result = wall_estimator.estimate(wall_10m2)
        assert abs(result.material_cost - sum(m.cost for m in result.materials)) < 1e-6
        assert abs(result.hpp - (result.material_cost + result.labor_cost)) < 1e-6
        assert abs(result.rab - result.hpp * 1.2) < 1e-6


class TestWallOptions:
    """Presets, custom bricks and mortar choices."""

    def test_waste_applied_once(self, wall_estimator, wall_10m2):
        result = wall_estimator.estimate(wall_10m2.model_copy(update={"waste_percent": 10}))
        bata = line(result, "Bata Merah")
        assert abs(bata.quantity_with_waste - bata.base_quantity * 1.1) < 1e-9
        assert abs(bata.base_quantity - 694.4444) < 1e-3

    def test_brick_price_override(self, wall_estimator, wall_10m2):
        result = wall_estimator.estimate(wall_10m2.model_copy(update={"brick_price": 1000}))
        assert line(result, "Bata Merah").line.unit_price == 1000

    def test_custom_brick(self, wall_estimator, wall_10m2):
        request = wall_10m2.model_copy(update={"brick": BrickCourse(
            brick_length_mm=190, brick_width_mm=90, brick_height_mm=40,
        )})
        result = wall_estimator.estimate(request)
        assert abs(result.details["coefficients"]["bricks_per_m2"] - 1 / (0.2 * 0.05)) < 1e-4

    def test_double_wall_doubles_bricks(self, wall_estimator, wall_10m2):
        request = wall_10m2.model_copy(update={"brick": BrickCourse(
            brick_length_mm=230, brick_width_mm=110, brick_height_mm=50, double_wall=True,
        )})
        result = wall_estimator.estimate(request)
        assert abs(result.details["coefficients"]["bricks_per_m2"] - 2 * 69.4444) < 1e-3

    def test_other_preset(self, wall_estimator, wall_10m2):
        result = wall_estimator.estimate(wall_10m2.model_copy(update={"preset": "batako"}))
        assert result.materials[0].name == "Batako"
        assert result.details["preset"] == "batako"

    def test_instant_mortar(self, wall_estimator, wall_10m2):
        result = wall_estimator.estimate(wall_10m2.model_copy(update={"instant_mortar": True}))
        assert [m.name for m in result.materials] == ["Bata Merah", "Mortar Instan"]
        coefficients = result.details["coefficients"]
        volume = coefficients["mortar_volume_m3"]
        # 25 kg per sak of instant mortar
        assert abs(coefficients["instant_mortar_sacks"]
                   - volume * INSTANT_MORTAR_KG_PER_M3 / 25.0) < 1e-5
        assert result.details["mortar_ratio"] is None

    def test_additional_materials_per_m2(self, wall_estimator, wall_10m2):
        request = wall_10m2.model_copy(update={"additional_materials": [
            MaterialLineInput(name="Angkur", quantity_per_base_unit=0.5, unit="bh",
                              unit_price=2000),
        ]})
        result = wall_estimator.estimate(request)
        assert line(result, "Angkur").cost == 10000

    def test_unknown_preset(self, wall_estimator, wall_10m2):
        with pytest.raises(UnknownGrade) as exc_info:
            wall_estimator.estimate(wall_10m2.model_copy(update={"preset": "bata_emas"}))
        assert exc_info.value.field == "preset"

    def test_unknown_mortar_ratio(self, wall_estimator, wall_10m2):
        with pytest.raises(UnknownGrade):
            wall_estimator.estimate(wall_10m2.model_copy(update={"mortar_ratio": "1:9"}))


class TestWallPreviewAndCommit:
    """Preview tolerates blanks; commit is strict."""

    def test_blank_form_previews_zero(self, wall_estimator):
        result = wall_estimator.estimate(WallRequest())
        assert result.name == "Pasangan Bata"
        assert result.material_cost == 0.0
        assert result.labor_cost == 0.0

    def test_blank_form_rejected_on_commit(self, wall_estimator):
        with pytest.raises(CommitRejected) as exc_info:
            wall_estimator.estimate(WallRequest(), final=True)
        assert "area_m2" in [e.field for e in exc_info.value.errors]

    def test_final_accepts_valid(self, wall_estimator, wall_10m2):
        assert wall_estimator.estimate(wall_10m2, final=True).details["final"] is True

    def test_incomplete_custom_brick_rejected(self, wall_estimator, wall_10m2):
        request = wall_10m2.model_copy(update={"brick": BrickCourse(brick_length_mm=230)})
        assert wall_estimator.estimate(request).details["coefficients"]["bricks_per_m2"] == 0.0
        with pytest.raises(CommitRejected) as exc_info:
            wall_estimator.estimate(request, final=True)
        assert [e.field for e in exc_info.value.errors] == ["brick.brick_height_mm"]

    def test_instant_mortar_skips_ratio_check(self, wall_estimator, wall_10m2):
        request = wall_10m2.model_copy(update={"instant_mortar": True, "mortar_ratio": "x"})
        assert wall_estimator.estimate(request, final=True).details["mortar_ratio"] is None


class TestPlasterScenario:
    """Three layers worked in turn over the same area."""

    def test_layers(self, plaster_estimator, plaster_30m2):
        result = plaster_estimator.estimate(plaster_30m2)
        assert [s.name for s in result.sub_works] == ["Lapis 1", "Lapis 2", "Lapis 3"]
        assert result.duration_mode == DurationMode.SEQUENTIAL
        assert result.base_quantity == 30
        assert result.unit == "m2"

    def test_layer_materials(self, plaster_estimator, plaster_30m2):
        costs = [s.material_cost for s in plaster_estimator.estimate(plaster_30m2).sub_works]
        expected = [339166.6667, 402333.3333, 293000.0]
        for cost, value in zip(costs, expected):
            assert abs(cost - value) < 1e-3

    def test_labor_split_across_layers(self, plaster_estimator, plaster_30m2):
        result = plaster_estimator.estimate(plaster_30m2)
        assert abs(result.labor_cost - 855000) < 1e-6
        for layer in result.sub_works:
            assert abs(layer.labor_cost - 285000) < 1e-6
            assert abs(layer.duration_days - 1.0) < 1e-9
        assert result.rounded_duration_days == 3

    def test_totals(self, plaster_estimator, plaster_30m2):
        result = plaster_estimator.estimate(plaster_30m2)
        assert abs(result.hpp - 1889500) < 1e-3
        assert abs(result.rab - 2267400) < 1e-3

    def test_additional_materials(self, plaster_estimator, plaster_30m2):
        request = plaster_30m2.model_copy(update={"additional_materials": [
            MaterialLineInput(name="Amplas", quantity_per_base_unit=0.1, unit="lembar",
                              unit_price=5000),
        ]})
        result = plaster_estimator.estimate(request)
        extra = result.sub_works[-1]
        assert extra.name == "Tambahan"
        assert abs(extra.material_cost - 15000) < 1e-6
        assert extra.labor_cost == 0.0
        assert result.rounded_duration_days == 3

    def test_blank_form_previews_zero(self, plaster_estimator):
        result = plaster_estimator.estimate(PlasterRequest())
        assert result.name == "Plamiran"
        assert result.hpp == 0.0

    def test_commit_needs_area_and_productivity(self, plaster_estimator):
        with pytest.raises(CommitRejected) as exc_info:
            plaster_estimator.estimate(PlasterRequest(), final=True)
        fields = {e.field for e in exc_info.value.errors}
        assert fields == {"area_m2", "productivity"}
