"""
Integration tests for the pad footing workflow.

2.0 x 2.0 m footing, 300 mm thick, K-225, D12 @ 200 mm both ways,
40 mm cover, default crews, 5% waste and 20% profit:

    Beton      1.2 m3   -> 1 168 650 material, 0.4 day
    Bekisting  4.0 m2   ->   887 800 material, 0.4 day
    Besi       39.072 kg ->  524 000 material, 0.19536 day
"""

import pytest

from rabcalc.bootstrap.config import EngineConfig
from rabcalc.core.inputs import FootplateRequest, LaborInput, MaterialLineInput
from rabcalc.cost import DurationMode, MaterialCatalog
from rabcalc.errors import CommitRejected, MaterialNotFound, UnknownGrade
from rabcalc.workflows import FootplateEstimator


@pytest.fixture
def request_2x2():
    return FootplateRequest(
        name="F1",
        length_m=2.0,
        width_m=2.0,
        thickness_mm=300,
        concrete_grade="K-225",
    )


def stage(result, name):
    return next(s for s in result.sub_works if s.name == name)


class TestFootplateScenario:
    """End-to-end footing estimate."""

    def test_structure(self, footplate_estimator, request_2x2):
        result = footplate_estimator.estimate(request_2x2)
        assert result.name == "F1"
        assert [s.name for s in result.sub_works] == ["Beton", "Bekisting", "Besi"]
        assert result.duration_mode == DurationMode.PARALLEL

    def test_quantities(self, footplate_estimator, request_2x2):
        result = footplate_estimator.estimate(request_2x2)
        quantities = result.details["quantities"]
        assert abs(quantities["concrete_volume_m3"] - 1.2) < 1e-9
        assert quantities["formwork_area_m2"] == 4.0
        assert abs(quantities["reinforcement_weight_kg"] - 44 * 0.888) < 1e-3
        assert result.details["reinforcement"]["x"]["bar_count"] == 11
        assert result.details["concrete"]["cement_sacks"] == 9.0

    def test_concrete_stage(self, footplate_estimator, request_2x2):
        beton = stage(footplate_estimator.estimate(request_2x2), "Beton")
        assert abs(beton.material_cost - 1168650) < 1e-3
        assert abs(beton.labor_cost - 168000) < 1e-3
        assert abs(beton.duration_days - 0.4) < 1e-9
        assert beton.details["grade"] == "K-225"

    def test_formwork_stage(self, footplate_estimator, request_2x2):
        bekisting = stage(footplate_estimator.estimate(request_2x2), "Bekisting")
        kayu = bekisting.materials[0]
        assert kayu.packages == 1
        assert kayu.cost == 850000
        assert abs(bekisting.material_cost - 887800) < 1e-3
        assert abs(bekisting.labor_cost - 174000) < 1e-3

    def test_rebar_stage(self, footplate_estimator, request_2x2):
        besi = stage(footplate_estimator.estimate(request_2x2), "Besi")
        assert besi.unit == "kg"
        assert abs(besi.material_cost - 524000) < 1e-3
        assert abs(besi.duration_days - 44 * 0.888 / 200) < 1e-9
        assert besi.details == {"bars_x": 11, "bars_y": 11}

    def test_totals(self, footplate_estimator, request_2x2):
        result = footplate_estimator.estimate(request_2x2)
        assert abs(result.material_cost - 2580450) < 1e-3
        assert abs(result.labor_cost - 426981.6) < 1e-3
        assert abs(result.hpp - 3007431.6) < 1e-3
        assert abs(result.rab - 3007431.6 * 1.2) < 1e-3
        assert abs(result.duration_days - 0.4) < 1e-9
        assert result.rounded_duration_days == 1

    def test_money_is_sum_of_stages(self, footplate_estimator, request_2x2):
        result = footplate_estimator.estimate(request_2x2)
        assert abs(result.hpp - sum(s.hpp for s in result.sub_works)) < 1e-6
        assert abs(result.rab - sum(s.rab for s in result.sub_works)) < 1e-6

    def test_to_dict(self, footplate_estimator, request_2x2):
        data = footplate_estimator.estimate(request_2x2).to_dict()
        assert data["duration_mode"] == "parallel"
        assert len(data["sub_works"]) == 3
        assert data["profit_percent"] == 20.0


class TestFootplateOptions:
    """Request options and configuration."""

    def test_zero_profit_and_waste(self, footplate_estimator, request_2x2):
        request = request_2x2.model_copy(update={"profit_percent": 0, "waste_percent": 0})
        result = footplate_estimator.estimate(request)
        assert result.rab == result.hpp
        assert result.details["waste_fraction"] == 0.0

    def test_more_waste_costs_more(self, footplate_estimator, request_2x2):
        low = footplate_estimator.estimate(request_2x2.model_copy(update={"waste_percent": 0}))
        high = footplate_estimator.estimate(request_2x2.model_copy(update={"waste_percent": 10}))
        assert high.material_cost > low.material_cost

    def test_default_grade_from_config(self, tables, catalog, request_2x2):
        config = EngineConfig()
        config.defaults.concrete_grade = "K-300"
        estimator = FootplateEstimator(config=config, tables=tables, catalog=catalog)
        result = estimator.estimate(request_2x2.model_copy(update={"concrete_grade": None}))
        assert stage(result, "Beton").details["grade"] == "K-300"

    def test_stock_bar_length_from_config(self, tables, catalog, request_2x2):
        config = EngineConfig()
        config.defaults.stock_bar_length_m = 6.0
        estimator = FootplateEstimator(config=config, tables=tables, catalog=catalog)
        result = estimator.estimate(request_2x2)
        assert result.details["reinforcement"]["x"]["stock_bars"] == 4

    def test_additional_materials(self, footplate_estimator, request_2x2):
        request = request_2x2.model_copy(update={"additional_materials": [
            MaterialLineInput(name="Sewa Molen", quantity_per_base_unit=1, unit="hari",
                              unit_price=250000),
        ]})
        result = footplate_estimator.estimate(request)
        extra = stage(result, "Tambahan")
        assert extra.material_cost == 250000
        assert extra.labor_cost == 0.0
        assert extra.labor is None

    def test_crew_without_workers_previews_zero_labor(self, footplate_estimator, request_2x2):
        request = request_2x2.model_copy(update={"rebar_labor": LaborInput()})
        besi = stage(footplate_estimator.estimate(request), "Besi")
        assert besi.labor is None
        assert besi.labor_cost == 0.0


class TestFootplatePreviewAndCommit:
    """Preview tolerates blanks; commit is strict."""

    def test_blank_form_previews_zero(self, footplate_estimator):
        result = footplate_estimator.estimate(FootplateRequest())
        assert result.details["quantities"]["concrete_volume_m3"] == 0.0
        assert result.material_cost == 0.0
        assert result.name == "Footplate"

    def test_blank_form_rejected_on_commit(self, footplate_estimator):
        with pytest.raises(CommitRejected) as exc_info:
            footplate_estimator.estimate(FootplateRequest(), final=True)
        fields = [e.field for e in exc_info.value.errors]
        assert {"length_m", "width_m", "thickness_mm"} <= set(fields)

    def test_final_accepts_valid(self, footplate_estimator, request_2x2):
        result = footplate_estimator.estimate(request_2x2, final=True)
        assert result.details["final"] is True

    def test_out_of_range_cover_previews(self, footplate_estimator, request_2x2):
        """Preview still computes; the layout is flagged, not rejected."""
        result = footplate_estimator.estimate(request_2x2.model_copy(update={"cover_mm": 10}))
        assert result.details["reinforcement"]["is_valid_design"] is False

    def test_unknown_grade(self, footplate_estimator, request_2x2):
        with pytest.raises(UnknownGrade):
            footplate_estimator.estimate(request_2x2.model_copy(update={"concrete_grade": "K-999"}))

    def test_material_missing_from_catalog(self, tables, request_2x2):
        catalog = MaterialCatalog.default()
        sparse = MaterialCatalog(r for r in (catalog.find(n) for n in ("Semen", "Pasir")) if r)
        estimator = FootplateEstimator(config=EngineConfig(), tables=tables, catalog=sparse)
        with pytest.raises(MaterialNotFound):
            estimator.estimate(request_2x2)
