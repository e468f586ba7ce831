"""
Unit tests for material pricing, the catalog and HPP/RAB aggregation.
"""

import pytest

from rabcalc.core.unit_converter import ConversionRule
from rabcalc.cost import (
    CatalogRecord,
    DurationMode,
    EstimationAggregator,
    MaterialCatalog,
    MaterialCategory,
    MaterialCostAggregator,
    MaterialLine,
)
from rabcalc.errors import (
    InvalidProfitFactor,
    InvalidWasteFactor,
    MaterialNotFound,
)


SEMEN = MaterialLine("Semen", 7.5, "sak", 65000)
PASIR = MaterialLine("Pasir", 0.48, "m3", 350000)


@pytest.fixture
def pricing():
    return MaterialCostAggregator()


@pytest.fixture
def aggregator():
    return EstimationAggregator()


class TestMaterialPricing:
    """Tests for MaterialCostAggregator."""

    def test_price_line(self, pricing):
        priced = pricing.price_line(SEMEN, 2.0, 0.05)
        assert priced.base_quantity == 15.0
        assert abs(priced.quantity_with_waste - 15.75) < 1e-9
        assert abs(priced.cost - 15.75 * 65000) < 1e-6
        assert priced.packages is None

    def test_no_waste(self, pricing):
        priced = pricing.price_line(PASIR, 1.0, 0.0)
        assert priced.quantity_with_waste == priced.base_quantity

    def test_cost_increases_with_waste(self, pricing):
        priced = [pricing.price_line(SEMEN, 1.0, w) for w in (0.0, 0.05, 0.1, 0.5)]
        for low, high in zip(priced, priced[1:]):
            assert high.quantity_with_waste > low.quantity_with_waste
            assert high.cost > low.cost

    @pytest.mark.parametrize("waste", [-0.01, float("nan"), float("inf")])
    def test_invalid_waste(self, pricing, waste):
        with pytest.raises(InvalidWasteFactor):
            pricing.price_line(SEMEN, 1.0, waste)

    def test_price_lines(self, pricing):
        breakdown = pricing.price_lines([SEMEN, PASIR], 1.0, 0.0)
        assert len(breakdown.lines) == 2
        assert abs(breakdown.total_cost - (7.5 * 65000 + 0.48 * 350000)) < 1e-6
        assert breakdown.to_dict()["line_count"] == 2

    def test_user_override_keeps_original(self):
        cheaper = SEMEN.with_overrides(unit_price=60000, supplier="Toko B")
        assert cheaper.unit_price == 60000
        assert SEMEN.unit_price == 65000

    def test_packaged_line(self, pricing):
        """23 lembar kayu with 10 per bendel: 3 bendel."""
        rule = ConversionRule("bendel", "lembar", 10, "kayu bekisting")
        line = MaterialLine("Kayu Bekisting 3x5", 1.0, "bendel", 850000)
        priced = pricing.price_packaged_line(line, 23.0, 0.0, rule)
        assert priced.packages == 3
        assert priced.cost == 3 * 850000
        assert priced.to_dict()["base_unit"] == "lembar"


class TestCatalog:
    """Tests for MaterialCatalog."""

    def test_default_prices(self, catalog):
        assert catalog.lookup("Semen").price == 65000
        assert catalog.lookup("besi beton d12").unit == "batang"
        assert "Kawat Bendrat" in catalog

    def test_lookup_normalizes_whitespace(self, catalog):
        assert catalog.lookup("  kayu   bekisting 3x5 ").name == "Kayu Bekisting 3x5"

    def test_miss_is_error(self, catalog):
        """A missing material is never priced at zero."""
        with pytest.raises(MaterialNotFound) as exc_info:
            catalog.lookup("Granit 60x60")
        assert exc_info.value.field == "material"
        assert catalog.find("Granit 60x60") is None

    def test_resolve_line(self, catalog):
        line = catalog.resolve_line("Pasir", 0.48)
        assert line.unit_price == 350000
        assert line.quantity_per_base_unit == 0.48
        assert not line.is_placeholder

    def test_resolve_line_override(self, catalog):
        line = catalog.resolve_line("Pasir", 0.48, price_override=300000)
        assert line.unit_price == 300000
        assert catalog.lookup("Pasir").price == 350000

    def test_placeholder_line(self):
        line = MaterialCatalog.placeholder_line("Granit 60x60", "dus", 250000, 0.7)
        assert line.is_placeholder
        assert line.unit_price == 250000

    def test_by_category(self, catalog):
        names = {r.name for r in catalog.by_category(MaterialCategory.BEKISTING)}
        assert names == {"Kayu Bekisting 3x5", "Paku"}

    def test_from_dicts(self):
        catalog = MaterialCatalog.from_dicts([
            {"name": "Cat Tembok", "unit": "kaleng", "price": 150000, "category": "finishing",
             "supplier": "Toko A"},
            {"name": "Kapur", "unit": "sak", "price": 20000},
        ])
        assert len(catalog) == 2
        assert catalog.lookup("cat tembok").supplier == "Toko A"
        assert catalog.lookup("Kapur").category == MaterialCategory.UMUM

    def test_record_round_trip(self):
        record = CatalogRecord("Paku", "kg", 18000, category=MaterialCategory.BEKISTING)
        assert CatalogRecord.from_dict(record.to_dict()) == record


class TestAggregate:
    """Tests for single-stage HPP/RAB."""

    def test_hpp_rab_identity(self, aggregator):
        result = aggregator.aggregate(1000000, 500000, 0.2, name="Beton", base_quantity=2, unit="m3")
        assert result.hpp == 1500000
        assert abs(result.rab - 1800000) < 1e-6
        assert abs(result.profit - 300000) < 1e-6
        assert abs(result.hpp_per_unit - 750000) < 1e-6
        assert abs(result.rab_per_unit - 900000) < 1e-6

    def test_rab_increases_with_profit(self, aggregator):
        results = [aggregator.aggregate(100, 50, p) for p in (0.0, 0.1, 0.2, 0.5)]
        for low, high in zip(results, results[1:]):
            assert high.rab > low.rab
            assert high.profit > low.profit
            assert high.hpp == low.hpp

    def test_zero_profit(self, aggregator):
        result = aggregator.aggregate(100, 50, 0.0)
        assert result.rab == result.hpp

    @pytest.mark.parametrize("profit", [-0.1, float("nan")])
    def test_invalid_profit(self, aggregator, profit):
        with pytest.raises(InvalidProfitFactor):
            aggregator.aggregate(100, 50, profit)

    def test_per_unit_zero_quantity(self, aggregator):
        result = aggregator.aggregate(100, 50, 0.2, base_quantity=0)
        assert result.hpp_per_unit == 0.0
        assert result.rab_per_unit == 0.0

    def test_to_dict_rounds(self, aggregator):
        data = aggregator.aggregate(100.123456, 0, 0.2, duration_days=2.5).to_dict()
        assert data["hpp"] == 100.12
        assert data["profit_percent"] == 20.0
        assert data["rounded_duration_days"] == 3


class TestSubWorks:
    """Tests for multi-stage aggregation."""

    @pytest.fixture
    def stages(self, aggregator):
        return [
            aggregator.aggregate(1000, 500, 0.2, name="Beton", base_quantity=1, unit="m3",
                                 duration_days=1.5),
            aggregator.aggregate(400, 300, 0.2, name="Bekisting", base_quantity=4, unit="m2",
                                 duration_days=0.5),
            aggregator.aggregate(800, 200, 0.2, name="Besi", base_quantity=40, unit="kg",
                                 duration_days=2.0),
        ]

    def test_sums_money(self, aggregator, stages):
        job = aggregator.aggregate_sub_works(stages, mode=DurationMode.PARALLEL, name="Footplate")
        assert job.material_cost == 2200
        assert job.labor_cost == 1000
        assert job.hpp == sum(s.hpp for s in stages)
        assert abs(job.rab - sum(s.rab for s in stages)) < 1e-9
        assert job.is_composite
        assert len(job.sub_works) == 3

    def test_parallel_duration_is_max(self, aggregator, stages):
        job = aggregator.aggregate_sub_works(stages, mode=DurationMode.PARALLEL)
        assert job.duration_days == 2.0
        assert job.to_dict()["duration_mode"] == "parallel"

    def test_sequential_duration_is_sum(self, aggregator, stages):
        job = aggregator.aggregate_sub_works(stages, mode=DurationMode.SEQUENTIAL)
        assert job.duration_days == 4.0
        assert job.rounded_duration_days == 4

    def test_sequential_additive(self, aggregator, stages):
        """Splitting the sub-works and re-aggregating gives the same totals."""
        whole = aggregator.aggregate_sub_works(stages, mode=DurationMode.SEQUENTIAL)
        first = aggregator.aggregate_sub_works(stages[:1], mode=DurationMode.SEQUENTIAL)
        rest = aggregator.aggregate_sub_works(stages[1:], mode=DurationMode.SEQUENTIAL)
        assert abs(whole.hpp - (first.hpp + rest.hpp)) < 1e-9
        assert abs(whole.duration_days - (first.duration_days + rest.duration_days)) < 1e-9

    def test_mixed_units_report_first(self, aggregator, stages):
        job = aggregator.aggregate_sub_works(stages, mode=DurationMode.PARALLEL)
        assert (job.base_quantity, job.unit) == (1, "m3")

    def test_shared_unit_sums_quantity(self, aggregator):
        parts = [
            aggregator.aggregate(100, 0, 0.1, base_quantity=2, unit="m2"),
            aggregator.aggregate(100, 0, 0.1, base_quantity=3, unit="m2"),
        ]
        job = aggregator.aggregate_sub_works(parts, mode=DurationMode.PARALLEL)
        assert job.base_quantity == 5
        assert job.profit_fraction == 0.1

    def test_mixed_profit_fraction(self, aggregator):
        parts = [
            aggregator.aggregate(100, 0, 0.0),
            aggregator.aggregate(100, 0, 0.5),
        ]
        job = aggregator.aggregate_sub_works(parts, mode=DurationMode.PARALLEL)
        assert abs(job.profit_fraction - 0.25) < 1e-9

    def test_empty_rejected(self, aggregator):
        with pytest.raises(ValueError, match="empty"):
            aggregator.aggregate_sub_works([], mode=DurationMode.PARALLEL)

    def test_mode_required(self, aggregator, stages):
        with pytest.raises(ValueError, match="DurationMode"):
            aggregator.aggregate_sub_works(stages, mode="parallel")
