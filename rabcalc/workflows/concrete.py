"""
workflows/concrete.py - Shared stages for cast-in-place concrete members

Footings and beams are priced as the same three sub-works, each with
its own crew:

    Beton      concrete from the grade mix (m3), user productivity
    Bekisting  formwork (m2), 10 m2/day
    Besi       reinforcement (kg), 200 kg/day

Stage durations stay fractional; the member's duration is the longest
stage since the crews work in parallel.
"""

from __future__ import annotations
from dataclasses import replace
from typing import Iterable, Optional, Sequence, Tuple
import logging

from ..bootstrap.config import EngineConfig, get_config
from ..core.constants import KAWAT_KG_PER_M3, KAYU_LEMBAR_PER_M2, PAKU_KG_PER_M2
from ..core.inputs import LaborInput, MaterialLineInput
from ..core.tables import EngineTables, get_tables
from ..cost import (
    EstimationAggregator,
    EstimationResult,
    MaterialCatalog,
    MaterialCostAggregator,
    MaterialCostBreakdown,
)
from ..geometry import GeometryEngine
from ..labor import LaborScheduler
from ..mix import MixRatioResolver
from ..structural import ReinforcementPlanner
from ..validators import CommitValidator
from .common import material_line_from_input, schedule_stage

logger = logging.getLogger(__name__)

# Catalog names used by the concrete stages
SEMEN = "Semen"
PASIR = "Pasir"
KERIKIL = "Kerikil"
KAYU_BEKISTING = "Kayu Bekisting 3x5"
PAKU = "Paku"
KAWAT_BENDRAT = "Kawat Bendrat"


def rebar_catalog_name(bar_code: str) -> str:
    return f"Besi Beton {bar_code}"


class ConcreteWorkEstimator:
    """Base for estimators of reinforced concrete members."""

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        tables: Optional[EngineTables] = None,
        catalog: Optional[MaterialCatalog] = None,
    ):
        self.config = config or get_config()
        tables = tables or get_tables()
        if tables.stock_bar_length_m != self.config.defaults.stock_bar_length_m:
            tables = replace(tables, stock_bar_length_m=self.config.defaults.stock_bar_length_m)
        self.tables = tables
        self.catalog = catalog or MaterialCatalog.default()

        self.geometry = GeometryEngine(self.tables)
        self.planner = ReinforcementPlanner(self.tables)
        self.resolver = MixRatioResolver(self.tables)
        self.pricing = MaterialCostAggregator()
        self.scheduler = LaborScheduler(
            tukang_rate=self.config.rates.tukang_rate,
            pekerja_rate=self.config.rates.pekerja_rate,
        )
        self.aggregator = EstimationAggregator()
        self.validator = CommitValidator(self.tables)

    # ==================== Stages ====================

    def _concrete_stage(
        self,
        grade: str,
        volume: float,
        labor_input: LaborInput,
        productivity: float,
        waste: float,
        profit: float,
    ) -> EstimationResult:
        mix = self.resolver.resolve_concrete(grade)

        lines = [
            self.catalog.resolve_line(SEMEN, mix.cement_sacks_per_m3),
            self.catalog.resolve_line(PASIR, mix.sand_m3_per_m3),
            self.catalog.resolve_line(KERIKIL, mix.gravel_m3_per_m3),
        ]
        materials = self.pricing.price_lines(lines, volume, waste)
        labor = schedule_stage(self.scheduler, labor_input, productivity, volume, fractional=True)
        return self._stage("Beton", volume, "m3", materials, labor, profit,
                           details={"grade": mix.code})

    def _formwork_stage(
        self,
        area: float,
        labor_input: LaborInput,
        waste: float,
        profit: float,
    ) -> EstimationResult:
        materials = MaterialCostBreakdown()
        materials.add_line(self.pricing.price_packaged_line(
            self.catalog.resolve_line(KAYU_BEKISTING, KAYU_LEMBAR_PER_M2),
            area,
            waste,
            self.tables.conversions.get("bendel", KAYU_BEKISTING),
        ))
        materials.add_line(self.pricing.price_line(
            self.catalog.resolve_line(PAKU, PAKU_KG_PER_M2), area, waste,
        ))
        labor = schedule_stage(
            self.scheduler, labor_input,
            self.config.defaults.formwork_productivity, area, fractional=True,
        )
        return self._stage("Bekisting", area, "m2", materials, labor, profit)

    def _rebar_stage(
        self,
        stock_bars: Sequence[Tuple[str, int]],
        weight: float,
        volume: float,
        labor_input: LaborInput,
        waste: float,
        profit: float,
        details: Optional[dict] = None,
    ) -> EstimationResult:
        materials = MaterialCostBreakdown()
        # stock bars are counted before waste; waste applies to their cost
        for bar_code, bars in stock_bars:
            line = self.catalog.resolve_line(rebar_catalog_name(bar_code), bars)
            materials.add_line(self.pricing.price_line(line, 1.0, waste))

        materials.add_line(self.pricing.price_packaged_line(
            self.catalog.resolve_line(KAWAT_BENDRAT, KAWAT_KG_PER_M3),
            volume,
            waste,
            self.tables.conversions.get("bendel", KAWAT_BENDRAT),
        ))

        labor = schedule_stage(
            self.scheduler, labor_input,
            self.config.defaults.rebar_productivity, weight, fractional=True,
        )
        return self._stage("Besi", weight, "kg", materials, labor, profit, details=details)

    def _additional_stage(
        self,
        items: Iterable[MaterialLineInput],
        profit: float,
    ) -> EstimationResult:
        lines = [material_line_from_input(item) for item in items]
        # entered as absolute quantities, bought as-is
        materials = self.pricing.price_lines(lines, 1.0, 0.0)
        return self._stage("Tambahan", 0.0, "", materials, None, profit)

    def _stage(
        self,
        name: str,
        quantity: float,
        unit: str,
        materials: MaterialCostBreakdown,
        labor,
        profit: float,
        details: Optional[dict] = None,
    ) -> EstimationResult:
        return self.aggregator.aggregate(
            materials.total_cost,
            labor.labor_cost if labor else 0.0,
            profit,
            name=name,
            base_quantity=quantity,
            unit=unit,
            duration_days=labor.duration_days if labor else 0.0,
            materials=materials.lines,
            labor=labor,
            details=details,
        )
