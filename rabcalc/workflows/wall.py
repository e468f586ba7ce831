"""
workflows/wall.py - Brick wall and plaster estimates

A brick wall is one stage over the wall area: bricks and mortar per m2
come from the brick coverage, the joint volume is split into cement and
sand by the mortar mix (or priced as instant mortar), and waste is
applied once to the whole area.

Plaster (plamiran) is three layers worked in turn by one crew over the
same area; each layer carries its own materials per m2 and a third of
the crew's days and cost.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional
import logging

from ..bootstrap.config import EngineConfig, get_config
from ..core.constants import BRICK_CATALOG_NAMES, INSTANT_MORTAR_KG_PER_M3, PLASTER_LAYERS
from ..core.inputs import BrickCourse, PlasterRequest, WallRequest
from ..core.tables import EngineTables, get_tables
from ..core.unit_converter import Quantity, UnitConverter
from ..cost import (
    DurationMode,
    EstimationAggregator,
    EstimationResult,
    MaterialCatalog,
    MaterialCostAggregator,
    MaterialLine,
)
from ..errors import UnknownGrade
from ..geometry import GeometryEngine, has_positive_dimensions
from ..labor import LaborScheduler
from ..mix import MixRatioResolver, MortarMaterials
from ..validators import CommitValidator
from .common import material_line_from_input, resolve_fractions, schedule_stage

logger = logging.getLogger(__name__)

SEMEN = "Semen"
PASIR = "Pasir"
MORTAR_INSTAN = "Mortar Instan"


@dataclass
class WallCoefficients:
    """Materials per m2 of wall, before waste."""
    bricks_per_m2: float
    mortar_volume_m3: float
    mortar: Optional[MortarMaterials] = None
    instant_mortar_kg: float = 0.0
    instant_mortar_sacks: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "bricks_per_m2": round(self.bricks_per_m2, 4),
            "mortar_volume_m3": round(self.mortar_volume_m3, 6),
        }
        if self.mortar is not None:
            data["mortar"] = self.mortar.to_dict()
        else:
            data["instant_mortar_kg"] = round(self.instant_mortar_kg, 4)
            data["instant_mortar_sacks"] = round(self.instant_mortar_sacks, 6)
        return data


class _FinishingEstimator:
    """Collaborators shared by the wall and plaster estimators."""

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        tables: Optional[EngineTables] = None,
        catalog: Optional[MaterialCatalog] = None,
    ):
        self.config = config or get_config()
        self.tables = tables or get_tables()
        self.catalog = catalog or MaterialCatalog.default()

        self.pricing = MaterialCostAggregator()
        self.scheduler = LaborScheduler(
            tukang_rate=self.config.rates.tukang_rate,
            pekerja_rate=self.config.rates.pekerja_rate,
        )
        self.aggregator = EstimationAggregator()
        self.validator = CommitValidator(self.tables)


class WallEstimator(_FinishingEstimator):
    """Estimates a brick wall job."""

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        tables: Optional[EngineTables] = None,
        catalog: Optional[MaterialCatalog] = None,
    ):
        super().__init__(config, tables, catalog)
        self.geometry = GeometryEngine(self.tables)
        self.resolver = MixRatioResolver(self.tables)

    def brick_course(self, request: WallRequest) -> BrickCourse:
        """
        The bricks laid: custom dimensions or the preset's.

        Raises:
            UnknownGrade: unknown preset
        """
        if request.brick is not None:
            # priced per piece; the job applies waste, the course carries none
            return request.brick.model_copy(update={"pieces_per_package": 1.0, "waste_fraction": 0.0})
        return self.geometry.brick_from_preset(request.preset, pieces_per_package=1)

    def coefficients(self, request: WallRequest) -> WallCoefficients:
        """Bricks and mortar per m2; zero while the brick is incomplete."""
        course = self.brick_course(request)
        if has_positive_dimensions(course):
            coverage = self.geometry.compute_brick_coverage(course)
            # a double wall lays two leaves of bricks per m2 of face
            bricks = coverage.bricks_per_m2 * (2 if course.double_wall else 1)
            volume = coverage.mortar_volume_per_m2
        else:
            bricks, volume = 0.0, 0.0

        if request.instant_mortar:
            kg = volume * INSTANT_MORTAR_KG_PER_M3
            rule = self.tables.conversions.get("sak", MORTAR_INSTAN)
            sacks = UnitConverter.to_market(Quantity(kg, "kg"), rule).value
            return WallCoefficients(bricks, volume, instant_mortar_kg=kg, instant_mortar_sacks=sacks)
        return WallCoefficients(bricks, volume, mortar=self.resolver.mortar_materials(
            request.mortar_ratio, volume,
        ))

    def material_lines(self, request: WallRequest, coefficients: WallCoefficients) -> List[MaterialLine]:
        """Per-m2 material lines for the wall."""
        brick_name = BRICK_CATALOG_NAMES.get(request.preset)
        if brick_name is None:
            raise UnknownGrade(
                f"Unknown brick preset: {request.preset}. "
                f"Available: {', '.join(sorted(BRICK_CATALOG_NAMES))}",
                field="preset",
                actual=request.preset,
            )
        lines = [self.catalog.resolve_line(
            brick_name, coefficients.bricks_per_m2, price_override=request.brick_price,
        )]
        if coefficients.mortar is not None:
            lines.append(self.catalog.resolve_line(SEMEN, coefficients.mortar.cement_sacks))
            lines.append(self.catalog.resolve_line(PASIR, coefficients.mortar.sand_m3))
        else:
            lines.append(self.catalog.resolve_line(MORTAR_INSTAN, coefficients.instant_mortar_sacks))
        lines.extend(material_line_from_input(item) for item in request.additional_materials)
        return lines

    def estimate(self, request: WallRequest, *, final: bool = False) -> EstimationResult:
        """
        Estimate HPP/RAB for a brick wall.

        Raises:
            CommitRejected: final=True and some field is invalid
            UnknownGrade: unknown preset or mortar ratio
            MaterialNotFound: a wall material is missing from the catalog
        """
        warnings = []
        if final:
            warnings = self.validator.commit(request).warnings
        elif request.brick is not None:
            warnings = self.validator.check_shape(self.brick_course(request), "brick").warnings

        profit, waste = resolve_fractions(
            request.profit_percent, request.waste_percent, self.config.defaults
        )
        area = max(request.area_m2, 0.0)

        coefficients = self.coefficients(request)
        breakdown = self.pricing.price_lines(self.material_lines(request, coefficients), area, waste)
        labor = schedule_stage(self.scheduler, request.labor, request.productivity, area)

        result = self.aggregator.aggregate(
            breakdown.total_cost,
            labor.labor_cost if labor else 0.0,
            profit,
            name=request.name or "Pasangan Bata",
            base_quantity=area,
            unit="m2",
            duration_days=labor.duration_days if labor else 0.0,
            materials=breakdown.lines,
            labor=labor,
            details={
                "preset": request.preset,
                "mortar_ratio": None if request.instant_mortar else request.mortar_ratio,
                "coefficients": coefficients.to_dict(),
                "waste_fraction": waste,
                "final": final,
                "warnings": [w.to_dict() for w in warnings],
            },
        )

        logger.info(
            f"Wall '{result.name}': {area:.2f} m2, {coefficients.bricks_per_m2:.2f} bricks/m2, "
            f"HPP {result.hpp:.2f}, RAB {result.rab:.2f}, {result.rounded_duration_days} day(s)"
        )
        return result


class PlasterEstimator(_FinishingEstimator):
    """Estimates a three-layer plaster job."""

    def layer_lines(self, materials) -> List[MaterialLine]:
        return [self.catalog.resolve_line(name, quantity) for name, quantity in materials]

    def estimate(self, request: PlasterRequest, *, final: bool = False) -> EstimationResult:
        """
        Estimate HPP/RAB for plaster over an area.

        Raises:
            CommitRejected: final=True and some field is invalid
            MaterialNotFound: a layer material is missing from the catalog
        """
        warnings = []
        if final:
            warnings = self.validator.commit(request).warnings

        profit, waste = resolve_fractions(
            request.profit_percent, request.waste_percent, self.config.defaults
        )
        area = max(request.area_m2, 0.0)

        labor = schedule_stage(self.scheduler, request.labor, request.productivity, area)
        share = 1.0 / len(PLASTER_LAYERS)
        layer_labor_cost = labor.labor_cost * share if labor else 0.0
        layer_days = labor.duration_days * share if labor else 0.0

        sub_works = []
        for name, description, base_area, materials in PLASTER_LAYERS:
            lines = self.layer_lines(
                (material, quantity / base_area) for material, quantity, _unit in materials
            )
            breakdown = self.pricing.price_lines(lines, area, waste)
            sub_works.append(self.aggregator.aggregate(
                breakdown.total_cost,
                layer_labor_cost,
                profit,
                name=name,
                base_quantity=area,
                unit="m2",
                duration_days=layer_days,
                materials=breakdown.lines,
                details={"description": description},
            ))

        if request.additional_materials:
            lines = [material_line_from_input(item) for item in request.additional_materials]
            breakdown = self.pricing.price_lines(lines, area, waste)
            sub_works.append(self.aggregator.aggregate(
                breakdown.total_cost, 0.0, profit,
                name="Tambahan", base_quantity=area, unit="m2", materials=breakdown.lines,
            ))

        result = self.aggregator.aggregate_sub_works(
            sub_works,
            mode=DurationMode.SEQUENTIAL,
            name=request.name or "Plamiran",
            details={
                "waste_fraction": waste,
                "final": final,
                "warnings": [w.to_dict() for w in warnings],
            },
        )
        # the layers cover the same area; the job quantity is that area once
        result = replace(result, base_quantity=area, unit="m2", labor=labor)

        logger.info(
            f"Plaster '{result.name}': {area:.2f} m2, {len(sub_works)} sub-work(s), "
            f"HPP {result.hpp:.2f}, RAB {result.rab:.2f}, {result.rounded_duration_days} day(s)"
        )
        return result
