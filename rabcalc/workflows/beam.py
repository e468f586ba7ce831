"""
workflows/beam.py - Reinforced concrete beam estimate

Beton, Bekisting and Besi sub-works as for a footing. The formwork
covers the soffit, both sides and both ends; the reinforcement is the
longitudinal bars plus closed stirrups along the span.
"""

from __future__ import annotations
import logging

from ..core.inputs import BeamRequest, RectangularPrism
from ..core.unit_converter import UnitConverter
from ..cost import DurationMode, EstimationResult
from .common import resolve_fractions
from .concrete import ConcreteWorkEstimator

logger = logging.getLogger(__name__)


def beam_formwork_area(length: float, width: float, height: float) -> float:
    """Soffit + two sides + two ends, in m2; 0 while a dimension is missing."""
    if length <= 0 or width <= 0 or height <= 0:
        return 0.0
    return length * width + 2 * length * height + 2 * width * height


class BeamEstimator(ConcreteWorkEstimator):
    """Estimates a beam job."""

    def estimate(self, request: BeamRequest, *, final: bool = False) -> EstimationResult:
        """
        Estimate HPP/RAB for a beam.

        Raises:
            CommitRejected: final=True and some field is invalid
            UnknownGrade: unknown concrete grade or bar code
            MaterialNotFound: a stage material is missing from the catalog
        """
        warnings = []
        if final:
            warnings = self.validator.commit(request).warnings

        profit, waste = resolve_fractions(
            request.profit_percent, request.waste_percent, self.config.defaults
        )

        cover_m = UnitConverter.normalize(request.cover_mm, "mm", "m")
        spacing_m = UnitConverter.normalize(request.stirrup_spacing_mm, "mm", "m")

        volume = self.geometry.compute_volume(RectangularPrism(
            length=request.length_m, width=request.width_m, height=request.height_m,
        ))
        formwork_area = beam_formwork_area(request.length_m, request.width_m, request.height_m)
        plan = self.planner.plan_beam(
            request.length_m, request.width_m, request.height_m, cover_m, spacing_m,
            request.main_bar, request.stirrup_bar, request.main_bar_count,
        )

        grade = request.concrete_grade or self.config.defaults.concrete_grade
        sub_works = [
            self._concrete_stage(
                grade, volume, request.concrete_labor, request.productivity, waste, profit,
            ),
            self._formwork_stage(formwork_area, request.formwork_labor, waste, profit),
            self._rebar_stage(
                [(plan.main_bar, plan.stock_bars_main),
                 (plan.stirrup_bar, plan.stock_bars_stirrup)],
                plan.total_weight, volume, request.rebar_labor, waste, profit,
                details={"main_bars": plan.main_bar_count, "stirrups": plan.stirrup_count},
            ),
        ]
        if request.additional_materials:
            sub_works.append(self._additional_stage(request.additional_materials, profit))

        result = self.aggregator.aggregate_sub_works(
            sub_works,
            mode=DurationMode.PARALLEL,
            name=request.name or "Balok",
            details={
                "dimensions": {
                    "length_m": request.length_m,
                    "width_m": request.width_m,
                    "height_m": request.height_m,
                    "cover_mm": request.cover_mm,
                },
                "quantities": {
                    "concrete_volume_m3": round(volume, 4),
                    "formwork_area_m2": round(formwork_area, 4),
                    "reinforcement_weight_kg": round(plan.total_weight, 3),
                },
                "concrete": self.resolver.concrete_materials(grade, volume).to_dict(),
                "reinforcement": plan.to_dict(),
                "waste_fraction": waste,
                "final": final,
                "warnings": [w.to_dict() for w in warnings],
            },
        )

        logger.info(
            f"Beam '{result.name}': {volume:.3f} m3, {formwork_area:.2f} m2, "
            f"{plan.stirrup_count} stirrups, {plan.total_weight:.2f} kg, "
            f"HPP {result.hpp:.2f}, RAB {result.rab:.2f}, {result.duration_days:.2f} day(s)"
        )
        return result
