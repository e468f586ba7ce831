"""
workflows/footplate.py - Pad footing estimate

A footing is priced as the three concrete sub-works (Beton, Bekisting,
Besi) with a two-way bar mat and formwork under the plan area. Extra
material lines entered by the user form a fourth "Tambahan" sub-work
with no labor.
"""

from __future__ import annotations
import logging

from ..core.inputs import FootplateRequest, RectangularPrism
from ..core.unit_converter import UnitConverter
from ..cost import DurationMode, EstimationResult
from .common import resolve_fractions
from .concrete import ConcreteWorkEstimator

logger = logging.getLogger(__name__)


class FootplateEstimator(ConcreteWorkEstimator):
    """Estimates a pad footing job."""

    def estimate(self, request: FootplateRequest, *, final: bool = False) -> EstimationResult:
        """
        Estimate HPP/RAB for a footing.

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

        thickness_m = UnitConverter.normalize(request.thickness_mm, "mm", "m")
        cover_m = UnitConverter.normalize(request.cover_mm, "mm", "m")
        spacing_x = UnitConverter.normalize(request.spacing_x_mm, "mm", "m")
        spacing_y = UnitConverter.normalize(request.spacing_y_mm, "mm", "m")

        volume = self.geometry.compute_volume(RectangularPrism(
            length=request.length_m, width=request.width_m, height=thickness_m,
        ))
        formwork_area = (
            request.length_m * request.width_m
            if request.length_m > 0 and request.width_m > 0 else 0.0
        )
        plan = self.planner.plan_footing(
            request.length_m, request.width_m, cover_m,
            spacing_x, spacing_y, request.bar_x, request.bar_y,
        )

        grade = request.concrete_grade or self.config.defaults.concrete_grade
        sub_works = [
            self._concrete_stage(
                grade, volume, request.concrete_labor, request.productivity, waste, profit,
            ),
            self._formwork_stage(formwork_area, request.formwork_labor, waste, profit),
            self._rebar_stage(
                [(plan.bar_x, plan.stock_bars_x), (plan.bar_y, plan.stock_bars_y)],
                plan.total_weight, volume, request.rebar_labor, waste, profit,
                details={"bars_x": plan.x.bar_count, "bars_y": plan.y.bar_count},
            ),
        ]
        if request.additional_materials:
            sub_works.append(self._additional_stage(request.additional_materials, profit))

        result = self.aggregator.aggregate_sub_works(
            sub_works,
            mode=DurationMode.PARALLEL,
            name=request.name or "Footplate",
            details={
                "dimensions": {
                    "length_m": request.length_m,
                    "width_m": request.width_m,
                    "thickness_mm": request.thickness_mm,
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
            f"Footplate '{result.name}': {volume:.3f} m3, {formwork_area:.2f} m2, "
            f"{plan.total_weight:.2f} kg, HPP {result.hpp:.2f}, RAB {result.rab:.2f}, "
            f"{result.duration_days:.2f} day(s)"
        )
        return result
