"""
workflows/single_stage.py - Volume, area and length jobs

One stage of work: a base quantity (from a shape or entered directly),
material lines priced with waste, one crew, and the HPP/RAB totals.
"""

from __future__ import annotations
from typing import Any, Dict, Optional, Tuple
import logging

from ..bootstrap.config import EngineConfig, get_config
from ..core.inputs import BrickCourse, SingleStageRequest
from ..core.tables import EngineTables, get_tables
from ..cost import EstimationAggregator, EstimationResult, MaterialCostAggregator
from ..geometry import GeometryEngine, has_positive_dimensions
from ..labor import LaborScheduler
from ..validators import CommitValidator
from .common import material_line_from_input, resolve_fractions, schedule_stage

logger = logging.getLogger(__name__)


class SingleStageEstimator:
    """Estimates a one-stage job."""

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        tables: Optional[EngineTables] = None,
    ):
        self.config = config or get_config()
        self.tables = tables or get_tables()

        self.geometry = GeometryEngine(self.tables)
        self.pricing = MaterialCostAggregator()
        self.scheduler = LaborScheduler(
            tukang_rate=self.config.rates.tukang_rate,
            pekerja_rate=self.config.rates.pekerja_rate,
        )
        self.aggregator = EstimationAggregator()
        self.validator = CommitValidator(self.tables)

    def base_quantity(self, request: SingleStageRequest) -> Tuple[float, str]:
        """
        Job quantity and unit; non-positive entries preview as 0.

        A brick course only describes the bricks, so the job quantity is
        the entered wall area. Waste is applied once, by the job.
        """
        if isinstance(request.shape, BrickCourse):
            return max(request.quantity, 0.0), "m2"
        if request.shape is not None:
            return self.geometry.compute_quantity(request.shape)
        return max(request.quantity, 0.0), request.unit

    def brick_coverage(self, request: SingleStageRequest) -> Optional[Dict[str, Any]]:
        """Per-m2 brick and mortar coefficients for a complete brick course."""
        shape = request.shape
        if not isinstance(shape, BrickCourse) or not has_positive_dimensions(shape):
            return None
        # per-m2 coefficients carry no waste; the job applies it
        coverage = self.geometry.compute_brick_coverage(
            shape.model_copy(update={"waste_fraction": 0.0})
        )
        return {
            "bricks_per_m2": round(coverage.bricks_per_m2, 4),
            "packages_per_m2": round(coverage.packages_per_m2, 6),
            "mortar_volume_per_m2": round(coverage.mortar_volume_per_m2, 6),
        }

    def estimate(self, request: SingleStageRequest, *, final: bool = False) -> EstimationResult:
        """
        Estimate HPP/RAB for the request.

        Args:
            request: Job input
            final: Run strict commit validation first

        Raises:
            CommitRejected: final=True and some field is invalid
        """
        warnings = []
        if final:
            warnings = self.validator.commit(request).warnings
        elif request.shape is not None:
            # advisory only while previewing
            warnings = self.validator.check_shape(request.shape).warnings

        quantity, unit = self.base_quantity(request)
        profit_fraction, waste_fraction = resolve_fractions(
            request.profit_percent, request.waste_percent, self.config.defaults
        )

        lines = [material_line_from_input(item) for item in request.materials]
        breakdown = self.pricing.price_lines(lines, quantity, waste_fraction)

        labor = schedule_stage(self.scheduler, request.labor, request.productivity, quantity)

        result = self.aggregator.aggregate(
            breakdown.total_cost,
            labor.labor_cost if labor else 0.0,
            profit_fraction,
            name=request.name,
            base_quantity=quantity,
            unit=unit,
            duration_days=labor.duration_days if labor else 0.0,
            materials=breakdown.lines,
            labor=labor,
            details={
                "waste_fraction": waste_fraction,
                "final": final,
                "warnings": [w.to_dict() for w in warnings],
                "brick_coverage": self.brick_coverage(request),
            },
        )

        logger.info(
            f"Estimated '{request.name or 'job'}': {quantity:.4f} {unit}, "
            f"HPP {result.hpp:.2f}, RAB {result.rab:.2f}, "
            f"{result.rounded_duration_days} day(s)"
        )
        return result
