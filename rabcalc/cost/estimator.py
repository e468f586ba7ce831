"""
cost/estimator.py - HPP/RAB aggregation.

Combines material and labor cost into HPP (cost price) and RAB
(billed price with profit margin), for one stage or a job made of
several sub-works.
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional, Sequence
import logging
import math

from ..errors import InvalidProfitFactor
from .enums import DurationMode
from .schema import EstimationResult, PricedLine

logger = logging.getLogger(__name__)


def check_profit_fraction(profit_fraction: float) -> None:
    """
    Raises:
        InvalidProfitFactor: negative or non-finite profit
    """
    if profit_fraction is None or not math.isfinite(profit_fraction) or profit_fraction < 0:
        raise InvalidProfitFactor(
            f"Profit fraction must be a finite value >= 0, got {profit_fraction}",
            field="profit_percent",
            actual=profit_fraction,
        )


class EstimationAggregator:
    """
    Builds EstimationResult objects.

    Duration of a multi-stage job depends on whether the stages overlap,
    so aggregate_sub_works() requires the caller to say which.
    """

    def aggregate(
        self,
        material_cost: float,
        labor_cost: float,
        profit_fraction: float,
        *,
        name: str = "",
        base_quantity: float = 0.0,
        unit: str = "",
        duration_days: float = 0.0,
        materials: Optional[List[PricedLine]] = None,
        labor: Any = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> EstimationResult:
        check_profit_fraction(profit_fraction)

        hpp = material_cost + labor_cost
        rab = hpp * (1 + profit_fraction)

        return EstimationResult(
            name=name,
            base_quantity=base_quantity,
            unit=unit,
            material_cost=material_cost,
            labor_cost=labor_cost,
            hpp=hpp,
            rab=rab,
            profit=rab - hpp,
            profit_fraction=profit_fraction,
            duration_days=duration_days,
            materials=list(materials or []),
            labor=labor,
            details=dict(details or {}),
        )

    def aggregate_sub_works(
        self,
        results: Sequence[EstimationResult],
        *,
        mode: DurationMode,
        name: str = "",
        details: Optional[Dict[str, Any]] = None,
    ) -> EstimationResult:
        """
        Combine sub-work results into one job result.

        Monetary fields are summed. Duration is the longest sub-work in
        PARALLEL mode and the sum in SEQUENTIAL mode. Base quantity is
        summed when every sub-work shares a unit; otherwise the first
        sub-work's quantity and unit are reported.

        Raises:
            ValueError: empty results or unknown mode
        """
        if not results:
            raise ValueError("Cannot aggregate an empty list of sub-works")
        if not isinstance(mode, DurationMode):
            raise ValueError(f"mode must be a DurationMode, got {mode!r}")

        material_cost = sum(r.material_cost for r in results)
        labor_cost = sum(r.labor_cost for r in results)
        hpp = sum(r.hpp for r in results)
        rab = sum(r.rab for r in results)
        profit = sum(r.profit for r in results)

        if mode == DurationMode.PARALLEL:
            duration = max(r.duration_days for r in results)
        else:
            duration = sum(r.duration_days for r in results)

        units = {r.unit for r in results}
        if len(units) == 1:
            base_quantity = sum(r.base_quantity for r in results)
            unit = results[0].unit
        else:
            base_quantity = results[0].base_quantity
            unit = results[0].unit

        fractions = {r.profit_fraction for r in results}
        if len(fractions) == 1:
            profit_fraction = results[0].profit_fraction
        else:
            profit_fraction = (rab / hpp - 1) if hpp > 0 else 0.0

        result = EstimationResult(
            name=name,
            base_quantity=base_quantity,
            unit=unit,
            material_cost=material_cost,
            labor_cost=labor_cost,
            hpp=hpp,
            rab=rab,
            profit=profit,
            profit_fraction=profit_fraction,
            duration_days=duration,
            duration_mode=mode,
            sub_works=list(results),
            details=dict(details or {}),
        )
        logger.debug(
            f"Aggregated {len(results)} sub-work(s) ({mode.value}): "
            f"HPP {hpp:.2f}, RAB {rab:.2f}, {duration:.2f} day(s)"
        )
        return result
