"""
workflows/common.py - Helpers shared by the estimation workflows
"""

from __future__ import annotations
from typing import Optional, Tuple

from ..bootstrap.config import DefaultsConfig
from ..core.inputs import LaborInput, MaterialLineInput
from ..cost.schema import MaterialLine
from ..labor import LaborSchedule, LaborScheduler, build_allocation


def percent_to_fraction(percent: Optional[float], default_percent: float) -> float:
    """Request percentages become fractions; None takes the configured default."""
    value = default_percent if percent is None else percent
    return value / 100.0


def resolve_fractions(
    profit_percent: Optional[float],
    waste_percent: Optional[float],
    defaults: DefaultsConfig,
) -> Tuple[float, float]:
    """(profit_fraction, waste_fraction) for a request."""
    return (
        percent_to_fraction(profit_percent, defaults.profit_percent),
        percent_to_fraction(waste_percent, defaults.waste_percent),
    )


def material_line_from_input(item: MaterialLineInput) -> MaterialLine:
    return MaterialLine(
        name=item.name,
        quantity_per_base_unit=item.quantity_per_base_unit,
        unit=item.unit,
        unit_price=item.unit_price,
        supplier=item.supplier,
    )


def schedule_stage(
    scheduler: LaborScheduler,
    labor: LaborInput,
    productivity: float,
    quantity: float,
    fractional: bool = False,
) -> Optional[LaborSchedule]:
    """
    Schedule one stage's crew, or None while no worker is entered.

    Negative counts and malformed ratios raise InvalidAllocation.
    """
    allocation = build_allocation(labor.tukang_count, labor.pekerja_count, labor.ratio)
    if allocation is None:
        return None
    if fractional:
        return scheduler.schedule_fractional(allocation, productivity, quantity)
    return scheduler.schedule(allocation, productivity, quantity)
