"""
cost/material.py - Material cost pricing

base = quantity_per_base_unit * total_quantity
with_waste = base * (1 + waste_fraction)
cost = with_waste * unit_price
"""

from __future__ import annotations
from typing import Iterable
import logging
import math

from ..core.unit_converter import ConversionRule, UnitConverter
from ..errors import InvalidWasteFactor
from .schema import MaterialCostBreakdown, MaterialLine, PricedLine

logger = logging.getLogger(__name__)


def check_waste_fraction(waste_fraction: float) -> None:
    """
    Raises:
        InvalidWasteFactor: negative or non-finite waste
    """
    if waste_fraction is None or not math.isfinite(waste_fraction) or waste_fraction < 0:
        raise InvalidWasteFactor(
            f"Waste fraction must be a finite value >= 0, got {waste_fraction}",
            field="waste_percent",
            actual=waste_fraction,
        )


class MaterialCostAggregator:
    """Prices material lines against a job quantity."""

    def price_line(
        self,
        line: MaterialLine,
        total_quantity: float,
        waste_fraction: float,
    ) -> PricedLine:
        check_waste_fraction(waste_fraction)

        base = line.quantity_per_base_unit * total_quantity
        with_waste = base * (1 + waste_fraction)
        cost = with_waste * line.unit_price

        return PricedLine(
            line=line,
            total_quantity=total_quantity,
            waste_fraction=waste_fraction,
            base_quantity=base,
            quantity_with_waste=with_waste,
            cost=cost,
        )

    def price_lines(
        self,
        lines: Iterable[MaterialLine],
        total_quantity: float,
        waste_fraction: float,
    ) -> MaterialCostBreakdown:
        check_waste_fraction(waste_fraction)

        breakdown = MaterialCostBreakdown()
        for line in lines:
            breakdown.add_line(self.price_line(line, total_quantity, waste_fraction))

        logger.debug(
            f"Priced {len(breakdown.lines)} line(s) for quantity {total_quantity}: "
            f"{breakdown.total_cost:.2f}"
        )
        return breakdown

    def price_packaged_line(
        self,
        line: MaterialLine,
        total_quantity: float,
        waste_fraction: float,
        rule: ConversionRule,
    ) -> PricedLine:
        """
        Price a line bought in whole market packages.

        The line's quantity_per_base_unit is in the rule's base unit and
        its unit_price is per market package; the quantity with waste is
        rounded up to whole packages before pricing.
        """
        check_waste_fraction(waste_fraction)

        base = line.quantity_per_base_unit * total_quantity
        with_waste = base * (1 + waste_fraction)
        packages = UnitConverter.packages_needed(with_waste, rule)

        return PricedLine(
            line=line,
            total_quantity=total_quantity,
            waste_fraction=waste_fraction,
            base_quantity=base,
            quantity_with_waste=with_waste,
            cost=packages * line.unit_price,
            packages=packages,
            base_unit=rule.base_unit,
        )
