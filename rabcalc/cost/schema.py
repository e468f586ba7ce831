"""
cost/schema.py - Cost data structures.

Material lines, priced lines and the HPP/RAB estimation result.
Values are kept unrounded; to_dict() rounds for presentation only.
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional
import math

from .enums import DurationMode


@dataclass(frozen=True)
class MaterialLine:
    """Material consumed per base unit of work (e.g. sak semen per m3)."""
    name: str
    quantity_per_base_unit: float
    unit: str
    unit_price: float
    supplier: Optional[str] = None
    is_placeholder: bool = False

    def with_overrides(self, **changes: Any) -> "MaterialLine":
        """Copy of this line with user overrides applied."""
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "quantity_per_base_unit": self.quantity_per_base_unit,
            "unit": self.unit,
            "unit_price": round(self.unit_price, 2),
            "supplier": self.supplier,
            "is_placeholder": self.is_placeholder,
        }


@dataclass
class PricedLine:
    """A material line priced against a job quantity."""
    line: MaterialLine
    total_quantity: float
    waste_fraction: float
    base_quantity: float
    quantity_with_waste: float
    cost: float

    # Set when the quantity was rounded up to whole market packages
    packages: Optional[int] = None
    base_unit: Optional[str] = None

    @property
    def name(self) -> str:
        return self.line.name

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "name": self.line.name,
            "unit": self.line.unit,
            "unit_price": round(self.line.unit_price, 2),
            "supplier": self.line.supplier,
            "base_quantity": round(self.base_quantity, 4),
            "quantity_with_waste": round(self.quantity_with_waste, 4),
            "cost": round(self.cost, 2),
        }
        if self.packages is not None:
            data["packages"] = self.packages
            data["base_unit"] = self.base_unit
        return data


@dataclass
class MaterialCostBreakdown:
    """Priced lines for one stage."""
    lines: List[PricedLine] = field(default_factory=list)

    @property
    def total_cost(self) -> float:
        return sum(line.cost for line in self.lines)

    def add_line(self, line: PricedLine) -> None:
        self.lines.append(line)

    def extend(self, other: "MaterialCostBreakdown") -> None:
        self.lines.extend(other.lines)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_cost": round(self.total_cost, 2),
            "line_count": len(self.lines),
            "lines": [line.to_dict() for line in self.lines],
        }


@dataclass
class EstimationResult:
    """
    HPP/RAB estimate for a job or one of its sub-works.

    hpp = material_cost + labor_cost; rab = hpp * (1 + profit_fraction)
    for a single stage. A composite result carries its sub-works and each
    monetary total is the sum of the sub-work totals.
    """
    name: str
    base_quantity: float
    unit: str

    material_cost: float
    labor_cost: float
    hpp: float
    rab: float
    profit: float
    profit_fraction: float

    duration_days: float = 0.0
    duration_mode: Optional[DurationMode] = None

    sub_works: List["EstimationResult"] = field(default_factory=list)
    materials: List[PricedLine] = field(default_factory=list)
    labor: Optional[Any] = None  # LaborSchedule
    details: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_composite(self) -> bool:
        return bool(self.sub_works)

    @property
    def hpp_per_unit(self) -> float:
        if self.base_quantity <= 0:
            return 0.0
        return self.hpp / self.base_quantity

    @property
    def rab_per_unit(self) -> float:
        if self.base_quantity <= 0:
            return 0.0
        return self.rab / self.base_quantity

    @property
    def rounded_duration_days(self) -> int:
        """Whole days for display."""
        return math.ceil(round(self.duration_days, 9))

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "name": self.name,
            "base_quantity": round(self.base_quantity, 4),
            "unit": self.unit,
            "material_cost": round(self.material_cost, 2),
            "labor_cost": round(self.labor_cost, 2),
            "hpp": round(self.hpp, 2),
            "rab": round(self.rab, 2),
            "profit": round(self.profit, 2),
            "profit_percent": round(self.profit_fraction * 100, 4),
            "hpp_per_unit": round(self.hpp_per_unit, 2),
            "rab_per_unit": round(self.rab_per_unit, 2),
            "duration_days": round(self.duration_days, 4),
            "rounded_duration_days": self.rounded_duration_days,
        }
        if self.duration_mode is not None:
            data["duration_mode"] = self.duration_mode.value
        if self.materials:
            data["materials"] = [m.to_dict() for m in self.materials]
        if self.labor is not None:
            data["labor"] = self.labor.to_dict()
        if self.sub_works:
            data["sub_works"] = [s.to_dict() for s in self.sub_works]
        if self.details:
            data["details"] = self.details
        return data
