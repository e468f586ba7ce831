"""
structural/reinforcement.py - Bar layout for slabs and pad footings

Bar count per axis from span, cover and spacing; bar length, weight and
12 m stock bars. Lengths are in meters throughout.

Bar count includes the starting bar at the edge:
    bars = ceil(effective_span / spacing) + 1
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional
import logging
import math

from ..core.constants import (
    BEAM_COVER_MAX_M,
    BEAM_COVER_MIN_M,
    BEAM_MAIN_BAR_COUNT,
    COVER_MAX_M,
    COVER_MIN_M,
    SPACING_MAX_M,
    SPACING_MIN_M,
    STIRRUP_SPACING_MAX_M,
    STIRRUP_SPACING_MIN_M,
)
from ..core.tables import EngineTables, get_tables
from ..errors import ErrorCode, UnknownGrade

logger = logging.getLogger(__name__)

# Tolerance for range checks on values converted from millimeters
RANGE_TOLERANCE = 1e-9


def normalize_bar_code(code: str) -> str:
    """'d12', ' D12 ' and 'D12' all name the same bar."""
    return (code or "").strip().upper()


def is_cover_valid(cover: float) -> bool:
    return COVER_MIN_M - RANGE_TOLERANCE <= cover <= COVER_MAX_M + RANGE_TOLERANCE


def is_spacing_valid(spacing: float) -> bool:
    return SPACING_MIN_M - RANGE_TOLERANCE <= spacing <= SPACING_MAX_M + RANGE_TOLERANCE


def is_beam_cover_valid(cover: float) -> bool:
    return BEAM_COVER_MIN_M - RANGE_TOLERANCE <= cover <= BEAM_COVER_MAX_M + RANGE_TOLERANCE


def is_stirrup_spacing_valid(spacing: float) -> bool:
    return (STIRRUP_SPACING_MIN_M - RANGE_TOLERANCE
            <= spacing <= STIRRUP_SPACING_MAX_M + RANGE_TOLERANCE)


@dataclass(frozen=True)
class AxisPlan:
    """Bars laid across one axis."""
    span: float
    cover: float
    spacing: float
    orthogonal_span: float
    effective_span: float
    bar_count: int
    total_length: float

    @property
    def is_valid_design(self) -> bool:
        return is_cover_valid(self.cover) and is_spacing_valid(self.spacing)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "span": self.span,
            "cover": self.cover,
            "spacing": self.spacing,
            "orthogonal_span": self.orthogonal_span,
            "effective_span": round(self.effective_span, 4),
            "bar_count": self.bar_count,
            "total_length": round(self.total_length, 4),
            "is_valid_design": self.is_valid_design,
        }


@dataclass(frozen=True)
class FootingPlan:
    """
    Two-way bar mat for a pad footing.

    X bars are spaced across the width and run along the length;
    Y bars are spaced across the length and run along the width.
    """
    x: AxisPlan
    y: AxisPlan
    bar_x: str
    bar_y: str
    weight_x: float
    weight_y: float
    stock_bars_x: int
    stock_bars_y: int
    stock_bar_length_m: float

    @property
    def total_length(self) -> float:
        return self.x.total_length + self.y.total_length

    @property
    def total_weight(self) -> float:
        return self.weight_x + self.weight_y

    @property
    def is_valid_design(self) -> bool:
        return self.x.is_valid_design and self.y.is_valid_design

    def to_dict(self) -> Dict[str, Any]:
        return {
            "x": {**self.x.to_dict(), "bar": self.bar_x,
                  "weight_kg": round(self.weight_x, 3), "stock_bars": self.stock_bars_x},
            "y": {**self.y.to_dict(), "bar": self.bar_y,
                  "weight_kg": round(self.weight_y, 3), "stock_bars": self.stock_bars_y},
            "total_length": round(self.total_length, 4),
            "total_weight_kg": round(self.total_weight, 3),
            "stock_bar_length_m": self.stock_bar_length_m,
            "is_valid_design": self.is_valid_design,
        }


@dataclass(frozen=True)
class BeamPlan:
    """
    Longitudinal bars and closed stirrups for a rectangular beam.

    Stirrups wrap the core inside the cover: perimeter 2 * (b + h) with
    b and h reduced by twice the cover, one stirrup per spacing plus one.
    """
    length: float
    width: float
    height: float
    cover: float
    stirrup_spacing: float
    main_bar: str
    stirrup_bar: str
    main_bar_count: int
    main_length: float
    stirrup_count: int
    stirrup_perimeter: float
    main_weight: float
    stirrup_weight: float
    stock_bars_main: int
    stock_bars_stirrup: int
    stock_bar_length_m: float

    @property
    def stirrup_length(self) -> float:
        return self.stirrup_count * self.stirrup_perimeter

    @property
    def total_weight(self) -> float:
        return self.main_weight + self.stirrup_weight

    @property
    def is_valid_design(self) -> bool:
        return is_beam_cover_valid(self.cover) and is_stirrup_spacing_valid(self.stirrup_spacing)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "main": {
                "bar": self.main_bar,
                "count": self.main_bar_count,
                "total_length": round(self.main_length, 4),
                "weight_kg": round(self.main_weight, 3),
                "stock_bars": self.stock_bars_main,
            },
            "stirrups": {
                "bar": self.stirrup_bar,
                "count": self.stirrup_count,
                "spacing": self.stirrup_spacing,
                "perimeter": round(self.stirrup_perimeter, 4),
                "total_length": round(self.stirrup_length, 4),
                "weight_kg": round(self.stirrup_weight, 3),
                "stock_bars": self.stock_bars_stirrup,
            },
            "cover": self.cover,
            "total_weight_kg": round(self.total_weight, 3),
            "stock_bar_length_m": self.stock_bar_length_m,
            "is_valid_design": self.is_valid_design,
        }


class ReinforcementPlanner:
    """Plans bar counts, lengths and weights against the rebar table."""

    def __init__(self, tables: Optional[EngineTables] = None):
        self.tables = tables or get_tables()

    def per_meter_weight(self, bar_code: str) -> float:
        """
        Nominal bar weight in kg/m.

        Raises:
            UnknownGrade: bar code not in the rebar table
        """
        code = normalize_bar_code(bar_code)
        if code not in self.tables.rebar_weights:
            raise UnknownGrade(
                f"Unknown bar code: {bar_code}. "
                f"Available: {', '.join(self.tables.rebar_weights)}",
                field="bar_code",
                actual=bar_code,
                code=ErrorCode.LKP_UNKNOWN_BAR,
            )
        return self.tables.rebar_weights[code]

    def plan_axis(
        self,
        span: float,
        cover: float,
        spacing: float,
        orthogonal_span: float,
    ) -> AxisPlan:
        """
        Bars across one span.

        Incomplete input (span, spacing or orthogonal span not > 0) gives
        a zero plan instead of an error.
        """
        if span <= 0 or spacing <= 0 or orthogonal_span <= 0:
            return AxisPlan(span, cover, spacing, orthogonal_span, 0.0, 0, 0.0)

        effective_span = max(span - 2 * cover, 0.0)
        # round() absorbs float noise on exact multiples (1.2 / 0.2 -> 6, not 7)
        bar_count = math.ceil(round(effective_span / spacing, 9)) + 1
        total_length = bar_count * orthogonal_span

        plan = AxisPlan(
            span=span,
            cover=cover,
            spacing=spacing,
            orthogonal_span=orthogonal_span,
            effective_span=effective_span,
            bar_count=bar_count,
            total_length=total_length,
        )
        if not plan.is_valid_design:
            logger.debug(
                f"Bar layout outside design range: cover={cover} spacing={spacing}"
            )
        return plan

    def stock_bars(self, total_length: float) -> int:
        """Whole stock bars needed for a total bar length."""
        if total_length <= 0:
            return 0
        return math.ceil(round(total_length / self.tables.stock_bar_length_m, 9))

    def total_weight(self, plan: AxisPlan, bar_code: str) -> float:
        return plan.total_length * self.per_meter_weight(bar_code)

    def plan_footing(
        self,
        length: float,
        width: float,
        cover: float,
        spacing_x: float,
        spacing_y: float,
        bar_x: str = "D12",
        bar_y: str = "D12",
    ) -> FootingPlan:
        """Two-way bar mat for a footing of the given plan dimensions."""
        x = self.plan_axis(width, cover, spacing_x, length)
        y = self.plan_axis(length, cover, spacing_y, width)

        plan = FootingPlan(
            x=x,
            y=y,
            bar_x=normalize_bar_code(bar_x),
            bar_y=normalize_bar_code(bar_y),
            weight_x=self.total_weight(x, bar_x),
            weight_y=self.total_weight(y, bar_y),
            stock_bars_x=self.stock_bars(x.total_length),
            stock_bars_y=self.stock_bars(y.total_length),
            stock_bar_length_m=self.tables.stock_bar_length_m,
        )
        logger.debug(
            f"Footing {length}x{width} m: {x.bar_count}+{y.bar_count} bars, "
            f"{plan.total_weight:.2f} kg"
        )
        return plan

    def plan_beam(
        self,
        length: float,
        width: float,
        height: float,
        cover: float,
        stirrup_spacing: float,
        main_bar: str = "D12",
        stirrup_bar: str = "D8",
        main_bar_count: int = BEAM_MAIN_BAR_COUNT,
    ) -> BeamPlan:
        """
        Bars and stirrups for a beam; all lengths in meters.

        Incomplete dimensions or a non-positive spacing give a zero plan
        instead of an error.
        """
        main_weight_m = self.per_meter_weight(main_bar)
        stirrup_weight_m = self.per_meter_weight(stirrup_bar)

        if length <= 0 or width <= 0 or height <= 0 or stirrup_spacing <= 0:
            main_length, stirrup_count, perimeter = 0.0, 0, 0.0
        else:
            main_length = length * max(main_bar_count, 0)
            core_width = max(width - 2 * cover, 0.0)
            core_height = max(height - 2 * cover, 0.0)
            perimeter = 2 * (core_width + core_height)
            stirrup_count = math.ceil(round(length / stirrup_spacing, 9)) + 1

        plan = BeamPlan(
            length=length,
            width=width,
            height=height,
            cover=cover,
            stirrup_spacing=stirrup_spacing,
            main_bar=normalize_bar_code(main_bar),
            stirrup_bar=normalize_bar_code(stirrup_bar),
            main_bar_count=main_bar_count,
            main_length=main_length,
            stirrup_count=stirrup_count,
            stirrup_perimeter=perimeter,
            main_weight=main_length * main_weight_m,
            stirrup_weight=stirrup_count * perimeter * stirrup_weight_m,
            stock_bars_main=self.stock_bars(main_length),
            stock_bars_stirrup=self.stock_bars(stirrup_count * perimeter),
            stock_bar_length_m=self.tables.stock_bar_length_m,
        )
        logger.debug(
            f"Beam {length} m ({width}x{height}): {stirrup_count} stirrups, "
            f"{plan.total_weight:.2f} kg"
        )
        return plan
