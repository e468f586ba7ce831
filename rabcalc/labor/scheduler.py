"""
labor/scheduler.py - Crew teams, duration and labor cost

Workers are grouped into teams by a tukang:pekerja ratio. Each complete
team delivers the base productivity; with no complete team the crew is
still credited with one base rate so duration stays finite.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional
import logging
import math

from ..core.constants import DEFAULT_PEKERJA_RATE, DEFAULT_TUKANG_RATE
from ..errors import ErrorCode, InvalidAllocation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WorkerRatio:
    """Team composition: tukang units to pekerja units."""
    tukang_units: float
    pekerja_units: float

    def __post_init__(self):
        if self.tukang_units < 0 or self.pekerja_units < 0:
            raise InvalidAllocation(
                f"Ratio components must be >= 0, got {self}",
                field="ratio",
                actual=str(self),
                code=ErrorCode.ALC_BAD_RATIO,
            )
        if self.tukang_units == 0 and self.pekerja_units == 0:
            raise InvalidAllocation(
                "Ratio 0:0 forms no team",
                field="ratio",
                actual=str(self),
                code=ErrorCode.ALC_BAD_RATIO,
            )

    @classmethod
    def parse(cls, text: str) -> "WorkerRatio":
        """
        Parse "T:P" (e.g. "1:2").

        Raises:
            InvalidAllocation: malformed, negative or 0:0
        """
        parts = (text or "").split(":")
        if len(parts) != 2:
            raise InvalidAllocation(
                f"Ratio must look like 'T:P', got {text!r}",
                field="ratio",
                actual=text,
                code=ErrorCode.ALC_BAD_RATIO,
            )
        try:
            tukang, pekerja = (float(p.strip()) for p in parts)
        except ValueError:
            raise InvalidAllocation(
                f"Ratio components must be numbers, got {text!r}",
                field="ratio",
                actual=text,
                code=ErrorCode.ALC_BAD_RATIO,
            )
        if not (math.isfinite(tukang) and math.isfinite(pekerja)):
            raise InvalidAllocation(
                f"Ratio components must be finite, got {text!r}",
                field="ratio",
                actual=text,
                code=ErrorCode.ALC_BAD_RATIO,
            )
        return cls(tukang, pekerja)

    def __str__(self) -> str:
        return f"{self.tukang_units:g}:{self.pekerja_units:g}"


@dataclass(frozen=True)
class WorkerAllocation:
    """Workers assigned to one stage."""
    tukang_count: int
    pekerja_count: int
    ratio: WorkerRatio

    def __post_init__(self):
        if self.tukang_count < 0 or self.pekerja_count < 0:
            raise InvalidAllocation(
                f"Worker counts must be >= 0 "
                f"(tukang={self.tukang_count}, pekerja={self.pekerja_count})",
                field="tukang_count" if self.tukang_count < 0 else "pekerja_count",
                actual=min(self.tukang_count, self.pekerja_count),
                code=ErrorCode.ALC_NEGATIVE_COUNT,
            )
        if self.tukang_count == 0 and self.pekerja_count == 0:
            raise InvalidAllocation(
                "At least one tukang or pekerja is required",
                field="workers",
                actual=0,
            )

    @classmethod
    def of(cls, tukang_count: int, pekerja_count: int, ratio: str = "1:1") -> "WorkerAllocation":
        return cls(tukang_count, pekerja_count, WorkerRatio.parse(ratio))

    @property
    def total_workers(self) -> int:
        return self.tukang_count + self.pekerja_count

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tukang": self.tukang_count,
            "pekerja": self.pekerja_count,
            "ratio": str(self.ratio),
        }


@dataclass
class LaborSchedule:
    """Teams, duration and cost for one stage."""

    allocation: WorkerAllocation
    base_productivity: float
    total_quantity: float

    teams: int
    adjusted_productivity: float
    duration_days: float
    daily_labor_cost: float
    labor_cost: float
    tukang_rate: float
    pekerja_rate: float
    rounded: bool = True

    @property
    def tukang_used(self) -> float:
        return self.teams * self.allocation.ratio.tukang_units

    @property
    def pekerja_used(self) -> float:
        return self.teams * self.allocation.ratio.pekerja_units

    @property
    def tukang_idle(self) -> float:
        return self.allocation.tukang_count - self.tukang_used

    @property
    def pekerja_idle(self) -> float:
        return self.allocation.pekerja_count - self.pekerja_used

    def to_dict(self) -> Dict[str, Any]:
        return {
            "workers": self.allocation.to_dict(),
            "teams": self.teams,
            "base_productivity": self.base_productivity,
            "adjusted_productivity": round(self.adjusted_productivity, 4),
            "total_quantity": round(self.total_quantity, 4),
            "duration_days": round(self.duration_days, 4),
            "daily_labor_cost": round(self.daily_labor_cost, 2),
            "labor_cost": round(self.labor_cost, 2),
            "tukang": {
                "count": self.allocation.tukang_count,
                "rate": self.tukang_rate,
                "used": self.tukang_used,
                "idle": self.tukang_idle,
            },
            "pekerja": {
                "count": self.allocation.pekerja_count,
                "rate": self.pekerja_rate,
                "used": self.pekerja_used,
                "idle": self.pekerja_idle,
            },
        }


def count_teams(allocation: WorkerAllocation) -> int:
    """Complete teams the allocation can form."""
    ratio = allocation.ratio
    if ratio.tukang_units == 0:
        return int(allocation.pekerja_count // ratio.pekerja_units)
    if ratio.pekerja_units == 0:
        return int(allocation.tukang_count // ratio.tukang_units)
    return int(min(
        allocation.tukang_count // ratio.tukang_units,
        allocation.pekerja_count // ratio.pekerja_units,
    ))


class LaborScheduler:
    """Derives duration and labor cost from crews and productivity."""

    def __init__(
        self,
        tukang_rate: float = DEFAULT_TUKANG_RATE,
        pekerja_rate: float = DEFAULT_PEKERJA_RATE,
    ):
        self.tukang_rate = tukang_rate
        self.pekerja_rate = pekerja_rate

    def daily_cost(self, allocation: WorkerAllocation) -> float:
        return (allocation.tukang_count * self.tukang_rate
                + allocation.pekerja_count * self.pekerja_rate)

    def schedule(
        self,
        allocation: WorkerAllocation,
        base_productivity: float,
        total_quantity: float,
    ) -> LaborSchedule:
        """Schedule with duration rounded up to whole days."""
        return self._schedule(allocation, base_productivity, total_quantity, rounded=True)

    def schedule_fractional(
        self,
        allocation: WorkerAllocation,
        base_productivity: float,
        total_quantity: float,
    ) -> LaborSchedule:
        """Schedule with un-rounded duration, for stages summed before display."""
        return self._schedule(allocation, base_productivity, total_quantity, rounded=False)

    def _schedule(
        self,
        allocation: WorkerAllocation,
        base_productivity: float,
        total_quantity: float,
        rounded: bool,
    ) -> LaborSchedule:
        if allocation is None:
            raise InvalidAllocation("No worker allocation given", field="workers")

        teams = count_teams(allocation)
        adjusted = base_productivity * teams if teams > 0 else base_productivity
        quantity = max(total_quantity, 0.0)

        if adjusted > 0:
            duration = quantity / adjusted
            if rounded:
                duration = math.ceil(round(duration, 9))
        else:
            duration = 0

        daily = self.daily_cost(allocation)

        schedule = LaborSchedule(
            allocation=allocation,
            base_productivity=base_productivity,
            total_quantity=quantity,
            teams=teams,
            adjusted_productivity=adjusted,
            duration_days=duration,
            daily_labor_cost=daily,
            labor_cost=daily * duration,
            tukang_rate=self.tukang_rate,
            pekerja_rate=self.pekerja_rate,
            rounded=rounded,
        )
        logger.debug(
            f"Labor {allocation.ratio}: {teams} team(s), {adjusted:g}/day, "
            f"{duration} day(s), cost {schedule.labor_cost:.0f}"
        )
        return schedule


def build_allocation(tukang_count: int, pekerja_count: int, ratio: str) -> Optional[WorkerAllocation]:
    """
    Allocation for a stage, or None when no worker was entered yet.

    Negative counts and bad ratios still raise.
    """
    if tukang_count == 0 and pekerja_count == 0:
        WorkerRatio.parse(ratio)
        return None
    return WorkerAllocation.of(tukang_count, pekerja_count, ratio)
