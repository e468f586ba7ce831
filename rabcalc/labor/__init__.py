"""
labor/ - Crew scheduling
"""

from .scheduler import (
    WorkerRatio,
    WorkerAllocation,
    LaborSchedule,
    LaborScheduler,
    build_allocation,
    count_teams,
)

__all__ = [
    "WorkerRatio",
    "WorkerAllocation",
    "LaborSchedule",
    "LaborScheduler",
    "build_allocation",
    "count_teams",
]
