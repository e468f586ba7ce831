"""
structural/ - Reinforcement planning
"""

from .reinforcement import (
    AxisPlan,
    BeamPlan,
    FootingPlan,
    ReinforcementPlanner,
    is_beam_cover_valid,
    is_cover_valid,
    is_spacing_valid,
    is_stirrup_spacing_valid,
    normalize_bar_code,
)

__all__ = [
    "AxisPlan",
    "BeamPlan",
    "FootingPlan",
    "ReinforcementPlanner",
    "is_beam_cover_valid",
    "is_cover_valid",
    "is_spacing_valid",
    "is_stirrup_spacing_valid",
    "normalize_bar_code",
]
