"""
workflows/ - Job estimation pipelines
"""

from .single_stage import SingleStageEstimator
from .concrete import ConcreteWorkEstimator
from .footplate import FootplateEstimator
from .beam import BeamEstimator
from .wall import PlasterEstimator, WallEstimator

__all__ = [
    "SingleStageEstimator",
    "ConcreteWorkEstimator",
    "FootplateEstimator",
    "BeamEstimator",
    "WallEstimator",
    "PlasterEstimator",
]
