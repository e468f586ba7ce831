"""
mix/ - Concrete grades and mortar ratios
"""

from .resolver import (
    ConcreteMix,
    MortarMix,
    MixRatio,
    ConcreteMaterials,
    MortarMaterials,
    MixRatioResolver,
    normalize_grade_code,
)

__all__ = [
    "ConcreteMix",
    "MortarMix",
    "MixRatio",
    "ConcreteMaterials",
    "MortarMaterials",
    "MixRatioResolver",
    "normalize_grade_code",
]
