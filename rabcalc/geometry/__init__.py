"""
geometry/ - Volumes, brick and tile coverage
"""

from .brick import (
    CoverageResult,
    TileCoverage,
    brick_course_from_preset,
    compute_brick_coverage,
    compute_tile_coverage,
    get_brick_presets,
    mortar_volume_per_m2,
    validate_brick_dimensions,
)

from .volume import (
    SHAPE_DIMENSIONS,
    GeometryEngine,
    compute_volume,
    has_positive_dimensions,
)

__all__ = [
    # Volume
    "SHAPE_DIMENSIONS",
    "GeometryEngine",
    "compute_volume",
    "has_positive_dimensions",
    # Brick / tile
    "CoverageResult",
    "TileCoverage",
    "brick_course_from_preset",
    "compute_brick_coverage",
    "compute_tile_coverage",
    "get_brick_presets",
    "mortar_volume_per_m2",
    "validate_brick_dimensions",
]
