"""
geometry/volume.py - Shape volumes

Volumes in cubic meters from ShapeSpec dimensions in meters. Any
non-positive dimension gives 0.0 so a half-filled form still previews;
final positivity is checked by the commit validator.
"""

from __future__ import annotations
from typing import Dict, Tuple
import logging
import math

from ..core.inputs import (
    BrickCourse,
    Cone,
    Cylinder,
    Pyramid,
    RectangularPrism,
    Sphere,
    TrapezoidPrism,
)
from ..core.tables import EngineTables, get_tables
from .brick import (
    CoverageResult,
    TileCoverage,
    brick_course_from_preset,
    compute_brick_coverage,
    compute_tile_coverage,
)

logger = logging.getLogger(__name__)


# kind -> dimension fields that must all be > 0
SHAPE_DIMENSIONS: Dict[str, Tuple[str, ...]] = {
    "rectangular_prism": ("length", "width", "height"),
    "cylinder": ("radius", "height"),
    "sphere": ("radius",),
    "cone": ("radius", "height"),
    "pyramid": ("base_length", "base_width", "height"),
    "trapezoid_prism": ("top_length", "bottom_length", "width", "height"),
    "brick_course": ("pieces_per_package", "brick_length_mm", "brick_height_mm"),
}


def has_positive_dimensions(shape) -> bool:
    """True when every required dimension of the shape is > 0."""
    return all(getattr(shape, name) > 0 for name in SHAPE_DIMENSIONS[shape.kind])


class GeometryEngine:
    """Computes base quantities from shape dimensions."""

    def __init__(self, tables: EngineTables = None):
        self.tables = tables or get_tables()

    def compute_volume(self, shape) -> float:
        """
        Volume in m3.

        A brick course yields the mortar volume needed to lay one
        package of bricks.
        """
        if not has_positive_dimensions(shape):
            logger.debug(f"Incomplete {shape.kind} dimensions, volume preview is 0")
            return 0.0

        if isinstance(shape, RectangularPrism):
            volume = shape.length * shape.width * shape.height
        elif isinstance(shape, Cylinder):
            volume = math.pi * shape.radius ** 2 * shape.height
        elif isinstance(shape, Sphere):
            volume = (4.0 / 3.0) * math.pi * shape.radius ** 3
        elif isinstance(shape, Cone):
            volume = (1.0 / 3.0) * math.pi * shape.radius ** 2 * shape.height
        elif isinstance(shape, Pyramid):
            volume = (1.0 / 3.0) * shape.base_length * shape.base_width * shape.height
        elif isinstance(shape, TrapezoidPrism):
            volume = 0.5 * (shape.top_length + shape.bottom_length) * shape.width * shape.height
        elif isinstance(shape, BrickCourse):
            volume = compute_brick_coverage(shape).mortar_total_volume_m3
        else:
            raise TypeError(f"Unsupported shape: {type(shape).__name__}")

        logger.debug(f"{shape.kind} volume: {volume:.6f} m3")
        return volume

    def compute_quantity(self, shape) -> Tuple[float, str]:
        """
        Base quantity a shape contributes to a job, with its unit.

        Solids give m3; a brick course gives the wall area one package
        covers (m2, waste included).
        """
        if isinstance(shape, BrickCourse):
            if not has_positive_dimensions(shape):
                return 0.0, "m2"
            return compute_brick_coverage(shape).total_area_with_waste, "m2"
        return self.compute_volume(shape), "m3"

    def compute_brick_coverage(self, params: BrickCourse, package_unit: str = "truk") -> CoverageResult:
        return compute_brick_coverage(params, package_unit)

    def compute_tile_coverage(
        self,
        pieces_per_box: float,
        piece_width_cm: float,
        piece_height_cm: float,
    ) -> TileCoverage:
        return compute_tile_coverage(pieces_per_box, piece_width_cm, piece_height_cm)

    def brick_from_preset(
        self,
        key: str,
        pieces_per_package: float,
        waste_fraction: float = 0.0,
        double_wall: bool = False,
    ) -> BrickCourse:
        return brick_course_from_preset(
            key, pieces_per_package, waste_fraction, double_wall, tables=self.tables
        )


def compute_volume(shape) -> float:
    """Module-level shortcut using the current tables."""
    return GeometryEngine().compute_volume(shape)
