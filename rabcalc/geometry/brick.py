"""
geometry/brick.py - Brick wall and tile coverage

Coverage of one market package of bricks (area of wall laid, with the
mortar joint), the mortar that wall needs, and box coverage for tiles.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
import logging
import math

from ..core.constants import (
    BRICK_HEIGHT_RANGE_MM,
    BRICK_LENGTH_RANGE_MM,
    BRICK_WIDTH_RANGE_MM,
)
from ..core.inputs import BrickCourse
from ..core.tables import BrickPreset, EngineTables, get_tables
from ..core.unit_converter import UnitConverter
from ..errors import (
    FieldError,
    InvalidDimensions,
    InvalidWasteFactor,
    UnknownGrade,
    create_warning,
)

logger = logging.getLogger(__name__)


@dataclass
class CoverageResult:
    """Wall coverage of one brick package."""

    pieces_per_package: float
    brick_length_m: float
    brick_width_m: float
    brick_height_m: float
    mortar_thickness_m: float
    effective_length_m: float
    effective_height_m: float

    area_per_brick: float
    total_area_base: float
    total_area_with_waste: float
    bricks_per_m2: float
    packages_per_m2: float

    mortar_volume_per_m2: float = 0.0
    waste_fraction: float = 0.0
    double_wall: bool = False
    warnings: List[FieldError] = field(default_factory=list)
    description: str = ""

    @property
    def waste_area(self) -> float:
        return self.total_area_with_waste - self.total_area_base

    @property
    def mortar_total_volume_m3(self) -> float:
        return self.mortar_volume_per_m2 * self.total_area_with_waste

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dimensions": {
                "brick_length_m": round(self.brick_length_m, 4),
                "brick_width_m": round(self.brick_width_m, 4),
                "brick_height_m": round(self.brick_height_m, 4),
                "effective_length_m": round(self.effective_length_m, 4),
                "effective_height_m": round(self.effective_height_m, 4),
            },
            "areas": {
                "area_per_brick": round(self.area_per_brick, 6),
                "total_area_base": round(self.total_area_base, 4),
                "total_area_with_waste": round(self.total_area_with_waste, 4),
                "waste_area": round(self.waste_area, 4),
            },
            "conversion": {
                "bricks_per_m2": round(self.bricks_per_m2, 2),
                "packages_per_m2": round(self.packages_per_m2, 6),
            },
            "mortar": {
                "volume_per_m2": round(self.mortar_volume_per_m2, 4),
                "total_volume": round(self.mortar_total_volume_m3, 4),
            },
            "warnings": [w.to_dict() for w in self.warnings],
            "description": self.description,
        }


@dataclass
class TileCoverage:
    """Floor area covered by one box of tiles."""

    pieces_per_box: float
    piece_width_cm: float
    piece_height_cm: float
    area_per_piece_m2: float
    coverage_per_box_m2: float

    @property
    def boxes_per_m2(self) -> float:
        return 1.0 / self.coverage_per_box_m2

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pieces_per_box": self.pieces_per_box,
            "piece_width_cm": self.piece_width_cm,
            "piece_height_cm": self.piece_height_cm,
            "area_per_piece_m2": round(self.area_per_piece_m2, 6),
            "coverage_per_box_m2": round(self.coverage_per_box_m2, 4),
            "boxes_per_m2": round(self.boxes_per_m2, 6),
            "description": (
                f"1 dus = {self.pieces_per_box:g} keping "
                f"{self.piece_width_cm:g}x{self.piece_height_cm:g} cm = "
                f"{self.coverage_per_box_m2:.2f} m2"
            ),
        }


# =============================================================================
# BRICK COVERAGE
# =============================================================================

def validate_brick_dimensions(length_mm: float, width_mm: float, height_mm: float) -> List[FieldError]:
    """Advisory warnings for unusual brick dimensions. Never blocks."""
    warnings = []

    lo, hi = BRICK_LENGTH_RANGE_MM
    if length_mm < lo or length_mm > hi:
        warnings.append(create_warning(
            "brick_length_mm",
            f"Brick length {length_mm:g}mm is unusual (typically 200-400mm)",
            actual=length_mm,
            expected=f"[{lo:g}, {hi:g}]",
        ))

    lo, hi = BRICK_WIDTH_RANGE_MM
    if width_mm < lo or width_mm > hi:
        warnings.append(create_warning(
            "brick_width_mm",
            f"Brick width {width_mm:g}mm is unusual (typically 100-200mm)",
            actual=width_mm,
            expected=f"[{lo:g}, {hi:g}]",
        ))

    lo, hi = BRICK_HEIGHT_RANGE_MM
    if height_mm < lo or height_mm > hi:
        warnings.append(create_warning(
            "brick_height_mm",
            f"Brick height {height_mm:g}mm is unusual (typically 50-200mm)",
            actual=height_mm,
            expected=f"[{lo:g}, {hi:g}]",
        ))

    return warnings


def mortar_volume_per_m2(
    brick_length_m: float,
    brick_height_m: float,
    brick_width_m: float,
    mortar_thickness_m: float,
    bricks_per_m2: float,
    double_wall: bool = False,
) -> float:
    """Mortar volume (m3) per m2 of wall from bed and head joints."""
    horizontal = brick_length_m * mortar_thickness_m * brick_width_m
    vertical = brick_height_m * mortar_thickness_m * brick_width_m
    multiplier = 2 if double_wall else 1
    return (horizontal + vertical) * bricks_per_m2 * multiplier


def compute_brick_coverage(params: BrickCourse, package_unit: str = "truk") -> CoverageResult:
    """
    Wall area covered by one package of bricks.

    Raises:
        InvalidDimensions: pieces, brick length or brick height not > 0
        InvalidWasteFactor: negative waste fraction
    """
    for name in ("pieces_per_package", "brick_length_mm", "brick_height_mm"):
        value = getattr(params, name)
        if not value > 0:
            raise InvalidDimensions(
                f"{name} must be greater than 0",
                field=name,
                actual=value,
            )
    if params.waste_fraction < 0 or not math.isfinite(params.waste_fraction):
        raise InvalidWasteFactor(
            f"Waste fraction must be >= 0, got {params.waste_fraction}",
            field="waste_fraction",
            actual=params.waste_fraction,
        )

    length_m = UnitConverter.normalize(params.brick_length_mm, "mm", "m")
    height_m = UnitConverter.normalize(params.brick_height_mm, "mm", "m")
    width_m = UnitConverter.normalize(params.brick_width_mm, "mm", "m")
    mortar_m = UnitConverter.normalize(params.mortar_thickness_mm, "mm", "m")

    effective_length = length_m + mortar_m
    effective_height = height_m + mortar_m

    area_per_brick = effective_length * effective_height
    total_area_base = params.pieces_per_package * area_per_brick
    total_area_with_waste = total_area_base * (1 + params.waste_fraction)

    bricks_per_m2 = 1.0 / area_per_brick
    packages_per_m2 = 1.0 / total_area_with_waste

    mortar_per_m2 = mortar_volume_per_m2(
        length_m, height_m, width_m, mortar_m, bricks_per_m2, params.double_wall
    )

    description = (
        f"1 m2 = {packages_per_m2:.4f} {package_unit} "
        f"({params.pieces_per_package:g} bata @ {params.brick_length_mm:g}x"
        f"{params.brick_width_mm:g}x{params.brick_height_mm:g}mm + mortar "
        f"{params.mortar_thickness_mm:g}mm = {total_area_with_waste:.2f} m2 tembok "
        f"termasuk waste {params.waste_fraction * 100:g}%)"
    )

    result = CoverageResult(
        pieces_per_package=params.pieces_per_package,
        brick_length_m=length_m,
        brick_width_m=width_m,
        brick_height_m=height_m,
        mortar_thickness_m=mortar_m,
        effective_length_m=effective_length,
        effective_height_m=effective_height,
        area_per_brick=area_per_brick,
        total_area_base=total_area_base,
        total_area_with_waste=total_area_with_waste,
        bricks_per_m2=bricks_per_m2,
        packages_per_m2=packages_per_m2,
        mortar_volume_per_m2=mortar_per_m2,
        waste_fraction=params.waste_fraction,
        double_wall=params.double_wall,
        warnings=validate_brick_dimensions(
            params.brick_length_mm, params.brick_width_mm, params.brick_height_mm
        ),
        description=description,
    )

    logger.debug(
        f"Brick coverage: {area_per_brick:.6f} m2/brick, "
        f"{total_area_with_waste:.4f} m2/package, {len(result.warnings)} warning(s)"
    )
    return result


# =============================================================================
# TILE COVERAGE
# =============================================================================

def compute_tile_coverage(
    pieces_per_box: float,
    piece_width_cm: float,
    piece_height_cm: float,
) -> TileCoverage:
    """
    Area covered by one box of tiles.

    Raises:
        InvalidDimensions: any input not > 0
    """
    inputs = {
        "pieces_per_box": pieces_per_box,
        "piece_width_cm": piece_width_cm,
        "piece_height_cm": piece_height_cm,
    }
    for name, value in inputs.items():
        if value is None or not value > 0:
            raise InvalidDimensions(f"{name} must be greater than 0", field=name, actual=value)

    width_m = UnitConverter.normalize(piece_width_cm, "cm", "m")
    height_m = UnitConverter.normalize(piece_height_cm, "cm", "m")
    area_per_piece = width_m * height_m

    return TileCoverage(
        pieces_per_box=pieces_per_box,
        piece_width_cm=piece_width_cm,
        piece_height_cm=piece_height_cm,
        area_per_piece_m2=area_per_piece,
        coverage_per_box_m2=pieces_per_box * area_per_piece,
    )


# =============================================================================
# PRESETS
# =============================================================================

def get_brick_presets(tables: Optional[EngineTables] = None) -> Dict[str, BrickPreset]:
    tables = tables or get_tables()
    return dict(tables.brick_presets)


def brick_course_from_preset(
    key: str,
    pieces_per_package: float,
    waste_fraction: float = 0.0,
    double_wall: bool = False,
    tables: Optional[EngineTables] = None,
) -> BrickCourse:
    """
    Build a BrickCourse from a named preset.

    Raises:
        UnknownGrade: preset key not in the table
    """
    presets = get_brick_presets(tables)
    if key not in presets:
        raise UnknownGrade(
            f"Unknown brick preset: {key}. Available: {', '.join(sorted(presets))}",
            field="preset",
            actual=key,
        )
    preset = presets[key]
    return BrickCourse(
        pieces_per_package=pieces_per_package,
        brick_length_mm=preset.length_mm,
        brick_width_mm=preset.width_mm,
        brick_height_mm=preset.height_mm,
        mortar_thickness_mm=preset.mortar_thickness_mm,
        waste_fraction=waste_fraction,
        double_wall=double_wall,
    )
