"""
validators/commit.py - Final commit validation

Preview calculations accept blank and zero input. Before an estimate
is accepted as final, every request field is checked here and all
offending fields are reported together.
"""

from __future__ import annotations
from typing import Iterable, Optional
import logging

from ..core.constants import (
    BEAM_COVER_MAX_M,
    BEAM_COVER_MIN_M,
    BRICK_CATALOG_NAMES,
    COVER_MAX_M,
    COVER_MIN_M,
    SPACING_MAX_M,
    SPACING_MIN_M,
    STIRRUP_SPACING_MAX_M,
    STIRRUP_SPACING_MIN_M,
)
from ..core.inputs import (
    BeamRequest,
    BrickCourse,
    FootplateRequest,
    LaborInput,
    MaterialLineInput,
    PlasterRequest,
    SingleStageRequest,
    WallRequest,
)
from ..core.tables import EngineTables, get_tables
from ..core.unit_converter import UnitConverter
from ..errors import (
    ErrorCode,
    EstimationError,
    ValidationReport,
    create_bounds_error,
    create_field_error,
)
from ..geometry import SHAPE_DIMENSIONS, validate_brick_dimensions
from ..labor import WorkerRatio
from ..mix import MixRatioResolver
from ..structural import (
    ReinforcementPlanner,
    is_beam_cover_valid,
    is_cover_valid,
    is_spacing_valid,
    is_stirrup_spacing_valid,
)

logger = logging.getLogger(__name__)


def _mm(value_m: float) -> float:
    return UnitConverter.normalize(value_m, "m", "mm")


class CommitValidator:
    """Strict validation tier for final estimates."""

    def __init__(self, tables: Optional[EngineTables] = None):
        self.tables = tables or get_tables()
        self.resolver = MixRatioResolver(self.tables)
        self.planner = ReinforcementPlanner(self.tables)

    # ==================== Field groups ====================

    def check_shape(self, shape, prefix: str = "shape") -> ValidationReport:
        report = ValidationReport()
        for name in SHAPE_DIMENSIONS[shape.kind]:
            value = getattr(shape, name)
            if not value > 0:
                report.add(create_field_error(
                    f"{prefix}.{name}",
                    f"{name} must be greater than 0",
                    actual=value,
                    expected="> 0",
                ))

        if isinstance(shape, BrickCourse):
            if shape.brick_width_mm < 0:
                report.add(create_field_error(
                    f"{prefix}.brick_width_mm", "brick_width_mm must be >= 0",
                    actual=shape.brick_width_mm, expected=">= 0",
                ))
            if shape.mortar_thickness_mm < 0:
                report.add(create_field_error(
                    f"{prefix}.mortar_thickness_mm", "mortar_thickness_mm must be >= 0",
                    actual=shape.mortar_thickness_mm, expected=">= 0",
                ))
            if shape.waste_fraction < 0:
                report.add(create_field_error(
                    f"{prefix}.waste_fraction", "waste_fraction must be >= 0",
                    code=ErrorCode.PRC_NEGATIVE_WASTE,
                    actual=shape.waste_fraction, expected=">= 0",
                ))
            for warning in validate_brick_dimensions(
                shape.brick_length_mm, shape.brick_width_mm, shape.brick_height_mm
            ):
                warning.field = f"{prefix}.{warning.field}"
                report.add(warning)
        return report

    def check_labor(self, labor: LaborInput, prefix: str = "labor") -> ValidationReport:
        report = ValidationReport()

        for name in ("tukang_count", "pekerja_count"):
            value = getattr(labor, name)
            if value < 0:
                report.add(create_field_error(
                    f"{prefix}.{name}", f"{name} must be >= 0",
                    code=ErrorCode.ALC_NEGATIVE_COUNT, actual=value, expected=">= 0",
                ))
        if labor.tukang_count == 0 and labor.pekerja_count == 0:
            report.add(create_field_error(
                f"{prefix}.workers", "At least one tukang or pekerja is required",
                code=ErrorCode.ALC_NO_WORKERS, actual=0, expected=">= 1",
            ))

        try:
            WorkerRatio.parse(labor.ratio)
        except EstimationError as exc:
            exc.field = f"{prefix}.ratio"
            report.add_exception(exc)
        return report

    def check_productivity(self, value: float, field: str = "productivity") -> ValidationReport:
        report = ValidationReport()
        if not value > 0:
            report.add(create_field_error(
                field, "Productivity must be greater than 0",
                code=ErrorCode.PRC_NON_POSITIVE_PRODUCTIVITY, actual=value, expected="> 0",
            ))
        return report

    def check_percentages(
        self,
        profit_percent: Optional[float],
        waste_percent: Optional[float],
    ) -> ValidationReport:
        report = ValidationReport()
        if profit_percent is not None and profit_percent < 0:
            report.add(create_field_error(
                "profit_percent", "Profit percentage must be >= 0",
                code=ErrorCode.PRC_NEGATIVE_PROFIT, actual=profit_percent, expected=">= 0",
            ))
        if waste_percent is not None and waste_percent < 0:
            report.add(create_field_error(
                "waste_percent", "Waste percentage must be >= 0",
                code=ErrorCode.PRC_NEGATIVE_WASTE, actual=waste_percent, expected=">= 0",
            ))
        return report

    def check_materials(
        self,
        materials: Iterable[MaterialLineInput],
        prefix: str = "materials",
    ) -> ValidationReport:
        report = ValidationReport()
        for i, item in enumerate(materials):
            path = f"{prefix}[{i}]"
            if not item.name.strip():
                report.add(create_field_error(
                    f"{path}.name", "Material name is required",
                    code=ErrorCode.CAT_NOT_FOUND, actual=item.name,
                ))
            if item.quantity_per_base_unit < 0:
                report.add(create_field_error(
                    f"{path}.quantity_per_base_unit", "Quantity must be >= 0",
                    actual=item.quantity_per_base_unit, expected=">= 0",
                ))
            if item.unit_price < 0:
                report.add(create_field_error(
                    f"{path}.unit_price", "Unit price must be >= 0",
                    actual=item.unit_price, expected=">= 0",
                ))
        return report

    def check_reinforcement(
        self,
        cover_m: Optional[float],
        spacing_m: float,
        cover_field: str = "cover_mm",
        spacing_field: str = "spacing_mm",
    ) -> ValidationReport:
        """Cover and spacing must lie in the structural design range."""
        report = ValidationReport()
        if cover_m is not None and not is_cover_valid(cover_m):
            report.add(create_bounds_error(
                cover_field,
                f"Concrete cover {_mm(cover_m):g}mm outside design range",
                actual=_mm(cover_m),
                min_val=_mm(COVER_MIN_M),
                max_val=_mm(COVER_MAX_M),
            ))
        if not is_spacing_valid(spacing_m):
            report.add(create_bounds_error(
                spacing_field,
                f"Bar spacing {_mm(spacing_m):g}mm outside design range",
                actual=_mm(spacing_m),
                min_val=_mm(SPACING_MIN_M),
                max_val=_mm(SPACING_MAX_M),
            ))
        return report

    # ==================== Requests ====================

    def validate_single_stage(self, request: SingleStageRequest) -> ValidationReport:
        report = ValidationReport()

        if request.shape is not None:
            report.merge(self.check_shape(request.shape))
        # a brick course describes the bricks; the wall area is still entered
        needs_quantity = request.shape is None or isinstance(request.shape, BrickCourse)
        if needs_quantity and not request.quantity > 0:
            report.add(create_field_error(
                "quantity", "Quantity must be greater than 0",
                actual=request.quantity, expected="> 0",
            ))

        report.merge(self.check_productivity(request.productivity))
        report.merge(self.check_labor(request.labor))
        report.merge(self.check_materials(request.materials))
        report.merge(self.check_percentages(request.profit_percent, request.waste_percent))
        return report

    def validate_footplate(self, request: FootplateRequest) -> ValidationReport:
        report = ValidationReport()

        for name in ("length_m", "width_m", "thickness_mm"):
            value = getattr(request, name)
            if not value > 0:
                report.add(create_field_error(
                    name, f"{name} must be greater than 0", actual=value, expected="> 0",
                ))

        cover_m = UnitConverter.normalize(request.cover_mm, "mm", "m")
        spacing_x = UnitConverter.normalize(request.spacing_x_mm, "mm", "m")
        spacing_y = UnitConverter.normalize(request.spacing_y_mm, "mm", "m")
        report.merge(self.check_reinforcement(cover_m, spacing_x, spacing_field="spacing_x_mm"))
        report.merge(self.check_reinforcement(None, spacing_y, spacing_field="spacing_y_mm"))

        if request.concrete_grade is not None:
            try:
                self.resolver.resolve_concrete(request.concrete_grade)
            except EstimationError as exc:
                report.add_exception(exc)

        for name in ("bar_x", "bar_y"):
            try:
                self.planner.per_meter_weight(getattr(request, name))
            except EstimationError as exc:
                exc.field = name
                report.add_exception(exc)

        report.merge(self.check_productivity(request.productivity))
        report.merge(self.check_labor(request.concrete_labor, "concrete_labor"))
        report.merge(self.check_labor(request.formwork_labor, "formwork_labor"))
        report.merge(self.check_labor(request.rebar_labor, "rebar_labor"))
        report.merge(self.check_materials(request.additional_materials, "additional_materials"))
        report.merge(self.check_percentages(request.profit_percent, request.waste_percent))
        return report

    def validate_beam(self, request: BeamRequest) -> ValidationReport:
        report = ValidationReport()

        for name in ("length_m", "width_m", "height_m"):
            value = getattr(request, name)
            if not value > 0:
                report.add(create_field_error(
                    name, f"{name} must be greater than 0", actual=value, expected="> 0",
                ))
        if request.main_bar_count < 1:
            report.add(create_field_error(
                "main_bar_count", "At least one main bar is required",
                actual=request.main_bar_count, expected=">= 1",
            ))

        cover_m = UnitConverter.normalize(request.cover_mm, "mm", "m")
        spacing_m = UnitConverter.normalize(request.stirrup_spacing_mm, "mm", "m")
        if not is_beam_cover_valid(cover_m):
            report.add(create_bounds_error(
                "cover_mm",
                f"Beam cover {request.cover_mm:g}mm outside design range",
                actual=request.cover_mm,
                min_val=_mm(BEAM_COVER_MIN_M),
                max_val=_mm(BEAM_COVER_MAX_M),
            ))
        if not is_stirrup_spacing_valid(spacing_m):
            report.add(create_bounds_error(
                "stirrup_spacing_mm",
                f"Stirrup spacing {request.stirrup_spacing_mm:g}mm outside design range",
                actual=request.stirrup_spacing_mm,
                min_val=_mm(STIRRUP_SPACING_MIN_M),
                max_val=_mm(STIRRUP_SPACING_MAX_M),
            ))

        if request.concrete_grade is not None:
            try:
                self.resolver.resolve_concrete(request.concrete_grade)
            except EstimationError as exc:
                report.add_exception(exc)

        for name in ("main_bar", "stirrup_bar"):
            try:
                self.planner.per_meter_weight(getattr(request, name))
            except EstimationError as exc:
                exc.field = name
                report.add_exception(exc)

        report.merge(self.check_productivity(request.productivity))
        report.merge(self.check_labor(request.concrete_labor, "concrete_labor"))
        report.merge(self.check_labor(request.formwork_labor, "formwork_labor"))
        report.merge(self.check_labor(request.rebar_labor, "rebar_labor"))
        report.merge(self.check_materials(request.additional_materials, "additional_materials"))
        report.merge(self.check_percentages(request.profit_percent, request.waste_percent))
        return report

    def validate_wall(self, request: WallRequest) -> ValidationReport:
        report = ValidationReport()

        if not request.area_m2 > 0:
            report.add(create_field_error(
                "area_m2", "Wall area must be greater than 0",
                actual=request.area_m2, expected="> 0",
            ))
        if request.preset not in BRICK_CATALOG_NAMES:
            report.add(create_field_error(
                "preset", f"Unknown brick preset: {request.preset}",
                code=ErrorCode.LKP_UNKNOWN_GRADE,
                actual=request.preset,
                expected=", ".join(sorted(BRICK_CATALOG_NAMES)),
            ))
        if request.brick is not None:
            # a wall lays single pieces; the package size does not apply
            brick = request.brick.model_copy(update={"pieces_per_package": 1.0})
            report.merge(self.check_shape(brick, "brick"))
        if request.brick_price is not None and request.brick_price < 0:
            report.add(create_field_error(
                "brick_price", "Brick price must be >= 0",
                actual=request.brick_price, expected=">= 0",
            ))
        if not request.instant_mortar:
            try:
                self.resolver.mortar_materials(request.mortar_ratio, 0.0)
            except EstimationError as exc:
                report.add_exception(exc)

        report.merge(self.check_productivity(request.productivity))
        report.merge(self.check_labor(request.labor))
        report.merge(self.check_materials(request.additional_materials, "additional_materials"))
        report.merge(self.check_percentages(request.profit_percent, request.waste_percent))
        return report

    def validate_plaster(self, request: PlasterRequest) -> ValidationReport:
        report = ValidationReport()

        if not request.area_m2 > 0:
            report.add(create_field_error(
                "area_m2", "Area must be greater than 0",
                actual=request.area_m2, expected="> 0",
            ))

        report.merge(self.check_productivity(request.productivity))
        report.merge(self.check_labor(request.labor))
        report.merge(self.check_materials(request.additional_materials, "additional_materials"))
        report.merge(self.check_percentages(request.profit_percent, request.waste_percent))
        return report

    def commit(self, request) -> ValidationReport:
        """
        Validate a request for final commit.

        Returns:
            The report (warnings only) when the request is valid

        Raises:
            CommitRejected: carrying every invalid field
        """
        if isinstance(request, FootplateRequest):
            report = self.validate_footplate(request)
        elif isinstance(request, BeamRequest):
            report = self.validate_beam(request)
        elif isinstance(request, WallRequest):
            report = self.validate_wall(request)
        elif isinstance(request, PlasterRequest):
            report = self.validate_plaster(request)
        elif isinstance(request, SingleStageRequest):
            report = self.validate_single_stage(request)
        else:
            raise TypeError(f"Unsupported request type: {type(request).__name__}")

        if not report.is_valid:
            logger.info(f"Commit rejected: {len(report.errors)} invalid field(s)")
        report.raise_if_invalid()
        return report
