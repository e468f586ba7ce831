"""
core/inputs.py - Request and shape input models

Immutable pydantic models built fresh from user input for every
calculation. A blank field (empty string or None) means "not entered"
and takes the field default, which is 0 for every shape dimension, so
an incomplete form still produces a (zero-valued) preview.
"""

from __future__ import annotations
from typing import Annotated, Any, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, model_validator


def is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class FormModel(BaseModel):
    """Frozen input model; blank fields fall back to their defaults."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _blank_is_default(cls, data: Any) -> Any:
        # dropping a blank optional key lets the field default apply;
        # blank required fields pass through and fail their own validation
        if not isinstance(data, dict):
            return data
        fields = cls.model_fields
        return {
            key: value for key, value in data.items()
            if not (is_blank(value) and key in fields and not fields[key].is_required())
        }


# =============================================================================
# SHAPES
# =============================================================================

class RectangularPrism(FormModel):
    """Box; lengths in meters."""
    kind: Literal["rectangular_prism"] = "rectangular_prism"
    length: float = 0.0
    width: float = 0.0
    height: float = 0.0


class Cylinder(FormModel):
    kind: Literal["cylinder"] = "cylinder"
    radius: float = 0.0
    height: float = 0.0


class Sphere(FormModel):
    kind: Literal["sphere"] = "sphere"
    radius: float = 0.0


class Cone(FormModel):
    kind: Literal["cone"] = "cone"
    radius: float = 0.0
    height: float = 0.0


class Pyramid(FormModel):
    """Rectangular-base pyramid."""
    kind: Literal["pyramid"] = "pyramid"
    base_length: float = 0.0
    base_width: float = 0.0
    height: float = 0.0


class TrapezoidPrism(FormModel):
    """Prism with a trapezoid cross-section (top/bottom lengths, depth width)."""
    kind: Literal["trapezoid_prism"] = "trapezoid_prism"
    top_length: float = 0.0
    bottom_length: float = 0.0
    width: float = 0.0
    height: float = 0.0


class BrickCourse(FormModel):
    """
    One market package of bricks laid as a wall.

    Brick dimensions and mortar joint in millimeters; waste as a fraction.
    """
    kind: Literal["brick_course"] = "brick_course"
    pieces_per_package: float = 0.0
    brick_length_mm: float = 0.0
    brick_width_mm: float = 0.0
    brick_height_mm: float = 0.0
    mortar_thickness_mm: float = 10.0
    waste_fraction: float = 0.0
    double_wall: bool = False


ShapeSpec = Annotated[
    Union[RectangularPrism, Cylinder, Sphere, Cone, Pyramid, TrapezoidPrism, BrickCourse],
    Field(discriminator="kind"),
]

_shape_adapter = TypeAdapter(ShapeSpec)


def parse_shape(data: Any):
    """Build a ShapeSpec variant from a dict carrying a 'kind' tag."""
    return _shape_adapter.validate_python(data)


# =============================================================================
# REQUESTS
# =============================================================================

class LaborInput(FormModel):
    """Crew entered for one stage: counts per tier and the team ratio."""
    tukang_count: int = 0
    pekerja_count: int = 0
    ratio: str = "1:1"


class MaterialLineInput(FormModel):
    """Material line as entered or picked from the catalog."""
    name: str
    quantity_per_base_unit: float = 0.0
    unit: str = ""
    unit_price: float = 0.0
    supplier: Optional[str] = None


class SingleStageRequest(FormModel):
    """
    Volume, area or length job priced as one stage.

    The base quantity comes from `shape` when given, otherwise from
    `quantity` expressed in `unit`.
    """
    name: str = ""
    shape: Optional[ShapeSpec] = None
    quantity: float = 0.0
    unit: str = "m3"
    productivity: float = 0.0
    labor: LaborInput = Field(default_factory=LaborInput)
    materials: List[MaterialLineInput] = Field(default_factory=list)
    profit_percent: Optional[float] = None
    waste_percent: Optional[float] = None


class FootplateRequest(FormModel):
    """
    Pad footing job: plan dimensions in meters, thickness and
    reinforcement layout in millimeters as entered on site drawings.
    """
    name: str = ""
    length_m: float = 0.0
    width_m: float = 0.0
    thickness_mm: float = 0.0
    cover_mm: float = 40.0
    concrete_grade: Optional[str] = None
    bar_x: str = "D12"
    bar_y: str = "D12"
    spacing_x_mm: float = 200.0
    spacing_y_mm: float = 200.0
    productivity: float = 3.0
    profit_percent: Optional[float] = None
    waste_percent: Optional[float] = None
    concrete_labor: LaborInput = Field(
        default_factory=lambda: LaborInput(tukang_count=1, pekerja_count=2, ratio="1:2")
    )
    formwork_labor: LaborInput = Field(
        default_factory=lambda: LaborInput(tukang_count=2, pekerja_count=1, ratio="2:1")
    )
    rebar_labor: LaborInput = Field(
        default_factory=lambda: LaborInput(tukang_count=2, pekerja_count=1, ratio="1:1")
    )
    additional_materials: List[MaterialLineInput] = Field(default_factory=list)


class BeamRequest(FormModel):
    """
    Rectangular beam: length, width and height in meters; cover and
    stirrup spacing in millimeters.
    """
    name: str = ""
    length_m: float = 0.0
    width_m: float = 0.0
    height_m: float = 0.0
    cover_mm: float = 25.0
    concrete_grade: Optional[str] = None
    main_bar: str = "D12"
    main_bar_count: int = 4
    stirrup_bar: str = "D8"
    stirrup_spacing_mm: float = 150.0
    productivity: float = 3.0
    profit_percent: Optional[float] = None
    waste_percent: Optional[float] = None
    concrete_labor: LaborInput = Field(
        default_factory=lambda: LaborInput(tukang_count=1, pekerja_count=2, ratio="1:2")
    )
    formwork_labor: LaborInput = Field(
        default_factory=lambda: LaborInput(tukang_count=2, pekerja_count=1, ratio="2:1")
    )
    rebar_labor: LaborInput = Field(
        default_factory=lambda: LaborInput(tukang_count=2, pekerja_count=1, ratio="1:1")
    )
    additional_materials: List[MaterialLineInput] = Field(default_factory=list)


class WallRequest(FormModel):
    """
    Brick wall of a given area.

    Bricks come from `preset` unless `brick` gives custom dimensions;
    either way they are priced as the preset's catalog brick unless
    `brick_price` (per piece) is entered; a custom brick's package size
    is not used. Joints use cement and sand at
    `mortar_ratio`, or instant mortar when `instant_mortar` is set.
    Additional materials are per m2 of wall.
    """
    name: str = ""
    area_m2: float = 0.0
    preset: str = "bata_merah"
    brick: Optional[BrickCourse] = None
    brick_price: Optional[float] = None
    mortar_ratio: str = "1:4"
    instant_mortar: bool = False
    productivity: float = 8.0
    labor: LaborInput = Field(
        default_factory=lambda: LaborInput(tukang_count=1, pekerja_count=1, ratio="1:1")
    )
    additional_materials: List[MaterialLineInput] = Field(default_factory=list)
    profit_percent: Optional[float] = None
    waste_percent: Optional[float] = None


class PlasterRequest(FormModel):
    """
    Three-layer skim coat over an area. One crew works the layers in
    turn; additional materials are per m2 and form their own sub-work.
    """
    name: str = ""
    area_m2: float = 0.0
    productivity: float = 0.0
    labor: LaborInput = Field(
        default_factory=lambda: LaborInput(tukang_count=1, pekerja_count=1, ratio="1:1")
    )
    additional_materials: List[MaterialLineInput] = Field(default_factory=list)
    profit_percent: Optional[float] = None
    waste_percent: Optional[float] = None
