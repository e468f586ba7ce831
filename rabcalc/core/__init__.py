"""
core/ - Unit conversion, static tables and input models
"""

from .unit_converter import (
    UNIT_CONVERSIONS,
    Quantity,
    ConversionRule,
    ConversionRuleSet,
    UnitConverter,
    canonical_unit,
)

from .tables import (
    ConcreteGrade,
    BrickPreset,
    EngineTables,
    TableRegistry,
    default_tables,
    get_registry,
    get_tables,
)

from .inputs import (
    RectangularPrism,
    Cylinder,
    Sphere,
    Cone,
    Pyramid,
    TrapezoidPrism,
    BrickCourse,
    ShapeSpec,
    parse_shape,
    LaborInput,
    MaterialLineInput,
    SingleStageRequest,
    FootplateRequest,
    BeamRequest,
    WallRequest,
    PlasterRequest,
)

__all__ = [
    # Units
    "UNIT_CONVERSIONS",
    "Quantity",
    "ConversionRule",
    "ConversionRuleSet",
    "UnitConverter",
    "canonical_unit",
    # Tables
    "ConcreteGrade",
    "BrickPreset",
    "EngineTables",
    "TableRegistry",
    "default_tables",
    "get_registry",
    "get_tables",
    # Inputs
    "RectangularPrism",
    "Cylinder",
    "Sphere",
    "Cone",
    "Pyramid",
    "TrapezoidPrism",
    "BrickCourse",
    "ShapeSpec",
    "parse_shape",
    "LaborInput",
    "MaterialLineInput",
    "SingleStageRequest",
    "FootplateRequest",
    "BeamRequest",
    "WallRequest",
    "PlasterRequest",
]
