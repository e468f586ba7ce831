"""
errors/ - Error Taxonomy

Structured error classification for the estimation engine.
"""

from .taxonomy import (
    ErrorSeverity,
    ErrorCategory,
    ErrorCode,
    FieldError,
    EstimationError,
    InvalidDimensions,
    InvalidConversionRule,
    UnitConversionError,
    UnknownGrade,
    InvalidAllocation,
    InvalidWasteFactor,
    InvalidProfitFactor,
    MaterialNotFound,
    CommitRejected,
    category_for,
    create_field_error,
    create_bounds_error,
    create_warning,
)

from .aggregator import ValidationReport

__all__ = [
    # Taxonomy
    "ErrorSeverity",
    "ErrorCategory",
    "ErrorCode",
    "FieldError",
    "category_for",
    "create_field_error",
    "create_bounds_error",
    "create_warning",
    # Exceptions
    "EstimationError",
    "InvalidDimensions",
    "InvalidConversionRule",
    "UnitConversionError",
    "UnknownGrade",
    "InvalidAllocation",
    "InvalidWasteFactor",
    "InvalidProfitFactor",
    "MaterialNotFound",
    "CommitRejected",
    # Aggregator
    "ValidationReport",
]
