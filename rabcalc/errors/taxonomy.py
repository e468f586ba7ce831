"""
errors/taxonomy.py - Error classification system

Estimation engine error taxonomy.

Every failure the engine raises carries an ErrorCode and, where it can be
tied to one input, the field path that caused it. Commit validation
collects many FieldError records instead of stopping at the first one.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class ErrorSeverity(Enum):
    """Error severity levels."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class ErrorCategory(Enum):
    """Error categories."""
    # Geometry (1xxx)
    DIMENSIONS = "dimensions"

    # Units (2xxx)
    CONVERSION = "conversion"

    # Lookup tables (3xxx)
    LOOKUP = "lookup"

    # Labor (4xxx)
    ALLOCATION = "allocation"

    # Pricing (5xxx)
    PRICING = "pricing"

    # Catalog (6xxx)
    CATALOG = "catalog"

    # Validation (9xxx)
    VALIDATION = "validation"


class ErrorCode(Enum):
    """Specific error codes."""

    # Dimensions (1xxx)
    DIM_NON_POSITIVE = 1001
    DIM_OUT_OF_RANGE = 1002
    DIM_UNUSUAL = 1003

    # Conversion (2xxx)
    CNV_INVALID_FACTOR = 2001
    CNV_MISSING_RULE = 2002
    CNV_UNIT_MISMATCH = 2003

    # Lookup (3xxx)
    LKP_UNKNOWN_GRADE = 3001
    LKP_UNKNOWN_BAR = 3002

    # Allocation (4xxx)
    ALC_NO_WORKERS = 4001
    ALC_NEGATIVE_COUNT = 4002
    ALC_BAD_RATIO = 4003

    # Pricing (5xxx)
    PRC_NEGATIVE_WASTE = 5001
    PRC_NEGATIVE_PROFIT = 5002
    PRC_NON_POSITIVE_PRODUCTIVITY = 5003

    # Catalog (6xxx)
    CAT_NOT_FOUND = 6001

    # Validation (9xxx)
    VAL_COMMIT_REJECTED = 9001


CODE_CATEGORIES = {
    1: ErrorCategory.DIMENSIONS,
    2: ErrorCategory.CONVERSION,
    3: ErrorCategory.LOOKUP,
    4: ErrorCategory.ALLOCATION,
    5: ErrorCategory.PRICING,
    6: ErrorCategory.CATALOG,
    9: ErrorCategory.VALIDATION,
}


def category_for(code: ErrorCode) -> ErrorCategory:
    """Map an error code to its category by thousands digit."""
    return CODE_CATEGORIES.get(code.value // 1000, ErrorCategory.VALIDATION)


@dataclass
class FieldError:
    """Structured, field-level validation message."""

    field: str
    message: str
    code: ErrorCode = ErrorCode.DIM_NON_POSITIVE
    severity: ErrorSeverity = ErrorSeverity.ERROR

    actual: Any = None
    expected: Any = None

    @property
    def category(self) -> ErrorCategory:
        return category_for(self.code)

    @property
    def is_blocking(self) -> bool:
        return self.severity == ErrorSeverity.ERROR

    def to_dict(self) -> Dict[str, Any]:
        return {
            "field": self.field,
            "message": self.message,
            "code": self.code.value,
            "category": self.category.value,
            "severity": self.severity.value,
            "actual": self.actual,
            "expected": self.expected,
        }


# =============================================================================
# EXCEPTIONS
# =============================================================================

class EstimationError(Exception):
    """Base class for all engine errors."""

    code: ErrorCode = ErrorCode.VAL_COMMIT_REJECTED

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        actual: Any = None,
        code: Optional[ErrorCode] = None,
    ):
        super().__init__(message)
        self.message = message
        self.field = field
        self.actual = actual
        if code is not None:
            self.code = code

    @property
    def category(self) -> ErrorCategory:
        return category_for(self.code)

    def to_field_error(self) -> FieldError:
        return FieldError(
            field=self.field or "",
            message=self.message,
            code=self.code,
            actual=self.actual,
        )


class InvalidDimensions(EstimationError):
    """A required geometric input is non-positive for a final computation."""
    code = ErrorCode.DIM_NON_POSITIVE


class InvalidConversionRule(EstimationError):
    """Conversion factor missing, zero, negative or not finite."""
    code = ErrorCode.CNV_INVALID_FACTOR


class UnitConversionError(EstimationError):
    """Raised when a quantity's unit does not match the conversion requested."""
    code = ErrorCode.CNV_UNIT_MISMATCH


class UnknownGrade(EstimationError):
    """An explicitly requested grade, ratio or bar code is not in the table."""
    code = ErrorCode.LKP_UNKNOWN_GRADE


class InvalidAllocation(EstimationError):
    """Worker counts both zero, negative, or ratio malformed."""
    code = ErrorCode.ALC_NO_WORKERS


class InvalidWasteFactor(EstimationError):
    """Negative waste percentage supplied."""
    code = ErrorCode.PRC_NEGATIVE_WASTE


class InvalidProfitFactor(EstimationError):
    """Negative profit percentage supplied."""
    code = ErrorCode.PRC_NEGATIVE_PROFIT


class MaterialNotFound(EstimationError):
    """Catalog lookup miss, surfaced rather than zero-priced."""
    code = ErrorCode.CAT_NOT_FOUND


class CommitRejected(EstimationError):
    """Final commit refused; carries every offending field."""
    code = ErrorCode.VAL_COMMIT_REJECTED

    def __init__(self, errors: List[FieldError], warnings: Optional[List[FieldError]] = None):
        fields = ", ".join(e.field for e in errors)
        super().__init__(f"{len(errors)} invalid field(s): {fields}")
        self.errors = list(errors)
        self.warnings = list(warnings or [])

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code.value,
            "message": self.message,
            "errors": [e.to_dict() for e in self.errors],
            "warnings": [w.to_dict() for w in self.warnings],
        }


# =============================================================================
# FACTORIES
# =============================================================================

def create_field_error(
    field: str,
    message: str,
    code: ErrorCode = ErrorCode.DIM_NON_POSITIVE,
    actual: Any = None,
    expected: Any = None,
) -> FieldError:
    """Factory for blocking field errors."""
    return FieldError(
        field=field,
        message=message,
        code=code,
        severity=ErrorSeverity.ERROR,
        actual=actual,
        expected=expected,
    )


def create_bounds_error(
    field: str,
    message: str,
    actual: Any,
    min_val: Any = None,
    max_val: Any = None,
) -> FieldError:
    """Factory for range errors."""
    return FieldError(
        field=field,
        message=message,
        code=ErrorCode.DIM_OUT_OF_RANGE,
        severity=ErrorSeverity.ERROR,
        actual=actual,
        expected=f"[{min_val}, {max_val}]",
    )


def create_warning(
    field: str,
    message: str,
    actual: Any = None,
    expected: Any = None,
) -> FieldError:
    """Factory for advisory warnings. Warnings never block a computation."""
    return FieldError(
        field=field,
        message=message,
        code=ErrorCode.DIM_UNUSUAL,
        severity=ErrorSeverity.WARNING,
        actual=actual,
        expected=expected,
    )
