"""
errors/aggregator.py - Aggregate field-level errors into a report
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List

from .taxonomy import (
    CommitRejected,
    ErrorCategory,
    ErrorSeverity,
    EstimationError,
    FieldError,
)


@dataclass
class ValidationReport:
    """Collected validation outcome for one request."""

    errors: List[FieldError] = field(default_factory=list)
    warnings: List[FieldError] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def fields(self) -> List[str]:
        """Offending field paths, in the order they were found."""
        return [e.field for e in self.errors]

    def add(self, item: FieldError) -> None:
        """Add an error or warning, routed by severity."""
        if item.severity == ErrorSeverity.ERROR:
            self.errors.append(item)
        else:
            self.warnings.append(item)

    def add_all(self, items: Iterable[FieldError]) -> None:
        for item in items:
            self.add(item)

    def add_exception(self, exc: EstimationError) -> None:
        """Record an engine exception as a field error."""
        self.add(exc.to_field_error())

    def merge(self, other: "ValidationReport", prefix: str = "") -> None:
        """Merge another report, optionally prefixing its field paths."""
        for item in other.errors + other.warnings:
            if prefix:
                item = FieldError(
                    field=f"{prefix}.{item.field}" if item.field else prefix,
                    message=item.message,
                    code=item.code,
                    severity=item.severity,
                    actual=item.actual,
                    expected=item.expected,
                )
            self.add(item)

    def get_by_category(self, category: ErrorCategory) -> List[FieldError]:
        return [e for e in self.errors if e.category == category]

    def raise_if_invalid(self) -> None:
        """Raise CommitRejected carrying every error found."""
        if self.errors:
            raise CommitRejected(self.errors, self.warnings)

    def to_dict(self) -> Dict[str, Any]:
        by_category: Dict[str, int] = {}
        for e in self.errors:
            by_category[e.category.value] = by_category.get(e.category.value, 0) + 1

        return {
            "valid": self.is_valid,
            "error_count": len(self.errors),
            "warning_count": len(self.warnings),
            "by_category": by_category,
            "errors": [e.to_dict() for e in self.errors],
            "warnings": [w.to_dict() for w in self.warnings],
        }
