"""
cost/ - Material pricing and HPP/RAB aggregation
"""

from .enums import DurationMode, MaterialCategory

from .schema import (
    MaterialLine,
    PricedLine,
    MaterialCostBreakdown,
    EstimationResult,
)

from .catalog import CatalogRecord, MaterialCatalog

from .material import MaterialCostAggregator, check_waste_fraction

from .estimator import EstimationAggregator, check_profit_fraction

__all__ = [
    # Enums
    "DurationMode",
    "MaterialCategory",
    # Schema
    "MaterialLine",
    "PricedLine",
    "MaterialCostBreakdown",
    "EstimationResult",
    # Catalog
    "CatalogRecord",
    "MaterialCatalog",
    # Pricing
    "MaterialCostAggregator",
    "check_waste_fraction",
    "EstimationAggregator",
    "check_profit_fraction",
]
