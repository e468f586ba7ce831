"""
rabcalc - Construction estimation and conversion engine

Converts market packaging units, derives quantities from shapes,
schedules crews and aggregates material and labor cost into HPP
(cost price) and RAB (billed price).
"""

__version__ = "0.1.0"

from .errors import (
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
    ValidationReport,
)

from .core import (
    Quantity,
    ConversionRule,
    ConversionRuleSet,
    UnitConverter,
    EngineTables,
    TableRegistry,
    default_tables,
    FootplateRequest,
    BeamRequest,
    WallRequest,
    PlasterRequest,
    SingleStageRequest,
    parse_shape,
)

from .geometry import GeometryEngine
from .structural import ReinforcementPlanner
from .mix import MixRatioResolver
from .labor import LaborScheduler, WorkerAllocation, WorkerRatio
from .cost import (
    DurationMode,
    EstimationAggregator,
    EstimationResult,
    MaterialCatalog,
    MaterialCostAggregator,
    MaterialLine,
)
from .validators import CommitValidator
from .bootstrap import EngineConfig, get_config, load_config
from .workflows import (
    BeamEstimator,
    FootplateEstimator,
    PlasterEstimator,
    SingleStageEstimator,
    WallEstimator,
)

__all__ = [
    "__version__",
    # Errors
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
    "ValidationReport",
    # Core
    "Quantity",
    "ConversionRule",
    "ConversionRuleSet",
    "UnitConverter",
    "EngineTables",
    "TableRegistry",
    "default_tables",
    "FootplateRequest",
    "BeamRequest",
    "WallRequest",
    "PlasterRequest",
    "SingleStageRequest",
    "parse_shape",
    # Components
    "GeometryEngine",
    "ReinforcementPlanner",
    "MixRatioResolver",
    "LaborScheduler",
    "WorkerAllocation",
    "WorkerRatio",
    "DurationMode",
    "EstimationAggregator",
    "EstimationResult",
    "MaterialCatalog",
    "MaterialCostAggregator",
    "MaterialLine",
    "CommitValidator",
    # Config
    "EngineConfig",
    "get_config",
    "load_config",
    # Workflows
    "FootplateEstimator",
    "SingleStageEstimator",
    "BeamEstimator",
    "WallEstimator",
    "PlasterEstimator",
]
