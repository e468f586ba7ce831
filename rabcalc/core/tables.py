"""
core/tables.py - Static lookup tables and table registry

Concrete grades, mortar ratios, rebar weights, brick presets and market
conversion presets are bundled into one immutable EngineTables object.
Components receive the object they calculate against; a reload swaps the
whole object at once so a calculation never sees a half-updated table.
"""

from __future__ import annotations
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional, Tuple
import logging
import threading

from .constants import (
    BRICK_PRESETS,
    CONCRETE_GRADES,
    CONVERSION_PRESETS,
    DEFAULT_CONCRETE_GRADE,
    MORTAR_RATIOS,
    REBAR_WEIGHTS_KG_M,
    STOCK_BAR_LENGTH_M,
)
from .unit_converter import ConversionRule, ConversionRuleSet

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConcreteGrade:
    """Per-m3 material proportions for one concrete grade."""
    code: str
    fc_mpa: float
    cement_sacks_per_m3: float
    sand_m3_per_m3: float
    gravel_m3_per_m3: float
    water_cement_ratio: float


@dataclass(frozen=True)
class BrickPreset:
    """Typical brick dimensions in millimeters."""
    key: str
    name: str
    length_mm: float
    width_mm: float
    height_mm: float
    mortar_thickness_mm: float
    description: str = ""

    def to_dict(self) -> Dict[str, object]:
        return {
            "key": self.key,
            "name": self.name,
            "length_mm": self.length_mm,
            "width_mm": self.width_mm,
            "height_mm": self.height_mm,
            "mortar_thickness_mm": self.mortar_thickness_mm,
            "description": self.description,
        }


@dataclass(frozen=True)
class EngineTables:
    """Immutable bundle of every static table the engine reads."""
    concrete_grades: Mapping[str, ConcreteGrade]
    mortar_ratios: Tuple[str, ...]
    rebar_weights: Mapping[str, float]
    brick_presets: Mapping[str, BrickPreset]
    conversions: ConversionRuleSet
    default_grade: str = DEFAULT_CONCRETE_GRADE
    stock_bar_length_m: float = STOCK_BAR_LENGTH_M
    version: int = 1

    @classmethod
    def build(
        cls,
        concrete_grades: Iterable[ConcreteGrade],
        rebar_weights: Dict[str, float],
        brick_presets: Iterable[BrickPreset],
        conversions: Iterable[ConversionRule],
        mortar_ratios: Iterable[str] = MORTAR_RATIOS,
        default_grade: str = DEFAULT_CONCRETE_GRADE,
        stock_bar_length_m: float = STOCK_BAR_LENGTH_M,
        version: int = 1,
    ) -> "EngineTables":
        """Build tables from plain iterables, freezing every mapping."""
        grades = {g.code: g for g in concrete_grades}
        if default_grade not in grades:
            raise ValueError(f"Default grade {default_grade} not in concrete table")
        return cls(
            concrete_grades=MappingProxyType(grades),
            mortar_ratios=tuple(mortar_ratios),
            rebar_weights=MappingProxyType(dict(rebar_weights)),
            brick_presets=MappingProxyType({p.key: p for p in brick_presets}),
            conversions=ConversionRuleSet(conversions),
            default_grade=default_grade,
            stock_bar_length_m=stock_bar_length_m,
            version=version,
        )


def default_tables() -> EngineTables:
    """Tables built from the bundled reference data."""
    grades = [
        ConcreteGrade(code, fc, cement, sand, gravel, wc)
        for code, (fc, cement, sand, gravel, wc) in CONCRETE_GRADES.items()
    ]
    presets = [
        BrickPreset(key, name, length, width, height, mortar, desc)
        for key, (name, length, width, height, mortar, desc) in BRICK_PRESETS.items()
    ]
    rules = [
        ConversionRule(market, base, factor, material, desc)
        for market, base, factor, material, desc in CONVERSION_PRESETS
    ]
    return EngineTables.build(
        concrete_grades=grades,
        rebar_weights=REBAR_WEIGHTS_KG_M,
        brick_presets=presets,
        conversions=rules,
    )


class TableRegistry:
    """
    Process-wide holder of the current EngineTables.

    Readers take a reference to the current object; swap() replaces it
    under a lock.
    """

    def __init__(self, tables: Optional[EngineTables] = None):
        self._lock = threading.Lock()
        self._tables = tables or default_tables()

    @property
    def current(self) -> EngineTables:
        return self._tables

    def swap(self, tables: EngineTables) -> EngineTables:
        """Install new tables, returning the ones replaced."""
        with self._lock:
            previous = self._tables
            self._tables = tables
        logger.info(f"Engine tables swapped: v{previous.version} -> v{tables.version}")
        return previous


_registry: Optional[TableRegistry] = None
_registry_lock = threading.Lock()


def get_registry() -> TableRegistry:
    """Get the process-wide table registry, creating it on first use."""
    global _registry
    with _registry_lock:
        if _registry is None:
            _registry = TableRegistry()
        return _registry


def get_tables() -> EngineTables:
    return get_registry().current
