"""
rabcalc Unit Converter

Deterministic conversion between market packaging units and calculation
base units. All conversions are explicit and reversible; a unit is never
treated as compatible with another unit unless a rule says so.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple
import logging
import math

from ..errors import ErrorCode, InvalidConversionRule, UnitConversionError

logger = logging.getLogger(__name__)


# Fixed metric conversions: (from_unit, to_unit) -> multiplier
# value_in_to_unit = value_in_from_unit * multiplier
UNIT_CONVERSIONS = {
    # Length
    ("m", "mm"): 1000.0,
    ("mm", "m"): 0.001,
    ("m", "cm"): 100.0,
    ("cm", "m"): 0.01,
    ("cm", "mm"): 10.0,
    ("mm", "cm"): 0.1,

    # Area
    ("m2", "cm2"): 10000.0,
    ("cm2", "m2"): 0.0001,
    ("m2", "mm2"): 1000000.0,
    ("mm2", "m2"): 0.000001,

    # Volume
    ("m3", "l"): 1000.0,
    ("l", "m3"): 0.001,

    # Mass
    ("ton", "kg"): 1000.0,
    ("kg", "ton"): 0.001,
}

# Spellings accepted for the same unit
UNIT_ALIASES = {
    "m³": "m3",
    "m²": "m2",
    "liter": "l",
    "litre": "l",
    "truck": "truk",
    "sack": "sak",
    "box": "dus",
    "bar": "batang",
}


def canonical_unit(unit: str) -> str:
    """Normalize a unit string (whitespace, case, known aliases)."""
    key = (unit or "").strip()
    key = UNIT_ALIASES.get(key, key)
    lowered = key.lower()
    return UNIT_ALIASES.get(lowered, lowered)


@dataclass(frozen=True)
class Quantity:
    """A numeric value tagged with its unit."""
    value: float
    unit: str

    def to_dict(self) -> Dict[str, object]:
        return {"value": self.value, "unit": self.unit}


@dataclass(frozen=True)
class ConversionRule:
    """
    1 market_unit = factor base_unit.

    The factor is checked on construction so an invalid rule can never
    reach a conversion.
    """
    market_unit: str
    base_unit: str
    factor: float
    material: str = ""
    description: str = ""
    is_placeholder: bool = False

    def __post_init__(self):
        factor = self.factor
        if factor is None or isinstance(factor, bool):
            raise InvalidConversionRule(
                f"Conversion factor missing for {self.market_unit} -> {self.base_unit}",
                field="factor",
                actual=factor,
            )
        try:
            factor = float(factor)
        except (TypeError, ValueError):
            raise InvalidConversionRule(
                f"Conversion factor is not a number: {self.factor!r}",
                field="factor",
                actual=self.factor,
            )
        if not math.isfinite(factor) or factor <= 0:
            raise InvalidConversionRule(
                f"Conversion factor must be a finite positive number, got {self.factor}",
                field="factor",
                actual=self.factor,
            )
        object.__setattr__(self, "factor", factor)

    def to_dict(self) -> Dict[str, object]:
        return {
            "market_unit": self.market_unit,
            "base_unit": self.base_unit,
            "factor": self.factor,
            "material": self.material,
            "description": self.description or f"1 {self.market_unit} = {self.factor:g} {self.base_unit}",
            "is_placeholder": self.is_placeholder,
        }


class UnitConverter:
    """
    Deterministic unit converter.

    All conversions use explicit factors. No implicit conversions.
    """

    @staticmethod
    def conversion_factor(rule: ConversionRule) -> float:
        """Base units contained in one market unit."""
        return rule.factor

    @staticmethod
    def to_base(quantity: Quantity, rule: ConversionRule) -> Quantity:
        """
        Express a market-unit quantity in the rule's base unit.

        Raises:
            UnitConversionError: If the quantity is not in the rule's market unit
        """
        if canonical_unit(quantity.unit) != canonical_unit(rule.market_unit):
            raise UnitConversionError(
                f"Cannot convert {quantity.unit} with rule for {rule.market_unit}",
                field="unit",
                actual=quantity.unit,
            )
        return Quantity(quantity.value * rule.factor, rule.base_unit)

    @staticmethod
    def to_market(quantity: Quantity, rule: ConversionRule) -> Quantity:
        """
        Express a base-unit quantity in the rule's market unit.

        Raises:
            UnitConversionError: If the quantity is not in the rule's base unit
        """
        if canonical_unit(quantity.unit) != canonical_unit(rule.base_unit):
            raise UnitConversionError(
                f"Cannot convert {quantity.unit} with rule for {rule.base_unit}",
                field="unit",
                actual=quantity.unit,
            )
        return Quantity(quantity.value / rule.factor, rule.market_unit)

    @staticmethod
    def packages_needed(base_quantity: float, rule: ConversionRule) -> int:
        """Whole market packages needed to cover a base quantity."""
        if base_quantity <= 0:
            return 0
        # round() strips float noise such as 2.0000000000000004 packages
        return math.ceil(round(base_quantity / rule.factor, 9))

    @staticmethod
    def normalize(value: float, from_unit: str, to_unit: str) -> float:
        """
        Convert value between fixed metric units.

        Raises:
            UnitConversionError: If conversion not supported
        """
        from_key = canonical_unit(from_unit)
        to_key = canonical_unit(to_unit)
        if from_key == to_key:
            return value

        key = (from_key, to_key)
        if key not in UNIT_CONVERSIONS:
            raise UnitConversionError(
                f"Unknown conversion: {from_unit} -> {to_unit}",
                field="unit",
                actual=from_unit,
            )
        return value * UNIT_CONVERSIONS[key]

    @staticmethod
    def can_convert(from_unit: str, to_unit: str) -> bool:
        from_key = canonical_unit(from_unit)
        to_key = canonical_unit(to_unit)
        return from_key == to_key or (from_key, to_key) in UNIT_CONVERSIONS

    @staticmethod
    def get_supported_units() -> set:
        units = set()
        for from_u, to_u in UNIT_CONVERSIONS.keys():
            units.add(from_u)
            units.add(to_u)
        return units


class ConversionRuleSet:
    """
    Read-only set of registered market-unit conversion rules.

    A rule may be material specific ("sak" of semen is 40 kg, "sak" of
    mortar instan is 25 kg); a rule with an empty material is the generic
    rule for that market unit.
    """

    def __init__(self, rules: Iterable[ConversionRule] = ()):
        self._rules: Dict[Tuple[str, str], ConversionRule] = {}
        for rule in rules:
            key = (canonical_unit(rule.market_unit), rule.material.strip().lower())
            self._rules[key] = rule

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self):
        return iter(self._rules.values())

    def find(self, market_unit: str, material: Optional[str] = None) -> Optional[ConversionRule]:
        """
        Return the best matching rule, or None.

        Among material-specific rules whose material appears in the name,
        the longest (most specific) material wins; the generic rule for
        the unit is the fallback.
        """
        unit = canonical_unit(market_unit)
        if material:
            name = material.strip().lower()
            matches = [
                (rule_material, rule)
                for (rule_unit, rule_material), rule in self._rules.items()
                if rule_unit == unit and rule_material and rule_material in name
            ]
            if matches:
                return max(matches, key=lambda match: len(match[0]))[1]
        return self._rules.get((unit, ""))

    def get(self, market_unit: str, material: Optional[str] = None) -> ConversionRule:
        """
        Return the matching rule.

        Raises:
            InvalidConversionRule: If no rule is registered for the unit
        """
        rule = self.find(market_unit, material)
        if rule is None:
            raise InvalidConversionRule(
                f"No conversion rule registered for market unit '{market_unit}'"
                + (f" ({material})" if material else ""),
                field="market_unit",
                actual=market_unit,
                code=ErrorCode.CNV_MISSING_RULE,
            )
        return rule

    @staticmethod
    def placeholder(unit: str) -> ConversionRule:
        """Identity rule a caller may substitute explicitly for an unknown unit."""
        logger.debug(f"Placeholder conversion rule requested for '{unit}'")
        return ConversionRule(
            market_unit=unit,
            base_unit=unit,
            factor=1.0,
            description=f"1 {unit} = 1 {unit} (placeholder)",
            is_placeholder=True,
        )

    def with_rule(self, rule: ConversionRule) -> "ConversionRuleSet":
        """Copy of this set with one rule added or replaced."""
        return ConversionRuleSet(list(self._rules.values()) + [rule])

    def for_rebar(self, bar_code: str, weight_kg_m: float, stock_length_m: float) -> ConversionRule:
        """Rule for one stock bar of the given diameter (1 batang = L * w kg)."""
        return ConversionRule(
            market_unit="batang",
            base_unit="kg",
            factor=stock_length_m * weight_kg_m,
            material=f"besi beton {bar_code.lower()}",
            description=f"1 batang {bar_code} = {stock_length_m:g} m x {weight_kg_m} kg/m",
        )

    def to_list(self) -> List[Dict[str, object]]:
        return [rule.to_dict() for rule in self._rules.values()]
