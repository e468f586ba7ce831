"""
mix/resolver.py - Concrete grade and mortar ratio lookup

Resolves a grade code ("K-225", "k225") or a mortar ratio ("1:4") to
fixed per-m3 proportions from the static tables. Unknown explicit codes
are an error; only a missing code falls back to the default grade.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union
import logging
import re

from ..core.constants import CEMENT_SAK_VOLUME_M3, DEFAULT_MORTAR_RATIO
from ..core.tables import EngineTables, get_tables
from ..core.unit_converter import Quantity, UnitConverter
from ..errors import UnknownGrade

logger = logging.getLogger(__name__)

GRADE_PATTERN = re.compile(r"^K\s*-?\s*(\d+)$", re.IGNORECASE)
RATIO_PATTERN = re.compile(r"^(\d+(?:\.\d+)?)\s*:\s*(\d+(?:\.\d+)?)$")


@dataclass(frozen=True)
class ConcreteMix:
    """Material proportions per m3 of concrete."""
    code: str
    fc_mpa: float
    cement_sacks_per_m3: float
    sand_m3_per_m3: float
    gravel_m3_per_m3: float
    water_cement_ratio: float

    kind = "concrete"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "code": self.code,
            "fc_mpa": self.fc_mpa,
            "cement_sacks_per_m3": self.cement_sacks_per_m3,
            "sand_m3_per_m3": self.sand_m3_per_m3,
            "gravel_m3_per_m3": self.gravel_m3_per_m3,
            "water_cement_ratio": self.water_cement_ratio,
        }


@dataclass(frozen=True)
class MortarMix:
    """Cement:sand mortar as volume fractions."""
    code: str
    cement_parts: float
    sand_parts: float

    kind = "mortar"

    @property
    def cement_fraction(self) -> float:
        return self.cement_parts / (self.cement_parts + self.sand_parts)

    @property
    def sand_fraction(self) -> float:
        return 1.0 - self.cement_fraction

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "code": self.code,
            "cement_fraction": round(self.cement_fraction, 6),
            "sand_fraction": round(self.sand_fraction, 6),
        }


MixRatio = Union[ConcreteMix, MortarMix]


@dataclass
class ConcreteMaterials:
    """Materials for a concrete volume, before waste."""
    grade: str
    volume_m3: float
    cement_sacks: float
    cement_kg: float
    sand_m3: float
    gravel_m3: float
    water_liters: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "grade": self.grade,
            "volume_m3": round(self.volume_m3, 4),
            "cement_sacks": round(self.cement_sacks, 3),
            "cement_kg": round(self.cement_kg, 2),
            "sand_m3": round(self.sand_m3, 4),
            "gravel_m3": round(self.gravel_m3, 4),
            "water_liters": round(self.water_liters, 1),
        }


@dataclass
class MortarMaterials:
    """Cement and sand for a volume of mortar, before waste."""
    ratio: str
    volume_m3: float
    cement_m3: float
    cement_sacks: float
    cement_kg: float
    sand_m3: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ratio": self.ratio,
            "volume_m3": round(self.volume_m3, 6),
            "cement_m3": round(self.cement_m3, 6),
            "cement_sacks": round(self.cement_sacks, 4),
            "cement_kg": round(self.cement_kg, 3),
            "sand_m3": round(self.sand_m3, 6),
        }


def normalize_grade_code(code: str) -> str:
    """'k225', 'K225' and 'K-225' all normalize to 'K-225'."""
    match = GRADE_PATTERN.match((code or "").strip())
    if match:
        return f"K-{match.group(1)}"
    return (code or "").strip().upper()


class MixRatioResolver:
    """Looks up mix proportions in the static tables."""

    def __init__(self, tables: Optional[EngineTables] = None):
        self.tables = tables or get_tables()

    def resolve(self, code: Optional[str] = None) -> MixRatio:
        """
        Resolve a grade or ratio code.

        Args:
            code: Concrete grade ("K-225") or mortar ratio ("1:4");
                  None selects the default concrete grade

        Raises:
            UnknownGrade: explicit code not in the tables
        """
        if code is None or not str(code).strip():
            code = self.tables.default_grade
            logger.debug(f"No grade given, using default {code}")

        code = str(code).strip()
        if ":" in code:
            return self._resolve_mortar(code)
        return self.resolve_concrete(code)

    def resolve_concrete(self, code: str) -> ConcreteMix:
        key = normalize_grade_code(code)
        grade = self.tables.concrete_grades.get(key)
        if grade is None:
            raise UnknownGrade(
                f"Unknown concrete grade: {code}. "
                f"Available: {', '.join(self.tables.concrete_grades)}",
                field="concrete_grade",
                actual=code,
            )
        return ConcreteMix(
            code=grade.code,
            fc_mpa=grade.fc_mpa,
            cement_sacks_per_m3=grade.cement_sacks_per_m3,
            sand_m3_per_m3=grade.sand_m3_per_m3,
            gravel_m3_per_m3=grade.gravel_m3_per_m3,
            water_cement_ratio=grade.water_cement_ratio,
        )

    def _resolve_mortar(self, code: str) -> MortarMix:
        match = RATIO_PATTERN.match(code)
        key = f"{match.group(1)}:{match.group(2)}" if match else code
        if not match or key not in self.tables.mortar_ratios:
            raise UnknownGrade(
                f"Unknown mortar ratio: {code}. "
                f"Available: {', '.join(self.tables.mortar_ratios)}",
                field="mortar_ratio",
                actual=code,
            )
        return MortarMix(
            code=key,
            cement_parts=float(match.group(1)),
            sand_parts=float(match.group(2)),
        )

    def concrete_materials(self, code: Optional[str], volume_m3: float) -> ConcreteMaterials:
        """Cement, sand, gravel and water for a volume of concrete."""
        mix = self.resolve_concrete(code) if code else self.resolve(None)
        volume = max(volume_m3, 0.0)

        cement_sacks = volume * mix.cement_sacks_per_m3
        sak_rule = self.tables.conversions.get("sak", "semen")
        cement_kg = UnitConverter.to_base(Quantity(cement_sacks, "sak"), sak_rule).value

        return ConcreteMaterials(
            grade=mix.code,
            volume_m3=volume,
            cement_sacks=cement_sacks,
            cement_kg=cement_kg,
            sand_m3=volume * mix.sand_m3_per_m3,
            gravel_m3=volume * mix.gravel_m3_per_m3,
            water_liters=cement_kg * mix.water_cement_ratio,
        )

    def mortar_materials(self, ratio: Optional[str], volume_m3: float) -> MortarMaterials:
        """
        Cement and sand for a volume of mortar.

        The mix splits the volume by its cement and sand fractions; the
        cement share is counted in sak by loose volume.

        Raises:
            UnknownGrade: ratio not in the mortar table
        """
        mix = self._resolve_mortar((ratio or DEFAULT_MORTAR_RATIO).strip())
        volume = max(volume_m3, 0.0)

        cement_m3 = volume * mix.cement_fraction
        cement_sacks = cement_m3 / CEMENT_SAK_VOLUME_M3
        sak_rule = self.tables.conversions.get("sak", "semen")
        cement_kg = UnitConverter.to_base(Quantity(cement_sacks, "sak"), sak_rule).value

        return MortarMaterials(
            ratio=mix.code,
            volume_m3=volume,
            cement_m3=cement_m3,
            cement_sacks=cement_sacks,
            cement_kg=cement_kg,
            sand_m3=volume * mix.sand_fraction,
        )
