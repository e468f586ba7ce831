"""
cost/catalog.py - In-memory material price catalog

Stands in for the external price list. A lookup miss raises
MaterialNotFound so the caller can decide on an explicit placeholder;
nothing is ever priced at zero silently.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional
import logging

from ..core.constants import DEFAULT_MATERIAL_PRICES
from ..errors import MaterialNotFound
from .enums import MaterialCategory
from .schema import MaterialLine

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CatalogRecord:
    """One priced material as sold."""
    name: str
    unit: str
    price: float
    supplier: Optional[str] = None
    category: MaterialCategory = MaterialCategory.UMUM

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CatalogRecord":
        category = data.get("category") or MaterialCategory.UMUM.value
        return cls(
            name=data["name"],
            unit=data.get("unit", ""),
            price=float(data.get("price", 0.0)),
            supplier=data.get("supplier"),
            category=MaterialCategory(category),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "unit": self.unit,
            "price": self.price,
            "supplier": self.supplier,
            "category": self.category.value,
        }


def _key(name: str) -> str:
    return " ".join((name or "").lower().split())


class MaterialCatalog:
    """Material records keyed by case-insensitive name."""

    def __init__(self, records: Iterable[CatalogRecord] = ()):
        self._records: Dict[str, CatalogRecord] = {}
        for record in records:
            self.add(record)

    @classmethod
    def default(cls) -> "MaterialCatalog":
        """Catalog seeded with the bundled price list."""
        return cls(
            CatalogRecord(name, unit, price, category=MaterialCategory(category))
            for name, unit, price, category in DEFAULT_MATERIAL_PRICES
        )

    @classmethod
    def from_dicts(cls, items: Iterable[Dict[str, Any]]) -> "MaterialCatalog":
        return cls(CatalogRecord.from_dict(item) for item in items)

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, name: str) -> bool:
        return _key(name) in self._records

    def add(self, record: CatalogRecord) -> None:
        self._records[_key(record.name)] = record

    def find(self, name: str) -> Optional[CatalogRecord]:
        return self._records.get(_key(name))

    def lookup(self, name: str) -> CatalogRecord:
        """
        Get a record by name.

        Raises:
            MaterialNotFound: no record with that name
        """
        record = self.find(name)
        if record is None:
            raise MaterialNotFound(
                f"Material not in catalog: {name}",
                field="material",
                actual=name,
            )
        return record

    def by_category(self, category: MaterialCategory) -> List[CatalogRecord]:
        return [r for r in self._records.values() if r.category == category]

    def resolve_line(
        self,
        name: str,
        quantity_per_base_unit: float,
        price_override: Optional[float] = None,
    ) -> MaterialLine:
        """Material line priced from the catalog, optionally overridden."""
        record = self.lookup(name)
        line = MaterialLine(
            name=record.name,
            quantity_per_base_unit=quantity_per_base_unit,
            unit=record.unit,
            unit_price=record.price,
            supplier=record.supplier,
        )
        if price_override is not None:
            line = line.with_overrides(unit_price=price_override)
        return line

    @staticmethod
    def placeholder_line(
        name: str,
        unit: str,
        price: float,
        quantity_per_base_unit: float = 0.0,
    ) -> MaterialLine:
        """Line with a caller-supplied price for a material the catalog lacks."""
        logger.info(f"Using placeholder price {price} per {unit} for '{name}'")
        return MaterialLine(
            name=name,
            quantity_per_base_unit=quantity_per_base_unit,
            unit=unit,
            unit_price=price,
            is_placeholder=True,
        )
