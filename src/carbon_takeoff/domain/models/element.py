"""Building Element Domain Entity.

Represents one element of a BIM design as returned by the element listing
services, normalized into a single immutable shape.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

ZERO = Decimal("0")

# Values that stand for "no explicit value" in Revit-exported property bags
PLACEHOLDER_VALUES = frozenset({"", "by category", "<by category>", "none", "n/a"})


@dataclass(frozen=True)
class ElementProperty:
    """Property value with metadata."""

    name: str
    value: Any
    display_name: str | None = None
    category: str | None = None
    data_type: str = "string"
    units: str | None = None

    @property
    def is_placeholder(self) -> bool:
        """True when the value carries no information."""
        if self.value is None:
            return True
        return isinstance(self.value, str) and self.value.strip().lower() in PLACEHOLDER_VALUES


@dataclass(frozen=True)
class ElementFilter:
    """Optional restriction of an element listing request."""

    categories: tuple[str, ...] = ()
    families: tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.categories and not self.families

    def to_dict(self) -> dict[str, list[str]]:
        return {"categories": list(self.categories), "families": list(self.families)}


@dataclass(frozen=True)
class Element:
    """Building Element Domain Entity.

    Immutable once extracted; owned by the retrieval run that created it.

    Attributes:
        id: Upstream element identifier
        name: Display name
        category: Revit-style category (e.g. "Structural Columns")
        family: Optional family name
        type_name: Optional type name
        type_mark: Optional type mark
        level: Optional level name
        properties: Raw property bag
        volume_m3: Volume in m³
        area_m2: Area in m²
        length_m: Length in m
    """

    id: str
    name: str
    category: str
    family: str | None = None
    type_name: str | None = None
    type_mark: str | None = None
    level: str | None = None
    properties: tuple[ElementProperty, ...] = field(default=(), repr=False)
    volume_m3: Decimal = ZERO
    area_m2: Decimal = ZERO
    length_m: Decimal = ZERO

    # =========================================================================
    # Property Access
    # =========================================================================

    def get_property(self, name: str) -> ElementProperty | None:
        """Get the first property whose name matches (case-insensitive).

        Args:
            name: Property name (e.g., "Type Mark")

        Returns:
            ElementProperty or None if not found
        """
        wanted = name.strip().lower()
        for prop in self.properties:
            if prop.name.strip().lower() == wanted:
                return prop
        return None

    def get_property_value(self, name: str) -> Any | None:
        """Get raw property value, ignoring placeholders."""
        prop = self.get_property(name)
        if prop is None or prop.is_placeholder:
            return None
        return prop.value

    def first_property_text(self, names: tuple[str, ...] | list[str]) -> str | None:
        """Return the first non-placeholder text value among ``names``."""
        for name in names:
            value = self.get_property_value(name)
            if value is None:
                continue
            text = str(value).strip()
            if text:
                return text
        return None

    def properties_containing(self, fragment: str) -> list[ElementProperty]:
        """All properties whose name contains ``fragment`` (case-insensitive)."""
        fragment = fragment.lower()
        return [p for p in self.properties if fragment in p.name.lower()]

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "family": self.family,
            "type_name": self.type_name,
            "type_mark": self.type_mark,
            "level": self.level,
            "volume_m3": float(self.volume_m3),
            "area_m2": float(self.area_m2),
            "length_m": float(self.length_m),
        }
