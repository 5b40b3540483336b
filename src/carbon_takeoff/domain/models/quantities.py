"""Quantity takeoff domain types.

Material quantities, element types and their classification codes.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any

from carbon_takeoff.domain.models.element import ZERO, Element


class MaterialType(str, Enum):
    """Closed set of material categories used for carbon matching."""

    CONCRETE = "Concrete"
    STEEL = "Steel"
    TIMBER = "Timber"
    MASONRY = "Masonry"
    GLASS = "Glass"
    ALUMINUM = "Aluminum"
    INSULATION = "Insulation"
    GYPSUM = "Gypsum"
    CERAMIC = "Ceramic"
    PLASTIC = "Plastic"
    OTHER = "Other"

    @classmethod
    def parse(cls, value: str | MaterialType | None) -> MaterialType:
        """Parse a case-insensitive type name, defaulting to OTHER."""
        if isinstance(value, MaterialType):
            return value
        if not value:
            return cls.OTHER
        wanted = value.strip().lower()
        if wanted == "aluminium":
            return cls.ALUMINUM
        for member in cls:
            if member.value.lower() == wanted:
                return member
        return cls.OTHER


class ClassificationSource(str, Enum):
    """Where a classification code came from."""

    MODEL = "model"      # Read from the element's property bag
    DERIVED = "derived"  # Derived from category keywords


@dataclass(frozen=True)
class ClassificationCode:
    """Hierarchical code plus short cross-reference suffix."""

    code: str
    title: str
    suffix: str
    source: ClassificationSource = ClassificationSource.DERIVED

    def to_dict(self) -> dict[str, str]:
        return {
            "code": self.code,
            "title": self.title,
            "suffix": self.suffix,
            "source": self.source.value,
        }


@dataclass(frozen=True)
class MaterialClassification:
    """Outcome of classifying one element's material."""

    material_name: str
    material_type: MaterialType


@dataclass(frozen=True)
class ClassifiedElement:
    """Element annotated with its material classification."""

    element: Element
    material_name: str
    material_type: MaterialType

    @property
    def id(self) -> str:
        return self.element.id

    @property
    def category(self) -> str:
        return self.element.category


@dataclass(frozen=True)
class MaterialQuantity:
    """Summed quantities of one (material, category) bucket."""

    material_name: str
    material_type: MaterialType
    element_category: str
    volume_m3: Decimal = ZERO
    area_m2: Decimal = ZERO
    length_m: Decimal = ZERO
    element_count: int = 0
    elements: tuple[Element, ...] = field(default=(), repr=False)

    @property
    def key(self) -> tuple[str, str]:
        return (self.material_name, self.element_category)

    @property
    def element_ids(self) -> list[str]:
        return [e.id for e in self.elements]

    def to_dict(self, include_elements: bool = False) -> dict[str, Any]:
        data: dict[str, Any] = {
            "material_name": self.material_name,
            "material_type": self.material_type.value,
            "element_category": self.element_category,
            "volume_m3": float(self.volume_m3),
            "area_m2": float(self.area_m2),
            "length_m": float(self.length_m),
            "element_count": self.element_count,
        }
        if include_elements:
            data["element_ids"] = self.element_ids
        return data


@dataclass(frozen=True)
class ElementTypeMaterial:
    """Material used within one or more element types."""

    id: str
    material_name: str
    material_type: MaterialType
    classification: ClassificationCode
    volume_m3: Decimal = ZERO
    area_m2: Decimal = ZERO
    length_m: Decimal = ZERO
    density_kg_m3: Decimal | None = None
    element_type_ids: tuple[str, ...] = ()

    @property
    def mass_kg(self) -> Decimal | None:
        """Estimated mass from volume and density."""
        if self.density_kg_m3 is None:
            return None
        return self.volume_m3 * self.density_kg_m3

    def to_dict(self) -> dict[str, Any]:
        mass = self.mass_kg
        return {
            "id": self.id,
            "material_name": self.material_name,
            "material_type": self.material_type.value,
            "classification": self.classification.to_dict(),
            "volume_m3": float(self.volume_m3),
            "area_m2": float(self.area_m2),
            "length_m": float(self.length_m),
            "density_kg_m3": float(self.density_kg_m3) if self.density_kg_m3 is not None else None,
            "mass_kg": float(mass) if mass is not None else None,
            "element_type_ids": list(self.element_type_ids),
        }


@dataclass(frozen=True)
class ElementType:
    """Group of elements sharing (family, type mark)."""

    id: str
    family_name: str
    type_mark: str | None
    type_name: str | None
    category: str
    classification: ClassificationCode
    volume_m3: Decimal = ZERO
    area_m2: Decimal = ZERO
    length_m: Decimal = ZERO
    element_count: int = 0
    element_ids: tuple[str, ...] = field(default=(), repr=False)
    material_quantities: tuple[MaterialQuantity, ...] = field(default=(), repr=False)
    materials: tuple[ElementTypeMaterial, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "family_name": self.family_name,
            "type_mark": self.type_mark,
            "type_name": self.type_name,
            "category": self.category,
            "classification": self.classification.to_dict(),
            "volume_m3": float(self.volume_m3),
            "area_m2": float(self.area_m2),
            "length_m": float(self.length_m),
            "element_count": self.element_count,
            "materials": [m.to_dict() for m in self.materials],
        }


@dataclass(frozen=True)
class TakeoffSummary:
    """Run-level totals of a takeoff."""

    total_volume_m3: Decimal = ZERO
    total_area_m2: Decimal = ZERO
    total_length_m: Decimal = ZERO
    unique_materials: int = 0
    unique_element_types: int = 0
    element_categories: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_volume_m3": float(self.total_volume_m3),
            "total_area_m2": float(self.total_area_m2),
            "total_length_m": float(self.total_length_m),
            "unique_materials": self.unique_materials,
            "unique_element_types": self.unique_element_types,
            "element_categories": list(self.element_categories),
        }
