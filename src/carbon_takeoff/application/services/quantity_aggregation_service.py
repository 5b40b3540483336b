"""Quantity Aggregation Service.

Turns classified elements into two parallel groupings:

1. material quantities, keyed by (material name, element category)
2. element types, keyed by (family name, type mark), each carrying its
   classification and de-duplicated material list

Both passes are linear in the number of elements.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Sequence

from carbon_takeoff.application.services.classification_service import (
    ClassificationService,
)
from carbon_takeoff.domain.models import (
    ClassifiedElement,
    Element,
    ElementType,
    ElementTypeMaterial,
    MaterialQuantity,
    MaterialType,
    TakeoffSummary,
)
from carbon_takeoff.domain.models.element import ZERO
from carbon_takeoff.infrastructure.reference import MATERIAL_DENSITIES
from carbon_takeoff.shared.logging import get_logger

logger = get_logger(__name__)

NO_MARK = "No Mark"
FAMILY_PROPERTY_NAMES = ("Family", "Family Name")
TYPE_MARK_PROPERTY_NAMES = ("Type Mark", "Mark", "Assembly Mark")
TYPE_NAME_PROPERTY_NAMES = ("Type Name",)

_MATERIAL_ID_RE = re.compile(r"[^a-zA-Z0-9]")


@dataclass
class _Bucket:
    """Running totals while grouping."""

    volume: Decimal = ZERO
    area: Decimal = ZERO
    length: Decimal = ZERO
    elements: list[Element] = field(default_factory=list)

    def add(self, element: Element) -> None:
        self.volume += element.volume_m3
        self.area += element.area_m2
        self.length += element.length_m
        self.elements.append(element)


@dataclass(frozen=True)
class QuantityAggregation:
    """Both groupings plus run-level totals."""

    materials: tuple[MaterialQuantity, ...]
    element_types: tuple[ElementType, ...]
    materials_summary: tuple[ElementTypeMaterial, ...]
    summary: TakeoffSummary


def material_id(material_name: str, material_type: MaterialType) -> str:
    """Stable id of a material across element types."""
    return f"mat_{_MATERIAL_ID_RE.sub('_', material_name)}_{material_type.value}"


def group_family_name(element: Element) -> str:
    return (
        element.family
        or element.first_property_text(FAMILY_PROPERTY_NAMES)
        or element.category
    )


def group_type_mark(element: Element) -> str:
    return (
        element.type_mark
        or element.first_property_text(TYPE_MARK_PROPERTY_NAMES)
        or NO_MARK
    )


class QuantityAggregationService:
    """Aggregate classified elements into takeoff groupings."""

    def __init__(
        self,
        classification_service: ClassificationService | None = None,
        densities: dict[MaterialType, Decimal] | None = None,
        default_density: Decimal = Decimal("1000"),
    ) -> None:
        self._classification = classification_service or ClassificationService()
        self._densities = dict(MATERIAL_DENSITIES if densities is None else densities)
        self._default_density = default_density

    def aggregate(self, classified: Sequence[ClassifiedElement]) -> QuantityAggregation:
        """Run both passes and summarize."""
        materials = self.aggregate_materials(classified)
        element_types, materials_summary = self.aggregate_element_types(classified, materials)
        summary = self.summarize(classified, materials_summary, element_types)
        logger.info(
            "quantities_aggregated",
            elements=len(classified),
            materials=len(materials),
            element_types=len(element_types),
        )
        return QuantityAggregation(
            materials=tuple(materials),
            element_types=tuple(element_types),
            materials_summary=tuple(materials_summary),
            summary=summary,
        )

    # =========================================================================
    # Pass 1: materials
    # =========================================================================

    def aggregate_materials(
        self, classified: Sequence[ClassifiedElement]
    ) -> list[MaterialQuantity]:
        """Group by (material name, category), sorted by descending volume.

        Ties keep discovery order.
        """
        buckets: dict[tuple[str, str], _Bucket] = {}
        types: dict[tuple[str, str], MaterialType] = {}
        for item in classified:
            key = (item.material_name, item.category)
            if key not in buckets:
                buckets[key] = _Bucket()
                types[key] = item.material_type
            buckets[key].add(item.element)

        materials = [
            MaterialQuantity(
                material_name=name,
                material_type=types[(name, category)],
                element_category=category,
                volume_m3=bucket.volume,
                area_m2=bucket.area,
                length_m=bucket.length,
                element_count=len(bucket.elements),
                elements=tuple(bucket.elements),
            )
            for (name, category), bucket in buckets.items()
        ]
        return sorted(materials, key=lambda m: -m.volume_m3)

    # =========================================================================
    # Pass 2: element types
    # =========================================================================

    def aggregate_element_types(
        self,
        classified: Sequence[ClassifiedElement],
        material_quantities: Sequence[MaterialQuantity],
    ) -> tuple[list[ElementType], list[ElementTypeMaterial]]:
        """Group by (family, type mark) and build the materials summary.

        Returns:
            (element types in discovery order, materials summary)
        """
        groups: dict[tuple[str, str], list[ClassifiedElement]] = {}
        for item in classified:
            key = (group_family_name(item.element), group_type_mark(item.element))
            groups.setdefault(key, []).append(item)

        by_key = {m.key: m for m in material_quantities}
        element_types: list[ElementType] = []
        summary: dict[str, dict] = {}

        for index, ((family_name, type_mark), members) in enumerate(groups.items(), start=1):
            type_id = f"et_{index}"
            first = members[0].element
            elements = [m.element for m in members]
            classification = self._classification.classify_element_type(
                elements, first.category, family_name, type_mark
            )

            totals = _Bucket()
            per_material: dict[str, tuple[MaterialType, _Bucket]] = {}
            buckets_used: dict[tuple[str, str], MaterialQuantity] = {}
            for member in members:
                totals.add(member.element)
                entry = per_material.setdefault(
                    member.material_name, (member.material_type, _Bucket())
                )
                entry[1].add(member.element)
                key = (member.material_name, member.category)
                if key in by_key:
                    buckets_used.setdefault(key, by_key[key])

            materials = []
            for name, (material_type, bucket) in per_material.items():
                material = self._type_material(name, material_type, bucket, type_id)
                materials.append(material)
                self._merge_summary(summary, material)

            element_types.append(
                ElementType(
                    id=type_id,
                    family_name=family_name,
                    type_mark=None if type_mark == NO_MARK else type_mark,
                    type_name=(
                        first.type_name
                        or first.first_property_text(TYPE_NAME_PROPERTY_NAMES)
                        or (None if type_mark == NO_MARK else type_mark)
                    ),
                    category=first.category,
                    classification=classification,
                    volume_m3=totals.volume,
                    area_m2=totals.area,
                    length_m=totals.length,
                    element_count=len(members),
                    element_ids=tuple(e.id for e in elements),
                    material_quantities=tuple(buckets_used.values()),
                    materials=tuple(materials),
                )
            )

        materials_summary = [
            ElementTypeMaterial(
                id=entry["material"].id,
                material_name=entry["material"].material_name,
                material_type=entry["material"].material_type,
                classification=entry["material"].classification,
                volume_m3=entry["volume"],
                area_m2=entry["area"],
                length_m=entry["length"],
                density_kg_m3=entry["material"].density_kg_m3,
                element_type_ids=tuple(entry["type_ids"]),
            )
            for entry in summary.values()
        ]
        return element_types, materials_summary

    def _type_material(
        self,
        name: str,
        material_type: MaterialType,
        bucket: _Bucket,
        type_id: str,
    ) -> ElementTypeMaterial:
        return ElementTypeMaterial(
            id=material_id(name, material_type),
            material_name=name,
            material_type=material_type,
            classification=self._classification.classify_material(name, material_type),
            volume_m3=bucket.volume,
            area_m2=bucket.area,
            length_m=bucket.length,
            density_kg_m3=self._densities.get(material_type, self._default_density),
            element_type_ids=(type_id,),
        )

    @staticmethod
    def _merge_summary(summary: dict[str, dict], material: ElementTypeMaterial) -> None:
        entry = summary.get(material.id)
        if entry is None:
            summary[material.id] = {
                "material": material,
                "volume": material.volume_m3,
                "area": material.area_m2,
                "length": material.length_m,
                "type_ids": list(material.element_type_ids),
            }
            return
        entry["volume"] += material.volume_m3
        entry["area"] += material.area_m2
        entry["length"] += material.length_m
        entry["type_ids"].extend(material.element_type_ids)

    # =========================================================================
    # Summary
    # =========================================================================

    def summarize(
        self,
        classified: Sequence[ClassifiedElement],
        materials_summary: Sequence[ElementTypeMaterial],
        element_types: Sequence[ElementType],
    ) -> TakeoffSummary:
        totals = _Bucket()
        categories: dict[str, None] = {}
        for item in classified:
            totals.add(item.element)
            categories.setdefault(item.category, None)
        return TakeoffSummary(
            total_volume_m3=totals.volume,
            total_area_m2=totals.area,
            total_length_m=totals.length,
            unique_materials=len(materials_summary),
            unique_element_types=len(element_types),
            element_categories=tuple(categories),
        )
