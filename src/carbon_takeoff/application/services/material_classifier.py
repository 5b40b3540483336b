"""Material Classifier.

Two independent stages: extract a material name from an element, then map
that name onto a MaterialType. Each stage can be tested and overridden on
its own.
"""
from __future__ import annotations

from typing import Sequence

from carbon_takeoff.domain.models import (
    ClassifiedElement,
    Element,
    MaterialClassification,
    MaterialType,
)

UNKNOWN_MATERIAL = "Unknown Material"

# Category keyword -> inferred material name. First match wins.
CATEGORY_MATERIAL_KEYWORDS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("concrete", "foundation"), "Concrete"),
    (("steel", "framing"), "Steel"),
    (("wall",), "Mixed Wall Materials"),
    (("floor", "slab"), "Concrete"),
    (("roof",), "Mixed Roof Materials"),
    (("window",), "Glass and Aluminum"),
    (("door",), "Wood and Metal"),
)

# Material name keyword -> material type. First match wins.
MATERIAL_TYPE_KEYWORDS: tuple[tuple[tuple[str, ...], MaterialType], ...] = (
    (("concrete",), MaterialType.CONCRETE),
    (("steel", "metal"), MaterialType.STEEL),
    (("timber", "wood"), MaterialType.TIMBER),
    (("brick", "masonry"), MaterialType.MASONRY),
    (("glass",), MaterialType.GLASS),
    (("aluminum", "aluminium"), MaterialType.ALUMINUM),
    (("insulation",), MaterialType.INSULATION),
    (("gypsum", "drywall"), MaterialType.GYPSUM),
    (("ceramic", "tile"), MaterialType.CERAMIC),
    (("plastic", "polymer"), MaterialType.PLASTIC),
)


class MaterialClassifier:
    """Classify an element's material.

    Pure and stateless: classifying the same element twice yields the same
    result.
    """

    def __init__(
        self,
        category_keywords: Sequence[tuple[tuple[str, ...], str]] | None = None,
        type_keywords: Sequence[tuple[tuple[str, ...], MaterialType]] | None = None,
    ) -> None:
        self._category_keywords = tuple(category_keywords or CATEGORY_MATERIAL_KEYWORDS)
        self._type_keywords = tuple(type_keywords or MATERIAL_TYPE_KEYWORDS)

    def classify(self, element: Element) -> MaterialClassification:
        """Resolve (material name, material type) for one element."""
        name = self.extract_material_name(element)
        return MaterialClassification(
            material_name=name,
            material_type=self.classify_material_type(name),
        )

    def annotate(self, elements: Sequence[Element]) -> list[ClassifiedElement]:
        """Classify a batch of elements, preserving order."""
        result = []
        for element in elements:
            classification = self.classify(element)
            result.append(
                ClassifiedElement(
                    element=element,
                    material_name=classification.material_name,
                    material_type=classification.material_type,
                )
            )
        return result

    # =========================================================================
    # Stage 1: material name
    # =========================================================================

    def extract_material_name(self, element: Element) -> str:
        """Material name from the property bag, else inferred from category.

        Only string values count; placeholders such as "By Category" are
        ignored.
        """
        for prop in element.properties_containing("material"):
            if not isinstance(prop.value, str) or prop.is_placeholder:
                continue
            value = prop.value.strip()
            if value:
                return value
        return self.infer_material_from_category(element.category)

    def infer_material_from_category(self, category: str) -> str:
        category_lower = (category or "").lower()
        for keywords, material in self._category_keywords:
            if any(k in category_lower for k in keywords):
                return material
        return UNKNOWN_MATERIAL

    # =========================================================================
    # Stage 2: material type
    # =========================================================================

    def classify_material_type(self, material_name: str) -> MaterialType:
        """Case-insensitive substring match; no match gives OTHER."""
        name = (material_name or "").lower()
        for keywords, material_type in self._type_keywords:
            if any(k in name for k in keywords):
                return material_type
        return MaterialType.OTHER
