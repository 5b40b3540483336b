"""Classification Service.

Assigns Uniclass 2015 codes with an NBS Chorus-style suffix to element types
and materials. Codes found in the model are used as given; otherwise they
are derived from category keywords, deterministically.
"""
from __future__ import annotations

from typing import Sequence

from carbon_takeoff.domain.models import (
    ClassificationCode,
    ClassificationSource,
    Element,
    MaterialType,
)

# =============================================================================
# Property name variants
# =============================================================================

CODE_PROPERTY_NAMES: tuple[str, ...] = (
    "Uniclass Code",
    "UniClass",
    "Uniclass 2015",
    "Uniclass2015",
    "Classification Code",
    "Classification",
    "Element Classification",
    "Assembly Code",
    "Type Classification",
)

TITLE_PROPERTY_NAMES: tuple[str, ...] = (
    "Uniclass Title",
    "UniClass Description",
    "Classification Title",
    "Classification Description",
    "Element Description",
    "Assembly Description",
)

SUFFIX_PROPERTY_NAMES: tuple[str, ...] = (
    "NBS Chorus",
    "NBS Code",
    "NBS Reference",
    "NBS Suffix",
    "Chorus Code",
    "Work Section",
    "Specification Reference",
)

# =============================================================================
# Derivation tables
# =============================================================================

# (category keywords, code, title prefix, suffix). First match wins.
ELEMENT_CODES: tuple[tuple[tuple[str, ...], str, str, str], ...] = (
    (("wall",), "EF_25_10", "", "WL"),
    (("floor", "slab"), "EF_30_10", "Floor", "FL"),
    (("roof",), "EF_35_10", "Roof", "RF"),
    (("column",), "EF_25_30", "Column", "CL"),
    (("beam",), "EF_25_40", "Beam", "BM"),
    (("foundation",), "EF_15_10", "Foundation", "FN"),
    (("stair",), "EF_34_10", "Stair", "ST"),
    (("door",), "EF_31_10", "Door", "DR"),
    (("window",), "EF_31_20", "Window", "WD"),
    (("ceiling",), "EF_35_20", "Ceiling", "CG"),
)
GENERIC_ELEMENT_CODE = "EF_00_00"
GENERIC_ELEMENT_SUFFIX = "GN"

MATERIAL_CODES: dict[MaterialType, tuple[str, str]] = {
    MaterialType.CONCRETE: ("Pr_20_58_63", "CN"),
    MaterialType.STEEL: ("Pr_20_58_75", "ST"),
    MaterialType.TIMBER: ("Pr_25_52_36", "TM"),
    MaterialType.MASONRY: ("Pr_20_58_52", "MS"),
    MaterialType.GLASS: ("Pr_25_80_37", "GL"),
    MaterialType.ALUMINUM: ("Pr_20_58_30", "AL"),
    MaterialType.INSULATION: ("Pr_25_70_45", "IN"),
    MaterialType.GYPSUM: ("Pr_25_71_43", "GP"),
}
GENERIC_MATERIAL_CODE = ("Pr_00_00_00", "MT")

_IGNORED_VALUES = frozenset({"none", "n/a"})


class ClassificationService:
    """Derive classification codes for element types and materials."""

    def __init__(
        self,
        element_codes: Sequence[tuple[tuple[str, ...], str, str, str]] | None = None,
        material_codes: dict[MaterialType, tuple[str, str]] | None = None,
    ) -> None:
        self._element_codes = tuple(element_codes or ELEMENT_CODES)
        self._material_codes = dict(material_codes or MATERIAL_CODES)

    # =========================================================================
    # Element types
    # =========================================================================

    def classify_element_type(
        self,
        elements: Sequence[Element],
        category: str,
        family_name: str,
        type_mark: str,
    ) -> ClassificationCode:
        """Classification of one element-type group.

        The first element carrying an explicit code decides; each part
        (code, title, suffix) falls back to derivation independently.

        Args:
            elements: Group members, in discovery order
            category: Category of the group's first element
            family_name: Grouping family name
            type_mark: Grouping type mark ("No Mark" when absent)
        """
        source_element = next(
            (e for e in elements if self._explicit(e, CODE_PROPERTY_NAMES)),
            elements[0] if elements else None,
        )

        code = title = suffix = None
        if source_element is not None:
            code = self._explicit(source_element, CODE_PROPERTY_NAMES)
            title = self._explicit(source_element, TITLE_PROPERTY_NAMES)
            suffix = self._explicit(source_element, SUFFIX_PROPERTY_NAMES)

        derived = self.derive_element_code(category, family_name, type_mark)
        return ClassificationCode(
            code=code or derived.code,
            title=title or derived.title,
            suffix=suffix or derived.suffix,
            source=ClassificationSource.MODEL if code else ClassificationSource.DERIVED,
        )

    def derive_element_code(
        self, category: str, family_name: str, type_mark: str
    ) -> ClassificationCode:
        """Deterministic fallback from category keywords."""
        category_lower = (category or "").lower()
        for keywords, code, prefix, suffix in self._element_codes:
            if any(k in category_lower for k in keywords):
                title = f"{family_name} - {type_mark}"
                if prefix:
                    title = f"{prefix} {title}"
                return ClassificationCode(code=code, title=title, suffix=suffix)
        return ClassificationCode(
            code=GENERIC_ELEMENT_CODE,
            title=f"{category} {family_name} - {type_mark}",
            suffix=GENERIC_ELEMENT_SUFFIX,
        )

    # =========================================================================
    # Materials
    # =========================================================================

    def classify_material(
        self, material_name: str, material_type: MaterialType
    ) -> ClassificationCode:
        code, suffix = self._material_codes.get(material_type, GENERIC_MATERIAL_CODE)
        return ClassificationCode(code=code, title=f"{material_name} Material", suffix=suffix)

    # =========================================================================
    # Helpers
    # =========================================================================

    @staticmethod
    def _explicit(element: Element, names: tuple[str, ...]) -> str | None:
        for name in names:
            value = element.get_property_value(name)
            if value is None:
                continue
            text = str(value).strip()
            if text and text.lower() not in _IGNORED_VALUES:
                return text
        return None
