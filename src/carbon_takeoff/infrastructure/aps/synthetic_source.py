"""Deterministic placeholder elements (last tier, opt-in).

Only used when every API tier failed and synthetic data is explicitly
allowed. Results built from these elements are flagged as synthetic.
"""
from __future__ import annotations

from decimal import Decimal

from carbon_takeoff.domain.models import Element, ElementFilter, ElementPage, ElementProperty

# (category, family, type mark, material, volume m³, area m², length m)
_TEMPLATES: tuple[tuple[str, str, str, str, str, str, str], ...] = (
    ("Walls", "Basic Wall", "W1", "Concrete Masonry Units", "4.5", "18", "0"),
    ("Floors", "Floor", "F1", "Concrete, Cast-in-Place", "12", "60", "0"),
    ("Structural Columns", "Concrete-Rectangular-Column", "C1", "Concrete, Precast", "0.8", "0", "3.2"),
    ("Structural Framing", "W-Wide Flange", "B1", "Steel, Structural", "0.12", "0", "6"),
    ("Roofs", "Basic Roof", "R1", "Timber Deck", "3", "45", "0"),
    ("Windows", "Fixed", "WD1", "Glass", "0.05", "2.4", "0"),
    ("Doors", "Single-Flush", "D1", "Wood", "0.09", "2.1", "0"),
    ("Structural Foundations", "Footing-Rectangular", "FN1", "Concrete", "6", "9", "0"),
)


class SyntheticElementSource:
    """Bounded, deterministic placeholder element generator."""

    name = "synthetic"
    is_synthetic = True

    def __init__(self, element_count: int = 12) -> None:
        self._count = element_count

    def _build(self, index: int) -> Element:
        category, family, mark, material, volume, area, length = _TEMPLATES[
            index % len(_TEMPLATES)
        ]
        return Element(
            id=f"synthetic-{index + 1}",
            name=f"{family} {mark}",
            category=category,
            family=family,
            type_mark=mark,
            properties=(ElementProperty(name="Structural Material", value=material),),
            volume_m3=Decimal(volume),
            area_m2=Decimal(area),
            length_m=Decimal(length),
        )

    async def attempt(
        self,
        design_id: str,
        element_filter: ElementFilter | None,
        limit: int,
        offset: int,
    ) -> ElementPage:
        elements = [self._build(i) for i in range(self._count)]
        if element_filter is not None and element_filter.categories:
            wanted = {c.lower() for c in element_filter.categories}
            elements = [e for e in elements if e.category.lower() in wanted]
        if element_filter is not None and element_filter.families:
            wanted = {f.lower() for f in element_filter.families}
            elements = [e for e in elements if (e.family or "").lower() in wanted]
        page = elements[offset:offset + limit]
        return ElementPage(
            elements=tuple(page),
            offset=offset,
            limit=limit,
            total=len(elements),
            has_more=offset + len(page) < len(elements),
        )
