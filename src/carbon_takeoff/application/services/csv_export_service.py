"""CSV Export Service.

Renders takeoff groupings as CSV for spreadsheet users. Every cell is
quoted and quantities carry three decimals.
"""
from __future__ import annotations

import csv
import io
from decimal import Decimal
from typing import Iterable, Sequence

from carbon_takeoff.domain.models import ElementType, ElementTypeMaterial, MaterialQuantity

MATERIAL_HEADERS = (
    "Material Name",
    "Material Type",
    "Element Category",
    "Volume (m³)",
    "Area (m²)",
    "Length (m)",
    "Element Count",
)

ELEMENT_TYPE_HEADERS = (
    "Type ID",
    "Family Name",
    "Type Mark",
    "Category",
    "Classification Code",
    "Classification Title",
    "NBS Suffix",
    "Volume (m³)",
    "Area (m²)",
    "Length (m)",
    "Element Count",
)

MATERIAL_SUMMARY_HEADERS = (
    "Material ID",
    "Material Name",
    "Material Type",
    "Classification Code",
    "NBS Suffix",
    "Volume (m³)",
    "Area (m²)",
    "Length (m)",
    "Density (kg/m³)",
    "Mass (kg)",
    "Element Types",
)


def _fmt(value: Decimal | None) -> str:
    if value is None:
        return ""
    return f"{value:.3f}"


class CsvExportService:
    """Export takeoff results as CSV text."""

    def materials_csv(self, materials: Sequence[MaterialQuantity]) -> str:
        """One row per (material, category) bucket."""
        rows = (
            (
                m.material_name,
                m.material_type.value,
                m.element_category,
                _fmt(m.volume_m3),
                _fmt(m.area_m2),
                _fmt(m.length_m),
                str(m.element_count),
            )
            for m in materials
        )
        return self._render(MATERIAL_HEADERS, rows)

    def element_types_csv(self, element_types: Sequence[ElementType]) -> str:
        """One row per element type."""
        rows = (
            (
                t.id,
                t.family_name,
                t.type_mark or "",
                t.category,
                t.classification.code,
                t.classification.title,
                t.classification.suffix,
                _fmt(t.volume_m3),
                _fmt(t.area_m2),
                _fmt(t.length_m),
                str(t.element_count),
            )
            for t in element_types
        )
        return self._render(ELEMENT_TYPE_HEADERS, rows)

    def materials_summary_csv(self, materials: Sequence[ElementTypeMaterial]) -> str:
        """One row per distinct material across element types."""
        rows = (
            (
                m.id,
                m.material_name,
                m.material_type.value,
                m.classification.code,
                m.classification.suffix,
                _fmt(m.volume_m3),
                _fmt(m.area_m2),
                _fmt(m.length_m),
                _fmt(m.density_kg_m3),
                _fmt(m.mass_kg),
                " ".join(m.element_type_ids),
            )
            for m in materials
        )
        return self._render(MATERIAL_SUMMARY_HEADERS, rows)

    @staticmethod
    def _render(headers: Sequence[str], rows: Iterable[Sequence[str]]) -> str:
        buffer = io.StringIO()
        writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
        writer.writerow(headers)
        writer.writerows(rows)
        return buffer.getvalue()
