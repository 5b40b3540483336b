"""Tests for CsvExportService."""
from __future__ import annotations

import csv
import io
from decimal import Decimal

from carbon_takeoff.application.services.csv_export_service import (
    ELEMENT_TYPE_HEADERS,
    MATERIAL_HEADERS,
    CsvExportService,
)
from carbon_takeoff.application.services.quantity_aggregation_service import (
    QuantityAggregationService,
)
from carbon_takeoff.application.services.material_classifier import MaterialClassifier
from carbon_takeoff.domain.models import MaterialQuantity, MaterialType

from conftest import make_element


def read_rows(text: str) -> list[list[str]]:
    return list(csv.reader(io.StringIO(text)))


class TestMaterialsCsv:
    def test_every_cell_is_quoted(self) -> None:
        text = CsvExportService().materials_csv([
            MaterialQuantity(
                material_name='Concrete, "C30"',
                material_type=MaterialType.CONCRETE,
                element_category="Walls",
                volume_m3=Decimal("1.23456"),
                element_count=2,
            )
        ])
        header, row = text.splitlines()
        assert header.startswith('"Material Name","Material Type"')
        assert row.startswith('"Concrete, ""C30""","Concrete","Walls","1.235"')

    def test_three_decimals(self) -> None:
        rows = read_rows(CsvExportService().materials_csv([
            MaterialQuantity("Steel", MaterialType.STEEL, "Structural Framing", length_m=Decimal("12")),
        ]))
        assert rows[0] == list(MATERIAL_HEADERS)
        assert rows[1][3:6] == ["0.000", "0.000", "12.000"]

    def test_empty_export_has_header_only(self) -> None:
        assert read_rows(CsvExportService().materials_csv([])) == [list(MATERIAL_HEADERS)]


class TestElementTypesCsv:
    def test_rows_follow_element_types(self) -> None:
        elements = [
            make_element("1", "Walls", volume="2", family="Basic Wall", type_mark="W1",
                         Structural_Material="Concrete"),
            make_element("2", "Walls", volume="1", family="Basic Wall", type_mark="W1",
                         Structural_Material="Concrete"),
        ]
        classified = MaterialClassifier().annotate(elements)
        aggregation = QuantityAggregationService().aggregate(classified)
        types, summary = aggregation.element_types, aggregation.materials_summary

        service = CsvExportService()
        rows = read_rows(service.element_types_csv(types))
        assert rows[0] == list(ELEMENT_TYPE_HEADERS)
        assert rows[1][1:3] == ["Basic Wall", "W1"]
        assert rows[1][7] == "3.000"
        assert rows[1][-1] == "2"

        summary_rows = read_rows(service.materials_summary_csv(summary))
        assert summary_rows[1][1] == "Concrete"
        assert summary_rows[1][-1] == types[0].id
