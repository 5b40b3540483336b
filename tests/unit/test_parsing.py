"""Tests for element response normalization."""
from __future__ import annotations

from decimal import Decimal

import pytest

from carbon_takeoff.domain.exceptions import ElementSourceError, MalformedElementError
from carbon_takeoff.infrastructure.aps.parsing import (
    iter_object_tree,
    parse_decimal,
    parse_element,
    parse_page,
    parse_properties,
    parse_quantity,
)


class TestNumbers:
    @pytest.mark.parametrize(
        "value,expected",
        [(3, Decimal("3")), (1.5, Decimal("1.5")), ("2,5", Decimal("2.5")),
         ("12.5 m³", Decimal("12.5")), ("n/a", None), (None, None), (True, None),
         (float("nan"), None), (float("inf"), None), (Decimal("NaN"), None)],
    )
    def test_parse_decimal(self, value, expected) -> None:
        assert parse_decimal(value) == expected

    def test_quantity_unit_conversion(self) -> None:
        assert parse_quantity("2500 mm", "length") == Decimal("2.5")
        assert parse_quantity(1000000, "area", "mm²") == Decimal("1")
        assert parse_quantity("3.2 m³", "volume") == Decimal("3.2")

    def test_unknown_unit_is_rejected(self) -> None:
        assert parse_quantity("3 furlongs", "length") is None


class TestProperties:
    def test_list_of_records(self) -> None:
        props = parse_properties([
            {"name": "Structural Material", "value": "Concrete", "dataType": "string"},
            {"displayName": "Type Mark", "value": "C1"},
            "garbage",
        ])
        assert [p.name for p in props] == ["Structural Material", "Type Mark"]

    def test_grouped_dict(self) -> None:
        props = parse_properties({"Dimensions": {"Volume": 1.2}, "Identity": {"Mark": "A"}})
        assert props[0].name == "Volume"
        assert props[0].category == "Dimensions"
        assert props[0].data_type == "number"

    def test_flat_dict(self) -> None:
        props = parse_properties({"Material": "Brick"})
        assert (props[0].name, props[0].value) == ("Material", "Brick")

    def test_unsupported_bag(self) -> None:
        with pytest.raises(MalformedElementError):
            parse_properties("text")


class TestParseElement:
    def test_graphql_entity(self) -> None:
        element = parse_element({
            "id": "e1",
            "name": "Column 1",
            "classification": "Structural Columns",
            "family": "Concrete-Rectangular",
            "type": "300x300",
            "properties": [{"name": "Structural Material", "value": "Concrete"}],
            "quantities": {"volume": 0.9, "area": 3.6, "length": 3.0},
        })
        assert element.category == "Structural Columns"
        assert element.type_name == "300x300"
        assert element.volume_m3 == Decimal("0.9")

    def test_quantities_from_properties(self) -> None:
        element = parse_element({
            "objectid": 7,
            "properties": {"Dimensions": {"Volume": "1.5 m³", "Area": "6 m²"}},
            "category": "Walls",
        })
        assert element.id == "7"
        assert element.volume_m3 == Decimal("1.5")
        assert element.area_m2 == Decimal("6")
        assert element.length_m == Decimal("0")

    def test_missing_id(self) -> None:
        with pytest.raises(MalformedElementError, match="missing id"):
            parse_element({"name": "x"})

    def test_negative_quantity(self) -> None:
        with pytest.raises(MalformedElementError):
            parse_element({"id": "x", "quantities": {"volume": -1}})

    def test_defaults(self) -> None:
        element = parse_element({"id": "x"})
        assert (element.name, element.category) == ("Unknown", "Unknown")


class TestParsePage:
    def test_graphql_envelope(self) -> None:
        body = {"data": {"design": {"designEntities": {
            "results": [{"id": "1"}, {"id": "2"}, {"name": "no id"}],
            "pagination": {"limit": 3, "offset": 0, "totalResults": 7},
        }}}}
        page = parse_page(body, offset=0, limit=3, source="aec_graphql")
        assert [e.id for e in page.elements] == ["1", "2"]
        assert page.skipped == 1
        assert page.total == 7
        assert page.has_more is True
        assert not page.is_last()
        assert page.warnings

    def test_rest_envelope_with_has_more(self) -> None:
        page = parse_page(
            {"results": [{"id": "1"}], "hasMore": False}, offset=0, limit=10, source="rest"
        )
        assert page.has_more is False
        assert page.is_last()

    def test_bare_list(self) -> None:
        page = parse_page([{"id": "1"}, {"id": "2"}], offset=0, limit=2, source="rest")
        assert len(page.elements) == 2
        assert page.total is None

    def test_non_finite_quantity_is_ignored(self) -> None:
        body = [{"id": "a", "quantities": {"volume": float("nan")}}, {"id": "b"}]

        page = parse_page(body, offset=0, limit=10, source="rest")

        assert [e.id for e in page.elements] == ["a", "b"]
        assert page.elements[0].volume_m3 == Decimal("0")

    @pytest.mark.parametrize("body", ["maintenance", 42, None])
    def test_non_object_body_is_a_source_error(self, body) -> None:
        with pytest.raises(ElementSourceError):
            parse_page(body, offset=0, limit=10, source="aec_graphql")

    def test_object_tree_is_flattened(self) -> None:
        body = {"data": {"objects": [
            {"objectid": 1, "objects": [
                {"objectid": 2, "objects": [{"objectid": 3}, {"objectid": 4}]},
                {"objectid": 5},
            ]},
            {"objectid": 6},
        ]}}
        page = parse_page(body, offset=0, limit=100, source="md")
        assert [e.id for e in page.elements] == ["3", "4", "5", "6"]


def test_deep_tree_does_not_recurse() -> None:
    root: dict = {"objectid": 0}
    node = root
    for i in range(1, 5000):
        child = {"objectid": i}
        node["objects"] = [child]
        node = child
    leaves = list(iter_object_tree([root]))
    assert leaves == [node]
