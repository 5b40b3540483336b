"""Normalization of element listing responses.

The element services answer in several shapes: GraphQL ``designEntities``
envelopes, REST ``data`` / ``results`` / ``elements`` envelopes, bare lists
and Model Derivative ``objects`` trees. Everything is turned into immutable
``Element`` instances here so that nothing downstream sees raw JSON.
"""
from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation
from typing import Any, Iterator

from carbon_takeoff.domain.exceptions import ElementSourceError, MalformedElementError
from carbon_takeoff.domain.models import Element, ElementPage, ElementProperty
from carbon_takeoff.domain.models.element import ZERO

# =============================================================================
# Units
# =============================================================================

_NUMBER_RE = re.compile(r"^\s*([-+]?\d+(?:[.,]\d+)?(?:[eE][-+]?\d+)?)\s*(.*?)\s*$")

# Multipliers to SI (m, m², m³)
_LENGTH_UNITS = {"": 1, "m": 1, "meter": 1, "meters": 1, "mm": Decimal("0.001"),
                 "cm": Decimal("0.01"), "ft": Decimal("0.3048"), "in": Decimal("0.0254")}
_AREA_UNITS = {"": 1, "m2": 1, "m²": 1, "m^2": 1, "sqm": 1, "mm2": Decimal("0.000001"),
               "mm²": Decimal("0.000001"), "cm2": Decimal("0.0001"), "cm²": Decimal("0.0001"),
               "ft2": Decimal("0.09290304"), "ft²": Decimal("0.09290304"),
               "sqft": Decimal("0.09290304")}
_VOLUME_UNITS = {"": 1, "m3": 1, "m³": 1, "m^3": 1, "mm3": Decimal("1e-9"),
                 "mm³": Decimal("1e-9"), "cm3": Decimal("0.000001"),
                 "cm³": Decimal("0.000001"), "ft3": Decimal("0.028316846592"),
                 "ft³": Decimal("0.028316846592"), "cf": Decimal("0.028316846592")}

_UNIT_TABLES = {"volume": _VOLUME_UNITS, "area": _AREA_UNITS, "length": _LENGTH_UNITS}

_ID_KEYS = ("id", "externalId", "external_id", "objectid", "objectId", "elementId")
_CATEGORY_KEYS = ("category", "classification", "Category")
_ENVELOPE_KEYS = ("results", "elements", "data", "collection", "items")


def parse_decimal(value: Any) -> Decimal | None:
    """Parse a number or a numeric string such as ``"12.5"``.

    Returns None for values that carry no finite number.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value if value.is_finite() else None
    if isinstance(value, (int, float)):
        number = Decimal(str(value))
        return number if number.is_finite() else None
    if isinstance(value, str):
        match = _NUMBER_RE.match(value)
        if not match:
            return None
        try:
            return Decimal(match.group(1).replace(",", "."))
        except InvalidOperation:
            return None
    return None


def parse_quantity(value: Any, kind: str, units: str | None = None) -> Decimal | None:
    """Parse a quantity and convert it to SI.

    Args:
        value: Raw value, optionally with a unit suffix (``"3.2 m³"``)
        kind: "volume", "area" or "length"
        units: Declared units, used when the value carries none

    Returns:
        Quantity in m³, m² or m, or None when not parseable or the unit
        is unknown
    """
    number = parse_decimal(value)
    if number is None:
        return None
    suffix = ""
    if isinstance(value, str):
        match = _NUMBER_RE.match(value)
        if match:
            suffix = match.group(2)
    unit = (suffix or units or "").strip().lower().replace(" ", "")
    factor = _UNIT_TABLES[kind].get(unit)
    if factor is None:
        return None
    return number * Decimal(factor)


# =============================================================================
# Properties
# =============================================================================


def parse_properties(raw: Any) -> tuple[ElementProperty, ...]:
    """Normalize a property bag.

    Accepts a list of property records, a dict of property groups
    (``{"Dimensions": {"Volume": 1.2}}``) or a flat dict.
    """
    if not raw:
        return ()
    if isinstance(raw, list):
        props = []
        for item in raw:
            if not isinstance(item, dict):
                continue
            name = item.get("name") or item.get("displayName")
            if not name:
                continue
            props.append(
                ElementProperty(
                    name=str(name),
                    value=item.get("value"),
                    display_name=item.get("displayName"),
                    category=item.get("category"),
                    data_type=item.get("dataType") or "string",
                    units=item.get("units"),
                )
            )
        return tuple(props)
    if isinstance(raw, dict):
        props = []
        for key, value in raw.items():
            if isinstance(value, dict):
                for name, inner in value.items():
                    props.append(_flat_property(str(name), inner, category=str(key)))
            else:
                props.append(_flat_property(str(key), value))
        return tuple(props)
    raise MalformedElementError(f"unsupported property bag of type {type(raw).__name__}")


def _flat_property(name: str, value: Any, category: str | None = None) -> ElementProperty:
    if isinstance(value, bool):
        data_type = "boolean"
    elif isinstance(value, (int, float)):
        data_type = "number"
    else:
        data_type = "string"
    return ElementProperty(name=name, value=value, category=category, data_type=data_type)


# =============================================================================
# Elements
# =============================================================================


def _first(raw: dict[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        value = raw.get(key)
        if value not in (None, ""):
            return value
    return None


def _quantity(
    raw: dict[str, Any],
    properties: tuple[ElementProperty, ...],
    kind: str,
) -> Decimal:
    for block_key in ("quantities", "geometry"):
        block = raw.get(block_key)
        if isinstance(block, dict) and block.get(kind) is not None:
            value = parse_quantity(block[kind], kind)
            if value is not None:
                return value
    wanted = kind.lower()
    for prop in properties:
        if prop.name.strip().lower() == wanted and not prop.is_placeholder:
            value = parse_quantity(prop.value, kind, prop.units)
            if value is not None:
                return value
    return ZERO


def parse_element(raw: Any) -> Element:
    """Normalize one raw element record.

    Raises:
        MalformedElementError: If the record is not an object, has no id,
            or carries a negative quantity
    """
    if not isinstance(raw, dict):
        raise MalformedElementError(f"expected object, got {type(raw).__name__}")

    element_id = _first(raw, _ID_KEYS)
    if element_id is None:
        raise MalformedElementError("missing id")
    element_id = str(element_id)

    properties = parse_properties(raw.get("properties"))
    category = _first(raw, _CATEGORY_KEYS)
    if category is None:
        for prop in properties:
            if prop.name.lower() == "category" and not prop.is_placeholder:
                category = prop.value
                break

    volume = _quantity(raw, properties, "volume")
    area = _quantity(raw, properties, "area")
    length = _quantity(raw, properties, "length")
    if volume < 0 or area < 0 or length < 0:
        raise MalformedElementError("negative quantity", element_id)

    return Element(
        id=element_id,
        name=str(raw.get("name") or "Unknown"),
        category=str(category or "Unknown").strip() or "Unknown",
        family=_text(raw.get("family") or raw.get("familyName")),
        type_name=_text(raw.get("type") or raw.get("typeName")),
        type_mark=_text(raw.get("typeMark") or raw.get("type_mark")),
        level=_text(raw.get("level")),
        properties=properties,
        volume_m3=volume,
        area_m2=area,
        length_m=length,
    )


def _text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def iter_object_tree(roots: list[Any]) -> Iterator[dict[str, Any]]:
    """Yield the leaf nodes of an ``objects`` tree in document order.

    Uses an explicit stack so deep trees cannot exhaust the recursion limit.
    """
    stack: list[Any] = list(reversed(roots))
    while stack:
        node = stack.pop()
        if not isinstance(node, dict):
            yield node
            continue
        children = node.get("objects")
        if isinstance(children, list) and children:
            stack.extend(reversed(children))
        else:
            yield node


# =============================================================================
# Pages
# =============================================================================


def _unwrap(body: Any, source: str) -> tuple[list[Any], dict[str, Any]]:
    """Find the record list and the pagination block of a response.

    Raises:
        ElementSourceError: If the body is neither an object nor a list
    """
    if isinstance(body, list):
        return body, {}
    if not isinstance(body, dict):
        raise ElementSourceError(
            f"Unexpected response of type {type(body).__name__}", source=source
        )

    # GraphQL: {"data": {"design": {"designEntities": {...}}}}
    data = body.get("data")
    if isinstance(data, dict) and isinstance(data.get("design"), dict):
        entities = data["design"].get("designEntities") or {}
        return list(entities.get("results") or []), dict(entities.get("pagination") or {})

    meta = dict(body.get("pagination") or body.get("meta") or {})
    for key in ("totalResults", "total", "count", "hasMore", "has_more"):
        if key in body:
            meta.setdefault(key, body[key])

    # Model Derivative: {"data": {"collection": [...]}} or {"data": {"objects": [...]}}
    if isinstance(data, dict):
        if isinstance(data.get("collection"), list):
            return list(iter_object_tree(data["collection"])), meta
        if isinstance(data.get("objects"), list):
            return list(iter_object_tree(data["objects"])), meta

    if isinstance(body.get("objects"), list):
        return list(iter_object_tree(body["objects"])), meta

    for key in _ENVELOPE_KEYS:
        value = body.get(key)
        if isinstance(value, list):
            return value, meta
    return [], meta


def _total(meta: dict[str, Any]) -> int | None:
    for key in ("totalResults", "total", "count"):
        value = meta.get(key)
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    return None


def parse_page(body: Any, *, offset: int, limit: int, source: str) -> ElementPage:
    """Turn one decoded response into an ``ElementPage``.

    Malformed records are skipped and counted; the page still succeeds.
    """
    records, meta = _unwrap(body, source)
    elements: list[Element] = []
    skipped = 0
    for raw in records:
        try:
            elements.append(parse_element(raw))
        except MalformedElementError:
            skipped += 1

    total = _total(meta)
    has_more: bool | None = None
    explicit = meta.get("hasMore", meta.get("has_more"))
    if isinstance(explicit, bool):
        has_more = explicit
    elif total is not None:
        has_more = offset + len(records) < total

    warnings: tuple[str, ...] = ()
    if skipped:
        warnings = (f"{source}: skipped {skipped} malformed element(s) at offset {offset}",)

    return ElementPage(
        elements=tuple(elements),
        offset=offset,
        limit=limit,
        total=total,
        has_more=has_more,
        skipped=skipped,
        warnings=warnings,
    )
