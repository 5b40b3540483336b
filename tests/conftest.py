"""Pytest configuration and fixtures."""
from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

import pytest

from carbon_takeoff.domain.exceptions import BatchTooLargeError, DesignNotFoundError
from carbon_takeoff.domain.models import (
    Element,
    ElementFilter,
    ElementPage,
    ElementProperty,
)
from carbon_takeoff.shared.config import Settings

FIXED_NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def make_element(
    element_id: str,
    category: str = "Walls",
    *,
    volume: str | int | float = 0,
    area: str | int | float = 0,
    length: str | int | float = 0,
    family: str | None = None,
    type_mark: str | None = None,
    **properties: Any,
) -> Element:
    """Build an Element; keyword properties use underscores for spaces."""
    props = tuple(
        ElementProperty(name=name.replace("_", " "), value=value)
        for name, value in properties.items()
    )
    return Element(
        id=element_id,
        name=f"Element {element_id}",
        category=category,
        family=family,
        type_mark=type_mark,
        properties=props,
        volume_m3=Decimal(str(volume)),
        area_m2=Decimal(str(area)),
        length_m=Decimal(str(length)),
    )


class FakeElementSource:
    """Scripted element source.

    Serves ``elements`` by offset/limit. ``failures`` maps an offset to a
    list of exceptions raised (one per call) before the page is served.
    """

    def __init__(
        self,
        name: str,
        elements: list[Element] | None = None,
        *,
        failures: dict[int, list[Exception]] | None = None,
        reject_above: int | None = None,
        report_total: bool = True,
        not_found: bool = False,
        is_synthetic: bool = False,
    ) -> None:
        self.name = name
        self.is_synthetic = is_synthetic
        self._elements = elements or []
        self._failures = {k: list(v) for k, v in (failures or {}).items()}
        self._reject_above = reject_above
        self._report_total = report_total
        self._not_found = not_found
        self.calls: list[tuple[int, int]] = []

    async def attempt(
        self,
        design_id: str,
        element_filter: ElementFilter | None,
        limit: int,
        offset: int,
    ) -> ElementPage:
        self.calls.append((offset, limit))
        if self._not_found:
            raise DesignNotFoundError(design_id)
        queue = self._failures.get(offset)
        if queue:
            raise queue.pop(0)
        if self._reject_above is not None and limit > self._reject_above:
            raise BatchTooLargeError("too large", source=self.name, status_code=413)
        elements = self._elements
        if element_filter is not None and element_filter.categories:
            elements = [e for e in elements if e.category in element_filter.categories]
        page = elements[offset:offset + limit]
        return ElementPage(
            elements=tuple(page),
            offset=offset,
            limit=limit,
            total=len(elements) if self._report_total else None,
        )


@pytest.fixture
def test_settings() -> Settings:
    """Small batches so paging paths are exercised with few elements."""
    return Settings(
        _env_file=None,
        aps_base_url="https://aps.test",
        aps_access_token="test-token",
        element_batch_size=4,
        element_max_batches=10,
        element_split_batch_size=2,
        element_fetch_concurrency=1,
        allow_synthetic_elements=False,
        log_level="DEBUG",
    )


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


@pytest.fixture
def three_elements() -> list[Element]:
    """Foundation without material plus two reinforced concrete columns."""
    return [
        make_element("1", "Structural Foundations", volume=10),
        make_element("2", "Structural Columns", volume=5, Structural_Material="Reinforced Concrete"),
        make_element("3", "Structural Columns", volume=3, Structural_Material="Reinforced Concrete"),
    ]
