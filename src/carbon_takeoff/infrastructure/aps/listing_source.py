"""AEC Data Model REST element listing (second tier)."""
from __future__ import annotations

from typing import Any
from urllib.parse import quote

from carbon_takeoff.domain.models import ElementFilter, ElementPage
from carbon_takeoff.infrastructure.aps.client import ApsClient
from carbon_takeoff.infrastructure.aps.parsing import parse_page


class AecListingElementSource:
    """Simpler paged REST listing of a design's elements."""

    name = "aec_listing"
    is_synthetic = False

    def __init__(self, client: ApsClient) -> None:
        self._client = client

    async def attempt(
        self,
        design_id: str,
        element_filter: ElementFilter | None,
        limit: int,
        offset: int,
    ) -> ElementPage:
        params: dict[str, Any] = {"offset": offset, "limit": limit}
        if element_filter is not None:
            if element_filter.categories:
                params["category"] = ",".join(element_filter.categories)
            if element_filter.families:
                params["family"] = ",".join(element_filter.families)

        path = f"{self._client.settings.aps_rest_path}/designs/{quote(design_id, safe='')}/elements"
        body = await self._client.get_json(
            path, source=self.name, params=params, design_id=design_id
        )
        return parse_page(body, offset=offset, limit=limit, source=self.name)
