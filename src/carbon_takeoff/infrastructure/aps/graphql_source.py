"""AEC Data Model GraphQL element source (first tier)."""
from __future__ import annotations

from typing import Any

from carbon_takeoff.domain.exceptions import DesignNotFoundError
from carbon_takeoff.domain.models import ElementFilter, ElementPage
from carbon_takeoff.infrastructure.aps.client import ApsClient
from carbon_takeoff.infrastructure.aps.parsing import parse_page

DESIGN_ENTITIES_QUERY = """
query GetDesignEntities($designId: ID!, $limit: Int!, $offset: Int!, $filter: DesignEntityFilterInput) {
  design(id: $designId) {
    designEntities(filter: $filter, limit: $limit, offset: $offset) {
      results {
        id
        name
        classification
        family
        type
        typeMark
        level
        properties {
          name
          value
          displayName
          category
          dataType
          units
        }
        quantities {
          area
          volume
          length
          count
        }
      }
      pagination {
        limit
        offset
        totalResults
      }
    }
  }
}
"""


def build_filter(element_filter: ElementFilter | None) -> dict[str, Any] | None:
    """GraphQL filter input for an element filter, or None for no filter."""
    if element_filter is None or element_filter.is_empty:
        return None
    result: dict[str, Any] = {}
    if element_filter.categories:
        result["classification"] = list(element_filter.categories)
    if element_filter.families:
        result["family"] = list(element_filter.families)
    return result


class AecGraphQLElementSource:
    """Rich structured query against the AEC Data Model GraphQL API."""

    name = "aec_graphql"
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
        variables = {
            "designId": design_id,
            "limit": limit,
            "offset": offset,
            "filter": build_filter(element_filter),
        }
        body = await self._client.post_graphql(
            DESIGN_ENTITIES_QUERY, variables, source=self.name, design_id=design_id
        )
        data = body.get("data") if isinstance(body, dict) else None
        if isinstance(data, dict) and "design" in data and data["design"] is None:
            raise DesignNotFoundError(design_id, {"source": self.name})
        return parse_page(body, offset=offset, limit=limit, source=self.name)
