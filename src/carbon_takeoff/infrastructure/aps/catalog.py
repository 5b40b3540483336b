"""Design catalog and manifest probe backed by APS."""
from __future__ import annotations

from typing import Any
from urllib.parse import quote

from carbon_takeoff.domain.exceptions import DesignNotFoundError, TransientFetchError
from carbon_takeoff.domain.models import DesignInfo, DesignStatus, ProbeOutcome
from carbon_takeoff.domain.value_objects import DesignUrn
from carbon_takeoff.infrastructure.aps.client import ApsClient
from carbon_takeoff.shared.logging import get_logger

logger = get_logger(__name__)

PROJECT_DESIGNS_QUERY = """
query GetDesigns($projectId: ID!) {
  designs(projectId: $projectId) {
    results {
      id
      name
      status
      sourceFileName
      units
    }
  }
}
"""


def parse_design(raw: dict[str, Any], project_id: str | None = None) -> DesignInfo:
    """Build DesignInfo from a GraphQL record or a REST ``{id, attributes}`` record."""
    attributes = raw.get("attributes") if isinstance(raw.get("attributes"), dict) else raw
    return DesignInfo(
        id=str(raw.get("id") or attributes.get("id") or ""),
        name=str(attributes.get("name") or "Unknown"),
        status=DesignStatus.parse(attributes.get("status")),
        source_file_name=str(attributes.get("sourceFileName") or ""),
        units=attributes.get("units"),
        project_id=project_id,
    )


class ApsDesignCatalog:
    """Read-only design lookup through the AEC Data Model APIs."""

    source = "design_catalog"

    def __init__(self, client: ApsClient) -> None:
        self._client = client

    async def get_design(self, project_id: str, design_id: str) -> DesignInfo:
        """Fetch one design's metadata.

        Raises:
            DesignNotFoundError: If the design does not exist
            TransientFetchError: If the catalog is unavailable
        """
        path = (
            f"{self._client.settings.aps_rest_path}/projects/{quote(project_id, safe='')}"
            f"/modelsets/{quote(design_id, safe='')}"
        )
        body = await self._client.get_json(path, source=self.source, design_id=design_id)
        record = body.get("data", body) if isinstance(body, dict) else None
        if not isinstance(record, dict) or not record:
            raise DesignNotFoundError(design_id, {"project_id": project_id})
        design = parse_design(record, project_id)
        if not design.id:
            design = DesignInfo(
                id=design_id,
                name=design.name,
                status=design.status,
                source_file_name=design.source_file_name,
                units=design.units,
                project_id=project_id,
            )
        return design

    async def list_designs(self, project_id: str) -> list[DesignInfo]:
        """List every design of a project."""
        body = await self._client.post_graphql(
            PROJECT_DESIGNS_QUERY, {"projectId": project_id}, source=self.source
        )
        data = body.get("data") or {}
        results = (data.get("designs") or {}).get("results") or []
        return [parse_design(r, project_id) for r in results if isinstance(r, dict)]


class ApsManifestProbe:
    """HEAD probe of the Model Derivative manifest.

    Read-only: never submits a translation job.
    """

    source = "manifest_probe"

    def __init__(self, client: ApsClient) -> None:
        self._client = client

    async def probe(self, viewer_urn: str) -> ProbeOutcome:
        urn = DesignUrn.for_viewer(viewer_urn)
        path = f"{self._client.settings.aps_model_derivative_path}/{urn.manifest_key}/manifest"
        try:
            status = await self._client.head(path, source=self.source)
        except TransientFetchError as e:
            logger.warning("manifest_probe_failed", urn=urn.value, error=str(e))
            return ProbeOutcome.INCONCLUSIVE

        if status == 200:
            return ProbeOutcome.EXISTS
        if status == 404:
            return ProbeOutcome.ABSENT
        logger.info("manifest_probe_inconclusive", urn=urn.value, status=status)
        return ProbeOutcome.INCONCLUSIVE
