"""Viewability Service.

Decides whether a design can already be displayed. Only reads: the design
catalog and a HEAD probe of the derivative manifest. It has no way to start
a translation job.
"""
from __future__ import annotations

import asyncio
from urllib.parse import quote

from carbon_takeoff.domain.exceptions import DesignNotFoundError, DomainError
from carbon_takeoff.domain.models import (
    DesignInfo,
    DesignStatus,
    ProbeOutcome,
    ViewableModel,
    ViewableStatus,
)
from carbon_takeoff.domain.repositories import IDesignCatalog, IManifestProbe
from carbon_takeoff.domain.value_objects import DesignUrn
from carbon_takeoff.shared.logging import get_logger

logger = get_logger(__name__)

# Formats the native viewer opens without a derivative
NATIVE_VIEWABLE_EXTENSIONS = frozenset({"dwg", "ifc", "step", "stp", "iges", "igs"})


class ViewabilityService:
    """Resolve viewability of designs."""

    def __init__(
        self,
        catalog: IDesignCatalog,
        probe: IManifestProbe,
        native_viewer_path: str = "/viewer/native",
    ) -> None:
        self._catalog = catalog
        self._probe = probe
        self._native_viewer_path = native_viewer_path

    async def resolve_viewability(self, project_id: str, design_id: str) -> ViewableModel:
        """Resolve one design.

        Raises:
            DesignNotFoundError: If the catalog does not know the design
        """
        try:
            design = await self._catalog.get_design(project_id, design_id)
        except DesignNotFoundError:
            raise
        except DomainError as e:
            logger.warning(
                "design_catalog_unavailable",
                project_id=project_id,
                design_id=design_id,
                error=str(e),
            )
            return ViewableModel(
                design_id=design_id,
                status=ViewableStatus.FAILED,
                message=f"Design catalog unavailable: {e.message}",
            )
        return await self.resolve_design(design)

    async def resolve_design(self, design: DesignInfo) -> ViewableModel:
        """Resolve a design whose metadata is already known."""
        log = logger.bind(design_id=design.id, status=design.status.value)

        if design.status == DesignStatus.PROCESSING:
            return ViewableModel(
                design_id=design.id,
                status=ViewableStatus.NOT_VIEWABLE,
                message="Design is still processing; try again once processing completes",
            )
        if design.status == DesignStatus.FAILED:
            return ViewableModel(
                design_id=design.id,
                status=ViewableStatus.FAILED,
                message="Design processing failed upstream",
            )

        if design.status == DesignStatus.READY:
            urn = DesignUrn.for_viewer(design.id)
            outcome = await self._probe.probe(urn.value)
            log.debug("manifest_probed", urn=urn.value, outcome=outcome.value)
            if outcome == ProbeOutcome.EXISTS:
                return ViewableModel(
                    design_id=design.id,
                    status=ViewableStatus.READY,
                    message="Existing viewable found",
                    viewer_urn=urn.value,
                )

        if design.file_extension in NATIVE_VIEWABLE_EXTENSIONS:
            return ViewableModel(
                design_id=design.id,
                status=ViewableStatus.READY,
                message=f"Viewable in native viewer ({design.file_extension.upper()})",
                alternative_url=f"{self._native_viewer_path}?design={quote(design.id, safe='')}",
            )

        log.info("design_not_viewable", source_file=design.source_file_name)
        return ViewableModel(
            design_id=design.id,
            status=ViewableStatus.NOT_VIEWABLE,
            message="No existing viewable found and the source format has no native viewer",
        )

    async def list_viewable_designs(self, project_id: str) -> list[ViewableModel]:
        """Resolve every design of a project and keep the viewable ones."""
        designs = await self._catalog.list_designs(project_id)
        models = await asyncio.gather(*(self.resolve_design(d) for d in designs))
        return [m for m in models if m.is_viewable]
