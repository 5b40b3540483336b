"""Repository and Collaborator Interfaces (Protocols).

Defines the contracts for data access without implementation details.
"""
from __future__ import annotations

from typing import Protocol, runtime_checkable
from uuid import UUID

from carbon_takeoff.domain.models import (
    DesignInfo,
    ElementFilter,
    ElementPage,
    EmbodiedCarbonResult,
    ProbeOutcome,
    QuantityTakeoffResult,
)


@runtime_checkable
class IElementSource(Protocol):
    """One tier of the element retrieval ladder."""

    name: str
    is_synthetic: bool

    async def attempt(
        self, design_id: str, element_filter: ElementFilter | None,
        limit: int, offset: int,
    ) -> ElementPage: ...


@runtime_checkable
class IDesignCatalog(Protocol):
    """Read-only design metadata lookup."""

    async def get_design(self, project_id: str, design_id: str) -> DesignInfo: ...
    async def list_designs(self, project_id: str) -> list[DesignInfo]: ...


@runtime_checkable
class IManifestProbe(Protocol):
    """Non-mutating existence check against the model-derivative service."""

    async def probe(self, viewer_urn: str) -> ProbeOutcome: ...


@runtime_checkable
class ITakeoffRepository(Protocol):
    """Stores takeoff results keyed by (design, version), keeping history."""

    async def add(self, takeoff: QuantityTakeoffResult) -> QuantityTakeoffResult: ...
    async def get_latest(
        self, design_id: str, version_id: str | None = None,
    ) -> QuantityTakeoffResult | None: ...
    async def history(
        self, design_id: str, version_id: str | None = None,
    ) -> list[QuantityTakeoffResult]: ...


@runtime_checkable
class ICarbonResultRepository(Protocol):
    """Stores embodied carbon results; repeat calculations supersede."""

    async def add(self, result: EmbodiedCarbonResult) -> EmbodiedCarbonResult: ...
    async def get_by_id(self, result_id: UUID) -> EmbodiedCarbonResult | None: ...
    async def get_latest(
        self, design_id: str, version_id: str | None = None,
    ) -> EmbodiedCarbonResult | None: ...
    async def history(
        self, design_id: str, version_id: str | None = None,
    ) -> list[EmbodiedCarbonResult]: ...
