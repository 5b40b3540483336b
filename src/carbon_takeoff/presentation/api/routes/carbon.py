"""Embodied Carbon API Routes."""
from decimal import Decimal
from uuid import UUID

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from carbon_takeoff.domain.exceptions import DomainError
from carbon_takeoff.infrastructure.di.container import Container
from carbon_takeoff.presentation.api.routes.deps import get_container, to_http_error

router = APIRouter()


class CarbonRequest(BaseModel):
    """Carbon calculation request schema."""

    design_id: str = Field(min_length=1)
    project_id: str = Field(min_length=1)
    version_id: str = "latest"
    building_area: Decimal | None = Field(default=None, gt=0)
    force: bool = False


@router.post("/carbon/calculate")
async def calculate_carbon(
    request: CarbonRequest,
    container: Container = Depends(get_container),
) -> dict:
    """Calculate embodied carbon from the design's takeoff.

    Returns:
        Embodied carbon result, element types included
    """
    try:
        result = await container.get_takeoff_service().calculate_carbon(
            request.design_id,
            request.project_id,
            request.version_id,
            building_area=request.building_area,
            force=request.force,
        )
    except DomainError as e:
        raise to_http_error(e) from e
    return result.to_dict()


@router.get("/carbon/results/{result_id}")
async def get_carbon_result(
    result_id: UUID,
    container: Container = Depends(get_container),
) -> dict:
    """One stored carbon result."""
    try:
        result = await container.get_takeoff_service().get_carbon_result(result_id)
    except DomainError as e:
        raise to_http_error(e) from e
    return result.to_dict()


@router.get("/carbon/{design_id}/history")
async def carbon_history(
    design_id: str,
    version_id: str | None = None,
    container: Container = Depends(get_container),
) -> list[dict]:
    """Every stored carbon result of a design, oldest first."""
    results = await container.get_takeoff_service().carbon_history(design_id, version_id)
    return [r.to_dict() for r in results]
