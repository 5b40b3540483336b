"""Design Viewability API Routes."""
from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from carbon_takeoff.domain.exceptions import DomainError
from carbon_takeoff.infrastructure.di.container import Container
from carbon_takeoff.presentation.api.routes.deps import get_container, to_http_error

router = APIRouter()


class ViewabilityRequest(BaseModel):
    """Viewability request schema."""

    project_id: str = Field(min_length=1)
    design_id: str = Field(min_length=1)


@router.post("/designs/viewability")
async def resolve_viewability(
    request: ViewabilityRequest,
    container: Container = Depends(get_container),
) -> dict:
    """Whether a design can be displayed without a new conversion."""
    try:
        model = await container.get_viewability_service().resolve_viewability(
            request.project_id, request.design_id
        )
    except DomainError as e:
        raise to_http_error(e) from e
    return model.to_dict()


@router.get("/projects/{project_id}/viewable-designs")
async def list_viewable_designs(
    project_id: str,
    container: Container = Depends(get_container),
) -> list[dict]:
    """Viewable designs of a project."""
    try:
        models = await container.get_viewability_service().list_viewable_designs(project_id)
    except DomainError as e:
        raise to_http_error(e) from e
    return [m.to_dict() for m in models]
