"""Takeoff API Routes."""
from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel, Field

from carbon_takeoff.domain.exceptions import DomainError
from carbon_takeoff.domain.models import ElementFilter
from carbon_takeoff.infrastructure.di.container import Container
from carbon_takeoff.presentation.api.routes.deps import get_container, to_http_error

router = APIRouter()


class TakeoffRequest(BaseModel):
    """Takeoff request schema."""

    design_id: str = Field(min_length=1)
    project_id: str = Field(min_length=1)
    version_id: str = "latest"
    categories: list[str] = Field(default_factory=list)
    families: list[str] = Field(default_factory=list)
    force: bool = False


@router.post("/takeoffs")
async def create_takeoff(
    request: TakeoffRequest,
    container: Container = Depends(get_container),
) -> dict:
    """Run (or reuse) the quantity takeoff of a design.

    Args:
        request: Design, project, version and optional filter

    Returns:
        Takeoff result
    """
    element_filter = None
    if request.categories or request.families:
        element_filter = ElementFilter(
            categories=tuple(request.categories), families=tuple(request.families)
        )
    try:
        takeoff = await container.get_takeoff_service().run_takeoff(
            request.design_id,
            request.project_id,
            request.version_id,
            element_filter=element_filter,
            force=request.force,
        )
    except DomainError as e:
        raise to_http_error(e) from e
    return takeoff.to_dict()


@router.get("/takeoffs/{design_id}")
async def get_takeoff(
    design_id: str,
    version_id: str | None = None,
    container: Container = Depends(get_container),
) -> dict:
    """Latest stored takeoff of a design."""
    try:
        takeoff = await container.get_takeoff_service().get_takeoff(design_id, version_id)
    except DomainError as e:
        raise to_http_error(e) from e
    return takeoff.to_dict()


@router.get("/takeoffs/{design_id}/materials.csv")
async def export_materials(
    design_id: str,
    version_id: str | None = None,
    container: Container = Depends(get_container),
) -> Response:
    """Material quantities as CSV."""
    try:
        takeoff = await container.get_takeoff_service().get_takeoff(design_id, version_id)
    except DomainError as e:
        raise to_http_error(e) from e
    content = container.get_csv_export_service().materials_csv(takeoff.materials)
    return _csv_response(content, f"{design_id}-materials.csv")


@router.get("/takeoffs/{design_id}/element-types.csv")
async def export_element_types(
    design_id: str,
    version_id: str | None = None,
    container: Container = Depends(get_container),
) -> Response:
    """Element types with classification codes as CSV."""
    try:
        takeoff = await container.get_takeoff_service().get_takeoff(design_id, version_id)
    except DomainError as e:
        raise to_http_error(e) from e
    content = container.get_csv_export_service().element_types_csv(takeoff.element_types)
    return _csv_response(content, f"{design_id}-element-types.csv")


@router.get("/takeoffs/{design_id}/materials-summary.csv")
async def export_materials_summary(
    design_id: str,
    version_id: str | None = None,
    container: Container = Depends(get_container),
) -> Response:
    """Distinct materials across element types, with density and mass, as CSV."""
    try:
        takeoff = await container.get_takeoff_service().get_takeoff(design_id, version_id)
    except DomainError as e:
        raise to_http_error(e) from e
    content = container.get_csv_export_service().materials_summary_csv(
        takeoff.materials_summary
    )
    return _csv_response(content, f"{design_id}-materials-summary.csv")


def _csv_response(content: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
