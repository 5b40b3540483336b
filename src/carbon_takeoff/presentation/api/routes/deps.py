"""Shared route dependencies."""
from fastapi import HTTPException, Request

from carbon_takeoff.domain.exceptions import (
    CarbonResultNotFoundError,
    DesignNotFoundError,
    DomainError,
    ElementSourcesExhaustedError,
    TakeoffNotFoundError,
    ValidationError,
)
from carbon_takeoff.infrastructure.di.container import Container


def get_container(request: Request) -> Container:
    return request.app.state.container


def to_http_error(error: DomainError) -> HTTPException:
    """Map a domain error onto an HTTP error response."""
    if isinstance(
        error, (DesignNotFoundError, TakeoffNotFoundError, CarbonResultNotFoundError)
    ):
        return HTTPException(status_code=404, detail=error.message)
    if isinstance(error, ValidationError):
        return HTTPException(status_code=400, detail=error.message)
    if isinstance(error, ElementSourcesExhaustedError):
        return HTTPException(
            status_code=502, detail={"message": error.message, "failures": error.failures}
        )
    return HTTPException(status_code=502, detail=error.message)
