"""Domain layer exceptions.

All domain-specific exceptions inherit from DomainError.
"""
from __future__ import annotations

from typing import Any


class DomainError(Exception):
    """Base exception for domain errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - {self.details}"
        return self.message


class ValidationError(DomainError):
    def __init__(self, field: str, message: str, value: Any = None) -> None:
        full_message = f"Validation error for '{field}': {message}"
        details = {"field": field, "value": value}
        super().__init__(full_message, details)
        self.field = field
        self.value = value


class DesignNotFoundError(DomainError):
    """The design does not exist upstream. Fatal for the run."""

    def __init__(self, design_id: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(f"Design not found: {design_id}", details)
        self.design_id = design_id


class MalformedElementError(DomainError):
    """A raw element record could not be normalized."""

    def __init__(self, reason: str, element_id: str | None = None) -> None:
        super().__init__(f"Malformed element: {reason}", {"element_id": element_id})
        self.reason = reason
        self.element_id = element_id


# =============================================================================
# Element retrieval
# =============================================================================


class ElementFetchError(DomainError):
    """Base for failures of a single element-source request."""

    def __init__(
        self,
        message: str,
        *,
        source: str | None = None,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        merged = {"source": source, "status_code": status_code}
        merged.update(details or {})
        super().__init__(message, merged)
        self.source = source
        self.status_code = status_code


class TransientFetchError(ElementFetchError):
    """Network error, timeout or 5xx. Eligible for one retry."""


class BatchTooLargeError(ElementFetchError):
    """Upstream rejected the page size (HTTP 413)."""


class ElementSourceError(ElementFetchError):
    """Upstream rejected the request for a non-transient reason."""


class ElementSourcesExhaustedError(DomainError):
    """Every tier of the retrieval ladder failed."""

    def __init__(self, design_id: str, failures: dict[str, str]) -> None:
        super().__init__(
            f"All element sources failed for design {design_id}",
            {"failures": failures},
        )
        self.design_id = design_id
        self.failures = failures


# =============================================================================
# Repositories
# =============================================================================


class RepositoryError(DomainError):
    pass


class TakeoffNotFoundError(RepositoryError):
    def __init__(self, design_id: str, version_id: str | None = None) -> None:
        super().__init__(
            f"No takeoff stored for design {design_id}",
            {"design_id": design_id, "version_id": version_id},
        )
        self.design_id = design_id
        self.version_id = version_id


class CarbonResultNotFoundError(RepositoryError):
    def __init__(self, result_id: str) -> None:
        super().__init__(f"No carbon result with id {result_id}", {"result_id": result_id})
        self.result_id = result_id
