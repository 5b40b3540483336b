"""Autodesk Platform Services HTTP client.

Thin wrapper over ``httpx.AsyncClient`` that adds the bearer token, applies a
per-call timeout and maps HTTP failures onto domain errors.
"""
from __future__ import annotations

from typing import Any

import httpx

from carbon_takeoff.domain.exceptions import (
    BatchTooLargeError,
    DesignNotFoundError,
    ElementSourceError,
    TransientFetchError,
)
from carbon_takeoff.shared.config import Settings
from carbon_takeoff.shared.logging import get_logger

logger = get_logger(__name__)


class ApsClient:
    """HTTP access to the AEC Data Model and Model Derivative APIs.

    The underlying ``httpx.AsyncClient`` is owned by the caller, so one
    connection pool can be shared by every source of a run.
    """

    def __init__(self, http: httpx.AsyncClient, settings: Settings) -> None:
        self._http = http
        self._settings = settings

    @property
    def settings(self) -> Settings:
        return self._settings

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._settings.aps_access_token:
            headers["Authorization"] = f"Bearer {self._settings.aps_access_token}"
        return headers

    def url(self, path: str) -> str:
        """Absolute URL for an API path."""
        return f"{self._settings.aps_base_url}{path}"

    # =========================================================================
    # Requests
    # =========================================================================

    async def post_graphql(
        self,
        query: str,
        variables: dict[str, Any],
        *,
        source: str,
        design_id: str | None = None,
    ) -> dict[str, Any]:
        """Run a GraphQL query and return the decoded body.

        An HTTP 404 means the endpoint is unavailable and is a source error.
        Only a "not found" GraphQL error maps to a missing design.
        """
        response = await self._send(
            "POST",
            self._settings.graphql_url,
            source=source,
            design_id=None,
            json={"query": query, "variables": variables},
        )
        body = self._decode(response, source=source)
        errors = body.get("errors") if isinstance(body, dict) else None
        if errors:
            message = "; ".join(str(e.get("message", e)) for e in errors if e) or "GraphQL error"
            if design_id and "not found" in message.lower():
                raise DesignNotFoundError(design_id, {"source": source})
            raise ElementSourceError(
                f"GraphQL query rejected: {message}",
                source=source,
                status_code=response.status_code,
            )
        return body

    async def get_json(
        self,
        path: str,
        *,
        source: str,
        params: dict[str, Any] | None = None,
        design_id: str | None = None,
    ) -> Any:
        """GET a JSON document."""
        response = await self._send(
            "GET", self.url(path), source=source, design_id=design_id, params=params
        )
        return self._decode(response, source=source)

    async def head(self, path: str, *, source: str) -> int:
        """HEAD request returning the raw status code.

        Never raises on 4xx; the caller interprets the status.
        """
        try:
            response = await self._http.request(
                "HEAD",
                self.url(path),
                headers=self._headers(),
                timeout=self._settings.aps_request_timeout_seconds,
            )
        except httpx.TimeoutException as e:
            raise TransientFetchError(f"Timeout: {e}", source=source) from e
        except httpx.TransportError as e:
            raise TransientFetchError(f"Transport error: {e}", source=source) from e
        return response.status_code

    # =========================================================================
    # Internals
    # =========================================================================

    async def _send(
        self,
        method: str,
        url: str,
        *,
        source: str,
        design_id: str | None,
        **kwargs: Any,
    ) -> httpx.Response:
        try:
            response = await self._http.request(
                method,
                url,
                headers=self._headers(),
                timeout=self._settings.aps_request_timeout_seconds,
                **kwargs,
            )
        except httpx.TimeoutException as e:
            raise TransientFetchError(f"Timeout: {e}", source=source) from e
        except httpx.TransportError as e:
            raise TransientFetchError(f"Transport error: {e}", source=source) from e

        status = response.status_code
        if status < 400:
            return response

        logger.debug("aps_request_failed", method=method, url=url, status=status, source=source)

        if status == 404 and design_id:
            raise DesignNotFoundError(design_id, {"source": source})
        if status == 413:
            raise BatchTooLargeError("Payload too large", source=source, status_code=status)
        if status == 429 or status >= 500:
            raise TransientFetchError(
                f"Upstream returned {status}", source=source, status_code=status
            )
        raise ElementSourceError(
            f"Upstream rejected request with {status}",
            source=source,
            status_code=status,
            details={"body": response.text[:500]},
        )

    @staticmethod
    def _decode(response: httpx.Response, *, source: str) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise ElementSourceError(
                "Response is not valid JSON", source=source, status_code=response.status_code
            ) from e
