"""In-memory repository implementations.

Keep every stored result as history per (design, version); reads return the
most recently added one. Suitable for tests and single-process deployments.
"""
from __future__ import annotations

import asyncio
from typing import Generic, TypeVar
from uuid import UUID

from carbon_takeoff.domain.models import EmbodiedCarbonResult, QuantityTakeoffResult

T = TypeVar("T", QuantityTakeoffResult, EmbodiedCarbonResult)


class _HistoryStore(Generic[T]):
    """Append-only store keyed by (design_id, version_id)."""

    def __init__(self) -> None:
        self._items: list[T] = []
        self._lock = asyncio.Lock()

    async def add(self, item: T) -> T:
        async with self._lock:
            self._items.append(item)
        return item

    async def history(self, design_id: str, version_id: str | None = None) -> list[T]:
        """All items for a design (optionally one version), oldest first."""
        return [
            item
            for item in self._items
            if item.design_id == design_id
            and (version_id is None or item.version_id == version_id)
        ]

    async def get_latest(self, design_id: str, version_id: str | None = None) -> T | None:
        items = await self.history(design_id, version_id)
        return items[-1] if items else None


class InMemoryTakeoffRepository(_HistoryStore[QuantityTakeoffResult]):
    """Takeoff results held in process memory."""


class InMemoryCarbonResultRepository(_HistoryStore[EmbodiedCarbonResult]):
    """Embodied carbon results held in process memory."""

    async def get_by_id(self, result_id: UUID) -> EmbodiedCarbonResult | None:
        for item in reversed(self._items):
            if item.id == result_id:
                return item
        return None
