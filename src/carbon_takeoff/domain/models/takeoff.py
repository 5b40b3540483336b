"""Retrieval and takeoff result types."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from carbon_takeoff.domain.models.element import Element
from carbon_takeoff.domain.models.quantities import (
    ElementType,
    ElementTypeMaterial,
    MaterialQuantity,
    TakeoffSummary,
)


@dataclass(frozen=True)
class ElementPage:
    """One page returned by an element source.

    ``has_more`` is None when the upstream gave no explicit flag; the
    retriever then relies on the page length.
    """

    elements: tuple[Element, ...]
    offset: int
    limit: int
    total: int | None = None
    has_more: bool | None = None
    skipped: int = 0
    warnings: tuple[str, ...] = ()

    def is_last(self) -> bool:
        """True when no further page should be requested."""
        if self.has_more is False:
            return True
        return len(self.elements) + self.skipped < self.limit


@dataclass(frozen=True)
class ElementRetrievalResult:
    """Everything the retriever gathered for one design."""

    design_id: str
    elements: tuple[Element, ...]
    total_count: int
    source: str
    is_synthetic: bool = False
    truncated: bool = False
    cancelled: bool = False
    batches: int = 0
    skipped_count: int = 0
    warnings: tuple[str, ...] = ()

    @property
    def is_partial(self) -> bool:
        return self.truncated or self.cancelled or len(self.elements) < self.total_count

    def to_dict(self) -> dict[str, Any]:
        return {
            "design_id": self.design_id,
            "element_count": len(self.elements),
            "total_count": self.total_count,
            "source": self.source,
            "is_synthetic": self.is_synthetic,
            "truncated": self.truncated,
            "cancelled": self.cancelled,
            "batches": self.batches,
            "skipped_count": self.skipped_count,
            "warnings": list(self.warnings),
        }


@dataclass(frozen=True)
class QuantityTakeoffResult:
    """Complete quantity takeoff for one (design, version)."""

    design_id: str
    project_id: str
    version_id: str
    created_at: datetime
    total_elements: int
    materials: tuple[MaterialQuantity, ...]
    element_types: tuple[ElementType, ...]
    materials_summary: tuple[ElementTypeMaterial, ...]
    summary: TakeoffSummary
    retrieval: ElementRetrievalResult = field(repr=False)

    @property
    def is_synthetic(self) -> bool:
        return self.retrieval.is_synthetic

    @property
    def warnings(self) -> tuple[str, ...]:
        return self.retrieval.warnings

    def to_dict(self) -> dict[str, Any]:
        return {
            "design_id": self.design_id,
            "project_id": self.project_id,
            "version_id": self.version_id,
            "created_at": self.created_at.isoformat(),
            "total_elements": self.total_elements,
            "materials": [m.to_dict() for m in self.materials],
            "element_types": [t.to_dict() for t in self.element_types],
            "materials_summary": [m.to_dict() for m in self.materials_summary],
            "summary": self.summary.to_dict(),
            "retrieval": self.retrieval.to_dict(),
        }
