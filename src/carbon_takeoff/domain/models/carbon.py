"""Embodied carbon domain types."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Iterable, Iterator
from uuid import UUID

from carbon_takeoff.domain.models.quantities import ElementType, MaterialType


class MatchTier(str, Enum):
    """How a carbon factor was matched to a material."""

    EXACT = "exact"
    TYPE = "type"
    FALLBACK = "fallback"


class DataQuality(str, Enum):
    """Confidence tier of a carbon result."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class QuantityBasis(str, Enum):
    """Quantity used to multiply a carbon factor."""

    VOLUME = "m³"
    AREA = "m²"
    LENGTH = "m"
    MASS_KG = "kg"
    MASS_T = "t"
    COUNT = "elements"


@dataclass(frozen=True)
class CarbonFactor:
    """Reference coefficient: kgCO2e per unit of material."""

    material_type: MaterialType
    factor: Decimal
    unit: str
    source: str
    region: str = "Global"
    year: int | None = None
    material_name: str | None = None
    description: str | None = None
    id: str | None = None

    @property
    def is_type_only(self) -> bool:
        """Factor applies to a whole material type, not a named product."""
        return not self.material_name

    @property
    def basis(self) -> QuantityBasis | None:
        """Quantity basis implied by the declared unit."""
        return UNIT_BASIS.get(self.unit.strip().lower().replace(" ", ""))

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "material_type": self.material_type.value,
            "material_name": self.material_name,
            "factor": float(self.factor),
            "unit": self.unit,
            "source": self.source,
            "region": self.region,
            "year": self.year,
        }


UNIT_BASIS: dict[str, QuantityBasis] = {
    "m3": QuantityBasis.VOLUME,
    "m³": QuantityBasis.VOLUME,
    "m^3": QuantityBasis.VOLUME,
    "m2": QuantityBasis.AREA,
    "m²": QuantityBasis.AREA,
    "m^2": QuantityBasis.AREA,
    "m": QuantityBasis.LENGTH,
    "kg": QuantityBasis.MASS_KG,
    "t": QuantityBasis.MASS_T,
    "tonne": QuantityBasis.MASS_T,
    "tonnes": QuantityBasis.MASS_T,
}


@dataclass(frozen=True)
class CarbonFactorTable:
    """Immutable carbon factor reference table.

    Read-only for the duration of a run; may be shared across runs.
    """

    factors: tuple[CarbonFactor, ...] = ()

    @classmethod
    def of(cls, factors: Iterable[CarbonFactor]) -> CarbonFactorTable:
        return cls(tuple(factors))

    def __iter__(self) -> Iterator[CarbonFactor]:
        return iter(self.factors)

    def __len__(self) -> int:
        return len(self.factors)

    def find_by_name(self, material_name: str) -> CarbonFactor | None:
        """Exact, case-insensitive match on named entries."""
        wanted = material_name.strip().lower()
        for factor in self.factors:
            if factor.material_name and factor.material_name.strip().lower() == wanted:
                return factor
        return None

    def find_by_type(self, material_type: MaterialType) -> CarbonFactor | None:
        """Match on material type, preferring entries keyed only by type."""
        candidates = [f for f in self.factors if f.material_type == material_type]
        for factor in candidates:
            if factor.is_type_only:
                return factor
        return candidates[0] if candidates else None

    def generic(self) -> CarbonFactor | None:
        """The designated generic entry (material type Other)."""
        return self.find_by_type(MaterialType.OTHER)


@dataclass(frozen=True)
class MaterialCarbonResult:
    """Carbon outcome for one MaterialQuantity."""

    material_name: str
    material_type: MaterialType
    element_category: str
    quantity: Decimal
    quantity_basis: QuantityBasis
    carbon_factor: Decimal
    factor_unit: str
    factor_source: str
    match_tier: MatchTier
    total_carbon_kg: Decimal
    assumption: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "material_name": self.material_name,
            "material_type": self.material_type.value,
            "element_category": self.element_category,
            "quantity": float(self.quantity),
            "unit": self.quantity_basis.value,
            "carbon_factor": float(self.carbon_factor),
            "factor_unit": self.factor_unit,
            "factor_source": self.factor_source,
            "match_tier": self.match_tier.value,
            "total_carbon_kg": float(self.total_carbon_kg),
            "assumption": self.assumption,
        }


@dataclass(frozen=True)
class CarbonCoverage:
    """How many materials found a carbon factor."""

    total_materials: int = 0
    materials_with_factors: int = 0
    exact_matches: int = 0

    @property
    def coverage_percentage(self) -> float:
        """Materials with a non-zero factor, as a percentage."""
        if self.total_materials == 0:
            return 0.0
        return self.materials_with_factors / self.total_materials * 100

    @property
    def exact_match_percentage(self) -> float:
        if self.total_materials == 0:
            return 0.0
        return self.exact_matches / self.total_materials * 100

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_materials": self.total_materials,
            "materials_with_factors": self.materials_with_factors,
            "exact_matches": self.exact_matches,
            "coverage_percentage": self.coverage_percentage,
            "exact_match_percentage": self.exact_match_percentage,
        }


@dataclass(frozen=True)
class EmbodiedCarbonResult:
    """Run-level embodied carbon estimate.

    Never mutated after construction; a repeat calculation produces a new
    result with a new id.
    """

    id: UUID
    design_id: str
    version_id: str
    project_id: str | None
    calculated_at: datetime
    methodology: str
    total_carbon_kg: Decimal
    carbon_per_area: Decimal | None
    by_material_type: dict[str, Decimal]
    by_element_category: dict[str, Decimal]
    coverage: CarbonCoverage
    data_quality: DataQuality
    materials: tuple[MaterialCarbonResult, ...] = ()
    assumptions: tuple[str, ...] = ()
    element_types: tuple[ElementType, ...] = field(default=(), repr=False)
    is_synthetic: bool = False
    warnings: tuple[str, ...] = ()

    @property
    def total_carbon_tonnes(self) -> Decimal:
        return self.total_carbon_kg / Decimal("1000")

    @property
    def is_empty(self) -> bool:
        return self.coverage.total_materials == 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "design_id": self.design_id,
            "version_id": self.version_id,
            "project_id": self.project_id,
            "calculated_at": self.calculated_at.isoformat(),
            "methodology": self.methodology,
            "total_carbon_kg": float(self.total_carbon_kg),
            "total_carbon_tonnes": float(self.total_carbon_tonnes),
            "carbon_per_area": (
                float(self.carbon_per_area) if self.carbon_per_area is not None else None
            ),
            "by_material_type": {k: float(v) for k, v in self.by_material_type.items()},
            "by_element_category": {k: float(v) for k, v in self.by_element_category.items()},
            "coverage": self.coverage.to_dict(),
            "data_quality": self.data_quality.value,
            "materials": [m.to_dict() for m in self.materials],
            "assumptions": list(self.assumptions),
            "element_types": [t.to_dict() for t in self.element_types],
            "is_synthetic": self.is_synthetic,
            "warnings": list(self.warnings),
        }
