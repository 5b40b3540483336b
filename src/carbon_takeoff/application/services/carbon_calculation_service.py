"""Embodied Carbon Calculation Service.

Matches every material quantity to a carbon factor (exact name, then material
type, then the generic entry), picks the quantity that fits the factor's
unit and scores the overall data quality.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Callable, Sequence
from uuid import uuid4

from carbon_takeoff.domain.models import (
    CarbonCoverage,
    CarbonFactor,
    CarbonFactorTable,
    DataQuality,
    ElementType,
    EmbodiedCarbonResult,
    MatchTier,
    MaterialCarbonResult,
    MaterialQuantity,
    MaterialType,
    QuantityBasis,
)
from carbon_takeoff.domain.models.element import ZERO
from carbon_takeoff.infrastructure.reference import MATERIAL_DENSITIES
from carbon_takeoff.shared.config import Settings
from carbon_takeoff.shared.logging import get_logger

logger = get_logger(__name__)

METHODOLOGY = "ICE embodied carbon (A1-A3); factor match by name, type, generic"

HIGH_COVERAGE_PCT = 90.0
HIGH_EXACT_MATCH_PCT = 70.0
MEDIUM_COVERAGE_PCT = 70.0
MEDIUM_EXACT_MATCH_PCT = 50.0

DEFAULT_FACTOR = Decimal("100")
DEFAULT_FACTOR_UNIT = "kg"
DEFAULT_FACTOR_SOURCE = "Default assumption"
DEFAULT_DENSITY = Decimal("1000")


@dataclass(frozen=True)
class QualityThresholds:
    """Coverage / exact-match thresholds for the data quality tiers."""

    high_coverage: float = HIGH_COVERAGE_PCT
    high_exact_match: float = HIGH_EXACT_MATCH_PCT
    medium_coverage: float = MEDIUM_COVERAGE_PCT
    medium_exact_match: float = MEDIUM_EXACT_MATCH_PCT

    @classmethod
    def from_settings(cls, settings: Settings) -> QualityThresholds:
        return cls(
            high_coverage=settings.carbon_high_coverage_pct,
            high_exact_match=settings.carbon_high_exact_match_pct,
            medium_coverage=settings.carbon_medium_coverage_pct,
            medium_exact_match=settings.carbon_medium_exact_match_pct,
        )

    def assess(self, coverage: CarbonCoverage) -> DataQuality:
        if coverage.total_materials == 0:
            return DataQuality.LOW
        pct = coverage.coverage_percentage
        exact = coverage.exact_match_percentage
        if pct >= self.high_coverage and exact >= self.high_exact_match:
            return DataQuality.HIGH
        if pct >= self.medium_coverage and exact >= self.medium_exact_match:
            return DataQuality.MEDIUM
        return DataQuality.LOW


class CarbonCalculationService:
    """Convert material quantities into an embodied carbon estimate.

    Stateless apart from injected reference data; safe to share.
    """

    def __init__(
        self,
        densities: dict[MaterialType, Decimal] | None = None,
        default_density: Decimal = DEFAULT_DENSITY,
        default_factor: Decimal = DEFAULT_FACTOR,
        thresholds: QualityThresholds | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._densities = dict(MATERIAL_DENSITIES if densities is None else densities)
        self._default_density = default_density
        self._default_factor = default_factor
        self._thresholds = thresholds or QualityThresholds()
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    @property
    def thresholds(self) -> QualityThresholds:
        return self._thresholds

    def calculate_embodied_carbon(
        self,
        material_quantities: Sequence[MaterialQuantity],
        factor_table: CarbonFactorTable,
        building_area: Decimal | None = None,
        *,
        design_id: str,
        version_id: str = "latest",
        project_id: str | None = None,
        element_types: Sequence[ElementType] = (),
        is_synthetic: bool = False,
        warnings: Sequence[str] = (),
    ) -> EmbodiedCarbonResult:
        """Calculate embodied carbon for a set of material quantities.

        Args:
            material_quantities: Output of the material aggregation pass
            factor_table: Carbon factor reference table
            building_area: Optional gross floor area in m² for carbon/m²
            design_id: Design identifier
            version_id: Design version
            project_id: Optional project identifier
            element_types: Element-type grouping to carry on the result
            is_synthetic: Whether the quantities came from placeholder data
            warnings: Retrieval warnings to carry on the result

        Returns:
            Immutable EmbodiedCarbonResult with a fresh id
        """
        assumptions: dict[str, None] = {}
        results: list[MaterialCarbonResult] = []
        for material in material_quantities:
            result = self._calculate_material(material, factor_table, assumptions)
            results.append(result)

        by_type: dict[str, Decimal] = {}
        by_category: dict[str, Decimal] = {}
        total = ZERO
        for r in results:
            total += r.total_carbon_kg
            by_type[r.material_type.value] = by_type.get(r.material_type.value, ZERO) + r.total_carbon_kg
            by_category[r.element_category] = by_category.get(r.element_category, ZERO) + r.total_carbon_kg

        coverage = CarbonCoverage(
            total_materials=len(results),
            materials_with_factors=sum(1 for r in results if r.carbon_factor > 0),
            exact_matches=sum(1 for r in results if r.match_tier == MatchTier.EXACT),
        )
        quality = self._thresholds.assess(coverage)

        carbon_per_area = None
        if building_area is not None and building_area > 0:
            carbon_per_area = total / building_area

        result_warnings = list(warnings)
        if not results:
            result_warnings.append("No material quantities supplied; embodied carbon is zero")

        logger.info(
            "embodied_carbon_calculated",
            design_id=design_id,
            materials=len(results),
            total_carbon_kg=float(total),
            coverage=coverage.coverage_percentage,
            data_quality=quality.value,
        )

        return EmbodiedCarbonResult(
            id=uuid4(),
            design_id=design_id,
            version_id=version_id,
            project_id=project_id,
            calculated_at=self._clock(),
            methodology=METHODOLOGY,
            total_carbon_kg=total,
            carbon_per_area=carbon_per_area,
            by_material_type=by_type,
            by_element_category=by_category,
            coverage=coverage,
            data_quality=quality,
            materials=tuple(results),
            assumptions=tuple(assumptions),
            element_types=tuple(element_types),
            is_synthetic=is_synthetic,
            warnings=tuple(result_warnings),
        )

    # =========================================================================
    # Matching
    # =========================================================================

    def match_factor(
        self, material: MaterialQuantity, factor_table: CarbonFactorTable
    ) -> tuple[CarbonFactor, MatchTier]:
        """Find the factor for a material: name, then type, then generic."""
        exact = factor_table.find_by_name(material.material_name)
        if exact is not None:
            return exact, MatchTier.EXACT

        if material.material_type != MaterialType.OTHER:
            by_type = factor_table.find_by_type(material.material_type)
            if by_type is not None:
                return by_type, MatchTier.TYPE

        generic = factor_table.generic()
        if generic is not None:
            return generic, MatchTier.FALLBACK

        return (
            CarbonFactor(
                material_type=MaterialType.OTHER,
                factor=self._default_factor,
                unit=DEFAULT_FACTOR_UNIT,
                source=DEFAULT_FACTOR_SOURCE,
            ),
            MatchTier.FALLBACK,
        )

    def _calculate_material(
        self,
        material: MaterialQuantity,
        factor_table: CarbonFactorTable,
        assumptions: dict[str, None],
    ) -> MaterialCarbonResult:
        factor, tier = self.match_factor(material, factor_table)
        notes: list[str] = []
        if tier == MatchTier.TYPE:
            notes.append(
                f"Used {material.material_type.value} type factor for {material.material_name}"
            )
        elif tier == MatchTier.FALLBACK:
            notes.append(f"Used generic carbon factor for {material.material_name}")

        quantity, basis = self.select_quantity(material, factor, notes)
        for note in notes:
            assumptions.setdefault(note, None)

        return MaterialCarbonResult(
            material_name=material.material_name,
            material_type=material.material_type,
            element_category=material.element_category,
            quantity=quantity,
            quantity_basis=basis,
            carbon_factor=factor.factor,
            factor_unit=factor.unit,
            factor_source=factor.source,
            match_tier=tier,
            total_carbon_kg=quantity * factor.factor,
            assumption="; ".join(notes) or None,
        )

    # =========================================================================
    # Quantities
    # =========================================================================

    def select_quantity(
        self,
        material: MaterialQuantity,
        factor: CarbonFactor,
        notes: list[str] | None = None,
    ) -> tuple[Decimal, QuantityBasis]:
        """Quantity matching the factor's unit.

        Falls back to volume, then area, then element count when the
        unit-driven quantity is zero or the unit is unknown.
        """
        notes = notes if notes is not None else []
        basis = factor.basis
        quantity = ZERO
        if basis == QuantityBasis.VOLUME:
            quantity = material.volume_m3
        elif basis == QuantityBasis.AREA:
            quantity = material.area_m2
        elif basis == QuantityBasis.LENGTH:
            quantity = material.length_m
        elif basis in (QuantityBasis.MASS_KG, QuantityBasis.MASS_T):
            quantity = self.estimate_mass(material, notes)
            if basis == QuantityBasis.MASS_T:
                quantity = quantity / Decimal("1000")

        if basis is not None and quantity > 0:
            return quantity, basis

        if material.volume_m3 > 0:
            fallback = (material.volume_m3, QuantityBasis.VOLUME)
        elif material.area_m2 > 0:
            fallback = (material.area_m2, QuantityBasis.AREA)
        else:
            fallback = (Decimal(material.element_count), QuantityBasis.COUNT)
        notes.append(
            f"No {factor.unit} quantity for {material.material_name}; "
            f"used {fallback[1].value} instead"
        )
        return fallback

    def estimate_mass(self, material: MaterialQuantity, notes: list[str] | None = None) -> Decimal:
        """Mass in kg from volume and the density table."""
        if material.volume_m3 <= 0:
            return ZERO
        density = self._densities.get(material.material_type)
        if density is None:
            density = self._default_density
            if notes is not None:
                notes.append(
                    f"No density for {material.material_type.value}; "
                    f"assumed {self._default_density} kg/m³"
                )
        return material.volume_m3 * density
