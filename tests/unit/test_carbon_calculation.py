"""Tests for embodied carbon calculation."""
from __future__ import annotations

from decimal import Decimal

import pytest

from carbon_takeoff.application.services.carbon_calculation_service import (
    CarbonCalculationService,
    QualityThresholds,
)
from carbon_takeoff.domain.models import (
    CarbonCoverage,
    CarbonFactor,
    CarbonFactorTable,
    DataQuality,
    MatchTier,
    MaterialQuantity,
    MaterialType,
    QuantityBasis,
)
from carbon_takeoff.infrastructure.reference import default_factor_table

OTHER_ONLY = CarbonFactorTable.of(
    [CarbonFactor(MaterialType.OTHER, Decimal("100"), "kg", "Default assumption")]
)


def quantity(
    name: str,
    material_type: MaterialType,
    category: str = "Walls",
    volume: str = "0",
    area: str = "0",
    length: str = "0",
    count: int = 1,
) -> MaterialQuantity:
    return MaterialQuantity(
        material_name=name,
        material_type=material_type,
        element_category=category,
        volume_m3=Decimal(volume),
        area_m2=Decimal(area),
        length_m=Decimal(length),
        element_count=count,
    )


@pytest.fixture
def service(fixed_clock) -> CarbonCalculationService:
    return CarbonCalculationService(clock=fixed_clock)


class TestEmptyInput:
    def test_empty_input_is_low_quality_zero(self, service) -> None:
        result = service.calculate_embodied_carbon([], default_factor_table(), design_id="d1")
        assert result.total_carbon_kg == 0
        assert result.materials == ()
        assert result.coverage.coverage_percentage == 0.0
        assert result.data_quality == DataQuality.LOW
        assert result.is_empty
        assert result.warnings


class TestMatching:
    """Tests for the exact / type / generic tiers."""

    def test_exact_name_match_case_insensitive(self, service) -> None:
        material = quantity("normal weight concrete", MaterialType.CONCRETE, volume="2")
        result = service.calculate_embodied_carbon(
            [material], default_factor_table(), design_id="d1"
        )
        row = result.materials[0]
        assert row.match_tier == MatchTier.EXACT
        assert row.quantity_basis == QuantityBasis.VOLUME
        assert row.total_carbon_kg == Decimal("300.0")
        assert result.assumptions == ()

    def test_type_match_adds_assumption(self, service) -> None:
        material = quantity("Reinforced Concrete", MaterialType.CONCRETE, volume="8")
        result = service.calculate_embodied_carbon(
            [material], default_factor_table(), design_id="d1"
        )
        row = result.materials[0]
        assert row.match_tier == MatchTier.TYPE
        assert row.total_carbon_kg == Decimal("1200.0")
        assert result.assumptions == ("Used Concrete type factor for Reinforced Concrete",)

    def test_type_only_entries_preferred(self, service) -> None:
        table = CarbonFactorTable.of([
            CarbonFactor(MaterialType.STEEL, Decimal("2100"), "kg", "ICE", material_name="Structural Steel"),
            CarbonFactor(MaterialType.STEEL, Decimal("10"), "m3", "EPD"),
        ])
        factor, tier = service.match_factor(quantity("Rebar Steel", MaterialType.STEEL), table)
        assert tier == MatchTier.TYPE
        assert factor.factor == Decimal("10")

    def test_generic_fallback_with_default_density(self, service) -> None:
        """2 m³ of a type without a density entry, generic 100 kgCO2e/kg factor."""
        material = quantity("PVC Membrane", MaterialType.PLASTIC, volume="2")
        result = service.calculate_embodied_carbon([material], OTHER_ONLY, design_id="d1")
        row = result.materials[0]

        assert row.match_tier == MatchTier.FALLBACK
        assert row.quantity == Decimal("2000")
        assert row.quantity_basis == QuantityBasis.MASS_KG
        assert result.total_carbon_kg == Decimal("200000")
        assert any("No density for Plastic" in a for a in result.assumptions)

        again = service.calculate_embodied_carbon([material], OTHER_ONLY, design_id="d1")
        assert again.total_carbon_kg == result.total_carbon_kg
        assert again.id != result.id

    def test_hard_coded_default_without_generic_entry(self, service) -> None:
        material = quantity("Mystery", MaterialType.OTHER, volume="1")
        result = service.calculate_embodied_carbon(
            [material], CarbonFactorTable(), design_id="d1"
        )
        row = result.materials[0]
        assert row.carbon_factor == Decimal("100")
        assert row.factor_source == "Default assumption"
        assert row.total_carbon_kg == Decimal("100000")


class TestQuantitySelection:
    def test_zero_unit_quantity_falls_back_to_area(self, service) -> None:
        factor = CarbonFactor(MaterialType.GLASS, Decimal("25"), "m3", "ICE")
        value, basis = service.select_quantity(
            quantity("Glass", MaterialType.GLASS, area="4"), factor
        )
        assert (value, basis) == (Decimal("4"), QuantityBasis.AREA)

    def test_no_quantities_falls_back_to_count(self, service) -> None:
        factor = CarbonFactor(MaterialType.OTHER, Decimal("5"), "m2", "x")
        notes: list[str] = []
        value, basis = service.select_quantity(
            quantity("Fixture", MaterialType.OTHER, count=3), factor, notes
        )
        assert (value, basis) == (Decimal(3), QuantityBasis.COUNT)
        assert notes

    def test_tonnes_basis(self, service) -> None:
        factor = CarbonFactor(MaterialType.STEEL, Decimal("1.5"), "t", "x")
        value, basis = service.select_quantity(
            quantity("Steel", MaterialType.STEEL, volume="1"), factor
        )
        assert (value, basis) == (Decimal("7.85"), QuantityBasis.MASS_T)


class TestCoverageAndQuality:
    def test_coverage_percentages(self, service) -> None:
        materials = [
            quantity("Normal Weight Concrete", MaterialType.CONCRETE, volume="1"),
            quantity("Structural Steel", MaterialType.STEEL, volume="1"),
            quantity("Brick", MaterialType.MASONRY, volume="1", category="Walls"),
            quantity("Softwood Timber", MaterialType.TIMBER, volume="1", category="Roofs"),
        ]
        result = service.calculate_embodied_carbon(
            materials, default_factor_table(), Decimal("10"), design_id="d1"
        )
        assert result.coverage.coverage_percentage == 100.0
        assert result.coverage.exact_match_percentage == 75.0
        assert result.data_quality == DataQuality.HIGH
        assert result.carbon_per_area == result.total_carbon_kg / Decimal("10")
        assert set(result.by_element_category) == {"Walls", "Roofs"}

    @pytest.mark.parametrize(
        "total,with_factors,exact,expected",
        [
            (10, 9, 7, DataQuality.HIGH),
            (10, 9, 6, DataQuality.MEDIUM),
            (10, 7, 5, DataQuality.MEDIUM),
            (10, 6, 6, DataQuality.LOW),
            (0, 0, 0, DataQuality.LOW),
        ],
    )
    def test_quality_thresholds(self, total, with_factors, exact, expected) -> None:
        coverage = CarbonCoverage(total, with_factors, exact)
        assert QualityThresholds().assess(coverage) == expected
        assert 0 <= coverage.coverage_percentage <= 100

    def test_thresholds_from_settings(self, test_settings) -> None:
        thresholds = QualityThresholds.from_settings(
            test_settings.model_copy(update={"carbon_high_coverage_pct": 95.0})
        )
        assert thresholds.high_coverage == 95.0
        assert thresholds.assess(CarbonCoverage(10, 9, 9)) == DataQuality.MEDIUM


def test_result_serializes(service) -> None:
    result = service.calculate_embodied_carbon(
        [quantity("Brick", MaterialType.MASONRY, volume="1")],
        default_factor_table(),
        design_id="d1",
        version_id="v2",
    )
    data = result.to_dict()
    assert data["design_id"] == "d1"
    assert data["version_id"] == "v2"
    assert data["data_quality"] == "low"
    assert data["materials"][0]["match_tier"] == "fallback"
