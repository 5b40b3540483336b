"""Reference data: default carbon factors and material densities.

Values follow the Inventory of Carbon and Energy (ICE) database.
"""
from __future__ import annotations

from decimal import Decimal

from carbon_takeoff.domain.models import CarbonFactor, CarbonFactorTable, MaterialType

# Typical densities in kg/m³. Types without an entry use the configured default.
MATERIAL_DENSITIES: dict[MaterialType, Decimal] = {
    MaterialType.CONCRETE: Decimal("2400"),
    MaterialType.STEEL: Decimal("7850"),
    MaterialType.TIMBER: Decimal("600"),
    MaterialType.MASONRY: Decimal("1800"),
    MaterialType.GLASS: Decimal("2500"),
    MaterialType.ALUMINUM: Decimal("2700"),
    MaterialType.INSULATION: Decimal("100"),
    MaterialType.GYPSUM: Decimal("800"),
    MaterialType.CERAMIC: Decimal("2000"),
    MaterialType.OTHER: Decimal("1000"),
}

DEFAULT_CARBON_FACTORS: tuple[CarbonFactor, ...] = (
    CarbonFactor(
        id="1",
        material_type=MaterialType.CONCRETE,
        material_name="Normal Weight Concrete",
        factor=Decimal("150.0"),
        unit="m3",
        source="ICE Database",
        region="UK",
        year=2023,
        description="Standard concrete mix",
    ),
    CarbonFactor(
        id="2",
        material_type=MaterialType.STEEL,
        material_name="Structural Steel",
        factor=Decimal("2100.0"),
        unit="kg",
        source="ICE Database",
        region="UK",
        year=2023,
        description="Hot rolled structural steel",
    ),
    CarbonFactor(
        id="3",
        material_type=MaterialType.TIMBER,
        material_name="Softwood Timber",
        factor=Decimal("45.0"),
        unit="m3",
        source="ICE Database",
        region="UK",
        year=2023,
        description="Kiln dried softwood",
    ),
    CarbonFactor(
        id="4",
        material_type=MaterialType.OTHER,
        factor=Decimal("100.0"),
        unit="kg",
        source="Default assumption",
        region="Global",
        year=2023,
        description="Default factor for unknown materials",
    ),
)


def default_factor_table() -> CarbonFactorTable:
    """The shipped reference table."""
    return CarbonFactorTable.of(DEFAULT_CARBON_FACTORS)
