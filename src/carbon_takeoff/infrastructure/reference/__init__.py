"""Static reference data."""
from carbon_takeoff.infrastructure.reference.carbon_factors import (
    DEFAULT_CARBON_FACTORS,
    MATERIAL_DENSITIES,
    default_factor_table,
)

__all__ = ["DEFAULT_CARBON_FACTORS", "MATERIAL_DENSITIES", "default_factor_table"]
