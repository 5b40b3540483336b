"""Autodesk Platform Services adapters."""
from carbon_takeoff.infrastructure.aps.catalog import ApsDesignCatalog, ApsManifestProbe
from carbon_takeoff.infrastructure.aps.client import ApsClient
from carbon_takeoff.infrastructure.aps.graphql_source import AecGraphQLElementSource
from carbon_takeoff.infrastructure.aps.listing_source import AecListingElementSource
from carbon_takeoff.infrastructure.aps.synthetic_source import SyntheticElementSource

__all__ = [
    "ApsClient",
    "ApsDesignCatalog",
    "ApsManifestProbe",
    "AecGraphQLElementSource",
    "AecListingElementSource",
    "SyntheticElementSource",
]
