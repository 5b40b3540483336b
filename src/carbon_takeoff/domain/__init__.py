"""Domain Layer.

Contains the core entities, value objects, and collaborator interfaces.
This layer has NO external dependencies (no HTTP client, no frameworks).
"""
from __future__ import annotations

from carbon_takeoff.domain.exceptions import (
    BatchTooLargeError,
    CarbonResultNotFoundError,
    DesignNotFoundError,
    DomainError,
    ElementFetchError,
    ElementSourceError,
    ElementSourcesExhaustedError,
    MalformedElementError,
    RepositoryError,
    TakeoffNotFoundError,
    TransientFetchError,
    ValidationError,
)
from carbon_takeoff.domain.models import (
    CarbonCoverage,
    CarbonFactor,
    CarbonFactorTable,
    ClassificationCode,
    ClassificationSource,
    ClassifiedElement,
    DataQuality,
    DesignInfo,
    DesignStatus,
    Element,
    ElementFilter,
    ElementPage,
    ElementProperty,
    ElementRetrievalResult,
    ElementType,
    ElementTypeMaterial,
    EmbodiedCarbonResult,
    MatchTier,
    MaterialCarbonResult,
    MaterialClassification,
    MaterialQuantity,
    MaterialType,
    ProbeOutcome,
    QuantityBasis,
    QuantityTakeoffResult,
    TakeoffSummary,
    ViewableModel,
    ViewableStatus,
)
from carbon_takeoff.domain.repositories import (
    ICarbonResultRepository,
    IDesignCatalog,
    IElementSource,
    IManifestProbe,
    ITakeoffRepository,
)
from carbon_takeoff.domain.value_objects import DesignUrn

__all__ = [
    # Exceptions
    "CarbonResultNotFoundError",
    "DomainError",
    "ValidationError",
    "DesignNotFoundError",
    "MalformedElementError",
    "ElementFetchError",
    "TransientFetchError",
    "BatchTooLargeError",
    "ElementSourceError",
    "ElementSourcesExhaustedError",
    "RepositoryError",
    "TakeoffNotFoundError",
    # Models
    "Element",
    "ElementFilter",
    "ElementProperty",
    "ClassificationCode",
    "ClassificationSource",
    "ClassifiedElement",
    "ElementType",
    "ElementTypeMaterial",
    "MaterialClassification",
    "MaterialQuantity",
    "MaterialType",
    "TakeoffSummary",
    "ElementPage",
    "ElementRetrievalResult",
    "QuantityTakeoffResult",
    "CarbonCoverage",
    "CarbonFactor",
    "CarbonFactorTable",
    "DataQuality",
    "EmbodiedCarbonResult",
    "MatchTier",
    "MaterialCarbonResult",
    "QuantityBasis",
    "DesignInfo",
    "DesignStatus",
    "ProbeOutcome",
    "ViewableModel",
    "ViewableStatus",
    # Value Objects
    "DesignUrn",
    # Interfaces
    "IElementSource",
    "IDesignCatalog",
    "IManifestProbe",
    "ITakeoffRepository",
    "ICarbonResultRepository",
]
