"""Domain Models.

Core domain entities of the takeoff and embodied carbon pipeline.
"""
from __future__ import annotations

from carbon_takeoff.domain.models.carbon import (
    CarbonCoverage,
    CarbonFactor,
    CarbonFactorTable,
    DataQuality,
    EmbodiedCarbonResult,
    MatchTier,
    MaterialCarbonResult,
    QuantityBasis,
)
from carbon_takeoff.domain.models.element import (
    Element,
    ElementFilter,
    ElementProperty,
)
from carbon_takeoff.domain.models.quantities import (
    ClassificationCode,
    ClassificationSource,
    ClassifiedElement,
    ElementType,
    ElementTypeMaterial,
    MaterialClassification,
    MaterialQuantity,
    MaterialType,
    TakeoffSummary,
)
from carbon_takeoff.domain.models.takeoff import (
    ElementPage,
    ElementRetrievalResult,
    QuantityTakeoffResult,
)
from carbon_takeoff.domain.models.viewer import (
    DesignInfo,
    DesignStatus,
    ProbeOutcome,
    ViewableModel,
    ViewableStatus,
)

__all__ = [
    # Element
    "Element",
    "ElementFilter",
    "ElementProperty",
    # Quantities
    "ClassificationCode",
    "ClassificationSource",
    "ClassifiedElement",
    "ElementType",
    "ElementTypeMaterial",
    "MaterialClassification",
    "MaterialQuantity",
    "MaterialType",
    "TakeoffSummary",
    # Takeoff
    "ElementPage",
    "ElementRetrievalResult",
    "QuantityTakeoffResult",
    # Carbon
    "CarbonCoverage",
    "CarbonFactor",
    "CarbonFactorTable",
    "DataQuality",
    "EmbodiedCarbonResult",
    "MatchTier",
    "MaterialCarbonResult",
    "QuantityBasis",
    # Viewer
    "DesignInfo",
    "DesignStatus",
    "ProbeOutcome",
    "ViewableModel",
    "ViewableStatus",
]
