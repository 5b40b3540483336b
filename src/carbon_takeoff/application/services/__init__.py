"""Application services.

Business logic of the takeoff and embodied carbon pipeline.
"""
from __future__ import annotations

# Re-export services for convenient imports
# These will be available as:
#   from carbon_takeoff.application.services import TakeoffService

__all__ = [
    "CarbonCalculationService",
    "ClassificationService",
    "CsvExportService",
    "ElementRetrievalService",
    "MaterialClassifier",
    "QuantityAggregationService",
    "TakeoffService",
    "ViewabilityService",
]


def __getattr__(name: str):
    """Lazy imports for services."""
    if name == "CarbonCalculationService":
        from carbon_takeoff.application.services.carbon_calculation_service import CarbonCalculationService
        return CarbonCalculationService
    elif name == "ClassificationService":
        from carbon_takeoff.application.services.classification_service import ClassificationService
        return ClassificationService
    elif name == "CsvExportService":
        from carbon_takeoff.application.services.csv_export_service import CsvExportService
        return CsvExportService
    elif name == "ElementRetrievalService":
        from carbon_takeoff.application.services.element_retrieval_service import ElementRetrievalService
        return ElementRetrievalService
    elif name == "MaterialClassifier":
        from carbon_takeoff.application.services.material_classifier import MaterialClassifier
        return MaterialClassifier
    elif name == "QuantityAggregationService":
        from carbon_takeoff.application.services.quantity_aggregation_service import QuantityAggregationService
        return QuantityAggregationService
    elif name == "TakeoffService":
        from carbon_takeoff.application.services.takeoff_service import TakeoffService
        return TakeoffService
    elif name == "ViewabilityService":
        from carbon_takeoff.application.services.viewability_service import ViewabilityService
        return ViewabilityService
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
