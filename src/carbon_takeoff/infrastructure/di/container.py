"""Dependency Injection Container.

Builds the services of one application instance from settings. Not a
singleton: tests and workers create their own containers.
"""
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Callable

import httpx

from carbon_takeoff.domain.models import CarbonFactorTable
from carbon_takeoff.domain.repositories import IElementSource
from carbon_takeoff.infrastructure.aps import (
    AecGraphQLElementSource,
    AecListingElementSource,
    ApsClient,
    ApsDesignCatalog,
    ApsManifestProbe,
    SyntheticElementSource,
)
from carbon_takeoff.infrastructure.reference import MATERIAL_DENSITIES, default_factor_table
from carbon_takeoff.infrastructure.repositories import (
    InMemoryCarbonResultRepository,
    InMemoryTakeoffRepository,
)
from carbon_takeoff.shared.config import Settings, get_settings

if TYPE_CHECKING:
    from carbon_takeoff.application.services.carbon_calculation_service import (
        CarbonCalculationService,
    )
    from carbon_takeoff.application.services.csv_export_service import CsvExportService
    from carbon_takeoff.application.services.element_retrieval_service import (
        ElementRetrievalService,
    )
    from carbon_takeoff.application.services.quantity_aggregation_service import (
        QuantityAggregationService,
    )
    from carbon_takeoff.application.services.takeoff_service import TakeoffService
    from carbon_takeoff.application.services.viewability_service import ViewabilityService


class Container:
    """Dependency Injection Container.

    Owns the shared HTTP client and the repositories; services are built
    on demand and cached per container.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        http: httpx.AsyncClient | None = None,
        factor_table: CarbonFactorTable | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self._owns_http = http is None
        self.http = http or httpx.AsyncClient()
        self.factor_table = factor_table or default_factor_table()
        self.clock = clock
        self.takeoff_repository = InMemoryTakeoffRepository()
        self.carbon_repository = InMemoryCarbonResultRepository()

        self._aps_client: ApsClient | None = None
        self._takeoff_service: TakeoffService | None = None
        self._viewability_service: ViewabilityService | None = None

    @property
    def aps_client(self) -> ApsClient:
        if self._aps_client is None:
            self._aps_client = ApsClient(self.http, self.settings)
        return self._aps_client

    def get_element_sources(self) -> list[IElementSource]:
        """Fallback ladder, richest source first."""
        sources: list[IElementSource] = [
            AecGraphQLElementSource(self.aps_client),
            AecListingElementSource(self.aps_client),
        ]
        if self.settings.allow_synthetic_elements:
            sources.append(SyntheticElementSource(self.settings.synthetic_element_count))
        return sources

    def get_element_retrieval_service(self) -> ElementRetrievalService:
        from carbon_takeoff.application.services.element_retrieval_service import (
            ElementRetrievalService,
        )

        return ElementRetrievalService(self.get_element_sources(), self.settings)

    def get_aggregation_service(self) -> QuantityAggregationService:
        from carbon_takeoff.application.services.quantity_aggregation_service import (
            QuantityAggregationService,
        )

        return QuantityAggregationService(
            densities=MATERIAL_DENSITIES,
            default_density=Decimal(str(self.settings.carbon_default_density)),
        )

    def get_carbon_service(self) -> CarbonCalculationService:
        from carbon_takeoff.application.services.carbon_calculation_service import (
            CarbonCalculationService,
            QualityThresholds,
        )

        return CarbonCalculationService(
            densities=MATERIAL_DENSITIES,
            default_density=Decimal(str(self.settings.carbon_default_density)),
            default_factor=Decimal(str(self.settings.carbon_default_factor)),
            thresholds=QualityThresholds.from_settings(self.settings),
            clock=self.clock,
        )

    def get_takeoff_service(self) -> TakeoffService:
        """Get TakeoffService instance.

        Returns:
            TakeoffService bound to this container's repositories
        """
        if self._takeoff_service is None:
            from carbon_takeoff.application.services.material_classifier import (
                MaterialClassifier,
            )
            from carbon_takeoff.application.services.takeoff_service import TakeoffService

            self._takeoff_service = TakeoffService(
                retrieval=self.get_element_retrieval_service(),
                classifier=MaterialClassifier(),
                aggregator=self.get_aggregation_service(),
                carbon=self.get_carbon_service(),
                factor_table=self.factor_table,
                takeoffs=self.takeoff_repository,
                carbon_results=self.carbon_repository,
                clock=self.clock,
            )
        return self._takeoff_service

    def get_viewability_service(self) -> ViewabilityService:
        if self._viewability_service is None:
            from carbon_takeoff.application.services.viewability_service import (
                ViewabilityService,
            )

            self._viewability_service = ViewabilityService(
                ApsDesignCatalog(self.aps_client),
                ApsManifestProbe(self.aps_client),
                native_viewer_path=self.settings.native_viewer_path,
            )
        return self._viewability_service

    def get_csv_export_service(self) -> CsvExportService:
        from carbon_takeoff.application.services.csv_export_service import CsvExportService

        return CsvExportService()

    async def aclose(self) -> None:
        """Close the HTTP client if this container created it."""
        if self._owns_http:
            await self.http.aclose()
