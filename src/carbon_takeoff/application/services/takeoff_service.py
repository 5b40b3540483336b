"""Takeoff Service.

Runs the full pipeline for one (design, version): retrieve elements,
classify, aggregate, and optionally convert to embodied carbon. Results are
handed to the repositories, which keep history.
"""
from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import Callable
from uuid import UUID

from carbon_takeoff.application.services.carbon_calculation_service import (
    CarbonCalculationService,
)
from carbon_takeoff.application.services.element_retrieval_service import (
    ElementRetrievalService,
)
from carbon_takeoff.application.services.material_classifier import MaterialClassifier
from carbon_takeoff.application.services.quantity_aggregation_service import (
    QuantityAggregationService,
)
from carbon_takeoff.domain.exceptions import CarbonResultNotFoundError, TakeoffNotFoundError
from carbon_takeoff.domain.models import (
    CarbonFactorTable,
    ElementFilter,
    EmbodiedCarbonResult,
    QuantityTakeoffResult,
)
from carbon_takeoff.domain.repositories import ICarbonResultRepository, ITakeoffRepository
from carbon_takeoff.shared.cancellation import CancellationToken
from carbon_takeoff.shared.logging import get_logger

logger = get_logger(__name__)

LATEST_VERSION = "latest"


class TakeoffService:
    """Quantity takeoff and embodied carbon pipeline."""

    def __init__(
        self,
        retrieval: ElementRetrievalService,
        classifier: MaterialClassifier,
        aggregator: QuantityAggregationService,
        carbon: CarbonCalculationService,
        factor_table: CarbonFactorTable,
        takeoffs: ITakeoffRepository,
        carbon_results: ICarbonResultRepository,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._retrieval = retrieval
        self._classifier = classifier
        self._aggregator = aggregator
        self._carbon = carbon
        self._factor_table = factor_table
        self._takeoffs = takeoffs
        self._carbon_results = carbon_results
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    async def run_takeoff(
        self,
        design_id: str,
        project_id: str,
        version_id: str = LATEST_VERSION,
        element_filter: ElementFilter | None = None,
        cancel_token: CancellationToken | None = None,
        force: bool = False,
    ) -> QuantityTakeoffResult:
        """Generate (or reuse) the takeoff for a design version.

        Args:
            design_id: Design identifier
            project_id: Project identifier
            version_id: Design version
            element_filter: Optional category / family restriction
            cancel_token: Cancels the retrieval between batches
            force: Recompute even when a stored takeoff exists

        Returns:
            QuantityTakeoffResult

        Raises:
            DesignNotFoundError: If the design does not exist
            ElementSourcesExhaustedError: If no element source delivered
        """
        log = logger.bind(design_id=design_id, version_id=version_id)
        if not force and element_filter is None:
            existing = await self._takeoffs.get_latest(design_id, version_id)
            if existing is not None:
                log.info("takeoff_reused", created_at=existing.created_at.isoformat())
                return existing

        retrieval = await self._retrieval.fetch_all_elements(
            design_id, element_filter=element_filter, cancel_token=cancel_token
        )
        classified = self._classifier.annotate(retrieval.elements)
        aggregation = self._aggregator.aggregate(classified)

        takeoff = QuantityTakeoffResult(
            design_id=design_id,
            project_id=project_id,
            version_id=version_id,
            created_at=self._clock(),
            total_elements=len(retrieval.elements),
            materials=aggregation.materials,
            element_types=aggregation.element_types,
            materials_summary=aggregation.materials_summary,
            summary=aggregation.summary,
            retrieval=retrieval,
        )
        # Partial or cancelled runs are returned but not stored as the latest takeoff
        if not retrieval.cancelled:
            await self._takeoffs.add(takeoff)

        log.info(
            "takeoff_completed",
            elements=takeoff.total_elements,
            materials=len(takeoff.materials),
            element_types=len(takeoff.element_types),
            source=retrieval.source,
            partial=retrieval.is_partial,
        )
        return takeoff

    async def get_takeoff(
        self, design_id: str, version_id: str | None = None
    ) -> QuantityTakeoffResult:
        """Latest stored takeoff.

        Raises:
            TakeoffNotFoundError: If none has been stored
        """
        takeoff = await self._takeoffs.get_latest(design_id, version_id)
        if takeoff is None:
            raise TakeoffNotFoundError(design_id, version_id)
        return takeoff

    async def calculate_carbon(
        self,
        design_id: str,
        project_id: str,
        version_id: str = LATEST_VERSION,
        building_area: Decimal | None = None,
        factor_table: CarbonFactorTable | None = None,
        force: bool = False,
        cancel_token: CancellationToken | None = None,
    ) -> EmbodiedCarbonResult:
        """Embodied carbon for a design version.

        Reuses the stored takeoff unless ``force`` is set. Every call
        produces a new result that supersedes the previous one.
        """
        takeoff = await self.run_takeoff(
            design_id,
            project_id,
            version_id,
            cancel_token=cancel_token,
            force=force,
        )
        result = self._carbon.calculate_embodied_carbon(
            takeoff.materials,
            factor_table or self._factor_table,
            building_area,
            design_id=design_id,
            version_id=version_id,
            project_id=project_id,
            element_types=takeoff.element_types,
            is_synthetic=takeoff.is_synthetic,
            warnings=takeoff.warnings,
        )
        await self._carbon_results.add(result)
        return result

    async def carbon_history(
        self, design_id: str, version_id: str | None = None
    ) -> list[EmbodiedCarbonResult]:
        return await self._carbon_results.history(design_id, version_id)

    async def get_carbon_result(self, result_id: UUID) -> EmbodiedCarbonResult:
        """Stored carbon result by id.

        Raises:
            CarbonResultNotFoundError: If no result has that id
        """
        result = await self._carbon_results.get_by_id(result_id)
        if result is None:
            raise CarbonResultNotFoundError(str(result_id))
        return result
