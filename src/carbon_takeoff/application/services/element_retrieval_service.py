"""Element Retrieval Service.

Fetches the complete element inventory of a design in pages, walking an
ordered ladder of element sources until one of them delivers.
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Sequence

from carbon_takeoff.domain.exceptions import (
    BatchTooLargeError,
    ElementFetchError,
    ElementSourcesExhaustedError,
    TransientFetchError,
)
from carbon_takeoff.domain.models import (
    Element,
    ElementFilter,
    ElementPage,
    ElementRetrievalResult,
)
from carbon_takeoff.domain.repositories import IElementSource
from carbon_takeoff.shared.cancellation import CancellationToken
from carbon_takeoff.shared.config import Settings, get_settings
from carbon_takeoff.shared.logging import get_logger
from carbon_takeoff.shared.result import Result, err, ok

logger = get_logger(__name__)


@dataclass
class _TierRun:
    """Mutable accumulator for one tier's pages."""

    pages: dict[int, ElementPage] = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)
    truncated: bool = False
    cancelled: bool = False

    def elements(self) -> tuple[Element, ...]:
        result: list[Element] = []
        for offset in sorted(self.pages):
            result.extend(self.pages[offset].elements)
        return tuple(result)

    def skipped(self) -> int:
        return sum(p.skipped for p in self.pages.values())

    def total(self) -> int | None:
        totals = [p.total for p in self.pages.values() if p.total is not None]
        return max(totals) if totals else None


class ElementRetrievalService:
    """Batched element retrieval with a multi-tier fallback ladder.

    Tiers are tried in order. A tier that fails on its first page hands over
    to the next one; a tier that fails later keeps what it gathered and the
    result carries a warning. Design-not-found is never retried.
    """

    def __init__(
        self,
        sources: Sequence[IElementSource],
        settings: Settings | None = None,
    ) -> None:
        """Initialize service.

        Args:
            sources: Ordered fallback ladder, richest source first
            settings: Retrieval settings (batch size, cap, concurrency)
        """
        self._sources = tuple(sources)
        settings = settings or get_settings()
        self._batch_size = settings.element_batch_size
        self._max_batches = settings.element_max_batches
        self._split_size = settings.element_split_batch_size
        self._concurrency = settings.element_fetch_concurrency
        self._max_retries = settings.element_tier_max_retries
        self._allow_synthetic = settings.allow_synthetic_elements

    async def fetch_all_elements(
        self,
        design_id: str,
        element_filter: ElementFilter | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> ElementRetrievalResult:
        """Fetch every element of a design.

        Args:
            design_id: Design identifier
            element_filter: Optional category / family restriction
            cancel_token: Checked before each batch request

        Returns:
            ElementRetrievalResult with elements, total count and warnings

        Raises:
            DesignNotFoundError: If the design does not exist upstream
            ElementSourcesExhaustedError: If every enabled tier failed
        """
        log = logger.bind(design_id=design_id)
        failures: dict[str, str] = {}

        for source in self._sources:
            if source.is_synthetic and not self._allow_synthetic:
                log.debug("element_tier_disabled", tier=source.name)
                continue

            outcome = await self._run_tier(source, design_id, element_filter, cancel_token)
            if outcome.is_failure():
                failures[source.name] = str(outcome.error)
                log.warning("element_tier_exhausted", tier=source.name, error=str(outcome.error))
                continue

            result = outcome.unwrap()
            warnings = [f"{name} unavailable: {reason}" for name, reason in failures.items()]
            warnings.extend(result.warnings)
            if source.is_synthetic:
                warnings.append(
                    "Element data is synthetic placeholder data; quantities are not "
                    "derived from the design"
                )
            if not result.elements and not warnings:
                warnings.append(f"{source.name} returned no elements")

            log.info(
                "elements_retrieved",
                tier=source.name,
                count=len(result.elements),
                total=result.total_count,
                batches=result.batches,
                truncated=result.truncated,
                cancelled=result.cancelled,
            )
            return ElementRetrievalResult(
                design_id=result.design_id,
                elements=result.elements,
                total_count=result.total_count,
                source=result.source,
                is_synthetic=source.is_synthetic,
                truncated=result.truncated,
                cancelled=result.cancelled,
                batches=result.batches,
                skipped_count=result.skipped_count,
                warnings=tuple(warnings),
            )

        raise ElementSourcesExhaustedError(design_id, failures)

    # =========================================================================
    # Tier execution
    # =========================================================================

    async def _run_tier(
        self,
        source: IElementSource,
        design_id: str,
        element_filter: ElementFilter | None,
        cancel_token: CancellationToken | None,
    ) -> Result[ElementRetrievalResult, ElementFetchError]:
        run = _TierRun()

        if cancel_token is not None and cancel_token.cancelled:
            run.cancelled = True
            run.warnings.append(self._cancel_warning(cancel_token, 0))
            return ok(self._finish(source, design_id, run))

        try:
            first = await self._fetch_page(source, design_id, element_filter, 0, run)
        except ElementFetchError as e:
            return err(e)
        run.pages[0] = first

        if not first.is_last():
            if self._concurrency > 1 and first.total is not None:
                await self._fetch_concurrent(
                    source, design_id, element_filter, first.total, run, cancel_token
                )
            else:
                await self._fetch_sequential(
                    source, design_id, element_filter, first, run, cancel_token
                )

        return ok(self._finish(source, design_id, run))

    async def _fetch_sequential(
        self,
        source: IElementSource,
        design_id: str,
        element_filter: ElementFilter | None,
        page: ElementPage,
        run: _TierRun,
        cancel_token: CancellationToken | None,
    ) -> None:
        offset = self._batch_size
        while not page.is_last():
            if len(run.pages) >= self._max_batches:
                run.truncated = True
                run.warnings.append(self._truncation_warning())
                return
            if cancel_token is not None and cancel_token.cancelled:
                run.cancelled = True
                run.warnings.append(self._cancel_warning(cancel_token, offset))
                return
            try:
                page = await self._fetch_page(source, design_id, element_filter, offset, run)
            except ElementFetchError as e:
                run.warnings.append(
                    f"{source.name} failed at offset {offset}; returning partial results: {e}"
                )
                return
            run.pages[offset] = page
            offset += self._batch_size

    async def _fetch_concurrent(
        self,
        source: IElementSource,
        design_id: str,
        element_filter: ElementFilter | None,
        total: int,
        run: _TierRun,
        cancel_token: CancellationToken | None,
    ) -> None:
        offsets = list(range(self._batch_size, total, self._batch_size))
        allowed = self._max_batches - 1
        if len(offsets) > allowed:
            offsets = offsets[:allowed]
            run.truncated = True
            run.warnings.append(self._truncation_warning())

        semaphore = asyncio.Semaphore(self._concurrency)
        lock = asyncio.Lock()

        async def fetch(offset: int) -> None:
            async with semaphore:
                if cancel_token is not None and cancel_token.cancelled:
                    async with lock:
                        if not run.cancelled:
                            run.cancelled = True
                            run.warnings.append(self._cancel_warning(cancel_token, offset))
                    return
                try:
                    page = await self._fetch_page(
                        source, design_id, element_filter, offset, run, lock
                    )
                except ElementFetchError as e:
                    async with lock:
                        run.warnings.append(
                            f"{source.name} failed at offset {offset}; page skipped: {e}"
                        )
                    return
                async with lock:
                    run.pages[offset] = page

        await asyncio.gather(*(fetch(o) for o in offsets))

    # =========================================================================
    # Single page
    # =========================================================================

    async def _fetch_page(
        self,
        source: IElementSource,
        design_id: str,
        element_filter: ElementFilter | None,
        offset: int,
        run: _TierRun,
        lock: asyncio.Lock | None = None,
    ) -> ElementPage:
        """Fetch one page, splitting it when the upstream rejects the size."""
        try:
            page = await self._attempt(source, design_id, element_filter, self._batch_size, offset)
        except BatchTooLargeError:
            if self._split_size >= self._batch_size:
                raise
            page = await self._fetch_split(source, design_id, element_filter, offset, run, lock)

        if page.warnings:
            if lock is not None:
                async with lock:
                    run.warnings.extend(page.warnings)
            else:
                run.warnings.extend(page.warnings)
        return page

    async def _fetch_split(
        self,
        source: IElementSource,
        design_id: str,
        element_filter: ElementFilter | None,
        offset: int,
        run: _TierRun,
        lock: asyncio.Lock | None,
    ) -> ElementPage:
        """Re-request a rejected page as smaller sub-batches.

        Failed sub-batches are skipped with a warning; if none succeeds the
        last error is raised.
        """
        logger.info(
            "element_batch_split",
            design_id=design_id,
            tier=source.name,
            offset=offset,
            batch_size=self._batch_size,
            split_size=self._split_size,
        )
        elements: list[Element] = []
        warnings: list[str] = []
        skipped = 0
        total: int | None = None
        succeeded = 0
        exhausted = False
        last_error: ElementFetchError | None = None

        for sub_offset in range(offset, offset + self._batch_size, self._split_size):
            try:
                sub = await self._attempt(
                    source, design_id, element_filter, self._split_size, sub_offset
                )
            except ElementFetchError as e:
                last_error = e
                warnings.append(
                    f"{source.name} skipped sub-batch at offset {sub_offset} "
                    f"(size {self._split_size}): {e}"
                )
                continue
            succeeded += 1
            elements.extend(sub.elements)
            warnings.extend(sub.warnings)
            skipped += sub.skipped
            if sub.total is not None:
                total = sub.total
            if sub.is_last():
                exhausted = True
                break

        if succeeded == 0 and last_error is not None:
            raise last_error

        return ElementPage(
            elements=tuple(elements),
            offset=offset,
            limit=self._batch_size,
            total=total,
            has_more=not exhausted,
            skipped=skipped,
            warnings=tuple(warnings),
        )

    async def _attempt(
        self,
        source: IElementSource,
        design_id: str,
        element_filter: ElementFilter | None,
        limit: int,
        offset: int,
    ) -> ElementPage:
        """One request, retried once on transient failure."""
        attempts = 1 + self._max_retries
        for attempt in range(1, attempts + 1):
            try:
                return await source.attempt(design_id, element_filter, limit, offset)
            except ElementFetchError as e:
                logger.warning(
                    "element_tier_request_failed",
                    design_id=design_id,
                    offset=offset,
                    batch_size=limit,
                    tier=source.name,
                    attempt=attempt,
                    error=str(e),
                )
                if not isinstance(e, TransientFetchError) or attempt == attempts:
                    raise
        raise AssertionError("unreachable")

    # =========================================================================
    # Helpers
    # =========================================================================

    def _finish(
        self, source: IElementSource, design_id: str, run: _TierRun
    ) -> ElementRetrievalResult:
        elements = run.elements()
        total = run.total()
        if total is None:
            total = len(elements) + run.skipped()
        return ElementRetrievalResult(
            design_id=design_id,
            elements=elements,
            total_count=total,
            source=source.name,
            is_synthetic=source.is_synthetic,
            truncated=run.truncated,
            cancelled=run.cancelled,
            batches=len(run.pages),
            skipped_count=run.skipped(),
            warnings=tuple(run.warnings),
        )

    def _truncation_warning(self) -> str:
        return (
            f"Batch limit of {self._max_batches} x {self._batch_size} elements reached; "
            "results are truncated"
        )

    @staticmethod
    def _cancel_warning(token: CancellationToken, offset: int) -> str:
        reason = f": {token.reason}" if token.reason else ""
        return f"Retrieval cancelled before offset {offset}{reason}"
