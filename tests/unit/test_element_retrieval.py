"""Tests for batched element retrieval and the fallback ladder."""
from __future__ import annotations

import pytest

from conftest import FakeElementSource, make_element

from carbon_takeoff.application.services.element_retrieval_service import (
    ElementRetrievalService,
)
from carbon_takeoff.domain.exceptions import (
    DesignNotFoundError,
    ElementSourceError,
    ElementSourcesExhaustedError,
    TransientFetchError,
)
from carbon_takeoff.infrastructure.aps.synthetic_source import SyntheticElementSource
from carbon_takeoff.shared.cancellation import CancellationToken


def elements(n: int):
    return [make_element(str(i), "Walls", volume=1) for i in range(n)]


def transient() -> TransientFetchError:
    return TransientFetchError("timeout", source="fake")


class TestPaging:
    """Tests for page iteration."""

    async def test_fetches_until_short_page(self, test_settings) -> None:
        source = FakeElementSource("primary", elements(10))
        result = await ElementRetrievalService([source], test_settings).fetch_all_elements("d1")

        assert [e.id for e in result.elements] == [str(i) for i in range(10)]
        assert result.total_count == 10
        assert result.batches == 3
        assert source.calls == [(0, 4), (4, 4), (8, 4)]
        assert not result.truncated
        assert result.source == "primary"

    async def test_exact_multiple_needs_trailing_empty_page(self, test_settings) -> None:
        source = FakeElementSource("primary", elements(8), report_total=False)
        result = await ElementRetrievalService([source], test_settings).fetch_all_elements("d1")
        assert len(result.elements) == 8
        assert source.calls[-1] == (8, 4)

    async def test_batch_cap_truncates_with_warning(self, test_settings) -> None:
        settings = test_settings.model_copy(update={"element_max_batches": 2})
        source = FakeElementSource("primary", elements(20))
        result = await ElementRetrievalService([source], settings).fetch_all_elements("d1")

        assert len(result.elements) == 8
        assert result.truncated
        assert result.total_count == 20
        assert any("truncated" in w for w in result.warnings)

    async def test_cancellation_before_next_batch(self, test_settings) -> None:
        token = CancellationToken()
        source = FakeElementSource("primary", elements(12))
        original = source.attempt

        async def cancel_after_first(*args, **kwargs):
            page = await original(*args, **kwargs)
            token.cancel("user abort")
            return page

        source.attempt = cancel_after_first
        result = await ElementRetrievalService([source], test_settings).fetch_all_elements(
            "d1", cancel_token=token
        )
        assert result.cancelled
        assert len(result.elements) == 4
        assert any("user abort" in w for w in result.warnings)

    async def test_cancelled_before_start_returns_empty_with_warning(self, test_settings) -> None:
        token = CancellationToken()
        token.cancel()
        source = FakeElementSource("primary", elements(4))
        result = await ElementRetrievalService([source], test_settings).fetch_all_elements(
            "d1", cancel_token=token
        )
        assert result.cancelled
        assert result.elements == ()
        assert result.warnings
        assert source.calls == []


class TestFallbackLadder:
    """Tests for tier fallback."""

    async def test_transient_error_retried_once(self, test_settings) -> None:
        source = FakeElementSource("primary", elements(3), failures={0: [transient()]})
        result = await ElementRetrievalService([source], test_settings).fetch_all_elements("d1")
        assert len(result.elements) == 3
        assert source.calls == [(0, 4), (0, 4)]

    async def test_falls_through_after_retry(self, test_settings) -> None:
        primary = FakeElementSource("primary", elements(3), failures={0: [transient(), transient()]})
        secondary = FakeElementSource("secondary", elements(3))
        result = await ElementRetrievalService(
            [primary, secondary], test_settings
        ).fetch_all_elements("d1")

        assert result.source == "secondary"
        assert len(primary.calls) == 2
        assert any(w.startswith("primary unavailable") for w in result.warnings)

    async def test_non_transient_error_not_retried(self, test_settings) -> None:
        primary = FakeElementSource(
            "primary", failures={0: [ElementSourceError("bad request", source="primary")]}
        )
        secondary = FakeElementSource("secondary", elements(1))
        result = await ElementRetrievalService(
            [primary, secondary], test_settings
        ).fetch_all_elements("d1")
        assert result.source == "secondary"
        assert len(primary.calls) == 1

    async def test_mid_run_failure_returns_partial(self, test_settings) -> None:
        primary = FakeElementSource(
            "primary", elements(10), failures={4: [transient(), transient()]}
        )
        secondary = FakeElementSource("secondary", elements(10))
        result = await ElementRetrievalService(
            [primary, secondary], test_settings
        ).fetch_all_elements("d1")

        assert result.source == "primary"
        assert len(result.elements) == 4
        assert result.is_partial
        assert any("partial" in w for w in result.warnings)
        assert secondary.calls == []

    async def test_design_not_found_is_not_retried(self, test_settings) -> None:
        primary = FakeElementSource("primary", not_found=True)
        secondary = FakeElementSource("secondary", elements(1))
        with pytest.raises(DesignNotFoundError):
            await ElementRetrievalService(
                [primary, secondary], test_settings
            ).fetch_all_elements("missing")
        assert len(primary.calls) == 1
        assert secondary.calls == []

    async def test_all_tiers_failing_raises(self, test_settings) -> None:
        failing = {0: [transient(), transient()]}
        sources = [
            FakeElementSource("primary", failures=dict(failing)),
            FakeElementSource("secondary", failures={0: [transient(), transient()]}),
            SyntheticElementSource(),
        ]
        with pytest.raises(ElementSourcesExhaustedError) as exc_info:
            await ElementRetrievalService(sources, test_settings).fetch_all_elements("d1")
        assert set(exc_info.value.failures) == {"primary", "secondary"}

    async def test_synthetic_tier_is_opt_in_and_flagged(self, test_settings) -> None:
        settings = test_settings.model_copy(update={"allow_synthetic_elements": True})
        sources = [
            FakeElementSource("primary", failures={0: [transient(), transient()]}),
            SyntheticElementSource(element_count=6),
        ]
        result = await ElementRetrievalService(sources, settings).fetch_all_elements("d1")

        assert result.is_synthetic
        assert result.source == "synthetic"
        assert len(result.elements) == 6
        assert any("synthetic" in w for w in result.warnings)


class TestBatchSplitting:
    """Tests for HTTP 413 handling."""

    async def test_rejected_page_is_split(self, test_settings) -> None:
        source = FakeElementSource("primary", elements(6), reject_above=2)
        result = await ElementRetrievalService([source], test_settings).fetch_all_elements("d1")

        assert [e.id for e in result.elements] == [str(i) for i in range(6)]
        assert (0, 2) in source.calls and (2, 2) in source.calls

    async def test_failed_sub_batch_skipped_with_warning(self, test_settings) -> None:
        source = FakeElementSource(
            "primary",
            elements(6),
            reject_above=2,
            failures={2: [ElementSourceError("boom", source="primary")]},
        )
        result = await ElementRetrievalService([source], test_settings).fetch_all_elements("d1")

        assert [e.id for e in result.elements] == ["0", "1", "4", "5"]
        assert any("sub-batch at offset 2" in w for w in result.warnings)


class TestConcurrency:
    async def test_concurrent_pages_are_flattened_in_order(self, test_settings) -> None:
        settings = test_settings.model_copy(update={"element_fetch_concurrency": 3})
        source = FakeElementSource("primary", elements(14))
        result = await ElementRetrievalService([source], settings).fetch_all_elements("d1")

        assert [e.id for e in result.elements] == [str(i) for i in range(14)]
        assert result.batches == 4

    async def test_concurrent_cap(self, test_settings) -> None:
        settings = test_settings.model_copy(
            update={"element_fetch_concurrency": 2, "element_max_batches": 2}
        )
        source = FakeElementSource("primary", elements(20))
        result = await ElementRetrievalService([source], settings).fetch_all_elements("d1")
        assert len(result.elements) == 8
        assert result.truncated
