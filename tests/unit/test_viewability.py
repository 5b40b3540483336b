"""Tests for ViewabilityService."""
from __future__ import annotations

import pytest

from carbon_takeoff.application.services.viewability_service import ViewabilityService
from carbon_takeoff.domain.exceptions import DesignNotFoundError, TransientFetchError
from carbon_takeoff.domain.models import (
    DesignInfo,
    DesignStatus,
    ProbeOutcome,
    ViewableStatus,
)


class FakeCatalog:
    def __init__(self, designs: list[DesignInfo], error: Exception | None = None) -> None:
        self._designs = {d.id: d for d in designs}
        self._error = error

    async def get_design(self, project_id: str, design_id: str) -> DesignInfo:
        if self._error is not None:
            raise self._error
        if design_id not in self._designs:
            raise DesignNotFoundError(design_id)
        return self._designs[design_id]

    async def list_designs(self, project_id: str) -> list[DesignInfo]:
        return list(self._designs.values())


class FakeProbe:
    def __init__(self, outcome: ProbeOutcome = ProbeOutcome.ABSENT) -> None:
        self.outcome = outcome
        self.calls: list[str] = []

    async def probe(self, viewer_urn: str) -> ProbeOutcome:
        self.calls.append(viewer_urn)
        return self.outcome


def design(design_id: str, status: DesignStatus, file_name: str = "model.rvt") -> DesignInfo:
    return DesignInfo(id=design_id, name=design_id, status=status, source_file_name=file_name)


class TestResolveViewability:
    async def test_processing_design_is_never_probed(self) -> None:
        """A design still processing is reported without touching the manifest."""
        probe = FakeProbe(ProbeOutcome.EXISTS)
        service = ViewabilityService(FakeCatalog([design("d1", DesignStatus.PROCESSING)]), probe)

        model = await service.resolve_viewability("p1", "d1")

        assert model.status == ViewableStatus.NOT_VIEWABLE
        assert "processing" in model.message
        assert probe.calls == []

    async def test_failed_design(self) -> None:
        probe = FakeProbe()
        service = ViewabilityService(FakeCatalog([design("d1", DesignStatus.FAILED)]), probe)

        model = await service.resolve_viewability("p1", "d1")

        assert model.status == ViewableStatus.FAILED
        assert probe.calls == []

    async def test_existing_manifest_gives_viewer_urn(self) -> None:
        probe = FakeProbe(ProbeOutcome.EXISTS)
        service = ViewabilityService(FakeCatalog([design("d1", DesignStatus.READY)]), probe)

        model = await service.resolve_viewability("p1", "d1")

        assert model.status == ViewableStatus.READY
        assert model.viewer_urn == "urn:adsk.viewing:fs.file:d1"
        assert model.alternative_url is None
        assert probe.calls == ["urn:adsk.viewing:fs.file:d1"]

    async def test_native_format_gives_alternative_url(self) -> None:
        probe = FakeProbe(ProbeOutcome.ABSENT)
        catalog = FakeCatalog([design("d 1", DesignStatus.READY, "Site.IFC")])
        service = ViewabilityService(catalog, probe)

        model = await service.resolve_viewability("p1", "d 1")

        assert model.status == ViewableStatus.READY
        assert model.viewer_urn is None
        assert model.alternative_url == "/viewer/native?design=d%201"

    async def test_inconclusive_probe_without_native_format(self) -> None:
        probe = FakeProbe(ProbeOutcome.INCONCLUSIVE)
        service = ViewabilityService(FakeCatalog([design("d1", DesignStatus.READY)]), probe)

        model = await service.resolve_viewability("p1", "d1")

        assert model.status == ViewableStatus.NOT_VIEWABLE
        assert not model.is_viewable

    async def test_unknown_status_skips_probe(self) -> None:
        probe = FakeProbe(ProbeOutcome.EXISTS)
        catalog = FakeCatalog([design("d1", DesignStatus.UNKNOWN, "a.dwg")])
        service = ViewabilityService(catalog, probe)

        model = await service.resolve_viewability("p1", "d1")

        assert probe.calls == []
        assert model.alternative_url is not None

    async def test_unknown_design_raises(self) -> None:
        service = ViewabilityService(FakeCatalog([]), FakeProbe())
        with pytest.raises(DesignNotFoundError):
            await service.resolve_viewability("p1", "missing")

    async def test_catalog_outage_is_reported_as_failed(self) -> None:
        catalog = FakeCatalog([], error=TransientFetchError("down", source="design_catalog"))
        service = ViewabilityService(catalog, FakeProbe())

        model = await service.resolve_viewability("p1", "d1")

        assert model.status == ViewableStatus.FAILED
        assert "down" in model.message


class TestListViewableDesigns:
    async def test_keeps_only_viewable(self) -> None:
        catalog = FakeCatalog([
            design("a", DesignStatus.READY),
            design("b", DesignStatus.PROCESSING),
            design("c", DesignStatus.READY, "c.ifc"),
            design("d", DesignStatus.FAILED),
        ])
        probe = FakeProbe(ProbeOutcome.ABSENT)
        service = ViewabilityService(catalog, probe, native_viewer_path="/native")

        models = await service.list_viewable_designs("p1")

        assert [m.design_id for m in models] == ["c"]
        assert models[0].alternative_url == "/native?design=c"
