"""Tests for domain value objects."""
from __future__ import annotations

import pytest

from carbon_takeoff.domain.value_objects import DesignUrn


class TestDesignUrn:
    """Tests for DesignUrn value object."""

    def test_valid_urn(self) -> None:
        """Test creating valid DesignUrn."""
        urn = DesignUrn("urn:dXJuOmFkc2s")
        assert str(urn) == "urn:dXJuOmFkc2s"
        assert urn.body == "dXJuOmFkc2s"

    def test_empty_urn_rejected(self) -> None:
        with pytest.raises(ValueError, match="cannot be empty"):
            DesignUrn("  ")

    def test_missing_prefix_rejected(self) -> None:
        with pytest.raises(ValueError, match="Invalid DesignUrn format"):
            DesignUrn("dXJuOmFkc2s")

    def test_for_viewer_builds_viewing_urn(self) -> None:
        """Test candidate viewer URN for a plain design id."""
        assert DesignUrn.for_viewer("abc123").value == "urn:adsk.viewing:fs.file:abc123"

    def test_for_viewer_keeps_existing_urn(self) -> None:
        assert DesignUrn.for_viewer("urn:abc").value == "urn:abc"

    def test_manifest_key_is_path_safe(self) -> None:
        urn = DesignUrn.for_viewer("a/b")
        assert "/" not in urn.manifest_key
        assert ":" not in urn.manifest_key

    def test_equality(self) -> None:
        assert DesignUrn("urn:x") == DesignUrn("urn:x")

    def test_from_string(self) -> None:
        assert DesignUrn.from_string("urn:x") == DesignUrn("urn:x")
        assert DesignUrn.from_string("invalid") is None
        assert DesignUrn.from_string(None) is None
