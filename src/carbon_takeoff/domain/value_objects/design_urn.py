"""Design URN Value Object.

Designs are addressed by Autodesk URNs. The Model Derivative service expects
the URN body without the ``urn:`` scheme prefix.
"""
from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import quote

URN_PREFIX = "urn:"
VIEWER_URN_PREFIX = "urn:adsk.viewing:fs.file:"


@dataclass(frozen=True, slots=True)
class DesignUrn:
    """Value Object for a design URN.

    Attributes:
        value: Full URN including the ``urn:`` prefix

    Example:
        >>> DesignUrn.for_viewer("abc123").value
        'urn:adsk.viewing:fs.file:abc123'
        >>> DesignUrn("urn:dXJuOmFkc2s").body
        'dXJuOmFkc2s'
    """

    value: str

    def __post_init__(self) -> None:
        """Validate URN format."""
        if not self.value or not self.value.strip():
            raise ValueError("DesignUrn cannot be empty")
        if not self.value.startswith(URN_PREFIX):
            raise ValueError(f"Invalid DesignUrn format: '{self.value}'. Must start with 'urn:'")

    def __str__(self) -> str:
        return self.value

    @property
    def body(self) -> str:
        """URN without the ``urn:`` prefix."""
        return self.value[len(URN_PREFIX):]

    @property
    def manifest_key(self) -> str:
        """Path-safe key for Model Derivative manifest lookups."""
        return quote(self.body, safe="")

    @classmethod
    def for_viewer(cls, design_id: str) -> DesignUrn:
        """Build a candidate viewer URN for a design id.

        Ids that already are URNs are kept as they are.
        """
        design_id = design_id.strip()
        if design_id.startswith(URN_PREFIX):
            return cls(design_id)
        return cls(f"{VIEWER_URN_PREFIX}{design_id}")

    @classmethod
    def from_string(cls, value: str | None) -> DesignUrn | None:
        """Create DesignUrn from string, returning None if invalid."""
        if not value:
            return None
        try:
            return cls(value)
        except ValueError:
            return None
