"""Design metadata and viewability types."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class DesignStatus(str, Enum):
    """Processing status reported by the design catalog."""

    READY = "ready"
    PROCESSING = "processing"
    FAILED = "failed"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: str | None) -> DesignStatus:
        if not value:
            return cls.UNKNOWN
        wanted = value.strip().lower()
        for member in cls:
            if member.value == wanted:
                return member
        return cls.UNKNOWN


class ViewableStatus(str, Enum):
    """Viewability outcome."""

    READY = "ready"
    PROCESSING = "processing"
    FAILED = "failed"
    NOT_VIEWABLE = "not_viewable"


class ProbeOutcome(str, Enum):
    """Result of a non-mutating manifest existence check."""

    EXISTS = "exists"
    ABSENT = "absent"
    INCONCLUSIVE = "inconclusive"


@dataclass(frozen=True)
class DesignInfo:
    """Design metadata from the AEC Data Model catalog."""

    id: str
    name: str
    status: DesignStatus = DesignStatus.UNKNOWN
    source_file_name: str = ""
    units: str | None = None
    project_id: str | None = None

    @property
    def file_extension(self) -> str:
        """Lower-case extension of the source file, without the dot."""
        name = self.source_file_name.strip().lower()
        if "." not in name:
            return ""
        return name.rsplit(".", 1)[-1]

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "status": self.status.value,
            "source_file_name": self.source_file_name,
            "units": self.units,
            "project_id": self.project_id,
        }


@dataclass(frozen=True)
class ViewableModel:
    """Whether a design can be displayed without a new conversion.

    Ephemeral: recomputed on each check.
    """

    design_id: str
    status: ViewableStatus
    message: str
    viewer_urn: str | None = None
    alternative_url: str | None = None

    @property
    def is_viewable(self) -> bool:
        return self.status == ViewableStatus.READY

    def to_dict(self) -> dict[str, Any]:
        return {
            "design_id": self.design_id,
            "status": self.status.value,
            "message": self.message,
            "viewer_urn": self.viewer_urn,
            "alternative_url": self.alternative_url,
            "is_viewable": self.is_viewable,
        }
