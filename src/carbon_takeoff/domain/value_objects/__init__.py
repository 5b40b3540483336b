"""Domain Value Objects.

Immutable objects that represent domain concepts without identity.
"""
from __future__ import annotations

from carbon_takeoff.domain.value_objects.design_urn import DesignUrn

__all__ = ["DesignUrn"]
