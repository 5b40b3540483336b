"""Repository implementations."""
from carbon_takeoff.infrastructure.repositories.in_memory import (
    InMemoryCarbonResultRepository,
    InMemoryTakeoffRepository,
)

__all__ = ["InMemoryCarbonResultRepository", "InMemoryTakeoffRepository"]
