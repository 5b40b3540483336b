"""Result values for operations whose failure is an expected outcome.

The retrieval ladder treats a failing tier as data: the tier returns a
``Failure`` and the next tier runs. Only fatal errors are raised.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E", bound=Exception)


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T

    def is_failure(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Failure(Generic[E]):
    """Expected failure carrying the exception that caused it."""

    error: E

    def is_failure(self) -> bool:
        return True

    def unwrap(self):
        """Re-raise the carried exception."""
        raise self.error


Result = Union[Success[T], Failure[E]]


def ok(value: T) -> Success[T]:
    return Success(value)


def err(error: E) -> Failure[E]:
    return Failure(error)
