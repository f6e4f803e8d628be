"""Result type for per-item operations that may succeed or fail."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    """Outcome of a single item in a batch: a value or a human-readable error."""

    value: T | None = None
    error: str | None = None

    @property
    def is_success(self) -> bool:
        return self.error is None

    @property
    def is_error(self) -> bool:
        return self.error is not None

    @classmethod
    def success(cls, value: T) -> Result[T]:
        return cls(value=value, error=None)

    @classmethod
    def failure(cls, error: str) -> Result[T]:
        return cls(value=None, error=error)

    def unwrap(self) -> T:
        """Unwrap the value, raising if error."""
        if self.is_error:
            raise ValueError(f"Cannot unwrap error result: {self.error}")
        return self.value  # type: ignore[return-value]


def partition_results(results: Iterable[Result[T]]) -> tuple[list[T], list[str]]:
    """Split results into successful values and error messages, preserving order."""
    values: list[T] = []
    errors: list[str] = []
    for result in results:
        if result.is_error:
            errors.append(result.error or "")
        else:
            values.append(result.unwrap())
    return values, errors
