"""
Step results for progression orchestration.

Every orchestration step returns a StepResult instead of raising, so callers
and tests can assert on failures without relying on log output:

    >>> result = locator.find_next(chain, program_id, exclude_instance_id="ex-1")
    >>> if not result.ok:
    ...     print(result.error.code)
"""

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from domain.exceptions import ProgressionError

T = TypeVar("T")


@dataclass(frozen=True)
class StepResult(Generic[T]):
    """Either a value or a ProgressionError."""

    value: Optional[T] = None
    error: Optional[ProgressionError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: Optional[T] = None) -> "StepResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: ProgressionError) -> "StepResult[T]":
        return cls(error=error)

    def unwrap(self) -> T:
        """Return the value or raise the carried error."""
        if self.error is not None:
            raise self.error
        return self.value
