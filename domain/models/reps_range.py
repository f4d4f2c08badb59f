"""
Programmed repetitions value object.

A programmed repetitions spec is stored as a string: either a fixed count
("10") or a min-max range ("8-12"). The presence of the dash selects the
progression mode for the whole lifetime of an exercise chain:

    >>> parse_reps_range("8-12")
    RepsRange(min_reps=8, max_reps=12)
    >>> is_double_progression("8-12")
    True
    >>> format_reps_range(parse_reps_range("10-10"))
    '10'
"""

import logging
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from domain.exceptions import InvalidRepsSpecError

logger = logging.getLogger(__name__)

RANGE_SEPARATOR = "-"


class RepsRange(BaseModel):
    """Inclusive repetition range; min == max for fixed targets."""

    model_config = ConfigDict(frozen=True)

    min_reps: int = Field(..., ge=1)
    max_reps: int = Field(..., ge=1)

    @model_validator(mode="after")
    def check_order(self) -> "RepsRange":
        if self.min_reps > self.max_reps:
            raise ValueError(
                f"min_reps ({self.min_reps}) must not exceed max_reps ({self.max_reps})"
            )
        return self

    @property
    def is_fixed(self) -> bool:
        return self.min_reps == self.max_reps

    def clamp(self, reps: int) -> int:
        """Clamp a repetition count into the range."""
        return max(self.min_reps, min(reps, self.max_reps))


DEFAULT_REPS_RANGE = RepsRange(min_reps=8, max_reps=12)


def _parse_count(raw: str, spec: str) -> int:
    raw = raw.strip()
    if not raw.isdecimal():
        raise InvalidRepsSpecError(f"Invalid repetitions spec: {spec!r}")
    value = int(raw)
    if value < 1:
        raise InvalidRepsSpecError(f"Repetitions must be at least 1: {spec!r}")
    return value


def parse_reps_range(spec: str) -> RepsRange:
    """
    Parse a programmed repetitions spec.

    Args:
        spec: "10" or "8-12" (surrounding whitespace is ignored)

    Returns:
        RepsRange with min == max for fixed specs

    Raises:
        InvalidRepsSpecError: If the spec is empty, non-numeric, below 1,
            or has min greater than max
    """
    if spec is None:
        raise InvalidRepsSpecError("Repetitions spec is missing")

    spec = str(spec)
    if RANGE_SEPARATOR in spec:
        parts = spec.split(RANGE_SEPARATOR)
        if len(parts) != 2:
            raise InvalidRepsSpecError(f"Invalid repetitions range: {spec!r}")
        min_reps = _parse_count(parts[0], spec)
        max_reps = _parse_count(parts[1], spec)
    else:
        min_reps = max_reps = _parse_count(spec, spec)

    if min_reps > max_reps:
        raise InvalidRepsSpecError(f"Range minimum exceeds maximum: {spec!r}")

    return RepsRange(min_reps=min_reps, max_reps=max_reps)


def parse_reps_range_or_default(
    spec: Optional[str],
    default: RepsRange = DEFAULT_REPS_RANGE,
) -> RepsRange:
    """Parse a spec, falling back to ``default`` when it is invalid."""
    try:
        return parse_reps_range(spec)
    except InvalidRepsSpecError as e:
        logger.warning(f"{e.message}; falling back to {format_reps_range(default)}")
        return default


def is_double_progression(spec: Optional[str]) -> bool:
    """True iff the spec is a range (contains a dash)."""
    return spec is not None and RANGE_SEPARATOR in str(spec)


def format_reps_range(reps_range: RepsRange) -> str:
    """Format a range back to its stored string form."""
    if reps_range.is_fixed:
        return str(reps_range.min_reps)
    return f"{reps_range.min_reps}{RANGE_SEPARATOR}{reps_range.max_reps}"
