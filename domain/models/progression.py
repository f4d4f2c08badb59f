"""
Progression snapshot and result value objects.

A ProgressionSnapshot is assembled fresh for every calculation and is never
persisted. ProgressionResult is what the policy hands back to the
orchestrator for writing onto the next instance.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from domain.models.feedback import Difficulty


class ProgressionType(str, Enum):
    LINEAR = "linear"
    DOUBLE = "dupla"
    BASELINE = "baseline"


@dataclass(frozen=True)
class ProgressionSnapshot:
    """Inputs of one progression calculation."""

    current_weight: float
    programmed_reps: str
    executed_reps: int
    sets: int
    min_increment: float
    target_reps: Optional[int] = None  # reps_programadas
    difficulty: Optional[Difficulty] = None
    fatigue: Optional[float] = None
    pain: Optional[float] = None  # carried, not consumed by any table
    is_first_week: bool = False


@dataclass(frozen=True)
class ProgressionResult:
    """Next-session targets."""

    new_weight: float
    new_reps: str
    new_sets: int
    reps_programadas: Optional[int]
    is_deload: bool = False
    progression_type: ProgressionType = ProgressionType.LINEAR

    def as_update(self) -> dict:
        """Fields written onto the next instance."""
        update = {
            "peso": self.new_weight,
            "series": self.new_sets,
        }
        if self.reps_programadas is not None:
            update["reps_programadas"] = self.reps_programadas
        return update


@dataclass(frozen=True)
class SubstitutionProgressionResult:
    """Result of the series-only policy for substituted instances.

    Weight and reps are never changed for a substituted instance, so they are
    always None here.
    """

    new_series: Optional[int] = None
    new_weight: Optional[float] = None
    new_reps: Optional[str] = None
    apply_changes: bool = False

    def as_update(self) -> dict:
        if not self.apply_changes or self.new_series is None:
            return {}
        return {"series": self.new_series}
