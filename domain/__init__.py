"""
Domain layer for the progression engine.

This package contains pure domain models that are independent of
infrastructure concerns (database, API, external services).
"""

from domain.models import (
    ChainIdentity,
    Difficulty,
    ExerciseInstance,
    ExerciseSet,
    ProgressionResult,
    ProgressionSnapshot,
    RepsRange,
)

__all__ = [
    "ChainIdentity",
    "Difficulty",
    "ExerciseInstance",
    "ExerciseSet",
    "ProgressionResult",
    "ProgressionSnapshot",
    "RepsRange",
]
