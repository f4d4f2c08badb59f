"""
Domain models for the progression engine.

This package contains pure domain models that are independent of
infrastructure concerns (database, API, external services).

These models represent the core business concepts:
- ExerciseInstance: One occurrence of an exercise inside a user's workout
- ExerciseSet: A set logged against an instance
- ChainIdentity: What ties occurrences of the same exercise together
- RepsRange: Parsed programmed repetitions ("10" or "8-12")
- Difficulty: Self-reported difficulty of a completed exercise
- ProgressionSnapshot / ProgressionResult: Inputs and outputs of the policy

Usage:
    >>> from domain.models import parse_reps_range, Difficulty

    >>> parse_reps_range("8-12")
    RepsRange(min_reps=8, max_reps=12)

    >>> Difficulty.parse("Muito Fácil")
    <Difficulty.MUITO_FACIL: 'muito_facil'>
"""

from domain.models.chain_identity import ChainIdentity, ChainKind
from domain.models.exercise_instance import ExerciseInstance, ExerciseSet
from domain.models.feedback import Difficulty
from domain.models.progression import (
    ProgressionResult,
    ProgressionSnapshot,
    ProgressionType,
    SubstitutionProgressionResult,
)
from domain.models.reps_range import (
    DEFAULT_REPS_RANGE,
    RepsRange,
    format_reps_range,
    is_double_progression,
    parse_reps_range,
    parse_reps_range_or_default,
)

__all__ = [
    # Main entities
    "ExerciseInstance",
    "ExerciseSet",
    "ChainIdentity",
    "RepsRange",
    # Progression value objects
    "ProgressionSnapshot",
    "ProgressionResult",
    "SubstitutionProgressionResult",
    # Enums
    "ChainKind",
    "Difficulty",
    "ProgressionType",
    # Repetition ranges
    "DEFAULT_REPS_RANGE",
    "parse_reps_range",
    "parse_reps_range_or_default",
    "format_reps_range",
    "is_double_progression",
]
