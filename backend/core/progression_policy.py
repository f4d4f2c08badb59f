"""
Progression policy for autoregressive progressive overload.

This module provides the pure decision tables that turn the outcome of a
completed exercise into the targets of the next occurrence of the same
exercise:
- Linear progression for fixed repetition targets ("10")
- Double progression for repetition ranges ("8-12")
- Baseline establishment on the first week of a chain
- Series-only adjustment for instances substituted for a single session

Nothing here touches the store; see application.use_cases for orchestration.
"""
import logging
from typing import Optional

from domain.models.exercise_instance import ExerciseInstance
from domain.models.feedback import Difficulty, HIGH_FATIGUE_MIN, LOW_FATIGUE_MAX
from domain.models.progression import (
    ProgressionResult,
    ProgressionSnapshot,
    ProgressionType,
    SubstitutionProgressionResult,
)
from domain.models.reps_range import (
    RepsRange,
    format_reps_range,
    is_double_progression,
    parse_reps_range_or_default,
)

logger = logging.getLogger(__name__)

DEFAULT_MINIMUM_INCREMENT = 2.5
MAX_SUBSTITUTION_SERIES = 5
MIN_SERIES = 1


# =============================================================================
# Helpers
# =============================================================================


def resolve_minimum_increment(
    explicit: Optional[float],
    inherited: Optional[float] = None,
    default: float = DEFAULT_MINIMUM_INCREMENT,
) -> float:
    """
    Pick the minimum increment for a calculation.

    Order: the instance's own value, then a value inherited from another
    instance of the same chain in the same program, then the default.
    """
    for candidate in (explicit, inherited):
        if candidate is not None and candidate > 0:
            return float(candidate)
    return float(default)


def _apply_weight_change(current_weight: float, delta: float) -> float:
    """Add delta to the weight, never going below zero."""
    return round(max(0.0, current_weight + delta), 2)


def baseline_target(executed_reps: Optional[int], reps_range: RepsRange) -> int:
    """
    Tracked target established on the first week of a chain.

    The executed repetitions (worst completed set) clamped into the
    programmed range; the range minimum when nothing was executed.
    """
    if not executed_reps or executed_reps < 1:
        return reps_range.min_reps
    return reps_range.clamp(executed_reps)


# =============================================================================
# Decision tables
# =============================================================================


def compute_linear_progression(
    current_weight: float,
    target_reps: int,
    executed_reps: int,
    difficulty: Optional[Difficulty],
    increment: float,
) -> tuple:
    """
    Linear progression for a fixed repetition target.

    The weight only moves once the target was reached; below the target the
    user repeats the same session.

    Returns:
        (new_weight, is_deload)
    """
    if executed_reps < target_reps or difficulty is None:
        return round(max(0.0, current_weight), 2), False

    if difficulty is Difficulty.MUITO_FACIL:
        return _apply_weight_change(current_weight, 2 * increment), False
    if difficulty in (Difficulty.FACIL, Difficulty.MODERADO):
        return _apply_weight_change(current_weight, increment), False
    if difficulty is Difficulty.DIFICIL:
        return round(max(0.0, current_weight), 2), False
    # MUITO_DIFICIL
    return _apply_weight_change(current_weight, -increment), True


def compute_double_progression(
    current_weight: float,
    reps_range: RepsRange,
    target_reps: int,
    executed_reps: int,
    difficulty: Optional[Difficulty],
    increment: float,
) -> tuple:
    """
    Double progression over a repetition range.

    Reps climb one at a time towards the top of the range; once the top is
    reached the weight goes up and the target resets to the bottom.

    Returns:
        (new_weight, new_target_reps, is_deload); new_target_reps is always
        within the range
    """
    low, high = reps_range.min_reps, reps_range.max_reps
    target = reps_range.clamp(target_reps)
    weight = round(max(0.0, current_weight), 2)

    if difficulty is None or difficulty is Difficulty.DIFICIL:
        return weight, target, False

    if difficulty is Difficulty.MUITO_FACIL:
        return _apply_weight_change(current_weight, 2 * increment), low, False

    if difficulty is Difficulty.FACIL:
        if executed_reps >= high - 1:
            return _apply_weight_change(current_weight, increment), low, False
        return weight, min(target + 1, high), False

    if difficulty is Difficulty.MODERADO:
        if executed_reps >= high:
            return _apply_weight_change(current_weight, increment), low, False
        if executed_reps >= target:
            return weight, min(target + 1, high), False
        return weight, target, False

    # MUITO_DIFICIL
    return _apply_weight_change(current_weight, -increment), max(low, target - 1), True


def compute_progression(snapshot: ProgressionSnapshot) -> ProgressionResult:
    """
    Compute the next-session targets for an exercise chain.

    Sets always pass through unchanged; pain feedback is carried on the
    snapshot but no table consumes it.

    Args:
        snapshot: Inputs of the calculation

    Returns:
        ProgressionResult with weight, display reps, tracked target and sets
    """
    double = is_double_progression(snapshot.programmed_reps)
    reps_range = parse_reps_range_or_default(snapshot.programmed_reps)
    if not double and not reps_range.is_fixed:
        # Invalid fixed spec fell back to the default range: hold the range minimum
        reps_range = RepsRange(min_reps=reps_range.min_reps, max_reps=reps_range.min_reps)
    display_reps = format_reps_range(reps_range)
    current_weight = max(0.0, snapshot.current_weight or 0.0)
    sets = max(MIN_SERIES, snapshot.sets)

    if snapshot.is_first_week or snapshot.target_reps is None:
        target = baseline_target(snapshot.executed_reps, reps_range)
        logger.info(f"First week: baseline target {target} for {display_reps}")
        return ProgressionResult(
            new_weight=round(current_weight, 2),
            new_reps=display_reps,
            new_sets=sets,
            reps_programadas=target,
            is_deload=False,
            progression_type=ProgressionType.BASELINE,
        )

    if double:
        new_weight, new_target, is_deload = compute_double_progression(
            current_weight,
            reps_range,
            snapshot.target_reps,
            snapshot.executed_reps,
            snapshot.difficulty,
            snapshot.min_increment,
        )
        progression_type = ProgressionType.DOUBLE
    else:
        new_target = reps_range.min_reps
        new_weight, is_deload = compute_linear_progression(
            current_weight,
            new_target,
            snapshot.executed_reps,
            snapshot.difficulty,
            snapshot.min_increment,
        )
        progression_type = ProgressionType.LINEAR

    return ProgressionResult(
        new_weight=new_weight,
        new_reps=display_reps,
        new_sets=sets,
        reps_programadas=new_target,
        is_deload=is_deload,
        progression_type=progression_type,
    )


# =============================================================================
# Substituted instances
# =============================================================================


def should_use_substitution_progression(instance: ExerciseInstance) -> bool:
    """
    True when the instance was swapped for another exercise this session only.

    The session flag alone is not enough; a substitute must be recorded.
    """
    has_substitute = bool(
        instance.substituto_oficial_id
        or instance.substituto_custom_id
        or instance.substituto_nome
    )
    return bool(instance.substituicao_neste_treino) and has_substitute


def compute_substitution_progression(
    current_series: int,
    fatigue: Optional[float],
    max_series: int = MAX_SUBSTITUTION_SERIES,
) -> SubstitutionProgressionResult:
    """
    Series-only progression for a substituted instance.

    Low fatigue adds a set (capped), high fatigue removes one (floored at 1),
    moderate or missing fatigue keeps it. Weight and reps are frozen.
    """
    new_series = current_series
    if fatigue is not None:
        if fatigue <= LOW_FATIGUE_MAX:
            new_series = min(current_series + 1, max_series)
        elif fatigue >= HIGH_FATIGUE_MIN:
            new_series = max(current_series - 1, MIN_SERIES)

    changed = new_series != current_series
    return SubstitutionProgressionResult(
        new_series=new_series if changed else None,
        new_weight=None,
        new_reps=None,
        apply_changes=changed,
    )
