"""
Baseline repetitions for the first week of an exercise chain.

The first time a chain is completed there is no tracked target yet
(reps_programadas is None). The baseline is taken from the weakest completed
set, the safe and repeatable level, and persisted as the tracked target.

Fallback chain:
1. Worst completed set of the instance itself
2. Worst completed set of the most recent completed instance of the chain
3. Minimum of the programmed range
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from application.ports.exercise_instance_repository import ExerciseInstanceRepository
from application.result import StepResult
from backend.core.next_instance_locator import NextInstanceLocator
from backend.core.progression_policy import baseline_target
from domain.converters.db_converters import db_rows_to_exercise_sets
from domain.exceptions import ExerciseLookupError, ProgressionWriteError, StoreError
from domain.models.exercise_instance import ExerciseInstance, ExerciseSet
from domain.models.reps_range import parse_reps_range_or_default

logger = logging.getLogger(__name__)


class BaselineSource(str, Enum):
    EXISTING = "existing"
    WORST_SET = "worst_set"
    PREVIOUS_SESSION = "previous_session"
    PROGRAMMED_MINIMUM = "programmed_minimum"


@dataclass(frozen=True)
class BaselineResolution:
    reps_programadas: int
    source: BaselineSource


# =============================================================================
# Set selection
# =============================================================================


def _completed(sets: List[ExerciseSet]) -> List[ExerciseSet]:
    return [s for s in sets if s.concluida and s.repeticoes > 0]


def select_worst_set(sets: List[ExerciseSet]) -> Optional[ExerciseSet]:
    """
    Completed set with the fewest reps.

    Ties go to the lowest set number so the result is reproducible.
    """
    completed = _completed(sets)
    if not completed:
        return None
    return min(completed, key=lambda s: (s.repeticoes, s.numero_serie))


def select_best_set(sets: List[ExerciseSet]) -> Optional[ExerciseSet]:
    """Completed set with the most reps; ties go to the lowest set number."""
    completed = _completed(sets)
    if not completed:
        return None
    return min(completed, key=lambda s: (-s.repeticoes, s.numero_serie))


# =============================================================================
# Resolver
# =============================================================================


class BaselineResolver:
    """
    Establishes reps_programadas the first time a chain is completed.

    Dependencies are injected via constructor for testability.
    """

    def __init__(
        self,
        instance_repo: ExerciseInstanceRepository,
        locator: Optional[NextInstanceLocator] = None,
    ):
        self._instance_repo = instance_repo
        self._locator = locator or NextInstanceLocator(instance_repo)

    def resolve_baseline(self, instance_id: str) -> StepResult[BaselineResolution]:
        """
        Resolve and persist the baseline target of an instance.

        An instance that already tracks a target is returned as is, without
        writing, so calling this twice yields the same result.

        Args:
            instance_id: Instance whose baseline is established

        Returns:
            StepResult with the resolved target and where it came from
        """
        loaded = self._locator.load_instance(instance_id)
        if not loaded.ok:
            return StepResult.failure(loaded.error)
        instance = loaded.value

        if instance.reps_programadas is not None:
            return StepResult.success(
                BaselineResolution(instance.reps_programadas, BaselineSource.EXISTING)
            )

        determined = self.determine_baseline(instance)
        if not determined.ok:
            return determined
        resolution = determined.value

        try:
            self._instance_repo.update(instance_id, {"reps_programadas": resolution.reps_programadas})
        except StoreError as e:
            logger.error(f"Failed to save baseline for instance {instance_id}: {e}")
            return StepResult.failure(
                ProgressionWriteError(f"Could not save baseline for {instance_id}", instance_id=instance_id)
            )

        logger.info(
            f"Baseline reps_programadas={resolution.reps_programadas} "
            f"({resolution.source.value}) saved for instance {instance_id}"
        )
        return StepResult.success(resolution)

    def determine_baseline(self, instance: ExerciseInstance) -> StepResult[BaselineResolution]:
        """Walk the fallback chain without writing anything."""
        try:
            return StepResult.success(self._walk_fallbacks(instance))
        except StoreError as e:
            logger.error(f"Failed to read sets for baseline of instance {instance.id}: {e}")
            return StepResult.failure(
                ExerciseLookupError(f"Could not read sets for {instance.id}", instance_id=instance.id)
            )

    def _walk_fallbacks(self, instance: ExerciseInstance) -> BaselineResolution:
        reps_range = parse_reps_range_or_default(instance.repeticoes)

        worst = select_worst_set(self._read_sets(instance.id))
        if worst is not None:
            return BaselineResolution(
                baseline_target(worst.repeticoes, reps_range), BaselineSource.WORST_SET
            )

        previous = self._previous_session_worst_set(instance)
        if previous is not None:
            return BaselineResolution(
                baseline_target(previous.repeticoes, reps_range), BaselineSource.PREVIOUS_SESSION
            )

        return BaselineResolution(reps_range.min_reps, BaselineSource.PROGRAMMED_MINIMUM)

    def _read_sets(self, instance_id: str) -> List[ExerciseSet]:
        return db_rows_to_exercise_sets(self._instance_repo.get_sets(instance_id))

    def _previous_session_worst_set(self, instance: ExerciseInstance) -> Optional[ExerciseSet]:
        chain = instance.chain_identity
        if not chain.is_chainable or not instance.programa_usuario_id:
            return None

        previous = self._locator.find_previous_completed(
            chain,
            instance.programa_usuario_id,
            current_instance_id=instance.id,
        )
        if not previous.ok or previous.value is None:
            return None
        return select_worst_set(self._read_sets(previous.value.id))
