"""
PrecomputeProgression Use Case.

Runs once feedback has been captured for a just-finished exercise instance:
computes the targets of the next occurrence of the same exercise and writes
them onto that next instance, so the future session already shows suggested
numbers when the user opens it.

A failed precomputation never fails the caller. Every step yields a
StepResult; failures are logged and returned on the result.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from application.ports.exercise_instance_repository import ExerciseInstanceRepository
from application.result import StepResult
from backend.core.baseline_resolver import (
    BaselineResolution,
    BaselineResolver,
    select_best_set,
)
from backend.core.next_instance_locator import NextInstanceLocator, resolve_chain_identity
from backend.core.progression_policy import (
    DEFAULT_MINIMUM_INCREMENT,
    MAX_SUBSTITUTION_SERIES,
    compute_progression,
    compute_substitution_progression,
    resolve_minimum_increment,
    should_use_substitution_progression,
)
from domain.converters.db_converters import db_rows_to_exercise_sets
from domain.exceptions import (
    AmbiguousChainIdentityError,
    ExerciseLookupError,
    ProgressionError,
    ProgressionWriteError,
    StoreError,
)
from domain.models.chain_identity import ChainIdentity
from domain.models.exercise_instance import ExerciseInstance
from domain.models.feedback import Difficulty
from domain.models.progression import ProgressionResult, ProgressionSnapshot

logger = logging.getLogger(__name__)


@dataclass
class PrecomputeProgressionResult:
    """Outcome of one precomputation run."""

    success: bool
    instance_id: str
    next_instance_id: Optional[str] = None
    is_first_week: Optional[bool] = None
    progression: Optional[ProgressionResult] = None
    written: Dict[str, Any] = field(default_factory=dict)
    skipped_reason: Optional[str] = None
    error: Optional[ProgressionError] = None

    @property
    def precomputed(self) -> bool:
        return self.success and bool(self.written)


class ProgressionOrchestrator:
    """
    Use case tying baseline resolution, the progression policy and next
    instance lookup together.

    Orchestrates the following workflow:
    1. Load the completed instance
    2. Resolve its chain identity (none -> skipped)
    3. Locate the next pending instance of the chain (none -> skipped)
    4. Decide first week vs steady state
    5. Assemble the snapshot (baseline or tracked target + executed reps)
    6. Apply the progression policy
    7. Write weight, sets and tracked target onto the next instance

    Substituted instances take the series-only policy instead.

    Usage:
        >>> orchestrator = ProgressionOrchestrator(instance_repo=repo)
        >>> result = orchestrator.on_exercise_completed(
        ...     "ex-1", Difficulty.MODERADO, fatigue=3,
        ... )
        >>> if result.precomputed:
        ...     print(f"Next session: {result.written}")
    """

    def __init__(
        self,
        instance_repo: ExerciseInstanceRepository,
        *,
        default_increment: float = DEFAULT_MINIMUM_INCREMENT,
        max_substitution_series: int = MAX_SUBSTITUTION_SERIES,
    ) -> None:
        """
        Args:
            instance_repo: Repository for exercise instances and sets
            default_increment: Increment used when none is configured for the chain
            max_substitution_series: Set cap for the substitution policy
        """
        self._instance_repo = instance_repo
        self._locator = NextInstanceLocator(instance_repo)
        self._baseline_resolver = BaselineResolver(instance_repo, self._locator)
        self._default_increment = default_increment
        self._max_substitution_series = max_substitution_series

    def on_exercise_completed(
        self,
        instance_id: str,
        difficulty: Optional[Difficulty],
        fatigue: Optional[float],
        pain: Optional[float] = None,
    ) -> PrecomputeProgressionResult:
        """
        Precompute the next occurrence of a just-completed instance.

        Args:
            instance_id: Instance that was just completed
            difficulty: Captured difficulty feedback
            fatigue: Captured fatigue rating
            pain: Captured pain rating (currently not used by the policy)

        Returns:
            PrecomputeProgressionResult; never raises for store failures
        """
        try:
            return self._run(instance_id, difficulty, fatigue, pain)
        except StoreError as e:
            logger.exception(f"Unexpected store failure precomputing {instance_id}: {e}")
            return self._failed(
                instance_id,
                ExerciseLookupError(f"Store failure while precomputing {instance_id}", instance_id=instance_id),
            )

    def _run(
        self,
        instance_id: str,
        difficulty: Optional[Difficulty],
        fatigue: Optional[float],
        pain: Optional[float],
    ) -> PrecomputeProgressionResult:
        # Step 1: Load the completed instance
        loaded = self._locator.load_instance(instance_id)
        if not loaded.ok:
            return self._failed(instance_id, loaded.error)
        current = loaded.value

        # Step 2: Chain identity
        chain = resolve_chain_identity(current)
        if not chain.is_chainable:
            logger.info(f"Instance {instance_id} has no chain identity; nothing to precompute")
            return PrecomputeProgressionResult(
                success=True,
                instance_id=instance_id,
                skipped_reason=AmbiguousChainIdentityError.code,
            )

        program_id = current.programa_usuario_id
        if not program_id:
            return self._failed(
                instance_id,
                ExerciseLookupError(f"Instance {instance_id} has no program enrollment", instance_id=instance_id),
            )

        # Step 3: Next pending instance
        located = self._locator.find_next(chain, program_id, exclude_instance_id=instance_id)
        if not located.ok:
            return self._failed(instance_id, located.error)
        next_instance = located.value
        if next_instance is None:
            return PrecomputeProgressionResult(
                success=True,
                instance_id=instance_id,
                skipped_reason="no_next_instance",
            )

        # Substituted this session only: series may move, weight and reps stay frozen
        if should_use_substitution_progression(current):
            return self._precompute_substitution(current, next_instance, fatigue)

        # Step 4: First week?
        first = self._locator.is_first_occurrence(chain, program_id, instance_id)
        if not first.ok:
            return self._failed(instance_id, first.error)
        is_first_week = first.value

        # An earlier precomputation that never wrote a target leaves the chain
        # with history but no tracked reps; the baseline is resolved again
        needs_baseline = is_first_week or current.reps_programadas is None
        if needs_baseline and not is_first_week:
            logger.info(f"Instance {instance_id} has history but no tracked target; resolving baseline")

        # Step 5: Snapshot
        snapshot_result = self._build_snapshot(
            current, chain, program_id, needs_baseline, difficulty, fatigue, pain
        )
        if not snapshot_result.ok:
            return self._failed(instance_id, snapshot_result.error, is_first_week=is_first_week)
        snapshot = snapshot_result.value

        # Step 6: Policy
        progression = compute_progression(snapshot)
        logger.info(
            f"Progression for {current.nome or instance_id} ({progression.progression_type.value}): "
            f"peso={progression.new_weight} series={progression.new_sets} "
            f"reps_programadas={progression.reps_programadas} deload={progression.is_deload}"
        )

        # Step 7: Write onto the next instance
        update = progression.as_update()
        written = self._write(next_instance.id, update)
        if not written.ok:
            return self._failed(
                instance_id,
                written.error,
                next_instance_id=next_instance.id,
                is_first_week=is_first_week,
                progression=progression,
            )

        return PrecomputeProgressionResult(
            success=True,
            instance_id=instance_id,
            next_instance_id=next_instance.id,
            is_first_week=is_first_week,
            progression=progression,
            written=update,
        )

    def _build_snapshot(
        self,
        current: ExerciseInstance,
        chain: ChainIdentity,
        program_id: str,
        needs_baseline: bool,
        difficulty: Optional[Difficulty],
        fatigue: Optional[float],
        pain: Optional[float],
    ) -> StepResult[ProgressionSnapshot]:
        increment = self._minimum_increment(current, chain, program_id)

        if needs_baseline:
            baseline = self._baseline_resolver.resolve_baseline(current.id)
            if not baseline.ok:
                return StepResult.failure(baseline.error)
            resolution: BaselineResolution = baseline.value
            executed_reps = resolution.reps_programadas
            target_reps = None
        else:
            try:
                sets = db_rows_to_exercise_sets(self._instance_repo.get_sets(current.id))
            except StoreError as e:
                logger.error(f"Failed to read sets of instance {current.id}: {e}")
                return StepResult.failure(
                    ExerciseLookupError(f"Could not read sets of {current.id}", instance_id=current.id)
                )
            target_reps = current.reps_programadas
            best = select_best_set(sets)
            if best is not None:
                executed_reps = best.repeticoes
            else:
                executed_reps = target_reps or 0

        return StepResult.success(
            ProgressionSnapshot(
                current_weight=current.peso or 0.0,
                programmed_reps=current.repeticoes or "",
                executed_reps=executed_reps,
                sets=current.series,
                min_increment=increment,
                target_reps=target_reps,
                difficulty=difficulty,
                fatigue=fatigue,
                pain=pain,
                is_first_week=needs_baseline,
            )
        )

    def _minimum_increment(
        self,
        current: ExerciseInstance,
        chain: ChainIdentity,
        program_id: str,
    ) -> float:
        inherited = None
        if current.incremento_minimo is None:
            try:
                inherited = self._instance_repo.find_chain_increment(chain, program_id)
            except StoreError as e:
                logger.warning(f"Could not look up chain increment for {chain}: {e}; using default")
        return resolve_minimum_increment(current.incremento_minimo, inherited, self._default_increment)

    def _precompute_substitution(
        self,
        current: ExerciseInstance,
        next_instance: ExerciseInstance,
        fatigue: Optional[float],
    ) -> PrecomputeProgressionResult:
        substitution = compute_substitution_progression(
            current.series,
            fatigue,
            max_series=self._max_substitution_series,
        )
        update = substitution.as_update()
        if not update:
            logger.info(f"Substituted instance {current.id}: series unchanged")
            return PrecomputeProgressionResult(
                success=True,
                instance_id=current.id,
                next_instance_id=next_instance.id,
                skipped_reason="substitution_unchanged",
            )

        written = self._write(next_instance.id, update)
        if not written.ok:
            return self._failed(current.id, written.error, next_instance_id=next_instance.id)

        logger.info(f"Substituted instance {current.id}: next series -> {substitution.new_series}")
        return PrecomputeProgressionResult(
            success=True,
            instance_id=current.id,
            next_instance_id=next_instance.id,
            written=update,
        )

    def _write(self, instance_id: str, update: Dict[str, Any]) -> StepResult[Dict[str, Any]]:
        try:
            self._instance_repo.update(instance_id, update)
        except StoreError as e:
            logger.error(f"Failed to write precomputed values onto {instance_id}: {e}")
            return StepResult.failure(
                ProgressionWriteError(f"Could not write precomputed values onto {instance_id}", instance_id=instance_id)
            )
        return StepResult.success(update)

    @staticmethod
    def _failed(
        instance_id: str,
        error: ProgressionError,
        **kwargs: Any,
    ) -> PrecomputeProgressionResult:
        logger.warning(f"Precomputation skipped for {instance_id}: [{error.code}] {error.message}")
        return PrecomputeProgressionResult(
            success=False,
            instance_id=instance_id,
            error=error,
            **kwargs,
        )
