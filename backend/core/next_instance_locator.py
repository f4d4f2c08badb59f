"""
Next instance lookup for exercise chains.

Finds where the results of a completed exercise should be written: the
chronologically next, not-yet-completed instance of the same chain within
the same program enrollment. Also answers whether the chain has been
completed before in the enrollment (first-week detection).
"""
import logging
from typing import Optional

from application.ports.exercise_instance_repository import ExerciseInstanceRepository
from application.result import StepResult
from domain.converters.db_converters import db_row_to_exercise_instance
from domain.exceptions import (
    AmbiguousChainIdentityError,
    ExerciseLookupError,
    StoreError,
)
from domain.models.chain_identity import ChainIdentity
from domain.models.exercise_instance import ExerciseInstance

logger = logging.getLogger(__name__)


def resolve_chain_identity(instance: ExerciseInstance) -> ChainIdentity:
    """Original exercise id when present, else the custom substitute id."""
    return instance.chain_identity


def _pending_sort_key(instance: ExerciseInstance) -> tuple:
    # Missing workout timestamps sort last; instance id breaks ties
    created_at = instance.treino_created_at
    return (created_at is None, created_at or "", instance.id)


class NextInstanceLocator:
    """
    Locates instances of an exercise chain within a program enrollment.

    Dependencies are injected via constructor for testability.
    """

    def __init__(self, instance_repo: ExerciseInstanceRepository):
        """
        Args:
            instance_repo: Repository for exercise instances
        """
        self._instance_repo = instance_repo

    def load_instance(self, instance_id: str) -> StepResult[ExerciseInstance]:
        """Load and convert one instance; a missing row is a lookup failure."""
        try:
            row = self._instance_repo.get(instance_id)
        except StoreError as e:
            logger.error(f"Failed to read exercise instance {instance_id}: {e}")
            return StepResult.failure(
                ExerciseLookupError(f"Could not read instance {instance_id}", instance_id=instance_id)
            )

        if row is None:
            return StepResult.failure(
                ExerciseLookupError(f"Instance {instance_id} not found", instance_id=instance_id)
            )
        return StepResult.success(db_row_to_exercise_instance(row))

    def find_next(
        self,
        chain: ChainIdentity,
        program_id: str,
        exclude_instance_id: Optional[str] = None,
    ) -> StepResult[Optional[ExerciseInstance]]:
        """
        Find the next pending instance of a chain.

        Among not-yet-completed instances of the chain in the enrollment, the
        one whose owning workout was created first wins; equal timestamps are
        ordered by instance id.

        Args:
            chain: Chain identity of the completed instance
            program_id: Program enrollment ID
            exclude_instance_id: Instance to skip (the one just completed)

        Returns:
            StepResult with the next instance, or None when there is none
        """
        if not chain.is_chainable:
            return StepResult.failure(
                AmbiguousChainIdentityError("Exercise has no chain identity", instance_id=exclude_instance_id)
            )

        try:
            rows = self._instance_repo.list_pending_in_chain(chain, program_id)
        except StoreError as e:
            logger.error(f"Failed to list pending instances of {chain} in program {program_id}: {e}")
            return StepResult.failure(
                ExerciseLookupError(f"Could not list pending instances of {chain}", instance_id=exclude_instance_id)
            )

        candidates = [
            db_row_to_exercise_instance(row)
            for row in rows
            if str(row.get("id")) != str(exclude_instance_id) and not row.get("concluido")
        ]
        if not candidates:
            logger.info(f"No pending instance of {chain} in program {program_id}")
            return StepResult.success(None)

        candidates.sort(key=_pending_sort_key)
        return StepResult.success(candidates[0])

    def is_first_occurrence(
        self,
        chain: ChainIdentity,
        program_id: str,
        current_instance_id: str,
    ) -> StepResult[bool]:
        """
        True iff no other completed instance of the chain exists in the enrollment.
        """
        if not chain.is_chainable:
            return StepResult.failure(
                AmbiguousChainIdentityError("Exercise has no chain identity", instance_id=current_instance_id)
            )

        try:
            rows = self._instance_repo.list_completed_in_chain(
                chain,
                program_id,
                exclude_instance_id=current_instance_id,
                limit=1,
            )
        except StoreError as e:
            logger.error(f"Failed to check completed instances of {chain}: {e}")
            return StepResult.failure(
                ExerciseLookupError(f"Could not check history of {chain}", instance_id=current_instance_id)
            )

        return StepResult.success(len(rows) == 0)

    def find_previous_completed(
        self,
        chain: ChainIdentity,
        program_id: str,
        current_instance_id: str,
        current_workout_id: Optional[str] = None,
    ) -> StepResult[Optional[ExerciseInstance]]:
        """
        Most recently completed instance of the chain, other than the current
        one and outside the current workout.
        """
        if not chain.is_chainable:
            return StepResult.failure(
                AmbiguousChainIdentityError("Exercise has no chain identity", instance_id=current_instance_id)
            )

        try:
            rows = self._instance_repo.list_completed_in_chain(
                chain,
                program_id,
                exclude_instance_id=current_instance_id,
            )
        except StoreError as e:
            logger.error(f"Failed to list completed instances of {chain}: {e}")
            return StepResult.failure(
                ExerciseLookupError(f"Could not list history of {chain}", instance_id=current_instance_id)
            )

        for row in rows:
            if current_workout_id and row.get("treino_usuario_id") == current_workout_id:
                continue
            return StepResult.success(db_row_to_exercise_instance(row))
        return StepResult.success(None)
