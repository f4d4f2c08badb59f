"""
PropagateIncrement Use Case.

When a user sets or changes the minimum equipment increment of an exercise,
the value is copied onto every not-yet-completed instance of the same chain
within the program enrollment. Completed instances are history and are never
touched.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from application.ports.exercise_instance_repository import ExerciseInstanceRepository
from application.result import StepResult
from domain.exceptions import (
    AmbiguousChainIdentityError,
    ExerciseLookupError,
    ProgressionError,
    ProgressionWriteError,
    StoreError,
)
from domain.models.chain_identity import ChainIdentity

logger = logging.getLogger(__name__)


@dataclass
class PropagateIncrementResult:
    """Result of an increment propagation."""

    success: bool
    updated_count: int = 0
    instance_ids: List[str] = field(default_factory=list)
    error: Optional[ProgressionError] = None


class IncrementPropagator:
    """
    Copies a minimum increment onto the pending instances of a chain.

    Idempotent: running it again with the same value changes nothing.
    """

    def __init__(self, instance_repo: ExerciseInstanceRepository) -> None:
        self._instance_repo = instance_repo

    def propagate_increment(
        self,
        chain: ChainIdentity,
        program_id: str,
        value: float,
    ) -> PropagateIncrementResult:
        """
        Set incremento_minimo (and mark the increment configured) on every
        pending instance of the chain in the enrollment.

        Args:
            chain: Chain identity of the exercise
            program_id: Program enrollment ID
            value: Minimum increment, must be positive

        Returns:
            PropagateIncrementResult with the updated instance ids
        """
        if value is None or value <= 0:
            raise ValueError(f"Minimum increment must be positive, got {value!r}")

        if not chain.is_chainable:
            logger.info("Exercise has no chain identity; increment not propagated")
            return PropagateIncrementResult(
                success=False,
                error=AmbiguousChainIdentityError("Exercise has no chain identity"),
            )

        pending = self._pending_ids(chain, program_id)
        if not pending.ok:
            return PropagateIncrementResult(success=False, error=pending.error)

        instance_ids = pending.value
        if not instance_ids:
            logger.info(f"No pending instances of {chain} in program {program_id}")
            return PropagateIncrementResult(success=True)

        try:
            updated = self._instance_repo.update_many(
                instance_ids,
                {"incremento_minimo": float(value), "configuracao_inicial": True},
            )
        except StoreError as e:
            logger.error(f"Failed to propagate increment for {chain}: {e}")
            return PropagateIncrementResult(
                success=False,
                error=ProgressionWriteError(f"Could not propagate increment for {chain}"),
            )

        logger.info(f"Minimum increment {value} propagated to {updated} pending instances of {chain}")
        return PropagateIncrementResult(
            success=True,
            updated_count=updated,
            instance_ids=instance_ids,
        )

    def _pending_ids(self, chain: ChainIdentity, program_id: str) -> StepResult[List[str]]:
        try:
            rows = self._instance_repo.list_pending_in_chain(chain, program_id)
        except StoreError as e:
            logger.error(f"Failed to list pending instances of {chain}: {e}")
            return StepResult.failure(ExerciseLookupError(f"Could not list pending instances of {chain}"))
        return StepResult.success([str(row["id"]) for row in rows if not row.get("concluido")])
