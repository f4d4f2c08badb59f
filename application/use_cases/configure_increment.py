"""
ConfigureIncrement Use Case.

Stores the minimum equipment increment chosen for an exercise instance and
propagates it to the pending instances of the same chain.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from application.ports.exercise_instance_repository import ExerciseInstanceRepository
from application.use_cases.propagate_increment import (
    IncrementPropagator,
    PropagateIncrementResult,
)
from domain.converters.db_converters import db_row_to_exercise_instance
from domain.exceptions import StoreError

logger = logging.getLogger(__name__)


@dataclass
class ConfigureIncrementResult:
    """Result of the ConfigureIncrement use case execution."""

    success: bool
    instance_id: str
    incremento_minimo: Optional[float] = None
    propagation: Optional[PropagateIncrementResult] = None
    error: Optional[str] = None
    not_found: bool = False


class ConfigureIncrementUseCase:
    """Save an increment on one instance, then propagate it along the chain."""

    def __init__(
        self,
        instance_repo: ExerciseInstanceRepository,
        propagator: IncrementPropagator,
    ) -> None:
        self._instance_repo = instance_repo
        self._propagator = propagator

    def execute(self, instance_id: str, value: float) -> ConfigureIncrementResult:
        if value is None or value <= 0:
            return ConfigureIncrementResult(
                success=False,
                instance_id=instance_id,
                error="Minimum increment must be positive",
            )

        try:
            saved = self._instance_repo.update(
                instance_id,
                {"incremento_minimo": float(value), "configuracao_inicial": True},
            )
            row = self._instance_repo.get(instance_id) if saved is not None else None
        except StoreError as e:
            logger.error(f"Failed to save increment for {instance_id}: {e}")
            return ConfigureIncrementResult(
                success=False,
                instance_id=instance_id,
                error="Could not save minimum increment",
            )

        if row is None:
            return ConfigureIncrementResult(
                success=False,
                instance_id=instance_id,
                error=f"Exercise instance {instance_id} not found",
                not_found=True,
            )

        instance = db_row_to_exercise_instance(row)
        propagation = None
        if instance.programa_usuario_id:
            propagation = self._propagator.propagate_increment(
                instance.chain_identity,
                instance.programa_usuario_id,
                value,
            )

        return ConfigureIncrementResult(
            success=True,
            instance_id=instance_id,
            incremento_minimo=float(value),
            propagation=propagation,
        )
