"""
RecordFeedback Use Case.

Persists the difficulty / fatigue / pain feedback of a finished exercise,
marks the instance completed, then precomputes the next occurrence. The
feedback write is what the user waits for; a failed precomputation is
reported on the result but does not fail the use case.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from application.ports.exercise_instance_repository import ExerciseInstanceRepository
from application.use_cases.precompute_progression import (
    PrecomputeProgressionResult,
    ProgressionOrchestrator,
)
from domain.exceptions import StoreError
from domain.models.feedback import Difficulty

logger = logging.getLogger(__name__)


@dataclass
class RecordFeedbackResult:
    """Result of the RecordFeedback use case execution."""

    success: bool
    instance_id: str
    precomputation: Optional[PrecomputeProgressionResult] = None
    error: Optional[str] = None
    not_found: bool = False


class RecordFeedbackUseCase:
    """
    Use case for capturing completion feedback.

    Usage:
        >>> use_case = RecordFeedbackUseCase(instance_repo, orchestrator)
        >>> result = use_case.execute("ex-1", Difficulty.FACIL, fatigue=2)
    """

    def __init__(
        self,
        instance_repo: ExerciseInstanceRepository,
        orchestrator: ProgressionOrchestrator,
    ) -> None:
        self._instance_repo = instance_repo
        self._orchestrator = orchestrator

    def execute(
        self,
        instance_id: str,
        difficulty: Difficulty,
        fatigue: Optional[float] = None,
        pain: Optional[float] = None,
    ) -> RecordFeedbackResult:
        """
        Save feedback on the instance and precompute its next occurrence.

        Args:
            instance_id: Instance that was just finished
            difficulty: Difficulty rating
            fatigue: Fatigue rating (1-5)
            pain: Pain rating

        Returns:
            RecordFeedbackResult with the precomputation outcome
        """
        fields = {
            "avaliacao_dificuldade": difficulty.value,
            "avaliacao_fadiga": fatigue,
            "data_avaliacao": datetime.now(timezone.utc).isoformat(),
            "concluido": True,
        }
        if pain is not None:
            fields["avaliacao_dor"] = pain

        try:
            saved = self._instance_repo.update(instance_id, fields)
        except StoreError as e:
            logger.error(f"Failed to save feedback for {instance_id}: {e}")
            return RecordFeedbackResult(
                success=False,
                instance_id=instance_id,
                error="Could not save feedback",
            )

        if saved is None:
            return RecordFeedbackResult(
                success=False,
                instance_id=instance_id,
                error=f"Exercise instance {instance_id} not found",
                not_found=True,
            )

        logger.info(f"Feedback saved for {instance_id}: {difficulty.value}, fadiga={fatigue}")
        precomputation = self._orchestrator.on_exercise_completed(
            instance_id,
            difficulty,
            fatigue,
            pain,
        )
        return RecordFeedbackResult(
            success=True,
            instance_id=instance_id,
            precomputation=precomputation,
        )
