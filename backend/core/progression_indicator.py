"""
Progression indicator shown on an exercise card.

Compares an instance with the previous completed instance of the same chain
and describes what changed, weight first, then tracked reps, then sets.
Messages are in Portuguese, as displayed on the workout screen.
"""
import logging
from typing import Optional

from application.ports.exercise_instance_repository import ExerciseInstanceRepository
from backend.core.next_instance_locator import NextInstanceLocator
from domain.models.exercise_instance import ExerciseInstance

logger = logging.getLogger(__name__)


def _format_weight(value: float) -> str:
    value = round(abs(value), 2)
    return f"{int(value)}" if value == int(value) else f"{value:g}"


def _plural(count: int, singular: str, plural: str) -> str:
    return singular if count == 1 else plural


def describe_progression(
    current: ExerciseInstance,
    previous: Optional[ExerciseInstance],
) -> Optional[str]:
    """
    Describe how the current targets differ from the previous session.

    Returns:
        Message such as "Aumentou 2.5kg" or "Diminuiu 1 repetição", or None
        when there is no previous session or nothing changed
    """
    if previous is None:
        return None

    if current.peso and previous.peso:
        diff = round(current.peso - previous.peso, 2)
        if diff > 0:
            return f"Aumentou {_format_weight(diff)}kg"
        if diff < 0:
            return f"Diminuiu {_format_weight(diff)}kg"

    if current.reps_programadas and previous.reps_programadas:
        diff = current.reps_programadas - previous.reps_programadas
        if diff:
            word = _plural(abs(diff), "repetição", "repetições")
            verb = "Aumentou" if diff > 0 else "Diminuiu"
            return f"{verb} {abs(diff)} {word}"

    diff = current.series - previous.series
    if diff:
        word = _plural(abs(diff), "série", "séries")
        verb = "Aumentou" if diff > 0 else "Diminuiu"
        return f"{verb} {abs(diff)} {word}"

    return None


class ProgressionIndicatorService:
    """Looks up the previous session of an instance and describes the change."""

    def __init__(self, instance_repo: ExerciseInstanceRepository):
        self._locator = NextInstanceLocator(instance_repo)

    def get_indicator(self, instance_id: str) -> Optional[str]:
        """
        Args:
            instance_id: Instance shown on the card

        Returns:
            Indicator message, or None

        Raises:
            ExerciseLookupError: If the instance cannot be loaded
        """
        current = self._locator.load_instance(instance_id).unwrap()
        if not current.chain_identity.is_chainable or not current.programa_usuario_id:
            return None

        previous = self._locator.find_previous_completed(
            current.chain_identity,
            current.programa_usuario_id,
            current_instance_id=current.id,
            current_workout_id=current.treino_usuario_id,
        )
        if not previous.ok:
            logger.warning(f"Progression indicator unavailable for {instance_id}: {previous.error.message}")
            return None

        return describe_progression(current, previous.value)
