"""
Fake Repository Implementations for Testing.

This package provides in-memory fake implementations of repository interfaces
for fast, isolated testing. No database or external dependencies required.

Features:
- All fakes implement the same Protocol interfaces as real implementations
- Supports seeding with test data
- Supports reset() for test isolation
- Factory functions for common test scenarios

Usage:
    from tests.fakes import FakeExerciseInstanceRepository, create_chain_repo

    # Direct instantiation
    repo = FakeExerciseInstanceRepository()
    repo.seed_workouts([{"id": "t1", "programa_usuario_id": "p1", "created_at": "2024-01-01"}])
    repo.seed_instances([{"id": "ex-1", "treino_usuario_id": "t1", "exercicio_original_id": "supino"}])

    # Factory function with a pre-populated chain, one instance per week
    repo = create_chain_repo(weeks=3, repeticoes="8-12")
"""
from typing import Any, Dict, List, Optional

from tests.fakes.exercise_instance_repository import FakeExerciseInstanceRepository


# =============================================================================
# Factory Functions
# =============================================================================


def create_chain_repo(
    *,
    weeks: int = 2,
    program_id: str = "prog-1",
    exercise_id: Optional[str] = "supino-reto",
    custom_id: Optional[str] = None,
    repeticoes: str = "8-12",
    peso: float = 40.0,
    series: int = 3,
    **instance_fields: Any,
) -> FakeExerciseInstanceRepository:
    """
    Create a FakeExerciseInstanceRepository holding one exercise chain.

    Week N lives in workout "treino-N" (created on day N) and holds instance
    "ex-N". Nothing is completed yet.

    Args:
        weeks: Number of weekly occurrences
        program_id: Program enrollment of every workout
        exercise_id: exercicio_original_id of every instance
        custom_id: substituto_custom_id of every instance
        repeticoes: Programmed repetitions spec
        peso: Starting weight
        series: Number of sets
        **instance_fields: Extra columns applied to every instance

    Returns:
        Pre-populated FakeExerciseInstanceRepository
    """
    repo = FakeExerciseInstanceRepository()

    workouts: List[Dict[str, Any]] = []
    instances: List[Dict[str, Any]] = []
    for week in range(1, weeks + 1):
        workouts.append({
            "id": f"treino-{week}",
            "programa_usuario_id": program_id,
            "created_at": f"2024-01-{week:02d}T08:00:00+00:00",
        })
        instance = {
            "id": f"ex-{week}",
            "nome": "Supino Reto",
            "treino_usuario_id": f"treino-{week}",
            "exercicio_original_id": exercise_id,
            "substituto_custom_id": custom_id,
            "repeticoes": repeticoes,
            "peso": peso,
            "series": series,
            "concluido": False,
        }
        instance.update(instance_fields)
        instances.append(instance)

    repo.seed_workouts(workouts)
    repo.seed_instances(instances)
    return repo


def completed_sets(*reps: int, peso: float = 40.0) -> List[Dict[str, Any]]:
    """Set rows for the given repetition counts, all completed."""
    return [
        {"numero_serie": i, "peso": peso, "repeticoes": r, "concluida": True}
        for i, r in enumerate(reps, start=1)
    ]


__all__ = [
    # Fakes
    "FakeExerciseInstanceRepository",
    # Factories
    "create_chain_repo",
    "completed_sets",
]
