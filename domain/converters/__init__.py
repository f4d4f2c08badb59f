"""
Domain converters for turning store rows into domain models.

- db_row_to_exercise_instance: exercicios_treino_usuario row -> ExerciseInstance
- db_rows_to_exercise_sets: get_series_by_exercise rows -> List[ExerciseSet]

All converters are pure functions with no side effects.
"""

from domain.converters.db_converters import (
    db_row_to_exercise_instance,
    db_row_to_exercise_set,
    db_rows_to_exercise_sets,
)

__all__ = [
    "db_row_to_exercise_instance",
    "db_row_to_exercise_set",
    "db_rows_to_exercise_sets",
]
