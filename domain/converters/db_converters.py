"""
Converters: Database row format -> domain exercise models.

Provides conversion between Supabase rows and the ExerciseInstance /
ExerciseSet domain models. This is the boundary where free-form stored
values (difficulty labels, numeric strings, joined workout data) are
normalised or rejected.

Database schema (exercicios_treino_usuario table, relevant columns):
- id: UUID
- nome, grupo_muscular: Display data
- exercicio_original_id, substituto_custom_id: Chain identity
- substituto_oficial_id, substituto_nome: Substitute shown this session
- substituicao_neste_treino: Substituted for this session only
- series, peso, repeticoes, reps_programadas, incremento_minimo: Targets
- concluido, configuracao_inicial: Flags
- avaliacao_dificuldade, avaliacao_fadiga, avaliacao_dor: Feedback
- treino_usuario_id: Owning workout (joined as treinos_usuario)

Database schema (series_exercicio_usuario, via RPC get_series_by_exercise):
- numero_serie, peso, repeticoes, concluida
"""

import logging
from typing import Any, Dict, List, Optional

from domain.models.exercise_instance import ExerciseInstance, ExerciseSet
from domain.models.feedback import Difficulty

logger = logging.getLogger(__name__)

WORKOUT_JOIN_KEY = "treinos_usuario"


def _parse_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _parse_positive_float(value: Any) -> Optional[float]:
    parsed = _parse_float(value)
    if parsed is None or parsed <= 0:
        return None
    return parsed


def _parse_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _parse_difficulty(value: Any, instance_id: Any) -> Optional[Difficulty]:
    """Normalise a stored difficulty; unknown labels are rejected as None."""
    try:
        return Difficulty.parse(value)
    except ValueError:
        logger.warning(f"Ignoring unknown difficulty {value!r} on instance {instance_id}")
        return None


def _workout_fields(row: Dict[str, Any]) -> Dict[str, Any]:
    """Flatten the joined owning-workout columns."""
    workout = row.get(WORKOUT_JOIN_KEY) or {}
    if isinstance(workout, list):
        workout = workout[0] if workout else {}
    return {
        "programa_usuario_id": workout.get("programa_usuario_id") or row.get("programa_usuario_id"),
        "treino_created_at": workout.get("created_at") or row.get("treino_created_at"),
    }


def db_row_to_exercise_instance(row: Dict[str, Any]) -> ExerciseInstance:
    """
    Convert an exercicios_treino_usuario row to an ExerciseInstance.

    Args:
        row: Row dict, optionally with the joined treinos_usuario object

    Returns:
        ExerciseInstance domain model
    """
    instance_id = str(row["id"])
    reps_programadas = _parse_int(row.get("reps_programadas"))
    series = _parse_int(row.get("series")) or 1

    return ExerciseInstance(
        id=instance_id,
        nome=row.get("nome") or "",
        grupo_muscular=row.get("grupo_muscular"),
        exercicio_original_id=row.get("exercicio_original_id"),
        substituto_custom_id=row.get("substituto_custom_id"),
        substituto_oficial_id=row.get("substituto_oficial_id"),
        substituto_nome=row.get("substituto_nome"),
        substituicao_neste_treino=bool(row.get("substituicao_neste_treino")),
        series=max(1, series),
        peso=_parse_float(row.get("peso")),
        repeticoes=row.get("repeticoes"),
        reps_programadas=reps_programadas if reps_programadas and reps_programadas > 0 else None,
        incremento_minimo=_parse_positive_float(row.get("incremento_minimo")),
        configuracao_inicial=row.get("configuracao_inicial"),
        concluido=bool(row.get("concluido")),
        avaliacao_dificuldade=_parse_difficulty(row.get("avaliacao_dificuldade"), instance_id),
        avaliacao_fadiga=_parse_float(row.get("avaliacao_fadiga")),
        avaliacao_dor=_parse_float(row.get("avaliacao_dor")),
        treino_usuario_id=row.get("treino_usuario_id"),
        **_workout_fields(row),
    )


def db_row_to_exercise_set(row: Dict[str, Any]) -> ExerciseSet:
    """Convert a series_exercicio_usuario row to an ExerciseSet."""
    return ExerciseSet(
        numero_serie=_parse_int(row.get("numero_serie")) or 1,
        peso=max(0.0, _parse_float(row.get("peso")) or 0.0),
        repeticoes=max(0, _parse_int(row.get("repeticoes")) or 0),
        concluida=bool(row.get("concluida")),
    )


def db_rows_to_exercise_sets(rows: List[Dict[str, Any]]) -> List[ExerciseSet]:
    """Convert set rows, ordered by set number."""
    sets = [db_row_to_exercise_set(row) for row in rows or []]
    return sorted(sets, key=lambda s: s.numero_serie)
