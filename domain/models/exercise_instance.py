"""
Exercise instance and logged set models.

An ExerciseInstance is one scheduled occurrence of an exercise inside one
workout of one program enrollment. Field names follow the store columns of
exercicios_treino_usuario so rows convert without renaming.
"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from domain.models.chain_identity import ChainIdentity
from domain.models.feedback import Difficulty


class ExerciseSet(BaseModel):
    """One logged set attempt of an instance."""

    numero_serie: int = Field(..., ge=1, description="Set number, 1-based")
    peso: float = Field(default=0.0, ge=0, description="Weight used")
    repeticoes: int = Field(default=0, ge=0, description="Repetitions executed")
    concluida: bool = Field(default=False, description="Whether the set was completed")


class ExerciseInstance(BaseModel):
    """One occurrence of an exercise within a program enrollment."""

    id: str
    nome: str = ""
    grupo_muscular: Optional[str] = None

    exercicio_original_id: Optional[str] = Field(
        None, description="Canonical exercise id (chain identity)"
    )
    substituto_custom_id: Optional[str] = Field(
        None, description="User-defined substitute id (fallback chain identity)"
    )
    substituto_oficial_id: Optional[str] = Field(
        None, description="Catalog exercise used as substitute"
    )
    substituto_nome: Optional[str] = Field(None, description="Display name of the substitute")
    substituicao_neste_treino: bool = Field(
        default=False, description="Substituted for this session only"
    )

    series: int = Field(default=1, ge=1, description="Number of sets")
    peso: Optional[float] = Field(None, ge=0, description="Target weight")
    repeticoes: Optional[str] = Field(
        None, description='Programmed repetitions: "10" or "8-12"'
    )
    reps_programadas: Optional[int] = Field(
        None, ge=1, description="Tracked repetition target; None before the first completion"
    )
    incremento_minimo: Optional[float] = Field(
        None, gt=0, description="Minimum equipment weight increment"
    )
    configuracao_inicial: Optional[bool] = None

    concluido: bool = False
    avaliacao_dificuldade: Optional[Difficulty] = None
    avaliacao_fadiga: Optional[float] = None
    avaliacao_dor: Optional[float] = None

    treino_usuario_id: Optional[str] = None
    programa_usuario_id: Optional[str] = None
    treino_created_at: Optional[str] = None

    @field_validator("avaliacao_dificuldade", mode="before")
    @classmethod
    def normalise_difficulty(cls, v):
        return Difficulty.parse(v)

    @field_validator("repeticoes", mode="before")
    @classmethod
    def stringify_reps(cls, v):
        if v is None:
            return None
        return str(v).strip() or None

    @property
    def chain_identity(self) -> ChainIdentity:
        return ChainIdentity.from_ids(self.exercicio_original_id, self.substituto_custom_id)

    @property
    def is_first_week(self) -> bool:
        """No tracked target yet: the chain has never been completed."""
        return self.reps_programadas is None
