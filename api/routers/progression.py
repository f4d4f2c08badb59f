"""
Progression router for exercise feedback and next-session targets.

This router provides endpoints for:
- Capturing completion feedback and precomputing the next occurrence
- Establishing the baseline repetitions of a first-week instance
- Configuring the minimum equipment increment of an exercise chain
- The "what changed since last session" indicator
- A pure preview of the progression tables (no store access)
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Path
from pydantic import BaseModel, Field, field_validator

from api.deps import (
    get_baseline_resolver,
    get_configure_increment_use_case,
    get_progression_indicator_service,
    get_record_feedback_use_case,
    get_settings,
)
from application.use_cases import (
    ConfigureIncrementUseCase,
    PrecomputeProgressionResult,
    RecordFeedbackUseCase,
)
from backend.core.baseline_resolver import BaselineResolver
from backend.core.progression_indicator import ProgressionIndicatorService
from backend.core.progression_policy import compute_progression, resolve_minimum_increment
from backend.settings import Settings
from domain.exceptions import ExerciseLookupError, ProgressionError
from domain.models.feedback import Difficulty
from domain.models.progression import ProgressionSnapshot

logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["Progression"],
)


# =============================================================================
# Request Models
# =============================================================================


class _DifficultyRequest(BaseModel):
    difficulty: Optional[Difficulty] = None

    @field_validator("difficulty", mode="before")
    @classmethod
    def parse_difficulty(cls, v):
        return Difficulty.parse(v)


class FeedbackRequest(_DifficultyRequest):
    """Feedback captured when an exercise is finished."""
    difficulty: Difficulty
    fatigue: Optional[float] = Field(default=None, ge=1, le=5)
    pain: Optional[float] = Field(default=None, ge=0)


class IncrementRequest(BaseModel):
    """Minimum equipment increment for an exercise chain."""
    incremento_minimo: float = Field(..., gt=0)


class PreviewRequest(_DifficultyRequest):
    """Inputs of a progression calculation."""
    current_weight: float = Field(..., ge=0)
    programmed_reps: str = Field(..., min_length=1)
    executed_reps: int = Field(default=0, ge=0)
    sets: int = Field(default=3, ge=1)
    min_increment: Optional[float] = Field(default=None, gt=0)
    target_reps: Optional[int] = Field(default=None, ge=1)
    fatigue: Optional[float] = Field(default=None, ge=1, le=5)
    pain: Optional[float] = Field(default=None, ge=0)
    is_first_week: bool = False


# =============================================================================
# Response Models
# =============================================================================


class PrecomputationResponse(BaseModel):
    """Outcome of precomputing the next occurrence."""
    success: bool
    next_instance_id: Optional[str] = None
    is_first_week: Optional[bool] = None
    progression_type: Optional[str] = None
    written: dict = Field(default_factory=dict)
    skipped_reason: Optional[str] = None
    error_code: Optional[str] = None
    error: Optional[str] = None


class FeedbackResponse(BaseModel):
    instance_id: str
    precomputation: Optional[PrecomputationResponse] = None


class BaselineResponse(BaseModel):
    instance_id: str
    reps_programadas: int
    source: str


class IncrementResponse(BaseModel):
    instance_id: str
    incremento_minimo: float
    propagated_to: int = 0
    propagation_error: Optional[str] = None


class IndicatorResponse(BaseModel):
    instance_id: str
    message: Optional[str] = None


class PreviewResponse(BaseModel):
    new_weight: float
    new_reps: str
    new_sets: int
    reps_programadas: Optional[int] = None
    is_deload: bool
    progression_type: str


# =============================================================================
# Helpers
# =============================================================================


def _precomputation_response(result: PrecomputeProgressionResult) -> PrecomputationResponse:
    return PrecomputationResponse(
        success=result.success,
        next_instance_id=result.next_instance_id,
        is_first_week=result.is_first_week,
        progression_type=result.progression.progression_type.value if result.progression else None,
        written=result.written,
        skipped_reason=result.skipped_reason,
        error_code=result.error.code if result.error else None,
        error=result.error.message if result.error else None,
    )


def _raise_for_progression_error(error: ProgressionError) -> None:
    if isinstance(error, ExerciseLookupError):
        raise HTTPException(status_code=404, detail=error.message)
    raise HTTPException(status_code=500, detail=error.message)


# =============================================================================
# Endpoints
# =============================================================================


@router.post("/exercises/{instance_id}/feedback", response_model=FeedbackResponse)
def record_feedback(
    request: FeedbackRequest,
    instance_id: str = Path(..., description="Exercise instance ID"),
    use_case: RecordFeedbackUseCase = Depends(get_record_feedback_use_case),
) -> FeedbackResponse:
    """
    Save completion feedback and precompute the next occurrence.

    The feedback is saved even when the precomputation fails; the
    precomputation outcome is reported in the response body.
    """
    result = use_case.execute(
        instance_id,
        request.difficulty,
        fatigue=request.fatigue,
        pain=request.pain,
    )

    if result.not_found:
        raise HTTPException(status_code=404, detail=result.error)
    if not result.success:
        raise HTTPException(status_code=500, detail=result.error)

    return FeedbackResponse(
        instance_id=instance_id,
        precomputation=_precomputation_response(result.precomputation) if result.precomputation else None,
    )


@router.post("/exercises/{instance_id}/baseline", response_model=BaselineResponse)
def resolve_baseline(
    instance_id: str = Path(..., description="Exercise instance ID"),
    resolver: BaselineResolver = Depends(get_baseline_resolver),
) -> BaselineResponse:
    """
    Establish reps_programadas for a first-week instance.

    Idempotent: an instance that already tracks a target is returned as is.
    """
    result = resolver.resolve_baseline(instance_id)
    if not result.ok:
        _raise_for_progression_error(result.error)

    return BaselineResponse(
        instance_id=instance_id,
        reps_programadas=result.value.reps_programadas,
        source=result.value.source.value,
    )


@router.put("/exercises/{instance_id}/increment", response_model=IncrementResponse)
def configure_increment(
    request: IncrementRequest,
    instance_id: str = Path(..., description="Exercise instance ID"),
    use_case: ConfigureIncrementUseCase = Depends(get_configure_increment_use_case),
) -> IncrementResponse:
    """Save the minimum increment and copy it onto pending instances of the chain."""
    result = use_case.execute(instance_id, request.incremento_minimo)

    if result.not_found:
        raise HTTPException(status_code=404, detail=result.error)
    if not result.success:
        raise HTTPException(status_code=500, detail=result.error)

    propagation = result.propagation
    return IncrementResponse(
        instance_id=instance_id,
        incremento_minimo=result.incremento_minimo,
        propagated_to=propagation.updated_count if propagation else 0,
        propagation_error=propagation.error.message if propagation and propagation.error else None,
    )


@router.get("/exercises/{instance_id}/progression-indicator", response_model=IndicatorResponse)
def get_progression_indicator(
    instance_id: str = Path(..., description="Exercise instance ID"),
    service: ProgressionIndicatorService = Depends(get_progression_indicator_service),
) -> IndicatorResponse:
    """Describe how this instance's targets differ from the previous session."""
    try:
        message = service.get_indicator(instance_id)
    except ProgressionError as e:
        _raise_for_progression_error(e)

    return IndicatorResponse(instance_id=instance_id, message=message)


@router.post("/progression/preview", response_model=PreviewResponse)
def preview_progression(
    request: PreviewRequest,
    settings: Settings = Depends(get_settings),
) -> PreviewResponse:
    """
    Run the progression tables on the given inputs.

    Nothing is read from or written to the store.
    """
    snapshot = ProgressionSnapshot(
        current_weight=request.current_weight,
        programmed_reps=request.programmed_reps,
        executed_reps=request.executed_reps,
        sets=request.sets,
        min_increment=resolve_minimum_increment(
            request.min_increment,
            default=settings.default_minimum_increment,
        ),
        target_reps=request.target_reps,
        difficulty=request.difficulty,
        fatigue=request.fatigue,
        pain=request.pain,
        is_first_week=request.is_first_week,
    )
    result = compute_progression(snapshot)

    return PreviewResponse(
        new_weight=result.new_weight,
        new_reps=result.new_reps,
        new_sets=result.new_sets,
        reps_programadas=result.reps_programadas,
        is_deload=result.is_deload,
        progression_type=result.progression_type.value,
    )
