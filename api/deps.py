"""
FastAPI Dependency Providers for the progression engine.

This module provides FastAPI dependency injection functions that return
interface types (Protocols) rather than concrete implementations. This
enables clean separation of concerns and easy testing with fake
implementations.

Architecture:
- Settings and Supabase client are cached per-process (lru_cache)
- Repository and use case providers create new instances per-request

Usage in routers:
    from api.deps import get_progression_orchestrator
    from application.use_cases import ProgressionOrchestrator

    @router.post("/exercises/{instance_id}/precompute")
    def precompute(
        instance_id: str,
        orchestrator: ProgressionOrchestrator = Depends(get_progression_orchestrator),
    ):
        ...

Testing:
    # Override dependencies in tests
    app.dependency_overrides[get_exercise_instance_repo] = lambda: FakeExerciseInstanceRepository()
"""

from functools import lru_cache
from typing import Optional

from fastapi import Depends, HTTPException
from supabase import Client, create_client

from application.ports import ExerciseInstanceRepository
from application.use_cases import (
    ConfigureIncrementUseCase,
    IncrementPropagator,
    ProgressionOrchestrator,
    RecordFeedbackUseCase,
)
from backend.core.baseline_resolver import BaselineResolver
from backend.core.progression_indicator import ProgressionIndicatorService
from backend.settings import Settings, get_settings as _get_settings
from infrastructure import SupabaseExerciseInstanceRepository


# =============================================================================
# Settings Provider
# =============================================================================


def get_settings() -> Settings:
    """
    Get application settings.

    Returns cached Settings instance from backend.settings.
    Use this as a FastAPI dependency for settings access.
    """
    return _get_settings()


# =============================================================================
# Supabase Client Provider
# =============================================================================


@lru_cache
def get_supabase_client() -> Optional[Client]:
    """
    Get Supabase client instance (cached).

    Creates a Supabase client using credentials from settings.
    Returns None if credentials are not configured.
    """
    settings = _get_settings()

    if not settings.supabase_url or not settings.supabase_key:
        return None

    return create_client(settings.supabase_url, settings.supabase_key)


def get_supabase_client_required() -> Client:
    """
    Get Supabase client instance, raising if not configured.

    Raises:
        HTTPException: 503 if Supabase is not configured
    """
    client = get_supabase_client()
    if client is None:
        raise HTTPException(
            status_code=503,
            detail="Database not available. Supabase credentials not configured.",
        )
    return client


# =============================================================================
# Repository Providers
# =============================================================================


def get_exercise_instance_repo(
    client: Client = Depends(get_supabase_client_required),
) -> ExerciseInstanceRepository:
    """Get exercise instance repository instance."""
    return SupabaseExerciseInstanceRepository(client)


# =============================================================================
# Service / Use Case Providers
# =============================================================================


def get_progression_orchestrator(
    instance_repo: ExerciseInstanceRepository = Depends(get_exercise_instance_repo),
    settings: Settings = Depends(get_settings),
) -> ProgressionOrchestrator:
    """Get the progression orchestrator with injected repository."""
    return ProgressionOrchestrator(
        instance_repo,
        default_increment=settings.default_minimum_increment,
        max_substitution_series=settings.max_substitution_series,
    )


def get_record_feedback_use_case(
    instance_repo: ExerciseInstanceRepository = Depends(get_exercise_instance_repo),
    orchestrator: ProgressionOrchestrator = Depends(get_progression_orchestrator),
) -> RecordFeedbackUseCase:
    return RecordFeedbackUseCase(instance_repo, orchestrator)


def get_configure_increment_use_case(
    instance_repo: ExerciseInstanceRepository = Depends(get_exercise_instance_repo),
) -> ConfigureIncrementUseCase:
    return ConfigureIncrementUseCase(instance_repo, IncrementPropagator(instance_repo))


def get_baseline_resolver(
    instance_repo: ExerciseInstanceRepository = Depends(get_exercise_instance_repo),
) -> BaselineResolver:
    return BaselineResolver(instance_repo)


def get_progression_indicator_service(
    instance_repo: ExerciseInstanceRepository = Depends(get_exercise_instance_repo),
) -> ProgressionIndicatorService:
    return ProgressionIndicatorService(instance_repo)
