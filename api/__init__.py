"""
API package for the progression engine.

This package contains:
- deps.py: FastAPI dependency providers for DI
- routers/: API route handlers
"""

# Re-export dependency providers for convenient access
from api.deps import (
    get_settings,
    get_supabase_client,
    get_supabase_client_required,
    get_exercise_instance_repo,
    get_progression_orchestrator,
    get_record_feedback_use_case,
    get_configure_increment_use_case,
    get_baseline_resolver,
    get_progression_indicator_service,
)

__all__ = [
    # Settings
    "get_settings",
    # Database
    "get_supabase_client",
    "get_supabase_client_required",
    # Repositories
    "get_exercise_instance_repo",
    # Use cases and services
    "get_progression_orchestrator",
    "get_record_feedback_use_case",
    "get_configure_increment_use_case",
    "get_baseline_resolver",
    "get_progression_indicator_service",
]
