"""
Infrastructure Database Layer.

This package provides Supabase-backed implementations of the repository interfaces
defined in application.ports. These implementations can be injected into services
and routers for clean separation of concerns and testability.

Usage:
    from supabase import create_client
    from infrastructure.db import SupabaseExerciseInstanceRepository

    client = create_client(url, key)
    instance_repo = SupabaseExerciseInstanceRepository(client)
"""

from infrastructure.db.exercise_instance_repository import SupabaseExerciseInstanceRepository

__all__ = [
    "SupabaseExerciseInstanceRepository",
]
