"""
Infrastructure Layer for the progression engine.

This package contains concrete implementations of repository interfaces:
- db/: Supabase database implementations
"""

# Re-export database repositories for convenient access
from infrastructure.db import SupabaseExerciseInstanceRepository

__all__ = [
    "SupabaseExerciseInstanceRepository",
]
