"""
Repository Interfaces (Ports) for the progression engine.

This package defines abstract interfaces that decouple domain logic from
infrastructure (database, external services). Implementations are provided
in the infrastructure layer.

Architecture follows the Ports & Adapters (Hexagonal) pattern:
- Ports: Abstract interfaces defined here (what the domain needs)
- Adapters: Concrete implementations in infrastructure/ (how it's provided)

Usage:
    from application.ports import ExerciseInstanceRepository

    class BaselineResolver:
        def __init__(self, instance_repo: ExerciseInstanceRepository):
            self._instance_repo = instance_repo
"""

# Exercise instance persistence
from application.ports.exercise_instance_repository import ExerciseInstanceRepository

__all__ = [
    "ExerciseInstanceRepository",
]
