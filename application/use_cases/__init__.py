"""
Application Use Cases for the progression engine.

This package contains application-level use cases that orchestrate domain logic
and coordinate between ports/adapters. Use cases are the entry points for
business operations and contain the application's workflow logic.

Architecture follows Clean Architecture / Hexagonal pattern:
- Use cases orchestrate domain objects and repository ports
- Dependencies are injected via constructors for testability
- Use cases return result dataclasses, not API responses

Usage:
    from application.use_cases import (
        ProgressionOrchestrator,
        RecordFeedbackUseCase,
        IncrementPropagator,
        ConfigureIncrementUseCase,
    )

    # Capture feedback, then precompute the next occurrence
    orchestrator = ProgressionOrchestrator(instance_repo)
    feedback = RecordFeedbackUseCase(instance_repo, orchestrator)
    result = feedback.execute("ex-1", Difficulty.FACIL, fatigue=2)

    # Configure the minimum increment of a chain
    configure = ConfigureIncrementUseCase(instance_repo, IncrementPropagator(instance_repo))
    result = configure.execute("ex-1", 1.25)
"""

from application.use_cases.precompute_progression import (
    PrecomputeProgressionResult,
    ProgressionOrchestrator,
)
from application.use_cases.propagate_increment import (
    IncrementPropagator,
    PropagateIncrementResult,
)
from application.use_cases.record_feedback import (
    RecordFeedbackResult,
    RecordFeedbackUseCase,
)
from application.use_cases.configure_increment import (
    ConfigureIncrementResult,
    ConfigureIncrementUseCase,
)

__all__ = [
    # Precompute progression
    "ProgressionOrchestrator",
    "PrecomputeProgressionResult",
    # Propagate increment
    "IncrementPropagator",
    "PropagateIncrementResult",
    # Record feedback
    "RecordFeedbackUseCase",
    "RecordFeedbackResult",
    # Configure increment
    "ConfigureIncrementUseCase",
    "ConfigureIncrementResult",
]
