"""
Domain exceptions for the progression engine.

These exceptions are used across domain, application and infrastructure layers.
Orchestration steps do not let them propagate to callers: they are carried as
the error of a StepResult (see application.result) so a failed precomputation
never blocks the completion of the current exercise.
"""


class ProgressionError(Exception):
    """Base class for every progression failure."""

    code = "progression_error"

    def __init__(self, message: str, *, instance_id: str = None):
        super().__init__(message)
        self.message = message
        self.instance_id = instance_id


class ExerciseLookupError(ProgressionError):
    """A store read failed or returned no matching instance."""

    code = "lookup_failure"


class AmbiguousChainIdentityError(ProgressionError):
    """Neither the original nor the substitute exercise id is present.

    The instance cannot be chained to future occurrences, so precomputation
    and increment propagation are skipped silently.
    """

    code = "ambiguous_chain_identity"


class InvalidRepsSpecError(ProgressionError, ValueError):
    """A programmed repetitions string is neither a number nor a min-max range."""

    code = "invalid_reps_spec"


class ProgressionWriteError(ProgressionError):
    """Precomputed values could not be persisted."""

    code = "write_failure"


class StoreError(Exception):
    """Raised by repository adapters when the backing store call fails."""

    pass
