"""Custom exception hierarchy for the quality engine.

This module defines a domain-driven exception hierarchy. Exceptions are
categorized by their nature and expected handling behavior.

Exception Categories:
    - Validation (Reject): bad weights, out-of-range iteration counts,
      malformed metric inputs. Raised before any computation starts.
    - Computation (Fail the record): statistics over empty input.
    - Lifecycle (Caller bug): illegal benchmark status transitions.

None of these are retried internally; callers decide whether to rerun
the whole computation.
"""


class QualityEngineError(Exception):
    """Base class for every engine error.

    Do not raise this directly; use one of the subclasses.

    Attributes:
        message: Error message
        context: Extra key/value pairs for debugging
    """

    def __init__(
        self, message: str, *, context: dict[str, object] | None = None
    ) -> None:
        """Initialize the error.

        Args:
            message: Error message
            context: Extra debugging context (optional)
        """
        super().__init__(message)
        self.message = message
        self.context: dict[str, object] = context or {}

    def __str__(self) -> str:
        """Return the message followed by the context, if any."""
        if self.context:
            ctx_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} [{ctx_str}]"
        return self.message


# =============================================================================
# Validation Errors (Reject before computing)
# =============================================================================


class DataValidationError(QualityEngineError):
    """Input rejected before any computation was attempted.

    Example:
        >>> raise DataValidationError(
        ...     "Coverage must be within [0, 1]",
        ...     context={"field": "line_coverage", "value": 1.4}
        ... )
    """


class InvalidWeightsError(DataValidationError):
    """Quality weights do not sum to 1.0 within tolerance.

    Weights are never normalized silently.
    """


class InvalidIterationCountError(DataValidationError):
    """Benchmark iteration count outside the allowed range.

    Out-of-range values are rejected, never clamped.
    """


class MetricValidationError(DataValidationError):
    """Raw metric payload failed schema validation."""


# =============================================================================
# Computation Errors (Fail the enclosing record)
# =============================================================================


class ComputationError(QualityEngineError):
    """A computation could not produce a result from valid-looking input."""


class EmptyInputError(ComputationError):
    """Statistics requested over zero samples.

    A benchmark session must never reach Completed with zero runs.
    """


# =============================================================================
# Lifecycle Errors
# =============================================================================


class InvalidStateTransitionError(QualityEngineError):
    """Benchmark record asked to move along a transition that does not exist.

    Example:
        >>> raise InvalidStateTransitionError(
        ...     "Cannot complete a benchmark that is not running",
        ...     context={"from": "pending", "to": "completed"}
        ... )
    """


# =============================================================================
# Utility Functions
# =============================================================================


def add_context_note(exc: BaseException, note: str) -> None:
    """Attach a note to an exception while keeping its traceback.

    Args:
        exc: Exception instance
        note: Note to append

    Example:
        >>> try:
        ...     aggregate_runs(samples)
        ... except EmptyInputError as e:
        ...     add_context_note(e, f"while finalizing {record.id}")
        ...     raise
    """
    exc.add_note(note)
