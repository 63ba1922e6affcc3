"""Core module - exceptions and logging setup shared by every layer."""

from quality_engine.core.exceptions import (
    ComputationError,
    DataValidationError,
    EmptyInputError,
    InvalidIterationCountError,
    InvalidStateTransitionError,
    InvalidWeightsError,
    MetricValidationError,
    QualityEngineError,
    add_context_note,
)

__all__ = [
    "ComputationError",
    "DataValidationError",
    "EmptyInputError",
    "InvalidIterationCountError",
    "InvalidStateTransitionError",
    "InvalidWeightsError",
    "MetricValidationError",
    "QualityEngineError",
    "add_context_note",
]
