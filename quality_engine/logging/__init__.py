"""Logging configuration and context binding."""

from quality_engine.logging.config import LoggingConfig, get_logging_config
from quality_engine.logging.context import (
    LoggingContext,
    benchmark_scope,
    generate_trace_id,
    get_contract_logger,
    get_current_context,
    quality_scope,
)

__all__ = [
    "LoggingConfig",
    "LoggingContext",
    "benchmark_scope",
    "generate_trace_id",
    "get_contract_logger",
    "get_current_context",
    "get_logging_config",
    "quality_scope",
]
