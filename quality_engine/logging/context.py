"""Contract-scoped logger binding.

Every record emitted while scoring a version or finalizing a benchmark
session carries ``contract_id`` / ``version`` / ``operation`` /
``trace_id``.

``get_contract_logger`` only binds. The contextvars read by
``get_current_context`` are set by a ``LoggingContext`` scope and reset
when it exits, so one computation never leaks its context into the next.
"""

from __future__ import annotations

import uuid
from contextvars import ContextVar, Token
from typing import TYPE_CHECKING

from loguru import logger

if TYPE_CHECKING:
    from loguru import Logger

current_contract_id: ContextVar[str | None] = ContextVar("contract_id", default=None)
current_version: ContextVar[str | None] = ContextVar("version", default=None)
current_operation: ContextVar[str | None] = ContextVar("operation", default=None)
current_trace_id: ContextVar[str | None] = ContextVar("trace_id", default=None)

_CONTEXT_VARS: dict[str, ContextVar[str | None]] = {
    "contract_id": current_contract_id,
    "version": current_version,
    "operation": current_operation,
    "trace_id": current_trace_id,
}


def get_contract_logger(
    *,
    contract_id: str | None = None,
    version: str | None = None,
    operation: str | None = None,
    trace_id: str | None = None,
    **extra: str,
) -> Logger:
    """Logger bound to a contract (empty values are not bound).

    Args:
        contract_id: Registry identifier of the contract
        version: Contract version tag (e.g., "v1.2.0")
        operation: Benchmarked method name (e.g., "transfer")
        trace_id: Correlation id for one computation
        **extra: Additional fields bound as-is

    Example:
        >>> log = get_contract_logger(contract_id="c-1", version="v1.0.0")
        >>> log.info("Quality computed")
    """
    values = {
        "contract_id": contract_id,
        "version": version,
        "operation": operation,
        "trace_id": trace_id,
    }
    bound = {key: value for key, value in values.items() if value}
    return logger.bind(**bound, **extra)


class LoggingContext:
    """Scope of one computation: sets the contextvars, resets them on exit.

    Example:
        >>> with quality_scope("c-1", "v1.0.0") as scope:
        ...     scope.logger.info("Scoring")  # bound to c-1 / v1.0.0
        ...     get_current_context()["contract_id"]
        'c-1'
        >>> get_current_context()["contract_id"] is None
        True
    """

    def __init__(
        self,
        contract_id: str | None = None,
        version: str | None = None,
        operation: str | None = None,
        trace_id: str | None = None,
    ) -> None:
        self.values: dict[str, str] = {
            key: value
            for key, value in {
                "contract_id": contract_id,
                "version": version,
                "operation": operation,
                "trace_id": trace_id,
            }.items()
            if value
        }
        self._tokens: dict[str, Token[str | None]] = {}

    @property
    def logger(self) -> Logger:
        """Logger bound to this scope's values."""
        return get_contract_logger(**self.values)

    def __enter__(self) -> LoggingContext:
        """Set every non-empty value for the duration of the scope."""
        self._tokens = {key: _CONTEXT_VARS[key].set(value) for key, value in self.values.items()}
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Restore the values that were current before the scope."""
        for key, token in self._tokens.items():
            _CONTEXT_VARS[key].reset(token)
        self._tokens = {}


def quality_scope(contract_id: str, version: str) -> LoggingContext:
    """Scope for one quality computation, with a fresh trace id."""
    return LoggingContext(contract_id=contract_id, version=version, trace_id=generate_trace_id())


def benchmark_scope(
    contract_id: str,
    operation: str,
    version: str | None = None,
) -> LoggingContext:
    """Scope for one benchmark session, with a fresh trace id."""
    return LoggingContext(
        contract_id=contract_id,
        version=version,
        operation=operation,
        trace_id=generate_trace_id(),
    )


def generate_trace_id() -> str:
    """32-character hex correlation id."""
    return uuid.uuid4().hex


def get_current_context() -> dict[str, str | None]:
    """Contract context of the innermost active scope (None outside any)."""
    return {key: var.get() for key, var in _CONTEXT_VARS.items()}
