"""Benchmark session models.

A benchmark session (``BenchmarkRecord``) owns an append-only list of
timed iterations (``BenchmarkRun``). Once every run is in, aggregate
statistics are attached and the session is compared to its baseline.

Rules Applied:
    - Pydantic Modeling: frozen=True; transitions return new instances
    - Modern typing (X | None, list[])
"""

from datetime import datetime
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from quality_engine.core.exceptions import (
    InvalidIterationCountError,
    InvalidStateTransitionError,
)
from quality_engine.models.timeutil import ensure_utc, utcnow
from quality_engine.models.types import BenchmarkStatus

MIN_ITERATIONS = 1
MAX_ITERATIONS = 1000
DEFAULT_ITERATIONS = 100
DEFAULT_ALERT_THRESHOLD_PCT = 10.0


def validate_iterations(
    iterations: int,
    min_iterations: int = MIN_ITERATIONS,
    max_iterations: int = MAX_ITERATIONS,
) -> int:
    """Return ``iterations`` unchanged or raise.

    Raises:
        InvalidIterationCountError: Outside ``[min_iterations, max_iterations]``
    """
    if not min_iterations <= iterations <= max_iterations:
        msg = f"Iteration count must be within [{min_iterations}, {max_iterations}]"
        raise InvalidIterationCountError(msg, context={"iterations": iterations})
    return iterations


class BenchmarkStats(BaseModel):
    """Aggregate latency statistics for one session (milliseconds).

    ``stddev_ms`` is the population standard deviation.
    """

    model_config = ConfigDict(frozen=True)

    min_ms: float = Field(..., ge=0)
    max_ms: float = Field(..., ge=0)
    avg_ms: float = Field(..., ge=0)
    stddev_ms: float = Field(..., ge=0)
    p95_ms: float = Field(..., ge=0)
    p99_ms: float = Field(..., ge=0)


class BenchmarkRun(BaseModel):
    """One timed iteration of a benchmarked method."""

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    benchmark_id: UUID
    iteration: int = Field(..., ge=0)
    execution_time_ms: float = Field(..., ge=0)
    cpu_instructions: int | None = Field(default=None, ge=0)
    memory_bytes: int | None = Field(default=None, ge=0)
    created_at: datetime = Field(default_factory=utcnow)


class BenchmarkRecord(BaseModel):
    """One benchmark session: N iterations of one method on one version.

    Status transitions (``start``, ``complete``, ``fail``) return a new
    record; the receiver is never modified.

    Example:
        >>> record = BenchmarkRecord(
        ...     contract_id="c-1", contract_version="v1.0.0",
        ...     method_name="transfer", iterations=100,
        ... )
        >>> record.start().status
        <BenchmarkStatus.RUNNING: 'running'>
    """

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    contract_id: str
    contract_version: str
    method_name: str = Field(..., min_length=1)
    iterations: int = Field(..., ge=MIN_ITERATIONS, le=MAX_ITERATIONS)
    args_json: str | None = None
    stats: BenchmarkStats | None = None
    contract_size_bytes: int | None = Field(default=None, ge=0)
    status: BenchmarkStatus = BenchmarkStatus.PENDING
    error_message: str | None = None
    created_at: datetime = Field(default_factory=utcnow)
    completed_at: datetime | None = None

    @field_validator("created_at", "completed_at")
    @classmethod
    def as_utc(cls, v: datetime | None) -> datetime | None:
        """Naive timestamps are read as UTC."""
        return ensure_utc(v)

    @property
    def p95_ms(self) -> float:
        """p95 latency of a completed session.

        Raises:
            InvalidStateTransitionError: Session has no statistics yet
        """
        if self.stats is None:
            msg = "Benchmark has no statistics"
            raise InvalidStateTransitionError(
                msg, context={"benchmark_id": self.id, "status": self.status}
            )
        return self.stats.p95_ms

    @property
    def is_completed(self) -> bool:
        """Session finished successfully."""
        return self.status == BenchmarkStatus.COMPLETED

    def _transition(self, target: BenchmarkStatus, **update: object) -> "BenchmarkRecord":
        if not self.status.can_transition_to(target):
            msg = f"Cannot move benchmark from {self.status} to {target}"
            raise InvalidStateTransitionError(
                msg,
                context={"benchmark_id": self.id, "from": self.status, "to": target},
            )
        return self.model_copy(update={"status": target, **update})

    def start(self) -> "BenchmarkRecord":
        """Pending -> Running."""
        return self._transition(BenchmarkStatus.RUNNING)

    def complete(
        self,
        stats: BenchmarkStats,
        completed_at: datetime | None = None,
    ) -> "BenchmarkRecord":
        """Running -> Completed, attaching the aggregate statistics."""
        return self._transition(
            BenchmarkStatus.COMPLETED,
            stats=stats,
            completed_at=completed_at or utcnow(),
        )

    def fail(self, reason: str, completed_at: datetime | None = None) -> "BenchmarkRecord":
        """Pending | Running -> Failed, recording a human-readable reason."""
        return self._transition(
            BenchmarkStatus.FAILED,
            error_message=reason,
            completed_at=completed_at or utcnow(),
        )


class BenchmarkComparison(BaseModel):
    """Informational diff against the previous completed session.

    Produced whenever a baseline exists, whether or not it alerts.
    """

    model_config = ConfigDict(frozen=True)

    previous_benchmark_id: UUID
    previous_version: str
    previous_p95_ms: float
    current_p95_ms: float
    delta_ms: float
    delta_pct: float
    is_regression: bool


class PerformanceAlert(BaseModel):
    """Regression alert linking a baseline and a current session.

    Only ``resolved`` changes after creation, through ``resolve()``.
    """

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    contract_id: str
    method_name: str
    baseline_benchmark_id: UUID
    current_benchmark_id: UUID
    baseline_p95_ms: float
    current_p95_ms: float
    regression_pct: float
    alert_threshold_pct: float
    resolved: bool = False
    created_at: datetime = Field(default_factory=utcnow)

    def resolve(self) -> "PerformanceAlert":
        """Return a copy marked as resolved."""
        return self.model_copy(update={"resolved": True})


class RunBenchmarkRequest(BaseModel):
    """Request to benchmark one method.

    ``iterations`` left as None takes the configured default in
    ``validated()``; values outside [1, 1000] are rejected, not clamped.
    """

    model_config = ConfigDict(frozen=True)

    method: str = Field(..., min_length=1)
    iterations: int | None = None
    args_json: str | None = None
    version: str | None = None
    alert_threshold_pct: float = Field(default=DEFAULT_ALERT_THRESHOLD_PCT, ge=0)

    def validated(
        self,
        min_iterations: int = MIN_ITERATIONS,
        max_iterations: int = MAX_ITERATIONS,
        default_iterations: int = DEFAULT_ITERATIONS,
    ) -> "RunBenchmarkRequest":
        """Request with ``iterations`` resolved and bounds-checked.

        Raises:
            InvalidIterationCountError: Outside ``[min_iterations, max_iterations]``
        """
        iterations = self.iterations if self.iterations is not None else default_iterations
        validate_iterations(iterations, min_iterations, max_iterations)
        if iterations == self.iterations:
            return self
        return self.model_copy(update={"iterations": iterations})


class BenchmarkResponse(BaseModel):
    """Result of finalizing a benchmark session."""

    model_config = ConfigDict(frozen=True)

    benchmark: BenchmarkRecord
    runs: list[BenchmarkRun] = Field(default_factory=list)
    alert: PerformanceAlert | None = None
    comparison: BenchmarkComparison | None = None


class BenchmarkTrendPoint(BaseModel):
    """Historical trend point for charting."""

    model_config = ConfigDict(frozen=True)

    benchmark_id: UUID
    version: str
    created_at: datetime
    p95_ms: float
    avg_ms: float
    min_ms: float
    max_ms: float


class ContractBenchmarkSummary(BaseModel):
    """Dashboard summary of every benchmark for a contract."""

    model_config = ConfigDict(frozen=True)

    contract_id: str
    total_benchmarks: int = Field(..., ge=0)
    methods_benchmarked: list[str] = Field(default_factory=list)
    latest_benchmarks: list[BenchmarkRecord] = Field(default_factory=list)
    active_alerts: list[PerformanceAlert] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def has_active_alerts(self) -> bool:
        """At least one unresolved regression alert."""
        return bool(self.active_alerts)
