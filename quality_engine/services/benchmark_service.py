"""Benchmark Service: benchmark session lifecycle and regression checks.

Executing the benchmarked method is done by an external runner. This
service creates the session record, and once the runner has produced its
``BenchmarkRun``s, finalizes the session:

    1. Pending -> Running
    2. Aggregate run timings into statistics
    3. Running -> Completed (or -> Failed with a reason)
    4. Compare with the baseline session and raise an alert on regression

Callers must serialize finalization per (contract, version, method);
the service holds no locks.
"""

from collections.abc import Iterable, Sequence
from datetime import datetime

from quality_engine.analysis.regression import detect_regression, select_baseline
from quality_engine.analysis.stats import aggregate_runs
from quality_engine.config.settings import EngineSettings, get_settings
from quality_engine.core.exceptions import (
    ComputationError,
    DataValidationError,
    InvalidStateTransitionError,
)
from quality_engine.logging.context import benchmark_scope, get_contract_logger
from quality_engine.models.benchmark import (
    BenchmarkRecord,
    BenchmarkResponse,
    BenchmarkRun,
    RunBenchmarkRequest,
)
from quality_engine.models.types import BenchmarkStatus

_UNVERSIONED = "unversioned"


class BenchmarkService:
    """Benchmark session orchestration (no storage, no execution).

    Example:
        >>> service = BenchmarkService()
        >>> record = service.create_session("c-1", RunBenchmarkRequest(method="transfer"))
        >>> response = service.finalize_session(record, runs, history)
        >>> response.alert is None
        True
    """

    def __init__(self, settings: EngineSettings | None = None) -> None:
        """BenchmarkService initialization.

        Args:
            settings: Engine settings (env defaults when None)
        """
        self.settings = settings or get_settings()

    def create_session(
        self,
        contract_id: str,
        request: RunBenchmarkRequest,
        created_at: datetime | None = None,
    ) -> BenchmarkRecord:
        """Validate a benchmark request and open a Pending session.

        Omitted iterations take ``settings.default_iterations``.

        Raises:
            InvalidIterationCountError: Iterations outside the configured bounds
        """
        request = request.validated(
            self.settings.min_iterations,
            self.settings.max_iterations,
            self.settings.default_iterations,
        )
        record_kwargs: dict[str, object] = {}
        if created_at is not None:
            record_kwargs["created_at"] = created_at
        record = BenchmarkRecord(
            contract_id=contract_id,
            contract_version=request.version or _UNVERSIONED,
            method_name=request.method,
            iterations=request.iterations,
            args_json=request.args_json,
            **record_kwargs,
        )
        get_contract_logger(
            contract_id=contract_id,
            version=record.contract_version,
            operation=request.method,
        ).debug(f"Benchmark session {record.id} created ({record.iterations} iterations)")
        return record

    def finalize_session(
        self,
        record: BenchmarkRecord,
        runs: Sequence[BenchmarkRun],
        history: Iterable[BenchmarkRecord] = (),
        alert_threshold_pct: float | None = None,
        completed_at: datetime | None = None,
    ) -> BenchmarkResponse:
        """Aggregate a session's runs and compare it with its baseline.

        A computation failure (no runs, runs of another session, invalid
        timings) does not raise: the session comes back Failed with the
        reason in ``error_message`` and no comparison or alert.

        Args:
            record: Pending or Running session
            runs: Timed iterations produced by the runner
            history: Stored sessions to pick the baseline from
            alert_threshold_pct: Regression threshold (settings default when None)
            completed_at: Completion timestamp (now when None)

        Returns:
            BenchmarkResponse

        Raises:
            InvalidStateTransitionError: ``record`` is already Completed or Failed
            DataValidationError: Negative alert threshold
        """
        threshold = (
            alert_threshold_pct
            if alert_threshold_pct is not None
            else self.settings.alert_threshold_pct
        )
        if threshold < 0:
            msg = "Alert threshold must be non-negative"
            raise DataValidationError(msg, context={"alert_threshold_pct": threshold})

        scope = benchmark_scope(record.contract_id, record.method_name, record.contract_version)
        with scope:
            log = scope.logger

            if record.status.is_terminal:
                msg = "Benchmark session already finalized"
                raise InvalidStateTransitionError(
                    msg, context={"benchmark_id": record.id, "status": record.status}
                )
            running = record.start() if record.status == BenchmarkStatus.PENDING else record
            ordered_runs = sorted(runs, key=lambda r: r.iteration)

            foreign = [r for r in ordered_runs if r.benchmark_id != running.id]
            if foreign:
                reason = f"{len(foreign)} run(s) belong to a different benchmark session"
                log.error(f"Benchmark failed: {reason}")
                return BenchmarkResponse(
                    benchmark=running.fail(reason, completed_at),
                    runs=list(ordered_runs),
                )

            if ordered_runs and len(ordered_runs) != running.iterations:
                log.warning(
                    f"Expected {running.iterations} runs, got {len(ordered_runs)}"
                )

            try:
                stats = aggregate_runs(ordered_runs)
            except (ComputationError, DataValidationError) as e:
                log.error(f"Benchmark failed: {e}")
                return BenchmarkResponse(
                    benchmark=running.fail(str(e), completed_at),
                    runs=list(ordered_runs),
                )

            completed = running.complete(stats, completed_at)
            baseline = select_baseline(completed, history)
            outcome = detect_regression(completed, baseline, threshold)

            log.info(
                f"Benchmark completed: p95={stats.p95_ms:.3f}ms, avg={stats.avg_ms:.3f}ms, "
                f"baseline={'none' if baseline is None else baseline.id}"
            )
            return BenchmarkResponse(
                benchmark=completed,
                runs=list(ordered_runs),
                alert=outcome.alert,
                comparison=outcome.comparison,
            )
