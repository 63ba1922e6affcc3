"""Performance regression detection.

Compares a completed benchmark session's p95 latency against its
baseline: the most recent earlier completed session of the same method
on the same contract.

Follows the detector pattern:
    - Stateless, pure functions over frozen records
    - compare -> BenchmarkComparison (always, when a baseline exists)
    - alert   -> PerformanceAlert (only when the comparison regresses)
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from loguru import logger

from quality_engine.core.exceptions import DataValidationError, InvalidStateTransitionError
from quality_engine.models.benchmark import (
    BenchmarkComparison,
    BenchmarkRecord,
    PerformanceAlert,
)

# delta_pct reported when the baseline p95 is 0 and the current one is not
ZERO_BASELINE_REGRESSION_PCT = 100.0


@dataclass(frozen=True)
class RegressionOutcome:
    """Comparison and optional alert for one session.

    Attributes:
        comparison: Diff against the baseline (None without a baseline)
        alert: Regression alert (None unless the comparison regressed)
    """

    comparison: BenchmarkComparison | None = None
    alert: PerformanceAlert | None = None

    @property
    def has_baseline(self) -> bool:
        """A baseline existed for this session."""
        return self.comparison is not None


def select_baseline(
    current: BenchmarkRecord,
    history: Iterable[BenchmarkRecord],
) -> BenchmarkRecord | None:
    """Most recent completed session strictly older than ``current``.

    Only sessions of the same contract and method qualify; ``current``
    itself is never its own baseline.
    """
    candidates = [
        record
        for record in history
        if record.id != current.id
        and record.contract_id == current.contract_id
        and record.method_name == current.method_name
        and record.is_completed
        and record.stats is not None
        and record.created_at < current.created_at
    ]
    if not candidates:
        return None
    return max(candidates, key=lambda r: r.created_at)


def regression_pct(baseline_p95: float, current_p95: float) -> float:
    """Signed p95 change in percent of the baseline.

    A zero baseline yields 0.0 when nothing changed and
    ``ZERO_BASELINE_REGRESSION_PCT`` otherwise.
    """
    delta_ms = current_p95 - baseline_p95
    if baseline_p95 == 0:
        return 0.0 if delta_ms == 0 else ZERO_BASELINE_REGRESSION_PCT
    return delta_ms * 100 / baseline_p95


def compare_benchmarks(
    current: BenchmarkRecord,
    baseline: BenchmarkRecord,
    alert_threshold_pct: float,
) -> BenchmarkComparison:
    """Diff two completed sessions.

    ``is_regression`` is True only for a slowdown strictly beyond the
    threshold; improvements never regress.
    """
    current_p95 = current.p95_ms
    baseline_p95 = baseline.p95_ms
    delta_pct = regression_pct(baseline_p95, current_p95)
    return BenchmarkComparison(
        previous_benchmark_id=baseline.id,
        previous_version=baseline.contract_version,
        previous_p95_ms=baseline_p95,
        current_p95_ms=current_p95,
        delta_ms=current_p95 - baseline_p95,
        delta_pct=delta_pct,
        is_regression=delta_pct > alert_threshold_pct,
    )


def detect_regression(
    current: BenchmarkRecord,
    baseline: BenchmarkRecord | None,
    alert_threshold_pct: float,
) -> RegressionOutcome:
    """Compare a completed session with its baseline and alert on regression.

    Args:
        current: Completed session
        baseline: Previous completed session, or None
        alert_threshold_pct: Slowdown (%) above which an alert is raised

    Returns:
        RegressionOutcome. Without a baseline both fields are None.

    Raises:
        InvalidStateTransitionError: ``current`` is not completed
        DataValidationError: Negative alert threshold
    """
    if not current.is_completed:
        msg = "Regression detection requires a completed benchmark"
        raise InvalidStateTransitionError(
            msg, context={"benchmark_id": current.id, "status": current.status}
        )
    if alert_threshold_pct < 0:
        msg = "Alert threshold must be non-negative"
        raise DataValidationError(msg, context={"alert_threshold_pct": alert_threshold_pct})

    if baseline is None:
        return RegressionOutcome()

    comparison = compare_benchmarks(current, baseline, alert_threshold_pct)
    if not comparison.is_regression:
        return RegressionOutcome(comparison=comparison)

    alert = PerformanceAlert(
        contract_id=current.contract_id,
        method_name=current.method_name,
        baseline_benchmark_id=baseline.id,
        current_benchmark_id=current.id,
        baseline_p95_ms=comparison.previous_p95_ms,
        current_p95_ms=comparison.current_p95_ms,
        regression_pct=comparison.delta_pct,
        alert_threshold_pct=alert_threshold_pct,
    )
    logger.warning(
        f"Performance regression on {current.method_name}: "
        f"p95 {comparison.previous_p95_ms:.3f}ms -> {comparison.current_p95_ms:.3f}ms "
        f"(+{comparison.delta_pct:.2f}% > {alert_threshold_pct:.2f}%)"
    )
    return RegressionOutcome(comparison=comparison, alert=alert)
