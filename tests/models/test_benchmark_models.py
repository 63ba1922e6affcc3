"""Tests for quality_engine/models/benchmark.py."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from quality_engine.core.exceptions import (
    InvalidIterationCountError,
    InvalidStateTransitionError,
)
from quality_engine.models.benchmark import (
    BenchmarkRecord,
    BenchmarkStats,
    RunBenchmarkRequest,
    validate_iterations,
)
from quality_engine.models.types import BenchmarkStatus

_STATS = BenchmarkStats(
    min_ms=1.0, max_ms=5.0, avg_ms=2.0, stddev_ms=0.5, p95_ms=4.5, p99_ms=4.9
)


@pytest.fixture
def record() -> BenchmarkRecord:
    return BenchmarkRecord(
        contract_id="c-1",
        contract_version="v1.0.0",
        method_name="transfer",
        iterations=100,
    )


class TestBenchmarkStatus:
    @pytest.mark.parametrize(
        ("source", "target", "allowed"),
        [
            (BenchmarkStatus.PENDING, BenchmarkStatus.RUNNING, True),
            (BenchmarkStatus.PENDING, BenchmarkStatus.FAILED, True),
            (BenchmarkStatus.PENDING, BenchmarkStatus.COMPLETED, False),
            (BenchmarkStatus.RUNNING, BenchmarkStatus.COMPLETED, True),
            (BenchmarkStatus.RUNNING, BenchmarkStatus.FAILED, True),
            (BenchmarkStatus.COMPLETED, BenchmarkStatus.FAILED, False),
            (BenchmarkStatus.FAILED, BenchmarkStatus.RUNNING, False),
        ],
    )
    def test_transitions(
        self, source: BenchmarkStatus, target: BenchmarkStatus, allowed: bool
    ) -> None:
        assert source.can_transition_to(target) is allowed

    def test_terminal(self) -> None:
        assert BenchmarkStatus.COMPLETED.is_terminal
        assert BenchmarkStatus.FAILED.is_terminal
        assert not BenchmarkStatus.RUNNING.is_terminal


class TestBenchmarkRecord:
    """상태 전이는 새 레코드를 반환한다."""

    def test_lifecycle(self, record: BenchmarkRecord) -> None:
        running = record.start()
        done = running.complete(_STATS)

        assert record.status == BenchmarkStatus.PENDING
        assert running.status == BenchmarkStatus.RUNNING
        assert done.status == BenchmarkStatus.COMPLETED
        assert done.is_completed
        assert done.p95_ms == 4.5
        assert done.completed_at is not None
        assert done.id == record.id

    def test_fail_from_pending(self, record: BenchmarkRecord) -> None:
        failed = record.fail("no runs")
        assert failed.status == BenchmarkStatus.FAILED
        assert failed.error_message == "no runs"

    def test_cannot_skip_running(self, record: BenchmarkRecord) -> None:
        with pytest.raises(InvalidStateTransitionError):
            record.complete(_STATS)

    def test_terminal_is_final(self, record: BenchmarkRecord) -> None:
        done = record.start().complete(_STATS)
        with pytest.raises(InvalidStateTransitionError):
            done.fail("late failure")

    def test_p95_requires_stats(self, record: BenchmarkRecord) -> None:
        with pytest.raises(InvalidStateTransitionError):
            _ = record.p95_ms

    def test_frozen(self, record: BenchmarkRecord) -> None:
        with pytest.raises(ValidationError):
            record.status = BenchmarkStatus.RUNNING  # type: ignore[misc]

    @pytest.mark.parametrize("iterations", [0, 1001])
    def test_iteration_bounds(self, iterations: int) -> None:
        with pytest.raises(ValidationError):
            BenchmarkRecord(
                contract_id="c-1",
                contract_version="v1",
                method_name="transfer",
                iterations=iterations,
            )

    def test_naive_created_at_becomes_utc(self) -> None:
        record = BenchmarkRecord(
            contract_id="c-1",
            contract_version="v1",
            method_name="transfer",
            iterations=1,
            created_at=datetime(2025, 1, 1, 12, 0),  # noqa: DTZ001
        )
        assert record.created_at == datetime(2025, 1, 1, 12, 0, tzinfo=UTC)


class TestRunBenchmarkRequest:
    def test_defaults(self) -> None:
        request = RunBenchmarkRequest(method="transfer")
        assert request.iterations is None
        assert request.alert_threshold_pct == 10.0
        assert request.validated().iterations == 100
        assert request.validated(default_iterations=25).iterations == 25

    def test_explicit_iterations_kept(self) -> None:
        request = RunBenchmarkRequest(method="transfer", iterations=7)
        assert request.validated(default_iterations=25) is request

    @pytest.mark.parametrize("iterations", [0, -5, 1001])
    def test_rejects_out_of_range(self, iterations: int) -> None:
        with pytest.raises(InvalidIterationCountError) as exc_info:
            RunBenchmarkRequest(method="transfer", iterations=iterations).validated()
        assert exc_info.value.context["iterations"] == iterations

    @pytest.mark.parametrize("iterations", [1, 1000])
    def test_accepts_bounds(self, iterations: int) -> None:
        assert validate_iterations(iterations) == iterations
