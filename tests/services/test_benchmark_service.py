"""Tests for quality_engine/services/benchmark_service.py."""

from __future__ import annotations

from datetime import timedelta
from uuid import uuid4

import pytest

from quality_engine.config.settings import EngineSettings
from quality_engine.core.exceptions import (
    DataValidationError,
    InvalidIterationCountError,
    InvalidStateTransitionError,
)
from quality_engine.logging.context import get_current_context
from quality_engine.models.benchmark import BenchmarkRun, RunBenchmarkRequest
from quality_engine.models.types import BenchmarkStatus
from quality_engine.services.benchmark_service import BenchmarkService
from tests.conftest import T0, make_completed_record, make_runs


@pytest.fixture
def service(settings: EngineSettings) -> BenchmarkService:
    return BenchmarkService(settings=settings)


class TestCreateSession:
    def test_pending_record(self, service: BenchmarkService) -> None:
        request = RunBenchmarkRequest(method="transfer", iterations=4, version="v1.1.0")
        record = service.create_session("c-1", request, created_at=T0)
        assert record.status == BenchmarkStatus.PENDING
        assert record.iterations == 4
        assert record.contract_version == "v1.1.0"
        assert record.created_at == T0

    def test_unversioned(self, service: BenchmarkService) -> None:
        record = service.create_session("c-1", RunBenchmarkRequest(method="transfer"))
        assert record.contract_version == "unversioned"

    def test_default_iterations_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("QUALITY_DEFAULT_ITERATIONS", "50")
        service = BenchmarkService(settings=EngineSettings(_env_file=None))  # type: ignore[call-arg]
        record = service.create_session("c-1", RunBenchmarkRequest(method="transfer"))
        assert record.iterations == 50

    def test_explicit_iterations_win(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("QUALITY_DEFAULT_ITERATIONS", "50")
        service = BenchmarkService(settings=EngineSettings(_env_file=None))  # type: ignore[call-arg]
        request = RunBenchmarkRequest(method="transfer", iterations=3)
        assert service.create_session("c-1", request).iterations == 3

    def test_iterations_rejected(self, service: BenchmarkService) -> None:
        with pytest.raises(InvalidIterationCountError):
            service.create_session("c-1", RunBenchmarkRequest(method="transfer", iterations=5000))


class TestFinalizeSession:
    """집계 → 완료/실패 → 베이스라인 비교."""

    def test_regression_alert(self, service: BenchmarkService) -> None:
        baseline = make_completed_record(100.0, created_at=T0)
        record = service.create_session(
            "c-1",
            RunBenchmarkRequest(method="transfer", iterations=1),
            created_at=T0 + timedelta(days=1),
        )
        response = service.finalize_session(
            record, make_runs(record, [115.0]), history=[baseline], alert_threshold_pct=10.0
        )

        assert response.benchmark.status == BenchmarkStatus.COMPLETED
        assert response.benchmark.p95_ms == pytest.approx(115.0)
        assert response.comparison is not None
        assert response.comparison.delta_pct == pytest.approx(15.0)
        assert response.alert is not None
        assert response.alert.regression_pct == pytest.approx(15.0)

    def test_below_threshold(self, service: BenchmarkService) -> None:
        baseline = make_completed_record(100.0, created_at=T0)
        record = service.create_session(
            "c-1",
            RunBenchmarkRequest(method="transfer", iterations=1),
            created_at=T0 + timedelta(days=1),
        )
        response = service.finalize_session(
            record, make_runs(record, [115.0]), history=[baseline], alert_threshold_pct=20.0
        )
        assert response.comparison is not None
        assert response.comparison.is_regression is False
        assert response.alert is None

    def test_first_session_has_no_comparison(self, service: BenchmarkService) -> None:
        record = service.create_session(
            "c-1", RunBenchmarkRequest(method="transfer", iterations=4)
        )
        response = service.finalize_session(record, make_runs(record, [10.0, 20.0, 30.0, 40.0]))
        assert response.benchmark.is_completed
        assert response.benchmark.stats is not None
        assert response.benchmark.stats.p95_ms == pytest.approx(38.5)
        assert response.comparison is None
        assert response.alert is None

    def test_default_threshold_from_settings(self, service: BenchmarkService) -> None:
        baseline = make_completed_record(100.0, created_at=T0)
        record = service.create_session(
            "c-1",
            RunBenchmarkRequest(method="transfer", iterations=1),
            created_at=T0 + timedelta(days=1),
        )
        response = service.finalize_session(record, make_runs(record, [111.0]), [baseline])
        assert response.alert is not None
        assert response.alert.alert_threshold_pct == 10.0

    def test_no_runs_fails(self, service: BenchmarkService) -> None:
        record = service.create_session("c-1", RunBenchmarkRequest(method="transfer"))
        response = service.finalize_session(record, [])
        assert response.benchmark.status == BenchmarkStatus.FAILED
        assert response.benchmark.error_message
        assert response.benchmark.stats is None
        assert response.comparison is None

    def test_foreign_runs_fail(self, service: BenchmarkService) -> None:
        record = service.create_session(
            "c-1", RunBenchmarkRequest(method="transfer", iterations=2)
        )
        runs = [
            BenchmarkRun(benchmark_id=record.id, iteration=0, execution_time_ms=1.0),
            BenchmarkRun(benchmark_id=uuid4(), iteration=1, execution_time_ms=1.0),
        ]
        response = service.finalize_session(record, runs)
        assert response.benchmark.status == BenchmarkStatus.FAILED
        assert "different benchmark session" in (response.benchmark.error_message or "")

    def test_run_count_mismatch_warns(
        self, service: BenchmarkService, log_messages: list[str]
    ) -> None:
        record = service.create_session(
            "c-1", RunBenchmarkRequest(method="transfer", iterations=5)
        )
        response = service.finalize_session(record, make_runs(record, [1.0, 2.0]))
        assert response.benchmark.is_completed
        assert any("Expected 5 runs, got 2" in m for m in log_messages)

    def test_running_record_accepted(self, service: BenchmarkService) -> None:
        record = service.create_session(
            "c-1", RunBenchmarkRequest(method="transfer", iterations=1)
        ).start()
        response = service.finalize_session(record, make_runs(record, [3.0]))
        assert response.benchmark.is_completed

    def test_terminal_record_rejected(self, service: BenchmarkService) -> None:
        with pytest.raises(InvalidStateTransitionError):
            service.finalize_session(make_completed_record(1.0), [])

    def test_context_reset_after_finalize(self, service: BenchmarkService) -> None:
        record = service.create_session("c-1", RunBenchmarkRequest(method="transfer", iterations=1))
        service.finalize_session(record, make_runs(record, [3.0]))
        with pytest.raises(InvalidStateTransitionError):
            service.finalize_session(make_completed_record(1.0), [])
        assert set(get_current_context().values()) == {None}

    def test_negative_threshold(self, service: BenchmarkService) -> None:
        record = service.create_session("c-1", RunBenchmarkRequest(method="transfer"))
        with pytest.raises(DataValidationError):
            service.finalize_session(record, [], alert_threshold_pct=-1.0)
