"""Shared fixtures for tests.

이 모듈은 테스트에서 공통으로 사용되는 픽스처를 제공합니다.

Rules Applied:
    - #17 Testing Standards: Pytest fixtures
"""

from __future__ import annotations

from collections.abc import Iterator
from datetime import UTC, datetime, timedelta

import pytest
from loguru import logger

from quality_engine.config.settings import EngineSettings
from quality_engine.models.benchmark import BenchmarkRecord, BenchmarkRun, BenchmarkStats
from quality_engine.models.metrics import (
    CodeMetrics,
    DocMetrics,
    MetricSnapshot,
    SecurityMetrics,
    TestMetrics,
)
from quality_engine.models.types import BenchmarkStatus

# ---------------------------------------------------------------------------
# 디렉토리 경로 → pytest 마커 자동 매핑
# ---------------------------------------------------------------------------
_DIR_MARKER_MAP: dict[str, str] = {
    "/cli/": "integration",
    "/services/": "integration",
    "/analysis/": "unit",
    "/core/": "unit",
    "/models/": "unit",
    "/config/": "unit",
    "/logging/": "unit",
}


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    """디렉토리 경로 기반 자동 마커 부여."""
    for item in items:
        fspath = str(item.fspath)
        for dir_pattern, marker_name in _DIR_MARKER_MAP.items():
            if dir_pattern in fspath:
                item.add_marker(getattr(pytest.mark, marker_name))
                break


T0 = datetime(2025, 1, 1, tzinfo=UTC)


# ---------------------------------------------------------------------------
# Metric fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def strong_metrics() -> MetricSnapshot:
    """모든 차원에서 만점을 받는 지표."""
    return MetricSnapshot(
        code=CodeMetrics(
            lines_of_code=1000,
            comment_lines=200,
            cyclomatic_complexity=3.0,
            max_function_complexity=8,
            function_count=50,
            avg_function_length=15.0,
            deeply_nested_count=0,
        ),
        tests=TestMetrics(
            test_count=40,
            test_lines=1200,
            line_coverage=1.0,
            function_coverage=1.0,
            branch_coverage=1.0,
            test_to_code_ratio=1.2,
            has_integration_tests=True,
            has_property_tests=True,
        ),
        docs=DocMetrics(
            public_fn_doc_coverage=1.0,
            type_doc_coverage=1.0,
            has_readme=True,
            has_changelog=True,
            has_license=True,
            example_count=5,
        ),
        security=SecurityMetrics(
            audit_score=100.0,
            is_verified=True,
            has_formal_audit=True,
        ),
    )


@pytest.fixture
def weak_metrics() -> MetricSnapshot:
    """빈 지표 (모든 차원 0점)."""
    return MetricSnapshot(
        code=CodeMetrics(
            lines_of_code=0,
            cyclomatic_complexity=20.0,
            max_function_complexity=30,
            avg_function_length=80.0,
            deeply_nested_count=10,
        ),
    )


@pytest.fixture
def settings() -> EngineSettings:
    """환경변수와 무관한 기본 설정."""
    return EngineSettings(_env_file=None)  # type: ignore[call-arg]


# ---------------------------------------------------------------------------
# Benchmark fixtures
# ---------------------------------------------------------------------------


def make_completed_record(
    p95_ms: float,
    *,
    created_at: datetime = T0,
    contract_id: str = "c-1",
    method_name: str = "transfer",
    version: str = "v1.0.0",
) -> BenchmarkRecord:
    """p95가 지정된 Completed 벤치마크 레코드."""
    return BenchmarkRecord(
        contract_id=contract_id,
        contract_version=version,
        method_name=method_name,
        iterations=10,
        status=BenchmarkStatus.COMPLETED,
        stats=BenchmarkStats(
            min_ms=p95_ms / 2,
            max_ms=p95_ms,
            avg_ms=p95_ms * 0.75,
            stddev_ms=1.0,
            p95_ms=p95_ms,
            p99_ms=p95_ms,
        ),
        created_at=created_at,
        completed_at=created_at + timedelta(seconds=5),
    )


def make_runs(record: BenchmarkRecord, samples: list[float]) -> list[BenchmarkRun]:
    """레코드에 속한 실행 목록."""
    return [
        BenchmarkRun(benchmark_id=record.id, iteration=i, execution_time_ms=ms)
        for i, ms in enumerate(samples)
    ]


@pytest.fixture
def log_messages() -> Iterator[list[str]]:
    """WARNING 이상 loguru 메시지 수집 (caplog 대신 sink 사용)."""
    messages: list[str] = []
    handler_id = logger.add(lambda msg: messages.append(str(msg)), level="WARNING")
    yield messages
    logger.remove(handler_id)
