"""Tests for quality_engine/logging/context.py."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

import pytest
from loguru import logger

from quality_engine.logging.context import (
    LoggingContext,
    benchmark_scope,
    generate_trace_id,
    get_contract_logger,
    get_current_context,
    quality_scope,
)


@pytest.fixture
def records() -> Iterator[list[dict[str, Any]]]:
    """로그 레코드의 extra 필드 수집."""
    captured: list[dict[str, Any]] = []
    handler_id = logger.add(lambda msg: captured.append(dict(msg.record["extra"])), level="DEBUG")
    yield captured
    logger.remove(handler_id)


class TestContextBinding:
    def test_quality_scope_binds_contract(self, records: list[dict[str, Any]]) -> None:
        with quality_scope("c-1", "v1.0.0") as scope:
            scope.logger.info("scored")
        assert records[-1]["contract_id"] == "c-1"
        assert records[-1]["version"] == "v1.0.0"
        assert len(records[-1]["trace_id"]) == 32

    def test_benchmark_scope_binds_operation(self, records: list[dict[str, Any]]) -> None:
        with benchmark_scope("c-1", "transfer") as scope:
            scope.logger.info("finalized")
        assert records[-1]["operation"] == "transfer"
        assert "version" not in records[-1]

    def test_logger_does_not_touch_context(self) -> None:
        """바인딩만 수행, contextvars는 그대로."""
        get_contract_logger(contract_id="c-9", operation="approve").info("bound")
        assert set(get_current_context().values()) == {None}

    def test_extra_fields(self, records: list[dict[str, Any]]) -> None:
        get_contract_logger(contract_id="c-1", category="defi").info("peer check")
        assert records[-1]["category"] == "defi"


class TestLoggingContext:
    """스코프 진입 시 설정, 종료 시 이전 값 복원."""

    def test_set_inside_scope(self) -> None:
        with LoggingContext(contract_id="c-9", operation="approve"):
            ctx = get_current_context()
            assert ctx["contract_id"] == "c-9"
            assert ctx["operation"] == "approve"
            assert ctx["version"] is None
        assert set(get_current_context().values()) == {None}

    def test_nested_scope_restores_outer(self) -> None:
        with quality_scope("outer", "v1"):
            with benchmark_scope("inner", "transfer", "v2"):
                assert get_current_context()["contract_id"] == "inner"
            ctx = get_current_context()
            assert ctx["contract_id"] == "outer"
            assert ctx["version"] == "v1"
            assert ctx["operation"] is None

    def test_reset_on_exception(self) -> None:
        with pytest.raises(RuntimeError):
            with quality_scope("c-1", "v1"):
                raise RuntimeError("boom")
        assert set(get_current_context().values()) == {None}

    def test_sequential_scopes_do_not_leak(self) -> None:
        with benchmark_scope("c-1", "transfer", "v1"):
            pass
        with quality_scope("c-2", "v2"):
            ctx = get_current_context()
            assert ctx["contract_id"] == "c-2"
            assert ctx["operation"] is None


class TestTraceId:
    def test_unique(self) -> None:
        assert generate_trace_id() != generate_trace_id()

    def test_fresh_per_scope(self) -> None:
        first, second = quality_scope("c-1", "v1"), quality_scope("c-1", "v1")
        assert first.values["trace_id"] != second.values["trace_id"]
