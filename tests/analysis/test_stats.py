"""Tests for quality_engine/analysis/stats.py."""

from __future__ import annotations

from uuid import uuid4

import pytest

from quality_engine.analysis.stats import (
    aggregate_runs,
    aggregate_samples,
    percentile,
    summarize_distribution,
)
from quality_engine.core.exceptions import DataValidationError, EmptyInputError
from quality_engine.models.benchmark import BenchmarkRun


class TestPercentile:
    """선형 보간 백분위수."""

    def test_p95_of_four_samples(self) -> None:
        """rank = 0.95 * 3 = 2.85 → 30 + 0.85 * 10."""
        assert percentile([10.0, 20.0, 30.0, 40.0], 95) == pytest.approx(38.5)

    def test_unsorted_input(self) -> None:
        assert percentile([40.0, 10.0, 30.0, 20.0], 95) == pytest.approx(38.5)

    @pytest.mark.parametrize("p", [0, 25, 50, 95, 99, 100])
    def test_single_sample(self, p: float) -> None:
        assert percentile([42.0], p) == 42.0

    def test_bounds(self) -> None:
        samples = [3.0, 1.0, 2.0]
        assert percentile(samples, 0) == 1.0
        assert percentile(samples, 100) == 3.0
        assert percentile(samples, 50) == 2.0

    def test_empty_raises(self) -> None:
        with pytest.raises(EmptyInputError):
            percentile([], 50)

    @pytest.mark.parametrize("p", [-1.0, 100.5, float("nan")])
    def test_out_of_range_p(self, p: float) -> None:
        with pytest.raises(DataValidationError):
            percentile([1.0, 2.0], p)


class TestAggregateSamples:
    """세션 통계 집계."""

    def test_basic_stats(self) -> None:
        stats = aggregate_samples([10.0, 20.0, 30.0, 40.0])
        assert stats.min_ms == 10.0
        assert stats.max_ms == 40.0
        assert stats.avg_ms == pytest.approx(25.0)
        # population stddev: sqrt(125)
        assert stats.stddev_ms == pytest.approx(11.180339887)
        assert stats.p95_ms == pytest.approx(38.5)
        assert stats.p99_ms == pytest.approx(39.7)

    def test_single_sample(self) -> None:
        stats = aggregate_samples([5.0])
        assert stats.min_ms == stats.max_ms == stats.avg_ms == 5.0
        assert stats.stddev_ms == 0.0
        assert stats.p95_ms == stats.p99_ms == 5.0

    def test_ordering_invariant(self) -> None:
        stats = aggregate_samples([7.0, 1.0, 3.0, 9.0, 4.0])
        assert stats.min_ms <= stats.avg_ms <= stats.max_ms
        assert stats.min_ms <= stats.p95_ms <= stats.p99_ms <= stats.max_ms

    def test_empty_raises(self) -> None:
        with pytest.raises(EmptyInputError):
            aggregate_samples([])

    def test_negative_rejected(self) -> None:
        with pytest.raises(DataValidationError):
            aggregate_samples([1.0, -0.5])

    def test_non_finite_rejected(self) -> None:
        with pytest.raises(DataValidationError):
            aggregate_samples([1.0, float("inf")])


class TestAggregateRuns:
    def test_runs_aggregated_regardless_of_order(self) -> None:
        benchmark_id = uuid4()
        runs = [
            BenchmarkRun(benchmark_id=benchmark_id, iteration=i, execution_time_ms=ms)
            for i, ms in [(2, 30.0), (0, 10.0), (3, 40.0), (1, 20.0)]
        ]
        stats = aggregate_runs(runs)
        assert stats.p95_ms == pytest.approx(38.5)
        assert stats.avg_ms == pytest.approx(25.0)

    def test_no_runs(self) -> None:
        with pytest.raises(EmptyInputError):
            aggregate_runs([])


class TestSummarizeDistribution:
    def test_quartiles(self) -> None:
        summary = summarize_distribution([10.0, 20.0, 30.0, 40.0, 50.0])
        assert summary.count == 5
        assert summary.mean == pytest.approx(30.0)
        assert summary.p25 == pytest.approx(20.0)
        assert summary.p75 == pytest.approx(40.0)
        assert summary.p95 == pytest.approx(48.0)

    def test_empty(self) -> None:
        with pytest.raises(EmptyInputError):
            summarize_distribution([])
