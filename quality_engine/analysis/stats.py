"""Latency statistics for benchmark sessions.

Aggregates per-iteration timing samples into min/max/mean/stddev and
percentiles. Every percentile in the engine (benchmark p95/p99 and peer
quartiles alike) is computed here with the same interpolation.

Conventions:
    - Percentiles: linear interpolation between closest ranks
      (Hyndman & Fan type 7, numpy ``method="linear"``).
      rank = p/100 * (N-1); result = x[lo] + (rank-lo) * (x[hi]-x[lo])
    - Standard deviation: population (ddof=0). A session is the whole
      population of its iterations, not a sample of a larger one.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from typing import NamedTuple

import numpy as np
from loguru import logger

from quality_engine.core.exceptions import DataValidationError, EmptyInputError
from quality_engine.models.benchmark import BenchmarkRun, BenchmarkStats


class DistributionSummary(NamedTuple):
    """Mean and quartile-style percentiles of a score distribution."""

    count: int
    mean: float
    p25: float
    p75: float
    p95: float


def _as_array(samples: Iterable[float]) -> np.ndarray:
    """Convert samples to a float array, rejecting empty or invalid input."""
    values = np.asarray(list(samples), dtype=float)
    if values.size == 0:
        msg = "Cannot compute statistics over zero samples"
        raise EmptyInputError(msg)
    if not np.all(np.isfinite(values)):
        msg = "Samples must be finite"
        raise DataValidationError(msg, context={"count": int(values.size)})
    return values


def percentile(samples: Sequence[float] | np.ndarray, p: float) -> float:
    """Percentile by linear interpolation between closest ranks.

    Args:
        samples: Values in any order (sorted internally)
        p: Percentile in [0, 100]

    Returns:
        Interpolated value; equals the sample itself when N == 1

    Raises:
        EmptyInputError: No samples
        DataValidationError: p outside [0, 100] or non-finite samples

    Example:
        >>> percentile([10.0, 20.0, 30.0, 40.0], 95)
        38.5
    """
    if not 0.0 <= p <= 100.0 or math.isnan(p):
        msg = "Percentile must be within [0, 100]"
        raise DataValidationError(msg, context={"p": p})
    values = _as_array(samples)
    return float(np.percentile(values, p, method="linear"))


def aggregate_samples(samples: Sequence[float]) -> BenchmarkStats:
    """Aggregate raw execution times (ms) into session statistics.

    Args:
        samples: Execution times in milliseconds, each >= 0

    Returns:
        BenchmarkStats with min/max/avg/stddev/p95/p99

    Raises:
        EmptyInputError: Zero samples
        DataValidationError: Negative or non-finite samples
    """
    values = _as_array(samples)
    if np.any(values < 0):
        msg = "Execution times must be non-negative"
        raise DataValidationError(msg, context={"min": float(values.min())})

    p95, p99 = np.percentile(values, [95, 99], method="linear")
    stats = BenchmarkStats(
        min_ms=float(values.min()),
        max_ms=float(values.max()),
        avg_ms=float(values.mean()),
        stddev_ms=float(values.std(ddof=0)),
        p95_ms=float(p95),
        p99_ms=float(p99),
    )
    logger.debug(
        f"Aggregated {values.size} samples: p95={stats.p95_ms:.3f}ms, "
        f"avg={stats.avg_ms:.3f}ms"
    )
    return stats


def aggregate_runs(runs: Sequence[BenchmarkRun]) -> BenchmarkStats:
    """Aggregate benchmark runs, ordered by iteration index."""
    ordered = sorted(runs, key=lambda r: r.iteration)
    return aggregate_samples([r.execution_time_ms for r in ordered])


def summarize_distribution(values: Sequence[float]) -> DistributionSummary:
    """Mean plus p25/p75/p95 of a non-empty distribution.

    Raises:
        EmptyInputError: No values
    """
    arr = _as_array(values)
    p25, p75, p95 = np.percentile(arr, [25, 75, 95], method="linear")
    return DistributionSummary(
        count=int(arr.size),
        mean=float(arr.mean()),
        p25=float(p25),
        p75=float(p75),
        p95=float(p95),
    )
