"""Quality and benchmark history views.

Projects stored records onto trend points for charting and builds the
per-contract benchmark dashboard summary.
"""

# pyright: reportArgumentType=false

from __future__ import annotations

from collections.abc import Iterable, Sequence

import pandas as pd

from quality_engine.models.benchmark import (
    BenchmarkRecord,
    BenchmarkTrendPoint,
    ContractBenchmarkSummary,
    PerformanceAlert,
)
from quality_engine.models.quality import QualityRecord, QualityTrendPoint

_QUALITY_COLUMNS = [
    "contract_version",
    "computed_at",
    "overall_score",
    "code_score",
    "test_score",
    "doc_score",
    "security_score",
    "badge",
]


def quality_trend(records: Iterable[QualityRecord]) -> list[QualityTrendPoint]:
    """Trend points ordered by computation time."""
    points = [QualityTrendPoint.from_record(r) for r in records]
    return sorted(points, key=lambda p: p.computed_at)


def quality_trend_frame(points: Sequence[QualityTrendPoint]) -> pd.DataFrame:
    """Trend points as a DataFrame with score deltas.

    Columns follow ``_QUALITY_COLUMNS`` plus ``overall_delta``, the change
    from the previous point (NaN for the first one).

    Returns:
        DataFrame ordered by ``computed_at``; empty (with columns) for no points
    """
    if not points:
        return pd.DataFrame(columns=[*_QUALITY_COLUMNS, "overall_delta"])

    df = pd.DataFrame(
        [
            {
                "contract_version": p.contract_version,
                "computed_at": p.computed_at,
                "overall_score": p.overall_score,
                "code_score": p.code_score,
                "test_score": p.test_score,
                "doc_score": p.doc_score,
                "security_score": p.security_score,
                "badge": p.badge.value,
            }
            for p in points
        ]
    )
    df = df.sort_values("computed_at", kind="stable").reset_index(drop=True)
    df["overall_delta"] = df["overall_score"].diff()
    return df


def benchmark_trend(
    records: Iterable[BenchmarkRecord],
    method_name: str | None = None,
) -> list[BenchmarkTrendPoint]:
    """Trend points of completed sessions, oldest first.

    Args:
        records: Benchmark sessions of one contract
        method_name: Restrict to one method (all methods when None)
    """
    points: list[BenchmarkTrendPoint] = []
    for record in records:
        if not record.is_completed or record.stats is None:
            continue
        if method_name is not None and record.method_name != method_name:
            continue
        points.append(
            BenchmarkTrendPoint(
                benchmark_id=record.id,
                version=record.contract_version,
                created_at=record.created_at,
                p95_ms=record.stats.p95_ms,
                avg_ms=record.stats.avg_ms,
                min_ms=record.stats.min_ms,
                max_ms=record.stats.max_ms,
            )
        )
    return sorted(points, key=lambda p: p.created_at)


def summarize_benchmarks(
    contract_id: str,
    records: Sequence[BenchmarkRecord],
    alerts: Iterable[PerformanceAlert] = (),
) -> ContractBenchmarkSummary:
    """Dashboard summary for one contract.

    ``latest_benchmarks`` holds the newest completed session per method,
    sorted by method name; ``active_alerts`` the unresolved alerts.
    """
    own = [r for r in records if r.contract_id == contract_id]

    latest: dict[str, BenchmarkRecord] = {}
    for record in own:
        if not record.is_completed:
            continue
        previous = latest.get(record.method_name)
        if previous is None or record.created_at > previous.created_at:
            latest[record.method_name] = record

    return ContractBenchmarkSummary(
        contract_id=contract_id,
        total_benchmarks=len(own),
        methods_benchmarked=sorted({r.method_name for r in own}),
        latest_benchmarks=[latest[m] for m in sorted(latest)],
        active_alerts=[a for a in alerts if a.contract_id == contract_id and not a.resolved],
    )
