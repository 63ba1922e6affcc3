"""Scoring, regression, audit and trend analysis.

Pure functions over frozen models; nothing here performs I/O.
"""

from quality_engine.analysis.audit import (
    audit_score,
    build_audit_response,
    category_scores,
    merge_checklist,
    needs_human_review,
    render_audit_markdown,
    security_metrics_from_audit,
    security_summary,
)
from quality_engine.analysis.badge import classify_badge
from quality_engine.analysis.peers import benchmark_against_category, percentile_rank
from quality_engine.analysis.regression import (
    RegressionOutcome,
    compare_benchmarks,
    detect_regression,
    select_baseline,
)
from quality_engine.analysis.scoring import (
    calculate_quality_score,
    combine_scores,
    score_code,
    score_docs,
    score_security,
    score_snapshot,
    score_tests,
)
from quality_engine.analysis.stats import (
    aggregate_runs,
    aggregate_samples,
    percentile,
    summarize_distribution,
)
from quality_engine.analysis.thresholds import evaluate_threshold
from quality_engine.analysis.trends import (
    benchmark_trend,
    quality_trend,
    quality_trend_frame,
    summarize_benchmarks,
)

__all__ = [
    "RegressionOutcome",
    "aggregate_runs",
    "aggregate_samples",
    "audit_score",
    "benchmark_against_category",
    "benchmark_trend",
    "build_audit_response",
    "calculate_quality_score",
    "category_scores",
    "classify_badge",
    "combine_scores",
    "compare_benchmarks",
    "detect_regression",
    "evaluate_threshold",
    "merge_checklist",
    "needs_human_review",
    "percentile",
    "percentile_rank",
    "quality_trend",
    "quality_trend_frame",
    "render_audit_markdown",
    "score_code",
    "score_docs",
    "score_security",
    "score_snapshot",
    "score_tests",
    "security_metrics_from_audit",
    "security_summary",
    "select_baseline",
    "summarize_benchmarks",
    "summarize_distribution",
]
