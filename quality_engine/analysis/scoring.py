"""Quality score calculation.

Reduces the four raw metric sets to dimension scores (0-100) and combines
them into a weighted overall score.

Each dimension score is a sum of capped components. Every component is
monotonic in its input (more coverage never lowers the test score, more
complexity never raises the code score) and the total is clamped to
[0, 100].

Code (100):
    complexity      40  full at avg CC <= 5, -4 per point above
    worst function  15  full at max CC <= 10, -1.5 per point above
    function length 20  full at <= 25 lines, -0.5 per line above
    nesting         15  -3 per deeply nested block
    comment density 10  full at comment/code >= 0.15, 0 without code

Tests (100):
    30 line + 20 function + 20 branch coverage,
    10 test/code ratio (full at 1.0), 10 test count (full at 20),
    5 integration tests, 5 property tests

Docs (100):
    40 public fn doc coverage, 20 type doc coverage, 15 README,
    5 CHANGELOG, 10 LICENSE, 10 examples (full at 3)

Security (100):
    0.7 * audit score + 15 verified + 15 formal audit,
    minus 25 per critical, 10 per high, 4 per medium, 1 per low finding.
    Any unresolved critical finding caps the score at 40.
"""

from __future__ import annotations

from loguru import logger

from quality_engine.analysis.badge import classify_badge
from quality_engine.models.metrics import (
    CodeMetrics,
    DocMetrics,
    MetricSnapshot,
    SecurityMetrics,
    TestMetrics,
)
from quality_engine.models.quality import (
    QualityScoreBreakdown,
    QualityScoreResult,
    QualityWeights,
)

SCORE_MIN = 0.0
SCORE_MAX = 100.0

# ── Code ──────────────────────────────────────────────────────────
_COMPLEXITY_POINTS = 40.0
_COMPLEXITY_TARGET = 5.0
_COMPLEXITY_PENALTY = 4.0
_WORST_FN_POINTS = 15.0
_WORST_FN_TARGET = 10
_WORST_FN_PENALTY = 1.5
_FN_LENGTH_POINTS = 20.0
_FN_LENGTH_TARGET = 25.0
_FN_LENGTH_PENALTY = 0.5
_NESTING_POINTS = 15.0
_NESTING_PENALTY = 3.0
_COMMENT_POINTS = 10.0
_COMMENT_TARGET_RATIO = 0.15

# ── Tests ─────────────────────────────────────────────────────────
_LINE_COVERAGE_POINTS = 30.0
_FUNCTION_COVERAGE_POINTS = 20.0
_BRANCH_COVERAGE_POINTS = 20.0
_TEST_RATIO_POINTS = 10.0
_TEST_RATIO_TARGET = 1.0
_TEST_COUNT_POINTS = 10.0
_TEST_COUNT_TARGET = 20
_INTEGRATION_POINTS = 5.0
_PROPERTY_POINTS = 5.0

# ── Docs ──────────────────────────────────────────────────────────
_FN_DOC_POINTS = 40.0
_TYPE_DOC_POINTS = 20.0
_README_POINTS = 15.0
_CHANGELOG_POINTS = 5.0
_LICENSE_POINTS = 10.0
_EXAMPLE_POINTS = 10.0
_EXAMPLE_TARGET = 3

# ── Security ──────────────────────────────────────────────────────
_AUDIT_SCORE_FACTOR = 0.7
_VERIFIED_POINTS = 15.0
_FORMAL_AUDIT_POINTS = 15.0
_CRITICAL_PENALTY = 25.0
_HIGH_PENALTY = 10.0
_MEDIUM_PENALTY = 4.0
_LOW_PENALTY = 1.0
CRITICAL_FINDING_SCORE_CAP = 40.0


def clamp_score(value: float) -> float:
    """Clamp a score into [0, 100]."""
    return max(SCORE_MIN, min(SCORE_MAX, value))


def _capped_penalty(points: float, excess: float, per_unit: float) -> float:
    """``points`` minus ``per_unit`` for each unit of excess, floored at 0."""
    return max(0.0, points - max(0.0, excess) * per_unit)


def _fraction_of(value: float, target: float) -> float:
    """``value / target`` capped at 1.0."""
    if target <= 0:
        return 1.0
    return min(value / target, 1.0)


# =============================================================================
# Dimension Scores
# =============================================================================


def score_code(metrics: CodeMetrics) -> float:
    """Code score: lower complexity, shorter functions, less nesting score higher."""
    complexity = _capped_penalty(
        _COMPLEXITY_POINTS,
        metrics.cyclomatic_complexity - _COMPLEXITY_TARGET,
        _COMPLEXITY_PENALTY,
    )
    worst_fn = _capped_penalty(
        _WORST_FN_POINTS,
        metrics.max_function_complexity - _WORST_FN_TARGET,
        _WORST_FN_PENALTY,
    )
    fn_length = _capped_penalty(
        _FN_LENGTH_POINTS,
        metrics.avg_function_length - _FN_LENGTH_TARGET,
        _FN_LENGTH_PENALTY,
    )
    nesting = _capped_penalty(_NESTING_POINTS, metrics.deeply_nested_count, _NESTING_PENALTY)

    if metrics.lines_of_code > 0:
        ratio = metrics.comment_lines / metrics.lines_of_code
        comments = _COMMENT_POINTS * _fraction_of(ratio, _COMMENT_TARGET_RATIO)
    else:
        comments = 0.0

    return clamp_score(complexity + worst_fn + fn_length + nesting + comments)


def score_tests(metrics: TestMetrics) -> float:
    """Test score: coverage dominates, suite size and kinds of tests add the rest."""
    score = (
        metrics.line_coverage * _LINE_COVERAGE_POINTS
        + metrics.function_coverage * _FUNCTION_COVERAGE_POINTS
        + metrics.branch_coverage * _BRANCH_COVERAGE_POINTS
        + _TEST_RATIO_POINTS * _fraction_of(metrics.test_to_code_ratio, _TEST_RATIO_TARGET)
        + _TEST_COUNT_POINTS * _fraction_of(metrics.test_count, _TEST_COUNT_TARGET)
    )
    if metrics.has_integration_tests:
        score += _INTEGRATION_POINTS
    if metrics.has_property_tests:
        score += _PROPERTY_POINTS
    return clamp_score(score)


def score_docs(metrics: DocMetrics) -> float:
    """Documentation score."""
    score = (
        metrics.public_fn_doc_coverage * _FN_DOC_POINTS
        + metrics.type_doc_coverage * _TYPE_DOC_POINTS
        + _EXAMPLE_POINTS * _fraction_of(metrics.example_count, _EXAMPLE_TARGET)
    )
    if metrics.has_readme:
        score += _README_POINTS
    if metrics.has_changelog:
        score += _CHANGELOG_POINTS
    if metrics.has_license:
        score += _LICENSE_POINTS
    return clamp_score(score)


def score_security(metrics: SecurityMetrics) -> float:
    """Security score.

    A single unresolved critical finding keeps the score at or below
    ``CRITICAL_FINDING_SCORE_CAP`` regardless of every other input.
    """
    score = metrics.audit_score * _AUDIT_SCORE_FACTOR
    if metrics.is_verified:
        score += _VERIFIED_POINTS
    if metrics.has_formal_audit:
        score += _FORMAL_AUDIT_POINTS

    score -= (
        metrics.critical_findings * _CRITICAL_PENALTY
        + metrics.high_findings * _HIGH_PENALTY
        + metrics.medium_findings * _MEDIUM_PENALTY
        + metrics.low_findings * _LOW_PENALTY
    )
    score = clamp_score(score)

    if metrics.critical_findings > 0:
        score = min(score, CRITICAL_FINDING_SCORE_CAP)
    return score


# =============================================================================
# Overall Score
# =============================================================================


def combine_scores(
    code_score: float,
    test_score: float,
    doc_score: float,
    security_score: float,
    weights: QualityWeights,
) -> QualityScoreBreakdown:
    """Weighted overall score from four dimension scores.

    Raises:
        InvalidWeightsError: Weights do not sum to 1.0 (checked first)
    """
    weights.validate_sum()
    overall = clamp_score(
        code_score * weights.code
        + test_score * weights.tests
        + doc_score * weights.docs
        + security_score * weights.security
    )
    return QualityScoreBreakdown(
        code_score=code_score,
        test_score=test_score,
        doc_score=doc_score,
        security_score=security_score,
        overall_score=overall,
    )


def calculate_quality_score(
    code: CodeMetrics,
    tests: TestMetrics,
    docs: DocMetrics,
    security: SecurityMetrics,
    weights: QualityWeights,
) -> QualityScoreResult:
    """Score one metric snapshot under one weight set.

    Weights are validated before any scoring happens. The badge is always
    derived from the resulting overall score.

    Args:
        code: Static code metrics
        tests: Test metrics
        docs: Documentation metrics
        security: Security metrics
        weights: Dimension weights (must sum to 1.0)

    Returns:
        QualityScoreResult (breakdown + badge)

    Raises:
        InvalidWeightsError: Weights do not sum to 1.0 within 1e-6
    """
    weights.validate_sum()

    breakdown = combine_scores(
        score_code(code),
        score_tests(tests),
        score_docs(docs),
        score_security(security),
        weights,
    )
    badge = classify_badge(breakdown.overall_score)
    logger.debug(
        f"Quality scored: overall={breakdown.overall_score:.2f} ({badge}), "
        f"code={breakdown.code_score:.1f}, test={breakdown.test_score:.1f}, "
        f"doc={breakdown.doc_score:.1f}, security={breakdown.security_score:.1f}"
    )
    return QualityScoreResult(breakdown=breakdown, badge=badge)


def score_snapshot(snapshot: MetricSnapshot, weights: QualityWeights) -> QualityScoreResult:
    """``calculate_quality_score`` over a bundled MetricSnapshot."""
    return calculate_quality_score(
        snapshot.code,
        snapshot.tests,
        snapshot.docs,
        snapshot.security,
        weights,
    )
