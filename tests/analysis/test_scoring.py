"""Tests for quality_engine/analysis/scoring.py."""

from __future__ import annotations

import pytest

from quality_engine.analysis.scoring import (
    CRITICAL_FINDING_SCORE_CAP,
    calculate_quality_score,
    combine_scores,
    score_code,
    score_docs,
    score_security,
    score_snapshot,
    score_tests,
)
from quality_engine.core.exceptions import InvalidWeightsError
from quality_engine.models.metrics import (
    CodeMetrics,
    DocMetrics,
    MetricSnapshot,
    SecurityMetrics,
    TestMetrics,
)
from quality_engine.models.quality import QualityWeights
from quality_engine.models.types import QualityBadge


class TestDimensionScores:
    """차원별 점수 공식 검증."""

    def test_strong_metrics_score_full_marks(self, strong_metrics: MetricSnapshot) -> None:
        assert score_code(strong_metrics.code) == pytest.approx(100.0)
        assert score_tests(strong_metrics.tests) == pytest.approx(100.0)
        assert score_docs(strong_metrics.docs) == pytest.approx(100.0)
        assert score_security(strong_metrics.security) == pytest.approx(100.0)

    def test_weak_metrics_score_zero(self, weak_metrics: MetricSnapshot) -> None:
        assert score_code(weak_metrics.code) == 0.0
        assert score_tests(weak_metrics.tests) == 0.0
        assert score_docs(weak_metrics.docs) == 0.0
        assert score_security(weak_metrics.security) == 0.0

    def test_code_complexity_penalty(self) -> None:
        """avg CC 7 → complexity 40 - 2*4 = 32."""
        metrics = CodeMetrics(
            lines_of_code=100,
            comment_lines=15,
            cyclomatic_complexity=7.0,
            max_function_complexity=10,
            avg_function_length=25.0,
        )
        assert score_code(metrics) == pytest.approx(32 + 15 + 20 + 15 + 10)

    def test_code_no_lines_gets_no_comment_points(self) -> None:
        metrics = CodeMetrics(lines_of_code=0, comment_lines=0)
        assert score_code(metrics) == pytest.approx(90.0)

    def test_tests_partial_coverage(self) -> None:
        """0.5 line, 0.5 function, 0 branch, ratio 0.5, 10 tests."""
        metrics = TestMetrics(
            test_count=10,
            line_coverage=0.5,
            function_coverage=0.5,
            test_to_code_ratio=0.5,
        )
        assert score_tests(metrics) == pytest.approx(15 + 10 + 0 + 5 + 5)

    def test_docs_partial(self) -> None:
        metrics = DocMetrics(public_fn_doc_coverage=0.5, has_readme=True, example_count=1)
        assert score_docs(metrics) == pytest.approx(20 + 15 + 10 / 3)

    @pytest.mark.parametrize(
        ("field", "low", "high"),
        [
            ("line_coverage", 0.2, 0.8),
            ("function_coverage", 0.1, 0.9),
            ("branch_coverage", 0.0, 0.5),
            ("test_count", 1, 15),
        ],
    )
    def test_tests_monotonic(self, field: str, low: float, high: float) -> None:
        """커버리지가 높을수록 점수가 낮아지지 않는다."""
        assert score_tests(TestMetrics(**{field: high})) >= score_tests(
            TestMetrics(**{field: low})
        )

    @pytest.mark.parametrize("complexity", [1.0, 5.0, 6.0, 9.5, 15.0, 40.0])
    def test_code_decreases_with_complexity(self, complexity: float) -> None:
        base = CodeMetrics(lines_of_code=100, cyclomatic_complexity=complexity)
        worse = CodeMetrics(lines_of_code=100, cyclomatic_complexity=complexity + 1)
        assert score_code(worse) <= score_code(base)


class TestSecurityCriticalCap:
    """Critical finding이 있으면 보안 점수는 40 이하."""

    def test_single_critical_caps_score(self) -> None:
        metrics = SecurityMetrics(
            audit_score=100.0,
            critical_findings=1,
            is_verified=True,
            has_formal_audit=True,
        )
        # 100 - 25 = 75 before the cap
        assert score_security(metrics) == CRITICAL_FINDING_SCORE_CAP

    def test_cap_does_not_raise_low_scores(self) -> None:
        metrics = SecurityMetrics(audit_score=20.0, critical_findings=1)
        assert score_security(metrics) == 0.0

    def test_findings_penalize(self) -> None:
        clean = SecurityMetrics(audit_score=100.0)
        findings = SecurityMetrics(audit_score=100.0, high_findings=1, medium_findings=1)
        assert score_security(clean) == pytest.approx(70.0)
        assert score_security(findings) == pytest.approx(70.0 - 10 - 4)

    def test_never_negative(self) -> None:
        metrics = SecurityMetrics(high_findings=50, low_findings=100)
        assert score_security(metrics) == 0.0


class TestCombineScores:
    """가중 합산 검증."""

    @pytest.mark.parametrize(
        ("scores", "weights"),
        [
            ((80.0, 40.0, 90.0, 95.0), QualityWeights()),
            ((0.0, 100.0, 0.0, 100.0), QualityWeights(code=0.1, tests=0.4, docs=0.1, security=0.4)),
            ((33.3, 66.6, 99.9, 12.5), QualityWeights(code=1.0, tests=0.0, docs=0.0, security=0.0)),
            ((100.0, 100.0, 100.0, 100.0), QualityWeights(code=0.25, tests=0.25, docs=0.25, security=0.25)),
        ],
    )
    def test_overall_is_weighted_sum(
        self, scores: tuple[float, float, float, float], weights: QualityWeights
    ) -> None:
        code, test, doc, sec = scores
        breakdown = combine_scores(code, test, doc, sec, weights)
        expected = (
            code * weights.code
            + test * weights.tests
            + doc * weights.docs
            + sec * weights.security
        )
        assert breakdown.overall_score == pytest.approx(min(100.0, max(0.0, expected)))
        assert breakdown.code_score == code
        assert breakdown.security_score == sec

    def test_default_weights_example(self) -> None:
        breakdown = combine_scores(80.0, 40.0, 90.0, 95.0, QualityWeights())
        assert breakdown.overall_score == pytest.approx(20 + 12 + 18 + 23.75)

    def test_rounding_drift_clamped(self) -> None:
        """합이 1.0 + 1e-7이어도 100을 넘지 않는다."""
        weights = QualityWeights(code=0.25, tests=0.30, docs=0.20, security=0.2500001)
        breakdown = combine_scores(100.0, 100.0, 100.0, 100.0, weights)
        assert breakdown.overall_score == 100.0

    def test_invalid_weights_rejected(self) -> None:
        weights = QualityWeights(code=0.5, tests=0.5, docs=0.5, security=0.5)
        with pytest.raises(InvalidWeightsError):
            combine_scores(50.0, 50.0, 50.0, 50.0, weights)


class TestCalculateQualityScore:
    """전체 점수 계산 (가중치 검증 → 점수 → 배지)."""

    def test_excellent(self, strong_metrics: MetricSnapshot) -> None:
        result = score_snapshot(strong_metrics, QualityWeights())
        assert result.breakdown.overall_score == pytest.approx(100.0)
        assert result.badge == QualityBadge.EXCELLENT

    def test_critical(self, weak_metrics: MetricSnapshot) -> None:
        result = score_snapshot(weak_metrics, QualityWeights())
        assert result.breakdown.overall_score == 0.0
        assert result.badge == QualityBadge.CRITICAL

    def test_weights_validated_before_scoring(self, strong_metrics: MetricSnapshot) -> None:
        weights = QualityWeights(code=0.3, tests=0.3, docs=0.3, security=0.3)
        with pytest.raises(InvalidWeightsError) as exc_info:
            calculate_quality_score(
                strong_metrics.code,
                strong_metrics.tests,
                strong_metrics.docs,
                strong_metrics.security,
                weights,
            )
        assert exc_info.value.context["sum"] == pytest.approx(1.2)

    def test_idempotent(self, strong_metrics: MetricSnapshot) -> None:
        """동일 입력 → 동일 결과 (bit-identical)."""
        snapshot = strong_metrics.model_copy(
            update={"tests": TestMetrics(line_coverage=0.73, branch_coverage=0.41, test_count=7)}
        )
        first = score_snapshot(snapshot, QualityWeights())
        second = score_snapshot(snapshot, QualityWeights())
        assert first.breakdown == second.breakdown
        assert first.badge == second.badge

    def test_critical_finding_limits_security_dimension(
        self, strong_metrics: MetricSnapshot
    ) -> None:
        snapshot = strong_metrics.model_copy(
            update={
                "security": strong_metrics.security.model_copy(update={"critical_findings": 1})
            }
        )
        result = score_snapshot(snapshot, QualityWeights())
        assert result.breakdown.security_score <= 40.0
        assert result.breakdown.overall_score == pytest.approx(75 + 40 * 0.25)
        assert result.badge == QualityBadge.GOOD
