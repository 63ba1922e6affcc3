"""Quality gate evaluation."""

from __future__ import annotations

from loguru import logger

from quality_engine.core.exceptions import DataValidationError
from quality_engine.models.quality import (
    DIMENSION_CODE,
    DIMENSION_CRITICAL_FINDING,
    DIMENSION_DOC,
    DIMENSION_OVERALL,
    DIMENSION_SECURITY,
    DIMENSION_TEST,
    QualityScoreBreakdown,
    QualityThreshold,
    ThresholdCheckResult,
    ThresholdViolation,
)


def evaluate_threshold(
    breakdown: QualityScoreBreakdown,
    threshold: QualityThreshold,
    critical_findings: int,
) -> ThresholdCheckResult:
    """Compare a score breakdown against a quality gate.

    Violation order is fixed: the critical-finding violation (if any)
    first, then code, test, doc, security, overall.

    Args:
        breakdown: Scores to check
        threshold: Active quality gate for the contract
        critical_findings: Count of unresolved critical security findings

    Returns:
        ThresholdCheckResult; ``passed`` is True iff there are no violations

    Raises:
        DataValidationError: Negative critical finding count
    """
    if critical_findings < 0:
        msg = "Critical finding count must be non-negative"
        raise DataValidationError(msg, context={"critical_findings": critical_findings})

    violations: list[ThresholdViolation] = []

    if threshold.fail_on_critical_finding and critical_findings > 0:
        violations.append(
            ThresholdViolation(
                dimension=DIMENSION_CRITICAL_FINDING,
                required=0.0,
                actual=float(critical_findings),
                gap=float(critical_findings),
            )
        )

    checks = (
        (DIMENSION_CODE, threshold.min_code_score, breakdown.code_score),
        (DIMENSION_TEST, threshold.min_test_score, breakdown.test_score),
        (DIMENSION_DOC, threshold.min_doc_score, breakdown.doc_score),
        (DIMENSION_SECURITY, threshold.min_security_score, breakdown.security_score),
        (DIMENSION_OVERALL, threshold.min_overall_score, breakdown.overall_score),
    )
    for dimension, required, actual in checks:
        if actual < required:
            violations.append(
                ThresholdViolation(
                    dimension=dimension,
                    required=required,
                    actual=actual,
                    gap=required - actual,
                )
            )

    result = ThresholdCheckResult(violations=violations)
    logger.debug(
        f"Threshold check: passed={result.passed}, "
        f"violations={[v.dimension for v in violations]}"
    )
    return result
