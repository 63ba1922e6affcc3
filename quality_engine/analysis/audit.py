"""Security audit aggregation.

Merges the static checklist with one audit's check statuses, scores each
category, derives ``SecurityMetrics`` for the quality score and renders a
Markdown report. Pattern detection itself is done by collaborators.

Scoring:
    score = 100 * passed weight / applicable weight
    - weight comes from ``Severity.weight``
    - NotApplicable checks are excluded, Pending counts as not passed
    - nothing applicable -> 100
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import assert_never

from quality_engine.analysis.badge import classify_badge
from quality_engine.models.audit import (
    AuditCheck,
    AuditRecord,
    AuditResponse,
    AutomaticDetection,
    CategoryScore,
    ChecklistItem,
    CheckWithStatus,
    ContractSecuritySummary,
    DetectionMethod,
    ExportRequest,
    ManualDetection,
    SemiAutomaticDetection,
)
from quality_engine.models.metrics import SecurityMetrics
from quality_engine.models.types import CheckCategory, CheckStatus, Severity

_STATUS_MARKS: dict[CheckStatus, str] = {
    CheckStatus.PASSED: "PASS",
    CheckStatus.FAILED: "FAIL",
    CheckStatus.NOT_APPLICABLE: "N/A",
    CheckStatus.PENDING: "PENDING",
}


# =============================================================================
# Detection Method Handling
# =============================================================================


def detection_type(detection: DetectionMethod) -> str:
    """Tag of a detection method."""
    match detection:
        case AutomaticDetection():
            return "automatic"
        case ManualDetection():
            return "manual"
        case SemiAutomaticDetection():
            return "semi_automatic"
        case _:
            assert_never(detection)


def detection_patterns(detection: DetectionMethod) -> list[str]:
    """Source patterns that hint at a finding (empty for manual checks)."""
    match detection:
        case AutomaticDetection(patterns=patterns) | SemiAutomaticDetection(patterns=patterns):
            return list(patterns)
        case ManualDetection():
            return []
        case _:
            assert_never(detection)


def needs_human_review(detection: DetectionMethod) -> bool:
    """Whether a human must confirm the outcome of this check."""
    match detection:
        case AutomaticDetection():
            return False
        case ManualDetection() | SemiAutomaticDetection():
            return True
        case _:
            assert_never(detection)


# =============================================================================
# Merge & Score
# =============================================================================


def merge_checklist(
    items: Sequence[ChecklistItem],
    checks: Iterable[AuditCheck],
) -> list[CheckWithStatus]:
    """Join checklist items with their audit status.

    Items with no recorded check are Pending. Checks that reference an
    unknown item are ignored.
    """
    by_id = {check.check_id: check for check in checks}
    merged: list[CheckWithStatus] = []
    for item in items:
        check = by_id.get(item.id, AuditCheck(check_id=item.id))
        merged.append(
            CheckWithStatus(
                id=item.id,
                category=item.category,
                title=item.title,
                description=item.description,
                severity=item.severity,
                detection_type=detection_type(item.detection),
                auto_patterns=detection_patterns(item.detection),
                remediation=item.remediation,
                references=list(item.references),
                status=check.status,
                notes=check.notes,
                auto_detected=check.auto_detected,
                evidence=check.evidence,
            )
        )
    return merged


def _weighted_score(checks: Iterable[CheckWithStatus]) -> float:
    applicable = [c for c in checks if c.status != CheckStatus.NOT_APPLICABLE]
    total = sum(c.severity.weight for c in applicable)
    if total == 0:
        return 100.0
    passed = sum(c.severity.weight for c in applicable if c.status == CheckStatus.PASSED)
    return passed / total * 100


def category_scores(checks: Sequence[CheckWithStatus]) -> list[CategoryScore]:
    """Score every category that has at least one check.

    Categories are returned in ``CheckCategory`` declaration order.
    """
    scores: list[CategoryScore] = []
    for category in CheckCategory:
        in_category = [c for c in checks if c.category == category]
        if not in_category:
            continue
        applicable = [c for c in in_category if c.status != CheckStatus.NOT_APPLICABLE]
        failed = [c for c in in_category if c.status == CheckStatus.FAILED]
        scores.append(
            CategoryScore(
                category=category,
                score=_weighted_score(in_category),
                passed=sum(1 for c in applicable if c.status == CheckStatus.PASSED),
                total=len(applicable),
                failed_critical=sum(1 for c in failed if c.severity == Severity.CRITICAL),
                failed_high=sum(1 for c in failed if c.severity == Severity.HIGH),
            )
        )
    return scores


def audit_score(checks: Sequence[CheckWithStatus]) -> float:
    """Overall audit score (0-100) across every category."""
    return _weighted_score(checks)


def build_audit_response(
    audit: AuditRecord,
    items: Sequence[ChecklistItem],
    checks: Iterable[AuditCheck],
) -> AuditResponse:
    """Merge, score and package one audit.

    The returned audit record carries the recomputed overall score.
    """
    merged = merge_checklist(items, checks)
    return AuditResponse(
        audit=audit.model_copy(update={"overall_score": audit_score(merged)}),
        checks=merged,
        category_scores=category_scores(merged),
        auto_detected_count=sum(1 for c in merged if c.auto_detected),
    )


def security_summary(response: AuditResponse) -> ContractSecuritySummary:
    """Audit id, date, auditor and score, with the score's badge."""
    audit = response.audit
    return ContractSecuritySummary(
        audit_id=audit.id,
        audit_date=audit.audit_date,
        auditor=audit.auditor,
        overall_score=audit.overall_score,
        score_badge=classify_badge(audit.overall_score),
    )


def security_metrics_from_audit(
    checks: Sequence[CheckWithStatus],
    *,
    is_verified: bool = False,
    has_formal_audit: bool = False,
) -> SecurityMetrics:
    """Derive SecurityMetrics from an audit: failed checks count as findings.

    Info-level failures are not counted as findings.
    """
    failed = [c for c in checks if c.status == CheckStatus.FAILED]

    def count(severity: Severity) -> int:
        return sum(1 for c in failed if c.severity == severity)

    return SecurityMetrics(
        audit_score=audit_score(checks),
        critical_findings=count(Severity.CRITICAL),
        high_findings=count(Severity.HIGH),
        medium_findings=count(Severity.MEDIUM),
        low_findings=count(Severity.LOW),
        is_verified=is_verified,
        has_formal_audit=has_formal_audit,
    )


# =============================================================================
# Markdown Export
# =============================================================================


def sort_by_severity(checks: Iterable[CheckWithStatus]) -> list[CheckWithStatus]:
    """Most severe first, then by check id."""
    return sorted(checks, key=lambda c: (-c.severity.rank, c.id))


def render_audit_markdown(
    response: AuditResponse,
    options: ExportRequest | None = None,
) -> str:
    """Render an audit as a Markdown report.

    Args:
        response: Audit with merged checks and category scores
        options: Export options (defaults: descriptions on, all checks)

    Returns:
        Markdown document
    """
    options = options or ExportRequest()
    audit = response.audit

    lines = [
        f"# Security Audit: {audit.contract_id}",
        "",
        f"- **Auditor:** {audit.auditor}",
        f"- **Date:** {audit.audit_date:%Y-%m-%d}",
        f"- **Overall score:** {audit.overall_score:.1f} / 100",
        f"- **Auto-detected checks:** {response.auto_detected_count}",
        "",
        "## Category Scores",
        "",
        "| Category | Score | Passed | Failed (critical/high) |",
        "|---|---:|---:|---:|",
    ]
    lines.extend(
        f"| {cs.category.label} | {cs.score:.1f} | {cs.passed}/{cs.total} "
        f"| {cs.failed_critical}/{cs.failed_high} |"
        for cs in response.category_scores
    )

    checks = response.checks
    if options.failures_only:
        checks = [c for c in checks if c.status == CheckStatus.FAILED]

    lines.extend(["", "## Checks", ""])
    if not checks:
        lines.append("_No checks to report._")

    for check in sort_by_severity(checks):
        lines.append(
            f"### [{_STATUS_MARKS[check.status]}] {check.id}: {check.title} "
            f"({check.severity.value.upper()})"
        )
        lines.append("")
        lines.append(f"- Category: {check.category.label}")
        lines.append(f"- Detection: {check.detection_type}")
        if options.include_descriptions and check.description:
            lines.extend(["", check.description])
        if check.status == CheckStatus.FAILED and check.remediation:
            lines.extend(["", f"**Remediation:** {check.remediation}"])
        if check.evidence:
            lines.extend(["", f"Evidence: `{check.evidence}`"])
        if check.notes:
            lines.extend(["", f"Notes: {check.notes}"])
        lines.append("")

    return "\n".join(lines).rstrip() + "\n"
