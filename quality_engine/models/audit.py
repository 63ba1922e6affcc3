"""Security audit models.

Static checklist definitions plus the per-audit status of each check.
Detection of findings happens outside the engine; these models carry the
results so they can be aggregated into category scores and
``SecurityMetrics``.

``DetectionMethod`` is a closed, tagged union discriminated on ``type``.
Every consumer must handle all three variants.
"""

from datetime import datetime
from typing import Annotated, Literal
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

from quality_engine.models.timeutil import utcnow
from quality_engine.models.types import CheckCategory, CheckStatus, QualityBadge, Severity

# =============================================================================
# Detection Method (tagged union)
# =============================================================================


class AutomaticDetection(BaseModel):
    """Detected purely by pattern-matching source code."""

    model_config = ConfigDict(frozen=True)

    type: Literal["automatic"] = "automatic"
    patterns: list[str] = Field(..., min_length=1)


class ManualDetection(BaseModel):
    """Must be reviewed by a human auditor."""

    model_config = ConfigDict(frozen=True)

    type: Literal["manual"] = "manual"


class SemiAutomaticDetection(BaseModel):
    """Patterns hint at a problem; a human confirms."""

    model_config = ConfigDict(frozen=True)

    type: Literal["semi_automatic"] = "semi_automatic"
    patterns: list[str] = Field(..., min_length=1)


DetectionMethod = Annotated[
    AutomaticDetection | ManualDetection | SemiAutomaticDetection,
    Field(discriminator="type"),
]


# =============================================================================
# Checklist / Audit State
# =============================================================================


class ChecklistItem(BaseModel):
    """One static item of the security checklist."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    category: CheckCategory
    title: str
    description: str = ""
    severity: Severity
    detection: DetectionMethod
    remediation: str = ""
    references: list[str] = Field(default_factory=list)


class AuditCheck(BaseModel):
    """Status of one checklist item within a single audit."""

    model_config = ConfigDict(frozen=True)

    check_id: str
    status: CheckStatus = CheckStatus.PENDING
    notes: str | None = None
    auto_detected: bool = False
    evidence: str | None = None
    updated_at: datetime = Field(default_factory=utcnow)


class AuditRecord(BaseModel):
    """A complete audit session for a contract."""

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    contract_id: str
    auditor: str
    audit_date: datetime = Field(default_factory=utcnow)
    overall_score: float = Field(default=0.0, ge=0, le=100)
    summary: str | None = None


class CheckWithStatus(BaseModel):
    """A checklist item merged with its current audit status."""

    model_config = ConfigDict(frozen=True)

    # static metadata
    id: str
    category: CheckCategory
    title: str
    description: str
    severity: Severity
    detection_type: str
    auto_patterns: list[str] = Field(default_factory=list)
    remediation: str
    references: list[str] = Field(default_factory=list)
    # live audit state
    status: CheckStatus
    notes: str | None = None
    auto_detected: bool = False
    evidence: str | None = None


class CategoryScore(BaseModel):
    """Per-category breakdown of an audit score."""

    model_config = ConfigDict(frozen=True)

    category: CheckCategory
    score: float = Field(..., ge=0, le=100)
    passed: int = Field(..., ge=0)
    total: int = Field(..., ge=0)
    failed_critical: int = Field(default=0, ge=0)
    failed_high: int = Field(default=0, ge=0)


class AuditResponse(BaseModel):
    """Audit merged with checklist metadata and category scores."""

    model_config = ConfigDict(frozen=True)

    audit: AuditRecord
    checks: list[CheckWithStatus]
    category_scores: list[CategoryScore]
    auto_detected_count: int = Field(..., ge=0)


class ContractSecuritySummary(BaseModel):
    """Latest audit of a contract, condensed for list and card views."""

    model_config = ConfigDict(frozen=True)

    audit_id: UUID
    audit_date: datetime
    auditor: str
    overall_score: float = Field(..., ge=0, le=100)
    score_badge: QualityBadge


class ExportRequest(BaseModel):
    """Options for the Markdown audit export."""

    model_config = ConfigDict(frozen=True)

    include_descriptions: bool = True
    failures_only: bool = False
