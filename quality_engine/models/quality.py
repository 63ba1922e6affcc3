"""Quality score models.

Weights, score breakdowns, quality gates, peer benchmarks and the
request/response shapes around a quality computation.

Rules Applied:
    - Pydantic Modeling: frozen=True, computed_field
    - Modern typing (X | None, list[])
"""

from datetime import datetime
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from quality_engine.core.exceptions import InvalidWeightsError
from quality_engine.models.metrics import (
    CodeMetrics,
    DocMetrics,
    MetricSnapshot,
    SecurityMetrics,
    TestMetrics,
)
from quality_engine.models.timeutil import ensure_utc, utcnow
from quality_engine.models.types import QualityBadge

WEIGHT_SUM_TOLERANCE = 1e-6

# Dimension names used in threshold violations, in evaluation order
DIMENSION_CODE = "code"
DIMENSION_TEST = "test"
DIMENSION_DOC = "doc"
DIMENSION_SECURITY = "security"
DIMENSION_OVERALL = "overall"
DIMENSION_CRITICAL_FINDING = "critical_finding"


class QualityWeights(BaseModel):
    """Weights combining the four dimension scores.

    Each weight is non-negative and the four must sum to 1.0 within
    ``WEIGHT_SUM_TOLERANCE``. Invalid weights are rejected by
    ``validate_sum()``; they are never normalized.

    Example:
        >>> QualityWeights().total
        1.0
    """

    model_config = ConfigDict(frozen=True)

    code: float = Field(default=0.25, ge=0)
    tests: float = Field(default=0.30, ge=0)
    docs: float = Field(default=0.20, ge=0)
    security: float = Field(default=0.25, ge=0)

    @property
    def total(self) -> float:
        """Sum of the four weights."""
        return self.code + self.tests + self.docs + self.security

    def is_valid(self) -> bool:
        """Whether the weights sum to 1.0 within tolerance."""
        return abs(self.total - 1.0) <= WEIGHT_SUM_TOLERANCE

    def validate_sum(self) -> "QualityWeights":
        """Return self, or raise InvalidWeightsError.

        Raises:
            InvalidWeightsError: Sum deviates from 1.0 by more than the tolerance
        """
        if not self.is_valid():
            msg = "Quality weights must sum to 1.0"
            raise InvalidWeightsError(
                msg,
                context={
                    "code": self.code,
                    "tests": self.tests,
                    "docs": self.docs,
                    "security": self.security,
                    "sum": round(self.total, 9),
                },
            )
        return self


class QualityScoreBreakdown(BaseModel):
    """Per-dimension scores plus the weighted overall score (all 0-100).

    A snapshot: a re-score produces a new instance.
    """

    model_config = ConfigDict(frozen=True)

    code_score: float = Field(..., ge=0, le=100)
    test_score: float = Field(..., ge=0, le=100)
    doc_score: float = Field(..., ge=0, le=100)
    security_score: float = Field(..., ge=0, le=100)
    overall_score: float = Field(..., ge=0, le=100)


class QualityScoreResult(BaseModel):
    """Breakdown together with the badge derived from its overall score."""

    model_config = ConfigDict(frozen=True)

    breakdown: QualityScoreBreakdown
    badge: QualityBadge


class QualityThreshold(BaseModel):
    """Quality gate: minimum scores that must be met.

    Attributes:
        min_overall_score: Minimum overall score
        min_code_score: Minimum code score
        min_test_score: Minimum test score
        min_doc_score: Minimum doc score
        min_security_score: Minimum security score
        fail_on_critical_finding: Any unresolved critical finding fails the gate
    """

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    contract_id: str | None = None
    min_overall_score: float = Field(default=0.0, ge=0, le=100)
    min_code_score: float = Field(default=0.0, ge=0, le=100)
    min_test_score: float = Field(default=0.0, ge=0, le=100)
    min_doc_score: float = Field(default=0.0, ge=0, le=100)
    min_security_score: float = Field(default=0.0, ge=0, le=100)
    fail_on_critical_finding: bool = False
    created_by: str | None = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class SetThresholdRequest(BaseModel):
    """Request to set the active quality gate for a contract."""

    model_config = ConfigDict(frozen=True)

    min_overall_score: float = Field(..., ge=0, le=100)
    min_code_score: float = Field(..., ge=0, le=100)
    min_test_score: float = Field(..., ge=0, le=100)
    min_doc_score: float = Field(..., ge=0, le=100)
    min_security_score: float = Field(..., ge=0, le=100)
    fail_on_critical_finding: bool = False
    created_by: str

    def to_threshold(self, contract_id: str) -> QualityThreshold:
        """Build the threshold this request describes."""
        return QualityThreshold(
            contract_id=contract_id,
            **self.model_dump(),
        )


class ThresholdViolation(BaseModel):
    """One failing dimension of a quality gate. ``gap`` is always positive."""

    model_config = ConfigDict(frozen=True)

    dimension: str
    required: float
    actual: float
    gap: float = Field(..., gt=0)


class ThresholdCheckResult(BaseModel):
    """Outcome of checking a breakdown against a quality gate."""

    model_config = ConfigDict(frozen=True)

    violations: list[ThresholdViolation] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def passed(self) -> bool:
        """True when there are no violations."""
        return not self.violations


class CategoryBenchmark(BaseModel):
    """How one contract's overall score compares to its category peers.

    Point-in-time view; not persisted.
    """

    model_config = ConfigDict(frozen=True)

    category: str
    peer_count: int = Field(..., ge=0)
    category_avg_score: float
    category_p25_score: float
    category_p75_score: float
    category_p95_score: float
    this_contract_score: float
    percentile_rank: float = Field(..., ge=0, le=100)
    above_average: bool


class QualityRecord(BaseModel):
    """One stored quality snapshot per contract version."""

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    contract_id: str
    contract_version: str
    code_metrics: CodeMetrics
    test_metrics: TestMetrics
    doc_metrics: DocMetrics
    security_metrics: SecurityMetrics
    code_score: float = Field(..., ge=0, le=100)
    test_score: float = Field(..., ge=0, le=100)
    doc_score: float = Field(..., ge=0, le=100)
    security_score: float = Field(..., ge=0, le=100)
    overall_score: float = Field(..., ge=0, le=100)
    badge: QualityBadge
    computed_at: datetime = Field(default_factory=utcnow)

    @field_validator("computed_at")
    @classmethod
    def as_utc(cls, v: datetime) -> datetime:
        """Naive timestamps are read as UTC."""
        return ensure_utc(v)


class QualityTrendPoint(BaseModel):
    """One point in a quality trend chart."""

    model_config = ConfigDict(frozen=True)

    quality_id: UUID
    contract_version: str
    computed_at: datetime
    overall_score: float
    code_score: float
    test_score: float
    doc_score: float
    security_score: float
    badge: QualityBadge

    @classmethod
    def from_record(cls, record: QualityRecord) -> "QualityTrendPoint":
        """Project a stored record onto a trend point."""
        return cls(
            quality_id=record.id,
            contract_version=record.contract_version,
            computed_at=record.computed_at,
            overall_score=record.overall_score,
            code_score=record.code_score,
            test_score=record.test_score,
            doc_score=record.doc_score,
            security_score=record.security_score,
            badge=record.badge,
        )


class ComputeQualityRequest(BaseModel):
    """Request to compute a fresh quality snapshot.

    Metric extraction from ``source_code`` / ``test_output`` happens in
    collaborators outside the engine; the engine consumes their output.
    """

    model_config = ConfigDict(frozen=True)

    source_code: str = ""
    version: str = Field(..., min_length=1)
    test_output: str | None = None
    audit_id: UUID | None = None
    weights: QualityWeights | None = None


class QualityResponse(BaseModel):
    """Full response for one quality computation."""

    model_config = ConfigDict(frozen=True)

    record: QualityRecord
    breakdown: QualityScoreBreakdown
    badge: QualityBadge
    code_metrics: CodeMetrics
    test_metrics: TestMetrics
    doc_metrics: DocMetrics
    security_metrics: SecurityMetrics
    threshold_result: ThresholdCheckResult | None = None
    benchmark: CategoryBenchmark | None = None

    @property
    def metrics(self) -> MetricSnapshot:
        """Echoed raw metrics as one snapshot."""
        return MetricSnapshot(
            code=self.code_metrics,
            tests=self.test_metrics,
            docs=self.doc_metrics,
            security=self.security_metrics,
        )
