"""Quality Service: one quality computation end to end.

Takes already-extracted metrics and produces the full quality response:
breakdown, badge, stored-record shape, and optionally the quality gate
result and the category peer benchmark.

Features:
    - Weights from the request, else the service's configured defaults
    - Weights validated before any scoring
    - Threshold and peer benchmark only when their inputs are provided
"""

from collections.abc import Sequence
from datetime import datetime

from quality_engine.analysis.peers import benchmark_against_category
from quality_engine.analysis.scoring import score_snapshot
from quality_engine.analysis.thresholds import evaluate_threshold
from quality_engine.config.settings import EngineSettings, get_settings
from quality_engine.core.exceptions import InvalidWeightsError, add_context_note
from quality_engine.logging.context import quality_scope
from quality_engine.models.metrics import MetricSnapshot
from quality_engine.models.quality import (
    ComputeQualityRequest,
    QualityRecord,
    QualityResponse,
    QualityThreshold,
    QualityWeights,
)


class QualityService:
    """Quality score orchestration (no storage, no I/O).

    Attributes:
        default_weights: Weights used when a request carries none

    Example:
        >>> service = QualityService()
        >>> response = service.compute(
        ...     "contract-1",
        ...     ComputeQualityRequest(version="v1.0.0"),
        ...     metrics,
        ... )
        >>> print(response.badge)
    """

    def __init__(
        self,
        settings: EngineSettings | None = None,
        default_weights: QualityWeights | None = None,
    ) -> None:
        """QualityService initialization.

        Args:
            settings: Engine settings (env defaults when None)
            default_weights: Overrides the weights from settings
        """
        self.settings = settings or get_settings()
        self.default_weights = default_weights or self.settings.default_weights()

    def resolve_weights(self, request: ComputeQualityRequest) -> QualityWeights:
        """Request weights, or the defaults, validated to sum to 1.0."""
        weights = request.weights or self.default_weights
        return weights.validate_sum()

    def compute(
        self,
        contract_id: str,
        request: ComputeQualityRequest,
        metrics: MetricSnapshot,
        *,
        threshold: QualityThreshold | None = None,
        critical_findings: int | None = None,
        category: str | None = None,
        peer_scores: Sequence[float] | None = None,
        computed_at: datetime | None = None,
    ) -> QualityResponse:
        """Score one contract version.

        Args:
            contract_id: Registry identifier of the contract
            request: Compute request (version, optional weights)
            metrics: Raw metrics produced by the extraction collaborators
            threshold: Active quality gate, if the contract has one
            critical_findings: Unresolved critical findings
                (defaults to ``metrics.security.critical_findings``)
            category: Category label; enables the peer benchmark
            peer_scores: Overall scores of the category's other contracts
            computed_at: Timestamp for the record (now when None)

        Returns:
            QualityResponse

        Raises:
            InvalidWeightsError: Weights do not sum to 1.0
            DataValidationError: Invalid peer scores or finding count
        """
        with quality_scope(contract_id, request.version) as scope:
            log = scope.logger

            try:
                weights = self.resolve_weights(request)
            except InvalidWeightsError as e:
                add_context_note(e, f"while scoring {contract_id}@{request.version}")
                log.error(f"Quality computation rejected: {e}")
                raise

            result = score_snapshot(metrics, weights)
            breakdown = result.breakdown

            record_kwargs: dict[str, object] = {}
            if computed_at is not None:
                record_kwargs["computed_at"] = computed_at
            record = QualityRecord(
                contract_id=contract_id,
                contract_version=request.version,
                code_metrics=metrics.code,
                test_metrics=metrics.tests,
                doc_metrics=metrics.docs,
                security_metrics=metrics.security,
                code_score=breakdown.code_score,
                test_score=breakdown.test_score,
                doc_score=breakdown.doc_score,
                security_score=breakdown.security_score,
                overall_score=breakdown.overall_score,
                badge=result.badge,
                **record_kwargs,
            )

            threshold_result = None
            if threshold is not None:
                findings = (
                    critical_findings
                    if critical_findings is not None
                    else metrics.security.critical_findings
                )
                threshold_result = evaluate_threshold(breakdown, threshold, findings)
                if not threshold_result.passed:
                    log.warning(
                        "Quality gate failed: "
                        + ", ".join(
                            f"{v.dimension} (required={v.required:.1f}, actual={v.actual:.1f})"
                            for v in threshold_result.violations
                        )
                    )

            benchmark = None
            if category is not None:
                benchmark = benchmark_against_category(
                    category, breakdown.overall_score, list(peer_scores or [])
                )

            log.info(
                f"Quality computed: overall={breakdown.overall_score:.2f} ({result.badge})"
            )
            return QualityResponse(
                record=record,
                breakdown=breakdown,
                badge=result.badge,
                code_metrics=metrics.code,
                test_metrics=metrics.tests,
                doc_metrics=metrics.docs,
                security_metrics=metrics.security,
                threshold_result=threshold_result,
                benchmark=benchmark,
            )
