"""Pydantic data models and schemas."""

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
from quality_engine.models.benchmark import (
    BenchmarkComparison,
    BenchmarkRecord,
    BenchmarkResponse,
    BenchmarkRun,
    BenchmarkStats,
    BenchmarkTrendPoint,
    ContractBenchmarkSummary,
    PerformanceAlert,
    RunBenchmarkRequest,
)
from quality_engine.models.metrics import (
    CodeMetrics,
    DocMetrics,
    MetricSnapshot,
    SecurityMetrics,
    TestMetrics,
)
from quality_engine.models.quality import (
    CategoryBenchmark,
    ComputeQualityRequest,
    QualityRecord,
    QualityResponse,
    QualityScoreBreakdown,
    QualityScoreResult,
    QualityThreshold,
    QualityTrendPoint,
    QualityWeights,
    SetThresholdRequest,
    ThresholdCheckResult,
    ThresholdViolation,
)
from quality_engine.models.types import (
    BenchmarkStatus,
    CheckCategory,
    CheckStatus,
    QualityBadge,
    Severity,
)

__all__ = [
    "AuditCheck",
    "AuditRecord",
    "AuditResponse",
    "AutomaticDetection",
    "BenchmarkComparison",
    "BenchmarkRecord",
    "BenchmarkResponse",
    "BenchmarkRun",
    "BenchmarkStats",
    "BenchmarkStatus",
    "BenchmarkTrendPoint",
    "CategoryBenchmark",
    "CategoryScore",
    "CheckCategory",
    "CheckStatus",
    "CheckWithStatus",
    "ChecklistItem",
    "CodeMetrics",
    "ComputeQualityRequest",
    "ContractBenchmarkSummary",
    "ContractSecuritySummary",
    "DetectionMethod",
    "DocMetrics",
    "ExportRequest",
    "ManualDetection",
    "MetricSnapshot",
    "PerformanceAlert",
    "QualityBadge",
    "QualityRecord",
    "QualityResponse",
    "QualityScoreBreakdown",
    "QualityScoreResult",
    "QualityThreshold",
    "QualityTrendPoint",
    "QualityWeights",
    "RunBenchmarkRequest",
    "SecurityMetrics",
    "SemiAutomaticDetection",
    "SetThresholdRequest",
    "Severity",
    "TestMetrics",
    "ThresholdCheckResult",
    "ThresholdViolation",
]
