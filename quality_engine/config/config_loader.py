"""YAML configuration and input file loaders.

Loads engine configuration (weights, quality gate, alert threshold) and
the metric / benchmark input documents consumed by the CLI. YAML is a
superset of JSON, so ``.json`` inputs load through the same path.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, TypeVar

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from quality_engine.config.settings import EngineSettings
from quality_engine.core.exceptions import MetricValidationError
from quality_engine.models.audit import AuditCheck, AuditRecord, ChecklistItem
from quality_engine.models.benchmark import BenchmarkRecord, BenchmarkRun, PerformanceAlert
from quality_engine.models.metrics import MetricSnapshot
from quality_engine.models.quality import QualityRecord, QualityThreshold, QualityWeights

ModelT = TypeVar("ModelT", bound=BaseModel)


class EngineConfig(BaseModel):
    """Top-level YAML model for one scoring / benchmarking run."""

    model_config = ConfigDict(frozen=True)

    weights: QualityWeights = Field(default_factory=QualityWeights)
    threshold: QualityThreshold | None = None
    alert_threshold_pct: float = Field(default=10.0, ge=0)

    @model_validator(mode="after")
    def check_weights(self) -> EngineConfig:
        """Reject weights that do not sum to 1.0."""
        self.weights.validate_sum()
        return self

    @classmethod
    def from_settings(cls, settings: EngineSettings) -> EngineConfig:
        """Config built from environment defaults."""
        return cls(
            weights=settings.default_weights(),
            alert_threshold_pct=settings.alert_threshold_pct,
        )


class QualityInput(BaseModel):
    """Metric snapshot document for ``quality score``."""

    model_config = ConfigDict(frozen=True)

    contract_id: str = "local"
    version: str = "unversioned"
    category: str | None = None
    metrics: MetricSnapshot
    threshold: QualityThreshold | None = None
    peer_scores: list[float] = Field(default_factory=list)


class BenchmarkSessionInput(BaseModel):
    """Benchmark session document for ``bench analyze``.

    Runs may be given as full ``BenchmarkRun`` objects or as a plain list
    of execution times under ``samples_ms``.
    """

    model_config = ConfigDict(frozen=True)

    record: BenchmarkRecord
    runs: list[BenchmarkRun] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def expand_samples(cls, data: Any) -> Any:
        """Turn ``samples_ms`` into runs bound to the record."""
        if not isinstance(data, dict) or "samples_ms" not in data:
            return data
        data = dict(data)
        samples = data.pop("samples_ms")
        record = data.get("record")
        if not isinstance(record, BenchmarkRecord):
            record = BenchmarkRecord.model_validate(record)
        data["record"] = record
        data["runs"] = [
            {"benchmark_id": record.id, "iteration": i, "execution_time_ms": ms}
            for i, ms in enumerate(samples)
        ]
        return data


class BenchmarkHistoryInput(BaseModel):
    """Previously stored sessions used for baseline lookup."""

    model_config = ConfigDict(frozen=True)

    records: list[BenchmarkRecord] = Field(default_factory=list)
    alerts: list[PerformanceAlert] = Field(default_factory=list)


class QualityHistoryInput(BaseModel):
    """Stored quality snapshots of one contract."""

    model_config = ConfigDict(frozen=True)

    records: list[QualityRecord] = Field(default_factory=list)


class AuditInput(BaseModel):
    """Checklist plus one audit's check statuses for ``audit`` commands."""

    model_config = ConfigDict(frozen=True)

    audit: AuditRecord
    items: list[ChecklistItem] = Field(default_factory=list)
    checks: list[AuditCheck] = Field(default_factory=list)
    is_verified: bool = False
    has_formal_audit: bool = False


def read_yaml(path: str | Path) -> Any:
    """Parse a YAML (or JSON) file.

    Raises:
        FileNotFoundError: File does not exist
        yaml.YAMLError: Parsing failed
    """
    file_path = Path(path)
    if not file_path.exists():
        msg = f"File not found: {file_path}"
        raise FileNotFoundError(msg)
    return yaml.safe_load(file_path.read_text(encoding="utf-8"))


def load_model(path: str | Path, model: type[ModelT]) -> ModelT:
    """Parse a file into ``model``.

    Raises:
        FileNotFoundError: File does not exist
        MetricValidationError: Document failed schema validation
    """
    raw = read_yaml(path)
    try:
        return model.model_validate(raw or {})
    except ValidationError as e:
        msg = f"Invalid {model.__name__} document: {e.error_count()} error(s)"
        raise MetricValidationError(
            msg,
            context={"path": str(path), "errors": e.errors(include_url=False)},
        ) from e


def load_config(path: str | Path) -> EngineConfig:
    """YAML -> EngineConfig (weights validated to sum to 1.0).

    Raises:
        FileNotFoundError: File does not exist
        MetricValidationError: Schema validation failed
        InvalidWeightsError: Weights do not sum to 1.0
    """
    return load_model(path, EngineConfig)
