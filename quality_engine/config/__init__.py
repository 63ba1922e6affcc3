"""Configuration management with Pydantic Settings and YAML files."""

from quality_engine.config.config_loader import (
    AuditInput,
    BenchmarkHistoryInput,
    BenchmarkSessionInput,
    EngineConfig,
    QualityHistoryInput,
    QualityInput,
    load_config,
    load_model,
)
from quality_engine.config.settings import EngineSettings, get_settings

__all__ = [
    "AuditInput",
    "BenchmarkHistoryInput",
    "BenchmarkSessionInput",
    "EngineConfig",
    "EngineSettings",
    "QualityHistoryInput",
    "QualityInput",
    "get_settings",
    "load_config",
    "load_model",
]
