"""Orchestration services over the pure analysis layer."""

from quality_engine.services.benchmark_service import BenchmarkService
from quality_engine.services.quality_service import QualityService

__all__ = ["BenchmarkService", "QualityService"]
