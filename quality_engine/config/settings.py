"""Pydantic Settings for engine defaults.

Process-wide defaults (weights, alert threshold, iteration bounds) are
loaded from environment variables and/or a .env file. They are handed to
the analysis functions explicitly; no analysis function reads settings.

Environment Variables (QUALITY_ prefix):
    - QUALITY_WEIGHT_CODE / _TESTS / _DOCS / _SECURITY
    - QUALITY_ALERT_THRESHOLD_PCT
    - QUALITY_DEFAULT_ITERATIONS, QUALITY_MIN_ITERATIONS, QUALITY_MAX_ITERATIONS
"""

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from quality_engine.models.benchmark import (
    DEFAULT_ALERT_THRESHOLD_PCT,
    DEFAULT_ITERATIONS,
    MAX_ITERATIONS,
    MIN_ITERATIONS,
)
from quality_engine.models.quality import QualityWeights


class EngineSettings(BaseSettings):
    """Engine defaults.

    Example:
        >>> settings = get_settings()
        >>> settings.default_weights()
        QualityWeights(code=0.25, tests=0.3, docs=0.2, security=0.25)
    """

    model_config = SettingsConfigDict(
        env_prefix="QUALITY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # Quality Weights
    # ==========================================================================
    weight_code: float = Field(default=0.25, ge=0, description="Code dimension weight")
    weight_tests: float = Field(default=0.30, ge=0, description="Test dimension weight")
    weight_docs: float = Field(default=0.20, ge=0, description="Doc dimension weight")
    weight_security: float = Field(default=0.25, ge=0, description="Security dimension weight")

    # ==========================================================================
    # Benchmarking
    # ==========================================================================
    alert_threshold_pct: float = Field(
        default=DEFAULT_ALERT_THRESHOLD_PCT,
        ge=0,
        description="p95 slowdown (%) above which a regression alert is raised",
    )
    default_iterations: int = Field(
        default=DEFAULT_ITERATIONS,
        description="Iterations per benchmark session when not requested",
    )
    min_iterations: int = Field(default=MIN_ITERATIONS, ge=1)
    max_iterations: int = Field(default=MAX_ITERATIONS, ge=1, le=MAX_ITERATIONS)

    @model_validator(mode="after")
    def check_iteration_bounds(self) -> "EngineSettings":
        """Default iteration count must lie within the configured bounds."""
        if self.min_iterations > self.max_iterations:
            msg = "min_iterations must not exceed max_iterations"
            raise ValueError(msg)
        if not self.min_iterations <= self.default_iterations <= self.max_iterations:
            msg = "default_iterations must lie within [min_iterations, max_iterations]"
            raise ValueError(msg)
        return self

    def default_weights(self) -> QualityWeights:
        """Configured weights, validated to sum to 1.0.

        Raises:
            InvalidWeightsError: Configured weights do not sum to 1.0
        """
        return QualityWeights(
            code=self.weight_code,
            tests=self.weight_tests,
            docs=self.weight_docs,
            security=self.weight_security,
        ).validate_sum()


@lru_cache(maxsize=1)
def get_settings() -> EngineSettings:
    """Cached settings instance loaded from the environment."""
    return EngineSettings()
