"""Logging settings, loaded from ``LOG_*`` environment variables."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

LogLevel = Literal["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"]


class LoggingConfig(BaseSettings):
    """Sinks used by the engine and the CLI.

    The CLI runs console-only (``enable_file=False``); long-lived callers
    embedding the services usually keep the JSON file sink so that
    contract-bound records (contract_id, version, operation, trace_id)
    stay queryable.

    Attributes:
        log_dir: Directory for the file sink
        file_prefix: File name prefix (``{prefix}_{date}.json``)
        console_level: Minimum level on stderr
        file_level: Minimum level in the file sink
        enable_file: Add the file sink
        show_context: Append bound contract context to console lines
        json_logs: Serialize file records as JSON
        rotation: Loguru rotation policy
        retention: Loguru retention policy
        compression: Format for rotated files
        diagnose: Variable values in tracebacks (leaks inputs; off by default)
    """

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_dir: Path = Path("logs")
    file_prefix: str = Field(default="quality", min_length=1)

    console_level: LogLevel = "INFO"
    file_level: LogLevel = "DEBUG"

    enable_file: bool = True
    show_context: bool = True
    json_logs: bool = True
    rotation: str = Field(default="20 MB", description="e.g. '20 MB', '1 day'")
    retention: str = Field(default="14 days", description="e.g. '14 days', 10")
    compression: str = "gz"

    diagnose: bool = False
    backtrace: bool = True


def get_logging_config() -> LoggingConfig:
    """LoggingConfig from the environment."""
    return LoggingConfig()
