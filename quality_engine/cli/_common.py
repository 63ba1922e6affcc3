"""Helpers shared by the CLI sub-apps."""

from __future__ import annotations

from pathlib import Path
from typing import TypeVar

import typer
import yaml
from loguru import logger
from pydantic import BaseModel, ValidationError
from rich.console import Console
from rich.panel import Panel

from quality_engine.config.config_loader import load_model
from quality_engine.config.settings import EngineSettings, get_settings
from quality_engine.core.exceptions import QualityEngineError
from quality_engine.core.logger import setup_logger
from quality_engine.models.types import QualityBadge, Severity

ModelT = TypeVar("ModelT", bound=BaseModel)

# Global Console Instance (Rich UI for user-facing output)
console = Console()

BADGE_COLORS: dict[QualityBadge, str] = {
    QualityBadge.EXCELLENT: "green bold",
    QualityBadge.GOOD: "green",
    QualityBadge.FAIR: "yellow",
    QualityBadge.POOR: "red",
    QualityBadge.CRITICAL: "red bold",
}

SEVERITY_COLORS: dict[Severity, str] = {
    Severity.CRITICAL: "red bold",
    Severity.HIGH: "red",
    Severity.MEDIUM: "yellow",
    Severity.LOW: "cyan",
    Severity.INFO: "dim",
}


def configure_logging(*, verbose: bool) -> None:
    """Console-only logging: DEBUG when verbose, WARNING otherwise."""
    setup_logger(console_level="DEBUG" if verbose else "WARNING", enable_file=False)


def print_failure(reason: str) -> None:
    """Red "Failed" panel with the reason."""
    console.print(Panel(f"[red]{reason}[/red]", title="[red bold]Failed[/red bold]"))


def settings_or_exit() -> EngineSettings:
    """Engine settings from the environment, or print the failure and exit 1."""
    try:
        return get_settings()
    except ValidationError as e:
        fields = ", ".join(str(err["loc"][0]) for err in e.errors() if err["loc"]) or "settings"
        logger.error(f"Invalid QUALITY_* environment: {fields}")
        print_failure(f"Invalid engine settings ({e.error_count()} error(s)): {fields}")
        raise typer.Exit(code=1) from e


def load_or_exit(path: Path, model: type[ModelT]) -> ModelT:
    """Load a YAML/JSON document, or print the failure and exit 1."""
    try:
        return load_model(path, model)
    except FileNotFoundError as e:
        print_failure(str(e))
        raise typer.Exit(code=1) from e
    except yaml.YAMLError as e:
        logger.error(f"YAML parse failed: {path}")
        print_failure(f"Could not parse {path}: {e}")
        raise typer.Exit(code=1) from e
    except QualityEngineError as e:
        logger.error(f"Input rejected: {path}")
        print_failure(str(e))
        raise typer.Exit(code=1) from e
