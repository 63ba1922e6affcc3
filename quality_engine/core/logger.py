"""Loguru sink setup for the engine.

The engine itself only logs through ``get_contract_logger`` and friends;
this module decides where those records go:

    - stderr: human-readable, with the bound contract context appended
    - file (optional): JSON records with rotation and retention
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

from quality_engine.logging.config import LoggingConfig, get_logging_config
from quality_engine.logging.context import get_contract_logger

if TYPE_CHECKING:
    from loguru import Record

logger.remove()

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)

# Order in which bound keys are appended to console lines
CONTEXT_KEYS: tuple[str, ...] = ("contract_id", "version", "operation", "trace_id")


def _console_format(record: Record) -> str:
    """Console template, plus ``[contract_id=.. version=..]`` when bound."""
    extra = record["extra"]
    bound = [key for key in CONTEXT_KEYS if extra.get(key)]
    if not bound:
        return CONSOLE_FORMAT + "\n{exception}"
    suffix = " ".join(f"{key}={{extra[{key}]}}" for key in bound)
    return CONSOLE_FORMAT + f" <dim>[{suffix}]</dim>\n{{exception}}"


def setup_logger_from_config(config: LoggingConfig | None = None) -> None:
    """Replace all sinks according to ``config`` (``LOG_*`` env when None)."""
    config = config or get_logging_config()
    logger.remove()

    logger.add(
        sys.stderr,
        format=_console_format if config.show_context else CONSOLE_FORMAT,
        level=config.console_level,
        colorize=True,
        backtrace=config.backtrace,
        diagnose=config.diagnose,
    )

    if config.enable_file:
        _add_file_sink(config)

    logger.debug(
        f"Logging to stderr ({config.console_level})"
        + (f" and {config.log_dir} ({config.file_level})" if config.enable_file else "")
    )


def setup_logger(
    log_dir: Path | str = Path("logs"),
    console_level: str = "INFO",
    file_level: str = "DEBUG",
    *,
    enable_file: bool = True,
) -> None:
    """Shortcut for ``setup_logger_from_config`` with the common knobs.

    Example:
        >>> setup_logger(console_level="WARNING", enable_file=False)
    """
    setup_logger_from_config(
        LoggingConfig(
            log_dir=Path(log_dir),
            console_level=console_level,  # type: ignore[arg-type]
            file_level=file_level,  # type: ignore[arg-type]
            enable_file=enable_file,
        )
    )


def _add_file_sink(config: LoggingConfig) -> None:
    config.log_dir.mkdir(parents=True, exist_ok=True)
    suffix = "json" if config.json_logs else "log"
    logger.add(
        config.log_dir / f"{config.file_prefix}_{{time:YYYY-MM-DD}}.{suffix}",
        format="{message}" if config.json_logs else CONSOLE_FORMAT,
        level=config.file_level,
        serialize=config.json_logs,
        rotation=config.rotation,
        retention=config.retention,
        compression=config.compression,
        enqueue=True,
        backtrace=config.backtrace,
        diagnose=False,
    )


__all__ = [
    "get_contract_logger",
    "logger",
    "setup_logger",
    "setup_logger_from_config",
]
