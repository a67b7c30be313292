"""
Max Pain Logger Module

Configures loguru for structured logging with JSON support.
Features:
- Console output (colored or JSON)
- File logging (text + JSON)
- Correlation ID support

Library modules only fetch the logger; sinks are configured once by
the application through setup_logger.
"""

import sys
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional
from contextvars import ContextVar

from loguru import logger

# Context variable for correlation ID (async-safe)
correlation_id_var: ContextVar[Optional[str]] = ContextVar('correlation_id', default=None)


def set_correlation_id(corr_id: str) -> None:
    """Set correlation ID for current context."""
    correlation_id_var.set(corr_id)


def get_correlation_id() -> Optional[str]:
    """Get correlation ID for current context."""
    return correlation_id_var.get()


def _json_sink(message):
    """Custom sink that outputs JSON format."""
    record = message.record

    log_entry = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "level": record["level"].name,
        "message": record["message"],
        "module": record["name"],
        "function": record["function"],
        "line": record["line"],
        "correlation_id": get_correlation_id(),
    }

    if record["extra"]:
        log_entry["extra"] = record["extra"]

    print(json.dumps(log_entry, default=str), file=sys.stderr, flush=True)


def setup_logger(
    level: str = "INFO",
    log_dir: Optional[str] = "logs",
    rotation: str = "100 MB",
    json_output: bool = False
) -> None:
    """
    Initialize the logger with console and file handlers.

    Replaces any existing sinks. Console output goes to stderr so
    that stdout stays free for results.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        log_dir: Directory for log files (None disables file logging)
        rotation: Log rotation size
        json_output: If True, use JSON format for console output

    Example:
        from core.logger import setup_logger, get_logger

        setup_logger(level="DEBUG", json_output=True)
        logger = get_logger()
        logger.info("Calculation started")
    """
    try:
        logger.remove()
    except ValueError:
        pass

    if json_output:
        logger.add(_json_sink, level=level)
    else:
        logger.add(
            sys.stderr,
            level=level,
            format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
                   "<level>{level: <8}</level> | "
                   "<cyan>{name}</cyan>:<cyan>{function}</cyan> - "
                   "<level>{message}</level>",
            colorize=True,
        )

    if log_dir:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)

        # Main log file (text format for readability)
        logger.add(
            log_path / "maxpain_{time:YYYY-MM-DD}.log",
            level=level,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function} - {message}",
            rotation=rotation,
            retention="7 days",
            compression="gz",
        )

        # JSON log file (for machine parsing)
        logger.add(
            log_path / "maxpain_{time:YYYY-MM-DD}.jsonl",
            level=level,
            format="{message}",
            serialize=True,
            rotation=rotation,
            retention="7 days",
        )

        # Error log file
        logger.add(
            log_path / "errors_{time:YYYY-MM-DD}.log",
            level="ERROR",
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function} - {message}",
            rotation=rotation,
            retention="30 days",
        )

    logger.debug("Logger initialized successfully")


def get_logger():
    """
    Get the shared logger instance.

    Returns:
        loguru.Logger: The logger, with whatever sinks the caller has
        configured (loguru's default stderr sink until setup_logger runs)
    """
    return logger


def log_with_context(level: str, message: str, **kwargs):
    """
    Log with automatic correlation ID.

    Usage:
        log_with_context("info", "Loaded chain", strikes=120)
    """
    corr_id = get_correlation_id()
    if corr_id:
        message = f"[{corr_id}] {message}"

    # depth=1 so the record names the caller, not this helper
    log_func = getattr(logger.opt(depth=1), level.lower())
    log_func(message, **kwargs)
