"""
Logging configuration for NESTPROG.

Provides:
- Rich console output with colors and formatting
- Rotating file logs, human-readable or JSON structured
"""
import logging
import json
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from ..core.config import LOG_LEVELS, get_config
from ..core.exceptions import ConfigError


# Global console instance (shared with progress bars)
console = Console(stderr=True)

# Extra record fields carried into structured logs
EXTRA_FIELDS = ("depth", "progress", "total", "label")


class JSONFormatter(logging.Formatter):
    """JSON log formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for name in EXTRA_FIELDS:
            if hasattr(record, name):
                log_data[name] = getattr(record, name)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False)


class HumanFormatter(logging.Formatter):
    """Human-readable formatter for file logs."""

    def __init__(self):
        super().__init__(
            fmt="%(asctime)s | %(name)-30s | %(levelname)-8s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )


def setup_logging(
    level: Optional[str] = None,
    enable_file_logging: Optional[bool] = None,
    log_file: Optional[Path] = None,
    json_format: Optional[bool] = None,
) -> logging.Logger:
    """
    Initialize the logging system.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR); config value if None
        enable_file_logging: Whether to write logs to a file; if None, only
            when the config names a log file
        log_file: Custom log file path (uses config / default if None)
        json_format: Use JSON format for file logs; config value if None

    Returns:
        The package root logger
    """
    config = get_config()
    level = (level or config.log.level).upper()
    if level not in LOG_LEVELS:
        raise ConfigError("log level", level, expected="DEBUG, INFO, WARNING or ERROR")
    if json_format is None:
        json_format = config.log.json_format
    if enable_file_logging is None:
        enable_file_logging = config.log.log_file is not None

    root_logger = logging.getLogger("nestprog")
    root_logger.setLevel(getattr(logging, level))

    # Clear existing handlers
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    console_handler = RichHandler(
        console=console,
        show_time=True,
        show_path=False,
        rich_tracebacks=True,
        tracebacks_show_locals=False,
        markup=False,
    )
    console_handler.setLevel(getattr(logging, level))
    root_logger.addHandler(console_handler)

    if enable_file_logging:
        log_path = log_file or config.log.log_file
        if log_path is None:
            config.ensure_directories()
            log_path = config.logs_dir / "nestprog.log"
        Path(log_path).parent.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=config.log.max_file_size,
            backupCount=config.log.backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG)  # File captures everything

        if json_format:
            file_handler.setFormatter(JSONFormatter())
        else:
            file_handler.setFormatter(HumanFormatter())

        root_logger.addHandler(file_handler)

    return root_logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for a specific module.

    Args:
        name: Module name (will be prefixed with 'nestprog.')

    Returns:
        Logger instance
    """
    return logging.getLogger(f"nestprog.{name}")
