"""Logging infrastructure."""
from .setup import setup_logging, get_logger, console, JSONFormatter, HumanFormatter

__all__ = ["setup_logging", "get_logger", "console", "JSONFormatter", "HumanFormatter"]
