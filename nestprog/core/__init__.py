"""Core configuration and types."""
from .config import Config, get_config, set_config
from .types import Portion, SimpleCallback, FullCallback
from .exceptions import NestprogError, ConfigError, ReporterError

__all__ = [
    "Config", "get_config", "set_config",
    "Portion", "SimpleCallback", "FullCallback",
    "NestprogError", "ConfigError", "ReporterError",
]
