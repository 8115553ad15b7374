"""
Configuration management for NESTPROG.

Uses environment variables and sensible defaults.
"""
import os
import sys
from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional

from .exceptions import ConfigError


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

TRUE_VALUES = ("1", "true", "yes", "on")
FALSE_VALUES = ("0", "false", "no", "off")


@dataclass
class TrackerConfig:
    """Signal emission policy for new trackers."""
    cutoff_depth: int = sys.maxsize   # Unbounded
    granularity: int = 1              # Minimum overall delta per signal
    default_total: int = 100


@dataclass
class LogConfig:
    """Logging configuration."""
    level: str = "INFO"
    max_file_size: int = 10 * 1024 * 1024  # 10 MB
    backup_count: int = 5
    log_file: Optional[Path] = None
    json_format: bool = False


@dataclass
class Config:
    """Main application configuration."""
    logs_dir: Path = field(default_factory=lambda: Path.cwd() / "logs")

    # Sub-configs
    tracker: TrackerConfig = field(default_factory=TrackerConfig)
    log: LogConfig = field(default_factory=LogConfig)

    def __post_init__(self):
        self._load_from_env()

    def _load_from_env(self):
        """Load configuration from environment variables."""
        if os.environ.get("NESTPROG_CUTOFF"):
            self.tracker.cutoff_depth = _env_int("NESTPROG_CUTOFF")
        if os.environ.get("NESTPROG_GRANULARITY"):
            self.tracker.granularity = _env_int("NESTPROG_GRANULARITY")
        if os.environ.get("NESTPROG_LOG_LEVEL"):
            self.log.level = _env_level("NESTPROG_LOG_LEVEL")
        if os.environ.get("NESTPROG_LOG_FILE"):
            self.log.log_file = Path(os.environ["NESTPROG_LOG_FILE"])
        if os.environ.get("NESTPROG_LOG_JSON"):
            self.log.json_format = _env_bool("NESTPROG_LOG_JSON")
        if os.environ.get("NESTPROG_LOG_DIR"):
            self.logs_dir = Path(os.environ["NESTPROG_LOG_DIR"])

    def ensure_directories(self):
        """Create the log directory."""
        self.logs_dir.mkdir(parents=True, exist_ok=True)


def _env_int(name: str) -> int:
    raw = os.environ[name]
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(name, raw) from None


def _env_level(name: str) -> str:
    raw = os.environ[name]
    if raw.upper() not in LOG_LEVELS:
        raise ConfigError(name, raw, expected="DEBUG, INFO, WARNING or ERROR")
    return raw.upper()


def _env_bool(name: str) -> bool:
    raw = os.environ[name]
    if raw.lower() in TRUE_VALUES:
        return True
    if raw.lower() in FALSE_VALUES:
        return False
    raise ConfigError(name, raw, expected="true or false")


# Global config instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = Config()
    return _config


def set_config(config: Optional[Config]):
    """Set (or with None, reset) the global configuration instance."""
    global _config
    _config = config
