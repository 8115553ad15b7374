"""
Custom exceptions for NESTPROG.

The tracker itself is fail-soft and never raises these; they cover the
configuration layer and the reporter/CLI surface.
"""
from typing import List, Optional


class NestprogError(Exception):
    """Base exception for NESTPROG errors."""

    def __init__(self, message: str, suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.message = message
        self.suggestions = suggestions or []


class ConfigError(NestprogError):
    """Invalid configuration value."""

    def __init__(self, name: str, value: str, expected: str = "an integer"):
        super().__init__(
            f"Invalid value for {name}: {value!r} (expected {expected})",
            suggestions=[
                f"Set {name} to {expected}",
                f"Or unset {name} to use the default",
            ]
        )
        self.name = name
        self.value = value


class ReporterError(NestprogError):
    """Unknown or unusable reporter."""

    def __init__(self, kind: str, available: List[str]):
        super().__init__(
            f"Unknown reporter: {kind}",
            suggestions=[
                f"Available reporters: {', '.join(available)}",
            ]
        )
        self.kind = kind
