"""Nested progress tracking."""
from .tracker import ProgressTracker
from .reporter import (
    BaseReporter,
    RichReporter,
    SimpleReporter,
    LogReporter,
    create_reporter,
)

__all__ = [
    "ProgressTracker",
    "BaseReporter", "RichReporter", "SimpleReporter", "LogReporter",
    "create_reporter",
]
