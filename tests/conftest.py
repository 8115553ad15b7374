"""
Pytest configuration and fixtures.
"""
import logging

import pytest

from nestprog.core.config import set_config
from nestprog.progress import ProgressTracker


class Recorder:
    """Observer that records every signal it receives."""

    def __init__(self, verdict=True):
        self.verdict = verdict
        self.calls = []

    def __call__(self, total, progress, *rest):
        self.calls.append((total, progress) + tuple(rest))
        return self.verdict

    @property
    def last(self):
        return self.calls[-1] if self.calls else None

    @property
    def values(self):
        return [call[1] for call in self.calls]


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Isolate tests from NESTPROG_* variables, global config and log handlers."""
    for name in ("NESTPROG_CUTOFF", "NESTPROG_GRANULARITY",
                 "NESTPROG_LOG_LEVEL", "NESTPROG_LOG_DIR",
                 "NESTPROG_LOG_FILE", "NESTPROG_LOG_JSON"):
        monkeypatch.delenv(name, raising=False)
    set_config(None)
    yield
    set_config(None)
    root_logger = logging.getLogger("nestprog")
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()
    root_logger.setLevel(logging.NOTSET)


@pytest.fixture
def recorder():
    """Recording observer that always continues."""
    return Recorder()


@pytest.fixture
def full_recorder():
    """Recording observer for the full callback signature."""
    return Recorder()


@pytest.fixture
def tracker(recorder):
    """Uninitialized tracker with a simple recording observer."""
    return ProgressTracker(simple_callback=recorder)
