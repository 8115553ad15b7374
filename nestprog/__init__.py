"""
NESTPROG - Nested Progress Reporting

Lets a long-running operation be split into nested sub-tasks that each
report in their own units, while observers receive one overall progress
value and a label.
"""

__version__ = "1.0.0"

from .core.types import Portion
from .progress.tracker import ProgressTracker

__all__ = ["ProgressTracker", "Portion", "__version__"]
