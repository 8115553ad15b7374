"""
Progress reporting using Rich library.

Ready-made observers for ProgressTracker. Each reporter is a context manager
that registers itself as the tracker's full observer on entry and restores
the previous observer on exit.
"""
import logging
import time
from typing import Any, Optional

from rich.console import Console
from rich.progress import (
    Progress,
    SpinnerColumn,
    TextColumn,
    BarColumn,
    TaskProgressColumn,
    TimeElapsedColumn,
    MofNCompleteColumn,
)

from ..core.exceptions import ReporterError
from ..logging import console as shared_console, get_logger
from .tracker import ProgressTracker


class BaseReporter:
    """
    Observer that can be attached to a tracker for the duration of a block.

    Subclasses implement report(); the return value of __call__ tells the
    tracker whether to continue.
    """

    def __init__(self, tracker: ProgressTracker):
        self.tracker = tracker
        self.start_time = time.time()
        self.signals = 0
        self._cancelled = False
        self._previous = None

    def __enter__(self):
        self._previous = self.tracker.callback
        self.tracker.callback = self
        self.start_time = time.time()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.tracker.callback = self._previous
        self._previous = None

    def __call__(
        self,
        total: int,
        progress: int,
        label: str,
        level_data: Any = None,
        context: Any = None,
    ) -> bool:
        self.signals += 1
        self.report(total, progress, label)
        return not self._cancelled

    def report(self, total: int, progress: int, label: str):
        raise NotImplementedError

    def cancel(self):
        """Veto continuation at the next signal."""
        self._cancelled = True

    @property
    def elapsed(self) -> float:
        return time.time() - self.start_time


class RichReporter(BaseReporter):
    """
    Reports progress to the console using a Rich progress bar.

    Shows the current label, completed/total in root units, percentage and
    elapsed time.
    """

    def __init__(self, tracker: ProgressTracker, console: Optional[Console] = None,
                 transient: bool = False):
        """
        Initialize progress reporter.

        Args:
            tracker: ProgressTracker to report on
            console: Console to draw on (shared stderr console if None)
            transient: Remove the bar when the block exits
        """
        super().__init__(tracker)
        self.console = console or shared_console
        self.transient = transient
        self.progress: Optional[Progress] = None
        self.task_id = None

    def __enter__(self) -> "RichReporter":
        super().__enter__()

        self.progress = Progress(
            SpinnerColumn(),
            TextColumn("[bold blue]{task.description}"),
            BarColumn(bar_width=40),
            MofNCompleteColumn(),
            TaskProgressColumn(),
            TimeElapsedColumn(),
            console=self.console,
            transient=self.transient,
        )
        self.progress.start()

        root = self.tracker.root_portion
        root_total = root.total_size if root is not None else None
        self.task_id = self.progress.add_task(
            self.tracker.current_label or "Working",
            total=root_total,
        )
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.progress:
            self.progress.stop()
        super().__exit__(exc_type, exc_val, exc_tb)

    def report(self, total: int, progress: int, label: str):
        if not self.progress or self.task_id is None:
            return
        self.progress.update(
            self.task_id,
            description=label or "Working",
            completed=progress,
            total=total,
        )

    def print_summary(self):
        """Print final summary."""
        minutes = int(self.elapsed // 60)
        seconds = int(self.elapsed % 60)
        self.console.print()
        self.console.print(f"[green]Completed in {minutes}m {seconds}s[/green]")


class SimpleReporter(BaseReporter):
    """
    Simple text-based progress reporter.

    Prints a line whenever the integer percentage changes.
    """

    def __init__(self, tracker: ProgressTracker, console: Optional[Console] = None):
        super().__init__(tracker)
        self.console = console or shared_console
        self.last_percent = -1

    def report(self, total: int, progress: int, label: str):
        percent = int(progress * 100 / total) if total else 0
        if percent != self.last_percent:
            self.last_percent = percent
            self.console.print(f"[{percent:3d}%] {label}", markup=False, highlight=False)

    def print_summary(self):
        self.console.print(f"Completed in {self.elapsed:.1f}s", markup=False, highlight=False)


class LogReporter(BaseReporter):
    """Writes every signal to a logger."""

    def __init__(self, tracker: ProgressTracker, logger: Optional[logging.Logger] = None,
                 level: int = logging.INFO):
        super().__init__(tracker)
        self.logger = logger or get_logger("report")
        self.level = level

    def report(self, total: int, progress: int, label: str):
        self.logger.log(
            self.level,
            f"{progress}/{total} {label}".rstrip(),
            extra={"progress": progress, "total": total, "label": label,
                   "depth": self.tracker.depth},
        )

    def print_summary(self):
        self.logger.log(self.level, f"Completed in {self.elapsed:.1f}s after {self.signals} signals")


REPORTERS = {
    "rich": RichReporter,
    "simple": SimpleReporter,
    "log": LogReporter,
}


def create_reporter(tracker: ProgressTracker, kind: str = "rich", **kwargs) -> BaseReporter:
    """Create a reporter by name."""
    try:
        reporter_cls = REPORTERS[kind]
    except KeyError:
        raise ReporterError(kind, sorted(REPORTERS)) from None
    return reporter_cls(tracker, **kwargs)
