"""
Nested progress tracking.

A task is divided into portions. Each portion occupies a span (offset and
size) inside its parent and declares its own total, so a sub-task reports in
its own units without knowing anything about the caller. The progress of the
innermost portion is scaled through every ancestor and the result, expressed
in the root's units, is handed to the registered observers.

The label for the current operation is the first non-empty label found from
the innermost portion outwards; sub-tasks may leave it empty to inherit the
text of their parent.

Typical single-level use:

    tracker = ProgressTracker()
    tracker.init("Copying", total_size=500)
    for item in items:
        if not tracker.step():
            break
    tracker.finish()
"""
import dataclasses
import logging
import sys
from contextlib import contextmanager
from typing import Any, Iterator, List, Optional

from ..core.config import Config, get_config
from ..core.types import Portion, SimpleCallback, FullCallback
from ..logging import get_logger

logger = get_logger("progress")


class ProgressTracker:
    """
    Tracks progress across a stack of nested portions.

    Signals are emitted only while the stack depth is at most
    ``cutoff_depth`` (0 disables them) and only when the overall progress
    advanced by at least ``granularity`` since the last signal.

    The tracker is fail-soft: operations on an uninitialized tracker are
    no-ops and invalid sizes are reported through the return value, never
    through exceptions. It is not thread-safe.
    """

    def __init__(
        self,
        simple_callback: Optional[SimpleCallback] = None,
        callback: Optional[FullCallback] = None,
        cutoff_depth: int = sys.maxsize,
        granularity: int = 1,
        user_context: Any = None,
    ):
        """
        Create an empty (uninitialized) tracker.

        Args:
            simple_callback: Observer called with (total, progress)
            callback: Observer called with (total, progress, label,
                level_user_data, user_context)
            cutoff_depth: Deepest stack level that still emits signals
            granularity: Minimum overall advance between two signals
            user_context: Global value handed to the full observer
        """
        self.simple_callback = simple_callback
        self.callback = callback
        self.cutoff_depth = cutoff_depth
        self.granularity = granularity
        self.user_context = user_context

        # Run state
        self._stack: List[Portion] = []
        self._last_reported: int = 0
        self._should_stop: bool = False
        self._current_label: str = ""

    @classmethod
    def from_config(cls, config: Optional[Config] = None, **kwargs) -> "ProgressTracker":
        """Create a tracker using the configured cutoff and granularity."""
        config = config or get_config()
        kwargs.setdefault("cutoff_depth", config.tracker.cutoff_depth)
        kwargs.setdefault("granularity", config.tracker.granularity)
        return cls(**kwargs)

    def __repr__(self) -> str:
        return (
            f"ProgressTracker(depth={self.depth}, cutoff_depth={self.cutoff_depth}, "
            f"granularity={self.granularity}, last_reported={self._last_reported}, "
            f"should_stop={self._should_stop}, label={self._current_label!r})"
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def init(self, title: str = "", total_size: int = 100) -> bool:
        """
        Prepare the tracker for a run.

        Any previous run is terminated first, so calling end() beforehand
        is not needed.

        Args:
            title: Name of the job; shown while sub-tasks have no label
            total_size: Total size of the task; progress is reported in
                the same units

        Returns:
            True on success, False if total_size is not positive
        """
        self.end()

        if total_size <= 0:
            logger.debug(f"init rejected: total size ({total_size}) must be positive")
            return False

        self._stack.insert(0, Portion(
            offset_in_parent=0,
            size_in_parent=total_size,
            total_size=total_size,
            progress=0,
            user_data=None,
            label=title,
        ))
        self._current_label = title
        self._last_reported = 0
        self._should_stop = False

        logger.debug(f"Initialized '{title}' with total {total_size}")
        return True

    def end(self):
        """Terminate a run and clear the run state."""
        self._stack.clear()
        self._should_stop = True
        self._current_label = ""

    @property
    def is_initialized(self) -> bool:
        """Whether a run is active (init() or enter() was called)."""
        return bool(self._stack)

    # ------------------------------------------------------------------
    # Nesting
    # ------------------------------------------------------------------

    def enter(
        self,
        parent_size: int,
        label: str = "",
        total_size: int = 100,
        parent_offset: int = -1,
        portion_data: Any = None,
    ):
        """
        Enter a new portion nested in the current one.

        On an uninitialized tracker this initializes it instead, using
        label and total_size for the root; parent_size is then ignored.

        Args:
            parent_size: How much of the parent's total this portion spans
            label: Label for the portion; empty inherits the parent's
            total_size: Total for progress reported inside the portion
            parent_offset: Start of the span in the parent; negative means
                the parent's current progress
            portion_data: Value handed to the full observer for this level
        """
        if not self._stack:
            if not self.init(label, total_size):
                return
            root = self._stack[0]
            if parent_offset >= 0:
                root.offset_in_parent = parent_offset
            root.user_data = portion_data
            return

        parent = self._stack[0]
        portion = Portion(
            offset_in_parent=parent.progress if parent_offset < 0 else parent_offset,
            size_in_parent=parent_size,
            total_size=total_size,
            progress=0,
            user_data=portion_data,
            label=label,
        )
        self._stack.insert(0, portion)

        if label:
            self._current_label = label

        self._signal_change()

    def finish(self, update_parent: bool = True) -> bool:
        """
        End the current portion; ends the run if it was the last one.

        Args:
            update_parent: Move the parent's progress to the end of the
                span occupied by the finished portion

        Returns:
            True if the process should continue, False to stop
        """
        if not self._stack:
            return False

        finished = self._stack.pop(0)

        if finished.label:
            self._current_label = self._search_current_label()

        if not self._stack:
            self.end()
        elif update_parent:
            self._stack[0].progress = finished.end_in_parent

        self._signal_change()
        return not self._should_stop

    @contextmanager
    def portion(
        self,
        parent_size: int,
        label: str = "",
        total_size: int = 100,
        parent_offset: int = -1,
        portion_data: Any = None,
        update_parent: bool = True,
    ) -> Iterator["ProgressTracker"]:
        """
        Run a block inside a nested portion.

        The portion is finished when the block exits, also on error.
        """
        self.enter(parent_size, label, total_size, parent_offset, portion_data)
        try:
            yield self
        finally:
            self.finish(update_parent)

    # ------------------------------------------------------------------
    # Stepping
    # ------------------------------------------------------------------

    def step(self, chunk_size: int = 1, offset: int = -1) -> bool:
        """
        Advance the current portion.

        With a negative offset the progress grows by chunk_size; otherwise
        it is set to offset + chunk_size.

        Args:
            chunk_size: Size of the work just done, not including earlier work
            offset: Earlier work; negative uses the accumulated value

        Returns:
            True if the process should continue, False to stop
        """
        if not self._stack:
            logger.debug("step ignored: tracker is not initialized")
            return False

        if chunk_size < 0:
            logger.debug(f"step rejected: chunk size ({chunk_size}) must not be negative")
            return False

        current = self._stack[0]
        if offset < 0:
            current.progress += chunk_size
        else:
            current.progress = offset + chunk_size

        self._signal_change()
        return not self._should_stop

    def emit_signal(self) -> bool:
        """
        Force a signal, bypassing the cutoff and granularity checks.

        Returns:
            True if the process should continue, False to stop or when
            the tracker is not initialized
        """
        if not self._stack:
            logger.debug("emit_signal ignored: tracker is not initialized")
            return False

        self._signal_change(bypass_checks=True)
        return not self._should_stop

    def set_level_characteristics(self, total_size: int, progress: int = 0):
        """
        Overwrite total and progress of the current portion.

        Useful when a callee receives a tracker its caller already
        entered and needs to adjust the scale.
        """
        if not self._stack:
            logger.debug("set_level_characteristics ignored: tracker is not initialized")
            return

        current = self._stack[0]
        current.total_size = total_size
        current.progress = progress

    # ------------------------------------------------------------------
    # Stop flag
    # ------------------------------------------------------------------

    @property
    def should_stop(self) -> bool:
        """Whether the operation was asked to stop."""
        return self._should_stop

    def set_stop(self):
        """Ask the operation to stop."""
        self._should_stop = True

    def reset_stop(self):
        """Clear a previous stop request."""
        self._should_stop = False

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------

    @property
    def current_label(self) -> str:
        """Label for the current operation."""
        return self._current_label

    @property
    def depth(self) -> int:
        """Number of portions on the stack."""
        return len(self._stack)

    @property
    def current_portion(self) -> Optional[Portion]:
        """The innermost portion, or None when uninitialized."""
        return self._stack[0] if self._stack else None

    @property
    def root_portion(self) -> Optional[Portion]:
        """The outermost portion, or None when uninitialized."""
        return self._stack[-1] if self._stack else None

    @property
    def last_reported(self) -> int:
        """Overall progress at the last emitted signal."""
        return self._last_reported

    def overall_progress(self) -> Optional[int]:
        """
        Overall progress in the root's units, without emitting a signal.

        Returns:
            The scaled progress, or None when uninitialized
        """
        if not self._stack:
            return None
        return self._fold()[1]

    def copy_from(self, other: "ProgressTracker") -> "ProgressTracker":
        """Make this tracker an independent copy of another one."""
        self._stack = [dataclasses.replace(p) for p in other._stack]
        self.cutoff_depth = other.cutoff_depth
        self.granularity = other.granularity
        self._last_reported = other._last_reported
        self._should_stop = other._should_stop
        self._current_label = other._current_label
        self.user_context = other.user_context
        self.simple_callback = other.simple_callback
        self.callback = other.callback
        return self

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _search_current_label(self) -> str:
        """First non-empty label from the innermost portion outwards."""
        for portion in self._stack:
            if portion.label:
                return portion.label
        return ""

    def _fold(self):
        """Scale the innermost progress up to the root; returns (total, value)."""
        value = self._stack[0].progress
        total = 0
        for portion in self._stack:
            total = portion.total_size
            value = portion.scale(value)
        return total, value

    def _signal_change(self, bypass_checks: bool = False):
        """Compute the overall progress and notify the observers."""
        debug = logger.isEnabledFor(logging.DEBUG)

        if not bypass_checks and len(self._stack) > self.cutoff_depth:
            if debug:
                logger.debug(f"Signal dropped: depth {len(self._stack)} > cutoff {self.cutoff_depth}")
            return

        if not self._stack:
            return

        total, value = self._fold()

        if not bypass_checks and value - self._last_reported < self.granularity:
            if debug:
                logger.debug(
                    f"Signal dropped: advance {value - self._last_reported} "
                    f"below granularity {self.granularity}"
                )
            return

        self._last_reported = value
        if debug:
            logger.debug(
                f"Signal: {value}/{total} {self._current_label}",
                extra={"depth": len(self._stack), "progress": value,
                       "total": total, "label": self._current_label},
            )

        if self.simple_callback is not None:
            self._apply_verdict(self.simple_callback(total, value))

        if self.callback is not None:
            self._apply_verdict(self.callback(
                total,
                value,
                self._current_label,
                self._stack[0].user_data,
                self.user_context,
            ))

    def _apply_verdict(self, verdict: Optional[bool]):
        # A veto is sticky; only reset_stop() clears it.
        if verdict is not None and not verdict:
            self._should_stop = True
