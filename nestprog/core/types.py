"""
Type definitions for NESTPROG.

Dataclass for a level of the progress stack and the observer signatures.
"""
from dataclasses import dataclass
from typing import Any, Callable, Optional


# (total_size, progress) -> continue
SimpleCallback = Callable[[int, int], Optional[bool]]

# (total_size, progress, label, level_user_data, global_user_context) -> continue
FullCallback = Callable[[int, int, str, Any, Any], Optional[bool]]


@dataclass
class Portion:
    """One level of the nested progress stack."""
    offset_in_parent: int     # Start of the span in parent units
    size_in_parent: int       # Width of the span in parent units
    total_size: int           # Declared total at this level
    progress: int = 0         # Raw progress, same unit as total_size
    user_data: Any = None
    label: str = ""

    @property
    def end_in_parent(self) -> int:
        """Parent coordinate where this span ends."""
        return self.offset_in_parent + self.size_in_parent

    def scale(self, value: int) -> int:
        """
        Map a value from this level's units into the parent's units.

        Division truncates toward zero. A zero total contributes nothing
        beyond the offset.
        """
        if self.total_size == 0:
            return self.offset_in_parent
        scaled = value * self.size_in_parent
        quotient = abs(scaled) // abs(self.total_size)
        if (scaled < 0) != (self.total_size < 0):
            quotient = -quotient
        return self.offset_in_parent + quotient
