"""
Time sources.

Timestamps are epoch milliseconds. They are used for display ordering and
"time ago" rendering only, never in calculations.
"""

import time
from dataclasses import dataclass
from typing import Protocol


class Clock(Protocol):
    """Anything with now_ms() returning epoch milliseconds."""

    def now_ms(self) -> int:
        ...


class SystemClock:
    """Wall-clock time source."""

    def now_ms(self) -> int:
        return int(time.time() * 1000)


@dataclass
class ManualClock:
    """
    Manually driven time source.

    In tests: set or advance explicitly so ids and timestamps are predictable.
    """
    current: int = 0

    def now_ms(self) -> int:
        """Get current timestamp without advancing."""
        return self.current

    def tick(self, step: int = 1) -> int:
        """Advance clock by step milliseconds and return the new value."""
        self.current += step
        return self.current
