"""
Clock helpers for TopicPath.

All timestamps are epoch milliseconds. Components take "now" as an
argument (or a clock callable) so callers and tests can inject time.
"""

import time
from typing import Callable

SECOND_MS = 1000
DAY_MS = 24 * 60 * 60 * SECOND_MS

Clock = Callable[[], int]


def current_time_ms() -> int:
    """Wall-clock time in epoch milliseconds."""
    return time.time_ns() // 1_000_000


def days_to_ms(days: int | float) -> int:
    return int(days * DAY_MS)
