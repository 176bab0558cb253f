"""TopicPath utilities."""

from .clock import Clock, DAY_MS, SECOND_MS, current_time_ms, days_to_ms

__all__ = [
    "Clock",
    "DAY_MS",
    "SECOND_MS",
    "current_time_ms",
    "days_to_ms",
]
