"""Daily opened / closed issue tracking."""

from triage_tracker.closings.day import ClosingsService, DayActivity, DayEntry

__all__ = [
    "ClosingsService",
    "DayActivity",
    "DayEntry",
]
