"""Locating the pages of a feed that hold one calendar date."""

from triage_tracker.locator.estimator import estimate_start_page
from triage_tracker.locator.window import (
    DEFAULT_MAX_PROBES,
    MAX_PAGES_PER_DAY,
    DateWindowLocator,
    Decision,
    LocatorResult,
    LocatorState,
    clamp_retreat,
    pages_for_days,
    saturating_increment,
)

__all__ = [
    "DEFAULT_MAX_PROBES",
    "MAX_PAGES_PER_DAY",
    "DateWindowLocator",
    "Decision",
    "LocatorResult",
    "LocatorState",
    "clamp_retreat",
    "estimate_start_page",
    "pages_for_days",
    "saturating_increment",
]
