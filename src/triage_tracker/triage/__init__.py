"""Untriaged issue detection."""

from triage_tracker.triage.resolver import (
    DEFAULT_TTL,
    DEFAULT_YARDSTICK_DAYS,
    TriageReport,
    TriageResolver,
    Verdict,
    classify,
)

__all__ = [
    "DEFAULT_TTL",
    "DEFAULT_YARDSTICK_DAYS",
    "TriageReport",
    "TriageResolver",
    "Verdict",
    "classify",
]
