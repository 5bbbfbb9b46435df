"""Data models for the tracker."""

from triage_tracker.data.facts import (
    ActivityFact,
    ActivityLookup,
    Freshness,
    LastCommentedOn,
    NoActivitySince,
)
from triage_tracker.data.models import (
    EVENT_PAGING,
    ISSUE_PAGING,
    Comment,
    Dated,
    Event,
    EventKind,
    Issue,
    PagingProfile,
    StateChange,
)

__all__ = [
    "EVENT_PAGING",
    "ISSUE_PAGING",
    "ActivityFact",
    "ActivityLookup",
    "Comment",
    "Dated",
    "Event",
    "EventKind",
    "Freshness",
    "Issue",
    "LastCommentedOn",
    "NoActivitySince",
    "PagingProfile",
    "StateChange",
]
