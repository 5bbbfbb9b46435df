"""Remote issue tracker access."""

from triage_tracker.remote.base import (
    MAX_PER_PAGE,
    Direction,
    IssueState,
    PageFetcher,
    RemoteCollection,
    SortedBy,
)
from triage_tracker.remote.github import GitHubClient, is_rate_limited

__all__ = [
    "MAX_PER_PAGE",
    "Direction",
    "GitHubClient",
    "IssueState",
    "PageFetcher",
    "RemoteCollection",
    "SortedBy",
    "is_rate_limited",
]
