"""Remote collection protocol."""

from collections.abc import Awaitable, Callable, Sequence
from datetime import date
from enum import StrEnum
from typing import Protocol, TypeVar

from triage_tracker.data import Comment, Event, Issue

T = TypeVar("T")

# A single page of a feed, 0-indexed.
PageFetcher = Callable[[int], Awaitable[list[T]]]

MAX_PER_PAGE = 100


class SortedBy(StrEnum):
    """Fields the issue listing can be sorted by."""

    CREATED = "created"
    UPDATED = "updated"
    COMMENTS = "comments"


class IssueState(StrEnum):
    """Which issues a listing returns."""

    OPEN = "open"
    CLOSED = "closed"
    ALL = "all"


class Direction(StrEnum):
    """Sort direction of a listing."""

    NEWEST_FIRST = "desc"
    OLDEST_FIRST = "asc"


class RemoteCollection(Protocol):
    """Interface for the paginated issue tracker the tool reads from.

    Pages are 0-indexed. Implementations raise ``RateLimitedError`` for a
    forbidden / rate-limited response and ``TransportError`` for anything else.
    """

    async def fetch_issue_page(
        self,
        page: int,
        *,
        per_page: int = MAX_PER_PAGE,
        labels: Sequence[str] = (),
        sort: SortedBy = SortedBy.CREATED,
        direction: Direction = Direction.NEWEST_FIRST,
        state: IssueState = IssueState.OPEN,
    ) -> list[Issue]:
        """Fetch one page of issues (pull requests included)."""
        ...

    async def fetch_event_page(self, page: int, *, per_page: int = MAX_PER_PAGE) -> list[Event]:
        """Fetch one page of issue events, newest first."""
        ...

    async def fetch_comment_page(
        self,
        issue_number: int,
        page: int,
        *,
        per_page: int = MAX_PER_PAGE,
        since: date | None = None,
    ) -> list[Comment]:
        """Fetch one page of comments on an issue, oldest first."""
        ...
