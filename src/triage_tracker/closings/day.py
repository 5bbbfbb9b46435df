"""Issues opened and closed per calendar day."""

import asyncio
import logging
from collections.abc import Iterator
from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta
from typing import TypeVar

from triage_tracker.cache import CollectionKind, SnapshotCache
from triage_tracker.data import Dated, Event, Issue, PagingProfile, StateChange
from triage_tracker.locator import DEFAULT_MAX_PROBES, DateWindowLocator, estimate_start_page
from triage_tracker.remote import (
    MAX_PER_PAGE,
    Direction,
    IssueState,
    PageFetcher,
    RemoteCollection,
    SortedBy,
)
from triage_tracker.scan_log import ScanLogger

T = TypeVar("T", bound=Dated)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DayEntry:
    """One issue's net state change on a day."""

    issue: Issue
    change: StateChange


@dataclass(frozen=True)
class DayActivity:
    """Issues opened and closed on one day, one entry per issue number."""

    day: date
    entries: tuple[DayEntry, ...] = ()

    @classmethod
    def from_items(cls, day: date, issues: list[Issue], events: list[Event]) -> "DayActivity":
        """Merge the issues created and the events recorded on ``day``.

        Pull requests and events without a state change are dropped. When an
        issue appears both as a raw issue and in events, the events win; among
        several events for one issue the latest one wins.
        """
        by_number: dict[int, DayEntry] = {}
        for issue in issues:
            if issue.is_pull_request:
                continue
            by_number[issue.number] = DayEntry(issue, StateChange.OPENED)

        latest: dict[int, Event] = {}
        for event in events:
            if event.is_pull_request or not event.is_relevant_for_date(day):
                continue
            current = latest.get(event.issue.number)
            if current is None or (event.created_at, event.id) > (current.created_at, current.id):
                latest[event.issue.number] = event
        for number, event in latest.items():
            by_number[number] = DayEntry(event.issue, event.state_change)

        entries = tuple(by_number[number] for number in sorted(by_number))
        return cls(day=day, entries=entries)

    def opened(self) -> Iterator[Issue]:
        return (entry.issue for entry in self.entries if entry.change is StateChange.OPENED)

    def closed(self) -> Iterator[Issue]:
        return (entry.issue for entry in self.entries if entry.change is StateChange.CLOSED)

    def net_change(self) -> int:
        """Opened minus closed."""
        opened = sum(1 for _ in self.opened())
        closed = sum(1 for _ in self.closed())
        return opened - closed


def _utc_today() -> date:
    return datetime.now(tz=UTC).date()


class ClosingsService:
    """Builds DayActivity for dates, backed by the snapshot cache.

    Issues (by creation date) and issue events are located independently with
    a DateWindowLocator each and fetched concurrently.

    Args:
        remote: Remote issue tracker.
        snapshots: Snapshot cache for resolved days.
        today: Reference "today" (defaults to the current UTC date).
        per_page: Page size used for both feeds.
        max_probes: Maximum number of fetches per locator invocation.
        scan_logger: Optional ScanLogger for locator decisions.
    """

    def __init__(
        self,
        remote: RemoteCollection,
        snapshots: SnapshotCache,
        *,
        today: date | None = None,
        per_page: int = MAX_PER_PAGE,
        max_probes: int = DEFAULT_MAX_PROBES,
        scan_logger: ScanLogger | None = None,
    ) -> None:
        self._remote = remote
        self._snapshots = snapshots
        self._today = today
        self._per_page = per_page
        self._max_probes = max_probes
        self._scan_logger = scan_logger

    @property
    def today(self) -> date:
        return self._today or _utc_today()

    async def issues_for_date(self, day: date) -> list[Issue]:
        """Issues created on ``day``, pull requests excluded."""

        async def fetch(page: int) -> list[Issue]:
            return await self._remote.fetch_issue_page(
                page,
                per_page=self._per_page,
                sort=SortedBy.CREATED,
                direction=Direction.NEWEST_FIRST,
                state=IssueState.ALL,
            )

        return await self._read_through(day, CollectionKind.ISSUES, fetch, Issue.paging)

    async def events_for_date(self, day: date) -> list[Event]:
        """State-changing issue events recorded on ``day``, pull requests excluded."""

        async def fetch(page: int) -> list[Event]:
            return await self._remote.fetch_event_page(page, per_page=self._per_page)

        return await self._read_through(day, CollectionKind.EVENTS, fetch, Event.paging)

    async def for_date(self, day: date) -> DayActivity:
        """Opened / closed issues for ``day``.

        Raises:
            ValueError: If ``day`` is in the future.
            RateLimitedError, TransportError: From the remote tracker. The
                other scan is cancelled before the error is raised, so a
                failed call leaves no scan running and writes no snapshot.
        """
        tasks = (
            asyncio.create_task(self.issues_for_date(day)),
            asyncio.create_task(self.events_for_date(day)),
        )
        try:
            issues, events = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
        return DayActivity.from_items(day, issues, events)

    async def for_range(self, start: date, end: date) -> list[DayActivity]:
        """DayActivity for every day from ``start`` to ``end`` inclusive, newest first."""
        newest, oldest = max(start, end), min(start, end)
        days: list[DayActivity] = []
        day = newest
        while day >= oldest:
            days.append(await self.for_date(day))
            day -= timedelta(days=1)
        return days

    async def _read_through(
        self,
        day: date,
        kind: CollectionKind,
        fetch: PageFetcher[T],
        profile: PagingProfile,
    ) -> list[T]:
        cached = self._snapshots.read(day, kind)
        if cached is not None:
            logger.debug("Using cached %s for %s", kind, day)
            return cached

        start_page = estimate_start_page(day, self.today, profile)
        locator: DateWindowLocator[T] = DateWindowLocator(
            fetch,
            collection=str(kind),
            per_page=self._per_page,
            max_probes=self._max_probes,
            scan_logger=self._scan_logger,
        )
        result = await locator.locate(day, start_page=start_page, pages_per_day=profile.pages_per_day)
        items = [item for item in result.items if not item.is_pull_request]

        # Today is still growing and an unresolved scan may be partial.
        if result.is_complete and day < self.today:
            self._snapshots.write(day, kind, items)
        else:
            logger.debug("Not persisting %s for %s (%s)", kind, day, result.state)
        return items
