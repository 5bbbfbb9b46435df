"""Tests for DayActivity and ClosingsService."""

import asyncio
from datetime import UTC, date, datetime, time, timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from triage_tracker.cache import CollectionKind, SnapshotCache
from triage_tracker.closings import ClosingsService, DayActivity
from triage_tracker.data import Event, EventKind, Issue, StateChange
from triage_tracker.errors import RateLimitedError
from triage_tracker.remote import Direction, IssueState, SortedBy
from triage_tracker.store import MemoryBlobStore

TODAY = date(2024, 3, 10)
YESTERDAY = TODAY - timedelta(days=1)


def _at(day: date, hour: int) -> datetime:
    return datetime.combine(day, time(hour), tzinfo=UTC)


def _issue(number: int, day: date, hour: int = 12, *, is_pull_request: bool = False) -> Issue:
    return Issue(number=number, title=f"Issue {number}", created_at=_at(day, hour), is_pull_request=is_pull_request)


def _event(event_id: int, kind: EventKind, issue: Issue, day: date, hour: int) -> Event:
    return Event(id=event_id, kind=kind, actor="octocat", issue=issue, created_at=_at(day, hour))


OLD = date(2024, 1, 1)
ISSUES = [
    _issue(5, TODAY, 10),
    _issue(4, TODAY, 9, is_pull_request=True),
    _issue(3, YESTERDAY, 15),
    _issue(2, YESTERDAY, 8),
    _issue(1, TODAY - timedelta(days=2)),
]
EVENTS = [
    _event(30, EventKind.CLOSED, ISSUES[2], TODAY, 11),
    _event(21, EventKind.REOPENED, _issue(1, OLD), YESTERDAY, 18),
    _event(20, EventKind.CLOSED, _issue(1, OLD), YESTERDAY, 10),
    _event(19, EventKind.CLOSED, ISSUES[3], YESTERDAY, 9),
    _event(18, EventKind.UNKNOWN, ISSUES[2], YESTERDAY, 8),
    _event(17, EventKind.CLOSED, _issue(6, OLD, is_pull_request=True), YESTERDAY, 7),
]


class FakeRemote:
    """Newest-first issue and event feeds served from lists."""

    def __init__(self, issues: list[Issue], events: list[Event]) -> None:
        self.issues = issues
        self.events = events
        self.issue_calls: list[int] = []
        self.event_calls: list[int] = []

    async def fetch_issue_page(self, page: int, *, per_page: int = 100, **kwargs) -> list[Issue]:
        self.issue_calls.append(page)
        return self.issues[page * per_page : (page + 1) * per_page]

    async def fetch_event_page(self, page: int, *, per_page: int = 100) -> list[Event]:
        self.event_calls.append(page)
        return self.events[page * per_page : (page + 1) * per_page]

    async def fetch_comment_page(self, issue_number: int, page: int, **kwargs) -> list:
        return []


class TestDayActivity:
    """Tests for DayActivity.from_items."""

    def test_events_take_precedence_over_issues(self) -> None:
        """Should report an issue closed on its creation day as closed."""
        activity = DayActivity.from_items(YESTERDAY, ISSUES[2:4], EVENTS[1:])

        changes = {entry.issue.number: entry.change for entry in activity.entries}
        assert changes == {1: StateChange.OPENED, 2: StateChange.CLOSED, 3: StateChange.OPENED}

    def test_latest_event_wins(self) -> None:
        issue = _issue(1, OLD)
        events = [
            _event(2, EventKind.CLOSED, issue, YESTERDAY, 20),
            _event(1, EventKind.REOPENED, issue, YESTERDAY, 10),
        ]

        activity = DayActivity.from_items(YESTERDAY, [], events)

        assert [entry.change for entry in activity.entries] == [StateChange.CLOSED]

    def test_pull_requests_are_excluded(self) -> None:
        activity = DayActivity.from_items(TODAY, ISSUES[:2], [])

        assert [issue.number for issue in activity.opened()] == [5]

    def test_net_change(self) -> None:
        activity = DayActivity.from_items(YESTERDAY, ISSUES[2:4], EVENTS[1:])

        assert [issue.number for issue in activity.opened()] == [1, 3]
        assert [issue.number for issue in activity.closed()] == [2]
        assert activity.net_change() == 1

    def test_empty_day(self) -> None:
        activity = DayActivity.from_items(TODAY, [], [])

        assert activity.entries == ()
        assert activity.net_change() == 0


class TestClosingsService:
    """Tests for ClosingsService."""

    @pytest.fixture
    def remote(self) -> FakeRemote:
        return FakeRemote(ISSUES, EVENTS)

    @pytest.fixture
    def store(self) -> MemoryBlobStore:
        return MemoryBlobStore()

    @pytest.fixture
    def service(self, remote: FakeRemote, store: MemoryBlobStore) -> ClosingsService:
        return ClosingsService(remote, SnapshotCache(store), today=TODAY)

    async def test_for_date(self, service: ClosingsService) -> None:
        activity = await service.for_date(YESTERDAY)

        assert activity.day == YESTERDAY
        assert [issue.number for issue in activity.opened()] == [1, 3]
        assert [issue.number for issue in activity.closed()] == [2]

    async def test_past_day_is_cached(
        self,
        service: ClosingsService,
        remote: FakeRemote,
        store: MemoryBlobStore,
    ) -> None:
        """Should persist a resolved past day and serve it without fetching again."""
        first = await service.for_date(YESTERDAY)
        assert store.keys() == ["2024-03-09-events", "2024-03-09-issues"]
        calls = (len(remote.issue_calls), len(remote.event_calls))

        second = await service.for_date(YESTERDAY)

        assert (len(remote.issue_calls), len(remote.event_calls)) == calls
        assert second == first

    async def test_today_is_never_cached(
        self,
        service: ClosingsService,
        remote: FakeRemote,
        store: MemoryBlobStore,
    ) -> None:
        activity = await service.for_date(TODAY)

        assert [issue.number for issue in activity.opened()] == [5]
        assert [issue.number for issue in activity.closed()] == [3]
        assert store.keys() == []
        await service.for_date(TODAY)
        assert remote.issue_calls.count(0) == 2

    async def test_snapshots_exclude_pull_requests(self, store: MemoryBlobStore) -> None:
        remote = FakeRemote(ISSUES, EVENTS)
        service = ClosingsService(remote, SnapshotCache(store), today=TODAY + timedelta(days=1))

        await service.for_date(TODAY)

        cached = SnapshotCache(store).read(TODAY, CollectionKind.ISSUES)
        assert [issue.number for issue in cached] == [5]

    async def test_for_range_is_newest_first(self, service: ClosingsService) -> None:
        """Should accept the range bounds in either order."""
        days = await service.for_range(YESTERDAY, TODAY)
        swapped = await service.for_range(TODAY, YESTERDAY)

        assert [activity.day for activity in days] == [TODAY, YESTERDAY]
        assert [activity.day for activity in swapped] == [TODAY, YESTERDAY]
        assert [activity.net_change() for activity in days] == [0, 1]

    async def test_issue_feed_query(self, store: MemoryBlobStore) -> None:
        remote = MagicMock()
        remote.fetch_issue_page = AsyncMock(return_value=[])
        remote.fetch_event_page = AsyncMock(return_value=[])
        service = ClosingsService(remote, SnapshotCache(store), today=TODAY, per_page=50)

        await service.for_date(TODAY)

        remote.fetch_issue_page.assert_awaited_once_with(
            0,
            per_page=50,
            sort=SortedBy.CREATED,
            direction=Direction.NEWEST_FIRST,
            state=IssueState.ALL,
        )
        remote.fetch_event_page.assert_awaited_once_with(0, per_page=50)

    async def test_rate_limit_writes_nothing(self, store: MemoryBlobStore) -> None:
        remote = MagicMock()
        remote.fetch_issue_page = AsyncMock(side_effect=RateLimitedError())
        remote.fetch_event_page = AsyncMock(side_effect=RateLimitedError())
        service = ClosingsService(remote, SnapshotCache(store), today=TODAY)

        with pytest.raises(RateLimitedError):
            await service.for_date(YESTERDAY)

        assert store.keys() == []

    async def test_rate_limit_mid_scan_discards_collected_pages(self, store: MemoryBlobStore) -> None:
        """Should persist nothing for a scan rate limited after two full pages."""
        issues = [_issue(n, YESTERDAY, 23 - n) for n in range(1, 11)]
        remote = FakeRemote(issues, EVENTS)
        fetch = remote.fetch_issue_page

        async def limited(page: int, **kwargs) -> list[Issue]:
            if page == 2:
                raise RateLimitedError()
            return await fetch(page, **kwargs)

        remote.fetch_issue_page = limited
        service = ClosingsService(remote, SnapshotCache(store), today=TODAY, per_page=2)

        with pytest.raises(RateLimitedError):
            await service.for_date(YESTERDAY)

        assert remote.issue_calls == [0, 1]
        assert not [key for key in store.keys() if key.endswith("-issues")]

    async def test_rate_limit_cancels_event_scan(self, store: MemoryBlobStore) -> None:
        """Should stop the event scan once the issue scan is rate limited."""
        issues = [_issue(n, YESTERDAY, 23 - n) for n in range(1, 11)]
        remote = FakeRemote(issues, EVENTS)
        fetch_issues = remote.fetch_issue_page
        fetch_events = remote.fetch_event_page

        async def limited(page: int, **kwargs) -> list[Issue]:
            if page == 2:
                raise RateLimitedError()
            return await fetch_issues(page, **kwargs)

        async def slow(page: int, **kwargs) -> list[Event]:
            await asyncio.sleep(0.02)
            return await fetch_events(page, **kwargs)

        remote.fetch_issue_page = limited
        remote.fetch_event_page = slow
        service = ClosingsService(remote, SnapshotCache(store), today=TODAY, per_page=2)

        with pytest.raises(RateLimitedError):
            await service.for_date(YESTERDAY)
        event_calls = len(remote.event_calls)
        await asyncio.sleep(0.2)

        assert len(remote.event_calls) == event_calls
        assert store.keys() == []

    async def test_future_date_is_rejected(self, service: ClosingsService) -> None:
        with pytest.raises(ValueError, match="in the future"):
            await service.for_date(TODAY + timedelta(days=1))
