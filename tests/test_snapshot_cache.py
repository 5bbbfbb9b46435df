"""Tests for SnapshotCache."""

from datetime import UTC, date, datetime
from unittest.mock import MagicMock

import pytest

from triage_tracker.cache import CollectionKind, SnapshotCache, snapshot_key
from triage_tracker.data import Event, EventKind, Issue
from triage_tracker.errors import TransportError
from triage_tracker.store import MemoryBlobStore

DAY = date(2024, 3, 1)


def _issue(number: int) -> Issue:
    return Issue(
        number=number,
        title=f"Issue {number}",
        created_at=datetime(2024, 3, 1, 10, number, tzinfo=UTC),
        comments=number,
        labels=("A-diagnostics",),
    )


def test_snapshot_key() -> None:
    assert snapshot_key(DAY, CollectionKind.ISSUES) == "2024-03-01-issues"
    assert snapshot_key(DAY, CollectionKind.EVENTS) == "2024-03-01-events"


def test_miss_returns_none() -> None:
    assert SnapshotCache(MemoryBlobStore()).read(DAY, CollectionKind.ISSUES) is None


def test_issues_round_trip() -> None:
    cache = SnapshotCache(MemoryBlobStore())
    issues = [_issue(1), _issue(2)]

    assert cache.write(DAY, CollectionKind.ISSUES, issues)

    assert cache.read(DAY, CollectionKind.ISSUES) == issues
    assert cache.read(DAY, CollectionKind.EVENTS) is None


def test_events_round_trip() -> None:
    cache = SnapshotCache(MemoryBlobStore())
    events = [
        Event(
            id=10,
            kind=EventKind.CLOSED,
            actor="octocat",
            issue=_issue(1),
            created_at=datetime(2024, 3, 1, 18, 0, tzinfo=UTC),
        )
    ]

    cache.write(DAY, CollectionKind.EVENTS, events)

    assert cache.read(DAY, CollectionKind.EVENTS) == events


def test_corrupt_snapshot_is_deleted() -> None:
    """Should delete a blob that fails to parse and report a miss."""
    store = MemoryBlobStore({"2024-03-01-issues": b"{not json"})
    cache = SnapshotCache(store)

    assert cache.read(DAY, CollectionKind.ISSUES) is None
    assert store.keys() == []


def test_store_read_failure_raises_transport_error() -> None:
    store = MagicMock()
    store.read.side_effect = OSError("disk gone")

    with pytest.raises(TransportError, match="disk gone"):
        SnapshotCache(store).read(DAY, CollectionKind.ISSUES)


def test_write_failure_is_swallowed() -> None:
    """Should log and return False when the store cannot be written."""
    store = MagicMock()
    store.write.side_effect = OSError("read-only")

    assert SnapshotCache(store).write(DAY, CollectionKind.ISSUES, [_issue(1)]) is False
