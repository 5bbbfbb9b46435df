"""Local caches: day snapshots and per-issue activity facts."""

from triage_tracker.cache.activity import DEFAULT_ACTIVITY_KEY, ActivityCache
from triage_tracker.cache.snapshot import CollectionKind, SnapshotCache, snapshot_key

__all__ = [
    "DEFAULT_ACTIVITY_KEY",
    "ActivityCache",
    "CollectionKind",
    "SnapshotCache",
    "snapshot_key",
]
