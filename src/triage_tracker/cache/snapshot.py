"""Write-through, read-through cache of per-day feed snapshots."""

import logging
from datetime import date
from enum import StrEnum
from typing import Any

from pydantic import TypeAdapter, ValidationError

from triage_tracker.data import Event, Issue
from triage_tracker.errors import TransportError
from triage_tracker.store import BlobStore

logger = logging.getLogger(__name__)


class CollectionKind(StrEnum):
    """Feeds the tracker keeps day snapshots of."""

    ISSUES = "issues"
    EVENTS = "events"


_ADAPTERS: dict[CollectionKind, TypeAdapter[Any]] = {
    CollectionKind.ISSUES: TypeAdapter(list[Issue]),
    CollectionKind.EVENTS: TypeAdapter(list[Event]),
}


def snapshot_key(day: date, kind: CollectionKind) -> str:
    """Store key of the snapshot of ``kind`` for ``day`` (e.g. ``2024-05-01-events``)."""
    return f"{day.isoformat()}-{kind}"


class SnapshotCache:
    """Persists the full item set of a (date, feed) pair once it is resolved.

    Snapshots are never updated in place: a blob that fails to parse is deleted
    and reported as a miss, so the caller fetches and writes a fresh one.

    Args:
        store: Blob store holding the snapshots.
    """

    def __init__(self, store: BlobStore) -> None:
        self._store = store

    def read(self, day: date, kind: CollectionKind) -> list[Any] | None:
        """Return the cached items for ``day``, or None on a miss.

        Raises:
            TransportError: If the store itself fails (not for missing or
                corrupt blobs).
        """
        key = snapshot_key(day, kind)
        logger.debug("Trying to read '%s' snapshot @ '%s'", kind, key)
        try:
            data = self._store.read(key)
        except OSError as exc:
            raise TransportError(f"Failed to read snapshot '{key}': {exc}") from exc
        if data is None:
            logger.debug("'%s' not in cache", key)
            return None

        try:
            return _ADAPTERS[kind].validate_json(data)
        except ValidationError:
            logger.warning("Failed to parse snapshot '%s'. Deleting...", key)
            try:
                self._store.delete(key)
            except OSError:
                logger.warning("Could not delete corrupt snapshot '%s'", key, exc_info=True)
            return None

    def write(self, day: date, kind: CollectionKind, items: list[Any]) -> bool:
        """Persist ``items`` as the snapshot for ``day``.

        Failures are logged and swallowed; the items stay usable in-process and
        the next run simply recomputes them.

        Returns:
            Whether the snapshot was persisted.
        """
        key = snapshot_key(day, kind)
        logger.debug("Writing snapshot '%s' (%d items)", key, len(items))
        try:
            data = _ADAPTERS[kind].dump_json(items)
            self._store.write(key, data)
        except Exception:
            logger.warning("Failed to write snapshot '%s'", key, exc_info=True)
            return False
        return True
