"""Per-issue cache of the last known comment activity."""

import logging
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from pydantic import TypeAdapter, ValidationError

from triage_tracker.data import (
    ActivityFact,
    ActivityLookup,
    Freshness,
    LastCommentedOn,
    NoActivitySince,
)
from triage_tracker.store import BlobStore

DEFAULT_ACTIVITY_KEY = "triage-activity"

logger = logging.getLogger(__name__)

_FACTS: TypeAdapter[dict[int, LastCommentedOn | NoActivitySince]] = TypeAdapter(dict[int, ActivityFact])


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


class ActivityCache:
    """Maps issue numbers to the latest activity fact known about them.

    Facts are overwritten, never merged. Whether a fact can still be trusted is
    decided per lookup from its ``last_checked`` instant and a caller supplied
    time-to-live.

    Args:
        store: Blob store the whole map is persisted to on ``flush``.
        key: Store key of the map.
        now: Clock used for freshness decisions.
    """

    def __init__(
        self,
        store: BlobStore,
        *,
        key: str = DEFAULT_ACTIVITY_KEY,
        now: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._store = store
        self._key = key
        self._now = now
        self._facts: dict[int, LastCommentedOn | NoActivitySince] = {}

    @classmethod
    def load(
        cls,
        store: BlobStore,
        *,
        key: str = DEFAULT_ACTIVITY_KEY,
        now: Callable[[], datetime] = _utc_now,
    ) -> "ActivityCache":
        """Create a cache holding the facts persisted under ``key``.

        A missing blob gives an empty cache. A blob that fails to parse is
        deleted and also gives an empty cache.
        """
        cache = cls(store, key=key, now=now)
        try:
            data = store.read(key)
        except OSError:
            logger.warning("Could not read activity cache '%s', starting empty", key, exc_info=True)
            return cache
        if data is None:
            logger.debug("No activity cache at '%s'", key)
            return cache
        try:
            cache._facts = _FACTS.validate_json(data)
        except ValidationError:
            logger.warning("Failed to parse activity cache '%s'. Deleting...", key)
            try:
                store.delete(key)
            except OSError:
                logger.warning("Could not delete corrupt activity cache '%s'", key, exc_info=True)
        else:
            logger.debug("Loaded %d activity facts from '%s'", len(cache._facts), key)
        return cache

    def __len__(self) -> int:
        return len(self._facts)

    def __contains__(self, issue_number: object) -> bool:
        return issue_number in self._facts

    def now(self) -> datetime:
        """Current instant according to the cache's clock."""
        return self._now()

    def get(self, issue_number: int, ttl: timedelta | None = None) -> ActivityLookup:
        """Look up the fact for an issue.

        Args:
            issue_number: Issue to look up.
            ttl: How long a fact is trusted after it was checked. None trusts
                every fact.

        Returns:
            ActivityLookup that is fresh when ``now - last_checked < ttl`` (or
            no ttl was given), stale otherwise, and not_found without a fact.
        """
        fact = self._facts.get(issue_number)
        if fact is None:
            return ActivityLookup(Freshness.NOT_FOUND)
        if ttl is None or self._now() - fact.last_checked < ttl:
            return ActivityLookup(Freshness.FRESH, fact)
        return ActivityLookup(Freshness.STALE, fact)

    def insert(self, issue_number: int, fact: LastCommentedOn | NoActivitySince) -> None:
        """Record ``fact`` for an issue, replacing whatever was known before."""
        self._facts[issue_number] = fact

    def flush(self) -> bool:
        """Persist the full map. Failures are logged, not raised.

        Returns:
            Whether the map was persisted.
        """
        try:
            self._store.write(self._key, _FACTS.dump_json(self._facts))
        except Exception:
            logger.warning("Failed to flush activity cache '%s'", self._key, exc_info=True)
            return False
        logger.debug("Flushed %d activity facts to '%s'", len(self._facts), self._key)
        return True
