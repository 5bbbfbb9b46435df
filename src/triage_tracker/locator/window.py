"""Date-window locator: find every item of one calendar date in a paginated feed.

The feed is sorted by timestamp and only offers page-by-index access. The
locator probes pages, starting from an estimate, and reacts to what it sees:

- A page without items for the target date is a miss. The locator jumps
  ``ceil(days_missed * pages_per_day)`` pages toward the target and bumps
  ``pages_per_day`` by one so consecutive misses do not swing back and forth.
  Every miss also bounds the pages that can still hold the date, and probes
  that would leave those bounds bisect instead.
- A page with items for the date switches to extraction. If the date's run
  reaches the page edge nearest "now" on the first extracted page, the locator
  steps toward now until the run starts; then it continues away from now for
  as long as the run reaches the far edge of the page.

Items are accumulated by key, so re-fetching a page (or a page whose contents
shifted as new items arrived) never duplicates anything.
"""

import logging
import math
from dataclasses import dataclass, field
from datetime import date
from enum import StrEnum
from typing import Generic, TypeVar

from triage_tracker.data import Dated
from triage_tracker.remote.base import MAX_PER_PAGE, PageFetcher
from triage_tracker.scan_log import ScanLogger, ScanRecord

T = TypeVar("T", bound=Dated)

MAX_PAGES_PER_DAY = 1_000
DEFAULT_MAX_PROBES = 200

logger = logging.getLogger(__name__)


class LocatorState(StrEnum):
    """States of a single locator invocation."""

    SEARCHING = "searching"
    EXTRACTING = "extracting"
    DONE = "done"
    EXHAUSTED = "exhausted"
    # Probe limit reached before the date was bracketed. Logged, not recovered.
    UNRESOLVED = "unresolved"


class Decision(StrEnum):
    """What the locator did after looking at a page."""

    JUMP_AWAY_FROM_NOW = "jump_away_from_now"
    JUMP_TOWARD_NOW = "jump_toward_now"
    BISECT = "bisect"
    NO_ITEMS_FOR_DATE = "no_items_for_date"
    STEP_TOWARD_NOW = "step_toward_now"
    STEP_AWAY_FROM_NOW = "step_away_from_now"
    CONTAINED_IN_PAGE = "contained_in_page"
    REACHED_START_OF_DATE = "reached_start_of_date"
    REACHED_END_OF_DATE = "reached_end_of_date"
    END_OF_HISTORY = "end_of_history"
    PROBE_LIMIT = "probe_limit"


@dataclass
class LocatorResult(Generic[T]):
    """Outcome of one locator invocation."""

    items: list[T]
    state: LocatorState
    pages_visited: list[int] = field(default_factory=list)
    retries: int = 0

    @property
    def is_complete(self) -> bool:
        """Whether the items are the full set for the date (safe to persist)."""
        return self.state in (LocatorState.DONE, LocatorState.EXHAUSTED)


def clamp_retreat(page: int, pages: int) -> int:
    """Move ``pages`` pages toward page 0.

    A move that would underflow page 0 is clamped to a single page back
    (never below page 0) instead of failing.
    """
    if pages <= page:
        return page - pages
    return max(page - 1, 0)


def saturating_increment(value: int, limit: int = MAX_PAGES_PER_DAY) -> int:
    """Increment ``value`` by one without exceeding ``limit``."""
    return min(value + 1, limit)


def pages_for_days(days: int, pages_per_day: int) -> int:
    """Number of pages to jump for a miss of ``days`` days (at least one)."""
    return max(1, math.ceil(days * pages_per_day))


@dataclass
class _Bounds:
    """Exclusive page bounds that can still hold the target date."""

    low: int = -1
    high: int | None = None

    def exclude_below(self, page: int) -> None:
        self.low = max(self.low, page)

    def exclude_above(self, page: int) -> None:
        self.high = page if self.high is None else min(self.high, page)

    @property
    def is_empty(self) -> bool:
        return self.high is not None and self.high - self.low <= 1

    def fit(self, candidate: int) -> tuple[int, bool]:
        """Confine ``candidate`` to the bounds, bisecting when it falls outside.

        Returns the page to probe and whether bisection was needed.
        """
        if candidate > self.low and (self.high is None or candidate < self.high):
            return candidate, False
        if self.high is None:
            return self.low + 1, True
        return (self.low + self.high) // 2, True


class DateWindowLocator(Generic[T]):
    """Locate all items of a calendar date in a timestamp-sorted paginated feed.

    Args:
        fetch_page: Coroutine function returning the items of a 0-indexed page.
        collection: Feed name used in logs.
        per_page: Page size the feed was queried with. A shorter page is the
            last page of the feed.
        newest_first: Sort direction of the feed. Page 0 holds the newest items
            when True and the oldest items when False.
        max_probes: Maximum number of fetches for one invocation.
        scan_logger: Optional ScanLogger recording every decision.
    """

    def __init__(
        self,
        fetch_page: PageFetcher[T],
        *,
        collection: str = "items",
        per_page: int = MAX_PER_PAGE,
        newest_first: bool = True,
        max_probes: int = DEFAULT_MAX_PROBES,
        scan_logger: ScanLogger | None = None,
    ) -> None:
        self._fetch_page = fetch_page
        self._collection = collection
        self._per_page = per_page
        self._newest_first = newest_first
        self._max_probes = max_probes
        self._scan_logger = scan_logger
        # Page step that moves away from "now".
        self._away = 1 if newest_first else -1

    async def locate(self, target: date, *, start_page: int, pages_per_day: int) -> LocatorResult[T]:
        """Collect every item relevant for ``target``.

        Args:
            target: Calendar date to collect.
            start_page: First page to probe (see ``estimate_start_page``).
            pages_per_day: Seed for the adaptive pages-per-day estimate.

        Returns:
            LocatorResult with the items, terminal state and probe statistics.

        Raises:
            RateLimitedError, TransportError: Propagated from ``fetch_page``;
                the scan is aborted and nothing is returned.
        """
        record = None
        if self._scan_logger:
            record = self._scan_logger.start_scan(self._collection, target, start_page)

        page = max(start_page, 0)
        state = LocatorState.SEARCHING
        bounds = _Bounds()
        collected: dict[int, T] = {}
        visited: list[int] = []
        retries = 0
        # Extraction bookkeeping: whether the run still continues away from now,
        # and the farthest page already extracted.
        heading_toward_now = False
        continue_away = False
        farthest_extracted = page

        while state in (LocatorState.SEARCHING, LocatorState.EXTRACTING):
            if len(visited) >= self._max_probes:
                logger.error(
                    "Unresolved: %s for %s not bracketed after %d probes",
                    self._collection,
                    target,
                    len(visited),
                    extra={"target_date": target.isoformat(), "page": page, "decision": Decision.PROBE_LIMIT},
                )
                self._log(record, target, page, Decision.PROBE_LIMIT)
                state = LocatorState.UNRESOLVED
                break

            items = await self._fetch_page(page)
            visited.append(page)

            if not items:
                if state is LocatorState.EXTRACTING and heading_toward_now:
                    # Nothing newer: the run started on the previous page.
                    heading_toward_now = False
                    if continue_away:
                        page = farthest_extracted + self._away
                        self._log(record, target, page, Decision.STEP_AWAY_FROM_NOW)
                        continue
                    self._log(record, target, page, Decision.REACHED_START_OF_DATE)
                    state = LocatorState.DONE
                    break
                if state is LocatorState.SEARCHING and page > 0:
                    # Overshot the end of the feed; try between the bounds.
                    bounds.exclude_above(page)
                    if not bounds.is_empty:
                        page, _ = bounds.fit((bounds.low + page) // 2)
                        retries += 1
                        self._log(record, target, page, Decision.BISECT)
                        continue
                self._log(record, target, page, Decision.END_OF_HISTORY)
                state = LocatorState.EXHAUSTED
                break

            # View of the page ordered from nearest "now" to farthest.
            view = items if self._newest_first else list(reversed(items))
            is_full = len(items) >= self._per_page
            has_nearer = page > 0 if self._newest_first else is_full
            has_farther = is_full if self._newest_first else page > 0

            matched = [i for i, item in enumerate(view) if item.date() == target]

            if not matched:
                if state is LocatorState.EXTRACTING:
                    if heading_toward_now and continue_away:
                        heading_toward_now = False
                        page = farthest_extracted + self._away
                        self._log(record, target, page, Decision.STEP_AWAY_FROM_NOW, len(items))
                        continue
                    decision = Decision.REACHED_START_OF_DATE if heading_toward_now else Decision.REACHED_END_OF_DATE
                    self._log(record, target, page, decision, len(items))
                    state = LocatorState.DONE
                    break

                nearest = view[0].date()
                farthest = view[-1].date()
                retries += 1
                if farthest > target:
                    # Whole page is newer than the target.
                    if not has_farther:
                        self._log(record, target, page, Decision.END_OF_HISTORY, len(items))
                        state = LocatorState.EXHAUSTED
                        break
                    jump = pages_for_days((farthest - target).days, pages_per_day)
                    self._exclude_newer(bounds, page)
                    candidate = self._move(page, jump, away=True)
                    decision = Decision.JUMP_AWAY_FROM_NOW
                elif nearest < target:
                    # Whole page is older than the target.
                    if not has_nearer:
                        self._log(record, target, page, Decision.NO_ITEMS_FOR_DATE, len(items))
                        state = LocatorState.DONE
                        break
                    jump = pages_for_days((target - nearest).days, pages_per_day)
                    self._exclude_older(bounds, page)
                    candidate = self._move(page, jump, away=False)
                    decision = Decision.JUMP_TOWARD_NOW
                else:
                    # The page straddles the target without a single item on it.
                    self._log(record, target, page, Decision.NO_ITEMS_FOR_DATE, len(items))
                    state = LocatorState.DONE
                    break

                if bounds.is_empty:
                    self._log(record, target, page, Decision.NO_ITEMS_FOR_DATE, len(items))
                    state = LocatorState.DONE
                    break
                page, bisected = bounds.fit(candidate)
                if bisected:
                    decision = Decision.BISECT
                pages_per_day = saturating_increment(pages_per_day)
                self._log(record, target, page, decision, len(items), pages_per_day=pages_per_day)
                continue

            for item in view:
                if item.is_relevant_for_date(target):
                    collected[item.key] = item

            touches_near = matched[0] == 0 and has_nearer
            touches_far = matched[-1] == len(view) - 1 and has_farther

            if state is LocatorState.SEARCHING:
                state = LocatorState.EXTRACTING
                farthest_extracted = page
                continue_away = touches_far
                if touches_near:
                    # The date may start on a nearer page that was never fetched.
                    heading_toward_now = True
                    retries += 1
                    page -= self._away
                    self._log(record, target, page, Decision.STEP_TOWARD_NOW, len(items), len(matched))
                elif touches_far:
                    page += self._away
                    self._log(record, target, page, Decision.STEP_AWAY_FROM_NOW, len(items), len(matched))
                else:
                    self._log(record, target, page, Decision.CONTAINED_IN_PAGE, len(items), len(matched))
                    state = LocatorState.DONE
            elif heading_toward_now:
                if touches_near:
                    retries += 1
                    page -= self._away
                    self._log(record, target, page, Decision.STEP_TOWARD_NOW, len(items), len(matched))
                elif continue_away:
                    heading_toward_now = False
                    page = farthest_extracted + self._away
                    self._log(record, target, page, Decision.STEP_AWAY_FROM_NOW, len(items), len(matched))
                else:
                    self._log(record, target, page, Decision.REACHED_START_OF_DATE, len(items), len(matched))
                    state = LocatorState.DONE
            else:
                farthest_extracted = page
                if touches_far:
                    page += self._away
                    self._log(record, target, page, Decision.STEP_AWAY_FROM_NOW, len(items), len(matched))
                else:
                    self._log(record, target, page, Decision.REACHED_END_OF_DATE, len(items), len(matched))
                    state = LocatorState.DONE

        result = LocatorResult(items=list(collected.values()), state=state, pages_visited=visited, retries=retries)
        if self._scan_logger:
            self._scan_logger.finish_scan(record, str(state), len(result.items))
        logger.info(
            "Located %d %s for %s in %d page(s) (%s)",
            len(result.items),
            self._collection,
            target,
            len(visited),
            state,
        )
        return result

    def _move(self, page: int, pages: int, *, away: bool) -> int:
        step = self._away if away else -self._away
        if step > 0:
            return page + pages
        return clamp_retreat(page, pages)

    def _exclude_newer(self, bounds: _Bounds, page: int) -> None:
        """``page`` and everything nearer "now" is newer than the target."""
        if self._newest_first:
            bounds.exclude_below(page)
        else:
            bounds.exclude_above(page)

    def _exclude_older(self, bounds: _Bounds, page: int) -> None:
        """``page`` and everything farther from "now" is older than the target."""
        if self._newest_first:
            bounds.exclude_above(page)
        else:
            bounds.exclude_below(page)

    def _log(
        self,
        record: ScanRecord | None,
        target: date,
        page: int,
        decision: Decision,
        page_size: int = 0,
        matched: int = 0,
        *,
        pages_per_day: int = 0,
    ) -> None:
        """Emit a decision keyed by (target date, next page, decision)."""
        logger.debug(
            "%s %s: %s -> page %d",
            self._collection,
            target,
            decision,
            page,
            extra={"target_date": target.isoformat(), "page": page, "decision": str(decision)},
        )
        if self._scan_logger:
            self._scan_logger.log_decision(
                record,
                page,
                str(decision),
                page_size=page_size,
                matched=matched,
                pages_per_day=pages_per_day,
            )
