"""Finding untriaged issues: open issues nobody commented on since a yardstick date."""

import asyncio
import logging
from collections.abc import AsyncIterator, Sequence
from dataclasses import dataclass, field
from datetime import UTC, date, datetime, timedelta
from enum import StrEnum

from triage_tracker.cache import ActivityCache
from triage_tracker.data import ActivityLookup, Issue, LastCommentedOn, NoActivitySince
from triage_tracker.errors import RateLimitedError, UnsupportedPagingDepthError
from triage_tracker.remote import MAX_PER_PAGE, Direction, IssueState, RemoteCollection, SortedBy

DEFAULT_YARDSTICK_DAYS = 365
DEFAULT_TTL = timedelta(days=1)

logger = logging.getLogger(__name__)


class Verdict(StrEnum):
    """Outcome of triaging one issue from what is already known."""

    UNTRIAGED = "untriaged"
    TRIAGED = "triaged"
    # Too young to judge without comments.
    SKIPPED = "skipped"
    # The cache cannot answer; comments must be fetched.
    FETCH = "fetch"


def classify(lookup: ActivityLookup, yardstick: date) -> Verdict:
    """Decide from a cached activity fact whether an issue is untriaged.

    - Fresh ``LastCommentedOn(d)``: untriaged iff ``d`` is before the yardstick.
    - Fresh ``NoActivitySince(d)``: untriaged if ``d`` is on or before the
      yardstick, otherwise comments may exist in between and must be fetched.
    - Stale ``LastCommentedOn(d)`` with ``d`` after the yardstick: triaged, as
      newer activity cannot undo a comment already past the yardstick.
    - Anything else must be fetched.
    """
    fact = lookup.fact
    if lookup.is_fresh:
        if isinstance(fact, LastCommentedOn):
            return Verdict.UNTRIAGED if fact.day < yardstick else Verdict.TRIAGED
        if isinstance(fact, NoActivitySince) and fact.day <= yardstick:
            return Verdict.UNTRIAGED
        return Verdict.FETCH
    if lookup.is_stale and isinstance(fact, LastCommentedOn) and fact.day > yardstick:
        return Verdict.TRIAGED
    return Verdict.FETCH


@dataclass
class TriageReport:
    """Result of one triage pass."""

    yardstick: date
    untriaged: list[Issue] = field(default_factory=list)
    checked: int = 0
    comment_fetches: int = 0
    rate_limited: bool = False


def _utc_today() -> date:
    return datetime.now(tz=UTC).date()


class TriageResolver:
    """Walks open issues and reports the ones without comments since the yardstick.

    Issues are listed by comment count ascending, oldest first, so the most
    likely candidates come first. Each issue is answered from the activity
    cache when possible and from its comments otherwise; what was learnt is
    written back to the cache.

    Args:
        remote: Remote issue tracker.
        cache: Activity cache, flushed at the end of every pass.
        today: Reference "today" (defaults to the current UTC date).
        ttl: How long a cached fact is trusted.
        yardstick_days: Default distance of the yardstick before today.
        issues_per_page: Page size of the issue listing.
        max_issue_pages: Number of issue pages to walk.
        comments_per_page: Page size of a comment fetch.
        request_delay: Seconds to wait after each comment fetch.
    """

    def __init__(
        self,
        remote: RemoteCollection,
        cache: ActivityCache,
        *,
        today: date | None = None,
        ttl: timedelta = DEFAULT_TTL,
        yardstick_days: int = DEFAULT_YARDSTICK_DAYS,
        issues_per_page: int = 10,
        max_issue_pages: int = 1,
        comments_per_page: int = MAX_PER_PAGE,
        request_delay: float = 0.5,
    ) -> None:
        self._remote = remote
        self._cache = cache
        self._today = today
        self._ttl = ttl
        self._yardstick_days = yardstick_days
        self._issues_per_page = issues_per_page
        self._max_issue_pages = max_issue_pages
        self._comments_per_page = comments_per_page
        self._request_delay = request_delay

    @property
    def today(self) -> date:
        return self._today or _utc_today()

    def default_yardstick(self) -> date:
        return self.today - timedelta(days=self._yardstick_days)

    async def resolve(self, labels: Sequence[str] = (), *, yardstick: date | None = None) -> TriageReport:
        """Run one triage pass over the open issues carrying ``labels``.

        A rate-limit response ends the pass early; the report then holds what
        was found so far and has ``rate_limited`` set. The activity cache is
        flushed however the pass ends.

        Raises:
            UnsupportedPagingDepthError: An issue has a full page of comments
                since the yardstick.
            TransportError: Any other remote failure.
        """
        report = TriageReport(yardstick=yardstick or self.default_yardstick())
        try:
            async for issue in self._open_issues(labels):
                await self._triage(issue, report)
        except RateLimitedError:
            logger.warning("Rate limited after checking %d issue(s); reporting partial result", report.checked)
            report.rate_limited = True
        finally:
            self._cache.flush()
        return report

    async def _open_issues(self, labels: Sequence[str]) -> AsyncIterator[Issue]:
        for page in range(self._max_issue_pages):
            issues = await self._remote.fetch_issue_page(
                page,
                per_page=self._issues_per_page,
                labels=labels,
                sort=SortedBy.COMMENTS,
                direction=Direction.OLDEST_FIRST,
                state=IssueState.OPEN,
            )
            for issue in issues:
                if not issue.is_pull_request:
                    yield issue
            if len(issues) < self._issues_per_page:
                return

    async def _triage(self, issue: Issue, report: TriageReport) -> None:
        report.checked += 1
        yardstick = report.yardstick

        if issue.comments == 0:
            verdict = Verdict.UNTRIAGED if issue.date() < yardstick else Verdict.SKIPPED
        else:
            verdict = classify(self._cache.get(issue.number, self._ttl), yardstick)
        logger.debug("Issue #%d: %s", issue.number, verdict)

        if verdict is Verdict.FETCH:
            verdict = await self._fetch_verdict(issue, yardstick)
            report.comment_fetches += 1
        if verdict is Verdict.UNTRIAGED:
            report.untriaged.append(issue)

    async def _fetch_verdict(self, issue: Issue, yardstick: date) -> Verdict:
        comments = await self._remote.fetch_comment_page(
            issue.number,
            0,
            per_page=self._comments_per_page,
            since=yardstick,
        )
        checked_at = self._cache.now()
        if not comments:
            self._cache.insert(issue.number, NoActivitySince(yardstick, checked_at))
            verdict = Verdict.UNTRIAGED
        elif len(comments) < self._comments_per_page:
            latest = max(comment.date() for comment in comments)
            self._cache.insert(issue.number, LastCommentedOn(latest, checked_at))
            verdict = Verdict.TRIAGED
        else:
            raise UnsupportedPagingDepthError(issue.number, self._comments_per_page)

        if self._request_delay > 0:
            await asyncio.sleep(self._request_delay)
        return verdict
