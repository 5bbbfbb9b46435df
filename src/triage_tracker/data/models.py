"""Core data models for the tracker."""

import datetime as dt
from dataclasses import dataclass
from enum import StrEnum
from fractions import Fraction
from typing import ClassVar, Protocol


@dataclass(frozen=True)
class PagingProfile:
    """Per item type pagination constants used to locate a date in a feed.

    - ``pages_per_day``: seed for the locator's adaptive pages-per-day estimate.
    - ``start_pages_per_day``: historical average used for the first probe.
      Kept exact so that rounding down never loses a page to float error.
    - ``yesterday_page``: fixed first probe when the target is yesterday, where
      intraday timing makes the linear estimate unreliable.
    """

    pages_per_day: int
    start_pages_per_day: Fraction
    yesterday_page: int


ISSUE_PAGING = PagingProfile(pages_per_day=1, start_pages_per_day=Fraction(1, 6), yesterday_page=0)
EVENT_PAGING = PagingProfile(pages_per_day=4, start_pages_per_day=Fraction(4), yesterday_page=4)


class Dated(Protocol):
    """Anything the date-window locator can page through."""

    paging: ClassVar[PagingProfile]

    @property
    def key(self) -> int:
        """Stable identity used to de-duplicate re-fetched items."""
        ...

    @property
    def is_pull_request(self) -> bool:
        """Pull requests are excluded from every computation."""
        ...

    def date(self) -> dt.date:
        """Calendar date (UTC) the item belongs to."""
        ...

    def is_relevant_for_date(self, day: dt.date) -> bool:
        """Whether the item should be collected for ``day``."""
        ...


class EventKind(StrEnum):
    """Issue event names. Anything GitHub sends that is not listed is UNKNOWN."""

    OPENED = "opened"
    CLOSED = "closed"
    REOPENED = "reopened"
    UNKNOWN = "unknown"

    @classmethod
    def _missing_(cls, value: object) -> "EventKind":
        return cls.UNKNOWN


class StateChange(StrEnum):
    """Net effect of a snapshot entry on the open issue count."""

    OPENED = "opened"
    CLOSED = "closed"


@dataclass(frozen=True)
class Issue:
    """An issue (or pull request) of the tracked repository."""

    number: int
    title: str
    created_at: dt.datetime
    comments: int = 0
    is_pull_request: bool = False
    labels: tuple[str, ...] = ()

    paging: ClassVar[PagingProfile] = ISSUE_PAGING

    @property
    def key(self) -> int:
        return self.number

    def date(self) -> dt.date:
        return self.created_at.astimezone(dt.UTC).date()

    def is_relevant_for_date(self, day: dt.date) -> bool:
        return self.date() == day

    def __str__(self) -> str:
        return f"#{self.number}: {self.title}"


@dataclass(frozen=True)
class Event:
    """A state transition recorded against an issue."""

    id: int
    kind: EventKind
    actor: str
    issue: Issue
    created_at: dt.datetime

    paging: ClassVar[PagingProfile] = EVENT_PAGING

    @property
    def key(self) -> int:
        return self.id

    @property
    def is_pull_request(self) -> bool:
        return self.issue.is_pull_request

    def date(self) -> dt.date:
        return self.created_at.astimezone(dt.UTC).date()

    def is_relevant_for_date(self, day: dt.date) -> bool:
        return self.kind is not EventKind.UNKNOWN and self.date() == day

    @property
    def state_change(self) -> StateChange:
        if self.kind is EventKind.CLOSED:
            return StateChange.CLOSED
        if self.kind in (EventKind.OPENED, EventKind.REOPENED):
            return StateChange.OPENED
        msg = f"Event {self.id} ({self.kind}) carries no state change"
        raise ValueError(msg)


@dataclass(frozen=True)
class Comment:
    """A comment on an issue."""

    id: int
    body: str
    created_at: dt.datetime

    def date(self) -> dt.date:
        return self.created_at.astimezone(dt.UTC).date()
