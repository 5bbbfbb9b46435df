"""Activity facts tracked per issue by the activity cache."""

from dataclasses import dataclass
from datetime import date, datetime
from enum import StrEnum
from typing import Annotated, Literal

from pydantic import Field


@dataclass(frozen=True)
class LastCommentedOn:
    """The exact date of the most recent comment on an issue."""

    day: date
    last_checked: datetime
    kind: Literal["last_commented_on"] = "last_commented_on"


@dataclass(frozen=True)
class NoActivitySince:
    """No comment was seen from ``day`` onwards.

    Only a lower bound: there may be unobserved activity before ``day``.
    """

    day: date
    last_checked: datetime
    kind: Literal["no_activity_since"] = "no_activity_since"


ActivityFact = Annotated[LastCommentedOn | NoActivitySince, Field(discriminator="kind")]


class Freshness(StrEnum):
    """How far a cached fact can be trusted."""

    FRESH = "fresh"
    STALE = "stale"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class ActivityLookup:
    """Result of an activity cache lookup."""

    freshness: Freshness
    fact: LastCommentedOn | NoActivitySince | None = None

    @property
    def is_fresh(self) -> bool:
        return self.freshness is Freshness.FRESH

    @property
    def is_stale(self) -> bool:
        return self.freshness is Freshness.STALE
