"""GitHub REST v3 access to a repository's issues, issue events and comments."""

import logging
import os
from collections.abc import Callable, Sequence
from datetime import date, datetime
from typing import Any, TypeVar

import httpx

from triage_tracker.data import Comment, Event, EventKind, Issue
from triage_tracker.errors import RateLimitedError, TransportError
from triage_tracker.remote.base import MAX_PER_PAGE, Direction, IssueState, SortedBy

GITHUB_API_URL = "https://api.github.com"
DEFAULT_REPO = "rust-lang/rust"
DEFAULT_USER_AGENT = "triage-tracker"
RATE_LIMIT_STATUSES = (403, 429)

T = TypeVar("T")

logger = logging.getLogger(__name__)


def is_rate_limited(response: httpx.Response) -> bool:
    """Check whether a response is GitHub's forbidden / rate-limit answer."""
    return response.status_code in RATE_LIMIT_STATUSES


class GitHubClient:
    """Read-only client for one repository on the GitHub REST API.

    Page numbers are 0-indexed here and translated to GitHub's 1-indexed
    ``page`` parameter on the wire.

    Args:
        repo: ``owner/name`` of the repository.
        api_url: Base URL of the REST API.
        token: Personal access token (defaults to GITHUB_TOKEN env var, optional).
        user_agent: User-Agent header sent with every request.
        timeout: Per-request timeout in seconds.
    """

    def __init__(
        self,
        *,
        repo: str = DEFAULT_REPO,
        api_url: str = GITHUB_API_URL,
        token: str | None = None,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = 30.0,
    ) -> None:
        self._repo = repo
        self._api_url = api_url.rstrip("/")
        self._token = token or os.environ.get("GITHUB_TOKEN")
        self._user_agent = user_agent
        self._timeout = timeout

    @property
    def repo(self) -> str:
        return self._repo

    async def fetch_issue_page(
        self,
        page: int,
        *,
        per_page: int = MAX_PER_PAGE,
        labels: Sequence[str] = (),
        sort: SortedBy = SortedBy.CREATED,
        direction: Direction = Direction.NEWEST_FIRST,
        state: IssueState = IssueState.OPEN,
    ) -> list[Issue]:
        """Fetch one page of issues (pull requests included, flagged)."""
        logger.debug("Fetching issue page %d", page)
        params = _page_params(page, per_page)
        params["sort"] = str(sort)
        params["direction"] = str(direction)
        params["state"] = str(state)
        if labels:
            params["labels"] = ",".join(labels)
        data = await self._get("issues", params)
        return _parse_items(data, _parse_issue)

    async def fetch_event_page(self, page: int, *, per_page: int = MAX_PER_PAGE) -> list[Event]:
        """Fetch one page of issue events, newest first."""
        logger.debug("Fetching event page %d", page)
        data = await self._get("issues/events", _page_params(page, per_page))
        return _parse_items(data, _parse_event)

    async def fetch_comment_page(
        self,
        issue_number: int,
        page: int,
        *,
        per_page: int = MAX_PER_PAGE,
        since: date | None = None,
    ) -> list[Comment]:
        """Fetch one page of comments on an issue, optionally only those since a date."""
        logger.debug("Fetching comments for issue %d page %d", issue_number, page)
        params = _page_params(page, per_page)
        if since is not None:
            params["since"] = _to_timestamp(since)
        data = await self._get(f"issues/{issue_number}/comments", params)
        return _parse_items(data, _parse_comment)

    async def _get(self, path: str, params: dict[str, str | int]) -> list[dict[str, Any]]:
        """GET a list endpoint of the repository and return the decoded JSON array."""
        url = f"{self._api_url}/repos/{self._repo}/{path}"
        headers = {
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": self._user_agent,
        }
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"

        async with httpx.AsyncClient(timeout=self._timeout) as client:
            try:
                response = await client.get(url, params=params, headers=headers)
            except httpx.HTTPError as exc:
                raise TransportError(f"Request to {url} failed: {exc}") from exc

        if is_rate_limited(response):
            reset = response.headers.get("X-RateLimit-Reset")
            logger.warning("GitHub refused %s (status %d, reset at %s)", path, response.status_code, reset)
            raise RateLimitedError()
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise TransportError(f"GitHub returned {response.status_code} for {path}") from exc
        try:
            data = response.json()
        except ValueError as exc:
            raise TransportError(f"GitHub returned invalid JSON for {path}") from exc
        if not isinstance(data, list):
            raise TransportError(f"Expected a JSON array from {path}, got {type(data).__name__}")
        return data


def _page_params(page: int, per_page: int) -> dict[str, str | int]:
    if page < 0:
        raise ValueError(f"page must be >= 0, got {page}")
    if not 0 < per_page <= MAX_PER_PAGE:
        raise ValueError(f"per_page must be between 1 and {MAX_PER_PAGE}, got {per_page}")
    return {"per_page": per_page, "page": page + 1}


def _parse_items(data: list[dict[str, Any]], parse: Callable[[dict[str, Any]], T]) -> list[T]:
    try:
        return [parse(item) for item in data]
    except (KeyError, TypeError, ValueError) as exc:
        raise TransportError(f"Unexpected item payload: {exc!r}") from exc


def _parse_timestamp(value: str) -> datetime:
    """Parse GitHub's ``2024-01-31T12:00:00Z`` timestamps into aware datetimes."""
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def _to_timestamp(day: date) -> str:
    """Midnight UTC of ``day`` in the format GitHub's ``since`` parameter expects."""
    return f"{day.isoformat()}T00:00:00Z"


def _parse_issue(item: dict[str, Any]) -> Issue:
    labels = tuple(
        label["name"] for label in item.get("labels", []) if isinstance(label, dict) and "name" in label
    )
    return Issue(
        number=int(item["number"]),
        title=item.get("title") or "",
        created_at=_parse_timestamp(item["created_at"]),
        comments=int(item.get("comments", 0)),
        is_pull_request=item.get("pull_request") is not None,
        labels=labels,
    )


def _parse_event(item: dict[str, Any]) -> Event:
    actor = item.get("actor") or {}
    return Event(
        id=int(item["id"]),
        kind=EventKind(item.get("event", "")),
        actor=actor.get("login", ""),
        issue=_parse_issue(item["issue"]),
        created_at=_parse_timestamp(item["created_at"]),
    )


def _parse_comment(item: dict[str, Any]) -> Comment:
    return Comment(
        id=int(item["id"]),
        body=item.get("body") or "",
        created_at=_parse_timestamp(item["created_at"]),
    )
