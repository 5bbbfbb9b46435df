"""Error taxonomy shared by the remote client, caches and triage loop."""


class TrackerError(Exception):
    """Base class for all errors raised by triage-tracker."""


class RateLimitedError(TrackerError):
    """GitHub answered with a forbidden / rate-limit response.

    Never retried automatically. Callers holding cache state flush it before
    surfacing this error.
    """

    def __init__(self, message: str = "hit GitHub rate limiting") -> None:
        super().__init__(message)


class TransportError(TrackerError):
    """Any other network, HTTP or payload-decoding failure."""


class UnsupportedPagingDepthError(TrackerError):
    """An issue has more comments than a single page can represent.

    Recording an activity fact from a truncated page would be wrong, so this
    is raised instead of guessing.
    """

    def __init__(self, issue_number: int, per_page: int) -> None:
        super().__init__(
            f"issue #{issue_number} has at least {per_page} comments since the yardstick; "
            "paging past the first comment page is not supported"
        )
        self.issue_number = issue_number
        self.per_page = per_page
