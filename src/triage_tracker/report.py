"""Plain-text rendering of closings and triage results."""

from collections.abc import Sequence

from triage_tracker.closings import DayActivity
from triage_tracker.triage import TriageReport

RATE_LIMIT_WARNING = "Warning: hit GitHub rate limiting, the list above is incomplete."


def render_date_report(activity: DayActivity) -> str:
    """Issues opened and closed on one day."""
    opened = list(activity.opened())
    closed = list(activity.closed())
    lines = [f"On {activity.day}", f"{len(opened)} opened:"]
    lines.extend(f"  {issue}" for issue in opened)
    lines.append(f"{len(closed)} closed:")
    lines.extend(f"  {issue}" for issue in closed)
    return "\n".join(lines)


def render_range_report(days: Sequence[DayActivity]) -> str:
    """Net change per day followed by the total over the range."""
    lines = ["Daily changes:"]
    total = 0
    for activity in days:
        change = activity.net_change()
        total += change
        lines.append(f"{activity.day}: {change}")
    lines.append(f"Total Change: {total}")
    return "\n".join(lines)


def issue_url(repo: str, number: int) -> str:
    return f"https://github.com/{repo}/issues/{number}"


def render_triage_report(report: TriageReport, repo: str) -> str:
    """One issue URL per line under a count header."""
    lines = [f"{len(report.untriaged)} untriaged issues:"]
    lines.extend(issue_url(repo, issue.number) for issue in report.untriaged)
    if report.rate_limited:
        lines.append(RATE_LIMIT_WARNING)
    return "\n".join(lines)
