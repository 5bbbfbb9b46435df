"""Starting page estimates for newest-first feeds."""

import math
from datetime import date

from triage_tracker.data import PagingProfile


def estimate_start_page(target_date: date, today: date, profile: PagingProfile) -> int:
    """Guess which page of a newest-first feed holds items for ``target_date``.

    Today is always on page 0. Yesterday gets a fixed, type specific page since
    how far into the feed it starts depends on the time of day. Anything older
    is ``days_away * profile.start_pages_per_day`` rounded down.

    This is only a starting point; the locator corrects misses.

    Raises:
        ValueError: If ``target_date`` is after ``today``.
    """
    days_away = (today - target_date).days
    if days_away < 0:
        raise ValueError(f"{target_date} is in the future (today is {today})")
    if days_away == 0:
        return 0
    if days_away == 1:
        return profile.yesterday_page
    return math.floor(days_away * profile.start_pages_per_day)
