"""Shared utilities for GitHub Stats."""

from datetime import datetime, timezone
from typing import Optional

import pytz

SECONDS_PER_DAY = 86400
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def ensure_utc(value: datetime) -> datetime:
    """Return an aware datetime, treating naive values as UTC.

    Args:
        value: Datetime from the GitHub API (naive UTC on older PyGithub releases).

    Returns:
        Timezone-aware datetime.
    """
    if value.tzinfo is None:
        return pytz.utc.localize(value)
    return value


def days_open(
    state: str,
    created_at: datetime,
    closed_at: Optional[datetime],
    now: Optional[datetime] = None,
) -> int:
    """Compute the rounded age of a pull request in days.

    Open items are measured up to ``now``; closed items from creation to
    close, or 0 when the close time is missing.

    Args:
        state: Item state ('open' or 'closed').
        created_at: Creation time.
        closed_at: Close time, if any.
        now: Reference time for open items. Defaults to the current UTC time.

    Returns:
        Age in whole days.
    """
    if state == "open":
        now = ensure_utc(now) if now else datetime.now(timezone.utc)
        delta = now - ensure_utc(created_at)
    elif closed_at is None:
        return 0
    else:
        delta = ensure_utc(closed_at) - ensure_utc(created_at)
    return int(round(delta.total_seconds() / SECONDS_PER_DAY))


def describe_age(state: str, days: int) -> str:
    """Human-readable age phrase used in the text report."""
    if state == "open":
        return f"Open {days} days"
    return f"Closed in {days} days"


def format_timestamp(value: Optional[datetime], tz_name: str = "UTC") -> str:
    """Format a datetime for the report in the given timezone.

    Args:
        value: Datetime to format. None gives an empty string.
        tz_name: IANA timezone name.

    Returns:
        Formatted timestamp.
    """
    if value is None:
        return ""
    return ensure_utc(value).astimezone(pytz.timezone(tz_name)).strftime(TIMESTAMP_FORMAT)
