"""GitHub API rate limit status."""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from github import Github

from github_stats.api.client import GithubClientNotInitialized
from github_stats.utils import format_timestamp

logger = logging.getLogger("github_stats.api.rate_status")


@dataclass(frozen=True)
class RateStatus:
    """Rate limit metadata attached to the last API response."""

    limit: int
    remaining: int
    reset: datetime

    def describe(self, tz_name: str = "UTC") -> str:
        """Single-line summary of the rate limit."""
        return (
            f"Rate Limit: {self.limit} / Requests Left: {self.remaining} / "
            f"Reset Time: {format_timestamp(self.reset, tz_name)}"
        )


def get_rate_status(github: Optional[Github], user: str = "") -> RateStatus:
    """Look up a user and read back the rate limit from that response.

    Args:
        github: GitHub client.
        user: Login to look up. The authenticated user is used when empty.

    Returns:
        RateStatus for the client's credentials.

    Raises:
        GithubClientNotInitialized: If no client is given.
    """
    if github is None:
        raise GithubClientNotInitialized("Null github client")

    # Any call will do; the rate limit headers come back with the response
    if user:
        github.get_user(user)
    else:
        logger.debug(f"Looked up authenticated user {github.get_user().login}")

    remaining, limit = github.rate_limiting
    reset = datetime.fromtimestamp(github.rate_limiting_resettime, tz=timezone.utc)
    return RateStatus(limit=limit, remaining=remaining, reset=reset)
