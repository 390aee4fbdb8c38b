"""GitHub API integration."""

from github_stats.api.client import (
    GithubClientNotInitialized,
    GithubStatsClient,
    ReportError,
    UnknownSearchType,
    create_github_client,
)
from github_stats.api.rate_status import RateStatus, get_rate_status

__all__ = [
    "GithubClientNotInitialized",
    "GithubStatsClient",
    "ReportError",
    "UnknownSearchType",
    "create_github_client",
    "RateStatus",
    "get_rate_status",
]
