"""Main entry point and orchestration for GitHub Stats."""

import argparse
import logging
import sys
from typing import Optional

from github import Github
from pydantic import ValidationError

from github_stats import setup_logging
from github_stats.api import (
    GithubStatsClient,
    RateStatus,
    ReportError,
    create_github_client,
    get_rate_status,
)
from github_stats.config import Settings, load_settings
from github_stats.report import ReportResult, SummaryReport

logger = logging.getLogger("github_stats.main")

REPORT_DAYS_BACK = 14


class GithubStats:
    """Main orchestrator for the team report."""

    def __init__(self, settings: Optional[Settings] = None, github: Optional[Github] = None):
        """Initialize GithubStats.

        Args:
            settings: Optional settings override.
            github: Optional pre-built GitHub client.
        """
        self.settings = settings or load_settings()
        self._github = github if github is not None else create_github_client(self.settings)
        self.client = GithubStatsClient(self._github, self.settings.github_org)
        self.report = SummaryReport(self.client, self.settings)

    def log_rate_status(self) -> RateStatus:
        """Log the current API rate limit."""
        status = get_rate_status(self._github, self.settings.github_user)
        logger.info(status.describe(self.settings.timezone))
        return status

    def run(self, days_back: int = REPORT_DAYS_BACK) -> ReportResult:
        """Log the rate limit, then build the report.

        Args:
            days_back: Size of the window in days.

        Returns:
            ReportResult describing the written files.
        """
        self.log_rate_status()
        return self.report.build(days_back)

    def find_team(self, team_name: str) -> Optional[int]:
        """Look up a team id by name and log the result."""
        team_id = self.client.get_team_id(team_name)
        if team_id is None:
            logger.warning(f"No team named {team_name!r} in {self.settings.github_org}")
        else:
            logger.info(f"Team {team_name!r} has id {team_id}")
        return team_id

    def close(self) -> None:
        """Clean up all resources."""
        logger.debug("Closing GitHub client")
        if self._github is not None:
            self._github.close()

    def __enter__(self) -> "GithubStats":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="GitHub Stats - pull requests authored and reviewed by a team"
    )
    parser.add_argument(
        "--team-name",
        metavar="NAME",
        help="Print the id of the team with this name and exit",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args()

    setup_logging("DEBUG" if args.debug else None)
    try:
        settings = load_settings()
    except ValidationError as e:
        logger.error(f"Invalid configuration: {e}")
        sys.exit(1)

    log_level = "DEBUG" if args.debug else settings.log_level
    setup_logging(log_level, log_format=settings.log_format)

    try:
        with GithubStats(settings) as stats:
            if args.team_name:
                sys.exit(0 if stats.find_team(args.team_name) is not None else 1)
            stats.run()
    except ReportError as e:
        logger.error(str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
