"""GitHub client wrapper - team resolution and pull request search."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional, Union

from github import Auth, Github

from github_stats.config import Settings
from github_stats.models import PullRequestSearch, SearchType, TeamMember

logger = logging.getLogger("github_stats.api.client")

SEARCH_DATE_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


class ReportError(Exception):
    """Fatal error that stops report generation."""


class GithubClientNotInitialized(ReportError):
    """Raised when an operation needs a GitHub client and none was created."""


class UnknownSearchType(ReportError):
    """Raised when a search role is not one of SearchType."""

    def __init__(self, search_type: object):
        self.search_type = search_type
        super().__init__(f"Unknown search type {search_type!r}")


def create_github_client(settings: Settings) -> Github:
    """Create a GitHub client from settings.

    Args:
        settings: Application settings.

    Returns:
        Github client authenticated with the configured API key, if any.
    """
    kwargs: dict = {"user_agent": settings.app_name, "timeout": 30}
    if settings.github_api_key:
        kwargs["auth"] = Auth.Token(settings.github_api_key)
    if settings.github_url_root:
        kwargs["base_url"] = settings.github_url_root.rstrip("/")
    return Github(**kwargs)


class GithubStatsClient:
    """Queries team membership and pull request activity."""

    def __init__(self, github: Optional[Github], org: str):
        """Initialize the client wrapper.

        Args:
            github: Shared Github client instance.
            org: Organization that owns the teams.
        """
        self.github = github
        self.org = org

    def _require_client(self) -> Github:
        if self.github is None:
            raise GithubClientNotInitialized("Github client is null")
        return self.github

    def get_all_team_members(self, team_id: Optional[int]) -> list[TeamMember]:
        """Get the members of a team, or nobody if no team is configured.

        Args:
            team_id: Team id, or None.

        Returns:
            Team members in the order GitHub returns them.
        """
        if team_id is None:
            logger.info("No team configured")
            return []
        return self.get_team_members(team_id)

    def get_team_members(self, team_id: int) -> list[TeamMember]:
        """List every member of a team.

        Args:
            team_id: Team id.

        Returns:
            Team members in the order GitHub returns them.
        """
        github = self._require_client()
        team = github.get_organization(self.org).get_team(team_id)
        members = [TeamMember(id=user.id, login=user.login) for user in team.get_members()]
        logger.info(f"Team {team_id} has {len(members)} members")
        return members

    def get_team_id(self, team_name: str) -> Optional[int]:
        """Find a team id by its name.

        Args:
            team_name: Exact team name.

        Returns:
            Id of the first team with that name, or None.
        """
        github = self._require_client()
        for team in github.get_organization(self.org).get_teams():
            if team.name == team_name:
                return team.id
        return None

    def get_prs(
        self,
        repo: str,
        login: str,
        days_back: int,
        search_type: Union[SearchType, str],
        state: Optional[str] = None,
    ) -> PullRequestSearch:
        """Search pull requests created in the last ``days_back`` days.

        Args:
            repo: Full repository name (owner/repo).
            login: User the role qualifier applies to.
            days_back: Size of the window in days.
            search_type: Role of ``login`` on the pull requests.
            state: Optional state filter ('open' or 'closed').

        Returns:
            Total count and every matching item, oldest first.

        Raises:
            UnknownSearchType: If search_type is not a SearchType value.
            GithubClientNotInitialized: If there is no client.
        """
        try:
            search_type = SearchType(search_type)
        except ValueError:
            raise UnknownSearchType(search_type) from None

        github = self._require_client()

        since = datetime.now(timezone.utc) - timedelta(days=days_back)
        qualifiers = {
            "repo": repo,
            "type": "pr",
            "created": f">{since.strftime(SEARCH_DATE_FORMAT)}",
            search_type.qualifier: login,
        }
        if state:
            qualifiers["state"] = state

        logger.debug(f"Searching pull requests: {qualifiers}")
        results = github.search_issues("", sort="created", order="asc", **qualifiers)
        items = list(results)
        return PullRequestSearch(total_count=results.totalCount, items=items)
