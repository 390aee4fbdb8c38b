"""Integration tests against the real GitHub API.

These tests are read-only and skipped unless GITHUB_TOKEN is set.
"""

import os

import pytest
from github import Auth, Github

from github_stats.api import GithubStatsClient, get_rate_status
from github_stats.models import SearchType

GITHUB_TOKEN = os.environ.get("GITHUB_TOKEN", "")
PUBLIC_REPO = "PyGithub/PyGithub"


@pytest.mark.skipif(not GITHUB_TOKEN, reason="GITHUB_TOKEN not set")
class TestGitHubIntegration:
    """Read-only tests against the live GitHub API."""

    @pytest.fixture(autouse=True)
    def _github_client(self):
        self.gh = Github(auth=Auth.Token(GITHUB_TOKEN), timeout=30)
        yield
        self.gh.close()

    def test_rate_status(self):
        """Verify rate limit metadata is read after a user lookup."""
        status = get_rate_status(self.gh)
        assert status.limit > 0
        assert 0 <= status.remaining <= status.limit

    def test_search_recent_pull_requests(self):
        """Verify a windowed author search returns only pull requests."""
        client = GithubStatsClient(self.gh, "PyGithub")
        result = client.get_prs(PUBLIC_REPO, "dependabot[bot]", 30, SearchType.AUTHOR)

        assert result.total_count >= len(result.items) >= 0
        for item in result.items:
            assert item.pull_request is not None
            assert item.state in ("open", "closed")
