"""Tests for the main orchestrator and entry point."""

import sys
from unittest.mock import MagicMock, Mock, patch

import pytest

from github_stats.api import GithubClientNotInitialized, RateStatus
from github_stats.config import Settings
from github_stats.main import REPORT_DAYS_BACK, GithubStats, main


def _make_settings(tmp_path, **overrides):
    defaults = {
        "_env_file": None,
        "github_user": "alice",
        "github_api_key": "test-token",
        "github_org": "acme",
        "github_repo": "widgets",
        "team_id": 7,
        "output_dir": str(tmp_path),
    }
    defaults.update(overrides)
    return Settings(**defaults)


class TestGithubStats:
    """Tests for the GithubStats orchestrator."""

    @patch("github_stats.main.create_github_client")
    def test_builds_client_from_settings(self, mock_create, tmp_path):
        """Test the GitHub client is created from settings when not given."""
        settings = _make_settings(tmp_path)

        stats = GithubStats(settings)

        mock_create.assert_called_once_with(settings)
        assert stats.client.github is mock_create.return_value
        assert stats.client.org == "acme"

    @patch("github_stats.main.get_rate_status")
    def test_run_logs_rate_then_builds_report(self, mock_rate, tmp_path):
        """Test run checks the rate limit and builds the 14-day report."""
        github = Mock()
        stats = GithubStats(_make_settings(tmp_path), github=github)
        stats.report = Mock()
        order = []
        mock_rate.side_effect = lambda *a: order.append("rate") or Mock()
        stats.report.build.side_effect = lambda days: order.append(("build", days))

        stats.run()

        mock_rate.assert_called_once_with(github, "alice")
        assert order == ["rate", ("build", REPORT_DAYS_BACK)]
        assert REPORT_DAYS_BACK == 14

    def test_log_rate_status_returns_status(self, tmp_path):
        """Test the rate status is read from the shared client."""
        github = Mock()
        github.rate_limiting = (10, 60)
        github.rate_limiting_resettime = 1710504000
        stats = GithubStats(_make_settings(tmp_path), github=github)

        status = stats.log_rate_status()

        assert isinstance(status, RateStatus)
        assert status.remaining == 10
        assert status.limit == 60

    def test_find_team(self, tmp_path):
        """Test team lookups are delegated to the client wrapper."""
        stats = GithubStats(_make_settings(tmp_path), github=Mock())
        stats.client = Mock()
        stats.client.get_team_id.return_value = 99

        assert stats.find_team("Platform") == 99
        stats.client.get_team_id.assert_called_once_with("Platform")

    def test_find_team_missing(self, tmp_path):
        stats = GithubStats(_make_settings(tmp_path), github=Mock())
        stats.client = Mock()
        stats.client.get_team_id.return_value = None

        assert stats.find_team("Nope") is None

    def test_context_manager_closes_client(self, tmp_path):
        """Test the GitHub client is closed on exit."""
        github = Mock()
        with GithubStats(_make_settings(tmp_path), github=github):
            pass
        github.close.assert_called_once()

    def test_run_end_to_end(self, tmp_path):
        """Test a run against a mocked client writes both files."""
        github = Mock()
        github.rate_limiting = (4999, 5000)
        github.rate_limiting_resettime = 1710504000
        member = Mock()
        member.id = 1
        member.login = "alice"
        github.get_organization.return_value.get_team.return_value.get_members.return_value = [member]
        github.search_issues.return_value = MagicMock(totalCount=0)

        stats = GithubStats(_make_settings(tmp_path, output_file_name="weekly"), github=github)
        result = stats.run()

        assert result.members == 1
        assert (tmp_path / "weekly.txt").read_text().count("Team Member alice") == 1
        assert (tmp_path / "weekly.csv").exists()


class TestMain:
    """Tests for the command-line entry point."""

    @patch("github_stats.main.setup_logging")
    @patch("github_stats.main.GithubStats")
    @patch("github_stats.main.load_settings")
    def test_default_runs_report(self, mock_load, mock_stats, mock_logging, tmp_path):
        """Test running without flags builds the report."""
        mock_load.return_value = _make_settings(tmp_path)
        with patch.object(sys, "argv", ["github-stats"]):
            main()

        stats = mock_stats.return_value.__enter__.return_value
        stats.run.assert_called_once_with()
        stats.find_team.assert_not_called()

    @patch("github_stats.main.setup_logging")
    @patch("github_stats.main.GithubStats")
    @patch("github_stats.main.load_settings")
    def test_team_name_lookup(self, mock_load, mock_stats, mock_logging, tmp_path):
        """Test --team-name looks up the team and skips the report."""
        mock_load.return_value = _make_settings(tmp_path)
        stats = mock_stats.return_value.__enter__.return_value
        stats.find_team.return_value = 12

        with patch.object(sys, "argv", ["github-stats", "--team-name", "Platform"]):
            with pytest.raises(SystemExit) as exc_info:
                main()

        assert exc_info.value.code == 0
        stats.find_team.assert_called_once_with("Platform")
        stats.run.assert_not_called()

    @patch("github_stats.main.setup_logging")
    @patch("github_stats.main.GithubStats")
    @patch("github_stats.main.load_settings")
    def test_team_name_not_found(self, mock_load, mock_stats, mock_logging, tmp_path):
        """Test --team-name exits 1 when no team matches."""
        mock_load.return_value = _make_settings(tmp_path)
        mock_stats.return_value.__enter__.return_value.find_team.return_value = None

        with patch.object(sys, "argv", ["github-stats", "--team-name", "Nope"]):
            with pytest.raises(SystemExit) as exc_info:
                main()

        assert exc_info.value.code == 1

    @patch("github_stats.main.setup_logging")
    @patch("github_stats.main.GithubStats")
    @patch("github_stats.main.load_settings")
    def test_report_error_exits(self, mock_load, mock_stats, mock_logging, tmp_path):
        """Test fatal report errors exit with status 1."""
        mock_load.return_value = _make_settings(tmp_path)
        stats = mock_stats.return_value.__enter__.return_value
        stats.run.side_effect = GithubClientNotInitialized("Github client is null")

        with patch.object(sys, "argv", ["github-stats"]):
            with pytest.raises(SystemExit) as exc_info:
                main()

        assert exc_info.value.code == 1

    @patch("github_stats.main.setup_logging")
    @patch("github_stats.main.GithubStats")
    @patch("github_stats.main.load_settings")
    def test_platform_errors_propagate(self, mock_load, mock_stats, mock_logging, tmp_path):
        """Test API errors are not swallowed."""
        mock_load.return_value = _make_settings(tmp_path)
        mock_stats.return_value.__enter__.return_value.run.side_effect = ConnectionError("down")

        with patch.object(sys, "argv", ["github-stats"]):
            with pytest.raises(ConnectionError):
                main()

    @patch("github_stats.main.setup_logging")
    @patch("github_stats.main.GithubStats")
    def test_invalid_settings_exit(self, mock_stats, mock_logging, tmp_path, monkeypatch):
        """Test invalid configuration exits with status 1."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("TIMEZONE", "Mars/Olympus_Mons")

        with patch.object(sys, "argv", ["github-stats"]):
            with pytest.raises(SystemExit) as exc_info:
                main()

        assert exc_info.value.code == 1
        mock_stats.assert_not_called()

    @patch("github_stats.main.setup_logging")
    @patch("github_stats.main.GithubStats")
    @patch("github_stats.main.load_settings")
    def test_debug_flag(self, mock_load, mock_stats, mock_logging, tmp_path):
        """Test --debug overrides the configured log level."""
        mock_load.return_value = _make_settings(tmp_path, log_level="WARNING")

        with patch.object(sys, "argv", ["github-stats", "--debug"]):
            main()

        mock_logging.assert_called_with("DEBUG", log_format="text")
