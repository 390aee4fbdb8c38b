"""Team pull request summary report."""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional, TextIO

from github_stats import current_member
from github_stats.api.client import GithubStatsClient
from github_stats.config import Settings
from github_stats.models import (
    CSV_HEADER,
    PullRequestRecord,
    RecordType,
    SearchType,
    TeamMember,
)
from github_stats.utils import describe_age, days_open, format_timestamp

logger = logging.getLogger("github_stats.report")

SEPARATOR = "-" * 80


@dataclass
class ReportResult:
    """Where a report was written and how many rows it holds."""

    text_path: Path
    csv_path: Path
    members: int
    created_rows: int
    reviewed_rows: int


def _count_states(items: list[Any]) -> tuple[int, int]:
    open_count = sum(1 for item in items if item.state == "open")
    closed_count = sum(1 for item in items if item.state == "closed")
    return open_count, closed_count


def _writeln(out: TextIO, line: str = "") -> None:
    out.write(f"{line}\n")


class SummaryReport:
    """Builds the text summary and CSV export for a team."""

    def __init__(self, client: GithubStatsClient, settings: Settings):
        """Initialize the report builder.

        Args:
            client: GitHub client wrapper.
            settings: Application settings (repository, team, output names).
        """
        self.client = client
        self.settings = settings

    def build(self, days_back: int, now: Optional[datetime] = None) -> ReportResult:
        """Write the report for pull requests created in the last ``days_back`` days.

        Both files are truncated. The CSV holds every created row before
        every reviewed row.

        Args:
            days_back: Size of the window in days.
            now: Reference time for ages and the header. Defaults to now (UTC).

        Returns:
            ReportResult describing the written files.
        """
        logger.info("Getting Info")
        now = now or datetime.now(timezone.utc)
        text_path, csv_path = self.settings.report_paths()
        text_path.parent.mkdir(parents=True, exist_ok=True)

        created: list[PullRequestRecord] = []
        reviewed: list[PullRequestRecord] = []

        with open(text_path, "w", encoding="utf-8") as text_out, open(
            csv_path, "w", encoding="utf-8"
        ) as csv_out:
            members = self.client.get_all_team_members(self.settings.team_id)

            for out in (text_out, csv_out):
                _writeln(out, format_timestamp(now, self.settings.timezone))
                _writeln(out, f"Output For PR review for the last {days_back} days...")

            for member in members:
                token = current_member.set(member.login)
                try:
                    created.extend(self._write_authored(text_out, member, days_back, now))
                    reviewed.extend(self._write_reviewed(text_out, member, days_back, now))
                finally:
                    current_member.reset(token)

            _writeln(csv_out, CSV_HEADER)
            for record in created + reviewed:
                _writeln(csv_out, record.to_csv_row())

        logger.info(
            f"Wrote {text_path} and {csv_path}: {len(members)} members, "
            f"{len(created)} created, {len(reviewed)} reviewed"
        )
        return ReportResult(
            text_path=text_path,
            csv_path=csv_path,
            members=len(members),
            created_rows=len(created),
            reviewed_rows=len(reviewed),
        )

    def _write_authored(
        self, out: TextIO, member: TeamMember, days_back: int, now: datetime
    ) -> list[PullRequestRecord]:
        _writeln(out, SEPARATOR)
        _writeln(out, f"Team Member {member.login}")

        authored = self.client.get_prs(
            self.settings.fq_repo, member.login, days_back, SearchType.AUTHOR
        )
        if authored.total_count == 0:
            return []

        open_count, closed_count = _count_states(authored.items)
        _writeln(
            out,
            f"{member.login}: {authored.total_count} created "
            f"({open_count} open / {closed_count} closed)",
        )

        records = []
        for item in authored.items:
            _writeln(out, f"\t{item.user.login}: {item.title} - {item.state}")
            records.append(self._record(item, RecordType.CREATED, "", now))
        _writeln(out)
        return records

    def _write_reviewed(
        self, out: TextIO, member: TeamMember, days_back: int, now: datetime
    ) -> list[PullRequestRecord]:
        commented = self.client.get_prs(
            self.settings.fq_repo, member.login, days_back, SearchType.COMMENTER
        )
        # Comments on their own pull requests are not reviews
        items = [item for item in commented.items if item.user.login != member.login]
        if not items:
            return []

        open_count, closed_count = _count_states(items)
        _writeln(
            out,
            f"{member.login}: {len(items)} reviewed ({open_count} open / {closed_count} closed)",
        )

        records = []
        for item in items:
            record = self._record(item, RecordType.REVIEWED, member.login, now)
            _writeln(
                out,
                f"\t{item.user.login}: {item.title} - {item.state} "
                f"({describe_age(item.state, record.days_open)})",
            )
            records.append(record)
        _writeln(out, SEPARATOR)
        _writeln(out)
        return records

    def _record(
        self, item: Any, record_type: RecordType, reviewer: str, now: datetime
    ) -> PullRequestRecord:
        tz_name = self.settings.timezone
        return PullRequestRecord(
            record_type=record_type,
            creator=item.user.login,
            reviewer=reviewer,
            state=item.state,
            days_open=days_open(item.state, item.created_at, item.closed_at, now=now),
            title=item.title,
            created=format_timestamp(item.created_at, tz_name),
            updated=format_timestamp(item.updated_at, tz_name),
            comments=item.comments,
        )
