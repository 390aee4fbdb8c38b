"""Shared data models used across multiple layers."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

CSV_HEADER = "type,creator,reviewer,state,daysopen,title,created,updated,comments"


class SearchType(str, Enum):
    """Role a user plays on the pull requests being searched for.

    Each value is the GitHub search qualifier for that role.
    """

    AUTHOR = "author"
    COMMENTER = "commenter"
    ASSIGNEE = "assignee"
    MENTIONS = "mentions"
    INVOLVES = "involves"

    @property
    def qualifier(self) -> str:
        return self.value


class RecordType(str, Enum):
    """Tag written in the first CSV column."""

    CREATED = "C"
    REVIEWED = "R"


@dataclass(frozen=True)
class TeamMember:
    """A member of the reported team."""

    id: int
    login: str


@dataclass
class PullRequestSearch:
    """Result of a pull request search."""

    total_count: int
    items: list[Any] = field(default_factory=list)


@dataclass(frozen=True)
class PullRequestRecord:
    """One CSV row of the report."""

    record_type: RecordType
    creator: str
    reviewer: str
    state: str
    days_open: int
    title: str
    created: str
    updated: str
    comments: int

    def to_csv_row(self) -> str:
        """Serialize as a CSV line (no trailing newline).

        Commas are removed from the title rather than quoted.
        """
        return ",".join(
            [
                self.record_type.value,
                self.creator,
                self.reviewer,
                self.state,
                str(self.days_open),
                self.title.replace(",", ""),
                self.created,
                self.updated,
                str(self.comments),
            ]
        )
