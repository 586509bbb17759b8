"""
Data models for the contribution finder.

This module contains the shared data structures used across all modules.
"""

import datetime
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from .errors import ConfigurationError


class ContributionType(str, Enum):
    COMMIT = "COMMIT"
    ISSUE = "ISSUE"
    PR = "PR"


def parse_timestamp(value: str) -> datetime.datetime:
    """Parse a GitHub ISO-8601 timestamp into an aware datetime."""
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.datetime.fromisoformat(value)
    # GitHub timestamps without an offset are UTC
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=datetime.timezone.utc)
    return parsed


@dataclass(frozen=True)
class ContributionItem:
    """A single commit, issue or pull request, normalized for display."""
    type: ContributionType
    url: str
    date: datetime.datetime
    description: str


@dataclass(frozen=True)
class SearchConfig:
    """
    Caller-supplied query parameters.

    Args:
        owner: Repository owner (user or organization)
        repo: Repository name
        username: Author whose contributions are collected
        since: Inclusive lower bound on contribution date
        branches: Branch names to scan for commits; empty means the default branch
        token: Optional personal access token, passed through to GitHub
    """
    owner: str
    repo: str
    username: str
    since: Optional[datetime.date]
    branches: Tuple[str, ...] = ()
    token: Optional[str] = field(default=None, repr=False)

    def validate(self) -> None:
        """Raise ConfigurationError if a required field is missing."""
        missing = [
            name for name in ("owner", "repo", "username")
            if not (getattr(self, name) or "").strip()
        ]
        if self.since is None:
            missing.append("since")
        if missing:
            raise ConfigurationError(
                f"Please fill in all required fields (missing: {', '.join(missing)})."
            )

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    @property
    def since_datetime(self) -> datetime.datetime:
        """Midnight UTC at the start of ``since``."""
        return datetime.datetime.combine(self.since, datetime.time.min, tzinfo=datetime.timezone.utc)

    @staticmethod
    def parse_branches(text: Optional[str]) -> Tuple[str, ...]:
        """Split comma-separated branch input, trimming blanks and dropping empty names."""
        if not text:
            return ()
        return tuple(b.strip() for b in text.split(",") if b.strip())


@dataclass(frozen=True)
class RawCommit:
    """Commit record as returned by ``GET /repos/{owner}/{repo}/commits``."""
    sha: str
    message: str
    author_name: Optional[str]
    author_date: datetime.datetime
    html_url: str

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "RawCommit":
        git_author = data["commit"]["author"]
        return cls(
            sha=data["sha"],
            message=data["commit"]["message"],
            author_name=git_author.get("name"),
            author_date=parse_timestamp(git_author["date"]),
            html_url=data["html_url"],
        )

    def to_item(self) -> ContributionItem:
        return ContributionItem(
            type=ContributionType.COMMIT,
            url=self.html_url,
            date=self.author_date,
            description=self.message,
        )


@dataclass(frozen=True)
class RawIssueOrPR:
    """
    Search result from ``GET /search/issues``.

    ``kind`` is decided once, when the record is parsed: a result carrying a
    ``pull_request`` marker is a PR, anything else is an ISSUE.
    """
    number: int
    title: str
    html_url: str
    created_at: datetime.datetime
    state: str
    kind: ContributionType

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "RawIssueOrPR":
        kind = ContributionType.PR if data.get("pull_request") is not None else ContributionType.ISSUE
        return cls(
            number=data["number"],
            title=data["title"],
            html_url=data["html_url"],
            created_at=parse_timestamp(data["created_at"]),
            state=data.get("state", ""),
            kind=kind,
        )

    def to_item(self) -> ContributionItem:
        return ContributionItem(
            type=self.kind,
            url=self.html_url,
            date=self.created_at,
            description=self.title,
        )


def count_by_type(items: List[ContributionItem]) -> Dict[ContributionType, int]:
    counts = {t: 0 for t in ContributionType}
    for item in items:
        counts[item.type] += 1
    return counts
