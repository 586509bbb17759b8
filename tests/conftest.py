from __future__ import annotations

import datetime
import threading
from typing import Any

import pytest

from contribution_finder.aggregator import ContributionAggregator
from contribution_finder.fetcher import ActivityFetcher, CommitFetcher
from contribution_finder.models import RawCommit, RawIssueOrPR, SearchConfig


def commit_json(sha: str, date: str, message: str = "") -> dict[str, Any]:
    return {
        "sha": sha,
        "commit": {"message": message or f"commit {sha}", "author": {"date": date, "name": "Octo Cat"}},
        "html_url": f"https://github.com/octo/repo/commit/{sha}",
    }


def issue_json(number: int, date: str, title: str = "", pr: bool = False) -> dict[str, Any]:
    data: dict[str, Any] = {
        "number": number,
        "title": title or f"item {number}",
        "html_url": f"https://github.com/octo/repo/{'pull' if pr else 'issues'}/{number}",
        "created_at": date,
        "state": "open",
    }
    if pr:
        data["pull_request"] = {"url": f"https://api.github.com/repos/octo/repo/pulls/{number}"}
    return data


class FakeGitHub:
    """Stands in for GitHubFetcher: canned results per branch, optional errors."""

    def __init__(
        self,
        commits: dict[str | None, list[dict[str, Any]]] | None = None,
        issues: list[dict[str, Any]] | None = None,
        commit_errors: dict[str | None, Exception] | None = None,
        search_error: Exception | None = None,
    ) -> None:
        self.commits = commits or {}
        self.issues = issues or []
        self.commit_errors = commit_errors or {}
        self.search_error = search_error
        self.calls: list[tuple] = []
        self._lock = threading.Lock()

    def list_commits(self, owner, repo, author, since, branch=None):
        with self._lock:
            self.calls.append(("commits", owner, repo, author, since, branch))
        if branch in self.commit_errors:
            raise self.commit_errors[branch]
        return [RawCommit.from_api(c) for c in self.commits.get(branch, [])]

    def search_issues(self, owner, repo, author, since):
        with self._lock:
            self.calls.append(("search", owner, repo, author, since))
        if self.search_error is not None:
            raise self.search_error
        return [RawIssueOrPR.from_api(i) for i in self.issues]


def make_aggregator(client: FakeGitHub) -> ContributionAggregator:
    return ContributionAggregator(CommitFetcher(client), ActivityFetcher(client))


@pytest.fixture
def config() -> SearchConfig:
    return SearchConfig(owner="octo", repo="repo", username="octocat", since=datetime.date(2024, 8, 1))
