from __future__ import annotations

import asyncio
import datetime

import pytest

from contribution_finder.aggregator import ContributionAggregator, fetch_all_contributions
from contribution_finder.errors import ConfigurationError, HostingApiError, RateLimitError
from contribution_finder.models import ContributionType, SearchConfig

from conftest import FakeGitHub, commit_json, issue_json, make_aggregator


def _run(client: FakeGitHub, config: SearchConfig):
    return asyncio.run(make_aggregator(client).fetch_all(config))


def test_default_branch_three_commits_sorted_newest_first(config: SearchConfig) -> None:
    client = FakeGitHub(commits={None: [
        commit_json("a", "2024-09-01T00:00:00Z"),
        commit_json("b", "2024-09-03T00:00:00Z"),
        commit_json("c", "2024-09-02T00:00:00Z"),
    ]})
    items = _run(client, config)

    assert [i.type for i in items] == [ContributionType.COMMIT] * 3
    assert [i.url.rsplit("/", 1)[-1] for i in items] == ["b", "c", "a"]


def test_shared_commit_across_branches_appears_once() -> None:
    cfg = SearchConfig(owner="octo", repo="repo", username="octocat", since=datetime.date(2024, 8, 1), branches=("main", "dev"))
    client = FakeGitHub(commits={
        "main": [commit_json("x", "2024-09-01T00:00:00Z"), commit_json("y", "2024-09-02T00:00:00Z")],
        "dev": [commit_json("y", "2024-09-02T00:00:00Z"), commit_json("z", "2024-09-03T00:00:00Z")],
    })
    items = _run(client, cfg)

    commits = [i for i in items if i.type is ContributionType.COMMIT]
    assert {i.url.rsplit("/", 1)[-1] for i in commits} == {"x", "y", "z"}
    assert len(commits) == 3


def test_search_results_classified_as_pr_and_issue(config: SearchConfig) -> None:
    client = FakeGitHub(issues=[
        issue_json(1, "2024-09-01T00:00:00Z", "Pull request", pr=True),
        issue_json(2, "2024-09-02T00:00:00Z", "Plain issue"),
    ])
    items = _run(client, config)

    by_title = {i.description: i.type for i in items}
    assert by_title == {"Pull request": ContributionType.PR, "Plain issue": ContributionType.ISSUE}


def test_rate_limited_commits_fail_whole_call(config: SearchConfig) -> None:
    error = RateLimitError()
    client = FakeGitHub(
        commit_errors={None: error},
        issues=[issue_json(1, "2024-09-01T00:00:00Z")],
    )
    with pytest.raises(RateLimitError) as exc:
        _run(client, config)
    assert exc.value is error


def test_search_failure_propagates_unchanged(config: SearchConfig) -> None:
    error = HostingApiError(500, "Server Error")
    client = FakeGitHub(commits={None: [commit_json("a", "2024-09-01T00:00:00Z")]}, search_error=error)

    with pytest.raises(HostingApiError) as exc:
        _run(client, config)
    assert exc.value is error


def test_empty_results_are_not_an_error(config: SearchConfig) -> None:
    assert _run(FakeGitHub(), config) == []


def test_missing_field_fails_before_any_request() -> None:
    client = FakeGitHub()
    cfg = SearchConfig(owner="octo", repo="repo", username="", since=datetime.date(2024, 8, 1))

    with pytest.raises(ConfigurationError):
        _run(client, cfg)
    assert client.calls == []


def test_merged_output_is_sorted_by_instant(config: SearchConfig) -> None:
    client = FakeGitHub(
        commits={None: [
            commit_json("a", "2024-09-01T10:00:00+02:00"),
            commit_json("b", "2024-09-01T09:00:00Z"),
            commit_json("c", "2024-08-15T00:00:00Z"),
        ]},
        issues=[
            issue_json(1, "2024-09-01T08:30:00Z"),
            issue_json(2, "2024-10-01T00:00:00Z", pr=True),
        ],
    )
    items = _run(client, config)

    assert all(items[i].date >= items[i + 1].date for i in range(len(items) - 1))
    # 10:00+02:00 is 08:00Z, older than the 08:30Z issue
    assert [i.url.rsplit("/", 1)[-1] for i in items] == ["2", "b", "1", "a", "c"]


def test_equal_timestamps_keep_commits_before_activity(config: SearchConfig) -> None:
    same = "2024-09-01T00:00:00Z"
    client = FakeGitHub(
        commits={None: [commit_json("a", same), commit_json("b", same)]},
        issues=[issue_json(1, same)],
    )
    items = _run(client, config)

    assert [i.url.rsplit("/", 1)[-1] for i in items] == ["a", "b", "1"]


def test_same_inputs_give_same_output() -> None:
    cfg = SearchConfig(owner="octo", repo="repo", username="octocat", since=datetime.date(2024, 8, 1), branches=("main", "dev"))
    client = FakeGitHub(
        commits={
            "main": [commit_json("x", "2024-09-01T00:00:00Z"), commit_json("y", "2024-09-02T00:00:00Z")],
            "dev": [commit_json("y", "2024-09-02T00:00:00Z"), commit_json("z", "2024-09-02T00:00:00Z")],
        },
        issues=[issue_json(4, "2024-09-02T00:00:00Z", pr=True)],
    )
    assert _run(client, cfg) == _run(client, cfg)


def test_caller_can_bound_the_call_with_a_timeout(config: SearchConfig) -> None:
    class SlowFetcher:
        async def fetch(self, config):
            await asyncio.sleep(10)
            return []

    aggregator = ContributionAggregator(SlowFetcher(), SlowFetcher())
    with pytest.raises(asyncio.TimeoutError):
        asyncio.run(asyncio.wait_for(aggregator.fetch_all(config), 0.05))


def test_fetch_all_contributions_builds_client_from_token(config: SearchConfig, monkeypatch: pytest.MonkeyPatch) -> None:
    seen = {}
    client = FakeGitHub(commits={None: [commit_json("a", "2024-09-01T00:00:00Z")]})

    def fake_client(token=None, base_url=None, timeout=None):
        seen["token"] = token
        return client

    monkeypatch.setattr("contribution_finder.aggregator.GitHubFetcher", fake_client)
    cfg = SearchConfig(owner="octo", repo="repo", username="octocat", since=config.since, token="ghp_x")
    items = asyncio.run(fetch_all_contributions(cfg))

    assert seen == {"token": "ghp_x"}
    assert [i.type for i in items] == [ContributionType.COMMIT]


def test_for_github_forwards_request_timeout(monkeypatch: pytest.MonkeyPatch) -> None:
    seen = {}

    def fake_client(token=None, base_url=None, timeout=None):
        seen.update(token=token, timeout=timeout)
        return FakeGitHub()

    monkeypatch.setattr("contribution_finder.aggregator.GitHubFetcher", fake_client)
    ContributionAggregator.for_github(token="ghp_x", timeout=2.5)

    assert seen == {"token": "ghp_x", "timeout": 2.5}
