"""
GitHub data fetching module.

This module handles all GitHub API interactions for collecting a user's
commits, issues and pull requests in a single repository using PyGithub.
"""

import asyncio
import datetime
import logging
from typing import Any, Dict, List, Optional, Sequence

from .errors import HostingApiError, NotFoundError, RateLimitError
from .models import ContributionItem, RawCommit, RawIssueOrPR, SearchConfig

# External libs
try:
    from github import Auth, Github, GithubException
except Exception as e:
    raise RuntimeError("PyGithub is required. Install with: pip install PyGithub") from e

# Set up logging
logger = logging.getLogger("contribution-finder.fetcher")

DEFAULT_BASE_URL = "https://api.github.com"
PER_PAGE = 100
ACCEPT_HEADER = "application/vnd.github.v3+json"


class GitHubFetcher:
    """
    Thin blocking client for the two GitHub endpoints the finder needs.

    Only the first page (up to 100 results) of each query is requested, and
    nothing is retried: PyGithub's built-in retry is switched off so that a
    rate limited response surfaces immediately as RateLimitError.

    Args:
        token: Personal access token (or None for unauthenticated, but rate-limited).
        base_url: API root, for GitHub Enterprise installations.
        timeout: Per-request socket timeout in seconds (None keeps PyGithub's default).
    """

    def __init__(
        self,
        token: Optional[str] = None,
        base_url: str = DEFAULT_BASE_URL,
        timeout: Optional[float] = None,
    ) -> None:
        try:
            auth = Auth.Token(token) if token else None
            options: Dict[str, Any] = {}
            if timeout is not None:
                options["timeout"] = timeout
            self._g = Github(
                auth=auth,
                base_url=base_url,
                per_page=PER_PAGE,
                retry=None,
                seconds_between_requests=None,
                **options,
            )
            logger.debug("GitHub client initialized (authenticated=%s)", bool(token))
        except Exception as e:
            logger.error("Failed to initialize GitHub client: %s", e)
            raise RuntimeError(f"GitHub client initialization failed: {e}") from e

    def _get(self, path: str, parameters: Dict[str, Any]) -> Any:
        _, data = self._g.requester.requestJsonAndCheck(
            "GET", path, parameters=parameters, headers={"Accept": ACCEPT_HEADER}
        )
        return data

    def list_commits(
        self,
        owner: str,
        repo: str,
        author: str,
        since: datetime.datetime,
        branch: Optional[str] = None,
    ) -> List[RawCommit]:
        """
        Fetch the first page of commits by ``author`` since ``since``.

        Args:
            owner: Repository owner
            repo: Repository name
            author: GitHub login of the commit author
            since: Inclusive lower bound on author date
            branch: Branch to list; None means the repository's default branch

        Returns:
            List of RawCommit in API response order

        Raises:
            RateLimitError, NotFoundError, HostingApiError
        """
        params: Dict[str, Any] = {
            "author": author,
            "since": since.strftime("%Y-%m-%dT%H:%M:%SZ"),
            "per_page": PER_PAGE,
        }
        if branch:
            params["sha"] = branch

        try:
            data = self._get(f"/repos/{owner}/{repo}/commits", params)
        except GithubException as e:
            raise _translate(e, owner, repo, author, branch) from e

        commits = [RawCommit.from_api(c) for c in data or []]
        logger.debug("Fetched %d commits from %s/%s (branch=%s)", len(commits), owner, repo, branch or "default")
        return commits

    def search_issues(self, owner: str, repo: str, author: str, since: datetime.date) -> List[RawIssueOrPR]:
        """
        Search issues and pull requests opened by ``author`` on or after ``since``.

        Raises:
            RateLimitError, HostingApiError
        """
        query = f"repo:{owner}/{repo} author:{author} created:>={since.isoformat()}"
        try:
            data = self._get("/search/issues", {"q": query, "per_page": PER_PAGE})
        except GithubException as e:
            raise _translate(e, owner, repo, author, branch=None, allow_not_found=False) from e

        items = [RawIssueOrPR.from_api(i) for i in (data or {}).get("items") or []]
        logger.debug("Search '%s' returned %d items", query, len(items))
        return items


def _status_text(e: GithubException) -> str:
    data = e.data
    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])
    return str(getattr(e, "message", None) or e.status)


def _translate(
    e: GithubException,
    owner: str,
    repo: str,
    username: str,
    branch: Optional[str],
    allow_not_found: bool = True,
) -> Exception:
    if e.status in (403, 429):
        logger.error("Rate limited by GitHub while querying %s/%s", owner, repo)
        return RateLimitError()
    if e.status == 404 and allow_not_found:
        logger.error("Not found: %s/%s (user=%s, branch=%s)", owner, repo, username, branch)
        return NotFoundError(owner, repo, username, branch)
    text = _status_text(e)
    logger.error("GitHub API error %s for %s/%s: %s", e.status, owner, repo, text)
    return HostingApiError(e.status, text)


class CommitFetcher:
    """
    Collect a user's commits across one or more branches, deduplicated by SHA.

    Args:
        client: Object exposing ``list_commits`` (normally a GitHubFetcher).
    """

    def __init__(self, client: Any) -> None:
        self.client = client

    async def _fetch_branch(self, config: SearchConfig, branch: Optional[str]) -> List[RawCommit]:
        return await asyncio.to_thread(
            self.client.list_commits,
            config.owner,
            config.repo,
            config.username,
            config.since_datetime,
            branch,
        )

    async def fetch(self, config: SearchConfig) -> List[ContributionItem]:
        """
        Fetch commits for every configured branch (or the default branch).

        Branch queries run concurrently; the first failure aborts the fetch.
        When a commit is reachable from several branches, the copy from the
        branch listed first is kept.
        """
        branches: Sequence[Optional[str]] = config.branches or (None,)
        # gather keeps submission order, so merging below follows branch order
        per_branch = await asyncio.gather(*(self._fetch_branch(config, b) for b in branches))

        unique: Dict[str, RawCommit] = {}
        total = 0
        for commits in per_branch:
            for commit in commits:
                total += 1
                unique.setdefault(commit.sha, commit)

        logger.info(
            "Found %d unique commits by %s in %s (%d across %d branch queries)",
            len(unique), config.username, config.full_name, total, len(branches),
        )
        return [c.to_item() for c in unique.values()]


class ActivityFetcher:
    """
    Collect issues and pull requests opened by a user via the search API.

    Args:
        client: Object exposing ``search_issues`` (normally a GitHubFetcher).
    """

    def __init__(self, client: Any) -> None:
        self.client = client

    async def fetch(self, config: SearchConfig) -> List[ContributionItem]:
        results = await asyncio.to_thread(
            self.client.search_issues, config.owner, config.repo, config.username, config.since
        )
        items = [r.to_item() for r in results]
        logger.info("Found %d issues/pull requests by %s in %s", len(items), config.username, config.full_name)
        return items
