"""
Aggregation of commits, issues and pull requests into one timeline.
"""

import asyncio
import logging
from typing import List, Optional

from .fetcher import DEFAULT_BASE_URL, ActivityFetcher, CommitFetcher, GitHubFetcher
from .models import ContributionItem, SearchConfig

logger = logging.getLogger("contribution-finder.aggregator")


class ContributionAggregator:
    """
    Run the commit and activity fetchers concurrently and merge their output.

    Errors from either fetcher propagate unchanged; no partial result is
    returned. The merged list is ordered newest first. Items with identical
    timestamps keep their concatenation order (commits before issues and pull
    requests, each in fetch order) because the sort is stable.
    """

    def __init__(self, commit_fetcher: CommitFetcher, activity_fetcher: ActivityFetcher) -> None:
        self.commit_fetcher = commit_fetcher
        self.activity_fetcher = activity_fetcher

    @classmethod
    def for_github(
        cls,
        token: Optional[str] = None,
        base_url: str = DEFAULT_BASE_URL,
        timeout: Optional[float] = None,
    ) -> "ContributionAggregator":
        client = GitHubFetcher(token=token, base_url=base_url, timeout=timeout)
        return cls(CommitFetcher(client), ActivityFetcher(client))

    async def fetch_all(self, config: SearchConfig) -> List[ContributionItem]:
        config.validate()
        logger.info("Collecting contributions by %s to %s since %s", config.username, config.full_name, config.since)

        commits, activity = await asyncio.gather(
            self.commit_fetcher.fetch(config),
            self.activity_fetcher.fetch(config),
        )

        merged = sorted(commits + activity, key=lambda item: item.date, reverse=True)
        logger.info("Collected %d contributions (%d commits, %d issues/PRs)", len(merged), len(commits), len(activity))
        return merged


async def fetch_all_contributions(config: SearchConfig) -> List[ContributionItem]:
    """Fetch every contribution described by ``config`` from github.com."""
    return await ContributionAggregator.for_github(token=config.token).fetch_all(config)
