"""
Contribution Finder - collect a user's commits, issues and pull requests in a GitHub repository as submission links.
"""

from .models import ContributionItem, ContributionType, SearchConfig, RawCommit, RawIssueOrPR
from .errors import ContributionFinderError, ConfigurationError, RateLimitError, NotFoundError, HostingApiError
from .fetcher import GitHubFetcher, CommitFetcher, ActivityFetcher
from .aggregator import ContributionAggregator, fetch_all_contributions
from .generator import LinksGenerator
from .summarizer import ContributionSummarizer

__all__ = [
    'ContributionItem',
    'ContributionType',
    'SearchConfig',
    'RawCommit',
    'RawIssueOrPR',
    'ContributionFinderError',
    'ConfigurationError',
    'RateLimitError',
    'NotFoundError',
    'HostingApiError',
    'GitHubFetcher',
    'CommitFetcher',
    'ActivityFetcher',
    'ContributionAggregator',
    'fetch_all_contributions',
    'LinksGenerator',
    'ContributionSummarizer',
]
