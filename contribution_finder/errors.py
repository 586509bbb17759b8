"""
Error types raised by the contribution finder.

Fetch errors are never retried; they propagate unchanged through the
aggregator so callers can show the message verbatim.
"""

from typing import Optional


class ContributionFinderError(RuntimeError):
    """Base class for all contribution finder errors."""


class ConfigurationError(ContributionFinderError):
    """A required search field was missing or malformed."""


class RateLimitError(ContributionFinderError):
    """GitHub refused the request because of rate limiting."""

    def __init__(self, message: str = "GitHub API rate limit exceeded. Please provide a Personal Access Token.") -> None:
        super().__init__(message)


class NotFoundError(ContributionFinderError):
    """Repository, user or branch does not exist or is not visible to the token."""

    def __init__(self, owner: str, repo: str, username: str, branch: Optional[str] = None) -> None:
        self.owner = owner
        self.repo = repo
        self.username = username
        self.branch = branch
        branch_msg = f" or Branch '{branch}'" if branch else ""
        super().__init__(f"Repository, User{branch_msg} not found. Check your spelling.")


class HostingApiError(ContributionFinderError):
    """Any other non-success response from GitHub."""

    def __init__(self, status: Optional[int], status_text: str) -> None:
        self.status = status
        self.status_text = status_text
        super().__init__(f"GitHub Error: {status_text}")
