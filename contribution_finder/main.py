#!/usr/bin/env python3
"""
Main driver script for the contribution finder.

This script provides the command-line interface: it collects a user's commits,
issues and pull requests in one repository and prints them as plain-text links.

Usage (example):
    python -m contribution_finder.main --owner octocat --repo Hello-World --user octocat --since 2024-08-01 --branches main,dev
"""

import argparse
import asyncio
import datetime
import logging
import os
import sys
from typing import List, Optional, Tuple

from .aggregator import ContributionAggregator
from .errors import ConfigurationError
from .generator import NO_MATCHES_MESSAGE, LinksGenerator
from .models import ContributionItem, SearchConfig
from .summarizer import ContributionSummarizer

logger = logging.getLogger("contribution-finder")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="contribution-finder",
        description="List a user's commits, issues and pull requests in a GitHub repository as links.",
    )
    parser.add_argument("--owner", "-o", required=True, help="Repository owner")
    parser.add_argument("--repo", "-r", required=True, help="Repository name")
    parser.add_argument("--user", "-u", required=True, help="Your GitHub username")
    parser.add_argument("--since", "-s", required=True, help="Start date (YYYY-MM-DD)")
    parser.add_argument("--branches", "-b", default="", help="Comma-separated branch names (default: repository default branch)")
    parser.add_argument("--token", "-t", default=os.getenv("GITHUB_TOKEN"), help="GitHub token (recommended to avoid rate limits; default: $GITHUB_TOKEN)")
    parser.add_argument("--output", default=None, help="Write output to this file instead of stdout")
    parser.add_argument("--links-only", action="store_true", help="Print only the links, one per line")
    parser.add_argument("--details", action="store_true", help="Show type, date and title next to each link")
    parser.add_argument("--summary", action="store_true", help="Append a Gemini-generated summary paragraph")
    parser.add_argument("--name", default=None, help="Name used in the summary (default: the username)")
    parser.add_argument("--gemini-api-key", default=os.getenv("GOOGLE_API_KEY"), help="Google AI API key for --summary (default: $GOOGLE_API_KEY)")
    parser.add_argument("--timeout", type=float, default=None, help="Give up after this many seconds")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser


def parse_since(value: str) -> datetime.date:
    try:
        return datetime.date.fromisoformat(value.strip())
    except ValueError as e:
        raise ConfigurationError(f"Invalid start date '{value}'. Use YYYY-MM-DD.") from e


def config_from_args(args: argparse.Namespace) -> SearchConfig:
    config = SearchConfig(
        owner=args.owner.strip(),
        repo=args.repo.strip(),
        username=args.user.strip(),
        since=parse_since(args.since),
        branches=SearchConfig.parse_branches(args.branches),
        token=args.token or None,
    )
    config.validate()
    return config


async def run(
    config: SearchConfig,
    aggregator: ContributionAggregator,
    summarizer: Optional[ContributionSummarizer] = None,
    student_name: Optional[str] = None,
    timeout: Optional[float] = None,
) -> Tuple[List[ContributionItem], Optional[str]]:
    """Fetch contributions and, if a summarizer is given, a summary of them."""
    items: List[ContributionItem] = await asyncio.wait_for(aggregator.fetch_all(config), timeout)
    summary = None
    if summarizer is not None and items:
        summary = await summarizer.summarize(items, student_name or config.username)
    return items, summary


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the contribution finder.

    Returns the process exit code: 0 on success (including when nothing
    matched), 1 on any error.
    """
    args = build_parser().parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    try:
        config = config_from_args(args)

        summarizer = None
        if args.summary:
            summarizer = ContributionSummarizer(api_key=args.gemini_api_key)

        # Bound each HTTP request too, so worker threads finish once the deadline passes
        aggregator = ContributionAggregator.for_github(token=config.token, timeout=args.timeout)
        items, summary = asyncio.run(
            run(config, aggregator, summarizer, student_name=args.name, timeout=args.timeout)
        )

        if args.links_only:
            text = LinksGenerator.links_text(items) + "\n" if items else ""
        else:
            text = LinksGenerator(include_descriptions=args.details).generate_text(config, items, summary)

        if args.output:
            with open(args.output, "w", encoding="utf-8") as f:
                f.write(text)
            print(f"Wrote {len(items)} contribution links to {args.output}")
        else:
            sys.stdout.write(text)

        if not items and (args.links_only or args.output):
            print(NO_MATCHES_MESSAGE, file=sys.stderr)
        return 0

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        print("\nOperation cancelled by user", file=sys.stderr)
        return 1
    except asyncio.TimeoutError:
        logger.error("Timed out after %s seconds", args.timeout)
        print(f"Error: Timed out after {args.timeout} seconds.", file=sys.stderr)
        return 1
    except Exception as e:
        logger.error("Contribution lookup failed: %s", e)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
