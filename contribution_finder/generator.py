"""
Text Generation Module

This module contains the LinksGenerator class responsible for rendering a
contribution list as plain-text links ready to paste into a submission form.
"""

import datetime
from typing import Dict, List, Optional

from .models import ContributionItem, ContributionType, SearchConfig, count_by_type

NO_MATCHES_MESSAGE = "No contributions found matching criteria. Check your inputs."


class LinksGenerator:
    """
    Compose plain-text output from a list of contributions.

    Links keep the order they are given in (newest first when the list comes
    from the aggregator).
    """

    def __init__(self, include_descriptions: bool = False) -> None:
        """
        Initialize the generator.

        Args:
            include_descriptions: Whether the report lists each contribution's
                                  type, date and first line next to its link
        """
        self.include_descriptions = include_descriptions

    @staticmethod
    def links_text(items: List[ContributionItem]) -> str:
        """Return one canonical web link per line."""
        return "\n".join(item.url for item in items)

    @staticmethod
    def stats(items: List[ContributionItem]) -> Dict[str, int]:
        counts = count_by_type(items)
        return {
            "Commits": counts[ContributionType.COMMIT],
            "Pull Requests": counts[ContributionType.PR],
            "Issues": counts[ContributionType.ISSUE],
            "Total Links": len(items),
        }

    def generate_text(
        self,
        config: SearchConfig,
        items: List[ContributionItem],
        summary: Optional[str] = None,
    ) -> str:
        """
        Build the full plain-text report.

        Args:
            config: The search that produced ``items``
            items: Contributions, already ordered
            summary: Optional prose summary to append

        Returns:
            Report content as a string
        """
        lines: List[str] = []

        lines.append(f"Contributions by {config.username} to {config.full_name} since {config.since.isoformat()}")
        if config.branches:
            lines.append(f"Branches: {', '.join(config.branches)}")
        lines.append("")

        if not items:
            lines.append(NO_MATCHES_MESSAGE)
            return "\n".join(lines) + "\n"

        # Quick stats
        width = max(len(label) for label in self.stats(items))
        for label, count in self.stats(items).items():
            lines.append(f"{label + ':':<{width + 1}} {count}")
        lines.append("")

        lines.append("Contribution Links")
        lines.append("------------------")
        if self.include_descriptions:
            lines.append(self._format_detailed(items))
        else:
            lines.append(self.links_text(items))

        if summary:
            lines.append("")
            lines.append("Summary")
            lines.append("-------")
            lines.append(summary.strip())

        lines.append("")
        lines.append(f"Generated {datetime.datetime.now(datetime.timezone.utc).strftime('%Y-%m-%d %H:%M UTC')}")
        return "\n".join(lines) + "\n"

    def _format_detailed(self, items: List[ContributionItem]) -> str:
        lines = []
        for item in items:
            first_line = item.description.splitlines()[0] if item.description else ""
            lines.append(f"[{item.type.value}] {item.date.strftime('%Y-%m-%d')} {first_line}")
            lines.append(f"    {item.url}")
        return "\n".join(lines)
