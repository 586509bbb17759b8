"""
Contribution summarization module.

This module turns a contribution list into a short first-person paragraph
using Google Gemini. It is optional: a failed call returns a fixed fallback
message and never touches the contribution list itself.
"""

import logging
from typing import Any, List, Optional

from .errors import ConfigurationError
from .models import ContributionItem

# External libs
try:
    from langchain_google_genai import ChatGoogleGenerativeAI
except Exception as e:
    raise RuntimeError("langchain-google-genai is required. Install with: pip install langchain-google-genai") from e

# logging
logger = logging.getLogger("contribution-finder.summarizer")

DEFAULT_MODEL = "gemini-2.5-flash"

EMPTY_MESSAGE = "No contributions found to summarize."
NO_TEXT_MESSAGE = "Could not generate summary."
ERROR_MESSAGE = "Error generating summary with AI. Please try again."

PROMPT_TEMPLATE = """
You are an academic assistant helping a student named {name} write a "Final Contribution Summary" for a software engineering class.

Here is the raw log of their contributions (Commits, Issues, Pull Requests) since the start of the semester:

{log}

Please write a professional, concise paragraph (approx 100-150 words) summarizing their work.
- Group related tasks together (e.g., "focused heavily on UI implementation using Tailwind," or "refactored the backend authentication service").
- Do NOT simply list the commits chronologically.
- Highlight specific technical achievements based on the commit messages.
- Use the first person ("I implemented...", "I fixed...").
- This text will be pasted into the "Optional Comments" section of their submission.
"""


class ContributionSummarizer:
    """
    Summarize contributions into prose with a Gemini chat model.

    Args:
        api_key: Google AI API key. Required unless ``llm`` is given.
        model: Gemini model name.
        llm: Pre-built chat model exposing ``ainvoke`` (used instead of building one).
    """

    def __init__(self, api_key: Optional[str] = None, model: str = DEFAULT_MODEL, llm: Any = None) -> None:
        if llm is None:
            if not api_key:
                raise ConfigurationError("A Google AI API key is required to generate a summary.")
            llm = ChatGoogleGenerativeAI(model=model, google_api_key=api_key, temperature=0.3)
            logger.debug("Gemini chat model initialized (model=%s)", model)
        self.llm = llm

    @staticmethod
    def build_prompt(items: List[ContributionItem], student_name: str) -> str:
        # Condensed log keeps the prompt small
        log = "\n".join(
            f"[{item.type.value}] {item.date.date().isoformat()}: {item.description}" for item in items
        )
        return PROMPT_TEMPLATE.format(name=student_name, log=log)

    async def summarize(self, items: List[ContributionItem], student_name: str) -> str:
        """
        Return a prose summary, or one of the fixed fallback messages.
        """
        if not items:
            return EMPTY_MESSAGE

        prompt = self.build_prompt(items, student_name)
        try:
            response = await self.llm.ainvoke(prompt)
        except Exception as e:
            logger.error("Gemini API error: %s", e)
            return ERROR_MESSAGE

        text = _response_text(response)
        return text or NO_TEXT_MESSAGE


def _response_text(response: Any) -> str:
    content = getattr(response, "content", response)
    if isinstance(content, str):
        return content.strip()
    if isinstance(content, list):
        parts = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and part.get("type") == "text":
                parts.append(part.get("text", ""))
        return "".join(parts).strip()
    return ""
