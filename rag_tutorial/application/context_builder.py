"""
Name: Context Builder

Responsibilities:
  - Number retrieved chunks as citations ([1], [2], ...) for the system prompt
  - Build the "Sources" footer appended to grounded answers
  - Build the raw-text fallback used when the completion provider is down

Collaborators:
  - domain.entities.SearchResult: retrieved chunks
  - infrastructure.prompts.PromptLoader: wraps the numbered context

Notes:
  - Results arrive sorted by similarity; numbering follows that order
  - Numbers in the footer match numbers in the prompt
"""

from typing import List

from ..domain.entities import SearchResult
from ..logger import logger

UNKNOWN_FILE = "Unknown file"
SOURCES_HEADER = "Sources:"


def _format_citation(result: SearchResult, index: int) -> str:
    return f"[{index}] {result.text}"


class ContextBuilder:
    """
    R: Build citation context, sources footer and raw fallback from results.
    """

    def build(self, results: List[SearchResult]) -> str:
        """
        R: Number results for grounding.

        Returns:
            "[1] text\\n\\n[2] text..." or "" when there are no results
        """
        context = "\n\n".join(
            _format_citation(result, i) for i, result in enumerate(results, start=1)
        )
        logger.debug(
            "Built context",
            extra={"chunks_used": len(results), "context_chars": len(context)},
        )
        return context

    def sources_footer(self, results: List[SearchResult]) -> str:
        """R: Footer listing each cited chunk's original file name."""
        if not results:
            return ""
        lines = [
            f"[{i}] {result.original_filename or UNKNOWN_FILE}"
            for i, result in enumerate(results, start=1)
        ]
        return f"\n\n{SOURCES_HEADER}\n" + "\n".join(lines)

    def raw_text(self, results: List[SearchResult]) -> str:
        """R: Chunk texts joined by a blank line, no numbering."""
        return "\n\n".join(result.text for result in results)
