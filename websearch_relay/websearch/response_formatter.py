"""
Response Formatter - Normalizes provider output and renders it as tool text
"""

import json
from abc import ABC, abstractmethod
from typing import List, Set
import logging

from .base import (
    ErrorBlock,
    HitsBlock,
    NormalizedResult,
    ProviderResponse,
    SearchHit,
    TextBlock,
)

logger = logging.getLogger(__name__)

EMPTY_RESULT_TEXT = "No results returned from web search."


def normalize(query: str, response: ProviderResponse) -> NormalizedResult:
    """Build the ordered result segments for one provider response.

    Hits are deduplicated by URL across the whole response, keeping the first
    title seen. Provider search errors become text segments so the rest of
    the response is still returned.
    """
    result = NormalizedResult(query=query, searches_performed=response.searches_performed)
    seen: Set[str] = set()

    for block in response.blocks:
        if isinstance(block, TextBlock):
            result.results.append(block.text)
        elif isinstance(block, ErrorBlock):
            result.results.append(f"Search error: {block.error_code}")
        elif isinstance(block, HitsBlock):
            hits: List[SearchHit] = []
            for hit in block.hits:
                if hit.url in seen:
                    continue
                seen.add(hit.url)
                hits.append(hit)
            if hits:
                result.results.append(hits)

    logger.debug(f"Normalized {len(result.results)} segments with {len(seen)} unique hits")
    return result


class ResponseFormatter(ABC):
    """Abstract base for rendering normalized results as tool output"""

    @abstractmethod
    def render(self, result: NormalizedResult) -> str:
        pass


class JsonResponseFormatter(ResponseFormatter):
    """Structured output: the normalized result serialized as JSON"""

    def render(self, result: NormalizedResult) -> str:
        if result.is_empty():
            return EMPTY_RESULT_TEXT
        return json.dumps(result.to_dict(), ensure_ascii=False)


class MarkdownResponseFormatter(ResponseFormatter):
    """Markdown output with a mandatory Sources section"""

    def render(self, result: NormalizedResult) -> str:
        if result.is_empty():
            return EMPTY_RESULT_TEXT

        lines = [f'Search query: "{result.query}"']
        for segment in result.results:
            if isinstance(segment, str):
                lines.append(f"\n{segment}")

        hits = result.hits()
        lines.append("\nSources:")
        if hits:
            lines.extend(self.format_hit(hit) for hit in hits)
        else:
            lines.append("- No sources returned.")

        if result.searches_performed:
            lines.append(f"\n---\nSearches performed: {result.searches_performed}")

        return "\n".join(lines)

    @staticmethod
    def format_hit(hit: SearchHit) -> str:
        if hit.page_age:
            return f"- [{hit.title}]({hit.url}) (Updated: {hit.page_age})"
        return f"- [{hit.title}]({hit.url})"


def get_formatter(output_format: str) -> ResponseFormatter:
    if output_format == "json":
        return JsonResponseFormatter()
    return MarkdownResponseFormatter()
