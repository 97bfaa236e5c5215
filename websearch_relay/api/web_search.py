"""
Web Search Tool Handler

Turns a web-search tool call into a text result. Every failure, from bad
arguments to upstream API errors, is returned as a string because the
calling agent can only act on textual tool output.
"""

from datetime import datetime
from typing import Any, Dict, Optional
import logging

from pydantic import ValidationError

from websearch_relay.core.constants import DEFAULT_SEARCH_USES, TOOL_NAME
from websearch_relay.core.model_manager import ModelManager, format_config_error
from websearch_relay.models.search import WebSearchArgs
from websearch_relay.websearch.base import SearchQuery
from websearch_relay.websearch.dispatcher import Dispatcher
from websearch_relay.websearch.response_formatter import get_formatter

logger = logging.getLogger(__name__)

CONFLICTING_DOMAINS_ERROR = "Error: Cannot specify both allowed_domains and blocked_domains."


class WebSearchHandler:
    """Validate, resolve, dispatch and render one web search tool call"""

    def __init__(
        self,
        model_manager: ModelManager,
        dispatcher: Optional[Dispatcher] = None,
        output_format: str = "markdown",
    ):
        self.model_manager = model_manager
        self.dispatcher = dispatcher or Dispatcher()
        self.formatter = get_formatter(output_format)

    async def execute(self, args: Dict[str, Any], session_id: Optional[str] = None) -> str:
        try:
            search_args = WebSearchArgs.model_validate(args)
        except ValidationError as e:
            logger.warning(f"Rejected web search arguments: {e}")
            return f"Error: Invalid web-search arguments: {self._describe_validation_error(e)}"

        if search_args.allowed_domains is not None and search_args.blocked_domains is not None:
            return CONFLICTING_DOMAINS_ERROR

        try:
            resolved = await self.model_manager.resolve_for_session(session_id)
        except Exception as e:
            logger.error(f"Failed to read provider directory: {e}", exc_info=True)
            return f"Error: Could not read the provider configuration: {str(e) or e.__class__.__name__}"

        if resolved is None:
            return format_config_error(await self.model_manager.get_scan())

        query = SearchQuery(
            query=search_args.query,
            max_uses=search_args.max_uses or DEFAULT_SEARCH_USES,
            allowed_domains=search_args.allowed_domains,
            blocked_domains=search_args.blocked_domains,
        )

        try:
            result = await self.dispatcher.execute(resolved, query)
        except Exception as e:
            logger.error(f"Web search via {resolved.family}:{resolved.model_id} failed: {e}")
            return self.dispatcher.format_error(resolved.family, e)

        logger.info(f"Web search for '{query.query}' returned {len(result.hits())} sources")
        return self.formatter.render(result)

    @staticmethod
    def _describe_validation_error(error: ValidationError) -> str:
        parts = []
        for item in error.errors():
            location = ".".join(str(p) for p in item.get("loc", ())) or "args"
            parts.append(f"{location}: {item.get('msg')}")
        return "; ".join(parts)


def get_current_month_year() -> str:
    return datetime.now().strftime("%B %Y")


def tool_definition() -> Dict[str, Any]:
    """Name, description and input schema of the web-search tool"""
    description = f"""- Searches the web and uses the results to inform responses
- Provides up-to-date information for current events and recent data
- Returns search result information, including links as markdown hyperlinks
- Use this tool for accessing information beyond the model's knowledge cutoff
- Searches are performed automatically within a single API call

CRITICAL REQUIREMENT - You MUST follow this:
  - After answering the user's question, you MUST include a "Sources:" section at the end of your response
  - In the Sources section, list all relevant URLs from the search results as markdown hyperlinks: [Title](URL)
  - This is MANDATORY - never skip including sources in your response

Usage notes:
  - Domain filtering is supported to include or block specific websites
  - allowed_domains and blocked_domains cannot be used together

IMPORTANT - Use the correct year in search queries:
  - It is currently {get_current_month_year()}. You MUST use this when searching for recent information, documentation, or current events."""

    return {
        "name": TOOL_NAME,
        "description": description,
        "input_schema": WebSearchArgs.model_json_schema(),
    }
