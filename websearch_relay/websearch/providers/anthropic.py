"""
Anthropic web search executor

Uses the Messages API with the server-side ``web_search`` tool, which lets
the model run up to ``max_uses`` searches inside a single call.
"""

from typing import Any, Dict, List, Optional, Tuple
import logging

from anthropic import AsyncAnthropic, APIStatusError

from websearch_relay.core.constants import ANTHROPIC, MAX_RESPONSE_TOKENS
from ..base import (
    ErrorBlock,
    HitsBlock,
    ProviderResponse,
    SearchHit,
    SearchQuery,
    TextBlock,
    WebSearchExecutor,
)

logger = logging.getLogger(__name__)

# One search step that came back with nothing
NO_RESULTS_TEXT = "No results found."

WEB_SEARCH_TOOL_TYPE = "web_search_20250305"


class AnthropicExecutor(WebSearchExecutor):
    """Anthropic Messages API search executor"""

    family = ANTHROPIC
    display_name = "Anthropic"
    api_error_types = (APIStatusError,)

    def __init__(self):
        self.clients: Dict[Tuple[str, Optional[str]], AsyncAnthropic] = {}

    def get_client(self, api_key: str, base_url: Optional[str]) -> AsyncAnthropic:
        key = (api_key, base_url)
        if key not in self.clients:
            # No retries at this layer, a failed call is reported as-is
            self.clients[key] = AsyncAnthropic(api_key=api_key, base_url=base_url, max_retries=0)
        return self.clients[key]

    @staticmethod
    def build_web_search_tool(query: SearchQuery) -> Dict[str, Any]:
        tool: Dict[str, Any] = {
            "type": WEB_SEARCH_TOOL_TYPE,
            "name": "web_search",
            "max_uses": query.max_uses,
        }
        if query.allowed_domains:
            tool["allowed_domains"] = query.allowed_domains
        if query.blocked_domains:
            tool["blocked_domains"] = query.blocked_domains
        return tool

    async def search(self, model_id: str, api_key: str, base_url: Optional[str],
                     query: SearchQuery) -> ProviderResponse:
        client = self.get_client(api_key, base_url)

        logger.info(f"Executing Anthropic web search with {model_id} for query: {query.query}")
        response = await client.messages.create(
            model=model_id,
            max_tokens=MAX_RESPONSE_TOKENS,
            messages=[
                {"role": "user", "content": f"Perform a web search for: {query.query}"}
            ],
            tools=[self.build_web_search_tool(query)],
        )

        return self.parse_response(response.model_dump())

    def parse_response(self, response: Dict[str, Any]) -> ProviderResponse:
        """Walk Messages API content blocks into provider independent blocks"""
        parsed = ProviderResponse()

        for block in response.get("content") or []:
            block_type = block.get("type")

            if block_type == "text":
                if block.get("text"):
                    parsed.blocks.append(TextBlock(text=block["text"]))

            elif block_type == "web_search_tool_result":
                content = block.get("content")
                if isinstance(content, list) and not content:
                    parsed.blocks.append(TextBlock(text=NO_RESULTS_TEXT))
                elif isinstance(content, list):
                    parsed.blocks.append(HitsBlock(hits=self._parse_hits(content)))
                elif isinstance(content, dict) and content.get("type") == "web_search_tool_result_error":
                    error_code = content.get("error_code", "unknown")
                    logger.warning(f"Anthropic web search returned error: {error_code}")
                    parsed.blocks.append(ErrorBlock(error_code=error_code))

            # server_tool_use blocks only echo the query the model searched for

        usage = response.get("usage") or {}
        server_tool_use = usage.get("server_tool_use") or {}
        if server_tool_use.get("web_search_requests"):
            parsed.searches_performed = server_tool_use["web_search_requests"]

        return parsed

    @staticmethod
    def _parse_hits(content: List[Dict[str, Any]]) -> List[SearchHit]:
        hits = []
        for item in content:
            if not isinstance(item, dict) or item.get("type") != "web_search_result":
                continue
            url = item.get("url")
            if not url:
                continue
            hits.append(SearchHit(
                title=item.get("title") or url,
                url=url,
                page_age=item.get("page_age") or None,
            ))
        return hits
