"""
OpenAI web search executor

Uses the Responses API with the built-in ``web_search`` tool. Citations
arrive as ``url_citation`` annotations on the output text.
"""

from typing import Any, Dict, List, Optional, Tuple
import logging

from openai import AsyncOpenAI, APIStatusError

from websearch_relay.core.constants import MAX_RESPONSE_TOKENS, OPENAI, SEARCH_SYSTEM_PROMPT
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


class OpenAIExecutor(WebSearchExecutor):
    """OpenAI Responses API search executor"""

    family = OPENAI
    display_name = "OpenAI"
    api_error_types = (APIStatusError,)

    def __init__(self):
        self.clients: Dict[Tuple[str, Optional[str]], AsyncOpenAI] = {}

    def get_client(self, api_key: str, base_url: Optional[str]) -> AsyncOpenAI:
        key = (api_key, base_url)
        if key not in self.clients:
            self.clients[key] = AsyncOpenAI(api_key=api_key, base_url=base_url, max_retries=0)
        return self.clients[key]

    @staticmethod
    def build_web_search_tool(query: SearchQuery) -> Dict[str, Any]:
        tool: Dict[str, Any] = {"type": "web_search"}
        if query.allowed_domains:
            tool["filters"] = {"allowed_domains": query.allowed_domains}
        if query.blocked_domains:
            logger.warning("OpenAI web search does not support blocked_domains, ignoring them")
        return tool

    async def search(self, model_id: str, api_key: str, base_url: Optional[str],
                     query: SearchQuery) -> ProviderResponse:
        client = self.get_client(api_key, base_url)

        logger.info(f"Executing OpenAI web search with {model_id} for query: {query.query}")
        response = await client.responses.create(
            model=model_id,
            input=f"Perform a web search for the query: {query.query}",
            instructions=SEARCH_SYSTEM_PROMPT,
            max_output_tokens=MAX_RESPONSE_TOKENS,
            max_tool_calls=query.max_uses,
            tools=[self.build_web_search_tool(query)],
        )

        return self.parse_response(response.model_dump())

    def parse_response(self, response: Dict[str, Any]) -> ProviderResponse:
        """Walk Responses API output items into provider independent blocks"""
        parsed = ProviderResponse()
        searches = 0

        for item in response.get("output") or []:
            item_type = item.get("type")

            if item_type == "web_search_call":
                searches += 1
                if item.get("status") == "failed":
                    logger.warning("OpenAI web search call failed")
                    parsed.blocks.append(ErrorBlock(error_code="web_search_call_failed"))
                continue

            if item_type != "message":
                continue

            for part in item.get("content") or []:
                if part.get("type") != "output_text":
                    continue
                if part.get("text"):
                    parsed.blocks.append(TextBlock(text=part["text"]))
                hits = self._parse_citations(part.get("annotations") or [])
                if hits:
                    parsed.blocks.append(HitsBlock(hits=hits))

        if searches:
            parsed.searches_performed = searches
        return parsed

    @staticmethod
    def _parse_citations(annotations: List[Dict[str, Any]]) -> List[SearchHit]:
        hits = []
        for annotation in annotations:
            if annotation.get("type") != "url_citation" or not annotation.get("url"):
                continue
            hits.append(SearchHit(
                title=annotation.get("title") or annotation["url"],
                url=annotation["url"],
            ))
        return hits
