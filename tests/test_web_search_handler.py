"""Tests for the web-search tool handler."""

import json
from unittest.mock import AsyncMock, MagicMock

import anthropic
import httpx
import pytest

from websearch_relay.api.web_search import (
    CONFLICTING_DOMAINS_ERROR,
    WebSearchHandler,
    tool_definition,
)
from websearch_relay.core.model_manager import ModelManager
from websearch_relay.core.provider_directory import StaticProviderDirectory
from websearch_relay.core.session_tracker import ActiveModelTracker
from websearch_relay.websearch.base import ProviderResponse, SearchHit, HitsBlock, TextBlock
from websearch_relay.websearch.dispatcher import Dispatcher
from websearch_relay.websearch.registry import WebSearchRegistry

PROVIDERS = [
    {
        "id": "anthropic",
        "key": "k1",
        "options": {},
        "models": {
            "claude-sonnet-4-5": {
                "id": "claude-sonnet-4-5",
                "api": {"npm": "@ai-sdk/anthropic"},
                "options": {"websearch": "auto"},
            },
        },
    },
]


@pytest.fixture
def executor():
    executor = MagicMock()
    executor.search = AsyncMock(return_value=ProviderResponse(blocks=[
        TextBlock("Result text"),
        HitsBlock(hits=[SearchHit("Example", "https://example.com")]),
    ]))
    executor.format_error = MagicMock(return_value="formatted error")
    return executor


@pytest.fixture
def dispatcher(executor):
    test_registry = WebSearchRegistry()
    test_registry.register("anthropic", MagicMock(return_value=executor))
    return Dispatcher(test_registry)


def make_handler(dispatcher, providers=PROVIDERS, output_format="markdown", tracker=None):
    directory = StaticProviderDirectory(providers)
    directory.list_providers = AsyncMock(return_value=providers)
    manager = ModelManager(directory, tracker or ActiveModelTracker())
    return WebSearchHandler(manager, dispatcher=dispatcher, output_format=output_format), directory


class TestWebSearchHandler:
    """Test tool call validation, resolution and rendering"""

    @pytest.mark.asyncio
    async def test_markdown_result(self, dispatcher, executor):
        handler, _ = make_handler(dispatcher)
        result = await handler.execute({"query": "example search"}, session_id="s1")

        assert "Result text" in result
        assert "Sources:\n- [Example](https://example.com)" in result
        query = executor.search.call_args.kwargs["query"]
        assert query.query == "example search"
        assert query.max_uses == 5

    @pytest.mark.asyncio
    async def test_json_result(self, dispatcher):
        handler, _ = make_handler(dispatcher, output_format="json")
        data = json.loads(await handler.execute({"query": "example search", "max_uses": 3}))

        assert data == {
            "query": "example search",
            "results": ["Result text", [{"title": "Example", "url": "https://example.com"}]],
        }

    @pytest.mark.asyncio
    async def test_conflicting_domains_rejected_before_any_call(self, dispatcher, executor):
        handler, directory = make_handler(dispatcher)
        result = await handler.execute({
            "query": "example search",
            "allowed_domains": ["a.com"],
            "blocked_domains": ["b.com"],
        })

        assert result == CONFLICTING_DOMAINS_ERROR
        directory.list_providers.assert_not_called()
        executor.search.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("args", [
        {"query": "x"},
        {"query": "valid query", "max_uses": 11},
        {"query": "valid query", "max_uses": 0},
        {"allowed_domains": ["a.com"]},
    ])
    async def test_invalid_arguments_returned_as_text(self, dispatcher, executor, args):
        handler, _ = make_handler(dispatcher)
        result = await handler.execute(args)

        assert result.startswith("Error: Invalid web-search arguments:")
        executor.search.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_credentials_message(self, dispatcher, executor):
        providers = [{
            "id": "anthropic",
            "models": {"m1": {"id": "m1", "api": {"npm": "@ai-sdk/anthropic"}, "options": {}}},
        }]
        tracker = ActiveModelTracker()
        tracker.on_session_model_change("s1", "m1", "anthropic")
        handler, _ = make_handler(dispatcher, providers=providers, tracker=tracker)

        result = await handler.execute({"query": "example search"}, session_id="s1")

        assert "no API key" in result
        assert "[[provider]]" in result
        executor.search.assert_not_called()

    @pytest.mark.asyncio
    async def test_directory_failure_returned_as_text(self, dispatcher):
        handler, directory = make_handler(dispatcher)
        directory.list_providers.side_effect = ConnectionError("host not ready")

        result = await handler.execute({"query": "example search"})

        assert result == "Error: Could not read the provider configuration: host not ready"

    @pytest.mark.asyncio
    async def test_directory_failure_without_message_names_exception(self, dispatcher):
        handler, directory = make_handler(dispatcher)
        directory.list_providers.side_effect = TimeoutError()

        result = await handler.execute({"query": "example search"})

        assert result == "Error: Could not read the provider configuration: TimeoutError"

    @pytest.mark.asyncio
    async def test_upstream_error_returned_as_text(self, dispatcher, executor):
        request = httpx.Request("POST", "https://api.anthropic.com/v1/messages")
        error = anthropic.APIStatusError(
            "overloaded", response=httpx.Response(529, request=request), body=None
        )
        executor.search.side_effect = error
        handler, _ = make_handler(dispatcher)

        result = await handler.execute({"query": "example search"})

        assert result == "formatted error"
        executor.format_error.assert_called_once_with(error)

    @pytest.mark.asyncio
    async def test_empty_provider_response(self, dispatcher, executor):
        executor.search.return_value = ProviderResponse()
        handler, _ = make_handler(dispatcher)

        assert await handler.execute({"query": "example search"}) == "No results returned from web search."

    @pytest.mark.asyncio
    async def test_scan_happens_once(self, dispatcher):
        handler, directory = make_handler(dispatcher)
        await handler.execute({"query": "first search"})
        await handler.execute({"query": "second search"})

        assert directory.list_providers.await_count == 1


class TestToolDefinition:
    def test_schema_and_description(self):
        definition = tool_definition()

        assert definition["name"] == "web-search"
        assert "Sources:" in definition["description"]
        properties = definition["input_schema"]["properties"]
        assert set(properties) == {"query", "allowed_domains", "blocked_domains", "max_uses"}
        assert definition["input_schema"]["required"] == ["query"]
