#!/usr/bin/env python3
"""
Example usage of the web search relay

Runs a web search tool call directly, without going through the HTTP
endpoints, using an in-memory provider directory.
"""

import asyncio
import os

from websearch_relay.api.web_search import WebSearchHandler
from websearch_relay.core.model_manager import ModelManager
from websearch_relay.core.provider_directory import StaticProviderDirectory
from websearch_relay.core.session_tracker import ActiveModelTracker


def example_providers():
    return [
        {
            "id": "anthropic",
            "options": {"apiKey": "{env:ANTHROPIC_API_KEY}"},
            "models": {
                "claude-sonnet-4-5": {
                    "id": "claude-sonnet-4-5",
                    "api": {"npm": "@ai-sdk/anthropic"},
                    "options": {"websearch": "auto"},
                },
            },
        },
        {
            "id": "openai",
            "options": {"apiKey": "{env:OPENAI_API_KEY}"},
            "models": {
                "gpt-5-mini": {
                    "id": "gpt-5-mini",
                    "api": {"npm": "@ai-sdk/openai"},
                    "options": {},
                },
            },
        },
    ]


async def main():
    if not os.getenv("ANTHROPIC_API_KEY") and not os.getenv("OPENAI_API_KEY"):
        print("❌ Neither ANTHROPIC_API_KEY nor OPENAI_API_KEY is set")
        return

    tracker = ActiveModelTracker()
    handler = WebSearchHandler(
        ModelManager(StaticProviderDirectory(example_providers()), tracker),
        output_format="markdown",
    )

    # The session chats with gpt-5-mini; without an OpenAI key the search
    # falls back to the model tagged "auto"
    tracker.on_session_model_change("example-session", "gpt-5-mini", "openai")

    print("🔎 Searching for: latest developments in quantum computing")
    result = await handler.execute(
        {"query": "latest developments in quantum computing", "max_uses": 3},
        session_id="example-session",
    )
    print(result)


if __name__ == "__main__":
    asyncio.run(main())
