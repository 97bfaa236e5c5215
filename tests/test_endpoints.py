"""Tests for the HTTP surface."""

from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from websearch_relay.core.config import Config
from websearch_relay.core.provider_directory import StaticProviderDirectory
from websearch_relay.core.session_tracker import ActiveModelTracker
from websearch_relay.main import create_app
from websearch_relay.websearch.base import ProviderResponse, TextBlock, HitsBlock, SearchHit
from websearch_relay.websearch.providers.openai import OpenAIExecutor

PROVIDERS = [
    {
        "id": "openai",
        "key": "sk-test",
        "options": {"baseURL": "https://gateway.local/v1"},
        "models": {
            "gpt-5-mini": {"id": "gpt-5-mini", "api": {"npm": "@ai-sdk/openai"}, "options": {}},
        },
    },
]


@pytest.fixture
def tracker():
    return ActiveModelTracker()


@pytest.fixture
def client(tracker):
    app = create_app(Config(), directory=StaticProviderDirectory(PROVIDERS), tracker=tracker)
    return TestClient(app)


class TestEndpoints:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_tool_definition(self, client):
        response = client.get("/v1/tools/web-search")
        assert response.status_code == 200
        assert response.json()["name"] == "web-search"

    def test_session_model_event(self, client, tracker):
        response = client.post(
            "/v1/sessions/s1/model", json={"model_id": "gpt-5-mini", "provider_id": "openai"}
        )

        assert response.status_code == 200
        assert response.json()["status"] == "ok"
        assert tracker.get("s1").model_id == "gpt-5-mini"

    def test_web_search_passthrough(self, client):
        client.post("/v1/sessions/s1/model", json={"model_id": "gpt-5-mini", "provider_id": "openai"})
        search = AsyncMock(return_value=ProviderResponse(blocks=[
            TextBlock("Answer"),
            HitsBlock(hits=[SearchHit("Source", "https://source.example")]),
        ]))

        with patch.object(OpenAIExecutor, "search", search):
            response = client.post(
                "/v1/tools/web-search",
                json={"session_id": "s1", "args": {"query": "latest news"}},
            )

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert "- [Source](https://source.example)" in response.text
        kwargs = search.call_args.kwargs
        assert kwargs["model_id"] == "gpt-5-mini"
        assert kwargs["base_url"] == "https://gateway.local"

    def test_web_search_without_active_model(self, client):
        response = client.post("/v1/tools/web-search", json={"args": {"query": "latest news"}})

        assert response.status_code == 200
        assert response.text.startswith("Error:")

    def test_conflicting_domains(self, client):
        response = client.post("/v1/tools/web-search", json={"args": {
            "query": "latest news", "allowed_domains": ["a.com"], "blocked_domains": ["b.com"],
        }})
        assert response.text == "Error: Cannot specify both allowed_domains and blocked_domains."

    def test_malformed_body_is_plain_text(self, client):
        response = client.post("/v1/tools/web-search", json={"query": "missing args wrapper"})
        assert response.status_code == 400
        assert response.text.startswith("Error: Invalid request")
