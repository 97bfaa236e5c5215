"""
Provider directory - the source of configured providers and their models.

Every directory returns providers in the host's shape::

    {
        "id": "anthropic",
        "key": "...",                                  # optional
        "options": {"apiKey": "...", "baseURL": "..."},
        "models": {
            "claude-sonnet-4-5": {
                "id": "claude-sonnet-4-5",
                "api": {"npm": "@ai-sdk/anthropic"},
                "options": {"websearch": "always"},
            }
        },
    }

Directories are queried lazily on the first search request, never at
startup, because the host may still be bootstrapping at that point.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List
import logging

import httpx
import toml

logger = logging.getLogger(__name__)


class ProviderDirectory(ABC):
    """Asynchronous source of provider entries"""

    @abstractmethod
    async def list_providers(self) -> List[Dict[str, Any]]:
        """Return the full, ordered list of configured providers"""
        pass


class StaticProviderDirectory(ProviderDirectory):
    """Directory backed by an in-memory list, used when embedding the relay"""

    def __init__(self, providers: List[Dict[str, Any]]):
        self.providers = list(providers)

    async def list_providers(self) -> List[Dict[str, Any]]:
        return list(self.providers)


class TomlProviderDirectory(ProviderDirectory):
    """Reads ``[[provider]]`` tables from the TOML config file on every query"""

    def __init__(self, config_file: str):
        self.config_file = config_file

    async def list_providers(self) -> List[Dict[str, Any]]:
        logger.info(f"Reading provider directory from {self.config_file}")
        with open(self.config_file, "r") as f:
            data = toml.load(f)

        providers = data.get("provider", [])
        if not isinstance(providers, list):
            logger.warning("'provider' in config file is not an array of tables, ignoring it")
            return []

        return [self._to_entry(p) for p in providers if isinstance(p, dict)]

    @staticmethod
    def _to_entry(provider: Dict[str, Any]) -> Dict[str, Any]:
        """Convert a TOML provider table into the host's provider shape"""
        provider_npm = provider.get("npm")
        models = {}
        raw_models = provider.get("models", {})
        if isinstance(raw_models, dict):
            for model_key, model in raw_models.items():
                if not isinstance(model, dict):
                    # Leave malformed models in place, the scanner skips them
                    models[model_key] = model
                    continue
                models[model_key] = {
                    "id": model.get("id", model_key),
                    "api": {"npm": model.get("npm", provider_npm)},
                    "options": model.get("options", {}),
                }

        entry = {
            "id": provider.get("id", provider.get("name")),
            "options": provider.get("options", {}),
            "models": models,
        }
        if "key" in provider:
            entry["key"] = provider["key"]
        return entry


class HttpProviderDirectory(ProviderDirectory):
    """Asks the host for its provider list over HTTP"""

    def __init__(self, url: str, timeout: float = 30.0):
        self.url = url
        self.timeout = timeout

    async def list_providers(self) -> List[Dict[str, Any]]:
        logger.info(f"Querying provider directory at {self.url}")
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.get(self.url)
            logger.debug(f"Provider directory response status: {response.status_code}")
            response.raise_for_status()
            data = response.json()

        if isinstance(data, dict):
            data = data.get("providers", [])
        if not isinstance(data, list):
            logger.warning("Provider directory returned an unexpected payload, treating it as empty")
            return []
        return data
