"""
Dispatcher - routes a resolved provider to its family's executor
"""

import logging

from websearch_relay.core.model_manager import ResolvedProvider
from .base import NormalizedResult, SearchQuery, format_generic_error
from .registry import WebSearchRegistry, registry as default_registry
from .response_formatter import normalize

logger = logging.getLogger(__name__)


class UnsupportedFamilyError(Exception):
    def __init__(self, family: str):
        super().__init__(f"No web search executor registered for provider family '{family}'")
        self.family = family


class Dispatcher:
    """Runs a search with the executor for the resolved family"""

    def __init__(self, registry: WebSearchRegistry = default_registry):
        self.registry = registry

    async def execute(self, resolved: ResolvedProvider, query: SearchQuery) -> NormalizedResult:
        executor = self.registry.get_executor(resolved.family)
        if executor is None:
            raise UnsupportedFamilyError(resolved.family)

        logger.debug(f"Dispatching search to {resolved.family}:{resolved.model_id}")

        response = await executor.search(
            model_id=resolved.model_id,
            api_key=resolved.credentials.api_key,
            base_url=resolved.credentials.base_url,
            query=query,
        )
        return normalize(query.query, response)

    def format_error(self, family: str, error: object) -> str:
        """Render a dispatch failure as a string, never raising"""
        executor = self.registry.get_executor(family)
        if executor is None:
            return format_generic_error(error)
        return executor.format_error(error)
