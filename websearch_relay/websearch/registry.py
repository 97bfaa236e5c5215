"""
Web Search Registry - Maps provider families to their executors
"""

from typing import Dict, Optional, Type

from .base import WebSearchExecutor


class WebSearchRegistry:
    """Registry for web search executors, one per provider family"""

    def __init__(self):
        self._executors: Dict[str, Type[WebSearchExecutor]] = {}
        self._instances: Dict[str, WebSearchExecutor] = {}

    def register(self, family: str, executor_class: Type[WebSearchExecutor]):
        """Register a web search executor for a family"""
        self._executors[family] = executor_class
        self._instances.pop(family, None)

    def get_executor(self, family: str) -> Optional[WebSearchExecutor]:
        """Get executor instance by family"""
        if family not in self._executors:
            return None

        if family not in self._instances:
            self._instances[family] = self._executors[family]()

        return self._instances[family]

    def has_family(self, family: str) -> bool:
        return family in self._executors


# Global registry instance
registry = WebSearchRegistry()


def register_executors():
    """Register all available executors"""
    from .providers.anthropic import AnthropicExecutor
    from .providers.openai import OpenAIExecutor

    registry.register(AnthropicExecutor.family, AnthropicExecutor)
    registry.register(OpenAIExecutor.family, OpenAIExecutor)


# Register executors on import
register_executors()
