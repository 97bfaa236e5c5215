"""
Web Search Executors Package

Contains one executor per supported provider family.
"""

from .anthropic import AnthropicExecutor
from .openai import OpenAIExecutor

__all__ = ["AnthropicExecutor", "OpenAIExecutor"]
