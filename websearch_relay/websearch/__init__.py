"""
Web Search package for WebSearch Relay

Runs searches through the search-capable APIs of the supported provider
families and normalizes their answers into one result shape.
"""

from .base import WebSearchExecutor, SearchQuery, SearchHit, NormalizedResult
from .registry import WebSearchRegistry, registry
from .dispatcher import Dispatcher
from .response_formatter import normalize, get_formatter

__all__ = [
    "WebSearchExecutor",
    "SearchQuery",
    "SearchHit",
    "NormalizedResult",
    "WebSearchRegistry",
    "registry",
    "Dispatcher",
    "normalize",
    "get_formatter",
]
