"""
Base classes for web search executors
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional, Tuple, Type, Union

from websearch_relay.core.constants import DEFAULT_SEARCH_USES

TEXT = "text"
HITS = "hits"
ERROR = "error"


@dataclass
class SearchHit:
    """A single search result reference"""
    title: str
    url: str
    page_age: Optional[str] = None  # Last updated, when the provider reports it


@dataclass
class SearchQuery:
    """Represents a search query with parameters"""
    query: str
    max_uses: int = DEFAULT_SEARCH_USES
    allowed_domains: Optional[List[str]] = None
    blocked_domains: Optional[List[str]] = None


@dataclass
class TextBlock:
    text: str
    kind: str = TEXT


@dataclass
class HitsBlock:
    hits: List[SearchHit]
    kind: str = HITS


@dataclass
class ErrorBlock:
    error_code: str
    kind: str = ERROR


ContentBlock = Union[TextBlock, HitsBlock, ErrorBlock]


@dataclass
class ProviderResponse:
    """Content blocks parsed from one provider response, in response order"""
    blocks: List[ContentBlock] = field(default_factory=list)
    searches_performed: Optional[int] = None


@dataclass
class NormalizedResult:
    """Provider independent search result"""
    query: str
    results: List[Union[str, List[SearchHit]]] = field(default_factory=list)
    searches_performed: Optional[int] = None

    def hits(self) -> List[SearchHit]:
        return [hit for segment in self.results if isinstance(segment, list) for hit in segment]

    def is_empty(self) -> bool:
        return not self.results

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "query": self.query,
            "results": [
                segment if isinstance(segment, str)
                else [{k: v for k, v in asdict(hit).items() if v is not None} for hit in segment]
                for segment in self.results
            ],
        }
        if self.searches_performed is not None:
            data["searches_performed"] = self.searches_performed
        return data


class WebSearchExecutor(ABC):
    """Runs a search through one provider family's search-capable API"""

    family: str
    display_name: str
    # SDK exception types that carry an HTTP status
    api_error_types: Tuple[Type[BaseException], ...] = ()

    @abstractmethod
    async def search(self, model_id: str, api_key: str, base_url: Optional[str],
                     query: SearchQuery) -> ProviderResponse:
        """Execute search and return the parsed content blocks"""
        pass

    def format_error(self, error: object) -> str:
        """Render any failure as a tool result string"""
        if self.api_error_types and isinstance(error, self.api_error_types):
            status = getattr(error, "status_code", None)
            message = getattr(error, "message", None) or str(error)
            return f"{self.display_name} API error: {message} (status: {status})"
        return format_generic_error(error)


def format_generic_error(error: object) -> str:
    """Message for errors that do not come from a provider API"""
    if isinstance(error, BaseException):
        message = str(error) or error.__class__.__name__
        return f"Error performing web search: {message}"
    return f"Error performing web search: {error}"
