from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional

from websearch_relay.core.constants import MAX_SEARCH_USES, MIN_QUERY_LENGTH, MIN_SEARCH_USES


class WebSearchArgs(BaseModel):
    query: str = Field(..., min_length=MIN_QUERY_LENGTH, description="The search query to use")
    allowed_domains: Optional[List[str]] = Field(
        None, description="Only include search results from these domains"
    )
    blocked_domains: Optional[List[str]] = Field(
        None, description="Never include search results from these domains"
    )
    max_uses: Optional[int] = Field(
        None,
        ge=MIN_SEARCH_USES,
        le=MAX_SEARCH_USES,
        description="Maximum number of searches the provider may run (1-10)",
    )


class WebSearchToolCall(BaseModel):
    session_id: Optional[str] = None
    # Validated by the handler so that bad arguments come back as text
    args: Dict[str, Any]


class SessionModelEvent(BaseModel):
    model_id: str
    provider_id: Optional[str] = None
