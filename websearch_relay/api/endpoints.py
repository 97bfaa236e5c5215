from datetime import datetime

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse

from websearch_relay.api.web_search import WebSearchHandler, tool_definition
from websearch_relay.core.logging import logger
from websearch_relay.core.session_tracker import ActiveModelTracker
from websearch_relay.models.search import SessionModelEvent, WebSearchToolCall


router = APIRouter()


def _handler(request: Request) -> WebSearchHandler:
    return request.app.state.web_search_handler


def _tracker(request: Request) -> ActiveModelTracker:
    return request.app.state.session_tracker


@router.get("/v1/tools/web-search")
async def get_web_search_tool():
    """Tool definition for hosts that register the tool dynamically"""
    return tool_definition()


@router.post("/v1/tools/web-search", response_class=PlainTextResponse)
async def run_web_search(call: WebSearchToolCall, request: Request):
    """Run a web search tool call; the result is always plain text"""
    logger.debug(f"Web search tool call for session {call.session_id}: {call.args}")
    result = await _handler(request).execute(call.args, session_id=call.session_id)
    return PlainTextResponse(result)


@router.post("/v1/sessions/{session_id}/model")
async def session_model_changed(session_id: str, event: SessionModelEvent, request: Request):
    """Session event: the user switched the model they are chatting with"""
    active = _tracker(request).on_session_model_change(
        session_id, event.model_id, event.provider_id
    )
    return {
        "status": "ok",
        "session_id": session_id,
        "model_id": active.model_id,
        "provider_id": active.provider_id,
    }


@router.get("/health")
async def health_check(request: Request):
    """Health check endpoint"""
    return {
        "status": "healthy",
        "timestamp": datetime.now().isoformat(),
        "tracked_sessions": len(_tracker(request)),
    }
