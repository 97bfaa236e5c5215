from dataclasses import dataclass
from typing import Dict, Optional
import logging

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ActiveModel:
    """The model a session is currently chatting with"""
    model_id: str
    provider_id: Optional[str] = None


class ActiveModelTracker:
    """Per-session record of the last selected model.

    Entries live for the process lifetime; sessions are bounded by interactive
    usage so there is no eviction.
    """

    def __init__(self):
        self._sessions: Dict[str, ActiveModel] = {}

    def on_session_model_change(
        self, session_id: str, model_id: str, provider_id: Optional[str] = None
    ) -> ActiveModel:
        active = ActiveModel(model_id=model_id, provider_id=provider_id)
        self._sessions[session_id] = active
        logger.debug(f"Session {session_id} switched to {provider_id}:{model_id}")
        return active

    def get(self, session_id: Optional[str]) -> Optional[ActiveModel]:
        if session_id is None:
            return None
        return self._sessions.get(session_id)

    def __len__(self) -> int:
        return len(self._sessions)


# Global tracker instance
session_tracker = ActiveModelTracker()
