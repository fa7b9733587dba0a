"""Helpers for creating and looking up interview sessions."""
from __future__ import annotations

import random
import threading
from typing import Dict, Optional

from config import interview_routes
from config.settings import Settings, settings as default_settings
from interview import InterviewSession, RemoteCompletionClient, ResponseSimulator, SessionContext

_SESSIONS: Dict[str, InterviewSession] = {}
_SESSIONS_GUARD = threading.Lock()


def build_session(context: SessionContext, cfg: Optional[Settings] = None) -> InterviewSession:
    """Wire a session from settings; without an API key it runs on the simulator only."""

    cfg = cfg or default_settings
    rng = random.Random(cfg.RANDOM_SEED)
    chat_route, feedback_route = interview_routes(cfg)
    remote = feedback_remote = None
    if chat_route.api_key():
        remote = RemoteCompletionClient(chat_route, timeout_s=cfg.TURN_TIMEOUT_S)
    if feedback_route.api_key():
        feedback_remote = RemoteCompletionClient(feedback_route, timeout_s=cfg.TURN_TIMEOUT_S)
    return InterviewSession(
        context,
        remote=remote,
        feedback_remote=feedback_remote,
        simulator=ResponseSimulator(rng, delay_s=cfg.MOCK_DELAY_S),
        rng=rng,
    )


def new_session(context: SessionContext, cfg: Optional[Settings] = None) -> InterviewSession:
    """Create and register a session under a fresh identifier."""

    session = build_session(context, cfg)
    with _SESSIONS_GUARD:
        _SESSIONS[session.session_id] = session
    return session


def load_session(session_id: str) -> Optional[InterviewSession]:
    with _SESSIONS_GUARD:
        return _SESSIONS.get(session_id)


def drop_session(session_id: str) -> bool:
    """Forget a session once its transcript has been handed off."""

    with _SESSIONS_GUARD:
        return _SESSIONS.pop(session_id, None) is not None


__all__ = ["build_session", "new_session", "load_session", "drop_session"]
