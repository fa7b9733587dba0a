"""Pydantic schemas for the interview session API."""
from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from interview.feedback import ScoreStatus
from interview.types import Phase, Scorecard, Terminal, Turn


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SessionRef(ApiModel):
    session_id: str


class TurnReq(SessionRef):
    text: str = ""


class StartResp(SessionRef):
    phase: Phase
    question_budget: int


class CompleteResp(SessionRef):
    is_complete: bool
    terminal: Terminal


class FeedbackResp(SessionRef):
    scorecard: Scorecard
    status: ScoreStatus


class HistoryResp(SessionRef):
    phase: Phase
    question_count: int
    turns: List[Turn]
