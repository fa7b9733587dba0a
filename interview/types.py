"""Shared type definitions for interview sessions."""
from __future__ import annotations

from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Dict, List, Literal, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel

Role = Literal["system", "user", "assistant"]
Tone = Literal["strict", "friendly", "open"]
InterviewType = Literal["technical", "behavioral", "comprehensive"]
Phase = Literal["introduction", "technical", "behavioral", "closing"]
Terminal = Literal["running", "announced", "completed"]

PHASES: tuple[Phase, ...] = ("introduction", "technical", "behavioral", "closing")
TERMINAL_ORDER: tuple[Terminal, ...] = ("running", "announced", "completed")


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SessionContext(CamelModel):
    """Per-interview configuration; fixed for the lifetime of a session."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    job_title: str
    job_description: str = ""
    resume_text: str = ""
    interviewer_tone: Tone = "friendly"
    company_name: Optional[str] = None
    interview_type: InterviewType = "technical"
    duration_minutes: int = Field(default=30, gt=0)


class Turn(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    role: Role
    content: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def as_message(self) -> Dict[str, str]:
        return {"role": self.role, "content": self.content}


class SessionState(BaseModel):
    """Mutable bookkeeping owned by one session."""

    turns: List[Turn] = Field(default_factory=list)
    phase: Phase = "introduction"
    turns_answered: int = 0
    terminal: Terminal = "running"
    events: List[Dict[str, Any]] = Field(default_factory=list)


class TurnResult(CamelModel):
    """Outcome of one candidate message."""

    content: str
    is_complete: bool = False
    next_phase: Optional[Phase] = None
    suggestions: List[str] = Field(default_factory=list)
    should_show_end_button: bool = False
    error: Optional[str] = None


class Scorecard(CamelModel):
    """Validated, fully populated feedback for one session."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    overall_score: float = Field(ge=1.0, le=10.0)
    dimension_scores: Mapping[str, float]
    strengths: Tuple[str, ...] = Field(max_length=5)
    improvements: Tuple[str, ...] = Field(max_length=5)
    summary: str

    @field_validator("dimension_scores", mode="after")
    @classmethod
    def _freeze_dimensions(cls, value: Mapping[str, float]) -> Mapping[str, float]:
        return MappingProxyType(dict(value))

    @field_serializer("dimension_scores")
    def _dump_dimensions(self, value: Mapping[str, float]) -> Dict[str, float]:
        return dict(value)


class Ok(BaseModel):
    kind: Literal["ok"] = "ok"
    reply: str


class Fallback(BaseModel):
    kind: Literal["fallback"] = "fallback"
    reason: str


CompletionResult = Union[Ok, Fallback]


__all__ = [
    "Role",
    "Tone",
    "InterviewType",
    "Phase",
    "Terminal",
    "PHASES",
    "TERMINAL_ORDER",
    "SessionContext",
    "Turn",
    "SessionState",
    "TurnResult",
    "Scorecard",
    "Ok",
    "Fallback",
    "CompletionResult",
]
