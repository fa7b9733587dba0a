"""FastAPI routes for interview session control."""
from __future__ import annotations

from fastapi import APIRouter, HTTPException

from api.schemas import CompleteResp, FeedbackResp, HistoryResp, SessionRef, StartResp, TurnReq
from interview import InterviewSession, SessionContext, TurnResult, question_budget, score_status
from services.sessions import drop_session, load_session, new_session


router = APIRouter(prefix="/api/interview-sessions")


def _session_or_404(session_id: str) -> InterviewSession:
    session = load_session(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="session not found")
    return session


@router.post("/start", response_model=StartResp)
async def start(context: SessionContext) -> StartResp:
    session = new_session(context)
    return StartResp(
        session_id=session.session_id,
        phase=session.get_current_phase(),
        question_budget=question_budget(context.duration_minutes),
    )


@router.post("/turn", response_model=TurnResult)
async def turn(req: TurnReq) -> TurnResult:
    session = _session_or_404(req.session_id)
    return await session.send_message(req.text)


@router.post("/complete", response_model=CompleteResp)
async def complete(req: SessionRef) -> CompleteResp:
    session = _session_or_404(req.session_id)
    await session.complete_interview()
    return CompleteResp(session_id=session.session_id, is_complete=True, terminal=session.terminal)


@router.post("/feedback", response_model=FeedbackResp)
async def feedback(req: SessionRef) -> FeedbackResp:
    session = _session_or_404(req.session_id)
    scorecard = await session.generate_feedback()
    return FeedbackResp(
        session_id=session.session_id,
        scorecard=scorecard,
        status=score_status(scorecard.overall_score),
    )


@router.get("/{session_id}/history", response_model=HistoryResp)
async def history(session_id: str) -> HistoryResp:
    session = _session_or_404(session_id)
    return HistoryResp(
        session_id=session.session_id,
        phase=session.get_current_phase(),
        question_count=session.get_question_count(),
        turns=session.get_conversation_history(),
    )


@router.delete("/{session_id}", status_code=204)
async def discard(session_id: str) -> None:
    if not drop_session(session_id):
        raise HTTPException(status_code=404, detail="session not found")
