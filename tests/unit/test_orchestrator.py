import asyncio
import random

import pytest

from interview.orchestrator import ALREADY_ENDED, APOLOGY, CLOSING_STATEMENTS, InterviewSession
from interview.simulator import ResponseSimulator
from interview.types import Fallback


def _run(coro):
    return asyncio.run(coro)


def _drive(session, count, text="我的回答"):
    async def go():
        return [await session.send_message(text) for _ in range(count)]

    return _run(go())


def test_new_session_starts_in_introduction(context, rng):
    session = InterviewSession(context, rng=rng)
    assert session.get_current_phase() == "introduction"
    assert session.get_question_count() == 0
    assert session.get_conversation_history() == []
    assert session.terminal == "running"
    assert session.state.turns[0].role == "system"
    assert context.job_title in session.state.turns[0].content


def test_end_button_after_budget_is_reached(context, rng):
    session = InterviewSession(context, rng=rng)
    results = _drive(session, 7)

    assert all(not r.should_show_end_button for r in results[:5])
    announce = results[5]
    assert announce.content in CLOSING_STATEMENTS
    assert announce.should_show_end_button and not announce.is_complete
    assert announce.next_phase == "closing"
    assert session.terminal == "announced"

    seventh = results[6]
    assert seventh.should_show_end_button is True
    assert seventh.is_complete is False
    assert seventh.content


def test_completed_session_reports_complete_and_stops_counting(context, rng):
    session = InterviewSession(context, rng=rng)
    _drive(session, 7)
    _run(session.complete_interview())
    history_before = session.get_conversation_history()
    count_before = session.get_question_count()

    result = _run(session.send_message("还有一个问题"))

    assert result.is_complete is True
    assert result.content == ALREADY_ENDED
    assert session.get_question_count() == count_before
    assert session.get_conversation_history() == history_before
    assert session.terminal == "completed"


def test_remote_failure_still_answers(context, rng, make_remote):
    remote = make_remote(Fallback(reason="boom"))
    session = InterviewSession(context, remote=remote, rng=rng)

    result = _run(session.send_message("test"))

    assert isinstance(result.content, str) and result.content.strip()
    assert result.error is None
    assert len(remote.calls) == 1
    assert session.get_question_count() == 1


def test_remote_reply_is_used_and_sees_system_prompt(context, rng, make_remote):
    remote = make_remote("请介绍一下你最近的项目。")
    session = InterviewSession(context, remote=remote, rng=rng)

    result = _run(session.send_message("你好，我是张三"))

    assert result.content == "请介绍一下你最近的项目。"
    sent = remote.calls[0]["messages"]
    assert sent[0]["role"] == "system"
    assert sent[-1] == {"role": "user", "content": "你好，我是张三"}
    roles = [t.role for t in session.get_conversation_history()]
    assert roles == ["user", "assistant"]


def test_phase_labels_follow_turn_count(context, rng):
    session = InterviewSession(context.model_copy(update={"duration_minutes": 60}), rng=rng)
    phases = [r.next_phase for r in _drive(session, 9)]
    assert phases == [
        "introduction",
        "technical",
        "technical",
        "technical",
        "technical",
        "behavioral",
        "behavioral",
        "closing",
        "closing",
    ]


def test_suggestions_match_phase(context, rng):
    session = InterviewSession(context.model_copy(update={"duration_minutes": 60}), rng=rng)
    first = _run(session.send_message("hi"))
    assert 0 < len(first.suggestions) <= 3


def test_empty_answer_is_accepted(context, rng):
    session = InterviewSession(context, rng=rng)
    result = _run(session.send_message(""))
    assert result.content
    assert session.get_conversation_history()[0].content == ""
    assert session.get_question_count() == 1


def test_history_reads_do_not_mutate(context, rng):
    session = InterviewSession(context, rng=rng)
    _drive(session, 2)
    first = session.get_conversation_history()
    first.clear()
    assert len(session.get_conversation_history()) == 4


def test_unexpected_error_returns_apology(context, rng, monkeypatch):
    session = InterviewSession(context, rng=rng)

    async def explode(*args, **kwargs):
        raise RuntimeError("simulator broke")

    monkeypatch.setattr(session._simulator, "areply", explode)
    result = _run(session.send_message("hello"))

    assert result.content == APOLOGY
    assert result.error == "simulator broke"
    assert result.is_complete is False


def test_complete_without_announcement(context, rng):
    session = InterviewSession(context, rng=rng)
    _drive(session, 2)
    _run(session.complete_interview())
    assert session.terminal == "completed"
    assert session.is_running is False
    assert _run(session.send_message("x")).is_complete is True


def test_terminal_flag_never_moves_backwards(context, rng):
    session = InterviewSession(context, rng=rng)
    _run(session.complete_interview())
    with pytest.raises(ValueError):
        session._set_terminal("announced")
    _run(session.complete_interview())
    assert session.terminal == "completed"


def test_set_session_context_resets_state(context, rng):
    session = InterviewSession(context, rng=rng)
    _drive(session, 3)
    session.set_session_context(context.model_copy(update={"job_title": "产品经理"}))
    assert session.get_question_count() == 0
    assert session.get_conversation_history() == []
    assert session.terminal == "running"
    assert "产品经理" in session.state.turns[0].content


def test_seeded_sessions_are_deterministic(context):
    def transcript(seed):
        rng = random.Random(seed)
        session = InterviewSession(context, rng=rng, simulator=ResponseSimulator(rng))
        return [r.content for r in _drive(session, 7)]

    assert transcript(11) == transcript(11)


def test_remote_call_is_traced(context, rng, make_remote):
    session = InterviewSession(context, remote=make_remote("ok"), rng=rng)
    _run(session.send_message("hi"))
    assert session.state.events
    assert session.state.events[0]["span"] == "interviewer_reply"
    assert session.state.events[0]["outcome"] == "ok"


def test_generate_feedback_without_remote_is_mock(context, rng):
    session = InterviewSession(context, rng=rng)
    _drive(session, 3)
    scorecard = _run(session.generate_feedback())
    assert 1 <= scorecard.overall_score <= 10
    assert len(scorecard.dimension_scores) == 5
