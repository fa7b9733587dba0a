"""Per-interview session: transcript, phase clock and the announce/confirm end protocol."""
from __future__ import annotations

import logging
import random
import uuid
from typing import Dict, List, Optional

from observability import log_event, span

from .feedback import FeedbackGenerator
from .phase_clock import later_phase, phase_for, question_budget, should_announce_end, should_finalize
from .prompts import build_system_prompt
from .remote import CHAT_PROFILE, RemoteCompletionClient
from .simulator import ResponseSimulator
from .types import TERMINAL_ORDER, Fallback, Phase, Scorecard, SessionContext, SessionState, Terminal, Turn, TurnResult

logger = logging.getLogger(__name__)

CLOSING_STATEMENTS = (
    "感谢您今天参加我们的面试。通过刚才的交流，我对您的能力和经验有了很好的了解。本次面试到此结束，我们会在近期给您反馈结果。再次感谢您的时间！",
    "非常感谢您抽出宝贵时间参加今天的面试。您在面试中展现出的专业素养给我留下了深刻印象。本次面试就到这里，我们会尽快通知您结果。",
    "今天的面试就到这里了。感谢您详细回答了我们的问题，我们会综合评估今天的面试情况，并在后续与您联系。谢谢您的参与！",
    "本次面试已经完成，感谢您的积极配合。我们已经收集到足够的信息来评估您的能力，接下来会进行内部讨论，稍后通知您结果。",
)
APOLOGY = "抱歉，我遇到了一些技术问题。请稍后再试，或者我们可以继续下一个问题。"
ALREADY_ENDED = "本次面试已经结束，感谢你的参与。可以查看面试反馈报告了。"

SUGGESTIONS: Dict[Phase, List[str]] = {
    "introduction": ["详细描述你的项目经验", "突出你的核心技能", "展示你的学习能力"],
    "technical": ["用具体例子支撑你的回答", "展示你的专业深度", "说明你解决问题的思路"],
    "behavioral": ["分享具体的工作场景", "展现你的团队协作能力", "体现你的责任心和主动性"],
    "closing": ["准备一些有深度的问题", "展现你对职位的兴趣", "总结你的核心优势"],
}
MAX_SUGGESTIONS = 3


class InterviewSession:
    """One interview, from context to scorecard.

    ``send_message`` and ``complete_interview`` never raise; remote failures are
    answered by the local simulator. Callers must not overlap ``send_message``
    calls on the same session.
    """

    def __init__(
        self,
        context: SessionContext,
        *,
        remote: Optional[RemoteCompletionClient] = None,
        feedback_remote: Optional[RemoteCompletionClient] = None,
        simulator: Optional[ResponseSimulator] = None,
        rng: Optional[random.Random] = None,
        session_id: Optional[str] = None,
    ) -> None:
        self.session_id = session_id or str(uuid.uuid4())
        self._rng = rng or random.Random()
        self._remote = remote
        self._simulator = simulator or ResponseSimulator(self._rng)
        self._feedback = FeedbackGenerator(feedback_remote or remote, rng=self._rng)
        self.context: SessionContext
        self.state: SessionState
        self.set_session_context(context)

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------
    def set_session_context(self, context: SessionContext) -> None:
        """Start over with ``context``: new transcript, counters and phase."""

        self.context = context
        self.state = SessionState(turns=[Turn(role="system", content=build_system_prompt(context))])
        log_event(
            "session_started",
            self.session_id,
            phase=self.state.phase,
            budget=question_budget(context.duration_minutes),
            interview_type=context.interview_type,
        )

    async def send_message(self, text: str) -> TurnResult:
        if should_finalize(self.state.terminal):
            return TurnResult(content=ALREADY_ENDED, is_complete=True, next_phase=self.state.phase)
        try:
            return await self._advance(text)
        except Exception as exc:  # noqa: BLE001
            logger.exception("Turn failed for session %s", self.session_id)
            log_event("turn_error", self.session_id, reason=str(exc) or type(exc).__name__)
            return TurnResult(content=APOLOGY, is_complete=False, error=str(exc) or type(exc).__name__)

    async def complete_interview(self) -> None:
        self._set_terminal("completed")
        log_event("interview_completed", self.session_id, turns=self.state.turns_answered)

    async def generate_feedback(self) -> Scorecard:
        scorecard = await self._feedback.generate(self.state.turns)
        reason = self._feedback.last_fallback_reason
        if reason:
            log_event("feedback_fallback", self.session_id, reason=reason)
        log_event("feedback_generated", self.session_id, outcome=scorecard.overall_score)
        return scorecard

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------
    def get_conversation_history(self) -> List[Turn]:
        return [turn for turn in self.state.turns if turn.role != "system"]

    def get_current_phase(self) -> Phase:
        return self.state.phase

    def get_question_count(self) -> int:
        return self.state.turns_answered

    @property
    def terminal(self) -> Terminal:
        return self.state.terminal

    @property
    def is_running(self) -> bool:
        return self.state.terminal != "completed"

    # ------------------------------------------------------------------
    # Turn handling
    # ------------------------------------------------------------------
    async def _advance(self, text: str) -> TurnResult:
        state = self.state
        state.turns.append(Turn(role="user", content=text or ""))

        reply = await self._interviewer_reply()
        state.turns.append(Turn(role="assistant", content=reply))
        state.turns_answered += 1
        state.phase = later_phase(state.phase, phase_for(state.turns_answered))

        if should_announce_end(state.turns_answered, state.terminal, self.context.duration_minutes):
            closing = self._rng.choice(CLOSING_STATEMENTS)
            state.turns[-1] = state.turns[-1].model_copy(update={"content": closing})
            state.phase = "closing"
            self._set_terminal("announced")
            log_event("end_announced", self.session_id, turns=state.turns_answered, phase=state.phase)
            return TurnResult(
                content=closing,
                is_complete=False,
                next_phase=state.phase,
                should_show_end_button=True,
            )

        log_event("turn", self.session_id, turns=state.turns_answered, phase=state.phase, terminal=state.terminal)
        return TurnResult(
            content=reply,
            is_complete=should_finalize(state.terminal),
            next_phase=state.phase,
            suggestions=SUGGESTIONS[state.phase][:MAX_SUGGESTIONS],
            should_show_end_button=state.terminal == "announced",
        )

    async def _interviewer_reply(self) -> str:
        if self._remote is None:
            result = Fallback(reason="remote disabled")
        else:
            messages = [turn.as_message() for turn in self.state.turns]
            with span(self.state, "interviewer_reply", route=self._remote.route.name) as record:
                result = await self._remote.complete(messages, CHAT_PROFILE)
                record["outcome"] = result.kind
        if isinstance(result, Fallback):
            if self._remote is not None:
                log_event("fallback", self.session_id, reason=result.reason, turns=self.state.turns_answered)
            return await self._simulator.areply(self.context.job_title, self.state.turns_answered)
        return result.reply

    def _set_terminal(self, target: Terminal) -> None:
        current = self.state.terminal
        if TERMINAL_ORDER.index(target) < TERMINAL_ORDER.index(current):
            raise ValueError(f"terminal flag cannot move from {current} to {target}")
        self.state.terminal = target


__all__ = ["InterviewSession", "CLOSING_STATEMENTS", "SUGGESTIONS", "APOLOGY", "ALREADY_ENDED"]
