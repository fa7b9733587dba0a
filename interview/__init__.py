"""Interview orchestration engine."""
from .feedback import FeedbackFormatError, FeedbackGenerator, mock_feedback, parse_scorecard, score_status
from .orchestrator import InterviewSession
from .phase_clock import phase_for, question_budget, should_announce_end, should_finalize
from .remote import CHAT_PROFILE, SCORING_PROFILE, RemoteCompletionClient
from .simulator import JobCategory, ResponseSimulator, classify_job_title
from .types import Fallback, Ok, Scorecard, SessionContext, Turn, TurnResult

__all__ = [
    "InterviewSession",
    "SessionContext",
    "Turn",
    "TurnResult",
    "Scorecard",
    "Ok",
    "Fallback",
    "RemoteCompletionClient",
    "CHAT_PROFILE",
    "SCORING_PROFILE",
    "ResponseSimulator",
    "JobCategory",
    "classify_job_title",
    "FeedbackGenerator",
    "FeedbackFormatError",
    "parse_scorecard",
    "mock_feedback",
    "score_status",
    "phase_for",
    "question_budget",
    "should_announce_end",
    "should_finalize",
]
