"""Scorecard generation: scoring prompt, parsing, clamping and mock fallback."""
from __future__ import annotations

import json
import logging
import random
from typing import Any, Iterable, List, Literal, Mapping, Optional, Sequence

from llm_gateway import strip_code_fences

from .prompts import build_feedback_messages
from .remote import SCORING_PROFILE, RemoteCompletionClient
from .types import Fallback, Scorecard, Turn

logger = logging.getLogger(__name__)

DIMENSIONS = ("逻辑清晰度", "专业契合度", "表达能力", "问题理解力", "压力应对力")
NEUTRAL_SCORE = 7.5
MIN_SCORE = 1.0
MAX_SCORE = 10.0
MAX_ITEMS = 5

DEFAULT_STRENGTHS = (
    "专业基础扎实，对核心概念理解较深入",
    "表达清晰，逻辑性强",
    "学习能力强，对新知识保持敏感",
    "团队协作意识良好",
)
DEFAULT_IMPROVEMENTS = (
    "可以更多地使用具体数据来支撑观点",
    "描述方案时可以更加具体和详细",
    "建议提前了解一些行业前沿话题",
    "可以准备一些有针对性的问题向面试官提问",
)
DEFAULT_SUMMARY = "整体表现良好，专业能力和沟通能力基本达到岗位要求。"
MOCK_SUMMARY = "整体表现不错，专业能力和沟通能力都达到了岗位要求。建议在今后的面试中更多地展示具体的项目成果和数据支撑。"

ScoreStatus = Literal["excellent", "good", "average", "poor"]


class FeedbackFormatError(ValueError):
    """Model output could not be read as a feedback object."""


def clamp_score(value: Any, default: float = NEUTRAL_SCORE) -> float:
    """Coerce ``value`` to a float in [1, 10]; unusable values become ``default``."""

    if value is None or isinstance(value, bool):
        return default
    try:
        score = float(value)
    except OverflowError:
        return MAX_SCORE if value > 0 else MIN_SCORE
    except (TypeError, ValueError):
        return default
    if score != score:  # NaN
        return default
    return max(MIN_SCORE, min(MAX_SCORE, score))


def _statements(value: Any, fallback: Iterable[str]) -> List[str]:
    if not isinstance(value, list):
        return list(fallback)[:MAX_ITEMS]
    return [str(item) for item in value if item is not None][:MAX_ITEMS]


def validate_feedback(data: Mapping[str, Any]) -> Scorecard:
    """Build a fully populated, in-range Scorecard from loosely shaped data."""

    raw_dims = data.get("dimensionScores")
    if not isinstance(raw_dims, Mapping):
        raw_dims = {}
    summary = data.get("summary")
    return Scorecard(
        overall_score=clamp_score(data.get("overallScore")),
        dimension_scores={name: clamp_score(raw_dims.get(name)) for name in DIMENSIONS},
        strengths=_statements(data.get("strengths"), DEFAULT_STRENGTHS[:3]),
        improvements=_statements(data.get("improvements"), DEFAULT_IMPROVEMENTS[:3]),
        summary=summary.strip() if isinstance(summary, str) and summary.strip() else DEFAULT_SUMMARY,
    )


def parse_scorecard(text: str) -> Scorecard:
    """Parse model output (optionally fenced) into a Scorecard.

    Raises:
        FeedbackFormatError: If the text is not a JSON object.
    """

    cleaned = strip_code_fences(text or "")
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise FeedbackFormatError("feedback is not valid JSON") from exc
    if not isinstance(data, dict):
        raise FeedbackFormatError("feedback JSON must be an object")
    return validate_feedback(data)


def mock_feedback(turn_count: int, rng: Optional[random.Random] = None) -> Scorecard:
    """Length-based placeholder scorecard; values are random, shape is fixed."""

    rng = rng or random.Random()
    base = min(8.5, 6 + 0.2 * max(turn_count, 0))
    return Scorecard(
        overall_score=clamp_score(round(base, 1)),
        dimension_scores={name: clamp_score(round(base + rng.uniform(-0.5, 0.5), 1)) for name in DIMENSIONS},
        strengths=list(DEFAULT_STRENGTHS),
        improvements=list(DEFAULT_IMPROVEMENTS),
        summary=MOCK_SUMMARY,
    )


def score_status(score: float) -> ScoreStatus:
    if score >= 8.5:
        return "excellent"
    if score >= 7.0:
        return "good"
    if score >= 5.5:
        return "average"
    return "poor"


class FeedbackGenerator:
    """Turn a transcript into a Scorecard; every failure ends in mock feedback."""

    def __init__(self, remote: Optional[RemoteCompletionClient] = None, rng: Optional[random.Random] = None) -> None:
        self._remote = remote
        self._rng = rng or random.Random()
        self.last_fallback_reason: Optional[str] = None

    async def generate(self, turns: Sequence[Turn]) -> Scorecard:
        transcript = [turn for turn in turns if turn.role != "system"]
        try:
            return await self._from_remote(transcript)
        except Exception as exc:  # noqa: BLE001
            self.last_fallback_reason = str(exc) or type(exc).__name__
            logger.warning("Feedback fell back to mock scoring: %s", self.last_fallback_reason)
            return mock_feedback(len(transcript), self._rng)

    async def _from_remote(self, transcript: Sequence[Turn]) -> Scorecard:
        if self._remote is None:
            raise LookupError("no remote scorer configured")
        result = await self._remote.complete(build_feedback_messages(transcript, DIMENSIONS), SCORING_PROFILE)
        if isinstance(result, Fallback):
            raise ConnectionError(result.reason)
        scorecard = parse_scorecard(result.reply)
        self.last_fallback_reason = None
        return scorecard


__all__ = [
    "DIMENSIONS",
    "NEUTRAL_SCORE",
    "FeedbackFormatError",
    "FeedbackGenerator",
    "clamp_score",
    "validate_feedback",
    "parse_scorecard",
    "mock_feedback",
    "score_status",
]
