import asyncio
import json
import random

import pytest

from interview.feedback import (
    DIMENSIONS,
    NEUTRAL_SCORE,
    FeedbackFormatError,
    FeedbackGenerator,
    clamp_score,
    mock_feedback,
    parse_scorecard,
    score_status,
    validate_feedback,
)
from interview.remote import SCORING_PROFILE
from interview.types import Fallback, Scorecard, Turn


def _transcript():
    return [
        Turn(role="system", content="persona"),
        Turn(role="user", content="我负责过订单系统"),
        Turn(role="assistant", content="请说说遇到的最大挑战"),
        Turn(role="user", content="高并发下的库存一致性"),
    ]


def test_fenced_score_is_clamped():
    scorecard = parse_scorecard('```json\n{"overallScore":11}\n```')
    assert scorecard.overall_score == 10


def test_unparsable_text_falls_back_to_mock(make_remote):
    generator = FeedbackGenerator(make_remote("这不是JSON"), rng=random.Random(1))
    scorecard = asyncio.run(generator.generate(_transcript()))

    assert set(scorecard.dimension_scores) == set(DIMENSIONS)
    assert all(1 <= v <= 10 for v in scorecard.dimension_scores.values())
    assert generator.last_fallback_reason


def test_parse_rejects_non_objects():
    with pytest.raises(FeedbackFormatError):
        parse_scorecard("not json at all")
    with pytest.raises(FeedbackFormatError):
        parse_scorecard("[1, 2, 3]")


def test_missing_fields_get_defaults():
    scorecard = validate_feedback({"dimensionScores": {"表达能力": 9}})
    assert scorecard.overall_score == NEUTRAL_SCORE
    assert scorecard.dimension_scores["表达能力"] == 9
    assert scorecard.dimension_scores["逻辑清晰度"] == NEUTRAL_SCORE
    assert len(scorecard.strengths) == 3
    assert len(scorecard.improvements) == 3
    assert scorecard.summary


def test_lists_are_truncated_to_five():
    scorecard = validate_feedback({"strengths": [f"s{i}" for i in range(8)], "improvements": ["只有一条"]})
    assert scorecard.strengths == ("s0", "s1", "s2", "s3", "s4")
    assert scorecard.improvements == ("只有一条",)


@pytest.mark.parametrize(
    "value,expected",
    [
        (11, 10.0),
        (0, 1.0),
        (-3, 1.0),
        ("8.5", 8.5),
        ("abc", NEUTRAL_SCORE),
        (None, NEUTRAL_SCORE),
        (True, NEUTRAL_SCORE),
        (10**400, 10.0),
        (-(10**400), 1.0),
    ],
)
def test_clamp_score(value, expected):
    assert clamp_score(value) == expected


def test_clamp_score_handles_nan():
    assert clamp_score(float("nan")) == NEUTRAL_SCORE


def test_huge_integer_score_is_clamped_not_rejected():
    scorecard = parse_scorecard('{"overallScore": ' + "9" * 400 + ', "summary": "好"}')
    assert scorecard.overall_score == 10.0
    assert scorecard.summary == "好"


def test_scorecard_uses_camel_case_keys():
    scorecard = parse_scorecard(
        json.dumps(
            {
                "overallScore": 8.2,
                "dimensionScores": {name: 8 for name in DIMENSIONS},
                "strengths": ["a"],
                "improvements": ["b"],
                "summary": "不错",
            },
            ensure_ascii=False,
        )
    )
    dumped = scorecard.model_dump(by_alias=True)
    assert set(dumped) == {"overallScore", "dimensionScores", "strengths", "improvements", "summary"}
    assert Scorecard.model_validate(dumped) == scorecard


def test_scorecard_json_parses_back_to_same_scorecard():
    scorecard = validate_feedback(
        {
            "overallScore": 11,
            "dimensionScores": {"表达能力": -3, "逻辑清晰度": "9.5"},
            "strengths": ["  沟通顺畅  "],
            "summary": "  表现稳定  ",
        }
    )
    assert scorecard.overall_score == 10.0
    assert scorecard.dimension_scores["表达能力"] == 1.0
    assert parse_scorecard(scorecard.model_dump_json(by_alias=True)) == scorecard


def test_scorecard_contents_are_read_only():
    scorecard = mock_feedback(4, random.Random(5))
    with pytest.raises(TypeError):
        scorecard.dimension_scores["表达能力"] = 99  # type: ignore[index]
    with pytest.raises(AttributeError):
        scorecard.strengths.append("extra")  # type: ignore[attr-defined]
    assert json.loads(scorecard.model_dump_json(by_alias=True))["dimensionScores"] == dict(scorecard.dimension_scores)


def test_mock_feedback_shape_and_bounds():
    scorecard = mock_feedback(6, random.Random(3))
    assert scorecard.overall_score == 7.2
    assert set(scorecard.dimension_scores) == set(DIMENSIONS)
    for value in scorecard.dimension_scores.values():
        assert 6.7 <= value <= 7.7
    assert len(scorecard.strengths) == 4
    assert len(scorecard.improvements) == 4


def test_mock_feedback_base_is_capped():
    assert mock_feedback(100, random.Random(0)).overall_score == 8.5
    assert mock_feedback(0, random.Random(0)).overall_score == 6.0


def test_generator_uses_remote_json(make_remote):
    payload = json.dumps({"overallScore": 9, "dimensionScores": {name: 9 for name in DIMENSIONS}})
    remote = make_remote(f"```json\n{payload}\n```")
    generator = FeedbackGenerator(remote)

    scorecard = asyncio.run(generator.generate(_transcript()))

    assert scorecard.overall_score == 9
    assert generator.last_fallback_reason is None
    call = remote.calls[0]
    assert call["profile"] == SCORING_PROFILE
    prompt = call["messages"][-1]["content"]
    assert "候选人: 我负责过订单系统" in prompt
    assert "persona" not in prompt


def test_generator_remote_fallback_uses_transcript_length(make_remote):
    generator = FeedbackGenerator(make_remote(Fallback(reason="timeout")), rng=random.Random(2))
    scorecard = asyncio.run(generator.generate(_transcript()))
    assert scorecard.overall_score == 6.6
    assert generator.last_fallback_reason == "timeout"


def test_generator_without_remote():
    generator = FeedbackGenerator(None, rng=random.Random(2))
    scorecard = asyncio.run(generator.generate([]))
    assert scorecard.overall_score == 6.0
    assert generator.last_fallback_reason


@pytest.mark.parametrize("score,status", [(9.0, "excellent"), (8.5, "excellent"), (7.0, "good"), (6.0, "average"), (5.4, "poor")])
def test_score_status(score, status):
    assert score_status(score) == status
