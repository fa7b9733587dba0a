import os
import random
import sys
from pathlib import Path

import pytest

os.environ.setdefault("ENABLE_FILE_LOGS", "0")

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from interview.types import Fallback, Ok, SessionContext


class FakeRemote:
    """Stands in for RemoteCompletionClient; replays scripted results."""

    def __init__(self, *results, route_name: str = "fake"):
        self.results = list(results)
        self.calls = []
        self.route = type("Route", (), {"name": route_name})()

    async def complete(self, messages, profile=None):
        self.calls.append({"messages": list(messages), "profile": profile})
        if not self.results:
            return Fallback(reason="script exhausted")
        result = self.results.pop(0) if len(self.results) > 1 else self.results[0]
        if isinstance(result, str):
            return Ok(reply=result)
        return result


@pytest.fixture
def make_remote():
    return FakeRemote


@pytest.fixture
def context():
    return SessionContext(
        job_title="后端工程师",
        job_description="负责核心交易系统的设计与开发",
        resume_text="5年Python开发经验\n主导订单服务的重构项目，使用 Django 和 Redis",
        interviewer_tone="friendly",
        interview_type="technical",
        duration_minutes=15,
    )


@pytest.fixture
def rng():
    return random.Random(7)


@pytest.fixture(autouse=True)
def no_api_key(monkeypatch):
    monkeypatch.delenv("LLM_API_KEY", raising=False)
