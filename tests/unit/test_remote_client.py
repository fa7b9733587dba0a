import asyncio

from config import LlmRoute
from interview.remote import CHAT_PROFILE, SCORING_PROFILE, RemoteCompletionClient
from interview.types import Fallback, Ok


class ScriptedResponse:
    def __init__(self, status_code, content):
        self.status_code = status_code
        self.text = ""
        self._content = content

    def json(self):
        return {"choices": [{"message": {"content": self._content}}]}


class ScriptedClient:
    def __init__(self, *, status_code=200, content="  下一个问题  ", delay=0.0):
        self.status_code = status_code
        self.content = content
        self.delay = delay
        self.payloads = []

    async def post(self, url, *, json, headers, timeout):
        self.payloads.append(json)
        if self.delay:
            await asyncio.sleep(self.delay)
        return ScriptedResponse(self.status_code, self.content)


def _route():
    return LlmRoute(name="unit", base_url="https://llm.example", model="glm-4-flash", max_retries=0)


def _messages():
    return [{"role": "user", "content": "你好"}]


def test_ok_reply_is_stripped_and_profile_applied():
    client = ScriptedClient()
    result = asyncio.run(RemoteCompletionClient(_route(), client=client).complete(_messages(), SCORING_PROFILE))
    assert result == Ok(reply="下一个问题")
    assert client.payloads[0]["temperature"] == SCORING_PROFILE.temperature
    assert client.payloads[0]["max_tokens"] == SCORING_PROFILE.max_tokens


def test_default_profile_is_chat():
    client = ScriptedClient()
    asyncio.run(RemoteCompletionClient(_route(), client=client).complete(_messages()))
    assert client.payloads[0]["temperature"] == CHAT_PROFILE.temperature


def test_gateway_error_becomes_fallback():
    result = asyncio.run(RemoteCompletionClient(_route(), client=ScriptedClient(status_code=403)).complete(_messages()))
    assert isinstance(result, Fallback)
    assert "403" in result.reason


def test_empty_reply_becomes_fallback():
    result = asyncio.run(RemoteCompletionClient(_route(), client=ScriptedClient(content="   ")).complete(_messages()))
    assert result == Fallback(reason="empty reply")


def test_slow_remote_times_out():
    remote = RemoteCompletionClient(_route(), client=ScriptedClient(delay=1.0), timeout_s=0.05)
    result = asyncio.run(remote.complete(_messages()))
    assert result == Fallback(reason="timeout")
