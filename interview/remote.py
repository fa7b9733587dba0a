"""Remote completion client returning explicit Ok/Fallback results."""
from __future__ import annotations

import asyncio
import logging
from typing import Dict, Optional, Sequence

from pydantic import BaseModel, Field

from config import LlmRoute
from llm_gateway import HttpClient, LlmGatewayError, chat_completion

from .types import CompletionResult, Fallback, Ok

logger = logging.getLogger(__name__)


class CompletionProfile(BaseModel):
    temperature: float = Field(ge=0.0, le=2.0)
    max_tokens: int = Field(gt=0)


CHAT_PROFILE = CompletionProfile(temperature=0.7, max_tokens=1024)
SCORING_PROFILE = CompletionProfile(temperature=0.3, max_tokens=2048)


class RemoteCompletionClient:
    """Send a transcript to a chat-completion route; never raises."""

    def __init__(
        self,
        route: LlmRoute,
        *,
        client: Optional[HttpClient] = None,
        timeout_s: Optional[float] = None,
    ) -> None:
        self.route = route
        self._client = client
        self._timeout_s = timeout_s

    async def complete(
        self,
        messages: Sequence[Dict[str, str]],
        profile: CompletionProfile = CHAT_PROFILE,
    ) -> CompletionResult:
        call = chat_completion(messages, cfg=self.route, client=self._client, options=profile.model_dump())
        try:
            if self._timeout_s is not None:
                reply = await asyncio.wait_for(call, timeout=self._timeout_s)
            else:
                reply = await call
        except asyncio.TimeoutError:
            logger.warning("Remote completion timed out after %.1fs route=%s", self._timeout_s, self.route.name)
            return Fallback(reason="timeout")
        except (LlmGatewayError, TypeError, ValueError) as exc:
            logger.warning("Remote completion failed route=%s: %s", self.route.name, exc)
            return Fallback(reason=str(exc) or type(exc).__name__)
        if not reply.strip():
            return Fallback(reason="empty reply")
        return Ok(reply=reply.strip())


__all__ = ["CompletionProfile", "CHAT_PROFILE", "SCORING_PROFILE", "RemoteCompletionClient"]
