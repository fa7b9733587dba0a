from __future__ import annotations  # Chat-completion request gateway

import logging
import re
from typing import Any, Awaitable, Callable, Dict, Optional, Protocol, Sequence, Tuple

import httpx

from config import LlmRoute


logger = logging.getLogger(__name__)  # Module logger setup

_FENCE_OPEN = re.compile(r"^```[A-Za-z0-9_-]*[ \t]*\n?")
_FENCE_CLOSE = re.compile(r"\n?[ \t]*```$")


class HttpResponse(Protocol):  # Minimal HTTP response protocol
    @property
    def status_code(self) -> int: ...

    def json(self) -> Any: ...

    @property
    def text(self) -> str: ...


class HttpClient(Protocol):  # Minimal async HTTP client protocol
    async def post(self, url: str, *, json: Dict[str, Any], headers: Dict[str, str], timeout: float) -> HttpResponse: ...


class LlmGatewayError(RuntimeError):  # Base gateway error
    pass


class _RetryableError(LlmGatewayError):
    pass


async def chat_completion(
    messages: Sequence[Dict[str, str]],
    *,
    cfg: LlmRoute,
    client: Optional[HttpClient] = None,
    options: Optional[Dict[str, Any]] = None,
) -> str:
    """POST the transcript to the configured route and return the reply text."""

    payload: Dict[str, Any] = {"model": cfg.model, "messages": _normalize_messages(messages), "stream": False}
    if options:
        payload.update(options)
    headers = {"Content-Type": "application/json"}
    api_key = cfg.api_key()
    if api_key:
        headers["Authorization"] = f"Bearer {api_key}"
    headers.update(cfg.extra_headers)

    attempts = cfg.max_retries + 1
    preview = _preview(payload["messages"])
    if len(preview) > 120:
        preview = preview[:117] + "..."
    logger.info(
        "LLM request start route=%s model=%s attempts=%d preview=%s",
        cfg.name,
        cfg.model,
        attempts,
        preview,
    )
    last_error: Optional[Exception] = None
    for attempt in range(attempts):
        try:
            content = await _send_once(cfg, payload, headers, client)
        except _RetryableError as exc:
            logger.warning("LLM attempt %d/%d failed: %s", attempt + 1, attempts, exc)
            last_error = exc
            continue
        logger.info("LLM request done route=%s model=%s attempt=%d", cfg.name, cfg.model, attempt + 1)
        return content
    raise LlmGatewayError("LLM request failed after retries") from last_error


async def _send_once(
    cfg: LlmRoute,
    payload: Dict[str, Any],
    headers: Dict[str, str],
    client: Optional[HttpClient],
) -> str:
    try:
        response, close_cb = await _post(cfg.url, payload, headers, cfg.timeout_s, client)
    except Exception as exc:  # noqa: BLE001
        logger.error("LLM transport failure: %s", exc)
        raise _RetryableError("LLM transport failed") from exc
    try:
        if response.status_code >= 500:
            logger.error("LLM error status: %s", response.status_code)
            raise _RetryableError(f"LLM returned status {response.status_code}")
        if response.status_code >= 400:
            logger.error("LLM error status: %s body=%s", response.status_code, response.text[:200])
            raise LlmGatewayError(f"LLM returned status {response.status_code}")
        try:
            data = response.json()
        except Exception as exc:  # noqa: BLE001
            logger.error("Invalid JSON payload from LLM: %s", exc)
            raise LlmGatewayError("LLM payload was not JSON") from exc
        return _extract_content(data)
    finally:
        await _close_safely(close_cb)


async def _post(
    url: str,
    payload: Dict[str, Any],
    headers: Dict[str, str],
    timeout: float,
    client: Optional[HttpClient],
) -> Tuple[HttpResponse, Optional[Callable[[], Awaitable[None]]]]:  # Dispatch HTTP request
    if client is not None:
        response = await client.post(url, json=payload, headers=headers, timeout=timeout)
        return response, None
    http_client = httpx.AsyncClient(timeout=timeout)
    try:
        response = await http_client.post(url, json=payload, headers=headers)
    except Exception:
        await http_client.aclose()
        raise
    return response, http_client.aclose


async def _close_safely(close_cb: Optional[Callable[[], Awaitable[None]]]) -> None:
    if close_cb is not None:
        await close_cb()


def _normalize_messages(messages: Sequence[Dict[str, str]]) -> list[Dict[str, str]]:  # Ensure message payload shape
    normalized: list[Dict[str, str]] = []
    for item in messages:
        if not isinstance(item, dict):
            raise TypeError("Each chat message must be a dict with role/content")
        role = str(item.get("role", "")).strip()
        content = str(item.get("content", ""))
        if not role:
            raise ValueError("Chat message missing role")
        normalized.append({"role": role, "content": content})
    return normalized


def _preview(messages: Sequence[Dict[str, str]]) -> str:  # Last non-empty line for logging
    for message in reversed(messages):
        text = message.get("content", "").strip()
        if text:
            return text.splitlines()[0]
    return ""


def _extract_content(data: Any) -> str:  # choices[0].message.content or failure
    if isinstance(data, dict):
        choices = data.get("choices")
        if isinstance(choices, list) and choices:
            message = choices[0].get("message") if isinstance(choices[0], dict) else None
            content = message.get("content") if isinstance(message, dict) else None
            if isinstance(content, str):
                return content
    raise LlmGatewayError("LLM response missing choices[0].message.content")


def strip_code_fences(content: str) -> str:
    """Remove a surrounding ``` / ```json fence from model output."""

    text = content.strip()
    if text.startswith("```"):
        text = _FENCE_OPEN.sub("", text, count=1)
        text = _FENCE_CLOSE.sub("", text, count=1)
    return text.strip()
