"""LLM route configuration and registry resolution."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, Optional

from pydantic import BaseModel, Field

from .settings import Settings, settings as default_settings

CHAT_ROUTE_KEY = "interview.chat"
FEEDBACK_ROUTE_KEY = "interview.feedback"


class LlmRoute(BaseModel):
    """Chat-completion endpoint configuration."""

    name: str
    base_url: str
    endpoint: str = "/chat/completions"
    model: str
    timeout_s: float = Field(default=30.0, ge=0.1)
    max_retries: int = Field(default=1, ge=0)
    api_key_env: str | None = None
    extra_headers: Dict[str, str] = Field(default_factory=dict)

    @property
    def url(self) -> str:
        return f"{self.base_url.rstrip('/')}{self.endpoint}"

    def api_key(self) -> Optional[str]:
        if not self.api_key_env:
            return None
        return os.getenv(self.api_key_env) or None


class AppConfig(BaseModel):
    """Application configuration root."""

    llm_routes: Dict[str, LlmRoute]
    registry: Dict[str, str]


def load_config(path: Path) -> AppConfig:
    """Load configuration from disk."""

    data = Path(path).read_text(encoding="utf-8")
    return AppConfig.model_validate_json(data)


def resolve_route(cfg: AppConfig, target: str) -> LlmRoute:
    """Return the route bound to ``target`` in the registry.

    Raises:
        KeyError: If the target or its route is not configured.
    """

    if target not in cfg.registry:
        raise KeyError(f"Registry entry missing for '{target}'")
    route_id = cfg.registry[target]
    if route_id not in cfg.llm_routes:
        raise KeyError(f"Route '{route_id}' missing for '{target}'")
    return cfg.llm_routes[route_id]


def default_route(cfg: Optional[Settings] = None, *, name: str = "default") -> LlmRoute:
    """Build a route from environment settings."""

    cfg = cfg or default_settings
    return LlmRoute(
        name=name,
        base_url=cfg.LLM_BASE_URL,
        endpoint=cfg.LLM_ENDPOINT,
        model=cfg.LLM_MODEL,
        timeout_s=cfg.LLM_TIMEOUT_S,
        max_retries=cfg.LLM_MAX_RETRIES,
        api_key_env=cfg.LLM_API_KEY_ENV,
    )


def interview_routes(cfg: Optional[Settings] = None) -> tuple[LlmRoute, LlmRoute]:
    """Return the (chat, feedback) routes, from APP_CONFIG_PATH when set."""

    cfg = cfg or default_settings
    if cfg.APP_CONFIG_PATH:
        app_cfg = load_config(Path(cfg.APP_CONFIG_PATH))
        return resolve_route(app_cfg, CHAT_ROUTE_KEY), resolve_route(app_cfg, FEEDBACK_ROUTE_KEY)
    route = default_route(cfg)
    return route, route


__all__ = [
    "AppConfig",
    "LlmRoute",
    "CHAT_ROUTE_KEY",
    "FEEDBACK_ROUTE_KEY",
    "load_config",
    "resolve_route",
    "default_route",
    "interview_routes",
]
