"""Configuration package for the interview engine."""
from .routes import (
    CHAT_ROUTE_KEY,
    FEEDBACK_ROUTE_KEY,
    AppConfig,
    LlmRoute,
    default_route,
    interview_routes,
    load_config,
    resolve_route,
)
from .settings import Settings, settings

__all__ = [
    "AppConfig",
    "LlmRoute",
    "CHAT_ROUTE_KEY",
    "FEEDBACK_ROUTE_KEY",
    "default_route",
    "interview_routes",
    "load_config",
    "resolve_route",
    "Settings",
    "settings",
]
