"""Application settings and configuration management."""
from __future__ import annotations

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables or defaults."""

    LLM_BASE_URL: str = "https://open.bigmodel.cn/api/paas/v4"
    LLM_ENDPOINT: str = "/chat/completions"
    LLM_MODEL: str = "glm-4-flash"
    LLM_API_KEY_ENV: str = "LLM_API_KEY"
    LLM_TIMEOUT_S: float = Field(default=30.0, ge=0.1)
    LLM_MAX_RETRIES: int = Field(default=1, ge=0)

    TURN_TIMEOUT_S: float = Field(default=45.0, gt=0)
    MOCK_DELAY_S: float = Field(default=0.0, ge=0)
    RANDOM_SEED: Optional[int] = None

    APP_CONFIG_PATH: Optional[str] = None

    model_config = SettingsConfigDict(env_file=".env", validate_assignment=True, extra="ignore")


settings = Settings()
