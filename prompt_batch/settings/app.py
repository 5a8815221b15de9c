"""Environment defaults powered by Pydantic BaseSettings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from prompt_batch.config.constants import (
    DEFAULT_MODEL,
    DEFAULT_PROMPT_KEY,
    DEFAULT_TIMEOUT_SECONDS,
)


class AppSettings(BaseSettings):
    """Environment variables the CLI falls back to when a flag is absent."""

    model_config = SettingsConfigDict(
        env_prefix="",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    api_key: str | None = Field(default=None, validation_alias="CLAUDE_API_KEY")
    api_url: str | None = Field(default=None, validation_alias="CLAUDE_API_URL")
    model: str = Field(default=DEFAULT_MODEL, validation_alias="MODEL")
    prompt_key: str = Field(default=DEFAULT_PROMPT_KEY, validation_alias="PROMPT_KEY")
    timeout_seconds: float = Field(
        default=DEFAULT_TIMEOUT_SECONDS, validation_alias="TIMEOUT"
    )
