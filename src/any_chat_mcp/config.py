# src/any_chat_mcp/config.py
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_PREFIX = "AI_CHAT_"
REQUIRED_FIELDS = ("base_url", "key", "model", "name")


class Settings(BaseSettings):
    # Pydantic v2 settings config
    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    # ---------- Upstream ----------
    # Env var auto-maps from AI_CHAT_BASE_URL, AI_CHAT_KEY, AI_CHAT_MODEL, AI_CHAT_NAME
    base_url: str = Field(..., description="Base URL of the OpenAI-compatible API")
    key: str = Field(..., description="API key for the upstream")
    model: str = Field(..., description="Model identifier to request")
    name: str = Field(..., description="Display name used in tool naming")

    # None leaves the openai SDK default in place
    timeout: float | None = Field(default=None, description="Upstream timeout in seconds")

    # ---------- Logging ----------
    log_level: str = Field(default="INFO")

    # ---------- Validators ----------
    @field_validator(*REQUIRED_FIELDS)
    @classmethod
    def _non_empty(cls, v: str, info: Any) -> str:
        if not v:
            raise ValueError(f"{env_name(info.field_name)} is required")
        return v

    # ---------- Helpers ----------
    @property
    def tool_slug(self) -> str:
        """
        Lower-cased display name with the first space turned into a hyphen.
        "My Bot" -> "my-bot", "My Big Bot" -> "my-big bot".
        """
        return self.name.lower().replace(" ", "-", 1)

    @property
    def tool_name(self) -> str:
        return f"chat-with-{self.tool_slug}"


class MissingSettings(BaseModel):
    """Required variables that were absent or empty, in env-var spelling."""

    missing: list[str]

    def messages(self) -> list[str]:
        return [f"{variable} is required" for variable in self.missing]


def env_name(field_name: str) -> str:
    return f"{ENV_PREFIX}{field_name.upper()}"


def load_settings(env_file: str | None = ".env") -> Settings | MissingSettings:
    """
    Read settings from the environment (and ``env_file`` when present).

    Never exits; a missing or empty required variable is reported through
    ``MissingSettings`` so the caller decides what to do about it.
    """
    try:
        return Settings(_env_file=env_file)  # type: ignore[call-arg]
    except ValidationError as exc:
        failed = {str(error["loc"][0]) for error in exc.errors() if error["loc"]}
        missing = [env_name(field) for field in REQUIRED_FIELDS if field in failed]
        if not missing:
            # Only optional fields failed: nothing is missing, the value is bad
            raise
        return MissingSettings(missing=missing)
