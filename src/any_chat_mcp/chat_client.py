"""
Upstream chat client: one user message in, the first completion's text out.
"""

from __future__ import annotations

from typing import Any, Literal, TypedDict

import httpx
from openai import AsyncOpenAI

from any_chat_mcp.config import Settings
from any_chat_mcp.logger import log


class ChatMessage(TypedDict):
    role: Literal["user"]
    content: str


class ChatClient:
    """AsyncOpenAI wrapper bound to the configured endpoint, key and model."""

    def __init__(self, settings: Settings, *, http_client: httpx.AsyncClient | None = None):
        self.model = settings.model
        options: dict[str, Any] = {
            "api_key": settings.key,
            "base_url": settings.base_url,
            # One round trip per tool call
            "max_retries": 0,
        }
        # Leave the SDK default in place unless a timeout is configured
        if settings.timeout is not None:
            options["timeout"] = settings.timeout
        if http_client is not None:
            options["http_client"] = http_client
        self._client = AsyncOpenAI(**options)

    async def complete(self, content: str) -> str | None:
        """
        Send ``content`` as a single user message.
        Returns the first choice's text, or None when the upstream sent none.
        Errors from the SDK propagate to the caller.
        """
        messages: list[ChatMessage] = [{"role": "user", "content": content}]
        log.debug("upstream_request", model=self.model, chars=len(content))

        response = await self._client.chat.completions.create(
            model=self.model,
            messages=messages,  # type: ignore[arg-type]
            stream=False,
        )

        if not response.choices:
            return None
        message = response.choices[0].message
        return message.content if message is not None else None

    async def aclose(self) -> None:
        await self._client.close()
