# tests/conftest.py
from collections.abc import Callable
from unittest.mock import AsyncMock

import httpx
import pytest

from any_chat_mcp.chat_client import ChatClient
from any_chat_mcp.config import Settings
from any_chat_mcp.mcp_server import ChatToolAdapter

TEST_ENV = {
    "AI_CHAT_BASE_URL": "https://upstream.test/v1",
    "AI_CHAT_KEY": "test-key-12345",
    "AI_CHAT_MODEL": "test/model",
    "AI_CHAT_NAME": "My Bot",
}


@pytest.fixture
def settings() -> Settings:
    """Settings built from explicit values, ignoring any local .env file."""
    return Settings(  # type: ignore[call-arg]
        _env_file=None,
        base_url=TEST_ENV["AI_CHAT_BASE_URL"],
        key=TEST_ENV["AI_CHAT_KEY"],
        model=TEST_ENV["AI_CHAT_MODEL"],
        name=TEST_ENV["AI_CHAT_NAME"],
    )


@pytest.fixture
def mock_client() -> AsyncMock:
    """Stand-in for ChatClient; set .complete.return_value / .side_effect per test."""
    client = AsyncMock(spec=ChatClient)
    client.complete.return_value = "Hello"
    return client


@pytest.fixture
def adapter(settings: Settings, mock_client: AsyncMock) -> ChatToolAdapter:
    return ChatToolAdapter(settings, mock_client)


@pytest.fixture
def upstream_client(
    settings: Settings,
) -> Callable[[Callable[[httpx.Request], httpx.Response]], ChatClient]:
    """Build a real ChatClient whose HTTP traffic goes to an in-process handler."""

    def build(handler: Callable[[httpx.Request], httpx.Response]) -> ChatClient:
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return ChatClient(settings, http_client=http_client)

    return build
