# src/any_chat_mcp/mcp_server.py
from __future__ import annotations

import asyncio
from typing import Any

import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.shared.exceptions import McpError
from pydantic import AnyUrl

from any_chat_mcp.chat_client import ChatClient
from any_chat_mcp.config import Settings
from any_chat_mcp.errors import describe_upstream_error
from any_chat_mcp.logger import log
from any_chat_mcp.schemas import (
    ChatRequest,
    ToolOutcome,
    render_outcome,
    request_error,
    text_outcome,
    upstream_error,
)

SERVER_NAME = "any-chat-completions-mcp"
SERVER_VERSION = "0.1.0"


class ChatToolAdapter:
    """
    MCP handlers for the single chat tool.
    Keep this thin: the upstream call lives in ChatClient.
    """

    def __init__(self, settings: Settings, client: ChatClient):
        self.settings = settings
        self.client = client

    @property
    def tool_name(self) -> str:
        return self.settings.tool_name

    # ---------- Resources ----------

    async def list_resources(self) -> list[types.Resource]:
        return []

    async def read_resource(self, uri: AnyUrl) -> str:
        raise McpError(types.ErrorData(code=types.INVALID_PARAMS, message="Resource not found"))

    # ---------- Tools ----------

    def tool(self) -> types.Tool:
        name = self.settings.name
        return types.Tool(
            name=self.tool_name,
            description=f"Text chat with {name}",
            inputSchema={
                "type": "object",
                "properties": {
                    "content": {
                        "type": "string",
                        "description": f"The content of the chat to send to {name}",
                    }
                },
                "required": ["content"],
            },
        )

    async def list_tools(self) -> list[types.Tool]:
        return [self.tool()]

    async def call_tool(self, name: str, arguments: Any) -> list[types.TextContent]:
        outcome = await self.run_tool(name, arguments)
        text = render_outcome(outcome, self.settings.name)
        return [types.TextContent(type="text", text=text)]

    async def run_tool(self, name: str, arguments: Any) -> ToolOutcome:
        """Resolve one tool call to a tagged outcome. Never raises except on cancellation."""
        try:
            if name != self.tool_name:
                log.warning("tool_call_failed", tool=name, error="Unknown tool")
                return request_error("Unknown tool")

            request = ChatRequest.from_arguments(arguments)
            if request is None:
                log.warning("tool_call_failed", tool=name, error="Content is required")
                return request_error("Content is required")

            try:
                text = await self.client.complete(request.content)
            except asyncio.CancelledError:
                raise
            except Exception as e:
                log.exception("upstream_error", tool=name, model=self.settings.model)
                return upstream_error(describe_upstream_error(e))

            return text_outcome(text)
        except asyncio.CancelledError:
            # Re-raise cancellation to allow proper cleanup
            raise
        except Exception as e:
            log.exception("tool_call_failed", tool=name)
            return request_error(str(e) or "Unknown error")

    # ---------- Prompts ----------

    async def list_prompts(self) -> list[types.Prompt]:
        return []

    async def get_prompt(
        self, name: str, arguments: dict[str, str] | None
    ) -> types.GetPromptResult:
        raise McpError(types.ErrorData(code=types.INVALID_PARAMS, message="Unknown prompt"))

    # ---------- Wiring ----------

    def register(self, server: Server) -> Server:
        server.list_resources()(self.list_resources)
        server.read_resource()(self.read_resource)
        server.list_tools()(self.list_tools)
        # Validation happens in run_tool so failures come back as text
        server.call_tool(validate_input=False)(self.call_tool)
        server.list_prompts()(self.list_prompts)
        server.get_prompt()(self.get_prompt)
        return server


def create_server(adapter: ChatToolAdapter) -> Server:
    """Build the MCP server with every handler registered."""
    server: Server = Server(SERVER_NAME, version=SERVER_VERSION)
    return adapter.register(server)
