from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Literal, TypedDict

from pydantic import BaseModel, Field

NO_RESPONSE_TEXT = "No response from AI"


class ChatRequest(BaseModel):
    content: str = Field(..., min_length=1)

    @classmethod
    def from_arguments(cls, arguments: Any) -> ChatRequest | None:
        """
        Pull ``content`` out of tool-call arguments, coercing it to a string.
        Returns None when it is missing or empty.
        Raises TypeError when the arguments are not a mapping.
        """
        if arguments is None:
            arguments = {}
        if not isinstance(arguments, Mapping):
            raise TypeError(f"Arguments must be an object, got {type(arguments).__name__}")
        raw = arguments.get("content")
        content = "" if raw is None else str(raw)
        if not content:
            return None
        return cls(content=content)


class ToolOutcome(TypedDict):
    type: Literal["text", "upstream_error", "request_error"]
    text: str


def text_outcome(text: str | None) -> ToolOutcome:
    return ToolOutcome(type="text", text=text or NO_RESPONSE_TEXT)


def upstream_error(message: str) -> ToolOutcome:
    return ToolOutcome(type="upstream_error", text=message)


def request_error(message: str) -> ToolOutcome:
    return ToolOutcome(type="request_error", text=message)


def render_outcome(outcome: ToolOutcome, display_name: str) -> str:
    """Single place where a tool outcome becomes the text the caller reads."""
    if outcome["type"] == "upstream_error":
        return f"Error communicating with {display_name}: {outcome['text']}"
    if outcome["type"] == "request_error":
        return f"Error processing request: {outcome['text']}"
    return outcome["text"]
