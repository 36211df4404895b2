from __future__ import annotations

import asyncio

from openai import APIError


def describe_upstream_error(e: BaseException) -> str:
    """Message shown after "Error communicating with <name>: ".

    IMPORTANT: This will re-raise asyncio.CancelledError so a shutdown is never
    reported as a chat reply.
    """
    if isinstance(e, asyncio.CancelledError):
        raise e

    # OpenAI SDK errors carry the upstream message; status, timeout and
    # connection errors are all APIError subclasses
    if isinstance(e, APIError):
        message = getattr(e, "message", None) or str(e)
    else:
        message = str(e)

    return message or "Unknown error"
