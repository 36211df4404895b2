from __future__ import annotations

import asyncio
import logging
import os
import signal
import sys
from collections.abc import Callable
from typing import Any

import anyio
from anyio.abc import TaskStatus
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from any_chat_mcp.chat_client import ChatClient
from any_chat_mcp.config import MissingSettings, Settings, load_settings
from any_chat_mcp.logger import configure_logging, log
from any_chat_mcp.mcp_server import ChatToolAdapter, create_server


def _hard_exit(status: int) -> None:  # pragma: no cover
    # The stdio reader blocks in a worker thread that cancellation cannot reach
    logging.shutdown()
    os._exit(status)


class ProcessContext:
    """Everything the running process owns, handed to setup and shutdown alike."""

    def __init__(
        self,
        settings: Settings,
        adapter: ChatToolAdapter,
        server: Server,
        *,
        exit_process: Callable[[int], None] = _hard_exit,
    ):
        self.settings = settings
        self.adapter = adapter
        self.server = server
        self.exit_process = exit_process
        self.cancel_scope: anyio.CancelScope | None = None
        self.shutdown_task: asyncio.Task[None] | None = None
        self.started = False
        self._closing = False

    @classmethod
    def build(cls, settings: Settings, **kwargs: Any) -> ProcessContext:
        adapter = ChatToolAdapter(settings, ChatClient(settings))
        return cls(settings, adapter, create_server(adapter), **kwargs)

    async def shutdown(self) -> None:
        """Close the transport and upstream client, then exit with status 0."""
        if self._closing:
            return
        self._closing = True
        log.info("shutting_down")
        try:
            # Close before cancelling: the caller may live inside cancel_scope
            await self.adapter.client.aclose()
        except Exception:
            log.exception("shutdown_error")
        finally:
            if self.cancel_scope is not None:
                self.cancel_scope.cancel()
            self.exit_process(0)


async def _watch_signals(
    context: ProcessContext, *, task_status: TaskStatus[None] = anyio.TASK_STATUS_IGNORED
) -> None:
    with anyio.open_signal_receiver(signal.SIGINT, signal.SIGTERM) as signals:
        task_status.started()
        async for signum in signals:
            log.info("signal_received", signal=signal.Signals(signum).name)
            await context.shutdown()
            return


def _install_async_error_handler(context: ProcessContext) -> None:
    loop = asyncio.get_running_loop()

    def handle(_loop: asyncio.AbstractEventLoop, details: dict[str, Any]) -> None:
        log.error(
            "unhandled_async_error",
            message=details.get("message"),
            error=repr(details.get("exception")),
        )
        if context.shutdown_task is None:
            context.shutdown_task = loop.create_task(context.shutdown())

    loop.set_exception_handler(handle)


async def serve(context: ProcessContext) -> None:
    """Serve MCP over stdin/stdout until stdin closes or shutdown cancels us."""
    async with anyio.create_task_group() as tg:
        context.cancel_scope = tg.cancel_scope
        await tg.start(_watch_signals, context)
        _install_async_error_handler(context)

        async with stdio_server() as (read_stream, write_stream):
            context.started = True
            log.info(
                "server_started",
                tool=context.settings.tool_name,
                model=context.settings.model,
            )
            await context.server.run(
                read_stream,
                write_stream,
                context.server.create_initialization_options(),
            )

        tg.cancel_scope.cancel()


async def run(context: ProcessContext) -> int:
    try:
        await serve(context)
    except asyncio.CancelledError:
        raise
    except Exception:
        if not context.started:
            log.exception("server_connection_error")
            return 1
        log.exception("uncaught_exception")
    await context.shutdown()
    return 0


def main() -> int:
    """Entry point for the MCP server."""
    settings = load_settings()
    if isinstance(settings, MissingSettings):
        for message in settings.messages():
            log.error("missing_configuration", error=message)
        return 1

    try:
        configure_logging(settings.log_level)
        context = ProcessContext.build(settings)
    except Exception:
        log.exception("server_setup_error")
        return 1

    return anyio.run(run, context)


if __name__ == "__main__":  # allows: python -m any_chat_mcp.main
    sys.exit(main())
