from __future__ import annotations

import logging
import sys

import structlog


def configure_logging(level: str = "INFO") -> structlog.typing.WrappedLogger:
    # stdout carries the MCP transport; every log line goes to stderr
    logging.basicConfig(level=logging.INFO, stream=sys.stderr, format="%(message)s")
    logging.getLogger().setLevel(level.upper())
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )
    return structlog.get_logger("any_chat_mcp")


log = configure_logging()
