"""Structured logging for the takeoff server.

structlog events are rendered through the stdlib ``logging`` tree onto
stderr. The MCP stdio transport owns stdout, so nothing here may write
to it. IfcOpenShell and mcp records pass through the same formatter.
"""
from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

_configured = False

# Libraries whose INFO chatter would drown per-space events
QUIET_LOGGERS = ("asyncio", "ifcopenshell", "mcp")


def _renderer(log_format: str) -> Any:
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=False)


def configure_logging(
    level: str = "INFO",
    log_format: str = "console",
    log_file: str | None = None,
) -> None:
    """Route structlog and stdlib records to stderr (and optionally a file).

    Safe to call repeatedly; only the first call installs handlers.

    Args:
        level: Root log level name
        log_format: "json" for one object per line, anything else for
            plain key=value console output
        log_file: Extra file sink, e.g. when the MCP client hides stderr
    """
    global _configured
    if _configured:
        return

    pre_chain: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processor=_renderer(log_format),
        foreign_pre_chain=pre_chain,
    )

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    root_logger = logging.getLogger()
    for handler in handlers:
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, level.upper()))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    _configured = True


def setup_logging() -> None:
    """Configure logging from the ``LOG_*`` settings."""
    from ifc_qto.shared.config import settings

    configure_logging(
        level=settings.log_level,
        log_format=settings.log_format,
        log_file=settings.log_file,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a module logger, configuring from settings on first use."""
    if not _configured:
        setup_logging()
    return structlog.get_logger(name)
