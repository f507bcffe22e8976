"""Structured logging with structlog."""

from __future__ import annotations

import logging
import sys

import structlog


def configure_logging(*, verbose: bool = False, json_logs: bool = False) -> None:
    """Configure structlog on top of the standard logging module.

    Log records go to stderr so reports printed on stdout stay machine
    readable.

    Parameters
    ----------
    verbose : bool, optional
        Emit ``debug`` events (files loaded, rules run) instead of warnings
        and above.
    json_logs : bool, optional
        Render events as JSON lines rather than the coloured console format.
    """
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        format="%(message)s", stream=sys.stderr, level=level, force=True
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    )
    formatter = structlog.stdlib.ProcessorFormatter(processor=renderer)
    for handler in logging.root.handlers:
        handler.setFormatter(formatter)


__all__ = ["configure_logging"]
