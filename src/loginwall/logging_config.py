# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""structlog + stdlib bridge for detection logs.

Leaf module, no loginwall imports.  Importing loginwall never configures
logging; the embedding crawler calls ``configure`` once at startup, either
for the whole process (root logger) or scoped to the ``loginwall`` logger
so its own handlers stay untouched.
"""

from __future__ import annotations

import logging
import sys

import structlog

LIBRARY_LOGGER = "loginwall"

_SHARED_PROCESSORS: tuple = (
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.format_exc_info,
    structlog.processors.UnicodeDecoder(),
)


def _formatter(json_output: bool) -> structlog.stdlib.ProcessorFormatter:
    renderer = structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer()
    return structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
        foreign_pre_chain=list(_SHARED_PROCESSORS),
    )


def configure(*, json_output: bool = False, level: str = "INFO", library_only: bool = False) -> logging.Logger:
    """Route stdlib and structlog records through one stderr handler.

    Args:
        json_output: True for JSON lines (log shipping), False for console output.
        level: Log level name; unknown names fall back to INFO.
        library_only: attach to the ``loginwall`` logger (no propagation)
            instead of replacing the root logger's handlers.

    Returns:
        The logger the handler was attached to.
    """
    structlog.configure(
        processors=[
            *_SHARED_PROCESSORS,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(_formatter(json_output))

    target = logging.getLogger(LIBRARY_LOGGER if library_only else None)
    target.handlers.clear()
    target.addHandler(handler)
    target.setLevel(getattr(logging, level.upper(), logging.INFO))
    if library_only:
        target.propagate = False
    return target
