"""Structured logging with a per-invocation run_id.

structlog renders both its own events and plain ``logging`` records
(the journal modules log through ``logging.getLogger``), so every line
a CLI run writes carries the same ``run_id`` and format.
"""

from __future__ import annotations

import logging
import sys
import uuid
from contextvars import ContextVar
from typing import Any

import structlog

_run_id: ContextVar[str] = ContextVar("tradelog_run_id", default="")

# Name of the root handler installed by setup_logging
_HANDLER_NAME = "tradelog"


def get_run_id() -> str:
    """Current run ID; one is minted on first use."""
    rid = _run_id.get()
    if not rid:
        rid = new_run_id()
    return rid


def new_run_id() -> str:
    """Start a new run and return its ID."""
    rid = uuid.uuid4().hex
    _run_id.set(rid)
    return rid


def _add_run_id(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    event_dict.setdefault("run_id", get_run_id())
    return event_dict


def _shared_processors() -> list[Any]:
    """Steps applied to structlog events and stdlib records alike."""
    return [
        structlog.contextvars.merge_contextvars,
        _add_run_id,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]


def setup_logging(
    level: str = "INFO",
    format: str = "console",
) -> None:
    """Route structlog and stdlib logging through one stderr handler.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR).
        format: "json" for one JSON object per line, "console" for humans.

    Calling it again replaces the handler installed by the previous call.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    shared = _shared_processors()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    renderer: Any
    if format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )
    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    for existing in list(root.handlers):
        if existing.get_name() == _HANDLER_NAME:
            root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(log_level)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Structured logger for a module."""
    return structlog.get_logger(name)
