"""Structured logging setup using structlog."""

from __future__ import annotations

import logging
import re
import sys
from typing import Any

import structlog


_SENSITIVE_PATTERNS = [
    re.compile(r"(token|key|secret|password|authorization)[\"']?\s*[:=]\s*[\"']?[\w\-\.]+", re.IGNORECASE),
]

# Teams incoming-webhook URLs carry their credential in the path.
_WEBHOOK_PATH = re.compile(r"(/(?:webhookb2|IncomingWebhook)/)[^\s\"']+", re.IGNORECASE)

_CLEF_LEVELS = {
    "debug": "Debug",
    "info": "Information",
    "warning": "Warning",
    "error": "Error",
    "critical": "Fatal",
}


def _filter_sensitive(
    _logger: structlog.types.WrappedLogger,
    _method: str,
    event_dict: structlog.types.EventDict,
) -> structlog.types.EventDict:
    for key, value in list(event_dict.items()):
        if not isinstance(value, str):
            continue
        for pattern in _SENSITIVE_PATTERNS:
            if pattern.search(value):
                value = pattern.sub(r"\1=***REDACTED***", value)
        value = _WEBHOOK_PATH.sub(r"\1***REDACTED***", value)
        event_dict[key] = value
    return event_dict


def _to_clef(
    _logger: structlog.types.WrappedLogger,
    _method: str,
    event_dict: structlog.types.EventDict,
) -> structlog.types.EventDict:
    """Reshape an event dict into Seq's compact log event format."""
    clef: dict[str, Any] = {
        "@t": event_dict.pop("timestamp", None),
        "@m": event_dict.pop("event", ""),
    }
    level = event_dict.pop("level", "info")
    # CLEF treats a missing @l as Information
    if level != "info":
        clef["@l"] = _CLEF_LEVELS.get(level, level.capitalize())
    exception = event_dict.pop("exception", None)
    if exception:
        clef["@x"] = exception
    logger_name = event_dict.pop("logger", None)
    if logger_name:
        clef["SourceContext"] = logger_name
    for key, value in event_dict.items():
        clef["@" + key if key.startswith("@") else key] = value
    return clef


def setup_logging(level: str = "INFO", fmt: str = "console") -> None:
    """Configure structlog; ``fmt`` is one of console, json or clef."""
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        _filter_sensitive,
    ]

    render_processors: list[structlog.types.Processor]
    if fmt == "clef":
        render_processors = [
            structlog.processors.format_exc_info,
            _to_clef,
            structlog.processors.JSONRenderer(),
        ]
    elif fmt == "json":
        render_processors = [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        render_processors = [structlog.dev.ConsoleRenderer()]

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # Seq reads app diagnostics from stderr; stdout stays free
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                *render_processors,
            ],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(numeric_level)

    # Quiet noisy libraries
    for name in ("httpx", "httpcore", "aiohttp.access"):
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
