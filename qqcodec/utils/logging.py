"""structlog configuration, secret redaction and per-message log context."""

from __future__ import annotations

import logging
import re
import sys
from contextlib import AbstractContextManager
from typing import Any, Mapping, TextIO

import structlog

REDACTED = "***"

# Field names whose values are never logged (compared lowercased)
_SENSITIVE_KEYS = frozenset(
    {"access_token", "authorization", "client_secret", "clientsecret", "secret", "token"}
)

# Secrets embedded in free text: auth headers and echoed token/secret JSON bodies
_SENSITIVE_VALUES = (
    re.compile(r"(QQBot\s+)[^\s\"',}]+"),
    re.compile(
        r"(\"?(?:access_token|clientSecret|client_secret)\"?\s*[:=]\s*\"?)[^\s\"',}]+",
        re.IGNORECASE,
    ),
)


def _redact(value: Any) -> Any:
    if isinstance(value, str):
        for pattern in _SENSITIVE_VALUES:
            value = pattern.sub(rf"\g<1>{REDACTED}", value)
        return value
    if isinstance(value, Mapping):
        return {
            k: REDACTED if str(k).lower() in _SENSITIVE_KEYS else _redact(v)
            for k, v in value.items()
        }
    if isinstance(value, list):
        return [_redact(v) for v in value]
    if isinstance(value, tuple):
        return tuple(_redact(v) for v in value)
    return value


def redact_secrets(
    _logger: structlog.types.WrappedLogger,
    _method: str,
    event_dict: structlog.types.EventDict,
) -> structlog.types.EventDict:
    """Mask bot credentials by field name and by the shapes they take in text."""
    for key, value in list(event_dict.items()):
        if key.lower() in _SENSITIVE_KEYS:
            event_dict[key] = REDACTED
        else:
            event_dict[key] = _redact(value)
    return event_dict


def message_context(**fields: Any) -> AbstractContextManager[Any]:
    """Bind message identifiers to every log line emitted inside the block.

    ``None`` values are skipped so callers can pass optional ids straight through.
    """
    return structlog.contextvars.bound_contextvars(
        **{k: v for k, v in fields.items() if v is not None}
    )


def setup_logging(
    level: str = "INFO", json_output: bool = False, stream: TextIO | None = None
) -> None:
    """Route structlog and stdlib logging through one redacting handler."""
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        redact_secrets,
    ]

    if json_output:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(numeric_level)

    # httpx logs every request line at INFO
    for name in ("httpx", "httpcore"):
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))

    if numeric_level <= logging.DEBUG:
        get_logger(__name__).warning("debug_logging_enabled", note="message content is logged")


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
