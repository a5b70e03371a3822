"""Structured logging for Storefront.

structlog renders JSON lines in production and a colored console format in
development. Each request carries a correlation ID bound by the HTTP
middleware. Keys that could hold credentials are masked before rendering.
"""

import logging
import sys
import uuid
from typing import Any

import structlog
from structlog.types import EventDict, Processor

from storefront.core.config import Settings, get_settings

REDACTED = "[redacted]"

# Event keys whose values are masked wherever they appear
SENSITIVE_KEYS = frozenset(
    {
        "password",
        "password_hash",
        "access_token",
        "refresh_token",
        "refresh_token_hash",
        "encrypted_refresh_token",
        "token",
        "client_secret",
        "authorization",
    }
)


def redact_sensitive(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    for key in SENSITIVE_KEYS.intersection(event_dict):
        event_dict[key] = REDACTED
    return event_dict


def add_correlation_id(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Give events logged outside a request their own correlation ID."""
    event_dict.setdefault("correlation_id", new_correlation_id())
    return event_dict


def rename_event_to_message(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    if "event" in event_dict:
        event_dict["message"] = event_dict.pop("event")
    return event_dict


def configure_logging(settings: Settings | None = None) -> None:
    """Configure structlog and the stdlib loggers used by uvicorn.

    Args:
        settings: Settings to read the level and format from. Defaults to
            the cached settings.
    """
    settings = settings or get_settings()
    level = getattr(logging, settings.log_level)

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        add_correlation_id,
        redact_sensitive,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    console = settings.is_development or settings.log_format == "console"
    if console:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    else:
        processors += [rename_event_to_message, structlog.processors.JSONRenderer()]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=not console,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    for name in ("uvicorn", "uvicorn.access", "uvicorn.error"):
        logging.getLogger(name).setLevel(level)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Return a lazy logger whose events carry ``logger=<name>``.

    PrintLogger has no name of its own, so the name travels as an initial
    value bound when the logger is first used.
    """
    return structlog.get_logger(logger=name or "storefront")


def new_correlation_id() -> str:
    return f"cid_{uuid.uuid4().hex[:12]}"


def bind_correlation_id(correlation_id: str) -> None:
    structlog.contextvars.bind_contextvars(correlation_id=correlation_id)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
