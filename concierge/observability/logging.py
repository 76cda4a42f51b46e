"""Structured logging for concierge sessions.

Events are structlog key/value records. Each session binds its id through
contextvars so every line from the controller, the policies and the
adapters can be tied to one conversation. Credentials and resident
contact details are redacted before rendering.
"""

import logging
import re
import sys
from collections.abc import Mapping
from typing import Any, cast
from uuid import UUID

import structlog
from structlog.types import EventDict, WrappedLogger

from concierge.config.models.observability import LoggingConfig

REDACTED = "[REDACTED]"

# Fields whose values are never logged
SENSITIVE_KEYS: frozenset[str] = frozenset({
    "api_key",
    "key",
    "token",
    "authorization",
    "password",
    "secret",
    "email",
    "phone",
})

# The backend takes its key as a query parameter, so URLs carry it
API_KEY_PARAM_PATTERN = re.compile(r"([?&]key=)[^&\s]+")
EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
PHONE_PATTERN = re.compile(r"\+?\d[\d\-\(\) ]{8,}\d")


def redact_text(value: str) -> str:
    """Mask API keys in URLs and resident emails and phone numbers."""
    value = API_KEY_PARAM_PATTERN.sub(rf"\1{REDACTED}", value)
    value = EMAIL_PATTERN.sub("[EMAIL]", value)
    return PHONE_PATTERN.sub("[PHONE]", value)


class PIIRedactor:
    """structlog processor applying :func:`redact_text` and key masking."""

    def __call__(
        self,
        _logger: WrappedLogger,
        _method_name: str,
        event_dict: EventDict,
    ) -> EventDict:
        return cast(EventDict, self._redact(event_dict))

    def _redact(self, data: Mapping[str, Any]) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for key, value in data.items():
            if key.lower() in SENSITIVE_KEYS:
                result[key] = REDACTED
            elif isinstance(value, Mapping):
                result[key] = self._redact(value)
            elif isinstance(value, str):
                result[key] = redact_text(value)
            elif isinstance(value, list):
                result[key] = [redact_text(v) if isinstance(v, str) else v for v in value]
            else:
                result[key] = value
        return result


def setup_logging(config: LoggingConfig | None = None, debug: bool = False) -> None:
    """Configure structlog from the ``observability.logging`` settings.

    Args:
        config: Level, renderer and redaction switch (defaults if omitted)
        debug: Force DEBUG level, as ``Settings.debug`` does
    """
    config = config or LoggingConfig()
    level = "DEBUG" if debug else config.level

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if config.redact_pii:
        processors.append(PIIRedactor())
    if config.format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelNamesMapping()[level]
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
        cache_logger_on_first_use=True,
    )


def bind_session(session_id: UUID) -> None:
    """Tag every following log line with ``session_id``."""
    structlog.contextvars.bind_contextvars(session_id=str(session_id))


def unbind_session() -> None:
    structlog.contextvars.unbind_contextvars("session_id")


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Logger bound to a module name (pass ``__name__``)."""
    return cast(structlog.stdlib.BoundLogger, structlog.get_logger(name))
