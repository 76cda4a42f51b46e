"""Observability: structured logging with session context and redaction."""

from concierge.observability.logging import (
    PIIRedactor,
    bind_session,
    get_logger,
    setup_logging,
    unbind_session,
)

__all__ = ["PIIRedactor", "bind_session", "get_logger", "setup_logging", "unbind_session"]
