"""
Structured logging for the Expense Tracker API.

Entries are rendered as one JSON object per line. Besides the event name,
level, logger and ISO ``timestamp``, every entry emitted while a request is
being served carries its ``request_id``; routes that know which user they
act for bind ``user_id`` as well.

Storage errors are logged here with their original message; clients only
ever receive the generic text of the failing endpoint.
"""
import logging
import sys
import time
import uuid
from typing import Any, Optional

import structlog


def configure_logging(level: str = "INFO") -> None:
    """Route structlog through the stdlib root logger as JSON lines."""
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level.upper())

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", key="timestamp"),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def set_request_context(request_id: str) -> None:
    """Start a fresh log context for an incoming request."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(request_id=request_id)


def set_user_context(user_id: str) -> None:
    """Attach a user id to the current request's log entries."""
    structlog.contextvars.bind_contextvars(user_id=user_id)


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()


def generate_request_id() -> str:
    return str(uuid.uuid4())


class TimedOperation:
    """
    Time a block and log ``<event>_completed`` or ``<event>_failed``.

    Exceptions are logged and then propagate unchanged.
    """

    def __init__(
        self,
        event: str,
        logger: Optional[structlog.stdlib.BoundLogger] = None,
        **fields: Any,
    ):
        self.event = event
        self.logger = logger or get_logger()
        self.fields = fields
        self.duration_ms: float = 0
        self._started: float = 0

    def __enter__(self) -> "TimedOperation":
        self._started = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.duration_ms = round((time.perf_counter() - self._started) * 1000, 2)
        if exc_type is None:
            self.logger.info(f"{self.event}_completed", duration_ms=self.duration_ms, **self.fields)
        else:
            self.logger.error(
                f"{self.event}_failed",
                duration_ms=self.duration_ms,
                error=str(exc_val),
                **self.fields,
            )
