"""
Structured logging for tender-award.

structlog on top of stdlib logging: console output while developing, JSON in
production, and a run id bound to every event of one pipeline run.
"""

import contextvars
import logging
import os
import secrets
import sys
import time
from typing import Any

import structlog

# Identifies one pipeline run across worker threads
run_id_var: contextvars.ContextVar[str] = contextvars.ContextVar("run_id", default="")


def generate_run_id() -> str:
    """Generate a short URL-safe run id (64 bits of entropy)."""
    return secrets.token_urlsafe(8)


def get_run_id() -> str:
    """Get the current run id, creating one if none is bound yet."""
    rid = run_id_var.get()
    if not rid:
        rid = generate_run_id()
        run_id_var.set(rid)
    return rid


def set_run_id(run_id: str) -> None:
    """Bind a run id to the current context."""
    run_id_var.set(run_id)


def add_run_id(
    logger: logging.Logger, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """structlog processor adding the run id to each event."""
    event_dict["run_id"] = get_run_id()
    return event_dict


def configure_logging(
    *,
    json_output: bool = False,
    log_level: str = "INFO",
) -> None:
    """
    Configure structured logging for the application.

    Args:
        json_output: Emit JSON lines (production) instead of coloured console output
        log_level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    level = getattr(logging, log_level.upper())

    # stderr keeps stdout clean for JSON reports printed by the CLI
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=level,
    )

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        add_run_id,
    ]

    if json_output:
        processors = shared_processors + [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = shared_processors + [
            structlog.processors.ExceptionRenderer(),
            structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger for the given module.

    Args:
        name: Logger name (typically __name__)
    """
    return structlog.get_logger(name)


def is_production() -> bool:
    """True when the ENVIRONMENT variable says 'production'."""
    return os.getenv("ENVIRONMENT", "development").lower() == "production"


# Commercially sensitive values kept out of operation logs
REDACTED_FIELDS = {
    "price",
    "bid_price",
    "base_price",
    "award_value",
    "annual_revenue",
}


def redact_context(context: dict[str, Any]) -> dict[str, Any]:
    """
    Redact commercially sensitive fields from log context.

    Example:
        >>> redact_context({"base_price": "1200000", "plans": 8})
        {'base_price': '***REDACTED***', 'plans': 8}
    """
    return {
        k: "***REDACTED***" if k in REDACTED_FIELDS else v
        for k, v in context.items()
    }


class LogOperation:
    """Context manager logging start, completion or failure of a stage with timing."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger,
        operation: str,
        **context: Any,
    ):
        """
        Args:
            logger: Structured logger instance
            operation: Operation name (e.g. "compute_din277", "collect_bids")
            **context: Additional context to include in the log events
        """
        self.logger = logger
        self.operation = operation
        self.context = context
        self.start_time: float = 0.0
        self.duration_seconds: float = 0.0

    def __enter__(self) -> "LogOperation":
        self.start_time = time.perf_counter()
        self.logger.info(
            f"{self.operation} started",
            operation=self.operation,
            **redact_context(self.context),
        )
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        self.duration_seconds = time.perf_counter() - self.start_time
        redacted = redact_context(self.context)

        if exc_type is None:
            self.logger.info(
                f"{self.operation} completed",
                operation=self.operation,
                duration_ms=round(self.duration_seconds * 1000, 2),
                **redacted,
            )
        else:
            self.logger.error(
                f"{self.operation} failed",
                operation=self.operation,
                duration_ms=round(self.duration_seconds * 1000, 2),
                error=str(exc_val),
                exc_info=not is_production(),
                **redacted,
            )
