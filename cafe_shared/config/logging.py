"""
Structured logging for the ordering core.

Loggers accept keyword context, which formatters render as JSON in
production and as a trailing key=value list everywhere else:

    orders_logger.info("Order paid", order_id=7, total="9.90")
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from cafe_shared.config.settings import settings


class StructuredFormatter(logging.Formatter):
    """One JSON object per line, context under "data"."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        context = getattr(record, "extra_data", None)
        if context:
            log_data["data"] = context
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        if settings.debug:
            log_data["source"] = f"{record.filename}:{record.lineno}"

        return json.dumps(log_data, default=str)


class DevelopmentFormatter(logging.Formatter):
    """Readable single line; warnings and errors are highlighted."""

    HIGHLIGHT = {"WARNING": "\033[33m", "ERROR": "\033[31m", "CRITICAL": "\033[31m"}
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        level = record.levelname
        if level in self.HIGHLIGHT:
            level = f"{self.HIGHLIGHT[level]}{level}{self.RESET}"
        timestamp = datetime.now().strftime("%H:%M:%S")
        message = f"[{timestamp}] {level} {record.name}: {record.getMessage()}"

        context = getattr(record, "extra_data", None)
        if context:
            message += " (" + " | ".join(f"{k}={v}" for k, v in context.items()) + ")"
        if record.exc_info:
            message += f"\n{self.formatException(record.exc_info)}"

        return message


class StructuredLogger(logging.Logger):
    """Logger whose calls take keyword context, stored on the record as extra_data."""

    def _log(
        self,
        level: int,
        msg: object,
        args: Any,
        exc_info: Any = None,
        extra: dict | None = None,
        stack_info: bool = False,
        stacklevel: int = 1,
        **context: Any,
    ) -> None:
        extra = dict(extra or {})
        extra["extra_data"] = context or None
        # Skip this frame so the record points at the real caller
        super()._log(
            level,
            msg,
            args,
            exc_info=exc_info,
            extra=extra,
            stack_info=stack_info,
            stacklevel=stacklevel + 1,
        )


logging.setLoggerClass(StructuredLogger)


def setup_logging() -> None:
    """Install one stdout handler on the root logger. Call once at startup."""
    log_level = logging.DEBUG if settings.debug else logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    if settings.environment == "production":
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(DevelopmentFormatter())

    root = logging.getLogger()
    root.setLevel(log_level)
    root.handlers.clear()
    root.addHandler(handler)

    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.sql_echo else logging.WARNING
    )


def get_logger(name: str) -> StructuredLogger:
    return logging.getLogger(name)  # type: ignore[return-value]


def mask_email(email: str | None) -> str:
    """
    Mask a customer email for the logs: "ada@example.com" -> "ad***@example.com".
    """
    if not email:
        return "<no-email>"
    local, sep, domain = email.partition("@")
    if not sep or not local:
        return "***@invalid"
    return f"{local[:2]}***@{domain}"


orders_logger = get_logger("cafe_ordering.orders")
inventory_logger = get_logger("cafe_ordering.inventory")
loyalty_logger = get_logger("cafe_ordering.loyalty")
security_audit_logger = get_logger("cafe_ordering.security")
