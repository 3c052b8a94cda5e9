"""JSON structured logging for the ORB Showcase API and CLI.

Every record is one JSON object carrying the emitting service, its level and
source location, and the correlation ID of the request or CLI command that
produced it. Formatting is done by python-json-logger.
"""

import logging
import sys
from typing import Any, TextIO

from pythonjsonlogger.json import JsonFormatter

from packages.common.config import get_config
from packages.common.tracing import get_correlation_id

LOG_FORMAT = "%(timestamp)s %(level)s %(module)s %(function)s %(message)s"


class CorrelationIdFilter(logging.Filter):
    """Stamp each record with the active correlation ID (``None`` outside a context)."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = get_correlation_id()
        return True


class CustomJsonFormatter(JsonFormatter):
    """JSON formatter for catalog logs.

    Adds ``service``, ``timestamp``, ``level``, ``module``, ``function``,
    ``line`` and, when a request or command is being traced,
    ``correlation_id``.
    """

    def __init__(self, *args: Any, service: str = "orb-showcase", **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.service = service

    def add_fields(
        self,
        log_record: dict[str, Any],
        record: logging.LogRecord,
        message_dict: dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record["service"] = self.service
        log_record["timestamp"] = record.created
        log_record["level"] = record.levelname
        log_record["module"] = record.module
        log_record["function"] = record.funcName
        log_record["line"] = record.lineno

        correlation_id = getattr(record, "correlation_id", None)
        if correlation_id is not None:
            log_record["correlation_id"] = correlation_id


def setup_logging(
    level: str | None = None,
    stream: TextIO | None = None,
    service: str = "orb-showcase",
) -> None:
    """Route all logging through one JSON handler on the root logger.

    Replaces any handlers already installed, so calling it twice does not
    duplicate output.

    Args:
        level: Log level name. Defaults to ``LOG_LEVEL`` from config.
        stream: Where JSON lines go. Defaults to stdout; the CLI passes stderr
            so logs never interleave with rendered tables.
        service: Value of the ``service`` field on every record.
    """
    log_level = (level or get_config().log_level).upper()

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setLevel(log_level)
    handler.setFormatter(CustomJsonFormatter(LOG_FORMAT, service=service))
    handler.addFilter(CorrelationIdFilter())

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """Module logger; configure output once with :func:`setup_logging`."""
    return logging.getLogger(name)


__all__ = ["CorrelationIdFilter", "CustomJsonFormatter", "LOG_FORMAT", "get_logger", "setup_logging"]
