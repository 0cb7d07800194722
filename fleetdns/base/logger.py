"""
Structured logging for fleetdns.

Provides a pre-configured logger that emits JSON-structured log records
with reconciliation context (instance, zone, hostname, operation) so a
single event can be followed through CloudWatch or any log aggregator.
"""

from __future__ import annotations

import json
import logging
import uuid
from typing import Any

_CONTEXT_KEYS = ("request_id", "instance_id", "zone_id", "hostname", "operation")


class StructuredFormatter(logging.Formatter):
    """Emit log records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        # Attach any extras injected via FleetLogger.log_operation
        for key in _CONTEXT_KEYS:
            val = getattr(record, key, None)
            if val is not None:
                log_entry[key] = val
        if record.exc_info and record.exc_info[1]:
            log_entry["exception"] = str(record.exc_info[1])
        return json.dumps(log_entry)


class FleetLogger:
    """Convenience wrapper around :mod:`logging` for reconciliation steps."""

    def __init__(self, name: str = "fleetdns") -> None:
        self.logger = logging.getLogger(name)
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(StructuredFormatter())
            self.logger.addHandler(handler)
            self.logger.setLevel(logging.INFO)

    def log_operation(
        self,
        level: int,
        message: str,
        *,
        instance_id: str | None = None,
        zone_id: str | None = None,
        hostname: str | None = None,
        operation: str | None = None,
        request_id: str | None = None,
        exc_info: bool = False,
    ) -> None:
        """Emit a structured log record with reconciliation context.

        Args:
            level: Logging level (e.g. logging.INFO).
            message: Human-readable message.
            instance_id: Instance the event is about.
            zone_id: Hosted zone being reconciled.
            hostname: Hostname (tag or allocated) in play.
            operation: Step name (e.g. 'decide', 'apply', 'prune').
            request_id: Optional correlation ID; auto-generated if omitted.
            exc_info: Whether to include exception info.
        """
        extra = {
            "instance_id": instance_id,
            "zone_id": zone_id,
            "hostname": hostname,
            "operation": operation,
            "request_id": request_id or uuid.uuid4().hex[:12],
        }
        self.logger.log(level, message, extra=extra, exc_info=exc_info)

    def info(self, message: str, **kwargs: Any) -> None:
        self.log_operation(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self.log_operation(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self.log_operation(logging.ERROR, message, **kwargs)

    def debug(self, message: str, **kwargs: Any) -> None:
        self.log_operation(logging.DEBUG, message, **kwargs)


# Module-level singleton
log = FleetLogger()
