"""
JSON logging for the service.

Every module logs through ``logging.getLogger(__name__)``; this only decides
where the records go and what they look like:

    {"timestamp": "...", "level": "WARNING", "logger": "reconciliation",
     "msg": "Unresolved payment event", "payload": {...}}
"""

import logging
import sys
from typing import Any, Dict

from pythonjsonlogger.json import JsonFormatter

SENSITIVE_KEYS = ("secret_key", "callback_token", "authorization")

_HANDLER_NAME = "booking-payments-json"


class ServiceJsonFormatter(JsonFormatter):
    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["timestamp"] = self.formatTime(record, self.datefmt)
        for key in SENSITIVE_KEYS:
            if key in log_record:
                log_record[key] = "***REDACTED***"


def setup_logging(level: str = "INFO") -> None:
    """Install the JSON handler on the root logger. Safe to call twice."""
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    if any(h.get_name() == _HANDLER_NAME for h in root_logger.handlers):
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(
        ServiceJsonFormatter(
            fmt="%(timestamp)s %(level)s %(logger)s %(message)s",
            rename_fields={"message": "msg"},
        )
    )
    root_logger.addHandler(handler)

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
