"""JSON logging for the API.

Import as ``from app.utils.logger import logger``. Extra fields passed through
``extra=`` end up in the JSON object, except the ones named in SENSITIVE_KEYS.
"""
import json
import logging
import sys
import traceback
from datetime import datetime, timezone
from typing import Any

from app.utils.config import settings


_RESERVED_KEYS = {
    "name", "msg", "args", "created", "filename", "funcName",
    "levelname", "levelno", "lineno", "module", "msecs",
    "pathname", "process", "processName", "relativeCreated",
    "stack_info", "exc_info", "exc_text", "thread", "threadName",
    "taskName", "message",
}


class JSONFormatter(logging.Formatter):
    SENSITIVE_KEYS = {"password", "token", "access_token", "secret", "authorization"}

    def format(self, record: logging.LogRecord) -> str:
        log_obj: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
            "module": record.module,
            "line": record.lineno,
        }

        for key, value in record.__dict__.items():
            if key in _RESERVED_KEYS or key.lower() in self.SENSITIVE_KEYS:
                continue
            log_obj[key] = value

        if record.exc_info:
            log_obj["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "stacktrace": traceback.format_exception(*record.exc_info),
            }

        return json.dumps(log_obj, default=str)


def setup_logger(name: str = settings.app_name) -> logging.Logger:
    log = logging.getLogger(name)
    log.setLevel(settings.log_level.upper())

    # Re-imports must not stack handlers
    if not log.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(JSONFormatter())
        log.addHandler(handler)

    return log


logger = setup_logger()
