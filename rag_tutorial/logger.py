"""
Name: Structured Logger

Responsibilities:
  - Emit one JSON object per log line on stdout
  - Merge request context (request_id, method, path) and call-site extras
  - Drop secret-looking extras before they reach the output

Collaborators:
  - context.py: request context
  - main.py: applies Settings.log_level at startup

Notes:
  - Import as: from rag_tutorial.logger import logger
  - Extras must not reuse LogRecord attribute names ("message", "filename",
    "module", ...); logging raises KeyError for those
"""

import json
import logging
import sys
import traceback
from datetime import datetime, timezone
from typing import Any, Dict

from .context import get_context_dict

# R: Attributes every LogRecord has; anything else on a record is an extra
_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))
) | {"message", "asctime", "taskName"}

SENSITIVE_KEYS = frozenset(
    {
        "password",
        "secret",
        "token",
        "authorization",
        "api_key",
        "google_api_key",
        "storm_api_key",
    }
)


def _exception_payload(exc_info) -> Dict[str, Any]:
    exc_type, exc_value, _ = exc_info
    return {
        "type": exc_type.__name__ if exc_type else None,
        "message": str(exc_value) if exc_value else None,
        "stacktrace": traceback.format_exception(*exc_info),
    }


class JSONFormatter(logging.Formatter):
    """R: logging.Formatter producing JSON enriched with request context."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            **get_context_dict(),
        }

        payload.update(
            (key, value)
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRS and key.lower() not in SENSITIVE_KEYS
        )

        if record.exc_info:
            payload["exception"] = _exception_payload(record.exc_info)

        return json.dumps(payload, default=str)


def setup_logger(name: str = "rag-tutorial", level: str = "INFO") -> logging.Logger:
    log = logging.getLogger(name)
    log.setLevel(level)
    if not log.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(JSONFormatter())
        log.addHandler(handler)
    return log


logger = setup_logger()
