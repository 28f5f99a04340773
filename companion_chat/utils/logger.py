"""
Logging utilities for Companion Chat.

Plain records go through the standard ``logging`` tree configured by
``configure_logging``. The request log uses ``StructuredLogger``, which
renders each record as one JSON object so it can be filtered by field.
"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
import json

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def configure_logging(level: str = "INFO") -> None:
    """Attach a stdout handler to the root logger unless one exists."""
    root = logging.getLogger()
    root.setLevel(level)
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)


class StructuredLogger:
    """Logger that emits one JSON object per record.

    Fields passed to ``bind`` are added to every record of the returned
    logger; per-call keyword arguments win over bound fields.
    """

    def __init__(self, name: str, level: int = logging.INFO, **fields: Any):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(level)
        self.fields: Dict[str, Any] = fields

    def bind(self, **fields: Any) -> "StructuredLogger":
        return StructuredLogger(self.logger.name, self.logger.level, **{**self.fields, **fields})

    def _render(self, level: int, message: str, fields: Dict[str, Any]) -> str:
        record = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": logging.getLevelName(level),
            "logger": self.logger.name,
            "message": message,
        }
        record.update(self.fields)
        record.update(fields)
        return json.dumps(record, default=str)

    def log(self, level: int, message: str, **fields: Any) -> None:
        if self.logger.isEnabledFor(level):
            self.logger.log(level, self._render(level, message, fields))

    def debug(self, message: str, **fields: Any) -> None:
        self.log(logging.DEBUG, message, **fields)

    def info(self, message: str, **fields: Any) -> None:
        self.log(logging.INFO, message, **fields)

    def warning(self, message: str, **fields: Any) -> None:
        self.log(logging.WARNING, message, **fields)

    def error(self, message: str, **fields: Any) -> None:
        self.log(logging.ERROR, message, **fields)

    def exception(self, message: str, **fields: Any) -> None:
        """Log at ERROR with the active traceback attached."""
        if self.logger.isEnabledFor(logging.ERROR):
            self.logger.exception(self._render(logging.ERROR, message, {"exception": True, **fields}))


request_logger = StructuredLogger("companion_chat.requests")
