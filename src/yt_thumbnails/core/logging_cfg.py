"""Logging setup: one JSON object per line on stdout."""
from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

# Record attributes copied into the payload under a camelCase key when set via ``extra``
_EXTRA_FIELDS: dict[str, str] = {"video_id": "videoId"}

# Third-party loggers that are only interesting when debugging
_CHATTY_LOGGERS: tuple[str, ...] = ("httpx", "httpcore", "uvicorn.access")


class JsonFormatter(logging.Formatter):
    """Render records as JSON, carrying the video id of probe logs when present."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "level": record.levelname,
            "time": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "name": record.name,
            "message": record.getMessage(),
            "line": record.lineno,
        }
        for attr, key in _EXTRA_FIELDS.items():
            value: Any = getattr(record, attr, None)
            if value is not None:
                payload[key] = value
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def setup_logging(debug: bool) -> None:
    """Route all logging through a single JSON stdout handler.

    Parameters
    ----------
    debug: bool
        Log at DEBUG, including each existence check and the HTTP client's
        request lines; otherwise INFO with chatty loggers held at WARNING.
    """

    level: int = logging.DEBUG if debug else logging.INFO
    handler: logging.Handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter())

    root_logger: logging.Logger = logging.getLogger()
    root_logger.setLevel(level)
    for h in list(root_logger.handlers):
        root_logger.removeHandler(h)
    root_logger.addHandler(handler)

    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(level if debug else logging.WARNING)
    logging.getLogger("uvicorn").setLevel(level)
