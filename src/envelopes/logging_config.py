"""Console logging for the envelopes package, plain or JSON."""

import json
import logging
from datetime import datetime, timezone
from typing import Union

LOGGER_NAME = "envelopes"


class JSONFormatter(logging.Formatter):
    """Format log records as one JSON object per line."""

    # LogRecord attributes that are not ``extra`` fields
    _STANDARD_ATTRS = set(vars(logging.makeLogRecord({}))) | {"message", "asctime"}

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": self.formatException(record.exc_info),
            }

        extra_fields = {
            key: value
            for key, value in record.__dict__.items()
            if key not in self._STANDARD_ATTRS
        }
        if extra_fields:
            log_data["extra"] = extra_fields

        return json.dumps(log_data, default=str)


def setup_logging(level: Union[int, str] = logging.WARNING, json_format: bool = False) -> logging.Logger:
    """Install a console handler on the ``envelopes`` logger.

    Calling it again replaces the previous handler.

    Args:
        level: Level name ("INFO") or number
        json_format: Emit JSON records instead of human-readable lines

    Returns:
        The configured package logger
    """
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level}")
        level = resolved

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.handlers.clear()

    handler = logging.StreamHandler()
    handler.setLevel(level)
    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
    logger.addHandler(handler)
    return logger
