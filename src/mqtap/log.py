"""Logging setup for the mqtap command line tools.

Library modules only ever call ``logging.getLogger(__name__)``; handlers and
formatting are installed once, by :func:`setup_logging`, from the entry point.
Log records go to stderr so that they never interleave with message output on
stdout.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional

from . import json


class JsonFormatter(logging.Formatter):
    """Serialise log records to one JSON object per line."""

    #: Attributes of :class:`logging.LogRecord` that are not merged into the
    #: JSON object when collecting ``extra`` fields.
    _RESERVED = {
        "args",
        "asctime",
        "created",
        "exc_info",
        "exc_text",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "message",
        "module",
        "msecs",
        "msg",
        "name",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "taskName",
        "thread",
        "threadName",
    }

    default_time_format = "%Y-%m-%dT%H:%M:%S"
    default_msec_format = "%s.%03dZ"

    def format(self, record: logging.LogRecord) -> str:
        log: dict[str, object] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        extras = {
            key: value
            for key, value in record.__dict__.items()
            if key not in self._RESERVED and not key.startswith("_") and value is not None
        }
        log.update(extras)

        if record.exc_info:
            log["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(log, default=str).decode()


def setup_logging(
    level: int = logging.WARNING,
    structured: Optional[bool] = None,
    stream=None,
) -> logging.Logger:
    """Configure the root logger and return the ``mqtap`` logger.

    Parameters
    ----------
    level:
        Logging level; overridden by ``MQTAP_LOG_LEVEL`` when set, either as
        a number or a level name.
    structured:
        Emit JSON lines when true, plain text when false. ``None`` defers to
        ``MQTAP_LOG_FORMAT`` (``json`` or ``plain``), defaulting to plain.
    stream:
        Destination stream, stderr by default.
    """

    env_level = os.getenv("MQTAP_LOG_LEVEL")
    if env_level:
        try:
            level = int(env_level)
        except ValueError:
            level = getattr(logging, env_level.upper(), level)

    if structured is None:
        structured = os.getenv("MQTAP_LOG_FORMAT", "plain").lower() == "json"

    root = logging.getLogger()
    for existing in list(root.handlers):
        if getattr(existing, "_mqtap_handler", False):
            root.removeHandler(existing)

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler._mqtap_handler = True  # type: ignore[attr-defined]

    if structured:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
                datefmt="%Y-%m-%dT%H:%M:%S%z",
            )
        )

    root.addHandler(handler)
    root.setLevel(level)

    logger = logging.getLogger("mqtap")
    logger.setLevel(level)
    return logger
