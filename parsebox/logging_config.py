"""Logging setup for the parsebox package logger."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone

from rich.console import Console
from rich.logging import RichHandler

LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}


class JSONLineFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "time": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def configure_logging(level: str = "warn", fmt: str = "text") -> logging.Logger:
    """Install a single stderr handler on the ``parsebox`` logger.

    Calling it again replaces the previous handler, so the CLI can reconfigure
    after loading a config file.
    """
    if level not in LEVELS:
        raise ValueError(f"Unsupported log level: {level!r}. Supported: {', '.join(LEVELS)}")
    if fmt not in ("text", "json"):
        raise ValueError(f"Unsupported log format: {fmt!r}. Supported: text, json")

    logger = logging.getLogger("parsebox")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    if fmt == "json":
        handler: logging.Handler = logging.StreamHandler()
        handler.setFormatter(JSONLineFormatter())
    else:
        handler = RichHandler(console=Console(stderr=True), show_path=False)

    logger.addHandler(handler)
    logger.setLevel(LEVELS[level])
    logger.propagate = False
    return logger
