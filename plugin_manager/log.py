"""Logging capability used by the plugin manager.

The manager only needs a handle with ``trace``, ``info`` and ``error``
methods. Anything satisfying :class:`PipelineLogger` can be injected; by
default a stdlib logger wrapped in :class:`TraceLogger` is used.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Literal, Protocol, runtime_checkable

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

DEFAULT_LOGGER_NAME = "plugin-runner"

_LEVELS = {
    "trace": TRACE,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}

# Loggers that receive the handler installed by configure_logging
_CONFIGURED_LOGGERS = ("plugin_manager", DEFAULT_LOGGER_NAME)


@runtime_checkable
class PipelineLogger(Protocol):
    """Leveled sink consumed by :class:`~plugin_manager.manager.PluginManager`."""

    def trace(self, msg: str, *args: Any) -> None: ...

    def info(self, msg: str, *args: Any) -> None: ...

    def error(self, msg: str, *args: Any) -> None: ...


class TraceLogger(logging.LoggerAdapter):
    """LoggerAdapter that adds a ``trace`` method below DEBUG."""

    def trace(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self.log(TRACE, msg, *args, **kwargs)


def get_logger(name: str = DEFAULT_LOGGER_NAME) -> TraceLogger:
    """Return a named logger handle with trace support."""
    return TraceLogger(logging.getLogger(name), {})


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def configure_logging(
    level: str = "info",
    fmt: Literal["text", "json"] = "text",
    stream: Any = None,
) -> logging.Handler:
    """Install a single stream handler on the package loggers.

    Calling again replaces the handler installed by the previous call.
    Returns the new handler.
    """
    try:
        numeric = _LEVELS[level]
    except KeyError:
        raise ValueError(f"Unknown log level '{level}'") from None

    handler = logging.StreamHandler(stream)
    if fmt == "json":
        handler.setFormatter(_JsonFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s")
        )
    handler._plugin_manager_handler = True  # type: ignore[attr-defined]

    for name in _CONFIGURED_LOGGERS:
        logger = logging.getLogger(name)
        for existing in list(logger.handlers):
            if getattr(existing, "_plugin_manager_handler", False):
                logger.removeHandler(existing)
        logger.addHandler(handler)
        logger.setLevel(numeric)
    return handler
