"""Routing of envtag's own log records.

Modules log through loggers under ``envtag`` and emit only DEBUG records,
which name environment keys but never their values.  Nothing is configured
on import.  :func:`setup_logging` attaches a handler to the ``envtag``
logger only; handlers of the root logger and of other libraries are left
alone, so calling it from an application never disturbs the host's own
logging setup.
"""
from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional

from .config import LogSettings

LOGGER_NAME = "envtag"

# Marks handlers installed here so a later call replaces only those.
_HANDLER_FLAG = "_envtag_handler"


class JsonFormatter(logging.Formatter):
    """Render a record as one JSON object.

    Records carrying an ``env_key`` attribute (set by the resolver through
    ``extra=``) expose it as ``key``.
    """

    def format(self, record: logging.LogRecord) -> str:
        data: Dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        key = getattr(record, "env_key", None)
        if key is not None:
            data["key"] = key
        if record.exc_info:
            data["exc"] = self.formatException(record.exc_info)
        return json.dumps(data, ensure_ascii=False)


def _formatter(fmt: str) -> logging.Formatter:
    if fmt.lower() == "json":
        return JsonFormatter()
    return logging.Formatter("%(asctime)s %(name)s %(levelname)s %(message)s")


def setup_logging(
    level: str = "INFO",
    fmt: str = "text",
    log_file: Optional[str] = None,
    propagate: bool = False,
) -> logging.Logger:
    """Send envtag's records to stderr (and optionally a file).

    Parameters
    ----------
    level:
        Level name for the ``envtag`` logger; unknown names mean INFO.
    fmt:
        ``"text"`` or ``"json"``.
    log_file:
        Optional file receiving the same records as stderr.
    propagate:
        Whether records also continue to the application's root handlers.

    Handlers from a previous call are closed and replaced.
    """

    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        if getattr(handler, _HANDLER_FLAG, False):
            logger.removeHandler(handler)
            handler.close()

    formatter = _formatter(fmt)
    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(formatter)
        setattr(handler, _HANDLER_FLAG, True)
        logger.addHandler(handler)

    level_no = logging.getLevelName(level.upper())
    logger.setLevel(level_no if isinstance(level_no, int) else logging.INFO)
    logger.propagate = propagate
    return logger


def setup_logging_from_env(env: Optional[Mapping[str, str]] = None) -> logging.Logger:
    """Read :class:`~envtag.config.LogSettings` and apply them."""
    settings = LogSettings.from_env(env)
    return setup_logging(settings.level, settings.fmt, settings.log_file)


__all__ = ["LOGGER_NAME", "JsonFormatter", "setup_logging", "setup_logging_from_env"]
