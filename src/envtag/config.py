"""Environment driven settings for the library itself.

Only logging is configurable.  The settings class doubles as a reference for
how configuration classes are declared with :func:`~envtag.schema.env_field`.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional

from .schema import env_field
from .unmarshal import load


@dataclass
class LogSettings:
    """Logging options read from ``ENVTAG_LOG_*`` (or ``LOG_*``)."""

    level: str = env_field("ENVTAG_LOG_LEVEL|LOG_LEVEL,default=INFO", default="INFO")
    fmt: str = env_field("ENVTAG_LOG_FORMAT|LOG_FORMAT,default=text", default="text")
    log_file: Optional[str] = env_field("ENVTAG_LOG_FILE")

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "LogSettings":
        return load(cls, env=env)


__all__ = ["LogSettings"]
