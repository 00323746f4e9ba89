"""Exceptions raised while reading the environment."""
from __future__ import annotations

from typing import Any, Optional


class EnvError(Exception):
    """Base class for every error raised by :mod:`envtag`."""


class NotSetError(EnvError, LookupError):
    """An environment variable is absent."""

    def __init__(self, key: str, message: Optional[str] = None) -> None:
        self.key = key
        super().__init__(message or f"environment variable {key} not set")


class RequiredVariableError(NotSetError):
    """A ``required`` field resolved to an empty value."""

    def __init__(self, key: str) -> None:
        super().__init__(key, f"required environment variable {key} is not set")


class FileReadError(EnvError, OSError):
    """The path named by a ``file`` field could not be read."""

    def __init__(self, path: str, cause: BaseException) -> None:
        self.path = path
        super().__init__(f"cannot read {path}: {cause}")

    def __str__(self) -> str:
        return self.args[0]


class CoercionError(EnvError, ValueError):
    """A string could not be converted to a field's type."""

    def __init__(self, message: str, value: Any = None, type_name: str = "") -> None:
        self.value = value
        self.type_name = type_name
        super().__init__(message)


__all__ = [
    "EnvError",
    "NotSetError",
    "RequiredVariableError",
    "FileReadError",
    "CoercionError",
]
