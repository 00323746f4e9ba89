"""Direct access to single environment variables.

These helpers cover the cases where declaring a dataclass is overkill.  Every
function accepts an optional ``env`` mapping and falls back to
:data:`os.environ`.  Typed getters raise :class:`~envtag.errors.NotSetError`
for absent variables and :class:`~envtag.errors.CoercionError` for values
that do not parse; the ``*_with_fallback`` variants return the fallback in
either case.
"""
from __future__ import annotations

import os
from typing import Callable, List, Mapping, MutableMapping, Optional, TypeVar

from .coerce import parse_bool, parse_float, parse_int, parse_uint
from .errors import EnvError, NotSetError

T = TypeVar("T")


def _mapping(env: Optional[Mapping[str, str]]) -> Mapping[str, str]:
    return os.environ if env is None else env


def lookup(key: str, env: Optional[Mapping[str, str]] = None) -> Optional[str]:
    """Return the value of ``key`` or ``None`` when it is not set."""
    return _mapping(env).get(key)


def setenv(key: str, value: str, env: Optional[MutableMapping[str, str]] = None) -> None:
    (os.environ if env is None else env)[key] = value


def unsetenv(key: str, env: Optional[MutableMapping[str, str]] = None) -> None:
    """Remove ``key``; removing a variable that is not set is not an error."""
    (os.environ if env is None else env).pop(key, None)


def require(key: str, env: Optional[Mapping[str, str]] = None) -> None:
    if lookup(key, env) is None:
        raise NotSetError(key, f"required environment variable {key} is not set")


def get(key: str, env: Optional[Mapping[str, str]] = None) -> str:
    value = lookup(key, env)
    if value is None:
        raise NotSetError(key)
    return value


def get_with_fallback(key: str, fallback: str, env: Optional[Mapping[str, str]] = None) -> str:
    value = lookup(key, env)
    return fallback if value is None else value


def _split(parse: Callable[[str], T]) -> Callable[[str], List[T]]:
    def parse_list(value: str) -> List[T]:
        return [parse(part) for part in value.split(",")]

    return parse_list


def _typed(parse: Callable[[str], T]) -> Callable[..., T]:
    def getter(key: str, env: Optional[Mapping[str, str]] = None) -> T:
        return parse(get(key, env))

    return getter


def _typed_with_fallback(getter: Callable[..., T]) -> Callable[..., T]:
    def with_fallback(key: str, fallback: T, env: Optional[Mapping[str, str]] = None) -> T:
        try:
            return getter(key, env)
        except EnvError:
            return fallback

    return with_fallback


get_bool = _typed(parse_bool)
get_int = _typed(parse_int)
get_float = _typed(parse_float)
get_list = _typed(_split(str))
get_bool_list = _typed(_split(parse_bool))
get_int_list = _typed(_split(parse_int))
get_uint_list = _typed(_split(parse_uint))
get_float_list = _typed(_split(parse_float))

get_bool_with_fallback = _typed_with_fallback(get_bool)
get_int_with_fallback = _typed_with_fallback(get_int)
get_float_with_fallback = _typed_with_fallback(get_float)
get_list_with_fallback = _typed_with_fallback(get_list)
get_bool_list_with_fallback = _typed_with_fallback(get_bool_list)
get_int_list_with_fallback = _typed_with_fallback(get_int_list)
get_uint_list_with_fallback = _typed_with_fallback(get_uint_list)
get_float_list_with_fallback = _typed_with_fallback(get_float_list)


__all__ = [
    "lookup",
    "setenv",
    "unsetenv",
    "require",
    "get",
    "get_with_fallback",
    "get_bool",
    "get_int",
    "get_float",
    "get_list",
    "get_bool_list",
    "get_int_list",
    "get_uint_list",
    "get_float_list",
    "get_bool_with_fallback",
    "get_int_with_fallback",
    "get_float_with_fallback",
    "get_list_with_fallback",
    "get_bool_list_with_fallback",
    "get_int_list_with_fallback",
    "get_uint_list_with_fallback",
    "get_float_list_with_fallback",
]
