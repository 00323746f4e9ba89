"""Populate dataclass instances from the environment."""
from __future__ import annotations

import dataclasses
import logging
from typing import Any, Mapping, Optional, Type, TypeVar

from .coerce import set_field
from .resolve import ReadFile, Resolver
from .schema import Schema, build_schema

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _populate(target: Any, schema: Schema, resolver: Resolver, prefix: str) -> None:
    for f in schema.fields:
        if f.nested is not None:
            child = getattr(target, f.name, None)
            if child is None:
                child = f.nested.cls()
                setattr(target, f.name, child)
            child_prefix = prefix + f.annotation + "_" if f.annotation else prefix
            logger.debug("Descending into %s with prefix %r", f.name, child_prefix)
            _populate(child, f.nested, resolver, child_prefix)
            continue

        value = resolver.resolve(f.spec, prefix)
        set_field(target, f.name, value, f.convert)


def unmarshal(
    target: T,
    env: Optional[Mapping[str, str]] = None,
    read_file: Optional[ReadFile] = None,
) -> T:
    """Fill the fields of dataclass instance ``target`` in place.

    Parameters
    ----------
    target:
        Dataclass instance whose annotated fields are populated.  Fields
        already set in code keep their value when nothing resolves for them.
    env:
        Mapping used for lookups.  Defaults to :data:`os.environ`.
    read_file:
        Callable returning the content of a path, used by ``file`` fields.

    The first error stops population and is raised to the caller; fields
    visited before it keep their new values.
    """

    if isinstance(target, type) or not dataclasses.is_dataclass(target):
        raise TypeError(f"unmarshal target must be a dataclass instance, got {target!r}")

    schema = build_schema(type(target))
    resolver = Resolver(env=env, read_file=read_file, defaults=schema.defaults())
    _populate(target, schema, resolver, "")
    return target


def load(
    cls: Type[T],
    env: Optional[Mapping[str, str]] = None,
    read_file: Optional[ReadFile] = None,
) -> T:
    """Instantiate ``cls`` with its defaults and :func:`unmarshal` into it."""
    return unmarshal(cls(), env=env, read_file=read_file)


__all__ = ["unmarshal", "load"]
