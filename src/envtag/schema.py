"""Declarative field schemas for environment-backed dataclasses.

A dataclass opts a field into environment loading by putting an annotation
in the field metadata under :data:`TAG`, usually through :func:`env_field`.
:func:`build_schema` inspects a dataclass type once and returns the ordered
list of fields the walker has to visit, so population never introspects the
target at call time.
"""
from __future__ import annotations

import dataclasses
import functools
import logging
import sys
import typing
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from .coerce import Converter, converter_for, unwrap_optional
from .tags import FieldSpec, parse_tag

logger = logging.getLogger(__name__)

TAG = "env"


def env_field(tag: str = "", **kwargs: Any) -> Any:
    """Return a :func:`dataclasses.field` annotated with ``tag``.

    Any keyword accepted by :func:`dataclasses.field` may be passed.  When
    neither ``default`` nor ``default_factory`` is given, the field defaults
    to ``None`` so that configuration classes can be instantiated empty.
    """

    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[TAG] = tag
    if "default" not in kwargs and "default_factory" not in kwargs:
        kwargs["default"] = None
    return dataclasses.field(metadata=metadata, **kwargs)


@dataclass(frozen=True)
class FieldSchema:
    """One field the walker visits."""

    name: str
    hint: Any
    annotation: str
    spec: Optional[FieldSpec] = None
    nested: Optional["Schema"] = None
    convert: Optional[Converter] = None


@dataclass(frozen=True)
class Schema:
    """Ordered fields of one dataclass type."""

    cls: type
    fields: Tuple[FieldSchema, ...]

    def defaults(self) -> Dict[str, str]:
        """Map each primary key to its declared fallback.

        Fields are visited depth-first in declaration order and the first
        field declaring a primary key wins.  Keys are compared without the
        prefixes nested structures add.
        """

        found: Dict[str, str] = {}
        self._collect_defaults(found)
        return found

    def _collect_defaults(self, found: Dict[str, str]) -> None:
        for f in self.fields:
            if f.nested is not None:
                f.nested._collect_defaults(found)
            elif f.spec is not None:
                found.setdefault(f.spec.primary_key, f.spec.fallback)


def is_nested(hint: Any) -> bool:
    hint = unwrap_optional(hint)
    return isinstance(hint, type) and dataclasses.is_dataclass(hint)


def _local_names(cls: type) -> Dict[str, Any]:
    """Names a class declared inside a function can still reach.

    String annotations of such classes refer to function locals that are gone
    by the time the schema is built.  The class itself and the types used as
    field defaults or default factories cover the usual nested declarations.
    """

    names: Dict[str, Any] = {cls.__name__: cls}
    for f in dataclasses.fields(cls):
        for candidate in (f.default, f.default_factory):
            if not isinstance(candidate, type) and dataclasses.is_dataclass(candidate):
                candidate = type(candidate)
            if isinstance(candidate, type):
                names.setdefault(candidate.__name__, candidate)
    return names


def _type_hints(cls: type) -> Dict[str, Any]:
    localns = _local_names(cls)
    try:
        return typing.get_type_hints(cls, localns=localns)
    except (NameError, TypeError):
        pass

    # Resolve field by field so one unknown name only affects its own field.
    hints: Dict[str, Any] = {}
    namespaces = [
        vars(sys.modules[k.__module__]) for k in cls.__mro__ if k.__module__ in sys.modules
    ]
    for f in dataclasses.fields(cls):
        hint = f.type
        if isinstance(hint, str):
            for globalns in namespaces:
                try:
                    hint = eval(hint, dict(globalns), localns)
                    break
                except (NameError, SyntaxError, TypeError, AttributeError):
                    continue
            else:
                logger.debug("Cannot resolve annotation %r of %s.%s", f.type, cls.__name__, f.name)
        hints[f.name] = hint
    return hints


@functools.lru_cache(maxsize=None)
def build_schema(cls: type) -> Schema:
    """Build (and cache) the :class:`Schema` for dataclass ``cls``."""
    return _build(cls, ())


def _build(cls: type, lineage: Tuple[type, ...]) -> Schema:
    if not (isinstance(cls, type) and dataclasses.is_dataclass(cls)):
        raise TypeError(f"{cls!r} is not a dataclass")

    hints = _type_hints(cls)
    lineage = lineage + (cls,)
    entries = []
    for f in dataclasses.fields(cls):
        hint = hints.get(f.name, f.type)
        annotation = f.metadata.get(TAG)
        # A field referring back to an enclosing type is not descended into;
        # it is handled like any other field of an unsupported type.
        if is_nested(hint) and unwrap_optional(hint) not in lineage:
            entries.append(
                FieldSchema(
                    name=f.name,
                    hint=hint,
                    annotation=annotation or "",
                    nested=_build(unwrap_optional(hint), lineage),
                )
            )
        elif annotation:
            entries.append(
                FieldSchema(
                    name=f.name,
                    hint=hint,
                    annotation=annotation,
                    spec=parse_tag(annotation),
                    convert=converter_for(hint),
                )
            )
    return Schema(cls=cls, fields=tuple(entries))


__all__ = ["TAG", "env_field", "FieldSchema", "Schema", "build_schema", "is_nested"]
