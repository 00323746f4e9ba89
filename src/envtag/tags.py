"""Parsing of ``env`` field annotations.

An annotation names one or more lookup keys followed by options::

    KEY1|KEY2,default=value,required,file,expand

Defaults that contain commas must be wrapped in brackets, e.g.
``HOSTS,default=[a:1,b:2]``.  Commas inside brackets never split options.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

_FALLBACK_PREFIXES = ("default=", "fallback=")


@dataclass(frozen=True)
class FieldSpec:
    """Options parsed from a single field annotation."""

    keys: Tuple[str, ...]
    fallback: str = ""
    required: bool = False
    file: bool = False
    expand: bool = False

    @property
    def primary_key(self) -> str:
        return self.keys[0]


def split_options(options: str) -> List[str]:
    """Split ``options`` on commas that are not inside ``[...]``."""
    parts: List[str] = []
    depth = 0
    start = 0
    for i, ch in enumerate(options):
        if ch == "[":
            depth += 1
        elif ch == "]" and depth:
            depth -= 1
        elif ch == "," and not depth:
            parts.append(options[start:i])
            start = i + 1
    parts.append(options[start:])
    return parts


def _unbracket(value: str) -> str:
    if len(value) >= 2 and value.startswith("[") and value.endswith("]"):
        return value[1:-1]
    return value


def parse_tag(annotation: str) -> FieldSpec:
    """Parse ``annotation`` into a :class:`FieldSpec`.

    Unknown options are ignored so newer annotations still load with older
    versions of the parser.
    """

    key_spec, _, options = annotation.partition(",")
    keys = tuple(key_spec.split("|"))
    fallback = ""
    required = file = expand = False

    if options:
        for part in split_options(options):
            option = part.strip()
            for prefix in _FALLBACK_PREFIXES:
                if option.startswith(prefix):
                    fallback = _unbracket(part.lstrip()[len(prefix):])
                    break
            else:
                if option == "required":
                    required = True
                elif option == "file":
                    file = True
                elif option == "expand":
                    expand = True

    return FieldSpec(keys=keys, fallback=fallback, required=required, file=file, expand=expand)


__all__ = ["FieldSpec", "parse_tag", "split_options"]
