"""Conversion of resolved strings into typed field values.

Converters are chosen from a field's type hint once, when the schema for a
dataclass is built, and applied to every non-empty resolved value.  Empty
values never reach a converter: :func:`set_field` leaves the field as it is,
so defaults assigned in code survive a missing variable.
"""
from __future__ import annotations

import enum
import math
import re
import sys
from typing import Any, Callable, Dict, List, NewType, Optional, Union, get_args, get_origin

from .errors import CoercionError

Converter = Callable[[str], Any]

Int8 = NewType("Int8", int)
Int16 = NewType("Int16", int)
Int32 = NewType("Int32", int)
Int64 = NewType("Int64", int)
Uint = NewType("Uint", int)
Uint8 = NewType("Uint8", int)
Uint16 = NewType("Uint16", int)
Uint32 = NewType("Uint32", int)
Uint64 = NewType("Uint64", int)
Float32 = NewType("Float32", float)

_INT_RE = re.compile(r"[+-]?[0-9]+")
_UINT_RE = re.compile(r"\+?[0-9]+")
_HEX_FLOAT_RE = re.compile(r"[+-]?0[xX]")
_FLOAT_SPECIAL = {"inf", "+inf", "-inf", "infinity", "+infinity", "-infinity", "nan"}
_FLOAT32_MAX = 3.4028234663852886e38

_TRUE = {"true", "1", "yes"}
_FALSE = {"false", "0", "no"}


def parse_bool(value: str) -> bool:
    """Parse ``true``/``1``/``yes`` or ``false``/``0``/``no`` (any case)."""
    lowered = value.lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise CoercionError(f"invalid boolean value {value}", value, "bool")


def _int_parser(label: str, bits: int, signed: bool) -> Converter:
    if signed:
        pattern, low, high = _INT_RE, -(1 << (bits - 1)), (1 << (bits - 1)) - 1
    else:
        pattern, low, high = _UINT_RE, 0, (1 << bits) - 1

    def parse(value: str) -> int:
        if not pattern.fullmatch(value):
            raise CoercionError(f"invalid {label} value {value!r}", value, label)
        number = int(value)
        if not low <= number <= high:
            raise CoercionError(f"{label} value {value} out of range", value, label)
        return number

    parse.__name__ = f"parse_{label}"
    return parse


def _float_parser(label: str, limit: float) -> Converter:
    def parse(value: str) -> float:
        if value != value.strip() or "_" in value:
            raise CoercionError(f"invalid {label} value {value!r}", value, label)
        try:
            if _HEX_FLOAT_RE.match(value):
                number = float.fromhex(value)
            else:
                number = float(value)
        except ValueError:
            raise CoercionError(f"invalid {label} value {value!r}", value, label) from None
        except OverflowError:
            raise CoercionError(f"{label} value {value} out of range", value, label) from None
        if math.isinf(number) and value.lower() not in _FLOAT_SPECIAL:
            raise CoercionError(f"{label} value {value} out of range", value, label)
        if not math.isinf(number) and abs(number) > limit:
            raise CoercionError(f"{label} value {value} out of range", value, label)
        return number

    parse.__name__ = f"parse_{label}"
    return parse


parse_int = _int_parser("int", 64, signed=True)
parse_uint = _int_parser("uint", 64, signed=False)
parse_float = _float_parser("float", sys.float_info.max)

_SCALARS: Dict[Any, Converter] = {
    str: str,
    bool: parse_bool,
    int: parse_int,
    float: parse_float,
    Int8: _int_parser("int8", 8, signed=True),
    Int16: _int_parser("int16", 16, signed=True),
    Int32: _int_parser("int32", 32, signed=True),
    Int64: parse_int,
    Uint: parse_uint,
    Uint8: _int_parser("uint8", 8, signed=False),
    Uint16: _int_parser("uint16", 16, signed=False),
    Uint32: _int_parser("uint32", 32, signed=False),
    Uint64: parse_uint,
    Float32: _float_parser("float32", _FLOAT32_MAX),
}


def type_name(hint: Any) -> str:
    return getattr(hint, "__name__", None) or repr(hint)


def unwrap_optional(hint: Any) -> Any:
    """Return ``X`` for ``Optional[X]``; any other hint is returned as is."""
    if get_origin(hint) is Union:
        args = [a for a in get_args(hint) if a is not type(None)]
        if len(args) == 1:
            return args[0]
    return hint


def _enum_parser(cls: type) -> Converter:
    def parse(value: str) -> enum.Enum:
        for member in cls:
            if str(member.value) == value:
                return member
        try:
            return cls[value]
        except KeyError:
            raise CoercionError(
                f"invalid {cls.__name__} value {value!r}", value, cls.__name__
            ) from None

    return parse


def _scalar_converter(hint: Any) -> Optional[Converter]:
    if hint in _SCALARS:
        return _SCALARS[hint]
    if isinstance(hint, type):
        if issubclass(hint, enum.Enum):
            return _enum_parser(hint)
        if issubclass(hint, str):
            return hint
    return None


def _unsupported(message: str, hint: Any) -> Converter:
    def fail(value: str) -> Any:
        raise CoercionError(message, value, type_name(hint))

    return fail


def _list_converter(element: Converter) -> Converter:
    def parse(value: str) -> List[Any]:
        return [element(part) for part in value.split(",")]

    return parse


def converter_for(hint: Any) -> Converter:
    """Return the callable that converts strings into values of ``hint``.

    Unsupported types get a converter that raises :class:`CoercionError`
    when called, so they only fail once a value actually has to be set.
    """

    hint = unwrap_optional(hint)
    scalar = _scalar_converter(hint)
    if scalar is not None:
        return scalar

    if hint is list or hint is List:
        return _list_converter(str)
    if get_origin(hint) is list:
        args = get_args(hint)
        element_hint = unwrap_optional(args[0]) if args else str
        element = _scalar_converter(element_hint)
        if element is None:
            return _unsupported(
                f"unsupported list element type {type_name(element_hint)}", hint
            )
        return _list_converter(element)

    return _unsupported(f"unsupported type {type_name(hint)}", hint)


def set_field(target: Any, name: str, value: str, convert: Converter) -> bool:
    """Convert ``value`` and assign it to ``target.name``.

    An empty ``value`` is a no-op.  Returns whether the field was assigned.
    Conversion errors are re-raised with the field name in the message.
    """

    if value == "":
        return False
    try:
        converted = convert(value)
    except CoercionError as exc:
        raise CoercionError(f"{name}: {exc}", exc.value, exc.type_name) from exc
    setattr(target, name, converted)
    return True


__all__ = [
    "Converter",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "Uint",
    "Uint8",
    "Uint16",
    "Uint32",
    "Uint64",
    "Float32",
    "parse_bool",
    "parse_int",
    "parse_uint",
    "parse_float",
    "converter_for",
    "unwrap_optional",
    "set_field",
]
