"""Populate dataclasses from environment variables.

Fields opt in through an ``env`` annotation stored in their metadata::

    @dataclass
    class Config:
        port: int = env_field("PORT,default=8080", default=0)
        db: Database = env_field("DB", default_factory=Database)

    cfg = load(Config)

See :mod:`envtag.tags` for the annotation grammar.  :func:`setup_logging`
and :func:`setup_logging_from_env` route the library's DEBUG records to
stderr without touching the application's root logger.
"""

from .coerce import (
    Float32,
    Int8,
    Int16,
    Int32,
    Int64,
    Uint,
    Uint8,
    Uint16,
    Uint32,
    Uint64,
    parse_bool,
)
from .config import LogSettings
from .environ import (
    get,
    get_bool,
    get_bool_list,
    get_bool_list_with_fallback,
    get_bool_with_fallback,
    get_float,
    get_float_list,
    get_float_list_with_fallback,
    get_float_with_fallback,
    get_int,
    get_int_list,
    get_int_list_with_fallback,
    get_int_with_fallback,
    get_list,
    get_list_with_fallback,
    get_uint_list,
    get_uint_list_with_fallback,
    get_with_fallback,
    lookup,
    require,
    setenv,
    unsetenv,
)
from .errors import CoercionError, EnvError, FileReadError, NotSetError, RequiredVariableError
from .logging import setup_logging, setup_logging_from_env
from .schema import TAG, build_schema, env_field
from .tags import FieldSpec, parse_tag
from .unmarshal import load, unmarshal

__all__ = [
    "unmarshal",
    "load",
    "LogSettings",
    "setup_logging",
    "setup_logging_from_env",
    "env_field",
    "build_schema",
    "TAG",
    "parse_tag",
    "FieldSpec",
    "parse_bool",
    "EnvError",
    "NotSetError",
    "RequiredVariableError",
    "FileReadError",
    "CoercionError",
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
]
