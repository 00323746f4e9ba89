"""Resolution of a field's final string value.

The :class:`Resolver` turns a parsed :class:`~envtag.tags.FieldSpec` into
the string that is later coerced into the field:

1. the first ``prefix + key`` present in the environment wins, even when its
   value is empty;
2. ``file`` fields treat that value as a path and use the file's content;
3. when no key is present the declared fallback is used;
4. ``expand`` fields substitute ``${NAME}`` and ``$NAME`` placeholders;
5. ``required`` fields must not end up empty.
"""
from __future__ import annotations

import logging
import os
import re
from typing import Callable, Dict, Mapping, Optional, Tuple

from .errors import FileReadError, RequiredVariableError
from .tags import FieldSpec

logger = logging.getLogger(__name__)

_PLACEHOLDER = re.compile(r"\$\{([^}]*)\}|\$([A-Za-z0-9_]+)")

ReadFile = Callable[[str], str]


def read_text(path: str) -> str:
    """Return the content of ``path`` decoded as UTF-8.

    Bytes that are not valid UTF-8 are kept as surrogate escapes, so binary
    secrets load and can be recovered with
    ``value.encode("utf-8", "surrogateescape")``.
    """
    with open(path, encoding="utf-8", errors="surrogateescape") as fh:
        return fh.read()


class Resolver:
    """Resolve field specs against an environment mapping.

    ``defaults`` maps primary keys to declared fallbacks and is consulted by
    expansion when a referenced variable is absent from the environment.
    """

    def __init__(
        self,
        env: Optional[Mapping[str, str]] = None,
        read_file: Optional[ReadFile] = None,
        defaults: Optional[Dict[str, str]] = None,
    ) -> None:
        self.env = os.environ if env is None else env
        self.read_file = read_file or read_text
        self.defaults = defaults or {}

    def find(self, spec: FieldSpec, prefix: str = "") -> Tuple[Optional[str], str]:
        """Return ``(full_key, value)`` for the first present key.

        ``full_key`` is ``None`` when none of the keys is set.
        """
        for key in spec.keys:
            full_key = prefix + key
            value = self.env.get(full_key)
            if value is not None:
                return full_key, value
        return None, ""

    def expand(self, value: str) -> str:
        """Substitute placeholders in ``value`` in a single pass."""

        def replace(match: "re.Match[str]") -> str:
            name = match.group(1) if match.group(1) is not None else match.group(2)
            found = self.env.get(name)
            if found is not None:
                return found
            return self.defaults.get(name, "")

        return _PLACEHOLDER.sub(replace, value)

    def resolve(self, spec: FieldSpec, prefix: str = "") -> str:
        full_key, value = self.find(spec, prefix)

        if full_key is not None:
            logger.debug(
                "Resolved %s from %s", spec.primary_key, full_key, extra={"env_key": full_key}
            )
            if spec.file:
                logger.debug("Reading %s from file named by %s", spec.primary_key, full_key)
                try:
                    value = self.read_file(value)
                except (OSError, UnicodeDecodeError) as exc:
                    raise FileReadError(value, exc) from exc
        else:
            value = spec.fallback
            if value:
                logger.debug(
                    "Using fallback for %s%s",
                    prefix,
                    spec.primary_key,
                    extra={"env_key": prefix + spec.primary_key},
                )

        if spec.expand:
            value = self.expand(value)

        if spec.required and value == "":
            raise RequiredVariableError(spec.primary_key)
        return value


__all__ = ["Resolver", "ReadFile", "read_text"]
