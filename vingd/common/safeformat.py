"""
Safe string formatting for resource paths.

Placeholders have the form ``{index:type}`` or ``{:type}``; the latter take
positional arguments left to right. Each argument is checked against the
character class of its type before substitution, so that untrusted values
can not alter the structure of the resulting path.
"""

from __future__ import annotations

import itertools
import re
from typing import Any, ClassVar

from vingd.common.exceptions import FormatError

PLACEHOLDER_RE = re.compile(r"\{(?P<idx>\d+)?:(?P<typ>\w+)\}")


class SafeFormatter:
    """Formats a single pattern with type-checked arguments."""

    CONVERTERS: ClassVar[dict[str, re.Pattern[str] | None]] = {
        "int": re.compile(r"\d+", re.ASCII),
        "hex": re.compile(r"[a-fA-F\d]+", re.ASCII),
        "identifier": re.compile(r"[-\w]*", re.ASCII),
        "string": None,
    }
    ALIASES: ClassVar[dict[str, str]] = {"ident": "identifier", "str": "string"}

    def __init__(self, pattern: str) -> None:
        self.pattern = pattern

    def format(self, *args: Any) -> str:
        """Substitute ``args`` into the pattern."""
        counter = itertools.count()

        def replace(match: re.Match[str]) -> str:
            idx = match.group("idx")
            index = int(idx) if idx is not None else next(counter)
            return self.convert(match.group("typ"), args, index)

        return PLACEHOLDER_RE.sub(replace, self.pattern)

    def convert(self, typ: str, args: tuple[Any, ...], index: int) -> str:
        if index >= len(args):
            msg = f"Index out of bounds: {index}."
            raise FormatError(msg)

        typ = self.ALIASES.get(typ, typ)
        if typ not in self.CONVERTERS:
            msg = f"Invalid converter/type: '{typ}'."
            raise FormatError(msg)

        value = str(args[index])
        allowed = self.CONVERTERS[typ]
        if allowed is not None and not allowed.fullmatch(value):
            msg = f"Argument '{value}' not of type '{typ}'."
            raise FormatError(msg)
        return value


def safeformat(pattern: str, *args: Any) -> str:
    """Shorthand for ``SafeFormatter(pattern).format(*args)``."""
    return SafeFormatter(pattern).format(*args)
