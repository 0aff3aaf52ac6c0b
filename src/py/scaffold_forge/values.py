"""Manifest value tree and JavaScript source serialization.

Manifest values are plain JSON-compatible data (mappings, sequences, strings,
numbers, booleans, ``None``) plus :class:`JSExpression` leaves. An expression
leaf carries raw JavaScript source, such as a function, that must be written
verbatim into generated ``*.config.js`` files.
"""

import math
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

__all__ = ("JSExpression", "contains_expression", "stringify_js")

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")
_RESERVED_WORDS = frozenset(
    {
        "break", "case", "catch", "class", "const", "continue", "debugger", "default", "delete", "do",
        "else", "enum", "export", "extends", "false", "finally", "for", "function", "if", "implements",
        "import", "in", "instanceof", "interface", "let", "new", "null", "package", "private",
        "protected", "public", "return", "static", "super", "switch", "this", "throw", "true", "try",
        "typeof", "var", "void", "while", "with", "yield",
    }
)  # fmt: skip
_ESCAPES = {
    "\\": "\\\\",
    "'": "\\'",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\b": "\\b",
    "\f": "\\f",
    "\v": "\\v",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}
_ESCAPE_RE = re.compile(r"[\\'\u2028\u2029\x00-\x1f\x7f]")


@dataclass(frozen=True)
class JSExpression:
    """Raw JavaScript source used as a manifest value.

    Example::

        api.extend_package({"vue": {"chainWebpack": JSExpression("config => config.plugins.delete('prefetch')")}})
    """

    source: str

    def __str__(self) -> str:
        return self.source


def contains_expression(value: Any) -> bool:
    """Check whether a value tree holds at least one :class:`JSExpression`.

    Returns:
        True if an expression leaf is found.
    """
    if isinstance(value, JSExpression):
        return True
    if isinstance(value, Mapping):
        return any(contains_expression(v) for v in value.values())
    if isinstance(value, (list, tuple)):
        return any(contains_expression(v) for v in value)
    return False


def _quote(value: str) -> str:
    def _escape(match: "re.Match[str]") -> str:
        char = match.group(0)
        return _ESCAPES.get(char) or f"\\x{ord(char):02x}"

    return "'" + _ESCAPE_RE.sub(_escape, value) + "'"


def _format_key(key: Any) -> str:
    key = str(key)
    if _IDENTIFIER_RE.match(key) and key not in _RESERVED_WORDS:
        return key
    return _quote(key)


def _format_number(value: "int | float") -> str:
    if isinstance(value, int):
        return str(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value.is_integer():
        return str(int(value))
    return repr(value)


def _stringify(value: Any, indent: str, level: int) -> str:
    if isinstance(value, JSExpression):
        return value.source
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return _format_number(value)
    if isinstance(value, str):
        return _quote(value)

    inner = indent * (level + 1)
    outer = indent * level
    separator = f",\n{inner}" if indent else ","
    newline = "\n" if indent else ""

    if isinstance(value, Mapping):
        if not value:
            return "{}"
        items = [f"{_format_key(k)}: {_stringify(v, indent, level + 1)}" for k, v in value.items()]
        return "{" + newline + inner + separator.join(items) + newline + outer + "}"
    if isinstance(value, Sequence) and not isinstance(value, (bytes, bytearray)):
        if not value:
            return "[]"
        items = [_stringify(v, indent, level + 1) for v in value]
        return "[" + newline + inner + separator.join(items) + newline + outer + "]"

    msg = f"Cannot serialize value of type {type(value).__name__!r} to JavaScript"
    raise TypeError(msg)


def stringify_js(value: Any, indent: int = 2) -> str:
    """Serialize a manifest value tree to JavaScript source.

    Keys keep their insertion order. Keys that are valid identifiers are written
    bare, all other keys and every string are single-quoted. ``JSExpression``
    leaves are emitted verbatim.

    Args:
        value: The value tree to serialize.
        indent: Number of spaces per nesting level, ``0`` for a single line.

    Returns:
        JavaScript source for the value.
    """
    return _stringify(value, " " * indent, 0)
