"""
Notation Writer

Serializes a value tree back into notation text that parses to an equal tree.
"""

import math
from typing import List, Union

from schemas.notation import (
    Bool, Keyword, Map, Nil, Number, Set, Str, Symbol, Value, Vector,
)

STRING_ESCAPES = {'"': '\\"', "\\": "\\\\", "\n": "\\n", "\t": "\\t", "\r": "\\r", "\b": "\\b", "\f": "\\f"}


def _write_string(text: str) -> str:
    out = []
    for c in text:
        if c in STRING_ESCAPES:
            out.append(STRING_ESCAPES[c])
        elif ord(c) < 0x20:
            out.append(f"\\u{ord(c):04x}")
        else:
            out.append(c)
    return '"' + "".join(out) + '"'


def _write_number(value) -> str:
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f"Cannot write non-finite number {value!r}")
        text = repr(value)
        if "." not in text and "e" not in text:
            text += ".0"
        return text
    return str(value)


class _Text(str):
    """Delimiter or separator queued between values by ``dumps``."""


def _write_atom(value: Value) -> str:
    if isinstance(value, Nil):
        return "nil"
    if isinstance(value, Bool):
        return "true" if value.value else "false"
    if isinstance(value, Number):
        return _write_number(value.value)
    if isinstance(value, Str):
        return _write_string(value.value)
    if isinstance(value, Keyword):
        return ":" + value.qualified
    if isinstance(value, Symbol):
        return value.qualified
    raise TypeError(f"Not a notation value: {type(value).__name__}")


def dumps(value: Value) -> str:
    """Write a value as single-line notation text."""
    out: List[str] = []
    pending: List[Union[Value, _Text]] = [value]
    while pending:
        item = pending.pop()
        if isinstance(item, _Text):
            out.append(item)
            continue

        if isinstance(item, Map):
            parts: List[Union[Value, _Text]] = [_Text("{")]
            for i, (key, entry_value) in enumerate(item.entries):
                if i:
                    parts.append(_Text(", "))
                parts.extend((key, _Text(" "), entry_value))
            parts.append(_Text("}"))
        elif isinstance(item, (Set, Vector)):
            parts = [_Text("#{" if isinstance(item, Set) else "[")]
            for i, child in enumerate(item.items):
                if i:
                    parts.append(_Text(" "))
                parts.append(child)
            parts.append(_Text("}" if isinstance(item, Set) else "]"))
        else:
            out.append(_write_atom(item))
            continue
        pending.extend(reversed(parts))
    return "".join(out)
