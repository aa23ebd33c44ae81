from __future__ import annotations

from typing import Any, Mapping, Sequence

PathPart = str | int
KeyPath = tuple[PathPart, ...]


def dig(value: Any, path: KeyPath) -> Any:
    """
    Follow a key path through nested JSON values.

    String parts index mappings, integer parts index lists. Any missing step yields None.
    """
    current = value
    for part in path:
        if isinstance(part, int):
            if not isinstance(current, Sequence) or isinstance(current, (str, bytes)):
                return None
            if part >= len(current) or part < -len(current):
                return None
            current = current[part]
        else:
            if not isinstance(current, Mapping):
                return None
            current = current.get(part)
        if current is None:
            return None
    return current


def parse_path(dotted: str) -> KeyPath:
    """Split `a.b.0.c` into ("a", "b", 0, "c")."""
    parts: list[PathPart] = []
    for raw in dotted.split("."):
        parts.append(int(raw) if raw.isdigit() else raw)
    return tuple(parts)


def is_array(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def present(value: Any) -> bool:
    """
    True for any JSON value other than null, false, zero and the empty string.

    Empty objects and arrays count as present.
    """
    if value is None or value is False:
        return False
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value == value and value != 0
    if isinstance(value, str):
        return value != ""
    return True
