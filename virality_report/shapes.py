from __future__ import annotations

from typing import Any, Callable, Mapping

from .paths import KeyPath, dig, is_array, present

RawPost = Mapping[str, Any]

ShapePredicate = Callable[[Any], bool]
ShapeExtractor = Callable[[Any], list[Any]]


def _array_at(path: KeyPath) -> ShapePredicate:
    def _matches(raw: Any) -> bool:
        return is_array(dig(raw, path) if path else raw)

    return _matches


def _take(path: KeyPath) -> ShapeExtractor:
    def _extract(raw: Any) -> list[Any]:
        return list(dig(raw, path) if path else raw)

    return _extract


def _unwrap_edge(edge: Any) -> Any:
    if isinstance(edge, Mapping):
        node = edge.get("node")
        if present(node):
            return node
    return edge


def _take_edges(path: KeyPath) -> ShapeExtractor:
    def _extract(raw: Any) -> list[Any]:
        out: list[Any] = []
        for edge in dig(raw, path):
            item = _unwrap_edge(edge)
            if present(item):
                out.append(item)
        return out

    return _extract


# Tried top-to-bottom; the first matching shape wins.
POST_SHAPES: tuple[tuple[str, ShapePredicate, ShapeExtractor], ...] = (
    ("array", _array_at(()), _take(())),
    ("items", _array_at(("items",)), _take(("items",))),
    ("data.items", _array_at(("data", "items")), _take(("data", "items"))),
    ("edges", _array_at(("edges",)), _take_edges(("edges",))),
    ("data.edges", _array_at(("data", "edges")), _take_edges(("data", "edges"))),
    ("data.posts", _array_at(("data", "posts")), _take(("data", "posts"))),
    ("posts", _array_at(("posts",)), _take(("posts",))),
)


def detect_posts_shape(raw: Any) -> str | None:
    if raw is None:
        return None
    for name, matches, _ in POST_SHAPES:
        if matches(raw):
            return name
    return None


def normalize_posts(raw: Any) -> list[Any]:
    """
    Flatten a provider "posts payload" into a plain list of raw post records.

    Unknown or empty payloads yield an empty list.
    """
    if raw is None:
        return []
    for _, matches, extract in POST_SHAPES:
        if matches(raw):
            return extract(raw)
    return []
