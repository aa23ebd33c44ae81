from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Any, Mapping

from .paths import KeyPath, dig, is_array, parse_path
from .post import NormalizedPost, Number


def _paths(*dotted: str) -> tuple[KeyPath, ...]:
    return tuple(parse_path(d) for d in dotted)


# Provider key names per field, in priority order. The trailing camelCase names
# are the ones emitted by the Apify actors used by ProfileScraper.
VIEW_PATHS = _paths(
    "view_count",
    "play_count",
    "video_view_count",
    "views",
    "videoViewCount",
    "videoPlayCount",
    "playCount",
    "viewCount",
)
LIKE_PATHS = _paths(
    "like_count",
    "edge_liked_by.count",
    "likes",
    "likesCount",
    "diggCount",
)
COMMENT_PATHS = _paths(
    "comment_count",
    "edge_media_to_comment.count",
    "comments",
    "commentsCount",
    "commentCount",
)
BOOKMARK_PATHS = _paths(
    "saved_count",
    "save_count",
    "bookmark_count",
    "bookmarks",
    "collectCount",
)
SHARE_PATHS = _paths(
    "share_count",
    "shares",
    "reshare_count",
    "repost_count",
    "stats.shareCount",
    "shareCount",
)

CAPTION_PATHS = _paths(
    "caption",
    "title",
    "edge_media_to_caption.edges.0.node.text",
    "node.edge_media_to_caption.edges.0.node.text",
    "caption_text",
    "text",
)

THUMBNAIL_PATHS = _paths(
    "thumbnail_src",
    "display_url",
    "displayUrl",
    "image_versions2.candidates.0.url",
    "node.display_url",
    "thumbnail_resources.0.src",
    "cover_url",
    "coverUrl",
    "thumbnail_url",
    "thumbnailUrl",
    "thumbnail",
)

TIMESTAMP_PATHS = _paths(
    "taken_at_timestamp",
    "taken_at",
    "timestamp",
    "createTime",
    "create_time",
    "createTimeISO",
    "publishedAt",
    "published_at",
    "uploadDate",
    "date",
)

# Epoch values above this are taken to be milliseconds.
_EPOCH_MILLIS_THRESHOLD = 1e12


def coerce_number(value: Any) -> Number | None:
    """
    Parse a JSON value into a finite number.

    Accepts ints, floats and numeric strings; booleans and everything else give None.
    """
    if isinstance(value, bool):
        return None

    if isinstance(value, int):
        # Integers beyond float range are treated as infinite.
        try:
            float(value)
        except OverflowError:
            return None
        return value

    if isinstance(value, float):
        return value if math.isfinite(value) else None

    if isinstance(value, str):
        s = value.strip()
        if not s:
            return None
        try:
            n = float(s)
        except ValueError:
            return None
        if not math.isfinite(n):
            return None
        return int(n) if n.is_integer() else n

    return None


def first_count(post: Any, paths: tuple[KeyPath, ...]) -> Number:
    """Return the first positive finite number found along `paths`, else 0."""
    for path in paths:
        n = coerce_number(dig(post, path))
        if n is not None and n > 0:
            return n
    return 0


def _coerce_text(value: Any) -> str | None:
    if isinstance(value, str):
        s = value.strip()
        return s if s else None

    if isinstance(value, Mapping):
        return _coerce_text(value.get("text"))

    if is_array(value):
        parts: list[str] = []
        for item in value:
            if isinstance(item, str):
                text = item.strip()
            elif isinstance(item, Mapping) and isinstance(item.get("text"), str):
                text = item["text"].strip()
            else:
                continue
            if text:
                parts.append(text)
        joined = " ".join(parts).strip()
        return joined if joined else None

    return None


def _coerce_url(value: Any) -> str | None:
    if isinstance(value, str):
        s = value.strip()
        return s if s else None
    return None


def extract_caption(post: Any) -> str | None:
    for path in CAPTION_PATHS:
        text = _coerce_text(dig(post, path))
        if text:
            return text
    return None


def extract_thumbnail(post: Any) -> str | None:
    for path in THUMBNAIL_PATHS:
        url = _coerce_url(dig(post, path))
        if url:
            return url
    return None


def extract_fields(post: Any) -> NormalizedPost:
    """
    Best-effort extraction of counters and display fields from one provider post.

    Every field falls back independently: missing counters are 0 and missing text is None.
    Already-normalized posts pass through unchanged.
    """
    if isinstance(post, NormalizedPost):
        if type(post) is NormalizedPost:
            return post
        post = post.as_dict()

    if not isinstance(post, Mapping):
        return NormalizedPost()

    return NormalizedPost(
        views=first_count(post, VIEW_PATHS),
        likes=first_count(post, LIKE_PATHS),
        comments=first_count(post, COMMENT_PATHS),
        shares=first_count(post, SHARE_PATHS),
        bookmarks=first_count(post, BOOKMARK_PATHS),
        caption=extract_caption(post),
        thumbnail_url=extract_thumbnail(post),
    )


def _datetime_from_epoch(value: float) -> datetime | None:
    if value <= 0:
        return None
    seconds = value / 1000.0 if value > _EPOCH_MILLIS_THRESHOLD else value
    try:
        return datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None


def _datetime_from_text(value: str) -> datetime | None:
    s = value.strip()
    if not s:
        return None

    n = coerce_number(s)
    if n is not None:
        return _datetime_from_epoch(float(n))

    if s.endswith(("Z", "z")):
        s = s[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(s)
    except ValueError:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_timestamp(value: Any) -> datetime | None:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)
    if isinstance(value, (int, float)):
        if not math.isfinite(value):
            return None
        return _datetime_from_epoch(float(value))
    if isinstance(value, str):
        return _datetime_from_text(value)
    return None


def extract_timestamp(post: Any) -> datetime | None:
    """Resolve when a post was published, as an aware UTC-comparable datetime."""
    if not isinstance(post, Mapping):
        return None
    for path in TIMESTAMP_PATHS:
        ts = parse_timestamp(dig(post, path))
        if ts is not None:
            return ts
    return None
