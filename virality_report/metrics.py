from __future__ import annotations

import math
from typing import Any, Iterable

from .normalize import extract_fields
from .post import AggregateMetrics


def _ratio(num: float, den: float) -> float:
    try:
        return num / den
    except OverflowError:
        return math.inf


def aggregate(posts: Iterable[Any]) -> AggregateMetrics:
    """
    Sum per-post counters into report totals and an engagement rate.

    The rate is engagement per 100 views when any views exist, otherwise the average
    engagement per post. Shares are reported but not counted as engagement.
    """
    normalized = [extract_fields(p) for p in posts]

    total_views = sum(p.views for p in normalized)
    total_likes = sum(p.likes for p in normalized)
    total_comments = sum(p.comments for p in normalized)
    total_shares = sum(p.shares for p in normalized)
    total_bookmarks = sum(p.bookmarks for p in normalized)

    total_engagement = total_likes + total_comments + total_bookmarks

    engagement_rate_pct: float | None = None
    if total_views > 0:
        engagement_rate_pct = _ratio(total_engagement, total_views) * 100
    elif normalized:
        per_post = _ratio(total_engagement, len(normalized))
        engagement_rate_pct = float(per_post) if math.isfinite(per_post) else 0.0

    return AggregateMetrics(
        total_publications=len(normalized),
        total_views=total_views,
        total_likes=total_likes,
        total_comments=total_comments,
        total_shares=total_shares,
        total_bookmarks=total_bookmarks,
        engagement_rate_pct=engagement_rate_pct,
    )
