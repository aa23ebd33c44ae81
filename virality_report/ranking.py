from __future__ import annotations

from dataclasses import asdict
from typing import Any, Iterable

from .normalize import extract_fields
from .post import NormalizedPost, RankedPost

DEFAULT_TOP_N = 5
COMMENT_WEIGHT = 3


def post_engagement_pct(post: NormalizedPost) -> float:
    """Weighted engagement per 100 views; comments count three times as much as likes."""
    if post.views <= 0:
        return 0.0
    return (float(post.likes) + COMMENT_WEIGHT * float(post.comments)) / float(post.views) * 100


def top_posts(posts: Iterable[Any], n: int = DEFAULT_TOP_N) -> list[RankedPost]:
    """
    Rank posts with views by weighted engagement and keep the best `n`.

    Posts without views are not eligible. Equal scores keep their input order.
    """
    if n <= 0:
        return []

    scored: list[tuple[NormalizedPost, float]] = []
    for raw in posts:
        post = extract_fields(raw)
        if post.views <= 0:
            continue
        scored.append((post, post_engagement_pct(post)))

    scored.sort(key=lambda item: item[1], reverse=True)

    return [
        RankedPost(**asdict(post), rank=i, engagement_pct=pct)
        for i, (post, pct) in enumerate(scored[:n], start=1)
    ]
