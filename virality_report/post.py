from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

Number = int | float


@dataclass(frozen=True)
class NormalizedPost:
    """Canonical per-post counters and display fields, whatever the provider shape."""

    views: Number = 0
    likes: Number = 0
    comments: Number = 0
    shares: Number = 0
    bookmarks: Number = 0

    caption: str | None = None
    thumbnail_url: str | None = None

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class RankedPost(NormalizedPost):
    rank: int = 0
    engagement_pct: float = 0.0


@dataclass(frozen=True)
class AggregateMetrics:
    total_publications: int = 0
    total_views: Number = 0
    total_likes: Number = 0
    total_comments: Number = 0
    total_shares: Number = 0
    total_bookmarks: Number = 0

    # None only when there were no posts at all.
    engagement_rate_pct: float | None = None

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)
