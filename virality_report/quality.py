from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Sequence

from .config_schema import ScoringConfig
from .normalize import extract_fields, extract_timestamp
from .profile import resolve_followers

_DEFAULT_SCORING = ScoringConfig()


@dataclass(frozen=True)
class ScoreBreakdown:
    followers: int | float | None
    window_size: int
    likes_sum: int | float
    comments_sum: int | float

    engagement_raw: float
    engagement_norm: float
    comment_ratio_raw: float
    comment_ratio_norm: float
    posts_per_week: float | None
    frequency_norm: float

    score: int


def _finite(value: float) -> float:
    return value if math.isfinite(value) else 0.0


def _safe_div(num: float, den: float) -> float:
    if not den:
        return 0.0
    return _finite(num / den)


def _clamp01(value: float) -> float:
    return min(1.0, max(0.0, _finite(value)))


def _linear_norm(value: float, low: float, high: float) -> float:
    """Map [low, high] onto [0, 100], clamped."""
    return _clamp01(_safe_div(value - low, high - low)) * 100


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def cadence_curve(posts_per_week: float, *, peak: float, zero: float) -> float:
    """Triangular preference: 0 at no posts, 1 at `peak` per week, back to 0 at `zero`."""
    if posts_per_week <= 0:
        return 0.0
    if posts_per_week <= peak:
        return posts_per_week / peak
    if posts_per_week <= zero:
        return (zero - posts_per_week) / (zero - peak)
    return 0.0


def posts_per_week(posts: Sequence[Any], *, weeks: int) -> float | None:
    """
    Posting rate over the `weeks` ending at the newest post.

    None when fewer than two posts carry a usable timestamp.
    """
    stamps = [ts for ts in (extract_timestamp(p) for p in posts) if ts is not None]
    if len(stamps) < 2:
        return None

    newest = max(stamps)
    start = newest - timedelta(weeks=weeks)
    in_window = sum(1 for ts in stamps if start <= ts <= newest)
    return in_window / weeks


def score_breakdown(
    profile: Any,
    posts: Sequence[Any],
    scoring: ScoringConfig | None = None,
) -> ScoreBreakdown | None:
    cfg = scoring or _DEFAULT_SCORING
    if not posts:
        return None

    followers = resolve_followers(profile)

    # First N posts in the order given; the provider is assumed to list newest first.
    window = [extract_fields(p) for p in posts[: cfg.window_posts]]
    n = len(window)
    likes_sum = sum(p.likes for p in window)
    comments_sum = sum(p.comments for p in window)

    per_post = _safe_div(likes_sum + 3 * comments_sum, n)
    if followers:
        engagement_raw = _safe_div(per_post, followers)
    else:
        # Self-normalized when followers are unknown: saturates at 1 for any activity.
        engagement_raw = _safe_div(per_post, per_post)
    engagement_norm = _linear_norm(engagement_raw, cfg.engagement_low, cfg.engagement_high)

    comment_ratio_raw = _safe_div(comments_sum, likes_sum)
    comment_ratio_norm = _linear_norm(
        comment_ratio_raw, cfg.comment_ratio_low, cfg.comment_ratio_high
    )

    rate = posts_per_week(posts, weeks=cfg.cadence_weeks)
    if rate is None:
        frequency_norm = 0.0
    else:
        frequency_norm = (
            _clamp01(
                cadence_curve(
                    rate,
                    peak=cfg.cadence_peak_per_week,
                    zero=cfg.cadence_zero_per_week,
                )
            )
            * 100
        )

    blended = (
        cfg.weight_engagement * engagement_norm
        + cfg.weight_frequency * frequency_norm
        + cfg.weight_comments * comment_ratio_norm
    )
    score = _round_half_up(_clamp01(blended / 100) * 100)

    return ScoreBreakdown(
        followers=followers,
        window_size=n,
        likes_sum=likes_sum,
        comments_sum=comments_sum,
        engagement_raw=engagement_raw,
        engagement_norm=engagement_norm,
        comment_ratio_raw=comment_ratio_raw,
        comment_ratio_norm=comment_ratio_norm,
        posts_per_week=rate,
        frequency_norm=frequency_norm,
        score=score,
    )


def profile_quality_score(
    profile: Any,
    posts: Sequence[Any],
    scoring: ScoringConfig | None = None,
) -> int | None:
    """
    Blend engagement, posting cadence and comment ratio into a 0-100 score.

    Returns None when there are no posts or the inputs cannot be scored; never raises.
    """
    try:
        breakdown = score_breakdown(profile, list(posts or ()), scoring)
    except Exception:
        return None
    return breakdown.score if breakdown is not None else None
