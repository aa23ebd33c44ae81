from __future__ import annotations

_RECOMMENDATIONS: tuple[str, ...] = (
    "Post more content during peak hours (6-9 PM)",
    "Use trending hashtags in your niche",
    "Engage more with your audience through comments",
    "Create more video content - it performs 40% better",
)


def static_recommendations() -> list[str]:
    return list(_RECOMMENDATIONS)
