from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .platforms import profile_handle

_DEFAULT_OFFLINE_PROFILE: dict[str, Any] = {
    "username": "offline_creator",
    "full_name": "Offline Creator",
    "biography": "Bodyweight training notes, one session at a time.",
    "is_verified": False,
    "profile_pic_url": "https://example.com/avatar.jpg",
    "edge_followed_by": {"count": 12000},
}

# Two posts a week over six weeks, newest first, in a few provider shapes.
_DEFAULT_OFFLINE_POSTS: dict[str, Any] = {
    "data": {
        "edges": [
            {
                "node": {
                    "video_view_count": 9100,
                    "edge_liked_by": {"count": 640},
                    "edge_media_to_comment": {"count": 41},
                    "edge_media_to_caption": {
                        "edges": [{"node": {"text": "Pull-up progression day."}}]
                    },
                    "display_url": "https://example.com/p/1.jpg",
                    "taken_at_timestamp": 1735948800,
                }
            },
            {
                "node": {
                    "video_view_count": 7300,
                    "edge_liked_by": {"count": 410},
                    "edge_media_to_comment": {"count": 22},
                    "display_url": "https://example.com/p/2.jpg",
                    "taken_at_timestamp": 1735689600,
                }
            },
            {
                "node": {
                    "play_count": 15000,
                    "like_count": 1200,
                    "comment_count": 95,
                    "share_count": 30,
                    "saved_count": 55,
                    "caption": "Handstand line drills.",
                    "taken_at": 1735344000,
                }
            },
            {
                "node": {
                    "edge_liked_by": {"count": 380},
                    "edge_media_to_comment": {"count": 12},
                    "thumbnail_src": "https://example.com/p/4.jpg",
                    "taken_at_timestamp": 1735084800,
                }
            },
            {
                "node": {
                    "view_count": 4200,
                    "likes": 150,
                    "comments": 9,
                    "timestamp": "2024-12-21T10:00:00Z",
                }
            },
        ]
    }
}


@dataclass
class OfflineProfileScraper:
    """
    Network-free stand-in for ProfileScraper.

    Returns a fixed profile and posts payload so the report pipeline can be exercised
    without a provider token.
    """

    profile: dict[str, Any] = field(default_factory=lambda: dict(_DEFAULT_OFFLINE_PROFILE))
    posts: Any = field(default_factory=lambda: _DEFAULT_OFFLINE_POSTS)

    def fetch_profile(self, url: str) -> dict[str, Any]:
        out = dict(self.profile)
        handle = profile_handle(url)
        if handle:
            out["username"] = handle
        return out

    def fetch_posts(self, url: str) -> Any:
        _ = url
        return self.posts
