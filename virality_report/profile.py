from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Mapping

from .normalize import first_count
from .paths import dig, is_array, parse_path

FOLLOWER_PATHS = tuple(
    parse_path(d)
    for d in (
        "follower_count",
        "followers_count",
        "followersCount",
        "edge_followed_by.count",
        "followers",
        "stats.followerCount",
        "authorMeta.fans",
        "subscriberCount",
        "subscribers",
        "numberOfSubscribers",
    )
)


@dataclass(frozen=True)
class ProfileOverview:
    avatar_url: str | None = None
    name: str | None = None
    username: str | None = None
    bio: str | None = None
    is_verified: bool = False

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


def _coerce_str(value: Any) -> str | None:
    if isinstance(value, str):
        s = value.strip()
        return s if s else None
    return None


def unwrap_profile(profile: Any) -> Mapping[str, Any]:
    """
    Find the user object inside a profile payload.

    Supports `{user: {...}}`, `{data: {user: {...}}}`, `{data: {...}}` and the bare object.
    Dataset-style list payloads use their first mapping.
    """
    if is_array(profile):
        profile = next((p for p in profile if isinstance(p, Mapping)), None)

    if not isinstance(profile, Mapping):
        return {}

    for candidate in (profile.get("user"), dig(profile, ("data", "user")), profile.get("data")):
        if isinstance(candidate, Mapping) and candidate:
            return candidate
    return profile


def resolve_followers(profile: Any) -> int | float | None:
    """First positive follower/subscriber count on the profile, or None when unknown."""
    user = unwrap_profile(profile)
    n = first_count(user, FOLLOWER_PATHS)
    return n if n > 0 else None


def profile_overview(profile: Any) -> ProfileOverview:
    user = unwrap_profile(profile)

    avatar_url = (
        _coerce_str(user.get("profile_pic_url"))
        or _coerce_str(dig(user, ("hd_profile_pic_url_info", "url")))
        or _coerce_str(user.get("profile_pic_url_hd"))
        or _coerce_str(dig(user, ("profile_pic_url_info", "url")))
        or _coerce_str(user.get("profilePicUrlHD"))
        or _coerce_str(user.get("profilePicUrl"))
        or _coerce_str(user.get("avatar"))
        or _coerce_str(user.get("channelAvatarUrl"))
    )
    username = _coerce_str(user.get("username"))
    name = (
        _coerce_str(user.get("full_name"))
        or _coerce_str(user.get("fullName"))
        or _coerce_str(user.get("nickName"))
        or _coerce_str(user.get("channelName"))
        or _coerce_str(user.get("name"))
        or username
    )
    bio = (
        _coerce_str(user.get("biography"))
        or _coerce_str(user.get("bio"))
        or _coerce_str(user.get("signature"))
        or _coerce_str(user.get("channelDescription"))
    )
    is_verified = bool(
        user.get("is_verified") or user.get("verified") or user.get("isChannelVerified")
    )

    return ProfileOverview(
        avatar_url=avatar_url,
        name=name,
        username=username,
        bio=bio,
        is_verified=is_verified,
    )
