from __future__ import annotations

import re
from typing import Any, Literal
from urllib.parse import urlsplit

from .errors import ReportInputError

Platform = Literal["instagram", "tiktok", "youtube"]

_PROFILE_URL_RE = re.compile(r"^https?://(www\.)?(instagram\.com|tiktok\.com|youtube\.com)")

_PLATFORM_HOSTS: tuple[tuple[str, Platform], ...] = (
    ("instagram.com", "instagram"),
    ("tiktok.com", "tiktok"),
    ("youtube.com", "youtube"),
)

_YOUTUBE_PATH_PREFIXES = frozenset({"channel", "c", "user"})

_LABELS: dict[str, str] = {
    "instagram": "Instagram",
    "tiktok": "TikTok",
    "youtube": "YouTube",
}


def validate_profile_url(url: Any) -> str:
    """
    Check that `url` points at a supported profile and return it trimmed.

    Raises ReportInputError for missing, non-string or unsupported URLs.
    """
    if not isinstance(url, str) or not url.strip():
        raise ReportInputError("URL is required and must be a string")

    cleaned = url.strip()
    if not _PROFILE_URL_RE.match(cleaned):
        raise ReportInputError("Invalid URL. Must be Instagram, TikTok, or YouTube profile URL")
    return cleaned


def detect_platform(url: str | None) -> Platform | None:
    if not url:
        return None

    host = (urlsplit(url.strip()).hostname or "").casefold()
    for domain, platform in _PLATFORM_HOSTS:
        if host == domain or host.endswith("." + domain):
            return platform

    # Bare text such as "instagram.com/someone" has no parsable host.
    lowered = url.casefold()
    for domain, platform in _PLATFORM_HOSTS:
        if domain in lowered:
            return platform
    return None


def platform_label(platform: str | None) -> str:
    return _LABELS.get((platform or "").casefold(), "Unknown")


def profile_handle(url: str) -> str | None:
    """
    The handle in a profile URL path, without a leading '@'.

    YouTube `/channel/<id>`, `/c/<name>` and `/user/<name>` paths give the segment
    after the prefix.
    """
    path = urlsplit(url.strip()).path
    segments = [s.strip() for s in path.split("/") if s.strip()]
    if segments and segments[0].casefold() in _YOUTUBE_PATH_PREFIXES:
        if detect_platform(url) == "youtube":
            segments = segments[1:]

    if not segments:
        return None
    return segments[0].lstrip("@") or None
