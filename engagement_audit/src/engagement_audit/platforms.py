from __future__ import annotations

from enum import Enum
from urllib.parse import parse_qs, urlparse


class Platform(str, Enum):
    tiktok = "tiktok"
    instagram = "instagram"
    snapchat = "snapchat"
    twitter = "twitter"
    facebook = "facebook"
    youtube = "youtube"
    unknown = "unknown"


PLATFORM_ALIASES = {
    "youtube-short": Platform.youtube,
    "youtube_short": Platform.youtube,
    "x": Platform.twitter,
}

# Platforms whose like counts are too unreliable (hidden or lagging) for like rules.
LIKES_UNRELIABLE = frozenset({Platform.youtube, Platform.snapchat})
ZERO_LIKES_PLATFORMS = frozenset({Platform.tiktok, Platform.instagram, Platform.youtube})
COMMENT_SUMMARY_PLATFORMS = ZERO_LIKES_PLATFORMS

_HOST_MARKERS: tuple[tuple[tuple[str, ...], Platform], ...] = (
    (("snapchat",), Platform.snapchat),
    (("tiktok",), Platform.tiktok),
    (("instagram",), Platform.instagram),
    (("youtube", "youtu.be"), Platform.youtube),
    (("twitter", "x.com"), Platform.twitter),
    (("facebook", "fb.watch"), Platform.facebook),
)

_FULL_METRICS = ("views", "likes", "comments", "saves", "shares")
_TABLE_METRICS: dict[Platform, tuple[str, ...]] = {
    Platform.snapchat: ("views", "likes", "comments", "shares"),
    Platform.youtube: ("views", "likes", "comments"),
    Platform.instagram: ("views", "likes", "comments"),
    Platform.facebook: ("views", "likes", "comments"),
    Platform.twitter: ("views", "likes", "comments"),
}


def normalize_platform(value: str | Platform | None) -> Platform:
    if isinstance(value, Platform):
        return value
    token = str(value or "").strip().lower()
    if token in PLATFORM_ALIASES:
        return PLATFORM_ALIASES[token]
    try:
        return Platform(token)
    except ValueError:
        return Platform.unknown


def _host_platform(url: str) -> Platform:
    host = (urlparse(url).hostname or "").lower()
    if not host:
        return Platform.unknown
    for markers, platform in _HOST_MARKERS:
        if any(_host_matches(host, marker) for marker in markers):
            return platform
    return Platform.unknown


def _host_matches(host: str, marker: str) -> bool:
    # Dotted markers are whole domains; bare markers match anywhere in the host.
    if "." in marker:
        return host == marker or host.endswith(f".{marker}")
    return marker in host


def infer_platform_from_url(url: str) -> Platform:
    """Infer the platform of a dump-data URL from its ``postUrl`` parameter.

    A plain post URL (no ``postUrl`` parameter) is inferred from its own host.
    """
    try:
        post_urls = parse_qs(urlparse(url).query).get("postUrl")
    except ValueError:
        return Platform.unknown
    target = post_urls[0] if post_urls else url
    return _host_platform(target)


def table_metrics(platform: Platform) -> tuple[str, ...]:
    return _TABLE_METRICS.get(platform, _FULL_METRICS)
