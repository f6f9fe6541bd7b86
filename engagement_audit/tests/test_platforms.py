from __future__ import annotations

import pytest

from engagement_audit.platforms import (
    Platform,
    infer_platform_from_url,
    normalize_platform,
    table_metrics,
)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("TikTok", Platform.tiktok),
        (" instagram ", Platform.instagram),
        ("youtube-short", Platform.youtube),
        ("x", Platform.twitter),
        (Platform.snapchat, Platform.snapchat),
        ("myspace", Platform.unknown),
        (None, Platform.unknown),
    ],
)
def test_normalize_platform(value: str | Platform | None, expected: Platform) -> None:
    assert normalize_platform(value) == expected


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        (
            "https://dump.example.com/data?postUrl=https%3A%2F%2Fwww.tiktok.com%2F%40a%2Fvideo%2F1",
            Platform.tiktok,
        ),
        ("https://dump.example.com/data?postUrl=https://youtu.be/abc", Platform.youtube),
        ("https://www.instagram.com/reel/abc/", Platform.instagram),
        ("https://x.com/user/status/1", Platform.twitter),
        ("https://box.com/file", Platform.unknown),
        ("https://story.snapchat.com/p/1", Platform.snapchat),
        ("not a url", Platform.unknown),
    ],
)
def test_infer_platform_from_url(url: str, expected: Platform) -> None:
    assert infer_platform_from_url(url) == expected


def test_table_metric_rows_per_platform() -> None:
    assert table_metrics(Platform.tiktok) == ("views", "likes", "comments", "saves", "shares")
    assert table_metrics(Platform.snapchat) == ("views", "likes", "comments", "shares")
    assert table_metrics(Platform.youtube) == ("views", "likes", "comments")
