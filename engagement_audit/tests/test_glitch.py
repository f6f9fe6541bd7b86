from __future__ import annotations

import math

from engagement_audit.features.glitch import (
    EffectiveMetricPair,
    effective_pair,
    is_glitch,
    is_zeroish,
    safe_ratio,
)
from engagement_audit.scans import ScanSeries, ScanSnapshot


def _likes_series(views: list[int], likes: list[int]) -> ScanSeries:
    return ScanSeries(ScanSnapshot(views=v, likes=l) for v, l in zip(views, likes))


def test_is_zeroish() -> None:
    assert is_zeroish(0)
    assert is_zeroish(math.nan)
    assert is_zeroish(None)
    assert not is_zeroish(3)


def test_sandwiched_dropout_is_a_glitch_on_both_sides() -> None:
    series = _likes_series([1000, 1010, 1020], [100, 0, 120])

    assert is_glitch(series, 1, "likes")
    assert is_glitch(series, 2, "likes")
    assert not is_glitch(series, 1, "comments")


def test_bridging_spans_the_dropout() -> None:
    series = _likes_series([1000, 1010, 1020], [100, 0, 120])

    assert effective_pair(series, 1, "likes") == EffectiveMetricPair(
        metric="likes",
        prev=100,
        curr=120,
        prev_views=1000,
        curr_views=1020,
        bridged=True,
    )
    unbridged = effective_pair(series, 2, "likes")
    assert not unbridged.bridged
    assert (unbridged.prev, unbridged.curr) == (0, 120)


def test_trailing_drop_is_not_a_glitch() -> None:
    series = _likes_series([1000, 1010], [100, 0])

    assert not is_glitch(series, 1, "likes")
    pair = effective_pair(series, 1, "likes")
    assert (pair.prev, pair.curr, pair.bridged) == (100, 0, False)


def test_sustained_drop_is_not_a_glitch() -> None:
    series = _likes_series([1000, 1010, 1020], [100, 0, 0])

    assert not is_glitch(series, 1, "likes")
    assert not is_glitch(series, 2, "likes")
    assert not effective_pair(series, 1, "likes").bridged


def test_first_scan_has_no_previous_side() -> None:
    series = _likes_series([0, 1000, 1010], [0, 100, 120])

    assert not is_glitch(series, 1, "likes")
    assert not is_glitch(series, 0, "likes")


def test_safe_ratio_treats_zero_denominator_as_zero() -> None:
    assert safe_ratio(5, 0) == 0.0
    assert safe_ratio(0, 0) == 0.0
    assert safe_ratio(5, 10) == 0.5
