"""Single-scan glitch detection and bridging.

A collection run occasionally reads a metric as zero (or not at all) for one scan
even though the scans on either side carry real values. Rules must not treat that
dropout as a collapse or as a sudden appearance.

Two related but independent notions are computed for metric ``m`` at transition
``i`` (scan ``i - 1`` compared with scan ``i``):

* ``is_glitch``: the transition touches a single-scan dropout, either because the
  current scan is the dropout or because the previous scan was. Rules guarded by
  the glitch flag are skipped for that metric on that transition.
* ``effective_pair``: when the current scan is the dropout, the comparison is
  bridged to the next scan so ratio and magnitude rules span the gap.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from engagement_audit.scans import ScanSeries, ScanSnapshot


@dataclass(frozen=True)
class EffectiveMetricPair:
    metric: str
    prev: int
    curr: int
    prev_views: int
    curr_views: int
    bridged: bool = False


def is_zeroish(value: object) -> bool:
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        return True
    return not math.isfinite(value) or value == 0


def _value(scan: ScanSnapshot | None, metric: str) -> int:
    if scan is None:
        return 0
    value = scan.metric(metric)
    return 0 if is_zeroish(value) else int(value)


def is_glitch(series: ScanSeries, index: int, metric: str) -> bool:
    if index < 1:
        return False
    prev_scan = series[index - 1]
    curr_scan = series[index]
    next_scan = series.get(index + 1)
    prev_prev_scan = series.get(index - 2)

    current_dropout = (
        is_zeroish(curr_scan.metric(metric))
        and next_scan is not None
        and _value(prev_scan, metric) > 0
        and _value(next_scan, metric) > 0
    )
    previous_dropout = (
        is_zeroish(prev_scan.metric(metric))
        and prev_prev_scan is not None
        and _value(prev_prev_scan, metric) > 0
        and _value(curr_scan, metric) > 0
    )
    return current_dropout or previous_dropout


def effective_pair(series: ScanSeries, index: int, metric: str) -> EffectiveMetricPair:
    prev_scan = series[index - 1]
    curr_scan = series[index]
    next_scan = series.get(index + 1)

    if (
        next_scan is not None
        and is_zeroish(curr_scan.metric(metric))
        and _value(prev_scan, metric) > 0
        and _value(next_scan, metric) > 0
    ):
        return EffectiveMetricPair(
            metric=metric,
            prev=_value(prev_scan, metric),
            curr=_value(next_scan, metric),
            prev_views=prev_scan.views,
            curr_views=_value(next_scan, "views"),
            bridged=True,
        )
    return EffectiveMetricPair(
        metric=metric,
        prev=_value(prev_scan, metric),
        curr=_value(curr_scan, metric),
        prev_views=prev_scan.views,
        curr_views=curr_scan.views,
    )


def safe_ratio(numerator: float, denominator: float) -> float:
    """Divide, treating a non-positive denominator as a zero ratio."""
    if denominator <= 0:
        return 0.0
    return numerator / denominator
