from __future__ import annotations

import logging
import math
import re
from numbers import Real
from typing import Any, Iterable, Mapping

from engagement_audit.scans import METRICS, ScanSeries, ScanSnapshot

LOGGER = logging.getLogger(__name__)

_NUMBER_NOISE = re.compile(r"[,\s]")


def coerce_metric(value: Any) -> tuple[int, bool]:
    """Return ``(value, missing)`` for one raw metric reading.

    Non-finite, empty or unparseable readings become ``(0, True)``. Negative counts are
    clamped to zero without being treated as missing.
    """
    if value is None or isinstance(value, bool):
        return 0, True
    if isinstance(value, str):
        token = _NUMBER_NOISE.sub("", value)
        try:
            value = float(token)
        except ValueError:
            return 0, True
    if not isinstance(value, Real):
        return 0, True
    number = float(value)
    if not math.isfinite(number):
        return 0, True
    return max(0, int(number)), False


def normalize_scan(record: Mapping[str, Any]) -> ScanSnapshot:
    """Build one scan from a raw record; metrics absent from the record count as 0."""
    values: dict[str, int] = {}
    missing = bool(record.get("missing", False))
    for name in METRICS:
        if name not in record:
            values[name] = 0
            continue
        values[name], metric_missing = coerce_metric(record[name])
        missing = missing or metric_missing
    return ScanSnapshot(missing=missing, **values)


def drop_trailing_zero_scans(scans: list[ScanSnapshot]) -> list[ScanSnapshot]:
    trimmed = list(scans)
    while trimmed and trimmed[-1].is_all_zero():
        trimmed.pop()
    return trimmed


def normalize_scans(records: Iterable[Mapping[str, Any]]) -> ScanSeries:
    """Clean a raw oldest-first record sequence into a ScanSeries."""
    scans = [normalize_scan(record) for record in records]
    trimmed = drop_trailing_zero_scans(scans)
    dropped = len(scans) - len(trimmed)
    if dropped:
        LOGGER.debug("Dropped %d trailing all-zero scan(s)", dropped)
    n_missing = sum(1 for scan in trimmed if scan.missing)
    if n_missing:
        LOGGER.debug("%d of %d scan(s) carry missing metric data", n_missing, len(trimmed))
    return ScanSeries(trimmed)
