from __future__ import annotations

import pandas as pd

from engagement_audit.features.glitch import safe_ratio
from engagement_audit.pipeline.evaluate import SubmissionVerdict
from engagement_audit.platforms import Platform
from engagement_audit.scans import ScanSeries

_BASE_METRICS = ["views", "likes", "comments"]
_EXTRA_METRICS: dict[Platform, list[str]] = {
    Platform.tiktok: ["saves", "shares"],
    Platform.snapchat: ["shares"],
}
# (metric, decimals) per ratio column.
_BASE_RATIOS = [("likes", 2), ("comments", 3)]
_EXTRA_RATIOS: dict[Platform, list[tuple[str, int]]] = {
    Platform.tiktok: [("saves", 2), ("shares", 3)],
}


def report_metrics(platform: Platform) -> list[str]:
    return _BASE_METRICS + _EXTRA_METRICS.get(platform, [])


def format_percent(numerator: int, denominator: int, decimals: int) -> str:
    return f"{safe_ratio(numerator, denominator) * 100:.{decimals}f}%"


def build_scan_table(series: ScanSeries, platform: Platform) -> pd.DataFrame:
    """Per-scan metrics plus engagement ratios (as formatted percentages) for one submission."""
    metrics = report_metrics(platform)
    ratios = _BASE_RATIOS + _EXTRA_RATIOS.get(platform, [])
    columns = ["scan", *metrics, *(f"{metric}_ratio" for metric, _ in ratios), "missing"]

    rows: list[dict[str, object]] = []
    for position, scan in enumerate(series, start=1):
        row: dict[str, object] = {"scan": position}
        for metric in metrics:
            row[metric] = scan.metric(metric)
        for metric, decimals in ratios:
            row[f"{metric}_ratio"] = format_percent(scan.metric(metric), scan.views, decimals)
        row["missing"] = scan.missing
        rows.append(row)
    return pd.DataFrame(rows, columns=columns)


def verdict_label(verdict: SubmissionVerdict | None) -> str:
    if verdict is None:
        return "Insufficient Data"
    return "Botted" if verdict.should_reject else "Not Botted"
