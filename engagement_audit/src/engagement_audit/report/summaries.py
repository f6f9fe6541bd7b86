"""Collapse runs of repeated per-scan conditions into single range-level lines.

Summaries only change how findings are reported; they never feed the verdict.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from engagement_audit.config import SummariesConfig
from engagement_audit.platforms import Platform
from engagement_audit.scans import ScanSeries, ScanSnapshot

ZERO_LIKES = "zero likes"
ZERO_COMMENTS = "zero comments"
LOW_COMMENT_RATIO = "low comment ratio"
ULTRA_LOW_ENGAGEMENT = "ultra-low engagement"


@dataclass(frozen=True)
class RunSummary:
    condition: str
    start: int
    end: int
    detail: str = ""

    @property
    def length(self) -> int:
        return self.end - self.start

    def covers(self, scan_index: int) -> bool:
        return self.start <= scan_index < self.end

    @property
    def message(self) -> str:
        text = f"Scans {self.start + 1}–{self.end}: {self.condition} across {self.length} scans"
        return f"{text} ({self.detail})" if self.detail else text


def find_runs(
    series: ScanSeries,
    condition: Callable[[ScanSnapshot], bool],
    min_run: int,
) -> list[tuple[int, int]]:
    """Return ``(start, end)`` half-open index ranges of qualifying runs, in order."""
    runs: list[tuple[int, int]] = []
    start: int | None = None
    for index, scan in enumerate(series):
        if condition(scan):
            if start is None:
                start = index
            continue
        if start is not None:
            if index - start >= min_run:
                runs.append((start, index))
            start = None
    if start is not None and len(series) - start >= min_run:
        runs.append((start, len(series)))
    return runs


def summarize_runs(
    series: ScanSeries,
    condition: Callable[[ScanSnapshot], bool],
    min_run: int,
    label: str,
    detail: str = "",
) -> list[RunSummary]:
    return [
        RunSummary(condition=label, start=start, end=end, detail=detail)
        for start, end in find_runs(series, condition, min_run)
    ]


def summarize_zero_likes(
    series: ScanSeries,
    min_views: int = 1000,
    min_run: int = 5,
) -> list[RunSummary]:
    return summarize_runs(
        series,
        lambda scan: scan.views > min_views and scan.likes == 0,
        min_run,
        ZERO_LIKES,
        "may be hidden likes",
    )


def summarize_zero_comments(
    series: ScanSeries,
    min_views: int = 5000,
    min_run: int = 3,
) -> list[RunSummary]:
    return summarize_runs(
        series,
        lambda scan: scan.views > min_views and scan.comments == 0,
        min_run,
        ZERO_COMMENTS,
        f"{min_views // 1000}K+ views with 0 comments",
    )


def summarize_low_comment_ratio(
    series: ScanSeries,
    min_views: int = 5000,
    min_run: int = 3,
    threshold: float = 0.01,
) -> list[RunSummary]:
    return summarize_runs(
        series,
        lambda scan: scan.views > min_views and scan.comments / scan.views < threshold,
        min_run,
        LOW_COMMENT_RATIO,
        f"{min_views // 1000}K+ views with <{threshold * 100:.2f}% comment ratio",
    )


def summarize_ultra_low_engagement(
    series: ScanSeries,
    platform: Platform,
    min_views: int = 20000,
    min_run: int = 3,
) -> list[RunSummary]:
    if platform != Platform.snapchat:
        return []
    return summarize_runs(
        series,
        lambda scan: scan.views > min_views and scan.comments == 0 and scan.shares <= 1,
        min_run,
        ULTRA_LOW_ENGAGEMENT,
        f"{min_views // 1000}K+ views with 0 comments and ≤1 shares",
    )


def configured_summaries(
    series: ScanSeries,
    platform: Platform,
    config: SummariesConfig,
) -> dict[str, list[RunSummary]]:
    """All four run summaries for a series, keyed by condition label."""
    return {
        ZERO_LIKES: summarize_zero_likes(
            series, config.zero_likes_min_views, config.zero_likes_min_run
        ),
        ZERO_COMMENTS: summarize_zero_comments(
            series, config.zero_comments_min_views, config.zero_comments_min_run
        ),
        LOW_COMMENT_RATIO: summarize_low_comment_ratio(
            series,
            config.low_comment_ratio_min_views,
            config.low_comment_ratio_min_run,
            config.low_comment_ratio_threshold,
        ),
        ULTRA_LOW_ENGAGEMENT: summarize_ultra_low_engagement(
            series, platform, config.ultra_low_min_views, config.ultra_low_min_run
        ),
    }
