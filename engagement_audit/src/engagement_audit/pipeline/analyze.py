from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Literal

from engagement_audit.config import AppConfig
from engagement_audit.io.fetch import fetch_dump_html
from engagement_audit.io.parse_html import parse_scan_table
from engagement_audit.pipeline.evaluate import evaluate_series
from engagement_audit.platforms import (
    COMMENT_SUMMARY_PLATFORMS,
    ZERO_LIKES_PLATFORMS,
    Platform,
    infer_platform_from_url,
    normalize_platform,
)
from engagement_audit.preprocess.normalize import normalize_scans
from engagement_audit.report.summaries import (
    LOW_COMMENT_RATIO,
    ULTRA_LOW_ENGAGEMENT,
    ZERO_COMMENTS,
    ZERO_LIKES,
    RunSummary,
    configured_summaries,
)
from engagement_audit.scans import ScanSeries

LOGGER = logging.getLogger(__name__)

AnalysisStatus = Literal["flagged", "clean", "insufficient_data", "error"]


class InsufficientScanData(ValueError):
    pass


@dataclass
class ScanReasons:
    index: int
    reasons: list[str] = field(default_factory=list)


@dataclass
class AnalysisResult:
    url: str
    platform: str
    scan_count: int
    status: AnalysisStatus
    flagged: list[str] = field(default_factory=list)
    per_scan: list[ScanReasons] = field(default_factory=list)
    zero_comment_summaries: list[str] | None = None
    low_comment_ratio_summaries: list[str] | None = None
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _scan_line(index: int, reasons: list[str]) -> str:
    return f"Scan {index}: Anomalie : {'; '.join(reasons)}"


def _condense(
    per_scan: list[tuple[int, list[tuple[str, str]]]],
    summaries: dict[str, list[RunSummary]],
) -> list[str]:
    """Per-scan flag lines with summarized reasons removed, then the summary lines.

    A reason is dropped only when its scan lies inside a summary run for the same rule;
    rejects without reason text are listed by message when no run explains them.
    """
    summarized_rules = {
        ZERO_LIKES: "zero_likes",
        ULTRA_LOW_ENGAGEMENT: "snapchat_ultra_low_engagement",
    }
    covered: set[tuple[str, int]] = set()
    for label, rule in summarized_rules.items():
        for summary in summaries.get(label, []):
            covered.update((rule, index) for index in range(summary.start, summary.end))

    lines: list[str] = []
    for index, reasons in per_scan:
        kept = [message for rule, message in reasons if (rule, index) not in covered]
        if kept:
            lines.append(_scan_line(index, kept))
    for label in (ZERO_LIKES, ULTRA_LOW_ENGAGEMENT):
        lines.extend(summary.message for summary in summaries.get(label, []))
    return lines


def analyze_series(
    series: ScanSeries,
    platform: Platform | str,
    config: AppConfig | None = None,
    source: str = "",
) -> AnalysisResult:
    config = config or AppConfig()
    platform = normalize_platform(platform)
    valid = series.valid()
    verdict = evaluate_series(valid, platform, config=config)
    if verdict is None:
        return AnalysisResult(
            url=source,
            platform=platform.value,
            scan_count=len(series),
            status="insufficient_data",
        )

    per_scan_rows: list[tuple[int, list[tuple[str, str]]]] = []
    per_scan: list[ScanReasons] = []
    for result in verdict.transitions:
        rejects = [(reason.rule, reason.message) for reason in result.reasons if reason.is_reject]
        per_scan_rows.append((result.index, rejects))
        per_scan.append(ScanReasons(index=result.index, reasons=result.messages))

    summaries = configured_summaries(valid, platform, config.summaries)
    if platform not in ZERO_LIKES_PLATFORMS:
        summaries[ZERO_LIKES] = []
    flagged = _condense(per_scan_rows, summaries)

    zero_comment_summaries: list[str] | None = None
    low_ratio_summaries: list[str] | None = None
    if platform in COMMENT_SUMMARY_PLATFORMS:
        zero_comment_summaries = [summary.message for summary in summaries[ZERO_COMMENTS]]
        low_ratio_summaries = [summary.message for summary in summaries[LOW_COMMENT_RATIO]]

    return AnalysisResult(
        url=source,
        platform=platform.value,
        scan_count=len(series),
        status="flagged" if flagged else "clean",
        flagged=flagged,
        per_scan=per_scan,
        zero_comment_summaries=zero_comment_summaries,
        low_comment_ratio_summaries=low_ratio_summaries,
    )


def analyze_url(url: str, config: AppConfig | None = None) -> AnalysisResult:
    config = config or AppConfig()
    html = fetch_dump_html(
        url,
        timeout=config.input.request_timeout_seconds,
        user_agent=config.input.user_agent,
    )
    platform = infer_platform_from_url(url)
    records = parse_scan_table(html, platform, newest_first=config.input.newest_first)
    series = normalize_scans(records)
    if not series.valid():
        raise InsufficientScanData("No scans found.")
    return analyze_series(series, platform, config=config, source=url)


def analyze_batch(urls: list[str], config: AppConfig | None = None) -> list[AnalysisResult]:
    """Analyze every URL; a failure becomes an ``error`` result, never a clean one."""
    config = config or AppConfig()
    results: list[AnalysisResult] = []
    for url in urls:
        try:
            results.append(analyze_url(url, config=config))
        except Exception as exc:
            LOGGER.warning("Could not analyze %s: %s", url, exc)
            results.append(
                AnalysisResult(
                    url=url,
                    platform=Platform.unknown.value,
                    scan_count=0,
                    status="error",
                    flagged=[f"Error: {exc}"],
                    error=str(exc),
                )
            )
    return results


def format_result_line(position: int, result: AnalysisResult) -> str:
    if result.status == "insufficient_data":
        return f"url{position}: ⚪ Insufficient data ({result.scan_count} scans)"
    if result.status == "error":
        return f"url{position}: ❌ ({' | '.join(result.flagged)})"
    if result.flagged:
        return f"url{position}: 🚩 ({' | '.join(result.flagged)})"
    return f"url{position}: ✅ No anomalies detected"
