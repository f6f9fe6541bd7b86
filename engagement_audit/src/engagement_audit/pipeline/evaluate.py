from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from engagement_audit.config import AppConfig
from engagement_audit.detectors.base import (
    AnomalyReason,
    TransitionContext,
    TransitionResult,
    TransitionRule,
)
from engagement_audit.detectors.registry import default_transition_rules, default_window_detector
from engagement_audit.detectors.windows import WindowPatternDetector
from engagement_audit.platforms import Platform, normalize_platform
from engagement_audit.scans import ScanSeries

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class SubmissionVerdict:
    should_reject: bool
    botted_reason: str
    platform: Platform
    scan_count: int
    evaluated_at: datetime
    transitions: tuple[TransitionResult, ...] = ()

    @property
    def reasons(self) -> list[AnomalyReason]:
        return [reason for result in self.transitions for reason in result.reasons]

    def to_dict(self) -> dict[str, object]:
        return {
            "should_reject": self.should_reject,
            "botted_reason": self.botted_reason,
            "platform": self.platform.value,
            "scan_count": self.scan_count,
            "evaluated_at": self.evaluated_at.isoformat(),
        }


def evaluate_transition(
    series: ScanSeries,
    index: int,
    platform: Platform | str,
    *,
    rules: list[TransitionRule] | None = None,
    window_detector: WindowPatternDetector | None = None,
    leading_zero_count: int | None = None,
) -> TransitionResult:
    """Run every applicable rule on the transition from scan ``index - 1`` to ``index``."""
    if not 1 <= index < len(series):
        raise IndexError(f"transition index {index} out of range for {len(series)} scans")
    platform = normalize_platform(platform)
    rules = default_transition_rules() if rules is None else rules
    window_detector = default_window_detector() if window_detector is None else window_detector
    context = TransitionContext(
        series=series,
        index=index,
        platform=platform,
        leading_zero_count=(
            series.leading_zero_view_count() if leading_zero_count is None else leading_zero_count
        ),
    )

    reasons: list[AnomalyReason] = []
    for rule in rules:
        if rule.applies_to(platform):
            reasons.extend(rule.evaluate(context))
    reasons.extend(window_detector.evaluate(context))
    return TransitionResult(index=index, reasons=tuple(reasons))


def format_reason_line(evaluated_at: datetime, index: int, message: str) -> str:
    return f"{evaluated_at.isoformat()} between scans {index} and {index + 1}: {message}"


def evaluate_series(
    series: ScanSeries,
    platform: Platform | str,
    *,
    config: AppConfig | None = None,
    evaluated_at: datetime | None = None,
) -> SubmissionVerdict | None:
    """Evaluate a submission's scans; None means there is too little data for a verdict."""
    platform = normalize_platform(platform)
    valid = series.valid()
    if len(valid) < 2:
        LOGGER.debug("Insufficient data: %d valid scan(s) of %d", len(valid), len(series))
        return None

    config = config or AppConfig()
    evaluated_at = evaluated_at or datetime.now(timezone.utc)
    rules = default_transition_rules(config)
    window_detector = default_window_detector(config)
    leading_zero_count = valid.leading_zero_view_count()

    results: list[TransitionResult] = []
    lines: list[str] = []
    for index in range(1, len(valid)):
        result = evaluate_transition(
            valid,
            index,
            platform,
            rules=rules,
            window_detector=window_detector,
            leading_zero_count=leading_zero_count,
        )
        results.append(result)
        lines.extend(
            format_reason_line(evaluated_at, index, message) for message in result.messages
        )

    should_reject = any(result.should_reject for result in results)
    if should_reject:
        LOGGER.info(
            "Rejecting %s submission: %d transition(s) flagged",
            platform.value,
            sum(1 for result in results if result.should_reject),
        )
    return SubmissionVerdict(
        should_reject=should_reject,
        botted_reason="\n".join(lines),
        platform=platform,
        scan_count=len(valid),
        evaluated_at=evaluated_at,
        transitions=tuple(results),
    )
