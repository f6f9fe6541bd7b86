from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from engagement_audit.features.glitch import EffectiveMetricPair, effective_pair, is_glitch
from engagement_audit.platforms import Platform
from engagement_audit.scans import ScanSeries, ScanSnapshot

Severity = Literal["reject", "note"]


@dataclass(frozen=True)
class AnomalyReason:
    rule: str
    message: str
    index: int
    severity: Severity = "reject"
    # Unreported rejects still count toward the verdict but add no reason text;
    # the reporting path explains them through run summaries instead.
    reported: bool = True

    @property
    def is_reject(self) -> bool:
        return self.severity == "reject"


@dataclass(frozen=True)
class TransitionContext:
    series: ScanSeries
    index: int
    platform: Platform
    leading_zero_count: int = 0

    @property
    def prev(self) -> ScanSnapshot:
        return self.series[self.index - 1]

    @property
    def curr(self) -> ScanSnapshot:
        return self.series[self.index]

    @property
    def mature(self) -> bool:
        return self.index >= 1

    def glitch(self, metric: str) -> bool:
        return is_glitch(self.series, self.index, metric)

    def pair(self, metric: str) -> EffectiveMetricPair:
        return effective_pair(self.series, self.index, metric)


@dataclass(frozen=True)
class TransitionResult:
    index: int
    reasons: tuple[AnomalyReason, ...] = field(default_factory=tuple)

    @property
    def should_reject(self) -> bool:
        return any(reason.is_reject for reason in self.reasons)

    @property
    def messages(self) -> list[str]:
        return [reason.message for reason in self.reasons if reason.is_reject and reason.reported]

    @property
    def notes(self) -> list[AnomalyReason]:
        return [reason for reason in self.reasons if reason.severity == "note"]


class TransitionRule:
    name: str
    # None means every platform.
    platforms: frozenset[Platform] | None = None
    excluded_platforms: frozenset[Platform] = frozenset()

    def applies_to(self, platform: Platform) -> bool:
        if platform in self.excluded_platforms:
            return False
        return self.platforms is None or platform in self.platforms

    def evaluate(self, context: TransitionContext) -> list[AnomalyReason]:
        raise NotImplementedError

    def reject(
        self,
        context: TransitionContext,
        message: str,
        *,
        reported: bool = True,
    ) -> AnomalyReason:
        return AnomalyReason(
            rule=self.name,
            message=message,
            index=context.index,
            severity="reject",
            reported=reported,
        )

    def note(self, context: TransitionContext, message: str) -> AnomalyReason:
        return AnomalyReason(rule=self.name, message=message, index=context.index, severity="note")
