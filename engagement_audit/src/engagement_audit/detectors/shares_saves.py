from __future__ import annotations

from engagement_audit.detectors.base import AnomalyReason, TransitionContext, TransitionRule
from engagement_audit.platforms import Platform


class FastGrowthRule(TransitionRule):
    """Shares or saves growing (or appearing) much faster than views.

    Each ``(view_growth, multiplier)`` check rejects when views grew by less than
    ``view_growth`` times and the metric either appeared from zero (10+) or grew by
    more than ``multiplier`` times. Checks run independently, in order.
    """

    DEFAULT_CHECKS: tuple[tuple[float, float], ...] = ((2.0, 10.0), (1.2, 3.0))
    MIN_APPEARED = 10

    def __init__(
        self,
        metric: str,
        checks: tuple[tuple[float, float], ...] = DEFAULT_CHECKS,
    ) -> None:
        self.metric = metric
        self.name = f"{metric}_fast_growth"
        self.checks = checks

    def _check(
        self,
        context: TransitionContext,
        current: int,
        previous: int,
        view_growth: float,
        multiplier: float,
    ) -> AnomalyReason | None:
        views_flat = context.curr.views < context.prev.views * view_growth
        if previous == 0 and current >= self.MIN_APPEARED and views_flat:
            return self.reject(
                context,
                f"{self.metric} appeared (0→{current}) without corresponding jump in views",
            )
        if previous > 0 and views_flat and current > previous * multiplier:
            return self.reject(
                context, f"{self.metric} grew quickly without corresponding jump in views"
            )
        return None

    def evaluate(self, context: TransitionContext) -> list[AnomalyReason]:
        if not context.mature or context.glitch(self.metric):
            return []
        pair = context.pair(self.metric)
        reasons: list[AnomalyReason] = []
        for view_growth, multiplier in self.checks:
            reason = self._check(context, pair.curr, pair.prev, view_growth, multiplier)
            if reason is not None:
                reasons.append(reason)
        return reasons


class AppearedWithoutViewsRule(TransitionRule):
    """A metric jumping from exactly zero to 10+ while views did not double."""

    MIN_APPEARED = 10

    def __init__(self, metric: str) -> None:
        self.metric = metric
        self.name = f"{metric}_appeared"

    def evaluate(self, context: TransitionContext) -> list[AnomalyReason]:
        if not context.mature or context.glitch(self.metric):
            return []
        if context.pair(self.metric).bridged:
            return []
        previous = context.prev.metric(self.metric)
        current = context.curr.metric(self.metric)
        if (
            previous == 0
            and current >= self.MIN_APPEARED
            and context.curr.views < context.prev.views * 2
        ):
            return [
                self.reject(
                    context, f"{self.metric} appeared (0→X) without corresponding jump in views"
                )
            ]
        return []


class TikTokZeroMetricRule(TransitionRule):
    platforms = frozenset({Platform.tiktok})

    def __init__(self, metric: str, min_views: int, label: str) -> None:
        self.metric = metric
        self.min_views = min_views
        self.label = label
        self.name = f"tiktok_zero_{metric}"

    def evaluate(self, context: TransitionContext) -> list[AnomalyReason]:
        if context.glitch(self.metric):
            return []
        if context.curr.views >= self.min_views and context.curr.metric(self.metric) == 0:
            return [self.reject(context, f"zero {self.metric} at {self.label}+ views (TikTok)")]
        return []
