from __future__ import annotations

import logging

from engagement_audit.detectors.base import AnomalyReason, TransitionContext
from engagement_audit.platforms import Platform

LOGGER = logging.getLogger(__name__)

DEFAULT_WINDOW_SIZE = 6


def window_start(total: int, index: int, size: int = DEFAULT_WINDOW_SIZE) -> int:
    """First scan of the ``size``-scan window centered on ``index``, clamped to the series."""
    return max(0, min(index - size // 2, total - size))


def _trace(views: list[int]) -> str:
    return " → ".join(str(value) for value in views)


class WindowRule:
    name: str

    def __init__(self, plateau_tolerance: int = 30) -> None:
        self.plateau_tolerance = plateau_tolerance

    def is_plateau(self, a: int, b: int) -> bool:
        return abs(a - b) <= self.plateau_tolerance

    def evaluate(self, context: TransitionContext, views: list[int]) -> list[AnomalyReason]:
        raise NotImplementedError

    def reject(self, context: TransitionContext, message: str) -> AnomalyReason:
        return AnomalyReason(rule=self.name, message=message, index=context.index)


class PlateauJumpPlateauRule(WindowRule):
    name = "plateau_jump_plateau"

    def __init__(
        self,
        plateau_tolerance: int = 30,
        jump_min_views: int = 500,
        max_relative_drift: float = 0.1,
    ) -> None:
        super().__init__(plateau_tolerance=plateau_tolerance)
        self.jump_min_views = jump_min_views
        self.max_relative_drift = max_relative_drift

    def evaluate(self, context: TransitionContext, views: list[int]) -> list[AnomalyReason]:
        w0, _, w2, w3, w4, w5 = views[:6]
        before_plateau = self.is_plateau(w0, w2)
        has_jump = w3 - w2 >= self.jump_min_views
        after_plateau = self.is_plateau(w3, w4) and self.is_plateau(w4, w5)
        drift = abs(w5 - w3)
        relative_drift = drift / max(w3, 1)
        settled = drift <= self.plateau_tolerance or relative_drift <= self.max_relative_drift
        if before_plateau and has_jump and after_plateau and settled:
            return [
                self.reject(
                    context,
                    "suspicious plateau → jump → plateau pattern "
                    f"(views: {_trace(views[:6])})",
                )
            ]
        return []


class StairStepRule(WindowRule):
    """Two-scan plateau, a small jump, a strictly bigger jump, then a three-scan plateau."""

    name = "stair_step"

    def __init__(
        self,
        plateau_tolerance: int = 30,
        small_jump_min_views: int = 300,
        jump_min_views: int = 500,
    ) -> None:
        super().__init__(plateau_tolerance=plateau_tolerance)
        self.small_jump_min_views = small_jump_min_views
        self.jump_min_views = jump_min_views

    def evaluate(self, context: TransitionContext, views: list[int]) -> list[AnomalyReason]:
        v0, v1, v2, v3, v4, v5 = views[:6]
        small_delta = v2 - v1
        big_delta = v3 - v2
        low_plateau = self.is_plateau(v0, v1)
        high_plateau = self.is_plateau(v3, v4) and self.is_plateau(v4, v5)
        small_jump = small_delta >= self.small_jump_min_views
        big_jump = big_delta >= self.jump_min_views and big_delta > small_delta
        if low_plateau and small_jump and big_jump and high_plateau:
            return [
                self.reject(
                    context,
                    f"small plateau-step pattern: plateau → small jump (+{small_delta}) → "
                    f"jump (+{big_delta}) → plateau (views: {_trace(views[:6])})",
                )
            ]
        return []


class WindowPatternDetector:
    name = "window_patterns"

    def __init__(
        self,
        rules: list[WindowRule],
        size: int = DEFAULT_WINDOW_SIZE,
        enabled: bool = True,
    ) -> None:
        self.rules = rules
        self.size = size
        self.enabled = enabled

    def applies_to(self, platform: Platform) -> bool:
        return self.enabled and platform != Platform.youtube

    def evaluate(self, context: TransitionContext) -> list[AnomalyReason]:
        total = len(context.series)
        if not self.applies_to(context.platform) or total < self.size:
            return []
        try:
            start = window_start(total, context.index, self.size)
            views = context.series[start : start + self.size].metric_values("views")
            reasons: list[AnomalyReason] = []
            for rule in self.rules:
                reasons.extend(rule.evaluate(context, views))
            return reasons
        except Exception:
            LOGGER.exception("Window pattern evaluation failed at transition %d", context.index)
            return []
