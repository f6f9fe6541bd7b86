from __future__ import annotations

from engagement_audit.detectors.base import AnomalyReason, TransitionContext, TransitionRule


class EarlyViewJumpRule(TransitionRule):
    """Reject a 20k+ view jump within the first five scans after views start counting."""

    name = "early_view_jump"
    DEFAULT_MIN_JUMP = 20000
    DEFAULT_EARLY_TRANSITIONS = 4

    def __init__(
        self,
        min_jump: int = DEFAULT_MIN_JUMP,
        early_transitions: int = DEFAULT_EARLY_TRANSITIONS,
    ) -> None:
        self.min_jump = min_jump
        self.early_transitions = early_transitions

    def evaluate(self, context: TransitionContext) -> list[AnomalyReason]:
        if not context.mature:
            return []
        if context.index - context.leading_zero_count >= self.early_transitions:
            return []
        if context.curr.views - context.prev.views >= self.min_jump:
            return [self.reject(context, "early 20k+ view jump within first 5 scans")]
        return []
