from __future__ import annotations

from engagement_audit.detectors.base import AnomalyReason, TransitionContext, TransitionRule
from engagement_audit.platforms import Platform

ULTRA_LOW_ENGAGEMENT_LABEL = "ultra-low engagement"


class SnapchatUltraLowEngagementRule(TransitionRule):
    """20k+ views with no comments and at most one share.

    The reject carries no reason text; reports explain it with a run summary.
    """

    name = "snapchat_ultra_low_engagement"
    platforms = frozenset({Platform.snapchat})
    MIN_VIEWS = 20000
    MAX_SHARES = 1

    def evaluate(self, context: TransitionContext) -> list[AnomalyReason]:
        curr = context.curr
        if curr.views > self.MIN_VIEWS and curr.comments == 0 and curr.shares <= self.MAX_SHARES:
            return [
                self.reject(
                    context,
                    f"{ULTRA_LOW_ENGAGEMENT_LABEL} ({curr.views} views, 0 comments, "
                    f"{curr.shares} shares)",
                    reported=False,
                )
            ]
        return []
