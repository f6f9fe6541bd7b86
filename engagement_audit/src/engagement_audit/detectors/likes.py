from __future__ import annotations

from engagement_audit.detectors.base import AnomalyReason, TransitionContext, TransitionRule
from engagement_audit.features.glitch import safe_ratio
from engagement_audit.platforms import LIKES_UNRELIABLE, ZERO_LIKES_PLATFORMS


class LikesRule(TransitionRule):
    excluded_platforms = LIKES_UNRELIABLE


class ViewsDoubledLikesFlatRule(LikesRule):
    name = "views_doubled_likes_flat"

    def evaluate(self, context: TransitionContext) -> list[AnomalyReason]:
        likes = context.pair("likes")
        if (
            likes.curr_views > 1000
            and likes.curr_views > likes.prev_views * 2
            and likes.curr <= likes.prev * 1.2
        ):
            return [
                self.reject(context, "views doubled quickly without corresponding jump in likes")
            ]
        return []


class ViewsGrewLikesFrozenRule(LikesRule):
    name = "views_grew_likes_frozen"

    def evaluate(self, context: TransitionContext) -> list[AnomalyReason]:
        if not context.mature or context.glitch("likes"):
            return []
        likes = context.pair("likes")
        if likes.curr_views - likes.prev_views >= 1000 and likes.curr - likes.prev < 2:
            return [self.reject(context, "views grew but <2 likes change")]
        return []


class LikesSpikeRule(LikesRule):
    name = "likes_spike"

    def evaluate(self, context: TransitionContext) -> list[AnomalyReason]:
        if not context.mature or context.glitch("likes"):
            return []
        likes = context.pair("likes")
        if (
            likes.curr > 0
            and likes.curr > likes.prev * 1.5
            and likes.curr_views < likes.prev_views * 1.2
        ):
            return [
                self.reject(context, "likes spiked (≥1.5x) without corresponding jump in views")
            ]
        return []


class ZeroLikesRule(TransitionRule):
    name = "zero_likes"
    platforms = ZERO_LIKES_PLATFORMS

    def evaluate(self, context: TransitionContext) -> list[AnomalyReason]:
        if not context.mature or context.glitch("likes"):
            return []
        likes = context.pair("likes")
        if likes.curr_views > 1000 and likes.curr == 0:
            return [self.reject(context, "zero likes")]
        return []


class LikeRatioCollapseRule(LikesRule):
    """Reject a big view jump where the like ratio falls to a third or less."""

    name = "like_ratio_collapse"
    MIN_PREV_VIEWS = 100
    JUMP_FACTOR = 5
    JUMP_VIEWS = 5000
    DROP_FACTOR = 3
    EPSILON = 1e-9

    def evaluate(self, context: TransitionContext) -> list[AnomalyReason]:
        if not context.mature or context.prev.views < self.MIN_PREV_VIEWS:
            return []
        if context.glitch("likes"):
            return []
        likes = context.pair("likes")
        prev_ratio = safe_ratio(likes.prev, likes.prev_views)
        curr_ratio = safe_ratio(likes.curr, likes.curr_views)
        big_jump = (
            likes.curr_views >= likes.prev_views * self.JUMP_FACTOR
            or likes.curr_views - likes.prev_views >= self.JUMP_VIEWS
        )
        if not big_jump or prev_ratio <= 0:
            return []
        if prev_ratio / max(curr_ratio, self.EPSILON) >= self.DROP_FACTOR:
            return [
                self.reject(
                    context,
                    "massive view jump with like-ratio collapse "
                    f"({prev_ratio * 100:.2f}% → {curr_ratio * 100:.2f}%)",
                )
            ]
        return []
