from __future__ import annotations

import logging

from engagement_audit.detectors.base import AnomalyReason, TransitionContext, TransitionRule
from engagement_audit.features.glitch import safe_ratio
from engagement_audit.platforms import Platform

LOGGER = logging.getLogger(__name__)


class MassiveCommentDropRule(TransitionRule):
    name = "massive_comment_drop"
    MIN_PREV_COMMENTS = 20
    MIN_DROP = 10

    def evaluate(self, context: TransitionContext) -> list[AnomalyReason]:
        if not context.mature or context.glitch("comments"):
            return []
        if context.prev.comments < self.MIN_PREV_COMMENTS:
            return []
        comments = context.pair("comments")
        drop = comments.prev - comments.curr
        if drop >= self.MIN_DROP:
            return [self.reject(context, f"massive comment drop (-{drop})")]
        return []


class CommentJumpFlatViewsRule(TransitionRule):
    name = "comment_jump_flat_views"
    excluded_platforms = frozenset({Platform.youtube})
    MAX_VIEW_DELTA = 30
    MIN_COMMENT_JUMP = 10

    def evaluate(self, context: TransitionContext) -> list[AnomalyReason]:
        if not context.mature or context.glitch("comments"):
            return []
        comments = context.pair("comments")
        view_delta = abs(comments.curr_views - comments.prev_views)
        comment_jump = comments.curr - comments.prev
        if view_delta <= self.MAX_VIEW_DELTA and comment_jump >= self.MIN_COMMENT_JUMP:
            return [
                self.reject(
                    context,
                    f"comments jumped by {comment_jump} with minimal view change (+{view_delta})",
                )
            ]
        return []


class CommentInjectionRule(TransitionRule):
    name = "comment_injection"
    MAX_VIEW_FACTOR = 5
    MIN_COMMENT_FACTOR = 50

    def evaluate(self, context: TransitionContext) -> list[AnomalyReason]:
        if not context.mature or context.glitch("comments"):
            return []
        comments = context.pair("comments")
        view_factor = comments.curr_views / max(comments.prev_views, 1)
        comment_factor = comments.curr / max(comments.prev, 1)
        if view_factor < self.MAX_VIEW_FACTOR and comment_factor >= self.MIN_COMMENT_FACTOR:
            prev, curr = context.prev, context.curr
            return [
                self.reject(
                    context,
                    f"suspicious comment injection: views {prev.views}→{curr.views} "
                    f"({view_factor:.1f}x) but comments {prev.comments}→{curr.comments} "
                    f"({comment_factor:.1f}x)",
                )
            ]
        return []


class CommentNotesRule(TransitionRule):
    """Non-rejecting notes about thin comment activity on well-viewed scans."""

    name = "comment_notes"

    def __init__(
        self,
        min_views: int = 5000,
        low_ratio_percent: float = 0.01,
        log_notes: bool = False,
    ) -> None:
        self.min_views = min_views
        self.low_ratio_percent = low_ratio_percent
        self.log_notes = log_notes

    def evaluate(self, context: TransitionContext) -> list[AnomalyReason]:
        views = context.curr.views
        if views <= self.min_views:
            return []
        notes: list[AnomalyReason] = []
        if context.curr.comments == 0:
            notes.append(self.note(context, f"zero comments with {views} views"))
        ratio_percent = safe_ratio(context.curr.comments, views) * 100
        if ratio_percent < self.low_ratio_percent:
            notes.append(
                self.note(context, f"low comment ratio {ratio_percent:.4f}% with {views} views")
            )
        if self.log_notes:
            for note in notes:
                LOGGER.info("NOTE scan %d: %s (not rejecting)", context.index + 1, note.message)
        return notes
