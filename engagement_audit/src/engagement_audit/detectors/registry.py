from __future__ import annotations

from engagement_audit.config import AppConfig
from engagement_audit.detectors.base import TransitionRule
from engagement_audit.detectors.comments import (
    CommentInjectionRule,
    CommentJumpFlatViewsRule,
    CommentNotesRule,
    MassiveCommentDropRule,
)
from engagement_audit.detectors.engagement import SnapchatUltraLowEngagementRule
from engagement_audit.detectors.likes import (
    LikeRatioCollapseRule,
    LikesSpikeRule,
    ViewsDoubledLikesFlatRule,
    ViewsGrewLikesFrozenRule,
    ZeroLikesRule,
)
from engagement_audit.detectors.shares_saves import (
    AppearedWithoutViewsRule,
    FastGrowthRule,
    TikTokZeroMetricRule,
)
from engagement_audit.detectors.views import EarlyViewJumpRule
from engagement_audit.detectors.windows import (
    PlateauJumpPlateauRule,
    StairStepRule,
    WindowPatternDetector,
)


def default_transition_rules(config: AppConfig | None = None) -> list[TransitionRule]:
    """Pairwise rules in evaluation order; reasons are reported in this order."""
    config = config or AppConfig()
    return [
        EarlyViewJumpRule(),
        ViewsDoubledLikesFlatRule(),
        ViewsGrewLikesFrozenRule(),
        LikesSpikeRule(),
        FastGrowthRule("shares"),
        FastGrowthRule("saves"),
        AppearedWithoutViewsRule("shares"),
        AppearedWithoutViewsRule("saves"),
        TikTokZeroMetricRule("saves", min_views=5000, label="5k"),
        TikTokZeroMetricRule("shares", min_views=10000, label="10k"),
        ZeroLikesRule(),
        SnapchatUltraLowEngagementRule(),
        CommentNotesRule(
            min_views=config.notes.min_views,
            low_ratio_percent=config.notes.low_comment_ratio_percent,
            log_notes=config.notes.log_notes,
        ),
        LikeRatioCollapseRule(),
        MassiveCommentDropRule(),
        CommentJumpFlatViewsRule(),
        CommentInjectionRule(),
    ]


def default_window_detector(config: AppConfig | None = None) -> WindowPatternDetector:
    config = config or AppConfig()
    windows = config.windows
    return WindowPatternDetector(
        rules=[
            PlateauJumpPlateauRule(
                plateau_tolerance=windows.plateau_tolerance,
                jump_min_views=windows.jump_min_views,
                max_relative_drift=windows.max_relative_drift,
            ),
            StairStepRule(
                plateau_tolerance=windows.plateau_tolerance,
                small_jump_min_views=windows.small_jump_min_views,
                jump_min_views=windows.jump_min_views,
            ),
        ],
        enabled=windows.enabled,
    )
