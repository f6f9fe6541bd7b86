from __future__ import annotations

import os
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field

DEFAULT_USER_AGENT = "engagement-audit/1.0"


class WindowsConfig(BaseModel):
    enabled: bool = True
    plateau_tolerance: int = Field(default=30, ge=0)
    jump_min_views: int = Field(default=500, ge=1)
    small_jump_min_views: int = Field(default=300, ge=1)
    max_relative_drift: float = Field(default=0.1, ge=0.0)


class NotesConfig(BaseModel):
    log_notes: bool = False
    min_views: int = Field(default=5000, ge=0)
    # Percent units: 0.01 means 0.01% of views.
    low_comment_ratio_percent: float = Field(default=0.01, ge=0.0)


class SummariesConfig(BaseModel):
    zero_likes_min_views: int = Field(default=1000, ge=0)
    zero_likes_min_run: int = Field(default=5, ge=1)
    zero_comments_min_views: int = Field(default=5000, ge=0)
    zero_comments_min_run: int = Field(default=3, ge=1)
    low_comment_ratio_min_views: int = Field(default=5000, ge=0)
    low_comment_ratio_min_run: int = Field(default=3, ge=1)
    # Fraction of views: 0.01 means 1%.
    low_comment_ratio_threshold: float = Field(default=0.01, gt=0.0, lt=1.0)
    ultra_low_min_views: int = Field(default=20000, ge=0)
    ultra_low_min_run: int = Field(default=3, ge=1)


class InputConfig(BaseModel):
    request_timeout_seconds: float = Field(default=30.0, gt=0.0)
    user_agent: str | None = None
    newest_first: bool = True


class OutputsConfig(BaseModel):
    tables_format: Literal["parquet", "csv"] = "parquet"
    result_format: Literal["text", "json"] = "text"


class AppConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    windows: WindowsConfig = Field(default_factory=WindowsConfig)
    notes: NotesConfig = Field(default_factory=NotesConfig)
    summaries: SummariesConfig = Field(default_factory=SummariesConfig)
    input: InputConfig = Field(default_factory=InputConfig)
    outputs: OutputsConfig = Field(default_factory=OutputsConfig)


def load_config(path: Path | None = None) -> AppConfig:
    data: dict = {}
    if path is not None:
        with path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}

    config = AppConfig.model_validate(data)
    config.input.user_agent = (
        config.input.user_agent or os.getenv("ENGAGEMENT_AUDIT_USER_AGENT") or DEFAULT_USER_AGENT
    )
    return config
