from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from engagement_audit.config import DEFAULT_USER_AGENT, load_config

DEFAULT_CONFIG = Path(__file__).resolve().parents[1] / "configs" / "default.yaml"


def test_default_yaml_matches_builtin_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("ENGAGEMENT_AUDIT_USER_AGENT", raising=False)

    assert load_config(DEFAULT_CONFIG) == load_config(None)


def test_load_config_overrides(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text(
        "windows:\n  enabled: false\nsummaries:\n  zero_likes_min_run: 3\n"
        "outputs:\n  tables_format: csv\n",
        encoding="utf-8",
    )

    config = load_config(path)

    assert not config.windows.enabled
    assert config.summaries.zero_likes_min_run == 3
    assert config.summaries.zero_comments_min_run == 3
    assert config.outputs.tables_format == "csv"


def test_unknown_keys_are_rejected(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text("window:\n  enabled: false\n", encoding="utf-8")

    with pytest.raises(ValidationError):
        load_config(path)


def test_user_agent_resolution(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("ENGAGEMENT_AUDIT_USER_AGENT", raising=False)
    assert load_config().input.user_agent == DEFAULT_USER_AGENT

    monkeypatch.setenv("ENGAGEMENT_AUDIT_USER_AGENT", "audit-bot/2")
    assert load_config().input.user_agent == "audit-bot/2"

    path = tmp_path / "config.yaml"
    path.write_text("input:\n  user_agent: from-file\n", encoding="utf-8")
    assert load_config(path).input.user_agent == "from-file"
