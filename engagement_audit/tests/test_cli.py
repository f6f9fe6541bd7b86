from __future__ import annotations

import json
from pathlib import Path

import pandas as pd
import pytest
from typer.testing import CliRunner

from engagement_audit.cli import app
from engagement_audit.pipeline.analyze import AnalysisResult


def _write_scans(path: Path, views: list[int]) -> Path:
    frame = pd.DataFrame(
        {
            "views": views,
            "likes": [v // 10 for v in views],
            "comments": [v // 100 for v in views],
            "shares": [v // 100 for v in views],
            "saves": [v // 100 for v in views],
        }
    )
    frame.to_csv(path, index=False)
    return path


def test_cli_help() -> None:
    runner = CliRunner()
    result = runner.invoke(app, ["--help"])

    assert result.exit_code == 0
    for command in ("check", "batch", "interactive", "evaluate", "table"):
        assert command in result.stdout


def test_evaluate_command_prints_verdict_and_reasons(tmp_path: Path) -> None:
    scans = _write_scans(tmp_path / "scans.csv", [0, 25000])

    result = CliRunner().invoke(
        app, ["evaluate", "--scans", str(scans), "--platform", "instagram"]
    )

    assert result.exit_code == 0
    assert result.stdout.splitlines()[0] == "Verdict: Botted"
    assert "early 20k+ view jump within first 5 scans" in result.stdout


def test_evaluate_command_with_too_few_scans(tmp_path: Path) -> None:
    scans = _write_scans(tmp_path / "scans.csv", [1000])

    result = CliRunner().invoke(app, ["evaluate", "--scans", str(scans), "--platform", "tiktok"])

    assert result.exit_code == 0
    assert result.stdout.strip() == "Verdict: Insufficient Data"


def test_evaluate_command_rejects_unknown_platform(tmp_path: Path) -> None:
    scans = _write_scans(tmp_path / "scans.csv", [1000, 2000])

    result = CliRunner().invoke(app, ["evaluate", "--scans", str(scans), "--platform", "myspace"])

    assert result.exit_code != 0
    assert "Unknown platform" in result.output


def test_table_command_writes_csv(tmp_path: Path) -> None:
    scans = _write_scans(tmp_path / "post.csv", [1000, 2000])
    config_path = tmp_path / "config.yaml"
    config_path.write_text("outputs:\n  tables_format: csv\n", encoding="utf-8")
    out_dir = tmp_path / "out"

    result = CliRunner().invoke(
        app,
        [
            "table",
            "--scans",
            str(scans),
            "--platform",
            "tiktok",
            "--out",
            str(out_dir),
            "--config",
            str(config_path),
        ],
    )

    assert result.exit_code == 0
    table_path = out_dir / "tables" / "post__scan_metrics.csv"
    assert table_path.exists()
    table = pd.read_csv(table_path)
    assert list(table["views"]) == [1000, 2000]
    assert list(table["likes_ratio"]) == ["10.00%", "10.00%"]


def test_batch_command_json_output_and_results_file(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    list_path = tmp_path / "urls.txt"
    list_path.write_text("https://a\n# skipped\nhttps://b\n", encoding="utf-8")
    seen: list[list[str]] = []

    def fake_batch(urls: list[str], config: object = None) -> list[AnalysisResult]:
        seen.append(urls)
        return [
            AnalysisResult(url=urls[0], platform="tiktok", scan_count=3, status="clean"),
            AnalysisResult(
                url=urls[1],
                platform="unknown",
                scan_count=0,
                status="error",
                flagged=["Error: HTTP 404"],
                error="HTTP 404",
            ),
        ]

    monkeypatch.setattr("engagement_audit.cli.analyze_batch", fake_batch)

    result = CliRunner().invoke(
        app, ["batch", "--list", str(list_path), "--format", "json", "--out", str(tmp_path / "o")]
    )

    assert result.exit_code == 0
    assert seen == [["https://a", "https://b"]]
    payload = json.loads(result.stdout)
    assert [item["status"] for item in payload] == ["clean", "error"]
    written = json.loads((tmp_path / "o" / "results" / "batch_results.json").read_text("utf-8"))
    assert written == payload


def test_batch_command_text_output(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    list_path = tmp_path / "urls.txt"
    list_path.write_text("https://a\n", encoding="utf-8")
    monkeypatch.setattr(
        "engagement_audit.cli.analyze_batch",
        lambda urls, config=None: [
            AnalysisResult(
                url=urls[0],
                platform="tiktok",
                scan_count=4,
                status="flagged",
                flagged=["Scan 3: Anomalie : zero likes"],
            )
        ],
    )

    result = CliRunner().invoke(app, ["batch", "--list", str(list_path)])

    assert result.exit_code == 0
    assert result.stdout.strip() == "url1: 🚩 (Scan 3: Anomalie : zero likes)"


def test_interactive_command_until_quit(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_analyze(url: str, config: object = None) -> AnalysisResult:
        if url == "https://bad":
            raise ValueError("No scans found.")
        return AnalysisResult(url=url, platform="tiktok", scan_count=2, status="clean")

    monkeypatch.setattr("engagement_audit.cli.analyze_url", fake_analyze)

    result = CliRunner().invoke(app, ["interactive"], input="https://good\nhttps://bad\nq\n")

    assert result.exit_code == 0
    assert "url1: ✅ No anomalies detected" in result.stdout
    assert "Error: No scans found." in result.output


def test_check_command(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}

    def fake_analyze(url: str, config: object = None) -> AnalysisResult:
        captured["url"] = url
        captured["log_notes"] = config.notes.log_notes  # type: ignore[attr-defined]
        return AnalysisResult(url=url, platform="tiktok", scan_count=1, status="insufficient_data")

    monkeypatch.setattr("engagement_audit.cli.analyze_url", fake_analyze)

    result = CliRunner().invoke(app, ["check", " https://post ", "--no-log-notes"])

    assert result.exit_code == 0
    assert captured == {"url": "https://post", "log_notes": False}
    assert result.stdout.strip() == "url1: ⚪ Insufficient data (1 scans)"
