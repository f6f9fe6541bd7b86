from __future__ import annotations

from pathlib import Path
from typing import Literal

import typer

from engagement_audit.config import AppConfig, load_config
from engagement_audit.io.read import load_scan_records, load_url_list
from engagement_audit.io.write import results_to_json, write_results, write_table
from engagement_audit.logging import configure_logging
from engagement_audit.paths import build_output_paths
from engagement_audit.pipeline.analyze import analyze_batch, analyze_url, format_result_line
from engagement_audit.pipeline.evaluate import evaluate_series
from engagement_audit.platforms import Platform, normalize_platform
from engagement_audit.preprocess.normalize import normalize_scans
from engagement_audit.report.tables import build_scan_table, verdict_label

app = typer.Typer(no_args_is_help=True, add_completion=False)

ConfigOption = typer.Option(
    None,
    exists=True,
    readable=True,
    resolve_path=True,
    help="YAML config file. Defaults apply when omitted.",
)


def _load_app_config(config_path: Path | None) -> AppConfig:
    return load_config(config_path)


def _require_known_platform(platform: str) -> Platform:
    resolved = normalize_platform(platform)
    if resolved == Platform.unknown:
        choices = ", ".join(item.value for item in Platform if item != Platform.unknown)
        raise typer.BadParameter(f"Unknown platform '{platform}'. Use one of: {choices}")
    return resolved


@app.command()
def check(
    url: str = typer.Argument(..., help="Dump-data URL for one submission."),
    config: Path | None = ConfigOption,
    log_notes: bool = typer.Option(True, help="Log non-rejecting comment notes."),
) -> None:
    """Analyze one dump-data URL and print the condensed result line."""
    configure_logging()
    cfg = _load_app_config(config)
    cfg.notes.log_notes = log_notes
    result = analyze_url(url.strip(), config=cfg)
    typer.echo(format_result_line(1, result))


@app.command()
def batch(
    list_path: Path = typer.Option(
        ..., "--list", "-l", exists=True, readable=True, resolve_path=True
    ),
    output_format: Literal["text", "json"] | None = typer.Option(
        None,
        "--format",
        "-f",
        help="Override outputs.result_format.",
    ),
    out: Path | None = typer.Option(
        None,
        resolve_path=True,
        help="Also write JSON results to OUT/results/batch_results.json.",
    ),
    config: Path | None = ConfigOption,
) -> None:
    """Analyze a newline-delimited list of dump-data URLs."""
    configure_logging()
    cfg = _load_app_config(config)
    urls = load_url_list(list_path)
    results = analyze_batch(urls, config=cfg)
    if out is not None:
        paths = build_output_paths(out)
        write_results(
            [result.to_dict() for result in results], paths.results / "batch_results.json"
        )
    if (output_format or cfg.outputs.result_format) == "json":
        typer.echo(results_to_json([result.to_dict() for result in results]))
        return
    for position, result in enumerate(results, start=1):
        typer.echo(format_result_line(position, result))


@app.command()
def interactive(config: Path | None = ConfigOption) -> None:
    """Prompt for dump-data URLs until 'q' is entered."""
    configure_logging()
    cfg = _load_app_config(config)
    cfg.notes.log_notes = True
    while True:
        url = typer.prompt("Paste dump-data URL (or type 'q')").strip()
        if url.lower() == "q":
            break
        try:
            result = analyze_url(url, config=cfg)
        except Exception as exc:
            typer.echo(f"Error: {exc}", err=True)
            continue
        typer.echo(format_result_line(1, result))


@app.command()
def evaluate(
    scans: Path = typer.Option(..., exists=True, readable=True, resolve_path=True),
    platform: str = typer.Option(..., help="Platform the scans were collected from."),
    config: Path | None = ConfigOption,
) -> None:
    """Evaluate a local scan table and print the verdict with its reasons."""
    configure_logging()
    cfg = _load_app_config(config)
    resolved_platform = _require_known_platform(platform)
    series = normalize_scans(load_scan_records(scans))
    verdict = evaluate_series(series, resolved_platform, config=cfg)
    typer.echo(f"Verdict: {verdict_label(verdict)}")
    if verdict is not None and verdict.botted_reason:
        typer.echo(verdict.botted_reason)


@app.command()
def table(
    scans: Path = typer.Option(..., exists=True, readable=True, resolve_path=True),
    platform: str = typer.Option(..., help="Platform the scans were collected from."),
    out: Path = typer.Option(Path("out"), resolve_path=True),
    config: Path | None = ConfigOption,
) -> None:
    """Write the per-scan metrics and ratio table for a local scan file."""
    configure_logging()
    cfg = _load_app_config(config)
    resolved_platform = _require_known_platform(platform)
    series = normalize_scans(load_scan_records(scans))
    paths = build_output_paths(out)
    fmt = cfg.outputs.tables_format
    table_path = write_table(
        build_scan_table(series, resolved_platform),
        paths.tables / f"{scans.stem}__scan_metrics.{fmt}",
        fmt=fmt,
    )
    typer.echo(f"Table written to: {table_path}")


if __name__ == "__main__":
    app()
