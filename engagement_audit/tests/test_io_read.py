from __future__ import annotations

from pathlib import Path

import pandas as pd
import pytest

from engagement_audit.io.read import load_scan_records, load_url_list
from engagement_audit.io.write import write_results, write_table
from engagement_audit.preprocess.normalize import normalize_scans


def test_load_scan_records_from_csv_keeps_gaps_as_missing(tmp_path: Path) -> None:
    path = tmp_path / "scans.csv"
    path.write_text(" Views ,Likes,Comments,Notes\n1000,100,10,a\n1500,,12,b\n", encoding="utf-8")

    records = load_scan_records(path)
    series = normalize_scans(records)

    assert set(records[0]) == {"views", "likes", "comments"}
    assert [scan.missing for scan in series] == [False, True]
    assert series[0].likes == 100


def test_load_scan_records_parquet(tmp_path: Path) -> None:
    path = write_table(
        pd.DataFrame({"views": [10, 20], "likes": [1, 2], "saves": [0, 1]}),
        tmp_path / "scans.parquet",
    )

    series = normalize_scans(load_scan_records(path))

    assert series.metric_values("saves") == [0, 1]


def test_load_scan_records_requires_views(tmp_path: Path) -> None:
    path = tmp_path / "scans.csv"
    path.write_text("likes\n1\n", encoding="utf-8")

    with pytest.raises(ValueError, match="missing column: views"):
        load_scan_records(path)


def test_unsupported_extension(tmp_path: Path) -> None:
    path = tmp_path / "scans.txt"
    path.write_text("views\n1\n", encoding="utf-8")

    with pytest.raises(ValueError, match="Unsupported table file type"):
        load_scan_records(path)


def test_load_url_list_skips_blanks_and_comments(tmp_path: Path) -> None:
    path = tmp_path / "urls.txt"
    path.write_text("# batch 1\nhttps://a\n\n  https://b  \n", encoding="utf-8")

    assert load_url_list(path) == ["https://a", "https://b"]


def test_write_results(tmp_path: Path) -> None:
    path = write_results([{"url": "u", "flagged": ["🚩"]}], tmp_path / "out" / "r.json")

    assert "🚩" in path.read_text(encoding="utf-8")
