from __future__ import annotations

from engagement_audit.io.parse_html import cell_text, parse_cell, parse_scan_table
from engagement_audit.platforms import Platform

SUMMARY_TABLE = "<table><tr><td>Submission</td><td>42</td></tr></table>"


def _metric_table(rows: dict[str, list[str]]) -> str:
    scans = len(next(iter(rows.values())))
    header = "<tr><th>Metric</th>" + "".join(f"<th>Scan {i}</th>" for i in range(scans)) + "</tr>"
    body = "".join(
        f"<tr><td><b>{label}</b></td>" + "".join(f"<td>{value}</td>" for value in values) + "</tr>"
        for label, values in rows.items()
    )
    return f"<table class='scans'>{header}{body}</table>"


def test_parse_cell() -> None:
    assert parse_cell("<td>1,234</td>") == 1234
    assert parse_cell(" 56 ") == 56
    assert parse_cell("—") is None
    assert parse_cell("undefined") is None
    assert parse_cell("NaN") is None
    assert parse_cell("abc") is None
    assert cell_text("<span>7</span>") == "7"


def test_metric_rows_come_from_second_table_newest_first() -> None:
    html = SUMMARY_TABLE + _metric_table(
        {
            "Views": ["3,000", "2,000", "1,000"],
            "Likes": ["300", "—", "100"],
            "Comments": ["30", "20", "10"],
            "Saves": ["3", "2", "1"],
            "Shares": ["6", "4", "2"],
        }
    )

    records = parse_scan_table(html, Platform.tiktok)

    assert [record["views"] for record in records] == [1000, 2000, 3000]
    assert records[1]["likes"] is None
    assert records[0] == {"views": 1000, "likes": 100, "comments": 10, "saves": 1, "shares": 2}


def test_snapchat_fourth_row_is_shares() -> None:
    html = _metric_table(
        {
            "Views": ["100", "200"],
            "Likes": ["0", "0"],
            "Comments": ["1", "2"],
            "Shares": ["5", "6"],
        }
    )

    records = parse_scan_table(html, Platform.snapchat, newest_first=False)

    assert records == [
        {"views": 100, "likes": 0, "comments": 1, "shares": 5},
        {"views": 200, "likes": 0, "comments": 2, "shares": 6},
    ]


def test_page_without_scan_table() -> None:
    assert parse_scan_table("<html><body>No data</body></html>", Platform.tiktok) == []
    assert parse_scan_table("<table><tr><th>Metric</th></tr></table>", Platform.tiktok) == []
