from __future__ import annotations

import re
from typing import Any

from engagement_audit.platforms import Platform, table_metrics

TABLE_PATTERN = re.compile(r"<table[^>]*>([\s\S]*?)</table>", re.IGNORECASE)
ROW_PATTERN = re.compile(r"<tr[^>]*>([\s\S]*?)</tr>", re.IGNORECASE)
CELL_PATTERN = re.compile(r"<t[dh][^>]*>([\s\S]*?)</t[dh]>", re.IGNORECASE)
TAG_PATTERN = re.compile(r"<[^>]*>")
NUMBER_NOISE = re.compile(r"[,\s]")

MISSING_TOKENS = frozenset({"", "undefined", "null", "na", "n/a", "—", "-", "nan"})


def cell_text(cell: str) -> str:
    return TAG_PATTERN.sub("", cell).strip()


def is_missing_cell(cell: str) -> bool:
    return cell_text(cell).lower() in MISSING_TOKENS


def parse_cell(cell: str) -> int | None:
    """Parse one metric cell; None marks a missing or unreadable value."""
    if is_missing_cell(cell):
        return None
    token = NUMBER_NOISE.sub("", cell_text(cell))
    match = re.match(r"-?\d+", token)
    if match is None:
        return None
    return int(match.group(0))


def _select_table(html: str) -> str | None:
    tables = TABLE_PATTERN.findall(html)
    if not tables:
        return None
    # With several tables the first is the admin summary block; metrics live in the second.
    return tables[1] if len(tables) > 1 else tables[0]


def parse_scan_table(
    html: str,
    platform: Platform,
    newest_first: bool = True,
) -> list[dict[str, Any]]:
    """Extract raw scan records (oldest first) from a dump page.

    Row 0 of the table is the header; each following row holds one metric, labelled
    by its first cell, with one column per scan.
    """
    table = _select_table(html)
    if table is None:
        return []
    rows = ROW_PATTERN.findall(table)
    if len(rows) < 2:
        return []

    records: list[dict[str, Any]] = []
    for offset, metric in enumerate(table_metrics(platform), start=1):
        if offset >= len(rows):
            break
        cells = CELL_PATTERN.findall(rows[offset])[1:]
        for position, cell in enumerate(cells):
            while len(records) <= position:
                records.append({})
            records[position][metric] = parse_cell(cell)

    if newest_first:
        records.reverse()
    return records
