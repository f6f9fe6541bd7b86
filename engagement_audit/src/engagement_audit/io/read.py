from __future__ import annotations

from pathlib import Path
from typing import Any

import pandas as pd

from engagement_audit.scans import METRICS

REQUIRED_COLUMNS = ["views"]


def _validate_required_columns(df: pd.DataFrame) -> pd.DataFrame:
    for column in REQUIRED_COLUMNS:
        if column not in df.columns:
            raise ValueError(f"Scan table missing column: {column}")
    return df


def load_table(path: Path) -> pd.DataFrame:
    if path.suffix == ".parquet":
        return pd.read_parquet(path)
    if path.suffix == ".csv":
        # utf-8-sig strips BOM-prefixed headers commonly found in exported CSV files.
        return pd.read_csv(path, encoding="utf-8-sig")
    if path.suffix == ".json":
        return pd.read_json(path, orient="records")
    raise ValueError(f"Unsupported table file type: {path.suffix}")


def load_scan_records(path: Path) -> list[dict[str, Any]]:
    """Load oldest-first raw scan records from a local scan table.

    Only metric columns present in the table are kept, so metrics a platform does not
    report are treated as absent rather than missing.
    """
    frame = load_table(path)
    frame = frame.rename(columns={column: str(column).strip().lower() for column in frame.columns})
    frame = _validate_required_columns(frame)
    columns = [column for column in METRICS if column in frame.columns]
    # Keep NaN for empty cells so the normalizer can flag them.
    subset = frame[columns].astype(object)
    return subset.to_dict(orient="records")


def load_url_list(path: Path) -> list[str]:
    lines = path.read_text(encoding="utf-8").splitlines()
    return [
        line.strip() for line in lines if line.strip() and not line.strip().startswith("#")
    ]
