from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class OutputPaths:
    root: Path
    tables: Path
    results: Path


def build_output_paths(out_dir: Path) -> OutputPaths:
    paths = OutputPaths(
        root=out_dir,
        tables=out_dir / "tables",
        results=out_dir / "results",
    )
    for path in (paths.root, paths.tables, paths.results):
        path.mkdir(parents=True, exist_ok=True)
    return paths
