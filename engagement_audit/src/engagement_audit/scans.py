from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Sequence

METRICS = ("views", "likes", "comments", "shares", "saves")


@dataclass(frozen=True)
class ScanSnapshot:
    views: int = 0
    likes: int = 0
    comments: int = 0
    shares: int = 0
    saves: int = 0
    missing: bool = False

    def metric(self, name: str) -> int:
        if name not in METRICS:
            raise KeyError(f"Unknown scan metric: {name}")
        return getattr(self, name)

    def is_all_zero(self) -> bool:
        return all(getattr(self, name) == 0 for name in METRICS)


class ScanSeries(Sequence[ScanSnapshot]):
    """Immutable, oldest-first sequence of scans for one submission.

    Rules receive the whole series so they can look one scan ahead and two scans
    behind the transition under evaluation.
    """

    __slots__ = ("_scans",)

    def __init__(self, scans: Iterable[ScanSnapshot] = ()) -> None:
        self._scans: tuple[ScanSnapshot, ...] = tuple(scans)

    def __getitem__(self, index: int | slice) -> ScanSnapshot | ScanSeries:
        if isinstance(index, slice):
            return ScanSeries(self._scans[index])
        return self._scans[index]

    def __len__(self) -> int:
        return len(self._scans)

    def __iter__(self) -> Iterator[ScanSnapshot]:
        return iter(self._scans)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ScanSeries):
            return self._scans == other._scans
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._scans)

    def __repr__(self) -> str:
        return f"ScanSeries({list(self._scans)!r})"

    def get(self, index: int) -> ScanSnapshot | None:
        """Return the scan at ``index`` or None when out of bounds (no negative wrap)."""
        if 0 <= index < len(self._scans):
            return self._scans[index]
        return None

    def valid(self) -> ScanSeries:
        return ScanSeries(scan for scan in self._scans if not scan.missing)

    def metric_values(self, name: str) -> list[int]:
        return [scan.metric(name) for scan in self._scans]

    def leading_zero_view_count(self) -> int:
        count = 0
        for scan in self._scans:
            if scan.views != 0:
                break
            count += 1
        return count
