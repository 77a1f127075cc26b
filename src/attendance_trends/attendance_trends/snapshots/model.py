from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Optional

from ..core.enums import TrendTier


def snapshot_label(year: int, term: int, week: int) -> str:
    return f"{int(year)} T{int(term)} W{int(week)}"


def as_finite_float(value: Any) -> Optional[float]:
    """Stored percentages may come back as str/int/None; only finite numbers count."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


@dataclass(frozen=True)
class Snapshot:
    """One attendance dataset for a (year, term, week)."""

    snapshot_id: str
    year: int
    term: int
    week: int
    label: str
    is_latest: bool = False
    class_list: list[str] = field(default_factory=list)
    upload_id: Optional[str] = None
    row_count: int = 0
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @property
    def key(self) -> tuple[int, int, int]:
        return (self.year, self.term, self.week)


@dataclass(frozen=True)
class TrendMeta:
    prev_week: int
    week: int
    prev: float
    curr: float
    epsilon: float
    version: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "prevWeek": self.prev_week,
            "week": self.week,
            "prev": self.prev,
            "curr": self.curr,
            "epsilon": self.epsilon,
            "version": self.version,
        }

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> Optional["TrendMeta"]:
        if not data:
            return None
        return cls(
            prev_week=int(data["prevWeek"]),
            week=int(data["week"]),
            prev=float(data["prev"]),
            curr=float(data["curr"]),
            epsilon=float(data["epsilon"]),
            version=str(data.get("version", "")),
        )


@dataclass(frozen=True)
class SnapshotRow:
    """A student's stored attendance within a snapshot."""

    key: str
    external_id: str
    roll_class: str
    pct_present: Optional[float]
    trend: Optional[TrendTier] = None
    trend_meta: Optional[TrendMeta] = None


@dataclass(frozen=True)
class TrendUpdate:
    key: str
    trend: Optional[TrendTier]
    meta: Optional[TrendMeta]


@dataclass(frozen=True)
class IngestResult:
    snapshot_id: str
    rows_written: int
    reused_existing: bool
    label: str
