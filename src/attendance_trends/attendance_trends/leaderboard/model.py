from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from ..core.enums import TrendTier


def empty_counts() -> dict[str, int]:
    return {tier.value: 0 for tier in TrendTier}


@dataclass(frozen=True)
class WeekBreakdown:
    week: int
    counts: dict[str, int]
    points: int

    def to_dict(self) -> dict[str, Any]:
        return {"week": self.week, "counts": dict(self.counts), "points": self.points}


@dataclass(frozen=True)
class RollClassStanding:
    roll_id: str
    counts: dict[str, int]
    raw_points: int
    norm_points: float
    student_count: int
    weeks: list[WeekBreakdown] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "rollId": self.roll_id,
            "counts": dict(self.counts),
            "rawPoints": self.raw_points,
            "normPoints": self.norm_points,
            "studentCount": self.student_count,
            "weeks": [w.to_dict() for w in self.weeks],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "RollClassStanding":
        return cls(
            roll_id=str(data["rollId"]),
            counts={**empty_counts(), **(data.get("counts") or {})},
            raw_points=int(data.get("rawPoints") or 0),
            norm_points=float(data.get("normPoints") or 0.0),
            student_count=int(data.get("studentCount") or 0),
            weeks=[
                WeekBreakdown(week=int(w["week"]), counts=dict(w.get("counts") or {}), points=int(w.get("points") or 0))
                for w in data.get("weeks") or []
            ],
        )


@dataclass(frozen=True)
class TermLeaderboard:
    year: int
    term: int
    weeks: list[int]
    standings: list[RollClassStanding]
    updated_at: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "year": self.year,
            "term": self.term,
            "weeks": list(self.weeks),
            "leaderboard": [s.to_dict() for s in self.standings],
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "TermLeaderboard":
        return cls(
            year=int(data["year"]),
            term=int(data["term"]),
            weeks=[int(w) for w in data.get("weeks") or []],
            standings=[RollClassStanding.from_dict(s) for s in data.get("leaderboard") or []],
            updated_at=data.get("updatedAt"),
        )
