from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Caller roles used for route authorization."""

    ADMIN = "admin"
    TEACHER = "teacher"
    STUDENT = "student"


class UploadStatus(str, Enum):
    """Lifecycle of an upload audit record."""

    PROCESSING = "processing"
    PROCESSED = "processed"
    FAILED = "failed"


class TrendTier(str, Enum):
    """Trend badge for one student between two recorded weeks.

    Declared from lowest to highest.
    """

    SILVER = "silver"
    GOLD = "gold"
    DIAMOND = "diamond"
    GOAT = "goat"

    @classmethod
    def parse(cls, value) -> "TrendTier | None":
        """Map a stored label back onto a tier; unknown or empty labels give None."""
        if value is None:
            return None
        if isinstance(value, TrendTier):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return None
