from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class RosterEntry:
    external_id: str
    roll_class: str
    email: Optional[str] = None
