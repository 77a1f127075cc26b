from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class UserProfile:
    """Role profile keyed by the identity a bearer token resolves to."""

    uid: str
    role: Role
    external_id: Optional[str] = None
    email: Optional[str] = None
    suspended: bool = False
