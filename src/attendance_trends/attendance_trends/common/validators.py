from __future__ import annotations

from ..core.exceptions import ValidationError


def require_int_in_range(value, field_name: str, low: int, high: int) -> int:
    """Parse an int from a form/query value and check it lies in [low, high]."""
    try:
        parsed = int(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer between {low} and {high}")
    if parsed < low or parsed > high:
        raise ValidationError(f"{field_name} must be an integer between {low} and {high}")
    return parsed
