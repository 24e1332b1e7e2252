from __future__ import annotations

import math
from typing import Any, Optional

from ..core.exceptions import ValidationError


def require_non_empty(value: Any, field_name: str, *, max_length: Optional[int] = None) -> str:
    text = optional_string(value, field_name, max_length=max_length)
    if not text:
        raise ValidationError(f"{field_name} is required")
    return text


def optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def optional_string(value: Any, field_name: str, *, max_length: Optional[int] = None) -> Optional[str]:
    """Like ``optional_text``, but non-string values are rejected."""
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be a string")
    return check_length(value.strip() or None, field_name, max_length)


def check_length(value: Optional[str], field_name: str, max_length: Optional[int]) -> Optional[str]:
    if value is not None and max_length is not None and len(value) > max_length:
        raise ValidationError(f"{field_name} must be at most {max_length} characters")
    return value


def parse_hours(value: Any, field_name: str, *, max_value: Optional[float] = None) -> float:
    """Parse an hours cell; blank means zero, negatives and garbage are rejected."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return 0.0
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a number")
    try:
        hours = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if math.isnan(hours) or math.isinf(hours):
        raise ValidationError(f"{field_name} must be a number")
    if hours < 0:
        raise ValidationError(f"{field_name} cannot be negative")
    if max_value is not None and hours > max_value:
        raise ValidationError(f"{field_name} cannot exceed {max_value:g}")
    return hours


def optional_coordinate(value: Any, field_name: str, *, limit: float) -> Optional[float]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if math.isnan(number) or not -limit <= number <= limit:
        raise ValidationError(f"{field_name} must be between {-limit:g} and {limit:g}")
    return number


def optional_int(value: Any, field_name: str) -> Optional[int]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer")
