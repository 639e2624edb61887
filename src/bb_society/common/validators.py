from __future__ import annotations

import math
from typing import Any, Optional

from ..core.exceptions import ValidationError


def require_positive_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} is invalid")
    if isinstance(value, float) and not value.is_integer():
        raise ValidationError(f"{field_name} must be a whole number")
    try:
        number = int(value)
    except (TypeError, ValueError, OverflowError):
        raise ValidationError(f"{field_name} is invalid")
    if number <= 0:
        raise ValidationError(f"{field_name} is invalid")
    return number


def optional_positive_int(value: Any, field_name: str, default: Optional[int] = None) -> Optional[int]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return default
    return require_positive_int(value, field_name)


def optional_number_in_range(value: Any, field_name: str, low: float, high: float) -> Optional[float]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a number")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    # NaN compares false against both bounds
    if not math.isfinite(number):
        raise ValidationError(f"{field_name} must be a number")
    if number < low or number > high:
        raise ValidationError(f"{field_name} must be between {low:g} and {high:g}")
    return number


def optional_int_in_range(value: Any, field_name: str, low: int, high: int) -> Optional[int]:
    number = optional_number_in_range(value, field_name, low, high)
    if number is None:
        return None
    if not number.is_integer():
        raise ValidationError(f"{field_name} must be a whole number")
    return int(number)


def positive_int_list(value: Any, field_name: str) -> tuple[int, ...]:
    """Distinct positive ids in first-seen order; ``None`` means none."""
    if value is None:
        return ()
    if not isinstance(value, (list, tuple)):
        raise ValidationError(f"{field_name} must be an array")
    ids: list[int] = []
    for item in value:
        number = require_positive_int(item, field_name)
        if number not in ids:
            ids.append(number)
    return tuple(ids)


def optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None
