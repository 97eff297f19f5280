from __future__ import annotations

from typing import Any, Optional

from ..core.enums import Location
from ..core.exceptions import ValidationError


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_int(value: Any, field_name: str, *, minimum: Optional[int] = None) -> int:
    """Coerce a JSON number (or numeric string) into an int."""
    if isinstance(value, bool) or value is None or value == "":
        raise ValidationError(f"{field_name} must be a number")
    try:
        number = int(float(value))
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if minimum is not None and number < minimum:
        raise ValidationError(f"{field_name} must be >= {minimum}")
    return number


def optional_int(value: Any, field_name: str, *, minimum: Optional[int] = None) -> Optional[int]:
    if value is None or value == "":
        return None
    return require_int(value, field_name, minimum=minimum)


def require_number(value: Any, field_name: str, *, minimum: Optional[float] = None) -> float:
    if isinstance(value, bool) or value is None or value == "":
        raise ValidationError(f"{field_name} must be a number")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if number != number:
        raise ValidationError(f"{field_name} must be a number")
    if minimum is not None and number < minimum:
        raise ValidationError(f"{field_name} must be >= {minimum}")
    return number


def require_location(value: Any, field_name: str = "location") -> Location:
    try:
        return Location(str(value).strip() if value is not None else "")
    except ValueError:
        allowed = ", ".join(loc.value for loc in Location)
        raise ValidationError(f"{field_name} must be one of: {allowed}")


def optional_location(value: Any) -> Optional[Location]:
    if value is None or value == "" or str(value).lower() == "all":
        return None
    return require_location(value)
