from __future__ import annotations

from datetime import date
from typing import Optional

from ..core.exceptions import ValidationError
from .clock import parse_iso_date


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_min_length(value: Optional[str], field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_date_range(start: Optional[str], end: Optional[str]) -> tuple[date, date]:
    if not start or not end:
        raise ValidationError("Missing date range")
    try:
        start_date = parse_iso_date(start.strip())
        end_date = parse_iso_date(end.strip())
    except ValueError:
        raise ValidationError("Dates must use the YYYY-MM-DD format")
    if start_date > end_date:
        raise ValidationError("Start date must not be after end date")
    return start_date, end_date
