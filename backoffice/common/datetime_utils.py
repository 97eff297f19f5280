from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import Optional

from ..core.exceptions import ValidationError

# Asia/Jakarta has no DST, a fixed offset is exact.
JAKARTA = timezone(timedelta(hours=7), "WIB")


def now_utc() -> datetime:
    """Current UTC time as a naive datetime (how timestamps are stored).

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_jakarta(value: datetime) -> datetime:
    """Naive UTC -> naive Jakarta wall clock."""
    return value.replace(tzinfo=timezone.utc).astimezone(JAKARTA).replace(tzinfo=None)


def from_jakarta(value: datetime) -> datetime:
    """Naive Jakarta wall clock -> naive UTC."""
    return value.replace(tzinfo=JAKARTA).astimezone(timezone.utc).replace(tzinfo=None)


def jakarta_today(now: Optional[datetime] = None) -> date:
    return to_jakarta(now or now_utc()).date()


def minute_of_day_jakarta(value: datetime) -> int:
    local = to_jakarta(value)
    return local.hour * 60 + local.minute


def start_of_day_jakarta(day: date) -> datetime:
    return from_jakarta(datetime.combine(day, time.min))


def end_of_day_jakarta(day: date) -> datetime:
    return from_jakarta(datetime.combine(day, time(23, 59, 59, 999000)))


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD (a trailing time part is ignored) into date."""
    if not value:
        raise ValidationError("Date is required")
    try:
        return datetime.strptime(str(value)[:10], "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"Invalid date: {value}")


def parse_optional_date(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    return parse_iso_date(value)


def parse_datetime(value: str) -> datetime:
    """Parse an ISO timestamp into naive UTC.

    Timestamps without an offset are taken as Jakarta wall clock.
    """
    if not value:
        raise ValidationError("Timestamp is required")
    text = str(value).strip().replace("Z", "+00:00")
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        raise ValidationError(f"Invalid timestamp: {value}")
    if parsed.tzinfo is None:
        return from_jakarta(parsed)
    return parsed.astimezone(timezone.utc).replace(tzinfo=None)


def parse_month(value: Optional[str], *, now: Optional[datetime] = None) -> tuple[int, int]:
    """Parse YYYY-MM into (year, month); defaults to the current Jakarta month."""
    if not value:
        today = jakarta_today(now)
        return today.year, today.month
    try:
        year_s, month_s = str(value).split("-")[:2]
        year, month = int(year_s), int(month_s)
    except ValueError:
        raise ValidationError("month must be YYYY-MM")
    if not 1 <= month <= 12:
        raise ValidationError("month must be YYYY-MM")
    return year, month


def month_key(year: int, month: int) -> str:
    return f"{year:04d}-{month:02d}"


def month_range(year: int, month: int) -> tuple[datetime, datetime]:
    """UTC [start, end) bounds of a Jakarta calendar month."""
    first = date(year, month, 1)
    nxt = date(year + 1, 1, 1) if month == 12 else date(year, month + 1, 1)
    return start_of_day_jakarta(first), start_of_day_jakarta(nxt)


def date_range_utc(start: date, end: date) -> tuple[datetime, datetime]:
    """UTC [start, end] bounds covering whole Jakarta days."""
    return start_of_day_jakarta(start), end_of_day_jakarta(end)


def iso(value: Optional[datetime | date]) -> Optional[str]:
    if value is None:
        return None
    return value.isoformat()
