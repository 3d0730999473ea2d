from datetime import date, datetime, time, timezone
from typing import Optional

# Activity dates are stored as naive UTC, the same way createdAt defaults are.


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def as_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def is_date_only(value: str) -> bool:
    try:
        date.fromisoformat(value.strip())
    except ValueError:
        return False
    return True


def parse_datetime(value: Optional[str]) -> Optional[datetime]:
    """
    Parses an ISO-8601 date or timestamp into naive UTC.
    Returns None when the value is missing or cannot be parsed.
    """
    if not value or not value.strip():
        return None
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError:
        return None
    return as_naive_utc(parsed)


def end_of_day(value: datetime) -> datetime:
    return datetime.combine(value.date(), time(23, 59, 59, 999000))
