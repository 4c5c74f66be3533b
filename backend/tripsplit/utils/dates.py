"""Date helpers.

Datetimes are kept naive and in UTC, matching what pymongo hands back by
default, so values from either store compare cleanly.
"""
import re
from datetime import date, datetime, timedelta, timezone

from tripsplit.errors import ErrorCode, ValidationError

_OFFSET_RE = re.compile(r"^([+-])(\d{2}):?(\d{2})$")


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def parse_datetime(value, field: str) -> datetime:
    """Parse an ISO-8601 date or datetime into a naive UTC datetime.

    Raises:
        ValidationError: when the value is missing or unparseable
    """
    if value is None or value == "":
        raise ValidationError(f"{field} is required", code=ErrorCode.INVALID_DATE)

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            raise ValidationError(f"{field} is invalid", code=ErrorCode.INVALID_DATE)
    else:
        raise ValidationError(f"{field} is invalid", code=ErrorCode.INVALID_DATE)

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def parse_utc_offset(offset: str) -> timezone:
    """Turn an offset such as ``+05:30`` into a fixed timezone."""
    match = _OFFSET_RE.match(offset or "")
    if not match:
        raise ValueError(f"invalid UTC offset: {offset!r}")
    sign, hours, minutes = match.groups()
    delta = timedelta(hours=int(hours), minutes=int(minutes))
    return timezone(-delta if sign == "-" else delta)


def to_offset(value: datetime, tz: timezone) -> datetime:
    """Shift a naive UTC datetime into a fixed-offset zone."""
    return value.replace(tzinfo=timezone.utc).astimezone(tz)


def day_diff(start: datetime, end: datetime) -> int:
    """Number of UTC day boundaries crossed between start and end."""
    return (end.date() - start.date()).days


def isoformat(value):
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return value
