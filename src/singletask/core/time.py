"""Pure time helpers - timezone resolution, date parsing, ages. No I/O."""

from datetime import date, datetime, time, timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from singletask.errors import ParseError

# Date-only due dates count as due at the end of the day
END_OF_DAY = time(23, 59)

_DATE_LEN = len("2024-01-31")
_LOCAL_DATETIME_LEN = len("2024-01-31T09:30:00")
_UTC_DATETIME_LEN = len("2024-01-31T09:30:00Z")


def resolve_timezone(name: str) -> ZoneInfo:
    """
    Resolve a timezone name to a ZoneInfo.

    Accepts IANA names ("America/Los_Angeles") and falls back to offsets
    of the form "GMT -7:00", which map onto the fixed-offset Etc/GMT zones.
    """
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        return _parse_gmt_offset(name)


def _parse_gmt_offset(gmt: str) -> ZoneInfo:
    """Parse "GMT -7:00" / "GMT +2" into the matching Etc/GMT zone."""
    parts = gmt.split()
    if len(parts) < 2:
        raise ParseError("parse_timezone", f"Could not get offset from {gmt!r}")

    offset = parts[1].replace(":00", "").replace(":", "")
    try:
        hours = int(offset)
    except ValueError:
        raise ParseError("parse_timezone", f"Invalid offset {parts[1]!r} in {gmt!r}") from None

    # Etc/GMT zones use POSIX sign: GMT-7 is written Etc/GMT+7
    sign = "+" if hours < 0 else "-"
    key = f"Etc/GMT{sign}{abs(hours)}"
    try:
        return ZoneInfo(key)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        raise ParseError("parse_timezone", f"Unknown timezone {gmt!r}") from None


def now(tz: tzinfo) -> datetime:
    """Current instant, expressed in the given zone."""
    return datetime.now(tz)


def age_in_minutes(past: datetime, tz: tzinfo, as_of: datetime | None = None) -> int:
    """
    Whole minutes elapsed since `past`.

    Positive when `past` precedes now, negative when it lies in the future.
    """
    current = as_of or now(tz)
    return int((current - past).total_seconds() / 60)


def parse_datetime(raw: str, tz: tzinfo) -> datetime:
    """
    Parse an API date/time string into an aware datetime.

    Dispatches on length:
        "2024-01-31"            date only, treated as 23:59 local time
        "2024-01-31T09:30:00"   floating local time in `tz`
        "2024-01-31T09:30:00Z"  UTC, converted to `tz`
    """
    try:
        if len(raw) == _DATE_LEN:
            return datetime.combine(date.fromisoformat(raw), END_OF_DAY, tzinfo=tz)
        if len(raw) == _LOCAL_DATETIME_LEN:
            return datetime.strptime(raw, "%Y-%m-%dT%H:%M:%S").replace(tzinfo=tz)
        if len(raw) == _UTC_DATETIME_LEN:
            parsed = datetime.strptime(raw, "%Y-%m-%dT%H:%M:%SZ")
            return parsed.replace(tzinfo=timezone.utc).astimezone(tz)
    except ValueError as e:
        raise ParseError("parse_datetime", f"{raw!r}: {e}") from e
    raise ParseError("parse_datetime", f"Unsupported date/time format: {raw!r}")


def parse_date(raw: str, tz: tzinfo) -> date:
    """Parse an API date/time string and return the calendar date in `tz`."""
    if len(raw) == _DATE_LEN:
        try:
            return date.fromisoformat(raw)
        except ValueError as e:
            raise ParseError("parse_date", f"{raw!r}: {e}") from e
    return parse_datetime(raw, tz).date()
