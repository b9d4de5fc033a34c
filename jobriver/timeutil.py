import re
from datetime import datetime, timezone

# fromisoformat before 3.11 only takes 3 or 6 fractional digits
_FRACTION = re.compile(r"\.(\d+)")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_utc(dt: datetime) -> datetime:
    """Return `dt` as an aware UTC datetime. Naive values are taken as UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _micros(match: "re.Match") -> str:
    return "." + (match.group(1) + "000000")[:6]


def parse_timestamp(ts_str: str) -> datetime:
    """Parse an ISO-8601 timestamp string into an aware UTC datetime.

    Accepts a trailing 'Z' and either 'T' or a space as the date/time separator.
    Fractional seconds of any length are cut to microseconds.

    Raises:
        ValueError: If the string isn't a recognizable timestamp
    """
    s = ts_str.strip()
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    elif s.endswith(" UTC"):
        s = s[:-4] + "+00:00"
    s = _FRACTION.sub(_micros, s, count=1)
    return to_utc(datetime.fromisoformat(s))
