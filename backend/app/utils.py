from datetime import datetime, timezone


def utcnow() -> datetime:
    """Return the current UTC time as a timezone-aware datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """Make a naive datetime timezone-aware (UTC). Already-aware datetimes pass through."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def utc_iso(dt: datetime | None = None) -> str:
    """ISO-8601 timestamp string used as the stable identity of ledger rows.

    Stored as a string, not a BSON date: BSON truncates to milliseconds, which
    would break exact-match lookups by timestamp.
    """
    return ensure_utc(dt or utcnow()).isoformat(timespec="microseconds")


def parse_wager_date(value: str) -> datetime:
    """Parse a wager ``date`` field.

    A bare calendar date (``YYYY-MM-DD``) becomes local midnight as a naive
    datetime. Anything longer is parsed as ISO-8601 as given.
    """
    text = str(value).strip()
    if len(text) <= 10:
        return datetime.strptime(text, "%Y-%m-%d")
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def to_local_naive(dt: datetime) -> datetime:
    """Convert an aware datetime to naive local time; naive values pass through."""
    if dt.tzinfo is None:
        return dt
    return dt.astimezone().replace(tzinfo=None)
