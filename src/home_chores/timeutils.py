"""Timestamp conversion between the database and the task model.

Timestamps are stored as integer epoch milliseconds (UTC). Tasks carry
naive datetimes in the local time zone of the running process.
"""

from datetime import datetime, timezone
from typing import Any

UTC = timezone.utc

# Text timestamps from older databases, read as UTC.
_LEGACY_FORMATS = (
    "%Y-%m-%d %H:%M:%S.%f",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%dT%H:%M:%S.%f",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%d",
)

_USER_FORMATS = ("%Y-%m-%d %H:%M:%S", "%Y-%m-%d %H:%M", "%Y-%m-%d")


def truncate_to_millis(dt: datetime) -> datetime:
    """Drop sub-millisecond precision."""
    return dt.replace(microsecond=dt.microsecond - dt.microsecond % 1000)


def now_local() -> datetime:
    """Current local time, truncated to milliseconds."""
    return truncate_to_millis(datetime.now())


def now_millis() -> int:
    """Current time as epoch milliseconds."""
    return to_epoch_millis(datetime.now(UTC))


def to_epoch_millis(dt: datetime) -> int:
    """Convert a datetime to epoch milliseconds.

    Naive datetimes are interpreted as local time, aware ones use their
    own offset.
    """
    # timestamp() is a float; take whole seconds separately to avoid drift
    seconds = int(dt.replace(microsecond=0).timestamp())
    return seconds * 1000 + dt.microsecond // 1000


def from_epoch_millis(millis: int) -> datetime:
    """Convert epoch milliseconds to a naive local datetime."""
    seconds, remainder = divmod(int(millis), 1000)
    aware = datetime.fromtimestamp(seconds, UTC).replace(microsecond=remainder * 1000)
    return aware.astimezone().replace(tzinfo=None)


def to_stored(dt: datetime | None) -> int | None:
    """Convert an optional datetime to its database value."""
    if dt is None:
        return None
    return to_epoch_millis(dt)


def from_stored(value: Any) -> datetime | None:
    """Convert a database value to an optional naive local datetime.

    Accepts epoch milliseconds (as a number or numeric string), the
    ``YYYY-MM-DD HH:MM:SS`` UTC text that SQLite's CURRENT_TIMESTAMP
    writes, and ISO 8601 text. Text without an offset is read as UTC.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError(f"Unsupported timestamp value: {value!r}")
    if isinstance(value, (int, float)):
        return from_epoch_millis(int(value))
    if isinstance(value, bytes):
        value = value.decode("utf-8")
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text.lstrip("-").isdigit():
            return from_epoch_millis(int(text))
        for fmt in _LEGACY_FORMATS:
            try:
                parsed = datetime.strptime(text, fmt)
            except ValueError:
                continue
            return parsed.replace(tzinfo=UTC).astimezone().replace(tzinfo=None)
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            pass
        else:
            if parsed.tzinfo is None:
                parsed = parsed.replace(tzinfo=UTC)
            return parsed.astimezone().replace(tzinfo=None)
    raise ValueError(f"Unsupported timestamp value: {value!r}")


def parse_user_datetime(text: str | None) -> datetime | None:
    """Parse a deadline typed by the user.

    Accepts ``YYYY-MM-DD`` (midnight) or ``YYYY-MM-DD HH:MM[:SS]``.
    Blank input means no deadline.

    Raises:
        ValueError: If the text matches none of the accepted formats.
    """
    if text is None or not text.strip():
        return None
    value = " ".join(text.split())
    for fmt in _USER_FORMATS:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    raise ValueError(
        f"Invalid date '{text}'. Use YYYY-MM-DD or YYYY-MM-DD HH:MM."
    )


def format_datetime(dt: datetime | None, fmt: str) -> str:
    """Format an optional datetime, returning an empty string for None."""
    if dt is None:
        return ""
    return dt.strftime(fmt)
