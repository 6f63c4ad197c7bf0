"""Wall-clock helpers.

Everything time-dependent takes an explicit ``now`` so results are
reproducible; ``local_now`` is only the default clock.
"""

from collections.abc import Callable
from datetime import UTC, date, datetime, time, tzinfo

Clock = Callable[[], datetime]


def local_now() -> datetime:
    """Current time, timezone-aware, in the host's local zone."""
    return datetime.now().astimezone()


def resolve_now(now: datetime | None) -> datetime:
    """Return an aware reference time; naive values are read as UTC."""
    if now is None:
        return local_now()
    if now.tzinfo is None:
        return now.replace(tzinfo=UTC)
    return now


def ensure_aware(value: datetime, tz: tzinfo | None) -> datetime:
    """Attach ``tz`` to a naive datetime; convert an aware one into ``tz``."""
    if value.tzinfo is None:
        return value.replace(tzinfo=tz)
    if tz is None:
        return value
    return value.astimezone(tz)


def parse_timestamp(value: object, tz: tzinfo | None = None) -> datetime | None:
    """Best-effort conversion of a stored date value to an aware datetime.

    Accepts datetimes, dates and ISO-8601 strings. Returns None for anything
    that cannot be interpreted as a point in time.
    """
    if isinstance(value, datetime):
        return ensure_aware(value, tz)
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=tz)
    if isinstance(value, str) and value:
        try:
            parsed = datetime.fromisoformat(value)
        except ValueError:
            return None
        return ensure_aware(parsed, tz)
    return None
