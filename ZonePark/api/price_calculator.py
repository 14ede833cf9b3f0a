from datetime import datetime, timezone
from typing import Optional

from ZonePark.api.errors import InvalidInput


def utcnow() -> datetime:
    # naive UTC at whole-second resolution, the same precision the database stores
    return datetime.now(timezone.utc).replace(tzinfo=None, microsecond=0)


def elapsed_minutes(start: datetime, end: datetime) -> int:
    # Alleen volle minuten tellen, een halve minuut is nog 0.
    if not isinstance(start, datetime) or not isinstance(end, datetime):
        raise InvalidInput("start and end must be datetimes")

    seconds = (end - start).total_seconds()
    if seconds <= 0:
        # klokverschil: stop voor start telt als 0 minuten
        return 0
    return int(seconds // 60)


def calculate_price(hourly_rate: int, start: datetime, end: Optional[datetime] = None) -> int:
    """
    Price for parking from start until end (or until now when end is None).

    Every whole minute costs hourly_rate / 60 and the total is rounded up to
    the next whole currency unit. The ceiling is taken with integer
    arithmetic so 30 minutes at 100/h is exactly 50.
    """
    # alleen echte ints, geen bool of float
    if not isinstance(hourly_rate, int) or isinstance(hourly_rate, bool) or hourly_rate < 0:
        raise InvalidInput("hourly rate must be a non-negative integer")

    end = end or utcnow()
    minutes = elapsed_minutes(start, end)

    return -(-minutes * hourly_rate // 60)
