"""Clock and day-arithmetic helpers shared by the workflow engine."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from decimal import ROUND_HALF_UP, Decimal

ONE_DAY = timedelta(days=1)


def ensure_utc(value: datetime | None) -> datetime | None:
    """Attach UTC to naive timestamps; aware ones are converted to UTC."""

    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def fractional_days(start: datetime, end: datetime) -> float:
    return (end - start) / ONE_DAY


def days_since(moment: datetime | None, now: datetime) -> int:
    """Whole days elapsed since ``moment``; 0 when unknown or in the future."""

    if moment is None:
        return 0
    return max(0, (now - moment) // ONE_DAY)


def round_half_up(value: float) -> int:
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
