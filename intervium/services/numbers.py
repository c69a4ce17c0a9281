# intervium/services/numbers.py
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional


def round_half_up(value) -> int:
    """42.5 -> 43 (Python round() would give 42)."""
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def mean(values: Iterable[float]) -> Optional[float]:
    items = [float(v) for v in values if v is not None]
    if not items:
        return None
    return sum(items) / len(items)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite는 tz 정보를 버리므로 naive 값은 UTC로 간주
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def minutes_between(started_at: datetime, completed_at: datetime) -> int:
    elapsed_ms = (as_utc(completed_at) - as_utc(started_at)).total_seconds() * 1000
    return max(0, round_half_up(elapsed_ms / 60000))
