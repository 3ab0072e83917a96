# petspa/core.py

import re
from datetime import date, datetime, time, timedelta, timezone
from typing import List, Optional, Tuple
from zoneinfo import ZoneInfo

from petspa.config import SHOP_TIMEZONE, SLOT_MINUTES

SHOP_TZ = ZoneInfo(SHOP_TIMEZONE)

_HHMM = re.compile(r"^(\d{2}):(\d{2})$")


def generate_slots(
    start_hour: int = 8,
    start_minute: int = 0,
    end_hour: int = 16,
    end_minute: int = 0,
    interval: int = SLOT_MINUTES,
) -> List[str]:
    """Every "HH:MM" from start to end inclusive, `interval` minutes apart."""
    if interval <= 0:
        return []
    start = start_hour * 60 + start_minute
    end = end_hour * 60 + end_minute

    slots = []
    current = start
    while current <= end:
        slots.append(f"{current // 60:02d}:{current % 60:02d}")
        current += interval
    return slots


def day_of_week(d: date) -> int:
    """Weekday with Sunday=0 ... Saturday=6."""
    return (d.weekday() + 1) % 7


def slots_for_date(d: Optional[date]) -> List[str]:
    """Slots customers can book on `d`."""
    if d is None:
        return []
    if isinstance(d, datetime):
        d = d.date()

    dow = day_of_week(d)
    if dow == 0:  # Sunday
        return []
    if dow in (3, 4):  # Wednesday, Thursday
        return generate_slots(8, 0, 16, 0)
    # Monday, Tuesday, Friday, Saturday
    return generate_slots(12, 30, 16, 0)


def parse_hhmm(value) -> Optional[time]:
    """Strict 24h "HH:MM" parser. Returns None for anything else."""
    if not isinstance(value, str):
        return None
    m = _HHMM.match(value.strip())
    if not m:
        return None
    hh, mm = int(m.group(1)), int(m.group(2))
    if hh > 23 or mm > 59:
        return None
    return time(hh, mm)


def to_local(dt: datetime, tz: ZoneInfo = SHOP_TZ) -> datetime:
    # Naive datetimes come from the database and are stored as UTC
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(tz)


def to_utc(dt: datetime, tz: ZoneInfo = SHOP_TZ) -> datetime:
    # Naive input here is shop-local wall time
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=tz)
    return dt.astimezone(timezone.utc)


def local_datetime(d: date, t: time, tz: ZoneInfo = SHOP_TZ) -> datetime:
    return datetime.combine(d, t, tzinfo=tz)


def local_day_bounds(d: date, tz: ZoneInfo = SHOP_TZ) -> Tuple[datetime, datetime]:
    """[start, end) of the shop-local day `d` as aware UTC, for DB queries."""
    start = datetime.combine(d, time.min, tzinfo=tz)
    end = datetime.combine(d + timedelta(days=1), time.min, tzinfo=tz)
    return to_utc(start), to_utc(end)


def local_today(tz: ZoneInfo = SHOP_TZ) -> date:
    return datetime.now(tz).date()


def overlaps(a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime) -> bool:
    return a_start < b_end and b_start < a_end
