from datetime import date, datetime, time, timezone

from petspa.core import (
    day_of_week,
    generate_slots,
    local_day_bounds,
    parse_hhmm,
    slots_for_date,
    to_local,
    to_utc,
)


def test_default_grid_has_seventeen_half_hour_slots():
    slots = generate_slots(8, 0, 16, 0, 30)
    assert len(slots) == 17
    assert slots[0] == "08:00"
    assert slots[1] == "08:30"
    assert slots[-1] == "16:00"
    assert generate_slots(8, 0, 16, 0, 30) == slots
    assert generate_slots() == slots


def test_generate_slots_zero_pads_and_includes_end():
    assert generate_slots(9, 5, 9, 25, 10) == ["09:05", "09:15", "09:25"]


def test_generate_slots_degenerate_ranges_are_empty():
    assert generate_slots(16, 0, 8, 0, 30) == []
    assert generate_slots(8, 0, 16, 0, 0) == []
    assert generate_slots(8, 0, 8, 0, 30) == ["08:00"]


def test_day_of_week_is_sunday_based():
    assert day_of_week(date(2025, 1, 5)) == 0  # Sunday
    assert day_of_week(date(2025, 1, 7)) == 2  # Tuesday
    assert day_of_week(date(2025, 1, 11)) == 6  # Saturday


def test_slots_for_date_by_weekday():
    assert slots_for_date(date(2025, 1, 5)) == []
    assert slots_for_date(date(2025, 1, 8)) == generate_slots(8, 0, 16, 0)  # Wednesday
    assert slots_for_date(date(2025, 1, 9)) == generate_slots(8, 0, 16, 0)  # Thursday
    assert slots_for_date(date(2025, 1, 6)) == generate_slots(12, 30, 16, 0)  # Monday
    assert slots_for_date(date(2025, 1, 11))[0] == "12:30"  # Saturday


def test_slots_for_date_without_date():
    assert slots_for_date(None) == []
    assert slots_for_date(datetime(2025, 1, 8, 15, 0)) == generate_slots(8, 0, 16, 0)


def test_parse_hhmm():
    assert parse_hhmm("14:30") == time(14, 30)
    assert parse_hhmm("25:00") is None
    assert parse_hhmm("9:00") is None
    assert parse_hhmm("") is None
    assert parse_hhmm(None) is None


def test_utc_round_trip_in_shop_time():
    local = datetime(2025, 1, 7, 9, 30)
    stored = to_utc(local)
    assert stored == datetime(2025, 1, 7, 12, 30, tzinfo=timezone.utc)
    assert to_local(stored).replace(tzinfo=None) == local
    # naive values read back from SQLite are UTC
    assert to_local(stored.replace(tzinfo=None)) == to_local(stored)


def test_local_day_bounds_cover_the_shop_day():
    start, end = local_day_bounds(date(2025, 1, 7))
    assert start == datetime(2025, 1, 7, 3, 0, tzinfo=timezone.utc)
    assert end == datetime(2025, 1, 8, 3, 0, tzinfo=timezone.utc)
