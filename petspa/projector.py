# petspa/projector.py

import logging
from datetime import date, datetime
from typing import Iterable, List, Optional
from zoneinfo import ZoneInfo

from petspa.config import LEGACY_BLOCKED_APPOINTMENTS
from petspa.data import DEFAULT_RULE_LABEL
from petspa.core import SHOP_TZ, day_of_week, local_datetime, parse_hhmm, to_local
from petspa.recurrence import resolve_occurrence
from petspa.schemas import BlockedEntry, ClientEntry, RecurringEntry

logger = logging.getLogger(__name__)


def _target_date(target, tz: ZoneInfo) -> Optional[date]:
    if isinstance(target, datetime):
        if target.tzinfo is not None:
            return target.astimezone(tz).date()
        return target.date()
    if isinstance(target, date):
        return target
    return None


def _appointment_entries(target: date, appointments: Iterable, legacy_blocked: bool, tz: ZoneInfo) -> list:
    entries = []
    for appt in appointments:
        starts_at = getattr(appt, "starts_at", None)
        if not isinstance(starts_at, datetime):
            logger.debug("appointment %s skipped: no start time", getattr(appt, "id", None))
            continue
        local_start = to_local(starts_at, tz)
        if local_start.date() != target:
            continue

        if getattr(appt, "blocked", False):
            if legacy_blocked:
                entries.append(BlockedEntry(starts_at=local_start, appointment_id=getattr(appt, "id", None)))
            continue

        entries.append(
            ClientEntry(
                starts_at=local_start,
                appointment_id=getattr(appt, "id", None),
                client_name=getattr(appt, "client_name", None),
                pet_name=getattr(appt, "pet_name", None),
                service=getattr(appt, "service", None),
            )
        )
    return entries


def _recurring_entries(target: date, rules: Iterable, today: Optional[date], tz: ZoneInfo) -> list:
    dow = day_of_week(target)
    entries = []
    for rule in rules:
        if getattr(rule, "day_of_week", None) != dow:
            continue
        occurrence = resolve_occurrence(rule, target, today=today)
        if not occurrence.occurs:
            continue
        entries.append(
            RecurringEntry(
                starts_at=local_datetime(target, parse_hhmm(rule.time), tz),
                rule_id=getattr(rule, "id", None),
                pet_name=getattr(rule, "pet_name", None) or "",
                label=getattr(rule, "label", None) or DEFAULT_RULE_LABEL,
                visit_ordinal=occurrence.visit_ordinal,
            )
        )
    return entries


def project(
    target,
    rules: Iterable,
    appointments: Iterable,
    legacy_blocked_appointments: bool = LEGACY_BLOCKED_APPOINTMENTS,
    today: Optional[date] = None,
    tz: ZoneInfo = SHOP_TZ,
) -> List:
    """
    Build the schedule for one shop-local day.

    Appointments starting on `target` become client entries (or blocked
    entries, when legacy blocking is on). Rules for `target`'s weekday that
    resolve to an occurrence become recurring entries. The result is sorted
    by start time; on equal times appointments come before recurring visits.

    A missing/invalid `target` gives an empty schedule.
    """
    day = _target_date(target, tz)
    if day is None:
        return []

    entries = _appointment_entries(day, appointments or [], legacy_blocked_appointments, tz)
    entries += _recurring_entries(day, rules or [], today, tz)

    # sorted() is stable, so ties keep insertion order
    return sorted(entries, key=lambda e: e.starts_at)


def occupied_times(entries: Iterable) -> List[str]:
    """Local "HH:MM" of every entry, in schedule order, without duplicates."""
    seen = []
    for entry in entries:
        hhmm = entry.starts_at.strftime("%H:%M")
        if hhmm not in seen:
            seen.append(hhmm)
    return seen
