# petspa/recurrence.py
"""
Cycle/frequency resolution for recurring ("Clubinho") visits.

Given a recurrence rule and a calendar date, decide whether the rule has a
visit on that date and, when it does, which visit of the 4-bath cycle it is.

All arithmetic is done on `date` objects, so elapsed weeks are whole-day
counts in the shop's calendar and never drift around DST changes.
"""

import logging
from datetime import date, datetime
from typing import NamedTuple, Optional

from petspa.core import day_of_week, local_today, parse_hhmm

logger = logging.getLogger(__name__)

WEEKLY = "weekly"
BI_WEEKLY = "bi-weekly"
MONTHLY = "monthly"
FREQUENCIES = (WEEKLY, BI_WEEKLY, MONTHLY)

CYCLE_LENGTH = 4


class Occurrence(NamedTuple):
    occurs: bool
    visit_ordinal: Optional[int] = None


NO_OCCURRENCE = Occurrence(False)


def _as_date(value) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return None


def rule_problem(rule) -> Optional[str]:
    """Describe why a rule can't be evaluated, or None when it's well formed."""
    dow = getattr(rule, "day_of_week", None)
    if not isinstance(dow, int) or isinstance(dow, bool) or not 0 <= dow <= 6:
        return f"day_of_week out of range: {dow!r}"
    if parse_hhmm(getattr(rule, "time", None)) is None:
        return f"unparseable time: {getattr(rule, 'time', None)!r}"
    frequency = getattr(rule, "frequency", None)
    if frequency not in FREQUENCIES:
        return f"unknown frequency: {frequency!r}"
    start_bath = getattr(rule, "start_bath_number", 1)
    if start_bath is not None and (not isinstance(start_bath, int) or not 1 <= start_bath <= CYCLE_LENGTH):
        return f"start_bath_number out of range: {start_bath!r}"
    cycle_start = getattr(rule, "cycle_start_date", None)
    if cycle_start is not None and _as_date(cycle_start) is None:
        return f"bad cycle_start_date: {cycle_start!r}"
    return None


def first_weekday_of_month(year: int, month: int, dow: int) -> date:
    """First date in the month whose Sunday=0 weekday is `dow`."""
    first = date(year, month, 1)
    shift = (dow - day_of_week(first)) % 7
    return first.replace(day=1 + shift)


def resolve_occurrence(rule, target, today: Optional[date] = None) -> Occurrence:
    """
    Evaluate `rule` on `target`.

    Returns Occurrence(occurs, visit_ordinal). visit_ordinal is only set for
    weekly and monthly rules. Malformed rules, dates on another weekday and
    dates before the cycle start never occur.
    """
    target = _as_date(target)
    if target is None:
        return NO_OCCURRENCE

    problem = rule_problem(rule)
    if problem is not None:
        logger.debug("rule %s rejected: %s", getattr(rule, "id", None), problem)
        return NO_OCCURRENCE

    if day_of_week(target) != rule.day_of_week:
        return NO_OCCURRENCE

    cycle_start = _as_date(rule.cycle_start_date)
    if cycle_start is None:
        cycle_start = today or local_today()

    if target < cycle_start:
        return NO_OCCURRENCE

    weeks_elapsed = (target - cycle_start).days // 7
    start_bath = rule.start_bath_number or 1

    if rule.frequency == WEEKLY:
        ordinal = ((start_bath - 1 + weeks_elapsed) % CYCLE_LENGTH) + 1
        return Occurrence(True, ordinal)

    if rule.frequency == BI_WEEKLY:
        if weeks_elapsed % 2 == 0:
            return Occurrence(True)
        return NO_OCCURRENCE

    if rule.frequency == MONTHLY:
        if (target.year, target.month) == (cycle_start.year, cycle_start.month):
            return Occurrence(True, start_bath + weeks_elapsed)

        # numbering restarts each calendar month
        first = first_weekday_of_month(target.year, target.month, rule.day_of_week)
        weeks_in_month = (target - first).days // 7
        return Occurrence(True, weeks_in_month + 1)

    return NO_OCCURRENCE
