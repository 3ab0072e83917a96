# petspa/importer.py
"""
CSV bulk import of recurrence rules.

Required headers: dayOfWeek, time, petName, frequency.
Optional headers: label, cycleStartDate, startBathNumber.

Day and frequency columns take the Portuguese names the shop uses
("terça-feira", "quinzenal", ...). Rows that don't validate are skipped and
reported, they never abort the whole file.
"""

import csv
import io
import logging
from datetime import date, datetime
from typing import List, Optional, Tuple

from pydantic import ValidationError

from petspa.core import day_of_week, generate_slots
from petspa.data import DEFAULT_RULE_LABEL
from petspa.schemas import RecurrenceRuleCreate

logger = logging.getLogger(__name__)

REQUIRED_HEADERS = ["dayOfWeek", "time", "petName", "frequency"]

# Monday=1 ... Saturday=6, the shop is closed on Sundays
DAY_OF_WEEK_MAP = {
    "segunda": 1,
    "segunda-feira": 1,
    "terca": 2,
    "terça": 2,
    "terca-feira": 2,
    "terça-feira": 2,
    "quarta": 3,
    "quarta-feira": 3,
    "quinta": 4,
    "quinta-feira": 4,
    "sexta": 5,
    "sexta-feira": 5,
    "sabado": 6,
    "sábado": 6,
}

FREQUENCY_MAP = {
    "semanal": "weekly",
    "quinzenal": "bi-weekly",
    "mensal": "monthly",
}


class ImportFormatError(ValueError):
    """The file as a whole can't be imported."""


def _parse_day(raw: str) -> Optional[int]:
    raw = raw.strip().lower()
    if raw.isdigit() and 1 <= int(raw) <= 6:
        return int(raw)
    return DAY_OF_WEEK_MAP.get(raw)


def _parse_cycle_start(raw: str) -> Optional[date]:
    raw = raw.strip()
    if not raw:
        return None
    for fmt in ("%Y-%m-%d", "%d/%m/%Y"):
        try:
            return datetime.strptime(raw, fmt).date()
        except ValueError:
            continue
    raise ValueError(f"invalid cycleStartDate {raw!r}")


def decode_csv(content: bytes) -> str:
    try:
        return content.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise ImportFormatError("CSV file must be UTF-8 encoded") from e


def parse_rules_csv(text: str) -> Tuple[List[RecurrenceRuleCreate], List[str]]:
    """Returns (valid rules, human readable reasons for skipped rows)."""
    reader = csv.DictReader(io.StringIO(text))
    headers = reader.fieldnames or []
    missing = [h for h in REQUIRED_HEADERS if h not in headers]
    if missing:
        raise ImportFormatError(f"CSV must contain the headers: {', '.join(REQUIRED_HEADERS)}")

    valid_times = generate_slots()
    rules: List[RecurrenceRuleCreate] = []
    skipped: List[str] = []

    # line 1 is the header
    for line_no, row in enumerate(reader, start=2):
        if not any((v or "").strip() for v in row.values() if isinstance(v, str)):
            continue

        day = _parse_day(row.get("dayOfWeek") or "")
        if day is None:
            skipped.append(f"line {line_no}: invalid dayOfWeek {row.get('dayOfWeek')!r}")
            continue

        frequency = FREQUENCY_MAP.get((row.get("frequency") or "").strip().lower())
        if frequency is None:
            skipped.append(f"line {line_no}: invalid frequency {row.get('frequency')!r}")
            continue

        time_raw = (row.get("time") or "").strip()
        if time_raw not in valid_times:
            skipped.append(f"line {line_no}: time {time_raw!r} is not a slot")
            continue

        try:
            rule = RecurrenceRuleCreate(
                day_of_week=day,
                time=time_raw,
                pet_name=(row.get("petName") or "").strip(),
                label=(row.get("label") or "").strip() or DEFAULT_RULE_LABEL,
                frequency=frequency,
                cycle_start_date=_parse_cycle_start(row.get("cycleStartDate") or ""),
                start_bath_number=int((row.get("startBathNumber") or "1").strip() or 1),
            )
        except (ValidationError, ValueError) as e:
            skipped.append(f"line {line_no}: {e}")
            continue

        if rule.cycle_start_date is not None and day_of_week(rule.cycle_start_date) != rule.day_of_week:
            skipped.append(f"line {line_no}: cycleStartDate {rule.cycle_start_date} does not fall on dayOfWeek")
            continue

        rules.append(rule)

    for reason in skipped:
        logger.warning("rule import skipped %s", reason)
    return rules, skipped
