# petspa/routers/admin_routes.py

import logging
from datetime import date, timedelta
from typing import List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, Response, UploadFile
from sqlalchemy.exc import IntegrityError
from sqlalchemy import delete
from sqlmodel import Session

from petspa import config
from petspa.db import get_session, list_appointments, list_recurrence_rules, load_day_schedule
from petspa.models import Appointment, RecurrenceRule
from petspa.schemas import (
    AgendaDaysResponse,
    AgendaResponse,
    AppointmentPublic,
    BlockCreate,
    BulkDeleteRequest,
    BulkDeleteResponse,
    ImportResult,
    OccurrencePublic,
    RecurrenceRuleCreate,
    RecurrenceRulePublic,
)
from petspa.deps import require_admin
from petspa.core import day_of_week, generate_slots, local_datetime, local_day_bounds, local_today, parse_hhmm, to_local, to_utc
from petspa.data import BLOCK_CLIENT_NAME, BLOCK_PET_NAME, BLOCK_SERVICE
from petspa.importer import ImportFormatError, decode_csv, parse_rules_csv
from petspa.recurrence import resolve_occurrence

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/admin",
    tags=["admin"],
    dependencies=[Depends(require_admin)],
)


# ---------- Appointments & blocks ----------

@router.get("/appointments", response_model=List[AppointmentPublic])
def list_all_appointments(
    blocked: Optional[bool] = None,
    session: Session = Depends(get_session),
):
    return list_appointments(session, blocked=blocked)


@router.post("/blocks", response_model=List[AppointmentPublic], status_code=201)
def block_times(
    block: BlockCreate,
    session: Session = Depends(get_session),
    current_user: dict = Depends(require_admin),
):
    if not config.LEGACY_BLOCKED_APPOINTMENTS:
        raise HTTPException(status_code=409, detail="Appointment blocks are disabled, use a recurring rule instead")

    if block.date < local_today():
        raise HTTPException(status_code=422, detail="Cannot block a date in the past")

    valid_times = generate_slots()
    for t in block.times:
        if t not in valid_times:
            raise HTTPException(status_code=422, detail=f"{t} is not a valid time slot")

    # one transaction for every selected slot
    created = []
    for t in sorted(set(block.times)):
        start = local_datetime(block.date, parse_hhmm(t))
        db_block = Appointment(
            starts_at=to_utc(start),
            ends_at=to_utc(start + timedelta(minutes=config.SLOT_MINUTES)),
            client_name=BLOCK_CLIENT_NAME,
            pet_name=BLOCK_PET_NAME,
            service=BLOCK_SERVICE,
            total_price=0,
            blocked=True,
            user_email=current_user["email"],
        )
        session.add(db_block)
        created.append(db_block)

    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        raise HTTPException(status_code=409, detail="One of the selected times is already taken")

    for db_block in created:
        session.refresh(db_block)
    logger.info("blocked %d slot(s) on %s", len(created), block.date)
    return created


@router.delete("/blocks/{block_id}", status_code=204)
def unblock_time(
    block_id: int,
    session: Session = Depends(get_session),
):
    target = session.get(Appointment, block_id)
    if target is None or not target.blocked:
        raise HTTPException(status_code=404, detail="Block not found")

    session.delete(target)
    session.commit()
    logger.info("block %s removed", block_id)
    return Response(status_code=204)


# ---------- Recurring rules ----------

@router.get("/recurring-rules", response_model=List[RecurrenceRulePublic])
def list_rules(session: Session = Depends(get_session)):
    return list_recurrence_rules(session)


@router.post("/recurring-rules", response_model=RecurrenceRulePublic, status_code=201)
def create_rule(
    rule: RecurrenceRuleCreate,
    session: Session = Depends(get_session),
):
    if rule.time not in generate_slots():
        raise HTTPException(status_code=422, detail="time must be one of the shop's time slots")
    if rule.cycle_start_date is not None and day_of_week(rule.cycle_start_date) != rule.day_of_week:
        raise HTTPException(status_code=422, detail="cycle_start_date must fall on day_of_week")

    db_rule = RecurrenceRule(**rule.model_dump())
    db_rule.frequency = rule.frequency.value
    session.add(db_rule)
    session.commit()
    session.refresh(db_rule)
    logger.info("recurring rule %s created for %s", db_rule.id, db_rule.pet_name)
    return db_rule


@router.delete("/recurring-rules/{rule_id}", status_code=204)
def delete_rule(
    rule_id: int,
    session: Session = Depends(get_session),
):
    target = session.get(RecurrenceRule, rule_id)
    if target is None:
        raise HTTPException(status_code=404, detail="Rule not found")

    session.delete(target)
    session.commit()
    logger.info("recurring rule %s deleted", rule_id)
    return Response(status_code=204)


@router.post("/recurring-rules/bulk-delete", response_model=BulkDeleteResponse)
def bulk_delete_rules(
    request: BulkDeleteRequest,
    session: Session = Depends(get_session),
):
    stmt = delete(RecurrenceRule)
    if request.ids:
        stmt = stmt.where(RecurrenceRule.id.in_(request.ids))
    result = session.exec(stmt)
    session.commit()
    logger.info("bulk deleted %d recurring rule(s)", result.rowcount)
    return {"deleted": result.rowcount}


@router.post("/recurring-rules/import", response_model=ImportResult, status_code=201)
def import_rules(
    file: UploadFile = File(...),
    replace: bool = False,
    session: Session = Depends(get_session),
):
    try:
        rules, skipped = parse_rules_csv(decode_csv(file.file.read()))
    except ImportFormatError as e:
        raise HTTPException(status_code=422, detail=str(e))

    replaced = 0
    if replace:
        replaced = session.exec(delete(RecurrenceRule)).rowcount

    for rule in rules:
        db_rule = RecurrenceRule(**rule.model_dump())
        db_rule.frequency = rule.frequency.value
        session.add(db_rule)
    session.commit()

    logger.info("imported %d recurring rule(s), skipped %d", len(rules), len(skipped))
    return {"imported": len(rules), "replaced": replaced, "skipped": skipped}


@router.get("/recurring-rules/{rule_id}/occurrence", response_model=OccurrencePublic)
def rule_occurrence(
    rule_id: int,
    date: Optional[date] = None,
    session: Session = Depends(get_session),
):
    rule = session.get(RecurrenceRule, rule_id)
    if rule is None:
        raise HTTPException(status_code=404, detail="Rule not found")

    target = date or local_today()
    occurrence = resolve_occurrence(rule, target)
    return {
        "rule_id": rule_id,
        "date": target,
        "occurs": occurrence.occurs,
        "visit_ordinal": occurrence.visit_ordinal,
    }


# ---------- Agenda ----------

@router.get("/agenda", response_model=AgendaResponse)
def agenda(
    date: Optional[date] = None,
    session: Session = Depends(get_session),
):
    target = date or local_today()
    return {"date": target, "entries": load_day_schedule(session, target)}


@router.get("/agenda/days", response_model=AgendaDaysResponse)
def agenda_days(
    start: date,
    end: date,
    session: Session = Depends(get_session),
):
    """Days in [start, end] holding at least one appointment or block."""
    if end < start:
        return {"days": []}

    lower, _ = local_day_bounds(start)
    _, upper = local_day_bounds(end)
    days = {to_local(a.starts_at).date() for a in list_appointments(session, lower, upper)}
    return {"days": sorted(days)}
