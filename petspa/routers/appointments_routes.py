# petspa/routers/appointments_routes.py

import logging
from datetime import datetime, timedelta, date
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from petspa import config
from petspa.db import get_session, load_day_schedule
from petspa.models import Appointment
from petspa.schemas import (
    AppointmentCreate,
    AppointmentPublic,
    SlotsResponse,
    VaccinationStatus,
)
from petspa.auth import get_current_user
from petspa.deps import is_admin, require_role
from petspa.core import SHOP_TZ, local_datetime, local_today, overlaps, parse_hhmm, slots_for_date, to_utc
from petspa.pricing import PricingError, calculate_price
from petspa.projector import occupied_times

logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["appointments"],
)


@router.get("/slots", response_model=SlotsResponse)
def available_slots(
    date: date,
    session: Session = Depends(get_session),
):
    # 1) Slots the shop offers that day
    slots = slots_for_date(date)
    if not slots:
        return {"date": date, "available": []}

    # 2) Remove anything already on the agenda (bookings, club visits, blocks)
    taken = set(occupied_times(load_day_schedule(session, date, legacy_blocked_appointments=True)))
    return {"date": date, "available": [s for s in slots if s not in taken]}


@router.post("/appointments", response_model=AppointmentPublic, status_code=201)
def create_appointment(
    appt: AppointmentCreate,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    # 1) Vaccination must be up to date
    if appt.vaccination_status != VaccinationStatus.up_to_date:
        raise HTTPException(status_code=422, detail="Pet vaccination must be up to date to book")

    # 2) Validate slot against the day's grid
    if appt.time not in slots_for_date(appt.date):
        raise HTTPException(status_code=422, detail="Time is not an available slot for that day")

    # 3) Build appointment interval (shop local time)
    appt_start = local_datetime(appt.date, parse_hhmm(appt.time))
    appt_end = appt_start + timedelta(minutes=config.SLOT_MINUTES)

    # 4) Prevent booking in the past
    if appt.date < local_today() or appt_start < datetime.now(SHOP_TZ):
        raise HTTPException(status_code=422, detail="Cannot book an appointment in the past")

    # 5) Price
    try:
        total_price = calculate_price(appt.service, appt.pet_size.value, [e.value for e in appt.extras])
    except PricingError as e:
        raise HTTPException(status_code=422, detail=str(e))

    # 6) Reject overlaps with anything already on the agenda
    slot_delta = timedelta(minutes=config.SLOT_MINUTES)
    for entry in load_day_schedule(session, appt.date, legacy_blocked_appointments=True):
        if overlaps(appt_start, appt_end, entry.starts_at, entry.starts_at + slot_delta):
            raise HTTPException(status_code=409, detail="Time slot is no longer available")

    # 7) Create and save appointment
    db_appt = Appointment(
        starts_at=to_utc(appt_start),
        ends_at=to_utc(appt_end),
        client_name=appt.client_name,
        pet_name=appt.pet_name,
        pet_breed=appt.pet_breed,
        pet_size=appt.pet_size.value,
        contact=appt.contact,
        vaccination_status=appt.vaccination_status.value,
        is_matted=appt.is_matted,
        service=appt.service,
        extras=[e.value for e in appt.extras],
        observations=appt.observations,
        total_price=total_price,
        blocked=False,
        user_email=current_user["email"],
    )

    session.add(db_appt)
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        raise HTTPException(status_code=409, detail="Appointment already exists for that start time")

    session.refresh(db_appt)  # fills db_appt.id
    logger.info("appointment %s booked for %s on %s %s", db_appt.id, appt.pet_name, appt.date, appt.time)
    return db_appt


@router.get("/clients/me/appointments", response_model=List[AppointmentPublic])
def list_my_appointments(
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    require_role(current_user, "client")

    stmt = (
        select(Appointment)
        .where(Appointment.user_email == current_user["email"])
        .where(Appointment.blocked == False)  # noqa: E712
        .order_by(Appointment.starts_at)
    )
    return session.exec(stmt).all()


@router.delete("/appointments/{appt_id}", status_code=204)
def cancel_appointment(
    appt_id: int,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    # 1) Find the appointment in DB
    target = session.get(Appointment, appt_id)
    if target is None or target.blocked:
        raise HTTPException(status_code=404, detail="Appointment not found")

    # 2) Authorization: client who booked OR admin
    if current_user["email"] != target.user_email and not is_admin(current_user):
        raise HTTPException(status_code=403, detail="Forbidden")

    # 3) Cancellation removes the booking, freeing the slot
    session.delete(target)
    session.commit()
    logger.info("appointment %s canceled by %s", appt_id, current_user["email"])

    return Response(status_code=204)
