# petspa/db.py

from datetime import date as Date, datetime
from typing import List, Optional

from sqlmodel import SQLModel, create_engine, Session, select

from petspa import config
from petspa.config import DATABASE_URL
from petspa.core import local_day_bounds
from petspa.models import Appointment, RecurrenceRule
from petspa.projector import project

connect_args = {}
if DATABASE_URL.startswith("sqlite"):
    connect_args["check_same_thread"] = False  # required for SQLite + FastAPI

# Engine = connection to the database
engine = create_engine(
    DATABASE_URL,
    echo=False,          # set to True to see SQL
    connect_args=connect_args,
)

def create_db_and_tables(bind=None):
    SQLModel.metadata.create_all(bind or engine)

# Dependency: one session per request
def get_session():
    with Session(engine) as session:
        yield session


def list_recurrence_rules(session: Session) -> List[RecurrenceRule]:
    return list(session.exec(select(RecurrenceRule).order_by(RecurrenceRule.id)).all())

def list_appointments(
    session: Session,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    blocked: Optional[bool] = None,
) -> List[Appointment]:
    """Appointments with start in [start, end), UTC bounds."""
    stmt = select(Appointment)
    if start is not None:
        stmt = stmt.where(Appointment.starts_at >= start)
    if end is not None:
        stmt = stmt.where(Appointment.starts_at < end)
    if blocked is not None:
        stmt = stmt.where(Appointment.blocked == blocked)
    stmt = stmt.order_by(Appointment.starts_at)
    return list(session.exec(stmt).all())


def load_day_schedule(session: Session, day: Date, legacy_blocked_appointments: Optional[bool] = None) -> list:
    """
    Projection for one shop-local day from the current rules and bookings.

    Blocked rows follow LEGACY_BLOCKED_APPOINTMENTS unless the caller
    overrides it. Availability checks pass True, a blocked row still holds
    its start time in the table whatever the agenda shows.
    """
    if legacy_blocked_appointments is None:
        legacy_blocked_appointments = config.LEGACY_BLOCKED_APPOINTMENTS
    start, end = local_day_bounds(day)
    return project(
        day,
        list_recurrence_rules(session),
        list_appointments(session, start, end),
        legacy_blocked_appointments=legacy_blocked_appointments,
    )
