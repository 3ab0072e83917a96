# petspa/models.py

from typing import Optional, List
from datetime import datetime, date as Date

from sqlalchemy import DateTime, UniqueConstraint
from sqlalchemy.types import JSON
from sqlmodel import SQLModel, Field, Column

class Appointment(SQLModel, table=True):
    __table_args__ = (
        UniqueConstraint("starts_at", name="uq_appointment_start"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)

    # timezone-aware UTC; SQLite hands them back naive
    starts_at: datetime = Field(sa_column=Column(DateTime(timezone=True), index=True, nullable=False))
    ends_at: datetime = Field(sa_column=Column(DateTime(timezone=True), nullable=False))

    client_name: str
    pet_name: str
    pet_breed: str = ""
    pet_size: str = ""
    contact: str = ""
    vaccination_status: str = ""
    is_matted: bool = False
    service: str  # bath type, "N/A" for blocks
    extras: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    observations: Optional[str] = None
    total_price: float = 0
    blocked: bool = Field(default=False, index=True)
    user_email: Optional[str] = Field(default=None, index=True)

class User(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(index=True, unique=True)
    password_hash: str
    role: str # admin or client

class RecurrenceRule(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    day_of_week: int = Field(index=True)  # 0 = Sunday
    time: str  # "HH:MM"
    pet_name: str
    label: str = "Clubinho"
    frequency: str  # weekly, bi-weekly or monthly
    cycle_start_date: Optional[Date] = None
    start_bath_number: int = 1
