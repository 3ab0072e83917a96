# petspa/schemas.py

from pydantic import BaseModel, Field
from enum import Enum
from datetime import datetime, date
from typing import Annotated, List, Literal, Optional, Union


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"

class UserRole(str, Enum):
    admin = "admin"
    client = "client"

class UserPublic(BaseModel):
    id: int
    email: str
    role: UserRole

class UserCreate(BaseModel):
    email: str
    password: str = Field(min_length=8, max_length=72)
    role: UserRole = UserRole.client


class Frequency(str, Enum):
    weekly = "weekly"
    bi_weekly = "bi-weekly"
    monthly = "monthly"

class PetSize(str, Enum):
    pequeno = "pequeno"
    medio = "medio"
    grande = "grande"

class VaccinationStatus(str, Enum):
    up_to_date = "Em dia"
    overdue = "Não está em dia"

class Extra(str, Enum):
    nail_trimming = "nail_trimming"
    hydration = "hydration"
    ear_cleaning = "ear_cleaning"


class RecurrenceRuleCreate(BaseModel):
    day_of_week: int = Field(ge=0, le=6)     # 0=Sun, 1=Mon....
    time: str
    pet_name: str = Field(min_length=2)
    label: str = "Clubinho"
    frequency: Frequency
    cycle_start_date: Optional[date] = None
    start_bath_number: int = Field(default=1, ge=1, le=4)

class RecurrenceRulePublic(BaseModel):
    id: int
    day_of_week: int
    time: str
    pet_name: str
    label: str
    frequency: str
    cycle_start_date: Optional[date] = None
    start_bath_number: int

class BulkDeleteRequest(BaseModel):
    ids: List[int] = []     # empty means every rule

class BulkDeleteResponse(BaseModel):
    deleted: int

class ImportResult(BaseModel):
    imported: int
    replaced: int = 0
    skipped: List[str] = []

class OccurrencePublic(BaseModel):
    rule_id: int
    date: date
    occurs: bool
    visit_ordinal: Optional[int] = None


class AppointmentCreate(BaseModel):
    client_name: str = Field(min_length=2)
    pet_name: str = Field(min_length=2)
    pet_breed: str = Field(min_length=2)
    pet_size: PetSize
    contact: str = Field(min_length=10)
    vaccination_status: VaccinationStatus
    is_matted: bool = False
    date: date
    time: str
    service: str
    extras: List[Extra] = []
    observations: Optional[str] = None

class AppointmentPublic(BaseModel):
    id: int
    starts_at: datetime
    ends_at: datetime
    client_name: str
    pet_name: str
    service: str
    total_price: float
    blocked: bool

class BlockCreate(BaseModel):
    date: date
    times: List[str] = Field(min_length=1)


class SlotsResponse(BaseModel):
    date: date
    available: List[str]


class ClientEntry(BaseModel):
    kind: Literal["client"] = "client"
    starts_at: datetime
    appointment_id: Optional[int] = None
    client_name: Optional[str] = None
    pet_name: Optional[str] = None
    service: Optional[str] = None

class RecurringEntry(BaseModel):
    kind: Literal["recurring"] = "recurring"
    starts_at: datetime
    rule_id: Optional[int] = None
    pet_name: str
    label: str
    visit_ordinal: Optional[int] = None

class BlockedEntry(BaseModel):
    kind: Literal["blocked"] = "blocked"
    starts_at: datetime
    appointment_id: Optional[int] = None

ScheduleEntry = Annotated[
    Union[ClientEntry, RecurringEntry, BlockedEntry],
    Field(discriminator="kind"),
]

class AgendaResponse(BaseModel):
    date: date
    entries: List[ScheduleEntry]

class AgendaDaysResponse(BaseModel):
    days: List[date]
