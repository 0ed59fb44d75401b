"""
Domain models for pet health scoring.

These models represent the records handed to us by the data layer and the
values we hand back. They use Pydantic for validation, but are deliberately
permissive: a sparse or half-filled record must still validate so that the
scorer can treat missing data as "no signal" instead of failing.
"""

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Raw date values as supplied by the data layer. Interpreted lazily by
# pethealth.domain.parsing.parse_timestamp.
DateValue = str | datetime | date | None


class PetStatus(str, Enum):
    """Stored health status of a pet."""

    HEALTHY = "Healthy"
    CHECK_UP = "Check-up"
    SICK = "Sick"


class VaccineStatus(str, Enum):
    """Vaccination status as maintained by the data layer."""

    VALID = "Valid"
    EXPIRING_SOON = "Expiring Soon"
    OVERDUE = "Overdue"


class AppointmentStatus(str, Enum):
    SCHEDULED = "Scheduled"
    CONFIRMED = "Confirmed"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class HealthTier(str, Enum):
    """Ordered qualitative buckets for a health score."""

    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    NEEDS_ATTENTION = "needs_attention"


class NotificationType(str, Enum):
    GAP = "gap"
    REMINDER = "reminder"
    ALERT = "alert"
    INFO = "info"


class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Record(BaseModel):
    """Base for data-layer records: immutable, camelCase-tolerant, extra keys ignored."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class Pet(Record):
    """Identity and physical attributes of one animal."""

    id: str
    owner_id: str | None = None
    name: str | None = None
    species: str | None = Field(default=None, alias="type")
    breed: str | None = None
    weight: str | None = Field(default=None, description="Free text with unit, e.g. '12.5 kg'")
    age: str | None = Field(default=None, description="Free text with unit, e.g. '3 yrs'")
    microchip_id: str | None = None
    status: str | None = PetStatus.HEALTHY.value
    birthday: DateValue = None
    image: str | None = None


class VaccineRecord(Record):
    id: str
    pet_id: str | None = None
    name: str | None = None
    type: str | None = None
    date: DateValue = None
    next_due_date: DateValue = None
    status: str | None = None


class Medication(Record):
    id: str
    pet_id: str | None = None
    name: str | None = None
    category: str | None = None
    start_date: DateValue = None
    end_date: DateValue = None
    refill_date: DateValue = None
    frequency: str | None = None
    active: bool = False


class Activity(Record):
    """Free-form timestamped event (weight log, vet visit, note, ...)."""

    id: str
    pet_id: str | None = None
    type: str | None = None
    title: str | None = None
    description: str | None = None
    date: DateValue = None


class Appointment(Record):
    id: str
    pet_id: str | None = None
    title: str | None = None
    date: DateValue = None
    time: str | None = None
    location: str | None = None
    status: str | None = None


class MagnitudeUnit(BaseModel):
    """Number extracted from a free-text measurement such as '12.5 kg'."""

    model_config = ConfigDict(frozen=True)

    value: float
    unit: str | None = None


class HealthLabel(BaseModel):
    """Display label for a health score."""

    model_config = ConfigDict(frozen=True)

    tier: HealthTier
    label: str
    style_hint: str = Field(description="Colour family for the UI layer")
    badge: str | None = None
    warning: str | None = None


class HealthScoreBreakdown(BaseModel):
    """Per-component scores (0-100 each) behind a health score."""

    model_config = ConfigDict(frozen=True)

    vaccination: int = Field(ge=0, le=100)
    body_condition: int = Field(ge=0, le=100)
    veterinary_visit: int = Field(ge=0, le=100)
    medication_adherence: int = Field(ge=0, le=100)
    age_factor: int = Field(ge=0, le=100)
    profile_completeness: int = Field(ge=0, le=100)

    weighted_total: float = Field(description="Unrounded weighted sum")
    score: int = Field(ge=0, le=100)

    valid_vaccines: int = Field(ge=0)
    active_medications: int = Field(ge=0)
    evaluated_at: datetime


class NotificationIntent(BaseModel):
    """A notification to be persisted/delivered by the notification layer."""

    model_config = ConfigDict(frozen=True)

    rule: str = Field(description="Machine-checkable rule identifier, e.g. 'missing_weight'")
    title: str
    message: str
    type: NotificationType
    priority: Priority
    pet_id: str | None = None
    action_path: str | None = None
    action_label: str | None = None
