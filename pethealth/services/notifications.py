"""
Notification rules over a pet's records.

Every rule is a pure function of the snapshot (and the current time) that
returns NotificationIntent objects. Persisting, de-duplicating and delivering
them is the job of the notification layer.

Rules:
- Health gaps: missing weight, microchip or rabies vaccine
- Vaccine due reminders (7, 1 and 0 days before the due date)
- Medication refill reminders (3 days before the refill date)
- Appointment reminders (starting within the next 24 hours)
- Health score drop alerts (10 points or more)
- Weight tracking nudges (no weight log for 30 days)
"""

from collections.abc import Sequence
from datetime import UTC, datetime

from pethealth.config import NotificationConfig
from pethealth.domain.models import (
    Activity,
    Appointment,
    AppointmentStatus,
    DateValue,
    Medication,
    NotificationIntent,
    NotificationType,
    Pet,
    Priority,
    VaccineRecord,
)
from pethealth.domain.parsing import (
    days_since,
    days_until,
    ensure_aware,
    is_blank,
    mentions_rabies,
    parse_age,
    parse_timestamp,
)
from pethealth.services.health_score import is_weight_log, logger

_DEFAULT_NOTIFICATIONS = NotificationConfig()

_CLOSED_APPOINTMENT_STATUSES = {
    AppointmentStatus.CANCELLED.value.casefold(),
    AppointmentStatus.COMPLETED.value.casefold(),
}


def _pet_name(pet: Pet) -> str:
    return (pet.name or "").strip() or "your pet"


def _label(text: str | None, fallback: str) -> str:
    return (text or "").strip() or fallback


def _resolve_now(now: datetime | None) -> datetime:
    return ensure_aware(now) if now is not None else datetime.now(UTC)


# Health gaps


def has_rabies_vaccine(vaccines: Sequence[VaccineRecord]) -> bool:
    """Case-insensitive 'rabies' match on either the type or the name of a record."""
    return any(mentions_rabies(v.type) or mentions_rabies(v.name) for v in vaccines)


def missing_weight_gap(pet: Pet) -> NotificationIntent | None:
    if not is_blank(pet.weight):
        return None
    return NotificationIntent(
        rule="missing_weight",
        title="Missing Growth Data",
        message=f"We don't have a recent weight for {_pet_name(pet)}. Log it to track growth!",
        type=NotificationType.GAP,
        priority=Priority.HIGH,
        pet_id=pet.id,
        action_path=f"/pet/{pet.id}/add-record?type=vitals",
        action_label="Add Weight",
    )


def missing_microchip_gap(pet: Pet) -> NotificationIntent | None:
    if not is_blank(pet.microchip_id):
        return None
    return NotificationIntent(
        rule="missing_microchip",
        title="Microchip Missing",
        message=(
            f"Protect {_pet_name(pet)} by adding a microchip ID. "
            "It's crucial for recovery if lost."
        ),
        type=NotificationType.GAP,
        priority=Priority.MEDIUM,
        pet_id=pet.id,
        action_path=f"/pet/{pet.id}/passport",
        action_label="Update Passport",
    )


def missing_rabies_gap(pet: Pet, vaccines: Sequence[VaccineRecord]) -> NotificationIntent | None:
    """Only raised once the pet has a positive parsed age, to spare newborns."""
    if has_rabies_vaccine(vaccines):
        return None
    age = parse_age(pet.age)
    if age is None or age <= 0:
        return None
    return NotificationIntent(
        rule="missing_rabies_vaccine",
        title="Missing Rabies Vaccine",
        message=(
            "Rabies vaccination is required by law in most regions. "
            "Please log it or schedule a visit."
        ),
        type=NotificationType.GAP,
        priority=Priority.HIGH,
        pet_id=pet.id,
        action_path=f"/pet/{pet.id}/add-record?type=vaccination",
        action_label="Add Vaccine",
    )


def compute_health_gaps(pet: Pet, vaccines: Sequence[VaccineRecord]) -> list[NotificationIntent]:
    """
    Missing mandatory health data for one pet.

    Each rule fires independently, so a sparse profile can yield several gaps.

    Returns:
        list[NotificationIntent]: Gap intents ordered weight, microchip, rabies.
    """
    vaccines = list(vaccines)
    candidates = (
        missing_weight_gap(pet),
        missing_microchip_gap(pet),
        missing_rabies_gap(pet, vaccines),
    )
    gaps = [gap for gap in candidates if gap is not None]

    if gaps:
        logger.debug("health_gaps_detected", pet_id=pet.id, rules=[g.rule for g in gaps])
    return gaps


# Reminders


def vaccine_due_reminders(
    vaccines: Sequence[VaccineRecord],
    now: datetime | None = None,
    config: NotificationConfig | None = None,
) -> list[NotificationIntent]:
    """Remind on the configured days before each vaccine's next-due date."""
    now = _resolve_now(now)
    config = config or _DEFAULT_NOTIFICATIONS
    reminders: list[NotificationIntent] = []

    for vaccine in vaccines:
        due = parse_timestamp(vaccine.next_due_date)
        if due is None:
            continue
        remaining = days_until(due, now)
        if remaining not in config.vaccine_reminder_days:
            continue

        name = _label(vaccine.name, _label(vaccine.type, "Scheduled"))
        if remaining == 0:
            title = f"{name} Vaccine Due Today"
            message = f"Your pet needs the {name} vaccine today. Don't forget to schedule!"
        else:
            plural = "s" if remaining > 1 else ""
            title = f"{name} Vaccine Due in {remaining} Day{plural}"
            message = (
                f"Your pet needs the {name} vaccine on {due:%Y-%m-%d}. "
                "Don't forget to schedule!"
            )

        reminders.append(
            NotificationIntent(
                rule="vaccine_due",
                title=title,
                message=message,
                type=NotificationType.REMINDER,
                priority=Priority.HIGH if remaining == 0 else Priority.MEDIUM,
                pet_id=vaccine.pet_id,
            )
        )
    return reminders


def medication_refill_reminders(
    medications: Sequence[Medication],
    now: datetime | None = None,
    config: NotificationConfig | None = None,
) -> list[NotificationIntent]:
    now = _resolve_now(now)
    config = config or _DEFAULT_NOTIFICATIONS
    reminders: list[NotificationIntent] = []

    for medication in medications:
        refill = parse_timestamp(medication.refill_date)
        if refill is None or days_until(refill, now) != config.medication_refill_days:
            continue
        name = _label(medication.name, "your pet's medication")
        reminders.append(
            NotificationIntent(
                rule="medication_refill",
                title="Medication Refill Reminder",
                message=f"Time to refill {name}. Refill date: {refill:%Y-%m-%d}",
                type=NotificationType.REMINDER,
                priority=Priority.MEDIUM,
                pet_id=medication.pet_id,
            )
        )
    return reminders


def appointment_reminders(
    appointments: Sequence[Appointment],
    now: datetime | None = None,
    config: NotificationConfig | None = None,
) -> list[NotificationIntent]:
    """Remind about open appointments starting in the final hour of the window."""
    now = _resolve_now(now)
    config = config or _DEFAULT_NOTIFICATIONS
    window = config.appointment_window_hours
    reminders: list[NotificationIntent] = []

    for appointment in appointments:
        if (appointment.status or "").strip().casefold() in _CLOSED_APPOINTMENT_STATUSES:
            continue
        starts_at = parse_timestamp(appointment.date)
        if starts_at is None:
            continue

        hours_until = (starts_at - now).total_seconds() / 3600
        if not (window - 1 < hours_until <= window):
            continue

        title = _label(appointment.title, "Vet")
        reminders.append(
            NotificationIntent(
                rule="appointment",
                title="Appointment Tomorrow",
                message=(
                    f"Reminder: {title} appointment at "
                    f"{_label(appointment.time, 'scheduled time')} with "
                    f"{_label(appointment.location, 'your vet')}"
                ),
                type=NotificationType.REMINDER,
                priority=Priority.MEDIUM,
                pet_id=appointment.pet_id,
            )
        )
    return reminders


def health_score_drop_alert(
    current_score: int,
    previous_score: int,
    pet_id: str | None = None,
    config: NotificationConfig | None = None,
) -> NotificationIntent | None:
    config = config or _DEFAULT_NOTIFICATIONS
    drop = previous_score - current_score
    if drop < config.score_drop_threshold:
        return None
    return NotificationIntent(
        rule="health_score_drop",
        title="Health Score Alert",
        message=(
            f"Your pet's health score has dropped by {drop} points. "
            "Review recent activities and schedule a checkup if needed."
        ),
        type=NotificationType.ALERT,
        priority=Priority.HIGH,
        pet_id=pet_id,
    )


def weight_tracking_nudge(
    last_weight_log: DateValue,
    now: datetime | None = None,
    pet_id: str | None = None,
    config: NotificationConfig | None = None,
) -> NotificationIntent | None:
    """Nudge when the last weight log is older than the configured number of days."""
    now = _resolve_now(now)
    config = config or _DEFAULT_NOTIFICATIONS
    elapsed = days_since(last_weight_log, now)
    if elapsed is None or elapsed < config.weight_nudge_days:
        return None
    return NotificationIntent(
        rule="weight_tracking",
        title="Weight Tracking Reminder",
        message=(
            f"It's been {elapsed} days since your last weight log. "
            "Regular weight tracking helps monitor your pet's health!"
        ),
        type=NotificationType.INFO,
        priority=Priority.LOW,
        pet_id=pet_id,
    )


def last_weight_log_date(activities: Sequence[Activity]) -> datetime | None:
    """Timestamp of the most recent readable weight log."""
    stamps = [
        stamp
        for activity in activities
        if is_weight_log(activity) and (stamp := parse_timestamp(activity.date)) is not None
    ]
    return max(stamps) if stamps else None


def generate_all_notifications(
    pet: Pet,
    vaccines: Sequence[VaccineRecord],
    medications: Sequence[Medication] = (),
    appointments: Sequence[Appointment] = (),
    activities: Sequence[Activity] = (),
    current_score: int | None = None,
    previous_score: int | None = None,
    now: datetime | None = None,
    config: NotificationConfig | None = None,
) -> list[NotificationIntent]:
    """
    Run every rule for one pet snapshot.

    Gaps come first, then reminders, then the score alert and weight nudge.
    The score drop alert only runs when both scores are known; the weight
    nudge only when a dated weight log exists.
    """
    now = _resolve_now(now)
    config = config or _DEFAULT_NOTIFICATIONS

    intents = compute_health_gaps(pet, vaccines)
    intents += vaccine_due_reminders(vaccines, now, config)
    intents += medication_refill_reminders(medications, now, config)
    intents += appointment_reminders(appointments, now, config)

    if current_score is not None and previous_score is not None:
        alert = health_score_drop_alert(current_score, previous_score, pet.id, config)
        if alert is not None:
            intents.append(alert)

    last_log = last_weight_log_date(activities)
    if last_log is not None:
        nudge = weight_tracking_nudge(last_log, now, pet.id, config)
        if nudge is not None:
            intents.append(nudge)

    logger.debug("notifications_generated", pet_id=pet.id, count=len(intents))
    return intents
