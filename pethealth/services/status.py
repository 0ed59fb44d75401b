"""
Suggested pet status and stored-status mismatch detection.

The stored status on a pet profile is set by the owner (or an earlier batch
run) and can lag behind the records. These helpers derive a coarse status from
the current score and vaccine data and decide when the disagreement is worth
surfacing.
"""

from collections.abc import Sequence
from datetime import UTC, datetime

from pethealth.config import ScoringConfig
from pethealth.domain.models import PetStatus, VaccineRecord, VaccineStatus
from pethealth.domain.parsing import ensure_aware, parse_timestamp

_DEFAULT_SCORING = ScoringConfig()


def has_overdue_vaccine(vaccines: Sequence[VaccineRecord], now: datetime) -> bool:
    """Any vaccine marked Overdue, or whose next-due date has already passed."""
    for vaccine in vaccines:
        if (vaccine.status or "").strip() == VaccineStatus.OVERDUE.value:
            return True
        due = parse_timestamp(vaccine.next_due_date)
        if due is not None and due < now:
            return True
    return False


def suggest_status(
    score: float,
    vaccines: Sequence[VaccineRecord],
    now: datetime | None = None,
    config: ScoringConfig | None = None,
) -> PetStatus:
    """
    Coarse status implied by the records.

    Overdue vaccines or a score below the configured threshold suggest a
    check-up. Sick is never suggested; it is left to the owner.
    """
    now = ensure_aware(now) if now is not None else datetime.now(UTC)
    config = config or _DEFAULT_SCORING

    if has_overdue_vaccine(vaccines, now):
        return PetStatus.CHECK_UP
    if score < config.suggested_status_threshold:
        return PetStatus.CHECK_UP
    return PetStatus.HEALTHY


def _normalise(status: PetStatus | str | None) -> str:
    if isinstance(status, PetStatus):
        return status.value.casefold()
    return (status or "").strip().casefold()


def detect_status_mismatch(
    stored_status: PetStatus | str | None, suggested_status: PetStatus | str | None
) -> bool:
    """
    True when a pet marked Healthy has records suggesting otherwise.

    One-directional on purpose: a pessimistic stored status with a good score
    raises nothing.
    """
    healthy = PetStatus.HEALTHY.value.casefold()
    return _normalise(stored_status) == healthy and _normalise(suggested_status) != healthy
