"""
Deterministic Pet Health Score.

Six independently scored components, each normalised to 0-100, combined with
the weights from ScoringConfig:

- Vaccination status      (30%): count of "Valid" vaccine records
- Body-condition tracking (20%): recency of the latest weight log
- Veterinary visit        (15%): recency of the latest check-up
- Medication adherence    (15%): tracked regimen counts as adherence
- Age factor              (10%): constant, reserved for breed/age risk
- Profile completeness    (10%): 20 points per filled identity field

The current time is an explicit input so identical snapshots always produce
identical scores. Nothing in this module raises on malformed records.
"""

import math
from collections.abc import Callable, Sequence
from datetime import UTC, datetime

import structlog

from pethealth.config import ScoringConfig
from pethealth.domain.models import (
    Activity,
    HealthScoreBreakdown,
    Medication,
    Pet,
    VaccineRecord,
    VaccineStatus,
)
from pethealth.domain.parsing import (
    days_since,
    ensure_aware,
    is_blank,
    mentions_visit,
    mentions_weight,
)

# Configure structured logging (production-ready observability)
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer(),
    ],
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger(__name__)

DEFAULT_SCORING = ScoringConfig()

MAX_SCORE = 100
MIN_SCORE = 0

VITALS_TYPE = "vitals"
CHECKUP_TYPE = "checkup"

# (max age in days, score) pairs, checked in order.
BODY_CONDITION_TIERS: tuple[tuple[int, int], ...] = ((30, 100), (90, 70), (180, 40))
BODY_CONDITION_STALE = 0
BODY_CONDITION_PROFILE_ONLY = 50

VETERINARY_VISIT_TIERS: tuple[tuple[int, int], ...] = ((182, 100), (365, 80))
VETERINARY_VISIT_STALE = 40

PROFILE_FIELD_POINTS = 20


def _tiered(age_days: int | None, tiers: Sequence[tuple[int, int]], stale: int) -> int:
    """Score an entry's age against recency tiers; unknown age scores 0."""
    if age_days is None:
        return 0
    for max_age, score in tiers:
        if age_days <= max_age:
            return score
    return stale


def _newest_age_days(entries: Sequence[Activity], now: datetime) -> int | None:
    """Age in days of the most recent entry with a readable date."""
    ages = [age for entry in entries if (age := days_since(entry.date, now)) is not None]
    return min(ages) if ages else None


def _has_type(activity: Activity, tag: str) -> bool:
    return (activity.type or "").strip().lower() == tag


def is_weight_log(activity: Activity) -> bool:
    """A vitals entry whose description mentions weight."""
    return _has_type(activity, VITALS_TYPE) and mentions_weight(activity.description)


def is_veterinary_visit(activity: Activity) -> bool:
    """A check-up entry, or any entry titled as a visit."""
    return _has_type(activity, CHECKUP_TYPE) or mentions_visit(activity.title)


def count_valid_vaccines(vaccines: Sequence[VaccineRecord]) -> int:
    return sum(1 for v in vaccines if (v.status or "").strip() == VaccineStatus.VALID.value)


def count_active_medications(medications: Sequence[Medication]) -> int:
    return sum(1 for m in medications if m.active)


def score_vaccination(vaccines: Sequence[VaccineRecord]) -> int:
    """Two or more valid vaccines -> 100, one -> 50, none -> 0."""
    valid = count_valid_vaccines(vaccines)
    if valid >= 2:
        return 100
    if valid == 1:
        return 50
    return 0


def score_body_condition(pet: Pet, activities: Sequence[Activity], now: datetime) -> int:
    """
    Recency of the latest weight log.

    Falls back to 50 when nothing was logged but the profile carries a weight.
    Weight logs whose dates cannot be read count as no signal and score 0.
    """
    weight_logs = [a for a in activities if is_weight_log(a)]
    if not weight_logs:
        return BODY_CONDITION_PROFILE_ONLY if not is_blank(pet.weight) else 0
    return _tiered(_newest_age_days(weight_logs, now), BODY_CONDITION_TIERS, BODY_CONDITION_STALE)


def score_veterinary_visit(activities: Sequence[Activity], now: datetime) -> int:
    """
    Recency of the latest check-up.

    No check-up at all, or none with a readable date, scores 0. Readable
    visits older than a year still score 40.
    """
    visits = [a for a in activities if is_veterinary_visit(a)]
    if not visits:
        return 0
    return _tiered(_newest_age_days(visits, now), VETERINARY_VISIT_TIERS, VETERINARY_VISIT_STALE)


def score_medication_adherence(medications: Sequence[Medication]) -> int:
    """
    Adherence to active medication regimens.

    The records carry no non-adherence signal, so a tracked regimen counts as
    adherence and the component is 100 with or without active medications.
    """
    return 100


def score_age_factor(pet: Pet) -> int:
    # Placeholder for breed/age risk modelling.
    return 100


def score_profile_completeness(pet: Pet) -> int:
    fields = (pet.name, pet.breed, pet.weight, pet.age, pet.microchip_id)
    return PROFILE_FIELD_POINTS * sum(1 for value in fields if not is_blank(value))


def _guarded(component: str, fallback: int, scorer: Callable[[], int]) -> int:
    """Run a component scorer, degrading to its zero-signal value on failure."""
    try:
        return scorer()
    except Exception as e:
        logger.exception("health_score_component_failed", component=component, error=str(e))
        return fallback


def clamp_score(value: float) -> int:
    """Round half up and clamp into [0, 100]."""
    if math.isnan(value):
        return MIN_SCORE
    return max(MIN_SCORE, min(MAX_SCORE, math.floor(value + 0.5)))


def compute_score_breakdown(
    pet: Pet,
    vaccines: Sequence[VaccineRecord],
    medications: Sequence[Medication],
    activities: Sequence[Activity],
    now: datetime | None = None,
    config: ScoringConfig | None = None,
) -> HealthScoreBreakdown:
    """
    Score every component and combine them.

    Args:
        pet: Profile of the pet being scored
        vaccines: All vaccine records for the pet (may be empty)
        medications: All medication records for the pet (may be empty)
        activities: All activity/log entries for the pet (may be empty)
        now: Evaluation time; defaults to the current UTC time
        config: Weights and thresholds; defaults to the built-in ScoringConfig

    Returns:
        HealthScoreBreakdown with per-component scores and the final score.
    """
    now = ensure_aware(now) if now is not None else datetime.now(UTC)
    config = config or DEFAULT_SCORING
    vaccines, medications, activities = list(vaccines), list(medications), list(activities)

    components = {
        "vaccination": _guarded("vaccination", 0, lambda: score_vaccination(vaccines)),
        "body_condition": _guarded(
            "body_condition", 0, lambda: score_body_condition(pet, activities, now)
        ),
        "veterinary_visit": _guarded(
            "veterinary_visit", 0, lambda: score_veterinary_visit(activities, now)
        ),
        "medication_adherence": _guarded(
            "medication_adherence", 100, lambda: score_medication_adherence(medications)
        ),
        "age_factor": _guarded("age_factor", 100, lambda: score_age_factor(pet)),
        "profile_completeness": _guarded(
            "profile_completeness", 0, lambda: score_profile_completeness(pet)
        ),
    }

    weights = config.weights()
    weighted_total = sum(score * weights[name] for name, score in components.items())
    score = clamp_score(weighted_total)

    breakdown = HealthScoreBreakdown(
        **components,
        weighted_total=weighted_total,
        score=score,
        valid_vaccines=count_valid_vaccines(vaccines),
        active_medications=count_active_medications(medications),
        evaluated_at=now,
    )

    logger.debug("health_score_computed", pet_id=pet.id, score=score, **components)
    return breakdown


def compute_health_score(
    pet: Pet,
    vaccines: Sequence[VaccineRecord],
    medications: Sequence[Medication],
    activities: Sequence[Activity],
    now: datetime | None = None,
    config: ScoringConfig | None = None,
) -> int:
    """Pet Health Score in [0, 100]. See compute_score_breakdown for the components."""
    return compute_score_breakdown(pet, vaccines, medications, activities, now, config).score
