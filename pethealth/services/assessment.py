"""
End-to-end health assessment of pet snapshots.

Combines the score, label, suggested status, mismatch check and notification
rules for one pet, and fans the work out over many pets for dashboard loads
and scheduled batch jobs.

Key patterns:
- Scoring stays synchronous; concurrency lives here, one task per pet
- Structured concurrency with asyncio.TaskGroup, bounded by a semaphore
- Result values so one malformed snapshot never aborts a batch
"""

import asyncio
import time
from collections.abc import Iterable, Mapping
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from pethealth.config import AppConfig, get_config
from pethealth.domain.models import (
    Activity,
    Appointment,
    HealthLabel,
    HealthScoreBreakdown,
    Medication,
    NotificationIntent,
    Pet,
    PetStatus,
    VaccineRecord,
)
from pethealth.domain.parsing import ensure_aware
from pethealth.domain.result import Result
from pethealth.services.health_label import resolve_health_label
from pethealth.services.health_score import compute_score_breakdown, logger
from pethealth.services.notifications import generate_all_notifications
from pethealth.services.status import detect_status_mismatch, suggest_status


class PetSnapshot(BaseModel):
    """One pet with all of its records at one instant."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    pet: Pet
    vaccines: list[VaccineRecord] = Field(default_factory=list)
    medications: list[Medication] = Field(default_factory=list)
    activities: list[Activity] = Field(default_factory=list)
    appointments: list[Appointment] = Field(default_factory=list)
    previous_score: int | None = Field(
        default=None, alias="previousScore", ge=0, le=100, description="Last delivered score"
    )


class HealthAssessment(BaseModel):
    """Everything the UI and notification layers need for one pet."""

    model_config = ConfigDict(frozen=True)

    pet_id: str
    score: int = Field(ge=0, le=100)
    breakdown: HealthScoreBreakdown
    label: HealthLabel
    stored_status: str | None
    suggested_status: PetStatus
    status_mismatch: bool
    notifications: list[NotificationIntent] = Field(default_factory=list)
    assessed_at: datetime


def assess_pet(
    snapshot: PetSnapshot,
    now: datetime | None = None,
    config: AppConfig | None = None,
) -> HealthAssessment:
    """
    Assess a single pet snapshot.

    Args:
        snapshot: The pet and its records
        now: Evaluation time; defaults to the current UTC time
        config: Application config; defaults to built-in values

    Returns:
        HealthAssessment for the pet.
    """
    now = ensure_aware(now) if now is not None else datetime.now(UTC)
    config = config or AppConfig()
    pet = snapshot.pet

    breakdown = compute_score_breakdown(
        pet,
        snapshot.vaccines,
        snapshot.medications,
        snapshot.activities,
        now=now,
        config=config.scoring,
    )
    suggested = suggest_status(breakdown.score, snapshot.vaccines, now=now, config=config.scoring)
    notifications = generate_all_notifications(
        pet,
        snapshot.vaccines,
        medications=snapshot.medications,
        appointments=snapshot.appointments,
        activities=snapshot.activities,
        current_score=breakdown.score,
        previous_score=snapshot.previous_score,
        now=now,
        config=config.notifications,
    )

    return HealthAssessment(
        pet_id=pet.id,
        score=breakdown.score,
        breakdown=breakdown,
        label=resolve_health_label(breakdown.score),
        stored_status=pet.status,
        suggested_status=suggested,
        status_mismatch=detect_status_mismatch(pet.status, suggested),
        notifications=notifications,
        assessed_at=now,
    )


class HealthAssessmentService:
    """
    Assesses many pets concurrently.

    Design principles:
    - Validation at the boundary (raw mappings become PetSnapshot or an error)
    - Graceful degradation (a bad snapshot is reported, the rest still score)
    - Observable (structured logging per batch)
    """

    def __init__(self, config: AppConfig | None = None) -> None:
        self.config = config or get_config()
        self.logger = logger.bind(component="health_assessment_service")

    def _assess_one(
        self, raw: PetSnapshot | Mapping[str, Any], now: datetime
    ) -> Result[HealthAssessment, Exception]:
        try:
            snapshot = raw if isinstance(raw, PetSnapshot) else PetSnapshot.model_validate(raw)
        except ValidationError as e:
            self.logger.warning(
                "snapshot_validation_failed", error_count=e.error_count(), error=str(e)
            )
            return Result.err(e)

        try:
            return Result.ok(assess_pet(snapshot, now=now, config=self.config))
        except Exception as e:
            self.logger.exception(
                "unexpected_assessment_error", pet_id=snapshot.pet.id, error=str(e)
            )
            return Result.err(e)

    async def assess_many(
        self,
        snapshots: Iterable[PetSnapshot | Mapping[str, Any]],
        now: datetime | None = None,
    ) -> list[Result[HealthAssessment, Exception]]:
        """
        Assess every snapshot, one task per pet.

        All pets are evaluated against the same `now` so a batch is internally
        consistent. Results come back in input order.

        Returns:
            list[Result[HealthAssessment, Exception]]: One result per snapshot.
        """
        now = ensure_aware(now) if now is not None else datetime.now(UTC)
        pending = list(snapshots)
        semaphore = asyncio.Semaphore(self.config.assessment.max_concurrent_assessments)
        start_time = time.perf_counter()

        async def _bounded(
            raw: PetSnapshot | Mapping[str, Any],
        ) -> Result[HealthAssessment, Exception]:
            async with semaphore:
                return await asyncio.to_thread(self._assess_one, raw, now)

        async with asyncio.TaskGroup() as task_group:
            tasks = [task_group.create_task(_bounded(raw)) for raw in pending]

        results = [task.result() for task in tasks]
        succeeded = sum(1 for result in results if result.is_ok())

        self.logger.info(
            "batch_assessment_completed",
            total_pets=len(results),
            successful_assessments=succeeded,
            failed_assessments=len(results) - succeeded,
            duration_seconds=round(time.perf_counter() - start_time, 3),
        )
        return results
