"""
Console demo of the full assessment pipeline.

Scores a handful of sample pets, including one malformed snapshot, and prints
the scores, labels, status checks and notifications.

Run with: uv run python run_demo.py
"""

import asyncio
from datetime import UTC, datetime, timedelta
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from pethealth.config import get_config
from pethealth.logging import configure_logging
from pethealth.services.assessment import HealthAssessmentService

console = Console()

_LABEL_STYLES = {"green": "green", "blue": "cyan", "yellow": "yellow", "red": "red"}


def sample_snapshots(now: datetime) -> list[dict[str, Any]]:
    """Snapshots shaped like the data layer's JSON (camelCase keys)."""

    def days_ago(days: int) -> str:
        return (now - timedelta(days=days)).isoformat()

    return [
        {
            "pet": {
                "id": "pet-rex",
                "name": "Rex",
                "type": "Dog",
                "breed": "Labrador",
                "weight": "31 kg",
                "age": "4 yrs",
                "microchipId": "985112003456789",
                "status": "Healthy",
            },
            "vaccines": [
                {"id": "v1", "type": "Rabies", "status": "Valid"},
                {"id": "v2", "type": "DHPP", "status": "Valid", "nextDueDate": days_ago(-7)},
            ],
            "activities": [
                {
                    "id": "a1",
                    "type": "vitals",
                    "title": "Weigh-in",
                    "description": "Weight 31 kg",
                    "date": days_ago(10),
                },
                {"id": "a2", "type": "checkup", "title": "Annual exam", "date": days_ago(60)},
            ],
        },
        {
            "pet": {
                "id": "pet-luna",
                "name": "Luna",
                "type": "Cat",
                "breed": "Siamese",
                "weight": "",
                "age": "3 yrs",
                "status": "Healthy",
            },
            "vaccines": [{"id": "v3", "type": "FVRCP", "status": "Overdue"}],
            "medications": [
                {"id": "m1", "name": "Apoquel", "active": True, "refillDate": days_ago(-3)}
            ],
            "previousScore": 55,
        },
        {
            "pet": {"id": "pet-milo", "name": "Milo", "age": "8 mos", "status": "Check-up"},
            "activities": [
                {"id": "a3", "type": "checkup", "title": "Vet visit", "date": "not a date"}
            ],
        },
        {"pet": "not-a-pet"},
    ]


def render_assessments(results: list, snapshots: list[dict[str, Any]]) -> None:
    table = Table(title="Pet Health Scores")
    table.add_column("Pet", style="cyan")
    table.add_column("Score", style="white")
    table.add_column("Label", style="white")
    table.add_column("Stored", style="magenta")
    table.add_column("Suggested", style="magenta")
    table.add_column("Mismatch", style="white")

    for result, snapshot in zip(results, snapshots, strict=True):
        if result.is_err():
            table.add_row(str(snapshot.get("pet")), "-", "[red]invalid snapshot[/red]", "", "", "")
            continue

        assessment = result.unwrap()
        style = _LABEL_STYLES.get(assessment.label.style_hint, "white")
        table.add_row(
            assessment.pet_id,
            str(assessment.score),
            f"[{style}]{assessment.label.label}[/{style}]",
            assessment.stored_status or "-",
            assessment.suggested_status.value,
            "[red]yes[/red]" if assessment.status_mismatch else "no",
        )

    console.print(table)


def render_notifications(results: list) -> None:
    table = Table(title="Notifications")
    table.add_column("Pet", style="cyan")
    table.add_column("Type", style="magenta")
    table.add_column("Priority", style="yellow")
    table.add_column("Title", style="white")
    table.add_column("Action", style="green")

    for result in results:
        if result.is_err():
            continue
        assessment = result.unwrap()
        for intent in assessment.notifications:
            table.add_row(
                assessment.pet_id,
                intent.type.value,
                intent.priority.value,
                intent.title,
                intent.action_label or "",
            )

    console.print(table)


async def run_demo() -> None:
    config = get_config()
    configure_logging(config.logging)

    console.print(Panel("Pet Health Score - Demo", style="bold blue"))

    now = datetime.now(UTC)
    snapshots = sample_snapshots(now)
    service = HealthAssessmentService(config)
    results = await service.assess_many(snapshots, now=now)

    render_assessments(results, snapshots)
    render_notifications(results)

    failed = [r for r in results if r.is_err()]
    if failed:
        console.print(f"{len(failed)} snapshot(s) could not be validated", style="yellow")


if __name__ == "__main__":
    try:
        asyncio.run(run_demo())
    except KeyboardInterrupt:
        console.print("\nDemo stopped by user", style="yellow")
