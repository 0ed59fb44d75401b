"""Shared fixtures: a fixed clock and small record builders."""

from collections.abc import Callable
from datetime import UTC, datetime, timedelta

import pytest

from pethealth.domain.models import Activity, Pet, VaccineRecord

NOW = datetime(2026, 10, 17, 12, 0, tzinfo=UTC)


def days_ago(days: float) -> str:
    """ISO timestamp `days` before the fixed clock (negative for the future)."""
    return (NOW - timedelta(days=days)).isoformat()


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def complete_pet() -> Pet:
    return Pet(
        id="pet-1",
        name="Rex",
        breed="Labrador",
        weight="31 kg",
        age="4 yrs",
        microchip_id="985112003456789",
        status="Healthy",
    )


@pytest.fixture
def make_activity() -> Callable[..., Activity]:
    counter = iter(range(1, 10_000))

    def _make(
        type: str, title: str = "", description: str = "", date: str | None = None
    ) -> Activity:
        return Activity(
            id=f"act-{next(counter)}",
            type=type,
            title=title,
            description=description,
            date=date,
        )

    return _make


@pytest.fixture
def valid_vaccines() -> list[VaccineRecord]:
    return [
        VaccineRecord(id="vac-1", type="Rabies", status="Valid"),
        VaccineRecord(id="vac-2", type="DHPP", status="Valid"),
    ]
