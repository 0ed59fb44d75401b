"""Tests for free-text parsing helpers."""

from datetime import UTC, date, datetime, timedelta, timezone

import pytest
from conftest import NOW
from hypothesis import given
from hypothesis import strategies as st

from pethealth.domain.models import MagnitudeUnit
from pethealth.domain.parsing import (
    days_since,
    days_until,
    is_blank,
    mentions_rabies,
    mentions_visit,
    mentions_weight,
    parse_age,
    parse_magnitude_unit,
    parse_timestamp,
)


class TestParseMagnitudeUnit:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("12.5 kg", MagnitudeUnit(value=12.5, unit="kg")),
            ("3 yrs", MagnitudeUnit(value=3.0, unit="yrs")),
            ("8mos", MagnitudeUnit(value=8.0, unit="mos")),
            ("4,2 KG", MagnitudeUnit(value=4.2, unit="kg")),
            ("approx. 30 lbs", MagnitudeUnit(value=30.0, unit="lbs")),
            ("7", MagnitudeUnit(value=7.0, unit=None)),
        ],
    )
    def test_extracts_value_and_unit(self, text: str, expected: MagnitudeUnit) -> None:
        assert parse_magnitude_unit(text) == expected

    @pytest.mark.parametrize("text", [None, "", "   ", "unknown", "kg"])
    def test_unparseable_text_is_absent(self, text: str | None) -> None:
        assert parse_magnitude_unit(text) is None

    @given(st.text())
    def test_never_raises(self, text: str) -> None:
        parse_magnitude_unit(text)


class TestParseAge:
    def test_numeric_part_only(self) -> None:
        assert parse_age("3 yrs") == 3.0
        assert parse_age("8 mos") == 8.0
        assert parse_age("0 mos") == 0.0

    def test_missing_age(self) -> None:
        assert parse_age("") is None
        assert parse_age("puppy") is None


class TestParseTimestamp:
    def test_iso_date_is_midnight_utc(self) -> None:
        assert parse_timestamp("2026-03-15") == datetime(2026, 3, 15, tzinfo=UTC)

    def test_iso_datetime_with_zulu_suffix(self) -> None:
        assert parse_timestamp("2026-03-15T10:30:00Z") == datetime(2026, 3, 15, 10, 30, tzinfo=UTC)

    def test_offset_is_preserved(self) -> None:
        parsed = parse_timestamp("2026-03-15T10:30:00+02:00")
        assert parsed == datetime(2026, 3, 15, 8, 30, tzinfo=UTC)
        assert parsed.utcoffset() == timedelta(hours=2)  # type: ignore[union-attr]

    def test_fallback_formats(self) -> None:
        assert parse_timestamp("03/15/2026") == datetime(2026, 3, 15, tzinfo=UTC)
        assert parse_timestamp("Mar 15, 2026") == datetime(2026, 3, 15, tzinfo=UTC)
        assert parse_timestamp("15.03.2026") == datetime(2026, 3, 15, tzinfo=UTC)

    def test_date_and_datetime_objects(self) -> None:
        assert parse_timestamp(date(2026, 3, 15)) == datetime(2026, 3, 15, tzinfo=UTC)
        assert parse_timestamp(datetime(2026, 3, 15, 9)) == datetime(2026, 3, 15, 9, tzinfo=UTC)
        eastern = timezone(timedelta(hours=-5))
        aware = datetime(2026, 3, 15, 9, tzinfo=eastern)
        assert parse_timestamp(aware) is aware

    @pytest.mark.parametrize("value", [None, "", "  ", "yesterday", "2026-02-30", "15/15/2026"])
    def test_unparseable_values_are_absent(self, value: str | None) -> None:
        assert parse_timestamp(value) is None

    @given(st.text())
    def test_never_raises(self, text: str) -> None:
        parse_timestamp(text)


class TestDayArithmetic:
    def test_days_since_floors_partial_days(self) -> None:
        assert days_since((NOW - timedelta(days=2, hours=23)).isoformat(), NOW) == 2
        assert days_since(NOW.isoformat(), NOW) == 0

    def test_days_until_rounds_up(self) -> None:
        assert days_until((NOW + timedelta(days=6, hours=1)).isoformat(), NOW) == 7
        assert days_until((NOW + timedelta(days=7)).isoformat(), NOW) == 7
        assert days_until((NOW - timedelta(hours=6)).isoformat(), NOW) == 0

    def test_unparseable_dates_yield_none(self) -> None:
        assert days_since("n/a", NOW) is None
        assert days_until(None, NOW) is None


class TestTextPredicates:
    def test_mentions_weight(self) -> None:
        assert mentions_weight("Weight: 12 kg")
        assert mentions_weight("gained WEIGHT")
        assert not mentions_weight("temperature normal")
        assert not mentions_weight(None)

    def test_mentions_visit(self) -> None:
        assert mentions_visit("Vet Visit")
        assert mentions_visit("follow-up visit")
        assert not mentions_visit("Grooming")

    def test_mentions_rabies(self) -> None:
        assert mentions_rabies("Rabies Vaccine")
        assert mentions_rabies("anti-RABIES booster")
        assert not mentions_rabies("DHPP")

    def test_is_blank(self) -> None:
        assert is_blank(None)
        assert is_blank("")
        assert is_blank(" \t")
        assert not is_blank("x")
