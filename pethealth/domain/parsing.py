"""
Lenient parsing helpers for free-text record fields.

Records arrive from forms and AI-assisted extraction, so dates, weights and ages
are untrusted text. Every helper here returns None (or False) on input it cannot
make sense of and never raises.
"""

import math
import re
from datetime import UTC, date, datetime

from pethealth.domain.models import DateValue, MagnitudeUnit

_MAGNITUDE_PATTERN = re.compile(r"(?P<value>[-+]?\d+(?:[.,]\d+)?)\s*(?P<unit>[^\W\d_]+)?")

# Tried in order after ISO 8601.
_FALLBACK_DATE_FORMATS = (
    "%m/%d/%Y",
    "%d.%m.%Y",
    "%b %d, %Y",
    "%B %d, %Y",
    "%d %b %Y",
    "%d %B %Y",
)

_SECONDS_PER_DAY = 86_400


def is_blank(value: str | None) -> bool:
    """True for None, empty or whitespace-only text."""
    return value is None or not str(value).strip()


def parse_magnitude_unit(text: str | None) -> MagnitudeUnit | None:
    """
    Extract the first number and its trailing unit from free text.

    Examples:
        "12.5 kg" -> MagnitudeUnit(value=12.5, unit="kg")
        "3 yrs"   -> MagnitudeUnit(value=3.0, unit="yrs")
        "8mos"    -> MagnitudeUnit(value=8.0, unit="mos")
        "4,2 kg"  -> MagnitudeUnit(value=4.2, unit="kg")
        "unknown" -> None
    """
    if is_blank(text):
        return None

    match = _MAGNITUDE_PATTERN.search(str(text))
    if match is None:
        return None

    value = float(match.group("value").replace(",", "."))
    if not math.isfinite(value):
        return None

    unit = match.group("unit")
    return MagnitudeUnit(value=value, unit=unit.lower() if unit else None)


def parse_age(text: str | None) -> float | None:
    """Numeric part of a free-text age ('3 yrs' -> 3.0), unit ignored."""
    parsed = parse_magnitude_unit(text)
    return parsed.value if parsed is not None else None


def parse_timestamp(value: DateValue) -> datetime | None:
    """
    Interpret a raw record date as an aware UTC datetime.

    Naive values are assumed to be UTC; plain dates map to midnight UTC.
    Returns None for missing or unparseable values.
    """
    if value is None:
        return None

    if isinstance(value, datetime):
        return value if value.tzinfo is not None else value.replace(tzinfo=UTC)

    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=UTC)

    text = str(value).strip()
    if not text:
        return None

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        parsed = None

    if parsed is None:
        for fmt in _FALLBACK_DATE_FORMATS:
            try:
                parsed = datetime.strptime(text, fmt)
                break
            except ValueError:
                continue
        else:
            return None

    return parsed if parsed.tzinfo is not None else parsed.replace(tzinfo=UTC)


def days_since(value: DateValue, now: datetime) -> int | None:
    """Whole days elapsed from `value` to `now` (floored); None if unparseable."""
    moment = parse_timestamp(value)
    if moment is None:
        return None
    return (ensure_aware(now) - moment).days


def days_until(value: DateValue, now: datetime) -> int | None:
    """Days from `now` until `value`, rounded up; None if unparseable."""
    moment = parse_timestamp(value)
    if moment is None:
        return None
    seconds = (moment - ensure_aware(now)).total_seconds()
    return math.ceil(seconds / _SECONDS_PER_DAY)


def ensure_aware(moment: datetime) -> datetime:
    return moment if moment.tzinfo is not None else moment.replace(tzinfo=UTC)


def _mentions(text: str | None, needle: str) -> bool:
    return not is_blank(text) and needle in str(text).casefold()


# Free-text heuristics used for classifying activities and vaccines.


def mentions_weight(text: str | None) -> bool:
    return _mentions(text, "weight")


def mentions_visit(text: str | None) -> bool:
    return _mentions(text, "visit")


def mentions_rabies(text: str | None) -> bool:
    return _mentions(text, "rabies")
