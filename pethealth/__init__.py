"""Deterministic pet health scoring.

This package contains the scoring rules and the record models they read,
isolated from storage and UI concerns for easy testing and reasoning.
"""

from pethealth.domain.parsing import mentions_visit, mentions_weight, parse_magnitude_unit
from pethealth.services import (
    compute_health_gaps,
    compute_health_score,
    detect_status_mismatch,
    resolve_health_label,
    suggest_status,
)

__all__ = [
    "compute_health_gaps",
    "compute_health_score",
    "detect_status_mismatch",
    "mentions_visit",
    "mentions_weight",
    "parse_magnitude_unit",
    "resolve_health_label",
    "suggest_status",
]
