"""
Scoring services.

This package contains the health score calculator and its consumers:
label resolution, status suggestion, notification rules and batch assessment.
"""

from .assessment import HealthAssessment, HealthAssessmentService, PetSnapshot, assess_pet
from .health_label import resolve_health_label
from .health_score import compute_health_score, compute_score_breakdown
from .notifications import compute_health_gaps, generate_all_notifications
from .status import detect_status_mismatch, suggest_status

__all__ = [
    "HealthAssessment",
    "HealthAssessmentService",
    "PetSnapshot",
    "assess_pet",
    "compute_health_gaps",
    "compute_health_score",
    "compute_score_breakdown",
    "detect_status_mismatch",
    "generate_all_notifications",
    "resolve_health_label",
    "suggest_status",
]
