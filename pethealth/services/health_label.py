"""Map a health score to its display label."""

import math

from pethealth.domain.models import HealthLabel, HealthTier

# (lower bound inclusive, label), highest first.
_TIERS: tuple[tuple[int, HealthLabel], ...] = (
    (
        90,
        HealthLabel(
            tier=HealthTier.EXCELLENT,
            label="Excellent",
            style_hint="green",
            badge="Elite Caregiver",
        ),
    ),
    (75, HealthLabel(tier=HealthTier.GOOD, label="Good", style_hint="blue")),
    (60, HealthLabel(tier=HealthTier.FAIR, label="Fair", style_hint="yellow")),
)

_NEEDS_ATTENTION = HealthLabel(
    tier=HealthTier.NEEDS_ATTENTION,
    label="Needs Attention",
    style_hint="red",
    warning="Records Outdated or Missing",
)


def resolve_health_label(score: float) -> HealthLabel:
    """
    Resolve the qualitative bucket for a score.

    >=90 Excellent, 75-89 Good, 60-74 Fair, below 60 Needs Attention.
    Scores outside 0-100 are clamped first; NaN counts as 0.
    """
    bounded = 0.0 if math.isnan(score) else max(0.0, min(100.0, score))
    for lower_bound, label in _TIERS:
        if bounded >= lower_bound:
            return label
    return _NEEDS_ATTENTION
