"""
Purpose: Central configuration for request triage (single source of truth).
What it does:

Stores all tunable weights/thresholds:

PRIORITY_WEIGHTS = urgent 10, high 7, medium 4, low 1

AID_TYPE_WEIGHTS = medicine 3, shelter 2.5, food 2, transportation 1.5, clothing 1, other 1

AGE_BONUS = 0.5 per hour, capped at 5 (saturates after 10 hours)

CATEGORY THRESHOLDS = critical 20, high 15, medium 10

These are hand-tuned values with no calibration source. They are kept as-is
and are meant to be tuned by whoever owns relief-operations policy.

Rule: No logic here, just parameters so you can tune without rewriting code.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict


@dataclass(frozen=True)
class TriagePolicy:
    """
    Central configuration for triage scoring.

    score = priority_weight * aid_type_weight + age_bonus + vulnerability_score
    """

    # --- Priority weights ---
    priority_weights: Dict[str, float] = field(
        default_factory=lambda: {"urgent": 10, "high": 7, "medium": 4, "low": 1}
    )
    # Unknown or missing priority is scored as this one.
    default_priority: str = "medium"

    # --- Aid type weights (some types are more critical) ---
    aid_type_weights: Dict[str, float] = field(
        default_factory=lambda: {
            "medicine": 3,
            "shelter": 2.5,
            "food": 2,
            "transportation": 1.5,
            "clothing": 1,
            "other": 1,
        }
    )
    default_aid_type_weight: float = 1.0

    # --- Aging (older requests climb the list) ---
    age_bonus_per_hour: float = 0.5
    max_age_bonus: float = 5.0

    # --- Vulnerability ---
    # Placeholder until per-request vulnerability data exists. Same for everyone.
    vulnerability_score: float = 1.0

    # --- Category thresholds (score >= threshold) ---
    critical_threshold: float = 20.0
    high_threshold: float = 15.0
    medium_threshold: float = 10.0

    def validate(self) -> None:
        """
        Basic sanity checks.
        """
        if self.default_priority not in self.priority_weights:
            raise ValueError("default_priority must be one of priority_weights")

        if any(weight < 0 for weight in self.priority_weights.values()):
            raise ValueError("priority weights must be >= 0")

        if any(weight < 0 for weight in self.aid_type_weights.values()):
            raise ValueError("aid type weights must be >= 0")

        if self.default_aid_type_weight < 0:
            raise ValueError("default_aid_type_weight must be >= 0")

        if self.age_bonus_per_hour < 0 or self.max_age_bonus < 0:
            raise ValueError("age bonus settings must be >= 0")

        if self.vulnerability_score < 0:
            raise ValueError("vulnerability_score must be >= 0")

        if not (self.critical_threshold >= self.high_threshold >= self.medium_threshold):
            raise ValueError("category thresholds must be ordered critical >= high >= medium")


def default_triage_policy() -> TriagePolicy:
    """
    Convenience factory for the default policy.
    """
    p = TriagePolicy()
    p.validate()
    return p
