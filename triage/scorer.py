"""
Purpose: Ranking model for relief requests (the "who goes first" layer).
What it does:
- calculate_triage_score: one numeric urgency score per request (higher = more urgent)
- sort_by_triage_score: stable descending order, scores attached
- get_triage_category: coarse critical/high/medium/low bucket for display

Scores are derived on every call and never stored.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Iterable, List, Optional

from aid_requests.models import AidRequest
from .policy import TriagePolicy, default_triage_policy


class TriageCategory(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class ScoredRequest:
    """
    An AidRequest with its derived triage score.
    """
    request: AidRequest
    triage_score: float

    @property
    def id(self) -> Any:
        return self.request.id

    @property
    def category(self) -> TriageCategory:
        return get_triage_category(self.triage_score)

    def to_record(self) -> dict:
        record = self.request.to_record()
        record["triageScore"] = self.triage_score
        return record


def calculate_triage_score(
    request: Any,
    now: Optional[datetime] = None,
    policy: Optional[TriagePolicy] = None,
) -> float:
    """
    Score = (priority weight * aid type weight) + age bonus + vulnerability, rounded to 2 places.

    Args:
        request: AidRequest or a raw backend record (mapping)
        now: reference time for the age bonus (defaults to current UTC time)
        policy: weights/thresholds (defaults to default_triage_policy())

    Missing, unparsable or future timestamps give an age bonus of 0. Never raises on bad data.
    """
    policy = policy or default_triage_policy()
    request = AidRequest.coerce(request)

    priority_key = _normalize(request.priority)
    priority_weight = policy.priority_weights.get(
        priority_key, policy.priority_weights[policy.default_priority]
    )

    aid_type_weight = policy.aid_type_weights.get(
        _normalize(request.aid_type), policy.default_aid_type_weight
    )

    age_bonus = min(_age_in_hours(request.created_at, now) * policy.age_bonus_per_hour, policy.max_age_bonus)

    triage_score = (priority_weight * aid_type_weight) + age_bonus + policy.vulnerability_score

    # half-up rounding, round() would do banker's rounding
    return math.floor(triage_score * 100 + 0.5) / 100


def sort_by_triage_score(
    requests: Iterable[Any],
    now: Optional[datetime] = None,
    policy: Optional[TriagePolicy] = None,
) -> List[ScoredRequest]:
    """
    Score every request against one shared `now` and sort highest first.
    Equal scores keep their input order (sorted() is stable).
    """
    policy = policy or default_triage_policy()
    now = now or datetime.now(timezone.utc)

    scored = []
    for record in requests:
        request = AidRequest.coerce(record)
        scored.append(
            ScoredRequest(request=request, triage_score=calculate_triage_score(request, now=now, policy=policy))
        )
    return sorted(scored, key=lambda scored_request: -scored_request.triage_score)


def get_triage_category(score: float, policy: Optional[TriagePolicy] = None) -> TriageCategory:
    policy = policy or default_triage_policy()

    if score >= policy.critical_threshold:
        return TriageCategory.CRITICAL
    if score >= policy.high_threshold:
        return TriageCategory.HIGH
    if score >= policy.medium_threshold:
        return TriageCategory.MEDIUM
    return TriageCategory.LOW


def _normalize(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return value.strip().lower()


def _age_in_hours(created_at: Optional[datetime], now: Optional[datetime]) -> float:
    """
    Non-negative age in hours; 0 when the date is missing or the result is not a number.
    """
    if created_at is None:
        return 0.0

    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)

    age_hours = (now - created_at).total_seconds() / 3600.0
    if math.isnan(age_hours) or age_hours < 0:
        return 0.0
    return age_hours
