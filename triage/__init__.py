#Marks triage as a package.
#Re-exports the scorer so callers do `from triage import sort_by_triage_score`.
#No business logic.

from .policy import TriagePolicy, default_triage_policy
from .scorer import (
    ScoredRequest,
    TriageCategory,
    calculate_triage_score,
    get_triage_category,
    sort_by_triage_score,
)

__all__ = [
    "TriagePolicy",
    "default_triage_policy",
    "ScoredRequest",
    "TriageCategory",
    "calculate_triage_score",
    "get_triage_category",
    "sort_by_triage_score",
]
