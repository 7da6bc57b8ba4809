#Purpose: Non-routing eligibility filtering (rule gates) for a volunteer's request list.
#Builds the candidate set before route selection.
#Typical responsibilities:
#status is still actionable (open / pending / in-progress)
#ownership: non-admins only see unassigned requests or their own
#Output: triage-ranked candidates (highest score first).

from datetime import datetime
from typing import Any, Iterable, List, Optional

from aid_requests.models import AidRequest, RequestStatus
from triage.policy import TriagePolicy
from triage.scorer import ScoredRequest, sort_by_triage_score

DISPATCHABLE_STATUSES = (
    RequestStatus.PENDING.value,
    RequestStatus.OPEN.value,
    RequestStatus.IN_PROGRESS.value,
)


def is_visible_to(request: AidRequest, volunteer_id: Any, is_admin: bool = False) -> bool:
    """
    Admins see everything; volunteers see unassigned requests and their own.
    """
    if is_admin:
        return True
    return not request.assigned_to or request.assigned_to == volunteer_id


def build_candidate_requests(
    requests: Iterable[Any],
    volunteer_id: Any,
    *,
    is_admin: bool = False,
    now: Optional[datetime] = None,
    policy: Optional[TriagePolicy] = None,
) -> List[ScoredRequest]:
    candidates = []
    for record in requests or []:
        request = AidRequest.coerce(record)

        if (request.status or "").lower() not in DISPATCHABLE_STATUSES:
            continue

        if not is_visible_to(request, volunteer_id, is_admin):
            continue

        candidates.append(request)

    return sort_by_triage_score(candidates, now=now, policy=policy)
