from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Set

from aid_requests.models import AidRequest, RequestStatus
from routing.models import RouteResult

class RequestStateException(Exception):
    """Raised when an invalid request transition is attempted."""
    pass

_ACTIVE_STATUSES = {RequestStatus.OPEN, RequestStatus.PENDING, RequestStatus.IN_PROGRESS}
_CLOSED_STATUSES = {RequestStatus.FULFILLED, RequestStatus.RESOLVED}

# open|pending -> in-progress -> fulfilled|resolved; an in-progress request can go back to the pool
_ALLOWED_TRANSITIONS: Dict[RequestStatus, Set[RequestStatus]] = {
    RequestStatus.OPEN: {RequestStatus.PENDING, RequestStatus.IN_PROGRESS},
    RequestStatus.PENDING: {RequestStatus.OPEN, RequestStatus.IN_PROGRESS},
    RequestStatus.IN_PROGRESS: {RequestStatus.OPEN, RequestStatus.PENDING, RequestStatus.FULFILLED, RequestStatus.RESOLVED},
    RequestStatus.FULFILLED: set(),
    RequestStatus.RESOLVED: set(),
}

@dataclass(frozen=True)
class AssignmentUpdate:
    """
    One row update produced when a route is assigned to a volunteer.
    route_order is 1-based.
    """
    request_id: Any
    assigned_to: Any
    route_order: int
    updated_at: datetime
    status: str = RequestStatus.IN_PROGRESS.value

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.request_id,
            "assigned_to": self.assigned_to,
            "status": self.status,
            "route_order": self.route_order,
            "updated_at": self.updated_at.isoformat(),
        }

def assign_route_to_volunteer(route: RouteResult, volunteer_id: Any, now: Optional[datetime] = None) -> List[AssignmentUpdate]:
    """
    Called when a volunteer takes an optimized route.
    Every stop becomes in-progress, assigned to the volunteer, numbered in visit order.
    """
    if volunteer_id is None:
        raise RequestStateException("Cannot assign a route without a volunteer")

    now = now or datetime.now(timezone.utc)
    return [
        AssignmentUpdate(
            request_id=stop.id,
            assigned_to=volunteer_id,
            route_order=index + 1,
            updated_at=now,
        )
        for index, stop in enumerate(route.requests)
    ]

def apply_assignment(request: AidRequest, update: AssignmentUpdate) -> AidRequest:
    """
    Applies an AssignmentUpdate to the matching in-memory request.
    """
    if request.id != update.request_id:
        raise RequestStateException(f"Update for {update.request_id} applied to request {request.id}")

    if _status_of(request) not in _ACTIVE_STATUSES:
        raise RequestStateException(f"Request {request.id} is {request.status}, cannot be assigned")

    return replace(
        request,
        assigned_to=update.assigned_to,
        status=update.status,
        route_order=update.route_order,
    )

def transition_request_status(request: AidRequest, new_status, *, allow_reopen: bool = False) -> AidRequest:
    """
    Moves a request along open|pending -> in-progress -> fulfilled|resolved.
    Closed requests (fulfilled / resolved) never change, except that an admin can
    reopen one to an active status with allow_reopen.
    """
    target = RequestStatus(new_status)
    current = _status_of(request)

    if current == target:
        return request

    if current in _CLOSED_STATUSES:
        if allow_reopen and target in _ACTIVE_STATUSES:
            return replace(request, status=target.value)
        raise RequestStateException(f"Request {request.id} is {current.value}; only an allow_reopen back to an active status can change it")

    if target not in _ALLOWED_TRANSITIONS[current]:
        raise RequestStateException(
            f"Cannot transition request {request.id} from {current.value} to {target.value}"
        )

    return replace(request, status=target.value)

def release_request(request: AidRequest) -> AidRequest:
    """
    Emergency Fallback: the route was cancelled, so the request goes back to the pool
    unassigned and open.
    """
    if _status_of(request) in _CLOSED_STATUSES:
        return request
    return replace(request, assigned_to=None, route_order=None, status=RequestStatus.OPEN.value)

def _status_of(request: AidRequest) -> RequestStatus:
    try:
        return RequestStatus((request.status or "").lower())
    except ValueError as exc:
        raise RequestStateException(f"Request {request.id} has unknown status {request.status!r}") from exc
