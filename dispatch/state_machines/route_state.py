from dataclasses import replace
from datetime import datetime, timezone
from typing import Dict, Optional, Set

from dispatch.route_plan import RoutePlan, RouteStatus

class RouteStateException(Exception):
    """Raised when an invalid route transition is attempted."""
    pass

# pending -> active -> completed, and pending/active -> cancelled
_ALLOWED_TRANSITIONS: Dict[RouteStatus, Set[RouteStatus]] = {
    RouteStatus.PENDING: {RouteStatus.ACTIVE, RouteStatus.CANCELLED},
    RouteStatus.ACTIVE: {RouteStatus.COMPLETED, RouteStatus.CANCELLED},
    RouteStatus.COMPLETED: set(),
    RouteStatus.CANCELLED: set(),
}

def transition_route_status(plan: RoutePlan, new_status, now: Optional[datetime] = None) -> RoutePlan:
    """
    Moves a RoutePlan to `new_status` and stamps started_at / completed_at.
    RoutePlan is frozen, so a new instance is returned.
    """
    new_status = RouteStatus(new_status)
    if new_status not in _ALLOWED_TRANSITIONS[plan.status]:
        raise RouteStateException(
            f"Cannot transition route {plan.route_id} from {plan.status.value} to {new_status.value}"
        )

    now = now or datetime.now(timezone.utc)
    if new_status == RouteStatus.ACTIVE:
        return replace(plan, status=new_status, started_at=now)
    if new_status == RouteStatus.COMPLETED:
        return replace(plan, status=new_status, completed_at=now)
    return replace(plan, status=new_status)

def start_route(plan: RoutePlan, now: Optional[datetime] = None) -> RoutePlan:
    """
    Called when the volunteer sets off on the route.
    """
    return transition_route_status(plan, RouteStatus.ACTIVE, now)

def complete_route(plan: RoutePlan, now: Optional[datetime] = None) -> RoutePlan:
    return transition_route_status(plan, RouteStatus.COMPLETED, now)

def cancel_route(plan: RoutePlan, now: Optional[datetime] = None) -> RoutePlan:
    """
    Emergency Fallback: the volunteer cannot do the run. The stops go back to the pool
    (see request_state.release_request).
    """
    return transition_route_status(plan, RouteStatus.CANCELLED, now)
