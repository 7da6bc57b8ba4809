"""
Purpose: Orchestrator / decision pipeline (the "glue").
What it does:
Takes the request rows a volunteer can see, ranks them by triage score, optimizes a route
over the selected ones and turns the result into a RoutePlan plus per-request assignment updates.
Nothing is persisted; the caller writes the plan and updates to the backend.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Iterable, List, Optional
import logging

from routing.models import RouteResult
from routing.nearest_neighbor import routable_requests
from routing.optimizer import RouteOptimizer
from triage.policy import TriagePolicy
from triage.scorer import ScoredRequest
from .candidate_filter import build_candidate_requests
from .route_plan import RoutePlan, RoutePlanError, create_route_plan
from .state_machines.request_state import AssignmentUpdate, assign_route_to_volunteer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DispatchResult:
    """
    Output of one planning run for a volunteer.
    """
    plan: RoutePlan
    route: RouteResult
    assignments: List[AssignmentUpdate]
    candidates: List[ScoredRequest]


class Dispatcher:
    """
    Coordinates triage -> selection -> route optimization -> assignment for one volunteer.
    """
    def __init__(self, optimizer: Optional[RouteOptimizer] = None, triage_policy: Optional[TriagePolicy] = None):
        self.optimizer = optimizer or RouteOptimizer()
        self.triage_policy = triage_policy

    def plan_route(
        self,
        requests: Iterable[Any],
        volunteer_id: Any,
        start_location: Any,
        method: str = "nearest",
        *,
        is_admin: bool = False,
        request_ids: Optional[Iterable[Any]] = None,
        now: Optional[datetime] = None,
    ) -> DispatchResult:
        """
        Plan a route over the volunteer's candidate requests (or the chosen `request_ids` among them).

        Raises RoutePlanError when no selected request has usable coordinates.
        """
        now = now or datetime.now(timezone.utc)

        candidates = build_candidate_requests(
            requests, volunteer_id, is_admin=is_admin, now=now, policy=self.triage_policy
        )

        if request_ids is not None:
            wanted = set(request_ids)
            selected = [candidate.request for candidate in candidates if candidate.id in wanted]
        else:
            selected = [candidate.request for candidate in candidates]

        stops = routable_requests(selected)
        if not stops:
            raise RoutePlanError("No requests with valid coordinates found")

        route = self.optimizer.optimize_route(stops, start_location, method)
        plan = create_route_plan(volunteer_id, route, now=now)
        assignments = assign_route_to_volunteer(route, volunteer_id, now=now)

        logger.info(
            f"Planned route {plan.route_id} for volunteer {volunteer_id}: "
            f"{len(route.requests)} stops, {route.distance:.1f} km via {route.method}"
        )

        return DispatchResult(plan=plan, route=route, assignments=assignments, candidates=candidates)
