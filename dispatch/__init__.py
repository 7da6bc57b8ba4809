#Expose the high-level pipeline pieces:
#Candidate filtering (status / ownership rules + triage ranking)
#Route plans and their state transitions
#Dispatcher orchestrator (the "one call" entry point)

from .candidate_filter import build_candidate_requests
from .route_plan import RoutePlan, RoutePlanError, RouteStatus, create_route_plan
from .dispatcher import Dispatcher, DispatchResult #the main entry point to plan a volunteer's route

__all__ = [
    "build_candidate_requests",
    "RoutePlan",
    "RoutePlanError",
    "RouteStatus",
    "create_route_plan",
    "Dispatcher",
    "DispatchResult",
]
