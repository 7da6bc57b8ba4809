"""
Purpose: Route plans handed to a volunteer.
What it does:
- RoutePlan: an optimized route frozen into what the backend stores
  (volunteer, request order, waypoints, totals, status, timestamps)
- RouteStatus = pending | active | completed | cancelled
- create_route_plan: RouteResult -> RoutePlan

Rule: No optimization here and no persistence. Storing the plan is the caller's job.
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from routing.models import RouteResult


class RoutePlanError(Exception):
    """Raised when a route plan cannot be built (e.g. no routable stops)."""
    pass


class RouteStatus(str, Enum):
    PENDING = "pending"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class Waypoint:
    lat: float
    lng: float
    request_id: Any
    name: str = ""
    location: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "lat": self.lat,
            "lng": self.lng,
            "request_id": self.request_id,
            "name": self.name,
            "location": self.location,
        }


@dataclass(frozen=True)
class RoutePlan:
    """
    An optimized route assigned to one volunteer.
    distance in km, duration in seconds.
    """
    route_id: str
    volunteer_id: Any
    request_order: List[Any]
    waypoints: List[Waypoint]
    total_distance: float
    total_duration: float
    method: str = "nearest"

    status: RouteStatus = RouteStatus.PENDING
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.route_id,
            "volunteer_id": self.volunteer_id,
            "total_distance": self.total_distance,
            "total_duration": self.total_duration,
            "request_order": list(self.request_order),
            "route_waypoints": [waypoint.to_dict() for waypoint in self.waypoints],
            "method": self.method,
            "status": self.status.value,
            "created_at": self.created_at.isoformat(),
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
        }


def create_route_plan(volunteer_id: Any, route: RouteResult, now: Optional[datetime] = None) -> RoutePlan:
    """
    Snapshot a RouteResult as a pending RoutePlan with a fresh uuid.
    """
    if not route.requests:
        raise RoutePlanError("Cannot create a route plan without stops")

    waypoints = [
        Waypoint(
            lat=stop.request.latitude,
            lng=stop.request.longitude,
            request_id=stop.request.id,
            name=stop.request.name,
            location=stop.request.location,
        )
        for stop in route.requests
    ]

    return RoutePlan(
        route_id=str(uuid.uuid4()),
        volunteer_id=volunteer_id,
        request_order=route.request_ids,
        waypoints=waypoints,
        total_distance=route.distance,
        total_duration=route.duration,
        method=route.method,
        created_at=now or datetime.now(timezone.utc),
    )
