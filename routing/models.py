"""
Purpose: Output models of route optimization.
What it does:
- SequencedRequest: a request in visit order, with the leg distance that reached it
- RouteResult: the one shape every optimization method returns
  (ordered requests, distance km, duration seconds, optional provider geometry)

Rule: No routing calls here. Models only.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from aid_requests.models import AidRequest


@dataclass(frozen=True)
class SequencedRequest:
    request: AidRequest
    # km from the previous stop (or the start location); None when the provider gives no legs
    distance_from_previous: Optional[float] = None

    @property
    def id(self) -> Any:
        return self.request.id

    def to_record(self) -> Dict[str, Any]:
        record = self.request.to_record()
        if self.distance_from_previous is not None:
            record["distanceFromPrevious"] = self.distance_from_previous
        return record


@dataclass(frozen=True)
class RouteResult:
    """
    Normalized route, whatever computed it.

    distance is in kilometers, duration in seconds.
    method is what actually produced the route ("nearest" after a provider fallback).
    """
    requests: List[SequencedRequest] = field(default_factory=list)
    distance: float = 0.0
    duration: float = 0.0
    geometry: Optional[Any] = None

    method: str = "nearest"
    waypoint_order: Optional[List[int]] = None

    @property
    def request_ids(self) -> List[Any]:
        return [stop.id for stop in self.requests]

    def __len__(self) -> int:
        return len(self.requests)

    def to_dict(self) -> Dict[str, Any]:
        """
        {requests: [record + distanceFromPrevious], distance, duration, geometry?}
        """
        payload: Dict[str, Any] = {
            "requests": [stop.to_record() for stop in self.requests],
            "distance": self.distance,
            "duration": self.duration,
        }
        if self.geometry is not None:
            payload["geometry"] = self.geometry
        if self.waypoint_order is not None:
            payload["waypointOrder"] = list(self.waypoint_order)
        return payload
