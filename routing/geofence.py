#Purpose: Distance geofencing for relief requests.
#Builds the "eligible by proximity" set for a volunteer before triage/routing.
#Typical responsibilities:
#Given a volunteer location + request records -> compute haversine distances
#Apply thresholds like:
#distance <= max_distance_km (50 km default)
#status in the allowed set (pending by default)
#Sorting candidates by closest first
#Output: a list of "geo-qualified requests" with their distance.

from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Sequence
import math

from aid_requests.models import AidRequest, GeoPoint
from .geo import calculate_distance


@dataclass(frozen=True) #immutable data structure for geofence candidates
class NearbyRequest:
    """
    A request that passed the geofence, with its distance from the center.
    This is what triage / route selection will consume as input.
    """

    request: AidRequest
    distance_km: float

    @property
    def id(self) -> Any:
        return self.request.id


def geofence_requests(
        center: Any,
        requests: Optional[Iterable[Any]],
        *,
        max_distance_km: float = 50.0,
        statuses: Optional[Sequence[str]] = ("pending",), #None disables the status check
) -> List[NearbyRequest]:
    """
    Client-side "nearby requests" lookup.

    Args:
        center: volunteer location (GeoPoint, {"lat", "lng"} or (lat, lng))
        requests: AidRequest objects or raw backend records
        max_distance_km: radius threshold in kilometers
        statuses: request statuses to keep; None keeps every status

    Returns:
        List[NearbyRequest], sorted by distance ascending (ties keep input order).
        Requests without coordinates never qualify.
    """
    #empty request list edge case
    if not requests:
        return []

    origin = GeoPoint.coerce(center)
    allowed = {status.lower() for status in statuses} if statuses is not None else None

    candidates: List[NearbyRequest] = []
    for record in requests:
        request = AidRequest.coerce(record)

        if allowed is not None and (request.status or "").lower() not in allowed:
            continue

        #fail closed : no coordinates means we cannot place it
        if not request.has_coordinates:
            continue

        distance = calculate_distance(origin.lat, origin.lng, request.latitude, request.longitude)
        if math.isnan(distance) or distance > max_distance_km:
            continue

        candidates.append(NearbyRequest(request=request, distance_km=distance))

    # closest first
    candidates.sort(key=lambda candidate: candidate.distance_km)
    return candidates
