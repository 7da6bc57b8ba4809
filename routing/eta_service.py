#Purpose: Distance totals and duration estimates for locally computed routes.
#Provider routes come with real distance/duration; the nearest-neighbor route does not,
#so its totals are derived here.
#The duration estimate is a crude placeholder (1 km ~ 1 minute), not a traffic model.

from typing import Any, Sequence

from aid_requests.models import GeoPoint
from .geo import calculate_distance
from .models import SequencedRequest

# 1 km ~ 1 minute of travel
SECONDS_PER_KM = 60.0


def route_distance_km(route: Sequence[SequencedRequest], start_location: Any) -> float:
    """
    Sum of haversine legs: start -> first stop, then stop -> stop in visit order.
    """
    if not route:
        return 0.0

    start = GeoPoint.coerce(start_location)
    previous_lat, previous_lng = start.lat, start.lng

    total_distance = 0.0
    for stop in route:
        total_distance += calculate_distance(
            previous_lat, previous_lng, stop.request.latitude, stop.request.longitude
        )
        previous_lat, previous_lng = stop.request.latitude, stop.request.longitude
    return total_distance


def estimate_duration_seconds(distance_km: float) -> float:
    return distance_km * SECONDS_PER_KM
