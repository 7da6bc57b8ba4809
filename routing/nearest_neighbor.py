"""
Purpose: Local route sequencing (no network).
What it does:
- routable_requests: keep only requests with usable numeric coordinates
- optimize_route_nearest_neighbor: greedy nearest-unvisited-stop tour from a start location

Greedy heuristic, O(n^2). Good enough for a volunteer's handful of stops, not TSP-optimal.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Iterable, List, Optional

from aid_requests.models import AidRequest, GeoPoint
from .geo import calculate_distance
from .models import SequencedRequest

logger = logging.getLogger(__name__)


def routable_requests(requests: Optional[Iterable[Any]]) -> List[AidRequest]:
    """
    Coerce records to AidRequest and drop the ones without valid coordinates.
    Input order is preserved.
    """
    if not requests:
        return []

    valid = []
    for request in requests:
        request = AidRequest.coerce(request)
        if request.has_coordinates:
            valid.append(request)
    return valid


def optimize_route_nearest_neighbor(
    requests: Optional[Iterable[Any]],
    start_location: Any,
) -> List[SequencedRequest]:
    """
    Visit the closest unvisited request, move there, repeat.

    Args:
        requests: AidRequest objects or raw records; ones without coordinates are dropped silently
        start_location: GeoPoint, {"lat", "lng"} mapping or (lat, lng)

    Returns:
        every routable request exactly once, in visit order, annotated with distance_from_previous (km).
        Ties go to the request that came first in the input.
    """
    valid = routable_requests(requests)
    if not valid:
        return []

    start = GeoPoint.coerce(start_location)
    current_lat, current_lng = start.lat, start.lng

    visited = [False] * len(valid)
    result: List[SequencedRequest] = []

    while len(result) < len(valid):
        nearest_index = None
        nearest_distance = math.inf

        # linear scan, strict < keeps the first minimum found
        for index, request in enumerate(valid):
            if visited[index]:
                continue
            distance = calculate_distance(current_lat, current_lng, request.latitude, request.longitude)
            if math.isnan(distance):
                continue
            if distance < nearest_distance:
                nearest_distance = distance
                nearest_index = index

        if nearest_index is None:
            # only nan distances left (bad start location); stop instead of spinning
            logger.warning(
                f"Nearest neighbor stopped with {len(valid) - len(result)} unreachable stops "
                f"from start {start.coordinates}"
            )
            break

        nearest = valid[nearest_index]
        visited[nearest_index] = True
        result.append(SequencedRequest(request=nearest, distance_from_previous=nearest_distance))
        current_lat, current_lng = nearest.latitude, nearest.longitude

    return result
