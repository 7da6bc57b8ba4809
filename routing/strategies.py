"""
Purpose: Interchangeable route computation strategies.
What it does:
- RouteStrategy: the one-method interface the optimizer dispatches to
- NearestNeighborStrategy: local greedy heuristic, always available
- OpenRouteServiceStrategy / GoogleMapsStrategy: delegate to an external directions provider,
  degrade to the nearest-neighbor strategy on a missing key or any provider failure

Every strategy returns a RouteResult; none of them raises for bad data or provider trouble.
New providers subclass ProviderStrategy and get registered on the RouteOptimizer.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

from requests import RequestException, Session

from aid_requests.models import AidRequest, GeoPoint
from .config import RoutingConfig
from .eta_service import estimate_duration_seconds, route_distance_km
from .exceptions import RoutingProviderError
from .googlemaps_client import GoogleMapsClient
from .models import RouteResult, SequencedRequest
from .nearest_neighbor import optimize_route_nearest_neighbor, routable_requests
from .openrouteservice_client import OpenRouteServiceClient
from .reporting import (
    MAPS_API,
    MISSING_CREDENTIALS,
    ROUTE_OPTIMIZATION,
    FailureReporter,
    LoggingFailureReporter,
    RouteFailure,
)


NEAREST = "nearest"
OPENROUTESERVICE = "openrouteservice"
GOOGLEMAPS = "googlemaps"


class RouteStrategy:
    """
    Orders stops from a start location and reports travel cost.
    """
    name: str = ""

    def optimize(self, requests: Optional[Iterable[Any]], start_location: Any) -> RouteResult:
        raise NotImplementedError


class NearestNeighborStrategy(RouteStrategy):
    """
    Greedy local tour. Distance is the sum of haversine legs from the start;
    duration is the 1 km ~ 1 minute estimate.
    """
    name = NEAREST

    def optimize(self, requests: Optional[Iterable[Any]], start_location: Any) -> RouteResult:
        route = optimize_route_nearest_neighbor(requests, start_location)
        distance = route_distance_km(route, start_location)
        return RouteResult(
            requests=route,
            distance=distance,
            duration=estimate_duration_seconds(distance),
            method=self.name,
        )


class ProviderStrategy(RouteStrategy):
    """
    Shared fallback policy for external providers:
    - no routable stops -> empty result, no network call
    - no API key -> report, nearest neighbor
    - provider error / network error / timeout -> report, nearest neighbor (no retries)
    """
    label: str = ""

    def __init__(
        self,
        config: Optional[RoutingConfig] = None,
        reporter: Optional[FailureReporter] = None,
        fallback: Optional[RouteStrategy] = None,
        session: Optional[Session] = None,
        client: Any = None,
    ):
        self.config = config or RoutingConfig()
        self.reporter = reporter or LoggingFailureReporter()
        self.fallback = fallback or NearestNeighborStrategy()
        self.session = session
        self.client = client

    def api_key(self) -> Optional[str]:
        raise NotImplementedError

    def build_client(self) -> Any:
        raise NotImplementedError

    def route_with_provider(self, client: Any, stops: List[AidRequest], start: GeoPoint) -> RouteResult:
        raise NotImplementedError

    def optimize(self, requests: Optional[Iterable[Any]], start_location: Any) -> RouteResult:
        stops = routable_requests(requests)
        if not stops:
            return RouteResult(method=self.name)

        start = GeoPoint.coerce(start_location)
        context = {"stops": len(stops), "start": start.coordinates}

        if self.client is None and not self.api_key():
            self.reporter(
                RouteFailure(
                    provider=self.name,
                    error_type=MISSING_CREDENTIALS,
                    message=f"{self.label} API key not found",
                    context=context,
                )
            )
            return self.fallback.optimize(stops, start)

        try:
            client = self.client or self.build_client()
            return self.route_with_provider(client, stops, start)
        except (RoutingProviderError, RequestException) as exc:
            self.reporter(
                RouteFailure(
                    provider=self.name,
                    error_type=MAPS_API,
                    message=str(exc),
                    context=context,
                    exception=exc,
                )
            )
            return self.fallback.optimize(stops, start)
        except Exception as exc:
            # anything else the provider path blows up on (injected clients included)
            self.reporter(
                RouteFailure(
                    provider=self.name,
                    error_type=ROUTE_OPTIMIZATION,
                    message=f"Unexpected {self.label} failure: {exc!r}",
                    context=context,
                    exception=exc,
                )
            )
            return self.fallback.optimize(stops, start)


class OpenRouteServiceStrategy(ProviderStrategy):
    """
    Round trip start -> stops (insertion order) -> start. The directions API keeps
    the waypoint order it is given, so stops map back positionally.
    """
    name = OPENROUTESERVICE
    label = "OpenRouteService"

    def api_key(self) -> Optional[str]:
        return self.config.openrouteservice_key

    def build_client(self) -> OpenRouteServiceClient:
        return OpenRouteServiceClient.from_config(self.config, session=self.session)

    def route_with_provider(self, client: Any, stops: List[AidRequest], start: GeoPoint) -> RouteResult:
        coordinates = [start.coordinates] + [stop.coordinates for stop in stops] + [start.coordinates]
        route = client.compute_route(coordinates)

        # one segment per leg: segment i arrives at stop i, the last one returns to start
        segments = route.get("segments") or []
        leg_km: List[Optional[float]] = [None] * len(stops)
        if len(segments) == len(stops) + 1:
            leg_km = [segment["distance"] / 1000 for segment in segments[: len(stops)]]

        return RouteResult(
            requests=[
                SequencedRequest(request=stop, distance_from_previous=leg_km[index])
                for index, stop in enumerate(stops)
            ],
            distance=route["distance"] / 1000, # meters -> km
            duration=route["duration"],
            geometry=route.get("geometry"),
            method=self.name,
        )


class GoogleMapsStrategy(ProviderStrategy):
    """
    origin = destination = start, waypoints optimized by Google; stops are reordered per waypoint_order.
    """
    name = GOOGLEMAPS
    label = "Google Maps"

    def api_key(self) -> Optional[str]:
        return self.config.googlemaps_key

    def build_client(self) -> GoogleMapsClient:
        return GoogleMapsClient.from_config(self.config, session=self.session)

    def route_with_provider(self, client: Any, stops: List[AidRequest], start: GeoPoint) -> RouteResult:
        route = client.compute_route(
            origin=start.coordinates,
            destination=start.coordinates,
            waypoints=[stop.coordinates for stop in stops],
            optimize=True,
        )
        waypoint_order = route["waypoint_order"]

        # legs[k] arrives at the k-th visited stop, the last one returns to start
        legs = route.get("legs") or []
        leg_km: List[Optional[float]] = [None] * len(stops)
        if len(legs) == len(stops) + 1:
            leg_km = [leg["distance"] / 1000 for leg in legs[: len(stops)]]

        return RouteResult(
            requests=[
                SequencedRequest(request=stops[stop_index], distance_from_previous=leg_km[position])
                for position, stop_index in enumerate(waypoint_order)
            ],
            distance=route["distance"] / 1000, # meters -> km
            duration=route["duration"],
            geometry=route.get("geometry"),
            method=self.name,
            waypoint_order=list(waypoint_order),
        )


def default_strategies(
    config: Optional[RoutingConfig] = None,
    reporter: Optional[FailureReporter] = None,
    session: Optional[Session] = None,
) -> Dict[str, RouteStrategy]:
    """
    The three built-in strategies, sharing one nearest-neighbor fallback.
    """
    nearest = NearestNeighborStrategy()
    return {
        NEAREST: nearest,
        OPENROUTESERVICE: OpenRouteServiceStrategy(config, reporter, fallback=nearest, session=session),
        GOOGLEMAPS: GoogleMapsStrategy(config, reporter, fallback=nearest, session=session),
    }
