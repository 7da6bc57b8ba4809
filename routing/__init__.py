#Marks routing as a package.
#Re-exports the public APIs (RouteOptimizer, optimize_route, calculate_distance, geofence_requests)
#so other modules import from routing without knowing internal file names.
#No business logic.

from .config import RoutingConfig
from .exceptions import GoogleMapsError, OpenRouteServiceError, RoutingProviderError
from .geo import calculate_distance
from .geofence import NearbyRequest, geofence_requests
from .googlemaps_client import GoogleMapsClient
from .models import RouteResult, SequencedRequest
from .nearest_neighbor import optimize_route_nearest_neighbor, routable_requests
from .openrouteservice_client import OpenRouteServiceClient
from .optimizer import (
    RouteOptimizer,
    optimize_route,
    optimize_route_with_google_maps,
    optimize_route_with_openrouteservice,
)
from .reporting import CollectingFailureReporter, LoggingFailureReporter, RouteFailure
from .strategies import (
    GoogleMapsStrategy,
    NearestNeighborStrategy,
    OpenRouteServiceStrategy,
    RouteStrategy,
)

__all__ = [
           "RoutingConfig",
           "RoutingProviderError",
           "OpenRouteServiceError",
           "GoogleMapsError",
           "calculate_distance",
           "NearbyRequest",
           "geofence_requests",
           "GoogleMapsClient",
           "OpenRouteServiceClient",
           "RouteResult",
           "SequencedRequest",
           "optimize_route_nearest_neighbor",
           "routable_requests",
           "RouteOptimizer",
           "optimize_route",
           "optimize_route_with_google_maps",
           "optimize_route_with_openrouteservice",
           "RouteFailure",
           "LoggingFailureReporter",
           "CollectingFailureReporter",
           "RouteStrategy",
           "NearestNeighborStrategy",
           "OpenRouteServiceStrategy",
           "GoogleMapsStrategy",
             ]
