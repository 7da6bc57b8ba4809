"""
Exceptions raised by the routing provider clients.
Strategies catch these (and requests.RequestException) and fall back to nearest neighbor.
"""


class RoutingProviderError(Exception):
    """Base class for external directions provider errors."""
    pass


class OpenRouteServiceError(RoutingProviderError):
    """Custom exception for OpenRouteService client errors."""
    pass


class GoogleMapsError(RoutingProviderError):
    """Custom exception for Google Maps Directions client errors."""
    pass
