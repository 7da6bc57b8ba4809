#Purpose: The OpenRouteService "adapter/client".
#Sole responsibility: talk to the ORS directions API via HTTP and return normalized outputs.
#Encapsulates ORS-specific details:
#coordinate formatting ([lng, lat] pairs)
#URL construction (/v2/directions/{profile})
#timeouts / error handling
#parsing response JSON into our internal shape (meters, seconds)
#It should not contain fallback rules or sequencing.

from __future__ import annotations

from typing import Any, Dict, List, Optional

import requests

from aid_requests.models import LatLon
from .config import OPENROUTESERVICE_URL, RoutingConfig
from .exceptions import OpenRouteServiceError


class OpenRouteServiceClient:
    """
    OpenRouteService Adapter / Client

    Sole responsibility:
    - Talk to ORS via HTTP
    - Convert internal (lat, lng) -> ORS [lng, lat]
    - Return normalized outputs

    Raises OpenRouteServiceError for non-2xx responses and malformed payloads.
    Network errors and timeouts surface as requests.RequestException.
    """
    def __init__(
        self,
        api_key: str,
        base_url: str = OPENROUTESERVICE_URL,
        profile: str = "driving-car",
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        if not api_key:
            raise ValueError("OpenRouteService API key not set.")

        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.profile = profile #the mode of transportation (driving-car, cycling-regular, foot-walking)
        self.timeout = timeout #the time to wait for a response from ORS before giving up
        self.session = session or requests.Session()

    @classmethod
    def from_config(cls, config: RoutingConfig, session: Optional[requests.Session] = None) -> OpenRouteServiceClient:
        return cls(
            api_key=config.openrouteservice_key,
            base_url=config.openrouteservice_url,
            profile=config.openrouteservice_profile,
            timeout=config.timeout_s,
            session=session,
        )

    #----------------
    # Internal helpers
    #----------------
    def format_coordinates(self, coords: List[LatLon]) -> List[List[float]]:
        """Convert list of (lat, lng) to ORS format [[lng, lat], ...]"""
        return [[lng, lat] for lat, lng in coords]

    #----------------
    # Public methods
    #----------------
    def compute_route(self, coordinates: List[LatLon]) -> Dict[str, Any]:
        """
        Calls the ORS directions endpoint with the given waypoints (in visit order).

        Returns:
            {
                "distance": float, # in meters
                "duration": float, # in seconds
                "geometry": Any,   # provider geometry, passed through untouched
                "segments": [{"distance": float, "duration": float}, ...], # one per leg, may be empty
            }
        """
        if len(coordinates) < 2:
            raise ValueError("At least two coordinates are required to compute a route.")

        url = f"{self.base_url}/{self.profile}"
        response = self.session.post(
            url,
            json={
                "coordinates": self.format_coordinates(coordinates),
                "geometry": True, # we want the path for map display
            },
            headers={
                "Authorization": self.api_key,
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
            timeout=self.timeout,
        )

        if not response.ok:
            raise OpenRouteServiceError(
                f"OpenRouteService API error: {response.status_code} {response.reason}"
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise OpenRouteServiceError("OpenRouteService returned invalid JSON") from exc

        try:
            route = data["routes"][0] #take the first route
            summary = route["summary"]
            # ORS omits zero-valued summary fields
            distance = float(summary.get("distance", 0.0))
            duration = float(summary.get("duration", 0.0))
            segments = [
                {
                    "distance": float(segment.get("distance", 0.0)),
                    "duration": float(segment.get("duration", 0.0)),
                }
                for segment in route.get("segments") or []
            ]
        except (KeyError, IndexError, TypeError, ValueError, AttributeError) as exc:
            raise OpenRouteServiceError(f"Malformed OpenRouteService response: {exc!r}") from exc

        #Normalize output to internal format
        return {
            "distance": distance,
            "duration": duration,
            "geometry": route.get("geometry"),
            "segments": segments,
        }
