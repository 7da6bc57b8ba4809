#Purpose: The Google Maps Directions "adapter/client".
#Sole responsibility: talk to the Directions API via HTTP and return normalized outputs.
#Encapsulates Google-specific details:
#"lat,lng" strings and the optimize:true waypoint syntax
#the "status" field (anything but OK is an error)
#summing legs into totals (meters, seconds)
#It should not contain fallback rules or sequencing.

from __future__ import annotations

from typing import Any, Dict, List, Optional

import requests

from aid_requests.models import LatLon
from .config import GOOGLE_MAPS_DIRECTIONS_URL, RoutingConfig
from .exceptions import GoogleMapsError


class GoogleMapsClient:
    """
    Google Maps Directions Adapter / Client

    Raises GoogleMapsError for non-2xx responses, non-OK statuses and malformed payloads.
    Network errors and timeouts surface as requests.RequestException.
    """
    def __init__(
        self,
        api_key: str,
        base_url: str = GOOGLE_MAPS_DIRECTIONS_URL,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        if not api_key:
            raise ValueError("Google Maps API key not set.")

        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_config(cls, config: RoutingConfig, session: Optional[requests.Session] = None) -> GoogleMapsClient:
        return cls(
            api_key=config.googlemaps_key,
            base_url=config.googlemaps_url,
            timeout=config.timeout_s,
            session=session,
        )

    def format_coordinate(self, coord: LatLon) -> str:
        """Convert (lat, lng) to Google format 'lat,lng'"""
        lat, lng = coord
        return f"{lat},{lng}"

    def compute_route(
        self,
        origin: LatLon,
        destination: LatLon,
        waypoints: List[LatLon],
        optimize: bool = True,
    ) -> Dict[str, Any]:
        """
        Calls the Directions endpoint; with optimize=True Google reorders the waypoints.

        Returns:
            {
                "distance": float,        # in meters, all legs
                "duration": float,        # in seconds, all legs
                "waypoint_order": [int],  # visit order as indices into `waypoints`
                "legs": [{"distance": float, "duration": float}, ...],
                "geometry": Any,          # overview_polyline, passed through
            }
        """
        waypoint_param = "|".join(self.format_coordinate(point) for point in waypoints)
        if optimize:
            waypoint_param = f"optimize:true|{waypoint_param}"

        params = {
            "origin": self.format_coordinate(origin),
            "destination": self.format_coordinate(destination),
            "key": self.api_key,
        }
        if waypoints:
            params["waypoints"] = waypoint_param

        response = self.session.get(self.base_url, params=params, timeout=self.timeout)

        if not response.ok:
            raise GoogleMapsError(f"Google Maps API error: {response.status_code} {response.reason}")

        try:
            data = response.json()
        except ValueError as exc:
            raise GoogleMapsError("Google Maps returned invalid JSON") from exc

        if not isinstance(data, dict):
            raise GoogleMapsError("Malformed Google Maps response: expected a JSON object")

        status = data.get("status")
        if status != "OK":
            message = data.get("error_message")
            if message:
                raise GoogleMapsError(f"Google Maps API error: {status} ({message})")
            raise GoogleMapsError(f"Google Maps API error: {status}")

        try:
            route = data["routes"][0]
            waypoint_order = [int(index) for index in route.get("waypoint_order", range(len(waypoints)))]
            legs = [
                {
                    "distance": float(leg["distance"]["value"]),
                    "duration": float(leg["duration"]["value"]),
                }
                for leg in route["legs"]
            ]
        except (KeyError, IndexError, TypeError, ValueError, AttributeError) as exc:
            raise GoogleMapsError(f"Malformed Google Maps response: {exc!r}") from exc

        # must be a permutation of the waypoints we sent
        if sorted(waypoint_order) != list(range(len(waypoints))):
            raise GoogleMapsError(f"Google Maps returned an invalid waypoint_order: {waypoint_order}")

        return {
            "distance": sum(leg["distance"] for leg in legs),
            "duration": sum(leg["duration"] for leg in legs),
            "waypoint_order": waypoint_order,
            "legs": legs,
            "geometry": route.get("overview_polyline"),
        }
