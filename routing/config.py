"""
Purpose: Routing configuration (credentials, endpoints, timeouts).
What it does:
- RoutingConfig is injected into the optimizer; the core never reads the environment itself.
- RoutingConfig.from_env() is the opt-in for hosts that keep credentials in a .env file.

Example in .env:
OPENROUTESERVICE_API_KEY=...
GOOGLE_MAPS_API_KEY=...
ROUTING_TIMEOUT_S=10
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

OPENROUTESERVICE_URL = "https://api.openrouteservice.org/v2/directions"
GOOGLE_MAPS_DIRECTIONS_URL = "https://maps.googleapis.com/maps/api/directions/json"


@dataclass(frozen=True)
class RoutingConfig:
    """
    Credentials and endpoints for the external directions providers.
    A missing key is a normal state: that provider falls back to nearest neighbor.
    """

    openrouteservice_key: Optional[str] = None
    googlemaps_key: Optional[str] = None

    # seconds to wait for a provider response before giving up (and falling back)
    timeout_s: float = 10.0

    openrouteservice_url: str = OPENROUTESERVICE_URL
    openrouteservice_profile: str = "driving-car"
    googlemaps_url: str = GOOGLE_MAPS_DIRECTIONS_URL

    def validate(self) -> None:
        if self.timeout_s <= 0:
            raise ValueError("timeout_s must be > 0")

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None) -> RoutingConfig:
        """
        Load a .env file (if any) and read provider keys from the process environment.
        The REACT_APP_ prefixed names from the web frontend are accepted as fallbacks.
        """
        load_dotenv(dotenv_path)

        timeout = os.getenv("ROUTING_TIMEOUT_S")
        config = cls(
            openrouteservice_key=os.getenv("OPENROUTESERVICE_API_KEY")
            or os.getenv("REACT_APP_OPENROUTESERVICE_API_KEY")
            or None,
            googlemaps_key=os.getenv("GOOGLE_MAPS_API_KEY")
            or os.getenv("REACT_APP_GOOGLE_MAPS_API_KEY")
            or None,
            timeout_s=float(timeout) if timeout else 10.0,
        )
        config.validate()
        return config
