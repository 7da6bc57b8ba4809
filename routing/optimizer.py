#Purpose: Route computation entry point (the dispatcher).
#Picks a strategy by name and returns the normalized RouteResult.
#method: "nearest" (default, also used for unknown names), "openrouteservice", "googlemaps".
#Credentials and failure reporting are injected, never read from globals.

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional

from requests import Session

from .config import RoutingConfig
from .models import RouteResult, SequencedRequest
from .nearest_neighbor import optimize_route_nearest_neighbor as _nearest_neighbor
from .reporting import FailureReporter, LoggingFailureReporter
from .strategies import (
    GOOGLEMAPS,
    NEAREST,
    OPENROUTESERVICE,
    RouteStrategy,
    default_strategies,
)

logger = logging.getLogger(__name__)


class RouteOptimizer:
    """
    Orders a volunteer's stops with one of the registered strategies.

    Every method returns a RouteResult (requests in visit order, distance km,
    duration seconds, optional geometry), and none of them raises because a
    provider is missing or failing.
    """
    def __init__(
        self,
        config: Optional[RoutingConfig] = None,
        reporter: Optional[FailureReporter] = None,
        session: Optional[Session] = None,
    ):
        self.config = config or RoutingConfig()
        self.reporter = reporter or LoggingFailureReporter()
        self._strategies: Dict[str, RouteStrategy] = default_strategies(
            self.config, self.reporter, session=session
        )

    @property
    def methods(self) -> List[str]:
        return list(self._strategies)

    def register_strategy(self, strategy: RouteStrategy, name: Optional[str] = None) -> None:
        """
        Add (or replace) a strategy; it becomes reachable via optimize_route(method=name).
        """
        key = (name or strategy.name).strip().lower()
        if not key:
            raise ValueError("strategy needs a name")
        self._strategies[key] = strategy

    def optimize_route(
        self,
        requests: Optional[Iterable[Any]],
        start_location: Any,
        method: Optional[str] = NEAREST,
    ) -> RouteResult:
        key = method.strip().lower() if isinstance(method, str) else NEAREST
        strategy = self._strategies.get(key)
        if strategy is None:
            logger.debug(f"Unknown route method {method!r}, using {NEAREST}")
            strategy = self._strategies[NEAREST]
        return strategy.optimize(requests, start_location)

    def optimize_route_nearest_neighbor(
        self, requests: Optional[Iterable[Any]], start_location: Any
    ) -> List[SequencedRequest]:
        return _nearest_neighbor(requests, start_location)

    def optimize_route_with_openrouteservice(
        self, requests: Optional[Iterable[Any]], start_location: Any
    ) -> RouteResult:
        return self._strategies[OPENROUTESERVICE].optimize(requests, start_location)

    def optimize_route_with_google_maps(
        self, requests: Optional[Iterable[Any]], start_location: Any
    ) -> RouteResult:
        return self._strategies[GOOGLEMAPS].optimize(requests, start_location)


#----------------
# Functional entry points (one optimizer per call)
#----------------
def optimize_route(
    requests: Optional[Iterable[Any]],
    start_location: Any,
    method: Optional[str] = NEAREST,
    *,
    config: Optional[RoutingConfig] = None,
    reporter: Optional[FailureReporter] = None,
    session: Optional[Session] = None,
) -> RouteResult:
    optimizer = RouteOptimizer(config=config, reporter=reporter, session=session)
    return optimizer.optimize_route(requests, start_location, method)


def optimize_route_with_openrouteservice(
    requests: Optional[Iterable[Any]],
    start_location: Any,
    *,
    config: Optional[RoutingConfig] = None,
    reporter: Optional[FailureReporter] = None,
    session: Optional[Session] = None,
) -> RouteResult:
    optimizer = RouteOptimizer(config=config, reporter=reporter, session=session)
    return optimizer.optimize_route_with_openrouteservice(requests, start_location)


def optimize_route_with_google_maps(
    requests: Optional[Iterable[Any]],
    start_location: Any,
    *,
    config: Optional[RoutingConfig] = None,
    reporter: Optional[FailureReporter] = None,
    session: Optional[Session] = None,
) -> RouteResult:
    optimizer = RouteOptimizer(config=config, reporter=reporter, session=session)
    return optimizer.optimize_route_with_google_maps(requests, start_location)
