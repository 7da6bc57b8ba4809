"""
Purpose: Failure reporting for the routing providers.
What it does:
- RouteFailure: one structured event per degraded optimization (missing key, provider error,
  unexpected failure inside the provider path)
- FailureReporter: any callable taking a RouteFailure. Injected into strategies so tests
  can collect events instead of scraping logs.
- LoggingFailureReporter: default reporter, writes to the module logger.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

# error_type values
MISSING_CREDENTIALS = "missing_credentials"
MAPS_API = "maps_api"
ROUTE_OPTIMIZATION = "route_optimization"


@dataclass(frozen=True)
class RouteFailure:
    """
    A provider path that degraded to the local heuristic.
    """
    provider: str
    error_type: str
    message: str
    context: Dict[str, Any] = field(default_factory=dict)
    exception: Optional[BaseException] = None


FailureReporter = Callable[[RouteFailure], None]


class LoggingFailureReporter:
    """
    Missing credentials are expected in dev, so they log at WARNING; real provider failures at ERROR.
    """
    def __init__(self, log: Optional[logging.Logger] = None):
        self.log = log or logger

    def __call__(self, failure: RouteFailure) -> None:
        if failure.error_type == MISSING_CREDENTIALS:
            self.log.warning(f"{failure.provider}: {failure.message}, falling back to nearest neighbor")
            return

        self.log.error(
            f"{failure.provider} optimization failed ({failure.error_type}): {failure.message} "
            f"context={failure.context}"
        )


class CollectingFailureReporter:
    """
    Keeps every reported failure in memory (handy for diagnostics and tests).
    """
    def __init__(self):
        self.failures: List[RouteFailure] = []

    def __call__(self, failure: RouteFailure) -> None:
        self.failures.append(failure)
