"""
Aid requests domain package.

Public API:
- Domain models: AidRequest, GeoPoint
- Enums: AidType, Priority, RequestStatus
- Tolerant parsers: parse_float, parse_timestamp
"""
from .models import (
    AidRequest,
    AidType,
    GeoPoint,
    LatLon,
    Priority,
    RequestStatus,
    parse_float,
    parse_timestamp,
)

__all__ = ["AidRequest",
           "AidType",
             "GeoPoint",
             "LatLon",
               "Priority",
               "RequestStatus",
               "parse_float",
               "parse_timestamp",
               ]
