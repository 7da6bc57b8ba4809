"""
Purpose: Domain models for relief (aid) requests.
What it does:
- Defines core data structures:
- AidRequest (id, contact details, aid type, priority, coordinates, timestamps, status, assignment)
- GeoPoint (lat, lng) start locations and stop coordinates

Defines enums/constants:
- AidType = food | medicine | shelter | clothing | transportation | other
- Priority = low | medium | high | urgent
- RequestStatus = open | pending | in-progress | fulfilled | resolved

Records come from the hosted backend as loosely typed mappings, so parsing is tolerant:
bad coordinates become None, bad dates become None. Nothing here raises on bad data.

Rule: No routing, no scoring. Models only.
"""
from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple

# internal coordinate type : (lat, lng)
LatLon = Tuple[float, float]

# leading numeric prefix, same idea as a JS parseFloat ("12.5abc" -> 12.5)
_FLOAT_PREFIX = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


class AidType(str, Enum):
    FOOD = "food"
    MEDICINE = "medicine"
    SHELTER = "shelter"
    CLOTHING = "clothing"
    TRANSPORTATION = "transportation"
    OTHER = "other"


class Priority(str, Enum):
    """
    Request priority. Forms only offer low/medium/high; URGENT is used by triage.
    """
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class RequestStatus(str, Enum):
    OPEN = "open"
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    FULFILLED = "fulfilled"
    RESOLVED = "resolved"


def parse_float(value: Any) -> Optional[float]:
    """
    Tolerant float parser for stringly typed coordinates.

    Returns None for None, booleans, empty strings, text without a numeric
    prefix and non-finite values (nan, inf).
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        match = _FLOAT_PREFIX.match(value)
        if not match:
            return None
        number = float(match.group(1))
    else:
        return None

    if not math.isfinite(number):
        return None
    return number


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse an ISO-8601 string, datetime or epoch milliseconds into an aware UTC datetime.
    Naive values are assumed to be UTC. Anything unparsable gives None.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, (int, float)):
        if not math.isfinite(value):
            return None
        try:
            return datetime.fromtimestamp(value / 1000.0, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        # fromisoformat (3.11+) takes any number of fractional digits; lower-case "z" still needs mapping
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass(frozen=True)
class GeoPoint:
    """
    A {lat, lng} pair. Range (-90..90, -180..180) is advisory and not enforced.
    """
    lat: float
    lng: float

    @property
    def coordinates(self) -> LatLon:
        return (self.lat, self.lng)

    @classmethod
    def coerce(cls, value: Any) -> GeoPoint:
        """
        Accepts a GeoPoint, a mapping with lat/lng (or latitude/longitude), or a (lat, lng) pair.
        Unparsable components become nan so distance math degrades instead of raising.
        """
        if isinstance(value, GeoPoint):
            return value

        if isinstance(value, Mapping):
            lat = value.get("lat", value.get("latitude"))
            lng = value.get("lng", value.get("longitude"))
        else:
            lat, lng = value

        parsed_lat = parse_float(lat)
        parsed_lng = parse_float(lng)
        return cls(
            lat=parsed_lat if parsed_lat is not None else math.nan,
            lng=parsed_lng if parsed_lng is not None else math.nan,
        )


# record keys mapped onto AidRequest fields; everything else lands in `extra`
_KNOWN_FIELDS = (
    "id",
    "name",
    "contact",
    "aid_type",
    "priority",
    "description",
    "location",
    "latitude",
    "longitude",
    "created_at",
    "status",
    "assigned_to",
    "route_order",
)


@dataclass(frozen=True)
class AidRequest:
    """
    A single relief request as seen by triage and routing.

    aid_type and priority are kept as plain strings so unknown values survive
    (triage maps unknowns onto defaults instead of rejecting them).
    """

    id: Any
    name: str = ""
    contact: str = ""
    aid_type: Optional[str] = None
    priority: Optional[str] = None
    description: str = ""
    location: str = ""

    latitude: Optional[float] = None
    longitude: Optional[float] = None

    created_at: Optional[datetime] = None
    status: str = RequestStatus.OPEN.value

    assigned_to: Optional[Any] = None
    route_order: Optional[int] = None

    # passthrough for columns this core does not know about
    extra: Dict[str, Any] = field(default_factory=dict)

    @property
    def coordinates(self) -> Optional[LatLon]:
        if self.latitude is None or self.longitude is None:
            return None
        return (self.latitude, self.longitude)

    @property
    def has_coordinates(self) -> bool:
        return self.coordinates is not None

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> AidRequest:
        """
        Build an AidRequest from a backend row. Missing optional fields never raise.
        `created_at` falls back to a `timestamp` column when absent.
        """
        raw_created_at = record.get("created_at")
        if raw_created_at is None or raw_created_at == "":
            raw_created_at = record.get("timestamp")

        route_order = record.get("route_order")
        parsed_route_order = parse_float(route_order)

        return cls(
            id=record.get("id"),
            name=record.get("name") or "",
            contact=record.get("contact") or "",
            aid_type=_enum_value(record.get("aid_type")),
            priority=_enum_value(record.get("priority")),
            description=record.get("description") or "",
            location=record.get("location") or "",
            latitude=parse_float(record.get("latitude")),
            longitude=parse_float(record.get("longitude")),
            created_at=parse_timestamp(raw_created_at),
            status=_enum_value(record.get("status")) or RequestStatus.OPEN.value,
            assigned_to=record.get("assigned_to"),
            route_order=int(parsed_route_order) if parsed_route_order is not None else None,
            extra={key: value for key, value in record.items() if key not in _KNOWN_FIELDS},
        )

    @classmethod
    def coerce(cls, value: Any) -> AidRequest:
        if isinstance(value, AidRequest):
            return value
        return cls.from_record(value)

    def to_record(self) -> Dict[str, Any]:
        """
        Flat mapping in the backend's column naming, extra columns included.
        """
        record = dict(self.extra)
        record.update(
            {
                "id": self.id,
                "name": self.name,
                "contact": self.contact,
                "aid_type": self.aid_type,
                "priority": self.priority,
                "description": self.description,
                "location": self.location,
                "latitude": self.latitude,
                "longitude": self.longitude,
                "created_at": self.created_at.isoformat() if self.created_at else None,
                "status": self.status,
                "assigned_to": self.assigned_to,
                "route_order": self.route_order,
            }
        )
        return record


def _enum_value(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)
