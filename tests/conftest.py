import math
from datetime import datetime, timezone

import pytest

# 1 km along the equator, in degrees of longitude
KM_IN_DEGREES = 1 / (6371.0 * math.pi / 180)


class FakeResponse:
    """
    Just enough of requests.Response for the provider clients.
    """
    def __init__(self, payload=None, status_code=200, reason="OK", invalid_json=False):
        self.payload = payload
        self.status_code = status_code
        self.reason = reason
        self.invalid_json = invalid_json

    @property
    def ok(self):
        return 200 <= self.status_code < 300

    def json(self):
        if self.invalid_json:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self.payload


class FakeSession:
    """
    Records every call and returns a canned response (or raises a canned error).
    """
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def _handle(self, method, url, kwargs):
        self.calls.append({"method": method, "url": url, **kwargs})
        if self.error is not None:
            raise self.error
        return self.response

    def post(self, url, **kwargs):
        return self._handle("POST", url, kwargs)

    def get(self, url, **kwargs):
        return self._handle("GET", url, kwargs)


@pytest.fixture
def now():
    return datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def start():
    return {"lat": 0.0, "lng": 0.0}


@pytest.fixture
def equator_requests(now):
    """
    Three stops east of (0, 0) at 3, 1 and 2 km, plus two without usable coordinates.
    """
    return [
        {"id": "c", "latitude": "0", "longitude": str(3 * KM_IN_DEGREES), "created_at": now.isoformat()},
        {"id": "a", "latitude": 0.0, "longitude": 1 * KM_IN_DEGREES, "created_at": now.isoformat()},
        {"id": "no-coords", "latitude": None, "longitude": None},
        {"id": "b", "latitude": "0.0", "longitude": f"{2 * KM_IN_DEGREES}", "created_at": now.isoformat()},
        {"id": "garbage", "latitude": "north", "longitude": "12"},
    ]
