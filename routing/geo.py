"""
Great-circle distance. The only distance primitive the route heuristics build on.
"""

import math

# Earth's mean radius in kilometers
EARTH_RADIUS_KM = 6371.0


def calculate_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Haversine distance in kilometers between (lat1, lon1) and (lat2, lon2).

    Coincident points give 0. nan inputs give nan; callers must not use a nan
    distance in comparisons.
    """
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)

    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    if math.isnan(a):
        return math.nan

    # rounding can push `a` a hair outside [0, 1] near antipodes
    a = min(max(a, 0.0), 1.0)

    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c
