"""
Great-circle distance and geofence checks.

Distances use the Haversine formula on a spherical Earth, in miles.
"""

import math

EARTH_RADIUS_MILES = 3959.0


def distance_miles(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Haversine distance in miles between two (lat, lng) points given in degrees."""
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lng / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_MILES * c


def is_within_geofence(
    user_lat: float,
    user_lng: float,
    venue_lat: float,
    venue_lng: float,
    radius_miles: float,
) -> bool:
    """True when the user is at most radius_miles from the venue (boundary inclusive)."""
    return distance_miles(user_lat, user_lng, venue_lat, venue_lng) <= radius_miles
