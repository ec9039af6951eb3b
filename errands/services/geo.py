"""Geographic distance calculations for proximity detection."""

import math
from math import radians, sin, cos, sqrt, atan2
from errands.exceptions import InvalidCoordinate

EARTH_RADIUS_M = 6371000  # mean Earth radius in meters


def _as_degrees(value, name, limit):
    # bool is an int subclass; True/False are never coordinates
    if isinstance(value, bool) or value is None:
        raise InvalidCoordinate(f'{name} must be a number')
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        raise InvalidCoordinate(f'{name} must be a number')
    if not math.isfinite(number) or number < -limit or number > limit:
        raise InvalidCoordinate(f'{name} must be between -{limit} and {limit}')
    return number


def validate_coordinate(latitude, longitude):
    """
    Validate a latitude/longitude pair.

    Returns:
        tuple: (latitude, longitude) as floats

    Raises:
        InvalidCoordinate: if either value is missing, non-numeric or out of range
    """
    return (
        _as_degrees(latitude, 'latitude', 90),
        _as_degrees(longitude, 'longitude', 180),
    )


def distance_meters(lat1, lon1, lat2, lon2):
    """Great-circle distance in meters between two points (Haversine formula)."""
    lat1, lon1 = validate_coordinate(lat1, lon1)
    lat2, lon2 = validate_coordinate(lat2, lon2)

    lat1, lon1, lat2, lon2 = map(radians, [lat1, lon1, lat2, lon2])
    dlat = lat2 - lat1
    dlon = lon2 - lon1
    a = sin(dlat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(dlon / 2) ** 2
    c = 2 * atan2(sqrt(a), sqrt(1 - a))
    return EARTH_RADIUS_M * c
