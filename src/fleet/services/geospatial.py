"""Geospatial helper functions."""

from __future__ import annotations

import math
from typing import Optional, Sequence

from shapely.geometry import Point, Polygon

from ..models.domain import GeoArea, GeoLocation, ZoneType

EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute distance between two coordinates using the Haversine formula."""

    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def distance_km(origin: GeoLocation, destination: GeoLocation) -> float:
    return haversine_km(origin.latitude, origin.longitude, destination.latitude, destination.longitude)


def is_location_near(origin: GeoLocation, destination: GeoLocation, radius_km: float) -> bool:
    return distance_km(origin, destination) <= radius_km


def point_in_polygon(lat: float, lon: float, polygon_coords: Sequence[tuple[float, float]]) -> bool:
    """Return True if the point is inside the polygon denoted by (lat, lon) pairs."""

    polygon = Polygon([(lng, lat) for lat, lng in polygon_coords])
    return polygon.contains(Point(lon, lat))


def resolve_zone_type(location: GeoLocation, areas: Sequence[GeoArea]) -> Optional[ZoneType]:
    """Zone type of the first area containing ``location``, or None."""

    for area in areas:
        if len(area.boundaries) < 3:
            continue
        if point_in_polygon(location.latitude, location.longitude, area.boundaries):
            return area.zone_type
    return None
