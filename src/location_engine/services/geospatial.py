"""Geospatial helper functions."""

from __future__ import annotations

import math
from typing import Any, Mapping, Optional

from shapely.errors import GEOSException
from shapely.geometry import Point, Polygon

from ..models.domain import Coordinates, CountryBounds

EARTH_RADIUS_KM = 6371.0

INDONESIA_BOUNDS = CountryBounds(min_lat=-11.0, max_lat=6.0, min_lng=95.0, max_lng=141.0)


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute distance between two coordinates using the Haversine formula."""

    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def haversine_distance(a: Coordinates, b: Coordinates) -> float:
    """Great-circle distance in kilometers between two points."""

    return haversine_km(a.lat, a.lng, b.lat, b.lng)


def is_valid_country_coordinate(point: Coordinates, bounds: CountryBounds | None = None) -> bool:
    """Return True if the point lies inside the (inclusive) country bounding box."""

    return (bounds or INDONESIA_BOUNDS).contains(point)


def _polygon_vertices(polygon: Any) -> Optional[list[Coordinates]]:
    if isinstance(polygon, Mapping):
        polygon = polygon.get("coordinates")
    elif not isinstance(polygon, (list, tuple)):
        polygon = getattr(polygon, "coordinates", None)
    if not isinstance(polygon, (list, tuple)):
        return None

    vertices: list[Coordinates] = []
    for vertex in polygon:
        point = Coordinates.from_value(vertex)
        if point is None:
            return None
        vertices.append(point)
    return vertices


def point_in_polygon(point: Coordinates, polygon: Any) -> bool:
    """Return True if ``point`` lies inside ``polygon``.

    ``polygon`` is either a sequence of vertices ({lat, lng} mappings,
    Coordinates or (lat, lng) pairs) or an object/mapping exposing such a
    sequence as ``coordinates``. Malformed input is treated as "outside"
    rather than an error.
    """

    vertices = _polygon_vertices(polygon)
    if not vertices or len(vertices) < 3:
        return False

    try:
        shape = Polygon([(vertex.lng, vertex.lat) for vertex in vertices])
        return bool(shape.contains(Point(point.lng, point.lat)))
    except (GEOSException, ValueError):
        return False
