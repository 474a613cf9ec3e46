"""Nearest-neighbor ordering of home-visit stops.

This is a greedy heuristic: from the current position it always drives to
the closest unvisited booking. It is cheap enough to run over many stops
but gives no guarantee of the shortest overall route.
"""

from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone
from typing import Sequence

from ...models.domain import BookingStop, Coordinates, RouteOptimization, RouteStop, TravelSurchargeSettings
from ..geospatial import haversine_distance
from ..pricing import calculate_travel_surcharge

DEFAULT_MINUTES_PER_KM = 2.0
DEFAULT_STOP_BUFFER_MINUTES = 5


def estimate_leg_minutes(
    distance_km: float,
    *,
    minutes_per_km: float = DEFAULT_MINUTES_PER_KM,
    buffer_minutes: int = DEFAULT_STOP_BUFFER_MINUTES,
) -> int:
    """Flat per-stop travel estimate: ceil(distance * rate) plus a parking buffer."""

    return math.ceil(distance_km * minutes_per_km) + buffer_minutes


def nearest_neighbor_route(
    start: Coordinates,
    bookings: Sequence[BookingStop],
    surcharge_settings: TravelSurchargeSettings,
    *,
    departure: datetime | None = None,
    minutes_per_km: float = DEFAULT_MINUTES_PER_KM,
    buffer_minutes: int = DEFAULT_STOP_BUFFER_MINUTES,
) -> RouteOptimization:
    """Order bookings greedily starting at ``start``.

    Bookings without coordinates are ignored. Arrival times are simulated
    from ``departure`` (now, UTC, by default): each leg advances the clock by
    its travel time, then by the booking's service time.
    """

    unvisited = [booking for booking in bookings if booking.coordinates is not None]
    if not unvisited:
        return RouteOptimization.empty()

    current_location = start
    current_time = departure or datetime.now(timezone.utc)
    stops: list[RouteStop] = []
    total_distance = 0.0
    total_duration = 0
    total_surcharge = 0

    while unvisited:
        nearest_index = 0
        nearest_distance = math.inf
        for index, booking in enumerate(unvisited):
            distance = haversine_distance(current_location, booking.coordinates)
            if distance < nearest_distance:
                nearest_distance = distance
                nearest_index = index

        booking = unvisited.pop(nearest_index)
        travel_time = estimate_leg_minutes(
            nearest_distance, minutes_per_km=minutes_per_km, buffer_minutes=buffer_minutes
        )
        current_time = current_time + timedelta(minutes=travel_time)

        stops.append(
            RouteStop(
                booking_id=booking.booking_id,
                address=booking.address,
                coordinates=booking.coordinates,
                estimated_arrival=current_time,
                service_time=booking.service_time,
                travel_time_from_previous=travel_time,
                distance_from_previous=nearest_distance,
            )
        )

        total_distance += nearest_distance
        total_duration += travel_time + booking.service_time
        total_surcharge += calculate_travel_surcharge(nearest_distance, surcharge_settings)

        current_location = booking.coordinates
        current_time = current_time + timedelta(minutes=booking.service_time)

    return RouteOptimization(
        optimized_route=stops,
        total_distance=total_distance,
        total_duration=total_duration,
        total_surcharge=total_surcharge,
    )
