"""Tiered travel surcharge pricing."""

from __future__ import annotations

import math

from ..models.domain import TravelSurchargeSettings


def calculate_travel_surcharge(distance_km: float, settings: TravelSurchargeSettings) -> int:
    """Return the surcharge for a trip of ``distance_km``.

    Trips shorter than ``min_travel_distance`` are free. Trips beyond
    ``max_travel_distance`` also price at zero; deciding whether such a
    booking is allowed at all is up to the caller. Everything else costs
    ``base + distance * per_km`` rounded up to a whole currency unit.
    """

    if settings.min_travel_distance is not None and distance_km < settings.min_travel_distance:
        return 0
    if settings.max_travel_distance is not None and distance_km > settings.max_travel_distance:
        return 0
    return math.ceil(settings.base_travel_surcharge + distance_km * settings.per_km_surcharge)
