"""Travel calculation orchestration service.

Composes geocoding, routing, service-area coverage, surcharge pricing and
caching. Public methods never raise for bad input or failing providers;
they return well-formed results with ``surcharge=0`` and
``is_within_service_area=False`` as the "unknown" signal. The one
exception is a provider that is configured but not implemented, which
raises ``NotImplementedError``.
"""

from __future__ import annotations

import logging
import math
from concurrent.futures import ThreadPoolExecutor
from dataclasses import asdict, replace
from datetime import datetime
from typing import Any, Sequence

from ..config import Settings, settings
from ..data.service_areas_repository import ServiceAreaRepository, SupabaseServiceAreaRepository
from ..data.tenant_settings_repository import SupabaseTenantSettingsRepository, TenantSettingsRepository
from ..models.domain import (
    AddressValidation,
    AreaSurcharge,
    BookingStop,
    Coordinates,
    CoverageResult,
    RouteInfo,
    RouteOptimization,
    TravelCalculation,
    TravelSurchargeSettings,
)
from ..persistence.cache import CacheBackend, InMemoryCache
from .geocoding.base import GeocodingProvider
from .geocoding.dispatcher import get_geocoding_provider
from .geospatial import haversine_distance
from .pricing import calculate_travel_surcharge
from .routing.base import RoutingProvider
from .routing.dispatcher import get_routing_provider
from .routing.optimizer import nearest_neighbor_route
from .service_areas.coverage import calculate_area_surcharge, check_service_area_coverage

logger = logging.getLogger(__name__)

CACHE_KEY_PRECISION = 5


def address_cache_key(tenant_id: str, address: str) -> str:
    return f"address_validation:{tenant_id}:{address}"


def travel_cache_key(
    origin: Coordinates,
    destination: Coordinates,
    tenant_id: str,
    service_id: str | None = None,
) -> str:
    def _fmt(point: Coordinates) -> str:
        return f"{round(point.lat, CACHE_KEY_PRECISION)},{round(point.lng, CACHE_KEY_PRECISION)}"

    return f"travel_calc:{tenant_id}:{service_id or '*'}:{_fmt(origin)}:{_fmt(destination)}"


def buffered_provider_duration(duration_min: float, buffer: float) -> int:
    """Provider travel time padded for real-world conditions."""
    return math.ceil(duration_min * buffer)


def straight_line_duration(distance_km: float, minutes_per_km: float) -> int:
    """Travel time estimate when no road route is available."""
    return math.ceil(distance_km * minutes_per_km)


class LocationService:
    def __init__(
        self,
        config: Settings | None = None,
        *,
        cache: CacheBackend | None = None,
        geocoder: GeocodingProvider | None = None,
        router: RoutingProvider | None = None,
        service_areas: ServiceAreaRepository | None = None,
        tenant_settings: TenantSettingsRepository | None = None,
    ) -> None:
        self.config = config or settings
        self.cache = cache if cache is not None else InMemoryCache()
        self.geocoder = geocoder or get_geocoding_provider(self.config)
        self.router = router or get_routing_provider(self.config)
        self.service_areas = service_areas or SupabaseServiceAreaRepository()
        self.tenant_settings = tenant_settings or SupabaseTenantSettingsRepository()

    # Address validation

    def validate_address(self, tenant_id: str, address: str) -> AddressValidation:
        """Geocode ``address``; only valid results are cached."""
        key = address_cache_key(tenant_id, address)
        try:
            cached = self._cache_get(key)
            if cached is not None:
                return AddressValidation.from_dict(cached)

            result = self.geocoder.geocode(address)
            if result.is_valid:
                self._cache_set(key, asdict(result))
            return result
        except NotImplementedError:
            raise
        except Exception:
            logger.exception(f"Error validating address '{address}' for tenant {tenant_id}")
            return AddressValidation.invalid("Failed to validate address")

    def resolve_location(self, location: Any) -> Coordinates | None:
        """Coordinates as-is; free text goes through the geocoder."""
        if location is None:
            return None
        if isinstance(location, str):
            if not location.strip():
                return None
            validation = self.geocoder.geocode(location)
            if validation.is_valid and validation.address:
                return validation.address.coordinates
            return None
        return Coordinates.from_value(location)

    # Building blocks

    def get_route_info(self, origin: Coordinates, destination: Coordinates) -> RouteInfo | None:
        return self.router.route(origin, destination)

    def check_service_area_coverage(
        self,
        point: Coordinates,
        tenant_id: str,
        service_id: str | None = None,
    ) -> CoverageResult:
        return check_service_area_coverage(point, tenant_id, self.service_areas, service_id)

    def calculate_area_surcharge(
        self,
        point: Coordinates,
        tenant_id: str,
        distance_km: float,
        service_id: str | None = None,
    ) -> AreaSurcharge:
        return calculate_area_surcharge(point, tenant_id, distance_km, self.service_areas, service_id)

    def get_travel_settings(self, tenant_id: str) -> TravelSurchargeSettings | None:
        try:
            return self.tenant_settings.get_travel_settings(tenant_id)
        except Exception as exc:
            logger.warning(f"Could not load travel settings for tenant {tenant_id}: {exc}")
            return None

    # Travel calculation

    def calculate_travel(
        self,
        origin: Any,
        destination: Any,
        tenant_id: str,
        service_id: str | None = None,
    ) -> TravelCalculation:
        try:
            origin_point = self.resolve_location(origin)
            destination_point = self.resolve_location(destination)
            if origin_point is None or destination_point is None:
                logger.warning(
                    f"Invalid origin or destination for tenant {tenant_id}: origin={origin!r} destination={destination!r}"
                )
                return TravelCalculation.unavailable("Invalid origin or destination coordinates")

            key = travel_cache_key(origin_point, destination_point, tenant_id, service_id)
            cached = self._cache_get(key)
            if cached is not None:
                return TravelCalculation.from_dict(cached)

            result = self._calculate_route(origin_point, destination_point, tenant_id, service_id)
            if not result.is_degraded:
                self._cache_set(key, asdict(result))
            return result
        except NotImplementedError:
            raise
        except Exception as exc:
            logger.exception(
                f"Error calculating travel: origin={origin!r} destination={destination!r} "
                f"tenant={tenant_id} service={service_id}"
            )
            return TravelCalculation.unavailable(f"Unexpected error: {exc}")

    def _calculate_route(
        self,
        origin: Coordinates,
        destination: Coordinates,
        tenant_id: str,
        service_id: str | None,
    ) -> TravelCalculation:
        straight_line_km = haversine_distance(origin, destination)
        route_info = self.get_route_info(origin, destination)

        if route_info is not None:
            distance = route_info.distance_km
            duration = buffered_provider_duration(route_info.duration_min, self.config.provider_duration_buffer)
            route = route_info.route or None
        else:
            distance = straight_line_km
            duration = straight_line_duration(straight_line_km, self.config.fallback_minutes_per_km)
            route = None

        coverage = self.check_service_area_coverage(destination, tenant_id, service_id)

        # A zero area surcharge cannot be told apart from "not configured",
        # so it falls back to the tenant-wide pricing.
        surcharge = math.ceil(coverage.surcharge)
        if surcharge == 0:
            travel_settings = self.get_travel_settings(tenant_id)
            if travel_settings is not None:
                surcharge = calculate_travel_surcharge(distance, travel_settings)

        return TravelCalculation(
            distance=distance,
            duration=duration,
            route=route,
            surcharge=surcharge,
            is_within_service_area=coverage.is_within_area,
            service_area_id=coverage.service_area_id,
            degraded_reason=coverage.degraded_reason,
        )

    # Multi-stop routing

    def optimize_route(
        self,
        start_location: Any,
        bookings: Sequence[BookingStop],
        tenant_id: str,
        departure: datetime | None = None,
    ) -> RouteOptimization:
        try:
            start = self.resolve_location(start_location)
            if start is None:
                logger.warning(f"Invalid start location for tenant {tenant_id}: {start_location!r}")
                return RouteOptimization.empty()

            resolved = self._resolve_bookings(bookings)
            if not resolved:
                return RouteOptimization.empty()

            travel_settings = self.get_travel_settings(tenant_id) or TravelSurchargeSettings(
                per_km_surcharge=self.config.fallback_per_km_surcharge
            )
            return nearest_neighbor_route(
                start,
                resolved,
                travel_settings,
                departure=departure,
                minutes_per_km=self.config.fallback_minutes_per_km,
                buffer_minutes=self.config.optimizer_stop_buffer_minutes,
            )
        except NotImplementedError:
            raise
        except Exception:
            logger.exception(f"Error optimizing route for tenant {tenant_id} ({len(bookings)} bookings)")
            return RouteOptimization.empty()

    def _resolve_bookings(self, bookings: Sequence[BookingStop]) -> list[BookingStop]:
        """Fill in missing coordinates concurrently; drop bookings that stay unresolved."""
        pending = [booking for booking in bookings if booking.coordinates is None]
        resolved_by_id: dict[int, Coordinates | None] = {}
        if pending:
            workers = min(self.config.resolve_max_workers, len(pending))
            with ThreadPoolExecutor(max_workers=workers) as executor:
                results = executor.map(lambda booking: self.resolve_location(booking.address), pending)
                for booking, point in zip(pending, results):
                    resolved_by_id[id(booking)] = point

        resolved: list[BookingStop] = []
        for booking in bookings:
            point = booking.coordinates or resolved_by_id.get(id(booking))
            if point is None:
                logger.info(f"Skipping booking {booking.booking_id}: address could not be resolved")
                continue
            resolved.append(booking if booking.coordinates else replace(booking, coordinates=point))
        return resolved

    # Cache helpers

    def _cache_get(self, key: str) -> Any | None:
        if not self.config.cache_enabled:
            return None
        value = self.cache.get(key)
        logger.debug(f"Cache {'hit' if value is not None else 'miss'} for {key}")
        return value

    def _cache_set(self, key: str, value: Any) -> None:
        if self.config.cache_enabled:
            self.cache.set(key, value, ttl=self.config.cache_ttl)
