"""Domain models for locations, service areas and travel pricing."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Literal, Mapping, Optional


@dataclass(slots=True, frozen=True)
class Coordinates:
    lat: float
    lng: float

    @classmethod
    def from_value(cls, value: Any) -> Optional["Coordinates"]:
        """Coerce a Coordinates, a {lat, lng} mapping or a (lat, lng) pair.

        Returns None for anything that does not carry two finite numbers.
        """
        if isinstance(value, Coordinates):
            lat, lng = value.lat, value.lng
        elif isinstance(value, Mapping):
            lat, lng = value.get("lat"), value.get("lng")
        elif isinstance(value, (tuple, list)) and len(value) == 2:
            lat, lng = value
        elif hasattr(value, "lat") and hasattr(value, "lng"):
            lat, lng = value.lat, value.lng
        else:
            return None
        if isinstance(lat, bool) or isinstance(lng, bool):
            return None
        try:
            lat_value, lng_value = float(lat), float(lng)
        except (TypeError, ValueError):
            return None
        if not (math.isfinite(lat_value) and math.isfinite(lng_value)):
            return None
        return cls(lat=lat_value, lng=lng_value)


@dataclass(slots=True, frozen=True)
class CountryBounds:
    """Inclusive latitude/longitude box a geocoding result must fall in."""

    min_lat: float
    max_lat: float
    min_lng: float
    max_lng: float

    def contains(self, point: Coordinates) -> bool:
        return self.min_lat <= point.lat <= self.max_lat and self.min_lng <= point.lng <= self.max_lng


@dataclass(slots=True)
class Address:
    street: str
    city: str
    state: str
    postal_code: str
    country: str
    full_address: str
    coordinates: Optional[Coordinates] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Address":
        return cls(
            street=data.get("street", ""),
            city=data.get("city", ""),
            state=data.get("state", ""),
            postal_code=data.get("postal_code", ""),
            country=data.get("country", ""),
            full_address=data.get("full_address", ""),
            coordinates=Coordinates.from_value(data.get("coordinates")),
        )


@dataclass(slots=True)
class AddressValidation:
    is_valid: bool
    address: Optional[Address] = None
    suggestions: list[Address] = field(default_factory=list)
    confidence: Optional[float] = None
    error: Optional[str] = None

    @classmethod
    def invalid(cls, error: str) -> "AddressValidation":
        return cls(is_valid=False, error=error)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AddressValidation":
        address = data.get("address")
        return cls(
            is_valid=bool(data.get("is_valid")),
            address=Address.from_dict(address) if address else None,
            suggestions=[Address.from_dict(item) for item in data.get("suggestions") or []],
            confidence=data.get("confidence"),
            error=data.get("error"),
        )


@dataclass(slots=True)
class RouteInfo:
    """Provider answer for a single origin/destination pair."""

    distance_km: float
    duration_min: int
    route: list[Coordinates] = field(default_factory=list)


@dataclass(slots=True)
class TravelCalculation:
    distance: float
    duration: int
    surcharge: int
    is_within_service_area: bool
    route: Optional[list[Coordinates]] = None
    service_area_id: Optional[str] = None
    degraded_reason: Optional[str] = None

    @property
    def is_degraded(self) -> bool:
        return self.degraded_reason is not None

    @classmethod
    def unavailable(cls, reason: str) -> "TravelCalculation":
        """Zeroed result used whenever travel cannot be computed."""
        return cls(
            distance=0.0,
            duration=0,
            surcharge=0,
            is_within_service_area=False,
            degraded_reason=reason,
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TravelCalculation":
        route = data.get("route")
        return cls(
            distance=float(data.get("distance", 0.0)),
            duration=int(data.get("duration", 0)),
            surcharge=int(data.get("surcharge", 0)),
            is_within_service_area=bool(data.get("is_within_service_area")),
            route=[point for point in (Coordinates.from_value(item) for item in route) if point]
            if route is not None
            else None,
            service_area_id=data.get("service_area_id"),
            degraded_reason=data.get("degraded_reason"),
        )


@dataclass(slots=True)
class ServiceAreaBoundary:
    type: Literal["polygon", "circle"]
    coordinates: Optional[list[Coordinates]] = None
    center: Optional[Coordinates] = None
    radius: Optional[float] = None  # kilometers


@dataclass(slots=True)
class ServiceArea:
    """Tenant-defined coverage region for home visits."""

    id: str
    tenant_id: str
    name: str
    boundaries: ServiceAreaBoundary
    base_travel_surcharge: float = 0.0
    available_services: list[str] = field(default_factory=list)
    is_active: bool = True
    description: Optional[str] = None
    per_km_surcharge: Optional[float] = None
    max_travel_distance: float = 0.0
    estimated_travel_time: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(slots=True)
class CoverageResult:
    is_within_area: bool
    surcharge: float
    service_area_id: Optional[str] = None
    degraded_reason: Optional[str] = None

    @property
    def is_degraded(self) -> bool:
        return self.degraded_reason is not None


@dataclass(slots=True)
class AreaSurcharge:
    """Surcharge priced from the first matching service area."""

    surcharge: int
    service_area_id: Optional[str] = None
    degraded_reason: Optional[str] = None


@dataclass(slots=True)
class TravelSurchargeSettings:
    base_travel_surcharge: float = 0.0
    per_km_surcharge: float = 0.0
    min_travel_distance: Optional[float] = None
    max_travel_distance: Optional[float] = None
    travel_surcharge_required: bool = False


@dataclass(slots=True)
class BookingStop:
    """A home-visit booking to be placed on a route."""

    booking_id: str
    address: str
    service_time: int  # minutes
    coordinates: Optional[Coordinates] = None
    scheduled_at: Optional[datetime] = None


@dataclass(slots=True)
class RouteStop:
    booking_id: str
    address: str
    coordinates: Coordinates
    estimated_arrival: datetime
    service_time: int
    travel_time_from_previous: int
    distance_from_previous: float


@dataclass(slots=True)
class RouteOptimization:
    optimized_route: list[RouteStop]
    total_distance: float
    total_duration: int
    total_surcharge: int

    @classmethod
    def empty(cls) -> "RouteOptimization":
        return cls(optimized_route=[], total_distance=0.0, total_duration=0, total_surcharge=0)
