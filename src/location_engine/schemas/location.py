"""Pydantic request/response models for location endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Union

from pydantic import BaseModel, Field


class CoordinatesModel(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


LocationInput = Union[CoordinatesModel, str]


class AddressModel(BaseModel):
    street: str
    city: str
    state: str
    postal_code: str
    country: str
    full_address: str
    coordinates: Optional[CoordinatesModel] = None


class ValidateAddressRequest(BaseModel):
    address: str = Field(..., min_length=1)
    tenant_id: str


class AddressValidationResponse(BaseModel):
    is_valid: bool
    address: Optional[AddressModel] = None
    suggestions: List[AddressModel] = Field(default_factory=list)
    confidence: Optional[float] = None
    error: Optional[str] = None


class CalculateTravelRequest(BaseModel):
    origin: LocationInput = Field(..., description="Coordinates or a free-text address.")
    destination: LocationInput = Field(..., description="Coordinates or a free-text address.")
    tenant_id: str
    service_id: Optional[str] = None


class TravelCalculationResponse(BaseModel):
    distance: float = Field(..., description="Kilometers.")
    duration: int = Field(..., description="Minutes, buffered and rounded up.")
    route: Optional[List[CoordinatesModel]] = None
    surcharge: int
    is_within_service_area: bool
    service_area_id: Optional[str] = None
    degraded_reason: Optional[str] = None


class BookingStopModel(BaseModel):
    id: str
    address: str
    coordinates: Optional[CoordinatesModel] = None
    service_time: int = Field(..., ge=0, description="Service duration in minutes.")
    scheduled_at: Optional[datetime] = None


class OptimizeRouteRequest(BaseModel):
    start_location: LocationInput
    bookings: List[BookingStopModel]
    tenant_id: str
    departure_time: Optional[datetime] = Field(
        default=None,
        description="Simulated departure; defaults to the current time.",
    )


class RouteStopModel(BaseModel):
    booking_id: str
    address: str
    coordinates: CoordinatesModel
    estimated_arrival: datetime
    service_time: int
    travel_time_from_previous: int
    distance_from_previous: float


class RouteOptimizationResponse(BaseModel):
    optimized_route: List[RouteStopModel]
    total_distance: float
    total_duration: int
    total_surcharge: int
