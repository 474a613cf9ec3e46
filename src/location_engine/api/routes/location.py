"""Location endpoints: address validation, travel calculation and route optimization."""

from __future__ import annotations

import logging
from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException, status

from ...models.domain import BookingStop, Coordinates
from ...schemas.location import (
    AddressValidationResponse,
    CalculateTravelRequest,
    OptimizeRouteRequest,
    RouteOptimizationResponse,
    TravelCalculationResponse,
    ValidateAddressRequest,
)
from ...services.location_service import LocationService
from ..dependencies import get_location_service

router = APIRouter(prefix="/location", tags=["location"])


def _not_implemented(exc: NotImplementedError) -> HTTPException:
    logging.error(f"Configured location provider is not implemented: {exc}")
    return HTTPException(status_code=status.HTTP_501_NOT_IMPLEMENTED, detail=str(exc))


@router.post("/validate-address", response_model=AddressValidationResponse, status_code=status.HTTP_200_OK)
def validate_address(
    payload: ValidateAddressRequest,
    service: LocationService = Depends(get_location_service),
) -> AddressValidationResponse:
    try:
        result = service.validate_address(payload.tenant_id, payload.address)
    except NotImplementedError as exc:
        raise _not_implemented(exc) from exc
    return AddressValidationResponse(**asdict(result))


@router.post("/calculate-travel", response_model=TravelCalculationResponse, status_code=status.HTTP_200_OK)
def calculate_travel(
    payload: CalculateTravelRequest,
    service: LocationService = Depends(get_location_service),
) -> TravelCalculationResponse:
    try:
        result = service.calculate_travel(
            payload.origin,
            payload.destination,
            tenant_id=payload.tenant_id,
            service_id=payload.service_id,
        )
    except NotImplementedError as exc:
        raise _not_implemented(exc) from exc
    return TravelCalculationResponse(**asdict(result))


@router.post("/optimize-route", response_model=RouteOptimizationResponse, status_code=status.HTTP_200_OK)
def optimize_route(
    payload: OptimizeRouteRequest,
    service: LocationService = Depends(get_location_service),
) -> RouteOptimizationResponse:
    bookings = [
        BookingStop(
            booking_id=booking.id,
            address=booking.address,
            service_time=booking.service_time,
            coordinates=Coordinates.from_value(booking.coordinates),
            scheduled_at=booking.scheduled_at,
        )
        for booking in payload.bookings
    ]
    try:
        result = service.optimize_route(
            payload.start_location,
            bookings,
            tenant_id=payload.tenant_id,
            departure=payload.departure_time,
        )
    except NotImplementedError as exc:
        raise _not_implemented(exc) from exc
    return RouteOptimizationResponse(**asdict(result))
