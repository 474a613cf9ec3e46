"""Service-area management endpoints."""

from __future__ import annotations

import logging
from dataclasses import asdict
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ...data.service_areas_repository import ServiceAreaRepository
from ...models.domain import ServiceArea
from ...schemas.service_areas import CreateServiceAreaRequest, ServiceAreaResponse, UpdateServiceAreaRequest
from ...services.service_areas import management
from ..dependencies import get_service_area_repository

router = APIRouter(prefix="/service-areas", tags=["service-areas"])


def _to_response(area: ServiceArea) -> ServiceAreaResponse:
    return ServiceAreaResponse(**asdict(area))


def _not_found(service_area_id: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Service area {service_area_id} not found")


@router.get("", response_model=List[ServiceAreaResponse])
def list_service_areas(
    tenant_id: str = Query(..., description="Tenant owning the service areas"),
    include_inactive: bool = Query(default=False),
    service_id: Optional[str] = Query(default=None, description="Only areas offering this service"),
    repository: ServiceAreaRepository = Depends(get_service_area_repository),
) -> List[ServiceAreaResponse]:
    try:
        areas = management.list_service_areas(
            tenant_id, repository, include_inactive=include_inactive, service_id=service_id
        )
    except Exception as exc:
        logging.exception(f"Error fetching service areas: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to fetch service areas: {str(exc)}",
        ) from exc
    return [_to_response(area) for area in areas]


@router.post("", response_model=ServiceAreaResponse, status_code=status.HTTP_201_CREATED)
def create_service_area(
    payload: CreateServiceAreaRequest,
    tenant_id: str = Query(...),
    repository: ServiceAreaRepository = Depends(get_service_area_repository),
) -> ServiceAreaResponse:
    try:
        area = management.create_service_area(tenant_id, payload, repository)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logging.exception(f"Error creating service area: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create service area",
        ) from exc
    return _to_response(area)


@router.get("/{service_area_id}", response_model=ServiceAreaResponse)
def get_service_area(
    service_area_id: str,
    tenant_id: str = Query(...),
    repository: ServiceAreaRepository = Depends(get_service_area_repository),
) -> ServiceAreaResponse:
    area = management.get_service_area(tenant_id, service_area_id, repository)
    if area is None:
        raise _not_found(service_area_id)
    return _to_response(area)


@router.put("/{service_area_id}", response_model=ServiceAreaResponse)
def update_service_area(
    service_area_id: str,
    payload: UpdateServiceAreaRequest,
    tenant_id: str = Query(...),
    repository: ServiceAreaRepository = Depends(get_service_area_repository),
) -> ServiceAreaResponse:
    try:
        area = management.update_service_area(tenant_id, service_area_id, payload, repository)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    if area is None:
        raise _not_found(service_area_id)
    return _to_response(area)


@router.delete("/{service_area_id}", status_code=status.HTTP_200_OK)
def delete_service_area(
    service_area_id: str,
    tenant_id: str = Query(...),
    repository: ServiceAreaRepository = Depends(get_service_area_repository),
) -> dict:
    if not management.delete_service_area(tenant_id, service_area_id, repository):
        raise _not_found(service_area_id)
    return {"success": True, "message": f"Service area {service_area_id} deleted"}
