"""Create, update and list tenant service areas."""

from __future__ import annotations

import logging
from typing import Any

from shapely.geometry import Polygon

from ...data.service_areas_repository import ServiceAreaRepository
from ...models.domain import Coordinates, ServiceArea, ServiceAreaBoundary
from ...schemas.service_areas import (
    CreateServiceAreaRequest,
    ServiceAreaBoundaryModel,
    UpdateServiceAreaRequest,
)
from .coverage import offers_service

logger = logging.getLogger(__name__)

# Columns a PUT may clear by sending null
NULLABLE_FIELDS = frozenset({"description", "per_km_surcharge"})


def _check_world_range(point: Coordinates, label: str) -> None:
    if not (-90 <= point.lat <= 90 and -180 <= point.lng <= 180):
        raise ValueError(f"{label} ({point.lat}, {point.lng}) is outside valid latitude/longitude ranges.")


def validate_boundaries(boundary: ServiceAreaBoundary) -> None:
    """Raise ValueError when ``boundary`` cannot describe a usable area."""

    if boundary.type == "circle":
        if boundary.center is None:
            raise ValueError("Circle boundaries require a center.")
        if boundary.radius is None or boundary.radius <= 0:
            raise ValueError("Circle boundaries require a positive radius.")
        _check_world_range(boundary.center, "Circle center")
        return

    if boundary.type != "polygon":
        raise ValueError(f"Unsupported boundary type '{boundary.type}'.")

    vertices = boundary.coordinates or []
    if len(vertices) < 3:
        raise ValueError("Polygon boundaries require at least 3 coordinates.")
    for index, vertex in enumerate(vertices):
        _check_world_range(vertex, f"Vertex {index}")

    shape = Polygon([(vertex.lng, vertex.lat) for vertex in vertices])
    if not shape.is_valid or shape.area <= 0:
        raise ValueError("Polygon boundaries must not self-intersect and must enclose an area.")


def boundary_from_model(model: ServiceAreaBoundaryModel) -> ServiceAreaBoundary:
    return ServiceAreaBoundary(
        type=model.type,
        coordinates=[Coordinates(lat=point.lat, lng=point.lng) for point in model.coordinates]
        if model.coordinates is not None
        else None,
        center=Coordinates(lat=model.center.lat, lng=model.center.lng) if model.center else None,
        radius=model.radius,
    )


def create_service_area(
    tenant_id: str,
    payload: CreateServiceAreaRequest,
    repository: ServiceAreaRepository,
) -> ServiceArea:
    if not tenant_id:
        raise ValueError("tenant_id is required.")
    name = payload.name.strip()
    if not name:
        raise ValueError("Service area name must not be blank.")

    boundary = boundary_from_model(payload.boundaries)
    validate_boundaries(boundary)

    area = ServiceArea(
        id="",
        tenant_id=tenant_id,
        name=name,
        description=payload.description,
        boundaries=boundary,
        base_travel_surcharge=payload.base_travel_surcharge,
        per_km_surcharge=payload.per_km_surcharge,
        max_travel_distance=payload.max_travel_distance,
        estimated_travel_time=payload.estimated_travel_time,
        available_services=list(payload.available_services),
        is_active=True,
    )
    created = repository.insert(area)
    logger.info(f"Created service area {created.id} ('{created.name}') for tenant {tenant_id}")
    return created


def update_service_area(
    tenant_id: str,
    service_area_id: str,
    payload: UpdateServiceAreaRequest,
    repository: ServiceAreaRepository,
) -> ServiceArea | None:
    """Apply the fields set on ``payload``; returns None when the area does not exist."""

    changes: dict[str, Any] = {
        key: value
        for key, value in payload.model_dump(exclude_unset=True).items()
        if value is not None or key in NULLABLE_FIELDS
    }
    if "name" in changes:
        changes["name"] = changes["name"].strip()
        if not changes["name"]:
            raise ValueError("Service area name must not be blank.")
    if "boundaries" in changes:
        boundary = boundary_from_model(payload.boundaries)
        validate_boundaries(boundary)
        changes["boundaries"] = boundary

    if not changes:
        return repository.get(tenant_id, service_area_id)

    updated = repository.update(tenant_id, service_area_id, changes)
    if updated is not None:
        logger.info(f"Updated service area {service_area_id} for tenant {tenant_id}: {sorted(changes)}")
    return updated


def get_service_area(tenant_id: str, service_area_id: str, repository: ServiceAreaRepository) -> ServiceArea | None:
    return repository.get(tenant_id, service_area_id)


def list_service_areas(
    tenant_id: str,
    repository: ServiceAreaRepository,
    *,
    include_inactive: bool = False,
    service_id: str | None = None,
) -> list[ServiceArea]:
    areas = repository.list_for_tenant(tenant_id, include_inactive=include_inactive)
    if service_id is not None:
        areas = [area for area in areas if offers_service(area, service_id)]
    return areas


def delete_service_area(tenant_id: str, service_area_id: str, repository: ServiceAreaRepository) -> bool:
    deleted = repository.delete(tenant_id, service_area_id)
    if deleted:
        logger.info(f"Deleted service area {service_area_id} for tenant {tenant_id}")
    return deleted
