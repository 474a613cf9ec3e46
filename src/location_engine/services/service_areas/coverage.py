"""Service-area containment checks for home-visit destinations."""

from __future__ import annotations

import logging
import math

from ...data.service_areas_repository import ServiceAreaRepository
from ...models.domain import AreaSurcharge, Coordinates, CoverageResult, ServiceArea
from ..geospatial import point_in_polygon

logger = logging.getLogger(__name__)


def is_point_in_service_area(point: Coordinates, area: ServiceArea) -> bool:
    """Polygon containment only; circle boundaries never match here."""

    if area.boundaries.type != "polygon":
        return False
    return point_in_polygon(point, area.boundaries)


def offers_service(area: ServiceArea, service_id: str | None) -> bool:
    """An empty ``available_services`` list means every service is offered."""

    if not area.available_services or service_id is None:
        return True
    return service_id in area.available_services


def resolve_coverage(point: Coordinates, areas: list[ServiceArea], service_id: str | None = None) -> CoverageResult:
    """Pure coverage decision over an ordered list of areas (first match wins)."""

    if not areas:
        return CoverageResult(is_within_area=True, surcharge=0)

    for area in areas:
        if not is_point_in_service_area(point, area):
            continue
        if not offers_service(area, service_id):
            return CoverageResult(
                is_within_area=False,
                surcharge=area.base_travel_surcharge,
                service_area_id=area.id,
            )
        return CoverageResult(is_within_area=True, surcharge=area.base_travel_surcharge, service_area_id=area.id)

    return CoverageResult(
        is_within_area=False,
        surcharge=min(area.base_travel_surcharge for area in areas),
    )


def check_service_area_coverage(
    point: Coordinates,
    tenant_id: str,
    repository: ServiceAreaRepository,
    service_id: str | None = None,
) -> CoverageResult:
    """Load the tenant's active areas and decide coverage for ``point``.

    A failing lookup fails open: the point is treated as covered with no
    surcharge and the result is flagged as degraded.
    """

    try:
        areas = repository.list_for_tenant(tenant_id)
    except Exception as exc:
        logger.warning(f"Service area lookup failed for tenant {tenant_id}: {exc}")
        return CoverageResult(
            is_within_area=True,
            surcharge=0,
            degraded_reason=f"service area lookup failed: {exc}",
        )
    return resolve_coverage(point, [area for area in areas if area.is_active], service_id)


def find_service_areas_for_location(
    point: Coordinates,
    tenant_id: str,
    repository: ServiceAreaRepository,
    service_id: str | None = None,
) -> list[ServiceArea]:
    """Every active area containing ``point`` that offers ``service_id``."""

    return [
        area
        for area in repository.list_for_tenant(tenant_id)
        if area.is_active and is_point_in_service_area(point, area) and offers_service(area, service_id)
    ]


def calculate_area_surcharge(
    point: Coordinates,
    tenant_id: str,
    distance_km: float,
    repository: ServiceAreaRepository,
    service_id: str | None = None,
) -> AreaSurcharge:
    """Price a trip with the first area containing ``point``.

    The area's base surcharge applies, plus ``per_km_surcharge`` for every
    kilometer when the area sets one. No matching area means no surcharge.
    """

    try:
        areas = find_service_areas_for_location(point, tenant_id, repository, service_id)
    except Exception as exc:
        logger.warning(f"Service area lookup failed for tenant {tenant_id}: {exc}")
        return AreaSurcharge(surcharge=0, degraded_reason=f"service area lookup failed: {exc}")
    if not areas:
        return AreaSurcharge(surcharge=0)

    area = areas[0]
    surcharge = area.base_travel_surcharge
    if area.per_km_surcharge and distance_km > 0:
        surcharge += distance_km * area.per_km_surcharge
    return AreaSurcharge(surcharge=math.ceil(surcharge), service_area_id=area.id)
