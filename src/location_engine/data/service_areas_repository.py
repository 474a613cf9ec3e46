"""Storage for tenant service areas (Supabase-backed, with an in-memory variant)."""

from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Callable, Mapping, Optional, Protocol

from ..db.supabase import require_supabase_client
from ..models.domain import Coordinates, ServiceArea, ServiceAreaBoundary

logger = logging.getLogger(__name__)

TABLE = "service_areas"


class ServiceAreaRepository(Protocol):
    def list_for_tenant(self, tenant_id: str, include_inactive: bool = False) -> list[ServiceArea]: ...

    def get(self, tenant_id: str, service_area_id: str) -> ServiceArea | None: ...

    def insert(self, area: ServiceArea) -> ServiceArea: ...

    def update(self, tenant_id: str, service_area_id: str, changes: dict[str, Any]) -> ServiceArea | None: ...

    def delete(self, tenant_id: str, service_area_id: str) -> bool: ...


def boundary_from_dict(data: Mapping[str, Any] | None) -> ServiceAreaBoundary:
    data = data or {}
    raw_coordinates = data.get("coordinates")
    coordinates = None
    if isinstance(raw_coordinates, list):
        coordinates = [point for point in (Coordinates.from_value(item) for item in raw_coordinates) if point]
    radius = data.get("radius")
    return ServiceAreaBoundary(
        type=data.get("type") or ("circle" if data.get("center") else "polygon"),
        coordinates=coordinates,
        center=Coordinates.from_value(data.get("center")),
        radius=float(radius) if radius is not None else None,
    )


def boundary_to_dict(boundary: ServiceAreaBoundary) -> dict[str, Any]:
    payload: dict[str, Any] = {"type": boundary.type}
    if boundary.coordinates is not None:
        payload["coordinates"] = [{"lat": point.lat, "lng": point.lng} for point in boundary.coordinates]
    if boundary.center is not None:
        payload["center"] = {"lat": boundary.center.lat, "lng": boundary.center.lng}
    if boundary.radius is not None:
        payload["radius"] = boundary.radius
    return payload


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


def row_to_service_area(row: Mapping[str, Any]) -> ServiceArea:
    per_km = row.get("per_km_surcharge")
    return ServiceArea(
        id=str(row["id"]),
        tenant_id=str(row["tenant_id"]),
        name=row.get("name") or "",
        description=row.get("description"),
        is_active=bool(row.get("is_active", False)),
        boundaries=boundary_from_dict(row.get("boundaries")),
        base_travel_surcharge=float(row.get("base_travel_surcharge") or 0),
        per_km_surcharge=float(per_km) if per_km is not None else None,
        max_travel_distance=float(row.get("max_travel_distance") or 0),
        estimated_travel_time=int(row.get("estimated_travel_time") or 0),
        available_services=list(row.get("available_services") or []),
        created_at=_parse_timestamp(row.get("created_at")),
        updated_at=_parse_timestamp(row.get("updated_at")),
    )


def service_area_to_row(area: ServiceArea) -> dict[str, Any]:
    row = {
        "tenant_id": area.tenant_id,
        "name": area.name,
        "description": area.description,
        "is_active": area.is_active,
        "boundaries": boundary_to_dict(area.boundaries),
        "base_travel_surcharge": area.base_travel_surcharge,
        "per_km_surcharge": area.per_km_surcharge,
        "max_travel_distance": area.max_travel_distance,
        "estimated_travel_time": area.estimated_travel_time,
        "available_services": list(area.available_services),
    }
    if area.id:
        row["id"] = area.id
    return row


def _changes_to_row(changes: Mapping[str, Any]) -> dict[str, Any]:
    row = dict(changes)
    if isinstance(row.get("boundaries"), ServiceAreaBoundary):
        row["boundaries"] = boundary_to_dict(row["boundaries"])
    return row


class SupabaseServiceAreaRepository:
    """Reads and writes the ``service_areas`` table. Query errors propagate."""

    def __init__(self, client_factory: Callable[[], Any] = require_supabase_client) -> None:
        self._client_factory = client_factory

    def list_for_tenant(self, tenant_id: str, include_inactive: bool = False) -> list[ServiceArea]:
        query = self._client_factory().table(TABLE).select("*").eq("tenant_id", tenant_id)
        if not include_inactive:
            query = query.eq("is_active", True)
        response = query.order("name").execute()

        areas: list[ServiceArea] = []
        for row in response.data or []:
            try:
                areas.append(row_to_service_area(row))
            except (KeyError, ValueError, TypeError) as e:
                logger.warning(f"Skipping invalid service area row {row.get('id')}: {e}")
        return areas

    def get(self, tenant_id: str, service_area_id: str) -> ServiceArea | None:
        response = (
            self._client_factory()
            .table(TABLE)
            .select("*")
            .eq("id", service_area_id)
            .eq("tenant_id", tenant_id)
            .limit(1)
            .execute()
        )
        rows = response.data or []
        return row_to_service_area(rows[0]) if rows else None

    def insert(self, area: ServiceArea) -> ServiceArea:
        response = self._client_factory().table(TABLE).insert(service_area_to_row(area)).execute()
        rows = response.data or []
        if not rows:
            raise RuntimeError(f"Failed to create service area '{area.name}'.")
        return row_to_service_area(rows[0])

    def update(self, tenant_id: str, service_area_id: str, changes: dict[str, Any]) -> ServiceArea | None:
        row = _changes_to_row(changes)
        row["updated_at"] = datetime.now(timezone.utc).isoformat()
        response = (
            self._client_factory()
            .table(TABLE)
            .update(row)
            .eq("id", service_area_id)
            .eq("tenant_id", tenant_id)
            .execute()
        )
        rows = response.data or []
        return row_to_service_area(rows[0]) if rows else None

    def delete(self, tenant_id: str, service_area_id: str) -> bool:
        response = (
            self._client_factory()
            .table(TABLE)
            .delete()
            .eq("id", service_area_id)
            .eq("tenant_id", tenant_id)
            .execute()
        )
        return bool(response.data)


class InMemoryServiceAreaRepository:
    """Dictionary-backed repository preserving insertion order."""

    def __init__(self, areas: list[ServiceArea] | None = None) -> None:
        self._areas: dict[str, ServiceArea] = {}
        for area in areas or []:
            self._areas[area.id] = area

    def list_for_tenant(self, tenant_id: str, include_inactive: bool = False) -> list[ServiceArea]:
        return [
            area
            for area in self._areas.values()
            if area.tenant_id == tenant_id and (include_inactive or area.is_active)
        ]

    def get(self, tenant_id: str, service_area_id: str) -> ServiceArea | None:
        area = self._areas.get(service_area_id)
        if area is None or area.tenant_id != tenant_id:
            return None
        return area

    def insert(self, area: ServiceArea) -> ServiceArea:
        now = datetime.now(timezone.utc)
        stored = replace(area, id=area.id or str(uuid.uuid4()), created_at=area.created_at or now, updated_at=now)
        self._areas[stored.id] = stored
        return stored

    def update(self, tenant_id: str, service_area_id: str, changes: dict[str, Any]) -> ServiceArea | None:
        area = self.get(tenant_id, service_area_id)
        if area is None:
            return None
        updated = replace(area, **changes, updated_at=datetime.now(timezone.utc))
        self._areas[service_area_id] = updated
        return updated

    def delete(self, tenant_id: str, service_area_id: str) -> bool:
        if self.get(tenant_id, service_area_id) is None:
            return False
        del self._areas[service_area_id]
        return True
