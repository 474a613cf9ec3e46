"""Tenant-level travel surcharge settings."""

from __future__ import annotations

from typing import Any, Callable, Mapping, Optional, Protocol

from ..db.supabase import require_supabase_client
from ..models.domain import TravelSurchargeSettings


class TenantSettingsRepository(Protocol):
    def get_travel_settings(self, tenant_id: str) -> TravelSurchargeSettings | None: ...


def _pick(data: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return None


def _optional_float(value: Any) -> Optional[float]:
    return float(value) if value is not None else None


def parse_travel_settings(data: Mapping[str, Any]) -> TravelSurchargeSettings:
    """Build settings from a stored JSON blob (camelCase or snake_case keys)."""
    return TravelSurchargeSettings(
        base_travel_surcharge=float(_pick(data, "baseTravelSurcharge", "base_travel_surcharge") or 0),
        per_km_surcharge=float(_pick(data, "perKmSurcharge", "per_km_surcharge") or 0),
        min_travel_distance=_optional_float(_pick(data, "minTravelDistance", "min_travel_distance")),
        max_travel_distance=_optional_float(_pick(data, "maxTravelDistance", "max_travel_distance")),
        travel_surcharge_required=bool(_pick(data, "travelSurchargeRequired", "travel_surcharge_required")),
    )


class SupabaseTenantSettingsRepository:
    """Reads ``invoice_settings.travel_settings`` for a tenant."""

    def __init__(self, table: str = "invoice_settings", client_factory: Callable[[], Any] = require_supabase_client) -> None:
        self.table = table
        self._client_factory = client_factory

    def get_travel_settings(self, tenant_id: str) -> TravelSurchargeSettings | None:
        response = (
            self._client_factory()
            .table(self.table)
            .select("travel_settings")
            .eq("tenant_id", tenant_id)
            .limit(1)
            .execute()
        )
        rows = response.data or []
        if not rows or not rows[0].get("travel_settings"):
            return None
        return parse_travel_settings(rows[0]["travel_settings"])


class InMemoryTenantSettingsRepository:
    def __init__(self, settings_by_tenant: dict[str, TravelSurchargeSettings] | None = None) -> None:
        self._settings = dict(settings_by_tenant or {})

    def get_travel_settings(self, tenant_id: str) -> TravelSurchargeSettings | None:
        return self._settings.get(tenant_id)
