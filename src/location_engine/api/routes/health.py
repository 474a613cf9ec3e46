"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...config import settings

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


def _get_osrm_health_check():
    """Lazy import to avoid startup failures."""
    from ...services.routing.osrm_client import check_health as osrm_health_check
    return osrm_health_check


@router.get("/health/providers", status_code=status.HTTP_200_OK)
def health_providers() -> dict:
    """Report configured providers and ping the routing service."""
    routing: dict = {"provider": settings.routing_provider}
    if settings.routing_provider == "osrm":
        try:
            routing["healthy"] = _get_osrm_health_check()(settings.osrm_base_url, settings.osrm_profile)
        except Exception as e:
            routing.update({"healthy": False, "error": str(e)})
    else:
        routing.update({"healthy": False, "error": "provider not implemented"})
    return {
        "geocoding": {"provider": settings.geocoding_provider},
        "routing": routing,
        "cache_enabled": settings.cache_enabled,
    }
