"""FastAPI dependency providers."""

from __future__ import annotations

from functools import lru_cache

from ..data.service_areas_repository import ServiceAreaRepository, SupabaseServiceAreaRepository
from ..persistence.cache import SupabaseCache
from ..services.location_service import LocationService


@lru_cache()
def get_location_service() -> LocationService:
    return LocationService(cache=SupabaseCache())


def get_service_area_repository() -> ServiceAreaRepository:
    return SupabaseServiceAreaRepository()
