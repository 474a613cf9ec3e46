"""Factory for geocoding providers based on configuration."""

from __future__ import annotations

import httpx

from ...config import Settings
from .base import GeocodingProvider, GoogleGeocodingProvider, MapboxGeocodingProvider
from .nominatim_client import NominatimClient


def get_geocoding_provider(config: Settings, transport: httpx.BaseTransport | None = None) -> GeocodingProvider:
    match config.geocoding_provider:
        case "nominatim":
            return NominatimClient.from_settings(config, transport=transport)
        case "google":
            return GoogleGeocodingProvider(api_key=config.api_keys.get("google"))
        case "mapbox":
            return MapboxGeocodingProvider(api_key=config.api_keys.get("mapbox"))
        case _:
            raise ValueError(f"Unknown geocoding provider '{config.geocoding_provider}'.")
