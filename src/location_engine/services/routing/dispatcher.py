"""Factory for routing providers based on configuration."""

from __future__ import annotations

import httpx

from ...config import Settings
from .base import GoogleRoutingProvider, MapboxRoutingProvider, RoutingProvider
from .osrm_client import OSRMClient


def get_routing_provider(config: Settings, transport: httpx.BaseTransport | None = None) -> RoutingProvider:
    match config.routing_provider:
        case "osrm":
            return OSRMClient.from_settings(config, transport=transport)
        case "google":
            return GoogleRoutingProvider(api_key=config.api_keys.get("google"))
        case "mapbox":
            return MapboxRoutingProvider(api_key=config.api_keys.get("mapbox"))
        case _:
            raise ValueError(f"Unknown routing provider '{config.routing_provider}'.")
