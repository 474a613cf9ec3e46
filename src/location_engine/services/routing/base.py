"""Base classes for routing provider implementations."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ...models.domain import Coordinates, RouteInfo


class RoutingProvider(ABC):
    """Contract for road distance/duration lookups between two points."""

    name: str = "base"

    @abstractmethod
    def route(self, origin: Coordinates, destination: Coordinates) -> RouteInfo | None:
        """Return route info, or None when the provider cannot answer."""
        raise NotImplementedError


class GoogleRoutingProvider(RoutingProvider):
    name = "google"

    def __init__(self, api_key: str | None = None) -> None:
        self.api_key = api_key

    def route(self, origin: Coordinates, destination: Coordinates) -> RouteInfo | None:
        raise NotImplementedError("Google routing is not implemented yet.")


class MapboxRoutingProvider(RoutingProvider):
    name = "mapbox"

    def __init__(self, api_key: str | None = None) -> None:
        self.api_key = api_key

    def route(self, origin: Coordinates, destination: Coordinates) -> RouteInfo | None:
        raise NotImplementedError("Mapbox routing is not implemented yet.")
