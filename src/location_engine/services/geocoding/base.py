"""Base classes for geocoding provider implementations."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ...models.domain import AddressValidation

ADDRESS_NOT_FOUND = "Address not found"
OUTSIDE_COUNTRY = "Address coordinates are outside the supported country"
GEOCODING_UNAVAILABLE = "Geocoding service unavailable"


class GeocodingProvider(ABC):
    """Contract for turning free-text addresses into coordinates."""

    name: str = "base"

    @abstractmethod
    def geocode(self, address: str) -> AddressValidation:
        """Resolve ``address``; soft failures come back as ``is_valid=False``."""
        raise NotImplementedError


class GoogleGeocodingProvider(GeocodingProvider):
    name = "google"

    def __init__(self, api_key: str | None = None) -> None:
        self.api_key = api_key

    def geocode(self, address: str) -> AddressValidation:
        raise NotImplementedError("Google geocoding is not implemented yet.")


class MapboxGeocodingProvider(GeocodingProvider):
    name = "mapbox"

    def __init__(self, api_key: str | None = None) -> None:
        self.api_key = api_key

    def geocode(self, address: str) -> AddressValidation:
        raise NotImplementedError("Mapbox geocoding is not implemented yet.")
