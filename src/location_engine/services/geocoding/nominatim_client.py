"""HTTP client for the Nominatim (OpenStreetMap) search API."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ...config import Settings, settings
from ...models.domain import Address, AddressValidation, Coordinates, CountryBounds
from ..geospatial import is_valid_country_coordinate
from .base import ADDRESS_NOT_FOUND, GEOCODING_UNAVAILABLE, OUTSIDE_COUNTRY, GeocodingProvider

DEFAULT_CONFIDENCE = 0.5
MAX_SUGGESTIONS = 3

logger = logging.getLogger(__name__)


class NominatimClient(GeocodingProvider):
    name = "nominatim"

    def __init__(
        self,
        base_url: str | None = None,
        country_code: str | None = None,
        bounds: CountryBounds | None = None,
        user_agent: str | None = None,
        result_limit: int | None = None,
        timeout: float | None = None,
        connect_timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or settings.nominatim_base_url).rstrip("/")
        self.country_code = country_code or settings.default_country
        self.bounds = bounds or settings.country_bounds
        self.user_agent = user_agent or settings.nominatim_user_agent
        self.result_limit = result_limit or settings.nominatim_result_limit
        self.timeout = timeout or settings.http_timeout_seconds
        self.connect_timeout = connect_timeout or settings.http_connect_timeout_seconds
        self.transport = transport

    @classmethod
    def from_settings(cls, config: Settings, transport: httpx.BaseTransport | None = None) -> "NominatimClient":
        return cls(
            base_url=config.nominatim_base_url,
            country_code=config.default_country,
            bounds=config.country_bounds,
            user_agent=config.nominatim_user_agent,
            result_limit=config.nominatim_result_limit,
            timeout=config.http_timeout_seconds,
            connect_timeout=config.http_connect_timeout_seconds,
            transport=transport,
        )

    def _get_client(self) -> httpx.Client:
        return httpx.Client(
            timeout=httpx.Timeout(self.timeout, connect=self.connect_timeout),
            headers={"User-Agent": self.user_agent},
            transport=self.transport,
        )

    def search(self, address: str) -> list[dict[str, Any]]:
        """Return the raw candidate list for ``address``."""
        params = {
            "format": "json",
            "q": address,
            "countrycodes": self.country_code.lower(),
            "limit": self.result_limit,
            "addressdetails": 1,
        }
        url = f"{self.base_url}/search"

        client = self._get_client()
        try:
            response = client.get(url, params=params)
            response.raise_for_status()
            data = response.json()
        finally:
            client.close()

        if not isinstance(data, list):
            raise ValueError("Nominatim response is not a list of candidates.")
        return data

    def geocode(self, address: str) -> AddressValidation:
        try:
            candidates = self.search(address)
            if not candidates:
                return AddressValidation.invalid(ADDRESS_NOT_FOUND)

            primary = self._parse_candidate(candidates[0])
            if not is_valid_country_coordinate(primary.coordinates, self.bounds):
                logger.info(f"Geocoded '{address}' outside {self.country_code}: {primary.coordinates}")
                return AddressValidation.invalid(OUTSIDE_COUNTRY)

            suggestions = []
            for candidate in candidates[1 : 1 + MAX_SUGGESTIONS]:
                suggestion = self._parse_candidate(candidate)
                if is_valid_country_coordinate(suggestion.coordinates, self.bounds):
                    suggestions.append(suggestion)

            return AddressValidation(
                is_valid=True,
                address=primary,
                suggestions=suggestions,
                confidence=self._confidence(candidates[0]),
            )
        except (httpx.HTTPError, ValueError, KeyError, TypeError, AttributeError) as exc:
            logger.warning(f"Nominatim geocoding failed for '{address}': {exc}")
            return AddressValidation.invalid(GEOCODING_UNAVAILABLE)

    def _parse_candidate(self, candidate: dict[str, Any]) -> Address:
        details = candidate.get("address") or {}
        display_name = str(candidate.get("display_name") or "")
        return Address(
            street=display_name.split(",")[0].strip(),
            city=details.get("city") or details.get("town") or details.get("village") or "",
            state=details.get("state") or "",
            postal_code=details.get("postcode") or "",
            country=details.get("country") or self.country_code,
            full_address=display_name,
            coordinates=Coordinates(lat=float(candidate["lat"]), lng=float(candidate["lon"])),
        )

    @staticmethod
    def _confidence(candidate: dict[str, Any]) -> float:
        try:
            importance = float(candidate.get("importance") or 0)
        except (TypeError, ValueError):
            importance = 0.0
        if importance <= 0:
            return DEFAULT_CONFIDENCE
        return min(importance, 1.0)
