"""HTTP client for interacting with OSRM services."""

from __future__ import annotations

import logging
import math
from typing import Any

import httpx

from ...config import Settings, settings
from ...models.domain import Coordinates, RouteInfo
from .base import RoutingProvider

logger = logging.getLogger(__name__)


class OSRMClient(RoutingProvider):
    name = "osrm"

    def __init__(
        self,
        base_url: str | None = None,
        profile: str | None = None,
        timeout: float | None = None,
        connect_timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or settings.osrm_base_url).rstrip("/")
        if not self.base_url:
            raise ValueError("OSRM base URL is not configured.")
        self.profile = profile or settings.osrm_profile
        self.timeout = timeout or settings.http_timeout_seconds
        self.connect_timeout = connect_timeout or settings.http_connect_timeout_seconds
        self.transport = transport

    @classmethod
    def from_settings(cls, config: Settings, transport: httpx.BaseTransport | None = None) -> "OSRMClient":
        return cls(
            base_url=config.osrm_base_url,
            profile=config.osrm_profile,
            timeout=config.http_timeout_seconds,
            connect_timeout=config.http_connect_timeout_seconds,
            transport=transport,
        )

    def _get_client(self) -> httpx.Client:
        return httpx.Client(
            timeout=httpx.Timeout(self.timeout, connect=self.connect_timeout),
            transport=self.transport,
        )

    def _route_url(self, origin: Coordinates, destination: Coordinates) -> str:
        # OSRM expects "lon,lat;lon,lat"
        coordinate_str = f"{origin.lng},{origin.lat};{destination.lng},{destination.lat}"
        return f"{self.base_url}/route/v1/{self.profile}/{coordinate_str}"

    def fetch_route(self, origin: Coordinates, destination: Coordinates) -> dict[str, Any]:
        """Raw OSRM route response; raises on transport or protocol errors."""
        params = {
            "overview": "full",
            "geometries": "geojson",
            "steps": "false",
        }
        url = self._route_url(origin, destination)

        client = self._get_client()
        try:
            response = client.get(url, params=params)
            response.raise_for_status()
            data = response.json()
        finally:
            client.close()

        if not isinstance(data, dict):
            raise ValueError("OSRM route response is not a JSON object.")
        if data.get("code", "Ok") != "Ok":
            error_msg = data.get("message", "Unknown OSRM route error")
            raise ValueError(f"OSRM route request failed: {error_msg}")
        return data

    def route(self, origin: Coordinates, destination: Coordinates) -> RouteInfo | None:
        try:
            data = self.fetch_route(origin, destination)
            routes = data.get("routes") or []
            if not routes:
                raise ValueError("No route found")
            return parse_route(routes[0])
        except httpx.TimeoutException as exc:
            logger.warning(f"OSRM route request timed out after {self.timeout}s: {exc}")
        except (httpx.HTTPError, ValueError, KeyError, TypeError, IndexError, AttributeError) as exc:
            logger.warning(f"OSRM routing error for {origin} -> {destination}: {exc}")
        return None


def parse_route(route: dict[str, Any]) -> RouteInfo:
    """Convert one OSRM route object (meters, seconds, [lng, lat]) to RouteInfo."""

    if not isinstance(route, dict):
        raise ValueError(f"OSRM route is not an object: {route!r}")
    geometry = route.get("geometry") or {}
    if not isinstance(geometry, dict):
        raise ValueError(f"OSRM route geometry is not an object: {geometry!r}")

    points: list[Coordinates] = []
    for point in geometry.get("coordinates") or []:
        if not isinstance(point, (list, tuple)) or len(point) < 2:
            raise ValueError(f"Malformed OSRM geometry point: {point!r}")
        points.append(Coordinates(lat=float(point[1]), lng=float(point[0])))

    return RouteInfo(
        distance_km=float(route["distance"]) / 1000,
        duration_min=math.ceil(float(route["duration"]) / 60),
        route=points,
    )


def check_health(base_url: str | None = None, profile: str | None = None) -> bool:
    """Check OSRM service health by requesting a short route.

    Public OSRM endpoints have no /health endpoint, so connectivity is
    tested with two nearby points in central Jakarta.
    """
    base = base_url or settings.osrm_base_url
    if not base:
        return False
    try:
        test_coords = "106.816666,-6.200000;106.827153,-6.175110"
        url = f"{base.rstrip('/')}/route/v1/{profile or settings.osrm_profile}/{test_coords}"
        response = httpx.get(url, params={"overview": "false"}, timeout=5.0)
        response.raise_for_status()
        data = response.json()
        return data.get("code") == "Ok" and isinstance(data.get("routes"), list)
    except httpx.HTTPError:
        return False
    except ValueError:
        return False
